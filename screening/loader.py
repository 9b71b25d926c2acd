"""
loader.py - Input File Loader
==============================
This module loads applicants or file numbers from Excel (.xlsx, .xls) or CSV
files. Column names are normalized so the rest of the package can work with
one set of names regardless of how the spreadsheet spells its headers.

Column Name Normalization:
--------------------------
"First Name", "first_name", "FIRSTNAME" and "FirstName" all become
"first_name". Vendor element names (ApplicantID, DLNumber, Zip, ...) are
recognized too, so a sheet exported from an earlier submission loads as-is.

Every cell is read as text. Spreadsheets otherwise turn zip codes like
"02134" into 2134 and SSNs into floats.
"""

import re
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from .applicant import ApplicantRecord
from .errors import ValidationError


# =============================================================================
# COLUMN NAME NORMALIZATION
# =============================================================================

def normalize_header(header: str) -> str:
    """
    Standardize a column name by removing spaces/underscores/dashes and
    converting to uppercase.

    Examples:
        normalize_header("First Name")    -> "FIRSTNAME"
        normalize_header("date_of_birth") -> "DATEOFBIRTH"
    """
    normalized = re.sub(r'[\s_\-]+', '', header)
    return normalized.strip().upper()


# Normalized header -> ApplicantRecord field name
APPLICANT_COLUMN_MAP = {
    'APPLICANTID': 'applicant_id',
    'PACKAGE': 'package_id',
    'PACKAGEID': 'package_id',
    'REPORTCOPY': 'request_copy',
    'REQUESTCOPY': 'request_copy',
    'FIRSTNAME': 'first_name',
    'MIDDLENAME': 'middle_name',
    'LASTNAME': 'last_name',
    'BIRTHDATE': 'birth_date',
    'DATEOFBIRTH': 'birth_date',
    'DOB': 'birth_date',
    'SSN': 'ssn',
    'PHONE': 'phone',
    'EMAIL': 'email',
    'DLNUMBER': 'license_number',
    'LICENSENUMBER': 'license_number',
    'DLSTATE': 'license_state',
    'LICENSESTATE': 'license_state',
    'STREET': 'street',
    'UNIT': 'unit',
    'CITY': 'city',
    'STATE': 'state_code',
    'STATECODE': 'state_code',
    'ZIP': 'postal_code',
    'POSTALCODE': 'postal_code',
    'WORKSTATE': 'work_state_code',
    'WORKSTATECODE': 'work_state_code',
}

REQUIRED_APPLICANT_COLUMNS = [
    'applicant_id', 'package_id', 'first_name', 'last_name', 'birth_date',
    'ssn', 'street', 'city', 'state_code', 'postal_code', 'work_state_code',
]

FILE_NUMBER_COLUMN_MAP = {
    'FILENUMBER': 'file_number',
    'FILENO': 'file_number',
    'FILE': 'file_number',
}


# =============================================================================
# RAW ROW LOADER
# =============================================================================

def load_input_rows(
    filepath: str,
    column_map: Dict[str, str],
    required_columns: List[str],
    header_row: int = 0,
) -> List[Dict[str, Any]]:
    """
    Load an Excel or CSV file as a list of row dictionaries with canonical
    column names.

    Args:
        filepath: Path to the input file (.xlsx, .xls, or .csv)
        column_map: Normalized header -> canonical column name
        required_columns: Canonical names that must be present
        header_row: Which row contains column headers in Excel files (0-indexed)

    Returns:
        One dict per non-empty row, with an added 1-based 'InputRow' key

    Raises:
        FileNotFoundError: If the input file doesn't exist
        ValueError: If the file type is unsupported or required columns are missing
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {filepath}")

    suffix = path.suffix.lower()
    if suffix in ['.xlsx', '.xls']:
        df = pd.read_excel(filepath, header=header_row, dtype=str)
    elif suffix == '.csv':
        df = pd.read_csv(filepath, dtype=str)
    else:
        raise ValueError(
            f"Unsupported file type: {path.suffix}. "
            "Only .csv, .xlsx, and .xls files are supported."
        )

    df.dropna(how='all', inplace=True)

    # Map original column names to canonical names. The first column that
    # claims a canonical name wins; later duplicates keep their original name.
    renamed = {}
    for col in df.columns:
        final_name = column_map.get(normalize_header(str(col)))
        if final_name and final_name not in renamed.values():
            renamed[col] = final_name
    df.rename(columns=renamed, inplace=True)

    missing = [col for col in required_columns if col not in df.columns]
    if missing:
        raise ValueError(
            f"Required columns missing: {missing}. "
            f"Available columns: {list(df.columns)}"
        )

    df.insert(0, 'InputRow', range(1, len(df) + 1))

    return df.to_dict('records')


# =============================================================================
# PUBLIC LOADERS
# =============================================================================

def load_applicants(filepath: str, header_row: int = 0) -> List[ApplicantRecord]:
    """
    Load and validate applicants from a spreadsheet.

    Every row is validated; the errors of all bad rows are reported together.

    Raises:
        FileNotFoundError: If the input file doesn't exist
        ValueError: If the file type is unsupported or required columns are missing
        ValidationError: If any row holds an invalid applicant
    """
    rows = load_input_rows(
        filepath, APPLICANT_COLUMN_MAP, REQUIRED_APPLICANT_COLUMNS, header_row
    )

    applicants = []
    problems = []
    for row in rows:
        try:
            applicants.append(ApplicantRecord.from_row(row))
        except ValidationError as e:
            problems.extend(f"row {row['InputRow']}: {msg}" for msg in e.errors)

    if problems:
        raise ValidationError(problems)
    return applicants


def load_file_numbers(filepath: str, header_row: int = 0) -> List[str]:
    """Load vendor file numbers from the 'File Number' column of a spreadsheet."""
    rows = load_input_rows(
        filepath, FILE_NUMBER_COLUMN_MAP, ['file_number'], header_row
    )
    numbers = []
    for row in rows:
        value = row.get('file_number')
        # Blank cells come back as NaN
        if isinstance(value, str) and value.strip():
            numbers.append(value.strip())
    return numbers
