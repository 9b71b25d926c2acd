"""
applicant.py - Applicant Record
================================
This module defines the strongly-typed record for one screening subject and
the rules every record must satisfy before it is encoded for the vendor.

Field Rules:
------------
| field            | rule                                          |
|------------------|-----------------------------------------------|
| applicant_id     | 1-50 chars, required                          |
| package_id       | 1 or 2, required                              |
| request_copy     | boolean, default False                        |
| first_name       | 1-20 chars, required                          |
| middle_name      | 0-20 chars, optional                          |
| last_name        | 1-25 chars, required                          |
| birth_date       | calendar date, required                       |
| ssn              | 9 digits, optionally ###-##-####, required    |
| phone            | digits with optional grouping, optional       |
| email            | 0-255 chars, optional                         |
| license_number   | 0-30 chars, optional                          |
| license_state    | exactly 2 chars if present                    |
| street           | 0-40 chars, required (empty string allowed)   |
| unit             | unconstrained, optional                       |
| city             | 0-25 chars, required                          |
| state_code       | exactly 2 chars, required                     |
| postal_code      | exactly 5 chars, required                     |
| work_state_code  | required                                      |

Records are validated as soon as they are constructed. A record that was
mutated afterwards is validated again by the encoder.
"""

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List

from .errors import ValidationError


# =============================================================================
# PATTERNS
# =============================================================================

# 123456789 or 123-45-6789, ASCII digits only
SSN_PATTERN = re.compile(r"^([0-9]{9}|[0-9]{3}-[0-9]{2}-[0-9]{4})$")

# Phone numbers are accepted in any common grouping: 5155551234,
# 515-555-1234, (515) 555-1234, +1 515.555.1234 ...
# Only the character class is checked; the digit count is handled by
# normalize_phone().
PHONE_PATTERN = re.compile(r"^[0-9 ().+-]*$")

NON_DIGITS = re.compile(r"[^0-9]")

# Characters XML 1.0 does not allow anywhere in a document
XML_ILLEGAL_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

TEXT_FIELDS = (
    "applicant_id", "first_name", "middle_name", "last_name", "ssn", "phone",
    "email", "license_number", "license_state", "street", "unit", "city",
    "state_code", "postal_code", "work_state_code",
)

VALID_PACKAGES = (1, 2)


# =============================================================================
# NORMALIZATION HELPERS
# =============================================================================

def digits_only(value: str | None) -> str:
    """Strip every non-digit character. None becomes an empty string."""
    if value is None:
        return ""
    return NON_DIGITS.sub("", value)


def normalize_ssn(ssn: str | None) -> str:
    """
    Return the SSN as a bare digit string.

    The digit count is not re-checked here; the record validation already
    guarantees nine digits.

    Examples:
        normalize_ssn("123-45-6789") -> "123456789"
        normalize_ssn("123456789")   -> "123456789"
    """
    return digits_only(ssn)


def normalize_phone(phone: str | None) -> str:
    """
    Return the phone number in the vendor's ###-###-#### format.

    When the stripped number does not have exactly ten digits the bare digit
    string is returned unchanged (possibly empty). That is a pass-through,
    not an error.

    Examples:
        normalize_phone("(515) 555-1234") -> "515-555-1234"
        normalize_phone("5551234")        -> "5551234"
        normalize_phone(None)             -> ""
    """
    digits = digits_only(phone)
    if len(digits) == 10:
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"
    return digits


# =============================================================================
# APPLICANT RECORD
# =============================================================================

@dataclass
class ApplicantRecord:
    """One screening subject, validated at construction."""

    applicant_id: str
    package_id: int
    first_name: str
    last_name: str
    birth_date: date
    ssn: str
    street: str
    city: str
    state_code: str
    postal_code: str
    work_state_code: str

    request_copy: bool = False
    middle_name: str | None = None
    phone: str | None = None
    email: str | None = None
    license_number: str | None = None
    license_state: str | None = None
    unit: str | None = None

    def __post_init__(self):
        self.validate()

    def __repr__(self) -> str:
        # Keep the SSN out of tracebacks and log lines.
        return (
            f"ApplicantRecord(applicant_id={self.applicant_id!r}, "
            f"package_id={self.package_id!r}, "
            f"last_name={self.last_name!r})"
        )

    # -------------------------------------------------------------------------
    # VALIDATION
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        """
        Check every field rule and raise one ValidationError listing all of
        the problems found.

        Raises:
            ValidationError: If any rule is violated
        """
        errors: List[str] = []

        _check_length(errors, "applicant_id", self.applicant_id, 1, 50)

        # bool is a subclass of int, so True would otherwise pass as package 1
        if isinstance(self.package_id, bool) or self.package_id not in VALID_PACKAGES:
            errors.append(f"package_id must be one of {VALID_PACKAGES}, got {self.package_id!r}")

        if not isinstance(self.request_copy, bool):
            errors.append(f"request_copy must be a boolean, got {self.request_copy!r}")

        _check_length(errors, "first_name", self.first_name, 1, 20)
        _check_length(errors, "middle_name", self.middle_name, 0, 20, optional=True)
        _check_length(errors, "last_name", self.last_name, 1, 25)

        # datetime is a subclass of date; only the calendar date is sent
        if not isinstance(self.birth_date, date):
            errors.append(f"birth_date must be a date, got {self.birth_date!r}")

        if not isinstance(self.ssn, str) or not SSN_PATTERN.fullmatch(self.ssn):
            errors.append("ssn must be 9 digits, optionally formatted as ###-##-####")

        if self.phone is not None:
            if not isinstance(self.phone, str) or not PHONE_PATTERN.fullmatch(self.phone):
                errors.append("phone may only contain digits, spaces and ( ) . + -")

        _check_length(errors, "email", self.email, 0, 255, optional=True)
        _check_length(errors, "license_number", self.license_number, 0, 30, optional=True)

        if self.license_state is not None and self.license_state != "":
            _check_length(errors, "license_state", self.license_state, 2, 2)

        _check_length(errors, "street", self.street, 0, 40)

        if self.unit is not None and not isinstance(self.unit, str):
            errors.append(f"unit must be a string, got {type(self.unit).__name__}")

        _check_length(errors, "city", self.city, 0, 25)
        _check_length(errors, "state_code", self.state_code, 2, 2)
        _check_length(errors, "postal_code", self.postal_code, 5, 5)

        if not isinstance(self.work_state_code, str) or not self.work_state_code:
            errors.append("work_state_code is required")

        for name in TEXT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, str) and XML_ILLEGAL_CHARS.search(value):
                errors.append(f"{name} contains a control character that XML cannot carry")

        if errors:
            raise ValidationError(
                [f"applicant {self.applicant_id!r}: {e}" for e in errors]
            )

    # -------------------------------------------------------------------------
    # CONSTRUCTION FROM LOOSE INPUT
    # -------------------------------------------------------------------------

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ApplicantRecord":
        """
        Build a record from a loosely-typed row, such as one produced by
        loader.load_input_rows().

        Keys are the dataclass field names. Blank strings and NaN cells are
        treated as absent. Numbers that spreadsheets like to mangle (zip codes,
        SSNs) should be read as strings by the caller.

        Raises:
            ValidationError: If a value cannot be coerced or a rule is violated
        """
        errors: List[str] = []

        def text(key: str, default: str | None = None) -> str | None:
            value = _blank_to_none(row.get(key))
            if value is None:
                return default
            return str(value).strip()

        package_raw = text("package_id")
        try:
            package_id = int(float(package_raw)) if package_raw is not None else None
        except ValueError:
            errors.append(f"package_id is not a number: {package_raw!r}")
            package_id = None

        birth_date = None
        try:
            birth_date = _coerce_date(_blank_to_none(row.get("birth_date")))
        except ValueError as e:
            errors.append(f"birth_date: {e}")

        request_copy = False
        try:
            request_copy = _coerce_bool(_blank_to_none(row.get("request_copy")))
        except ValueError as e:
            errors.append(f"request_copy: {e}")

        if errors:
            raise ValidationError(
                [f"applicant {row.get('applicant_id')!r}: {e}" for e in errors]
            )

        return cls(
            applicant_id=text("applicant_id", ""),
            package_id=package_id,
            request_copy=request_copy,
            first_name=text("first_name", ""),
            middle_name=text("middle_name"),
            last_name=text("last_name", ""),
            birth_date=birth_date,
            ssn=text("ssn", ""),
            phone=text("phone"),
            email=text("email"),
            license_number=text("license_number"),
            license_state=text("license_state"),
            street=text("street", ""),
            unit=text("unit"),
            city=text("city", ""),
            state_code=text("state_code", ""),
            postal_code=text("postal_code", ""),
            work_state_code=text("work_state_code", ""),
        )


# =============================================================================
# PRIVATE HELPERS
# =============================================================================

def _check_length(
    errors: List[str],
    name: str,
    value: Any,
    min_len: int,
    max_len: int,
    optional: bool = False,
) -> None:
    if value is None:
        if not optional:
            errors.append(f"{name} is required")
        return
    if not isinstance(value, str):
        errors.append(f"{name} must be a string, got {type(value).__name__}")
        return
    if not min_len <= len(value) <= max_len:
        if min_len == max_len:
            errors.append(f"{name} must be exactly {min_len} characters, got {len(value)}")
        else:
            errors.append(f"{name} must be {min_len}-{max_len} characters, got {len(value)}")


def _blank_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _coerce_date(value: Any) -> date | None:
    if value is None:
        return None
    # pandas.Timestamp is a datetime subclass
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    for fmt in ("%Y-%m-%d", "%Y-%m-%d %H:%M:%S", "%m/%d/%Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"unrecognized date {text!r} (expected YYYY-MM-DD or MM/DD/YYYY)")


def _coerce_bool(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    text = str(value).strip().upper()
    if text in ("YES", "Y", "TRUE", "1", "1.0"):
        return True
    if text in ("NO", "N", "FALSE", "0", "0.0"):
        return False
    raise ValueError(f"expected YES/NO, got {value!r}")
