from datetime import date

import pandas as pd
import pytest

from screening.errors import ValidationError
from screening.loader import load_applicants, load_file_numbers, normalize_header


HEADER = (
    "Applicant ID,Package,Report Copy,First Name,Middle Name,Last Name,Birth Date,"
    "SSN,Phone,Email,DL Number,DL State,Street,Unit,City,State,Zip,Work State\n"
)


def test_normalize_header() -> None:
    assert normalize_header("First Name") == "FIRSTNAME"
    assert normalize_header("date_of_birth") == "DATEOFBIRTH"
    assert normalize_header("work-state") == "WORKSTATE"


def test_load_applicants_from_csv(tmp_path) -> None:
    path = tmp_path / "applicants.csv"
    path.write_text(
        HEADER
        + "A1,1,NO,Jo'Ann,,O'Brien,1990-01-15,123-45-6789,(515) 555-1234,,,,1 Elm St,,Ames,IA,50010,IA\n"
        + ",,,,,,,,,,,,,,,,,\n"
        + "A2,2,YES,Sam,Q,Lee,03/04/1985,987654321,,sam@example.com,D123,IA,,,Boston,MA,02134,MA\n",
        encoding="utf-8",
    )

    first, second = load_applicants(str(path))

    assert first.first_name == "Jo'Ann"
    assert first.middle_name is None
    assert first.birth_date == date(1990, 1, 15)
    assert first.phone == "(515) 555-1234"
    assert second.package_id == 2
    assert second.request_copy is True
    # leading zero survives because every cell is read as text
    assert second.postal_code == "02134"
    assert second.street == ""
    assert second.birth_date == date(1985, 3, 4)


def test_bad_rows_are_reported_with_row_numbers(tmp_path) -> None:
    path = tmp_path / "applicants.csv"
    path.write_text(
        HEADER
        + "A1,3,NO,Jo,,Smith,1990-01-15,123-45-6789,,,,,1 Elm St,,Ames,IA,50010,IA\n"
        + "A2,1,NO,Jo,,Smith,1990-01-15,123-45-6789,,,,,1 Elm St,,Ames,IA,5001,IA\n",
        encoding="utf-8",
    )
    with pytest.raises(ValidationError) as exc:
        load_applicants(str(path))
    messages = exc.value.errors
    assert any(m.startswith("row 1:") and "package_id" in m for m in messages)
    assert any(m.startswith("row 2:") and "postal_code" in m for m in messages)


def test_missing_required_column(tmp_path) -> None:
    path = tmp_path / "applicants.csv"
    path.write_text("Applicant ID,First Name\nA1,Jo\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Required columns missing"):
        load_applicants(str(path))


def test_unsupported_and_missing_files(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_applicants(str(tmp_path / "nope.csv"))
    txt = tmp_path / "applicants.txt"
    txt.write_text("x", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported file type"):
        load_applicants(str(txt))


def test_load_file_numbers_from_excel(tmp_path) -> None:
    path = tmp_path / "files.xlsx"
    pd.DataFrame({"File Number": ["1001", None, "1003"], "Note": ["a", "b", "c"]}).to_excel(
        path, index=False
    )
    assert load_file_numbers(str(path)) == ["1001", "1003"]


def test_load_file_numbers_from_csv(tmp_path) -> None:
    path = tmp_path / "files.csv"
    path.write_text("file_no\n0042\n 77 \n", encoding="utf-8")
    assert load_file_numbers(str(path)) == ["0042", "77"]
