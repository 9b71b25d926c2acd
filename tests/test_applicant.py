from datetime import date, datetime

import pytest

from screening.applicant import ApplicantRecord, normalize_phone, normalize_ssn
from screening.errors import ValidationError

from conftest import applicant_fields


def test_valid_record_constructs(make_applicant) -> None:
    a = make_applicant()
    assert a.applicant_id == "A1"
    assert a.request_copy is False


def test_repr_hides_ssn(make_applicant) -> None:
    assert "6789" not in repr(make_applicant())


@pytest.mark.parametrize(
    "field,value",
    [
        ("applicant_id", ""),
        ("applicant_id", "x" * 51),
        ("package_id", 3),
        ("package_id", True),
        ("first_name", ""),
        ("first_name", "x" * 21),
        ("middle_name", "x" * 21),
        ("last_name", "x" * 26),
        ("birth_date", "1990-01-15"),
        ("ssn", "12345678"),
        ("ssn", "123-456-789"),
        ("ssn", "123456789\n"),
        ("ssn", "١٢٣٤٥٦٧٨٩"),
        ("ssn", "１２３-４５-６７８９"),
        ("phone", "555-CALL-NOW"),
        ("phone", "٥١٥٥٥٥١٢٣٤"),
        ("phone", "515\t555 1234"),
        ("email", "x" * 256),
        ("license_number", "x" * 31),
        ("license_state", "IOW"),
        ("street", None),
        ("street", "x" * 41),
        ("street", "1 Elm\x00St"),
        ("unit", "4\x0bB"),
        ("first_name", "Jo\x1b"),
        ("email", "a\ufffe@b.com"),
        ("city", "x" * 26),
        ("state_code", "I"),
        ("postal_code", "5001"),
        ("postal_code", "500100"),
        ("work_state_code", ""),
    ],
)
def test_invalid_field_raises(field, value) -> None:
    with pytest.raises(ValidationError) as exc:
        ApplicantRecord(**applicant_fields(**{field: value}))
    assert field in str(exc.value)


def test_all_problems_reported_together() -> None:
    with pytest.raises(ValidationError) as exc:
        ApplicantRecord(**applicant_fields(first_name="", postal_code="1"))
    assert len(exc.value.errors) == 2


def test_boundary_lengths_accepted(make_applicant) -> None:
    a = make_applicant(
        applicant_id="x" * 50,
        first_name="x" * 20,
        middle_name="",
        last_name="x" * 25,
        street="",
        city="",
        email="x" * 255,
        license_number="x" * 30,
        license_state="",
        unit="Apartment 12 rear building, second floor",
    )
    assert a.street == ""


def test_package_two_and_unformatted_ssn(make_applicant) -> None:
    a = make_applicant(package_id=2, ssn="123456789")
    assert a.package_id == 2


def test_validate_catches_mutation(make_applicant) -> None:
    a = make_applicant()
    a.state_code = "Iowa"
    with pytest.raises(ValidationError):
        a.validate()


def test_normalize_ssn() -> None:
    assert normalize_ssn("123-45-6789") == "123456789"
    assert normalize_ssn("123456789") == "123456789"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("5155551234", "515-555-1234"),
        ("515-555-1234", "515-555-1234"),
        ("(515) 555-1234", "515-555-1234"),
        ("515.555.1234", "515-555-1234"),
        ("555-1234", "5551234"),
        ("+1 515 555 1234", "15155551234"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_phone(raw, expected) -> None:
    assert normalize_phone(raw) == expected


def test_from_row_coerces_loose_values() -> None:
    row = {k: str(v) for k, v in applicant_fields().items()}
    row.update(
        package_id="2",
        birth_date="01/15/1990",
        request_copy="yes",
        middle_name="  ",
        phone=float("nan"),
    )
    a = ApplicantRecord.from_row(row)
    assert a.package_id == 2
    assert a.birth_date == date(1990, 1, 15)
    assert a.request_copy is True
    assert a.middle_name is None
    assert a.phone is None


def test_from_row_accepts_datetime_and_excel_text() -> None:
    row = dict(applicant_fields(), birth_date=datetime(1990, 1, 15, 0, 0))
    assert ApplicantRecord.from_row(row).birth_date == date(1990, 1, 15)

    row = dict(applicant_fields(), birth_date="1990-01-15 00:00:00")
    assert ApplicantRecord.from_row(row).birth_date == date(1990, 1, 15)


def test_from_row_reports_bad_date_and_package() -> None:
    row = dict(applicant_fields(), birth_date="15th Jan", package_id="gold")
    with pytest.raises(ValidationError) as exc:
        ApplicantRecord.from_row(row)
    messages = " ".join(exc.value.errors)
    assert "birth_date" in messages
    assert "package_id" in messages


def test_from_row_missing_required_fields() -> None:
    with pytest.raises(ValidationError) as exc:
        ApplicantRecord.from_row({"applicant_id": "A9"})
    assert "birth_date" in str(exc.value)
    assert "ssn" in str(exc.value)


def test_non_ascii_digits_are_not_digits() -> None:
    assert normalize_ssn("١٢٣-45-6789") == "456789"
    assert normalize_phone("５１５５５５１２３４") == ""
