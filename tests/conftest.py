from datetime import date
from unittest.mock import MagicMock

import pytest

from screening.applicant import ApplicantRecord
from screening.envelope import Credential


def applicant_fields(**overrides):
    fields = dict(
        applicant_id="A1",
        package_id=1,
        first_name="Jo'Ann",
        last_name="O'Brien",
        birth_date=date(1990, 1, 15),
        ssn="123-45-6789",
        street="1 Elm St",
        city="Ames",
        state_code="IA",
        postal_code="50010",
        work_state_code="IA",
    )
    fields.update(overrides)
    return fields


@pytest.fixture
def make_applicant():
    def _make(**overrides):
        return ApplicantRecord(**applicant_fields(**overrides))
    return _make


@pytest.fixture
def credential():
    return Credential("partner&co", "p<ss>'word")


@pytest.fixture
def client():
    """An HttpClient stand-in; set client.post_xml.return_value / side_effect."""
    fake = MagicMock()
    fake.post_xml.return_value = (200, "application/xml", "<Response/>")
    return fake
