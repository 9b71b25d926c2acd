"""
encoder.py - Applicant XML Encoder
===================================
Turns a validated ApplicantRecord into the <Applicant> fragment that goes
inside a <ScreenRequest>.

Wire Rules:
-----------
- SSN is sent as a bare 9-digit string, whatever grouping came in.
- Phone is regrouped as ###-###-#### when exactly 10 digits remain after
  stripping, otherwise the stripped digits are sent as-is.
- Birth date is YYYY-MM-DD, ReportCopy is YES/NO.
- All text is XML-escaped (& < > " ').
- The vendor's parser is positional: the element order in APPLICANT_ELEMENTS
  must not change.
"""

from typing import Callable, List, Tuple
from xml.sax.saxutils import escape

from .applicant import ApplicantRecord, normalize_phone, normalize_ssn


# saxutils.escape only handles & < > by default
_QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def xml_escape(value) -> str:
    """
    Escape a value for use as XML element text.

    Examples:
        xml_escape("Jo'Ann")   -> "Jo&apos;Ann"
        xml_escape("A & B")    -> "A &amp; B"
        xml_escape(None)       -> ""
    """
    if value is None:
        return ""
    return escape(str(value), _QUOTE_ENTITIES)


# =============================================================================
# ELEMENT ORDER
# =============================================================================
# (element name, function producing the unescaped text for that element)

APPLICANT_ELEMENTS: List[Tuple[str, Callable[[ApplicantRecord], str | None]]] = [
    ("ApplicantID", lambda a: a.applicant_id),
    ("Package", lambda a: str(a.package_id)),
    ("ReportCopy", lambda a: "YES" if a.request_copy else "NO"),
    ("FirstName", lambda a: a.first_name),
    ("MiddleName", lambda a: a.middle_name),
    ("LastName", lambda a: a.last_name),
    ("BirthDate", lambda a: a.birth_date.strftime("%Y-%m-%d")),
    ("SSN", lambda a: normalize_ssn(a.ssn)),
    ("Phone", lambda a: normalize_phone(a.phone)),
    ("Email", lambda a: a.email),
    ("DLNumber", lambda a: a.license_number),
    ("DLState", lambda a: a.license_state),
    ("Street", lambda a: a.street),
    ("Unit", lambda a: a.unit),
    ("City", lambda a: a.city),
    ("State", lambda a: a.state_code),
    ("Zip", lambda a: a.postal_code),
    ("WorkState", lambda a: a.work_state_code),
]


def encode_applicant(record: ApplicantRecord) -> str:
    """
    Encode one applicant as an <Applicant> XML fragment.

    The record is re-validated first, so a record mutated after construction
    cannot slip invalid data onto the wire.

    Args:
        record: The applicant to encode

    Returns:
        The fragment, e.g. "<Applicant><ApplicantID>A1</ApplicantID>...</Applicant>"

    Raises:
        ValidationError: If any field rule is violated
    """
    record.validate()

    parts = ["<Applicant>"]
    for name, getter in APPLICANT_ELEMENTS:
        parts.append(f"<{name}>{xml_escape(getter(record))}</{name}>")
    parts.append("</Applicant>")
    return "".join(parts)
