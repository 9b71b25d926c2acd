from xml.etree import ElementTree as ET

import pytest

from screening.errors import XmlSyntaxError
from screening.formatter import format_xml


def _shape(element):
    """(tag, attributes, stripped text, children) for tree comparison."""
    return (
        element.tag,
        element.attrib,
        (element.text or "").strip(),
        [_shape(child) for child in element],
    )


def test_malformed_xml_raises() -> None:
    with pytest.raises(XmlSyntaxError):
        format_xml("<a><b></a>")


def test_empty_input_raises() -> None:
    with pytest.raises(XmlSyntaxError):
        format_xml("")


def test_output_is_indented_without_declaration() -> None:
    out = format_xml('<?xml version="1.0" encoding="utf-8"?><a><b>1</b><c x="y"/></a>')
    assert not out.startswith("<?xml")
    assert out.splitlines() == [
        "<a>",
        "  <b>1</b>",
        '  <c x="y"/>',
        "</a>",
    ]


def test_round_trip_preserves_structure() -> None:
    source = (
        "<ScreenRequest><PartnerInfo><UserName>u&amp;1</UserName></PartnerInfo>"
        "<Account><AcctNbr>123456</AcctNbr>"
        "<PostBackURL CredentialType='NONE'>https://h.example.com/x?a=1&amp;b=2</PostBackURL>"
        "<Applicant><FirstName>Jo&apos;Ann</FirstName><MiddleName></MiddleName></Applicant>"
        "</Account></ScreenRequest>"
    )
    out = format_xml(source)
    assert _shape(ET.fromstring(out)) == _shape(ET.fromstring(source))


def test_reformatting_is_stable() -> None:
    once = format_xml("<a><b><c>t</c></b></a>")
    assert format_xml(once) == once


def test_leaf_whitespace_is_kept() -> None:
    out = format_xml("<a><b> </b><c>x</c></a>")
    assert "<b> </b>" in out
