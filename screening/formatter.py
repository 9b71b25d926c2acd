"""
formatter.py - XML Pretty Printer
==================================
Re-indents an XML string for human-readable debug output. The output never
carries an XML declaration.

This is for logging only. The bytes sent to the vendor are always the
unformatted request string.
"""

from xml.dom import minidom
from xml.dom.minidom import Node
from xml.parsers.expat import ExpatError

from .errors import XmlSyntaxError


def format_xml(xml_text: str, indent: str = "  ") -> str:
    """
    Parse an XML string and serialize it again with indentation.

    Whitespace-only text between elements is dropped before re-indenting, so
    already-indented input does not pick up blank lines.

    Args:
        xml_text: A well-formed XML document or fragment with one root
        indent: Indentation step

    Returns:
        The indented XML, without declaration and without a trailing newline

    Raises:
        XmlSyntaxError: If the input is not well-formed
    """
    try:
        document = minidom.parseString(xml_text)
    except ExpatError as e:
        raise XmlSyntaxError(f"Malformed XML: {e}") from e

    try:
        _drop_whitespace_nodes(document.documentElement)
        # Serializing the root element instead of the document skips the
        # <?xml ...?> declaration.
        return document.documentElement.toprettyxml(indent=indent).rstrip("\n")
    finally:
        document.unlink()


def _drop_whitespace_nodes(node) -> None:
    # Leaf text such as <Unit> </Unit> is content, not indentation; only
    # elements that contain other elements lose their whitespace text.
    has_elements = any(c.nodeType == Node.ELEMENT_NODE for c in node.childNodes)
    for child in list(node.childNodes):
        if child.nodeType == Node.ELEMENT_NODE:
            _drop_whitespace_nodes(child)
        elif has_elements and child.nodeType == Node.TEXT_NODE and not child.data.strip():
            node.removeChild(child)
            child.unlink()
