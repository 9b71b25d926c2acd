"""
http_client.py - HTTP Client for the Vendor API
================================================
This module handles all HTTP communication with the screening vendor.

Every exchange is a single POST of an XML document to a .cfm endpoint.
No retry is attempted: each call is made exactly once and the
caller decides what a failure means (abort the batch, or skip one file).

Features:
---------
- requests Session for connection pooling
- Content-Type: application/xml on every request
- Transport failures (DNS, refused connection, TLS, timeout) are raised as
  RequestFailed with no status code
"""

import logging
import re

import requests
from xml.etree import ElementTree as ET

from .config import Settings
from .errors import RequestFailed, ResponseParseError


logger = logging.getLogger(__name__)

XML_HEADERS = {
    "Content-Type": "application/xml",
    "Accept": "application/xml, text/xml, */*",
}


class HttpClient:
    """
    HTTP client for the screening vendor's XML endpoints.

    Usage:
        client = HttpClient(settings)
        status, content_type, body = client.post_xml("/ReportStatusFetch.cfm", xml)
        client.close()

    Or as a context manager:
        with HttpClient(settings) as client:
            ...
    """

    def __init__(self, settings: Settings):
        """
        Initialize the HTTP client.

        Args:
            settings: Configuration object containing base URL and timeout
        """
        self.settings = settings
        self.s = requests.Session()
        self.s.headers.update(XML_HEADERS)

        self.base = settings.base_url
        self.timeout = settings.timeout_sec

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # -------------------------------------------------------------------------
    # API REQUEST METHODS
    # -------------------------------------------------------------------------

    def post_xml(self, path: str, body: str):
        """
        POST an XML document to an API endpoint.

        Args:
            path: The endpoint path (e.g., "/BatchScreensXML.cfm")
            body: The XML request document

        Returns:
            A tuple of (status_code, content_type, body):
            - status_code: HTTP status code (e.g., 200, 500)
            - content_type: The Content-Type header value
            - body: The response body as a string

        Raises:
            RequestFailed: If no HTTP response was received at all
        """
        url = f"{self.base}{path}"
        logger.debug(f"POST {url} ({len(body)} bytes)")

        try:
            r = self.s.post(url, data=body.encode("utf-8"), timeout=self.timeout)
        except requests.RequestException as e:
            raise RequestFailed(
                f"Network error calling {path}: {type(e).__name__}: {e}"
            ) from e

        logger.debug(f"{path} -> {r.status_code}")
        return (
            r.status_code,
            r.headers.get("content-type", ""),
            _response_text(r),
        )

    # -------------------------------------------------------------------------
    # CLEANUP METHODS
    # -------------------------------------------------------------------------

    def close(self):
        """Close the HTTP session and release resources."""
        self.s.close()


# =============================================================================
# RESPONSE HELPERS
# =============================================================================

def ensure_ok(path: str, status: int, body: str) -> None:
    """
    Raise RequestFailed unless the vendor answered 200.

    The status and the raw error body are logged first so the operator sees
    the server's diagnostic text even if the caller swallows the exception.
    """
    if status == 200:
        return
    logger.error(f"{path} returned HTTP {status}")
    if body:
        logger.error(f"Server response: {body.strip()}")
    raise RequestFailed(f"{path} returned HTTP {status}", status_code=status, body=body)


def parse_response(body: str) -> ET.Element:
    """
    Parse a 200 response body into an element tree.

    Raises:
        ResponseParseError: If the body is not well-formed XML
    """
    try:
        return ET.fromstring(body)
    except ET.ParseError as e:
        raise ResponseParseError(f"Response is not valid XML: {e}", body=body) from e


# <?xml version="1.0" encoding="ISO-8859-1"?>
XML_DECLARED_ENCODING = re.compile(rb"""^\s*<\?xml[^>]*?encoding=["']([A-Za-z0-9._-]+)["']""")


def _response_text(r: requests.Response) -> str:
    """
    Decode a response body.

    A charset in the Content-Type header wins. Without one, the encoding
    named in the XML declaration is used, and UTF-8 when there is none.
    """
    content = r.content or b""
    if "charset=" in r.headers.get("content-type", "").lower():
        return r.text or ""
    match = XML_DECLARED_ENCODING.match(content)
    encoding = match.group(1).decode("ascii") if match else "utf-8-sig"
    try:
        return content.decode(encoding, errors="replace")
    except LookupError:
        logger.warning(f"Unknown response encoding {encoding!r}, decoding as UTF-8")
        return content.decode("utf-8", errors="replace")
