"""
errors.py - Exception Types
============================
Every error the library raises derives from ScreeningError, so callers can
catch one type at the top of a script.

Failure Categories:
-------------------
- ValidationError    : An applicant field (or request argument) is malformed.
                       Raised locally; nothing is ever sent over the wire.
- RequestFailed      : Non-200 HTTP status, or a transport failure
                       (DNS, refused connection, TLS, timeout).
- ResponseParseError : The server answered 200 but the body is not XML.
- XmlSyntaxError     : The debug formatter was handed malformed XML.

Per-file errors reported by the vendor inside an otherwise successful
response are NOT exceptions. They come back as data on StatusResult and
DownloadResult.
"""


class ScreeningError(Exception):
    """Base class for all errors raised by the screening package."""


class ValidationError(ScreeningError, ValueError):
    """
    One or more fields failed validation.

    Attributes:
        errors: List of human-readable problems, one per offending field
    """

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class RequestFailed(ScreeningError):
    """
    The HTTP exchange did not produce a 200 response.

    Attributes:
        status_code: HTTP status, or None when the request never got a response
        body: Raw response body (may carry the server's diagnostic text)
    """

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ResponseParseError(ScreeningError):
    """A 200 response whose body could not be parsed as XML."""

    def __init__(self, message: str, body: str | None = None):
        super().__init__(message)
        self.body = body


class XmlSyntaxError(ScreeningError):
    """Input handed to format_xml() is not well-formed."""
