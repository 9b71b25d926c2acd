"""
status.py - Report Status Fetch
================================
Asks the vendor for the status of previously filed reports. All file numbers
go out in one <ReportStatusRequest>; the answer holds one <Report> per file.

Response Shape:
---------------
    <ReportStatusResponse>
      <Report><FileNumber>1001</FileNumber><ErrorText>Unknown file</ErrorText></Report>
      <Report><FileNumber>1002</FileNumber><ReportStatus>...</ReportStatus></Report>
    </ReportStatusResponse>

A <Report> may carry an error, a status payload, or (in theory) neither.
Results follow the order of the response, which is the server's to choose.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List
from xml.etree import ElementTree as ET

from .config import STATUS_PATH
from .encoder import xml_escape
from .envelope import Credential, log_request, partner_info_xml
from .errors import RequestFailed, ValidationError
from .http_client import HttpClient, ensure_ok, parse_response


logger = logging.getLogger(__name__)

STATUS_AVAILABLE = "Available"


@dataclass
class StatusResult:
    """Outcome for one file number. error_text and status are independent."""

    file_number: str | None
    status: str | None = None
    error_text: str | None = None
    raw_status: ET.Element | None = None

    @property
    def available(self) -> bool:
        return self.status == STATUS_AVAILABLE


class StatusRequestBuilder:
    """Collects file numbers, then renders the <ReportStatusRequest>."""

    def __init__(self, credential: Credential):
        self.credential = credential
        self.file_numbers: List[str] = []

    def add(self, file_number) -> "StatusRequestBuilder":
        value = str(file_number).strip() if file_number is not None else ""
        if not value:
            raise ValidationError("file number must not be empty")
        self.file_numbers.append(value)
        return self

    def __len__(self) -> int:
        return len(self.file_numbers)

    def build(self, redact: bool = False) -> str:
        if not self.file_numbers:
            raise ValidationError("a status request needs at least one file number")

        reports = "".join(
            f"<Report><FileNumber>{xml_escape(n)}</FileNumber></Report>"
            for n in self.file_numbers
        )
        return (
            "<ReportStatusRequest>"
            f"{partner_info_xml(self.credential, redact=redact)}"
            f"{reports}"
            "</ReportStatusRequest>"
        )


def parse_status_report(report: ET.Element) -> StatusResult:
    """Map one <Report> element of a status response to a StatusResult."""
    result = StatusResult(file_number=_text(report.find("FileNumber")))

    error = report.find("ErrorText")
    if error is not None:
        result.error_text = _text(error) or ""

    payload = report.find("ReportStatus")
    if payload is not None:
        result.status = STATUS_AVAILABLE
        result.raw_status = payload

    return result


def fetch_status(
    client: HttpClient,
    credential: Credential,
    file_numbers: Iterable[str],
) -> List[StatusResult]:
    """
    Fetch the status of a batch of reports in one request.

    Args:
        client: HTTP client bound to the target environment
        credential: Partner credential
        file_numbers: Vendor file numbers; consumed as they are read

    Returns:
        One StatusResult per <Report> in the response, in response order

    Raises:
        ValidationError: Empty batch or empty file number
        RequestFailed: Non-200 response or transport failure (no partial results)
        ResponseParseError: 200 response that is not XML
    """
    builder = StatusRequestBuilder(credential)
    for n in file_numbers:
        builder.add(n)

    body = builder.build()
    log_request(logger, builder.build(redact=True))

    logger.info(f"Fetching status for {len(builder)} report(s)")
    try:
        status, _, text = client.post_xml(STATUS_PATH, body)
    except RequestFailed as e:
        logger.error(f"Status fetch failed: {e}")
        raise
    ensure_ok(STATUS_PATH, status, text)

    document = parse_response(text)
    results = [parse_status_report(r) for r in document.iter("Report")]

    for r in results:
        if r.error_text is not None:
            logger.warning(f"File {r.file_number}: {r.error_text}")
        elif r.available:
            logger.info(f"File {r.file_number}: {STATUS_AVAILABLE}")
        else:
            logger.info(f"File {r.file_number}: no status reported")

    return results


def _text(element: ET.Element | None) -> str | None:
    if element is None or element.text is None:
        return None
    return element.text.strip()
