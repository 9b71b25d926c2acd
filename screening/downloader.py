"""
downloader.py - Report PDF Download
====================================
Downloads finished report PDFs, one request per file number.

Each file number is its own <ReportCopyRequest>. A failure for one file
(vendor error, bad HTTP status, network trouble, corrupt payload) is recorded
on that file's DownloadResult and the loop moves on to the next one.

Response Shape:
---------------
    <ReportCopyResponse><ReportPDF>JVBERi0xLjQK...</ReportPDF></ReportCopyResponse>
    <ReportCopyResponse><ErrorText>Report not complete</ErrorText></ReportCopyResponse>

Files are written as {output_directory}/{file_number}.pdf, replacing any
existing file of the same name. A file number that is not a plain file name
(path separators, "..") is rejected without a request.
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from .config import DOWNLOAD_PATH
from .encoder import xml_escape
from .envelope import Credential, log_request, partner_info_xml
from .errors import RequestFailed, ResponseParseError
from .http_client import HttpClient, ensure_ok, parse_response


logger = logging.getLogger(__name__)


@dataclass
class DownloadResult:
    """Outcome for one file number: a written path or an error message."""

    file_number: str
    path: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.path is not None and self.error is None


def build_copy_request(credential: Credential, file_number: str, redact: bool = False) -> str:
    return (
        "<ReportCopyRequest>"
        f"{partner_info_xml(credential, redact=redact)}"
        f"<FileNumber>{xml_escape(file_number)}</FileNumber>"
        "</ReportCopyRequest>"
    )


def download_reports(
    client: HttpClient,
    credential: Credential,
    output_directory,
    file_numbers: Iterable[str],
) -> List[DownloadResult]:
    """
    Download the PDF for each file number, sequentially.

    Args:
        client: HTTP client bound to the target environment
        credential: Partner credential
        output_directory: Where to write the PDFs (created if missing)
        file_numbers: Vendor file numbers

    Returns:
        One DownloadResult per file number, in input order
    """
    out_dir = Path(output_directory)
    out_dir.mkdir(parents=True, exist_ok=True)

    results = []
    for file_number in file_numbers:
        file_number = "" if file_number is None else str(file_number).strip()
        result = _download_one(client, credential, out_dir, file_number)
        if result.ok:
            logger.info(f"File {file_number}: saved to {result.path}")
        else:
            logger.warning(f"File {file_number}: {result.error}")
        results.append(result)

    saved = sum(1 for r in results if r.ok)
    logger.info(f"Downloaded {saved}/{len(results)} report(s) to {out_dir.resolve()}")
    return results


def _download_one(
    client: HttpClient,
    credential: Credential,
    out_dir: Path,
    file_number: str,
) -> DownloadResult:
    if not file_number:
        return DownloadResult(file_number, error="Empty file number")
    # The file number becomes the PDF's file name inside out_dir
    if Path(file_number).name != file_number or "\\" in file_number or file_number in (".", ".."):
        return DownloadResult(file_number, error=f"File number {file_number!r} is not a valid file name")

    log_request(logger, build_copy_request(credential, file_number, redact=True))

    try:
        status, _, text = client.post_xml(DOWNLOAD_PATH, build_copy_request(credential, file_number))
        ensure_ok(DOWNLOAD_PATH, status, text)
        document = parse_response(text)
    except (RequestFailed, ResponseParseError) as e:
        return DownloadResult(file_number, error=str(e))

    error = document.find(".//ErrorText")
    if error is not None:
        return DownloadResult(file_number, error=(error.text or "").strip() or "Vendor reported an error")

    payload = document.find(".//ReportPDF")
    if payload is None or not (payload.text or "").strip():
        return DownloadResult(file_number, error="Response contained no report PDF")

    try:
        # Line breaks inside the payload are dropped before strict decoding
        pdf = base64.b64decode("".join(payload.text.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        return DownloadResult(file_number, error=f"Invalid PDF payload: {e}")

    path = out_dir / f"{file_number}.pdf"
    try:
        path.write_bytes(pdf)
    except OSError as e:
        return DownloadResult(file_number, error=f"Could not write {path}: {e}")
    return DownloadResult(file_number, path=path)
