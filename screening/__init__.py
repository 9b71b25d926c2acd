"""
screening - Background Screening Vendor Client
===============================================

A Python package for the screening vendor's XML-over-HTTPS API: submit
applicants for background checks, poll report status, and download finished
report PDFs.

Modules:
--------
- config.py        : Configuration management (loads settings from .env)
- errors.py        : Exception types
- applicant.py     : ApplicantRecord and its field rules
- encoder.py       : ApplicantRecord -> <Applicant> XML fragment
- formatter.py     : XML pretty printer for debug output
- envelope.py      : Credential and the shared <PartnerInfo> block
- http_client.py   : HTTP client for the vendor endpoints
- submitter.py     : <ScreenRequest> exchange
- status.py        : <ReportStatusRequest> exchange
- downloader.py    : <ReportCopyRequest> exchange, writes PDFs
- loader.py        : Input file loading (Excel/CSV with column normalization)
- run_screening.py : Command line entry point

Usage:
------
    python -m screening.run_screening submit applicants.xlsx
    python -m screening.run_screening status 1001 1002
    python -m screening.run_screening download 1001 1002 --output-dir reports

Library use:
------------
    from screening import HttpClient, load_settings, fetch_status

    settings = load_settings()
    with HttpClient(settings) as client:
        for result in fetch_status(client, settings.credential(), ["1001"]):
            print(result.file_number, result.status, result.error_text)
"""

from .applicant import ApplicantRecord
from .config import Settings, load_settings
from .downloader import DownloadResult, download_reports
from .encoder import encode_applicant
from .envelope import Credential
from .errors import (
    RequestFailed,
    ResponseParseError,
    ScreeningError,
    ValidationError,
    XmlSyntaxError,
)
from .formatter import format_xml
from .http_client import HttpClient
from .status import StatusResult, fetch_status
from .submitter import ScreenRequestBuilder, ScreenResponse, submit_screens

__all__ = [
    "ApplicantRecord",
    "Credential",
    "DownloadResult",
    "HttpClient",
    "RequestFailed",
    "ResponseParseError",
    "ScreenRequestBuilder",
    "ScreenResponse",
    "ScreeningError",
    "Settings",
    "StatusResult",
    "ValidationError",
    "XmlSyntaxError",
    "download_reports",
    "encode_applicant",
    "fetch_status",
    "format_xml",
    "load_settings",
    "submit_screens",
]
