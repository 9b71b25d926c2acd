"""
run_screening.py - Command Line Entry Point
============================================
Drives the three vendor exchanges from the command line.

Usage:
------
    python -m screening.run_screening submit applicants.xlsx
    python -m screening.run_screening submit applicants.csv --dry-run --debug
    python -m screening.run_screening status 1001 1002 1003
    python -m screening.run_screening status --input files.csv
    python -m screening.run_screening download 1001 1002 --output-dir reports

Commands:
---------
    submit    : Submit every applicant in the input file in one request
    status    : Fetch report status for file numbers, write a results CSV
    download  : Download report PDFs for file numbers, write a results CSV

Global Options:
---------------
    --environment : Production or Testing (default: SCREENING_ENVIRONMENT)
    --debug       : Enable debug logging (includes the formatted request,
                    password masked)
"""

import sys
import logging
import csv
import argparse
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from .config import Settings, load_settings
from .downloader import download_reports
from .envelope import Credential
from .errors import ScreeningError
from .formatter import format_xml
from .http_client import HttpClient
from .loader import load_applicants, load_file_numbers
from .status import fetch_status
from .submitter import ScreenRequestBuilder, submit_screens


# =============================================================================
# LOGGING SETUP
# =============================================================================

LOG_LEVEL = logging.INFO

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False):
    logging.basicConfig(
        level=LOG_LEVEL,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        # urllib3 connection chatter is not useful here
        logging.getLogger("urllib3").setLevel(logging.INFO)


# =============================================================================
# OUTPUT FUNCTIONS
# =============================================================================

STATUS_FIELDS = ['FileNumber', 'Status', 'Error', 'CheckedAt']
DOWNLOAD_FIELDS = ['FileNumber', 'Saved', 'Path', 'Error', 'CheckedAt']


def write_results_to_csv(results: List[Dict[str, Any]], fieldnames: List[str], output_path: Path):
    """Write result rows to a CSV file."""
    if not results:
        logger.warning("No results to write")
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', newline='', encoding='utf-8') as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(results)

    logger.info(f"Results written to {output_path.resolve()}")


def _results_path(output_dir: str, prefix: str) -> Path:
    return Path(output_dir) / f"{prefix}_{datetime.now():%Y%m%d_%H%M%S}.csv"


# =============================================================================
# COMMANDS
# =============================================================================

def _collect_file_numbers(args, settings: Settings) -> List[str]:
    numbers = list(args.file_numbers)
    if args.input:
        numbers.extend(load_file_numbers(args.input, settings.excel_header_row))
    if not numbers:
        raise ValueError("No file numbers given. Pass them as arguments or with --input.")
    return numbers


def cmd_submit(args, settings: Settings, credential: Credential) -> int:
    account = args.account or settings.account
    postback_url = args.postback_url or settings.postback_url
    if not account or not postback_url:
        raise RuntimeError(
            "An account number and postback URL are required. Set SCREENING_ACCOUNT "
            "and SCREENING_POSTBACK_URL, or pass --account and --postback-url."
        )

    logger.info(f"Loading applicants from {args.input_file}...")
    applicants = load_applicants(args.input_file, settings.excel_header_row)
    logger.info(f"Loaded {len(applicants)} applicant(s)")

    if args.dry_run:
        builder = ScreenRequestBuilder(credential, account, postback_url)
        for applicant in applicants:
            builder.add(applicant)
        logger.info("Request body:\n" + format_xml(builder.build(redact=True)))
        logger.info("DRY RUN MODE - nothing was sent.")
        return 0

    with HttpClient(settings) as client:
        response = submit_screens(client, credential, account, postback_url, applicants)

    print(response.raw_xml)
    return 0


def cmd_status(args, settings: Settings, credential: Credential) -> int:
    numbers = _collect_file_numbers(args, settings)

    with HttpClient(settings) as client:
        results = fetch_status(client, credential, numbers)

    checked_at = datetime.now().isoformat()
    rows = [
        {
            'FileNumber': r.file_number,
            'Status': r.status or '',
            'Error': r.error_text or '',
            'CheckedAt': checked_at,
        }
        for r in results
    ]

    available = sum(1 for r in results if r.available)
    errors = sum(1 for r in results if r.error_text is not None)

    logger.info("-" * 50)
    logger.info(f"Reports checked: {len(results)}")
    logger.info(f"Available: {available}")
    logger.info(f"Errors: {errors}")
    logger.info("-" * 50)

    write_results_to_csv(rows, STATUS_FIELDS, _results_path(args.results_dir, "status"))
    return 0


def cmd_download(args, settings: Settings, credential: Credential) -> int:
    numbers = _collect_file_numbers(args, settings)
    output_dir = args.output_dir or settings.output_dir

    with HttpClient(settings) as client:
        results = download_reports(client, credential, output_dir, numbers)

    checked_at = datetime.now().isoformat()
    rows = [
        {
            'FileNumber': r.file_number,
            'Saved': r.ok,
            'Path': str(r.path) if r.path else '',
            'Error': r.error or '',
            'CheckedAt': checked_at,
        }
        for r in results
    ]
    write_results_to_csv(rows, DOWNLOAD_FIELDS, _results_path(args.results_dir, "download"))

    # 2 = at least one download failed
    return 0 if all(r.ok for r in results) else 2


# =============================================================================
# COMMAND LINE ARGUMENT PARSING
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Submit background screens and fetch reports',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m screening.run_screening submit applicants.xlsx
  python -m screening.run_screening status 1001 1002
  python -m screening.run_screening download --input files.csv
        """
    )
    parser.add_argument(
        '--environment',
        choices=['Production', 'Testing'],
        help='Vendor environment (default: SCREENING_ENVIRONMENT or Testing)'
    )
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    sub = parser.add_subparsers(dest='command', required=True)

    submit = sub.add_parser('submit', help='Submit applicants for screening')
    submit.add_argument('input_file', help='Excel (.xlsx, .xls) or CSV file of applicants')
    submit.add_argument('--account', help='6-character account number')
    submit.add_argument('--postback-url', help='Webhook for completed reports')
    submit.add_argument(
        '--dry-run',
        action='store_true',
        help='Validate input and show the request without sending it'
    )
    submit.set_defaults(func=cmd_submit)

    for name, func, help_text in (
        ('status', cmd_status, 'Fetch report status'),
        ('download', cmd_download, 'Download report PDFs'),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument('file_numbers', nargs='*', help='Vendor file numbers')
        p.add_argument('--input', help='Excel or CSV file with a "File Number" column')
        p.add_argument('--results-dir', default='out', help='Directory for the results CSV (default: out)')
        if name == 'download':
            p.add_argument('--output-dir', help='Directory for PDFs (default: SCREENING_OUTPUT_DIR)')
        p.set_defaults(func=func)

    return parser


# =============================================================================
# MAIN EXECUTION FUNCTION
# =============================================================================

def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.debug)

    try:
        settings = load_settings(args.environment)
        logger.info(f"Environment: {settings.environment} ({settings.base_url})")
        credential = settings.credential()
        return args.func(args, settings, credential)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return 130

    except (ScreeningError, RuntimeError, FileNotFoundError, ValueError) as e:
        logger.error(f"Fatal error: {e}")
        return 1


if __name__ == '__main__':
    if __package__ is None:
        print(
            "ERROR: This script must be run as a module.\n"
            "Usage: python -m screening.run_screening <command> ..."
        )
        sys.exit(1)

    sys.exit(main())
