"""
config.py - Configuration Management
=====================================
This module handles loading and validating configuration from environment variables.
It reads settings from a .env file and makes them available to the rest of the package.

Environment Variables Used:
---------------------------
- SCREENING_ENVIRONMENT      : (Optional) "Production" or "Testing" (default: Testing)
- SCREENING_BASE_URL         : (Optional) Overrides the host picked by SCREENING_ENVIRONMENT
- SCREENING_USERNAME         : (Required for network calls) Partner user name
- SCREENING_PASSWORD         : (Required for network calls) Partner password
- SCREENING_ACCOUNT          : (Optional) 6-character account number used by submit
- SCREENING_POSTBACK_URL     : (Optional) Webhook the vendor calls when a report completes
- SCREENING_TIMEOUT_SEC      : (Optional) Request timeout in seconds (default: 60)
- SCREENING_OUTPUT_DIR       : (Optional) Where downloaded PDFs go (default: "reports")
- SCREENING_EXCEL_HEADER_ROW : (Optional) Which row contains headers in Excel files (default: 0)

Example .env file:
------------------
SCREENING_ENVIRONMENT=Testing
SCREENING_USERNAME=partner-user
SCREENING_PASSWORD=s3cret
SCREENING_ACCOUNT=123456
SCREENING_POSTBACK_URL=https://hooks.example.com/screening
"""

from dataclasses import dataclass, field
import os
from pathlib import Path
from dotenv import load_dotenv

from .envelope import Credential


# =============================================================================
# VENDOR ENDPOINTS
# =============================================================================

# Host for each deployment environment. SCREENING_BASE_URL overrides these.
ENVIRONMENT_URLS = {
    "production": "https://www.screeningpartner.com/xml",
    "testing": "https://test.screeningpartner.com/xml",
}

DEFAULT_ENVIRONMENT = "Testing"

# Paths are the same in every environment
SUBMIT_PATH = "/BatchScreensXML.cfm"
STATUS_PATH = "/ReportStatusFetch.cfm"
DOWNLOAD_PATH = "/ReportPDFFetch.cfm"


# =============================================================================
# SETTINGS DATACLASS
# =============================================================================

@dataclass
class Settings:
    """Container for all package configuration values."""

    # Base URL of the vendor API, already resolved from the environment name
    base_url: str

    # "Production" or "Testing", kept for log output
    environment: str = DEFAULT_ENVIRONMENT

    # Partner credentials. Never logged.
    username: str | None = None
    password: str | None = field(default=None, repr=False)

    # Submit-only settings
    account: str | None = None
    postback_url: str | None = None

    timeout_sec: int = 60

    # Download target directory
    output_dir: str = "reports"

    # 0 = first row (most common), 1 = second row, etc.
    excel_header_row: int = 0

    def credential(self) -> Credential:
        """
        Return the partner credential.

        Raises:
            RuntimeError: If the user name or password is not configured
        """
        if not (self.username and self.password):
            raise RuntimeError(
                "Missing SCREENING_USERNAME or SCREENING_PASSWORD. "
                "Please add them to your .env file."
            )
        return Credential(self.username, self.password)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def _clean(v: str | None) -> str | None:
    """
    Clean and normalize an environment variable value.

    Examples:
        _clean('  hello  ')     -> 'hello'
        _clean('"quoted"')      -> 'quoted'
        _clean('')              -> None
        _clean(None)            -> None
    """
    if v is None:
        return None

    v = v.strip()

    if (v.startswith('"') and v.endswith('"')) or (v.startswith("'") and v.endswith("'")):
        v = v[1:-1]

    return v if v else None


def resolve_base_url(environment: str) -> str:
    """
    Map an environment selector to the vendor host.

    Args:
        environment: "Production" or "Testing" (case-insensitive)

    Raises:
        RuntimeError: If the selector is not a known environment
    """
    key = (environment or "").strip().lower()
    if key not in ENVIRONMENT_URLS:
        raise RuntimeError(
            f"Unknown environment {environment!r}. "
            f"Expected one of: Production, Testing"
        )
    return ENVIRONMENT_URLS[key]


def _normalize_url(base: str) -> str:
    # Same convention as everywhere else: https by default, no trailing slash,
    # so base_url + "/Endpoint.cfm" always works.
    if not base.startswith("http"):
        base = "https://" + base
    return base.rstrip("/")


# =============================================================================
# MAIN CONFIGURATION LOADER
# =============================================================================

def load_settings(environment: str | None = None) -> Settings:
    """
    Load package configuration from environment variables.

    This function:
    1. Finds and loads the .env file from the project root
    2. Reads all SCREENING_* environment variables
    3. Resolves the vendor base URL
    4. Returns a Settings object with all configuration

    Args:
        environment: Overrides SCREENING_ENVIRONMENT (e.g. from the command line)

    Returns:
        Settings: A dataclass containing all configuration values

    Raises:
        RuntimeError: If the environment selector is unknown
    """
    # The .env file lives in the project root (one level up from screening/)
    root_env = Path(__file__).resolve().parents[1] / ".env"
    load_dotenv(dotenv_path=root_env)

    env_name = environment or _clean(os.getenv("SCREENING_ENVIRONMENT")) or DEFAULT_ENVIRONMENT

    override = _clean(os.getenv("SCREENING_BASE_URL"))
    if override:
        base = _normalize_url(override)
    else:
        base = _normalize_url(resolve_base_url(env_name))

    return Settings(
        base_url=base,
        environment=env_name,
        username=_clean(os.getenv("SCREENING_USERNAME")),
        password=_clean(os.getenv("SCREENING_PASSWORD")),
        account=_clean(os.getenv("SCREENING_ACCOUNT")),
        postback_url=_clean(os.getenv("SCREENING_POSTBACK_URL")),
        timeout_sec=int(os.getenv("SCREENING_TIMEOUT_SEC", "60")),
        output_dir=_clean(os.getenv("SCREENING_OUTPUT_DIR")) or "reports",
        excel_header_row=int(os.getenv("SCREENING_EXCEL_HEADER_ROW", "0")),
    )
