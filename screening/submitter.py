"""
submitter.py - Screen Submission
=================================
Submits one or more applicants for screening in a single <ScreenRequest>.

Request Layout:
---------------
    <ScreenRequest>
      <PartnerInfo><UserName/><Password/></PartnerInfo>
      <Account>
        <AcctNbr>123456</AcctNbr>
        <PostBackURL CredentialType='NONE'>https://...</PostBackURL>
        <Applicant>...</Applicant>
        <Applicant>...</Applicant>
      </Account>
    </ScreenRequest>

All applicants go out in ONE request. The vendor's answer is passed back
untouched; whether one bad applicant rejects the whole batch is up to the
vendor, so no per-applicant meaning is read into it here.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List
from urllib.parse import urlparse
from xml.etree import ElementTree as ET

from .applicant import ApplicantRecord
from .config import SUBMIT_PATH
from .encoder import encode_applicant, xml_escape
from .envelope import Credential, log_request, partner_info_xml
from .errors import RequestFailed, ValidationError
from .http_client import HttpClient, ensure_ok, parse_response


logger = logging.getLogger(__name__)

ACCOUNT_LENGTH = 6


@dataclass
class ScreenResponse:
    """The vendor's answer to a submission, kept opaque."""

    status_code: int
    raw_xml: str
    document: ET.Element


def validate_account(account: str) -> None:
    if not isinstance(account, str) or len(account) != ACCOUNT_LENGTH:
        raise ValidationError(f"account must be exactly {ACCOUNT_LENGTH} characters")


def validate_postback_url(url: str) -> None:
    """The webhook must be an absolute URI (scheme and host)."""
    parsed = urlparse(url or "")
    if not (parsed.scheme and parsed.netloc):
        raise ValidationError(f"postback_url must be an absolute URI, got {url!r}")


# =============================================================================
# REQUEST BUILDER
# =============================================================================

class ScreenRequestBuilder:
    """
    Collects applicants one at a time, then renders the <ScreenRequest>.

    Usage:
        builder = ScreenRequestBuilder(credential, "123456", "https://hooks.example.com/x")
        for applicant in applicants:
            builder.add(applicant)
        body = builder.build()
    """

    def __init__(self, credential: Credential, account: str, postback_url: str):
        validate_account(account)
        validate_postback_url(postback_url)
        self.credential = credential
        self.account = account
        self.postback_url = postback_url
        self._fragments: List[str] = []

    def add(self, applicant: ApplicantRecord) -> "ScreenRequestBuilder":
        """Encode an applicant and append it to the batch. Raises ValidationError."""
        self._fragments.append(encode_applicant(applicant))
        return self

    def __len__(self) -> int:
        return len(self._fragments)

    def build(self, redact: bool = False) -> str:
        """
        Render the full request document.

        Args:
            redact: Mask the password (for debug logging)

        Raises:
            ValidationError: If no applicants were added
        """
        if not self._fragments:
            raise ValidationError("a screen request needs at least one applicant")

        return (
            "<ScreenRequest>"
            f"{partner_info_xml(self.credential, redact=redact)}"
            "<Account>"
            f"<AcctNbr>{xml_escape(self.account)}</AcctNbr>"
            f"<PostBackURL CredentialType='NONE'>{xml_escape(self.postback_url)}</PostBackURL>"
            f"{''.join(self._fragments)}"
            "</Account>"
            "</ScreenRequest>"
        )


# =============================================================================
# EXCHANGE
# =============================================================================

def submit_screens(
    client: HttpClient,
    credential: Credential,
    account: str,
    postback_url: str,
    applicants: Iterable[ApplicantRecord],
) -> ScreenResponse:
    """
    Submit a batch of applicants for screening.

    Args:
        client: HTTP client bound to the target environment
        credential: Partner credential
        account: 6-character account number
        postback_url: Absolute URI the vendor calls when reports complete
        applicants: Any iterable of applicants; consumed as it is read

    Returns:
        ScreenResponse with the parsed vendor answer

    Raises:
        ValidationError: Bad account, webhook, or applicant (nothing is sent)
        RequestFailed: Non-200 response or transport failure
        ResponseParseError: 200 response that is not XML
    """
    builder = ScreenRequestBuilder(credential, account, postback_url)
    for applicant in applicants:
        builder.add(applicant)

    body = builder.build()
    log_request(logger, builder.build(redact=True))

    logger.info(f"Submitting {len(builder)} applicant(s) to {SUBMIT_PATH}")
    try:
        status, _, text = client.post_xml(SUBMIT_PATH, body)
    except RequestFailed as e:
        logger.error(f"Submission failed: {e}")
        raise
    ensure_ok(SUBMIT_PATH, status, text)

    document = parse_response(text)
    logger.info(f"Submission accepted (HTTP {status})")
    return ScreenResponse(status_code=status, raw_xml=text, document=document)

