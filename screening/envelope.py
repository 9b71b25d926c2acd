"""
envelope.py - Credentials and the shared PartnerInfo block
===========================================================
Every request envelope starts with the same <PartnerInfo> block carrying the
partner user name and password.
"""

import logging
from dataclasses import dataclass, field

from .encoder import xml_escape
from .errors import XmlSyntaxError
from .formatter import format_xml


# Shown in debug output in place of the real password
REDACTED = "********"


@dataclass(frozen=True)
class Credential:
    """Partner user name and password, held only for the duration of a call."""

    username: str
    password: str = field(repr=False)


def partner_info_xml(credential: Credential, redact: bool = False) -> str:
    """
    Build the <PartnerInfo> block for a request envelope.

    Args:
        credential: The partner credential
        redact: Replace the password with REDACTED (for logging)
    """
    password = REDACTED if redact else credential.password
    return (
        "<PartnerInfo>"
        f"<UserName>{xml_escape(credential.username)}</UserName>"
        f"<Password>{xml_escape(password)}</Password>"
        "</PartnerInfo>"
    )


def log_request(log: logging.Logger, redacted_body: str) -> None:
    """Pretty-print an outgoing request at DEBUG level on the given logger."""
    if not log.isEnabledFor(logging.DEBUG):
        return
    try:
        log.debug("Request body:\n" + format_xml(redacted_body))
    except XmlSyntaxError as e:
        log.debug(f"Request body could not be formatted ({e}):\n{redacted_body}")
