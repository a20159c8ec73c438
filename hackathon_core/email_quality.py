"""Email address quality checks.

The disposable-domain judgment is pure and synchronous. Whether a domain can
actually receive mail is answered by an injected MxOracle (DNS lives outside
the core); validate_email() awaits it and folds the answer into the verdict.
"""
from __future__ import annotations

import fnmatch
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from disposable_email_domains import blocklist

logger = logging.getLogger(__name__)

EMAIL_MAX_LENGTH = 254

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Providers that bypass every disposable heuristic.
SAFE_DOMAINS = frozenset(
    {
        "gmail.com",
        "outlook.com",
        "hotmail.com",
        "yahoo.com",
        "icloud.com",
        "protonmail.com",
        "proton.me",
        "aol.com",
        "live.com",
        "msn.com",
        "comcast.net",
        "verizon.net",
        "att.net",
        "sbcglobal.net",
        "cox.net",
        "charter.net",
        "earthlink.net",
    }
)

# Community-maintained throwaway provider list (about 10k domains).
DISPOSABLE_DOMAINS: frozenset[str] = frozenset(blocklist)

# Shell-style patterns matched against the full domain.
DISPOSABLE_PATTERNS: tuple[str, ...] = (
    "temp*",
    "*throwaway*",
    "*trashmail*",
    "*guerrillamail*",
    "*10minute*",
    "disposable*",
)


class MxOracle(Protocol):
    async def has_mx_record(self, domain: str) -> bool:
        ...


@dataclass
class EmailCheck:
    is_valid: bool = False
    domain: str = ""
    issues: List[str] = field(default_factory=list)
    is_safe: bool = False
    is_disposable: bool = False
    # None when no MX lookup was performed.
    has_mx: Optional[bool] = None


def extract_domain(email: str) -> str:
    at = email.rfind("@")
    if at == -1:
        raise ValueError("Invalid email format")
    return email[at + 1 :].strip().lower()


def is_valid_email_format(email: object) -> bool:
    if not isinstance(email, str):
        return False
    return bool(_EMAIL_RE.match(email)) and len(email) <= EMAIL_MAX_LENGTH


def is_safe_domain(domain: str) -> bool:
    return domain.strip().lower() in SAFE_DOMAINS


def is_disposable_domain(domain: str) -> bool:
    """True for known throwaway providers, their subdomains, and look-alike names.

    Domains on the safe list are never disposable, even if a pattern matches.
    """
    normalized = domain.strip().lower()
    if normalized in SAFE_DOMAINS:
        return False
    if normalized in DISPOSABLE_DOMAINS:
        return True
    labels = normalized.split(".")
    if any(".".join(labels[i:]) in DISPOSABLE_DOMAINS for i in range(1, len(labels) - 1)):
        return True
    return any(fnmatch.fnmatchcase(normalized, pattern) for pattern in DISPOSABLE_PATTERNS)


def _screen(email: str) -> EmailCheck:
    result = EmailCheck()
    if not is_valid_email_format(email):
        result.issues.append("Invalid email format")
        return result
    result.domain = extract_domain(email)
    result.is_safe = is_safe_domain(result.domain)
    if not result.is_safe:
        result.is_disposable = is_disposable_domain(result.domain)
    return result


def validate_email_quick(email: str) -> EmailCheck:
    """Format and disposable-domain screening without any lookup."""
    result = _screen(email)
    if result.is_disposable:
        result.issues.append("Disposable/temporary email addresses are not allowed")
    result.is_valid = not result.issues
    return result


async def validate_email(email: str, mx_oracle: MxOracle) -> EmailCheck:
    """Full admission check: format, disposable screening, then the MX oracle.

    The oracle is skipped for disposable domains. An oracle failure is an
    issue on the result, not an exception.
    """
    result = _screen(email)
    if result.issues:
        return result

    if result.is_disposable:
        result.issues.append("Temporary emails are not allowed")
    else:
        try:
            result.has_mx = bool(await mx_oracle.has_mx_record(result.domain))
        except Exception as e:
            logger.warning(f"MX lookup failed for domain {result.domain}: {e}")
            result.issues.append("Unable to verify email domain")
        else:
            if not result.has_mx:
                result.issues.append("Temporary emails are not allowed")

    result.is_valid = not result.issues and (result.is_safe or bool(result.has_mx))
    return result


__all__ = [
    "DISPOSABLE_DOMAINS",
    "DISPOSABLE_PATTERNS",
    "EmailCheck",
    "MxOracle",
    "SAFE_DOMAINS",
    "extract_domain",
    "is_disposable_domain",
    "is_safe_domain",
    "is_valid_email_format",
    "validate_email",
    "validate_email_quick",
]
