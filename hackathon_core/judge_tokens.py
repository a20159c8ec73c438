"""Tokenized judge access.

Judges score through emailed links instead of accounts. The token string is
64 hex characters from a CSPRNG; storage and lookup belong to the caller,
which hands the stored row back here for the expiry/revocation decision.
"""
from __future__ import annotations

import logging
import re
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Literal, Optional

from .config import DEFAULT_POLICY, PolicyConfig
from .timeutil import hours_between, parse_instant
from .types import JudgeToken, Verdict

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32

_HEX_RE = re.compile(r"^[a-fA-F0-9]+$")

TokenError = Literal["invalid_format", "not_found", "expired"]


@dataclass(frozen=True)
class GeneratedToken:
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenAuthResult:
    success: bool
    error: Optional[TokenError] = None
    judge_id: Optional[str] = None
    event_id: Optional[str] = None


def generate_secure_token(
    now: datetime,
    expiry_days: Optional[int] = None,
    config: PolicyConfig = DEFAULT_POLICY,
) -> GeneratedToken:
    days = config.token_expiry_days if expiry_days is None else expiry_days
    issued_at = parse_instant(now) or now
    return GeneratedToken(
        token=secrets.token_hex(TOKEN_BYTES),
        expires_at=issued_at + timedelta(days=days),
    )


def is_valid_token_format(token: Any, config: PolicyConfig = DEFAULT_POLICY) -> bool:
    if not isinstance(token, str):
        return False
    if len(token) < config.token_min_length:
        return False
    return bool(_HEX_RE.match(token))


def is_token_expired(expires_at: Any, now: datetime) -> bool:
    """Expired strictly after `expires_at`; an unparsable expiry counts as expired."""
    expiry = parse_instant(expires_at)
    if expiry is None:
        logger.warning(f"Unparsable token expiry: {expires_at!r}")
        return True
    return (parse_instant(now) or now) > expiry


def authenticate_token(
    token: Any,
    record: Optional[JudgeToken],
    now: datetime,
    config: PolicyConfig = DEFAULT_POLICY,
) -> TokenAuthResult:
    """Match a presented token against the stored row (None when the lookup missed)."""
    if not is_valid_token_format(token, config):
        return TokenAuthResult(success=False, error="invalid_format")
    if record is None or record.revoked:
        return TokenAuthResult(success=False, error="not_found")
    if not secrets.compare_digest(token.lower(), record.token.lower()):
        return TokenAuthResult(success=False, error="not_found")
    if is_token_expired(record.expires_at, now):
        return TokenAuthResult(success=False, error="expired")
    return TokenAuthResult(success=True, judge_id=record.judge_id, event_id=record.event_id)


def validate_judge_token(token: JudgeToken, now: datetime) -> Verdict:
    if token.revoked:
        return Verdict.fail("Judge token has been revoked")

    now = parse_instant(now) or now
    if is_token_expired(token.expires_at, now):
        return Verdict.fail("Judge token has expired")

    hours_left = hours_between(now, token.expires_at)
    if hours_left <= 24:
        return Verdict(warnings=[f"Token expires in {round(hours_left)} hours"])
    return Verdict.ok()


__all__ = [
    "GeneratedToken",
    "TOKEN_BYTES",
    "TokenAuthResult",
    "authenticate_token",
    "generate_secure_token",
    "is_token_expired",
    "is_valid_token_format",
    "validate_judge_token",
]
