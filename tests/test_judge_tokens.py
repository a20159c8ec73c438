from datetime import datetime, timedelta, timezone

import pytest

from hackathon_core import JudgeToken, PolicyConfig, authenticate_token, generate_secure_token, validate_judge_token
from hackathon_core.judge_tokens import is_token_expired, is_valid_token_format
from hackathon_core.roles import (
    is_elevated_role,
    is_valid_profile_role,
    migrate_legacy_role,
    validate_profile_role_update,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
H = timedelta(hours=1)
D = timedelta(days=1)

TOKEN = "ab" * 32


def _record(**fields) -> JudgeToken:
    base = {"token": TOKEN, "judge_id": "j1", "event_id": "e1", "expires_at": NOW + 10 * D}
    base.update(fields)
    return JudgeToken(**base)


def test_generated_token_shape():
    generated = generate_secure_token(NOW)
    assert len(generated.token) == 64
    assert is_valid_token_format(generated.token)
    assert generated.expires_at == NOW + 30 * D
    assert generate_secure_token(NOW).token != generated.token


def test_generated_token_expiry():
    assert generate_secure_token(NOW, expiry_days=7).expires_at == NOW + 7 * D
    config = PolicyConfig(token_expiry_days=3)
    assert generate_secure_token(NOW, config=config).expires_at == NOW + 3 * D


@pytest.mark.parametrize("token", [None, 42, "", "abc", "zz" * 32, "ab" * 15])
def test_invalid_token_format(token):
    assert not is_valid_token_format(token)


def test_token_expiry_is_strict():
    assert not is_token_expired(NOW, NOW)
    assert is_token_expired(NOW - H, NOW)
    assert is_token_expired("2026-02-01T00:00:00Z", NOW)
    assert is_token_expired("whenever", NOW)


def test_authenticate():
    result = authenticate_token(TOKEN, _record(), NOW)
    assert result.success
    assert (result.judge_id, result.event_id) == ("j1", "e1")


def test_authenticate_is_case_insensitive():
    assert authenticate_token(TOKEN.upper(), _record(), NOW).success


@pytest.mark.parametrize(
    "token, record, error",
    [
        ("short", _record(), "invalid_format"),
        (TOKEN, None, "not_found"),
        (TOKEN, _record(revoked=True), "not_found"),
        ("cd" * 32, _record(), "not_found"),
        (TOKEN, _record(expires_at=NOW - H), "expired"),
    ],
)
def test_authenticate_failures(token, record, error):
    result = authenticate_token(token, record, NOW)
    assert not result.success
    assert result.error == error
    assert result.judge_id is None


def test_validate_judge_token():
    assert validate_judge_token(_record(), NOW).is_valid
    assert validate_judge_token(_record(revoked=True), NOW).errors == ["Judge token has been revoked"]
    assert validate_judge_token(_record(expires_at=NOW - H), NOW).errors == ["Judge token has expired"]
    soon = validate_judge_token(_record(expires_at=NOW + 5 * H), NOW)
    assert soon.is_valid
    assert soon.warnings == ["Token expires in 5 hours"]


def test_naive_expiry_is_utc():
    record = _record(expires_at=(NOW + 2 * D).replace(tzinfo=None))
    assert record.expires_at == NOW + 2 * D


# ==================== PROFILE ROLES ====================


def test_profile_roles():
    assert is_valid_profile_role("organizer")
    assert not is_valid_profile_role("judge")
    assert not is_valid_profile_role(None)
    assert is_elevated_role("admin")
    assert not is_elevated_role("user")


def test_role_update_rejects_unknown():
    assert validate_profile_role_update("admin") == "admin"
    with pytest.raises(ValueError, match="Invalid profile role: judge"):
        validate_profile_role_update("judge")


@pytest.mark.parametrize("role, expected", [("judge", "user"), ("admin", "admin"), ("wizard", "user")])
def test_migrate_legacy_role(role, expected):
    assert migrate_legacy_role(role) == expected
