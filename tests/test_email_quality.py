import asyncio

import pytest

from hackathon_core import email_quality, is_disposable_domain, is_safe_domain, validate_email, validate_email_quick
from hackathon_core.email_quality import extract_domain, is_valid_email_format


class FakeOracle:
    """Answers MX lookups from a fixed table and records what was asked."""

    def __init__(self, answers=None, error=None):
        self.answers = answers or {}
        self.error = error
        self.calls = []

    async def has_mx_record(self, domain):
        self.calls.append(domain)
        if self.error is not None:
            raise self.error
        return self.answers.get(domain, False)


def _run(email, oracle):
    return asyncio.run(validate_email(email, oracle))


@pytest.mark.parametrize(
    "domain",
    ["mailinator.com", "inbox.mailinator.com", "tempinbox.net", "my-throwaway-box.io", "disposablemail.org"],
)
def test_disposable_domains(domain):
    assert is_disposable_domain(domain)


@pytest.mark.parametrize("domain", ["gmail.com", "example.com", "university.edu", "notmailinator.com"])
def test_regular_domains(domain):
    assert not is_disposable_domain(domain)


def test_domain_checks_ignore_case_and_space():
    assert is_disposable_domain("  YOPMAIL.com ")
    assert is_safe_domain("GMAIL.COM")


@pytest.mark.parametrize("domain", ["mailcatch.com", "discard.email", "spam4.me", "mailnull.com", "0-mail.com"])
def test_listed_throwaway_providers(domain):
    assert is_disposable_domain(domain)
    assert is_disposable_domain(f"inbox.{domain}")


def test_safe_list_wins_over_patterns(monkeypatch):
    assert is_disposable_domain("tempo.com")
    monkeypatch.setattr(email_quality, "SAFE_DOMAINS", email_quality.SAFE_DOMAINS | {"tempo.com"})
    assert not is_disposable_domain("tempo.com")


def test_format_and_extract_domain():
    assert is_valid_email_format("ada@example.com")
    assert not is_valid_email_format("ada@example")
    assert not is_valid_email_format("a da@example.com")
    assert not is_valid_email_format(None)
    assert not is_valid_email_format("a" * 250 + "@x.io")
    assert extract_domain("Ada@Example.COM") == "example.com"
    with pytest.raises(ValueError):
        extract_domain("no-at-sign")


def test_quick_check():
    ok = validate_email_quick("ada@example.com")
    assert ok.is_valid
    assert ok.domain == "example.com"
    assert ok.has_mx is None

    bad = validate_email_quick("ada@mailinator.com")
    assert not bad.is_valid
    assert bad.is_disposable
    assert bad.issues == ["Disposable/temporary email addresses are not allowed"]

    malformed = validate_email_quick("nope")
    assert malformed.issues == ["Invalid email format"]


def test_full_check_with_mx():
    oracle = FakeOracle({"example.com": True})
    result = _run("ada@example.com", oracle)
    assert result.is_valid
    assert result.has_mx is True
    assert oracle.calls == ["example.com"]


def test_full_check_without_mx():
    result = _run("ada@nowhere.example", FakeOracle())
    assert not result.is_valid
    assert result.has_mx is False
    assert result.issues == ["Temporary emails are not allowed"]


def test_disposable_skips_oracle():
    oracle = FakeOracle({"mailinator.com": True})
    result = _run("ada@mailinator.com", oracle)
    assert not result.is_valid
    assert result.issues == ["Temporary emails are not allowed"]
    assert oracle.calls == []


def test_safe_domain_with_mx():
    result = _run("ada@gmail.com", FakeOracle({"gmail.com": True}))
    assert result.is_valid
    assert result.is_safe


def test_oracle_failure_is_reported():
    result = _run("ada@example.com", FakeOracle(error=TimeoutError("dns timeout")))
    assert not result.is_valid
    assert result.has_mx is None
    assert result.issues == ["Unable to verify email domain"]


def test_malformed_email_skips_oracle():
    oracle = FakeOracle()
    result = _run("not-an-email", oracle)
    assert result.issues == ["Invalid email format"]
    assert oracle.calls == []
