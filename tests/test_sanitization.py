"""Tests for input sanitization helpers."""

import pytest

from app.core.sanitization import (
    sanitize_email,
    sanitize_name,
    validate_email,
    validate_username,
)


class TestSanitizeEmail:
    def test_trims_and_lowercases(self):
        assert sanitize_email("  Alice@X.com ") == "alice@x.com"

    def test_keeps_ampersand(self):
        assert sanitize_email("a&b@x.com") == "a&b@x.com"

    def test_empty(self):
        assert sanitize_email("") == ""


class TestValidateEmail:
    @pytest.mark.parametrize(
        "email",
        ["alice@x.com", "a&b@x.com", "o'brien@x.com", "x+tag@mail.example.org", "a!#$%*/=?^_`{|}~-@x.io"],
    )
    def test_accepts(self, email):
        assert validate_email(email) is True

    @pytest.mark.parametrize("email", ["", "alice", "alice@", "@x.com", "alice@x", "a b@x.com"])
    def test_rejects(self, email):
        assert validate_email(email) is False


class TestNamesAndUsernames:
    def test_sanitize_name_strips_tags(self):
        assert sanitize_name("  <b>Alice</b>   Smith ") == "Alice Smith"

    def test_validate_username(self):
        assert validate_username("alice.smith-1") is True
        assert validate_username("al") is False
        assert validate_username("<b>alice</b>") is False
