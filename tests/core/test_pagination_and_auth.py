"""Tests for pagination helpers and the shared-secret guard."""

import sys

import pytest

from verbario.core.authorization import SecretGuard
from verbario.core.errors import Forbidden
from verbario.core.pagination import (
    MAX_LIMIT,
    MAX_PAGE,
    clamp_limit,
    clamp_page,
    normalize_query,
    offset_for,
)


class TestClamping:
    """Tests for page/limit clamping."""

    @pytest.mark.parametrize(
        "raw,expected",
        [(None, 1), ("", 1), (0, 1), (-2, 1), ("3", 3), (7, 7), ("x", 1)],
    )
    def test_clamp_page(self, raw, expected):
        assert clamp_page(raw) == expected

    @pytest.mark.parametrize(
        "raw,expected",
        [(None, 20), (0, 1), (-5, 1), (50, 50), ("100", 100), (101, 100), ("x", 20)],
    )
    def test_clamp_limit(self, raw, expected):
        assert clamp_limit(raw) == expected

    def test_page_capped_to_sqlite_integer_range(self):
        """Offsets never exceed a 64-bit signed integer."""
        assert clamp_page(2**62) == MAX_PAGE
        assert clamp_page(str(10**30)) == MAX_PAGE
        assert offset_for(MAX_PAGE, MAX_LIMIT) <= sys.maxsize

    def test_offset(self):
        assert offset_for(1, 20) == 0
        assert offset_for(2, 10) == 10

    def test_blank_query_means_no_filter(self):
        assert normalize_query(None) is None
        assert normalize_query("  ") is None
        assert normalize_query("abl") == "abl"


class TestSecretGuard:
    """Tests for SecretGuard."""

    def test_trimmed_match_authorized(self):
        guard = SecretGuard(" secret\n")
        assert guard.is_authorized(" secret ")
        guard.authorize("secret")

    def test_mismatch_forbidden(self):
        guard = SecretGuard("secret")
        assert not guard.is_authorized("secret2")
        with pytest.raises(Forbidden):
            guard.authorize("secret2")

    def test_empty_supplied_forbidden(self):
        guard = SecretGuard("secret")
        for supplied in (None, "", "  "):
            with pytest.raises(Forbidden):
                guard.authorize(supplied)

    def test_non_string_secret_compared_as_text(self):
        """Numeric secrets are compared by their string form."""
        guard = SecretGuard("12345")
        assert guard.is_authorized(12345)
        assert not guard.is_authorized(1234)

    def test_unconfigured_secret_denies_everything(self):
        guard = SecretGuard("")
        assert not guard.is_authorized("")
        assert not guard.is_authorized("anything")
