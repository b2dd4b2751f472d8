"""Tests for deterministic backend selection.

Test Coverage:
- Hash values match the 32-bit multiply-by-31 string hash
- Signed overflow wraps instead of growing
- Seeds are stable, in range and user-sticky
- Selection over candidate lists, including the empty-list error
- Rough load spread across interchangeable backends
"""

from __future__ import annotations

from collections import Counter

import pytest

from switchboard.routing.selector import routing_seed, seed_string, select, string_hash


class TestStringHash:
    """Tests for string_hash."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("", 0),
            ("a", 97),
            ("hi", 3329),
            ("abc", 96354),
            ("hello", 99162322),
        ],
    )
    def test_known_values(self, text, expected):
        """Hash matches known reference values."""
        assert string_hash(text) == expected

    def test_wraps_to_signed_32_bit(self):
        """Overflow wraps into the signed 32-bit range."""
        assert string_hash("polygenelubricants") == -(2**31)

    def test_hashes_utf16_code_units(self):
        """Characters outside the BMP hash as their surrogate pair."""
        assert string_hash("\U0001F600") == 0xD83D * 31 + 0xDE00

    def test_result_always_in_int32_range(self):
        """Long inputs stay within the signed 32-bit range."""
        value = string_hash("x" * 5000)
        assert -(2**31) <= value < 2**31


class TestRoutingSeed:
    """Tests for routing_seed and seed_string."""

    def test_seed_string_with_user(self):
        """User id prefixes the message."""
        assert seed_string("hi", "u-1") == "u-1:hi"

    def test_seed_string_without_user(self):
        """Without a user id the message is the seed."""
        assert seed_string("hi") == "hi"
        assert seed_string("hi", "") == "hi"

    def test_known_seed(self):
        """Seed is abs(hash) % 100."""
        assert routing_seed("hello") == 22
        assert routing_seed("hi") == 29
        assert routing_seed("polygenelubricants") == 48

    def test_seed_is_deterministic(self):
        """Repeated calls give the same value."""
        seeds = {routing_seed("route me please", "user-7") for _ in range(20)}
        assert len(seeds) == 1

    def test_user_changes_seed_space(self):
        """Different users spread the same message over many seeds."""
        seeds = {routing_seed("hello", f"user-{i}") for i in range(500)}
        assert len(seeds) > 50

    @pytest.mark.parametrize("message", ["", "a", "hello world", "उसका", "x" * 1000])
    def test_seed_range(self, message):
        """Seeds are always in [0, 100)."""
        assert 0 <= routing_seed(message) < 100


class TestSelect:
    """Tests for select."""

    def test_selects_by_modulo(self):
        """Index is seed modulo list length."""
        assert select(0, ["a", "b", "c"]) == "a"
        assert select(4, ["a", "b", "c"]) == "b"
        assert select(99, ["a", "b"]) == "b"

    def test_single_candidate(self):
        """A one-element list always yields that element."""
        assert select(57, ["only"]) == "only"

    def test_empty_candidates_raise(self):
        """An empty list cannot be selected from."""
        with pytest.raises(ValueError):
            select(3, [])

    def test_spread_across_candidates(self):
        """Realistic message seeds spread roughly evenly over three backends."""
        candidates = ["a", "b", "c"]
        counts = Counter(select(routing_seed(f"msg-{i}"), candidates) for i in range(1000))
        assert set(counts) == set(candidates)
        for backend in candidates:
            assert 200 <= counts[backend] <= 470
