"""
DumbPad Backend — PIN Credential Unit Tests
=============================================

What:  Format validation and constant-time comparison of PINs.

Test Strategy:
    ✅ Every valid length (4-10) accepted
    ✅ Wrong length, non-digit, non-ASCII digit and non-str inputs rejected
    ✅ secure_compare returns False for non-str input without raising
    ✅ secure_compare always hands equal-length digests to compare_digest
"""

from unittest.mock import patch

import pytest

from dumbpad.services import credentials
from dumbpad.services.credentials import is_valid_format, secure_compare


class TestIsValidFormat:

    @pytest.mark.parametrize("length", range(4, 11))
    def test_valid_lengths(self, length):
        assert is_valid_format("7" * length)

    @pytest.mark.parametrize("pin", ["", "1", "123", "12345678901", "1" * 50])
    def test_wrong_length_rejected(self, pin):
        assert not is_valid_format(pin)

    @pytest.mark.parametrize(
        "pin",
        ["12a4", "12 34", " 1234", "1234 ", "1234\n", "-123", "12.34", "abcd", "١٢٣٤"],
    )
    def test_non_digit_rejected(self, pin):
        assert not is_valid_format(pin)

    @pytest.mark.parametrize("pin", [None, 1234, 12345.0, ["1234"], {"pin": "1234"}, b"1234", True])
    def test_non_string_rejected(self, pin):
        assert not is_valid_format(pin)


class TestSecureCompare:

    def test_equal_strings(self):
        assert secure_compare("482193", "482193")

    def test_mismatch(self):
        assert not secure_compare("482193", "482194")

    def test_different_lengths(self):
        assert not secure_compare("1234", "12345")
        assert not secure_compare("", "1234")

    @pytest.mark.parametrize("a, b", [(None, "1234"), ("1234", None), (1234, 1234), (b"1234", "1234")])
    def test_non_string_returns_false(self, a, b):
        assert secure_compare(a, b) is False

    def test_compares_fixed_size_digests(self):
        """Inputs of different lengths still reach compare_digest as 32-byte values."""
        with patch.object(credentials.hmac, "compare_digest", return_value=False) as mock_cmp:
            secure_compare("1234", "1234567890")

        mock_cmp.assert_called_once()
        left, right = mock_cmp.call_args.args
        assert isinstance(left, bytes) and isinstance(right, bytes)
        assert len(left) == len(right) == 32

    def test_no_early_exit_on_length(self):
        """compare_digest runs even when the lengths differ."""
        with patch.object(credentials.hmac, "compare_digest", return_value=False) as mock_cmp:
            assert not secure_compare("1", "1234567890")
        mock_cmp.assert_called_once()
