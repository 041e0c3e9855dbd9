"""Tests for secret masking."""

import pytest

from layerconf.core.masking import mask, mask_if_secret


@pytest.mark.parametrize("value", [None, ""])
def test_empty_values_mask_to_empty_string(value):
    assert mask(value) == ""


@pytest.mark.parametrize("value", ["a", "abc", "abcde"])
def test_short_values_are_fully_hidden(value):
    assert mask(value) == "***"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("abcdef", "ab****ef"),
        ("abcdefgh", "ab****gh"),
        ("abcdefghij", "ab******ij"),
        ("secret123456", "se********56"),
        ("default_password", "de************rd"),
    ],
)
def test_long_values_keep_two_characters_each_side(value, expected):
    assert mask(value) == expected


def test_masked_value_never_contains_the_middle():
    secret = "s3cr3t-t0ken-value"
    masked = mask(secret)
    assert secret[2:-2] not in masked
    assert len(masked) == len(secret)


def test_non_string_values_are_converted():
    assert mask(1234567) == "12****67"


def test_mask_if_secret():
    assert mask_if_secret("supersecret", True) == "su*******et"
    assert mask_if_secret("visible", False) == "visible"
    assert mask_if_secret(5000, False) == "5000"
    assert mask_if_secret(None, False) == "None"
    assert mask_if_secret("", True) == ""
