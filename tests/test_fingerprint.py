"""Tests for phone fingerprinting and directory formatting."""

import hashlib

from app.core.fingerprint import fingerprint_phone
from app.core.phone import format_phone_for_directory


def test_fingerprint_is_sha256_of_raw_phone():
    """Test fingerprint is the hex SHA-256 of the phone as typed."""
    expected = hashlib.sha256("802-555-0100".encode("utf-8")).hexdigest()

    assert fingerprint_phone("802-555-0100") == expected


def test_fingerprint_is_deterministic():
    """Test same phone always yields the same fingerprint."""
    assert fingerprint_phone("(802) 555-0100") == fingerprint_phone("(802) 555-0100")


def test_fingerprint_format():
    """Test fingerprint is 64 lowercase hex characters."""
    fingerprint = fingerprint_phone("8025550100")

    assert len(fingerprint) == 64
    assert fingerprint == fingerprint.lower()
    int(fingerprint, 16)


def test_fingerprint_does_not_normalize():
    """Test differently formatted numbers are different leads."""
    assert fingerprint_phone("802-555-0100") != fingerprint_phone("8025550100")


def test_format_phone_strips_separators_and_adds_country_code():
    """Test directory formatting of common US inputs."""
    assert format_phone_for_directory("(802) 555-0100") == "18025550100"
    assert format_phone_for_directory("802 555 0100") == "18025550100"
    assert format_phone_for_directory("1-802-555-0100") == "18025550100"


def test_format_phone_keeps_existing_country_code():
    """Test a number already starting with 1 is not prefixed again."""
    assert format_phone_for_directory("18025550100") == "18025550100"


def test_format_phone_only_strips_listed_separators():
    """Test plus signs and dots are passed through."""
    assert format_phone_for_directory("+1 802 555 0100") == "1+18025550100"
    assert format_phone_for_directory("802.555.0100") == "1802.555.0100"
