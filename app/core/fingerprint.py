"""Phone fingerprinting for deduplication and opaque external identifiers."""

import hashlib


def fingerprint_phone(phone: str) -> str:
    """Return the lowercase hex SHA-256 digest of a raw phone string.

    The value is hashed exactly as submitted. "802-555-0100" and
    "8025550100" produce different fingerprints; the contact directory's
    own formatting (see app.core.phone) is not applied here.

    Args:
        phone: Phone number as typed by the submitter

    Returns:
        64-character hex fingerprint
    """
    return hashlib.sha256(phone.encode("utf-8")).hexdigest()
