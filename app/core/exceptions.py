"""Exceptions raised by outbound integrations."""


class IntegrationError(Exception):
    """Base exception for remote dependency failures."""
    pass


class ContactDirectoryError(IntegrationError):
    """Contact directory (TextMagic) request failed or returned bad data."""
    pass


class RecordStoreError(IntegrationError):
    """Record store (Airtable) request failed or returned bad data."""
    pass


class LinkShortenerError(IntegrationError):
    """Link shortener (Short.io) request failed or returned bad data."""
    pass


class SchedulingError(IntegrationError):
    """Follow-up job could not be submitted to the scheduler."""
    pass


class VerificationError(IntegrationError):
    """OTP provider (Twilio Verify) request failed."""
    pass
