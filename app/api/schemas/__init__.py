"""API schemas package."""

from app.api.schemas.lead import (
    SendOtpPayload,
    SubmissionPayload,
    VerifyOtpPayload,
)

__all__ = [
    "SendOtpPayload",
    "SubmissionPayload",
    "VerifyOtpPayload",
]
