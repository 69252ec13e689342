"""Domain services."""

from app.domain.services.followup_service import FollowUpService
from app.domain.services.submission_service import SubmissionService
from app.domain.services.verification_service import VerificationService

__all__ = ["SubmissionService", "FollowUpService", "VerificationService"]
