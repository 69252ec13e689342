"""Submission worker for processing queued landing page submissions."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from app.api.deps import get_submission_service
from app.api.schemas.lead import SubmissionPayload
from app.domain.models.lead import Submission
from app.domain.services.submission_service import SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/process-submission")
async def process_submission_task(
    payload: SubmissionPayload,
    service: Annotated[SubmissionService, Depends(get_submission_service)],
) -> JSONResponse:
    """Process a queued submission.

    Called by Cloud Tasks right after the webhook acknowledged the form.
    The pipeline logs and absorbs remote failures, so a 200 is returned
    for every outcome and the queue never retries.
    """
    if not payload.is_complete():
        logger.warning("Queued submission is missing required fields")
        return JSONResponse(content={"error": "Missing required fields"}, status_code=400)

    try:
        outcome = await service.process_submission(Submission(**payload.model_dump()))
    except Exception as e:
        logger.error(f"Error processing submission task: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Submission processing failed: {str(e)}",
        )

    return JSONResponse(content={"status": outcome.value})
