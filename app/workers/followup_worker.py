"""Follow-up worker for processing scheduled reminder tasks."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_followup_service
from app.domain.models.lead import FollowupJob
from app.domain.services.followup_service import FollowUpService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/followup")
async def process_followup_task(
    payload: FollowupJob,
    service: Annotated[FollowUpService, Depends(get_followup_service)],
) -> dict[str, Any]:
    """Process a scheduled follow-up task.

    Called by Cloud Tasks at the job's due time. Handled failures answer
    200 so the queue does not redeliver; only unexpected errors return 500.
    """
    try:
        outcome = await service.run_followup(payload)
    except Exception as e:
        logger.error(f"Error processing follow-up task: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Follow-up processing failed: {str(e)}",
        )

    logger.info(f"Follow-up task result: {outcome.value}", extra={"fingerprint": payload.fingerprint})
    return {"status": outcome.value}
