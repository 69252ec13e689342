"""Landing page submission webhooks."""

import json
import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.api.deps import get_submission_service
from app.api.schemas.lead import SubmissionPayload
from app.core.fingerprint import fingerprint_phone
from app.domain.models.lead import Submission
from app.domain.services.submission_service import SubmissionService, build_form_url
from app.infrastructure.cloud_tasks import CloudTasksClient, worker_url
from app.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


async def _parse_submission(request: Request) -> SubmissionPayload | JSONResponse:
    """Parse and validate a submission body, or build the 400 response."""
    raw_body = await request.body()
    logger.info(f"Received webhook body: {raw_body.decode(errors='replace')}")

    try:
        body = json.loads(raw_body)
        if not isinstance(body, dict):
            raise ValueError("body is not a JSON object")
        payload = SubmissionPayload(**body)
    except (ValueError, ValidationError) as e:
        logger.warning(f"Error parsing JSON: {e}")
        return JSONResponse(content={"error": "Invalid JSON format"}, status_code=400)

    if not payload.is_complete():
        return JSONResponse(content={"error": "Missing required fields"}, status_code=400)

    return payload


async def _dispatch(
    submission: Submission,
    background_tasks: BackgroundTasks,
    service: SubmissionService,
) -> None:
    """Hand the submission off so the response does not wait for the pipeline."""
    task_url = worker_url("/process-submission")
    if task_url:
        try:
            cloud_tasks = CloudTasksClient()
            await cloud_tasks.create_task_async(payload=submission.model_dump(), url=task_url)
            return
        except Exception as e:
            logger.error(f"Failed to queue submission, processing in background: {e}", exc_info=True)

    background_tasks.add_task(service.process_submission, submission)


@router.post("/webhook/framer-submission")
async def framer_submission_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    service: Annotated[SubmissionService, Depends(get_submission_service)],
) -> JSONResponse:
    """Accept a landing page form submission.

    The response is sent before processing; it does not reflect the
    pipeline outcome.
    """
    parsed = await _parse_submission(request)
    if isinstance(parsed, JSONResponse):
        return parsed

    await _dispatch(Submission(**parsed.model_dump()), background_tasks, service)

    return JSONResponse(
        content={
            "status": "success",
            "message": "Form submission received and processing",
        }
    )


@router.post("/webhook/landing-submission")
async def landing_submission_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    service: Annotated[SubmissionService, Depends(get_submission_service)],
) -> JSONResponse:
    """Accept a submission and return the prefilled registration form URL."""
    parsed = await _parse_submission(request)
    if isinstance(parsed, JSONResponse):
        return parsed

    await _dispatch(Submission(**parsed.model_dump()), background_tasks, service)

    redirect_url = build_form_url(
        settings.landing_redirect_url,
        parsed.first,
        parsed.last,
        fingerprint_phone(parsed.phone),
    )
    logger.info(f"Redirecting submission to: {redirect_url}")

    return JSONResponse(content={"status": "success", "redirect_url": redirect_url})
