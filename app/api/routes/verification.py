"""Phone verification (OTP) endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.deps import get_verification_service
from app.api.schemas.lead import SendOtpPayload, VerifyOtpPayload
from app.core.exceptions import VerificationError
from app.domain.services.verification_service import (
    InvalidCodeError,
    ResendCooldownError,
    VerificationExpiredError,
    VerificationService,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/send-otp")
async def send_otp(
    payload: SendOtpPayload,
    service: Annotated[VerificationService, Depends(get_verification_service)],
) -> JSONResponse:
    """Send a one-time code to a phone, at most once per cooldown window."""
    if not payload.phone:
        return JSONResponse(content={"error": "Phone number is required"}, status_code=400)

    try:
        await service.send_code(payload.phone, data=payload.model_extra)
    except ResendCooldownError as e:
        return JSONResponse(
            content={"error": str(e), "retryAfter": e.retry_after_seconds},
            status_code=429,
            headers={"Retry-After": str(e.retry_after_seconds)},
        )
    except VerificationError as e:
        logger.error(f"Error sending verification code: {e}")
        return JSONResponse(content={"error": "Failed to send verification code"}, status_code=502)

    return JSONResponse(content={"status": "pending"})


@router.post("/verify-otp")
async def verify_otp(
    payload: VerifyOtpPayload,
    service: Annotated[VerificationService, Depends(get_verification_service)],
) -> JSONResponse:
    """Check a one-time code and return the data captured when it was sent."""
    if not payload.phone or not payload.code:
        return JSONResponse(content={"error": "Phone and code are required"}, status_code=400)

    try:
        data = await service.verify_code(payload.phone, payload.code)
    except VerificationExpiredError:
        return JSONResponse(content={"error": "Verification expired"}, status_code=410)
    except InvalidCodeError:
        return JSONResponse(content={"error": "Invalid verification code"}, status_code=400)
    except VerificationError as e:
        logger.error(f"Error checking verification code: {e}")
        return JSONResponse(content={"error": "Failed to verify code"}, status_code=502)

    return JSONResponse(content={"status": "approved", "data": data})
