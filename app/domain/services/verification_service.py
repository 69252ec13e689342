"""Phone verification service for one-time passcodes."""

import logging
from typing import Any

from app.infrastructure.kv_store import TtlStore
from app.infrastructure.twilio_client import TwilioVerifyClient
from app.settings import settings

logger = logging.getLogger(__name__)

COOLDOWN_PREFIX = "otp:cooldown:"
PENDING_PREFIX = "otp:pending:"


class ResendCooldownError(Exception):
    """A code was sent to this phone too recently."""

    def __init__(self, retry_after_seconds: int) -> None:
        super().__init__(f"Please wait {retry_after_seconds} seconds before requesting a new code")
        self.retry_after_seconds = retry_after_seconds


class VerificationExpiredError(Exception):
    """No pending verification exists for this phone (never sent or expired)."""
    pass


class InvalidCodeError(Exception):
    """The provider did not approve the submitted code."""
    pass


class VerificationService:
    """Send and check OTP codes with a per-phone resend cooldown.

    Cooldowns and pending verifications live in the injected TTL store, so
    they are shared across instances when the store is Redis.
    """

    def __init__(
        self,
        provider: TwilioVerifyClient,
        store: TtlStore,
        cooldown_seconds: int | None = None,
        pending_ttl_seconds: int | None = None,
    ) -> None:
        self.provider = provider
        self.store = store
        self.cooldown_seconds = (
            cooldown_seconds if cooldown_seconds is not None else settings.otp_resend_cooldown_seconds
        )
        self.pending_ttl_seconds = (
            pending_ttl_seconds if pending_ttl_seconds is not None else settings.otp_pending_ttl_seconds
        )

    async def send_code(self, phone: str, data: dict[str, Any] | None = None) -> None:
        """Send a code to phone and remember data until it is verified.

        Raises:
            ResendCooldownError: If a code was sent within the cooldown window
            VerificationError: If the provider request fails
        """
        cooldown_key = f"{COOLDOWN_PREFIX}{phone}"
        if self.cooldown_seconds > 0:
            # Claimed before the provider call, released if the send fails
            claimed = await self.store.set_if_absent(cooldown_key, "1", self.cooldown_seconds)
            if not claimed:
                remaining = await self.store.remaining_ttl(cooldown_key) or 1
                logger.info(f"OTP resend blocked for {phone}, {remaining}s remaining")
                raise ResendCooldownError(remaining)

        try:
            await self.provider.send_code_async(phone)
        except Exception:
            await self.store.delete(cooldown_key)
            raise

        await self.store.set_json(
            f"{PENDING_PREFIX}{phone}",
            {"phone": phone, "data": data or {}},
            self.pending_ttl_seconds,
        )

    async def verify_code(self, phone: str, code: str) -> dict[str, Any]:
        """Check a code and release the data stored when it was sent.

        Raises:
            VerificationExpiredError: If there is no live pending verification
            InvalidCodeError: If the code is not approved
            VerificationError: If the provider request fails
        """
        pending_key = f"{PENDING_PREFIX}{phone}"
        pending = await self.store.get_json(pending_key)
        if pending is None:
            raise VerificationExpiredError("verification expired")

        if not await self.provider.check_code_async(phone, code):
            raise InvalidCodeError("invalid verification code")

        await self.store.delete(pending_key)
        logger.info(f"Phone verified: {phone}")
        return pending.get("data") or {}
