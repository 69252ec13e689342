"""Twilio Verify client wrapper for one-time passcodes."""

import asyncio
import logging

from twilio.base.exceptions import TwilioException
from twilio.rest import Client as TwilioClient

from app.core.exceptions import VerificationError
from app.settings import settings

logger = logging.getLogger(__name__)


class TwilioVerifyClient:
    """Twilio client wrapper for Verify v2 operations."""

    def __init__(
        self,
        account_sid: str | None = None,
        auth_token: str | None = None,
        service_sid: str | None = None,
    ) -> None:
        """Initialize Twilio client.

        Args:
            account_sid: Twilio account SID (defaults to settings)
            auth_token: Twilio auth token (defaults to settings)
            service_sid: Verify service SID (defaults to settings)
        """
        self.account_sid = account_sid or settings.twilio_account_sid
        self.auth_token = auth_token or settings.twilio_auth_token
        self.service_sid = service_sid or settings.twilio_verify_service_sid

        if not self.account_sid or not self.auth_token or not self.service_sid:
            raise ValueError("Twilio account SID, auth token and Verify service SID must be provided")

        self.client = TwilioClient(self.account_sid, self.auth_token)

    def _service(self):
        return self.client.verify.v2.services(self.service_sid)

    def send_code(self, phone: str) -> str:
        """Send a verification code by SMS.

        Args:
            phone: Recipient phone number

        Returns:
            Verification status reported by Twilio (normally "pending")

        Raises:
            VerificationError: If Twilio rejects the request
        """
        try:
            verification = self._service().verifications.create(to=phone, channel="sms")
        except TwilioException as e:
            raise VerificationError(f"Twilio verification send failed: {str(e)}") from e

        logger.info(f"Sent verification code to: {phone}, status: {verification.status}")
        return verification.status

    def check_code(self, phone: str, code: str) -> bool:
        """Check a verification code.

        Returns:
            True if Twilio approved the code

        Raises:
            VerificationError: If Twilio rejects the request
        """
        try:
            check = self._service().verification_checks.create(to=phone, code=code)
        except TwilioException as e:
            raise VerificationError(f"Twilio verification check failed: {str(e)}") from e

        approved = check.status == "approved"
        logger.info(f"Verification check for {phone}: {approved}")
        return approved

    async def send_code_async(self, phone: str) -> str:
        """Send a verification code without blocking the event loop."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.send_code, phone)

    async def check_code_async(self, phone: str, code: str) -> bool:
        """Check a verification code without blocking the event loop."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.check_code, phone, code)
