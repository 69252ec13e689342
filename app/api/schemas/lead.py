"""Request schemas for lead intake and phone verification."""

from pydantic import BaseModel, ConfigDict


class SubmissionPayload(BaseModel):
    """Landing page form body.

    Fields default to None so that missing, null and empty values are all
    reported the same way ("Missing required fields").
    """

    first: str | None = None
    last: str | None = None
    phone: str | None = None

    def is_complete(self) -> bool:
        return bool(self.first and self.last and self.phone)


class SendOtpPayload(BaseModel):
    """Body for /send-otp. Extra fields are kept and returned on verification."""

    model_config = ConfigDict(extra="allow")

    phone: str = ""


class VerifyOtpPayload(BaseModel):
    """Body for /verify-otp."""

    phone: str = ""
    code: str = ""
