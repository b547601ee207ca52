"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Optional response fields are omitted from the JSON body when unset.
"""

from pydantic import BaseModel, ConfigDict, Field


class SendOtpRequest(BaseModel):
    """Request model for OTP issuance."""

    username: str = Field(..., min_length=1, description="Display name for the identity")
    email: str = Field(..., min_length=1, description="Destination email address")


class SendOtpResponse(BaseModel):
    """Response model for OTP issuance."""

    model_config = ConfigDict(populate_by_name=True)

    accepted: bool
    rejection: str | None = None
    exposed_code: str | None = Field(
        default=None,
        alias="exposedCode",
        description="Returned only when the channel degraded to the logging fallback",
    )


class VerifyOtpRequest(BaseModel):
    """Request model for OTP verification."""

    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1, description="6-digit code received by email")


class IdentityResponse(BaseModel):
    """Public identity fields returned after verification."""

    id: int
    username: str
    email: str


class VerifyOtpResponse(BaseModel):
    """Response model for OTP verification."""

    verified: bool
    rejection: str | None = Field(default=None, description='"not_found", "mismatch" or "expired"')
    identity: IdentityResponse | None = None


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str


class DebugSmsRequest(BaseModel):
    """Request model for the SMS debug endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    phone_number: str = Field(..., min_length=1, alias="phoneNumber")
    message: str = Field(..., min_length=1)


class DebugSmsResponse(BaseModel):
    """Response model for the SMS debug endpoint."""

    success: bool
    message: str
