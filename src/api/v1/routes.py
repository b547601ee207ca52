"""
API v1 routes.

Defines the OTP authentication endpoints:
- POST /v1/auth/send-otp - Validate address, issue and deliver an OTP
- POST /v1/auth/verify-otp - Verify a presented OTP
"""

from fastapi import APIRouter, Depends, Response, status
from fastapi.concurrency import run_in_threadpool

from src.api.dependencies import get_auth_workflow
from src.api.models import (
    ErrorResponse,
    IdentityResponse,
    SendOtpRequest,
    SendOtpResponse,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from src.domain.exceptions import AddressRejected
from src.domain.ports import DeliveryStatus, VerifyResult
from src.domain.workflow import AuthWorkflow

router = APIRouter(prefix="/auth", tags=["v1"])

# HTTP status per verification failure
_VERIFY_FAILURE_STATUS = {
    VerifyResult.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    VerifyResult.MISMATCH: status.HTTP_400_BAD_REQUEST,
    VerifyResult.EXPIRED: status.HTTP_400_BAD_REQUEST,
}


@router.post(
    "/send-otp",
    response_model=SendOtpResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": SendOtpResponse, "description": "Email address rejected"},
        422: {"description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
        502: {"model": SendOtpResponse, "description": "Notification channel failed"},
    },
    summary="Request a one-time passcode",
    description="Validate the email address, issue a 6-digit OTP valid for 10 minutes "
    "and send it through the configured notification channel.",
)
async def send_otp(
    request_data: SendOtpRequest,
    response: Response,
    workflow: AuthWorkflow = Depends(get_auth_workflow),
) -> SendOtpResponse:
    """
    Issue and deliver an OTP.

    - **username**: Display name
    - **email**: Destination address

    exposedCode is present only when the channel degraded to console logging.
    """
    try:
        # DNS lookups and the managed API call block; keep them off the event loop
        outcome = await run_in_threadpool(
            workflow.request_otp, request_data.username, request_data.email
        )
    except AddressRejected as exc:
        response.status_code = status.HTTP_400_BAD_REQUEST
        return SendOtpResponse(accepted=False, rejection=exc.reason)

    if outcome.status is DeliveryStatus.FAILED:
        response.status_code = status.HTTP_502_BAD_GATEWAY
        return SendOtpResponse(accepted=False, rejection=outcome.reason)

    return SendOtpResponse(accepted=True, exposed_code=outcome.exposed_code)


@router.post(
    "/verify-otp",
    response_model=VerifyOtpResponse,
    response_model_exclude_none=True,
    responses={
        400: {"model": VerifyOtpResponse, "description": "Code mismatch or expired"},
        404: {"model": VerifyOtpResponse, "description": "Unknown email"},
        422: {"description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Verify a one-time passcode",
    description="Verify the code sent to the email address. On success the identity "
    "is marked verified and the code is consumed.",
)
async def verify_otp(
    request_data: VerifyOtpRequest,
    response: Response,
    workflow: AuthWorkflow = Depends(get_auth_workflow),
) -> VerifyOtpResponse:
    """
    Verify an OTP.

    - **username**: Display name (not compared)
    - **email**: Address the code was sent to
    - **code**: 6-digit code
    """
    outcome = await run_in_threadpool(
        workflow.confirm_otp, request_data.username, request_data.email, request_data.code
    )

    if outcome.verified and outcome.identity is not None:
        identity = outcome.identity
        return VerifyOtpResponse(
            verified=True,
            identity=IdentityResponse(id=identity.id, username=identity.username, email=identity.email),
        )

    response.status_code = _VERIFY_FAILURE_STATUS[outcome.result]
    return VerifyOtpResponse(verified=False, rejection=outcome.result.value)
