"""
API v1 debug routes.

- POST /v1/debug/sms - Send a text message through the configured SMS channel

Disabled (404) unless debug_routes_enabled is set.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from src.adapters.notifications.sms import SmsGateway
from src.api.dependencies import get_sms_gateway, require_debug_routes
from src.api.models import DebugSmsRequest, DebugSmsResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/debug", tags=["debug"], dependencies=[Depends(require_debug_routes)])


@router.post(
    "/sms",
    response_model=DebugSmsResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Debug routes disabled"},
        422: {"description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Send a test SMS",
)
async def send_debug_sms(
    request_data: DebugSmsRequest,
    gateway: SmsGateway = Depends(get_sms_gateway),
) -> DebugSmsResponse:
    """
    Send a message through the configured SMS provider.

    - **phoneNumber**: Destination number, any formatting
    - **message**: Text to send
    """
    logger.info("Debug SMS to %s via %s", request_data.phone_number, gateway.channel)

    success = await run_in_threadpool(gateway.send_sms, request_data.phone_number, request_data.message)

    logger.info("Debug SMS send result: %s", success)
    return DebugSmsResponse(
        success=success,
        message="SMS sent successfully" if success else "SMS failed to send",
    )
