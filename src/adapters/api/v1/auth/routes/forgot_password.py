"""Forgot Password endpoint module.

Step one of password recovery: the user submits an email address and the
auth provider emails a six-digit recovery code. The API layer is kept thin;
the recovery flow decides the outcome and the next page.
"""

import structlog
from fastapi import APIRouter, Request, status

from src.adapters.api.v1.auth.schemas import ForgotPasswordRequest, NextStepResponse
from src.adapters.api.v1.auth.utils import bind_request_logger, raise_if_failed
from src.core.ratelimiter import FORGOT_PASSWORD_LIMIT, limiter
from src.domain.security.logging_service import secure_logging_service
from src.domain.services.password_recovery.state import Requesting
from src.infrastructure.dependency_injection.recovery_dependencies import FlowFactory

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=NextStepResponse,
    status_code=status.HTTP_200_OK,
    tags=["auth"],
    summary="Request a password recovery code",
    description=(
        "Asks the auth provider to email a six-digit recovery code. On success the "
        "client is sent to the confirmation page with the email and a confirmation "
        "message in the query string. The provider's error message is returned as-is."
    ),
    responses={
        200: {"description": "Recovery code sent"},
        400: {"description": "The provider could not send the recovery email"},
        422: {"description": "Validation error - invalid email format"},
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(FORGOT_PASSWORD_LIMIT)
async def forgot_password(
    request: Request,
    payload: ForgotPasswordRequest,
    flows: FlowFactory,
) -> NextStepResponse:
    """Request a recovery code for ``payload.email``.

    Args:
        request (Request): FastAPI request object, used for language and rate limiting
        payload (ForgotPasswordRequest): Email address to recover
        flows (RecoveryFlowFactory): Builds the recovery flow for this request

    Returns:
        NextStepResponse: Confirmation message and the confirmation page URL

    Raises:
        DeliveryError: The provider rejected the request (400)
    """
    request_logger, correlation_id = bind_request_logger(request, "forgot_password")
    request_logger.info(
        "Password recovery requested",
        email_masked=secure_logging_service.mask_email(payload.email),
    )

    flow = flows.build(Requesting(), request.state.language, correlation_id)
    await flow.request_code(payload.email)
    raise_if_failed(flow, request_logger)

    navigation = flow.pending_navigation
    request_logger.info("Password recovery code sent")
    return NextStepResponse(
        message=flow.state.message,
        redirect_to=navigation.target,
        redirect_after_seconds=navigation.delay,
    )
