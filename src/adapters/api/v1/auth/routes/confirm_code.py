"""Recovery code confirmation endpoints.

Step two of password recovery. The confirmation page reads its initial
state, submits the six-digit code and can ask for a new code once the resend
cooldown has run out. A verified code yields a short-lived verification
grant, stored in an HttpOnly cookie, that unlocks the password-set step.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Query, Request, Response, status

from src.adapters.api.v1.auth.schemas import (
    CodeVerifiedResponse,
    ConfirmPageResponse,
    ResendCodeRequest,
    ResendCodeResponse,
    VerifyCodeRequest,
)
from src.adapters.api.v1.auth.utils import (
    bind_request_logger,
    raise_if_failed,
    set_grant_cookie,
)
from src.core.ratelimiter import RESEND_CODE_LIMIT, VERIFY_CODE_LIMIT, limiter
from src.domain.security.logging_service import secure_logging_service
from src.domain.services.password_recovery.code_entry import CodeEntry
from src.domain.services.password_recovery.cooldown import ResendCooldown
from src.domain.services.password_recovery.state import AwaitingCode
from src.infrastructure.dependency_injection.recovery_dependencies import (
    CooldownRegistry,
    FlowFactory,
)
from src.utils.i18n import get_translated_message

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get(
    "",
    response_model=ConfirmPageResponse,
    status_code=status.HTTP_200_OK,
    summary="Confirmation page state",
)
async def confirmation_page(
    request: Request,
    flows: FlowFactory,
    cooldowns: CooldownRegistry,
    email: Optional[str] = Query(None, max_length=254),
    message: Optional[str] = Query(None, max_length=500),
    error: Optional[str] = Query(None, max_length=500),
) -> ConfirmPageResponse:
    """Initial state of the confirmation page: empty code boxes plus the query values."""
    flow = flows.build(AwaitingCode(), request.state.language)
    state = flow.load_confirm_page(email, message, error)
    return ConfirmPageResponse(
        email=state.email,
        message=state.message,
        error=state.error,
        code_length=CodeEntry.LENGTH,
        resend_cooldown_seconds=cooldowns.remaining(state.email) if state.email else 0,
    )


@router.post(
    "",
    response_model=CodeVerifiedResponse,
    status_code=status.HTTP_200_OK,
    summary="Verify a recovery code",
    description=(
        "Verifies the six-digit code with the auth provider. On success a "
        "verification grant cookie is set and the client is sent to the "
        "password-set page after a short delay. The email is optional but "
        "improves match precision."
    ),
    responses={
        200: {"description": "Code verified"},
        400: {"description": "Incomplete code, or the provider rejected the code"},
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(VERIFY_CODE_LIMIT)
async def verify_code(
    request: Request,
    response: Response,
    payload: VerifyCodeRequest,
    flows: FlowFactory,
) -> CodeVerifiedResponse:
    """Verify ``payload.code``, issue the grant and open a provider session.

    Raises:
        CodeIncompleteError: Fewer than six digits were entered (400)
        VerificationError: The provider rejected the code (400)
    """
    request_logger, correlation_id = bind_request_logger(request, "verify_code")
    request_logger.info(
        "Recovery code submitted",
        email_masked=secure_logging_service.mask_email(payload.email) if payload.email else None,
    )

    flow = flows.build(
        AwaitingCode(email=payload.email), request.state.language, correlation_id
    )
    await flow.submit_code(payload.code)
    raise_if_failed(flow, request_logger)

    set_grant_cookie(response, flow.state.grant)
    navigation = flow.pending_navigation
    request_logger.info("Recovery code verified")
    return CodeVerifiedResponse(
        message=get_translated_message("code_verified", request.state.language),
        redirect_to=navigation.target,
        redirect_after_seconds=navigation.delay,
        access_token=flow.session.access_token if flow.session else None,
    )


@router.post(
    "/resend",
    response_model=ResendCodeResponse,
    status_code=status.HTTP_200_OK,
    summary="Resend the recovery code",
    responses={
        200: {"description": "A new code was sent; the cooldown started"},
        400: {"description": "No email, or the provider could not send the code"},
        429: {"description": "Resend cooldown active, or rate limit exceeded"},
    },
)
@limiter.limit(RESEND_CODE_LIMIT)
async def resend_code(
    request: Request,
    payload: ResendCodeRequest,
    flows: FlowFactory,
    cooldowns: CooldownRegistry,
) -> ResendCodeResponse:
    """Send a fresh code, at most once per cooldown period per email.

    Raises:
        EmailRequiredError: No email given (400)
        ResendCooldownError: The cooldown is still running (429)
        ResendError: The provider could not send the code (400)
    """
    request_logger, correlation_id = bind_request_logger(request, "resend_code")
    email = payload.email or None

    # One outstanding resend per email: the cooldown is claimed before the
    # provider call and released if no code went out.
    left = cooldowns.claim(email) if email else 0
    claimed = bool(email) and left == 0
    flow = flows.build(
        AwaitingCode(email=email),
        request.state.language,
        correlation_id,
        cooldown=ResendCooldown(cooldowns.duration, left),
    )
    sent = False
    try:
        sent = await flow.resend_code()
    finally:
        if claimed:
            if sent:
                cooldowns.start(email)
            else:
                cooldowns.release(email)
    raise_if_failed(flow, request_logger)

    request_logger.info(
        "Recovery code resent",
        email_masked=secure_logging_service.mask_email(email),
        cooldown_seconds=flow.cooldown.remaining,
    )
    return ResendCodeResponse(
        message=flow.state.message,
        resend_cooldown_seconds=flow.cooldown.remaining,
    )
