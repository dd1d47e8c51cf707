"""Reset Password endpoint module.

Step three of password recovery. Both endpoints first check proof of code
verification: the grant cookie (or ``X-Recovery-Token`` header) or, when
enabled, an active provider session. Without proof the client is redirected
to the confirmation page with ``303 See Other``.

The password update runs in the provider session opened by code
verification, presented as ``Authorization: Bearer <access_token>``.
"""

import structlog
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import RedirectResponse

from src.adapters.api.v1.auth.schemas import (
    NextStepResponse,
    PasswordStepResponse,
    ResetPasswordRequest,
)
from src.adapters.api.v1.auth.utils import (
    bind_request_logger,
    clear_grant_cookie,
    raise_if_failed,
    read_grant_token,
)
from src.domain.services.password_recovery.flow import PasswordResetFlow
from src.domain.services.password_recovery.state import CheckingAccess
from src.infrastructure.dependency_injection.recovery_dependencies import FlowFactory
from src.utils.i18n import get_translated_message

logger = structlog.get_logger(__name__)
router = APIRouter()

_UNVERIFIED_RESPONSES = {
    303: {"description": "No proof of verification; redirect to the confirmation page"},
}


def _redirect_to_confirmation(flow: PasswordResetFlow) -> RedirectResponse:
    return RedirectResponse(
        url=flow.pending_navigation.target,
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get(
    "",
    response_model=PasswordStepResponse,
    status_code=status.HTTP_200_OK,
    summary="Check access to the password-set page",
    responses=_UNVERIFIED_RESPONSES,
)
async def password_step(request: Request, flows: FlowFactory):
    """Show the password form only after a verified code."""
    request_logger, correlation_id = bind_request_logger(request, "password_step")

    flow = flows.build(CheckingAccess(), request.state.language, correlation_id)
    if not await flow.enter_password_step(read_grant_token(request)):
        request_logger.info("Password step requested without verification")
        return _redirect_to_confirmation(flow)

    grant = flow.state.grant
    return PasswordStepResponse(verified=True, email=grant.email)


@router.post(
    "",
    response_model=NextStepResponse,
    status_code=status.HTTP_200_OK,
    summary="Set the new password",
    description=(
        "Validates the new password (length first, then confirmation) and stores "
        "it with the auth provider. On success the grant is revoked and the client "
        "is sent to the login page with a confirmation message."
    ),
    responses={
        **_UNVERIFIED_RESPONSES,
        400: {"description": "Validation failed, or the provider rejected the update"},
    },
)
async def reset_password(
    request: Request,
    response: Response,
    payload: ResetPasswordRequest,
    flows: FlowFactory,
):
    """Set the new password for the verified account.

    Raises:
        PasswordPolicyError: Password shorter than the minimum (400)
        PasswordMismatchError: Confirmation differs (400)
        PasswordUpdateError: The provider rejected the update (400)
    """
    request_logger, correlation_id = bind_request_logger(request, "reset_password")
    language = request.state.language

    flow = flows.build(CheckingAccess(), language, correlation_id)
    if not await flow.enter_password_step(read_grant_token(request)):
        request_logger.info("Password update attempted without verification")
        return _redirect_to_confirmation(flow)

    await flow.set_password(payload.password, payload.confirm_password)
    raise_if_failed(flow, request_logger)

    clear_grant_cookie(response)
    navigation = flow.pending_navigation
    request_logger.info("Password reset completed")
    return NextStepResponse(
        message=get_translated_message("password_reset_complete", language),
        redirect_to=navigation.target,
        redirect_after_seconds=navigation.delay,
    )
