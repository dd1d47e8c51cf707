"""Password recovery flow states, events and the transition function.

Every screen of the recovery flow is one state type. Errors are carried by
the editable states, so a failed request lands the user back on the same
form with the message shown and the input kept. Any (state, event) pair not
listed in the transition table is rejected.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Type, Union

from src.core.exceptions import InvalidTransitionError
from src.domain.value_objects.recovery_code import RecoveryCode
from src.domain.value_objects.verification_grant import VerificationGrant

# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Requesting:
    """Forgot-password form: waiting for the user to submit an email."""

    email: str = ""
    error: Optional[str] = None


@dataclass(frozen=True)
class SendingRequest:
    """The recovery email request is outstanding."""

    email: str


@dataclass(frozen=True)
class AwaitingCode:
    """Confirmation page: the user is entering the six-digit code.

    ``error`` set means the previous attempt failed and its message is shown.
    """

    email: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class Verifying:
    """The code is being checked by the provider."""

    email: Optional[str]
    code: RecoveryCode


@dataclass(frozen=True)
class Verified:
    """The code was accepted; the grant unlocks the password-set step."""

    email: str
    grant: VerificationGrant

    def __post_init__(self) -> None:
        if not self.email:
            raise ValueError("A verified recovery must know its email")


@dataclass(frozen=True)
class CheckingAccess:
    """Password-set page opened; proof of verification not yet checked."""


@dataclass(frozen=True)
class SettingPassword:
    """Password-set form."""

    grant: VerificationGrant
    error: Optional[str] = None


@dataclass(frozen=True)
class UpdatingPassword:
    """The new password is being stored by the provider."""

    grant: VerificationGrant


@dataclass(frozen=True)
class Done:
    """The password was changed; the user is sent to the login page."""

    message: str


FlowState = Union[
    Requesting,
    SendingRequest,
    AwaitingCode,
    Verifying,
    Verified,
    CheckingAccess,
    SettingPassword,
    UpdatingPassword,
    Done,
]

# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EmailSubmitted:
    email: str


@dataclass(frozen=True)
class CodeSent:
    message: str


@dataclass(frozen=True)
class CodeSubmitted:
    code: RecoveryCode


@dataclass(frozen=True)
class CodeAccepted:
    grant: VerificationGrant


@dataclass(frozen=True)
class CodeResent:
    message: str


@dataclass(frozen=True)
class PasswordStepEntered:
    grant: VerificationGrant


@dataclass(frozen=True)
class PasswordSubmitted:
    pass


@dataclass(frozen=True)
class PasswordUpdated:
    message: str


@dataclass(frozen=True)
class InputRejected:
    """Local validation failed before any provider call."""

    reason: str


@dataclass(frozen=True)
class ProviderFailed:
    """The auth provider rejected the outstanding request."""

    reason: str


FlowEvent = Union[
    EmailSubmitted,
    CodeSent,
    CodeSubmitted,
    CodeAccepted,
    CodeResent,
    PasswordStepEntered,
    PasswordSubmitted,
    PasswordUpdated,
    InputRejected,
    ProviderFailed,
]

# ---------------------------------------------------------------------------
# Transition table
# ---------------------------------------------------------------------------

_Handler = Callable[[FlowState, FlowEvent], FlowState]

_TRANSITIONS: Dict[Tuple[Type, Type], _Handler] = {
    (Requesting, EmailSubmitted): lambda s, e: SendingRequest(email=e.email),
    (Requesting, InputRejected): lambda s, e: Requesting(email=s.email, error=e.reason),
    (SendingRequest, CodeSent): lambda s, e: AwaitingCode(email=s.email, message=e.message),
    (SendingRequest, ProviderFailed): lambda s, e: Requesting(email=s.email, error=e.reason),
    (AwaitingCode, CodeSubmitted): lambda s, e: Verifying(email=s.email, code=e.code),
    (AwaitingCode, CodeResent): lambda s, e: AwaitingCode(email=s.email, message=e.message),
    (AwaitingCode, InputRejected): lambda s, e: AwaitingCode(
        email=s.email, message=s.message, error=e.reason
    ),
    (AwaitingCode, ProviderFailed): lambda s, e: AwaitingCode(
        email=s.email, message=s.message, error=e.reason
    ),
    (Verifying, CodeAccepted): lambda s, e: Verified(email=e.grant.email, grant=e.grant),
    (Verifying, ProviderFailed): lambda s, e: AwaitingCode(email=s.email, error=e.reason),
    (Verified, PasswordStepEntered): lambda s, e: SettingPassword(grant=e.grant),
    (CheckingAccess, PasswordStepEntered): lambda s, e: SettingPassword(grant=e.grant),
    (SettingPassword, InputRejected): lambda s, e: SettingPassword(grant=s.grant, error=e.reason),
    (SettingPassword, PasswordSubmitted): lambda s, e: UpdatingPassword(grant=s.grant),
    (UpdatingPassword, ProviderFailed): lambda s, e: SettingPassword(grant=s.grant, error=e.reason),
    (UpdatingPassword, PasswordUpdated): lambda s, e: Done(message=e.message),
}


def transition(state: FlowState, event: FlowEvent) -> FlowState:
    """Apply ``event`` to ``state`` and return the next state.

    Raises:
        InvalidTransitionError: If ``state`` does not accept ``event``.
    """
    handler = _TRANSITIONS.get((type(state), type(event)))
    if handler is None:
        raise InvalidTransitionError(
            f"{type(event).__name__} is not allowed in state {type(state).__name__}"
        )
    return handler(state, event)
