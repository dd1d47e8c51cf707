"""Password recovery flow settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class RecoverySettings(BaseSettings):
    """Timing, validation and routing constants of the password recovery flow.

    The paths are client-side routes of the dashboard; the API only hands them
    back as redirect targets.
    """

    RESEND_COOLDOWN_SECONDS: int = Field(default=60, ge=0)
    VERIFIED_REDIRECT_DELAY_SECONDS: float = Field(default=1.5, ge=0)
    SUCCESS_REDIRECT_DELAY_SECONDS: float = Field(default=2.0, ge=0)
    PASSWORD_MIN_LENGTH: int = Field(default=6, ge=1)

    RECOVERY_GRANT_TTL_MINUTES: int = Field(default=10, ge=1)
    RECOVERY_ACCEPT_ACTIVE_SESSION: bool = False
    RECOVERY_COOKIE_NAME: str = "reset_verified"
    RECOVERY_COOKIE_SECURE: bool = True

    # slowapi limit strings of the step endpoints, per client address
    RATE_LIMIT_FORGOT_PASSWORD: str = "5/hour"
    RATE_LIMIT_VERIFY_CODE: str = "20/hour"
    RATE_LIMIT_RESEND_CODE: str = "10/hour"

    RECOVERY_CONFIRM_PATH: str = "/reset-password/confirm"
    RECOVERY_PASSWORD_PATH: str = "/reset-password"
    LOGIN_PATH: str = "/login"
