"""Auth provider connection settings.
"""

import logging
from typing import Literal

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class ProviderSettings(BaseSettings):
    """Defines which hosted auth provider backs the recovery flow and how to reach it.

    ``memory`` selects the in-process development provider, which keeps
    accounts and codes in memory and logs issued codes instead of mailing them.

    Security Note:
        - SUPABASE_ANON_KEY is a public client key, but it still identifies the
          project and should not be logged.
    """

    AUTH_PROVIDER: Literal["supabase", "memory"] = "memory"
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: SecretStr = SecretStr("")
    AUTH_PROVIDER_TIMEOUT_SECONDS: float = 10.0

    @model_validator(mode="after")
    def _check_supabase_credentials(self) -> "ProviderSettings":
        """Requires URL and key when the Supabase provider is selected."""
        if self.AUTH_PROVIDER == "supabase":
            if not self.SUPABASE_URL or not self.SUPABASE_ANON_KEY.get_secret_value():
                error_msg = (
                    "Supabase provider selected but SUPABASE_URL or SUPABASE_ANON_KEY is missing."
                )
                logger.error(error_msg)
                raise ValueError(error_msg)
            self.SUPABASE_URL = self.SUPABASE_URL.rstrip("/")
        return self
