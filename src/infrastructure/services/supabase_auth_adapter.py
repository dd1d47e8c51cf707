"""Supabase Auth (GoTrue) adapter for password recovery.

Talks to the GoTrue REST API of a Supabase project over httpx. One adapter
instance is bound to one client: the access token returned by code
verification, or the bearer token the client presents, authorizes the
password update and the session check.

Requests are sent once. A failed call surfaces to the user, who decides
whether to retry.
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from src.core.exceptions import AuthProviderError
from src.domain.interfaces.authentication.password_recovery import IAuthRecoveryPort
from src.domain.security.logging_service import secure_logging_service
from src.domain.value_objects.provider_session import ProviderSession

logger = structlog.get_logger(__name__)


class SupabaseAuthRecoveryAdapter(IAuthRecoveryPort):
    """GoTrue implementation of the recovery port.

    Args:
        client: Shared httpx client; its ``base_url`` is the Supabase project URL
        anon_key: Project anon key, sent as the ``apikey`` header
        access_token: Bearer token of an existing client session, if any
    """

    AUTH_PREFIX = "/auth/v1"

    def __init__(
        self,
        client: httpx.AsyncClient,
        anon_key: str,
        access_token: Optional[str] = None,
    ):
        self._client = client
        self._anon_key = anon_key
        self._access_token = access_token

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    async def request_password_reset(self, email: str) -> None:
        await self._call("POST", "/recover", json={"email": email})
        logger.info(
            "Recovery email requested from provider",
            email_masked=secure_logging_service.mask_email(email),
        )

    async def verify_recovery_code(self, email: Optional[str], code: str) -> ProviderSession:
        body: Dict[str, Any] = {"type": "recovery", "token": code}
        if email:
            body["email"] = email

        data = await self._call("POST", "/verify", json=body)
        access_token = data.get("access_token")
        if not access_token:
            raise AuthProviderError("Provider did not return a session", "provider_no_session")

        self._access_token = access_token
        user = data.get("user") or {}
        return ProviderSession(
            access_token=access_token,
            email=user.get("email") or email,
            refresh_token=data.get("refresh_token"),
            expires_in=data.get("expires_in"),
        )

    async def resend_recovery_code(self, email: str) -> None:
        # GoTrue /resend only covers signup and email change; a recovery code
        # is re-sent by issuing a new recovery request.
        await self._call("POST", "/recover", json={"email": email})
        logger.info(
            "Recovery code re-sent by provider",
            email_masked=secure_logging_service.mask_email(email),
        )

    async def update_password(self, new_password: str) -> None:
        if not self._access_token:
            raise AuthProviderError("Auth session missing!", "provider_no_session")
        await self._call("PUT", "/user", json={"password": new_password}, authorized=True)

    async def get_active_session(self) -> Optional[ProviderSession]:
        if not self._access_token:
            return None
        try:
            user = await self._call("GET", "/user", authorized=True)
        except AuthProviderError as e:
            if e.status_code in (401, 403):
                return None
            raise
        return ProviderSession(access_token=self._access_token, email=user.get("email"))

    async def _call(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        authorized: bool = False,
    ) -> Dict[str, Any]:
        headers = {"apikey": self._anon_key}
        if authorized:
            headers["Authorization"] = f"Bearer {self._access_token}"

        try:
            response = await self._client.request(
                method, f"{self.AUTH_PREFIX}{path}", json=json, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error("Auth provider unreachable", path=path, error=str(e))
            raise AuthProviderError(
                "Authentication service is unavailable", "provider_unavailable"
            ) from e

        if response.is_error:
            message = self._error_message(response)
            logger.warning(
                "Auth provider rejected request",
                path=path,
                status_code=response.status_code,
                provider_message=message,
            )
            raise AuthProviderError(message, "provider_rejected", response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = {}
        if isinstance(data, dict):
            for key in ("msg", "error_description", "message"):
                if data.get(key):
                    return str(data[key])
        return f"Auth provider error ({response.status_code})"
