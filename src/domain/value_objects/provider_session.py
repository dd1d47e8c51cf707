"""Provider session value object.

An authenticated session issued by the external auth provider. Successful
code verification establishes one; the password update runs inside it.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ProviderSession:
    """Tokens and identity of an active provider session.

    Attributes:
        access_token: Bearer token for provider calls (excluded from ``repr``)
        email: Address of the authenticated account, when the provider reports it
        refresh_token: Provider refresh token, if issued
        expires_in: Access token lifetime in seconds, if reported
    """

    access_token: str = field(repr=False)
    email: Optional[str] = None
    refresh_token: Optional[str] = field(default=None, repr=False)
    expires_in: Optional[int] = None
