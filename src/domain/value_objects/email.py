"""A Value Object representing an email address in the domain.

This class normalizes the address a recovery code is requested for. As a Value
Object, it is immutable, and equality is based on its value (the email string),
not its identity.
"""

from dataclasses import dataclass
from typing import ClassVar

from structlog import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Email:
    """An immutable, normalized email address.

    Format checks belong to the input field and deliverability to the auth
    provider, so the value object only refuses what cannot be an address:
    - Must contain a non-empty local part and domain around a single ``@``.
    - Must not contain whitespace.
    - Has a reasonable length.
    - Is automatically normalized to lowercase.

    Attributes:
        value: The string representation of the email address.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 254

    def __post_init__(self):
        """Performs validation and normalization after initialization."""
        if not isinstance(self.value, str):
            raise TypeError("Email value must be a string.")

        normalized_value = self.value.strip().lower()
        object.__setattr__(self, "value", normalized_value)

        if len(normalized_value) > self.MAX_LENGTH:
            raise ValueError(f"Email must be at most {self.MAX_LENGTH} characters.")
        local, at, domain = normalized_value.rpartition("@")
        if not at or not local or not domain or "@" in local:
            raise ValueError("Invalid email format.")
        if any(char.isspace() for char in normalized_value):
            raise ValueError("Invalid email format.")

    @property
    def domain(self) -> str:
        """Returns the domain part of the email address."""
        return self.value.split("@")[1]

    def __str__(self) -> str:
        return self.value
