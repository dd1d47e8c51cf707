"""Recovery code value object.

A recovery code is the six-digit one-time code the auth provider emails to
the user. The domain only ever holds a complete code; partially typed codes
live in :class:`~src.domain.services.password_recovery.code_entry.CodeEntry`.
"""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True, slots=True)
class RecoveryCode:
    """Exactly six ASCII digits.

    Attributes:
        value: The code as a string, leading zeros preserved.
    """

    value: str

    LENGTH: ClassVar[int] = 6

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError("Recovery code must be a string.")
        if len(self.value) != self.LENGTH or not all(c in "0123456789" for c in self.value):
            raise ValueError(f"Recovery code must be exactly {self.LENGTH} digits.")

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        # Keep codes out of tracebacks and debug logs
        return "RecoveryCode('******')"
