"""New password value object for the password-set step.

The check order is fixed: length first, then confirmation equality. The first
failing rule is the only one reported.
"""

from dataclasses import dataclass, field
from typing import ClassVar

from src.core.exceptions import PasswordMismatchError, PasswordPolicyError
from src.utils.i18n import get_translated_message


@dataclass(frozen=True)
class NewPassword:
    """A password that passed local validation and may be sent to the provider.

    Attributes:
        value: The raw password (excluded from ``repr``)
    """

    value: str = field(repr=False)

    DEFAULT_MIN_LENGTH: ClassVar[int] = 6

    @classmethod
    def from_form(
        cls,
        password: str,
        confirm_password: str,
        min_length: int = DEFAULT_MIN_LENGTH,
        language: str = "en",
    ) -> "NewPassword":
        """Validate the two form fields and build the value object.

        Args:
            password: The new password
            confirm_password: The confirmation field
            min_length: Minimum accepted length
            language: Language for error messages

        Returns:
            NewPassword: The validated password

        Raises:
            PasswordPolicyError: If the password is shorter than ``min_length``
            PasswordMismatchError: If the confirmation differs
        """
        if len(password) < min_length:
            raise PasswordPolicyError(
                get_translated_message("password_too_short", language, min_length=min_length)
            )
        if password != confirm_password:
            raise PasswordMismatchError(get_translated_message("passwords_do_not_match", language))
        return cls(password)
