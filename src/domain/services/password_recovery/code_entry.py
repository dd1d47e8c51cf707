"""Six-box recovery code entry.

Models the per-digit input boxes of the confirmation page: which box holds
which digit and which box has focus. Pure and synchronous, so the focus
rules can be checked without a browser.
"""

from typing import List, Optional, Tuple

from src.domain.value_objects.recovery_code import RecoveryCode

DIGITS = "0123456789"


class CodeEntry:
    """Index-addressed digit slots with focus tracking.

    Rules:
        - Typing into slot ``i`` keeps the first digit typed, then focus moves
          to ``i + 1`` unless ``i`` is the last slot. Input without a digit
          clears the slot.
        - Backspace on a filled slot clears it; on an empty slot ``i > 0`` it
          moves focus to ``i - 1``. Slot 0 never moves focus.
        - Paste keeps up to six digits, fills from slot 0, clears the remaining
          slots and focuses the slot after the last filled one, capped at the
          last slot.
    """

    LENGTH = RecoveryCode.LENGTH

    def __init__(self) -> None:
        self._slots: List[str] = [""] * self.LENGTH
        self.focus = 0

    @classmethod
    def from_text(cls, text: str) -> "CodeEntry":
        """Build an entry as if ``text`` had been pasted into it."""
        entry = cls()
        entry.paste(text)
        return entry

    @property
    def slots(self) -> Tuple[str, ...]:
        return tuple(self._slots)

    @property
    def value(self) -> str:
        return "".join(self._slots)

    @property
    def is_complete(self) -> bool:
        return all(len(slot) == 1 and slot in DIGITS for slot in self._slots)

    @property
    def can_submit(self) -> bool:
        """True exactly when every slot holds a digit."""
        return self.is_complete

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.LENGTH:
            raise IndexError(f"Code slot index out of range: {index}")

    def input(self, index: int, value: str) -> None:
        """Handle a change event on slot ``index``."""
        self._check_index(index)
        digit: Optional[str] = next((c for c in value if c in DIGITS), None)
        if digit is None:
            self._slots[index] = ""
            self.focus = index
            return

        self._slots[index] = digit
        self.focus = index + 1 if index < self.LENGTH - 1 else index

    def backspace(self, index: int) -> None:
        """Handle a Backspace key press on slot ``index``."""
        self._check_index(index)
        if self._slots[index]:
            self._slots[index] = ""
            self.focus = index
        elif index > 0:
            self.focus = index - 1

    def paste(self, text: str) -> None:
        """Distribute the digits of ``text`` over the slots, starting at slot 0."""
        digits = [c for c in text if c in DIGITS][: self.LENGTH]
        self._slots = digits + [""] * (self.LENGTH - len(digits))
        self.focus = min(len(digits), self.LENGTH - 1)

    def clear(self) -> None:
        self._slots = [""] * self.LENGTH
        self.focus = 0

    def to_code(self) -> RecoveryCode:
        """Return the entered code.

        Raises:
            ValueError: If any slot is empty.
        """
        return RecoveryCode(self.value)
