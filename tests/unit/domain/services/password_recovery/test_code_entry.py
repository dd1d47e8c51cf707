"""Unit tests for the six-box recovery code entry."""

import pytest

from src.domain.services.password_recovery.code_entry import CodeEntry


class TestCodeEntryInput:
    """Typing into individual boxes."""

    def test_digit_fills_slot_and_advances_focus(self):
        """Test that a digit is stored and focus moves to the next box."""
        # Arrange
        entry = CodeEntry()

        # Act
        entry.input(0, "4")

        # Assert
        assert entry.slots[0] == "4"
        assert entry.focus == 1

    def test_only_first_digit_is_kept(self):
        """Test that a multi-character value keeps its first digit."""
        # Arrange
        entry = CodeEntry()

        # Act
        entry.input(2, "a79")

        # Assert
        assert entry.slots[2] == "7"
        assert entry.focus == 3

    def test_last_slot_keeps_focus(self):
        """Test that typing in the last box does not move focus past it."""
        # Arrange
        entry = CodeEntry()

        # Act
        entry.input(5, "9")

        # Assert
        assert entry.slots[5] == "9"
        assert entry.focus == 5

    def test_value_without_digit_clears_slot(self):
        """Test that a non-digit value empties the box."""
        # Arrange
        entry = CodeEntry.from_text("123456")

        # Act
        entry.input(3, "x")

        # Assert
        assert entry.slots[3] == ""
        assert entry.focus == 3
        assert not entry.can_submit

    def test_index_out_of_range(self):
        """Test that addressing a non-existent box is an error."""
        entry = CodeEntry()

        with pytest.raises(IndexError):
            entry.input(6, "1")

    def test_typing_six_digits_in_sequence(self):
        """Test focus movement and submit readiness while typing a whole code."""
        # Arrange
        entry = CodeEntry()
        focus = []
        ready = []

        # Act
        for index, digit in enumerate("123456"):
            entry.input(index, digit)
            focus.append(entry.focus)
            ready.append(entry.can_submit)

        # Assert
        assert focus == [1, 2, 3, 4, 5, 5]
        assert ready == [False, False, False, False, False, True]
        assert entry.value == "123456"


class TestCodeEntryBackspace:
    """Backspace handling."""

    def test_backspace_on_filled_slot_clears_it(self):
        """Test that Backspace on a filled box empties it and keeps focus there."""
        # Arrange
        entry = CodeEntry.from_text("12")

        # Act
        entry.backspace(1)

        # Assert
        assert entry.slots[:2] == ("1", "")
        assert entry.focus == 1

    def test_backspace_on_empty_slot_moves_focus_back(self):
        """Test that Backspace on an empty box focuses the previous box."""
        # Arrange
        entry = CodeEntry.from_text("12")

        # Act
        entry.backspace(2)

        # Assert
        assert entry.focus == 1
        assert entry.value == "12"

    def test_backspace_on_first_empty_slot_stays(self):
        """Test that the first box never moves focus."""
        # Arrange
        entry = CodeEntry()

        # Act
        entry.backspace(0)

        # Assert
        assert entry.focus == 0


class TestCodeEntryPaste:
    """Pasting a code."""

    def test_paste_full_code(self):
        """Test that a pasted code fills every box and focuses the last one."""
        # Act
        entry = CodeEntry.from_text("654321")

        # Assert
        assert entry.slots == ("6", "5", "4", "3", "2", "1")
        assert entry.focus == 5
        assert entry.can_submit

    def test_paste_strips_non_digits_and_truncates(self):
        """Test that separators are dropped and at most six digits are kept."""
        # Act
        entry = CodeEntry.from_text("12-34 56 78")

        # Assert
        assert entry.value == "123456"

    def test_paste_drops_letters_between_digits(self):
        """Test that a letter inside a pasted code is skipped, not kept as a gap."""
        # Arrange
        entry = CodeEntry()

        # Act
        entry.paste("12a45")

        # Assert
        assert entry.slots == ("1", "2", "4", "5", "", "")
        assert entry.focus == 4
        assert not entry.can_submit

    def test_short_paste_clears_remaining_slots(self):
        """Test that a short paste clears the boxes after it."""
        # Arrange
        entry = CodeEntry.from_text("999999")

        # Act
        entry.paste("12")

        # Assert
        assert entry.slots == ("1", "2", "", "", "", "")
        assert entry.focus == 2
        assert not entry.can_submit

    def test_paste_without_digits(self):
        """Test that pasting text without digits empties the entry."""
        # Act
        entry = CodeEntry.from_text("abc")

        # Assert
        assert entry.value == ""
        assert entry.focus == 0


class TestCodeEntryCompletion:
    """Submission readiness."""

    def test_to_code_returns_recovery_code(self):
        """Test that a complete entry converts to a recovery code."""
        # Arrange
        entry = CodeEntry.from_text("012345")

        # Act
        code = entry.to_code()

        # Assert
        assert code.value == "012345"

    def test_to_code_rejects_incomplete_entry(self):
        """Test that an incomplete entry cannot be converted."""
        entry = CodeEntry.from_text("01234")

        with pytest.raises(ValueError):
            entry.to_code()

    def test_clear_resets_slots_and_focus(self):
        """Test that clear empties every box and focuses the first."""
        # Arrange
        entry = CodeEntry.from_text("123456")

        # Act
        entry.clear()

        # Assert
        assert entry.value == ""
        assert entry.focus == 0
