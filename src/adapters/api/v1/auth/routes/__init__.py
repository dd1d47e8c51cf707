from __future__ import annotations

"""Subpackage aggregating the password recovery route modules."""

__all__ = [
    "forgot_password",
    "confirm_code",
    "reset_password",
]
