"""Tests for the HTTP rendering of recovery errors."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.core.exceptions import (
    CodeIncompleteError,
    InvalidTransitionError,
    RecoveryError,
    ResendCooldownError,
    VerificationError,
)
from src.core.handlers import register_exception_handlers


def _app_raising(error: Exception) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    async def boom():
        raise error

    return app


class TestExceptionHandlers:
    """Status codes and bodies per error type."""

    @pytest.mark.parametrize(
        "error, status_code, detail",
        [
            (CodeIncompleteError("Please enter the complete 6-digit code"), 400,
             "Please enter the complete 6-digit code"),
            (VerificationError("Token has expired or is invalid"), 400,
             "Token has expired or is invalid"),
            (InvalidTransitionError("PasswordSubmitted is not allowed in state Done"), 409,
             "This action is not available at the current step"),
            (RecoveryError("internal detail"), 500, "An unexpected error occurred."),
        ],
    )
    def test_status_and_detail(self, error, status_code, detail):
        """Test that each error maps to its status with a user-facing detail."""
        client = TestClient(_app_raising(error))

        response = client.get("/boom")

        assert response.status_code == status_code
        assert response.json() == {"detail": detail}

    def test_resend_cooldown(self):
        """Test that a cooldown error reports the seconds left."""
        # Arrange
        client = TestClient(_app_raising(ResendCooldownError(42, "Please wait 42 seconds")))

        # Act
        response = client.get("/boom")

        # Assert
        assert response.status_code == 429
        assert response.json() == {"detail": "Please wait 42 seconds", "resend_cooldown_seconds": 42}
        assert response.headers["Retry-After"] == "42"

    def test_translated_fallback(self):
        """Test that generic details follow the request language."""
        client = TestClient(_app_raising(RecoveryError("internal detail")))

        response = client.get("/boom", headers={"Accept-Language": "es"})

        assert response.json()["detail"] != "An unexpected error occurred."
