"""
Unit tests for API request/response models.

Tests Pydantic model validation and serialization for the OTP endpoints.
"""

import pytest
from pydantic import ValidationError

from src.api.models import (
    IdentityResponse,
    SendOtpRequest,
    SendOtpResponse,
    VerifyOtpRequest,
    VerifyOtpResponse,
)


class TestSendOtpRequest:
    """Tests for SendOtpRequest model."""

    def test_valid_request(self) -> None:
        request = SendOtpRequest(username="alice", email="user@example.com")
        assert request.username == "alice"
        assert request.email == "user@example.com"

    def test_email_not_validated_here(self) -> None:
        """Format checks belong to AddressValidator, not the schema."""
        request = SendOtpRequest(username="alice", email="user+tag@example.com")
        assert request.email == "user+tag@example.com"

    @pytest.mark.parametrize("field", ["username", "email"])
    def test_empty_field_rejected(self, field: str) -> None:
        data = {"username": "alice", "email": "user@example.com", field: ""}
        with pytest.raises(ValidationError) as exc_info:
            SendOtpRequest(**data)
        assert field in str(exc_info.value)

    def test_missing_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SendOtpRequest(username="alice")


class TestSendOtpResponse:
    """Tests for SendOtpResponse serialization."""

    def test_exposed_code_serialized_camel_case(self) -> None:
        response = SendOtpResponse(accepted=True, exposed_code="123456")
        assert response.model_dump(by_alias=True, exclude_none=True) == {
            "accepted": True,
            "exposedCode": "123456",
        }

    def test_accepts_alias_on_input(self) -> None:
        assert SendOtpResponse(accepted=True, exposedCode="123456").exposed_code == "123456"

    def test_rejection(self) -> None:
        response = SendOtpResponse(accepted=False, rejection="Invalid email format")
        assert response.model_dump(by_alias=True, exclude_none=True) == {
            "accepted": False,
            "rejection": "Invalid email format",
        }


class TestVerifyOtpModels:
    """Tests for verification request/response models."""

    def test_valid_request(self) -> None:
        request = VerifyOtpRequest(username="alice", email="user@example.com", code="123456")
        assert request.code == "123456"

    def test_code_required(self) -> None:
        with pytest.raises(ValidationError):
            VerifyOtpRequest(username="alice", email="user@example.com", code="")

    def test_success_response(self) -> None:
        response = VerifyOtpResponse(
            verified=True,
            identity=IdentityResponse(id=1, username="alice", email="user@example.com"),
        )
        assert response.model_dump(exclude_none=True) == {
            "verified": True,
            "identity": {"id": 1, "username": "alice", "email": "user@example.com"},
        }
