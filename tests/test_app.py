"""
Tests for application-level behavior

- GET /ping and GET /health
- Error body format for framework errors
- Settings validation
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from pydantic import ValidationError

from bookreview.config import Settings
from bookreview.exceptions import format_validation_errors


class TestLiveness:
    def test_ping(self, client: TestClient):
        response = client.get("/ping")

        assert response.status_code == status.HTTP_200_OK
        assert response.text == "Pong 🏓"
        assert response.headers["content-type"].startswith("text/plain")

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] is True


class TestErrorFormat:
    def test_unknown_route(self, client: TestClient):
        response = client.get("/api/nothing-here")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "Not Found"}

    def test_malformed_json(self, client: TestClient):
        response = client.post(
            "/api/login",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "message" in response.json()

    def test_format_validation_errors(self):
        errors = [
            {
                "loc": ("body", "rating"),
                "msg": "Input should be less than or equal to 5",
                "type": "less_than_equal",
            }
        ]

        assert format_validation_errors(errors) == (
            "rating: Input should be less than or equal to 5"
        )

    def test_format_validation_errors_uses_raised_message(self):
        errors = [
            {
                "loc": ("body", "reviewText"),
                "msg": "Value error, Review text cannot be empty",
                "ctx": {"error": ValueError("Review text cannot be empty")},
            }
        ]

        assert format_validation_errors(errors) == "reviewText: Review text cannot be empty"


class TestSettings:
    def test_rejects_placeholder_secret(self):
        with pytest.raises(ValidationError):
            Settings(secret_key="REPLACE_WITH_YOUR_GENERATED_SECRET_KEY")

    def test_rejects_short_secret(self):
        with pytest.raises(ValidationError):
            Settings(secret_key="too-short")

    def test_token_lifetime_is_eight_hours(self):
        settings = Settings(secret_key="x" * 32)

        assert settings.access_token_expire_minutes == 480

    def test_allowed_origins_list(self):
        settings = Settings(
            secret_key="x" * 32,
            allowed_origins="http://localhost:3000, https://books.example.com",
        )

        assert settings.allowed_origins_list == [
            "http://localhost:3000",
            "https://books.example.com",
        ]
