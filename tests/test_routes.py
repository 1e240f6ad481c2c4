"""Tests for the Flask HTTP API."""

import uuid
from unittest.mock import MagicMock

import pytest
from flask.testing import FlaskClient
from sqlalchemy.exc import OperationalError

from notification_dispatch.api.app import create_app
from notification_dispatch.pipeline import MAX_ATTEMPTS, DeliveryPipeline
from notification_dispatch.providers import DeliveryResult, ProviderRegistry
from notification_dispatch.templates import TemplateCatalog


def _down(*args: object, **kwargs: object) -> None:
    raise OperationalError("SELECT 1", {}, Exception("connection refused"))


class TestSubmitNotification:
    def test_success_returns_201(
        self, client: FlaskClient, otp_payload: dict, email_provider: MagicMock
    ) -> None:
        resp = client.post("/notifications", json=otp_payload)

        assert resp.status_code == 201
        data = resp.get_json()
        assert data["success"] is True
        notification = data["notification"]
        assert notification["status"] == "sent"
        assert notification["attempts"] == 1
        assert notification["to"] == "user@example.com"
        assert notification["subject"] == "Your verification code"
        assert "482910" in notification["body"]
        assert notification["error"] is None
        email_provider.send.assert_called_once()

    def test_exhausted_retries_returns_502(
        self,
        client: FlaskClient,
        otp_payload: dict,
        email_provider: MagicMock,
        sleep_calls: list[float],
    ) -> None:
        email_provider.send.return_value = DeliveryResult.failed(
            "Simulated SMTP timeout"
        )

        resp = client.post("/notifications", json=otp_payload)

        assert resp.status_code == 502
        data = resp.get_json()
        assert data["success"] is False
        assert data["notification"]["status"] == "failed"
        assert data["notification"]["attempts"] == MAX_ATTEMPTS
        assert data["notification"]["error"] == "Simulated SMTP timeout"
        assert len(sleep_calls) == MAX_ATTEMPTS - 1

    def test_invalid_json_returns_400(self, client: FlaskClient) -> None:
        resp = client.post(
            "/notifications", data="not json", content_type="application/json"
        )

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Request body must be valid JSON"

    def test_non_object_body_returns_400(self, client: FlaskClient) -> None:
        resp = client.post("/notifications", json=["email", "otp"])

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Request body must be a JSON object"

    def test_validation_failure_returns_400(
        self, client: FlaskClient, otp_payload: dict, email_provider: MagicMock
    ) -> None:
        otp_payload["channel"] = "fax"

        resp = client.post("/notifications", json=otp_payload)

        assert resp.status_code == 400
        data = resp.get_json()
        assert data["error"] == "Payload validation failed"
        assert data["details"][0]["loc"] == ["channel"]
        email_provider.send.assert_not_called()

    def test_invalid_email_recipient_returns_400(
        self, client: FlaskClient, otp_payload: dict
    ) -> None:
        otp_payload["to"] = "+15550100"

        resp = client.post("/notifications", json=otp_payload)

        assert resp.status_code == 400

    def test_missing_template_returns_500(
        self,
        session_factory: MagicMock,
        provider_registry: ProviderRegistry,
        otp_payload: dict,
    ) -> None:
        pipeline = DeliveryPipeline(
            session_factory,
            provider_registry,
            TemplateCatalog({}),
            sleep=lambda _: None,
        )
        client = create_app(pipeline, session_factory).test_client()

        resp = client.post("/notifications", json=otp_payload)

        assert resp.status_code == 500
        data = resp.get_json()
        assert data["error"] == "Notification configuration error"
        assert "otp" in data["details"]
        session_factory.assert_not_called()

    def test_store_unavailable_returns_500(
        self, client: FlaskClient, otp_payload: dict, session_factory: MagicMock
    ) -> None:
        session_factory.side_effect = _down

        resp = client.post("/notifications", json=otp_payload)

        assert resp.status_code == 500
        assert resp.get_json()["error"] == "Notification store unavailable"


class TestListNotifications:
    @pytest.fixture()
    def submitted(
        self,
        client: FlaskClient,
        otp_payload: dict,
        sms_provider: MagicMock,
    ) -> list[dict]:
        sms_provider.send.return_value = DeliveryResult.failed("gateway down")
        payloads = [
            otp_payload,
            {
                "to": "+15550100",
                "channel": "sms",
                "type": "alert",
                "variables": {"message": "Login from new device"},
            },
            {
                "to": "device-token-1",
                "channel": "push",
                "type": "marketing",
                "language": "es",
                "variables": {
                    "firstName": "Ana",
                    "discount": "25",
                    "promoCode": "VERANO25",
                },
            },
        ]
        return [
            client.post("/notifications", json=p).get_json()["notification"]
            for p in payloads
        ]

    def test_lists_all(self, client: FlaskClient, submitted: list[dict]) -> None:
        resp = client.get("/notifications")

        assert resp.status_code == 200
        data = resp.get_json()
        assert data["total"] == 3
        assert {n["id"] for n in data["notifications"]} == {
            n["id"] for n in submitted
        }

    def test_filter_by_status(
        self, client: FlaskClient, submitted: list[dict]
    ) -> None:
        resp = client.get("/notifications?status=failed")

        data = resp.get_json()
        assert data["total"] == 1
        assert data["notifications"][0]["channel"] == "sms"

    def test_filter_by_channel_and_type(
        self, client: FlaskClient, submitted: list[dict]
    ) -> None:
        resp = client.get("/notifications?channel=push&type=marketing")

        data = resp.get_json()
        assert data["total"] == 1
        assert data["notifications"][0]["language"] == "es"

    def test_empty_filter_values_are_ignored(
        self, client: FlaskClient, submitted: list[dict]
    ) -> None:
        resp = client.get("/notifications?status=&channel=&type=")

        assert resp.status_code == 200
        assert resp.get_json()["total"] == 3

    def test_empty_store(self, client: FlaskClient) -> None:
        resp = client.get("/notifications")

        assert resp.status_code == 200
        assert resp.get_json() == {"total": 0, "notifications": []}

    def test_invalid_filter_returns_400(self, client: FlaskClient) -> None:
        resp = client.get("/notifications?status=queued")

        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid filter"


class TestGetNotification:
    def test_returns_record(self, client: FlaskClient, otp_payload: dict) -> None:
        created = client.post("/notifications", json=otp_payload).get_json()

        resp = client.get(f"/notifications/{created['notification']['id']}")

        assert resp.status_code == 200
        assert resp.get_json() == created["notification"]

    def test_unknown_id_returns_404(self, client: FlaskClient) -> None:
        resp = client.get(f"/notifications/{uuid.uuid4()}")
        assert resp.status_code == 404

    def test_malformed_id_returns_404(self, client: FlaskClient) -> None:
        resp = client.get("/notifications/not-a-uuid")
        assert resp.status_code == 404


class TestHealth:
    def test_healthy(self, client: FlaskClient) -> None:
        resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.get_json() == {
            "status": "healthy",
            "checks": {"database": "ok"},
        }

    def test_database_unreachable(
        self, client: FlaskClient, session_factory: MagicMock
    ) -> None:
        session_factory.side_effect = _down

        resp = client.get("/health")

        assert resp.status_code == 503
        data = resp.get_json()
        assert data["status"] == "unhealthy"
        assert data["checks"]["database"] == "unreachable"
