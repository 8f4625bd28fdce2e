"""Unit tests for retention alert notification services"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from src.adapter.services.notification_service import (
    CompositeNotificationService,
    LoggingNotificationService,
    WebhookNotificationService,
    create_notification_service,
)

SUMMARY = {
    "started_at": "2033-06-01T02:00:00",
    "completed_at": "2033-06-01T02:00:05",
    "deleted_counts_by_type": {"invoice": 1},
    "errors": [{"document_type": "invoice", "document_id": "inv-1", "message": "lock timeout"}],
}


def mock_async_client(post):
    client = MagicMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    client.post = post
    return client


class TestCreateNotificationService:

    def test_without_webhook_logs_only(self):
        assert isinstance(create_notification_service(None), LoggingNotificationService)

    def test_with_webhook_is_composite(self):
        service = create_notification_service("https://hooks.example.com/retention")

        assert isinstance(service, CompositeNotificationService)
        assert isinstance(service.services[1], WebhookNotificationService)


@pytest.mark.asyncio
class TestSendRetentionAlert:

    async def test_logging_service_always_succeeds(self):
        assert await LoggingNotificationService().send_retention_alert(SUMMARY) is True

    @patch("src.adapter.services.notification_service.httpx.AsyncClient")
    async def test_webhook_posts_summary(self, mock_client_class):
        response = MagicMock()
        response.raise_for_status = MagicMock()
        post = AsyncMock(return_value=response)
        mock_client_class.return_value = mock_async_client(post)

        sent = await WebhookNotificationService("https://hooks.example.com/retention").send_retention_alert(SUMMARY)

        assert sent is True
        payload = post.await_args.kwargs["json"]
        assert payload["type"] == "retention_alert"
        assert payload["errors"] == SUMMARY["errors"]

    @patch("src.adapter.services.notification_service.httpx.AsyncClient")
    async def test_webhook_failure_returns_false(self, mock_client_class):
        post = AsyncMock(side_effect=httpx.ConnectError("refused"))
        mock_client_class.return_value = mock_async_client(post)

        sent = await WebhookNotificationService("https://hooks.example.com/retention").send_retention_alert(SUMMARY)

        assert sent is False

    async def test_composite_succeeds_if_any_channel_succeeds(self):
        failing = MagicMock()
        failing.send_retention_alert = AsyncMock(side_effect=Exception("boom"))
        working = MagicMock()
        working.send_retention_alert = AsyncMock(return_value=True)

        assert await CompositeNotificationService([failing, working]).send_retention_alert(SUMMARY) is True
