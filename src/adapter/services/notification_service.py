"""Notification Service Implementations

Provides concrete implementations for alerting operators.
"""

import logging
from typing import Any, Dict, Optional
import httpx
from src.app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs alerts

    Useful for development and testing, or as a fallback.
    """

    async def send_retention_alert(self, summary: Dict[str, Any]) -> bool:
        errors = summary.get("errors") or []
        logger.warning(
            f"[RETENTION ALERT] Sweep {summary.get('started_at')} - {summary.get('completed_at')} "
            f"finished with {len(errors)} error(s), "
            f"deleted: {summary.get('deleted_counts_by_type')}"
        )
        for error in errors:
            logger.warning(
                f"  - {error.get('document_type')} {error.get('document_id')}: {error.get('message')}"
            )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that sends alerts via HTTP webhook

    Sends JSON payload to configured webhook URL.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST alerts to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_retention_alert(self, summary: Dict[str, Any]) -> bool:
        """
        Send retention alert via webhook

        Args:
            summary: JSON-serializable sweep summary

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {"type": "retention_alert", **summary}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(f"Retention alert sent to {self.webhook_url}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send retention alert webhook: {e}")
            return False
        except Exception as e:
            logger.error(f"Unexpected error sending retention alert webhook: {e}")
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_retention_alert(self, summary: Dict[str, Any]) -> bool:
        """
        Send retention alert to all configured services

        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.send_retention_alert(summary):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
