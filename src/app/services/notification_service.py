"""Notification Service Interface

Defines the contract for alerting operators about retention sweep problems.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class NotificationService(ABC):
    """
    Abstract notification service for sending operator alerts

    Implementations can send notifications via:
    - Logging
    - Webhook (HTTP POST)
    """

    @abstractmethod
    async def send_retention_alert(self, summary: Dict[str, Any]) -> bool:
        """
        Send alert for a retention sweep that finished with errors

        Args:
            summary: Sweep summary (started_at, completed_at,
                deleted_counts_by_type, errors)

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
