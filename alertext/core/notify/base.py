"""Base notifier abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence, Union

from alertext.core.alerts.models import Alert, NotificationEvent
from alertext.core.notify.models import NotifyResult


class BaseNotifier(ABC):
    """Abstract base class for notification channels."""

    @property
    @abstractmethod
    def channel(self) -> str:
        """Return the channel identifier."""
        pass

    @abstractmethod
    def notify(self, event: Union[NotificationEvent, Sequence[Alert]]) -> NotifyResult:
        """Send a notification for a group of alerts.

        Args:
            event: Notification event, or the alerts it wraps

        Returns:
            NotifyResult; ``retryable`` tells the caller to try the event again later
        """
        ...
