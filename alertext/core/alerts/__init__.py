"""Alert schemas consumed from the routing platform."""

from .models import Alert, LabelValue, NotificationEvent

__all__ = [
    "Alert",
    "LabelValue",
    "NotificationEvent",
]
