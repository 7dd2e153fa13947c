"""Notification channels."""

from .base import BaseNotifier
from .models import HTTPClientConfig, NotifyResult, TelephoneConfig, TokenResult
from .telephone import Credential, TelephoneNotifier, build_telephone_notifier

__all__ = [
    "BaseNotifier",
    "Credential",
    "HTTPClientConfig",
    "NotifyResult",
    "TelephoneConfig",
    "TelephoneNotifier",
    "TokenResult",
    "build_telephone_notifier",
]
