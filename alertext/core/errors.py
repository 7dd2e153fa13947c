"""Exception types raised by the converter and notification channels."""

from __future__ import annotations

from typing import Optional


class AlertExtError(Exception):
    """Base class for all alertext errors."""


class ConversionError(AlertExtError, ValueError):
    """An alert could not be converted into a search-index document."""


class LabelValidationError(ConversionError):
    """A required label is missing from the alert."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"the alert must have a label named {label}")


class LabelParseError(ConversionError):
    """The reserved numeric label does not hold a decimal number."""

    def __init__(self, label: str, value: object, reason: str = "not a decimal number"):
        self.label = label
        self.value = value
        super().__init__(f"label {label}={value!r} cannot be parsed as float32: {reason}")


class TelephoneError(AlertExtError):
    """Base class for telephone channel errors."""


class TelephoneAuthError(TelephoneError):
    """Token acquisition or refresh was rejected by the provider."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class TelephoneTransportError(TelephoneError):
    """The provider could not be reached."""


class TelephoneDeliveryError(TelephoneError):
    """A voice call to a single destination failed."""

    def __init__(self, destination: str, message: str):
        self.destination = destination
        super().__init__(f"{destination}: {message}")
