"""Search-index document conversion."""

from .converter import (
    ConvertedAlertDocument,
    DEFAULT_REQUIRED_LABELS,
    convert,
    convert_all,
    parse_float32,
    validate_labels,
)

__all__ = [
    "ConvertedAlertDocument",
    "DEFAULT_REQUIRED_LABELS",
    "convert",
    "convert_all",
    "parse_float32",
    "validate_labels",
]
