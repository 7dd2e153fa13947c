"""Convert alerts into documents suitable for a search-engine index.

Label values arrive as strings, but the index maps ``value`` as a number so it
can be aggregated and plotted. Only that one label is coerced: different
alerts may share a label key with different value types, and coercing every
numeric-looking string would produce mapping conflicts at index time.
"""

from __future__ import annotations

import logging
import math
import re
import struct
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from alertext.core.alerts.models import Alert, LabelValue
from alertext.core.errors import LabelParseError, LabelValidationError

logger = logging.getLogger(__name__)

LABEL_NAME_VALUE = "value"
LABEL_NAME_SEVERITY = "severity"
LABEL_NAME_GROUP = "group"

DEFAULT_REQUIRED_LABELS = (LABEL_NAME_VALUE, LABEL_NAME_SEVERITY, LABEL_NAME_GROUP)

_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class ConvertedAlertDocument(BaseModel):
    """Alert shape with the ``value`` label stored as a number."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    labels: Dict[str, LabelValue]
    annotations: Dict[str, str]
    starts_at: Optional[datetime] = Field(None, alias="startsAt")
    ends_at: Optional[datetime] = Field(None, alias="endsAt")
    generator_url: str = Field("", alias="generatorURL")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    timeout: bool = Field(False, alias="timeout")

    def to_document(self) -> Dict[str, Any]:
        """Render the JSON body sent to the index."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def parse_float32(raw: LabelValue, label: str = LABEL_NAME_VALUE) -> float:
    """Parse a label value as a float32 decimal.

    Args:
        raw: Label value (string or number)
        label: Label name, used in the error message

    Returns:
        The parsed value rounded to float32 precision

    Raises:
        LabelParseError: If the value is not a finite decimal within float32 range
    """
    if isinstance(raw, bool):
        raise LabelParseError(label, raw)

    text = str(raw)
    if not _DECIMAL_RE.fullmatch(text):
        raise LabelParseError(label, raw)

    value = float(text)
    try:
        (rounded,) = struct.unpack("<f", struct.pack("<f", value))
    except OverflowError:
        raise LabelParseError(label, raw, "out of float32 range") from None
    if math.isinf(rounded):
        raise LabelParseError(label, raw, "out of float32 range")
    return rounded


def validate_labels(labels: Dict[str, LabelValue], required: Sequence[str] = DEFAULT_REQUIRED_LABELS) -> None:
    """Ensure every required label is present.

    Raises:
        LabelValidationError: Naming the first missing label
    """
    for name in required:
        if name not in labels:
            raise LabelValidationError(name)


def convert(
    alert: Alert,
    validate: bool = True,
    required: Sequence[str] = DEFAULT_REQUIRED_LABELS,
) -> ConvertedAlertDocument:
    """Convert an alert into an index document.

    Parsing is strict: a ``value`` label that is not a decimal number fails the
    whole conversion rather than being indexed as a string.

    Args:
        alert: Source alert
        validate: Whether to require the labels in ``required`` first
        required: Label names that must be present when validating

    Returns:
        A new document; the source alert is not modified

    Raises:
        LabelValidationError: If a required label is missing
        LabelParseError: If the ``value`` label cannot be parsed
    """
    if validate:
        validate_labels(alert.labels, required)

    labels: Dict[str, LabelValue] = {}
    for key, value in alert.labels.items():
        if key == LABEL_NAME_VALUE:
            labels[key] = parse_float32(value, key)
        else:
            labels[key] = value

    return ConvertedAlertDocument(
        labels=labels,
        annotations=dict(alert.annotations),
        starts_at=alert.starts_at,
        ends_at=alert.ends_at,
        generator_url=alert.generator_url,
        updated_at=alert.updated_at,
        timeout=alert.timeout,
    )


def convert_all(
    alerts: Iterable[Alert],
    validate: bool = True,
    required: Sequence[str] = DEFAULT_REQUIRED_LABELS,
) -> List[ConvertedAlertDocument]:
    """Convert a batch of alerts, failing on the first bad alert."""
    documents = [convert(alert, validate=validate, required=required) for alert in alerts]
    logger.debug(f"Converted {len(documents)} alert(s) into index documents")
    return documents
