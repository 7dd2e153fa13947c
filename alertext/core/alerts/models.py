"""Pydantic schemas for alerts received from the routing platform."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

LabelValue = Union[bool, int, float, str]


class Alert(BaseModel):
    """A single firing or resolved alert as sent by the host platform."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    labels: Dict[str, LabelValue] = Field(default_factory=dict)
    annotations: Dict[str, str] = Field(default_factory=dict)

    # The known time range for this alert. Both ends are optional.
    starts_at: Optional[datetime] = Field(None, alias="startsAt")
    ends_at: Optional[datetime] = Field(None, alias="endsAt")
    generator_url: str = Field("", alias="generatorURL")

    # The authoritative timestamp.
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    timeout: bool = False

    @property
    def name(self) -> str:
        """Value of the alertname label, if any."""
        return str(self.labels.get("alertname", ""))


class NotificationEvent(BaseModel):
    """A group of alerts dispatched to a receiver in one notification."""

    model_config = ConfigDict(populate_by_name=True)

    alerts: List[Alert] = Field(..., min_length=1)
    receiver: str = ""
    status: str = "firing"
    group_labels: Dict[str, str] = Field(default_factory=dict, alias="groupLabels")
    group_key: str = Field("", alias="groupKey")
    external_url: str = Field("", alias="externalURL")

    @classmethod
    def of(cls, *alerts: Alert) -> "NotificationEvent":
        """Wrap alerts into an event without group metadata."""
        return cls(alerts=list(alerts))
