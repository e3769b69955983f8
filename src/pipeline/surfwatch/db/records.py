"""Monitoring records shared by the seed store and the dashboard API client."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO timestamp (``Z`` suffix allowed) or pass a datetime through."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return None


@dataclass
class Alert:
    """An operator-facing alert."""

    id: str
    title: str
    type: str  # critical | warning | info
    description: str | None = None
    timestamp: datetime | None = None
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Alert":
        return cls(
            id=str(data.get("id", "")),
            title=data["title"],
            type=data.get("type", "info"),
            description=data.get("description"),
            timestamp=parse_timestamp(data.get("timestamp")),
            is_active=data.get("isActive", data.get("is_active", True)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "description": self.description,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "isActive": self.is_active,
        }


@dataclass
class RiskFeedItem:
    """A classified social media post in the live risk feed."""

    id: str
    content: str
    classification: str  # intent | location | warning
    platform: str
    timestamp: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RiskFeedItem":
        return cls(
            id=str(data.get("id", "")),
            content=data["content"],
            classification=data["classification"],
            platform=data["platform"],
            timestamp=parse_timestamp(data.get("timestamp")),
            metadata=data.get("metadata") or {},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "classification": self.classification,
            "platform": self.platform,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "metadata": self.metadata,
        }
