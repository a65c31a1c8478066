"""
Domain events for product changes.

Events are published as JSON strings of the form
{"type": <event type>, "payload": <product snapshot>}.
"""
import json
from dataclasses import dataclass
from enum import Enum
from typing import Optional


DOMAIN_EVENTS_TOPIC = "domain-events"


class ProductEventType(str, Enum):
    """Types of product events."""
    CREATED = "product.created"
    UPDATED = "product.updated"
    APPROVED = "product.approved"


@dataclass(frozen=True)
class ProductEvent:
    """
    A product change notification.

    Attributes:
        type: Event type.
        payload: Full product snapshot.
    """
    type: ProductEventType
    payload: dict

    @property
    def product_id(self) -> str:
        return self.payload.get("id", "")

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {"type": self.type.value, "payload": self.payload}

    def to_json(self) -> str:
        """Serialize to the wire format."""
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str) -> "ProductEvent":
        """Parse an event from its wire format."""
        data = json.loads(raw)
        return cls(type=ProductEventType(data["type"]), payload=data["payload"])


def describe_event(raw: str) -> tuple[str, Optional[str]]:
    """
    Extract the event type and product id from a serialized event.

    Malformed input yields ("unknown", None).

    Args:
        raw: Serialized event.

    Returns:
        Tuple of (event type, product id or None).
    """
    try:
        data = json.loads(raw)
    except ValueError:
        return "unknown", None
    if not isinstance(data, dict):
        return "unknown", None
    payload = data.get("payload")
    product_id = payload.get("id") if isinstance(payload, dict) else None
    return str(data.get("type", "unknown")), product_id
