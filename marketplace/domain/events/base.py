from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from django.utils import timezone


@dataclass
class DomainEvent:
    """Base class for marketplace domain events.

    Events are the payload of invalidation notifications; ``to_dict`` is what
    travels over the event bus.
    """

    event_type: str
    aggregate_id: Optional[int] = None
    actor_id: Optional[int] = None
    payload: Dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=timezone.now)

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "actor_id": self.actor_id,
            "occurred_at": self.occurred_at.isoformat(),
            "payload": self.payload,
        }
