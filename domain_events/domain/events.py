"""Base type for domain events and the broadcast routing key."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DomainEvent(BaseModel):
    """Immutable fact that happened in the domain.

    Concrete events subclass this and declare their payload fields. The
    concrete class is the routing key used by the publisher.
    """

    model_config = ConfigDict(frozen=True)

    occurred_at: datetime = Field(default_factory=_utcnow)

    @property
    def event_type(self) -> type[DomainEvent]:
        return type(self)

    @classmethod
    def event_name(cls) -> str:
        """Fully-qualified dotted name of the event class."""
        return f"{cls.__module__}.{cls.__qualname__}"


# Subscribers declaring the base class receive every published event.
BROADCAST: type[DomainEvent] = DomainEvent


def is_event_type(value: Any) -> bool:
    """Return True if *value* is DomainEvent or one of its subclasses."""
    return isinstance(value, type) and issubclass(value, DomainEvent)


def describe(event_type: Any) -> str:
    if is_event_type(event_type):
        return event_type.event_name()
    return repr(event_type)
