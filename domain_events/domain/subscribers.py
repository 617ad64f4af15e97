"""Subscribers: units of behaviour invoked with one published event."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, Protocol, runtime_checkable

from domain_events.domain.errors import InvalidRegistration
from domain_events.domain.events import DomainEvent, describe


@runtime_checkable
class Subscriber(Protocol):
    """Handles events of one declared type (or every event for BROADCAST)."""

    @property
    def declared_event_type(self) -> type[DomainEvent]:
        ...

    def handle_event(self, event: DomainEvent) -> None:
        ...


class CallbackSubscriber:
    """Adapts a plain callable to the Subscriber protocol."""

    def __init__(self, event_type: type[DomainEvent], callback: Callable[[Any], Any]) -> None:
        self._event_type = event_type
        self._callback = callback

    @property
    def declared_event_type(self) -> type[DomainEvent]:
        return self._event_type

    @property
    def callback(self) -> Callable[[Any], Any]:
        return self._callback

    def handle_event(self, event: DomainEvent) -> None:
        self._callback(event)

    def __repr__(self) -> str:
        name = getattr(self._callback, "__qualname__", repr(self._callback))
        return f"CallbackSubscriber({describe(self._event_type)}, {name})"


class ChainSubscriber:
    """Groups subscribers of the same event type into one subscriber.

    Members are invoked in the order given; the first failing member stops
    the chain and its error propagates to the caller.
    """

    def __init__(self, event_type: type[DomainEvent], subscribers: Iterable[Subscriber]) -> None:
        if not event_type:
            raise InvalidRegistration("Event type must not be empty.")
        self._event_type = event_type

        members = list(subscribers)
        if not members:
            raise InvalidRegistration("List of subscribers must not be empty.")

        self._subscribers: list[Subscriber] = []
        for subscriber in members:
            self._add(subscriber)

    @property
    def declared_event_type(self) -> type[DomainEvent]:
        return self._event_type

    def handle_event(self, event: DomainEvent) -> None:
        for subscriber in self._subscribers:
            subscriber.handle_event(event)

    def _add(self, subscriber: Subscriber) -> None:
        declared = getattr(subscriber, "declared_event_type", None)
        if declared is not self._event_type:
            raise InvalidRegistration(
                f"Listened event types mismatch: chain declares "
                f"{describe(self._event_type)}, subscriber declares {describe(declared)}."
            )
        self._subscribers.append(subscriber)

    def __len__(self) -> int:
        return len(self._subscribers)

    def __iter__(self) -> Iterator[Subscriber]:
        return iter(tuple(self._subscribers))

    def __repr__(self) -> str:
        return f"ChainSubscriber({describe(self._event_type)}, {len(self)} subscribers)"
