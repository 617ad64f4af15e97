"""Synchronous in-process publisher for domain events.

Subscribers are invoked synchronously: first those registered for the
event's exact type, then the broadcast subscribers, each group in
registration order. Publishing from inside a subscriber is rejected, and
the registry can only be reset while no event is being published.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Iterator

from domain_events.config import configure_logging, load_settings
from domain_events.domain.errors import (
    InvalidRegistration,
    RecursionForbidden,
    ResetDuringPublish,
)
from domain_events.domain.events import BROADCAST, DomainEvent, describe, is_event_type
from domain_events.domain.subscribers import CallbackSubscriber, Subscriber

logger = logging.getLogger(__name__)


class PublisherState(str, Enum):
    IDLE = "idle"
    PUBLISHING = "publishing"


class DomainEventPublisher:
    """Routes published events to the subscribers registered for them."""

    _instance: DomainEventPublisher | None = None

    def __init__(self, *, allow_recursive_publish: bool = False) -> None:
        self._subscribers: dict[type[DomainEvent], list[Subscriber]] = {}
        self._state = PublisherState.IDLE
        self._depth = 0
        self._allow_recursive_publish = allow_recursive_publish

    @classmethod
    def instance(cls) -> DomainEventPublisher:
        """Return the process-wide publisher, creating it on first access."""
        if cls._instance is None:
            settings = load_settings()
            configure_logging(settings)
            cls._instance = cls(allow_recursive_publish=settings.allow_recursive_publish)
            logger.debug(
                "Created shared domain event publisher (allow_recursive_publish=%s)",
                settings.allow_recursive_publish,
            )
        return cls._instance

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def subscribe(self, subscriber: Subscriber) -> DomainEventPublisher:
        event_type = getattr(subscriber, "declared_event_type", None)
        if not is_event_type(event_type):
            raise InvalidRegistration(
                f"Listened event type must be a DomainEvent type, got {describe(event_type)}."
            )

        self._subscribers.setdefault(event_type, []).append(subscriber)
        logger.debug("Subscribed %r to %s", subscriber, describe(event_type))
        return self

    def listen(
        self,
        event_type: type[DomainEvent],
        callback: Callable[[Any], Any] | None = None,
    ) -> Any:
        """Register *callback* for *event_type*.

        Returns the publisher for chaining. Without *callback*, returns a
        decorator that registers the decorated function.
        """
        if not is_event_type(event_type):
            raise InvalidRegistration(
                f"Listened event type must be a DomainEvent type, got {describe(event_type)}."
            )

        if callback is None:

            def decorator(func: Callable[[Any], Any]) -> Callable[[Any], Any]:
                self.subscribe(CallbackSubscriber(event_type, func))
                return func

            return decorator

        return self.subscribe(CallbackSubscriber(event_type, callback))

    def subscribers_for(self, event_type: type[DomainEvent]) -> tuple[Subscriber, ...]:
        return tuple(self._subscribers.get(event_type, ()))

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    @property
    def state(self) -> PublisherState:
        return self._state

    @property
    def is_publishing(self) -> bool:
        return self._state is PublisherState.PUBLISHING

    @property
    def allow_recursive_publish(self) -> bool:
        return self._allow_recursive_publish

    def publish(self, event: DomainEvent) -> None:
        """Deliver *event* to its subscribers.

        Errors raised by subscribers are not caught: they abort the
        remaining deliveries and propagate to the caller.
        """
        if not isinstance(event, DomainEvent):
            raise TypeError(f"Only domain events can be published, got {type(event).__name__}")

        with self._publishing():
            event_type = event.event_type
            targets = list(self._subscribers.get(event_type, ()))
            if event_type is not BROADCAST:
                targets.extend(self._subscribers.get(BROADCAST, ()))

            logger.debug(
                "Publishing %s to %d subscriber(s)", event_type.event_name(), len(targets)
            )
            for subscriber in targets:
                subscriber.handle_event(event)

    @contextmanager
    def _publishing(self) -> Iterator[None]:
        if self.is_publishing and not self._allow_recursive_publish:
            raise RecursionForbidden(
                "Publishing of a domain event is forbidden while another event is being published."
            )

        self._depth += 1
        self._state = PublisherState.PUBLISHING
        try:
            yield
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._state = PublisherState.IDLE

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Remove every subscriber. Forbidden while publishing."""
        if self.is_publishing:
            raise ResetDuringPublish(
                "Resetting of domain event publisher is forbidden during a publication of event."
            )

        self._subscribers.clear()
        logger.debug("Domain event publisher reset")

    # The publisher holds live callbacks: copies return the same object
    # and pickling is refused.
    def __copy__(self) -> DomainEventPublisher:
        return self

    def __deepcopy__(self, memo: dict) -> DomainEventPublisher:
        return self

    def __reduce__(self) -> Any:
        raise TypeError(f"{type(self).__name__} cannot be pickled")


def get_publisher() -> DomainEventPublisher:
    """Accessor for the shared publisher."""
    return DomainEventPublisher.instance()
