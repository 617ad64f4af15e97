"""FastAPI dependency exposing the shared domain event publisher."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from domain_events.domain.publisher import DomainEventPublisher, get_publisher

PublisherDep = Annotated[DomainEventPublisher, Depends(get_publisher)]

__all__ = ["PublisherDep", "get_publisher"]
