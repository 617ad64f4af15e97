"""Errors raised by the domain event publisher."""

from __future__ import annotations


class DomainEventError(Exception):
    """Base class for publisher errors."""


class InvalidRegistration(DomainEventError, ValueError):
    """A subscriber declares an unknown, empty or mismatched event type."""


class RecursionForbidden(DomainEventError, RuntimeError):
    """publish() was called while another publish is in progress."""


class ResetDuringPublish(DomainEventError, RuntimeError):
    """reset() was called while an event is being published."""
