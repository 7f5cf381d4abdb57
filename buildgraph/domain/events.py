"""Domain events for decoupled side effects and integrations."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """Base class for all domain events."""
    aggregate_id: str
    event_id: str = field(default_factory=lambda: str(uuid4()), kw_only=True)
    timestamp: datetime = field(default_factory=datetime.now, kw_only=True)


@dataclass
class GraphBuilt(DomainEvent):
    """Raised when a project graph reaches the ready state."""
    projects: List[str]
    evaluation_order: List[str]


@dataclass
class OutputCleaned(DomainEvent):
    """Raised when a cleanup sweep finishes."""
    removed: int
    failed: List[str]
    dry_run: bool = False


@dataclass
class UnsafeLinkSkipped(DomainEvent):
    """Raised for each link a sweep refused to follow."""
    path: str
    target: str


class DomainEventPublisher:
    """Dispatches events to subscribed handlers."""

    def __init__(self) -> None:
        self._subscribers: Dict[type, List[Callable[[DomainEvent], None]]] = {}

    def subscribe(self, event_type: type[DomainEvent], handler: Callable[[DomainEvent], None]) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(handler)

    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers."""
        event_type = type(event)
        if event_type in self._subscribers:
            for handler in self._subscribers[event_type]:
                try:
                    handler(event)
                except Exception as e:
                    # handlers never fail the operation that raised the event
                    logger.error(f"Event handler error: {e}")

    def clear_subscribers(self) -> None:
        """Clear all subscribers (useful for testing)."""
        self._subscribers = {}
