"""Event handlers for domain events."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from buildgraph.domain.events import GraphBuilt, OutputCleaned, UnsafeLinkSkipped

if TYPE_CHECKING:
    from buildgraph.domain.events import DomainEventPublisher

logger = logging.getLogger(__name__)


class AuditLogHandler:
    """Logs graph and cleanup events for audit trail."""

    def handle_graph_built(self, event: GraphBuilt) -> None:
        logger.info(
            f"[AUDIT] Graph built under {event.aggregate_id}: "
            f"{len(event.projects)} projects, order {' -> '.join(event.evaluation_order)}"
        )

    def handle_output_cleaned(self, event: OutputCleaned) -> None:
        action = "Dry-run clean" if event.dry_run else "Cleaned"
        logger.info(f"[AUDIT] {action} {event.aggregate_id}: {event.removed} removed")
        for path in event.failed:
            logger.warning(f"[AUDIT] Could not remove {path}")

    def handle_unsafe_link(self, event: UnsafeLinkSkipped) -> None:
        logger.warning(f"[AUDIT] Left link in place: {event.path} -> {event.target}")


def register_event_handlers(publisher: DomainEventPublisher) -> None:
    """Register all event handlers with the publisher."""
    audit = AuditLogHandler()

    publisher.subscribe(GraphBuilt, audit.handle_graph_built)
    publisher.subscribe(OutputCleaned, audit.handle_output_cleaned)
    publisher.subscribe(UnsafeLinkSkipped, audit.handle_unsafe_link)
