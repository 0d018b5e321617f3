"""
Logging event publisher adapter - Implements EventPublisher protocol.

This module provides a log-based implementation of the domain's event
channel, writing one line per committed registry event so off-system
observers (log shippers, indexers) can follow the registry.
"""

import logging

from src.domain.events import RegistryEvent

logger = logging.getLogger(__name__)


class LoggingEventPublisher:
    """
    Implements EventPublisher protocol via logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def publish(self, event: RegistryEvent) -> None:
        """
        Log a registry event at INFO level.

        Format: [EVENT] <EventName> key=value ...
        """
        fields = " ".join(f"{key}={value!r}" for key, value in event.to_dict().items())
        logger.info("[EVENT] %s %s", event.event_name, fields)
