"""
Shared fixtures for adversarial tests.

Provides a registry service whose collaborators are safe to share
between attacker threads.
"""

import threading

import pytest

from src.adapters.repository.memory import InMemoryRegistryRepository
from src.domain.events import RegistryEvent
from src.domain.registry import RegistryService
from tests.conftest import FakeClock, RecordingPayout

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


class ThreadSafePublisher:
    """Event publisher safe to call from concurrent transactions."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.events: list[RegistryEvent] = []

    def publish(self, event: RegistryEvent) -> None:
        with self._lock:
            self.events.append(event)


@pytest.fixture
def shared_service() -> RegistryService:
    """Registry service over one in-memory repository shared by all threads."""
    return RegistryService(
        repository=InMemoryRegistryRepository(),
        clock=FakeClock(),
        payout=RecordingPayout(),
        events=ThreadSafePublisher(),
    )
