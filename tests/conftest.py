"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A controllable ledger clock
- Recording event publisher and payout gateway
- A registry service over the in-memory repository
"""

import pytest

from src.adapters.repository.memory import InMemoryRegistryRepository
from src.domain.events import RegistryEvent
from src.domain.exceptions import ValueTransferFailed
from src.domain.registry import EXPIRATION_PERIOD, RegistryService

ALICE = "0x00000000000000000000000000000000000a11ce"
BOB = "0x0000000000000000000000000000000000000b0b"
CAROL = "0x00000000000000000000000000000000000ca201"

START_TIME = 1_700_000_000
ONE_ETHER = 10**18


class FakeClock:
    """Clock whose time only moves when a test advances it."""

    def __init__(self, start: int = START_TIME) -> None:
        self.current = start

    def now(self) -> int:
        return self.current

    def advance(self, seconds: int) -> None:
        self.current += seconds


class RecordingPublisher:
    """Event publisher that keeps every published event."""

    def __init__(self) -> None:
        self.events: list[RegistryEvent] = []

    def publish(self, event: RegistryEvent) -> None:
        self.events.append(event)

    def names(self) -> list[str]:
        return [event.event_name for event in self.events]


class RecordingPayout:
    """Payout gateway that records transfers, or fails when told to."""

    def __init__(self) -> None:
        self.payments: list[tuple[str, int]] = []
        self.fail = False

    def send(self, recipient: str, amount: int) -> None:
        if self.fail:
            raise ValueTransferFailed("recipient rejected transfer")
        self.payments.append((recipient, amount))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def payout() -> RecordingPayout:
    return RecordingPayout()


@pytest.fixture
def repository() -> InMemoryRegistryRepository:
    return InMemoryRegistryRepository()


@pytest.fixture
def service(
    repository: InMemoryRegistryRepository,
    clock: FakeClock,
    payout: RecordingPayout,
    publisher: RecordingPublisher,
) -> RegistryService:
    """Registry service over fresh in-memory ledgers."""
    return RegistryService(
        repository=repository,
        clock=clock,
        payout=payout,
        events=publisher,
        expiration_period=EXPIRATION_PERIOD,
    )
