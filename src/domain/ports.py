"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the ledger records the domain works with and the
interfaces (ports) it requires from its host environment. Adapters
implement these protocols.
"""

from contextlib import AbstractContextManager
from dataclasses import dataclass
from enum import Enum
from typing import Generic, NamedTuple, Protocol, TypeVar

from .events import RegistryEvent

T = TypeVar("T")


class NameState(str, Enum):
    """
    Name lifecycle states.

    State Transitions:
    - AVAILABLE -> ACTIVE (registration)
    - ACTIVE -> ACTIVE (renewal, transfer)
    - ACTIVE -> EXPIRED (time passes, implicit)
    - EXPIRED -> ACTIVE (renewal by owner, or registration by anyone)
    - EXPIRED -> AVAILABLE (escrow withdrawn, owner cleared)

    A name with no record is AVAILABLE. EXPIRED names are registrable.
    """

    AVAILABLE = "AVAILABLE"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"


@dataclass(frozen=True)
class NameRecord:
    """Registry entry binding a name to an owner, price, and expiration."""

    name: bytes = b""
    owner: str | None = None
    expiration: int = 0
    price: int = 0

    def is_available(self, now: int) -> bool:
        return self.expiration < now

    def state(self, now: int) -> NameState:
        if self.owner is None and self.expiration < now:
            return NameState.AVAILABLE
        if self.expiration < now:
            return NameState.EXPIRED
        return NameState.ACTIVE


# Escrow entries mirror name entries, keyed per (name, depositor)
EscrowRecord = NameRecord


class ReceiptRecord(NamedTuple):
    """Immutable proof-of-payment for a single registration."""

    price_in_wei: int = 0
    timestamp: int = 0
    expiration: int = 0


@dataclass(frozen=True)
class Versioned(Generic[T]):
    """A value paired with the ordering counter it was read at."""

    value: T
    version: int


class Clock(Protocol):
    """Port interface for the ledger's current time."""

    def now(self) -> int:
        """Return current time in whole seconds. Must never decrease."""
        ...


class PayoutGateway(Protocol):
    """Port interface for native value transfer."""

    def send(self, recipient: str, amount: int) -> None:
        """
        Deliver amount (wei) to recipient.

        Raises:
            ValueTransferFailed: If the transfer cannot be delivered
        """
        ...


class EventPublisher(Protocol):
    """Port interface for the observable event channel."""

    def publish(self, event: RegistryEvent) -> None:
        """Publish a committed registry event."""
        ...


class RegistryTransaction(Protocol):
    """
    Unit of work over the registry ledgers.

    All reads and writes made through one transaction commit together
    or not at all.
    """

    def read_tx_counter(self) -> int:
        """Read the ordering counter, locking it until the transaction ends."""
        ...

    def write_tx_counter(self, value: int) -> None:
        ...

    def get_name(self, name_id: str) -> NameRecord | None:
        """Fetch (and lock) a name record, None if absent."""
        ...

    def get_escrow(self, escrow_id: str) -> EscrowRecord | None:
        """Fetch (and lock) an escrow record, None if absent."""
        ...

    def save_claim(
        self,
        name_id: str,
        record: NameRecord,
        escrow_id: str,
        escrow: EscrowRecord | None,
    ) -> None:
        """
        Write a name record and its escrow record together.

        This is the only write path for both ledgers. Pass escrow=None to
        leave the escrow ledger untouched.
        """
        ...

    def add_receipt(self, owner: str, receipt_id: str, receipt: ReceiptRecord) -> None:
        """Append a receipt to the owner's receipt list."""
        ...

    def get_receipt(self, receipt_id: str) -> ReceiptRecord | None:
        ...

    def list_receipt_ids(self, owner: str) -> list[str]:
        """Owner's receipt ids in insertion order."""
        ...


class RegistryRepository(Protocol):
    """Port interface for registry persistence."""

    def transaction(self) -> AbstractContextManager[RegistryTransaction]:
        """
        Open an atomic, serialized transaction.

        The context commits on normal exit and rolls back every write
        made through it if the block raises.
        """
        ...
