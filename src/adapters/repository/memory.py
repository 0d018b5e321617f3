"""
In-memory repository adapter - Implements RegistryRepository protocol.

Process-local ledgers for development and tests. A single re-entrant lock
serializes transactions. Each transaction keeps an undo log of the entries
it writes and replays it in reverse if the transaction body raises, giving
all-or-nothing effect. Read-only transactions log nothing, so their cost
does not grow with the size of the ledgers.
"""

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from src.domain.ports import EscrowRecord, NameRecord, ReceiptRecord

logger = logging.getLogger(__name__)


@dataclass
class _Ledgers:
    tx_counter: int = 0
    names: dict[str, NameRecord] = field(default_factory=dict)
    escrows: dict[str, EscrowRecord] = field(default_factory=dict)
    receipts: dict[str, ReceiptRecord] = field(default_factory=dict)
    receipt_lists: dict[str, list[str]] = field(default_factory=dict)


class InMemoryRegistryTransaction:
    """Unit of work bound to the repository's live ledgers."""

    def __init__(self, ledgers: _Ledgers) -> None:
        self._ledgers = ledgers
        self._undo: list[Callable[[], None]] = []

    @property
    def pending_undo(self) -> int:
        """Number of undo steps recorded so far."""
        return len(self._undo)

    def rollback(self) -> None:
        while self._undo:
            self._undo.pop()()

    def _remember(self, table: dict, key: str) -> None:
        # Records are frozen, so keeping the old reference is enough
        if key in table:
            old = table[key]
            self._undo.append(lambda: table.__setitem__(key, old))
        else:
            self._undo.append(lambda: table.pop(key, None))

    def read_tx_counter(self) -> int:
        return self._ledgers.tx_counter

    def write_tx_counter(self, value: int) -> None:
        old = self._ledgers.tx_counter
        self._undo.append(lambda: setattr(self._ledgers, "tx_counter", old))
        self._ledgers.tx_counter = value

    def get_name(self, name_id: str) -> NameRecord | None:
        return self._ledgers.names.get(name_id)

    def get_escrow(self, escrow_id: str) -> EscrowRecord | None:
        return self._ledgers.escrows.get(escrow_id)

    def save_claim(
        self,
        name_id: str,
        record: NameRecord,
        escrow_id: str,
        escrow: EscrowRecord | None,
    ) -> None:
        self._remember(self._ledgers.names, name_id)
        self._ledgers.names[name_id] = record
        if escrow is not None:
            self._remember(self._ledgers.escrows, escrow_id)
            self._ledgers.escrows[escrow_id] = escrow

    def add_receipt(self, owner: str, receipt_id: str, receipt: ReceiptRecord) -> None:
        self._remember(self._ledgers.receipts, receipt_id)
        self._ledgers.receipts[receipt_id] = receipt

        lists = self._ledgers.receipt_lists
        if owner in lists:
            ids = lists[owner]
            length = len(ids)
            self._undo.append(lambda: ids.__delitem__(slice(length, None)))
        else:
            ids = lists[owner] = []
            self._undo.append(lambda: lists.pop(owner, None))
        ids.append(receipt_id)

    def get_receipt(self, receipt_id: str) -> ReceiptRecord | None:
        return self._ledgers.receipts.get(receipt_id)

    def list_receipt_ids(self, owner: str) -> list[str]:
        return list(self._ledgers.receipt_lists.get(owner, []))


class InMemoryRegistryRepository:
    """
    Implements RegistryRepository protocol with process-local dicts.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._ledgers = _Ledgers()

    @contextmanager
    def transaction(self) -> Iterator[InMemoryRegistryTransaction]:
        with self._lock:
            tx = InMemoryRegistryTransaction(self._ledgers)
            try:
                yield tx
            except BaseException:
                tx.rollback()
                logger.debug("Transaction rolled back")
                raise
