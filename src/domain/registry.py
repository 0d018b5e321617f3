"""
Registry domain service - Escrowed name registration protocol.

This module contains the core business logic of the name registry:
claiming a name for a fixed period against an escrowed fee, renewing and
transferring it, and reclaiming the fee once the claim lapses.

Ordering Guard (Anti-Front-Running)
===================================

Pending registrations are visible to third parties before they execute.
Each registration therefore carries the ordering counter value the caller
observed. At execution the live counter is read under the transaction's
lock; if another registration committed in between, the values differ and
the registration is rejected with OrderingConflict. The counter increments
by exactly one per successful registration, so at most one registration
succeeds per observed value. Retrying is the caller's job.

Name Lifecycle
==============

    AVAILABLE -> ACTIVE     (register)
    ACTIVE    -> ACTIVE     (renew_name, transfer_name)
    ACTIVE    -> EXPIRED    (time passes)
    EXPIRED   -> ACTIVE     (register by anyone, renew_name by owner)
    EXPIRED   -> AVAILABLE  (withdraw clears the owner)

Escrow records are keyed per (name, claimant) and move in lock-step with the
name record through RegistryTransaction.save_claim. Transfers keep the
escrow at the original claimant's key.
"""

import logging
from dataclasses import dataclass, field, replace

from .events import NameRegistration, NameRenew, NameTransfer, Pay, Receipt, RegistryEvent
from .exceptions import (
    InvalidRecipient,
    NameUnavailable,
    NotOwner,
    NotYetEligible,
    OrderingConflict,
    PaymentInsufficient,
)
from .identifiers import NameLike, escrow_id, name_bytes, name_id, receipt_id
from .ports import (
    Clock,
    EscrowRecord,
    EventPublisher,
    NameRecord,
    NameState,
    PayoutGateway,
    ReceiptRecord,
    RegistryRepository,
    Versioned,
)
from .pricing import PriceSchedule

logger = logging.getLogger(__name__)

EXPIRATION_PERIOD = 365 * 24 * 60 * 60


@dataclass(frozen=True)
class RegistrationResult:
    """Identifiers and state produced by a successful registration."""

    name_id: str
    escrow_id: str
    receipt_id: str
    expiration: int
    tx_counter: int


@dataclass
class RegistryService:
    """
    Domain service for the name registry.

    Every mutating operation runs inside a single repository transaction.
    Events are published only after that transaction commits.
    """

    repository: RegistryRepository
    clock: Clock
    payout: PayoutGateway
    events: EventPublisher
    pricing: PriceSchedule = field(default_factory=PriceSchedule)
    expiration_period: int = EXPIRATION_PERIOD

    def register(
        self, caller: str, name: NameLike, observed_counter: int, value: int
    ) -> RegistrationResult:
        """
        Claim a name for one expiration period.

        Preconditions are checked in order: ordering counter, name length,
        availability, payment. Payment above the price is kept, not refunded.

        Args:
            caller: Identity of the registering caller
            name: Name to claim
            observed_counter: Ordering counter value the caller read
            value: Payment submitted with the registration (wei)

        Returns:
            RegistrationResult with the new identifiers and counter value

        Raises:
            OrderingConflict: observed_counter is not the live counter
            NameTooShort: name is shorter than the minimum length
            NameUnavailable: name is owned and not expired
            PaymentInsufficient: value is below price(name)
        """
        raw = name_bytes(name)

        with self.repository.transaction() as tx:
            now = self.clock.now()
            live_counter = tx.read_tx_counter()
            if observed_counter != live_counter:
                raise OrderingConflict(f"observed {observed_counter}, live {live_counter}")

            price = self.pricing.price(raw)
            nid = name_id(raw)
            current = tx.get_name(nid) or NameRecord()
            if not current.is_available(now):
                raise NameUnavailable(_label(raw))
            if value < price:
                raise PaymentInsufficient(f"sent {value}, price {price}")

            expiration = now + self.expiration_period
            record = NameRecord(name=raw, owner=caller, expiration=expiration, price=price)
            eid = escrow_id(raw, caller)
            rid = receipt_id(raw, caller, now)
            receipt = ReceiptRecord(
                price_in_wei=self.pricing.base_price,
                timestamp=now,
                expiration=expiration,
            )

            tx.write_tx_counter(live_counter + 1)
            tx.save_claim(nid, record, eid, record)
            tx.add_receipt(caller, rid, receipt)

        logger.info("Registered %r for %s until %d", _label(raw), caller, expiration)
        self._publish(
            NameRegistration(time=now, name=_label(raw)),
            Receipt(
                time=now,
                name=_label(raw),
                price_in_wei=receipt.price_in_wei,
                expiration=expiration,
            ),
        )
        return RegistrationResult(
            name_id=nid,
            escrow_id=eid,
            receipt_id=rid,
            expiration=expiration,
            tx_counter=live_counter + 1,
        )

    def renew_name(self, caller: str, name: NameLike) -> int:
        """
        Extend the caller's name by one expiration period.

        Renewal is additive from the previous expiration, even if that is
        already in the past. The caller's escrow record is extended with it.

        Returns:
            New expiration time

        Raises:
            NotOwner: caller does not own the name
        """
        raw = name_bytes(name)

        with self.repository.transaction() as tx:
            now = self.clock.now()
            nid = name_id(raw)
            record = tx.get_name(nid) or NameRecord(name=raw)
            if record.owner is None or record.owner != caller:
                raise NotOwner(_label(raw))

            eid = escrow_id(raw, caller)
            escrow = tx.get_escrow(eid)
            renewed = replace(record, expiration=record.expiration + self.expiration_period)
            if escrow is not None:
                escrow = replace(escrow, expiration=escrow.expiration + self.expiration_period)
            tx.save_claim(nid, renewed, eid, escrow)

        logger.info("Renewed %r for %s until %d", _label(raw), caller, renewed.expiration)
        self._publish(NameRenew(time=now, name=_label(raw), owner=caller))
        return renewed.expiration

    def transfer_name(self, caller: str, name: NameLike, new_owner: str) -> None:
        """
        Hand the caller's name to another identity.

        The escrow record stays keyed by the caller's escrow id; only its
        owner field is reassigned.

        Raises:
            InvalidRecipient: new_owner is null
            NotOwner: caller does not own the name
        """
        raw = name_bytes(name)

        with self.repository.transaction() as tx:
            now = self.clock.now()
            nid = name_id(raw)
            record = tx.get_name(nid) or NameRecord(name=raw)
            if record.owner is None or record.owner != caller:
                raise NotOwner(_label(raw))
            if not new_owner:
                raise InvalidRecipient("new owner is null")

            eid = escrow_id(raw, caller)
            escrow = tx.get_escrow(eid)
            if escrow is not None:
                escrow = replace(escrow, owner=new_owner)
            tx.save_claim(nid, replace(record, owner=new_owner), eid, escrow)

        logger.info("Transferred %r from %s to %s", _label(raw), caller, new_owner)
        self._publish(NameTransfer(time=now, name=_label(raw), owner=caller, new_owner=new_owner))

    def withdraw(self, caller: str, name: NameLike, payout_address: str) -> int:
        """
        Reclaim the escrowed fee of an expired claim.

        Clears the owner of the caller's escrow record (so it cannot be
        claimed twice) and of the name record, then pays the escrowed price
        to payout_address. The name record is cleared even when a later
        registrant holds it. A failed payout rolls back the whole withdrawal.

        Returns:
            Amount paid out (wei)

        Raises:
            InvalidRecipient: payout_address is null
            NotOwner: caller owns no escrow for this name
            NotYetEligible: the escrow has not expired yet
            ValueTransferFailed: the payout could not be delivered
        """
        raw = name_bytes(name)

        with self.repository.transaction() as tx:
            now = self.clock.now()
            # Name row before escrow row, the lock order every operation uses
            nid = name_id(raw)
            record = tx.get_name(nid) or NameRecord(name=raw)
            eid = escrow_id(raw, caller)
            escrow = tx.get_escrow(eid) or EscrowRecord(name=raw)
            if escrow.owner is None or escrow.owner != caller:
                raise NotOwner(_label(raw))
            if not escrow.expiration < now:
                raise NotYetEligible(f"escrow expires at {escrow.expiration}")
            if not payout_address:
                raise InvalidRecipient("payout address is null")

            tx.save_claim(nid, replace(record, owner=None), eid, replace(escrow, owner=None))
            # Inside the transaction: a failed payout undoes the writes above
            self.payout.send(payout_address, escrow.price)

        logger.info("Paid %d wei for %r to %s", escrow.price, _label(raw), payout_address)
        self._publish(Pay(time=now, owner=caller, name=_label(raw), amount=escrow.price))
        return escrow.price

    # Read-only queries

    def get_name_hash(self, name: NameLike) -> str:
        return name_id(name)

    def get_pay_hash(self, caller: str, name: NameLike) -> str:
        return escrow_id(name, caller)

    def get_receipt_hash(self, caller: str, name: NameLike, timestamp: int | None = None) -> str:
        """Receipt id for caller/name at timestamp (defaults to now)."""
        if timestamp is None:
            timestamp = self.clock.now()
        return receipt_id(name, caller, timestamp)

    def get_price(self, name: NameLike) -> int:
        return self.pricing.price(name)

    def get_tx_counter(self) -> int:
        with self.repository.transaction() as tx:
            return tx.read_tx_counter()

    def read_name(self, name: NameLike) -> Versioned[NameRecord]:
        """
        Read a name record together with the current ordering counter.

        Both values come from one transaction, so the version is the
        counter a registration based on this read must submit.
        """
        raw = name_bytes(name)
        with self.repository.transaction() as tx:
            version = tx.read_tx_counter()
            record = tx.get_name(name_id(raw)) or NameRecord(name=raw)
        return Versioned(value=record, version=version)

    def name_state(self, record: NameRecord) -> NameState:
        return record.state(self.clock.now())

    def get_escrow(self, caller: str, name: NameLike) -> EscrowRecord:
        """Caller's escrow record for name, an empty record if absent."""
        raw = name_bytes(name)
        with self.repository.transaction() as tx:
            return tx.get_escrow(escrow_id(raw, caller)) or EscrowRecord(name=raw)

    def get_receipt(self, receipt_id_: str) -> ReceiptRecord:
        """Receipt by id. Unknown ids yield an all-zero receipt."""
        with self.repository.transaction() as tx:
            return tx.get_receipt(receipt_id_) or ReceiptRecord()

    def get_receipt_list(self, caller: str) -> list[str]:
        with self.repository.transaction() as tx:
            return tx.list_receipt_ids(caller)

    def _publish(self, *events: RegistryEvent) -> None:
        for event in events:
            self.events.publish(event)


def _label(raw: bytes) -> str:
    """Printable form of a raw name."""
    return raw.decode("utf-8", errors="replace")
