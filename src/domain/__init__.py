"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic of the escrowed name
registry. It defines its own port interfaces for infrastructure
abstraction, ensuring true hexagonal architecture decoupling.
"""

from .exceptions import (
    InvalidRecipient,
    NameTooShort,
    NameUnavailable,
    NotOwner,
    NotYetEligible,
    OrderingConflict,
    PaymentInsufficient,
    RegistryError,
    ValueTransferFailed,
)
from .ports import (
    Clock,
    EscrowRecord,
    EventPublisher,
    NameRecord,
    NameState,
    PayoutGateway,
    ReceiptRecord,
    RegistryRepository,
    RegistryTransaction,
    Versioned,
)
from .pricing import PriceSchedule
from .registry import RegistrationResult, RegistryService

__all__ = [
    "Clock",
    "EscrowRecord",
    "EventPublisher",
    "InvalidRecipient",
    "NameRecord",
    "NameState",
    "NameTooShort",
    "NameUnavailable",
    "NotOwner",
    "NotYetEligible",
    "OrderingConflict",
    "PaymentInsufficient",
    "PayoutGateway",
    "PriceSchedule",
    "ReceiptRecord",
    "RegistrationResult",
    "RegistryError",
    "RegistryRepository",
    "RegistryService",
    "RegistryTransaction",
    "ValueTransferFailed",
    "Versioned",
]
