"""
Registry events - Observable records emitted by committed operations.

Events are buffered while an operation runs and handed to the
EventPublisher only after its transaction commits, so a rejected
operation never emits anything.
"""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class RegistryEvent:
    """Base class for registry events."""

    time: int

    @property
    def event_name(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class NameRegistration(RegistryEvent):
    name: str


@dataclass(frozen=True)
class NameRenew(RegistryEvent):
    name: str
    owner: str


@dataclass(frozen=True)
class NameTransfer(RegistryEvent):
    name: str
    owner: str
    new_owner: str


@dataclass(frozen=True)
class Pay(RegistryEvent):
    owner: str
    name: str
    amount: int


@dataclass(frozen=True)
class Receipt(RegistryEvent):
    name: str
    price_in_wei: int
    expiration: int
