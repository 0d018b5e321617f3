"""
Domain exceptions - Semantic rejection types for the name registry.

Every registry failure is a precondition rejection: the surrounding
transaction is aborted and no partial effect survives. Each exception
carries a human-readable reason shown to the caller.
"""


class RegistryError(Exception):
    """Base class for registry domain errors."""

    reason = "Registry operation rejected"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = self.reason if detail is None else f"{self.reason}: {detail}"
        super().__init__(message)


class NameTooShort(RegistryError):
    """Name is below the minimum length."""

    reason = "Name too short"


class NameUnavailable(RegistryError):
    """Name is owned and its claim period has not lapsed."""

    reason = "Name unavailable"


class NotOwner(RegistryError):
    """Caller is not the recorded owner of the name or escrow."""

    reason = "Caller is not the owner"


class PaymentInsufficient(RegistryError):
    """Submitted value is below the computed price."""

    reason = "Payment insufficient"


class OrderingConflict(RegistryError):
    """Observed ordering counter is stale at execution time."""

    reason = "Ordering conflict"


class NotYetEligible(RegistryError):
    """Withdrawal attempted before the escrow expired."""

    reason = "Escrow not yet withdrawable"


class InvalidRecipient(RegistryError):
    """Target identity is null."""

    reason = "Invalid recipient"


class ValueTransferFailed(RegistryError):
    """Payout could not be delivered."""

    reason = "Value transfer failed"
