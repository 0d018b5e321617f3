"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Wei amounts are plain integers.
"""

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Request model for name registration."""

    name: str = Field(..., description="Name to claim")
    observed_counter: int = Field(
        ..., ge=0, description="Ordering counter value read from GET /v1/tx-counter"
    )
    value: int = Field(..., ge=0, description="Payment in wei (excess is not refunded)")


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    name: str
    name_id: str
    escrow_id: str
    receipt_id: str
    expiration: int
    tx_counter: int


class RenewRequest(BaseModel):
    """Request model for name renewal."""

    name: str


class RenewResponse(BaseModel):
    """Response model for successful renewal."""

    name: str
    expiration: int


class TransferRequest(BaseModel):
    """Request model for name transfer."""

    name: str
    new_owner: str = Field(..., description="Identity receiving the name")


class TransferResponse(BaseModel):
    """Response model for successful transfer."""

    name: str
    owner: str


class WithdrawRequest(BaseModel):
    """Request model for escrow withdrawal."""

    name: str
    payout_address: str = Field(..., description="Address receiving the escrowed fee")


class WithdrawResponse(BaseModel):
    """Response model for successful withdrawal."""

    name: str
    amount: int
    payout_address: str


class NameRecordResponse(BaseModel):
    """Name record together with the ordering counter it was read at."""

    name: str
    name_id: str
    owner: str | None
    expiration: int
    price: int
    state: str
    tx_counter: int


class EscrowResponse(BaseModel):
    """Caller's escrow record for a name."""

    name: str
    escrow_id: str
    owner: str | None
    expiration: int
    price: int


class PriceResponse(BaseModel):
    name: str
    price: int


class HashResponse(BaseModel):
    name: str
    hash: str


class CounterResponse(BaseModel):
    tx_counter: int


class ReceiptResponse(BaseModel):
    """Receipt fields; all zero for unknown receipt ids."""

    price_in_wei: int
    timestamp: int
    expiration: int


class ReceiptListResponse(BaseModel):
    receipt_ids: list[str]


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
