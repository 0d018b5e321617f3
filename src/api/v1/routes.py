"""
API v1 routes.

Defines REST endpoints for the escrowed name registry.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_caller_identity, get_registry_service
from src.api.models import (
    CounterResponse,
    ErrorResponse,
    EscrowResponse,
    HashResponse,
    NameRecordResponse,
    PriceResponse,
    ReceiptListResponse,
    ReceiptResponse,
    RegisterRequest,
    RegisterResponse,
    RenewRequest,
    RenewResponse,
    TransferRequest,
    TransferResponse,
    WithdrawRequest,
    WithdrawResponse,
)
from src.domain.exceptions import (
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
from src.domain.registry import RegistryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["v1"])

_STATUS_BY_ERROR: dict[type[RegistryError], int] = {
    NameTooShort: 422,
    NameUnavailable: status.HTTP_409_CONFLICT,
    NotOwner: status.HTTP_403_FORBIDDEN,
    PaymentInsufficient: status.HTTP_402_PAYMENT_REQUIRED,
    OrderingConflict: status.HTTP_409_CONFLICT,
    NotYetEligible: status.HTTP_425_TOO_EARLY,
    InvalidRecipient: 422,
    ValueTransferFailed: status.HTTP_502_BAD_GATEWAY,
}


def _rejected(exc: RegistryError) -> HTTPException:
    """Translate a domain rejection into an HTTP error carrying its reason."""
    logger.info("Rejected: %s", exc)
    return HTTPException(
        status_code=_STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST),
        detail=str(exc),
    )


@router.post(
    "/names/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {"model": ErrorResponse, "description": "Payment below price"},
        409: {"model": ErrorResponse, "description": "Name unavailable or ordering conflict"},
        422: {"model": ErrorResponse, "description": "Name too short or validation error"},
    },
    summary="Register a name",
    description="Claim a name for one expiration period. The request must carry the "
    "ordering counter the caller read from GET /v1/tx-counter; if another registration "
    "committed since, the request is rejected and must be resubmitted.",
)
async def register(
    request_data: RegisterRequest,
    caller: str = Depends(get_caller_identity),
    service: RegistryService = Depends(get_registry_service),
) -> RegisterResponse:
    """
    Register a name and escrow its fee.

    - **name**: Name to claim
    - **observed_counter**: Ordering counter read before submitting
    - **value**: Payment in wei, at least the name's price
    """
    try:
        result = service.register(
            caller, request_data.name, request_data.observed_counter, request_data.value
        )
    except RegistryError as exc:
        raise _rejected(exc) from None
    return RegisterResponse(
        name=request_data.name,
        name_id=result.name_id,
        escrow_id=result.escrow_id,
        receipt_id=result.receipt_id,
        expiration=result.expiration,
        tx_counter=result.tx_counter,
    )


@router.post(
    "/names/renew",
    response_model=RenewResponse,
    responses={403: {"model": ErrorResponse, "description": "Caller does not own the name"}},
    summary="Renew a name",
    description="Extend the caller's name and escrow by one expiration period.",
)
async def renew(
    request_data: RenewRequest,
    caller: str = Depends(get_caller_identity),
    service: RegistryService = Depends(get_registry_service),
) -> RenewResponse:
    try:
        expiration = service.renew_name(caller, request_data.name)
    except RegistryError as exc:
        raise _rejected(exc) from None
    return RenewResponse(name=request_data.name, expiration=expiration)


@router.post(
    "/names/transfer",
    response_model=TransferResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Caller does not own the name"},
        422: {"model": ErrorResponse, "description": "Null recipient"},
    },
    summary="Transfer a name",
    description="Hand the caller's name to another identity. "
    "Escrow withdrawal rights are not transferred.",
)
async def transfer(
    request_data: TransferRequest,
    caller: str = Depends(get_caller_identity),
    service: RegistryService = Depends(get_registry_service),
) -> TransferResponse:
    try:
        service.transfer_name(caller, request_data.name, request_data.new_owner)
    except RegistryError as exc:
        raise _rejected(exc) from None
    return TransferResponse(name=request_data.name, owner=request_data.new_owner)


@router.post(
    "/names/withdraw",
    response_model=WithdrawResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Caller holds no escrow for the name"},
        425: {"model": ErrorResponse, "description": "Escrow not yet expired"},
        502: {"model": ErrorResponse, "description": "Payout failed"},
    },
    summary="Withdraw an escrowed fee",
    description="Reclaim the fee paid for an expired claim. Succeeds once per escrow.",
)
async def withdraw(
    request_data: WithdrawRequest,
    caller: str = Depends(get_caller_identity),
    service: RegistryService = Depends(get_registry_service),
) -> WithdrawResponse:
    try:
        amount = service.withdraw(caller, request_data.name, request_data.payout_address)
    except RegistryError as exc:
        raise _rejected(exc) from None
    return WithdrawResponse(
        name=request_data.name,
        amount=amount,
        payout_address=request_data.payout_address,
    )


@router.get(
    "/names/{name}",
    response_model=NameRecordResponse,
    summary="Read a name record",
    description="Returns the name record and the ordering counter it was read at.",
)
async def read_name(
    name: str,
    service: RegistryService = Depends(get_registry_service),
) -> NameRecordResponse:
    versioned = service.read_name(name)
    record = versioned.value
    return NameRecordResponse(
        name=name,
        name_id=service.get_name_hash(name),
        owner=record.owner,
        expiration=record.expiration,
        price=record.price,
        state=service.name_state(record).value,
        tx_counter=versioned.version,
    )


@router.get(
    "/names/{name}/price",
    response_model=PriceResponse,
    responses={422: {"model": ErrorResponse, "description": "Name too short"}},
    summary="Get the price of a name",
)
async def get_price(
    name: str,
    service: RegistryService = Depends(get_registry_service),
) -> PriceResponse:
    try:
        price = service.get_price(name)
    except RegistryError as exc:
        raise _rejected(exc) from None
    return PriceResponse(name=name, price=price)


@router.get("/names/{name}/hash", response_model=HashResponse, summary="Get the name identifier")
async def get_name_hash(
    name: str,
    service: RegistryService = Depends(get_registry_service),
) -> HashResponse:
    return HashResponse(name=name, hash=service.get_name_hash(name))


@router.get(
    "/names/{name}/pay-hash",
    response_model=HashResponse,
    summary="Get the caller's escrow identifier",
)
async def get_pay_hash(
    name: str,
    caller: str = Depends(get_caller_identity),
    service: RegistryService = Depends(get_registry_service),
) -> HashResponse:
    return HashResponse(name=name, hash=service.get_pay_hash(caller, name))


@router.get(
    "/names/{name}/receipt-hash",
    response_model=HashResponse,
    summary="Get the caller's receipt identifier",
    description="Receipt identifier for the caller and name at the given time "
    "(defaults to the current time).",
)
async def get_receipt_hash(
    name: str,
    timestamp: int | None = None,
    caller: str = Depends(get_caller_identity),
    service: RegistryService = Depends(get_registry_service),
) -> HashResponse:
    return HashResponse(name=name, hash=service.get_receipt_hash(caller, name, timestamp))


@router.get(
    "/names/{name}/escrow",
    response_model=EscrowResponse,
    summary="Get the caller's escrow record",
)
async def get_escrow(
    name: str,
    caller: str = Depends(get_caller_identity),
    service: RegistryService = Depends(get_registry_service),
) -> EscrowResponse:
    escrow = service.get_escrow(caller, name)
    return EscrowResponse(
        name=name,
        escrow_id=service.get_pay_hash(caller, name),
        owner=escrow.owner,
        expiration=escrow.expiration,
        price=escrow.price,
    )


@router.get("/tx-counter", response_model=CounterResponse, summary="Get the ordering counter")
async def get_tx_counter(
    service: RegistryService = Depends(get_registry_service),
) -> CounterResponse:
    return CounterResponse(tx_counter=service.get_tx_counter())


@router.get(
    "/receipts",
    response_model=ReceiptListResponse,
    summary="List the caller's receipts",
)
async def get_receipt_list(
    caller: str = Depends(get_caller_identity),
    service: RegistryService = Depends(get_registry_service),
) -> ReceiptListResponse:
    return ReceiptListResponse(receipt_ids=service.get_receipt_list(caller))


@router.get("/receipts/{receipt_id}", response_model=ReceiptResponse, summary="Get a receipt")
async def get_receipt(
    receipt_id: str,
    service: RegistryService = Depends(get_registry_service),
) -> ReceiptResponse:
    receipt = service.get_receipt(receipt_id)
    return ReceiptResponse(
        price_in_wei=receipt.price_in_wei,
        timestamp=receipt.timestamp,
        expiration=receipt.expiration,
    )
