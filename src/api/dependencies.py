"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from src.adapters.clock.system import SystemClock
from src.adapters.events.console import LoggingEventPublisher
from src.adapters.payout.console import ConsolePayoutGateway
from src.config.settings import get_settings
from src.domain.ports import RegistryRepository
from src.domain.pricing import PriceSchedule
from src.domain.registry import RegistryService

# Module-level singletons - adapters hold no per-request state
_clock = SystemClock()
_payout = ConsolePayoutGateway()
_event_publisher = LoggingEventPublisher()


def get_repository(request: Request) -> RegistryRepository:
    """
    Get registry repository from app state.

    The repository is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.repository


def get_clock() -> SystemClock:
    """Get system clock (singleton)."""
    return _clock


def get_payout_gateway() -> ConsolePayoutGateway:
    """Get console payout gateway (singleton)."""
    return _payout


def get_event_publisher() -> LoggingEventPublisher:
    """Get logging event publisher (singleton)."""
    return _event_publisher


def get_registry_service(request: Request) -> RegistryService:
    """
    Create registry service with injected dependencies.

    Wires together the repository, clock, payout gateway and event
    publisher, with fee and period constants taken from settings.
    """
    settings = get_settings()
    return RegistryService(
        repository=get_repository(request),
        clock=get_clock(),
        payout=get_payout_gateway(),
        events=get_event_publisher(),
        pricing=PriceSchedule(
            base_price=settings.base_price_wei,
            min_length=settings.min_name_length,
        ),
        expiration_period=settings.expiration_period_seconds,
    )


# Caller identity header, authenticated by the gateway in front of the API
caller_identity_header = APIKeyHeader(
    name="X-Caller-Identity",
    description="Identity of the calling account",
)


def get_caller_identity(identity: str = Depends(caller_identity_header)) -> str:
    """
    Extract the caller identity from the X-Caller-Identity header.

    FastAPI's APIKeyHeader automatically rejects requests without the
    header. Surrounding whitespace is stripped; identities are otherwise
    compared exactly.
    """
    return identity.strip()
