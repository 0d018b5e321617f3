"""
Integration tests for the registry flow.

Drives the full application (routes, dependency wiring, domain service,
console adapters) over the in-memory repository with a controllable clock.
"""

import logging

import pytest
from fastapi.testclient import TestClient

from src.adapters.repository.memory import InMemoryRegistryRepository
from src.api import dependencies
from src.api.main import app
from src.domain.registry import EXPIRATION_PERIOD
from tests.conftest import ALICE, BOB, CAROL, ONE_ETHER, START_TIME, FakeClock


def caller(identity: str) -> dict:
    """Create the caller identity header."""
    return {"X-Caller-Identity": identity}


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    """Replace the system clock used by the dependency wiring."""
    fake = FakeClock()
    monkeypatch.setattr(dependencies, "_clock", fake)
    return fake


@pytest.fixture
def client(clock: FakeClock) -> TestClient:
    """Create test client with fresh in-memory ledgers."""
    app.state.repository = InMemoryRegistryRepository()
    app.state.pool = None
    return TestClient(app)


def register(client: TestClient, identity: str, name: str, value: int = ONE_ETHER):
    """Read the counter and register with it, as a well-behaved caller does."""
    counter = client.get("/v1/tx-counter").json()["tx_counter"]
    return client.post(
        "/v1/names/register",
        json={"name": name, "observed_counter": counter, "value": value},
        headers=caller(identity),
    )


class TestRegisterFlow:
    """End-to-end registration scenarios."""

    def test_register_ab_scenario(self, client: TestClient) -> None:
        """'ab' for half an ether with counter 0 succeeds and lasts a year."""
        response = client.post(
            "/v1/names/register",
            json={"name": "ab", "observed_counter": 0, "value": ONE_ETHER // 2},
            headers=caller(ALICE),
        )

        assert response.status_code == 201
        assert response.json()["tx_counter"] == 1
        assert client.get("/v1/tx-counter").json() == {"tx_counter": 1}

        record = client.get("/v1/names/ab").json()
        assert record["owner"] == ALICE
        assert record["expiration"] == START_TIME + 365 * 24 * 60 * 60
        assert record["state"] == "ACTIVE"
        assert record["tx_counter"] == 1

        # Immediate re-registration with the fresh counter
        response = client.post(
            "/v1/names/register",
            json={"name": "ab", "observed_counter": 1, "value": ONE_ETHER},
            headers=caller(BOB),
        )
        assert response.status_code == 409
        assert "Name unavailable" in response.json()["detail"]

    def test_reregister_after_expiration(self, client: TestClient, clock: FakeClock) -> None:
        register(client, ALICE, "ab")
        clock.advance(EXPIRATION_PERIOD + 1)

        response = register(client, BOB, "ab")

        assert response.status_code == 201
        assert client.get("/v1/names/ab").json()["owner"] == BOB

    def test_stale_counter_returns_409(self, client: TestClient) -> None:
        register(client, ALICE, "ab")

        response = client.post(
            "/v1/names/register",
            json={"name": "cd", "observed_counter": 0, "value": ONE_ETHER},
            headers=caller(BOB),
        )

        assert response.status_code == 409
        assert "Ordering conflict" in response.json()["detail"]

    def test_receipts_for_caller(self, client: TestClient) -> None:
        receipt_id = register(client, ALICE, "ab").json()["receipt_id"]

        assert client.get("/v1/receipts", headers=caller(ALICE)).json() == {
            "receipt_ids": [receipt_id]
        }
        assert client.get("/v1/receipts", headers=caller(BOB)).json() == {"receipt_ids": []}
        assert client.get(f"/v1/receipts/{receipt_id}").json() == {
            "price_in_wei": ONE_ETHER,
            "timestamp": START_TIME,
            "expiration": START_TIME + EXPIRATION_PERIOD,
        }

    def test_receipt_hash_matches_issued_receipt(self, client: TestClient) -> None:
        expected = client.get("/v1/names/ab/receipt-hash", headers=caller(ALICE)).json()
        receipt_id = register(client, ALICE, "ab").json()["receipt_id"]

        assert expected["hash"] == receipt_id

    def test_events_logged(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO):
            register(client, ALICE, "ab")

        assert "[EVENT] NameRegistration" in caplog.text
        assert "[EVENT] Receipt" in caplog.text


class TestOwnershipFlow:
    """Renew, transfer and withdraw through the API."""

    def test_renew_and_transfer(self, client: TestClient) -> None:
        expiration = register(client, ALICE, "ab").json()["expiration"]

        renewed = client.post("/v1/names/renew", json={"name": "ab"}, headers=caller(ALICE))
        assert renewed.json()["expiration"] == expiration + EXPIRATION_PERIOD

        transferred = client.post(
            "/v1/names/transfer",
            json={"name": "ab", "new_owner": BOB},
            headers=caller(ALICE),
        )
        assert transferred.status_code == 200
        assert client.get("/v1/names/ab").json()["owner"] == BOB

        # Escrow stays under Alice's key
        escrow = client.get("/v1/names/ab/escrow", headers=caller(ALICE)).json()
        assert escrow["owner"] == BOB
        assert escrow["expiration"] == expiration + EXPIRATION_PERIOD

        denied = client.post("/v1/names/renew", json={"name": "ab"}, headers=caller(ALICE))
        assert denied.status_code == 403

    def test_withdraw_lifecycle(
        self,
        client: TestClient,
        clock: FakeClock,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Withdrawal is refused early and for strangers, then pays exactly once."""
        register(client, ALICE, "y")
        body = {"name": "y", "payout_address": CAROL}

        assert client.post("/v1/names/withdraw", json=body, headers=caller(BOB)).status_code == 403
        assert client.post("/v1/names/withdraw", json=body, headers=caller(ALICE)).status_code == 425

        clock.advance(EXPIRATION_PERIOD + 1)
        with caplog.at_level(logging.INFO):
            response = client.post("/v1/names/withdraw", json=body, headers=caller(ALICE))

        assert response.status_code == 200
        assert response.json() == {"name": "y", "amount": ONE_ETHER, "payout_address": CAROL}
        assert f"[PAYOUT] Recipient: {CAROL} Amount: {ONE_ETHER}" in caplog.text
        assert client.get("/v1/names/y").json()["state"] == "AVAILABLE"

        again = client.post("/v1/names/withdraw", json=body, headers=caller(ALICE))
        assert again.status_code == 403


class TestHealth:
    def test_health_without_database(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
