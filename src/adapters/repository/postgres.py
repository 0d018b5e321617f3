"""
PostgreSQL repository adapter - Implements RegistryRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Serialization Design:
---------------------
Each domain operation runs in one database transaction on one pooled
connection. Serialization against concurrent callers comes from row locks:

1. **registry_state FOR UPDATE**: The singleton counter row is locked when
   read, so registrations queue behind each other and the ordering guard
   always compares against the committed counter.

2. **name_records / escrow_records FOR UPDATE**: Rows touched by renew,
   transfer and withdraw are locked for the rest of the transaction. Every
   operation locks the name row before the escrow row, so two transactions
   on the same name queue instead of deadlocking.

3. **Rollback**: psycopg's transaction block rolls back on any exception,
   including a payout failure raised from inside the domain service.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from psycopg import Connection
from psycopg_pool import ConnectionPool

from src.domain.ports import EscrowRecord, NameRecord, ReceiptRecord

logger = logging.getLogger(__name__)


def _to_record(row: tuple | None) -> NameRecord | None:
    if row is None:
        return None
    return NameRecord(
        name=bytes(row[0]),
        owner=row[1],
        expiration=int(row[2]),
        price=int(row[3]),
    )


class PostgresRegistryTransaction:
    """Unit of work bound to a single open database transaction."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def read_tx_counter(self) -> int:
        row = self._conn.execute(
            "SELECT tx_counter FROM registry_state WHERE id = 1 FOR UPDATE"
        ).fetchone()
        return int(row[0]) if row is not None else 0

    def write_tx_counter(self, value: int) -> None:
        self._conn.execute(
            """
            INSERT INTO registry_state (id, tx_counter) VALUES (1, %s)
            ON CONFLICT (id) DO UPDATE SET tx_counter = EXCLUDED.tx_counter
            """,
            (value,),
        )

    def get_name(self, name_id: str) -> NameRecord | None:
        row = self._conn.execute(
            """
            SELECT name, owner, expiration, price
            FROM name_records
            WHERE name_id = %s
            FOR UPDATE
            """,
            (name_id,),
        ).fetchone()
        return _to_record(row)

    def get_escrow(self, escrow_id: str) -> EscrowRecord | None:
        row = self._conn.execute(
            """
            SELECT name, owner, expiration, price
            FROM escrow_records
            WHERE escrow_id = %s
            FOR UPDATE
            """,
            (escrow_id,),
        ).fetchone()
        return _to_record(row)

    def save_claim(
        self,
        name_id: str,
        record: NameRecord,
        escrow_id: str,
        escrow: EscrowRecord | None,
    ) -> None:
        self._conn.execute(
            """
            INSERT INTO name_records (name_id, name, owner, expiration, price)
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (name_id) DO UPDATE
            SET name = EXCLUDED.name,
                owner = EXCLUDED.owner,
                expiration = EXCLUDED.expiration,
                price = EXCLUDED.price
            """,
            (name_id, record.name, record.owner, record.expiration, record.price),
        )
        if escrow is None:
            return
        self._conn.execute(
            """
            INSERT INTO escrow_records (escrow_id, name, owner, expiration, price)
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (escrow_id) DO UPDATE
            SET name = EXCLUDED.name,
                owner = EXCLUDED.owner,
                expiration = EXCLUDED.expiration,
                price = EXCLUDED.price
            """,
            (escrow_id, escrow.name, escrow.owner, escrow.expiration, escrow.price),
        )

    def add_receipt(self, owner: str, receipt_id: str, receipt: ReceiptRecord) -> None:
        # Receipts are append-only: a duplicate id is an error, never an update
        self._conn.execute(
            """
            INSERT INTO receipts (receipt_id, owner, price_in_wei, issued_at, expiration)
            VALUES (%s, %s, %s, %s, %s)
            """,
            (
                receipt_id,
                owner,
                receipt.price_in_wei,
                receipt.timestamp,
                receipt.expiration,
            ),
        )

    def get_receipt(self, receipt_id: str) -> ReceiptRecord | None:
        row = self._conn.execute(
            "SELECT price_in_wei, issued_at, expiration FROM receipts WHERE receipt_id = %s",
            (receipt_id,),
        ).fetchone()
        if row is None:
            return None
        return ReceiptRecord(
            price_in_wei=int(row[0]),
            timestamp=int(row[1]),
            expiration=int(row[2]),
        )

    def list_receipt_ids(self, owner: str) -> list[str]:
        rows = self._conn.execute(
            "SELECT receipt_id FROM receipts WHERE owner = %s ORDER BY seq",
            (owner,),
        ).fetchall()
        return [row[0] for row in rows]


class PostgresRegistryRepository:
    """
    Implements RegistryRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    @contextmanager
    def transaction(self) -> Iterator[PostgresRegistryTransaction]:
        """
        Open a database transaction on a pooled connection.

        Commits when the block exits normally, rolls back if it raises.
        """
        with self._pool.connection() as conn, conn.transaction():
            yield PostgresRegistryTransaction(conn)


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
