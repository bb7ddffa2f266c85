"""Database repository for bank account data."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

import psycopg
from psycopg.rows import tuple_row
from psycopg_pool import ConnectionPool

from .domain.account import Account
from .domain.contracts import CreateAccountInput, TransferInput, UpdateAccountInput
from .domain.errors import AccountNotFoundError, BackendError

logger = logging.getLogger(__name__)

_COLUMNS = "id, first_name, last_name, number, balance, created_at"


class PostgresAccountStore:
    """Postgres-backed account persistence over a shared connection pool.

    Update and transfer are single ``UPDATE ... RETURNING`` statements, so the
    row handed back is the one the write produced; there is no window for a
    concurrent delete between the write and the read.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """Store the connection pool used for all database interactions."""
        self._pool = pool

    @contextmanager
    def _cursor(self) -> Iterator[psycopg.Cursor]:
        """Yield a tuple cursor, committing on success and wrapping driver failures."""
        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    yield cur
                conn.commit()
        except psycopg.Error as exc:
            logger.error("account store query failed: %s", exc)
            raise BackendError(str(exc)) from exc

    def init(self) -> None:
        """Create the account table when it does not exist yet."""
        with self._cursor() as cur:
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS account (
                    id serial PRIMARY KEY,
                    first_name varchar(50),
                    last_name varchar(50),
                    number serial,
                    balance serial,
                    created_at timestamp
                )
                """
            )

    def list_accounts(self) -> list[Account]:
        with self._cursor() as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM account")
            rows = cur.fetchall()
        return [self._map_record(row) for row in rows]

    def get_account(self, account_id: int) -> Account:
        """Fetch an account by id or raise ``AccountNotFoundError``."""
        with self._cursor() as cur:
            cur.execute(f"SELECT {_COLUMNS} FROM account WHERE id = %s", (account_id,))
            row = cur.fetchone()
        if not row:
            raise AccountNotFoundError(account_id)
        return self._map_record(row)

    def create_account(self, payload: CreateAccountInput) -> Account:
        """Insert an account; ``number`` and ``balance`` come from their column sequences."""
        with self._cursor() as cur:
            cur.execute(
                f"""
                INSERT INTO account (first_name, last_name, created_at)
                VALUES (%s, %s, %s)
                RETURNING {_COLUMNS}
                """,
                (payload.first_name, payload.last_name, datetime.now(timezone.utc)),
            )
            row = cur.fetchone()
        return self._map_record(row)

    def update_account(self, payload: UpdateAccountInput) -> Account:
        with self._cursor() as cur:
            cur.execute(
                f"""
                UPDATE account
                SET first_name = %s, last_name = %s
                WHERE id = %s
                RETURNING {_COLUMNS}
                """,
                (payload.first_name, payload.last_name, payload.id),
            )
            row = cur.fetchone()
        if not row:
            raise AccountNotFoundError(payload.id)
        return self._map_record(row)

    def delete_account(self, account_id: int) -> None:
        """Delete the row if present; missing ids are not an error."""
        with self._cursor() as cur:
            cur.execute("DELETE FROM account WHERE id = %s", (account_id,))

    def transfer(self, payload: TransferInput) -> Account:
        """Overwrite the target account balance with ``payload.amount``."""
        with self._cursor() as cur:
            cur.execute(
                f"""
                UPDATE account
                SET balance = %s
                WHERE id = %s
                RETURNING {_COLUMNS}
                """,
                (payload.amount, payload.to_account),
            )
            row = cur.fetchone()
        if not row:
            raise AccountNotFoundError(payload.to_account)
        return self._map_record(row)

    def _map_record(self, row: tuple) -> Account:
        """Convert a raw database tuple into the domain ``Account`` dataclass."""
        return Account(
            id=row[0],
            first_name=row[1],
            last_name=row[2],
            number=row[3],
            balance=row[4],
            created_at=row[5],
        )
