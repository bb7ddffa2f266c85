"""Tests for the Postgres account store against a scripted connection pool."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone

import psycopg
import pytest

from bank_api.domain.contracts import CreateAccountInput, TransferInput, UpdateAccountInput
from bank_api.domain.errors import AccountNotFoundError, BackendError
from bank_api.repository import PostgresAccountStore

CREATED_AT = datetime(2024, 1, 2, 3, 4, 5)


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self._conn = conn
        self._rows: list[tuple] = []

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, *exc_info) -> bool:
        return False

    def execute(self, query: str, params=None) -> None:
        self._conn.executed.append((" ".join(query.split()), params))
        if self._conn.error is not None:
            raise self._conn.error
        self._rows = self._conn.results.pop(0) if self._conn.results else []

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)


class FakeConnection:
    def __init__(self) -> None:
        self.executed: list[tuple[str, object]] = []
        self.results: list[list[tuple]] = []
        self.error: Exception | None = None
        self.commits = 0

    def cursor(self, row_factory=None) -> FakeCursor:
        return FakeCursor(self)

    def commit(self) -> None:
        self.commits += 1


class FakePool:
    """Minimal stand-in for ``psycopg_pool.ConnectionPool``."""

    def __init__(self) -> None:
        self.conn = FakeConnection()

    @contextmanager
    def connection(self):
        yield self.conn


@pytest.fixture()
def pool() -> FakePool:
    return FakePool()


@pytest.fixture()
def store(pool) -> PostgresAccountStore:
    return PostgresAccountStore(pool)  # type: ignore[arg-type]


def _row(account_id: int = 1, balance: int = 1) -> tuple:
    return (account_id, "Ada", "Lovelace", 1, balance, CREATED_AT)


def test_init_creates_table_idempotently(store, pool):
    store.init()

    query, _ = pool.conn.executed[0]
    assert query.startswith("CREATE TABLE IF NOT EXISTS account")
    assert "number serial" in query
    assert "balance serial" in query
    assert pool.conn.commits == 1


def test_get_account_maps_row(store, pool):
    pool.conn.results.append([_row(account_id=4)])

    account = store.get_account(4)
    assert account.id == 4
    assert (account.first_name, account.last_name) == ("Ada", "Lovelace")
    assert account.created_at == CREATED_AT
    assert pool.conn.executed[0][1] == (4,)


def test_get_account_missing_row_raises_not_found(store, pool):
    pool.conn.results.append([])

    with pytest.raises(AccountNotFoundError):
        store.get_account(9)


def test_list_accounts_maps_all_rows(store, pool):
    pool.conn.results.append([_row(1), _row(2)])

    assert [account.id for account in store.list_accounts()] == [1, 2]


def test_create_account_leaves_number_and_balance_to_sequences(store, pool):
    pool.conn.results.append([_row()])

    store.create_account(CreateAccountInput(first_name="Ada", last_name="Lovelace"))

    query, params = pool.conn.executed[0]
    assert "INSERT INTO account (first_name, last_name, created_at)" in query
    assert "RETURNING" in query
    assert params[:2] == ("Ada", "Lovelace")
    assert params[2].tzinfo is timezone.utc


def test_update_account_uses_single_returning_statement(store, pool):
    pool.conn.results.append([_row()])

    store.update_account(UpdateAccountInput(id=1, first_name="Ada", last_name="King"))

    assert len(pool.conn.executed) == 1
    query, params = pool.conn.executed[0]
    assert query.startswith("UPDATE account SET first_name = %s, last_name = %s WHERE id = %s RETURNING")
    assert params == ("Ada", "King", 1)


def test_update_missing_row_raises_not_found(store, pool):
    pool.conn.results.append([])

    with pytest.raises(AccountNotFoundError):
        store.update_account(UpdateAccountInput(id=3, first_name="A", last_name="B"))


def test_transfer_overwrites_balance(store, pool):
    pool.conn.results.append([_row(account_id=2, balance=250)])

    account = store.transfer(TransferInput(to_account=2, amount=250))

    query, params = pool.conn.executed[0]
    assert query.startswith("UPDATE account SET balance = %s WHERE id = %s")
    assert params == (250, 2)
    assert account.balance == 250


def test_transfer_missing_row_raises_not_found(store, pool):
    pool.conn.results.append([])

    with pytest.raises(AccountNotFoundError) as excinfo:
        store.transfer(TransferInput(to_account=8, amount=1))
    assert excinfo.value.account_id == 8


def test_delete_does_not_check_existence(store, pool):
    store.delete_account(11)

    assert pool.conn.executed == [("DELETE FROM account WHERE id = %s", (11,))]
    assert pool.conn.commits == 1


def test_driver_errors_become_backend_errors(store, pool):
    pool.conn.error = psycopg.OperationalError("connection refused")

    with pytest.raises(BackendError) as excinfo:
        store.list_accounts()
    assert "connection refused" in str(excinfo.value)
    assert pool.conn.commits == 0
