"""In-memory account store used for local runs and tests."""

from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime, timezone
from threading import Lock

from .domain.account import Account
from .domain.contracts import CreateAccountInput, TransferInput, UpdateAccountInput
from .domain.errors import AccountNotFoundError


class InMemoryAccountStore:
    """Thread-safe dict-backed store.

    ``id``, ``number`` and ``balance`` are drawn from three independent
    counters, matching the three serial columns of the Postgres table.
    """

    def __init__(self) -> None:
        self._accounts: dict[int, Account] = {}
        self._ids = itertools.count(1)
        self._numbers = itertools.count(1)
        self._balances = itertools.count(1)
        self._lock = Lock()

    def init(self) -> None:
        return None

    def list_accounts(self) -> list[Account]:
        with self._lock:
            return [replace(account) for account in self._accounts.values()]

    def get_account(self, account_id: int) -> Account:
        with self._lock:
            return replace(self._lookup(account_id))

    def create_account(self, payload: CreateAccountInput) -> Account:
        with self._lock:
            account = Account(
                id=next(self._ids),
                first_name=payload.first_name,
                last_name=payload.last_name,
                number=next(self._numbers),
                balance=next(self._balances),
                created_at=datetime.now(timezone.utc),
            )
            self._accounts[account.id] = account
            return replace(account)

    def update_account(self, payload: UpdateAccountInput) -> Account:
        with self._lock:
            account = self._lookup(payload.id)
            account.first_name = payload.first_name
            account.last_name = payload.last_name
            return replace(account)

    def delete_account(self, account_id: int) -> None:
        with self._lock:
            self._accounts.pop(account_id, None)

    def transfer(self, payload: TransferInput) -> Account:
        with self._lock:
            account = self._lookup(payload.to_account)
            account.balance = payload.amount
            return replace(account)

    def _lookup(self, account_id: int) -> Account:
        account = self._accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account
