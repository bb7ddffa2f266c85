"""Domain-level request contracts and the storage capability shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .account import Account


@dataclass(slots=True)
class CreateAccountInput:
    """Validated inputs required to open an account."""

    first_name: str
    last_name: str


@dataclass(slots=True)
class UpdateAccountInput:
    """Name fields to overwrite on an existing account."""

    id: int
    first_name: str
    last_name: str


@dataclass(slots=True)
class TransferInput:
    """Target account and the absolute balance to set on it."""

    to_account: int
    amount: int


class AccountStore(Protocol):
    """Persistence capability the service depends on.

    Implementations raise :class:`~bank_api.domain.errors.AccountNotFoundError`
    for missing rows and :class:`~bank_api.domain.errors.BackendError` for
    anything the backend itself rejects.
    """

    def init(self) -> None:
        ...

    def list_accounts(self) -> list[Account]:
        ...

    def get_account(self, account_id: int) -> Account:
        ...

    def create_account(self, payload: CreateAccountInput) -> Account:
        ...

    def update_account(self, payload: UpdateAccountInput) -> Account:
        ...

    def delete_account(self, account_id: int) -> None:
        ...

    def transfer(self, payload: TransferInput) -> Account:
        ...
