"""HTTP route definitions for the bank API."""

from __future__ import annotations

import re

from fastapi import APIRouter, Depends, Header, Request
from pydantic import BaseModel, ConfigDict, Field

from ..domain.account import Account
from ..domain.contracts import CreateAccountInput, TransferInput, UpdateAccountInput
from ..domain.errors import InvalidRequestError
from ..domain.service import AccountService

router = APIRouter()

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")
# Same bounds as a signed 64-bit integer.
_MIN_ID = -(2**63)
_MAX_ID = 2**63 - 1


class AccountResponse(BaseModel):
    """Serialised representation of an `Account` aggregate."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    first_name: str | None = Field(alias="firstName")
    last_name: str | None = Field(alias="lastName")
    number: int
    balance: int
    created_at: str | None = Field(alias="createdAt")

    @classmethod
    def from_domain(cls, account: Account) -> "AccountResponse":
        """Build a response model from the domain aggregate."""
        return cls(
            id=account.id,
            first_name=account.first_name,
            last_name=account.last_name,
            number=account.number,
            balance=account.balance,
            created_at=account.created_at.isoformat() if account.created_at else None,
        )


class CreateAccountRequest(BaseModel):
    """Payload accepted when opening or renaming an account."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")


class TransferRequest(BaseModel):
    """Target account id and the absolute balance to set on it."""

    model_config = ConfigDict(populate_by_name=True)

    to_account: int = Field(alias="toAccount")
    amount: int


class DeleteAccountResponse(BaseModel):
    deleted: int


def get_service(request: Request) -> AccountService:
    """Resolve the `AccountService` stored on the FastAPI application state."""
    service: AccountService = request.app.state.account_service
    return service


def parse_account_id(id: str) -> int:
    """Parse the ``{id}`` path segment as a base-10 integer."""
    # the digit-count check keeps int() away from arbitrarily long inputs
    if not _ID_PATTERN.fullmatch(id) or len(id.lstrip("+-").lstrip("0")) > 19:
        raise InvalidRequestError(f"Invalid id given {id}")
    account_id = int(id)
    if not _MIN_ID <= account_id <= _MAX_ID:
        raise InvalidRequestError(f"Invalid id given {id}")
    return account_id


def require_account_owner(
    account_id: int = Depends(parse_account_id),
    token: str | None = Header(default=None, alias="x-jwt-token"),
    service: AccountService = Depends(get_service),
) -> int:
    """Gate a single-account route on the caller's token owning that account."""
    service.authorize(account_id, token)
    return account_id


@router.get("/account", response_model=list[AccountResponse])
def list_accounts(service: AccountService = Depends(get_service)) -> list[AccountResponse]:
    return [AccountResponse.from_domain(account) for account in service.list_accounts()]


@router.post("/account", response_model=AccountResponse)
def create_account(
    payload: CreateAccountRequest,
    service: AccountService = Depends(get_service),
) -> AccountResponse:
    """Open an account; its access token is only written to the service log."""
    account = service.create_account(
        CreateAccountInput(first_name=payload.first_name, last_name=payload.last_name)
    )
    return AccountResponse.from_domain(account)


@router.get("/account/{id}", response_model=AccountResponse)
def get_account(
    account_id: int = Depends(require_account_owner),
    service: AccountService = Depends(get_service),
) -> AccountResponse:
    return AccountResponse.from_domain(service.get_account(account_id))


@router.put("/account/{id}", response_model=AccountResponse)
def update_account(
    payload: CreateAccountRequest,
    account_id: int = Depends(require_account_owner),
    service: AccountService = Depends(get_service),
) -> AccountResponse:
    """Rename an account; number and balance are left untouched."""
    account = service.update_account(
        UpdateAccountInput(
            id=account_id,
            first_name=payload.first_name,
            last_name=payload.last_name,
        )
    )
    return AccountResponse.from_domain(account)


@router.delete("/account/{id}", response_model=DeleteAccountResponse)
def delete_account(
    account_id: int = Depends(require_account_owner),
    service: AccountService = Depends(get_service),
) -> DeleteAccountResponse:
    service.delete_account(account_id)
    return DeleteAccountResponse(deleted=account_id)


@router.put("/transfer", response_model=AccountResponse)
def transfer(
    payload: TransferRequest,
    service: AccountService = Depends(get_service),
) -> AccountResponse:
    """Overwrite the balance of ``toAccount`` with ``amount``."""
    account = service.transfer(TransferInput(to_account=payload.to_account, amount=payload.amount))
    return AccountResponse.from_domain(account)

