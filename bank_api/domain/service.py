"""Account service orchestrating persistence, token minting, and ownership checks."""

from __future__ import annotations

import logging

import jwt

from .account import Account
from .contracts import AccountStore, CreateAccountInput, TransferInput, UpdateAccountInput
from .errors import AuthError, BankError
from ..config import Settings, get_settings
from ..security.tokens import (
    ACCOUNT_NUMBER_CLAIM,
    decode_account_token,
    issue_account_token,
    token_account_number,
)

logger = logging.getLogger(__name__)


class AccountService:
    """Account workflows backed by an injected ``AccountStore``."""

    def __init__(self, store: AccountStore, settings: Settings | None = None) -> None:
        """Store dependencies used to orchestrate persistence and token issuance."""
        self._store = store
        self._settings = settings or get_settings()

    def list_accounts(self) -> list[Account]:
        return self._store.list_accounts()

    def get_account(self, account_id: int) -> Account:
        return self._store.get_account(account_id)

    def create_account(self, payload: CreateAccountInput) -> Account:
        """Persist a new account and mint its access token.

        The token is written to the service log only; callers of the HTTP API
        never receive it.
        """
        account = self._store.create_account(payload)
        token = issue_account_token(account.number, settings=self._settings)
        logger.info("account %s created, JWT token: %s", account.id, token)
        return account

    def update_account(self, payload: UpdateAccountInput) -> Account:
        return self._store.update_account(payload)

    def delete_account(self, account_id: int) -> None:
        self._store.delete_account(account_id)
        logger.info("account %s deleted", account_id)

    def transfer(self, payload: TransferInput) -> Account:
        """Set the target account's balance to ``payload.amount`` (no source debit)."""
        account = self._store.transfer(payload)
        logger.info("balance of account %s set to %s", payload.to_account, payload.amount)
        return account

    def authorize(self, account_id: int, token: str | None) -> None:
        """Raise ``AuthError`` unless ``token`` is bound to the account's number.

        Every failure surfaces as the same generic error; the cause is only
        logged.
        """
        if not token:
            logger.warning("access to account %s denied: missing token", account_id)
            raise AuthError()
        try:
            claims = decode_account_token(token, settings=self._settings)
        except jwt.PyJWTError as exc:
            logger.warning("access to account %s denied: %s", account_id, exc)
            raise AuthError() from exc

        try:
            account = self._store.get_account(account_id)
        except BankError as exc:
            logger.warning("access to account %s denied: %s", account_id, exc)
            raise AuthError() from exc

        claimed = token_account_number(claims)
        if claimed is None or claimed != account.number:
            logger.warning(
                "access to account %s denied: token number %r does not match",
                account_id,
                claims.get(ACCOUNT_NUMBER_CLAIM),
            )
            raise AuthError()
