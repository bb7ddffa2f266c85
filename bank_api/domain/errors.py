"""Error taxonomy shared by the store, service and HTTP layers."""

from __future__ import annotations


class BankError(Exception):
    """Base class; the message is what the API reports to the caller."""


class BackendError(BankError):
    """The relational backend is unreachable or a query failed."""


class AccountNotFoundError(BankError):
    def __init__(self, account_id: int) -> None:
        super().__init__(f"account {account_id} not found")
        self.account_id = account_id


class InvalidRequestError(BankError):
    """Malformed path parameter or request body."""


class MethodNotAllowedError(BankError):
    def __init__(self, method: str) -> None:
        super().__init__(f"Method not allowed {method}")
        self.method = method


class AuthError(BankError):
    """Missing, invalid or mismatched access token."""

    def __init__(self, reason: str = "Invalid token") -> None:
        super().__init__(reason)
        self.reason = reason
