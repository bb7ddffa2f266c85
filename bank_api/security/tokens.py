"""Utilities for issuing and validating account access JWTs."""

from __future__ import annotations

import time
from typing import Any

import jwt

from ..config import Settings, get_settings

SIGNING_ALGORITHM = "HS256"
# Any HMAC variant is accepted on decode; asymmetric and "none" tokens are not.
ACCEPTED_ALGORITHMS = ["HS256", "HS384", "HS512"]

ACCOUNT_NUMBER_CLAIM = "accountNumber"
EXPIRES_AT_CLAIM = "expiresAt"


def issue_account_token(account_number: int, *, settings: Settings | None = None) -> str:
    """Create a signed JWT bound to an account number.

    Parameters
    ----------
    account_number:
        The account's ``number`` field, embedded in the ``accountNumber`` claim.
    settings:
        Source of the signing secret and TTL; defaults to the process settings.

    Returns
    -------
    str
        The encoded JWT. ``expiresAt`` is informational; it is not the
        registered ``exp`` claim and nothing enforces it.
    """

    settings = settings or get_settings()
    payload: dict[str, Any] = {
        EXPIRES_AT_CLAIM: int(time.time()) + settings.jwt_ttl_seconds,
        ACCOUNT_NUMBER_CLAIM: account_number,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=SIGNING_ALGORITHM)


def decode_account_token(token: str, *, settings: Settings | None = None) -> dict[str, Any]:
    """Verify the signature of ``token`` and return its claims.

    Raises
    ------
    jwt.PyJWTError
        Propagated when the token is malformed, signed with another secret,
        or uses an algorithm outside the HMAC family.
    """

    settings = settings or get_settings()
    return jwt.decode(token, settings.jwt_secret, algorithms=ACCEPTED_ALGORITHMS)


def token_account_number(claims: dict[str, Any]) -> int | float | None:
    """Return the numeric ``accountNumber`` claim, or ``None`` when absent or not a number."""
    value = claims.get(ACCOUNT_NUMBER_CLAIM)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value
