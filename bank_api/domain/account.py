from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Account:
    """Aggregate root for a bank account row."""

    id: int
    number: int
    balance: int
    # nullable columns; rows written outside the API may leave them empty
    first_name: str | None
    last_name: str | None
    created_at: datetime | None
