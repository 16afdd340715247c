"""Typed failures raised by the rent ledger.

Callers catch by type and read ``code`` for a machine-readable reason; the
message is for humans only.
"""
from __future__ import annotations


class LedgerError(Exception):
    """Base class for every ledger failure."""

    code = "ledger_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(LedgerError, ValueError):
    """A precondition on caller-supplied data was violated."""

    code = "invalid_input"


class InconsistentHistory(LedgerError):
    """A stored record does not reconcile with its own balance fields."""

    code = "inconsistent_history"

    def __init__(self, message: str, period_key: str | None = None) -> None:
        super().__init__(message)
        self.period_key = period_key


class TenancyNotFound(LedgerError):
    code = "tenancy_not_found"

    def __init__(self, room_id: str) -> None:
        super().__init__(f"No tenancy registered for room {room_id!r}")
        self.room_id = room_id
