"""
Operation results and error taxonomy for the TraceChain ledger.

Ledger operations that can fail report the failure in their return value
instead of raising, so callers branch on OperationResult.success. The error
messages are the strings earlier TraceChain clients already match on.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class LedgerError(Enum):
    """Named failures a ledger operation can report"""
    PRODUCT_NOT_FOUND = "Product not found"
    TRACE_NOT_FOUND = "Trace not found"
    PRODUCTS_NOT_INITIALIZED = "Products not initialized"
    TRACES_NOT_INITIALIZED = "Traces not initialized"

    @property
    def is_not_found(self) -> bool:
        return self in (LedgerError.PRODUCT_NOT_FOUND, LedgerError.TRACE_NOT_FOUND)


class TraceChainError(Exception):
    """Base exception for the TraceChain framework"""


class StoreNotInitializedError(TraceChainError):
    """Raised when the entity store is used before initialize() has run"""

    def __init__(self, kind_name: str):
        self.kind_name = kind_name
        super().__init__(f"{kind_name.capitalize()} not initialized")


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a ledger operation: a value on success, a LedgerError otherwise"""
    success: bool
    value: Any = None
    error: LedgerError | None = None

    @classmethod
    def ok(cls, value: Any = None) -> "OperationResult":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: LedgerError) -> "OperationResult":
        return cls(success=False, error=error)

    @property
    def message(self) -> str | None:
        """Human-readable error message, or None on success."""
        return self.error.value if self.error is not None else None
