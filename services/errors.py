from __future__ import annotations

from typing import Dict, Optional


class StoreError(RuntimeError):
    """A call to the company store did not succeed."""


class StoreUnavailableError(StoreError):
    pass


class StoreTimeoutError(StoreUnavailableError):
    pass


class StoreStatusError(StoreError):
    def __init__(self, message: str, status_code: int, reason: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class FormValidationError(ValueError):
    def __init__(self, errors: Dict[str, str]):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = dict(errors)


class FlowError(RuntimeError):
    """A directory action was requested in a state that does not allow it."""
