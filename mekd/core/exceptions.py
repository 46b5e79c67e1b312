"""
MEKD exceptions.

Parsing never raises; the only failure a user can cause is a rejected
indicator set.
"""
from typing import Any, Dict, List, Optional


VALIDATION_MESSAGE_HEADER = (
    "Mohon periksa input. Nilai berikut harus lebih dari 0 "
    "agar perhitungan tidak error:"
)


def format_failure_message(fields: List[str]) -> str:
    """Combine failing field names into one user message."""
    return VALIDATION_MESSAGE_HEADER + "".join(f"\n- {name}" for name in fields)


class MekdError(Exception):
    """Base class for MEKD errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            **self.details,
        }


class ValidationFailure(MekdError):
    """One or more logarithm arguments are not strictly positive."""

    def __init__(self, fields: List[str]):
        self.fields = list(fields)
        super().__init__(
            format_failure_message(self.fields),
            details={"failures": self.fields},
        )
