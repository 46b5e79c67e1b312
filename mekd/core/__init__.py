"""
MEKD Core

- Domain records (indicators, validation, estimation results)
- Workflow engine driven by YAML definitions
"""
from .exceptions import MekdError, ValidationFailure
from .models import EstimationResult, IndicatorSet, ValidationResult
from .engine import MekdEngine, get_engine

__all__ = [
    "MekdError",
    "ValidationFailure",
    "IndicatorSet",
    "ValidationResult",
    "EstimationResult",
    "MekdEngine",
    "get_engine",
]
