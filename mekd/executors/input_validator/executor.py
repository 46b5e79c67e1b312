"""
Input Validator Executor

Gate between parsing and estimation: a rejected indicator set stops the
workflow before any formula is evaluated.
"""
import logging
from typing import Any, Dict

from mekd.core.exceptions import ValidationFailure, format_failure_message
from mekd.core.models import IndicatorSet
from mekd.executors.base import BaseExecutor
from .validation import get_validation_rules, validate

logger = logging.getLogger(__name__)


class InputValidatorExecutor(BaseExecutor):
    """
    Executor for indicator validation.

    Actions:
    - validate: raises ValidationFailure listing every failing field
    - check: same checks, reported as a dict without raising
    - get_rules: positivity rules
    """

    name = "input-validator"

    def actions(self):
        return {
            "validate": self.validate,
            "check": self.check,
            "get_rules": self.rules,
        }

    async def validate(self, indicators: IndicatorSet, **kwargs) -> Dict[str, Any]:
        result = validate(indicators)
        if not result.valid:
            raise ValidationFailure(result.failures)
        return result.to_dict()

    async def check(self, indicators: IndicatorSet, **kwargs) -> Dict[str, Any]:
        result = validate(indicators)
        report = result.to_dict()
        report["message"] = "" if result.valid else format_failure_message(result.failures)
        return report

    async def rules(self, **kwargs) -> Dict[str, Any]:
        return get_validation_rules()


def create_executor(config: Dict[str, Any] = None) -> InputValidatorExecutor:
    return InputValidatorExecutor(config)
