"""
Estimator Executor

Evaluates the two MEKD regressions:
- Estimasi Korupsi (Rp): log-linear, anti-logged with exp
- Estimasi IPM: direct scale, consumes the corruption estimate
"""
from typing import Any, Dict
import logging

from mekd.core.models import IndicatorSet
from mekd.executors.base import BaseExecutor
from .formulas import estimate, get_all_constants, get_all_formulas

logger = logging.getLogger(__name__)


class EstimatorExecutor(BaseExecutor):
    """
    Executor for regression estimates.

    Actions:
    - estimate: both estimates from a validated indicator set
    - get_formulas: formula documentation
    - get_constants: intercepts and term tables
    """

    name = "estimator"

    def actions(self):
        return {
            "estimate": self.estimate,
            "get_formulas": self.formulas,
            "get_constants": self.constants,
        }

    async def estimate(
        self,
        indicators: IndicatorSet,
        total_transfer: float,
        rasio: float,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Both estimates, unrounded.

        Caller must pass a validated indicator set together with the
        total transfer and ratio the validator derived.
        """
        result = estimate(indicators, total_transfer, rasio)
        logger.info(
            f"Estimated corruption={result.corruption_estimate:.2f} hdi={result.hdi_estimate:.4f}"
        )
        return {
            **result.to_dict(),
            "inputs": {
                **indicators.to_dict(),
                "total_transfer": total_transfer,
                "rasio": rasio,
            },
        }

    async def formulas(self, **kwargs) -> Dict[str, Any]:
        """Get all formulas documentation."""
        return get_all_formulas()

    async def constants(self, **kwargs) -> Dict[str, Any]:
        """Get all constants."""
        return get_all_constants()


def create_executor(config: Dict[str, Any] = None) -> EstimatorExecutor:
    return EstimatorExecutor(config)
