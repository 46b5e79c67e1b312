"""
Report Executor

Formats both estimates for display and prepares the dual-axis chart.
"""
from typing import Any, Dict
import logging

from mekd.executors.base import BaseExecutor
from .chart import build_chart_config
from .formatting import format_hdi, format_hdi_label, format_rupiah

logger = logging.getLogger(__name__)


class ReportExecutor(BaseExecutor):
    """
    Executor for presentation output.

    Actions:
    - build: formatted values + chart config
    """

    name = "report"

    def actions(self):
        return {
            "build": self.build,
        }

    async def build(
        self,
        corruption_estimate: float,
        hdi_estimate: float,
        **kwargs
    ) -> Dict[str, Any]:
        return {
            "display": {
                "corruption": format_rupiah(corruption_estimate),
                "hdi": format_hdi(hdi_estimate),
                "hdi_label": format_hdi_label(hdi_estimate),
            },
            "chart": build_chart_config(corruption_estimate, hdi_estimate),
        }


def create_executor(config: Dict[str, Any] = None) -> ReportExecutor:
    return ReportExecutor(config)
