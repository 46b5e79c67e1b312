"""
Dual-axis chart for the two estimates.

The config follows Chart.js conventions so the dashboard can draw it
directly; `render_chart` draws the same config to an image with
matplotlib for the command line.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .formatting import abbreviate_rupiah_tick

logger = logging.getLogger(__name__)

CORRUPTION_AXIS = "yKor"
HDI_AXIS = "yIpm"

CORRUPTION_LABEL = "Estimasi Korupsi (Rp)"
HDI_LABEL = "Estimasi IPM"
HDI_CATEGORY_LABEL = "Estimasi IPM (0–100)"

CORRUPTION_COLOR = "#1e88e5"
HDI_COLOR = "#43a047"

HDI_AXIS_MIN = 0
HDI_AXIS_MAX = 100
HDI_AXIS_STEP = 10


def build_chart_config(corruption_estimate: float, hdi_estimate: float) -> Dict[str, Any]:
    """
    Bar chart with one series per axis.

    Corruption sits on the auto-scaled left axis, IPM on the right axis
    fixed to 0-100.
    """
    return {
        "type": "bar",
        "data": {
            "labels": [CORRUPTION_LABEL, HDI_CATEGORY_LABEL],
            "datasets": [
                {
                    "label": CORRUPTION_LABEL,
                    "data": [corruption_estimate, None],
                    "backgroundColor": CORRUPTION_COLOR,
                    "yAxisID": CORRUPTION_AXIS,
                    "borderRadius": 6,
                },
                {
                    "label": HDI_LABEL,
                    "data": [None, hdi_estimate],
                    "backgroundColor": HDI_COLOR,
                    "yAxisID": HDI_AXIS,
                    "borderRadius": 6,
                },
            ],
        },
        "options": {
            "responsive": True,
            "maintainAspectRatio": False,
            "scales": {
                CORRUPTION_AXIS: {
                    "type": "linear",
                    "position": "left",
                    "beginAtZero": True,
                },
                HDI_AXIS: {
                    "type": "linear",
                    "position": "right",
                    "beginAtZero": True,
                    "min": HDI_AXIS_MIN,
                    "max": HDI_AXIS_MAX,
                    "grid": {"drawOnChartArea": False},
                    "ticks": {"stepSize": HDI_AXIS_STEP},
                },
            },
            "plugins": {"legend": {"display": False}},
        },
    }


@dataclass
class RenderedChart:
    """A drawn figure and where it was saved."""
    figure: Any
    path: Optional[Path] = None

    def close(self):
        self.figure.clear()


class ChartSlot:
    """
    Holds the most recent chart.

    The previous chart is released before a new one takes its place.
    """

    def __init__(self):
        self._chart: Optional[RenderedChart] = None

    @property
    def current(self) -> Optional[RenderedChart]:
        return self._chart

    def replace(self, chart: RenderedChart) -> RenderedChart:
        self.release()
        self._chart = chart
        return chart

    def release(self):
        if self._chart is not None:
            self._chart.close()
            self._chart = None


def render_chart(
    config: Dict[str, Any],
    path: Union[str, Path],
    slot: ChartSlot,
    dpi: int = 150,
) -> RenderedChart:
    """Draw a chart config to an image file and hand it to the slot."""
    from matplotlib.figure import Figure
    from matplotlib.ticker import FuncFormatter, MultipleLocator

    # Old chart goes before the new one is built
    slot.release()

    scales = config["options"]["scales"]
    labels = config["data"]["labels"]

    figure = Figure(figsize=(8, 4.5))
    ax_kor = figure.subplots()
    ax_ipm = ax_kor.twinx()
    axes = {CORRUPTION_AXIS: ax_kor, HDI_AXIS: ax_ipm}

    for dataset in config["data"]["datasets"]:
        axis = axes[dataset["yAxisID"]]
        for position, value in enumerate(dataset["data"]):
            if value is None:
                continue
            axis.bar(position, value, width=0.6, color=dataset["backgroundColor"])

    ax_kor.set_xticks(range(len(labels)))
    ax_kor.set_xticklabels(labels)
    ax_kor.set_ylim(bottom=0)
    ax_kor.yaxis.set_major_formatter(FuncFormatter(lambda value, _: abbreviate_rupiah_tick(value)))

    hdi_scale = scales[HDI_AXIS]
    ax_ipm.set_ylim(hdi_scale["min"], hdi_scale["max"])
    ax_ipm.yaxis.set_major_locator(MultipleLocator(hdi_scale["ticks"]["stepSize"]))
    ax_ipm.grid(False)

    figure.tight_layout()

    path = Path(path)
    figure.savefig(path, dpi=dpi)
    logger.info(f"Saved chart -> {path}")

    return slot.replace(RenderedChart(figure=figure, path=path))
