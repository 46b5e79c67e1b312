"""
Input Parser Executor

Turns raw form text into a scaled IndicatorSet:
- locale fields: "1.234,5" parsed, then scaled (juta -> satuan)
- plain fields: standard numeric text, never scaled
- category fields: tipe, defaulting to "lainnya"
"""
import logging
from typing import Any, Dict, Optional

import yaml

from mekd.core.engine import DEFAULT_BASE_PATH
from mekd.core.models import IndicatorSet, TIPE_DEFAULT
from mekd.executors.base import BaseExecutor
from .normalization import normalize_numeric_text, parse_number, parse_plain_number

logger = logging.getLogger(__name__)

FORMAT_LOCALE = "locale"
FORMAT_PLAIN = "plain"
FORMAT_CATEGORY = "category"


def load_indicator_specs(knowledge: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Indicator specs from an engine knowledge base, or the packaged YAML."""
    if knowledge and "indicators" in knowledge:
        return knowledge["indicators"].get("indicators", {})

    path = DEFAULT_BASE_PATH / "knowledge" / "indicators.yaml"
    with open(path, encoding="utf-8") as fp:
        return yaml.safe_load(fp).get("indicators", {})


def build_indicator_set(form: Dict[str, Any], specs: Dict[str, Any]) -> IndicatorSet:
    """Parse and scale every known field of a raw form."""
    form = form or {}
    values: Dict[str, Any] = {}

    for field_name, spec in specs.items():
        raw = form.get(field_name)
        kind = spec.get("format", FORMAT_LOCALE)

        if kind == FORMAT_CATEGORY:
            text = str(raw).strip() if raw is not None else ""
            values[field_name] = text or spec.get("default", TIPE_DEFAULT)
        elif kind == FORMAT_PLAIN:
            values[field_name] = parse_plain_number(raw) * spec.get("scale", 1)
        else:
            values[field_name] = parse_number(raw) * spec.get("scale", 1)

    return IndicatorSet.from_dict(values)


class InputParserExecutor(BaseExecutor):
    """
    Executor for form input.

    Actions:
    - parse_form: raw form -> IndicatorSet (base units)
    - normalize: as-you-type reformatting of one text value
    - parse: one locale text value -> number
    """

    name = "input-parser"

    def __init__(self, config: Dict[str, Any] = None):
        super().__init__(config)
        self.specs = load_indicator_specs(self.knowledge)

    def actions(self):
        return {
            "parse_form": self.parse_form,
            "normalize": self.normalize,
            "parse": self.parse,
        }

    async def parse_form(self, form: Dict[str, Any] = None, **kwargs) -> Dict[str, Any]:
        indicators = build_indicator_set(form or {}, self.specs)
        logger.debug(f"Parsed indicators: {indicators}")
        return {"indicators": indicators}

    async def normalize(self, text: Any = None, **kwargs) -> Dict[str, Any]:
        return {"text": normalize_numeric_text(text)}

    async def parse(self, text: Any = None, **kwargs) -> Dict[str, Any]:
        return {"value": parse_number(text)}


def create_executor(config: Dict[str, Any] = None) -> InputParserExecutor:
    return InputParserExecutor(config)
