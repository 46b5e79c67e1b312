"""
Indicator validation.

Every value that reaches a natural logarithm in the regression formulas
must be strictly positive. All failures are collected so they can be
reported together.
"""
import math
from typing import List, Optional, Tuple

from mekd.core.models import IndicatorSet, ValidationResult

LABEL_PAD = "Pendapatan Asli Daerah (PAD)"
LABEL_TOTAL_TRANSFER = "Total Transfer (DAU+DAK+DBH)"
LABEL_BELANJA = "Total Belanja Daerah"
LABEL_PENDAPATAN = "Total Pendapatan Daerah"
LABEL_PENDUDUK = "Jumlah Penduduk"
LABEL_ASN = "Jumlah ASN"
LABEL_PDRB = "PDRB"
LABEL_RASIO = "Rasio (Total Belanja / Total Pendapatan)"

# (display name, source) in report order; source is an IndicatorSet
# field or a derived value
POSITIVE_CHECKS: List[Tuple[str, str]] = [
    (LABEL_PAD, "pad"),
    (LABEL_TOTAL_TRANSFER, "total_transfer"),
    (LABEL_BELANJA, "belanja"),
    (LABEL_PENDAPATAN, "pendapatan"),
    (LABEL_PENDUDUK, "penduduk"),
    (LABEL_ASN, "asn"),
    (LABEL_PDRB, "pdrb"),
]


def total_transfer(indicators: IndicatorSet) -> float:
    """DAU + DAK + DBH"""
    return indicators.dau + indicators.dak + indicators.dbh


def expenditure_ratio(indicators: IndicatorSet) -> Optional[float]:
    """Belanja / pendapatan; None when pendapatan is zero."""
    if indicators.pendapatan == 0:
        return None
    return indicators.belanja / indicators.pendapatan


def is_positive(value: Optional[float]) -> bool:
    # None, NaN and infinities all fail
    return value is not None and math.isfinite(value) and value > 0


def validate(indicators: IndicatorSet) -> ValidationResult:
    """
    Check every logarithm argument.

    temuan, usia, jawa and tipe are not checked: they enter the
    formulas linearly.
    """
    transfer = total_transfer(indicators)
    rasio = expenditure_ratio(indicators)
    derived = {"total_transfer": transfer}

    failures = [
        label
        for label, source in POSITIVE_CHECKS
        if not is_positive(derived[source] if source in derived else getattr(indicators, source))
    ]
    if not is_positive(rasio):
        failures.append(LABEL_RASIO)

    if failures:
        return ValidationResult.invalid(failures, total_transfer=transfer, rasio=rasio)
    return ValidationResult.ok(total_transfer=transfer, rasio=rasio)


def get_validation_rules() -> dict:
    """Positivity rules for reference."""
    return {
        "positive": [{"name": label, "field": source} for label, source in POSITIVE_CHECKS],
        "ratio": {
            "name": LABEL_RASIO,
            "formula": "belanja / pendapatan",
            "rule": "defined (pendapatan != 0), finite and > 0",
        },
        "unchecked": ["temuan", "usia", "jawa", "tipe"],
    }
