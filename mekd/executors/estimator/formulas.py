"""
Estimation Formulas & Constants

Two calibrated log-linear regressions:
- Estimasi Korupsi: ln(Korupsi) = a + Σ b·x, then anti-log (exp)
- Estimasi IPM: direct scale, uses ln(Korupsi) from the first formula

Coefficients are fixed; each formula is an intercept plus an ordered
table of (variable, coefficient, transform) terms folded into a sum.
"""
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from mekd.core.models import EstimationResult, IndicatorSet


# =============================================================================
# TRANSFORMS
# =============================================================================

LN = "ln"
LINEAR = "linear"


def safe_log(value: float) -> float:
    """Natural log that yields -inf/nan instead of raising."""
    if value > 0:
        return math.log(value)
    if value == 0:
        return -math.inf
    return math.nan


def safe_exp(value: float) -> float:
    """exp that yields inf instead of raising on overflow."""
    try:
        return math.exp(value)
    except OverflowError:
        return math.inf


TRANSFORMS: Dict[str, Callable[[float], float]] = {
    LN: safe_log,
    LINEAR: lambda value: value,
}


# =============================================================================
# ESTIMASI KORUPSI (log scale, then exp)
# =============================================================================

CORRUPTION_INTERCEPT = 21.872

CORRUPTION_TERMS: List[Tuple[str, float, str]] = [
    ("pad", -0.039, LN),
    ("total_transfer", -0.013, LN),
    ("rasio", 0.094, LN),
    ("temuan", -0.038, LINEAR),
    ("penduduk", 0.036, LN),
    ("asn", 0.4, LN),
    ("pdrb", 0.005, LN),
    ("usia", -0.02, LINEAR),
    ("jawa", -0.377, LINEAR),
    ("dummy_kab", -0.525, LINEAR),
    ("dummy_kota", -0.63, LINEAR),
]


# =============================================================================
# ESTIMASI IPM (direct scale)
# =============================================================================

HDI_INTERCEPT = 42.518

HDI_TERMS: List[Tuple[str, float, str]] = [
    ("pad", 0.155, LN),
    ("total_transfer", 0.284, LN),
    ("rasio", 2.803, LN),
    ("temuan", -0.052, LINEAR),
    ("ln_corruption_estimate", -0.55, LINEAR),
    ("penduduk", 0.333, LN),
    ("asn", 1.152, LN),
    ("pdrb", 0.027, LN),
    ("usia", 0.465, LINEAR),
    ("jawa", 0.027, LINEAR),
    ("dummy_kab", 0.435, LINEAR),
    ("dummy_kota", 9.678, LINEAR),
]


FORMULAS = {
    "corruption": {
        "id": "corruption",
        "name": "Estimasi Korupsi",
        "unit": "Rp",
        "formula": "Korupsi = exp(21.872 − 0.039·ln(PAD) − 0.013·ln(Transfer) + 0.094·ln(Rasio) "
                   "− 0.038·Temuan + 0.036·ln(Penduduk) + 0.4·ln(ASN) + 0.005·ln(PDRB) "
                   "− 0.02·Usia − 0.377·Jawa − 0.525·Kab − 0.63·Kota)",
        "scale": "log, anti-log with exp",
    },
    "hdi": {
        "id": "hdi",
        "name": "Estimasi IPM",
        "unit": "indeks (0-100)",
        "formula": "IPM = 42.518 + 0.155·ln(PAD) + 0.284·ln(Transfer) + 2.803·ln(Rasio) "
                   "− 0.052·Temuan − 0.55·ln(Korupsi) + 0.333·ln(Penduduk) + 1.152·ln(ASN) "
                   "+ 0.027·ln(PDRB) + 0.465·Usia + 0.027·Jawa + 0.435·Kab + 9.678·Kota",
        "scale": "direct",
        "depends_on": "corruption",
    },
}


# =============================================================================
# ESTIMATION FUNCTIONS
# =============================================================================

def evaluate_terms(
    intercept: float,
    terms: List[Tuple[str, float, str]],
    values: Dict[str, float],
    breakdown: Optional[Dict[str, float]] = None,
) -> float:
    """Fold a term table into intercept + Σ coefficient·transform(value)."""
    total = intercept
    for variable, coefficient, transform in terms:
        contribution = coefficient * TRANSFORMS[transform](values[variable])
        if breakdown is not None:
            breakdown[variable] = contribution
        total += contribution
    return total


def formula_inputs(indicators: IndicatorSet, total_transfer: float, rasio: float) -> Dict[str, float]:
    """Variables referenced by the term tables."""
    return {
        "pad": indicators.pad,
        "total_transfer": total_transfer,
        "rasio": rasio,
        "temuan": indicators.temuan,
        "penduduk": indicators.penduduk,
        "asn": indicators.asn,
        "pdrb": indicators.pdrb,
        "usia": indicators.usia,
        "jawa": indicators.jawa,
        "dummy_kab": indicators.dummy_kab,
        "dummy_kota": indicators.dummy_kota,
    }


def estimate(indicators: IndicatorSet, total_transfer: float, rasio: float) -> EstimationResult:
    """
    Evaluate both regressions for a validated indicator set.

    The corruption estimate is fully resolved first; the IPM formula
    takes its logarithm, reused from formula A. Nothing is re-validated here: invalid input
    yields non-finite numbers rather than an exception.
    """
    values = formula_inputs(indicators, total_transfer, rasio)

    corruption_terms: Dict[str, float] = {}
    ln_corruption = evaluate_terms(CORRUPTION_INTERCEPT, CORRUPTION_TERMS, values, corruption_terms)
    corruption = safe_exp(ln_corruption)

    # ln(Korupsi) enters directly; exp then log would underflow or overflow
    values["ln_corruption_estimate"] = ln_corruption
    hdi_terms: Dict[str, float] = {}
    hdi = evaluate_terms(HDI_INTERCEPT, HDI_TERMS, values, hdi_terms)

    return EstimationResult(
        corruption_estimate=corruption,
        hdi_estimate=hdi,
        ln_corruption_estimate=ln_corruption,
        corruption_terms=corruption_terms,
        hdi_terms=hdi_terms,
    )


def get_all_formulas() -> Dict[str, Any]:
    """Get all formulas documentation."""
    return {
        "formulas": FORMULAS,
        "order": ["corruption", "hdi"],
        "logarithm": "natural (base e)",
    }


def get_all_constants() -> Dict[str, Any]:
    """Get all constants."""
    return {
        "corruption": {
            "intercept": CORRUPTION_INTERCEPT,
            "terms": [
                {"variable": v, "coefficient": c, "transform": t} for v, c, t in CORRUPTION_TERMS
            ],
        },
        "hdi": {
            "intercept": HDI_INTERCEPT,
            "terms": [
                {"variable": v, "coefficient": c, "transform": t} for v, c, t in HDI_TERMS
            ],
        },
    }
