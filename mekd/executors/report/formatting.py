"""
Display formatting for estimates (id-ID conventions).

- Rupiah: "Rp 13.413.792.143,74" (dot grouping, comma decimal, max 2 digits)
- IPM: "67.25" (exactly 2 digits)
- Axis ticks: "13 M" (miliar), "250 Jt" (juta)
"""
import math

NON_FINITE_DISPLAY = "-"
HDI_SUFFIX = " (Simulasi MEKD)"

MILIAR = 1_000_000_000
JUTA = 1_000_000

_TO_ID = str.maketrans({",": ".", ".": ","})


def format_number_id(value: float, max_fraction_digits: int = 2) -> str:
    """Group with dots, comma decimal, trailing fractional zeros dropped."""
    if not math.isfinite(value):
        return NON_FINITE_DISPLAY

    text = f"{value:,.{max_fraction_digits}f}"
    if max_fraction_digits > 0:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text.translate(_TO_ID)


def format_rupiah(value: float) -> str:
    if not math.isfinite(value):
        return NON_FINITE_DISPLAY
    return "Rp " + format_number_id(value)


def format_hdi(value: float) -> str:
    if not math.isfinite(value):
        return NON_FINITE_DISPLAY
    return f"{value:.2f}"


def format_hdi_label(value: float) -> str:
    return format_hdi(value) + HDI_SUFFIX


def abbreviate_rupiah_tick(value: float) -> str:
    """Left axis tick label: miliar as "M", juta as "Jt"."""
    if value >= MILIAR:
        return f"{_plain_number(value / MILIAR)} M"
    if value >= JUTA:
        return f"{_plain_number(value / JUTA)} Jt"
    return _plain_number(value)


def _plain_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"
