import pytest

from mekd.core.engine import MekdEngine
from mekd.core.models import IndicatorSet
from mekd.executors import register_executors


# Raw form as typed: amounts in juta, Indonesian grouping
SCENARIO_FORM = {
    "pad": "1.000.000",
    "dau": "500.000",
    "dak": "200.000",
    "dbh": "100.000",
    "belanja": "900.000",
    "pendapatan": "1.000.000",
    "temuan": "3",
    "penduduk": "2",
    "asn": "5.000",
    "pdrb": "50.000.000.000",
    "usia": "2",
    "jawa": "1",
    "tipe": "kota",
}

SCENARIO_LN_CORRUPTION = 23.319549279032202
SCENARIO_CORRUPTION = 13413792143.742636
SCENARIO_HDI = 67.250910254647


@pytest.fixture
def scenario_form() -> dict:
    return dict(SCENARIO_FORM)


@pytest.fixture
def scenario_indicators() -> IndicatorSet:
    return IndicatorSet(
        pad=1e12,
        dau=5e11,
        dak=2e11,
        dbh=1e11,
        belanja=9e11,
        pendapatan=1e12,
        temuan=3,
        penduduk=2e6,
        asn=5000,
        pdrb=5e10,
        usia=2,
        jawa=1,
        tipe="kota",
    )


@pytest.fixture
def engine() -> MekdEngine:
    engine = MekdEngine()
    register_executors(engine)
    return engine
