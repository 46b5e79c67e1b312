import pytest
from fastapi.testclient import TestClient

from conftest import SCENARIO_CORRUPTION, SCENARIO_HDI
from mekd.core.exceptions import VALIDATION_MESSAGE_HEADER
from mekd.executors.input_validator.validation import LABEL_ASN, LABEL_PENDAPATAN, LABEL_RASIO
from mekd.gateway.api.main import app, finite_or_none


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "mekd"}


def test_dashboard_page(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    body = response.text
    assert 'id="pad"' in body
    assert '<select id="tipe"' in body
    assert "chart.destroy()" in body
    assert "/api/normalize" in body
    assert ".catch(err => console.warn" in body
    assert "server tidak dapat dihubungi" in body


def test_indicators(client):
    data = client.get("/api/indicators").json()

    assert data["unit_scale"] == 1000000
    assert data["indicators"]["tipe"]["default"] == "lainnya"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1234567,891", "1.234.567,891"),
        ("Rp 1.000", "1.000"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize(client, text, expected):
    response = client.post("/api/normalize", json={"text": text})

    assert response.json() == {"text": expected}


def test_parse(client):
    assert client.post("/api/parse", json={"text": "1.234,5"}).json() == {"value": 1234.5}
    assert client.post("/api/parse", json={"text": "abc"}).json() == {"value": 0.0}


def test_validate_reports_without_estimating(client, scenario_form):
    scenario_form.update(pendapatan="0", asn="")

    data = client.post("/api/validate", json=scenario_form).json()

    assert data["valid"] is False
    assert data["failures"] == [LABEL_PENDAPATAN, LABEL_ASN, LABEL_RASIO]
    assert data["rasio"] is None
    assert data["message"].startswith(VALIDATION_MESSAGE_HEADER)


def test_estimate(client, scenario_form):
    response = client.post("/api/estimate", json=scenario_form)

    assert response.status_code == 200
    data = response.json()
    assert data["estimate"]["corruption_estimate"] == pytest.approx(SCENARIO_CORRUPTION, rel=1e-9)
    assert data["estimate"]["hdi_estimate"] == pytest.approx(SCENARIO_HDI, rel=1e-9)
    assert data["display"]["corruption"] == "Rp 13.413.792.143,74"
    assert data["display"]["hdi"] == "67.25"
    assert data["chart"]["options"]["scales"]["yIpm"]["max"] == 100


def test_estimate_accepts_numbers(client):
    form = {
        "pad": 1000000, "dau": 500000, "dak": 200000, "dbh": 100000,
        "belanja": 900000, "pendapatan": 1000000, "temuan": 3, "penduduk": 2,
        "asn": 5000, "pdrb": 50000000000, "usia": 2, "jawa": 1, "tipe": "kota",
    }

    data = client.post("/api/estimate", json=form).json()

    assert data["estimate"]["corruption_estimate"] == pytest.approx(SCENARIO_CORRUPTION, rel=1e-9)


def test_estimate_rejects_invalid_input(client, scenario_form):
    scenario_form["asn"] = "0"

    response = client.post("/api/estimate", json=scenario_form)

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["failures"] == [LABEL_ASN]
    assert detail["message"] == f"{VALIDATION_MESSAGE_HEADER}\n- {LABEL_ASN}"


def test_settings_endpoints(client):
    settings = client.get("/api/settings").json()
    assert settings["log_level"] in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    rules = client.get("/api/settings/validation-bounds").json()
    assert rules["ratio"]["name"] == LABEL_RASIO

    constants = client.get("/api/settings/constants").json()
    assert constants["hdi"]["intercept"] == 42.518

    formulas = client.get("/api/settings/formulas").json()
    assert formulas["formulas"]["hdi"]["depends_on"] == "corruption"


def test_finite_or_none():
    assert finite_or_none({"a": [float("inf"), 1.0], "b": float("nan")}) == {"a": [None, 1.0], "b": None}


def test_estimate_rejects_infinite_amount(client, scenario_form):
    scenario_form["pad"] = "1e400"

    response = client.post("/api/estimate", json=scenario_form)

    assert response.status_code == 422
    assert response.json()["detail"]["failures"] == ["Pendapatan Asli Daerah (PAD)"]
