import asyncio
import math
from dataclasses import replace

import pytest

from conftest import SCENARIO_CORRUPTION, SCENARIO_HDI, SCENARIO_LN_CORRUPTION
from mekd.executors.estimator.executor import EstimatorExecutor
from mekd.executors.estimator.formulas import (
    CORRUPTION_INTERCEPT,
    CORRUPTION_TERMS,
    HDI_INTERCEPT,
    HDI_TERMS,
    estimate,
    evaluate_terms,
    get_all_constants,
    get_all_formulas,
    safe_exp,
    safe_log,
)
from mekd.executors.input_validator.validation import validate


def by_substitution(ind, total_transfer, rasio):
    """Straight-line evaluation of both regressions."""
    ln = math.log
    ln_k = (
        21.872
        - 0.039 * ln(ind.pad)
        - 0.013 * ln(total_transfer)
        + 0.094 * ln(rasio)
        - 0.038 * ind.temuan
        + 0.036 * ln(ind.penduduk)
        + 0.4 * ln(ind.asn)
        + 0.005 * ln(ind.pdrb)
        - 0.02 * ind.usia
        - 0.377 * ind.jawa
        - 0.525 * ind.dummy_kab
        - 0.63 * ind.dummy_kota
    )
    k = math.exp(ln_k)
    hdi = (
        42.518
        + 0.155 * ln(ind.pad)
        + 0.284 * ln(total_transfer)
        + 2.803 * ln(rasio)
        - 0.052 * ind.temuan
        - 0.55 * ln(k)
        + 0.333 * ln(ind.penduduk)
        + 1.152 * ln(ind.asn)
        + 0.027 * ln(ind.pdrb)
        + 0.465 * ind.usia
        + 0.027 * ind.jawa
        + 0.435 * ind.dummy_kab
        + 9.678 * ind.dummy_kota
    )
    return k, hdi


def test_scenario_regression_fixture(scenario_indicators):
    checked = validate(scenario_indicators)

    result = estimate(scenario_indicators, checked.total_transfer, checked.rasio)

    assert result.ln_corruption_estimate == pytest.approx(SCENARIO_LN_CORRUPTION, rel=1e-12)
    assert result.corruption_estimate == pytest.approx(SCENARIO_CORRUPTION, rel=1e-9)
    assert result.hdi_estimate == pytest.approx(SCENARIO_HDI, rel=1e-9)


@pytest.mark.parametrize("tipe", ["kabupaten", "kota", "lainnya"])
@pytest.mark.parametrize(
    "overrides",
    [
        {},
        {"temuan": 0, "usia": 0, "jawa": 0},
        {"pad": 1, "penduduk": 1, "asn": 1, "pdrb": 1},
        {"belanja": 2e12, "temuan": 40, "usia": 7},
        {"pad": 5e13, "asn": 250000, "pdrb": 9e14},
    ],
)
def test_matches_substitution_and_stays_in_range(scenario_indicators, tipe, overrides):
    indicators = replace(scenario_indicators, tipe=tipe, **overrides)
    checked = validate(indicators)
    assert checked.valid

    result = estimate(indicators, checked.total_transfer, checked.rasio)
    expected_k, expected_hdi = by_substitution(indicators, checked.total_transfer, checked.rasio)

    assert result.corruption_estimate > 0
    assert math.isfinite(result.hdi_estimate)
    assert result.corruption_estimate == pytest.approx(expected_k, rel=1e-12)
    assert result.hdi_estimate == pytest.approx(expected_hdi, rel=1e-12)


def test_breakdown_sums_to_result(scenario_indicators):
    result = estimate(scenario_indicators, 8e11, 0.9)

    assert CORRUPTION_INTERCEPT + sum(result.corruption_terms.values()) == pytest.approx(
        result.ln_corruption_estimate
    )
    assert HDI_INTERCEPT + sum(result.hdi_terms.values()) == pytest.approx(result.hdi_estimate)
    assert result.hdi_terms["ln_corruption_estimate"] == pytest.approx(
        -0.55 * result.ln_corruption_estimate
    )


def test_kota_dummy_shifts_log_corruption(scenario_indicators):
    kota = estimate(scenario_indicators, 8e11, 0.9)
    other = estimate(replace(scenario_indicators, tipe="lainnya"), 8e11, 0.9)

    assert kota.ln_corruption_estimate - other.ln_corruption_estimate == pytest.approx(-0.63)


def test_invalid_input_gives_non_finite_without_raising(scenario_indicators):
    result = estimate(replace(scenario_indicators, pad=0), 8e11, 0.9)
    assert not math.isfinite(result.hdi_estimate)

    result = estimate(scenario_indicators, -1, 0.9)
    assert math.isnan(result.corruption_estimate)


@pytest.mark.parametrize("temuan", [50000, -50000])
def test_extreme_findings_keep_hdi_finite(scenario_indicators, temuan):
    indicators = replace(scenario_indicators, temuan=temuan)
    checked = validate(indicators)
    assert checked.valid

    result = estimate(indicators, checked.total_transfer, checked.rasio)

    assert math.isfinite(result.ln_corruption_estimate)
    assert math.isfinite(result.hdi_estimate)
    assert result.hdi_estimate == pytest.approx(
        HDI_INTERCEPT + sum(result.hdi_terms.values())
    )


def test_safe_math():
    assert safe_log(math.e) == pytest.approx(1)
    assert safe_log(0) == -math.inf
    assert math.isnan(safe_log(-3))
    assert safe_exp(1000) == math.inf
    assert safe_exp(0) == 1


def test_evaluate_terms_folds_in_order():
    terms = [("a", 2.0, "linear"), ("b", 1.0, "ln")]
    breakdown = {}

    total = evaluate_terms(1.0, terms, {"a": 3.0, "b": math.e}, breakdown)

    assert total == pytest.approx(8.0)
    assert list(breakdown) == ["a", "b"]


def test_term_tables_cover_every_formula_variable():
    corruption_vars = [v for v, _, _ in CORRUPTION_TERMS]
    hdi_vars = [v for v, _, _ in HDI_TERMS]

    assert "ln_corruption_estimate" not in corruption_vars
    assert hdi_vars.index("ln_corruption_estimate") == 4
    assert set(hdi_vars) - set(corruption_vars) == {"ln_corruption_estimate"}


def test_reference_documents():
    constants = get_all_constants()
    formulas = get_all_formulas()

    assert constants["corruption"]["intercept"] == 21.872
    assert constants["hdi"]["terms"][4] == {
        "variable": "ln_corruption_estimate", "coefficient": -0.55, "transform": "linear",
    }
    assert formulas["order"] == ["corruption", "hdi"]


def test_estimator_executor_returns_estimates_and_inputs(scenario_indicators):
    executor = EstimatorExecutor()

    outputs = asyncio.run(
        executor.estimate(indicators=scenario_indicators, total_transfer=8e11, rasio=0.9)
    )

    assert outputs["corruption_estimate"] == pytest.approx(SCENARIO_CORRUPTION, rel=1e-9)
    assert outputs["hdi_estimate"] == pytest.approx(SCENARIO_HDI, rel=1e-9)
    assert outputs["inputs"]["dummy_kota"] == 1
    assert outputs["inputs"]["rasio"] == 0.9
