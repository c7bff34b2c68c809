import pytest

from chna_cra.domain.enums import WeightMode
from chna_cra.domain.models import TransportSignals
from chna_cra.features.projection.engine import (
    BREAK_EVEN_ALWAYS_POSITIVE,
    BREAK_EVEN_CROSSES,
    BREAK_EVEN_NEVER_POSITIVE,
    SWEEP_MAX_PCT,
    SWEEP_MIN_PCT,
    amplification_for,
    run_coverage_projection,
    suggest_barrier_share,
)
from chna_cra.features.projection.schemas import MAX_MONTHS, CoverageScenarioInput


def _scenario(**overrides) -> CoverageScenarioInput:
    base = {
        "annual_volume": 10000,
        "baseline_rate": 20,
        "barrier_share": 10,
        "mitigation_rate": 50,
        "coverage_pct": 25,
        "weight_mode": "flat",
        "benefit_per_event": 250,
        "startup_cost": 0,
        "fixed_monthly_cost": 0,
        "unit_cost": 40,
        "units_per_event": 2,
    }
    base.update(overrides)
    return CoverageScenarioInput.model_validate(base)


def test_core_chain_values() -> None:
    p = run_coverage_projection(_scenario())

    assert p.eligible_volume == pytest.approx(2500)
    assert p.effective_barrier_share == pytest.approx(0.10)
    assert p.baseline_disruptions == pytest.approx(500)
    assert p.barrier_disruptions == pytest.approx(50)
    assert p.prevented_events == pytest.approx(25)
    assert p.units_annual == pytest.approx(50)
    assert p.gross_annual_benefit == pytest.approx(6250)
    assert p.annualized_cost == pytest.approx(2000)
    assert p.net_annual == pytest.approx(4250)


def test_twelve_months_annualized_equals_horizon_cost() -> None:
    p = run_coverage_projection(_scenario(months=12, startup_cost=5000, fixed_monthly_cost=300))
    assert p.annualized_cost == pytest.approx(p.total_cost_horizon)


@pytest.mark.parametrize("months", [1, 6, 18, 36])
def test_variable_only_cost_is_invariant_to_months(months: int) -> None:
    base = run_coverage_projection(_scenario(months=12))
    p = run_coverage_projection(_scenario(months=months))
    assert p.annualized_cost == pytest.approx(base.annualized_cost)


def test_rates_accept_fractions_or_percents() -> None:
    a = run_coverage_projection(_scenario(baseline_rate=0.2, barrier_share=0.1, mitigation_rate=0.5))
    b = run_coverage_projection(_scenario())
    assert a.net_annual == pytest.approx(b.net_annual)


def test_invalid_numbers_default_instead_of_failing() -> None:
    inp = CoverageScenarioInput.model_validate(
        {"annual_volume": "lots", "months": 0, "coverage_pct": None, "senior_share_pct": 250, "units_per_event": ""}
    )
    assert inp.annual_volume == 0
    assert inp.months == 12
    assert inp.coverage_pct == 25
    assert inp.senior_share_pct == 100
    assert inp.units_per_event == 1

    p = run_coverage_projection(inp)
    assert p.net_annual == 0


def test_senior_weighting_amplifies_barrier_share() -> None:
    transport = TransportSignals(overall=2.7, age_65_74=8.5)
    inp = _scenario(weight_mode="weighted", senior_share_pct=25)
    p = run_coverage_projection(inp, amplification_for(transport, inp.weight_mode))

    amp = 8.5 / 2.7
    assert p.amplification_factor == pytest.approx(amp)
    assert p.effective_barrier_share == pytest.approx(0.10 * (0.75 + 0.25 * amp))


def test_flat_mode_and_unknown_rates_use_neutral_amplification() -> None:
    transport = TransportSignals(overall=2.7, age_65_74=8.5)
    assert amplification_for(transport, WeightMode.flat) == 1.0
    assert amplification_for(TransportSignals(), WeightMode.weighted) == 1.0
    assert amplification_for(TransportSignals(overall=0, age_65_74=3), WeightMode.weighted) == 1.0


def test_effective_barrier_share_is_clamped() -> None:
    p = run_coverage_projection(_scenario(weight_mode="weighted", barrier_share=90, senior_share_pct=100), 5.0)
    assert p.effective_barrier_share == 1.0


def test_monthly_series() -> None:
    p = run_coverage_projection(_scenario(months=6, startup_cost=600, fixed_monthly_cost=100))

    assert p.monthly_labels == ["M1", "M2", "M3", "M4", "M5", "M6"]
    # 6250/12 - (600/6 + 100 + 50/12*40)
    expected = 6250 / 12 - (100 + 100 + 50 / 12 * 40)
    assert p.monthly_net == pytest.approx([expected] * 6)
    assert p.cumulative_net[-1] == pytest.approx(expected * 6)


def test_sweep_covers_fixed_range() -> None:
    p = run_coverage_projection(_scenario())
    assert [s.coverage_pct for s in p.sweep] == list(range(SWEEP_MIN_PCT, SWEEP_MAX_PCT + 1))


def test_break_even_is_interpolated() -> None:
    # Net per coverage point: gross 250/pt - variable 80/pt = 170/pt, fixed 12*425 = 5100 -> zero at 30%.
    p = run_coverage_projection(_scenario(fixed_monthly_cost=425))
    assert p.break_even_status == BREAK_EVEN_CROSSES
    assert p.break_even_coverage_pct == pytest.approx(30.0)


def test_break_even_status_without_crossing() -> None:
    assert run_coverage_projection(_scenario()).break_even_status == BREAK_EVEN_ALWAYS_POSITIVE
    never = run_coverage_projection(_scenario(fixed_monthly_cost=100000))
    assert never.break_even_status == BREAK_EVEN_NEVER_POSITIVE
    assert never.break_even_coverage_pct is None


def test_suggested_barrier_share_is_bounded() -> None:
    assert suggest_barrier_share(TransportSignals(overall=2.7)) == pytest.approx(0.081)
    assert suggest_barrier_share(TransportSignals(overall=0.5)) == pytest.approx(0.05)
    assert suggest_barrier_share(TransportSignals(overall=40)) == pytest.approx(0.70)
    assert suggest_barrier_share(TransportSignals()) is None


def test_months_are_capped() -> None:
    inp = CoverageScenarioInput.model_validate({"months": "2000000"})
    assert inp.months == MAX_MONTHS

    p = run_coverage_projection(_scenario(months=2000000))
    assert len(p.monthly_net) == MAX_MONTHS
