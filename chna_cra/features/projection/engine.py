from __future__ import annotations

from dataclasses import dataclass

from chna_cra.domain.enums import WeightMode
from chna_cra.domain.models import TransportSignals, clamp
from chna_cra.features.projection.schemas import CoverageScenarioInput

SWEEP_MIN_PCT = 5
SWEEP_MAX_PCT = 60
SWEEP_STEP_PCT = 1

# Barrier share proxy: overall transport rate x3, bounded to 5..70 %.
BARRIER_SHARE_MULTIPLIER = 3.0
BARRIER_SHARE_MIN_PCT = 5.0
BARRIER_SHARE_MAX_PCT = 70.0

BREAK_EVEN_CROSSES = "crosses"
BREAK_EVEN_ALWAYS_POSITIVE = "always_positive"
BREAK_EVEN_NEVER_POSITIVE = "never_positive"


@dataclass(frozen=True)
class SweepPoint:
    coverage_pct: int
    net_annual: float


@dataclass(frozen=True)
class CoverageProjection:
    activity: str
    months: int
    coverage_pct: float
    amplification_factor: float
    eligible_volume: float
    effective_barrier_share: float
    baseline_disruptions: float
    barrier_disruptions: float
    prevented_events: float
    units_annual: float
    gross_annual_benefit: float
    total_cost_horizon: float
    annualized_cost: float
    net_annual: float
    monthly_labels: list[str]
    monthly_net: list[float]
    cumulative_net: list[float]
    sweep: list[SweepPoint]
    break_even_coverage_pct: float | None
    break_even_status: str


@dataclass(frozen=True)
class _Chain:
    eligible: float
    baseline: float
    barrier: float
    prevented: float
    units_annual: float
    gross: float
    total_cost: float
    annual_cost: float

    @property
    def net(self) -> float:
        return self.gross - self.annual_cost


def amplification_for(transport: TransportSignals, weight_mode: WeightMode) -> float:
    if weight_mode == WeightMode.flat:
        return 1.0
    amp = transport.amplification
    return amp if amp is not None else 1.0


def suggest_barrier_share(transport: TransportSignals) -> float | None:
    """Conservative transportation-attributable share (fraction) from the CHNA overall rate."""

    if transport.overall is None:
        return None
    pct = clamp(transport.overall * BARRIER_SHARE_MULTIPLIER, BARRIER_SHARE_MIN_PCT, BARRIER_SHARE_MAX_PCT)
    return pct / 100


def effective_barrier_share(inp: CoverageScenarioInput, amplification_factor: float) -> float:
    senior = inp.senior_share_pct / 100
    return clamp(inp.barrier_share * ((1 - senior) + senior * amplification_factor), 0, 1)


def _chain(inp: CoverageScenarioInput, coverage_pct: float, eff_share: float) -> _Chain:
    eligible = inp.annual_volume * coverage_pct / 100
    baseline = eligible * inp.baseline_rate
    barrier = baseline * eff_share
    prevented = barrier * inp.mitigation_rate
    units_annual = prevented * inp.units_per_event
    gross = prevented * inp.benefit_per_event
    total_cost = (
        inp.startup_cost
        + inp.fixed_monthly_cost * inp.months
        + inp.unit_cost * units_annual * (inp.months / 12)
    )
    annual_cost = total_cost * (12 / inp.months)
    return _Chain(
        eligible=eligible,
        baseline=baseline,
        barrier=barrier,
        prevented=prevented,
        units_annual=units_annual,
        gross=gross,
        total_cost=total_cost,
        annual_cost=annual_cost,
    )


def coverage_sweep(inp: CoverageScenarioInput, eff_share: float) -> list[SweepPoint]:
    return [
        SweepPoint(coverage_pct=c, net_annual=_chain(inp, c, eff_share).net)
        for c in range(SWEEP_MIN_PCT, SWEEP_MAX_PCT + 1, SWEEP_STEP_PCT)
    ]


def break_even(sweep: list[SweepPoint]) -> tuple[float | None, str]:
    """Coverage where annual net crosses zero, linearly interpolated between sweep points."""

    if sweep and all(p.net_annual >= 0 for p in sweep):
        return None, BREAK_EVEN_ALWAYS_POSITIVE
    for a, b in zip(sweep, sweep[1:]):
        if (a.net_annual < 0) != (b.net_annual < 0):
            span = b.net_annual - a.net_annual
            return a.coverage_pct + (b.coverage_pct - a.coverage_pct) * (-a.net_annual / span), BREAK_EVEN_CROSSES
    return None, BREAK_EVEN_NEVER_POSITIVE


def run_coverage_projection(inp: CoverageScenarioInput, amplification_factor: float = 1.0) -> CoverageProjection:
    amp = amplification_factor if inp.weight_mode == WeightMode.weighted else 1.0
    eff_share = effective_barrier_share(inp, amp)
    c = _chain(inp, inp.coverage_pct, eff_share)

    months = inp.months
    monthly_cost = inp.startup_cost / months + inp.fixed_monthly_cost + (c.units_annual / 12) * inp.unit_cost
    monthly = c.gross / 12 - monthly_cost
    cumulative: list[float] = []
    running = 0.0
    for _ in range(months):
        running += monthly
        cumulative.append(running)

    sweep = coverage_sweep(inp, eff_share)
    be_pct, be_status = break_even(sweep)

    return CoverageProjection(
        activity=inp.activity.value,
        months=months,
        coverage_pct=inp.coverage_pct,
        amplification_factor=amp,
        eligible_volume=c.eligible,
        effective_barrier_share=eff_share,
        baseline_disruptions=c.baseline,
        barrier_disruptions=c.barrier,
        prevented_events=c.prevented,
        units_annual=c.units_annual,
        gross_annual_benefit=c.gross,
        total_cost_horizon=c.total_cost,
        annualized_cost=c.annual_cost,
        net_annual=c.net,
        monthly_labels=[f"M{i + 1}" for i in range(months)],
        monthly_net=[monthly] * months,
        cumulative_net=cumulative,
        sweep=sweep,
        break_even_coverage_pct=be_pct,
        break_even_status=be_status,
    )
