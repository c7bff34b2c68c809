from __future__ import annotations

from dataclasses import dataclass

from chna_cra.features.projection.roi import RoiResult

DEFAULT_GROWTH_PCT = 5.0
DEFAULT_INFLATION_PCT = 3.0

# Line-item split of the overhead total; shares sum to 1.0.
OVERHEAD_ALLOCATION: list[tuple[str, float]] = [
    ("Program management & operations", 0.35),
    ("Patient outreach, scheduling & confirmations", 0.20),
    ("Data, reporting & audit trail (CRA/CHNA)", 0.18),
    ("Compliance & legal / contracting", 0.12),
    ("Evaluation & continuous improvement", 0.10),
    ("IT/tools (workflow enablement)", 0.05),
]


@dataclass(frozen=True)
class YearProjection:
    year: int
    recovered_visits: float
    patient_service_revenue: float
    quality_uplift: float
    marginal_cost: float
    vendor_cost: float
    overhead_cost: float

    @property
    def total_revenue(self) -> float:
        return self.patient_service_revenue + self.quality_uplift

    @property
    def program_cost(self) -> float:
        return self.vendor_cost + self.overhead_cost

    @property
    def net_contribution(self) -> float:
        return self.patient_service_revenue - self.marginal_cost - self.program_cost + self.quality_uplift


@dataclass(frozen=True)
class OverheadLine:
    label: str
    share: float
    amounts: list[float]


@dataclass(frozen=True)
class SourcesAndUses:
    program_cost: float
    bank_contribution: float
    hospital_contribution: float


@dataclass(frozen=True)
class ProForma:
    growth_pct: float
    inflation_pct: float
    years: list[YearProjection]
    overhead_lines: list[OverheadLine]
    sources_and_uses: SourcesAndUses


def project_year(base: RoiResult, year: int, *, growth: float, inflation: float) -> YearProjection:
    vol = (1 + growth) ** (year - 1)
    cost = (1 + inflation) ** (year - 1)
    uplift = base.coding.uplift if base.coding else 0.0
    return YearProjection(
        year=year,
        recovered_visits=base.prevented * vol,
        patient_service_revenue=base.gross_revenue * vol,
        quality_uplift=uplift * vol,
        marginal_cost=base.marginal_cost * vol,
        vendor_cost=base.transport_cost * cost,
        overhead_cost=base.overhead_cost * cost,
    )


def project_three_years(
    base: RoiResult,
    *,
    bank_contribution: float,
    growth_pct: float = DEFAULT_GROWTH_PCT,
    inflation_pct: float = DEFAULT_INFLATION_PCT,
    years: int = 3,
) -> ProForma:
    """Year 1 is the ROI scenario as-is; later years compound volume and cost separately."""

    growth = growth_pct / 100
    inflation = inflation_pct / 100
    rows = [project_year(base, n, growth=growth, inflation=inflation) for n in range(1, years + 1)]

    overhead = [
        OverheadLine(label=label, share=share, amounts=[r.overhead_cost * share for r in rows])
        for label, share in OVERHEAD_ALLOCATION
    ]

    return ProForma(
        growth_pct=growth_pct,
        inflation_pct=inflation_pct,
        years=rows,
        overhead_lines=overhead,
        sources_and_uses=SourcesAndUses(
            program_cost=base.total_program_cost,
            bank_contribution=bank_contribution,
            hospital_contribution=max(0.0, base.total_program_cost - bank_contribution),
        ),
    )
