from __future__ import annotations

from dataclasses import dataclass

from chna_cra.domain.enums import CodingBase, ValueBasedModel
from chna_cra.domain.models import round_half_up
from chna_cra.features.projection.schemas import (
    CareManagementLayer,
    CodingLayer,
    RoiInput,
    ValueBasedCareLayer,
)


@dataclass(frozen=True)
class CodingUplift:
    base: str
    visits: float
    z_code: float
    cpt: float

    @property
    def uplift(self) -> float:
        return self.z_code + self.cpt


@dataclass(frozen=True)
class CareManagementUplift:
    ccm_enrolled: float
    ccm_billed_months: float
    ccm_gross: float
    ccm_labor: float
    tcm_episodes: float
    tcm_avg_allowed: float
    tcm_gross: float
    tcm_labor: float

    @property
    def ccm_net(self) -> float:
        return self.ccm_gross - self.ccm_labor

    @property
    def tcm_net(self) -> float:
        return self.tcm_gross - self.tcm_labor


@dataclass(frozen=True)
class ValueBasedUplift:
    model: str
    earn: float
    clears_threshold: bool | None = None


@dataclass(frozen=True)
class RoiResult:
    transport_no_shows: float
    prevented: float
    gross_revenue: float
    marginal_cost: float
    transport_cost: float
    overhead_cost: float
    total_program_cost: float
    net_benefit: float
    break_even_trip_cost: float
    trips: float
    lmi_trips: float
    aa_trips: float
    bank_per_lmi_trip: float
    bank_share_of_cost: float
    narrative: str
    coding: CodingUplift | None
    care_management: CareManagementUplift | None
    value_based: ValueBasedUplift | None
    total_net: float
    roi_multiple: float | None
    all_in_net: float


def coding_uplift(layer: CodingLayer, *, prevented_visits: float, all_visits: float) -> CodingUplift:
    n = all_visits if layer.base == CodingBase.all else prevented_visits
    return CodingUplift(
        base=layer.base.value,
        visits=n,
        z_code=n * layer.z_rate * layer.z_uplift,
        cpt=n * layer.cpt_rate * layer.cpt_uplift,
    )


def care_management_uplift(layer: CareManagementLayer) -> CareManagementUplift:
    enrolled = layer.ccm_patients * layer.ccm_enroll_rate
    billed = enrolled * layer.ccm_months * layer.ccm_success_rate

    episodes = layer.tcm_discharges * layer.tcm_reach_rate * layer.tcm_success_rate
    avg_allowed = layer.tcm_high_share * layer.tcm_allowed_high + (1 - layer.tcm_high_share) * layer.tcm_allowed_moderate

    return CareManagementUplift(
        ccm_enrolled=enrolled,
        ccm_billed_months=billed,
        ccm_gross=billed * layer.ccm_allowed,
        ccm_labor=billed * layer.ccm_minutes * layer.ccm_staff_rate,
        tcm_episodes=episodes,
        tcm_avg_allowed=avg_allowed,
        tcm_gross=episodes * avg_allowed,
        tcm_labor=episodes * layer.tcm_minutes * layer.tcm_staff_rate,
    )


def value_based_uplift(layer: ValueBasedCareLayer) -> ValueBasedUplift:
    if layer.model == ValueBasedModel.earnback:
        delta = max(0.0, layer.projected_score - layer.baseline_score)
        return ValueBasedUplift(model=layer.model.value, earn=delta / 100 * layer.at_risk)

    clears = layer.projected_score >= layer.threshold
    already = layer.baseline_score >= layer.threshold
    return ValueBasedUplift(
        model=layer.model.value,
        earn=layer.bonus if clears and not already else 0.0,
        clears_threshold=clears,
    )


def _fmt_count(x: float) -> str:
    return f"{round_half_up(x):,}"


def run_roi(inp: RoiInput) -> RoiResult:
    """Visit-level ROI parity model with optional additive uplift layers.

    An absent layer contributes zero. Divisions by zero fall back to 0 (or
    None for the ROI multiple).
    """

    no_shows = inp.visits * inp.no_show_rate * inp.transport_share
    prevented = no_shows * inp.mitigation_rate
    gross = prevented * inp.net_revenue
    marginal = prevented * inp.marginal_cost
    transport_cost = prevented * inp.trip_cost
    overhead = transport_cost * inp.overhead_rate
    total_cost = transport_cost + overhead
    net = gross - marginal - total_cost

    trips = prevented
    lmi_trips = trips * inp.lmi_share
    aa_trips = trips * inp.aa_share

    coding = (
        coding_uplift(inp.coding, prevented_visits=prevented, all_visits=inp.visits) if inp.coding else None
    )
    care = care_management_uplift(inp.care_management) if inp.care_management else None
    vbc = value_based_uplift(inp.value_based) if inp.value_based else None

    total_net = net + (coding.uplift if coding else 0.0)
    all_in = total_net
    if care:
        all_in += care.ccm_net + care.tcm_net
    if vbc:
        all_in += vbc.earn

    return RoiResult(
        transport_no_shows=no_shows,
        prevented=prevented,
        gross_revenue=gross,
        marginal_cost=marginal,
        transport_cost=transport_cost,
        overhead_cost=overhead,
        total_program_cost=total_cost,
        net_benefit=net,
        break_even_trip_cost=inp.net_revenue - inp.marginal_cost,
        trips=trips,
        lmi_trips=lmi_trips,
        aa_trips=aa_trips,
        bank_per_lmi_trip=0.0 if lmi_trips == 0 else inp.bank_contribution / lmi_trips,
        bank_share_of_cost=0.0 if total_cost == 0 else inp.bank_contribution / total_cost,
        narrative=(
            f"Estimated {_fmt_count(lmi_trips)} LMI trips and {_fmt_count(trips)} essential visits "
            "enabled annually within the Assessment Area."
        ),
        coding=coding,
        care_management=care,
        value_based=vbc,
        total_net=total_net,
        roi_multiple=None if total_cost == 0 else total_net / total_cost,
        all_in_net=all_in,
    )
