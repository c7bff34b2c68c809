"""Scenario inputs for the projection models.

Inputs arrive from forms and spreadsheets, so they are lenient: a missing or
non-numeric value becomes 0 (or the field's documented default) instead of a
validation error. Rates may be given as fractions (0.2) or percents (20);
anything above 1 is read as a percent.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, field_validator

from chna_cra.domain.enums import CodingBase, OpportunityKind, ValueBasedModel, WeightMode

MAX_MONTHS = 120


def as_number(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip().rstrip("%").replace(",", "")
        if not value:
            return default
    try:
        x = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(x) or math.isinf(x):
        return default
    return x


def normalize_rate(value: Any) -> float:
    x = as_number(value)
    return x / 100 if x > 1 else x


def clamp_percent(value: Any, default: float) -> float:
    return max(0.0, min(100.0, as_number(value, default)))


class CoverageScenarioInput(BaseModel):
    activity: OpportunityKind = OpportunityKind.nmt
    months: int = 12
    annual_volume: float = 0
    baseline_rate: float = 0
    barrier_share: float = 0
    mitigation_rate: float = 0
    coverage_pct: float = 25
    weight_mode: WeightMode = WeightMode.weighted
    senior_share_pct: float = 25
    benefit_per_event: float = 0
    startup_cost: float = 0
    fixed_monthly_cost: float = 0
    unit_cost: float = 0
    units_per_event: float = 1

    @field_validator("months", mode="before")
    @classmethod
    def _months(cls, v: Any) -> int:
        m = int(as_number(v, 12))
        if m < 1:
            return 12
        return min(m, MAX_MONTHS)

    @field_validator("baseline_rate", "barrier_share", "mitigation_rate", mode="before")
    @classmethod
    def _rates(cls, v: Any) -> float:
        return normalize_rate(v)

    @field_validator("coverage_pct", "senior_share_pct", mode="before")
    @classmethod
    def _percents(cls, v: Any) -> float:
        return clamp_percent(v, 25)

    @field_validator("units_per_event", mode="before")
    @classmethod
    def _units(cls, v: Any) -> float:
        return as_number(v, 1)

    @field_validator(
        "annual_volume", "benefit_per_event", "startup_cost", "fixed_monthly_cost", "unit_cost", mode="before"
    )
    @classmethod
    def _numbers(cls, v: Any) -> float:
        return as_number(v)

    @field_validator("weight_mode", mode="before")
    @classmethod
    def _weight_mode(cls, v: Any) -> WeightMode:
        if isinstance(v, WeightMode):
            return v
        if isinstance(v, str) and v.strip().lower() == WeightMode.flat.value:
            return WeightMode.flat
        return WeightMode.weighted


class CodingLayer(BaseModel):
    z_rate: float = 0
    z_uplift: float = 0
    cpt_rate: float = 0
    cpt_uplift: float = 0
    base: CodingBase = CodingBase.prevented
    notes: str = ""

    @field_validator("z_rate", "cpt_rate", mode="before")
    @classmethod
    def _rates(cls, v: Any) -> float:
        return normalize_rate(v)

    @field_validator("z_uplift", "cpt_uplift", mode="before")
    @classmethod
    def _numbers(cls, v: Any) -> float:
        return as_number(v)


class CareManagementLayer(BaseModel):
    ccm_patients: float = 0
    ccm_enroll_rate: float = 0
    ccm_months: float = 0
    ccm_allowed: float = 0
    ccm_success_rate: float = 0
    ccm_staff_rate: float = 0
    ccm_minutes: float = 0
    tcm_discharges: float = 0
    tcm_reach_rate: float = 0
    tcm_high_share: float = 0
    tcm_allowed_moderate: float = 0
    tcm_allowed_high: float = 0
    tcm_success_rate: float = 0
    tcm_minutes: float = 0
    tcm_staff_rate: float = 0

    @field_validator(
        "ccm_enroll_rate", "ccm_success_rate", "tcm_reach_rate", "tcm_high_share", "tcm_success_rate", mode="before"
    )
    @classmethod
    def _rates(cls, v: Any) -> float:
        return normalize_rate(v)

    @field_validator(
        "ccm_patients",
        "ccm_months",
        "ccm_allowed",
        "ccm_staff_rate",
        "ccm_minutes",
        "tcm_discharges",
        "tcm_allowed_moderate",
        "tcm_allowed_high",
        "tcm_minutes",
        "tcm_staff_rate",
        mode="before",
    )
    @classmethod
    def _numbers(cls, v: Any) -> float:
        return as_number(v)


class ValueBasedCareLayer(BaseModel):
    model: ValueBasedModel = ValueBasedModel.earnback
    at_risk: float = 0
    baseline_score: float = 0
    projected_score: float = 0
    threshold: float = 0
    bonus: float = 0

    @field_validator("at_risk", "baseline_score", "projected_score", "threshold", "bonus", mode="before")
    @classmethod
    def _numbers(cls, v: Any) -> float:
        return as_number(v)


class RoiInput(BaseModel):
    visits: float = 0
    no_show_rate: float = 0
    transport_share: float = 0
    mitigation_rate: float = 0
    overhead_rate: float = 0
    lmi_share: float = 0
    aa_share: float = 0
    net_revenue: float = 0
    marginal_cost: float = 0
    trip_cost: float = 0
    bank_contribution: float = 0
    coding: CodingLayer | None = None
    care_management: CareManagementLayer | None = None
    value_based: ValueBasedCareLayer | None = None

    @field_validator(
        "no_show_rate", "transport_share", "mitigation_rate", "overhead_rate", "lmi_share", "aa_share", mode="before"
    )
    @classmethod
    def _rates(cls, v: Any) -> float:
        return normalize_rate(v)

    @field_validator("visits", "net_revenue", "marginal_cost", "trip_cost", "bank_contribution", mode="before")
    @classmethod
    def _numbers(cls, v: Any) -> float:
        return as_number(v)


class ProFormaInput(BaseModel):
    roi: RoiInput
    growth_pct: float = 5
    inflation_pct: float = 3
    years: int = 3

    @field_validator("growth_pct", mode="before")
    @classmethod
    def _growth(cls, v: Any) -> float:
        return as_number(v, 5)

    @field_validator("inflation_pct", mode="before")
    @classmethod
    def _inflation(cls, v: Any) -> float:
        return as_number(v, 3)

    @field_validator("years", mode="before")
    @classmethod
    def _years(cls, v: Any) -> int:
        n = int(as_number(v, 3))
        return n if n >= 1 else 3
