from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Request

from chna_cra.domain.enums import WeightMode
from chna_cra.features.opportunities.gate import tier_unlocked
from chna_cra.features.projection.engine import amplification_for, run_coverage_projection, suggest_barrier_share
from chna_cra.features.projection.proforma import ProForma, project_three_years
from chna_cra.features.projection.roi import RoiResult, run_roi
from chna_cra.features.projection.schemas import CoverageScenarioInput, ProFormaInput, RoiInput

router = APIRouter(prefix="/projection", tags=["projection"])


def _require_unlocked(request: Request) -> None:
    if not request.app.state.cfg.enforce_tier_gate:
        return
    if not tier_unlocked(request.app.state.session.opportunities):
        raise HTTPException(status_code=409, detail="tier_locked")


def roi_to_dict(r: RoiResult) -> dict[str, object]:
    out = asdict(r)
    if r.coding:
        out["coding"]["uplift"] = r.coding.uplift
    if r.care_management:
        out["care_management"]["ccm_net"] = r.care_management.ccm_net
        out["care_management"]["tcm_net"] = r.care_management.tcm_net
    return out


def proforma_to_dict(p: ProForma) -> dict[str, object]:
    out = asdict(p)
    for row, year in zip(out["years"], p.years):
        row["total_revenue"] = year.total_revenue
        row["program_cost"] = year.program_cost
        row["net_contribution"] = year.net_contribution
    return out


@router.get("/defaults")
async def projection_defaults(request: Request) -> dict[str, object]:
    session = request.app.state.session
    selected = session.selected_opportunity
    template = request.app.state.catalog.template_for_kind(selected.kind) if selected else None
    return {
        "tier_unlocked": tier_unlocked(session.opportunities),
        "activity": selected.kind.value if selected else None,
        "criterion": template.criterion_text if template else None,
        "checklist": template.checklist if template else None,
        "amplification_factor": amplification_for(session.transport, WeightMode.weighted),
        "suggested_barrier_share": suggest_barrier_share(session.transport),
    }


@router.post("/coverage")
async def coverage_projection(request: Request, inp: CoverageScenarioInput) -> dict[str, object]:
    _require_unlocked(request)
    amp = amplification_for(request.app.state.session.transport, inp.weight_mode)
    return asdict(run_coverage_projection(inp, amp))


@router.post("/roi")
async def roi_projection(request: Request, inp: RoiInput) -> dict[str, object]:
    _require_unlocked(request)
    return roi_to_dict(run_roi(inp))


@router.post("/proforma")
async def proforma_projection(request: Request, inp: ProFormaInput) -> dict[str, object]:
    _require_unlocked(request)
    base = run_roi(inp.roi)
    pf = project_three_years(
        base,
        bank_contribution=inp.roi.bank_contribution,
        growth_pct=inp.growth_pct,
        inflation_pct=inp.inflation_pct,
        years=inp.years,
    )
    return {"roi": roi_to_dict(base), "proforma": proforma_to_dict(pf)}
