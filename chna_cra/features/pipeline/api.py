from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Request

from chna_cra.domain.enums import OpportunityKind
from chna_cra.features.opportunities.gate import tier_unlocked
from chna_cra.features.pipeline.export import export_report, finding_to_dict, gaps_to_dict, import_report, opportunity_to_dict
from chna_cra.features.pipeline.service import run_demo
from chna_cra.features.pipeline.session import PipelineSession
from chna_cra.features.reference.errors import ReportImportError

router = APIRouter(prefix="/session", tags=["session"])


def session_summary(session: PipelineSession) -> dict[str, object]:
    selected = session.selected_opportunity
    return {
        "status": session.status.value,
        "documents": [{"name": d.name, "kind": d.kind.value, "pages": d.page_count} for d in session.documents],
        "evidence_count": len(session.evidence),
        "finding_count": len(session.findings),
        "transport": {
            "overall": session.transport.overall,
            "age_65_74": session.transport.age_65_74,
            "amplification": session.transport.amplification,
        },
        "selected_opportunity": selected.kind.value if selected else None,
        "tier_unlocked": tier_unlocked(session.opportunities),
        "warnings": [asdict(w) for w in session.warnings],
    }


@router.get("")
async def get_session(request: Request) -> dict[str, object]:
    return session_summary(request.app.state.session)


@router.post("/demo")
async def load_demo(request: Request) -> dict[str, object]:
    request.app.state.session = run_demo(request.app.state.catalog)
    return session_summary(request.app.state.session)


@router.post("/reset")
async def reset_session(request: Request) -> dict[str, object]:
    request.app.state.session = PipelineSession()
    return session_summary(request.app.state.session)


@router.get("/findings")
async def list_findings(request: Request) -> dict[str, object]:
    session = request.app.state.session
    return {"findings": [finding_to_dict(f) for f in session.findings]}


@router.get("/opportunities")
async def list_opportunities(request: Request) -> dict[str, object]:
    session = request.app.state.session
    selected = session.selected_opportunity
    return {
        "opportunities": [opportunity_to_dict(o) for o in session.opportunities],
        "selected": selected.kind.value if selected else None,
        "tier_unlocked": tier_unlocked(session.opportunities),
    }


@router.post("/opportunities/{kind}/select")
async def select_opportunity(request: Request, kind: OpportunityKind) -> dict[str, object]:
    session = request.app.state.session
    try:
        opp = session.select(kind)
    except KeyError:
        raise HTTPException(status_code=404, detail="unknown_opportunity")
    return {"selected": opportunity_to_dict(opp)}


@router.get("/evidence")
async def list_evidence(request: Request) -> dict[str, object]:
    session = request.app.state.session
    limit = request.app.state.cfg.evidence_view_limit
    recent = list(reversed(session.recent_evidence(limit)))
    return {"total": len(session.evidence), "evidence": [asdict(e) for e in recent]}


@router.get("/gaps")
async def get_gaps(request: Request) -> dict[str, object]:
    return {"summary": gaps_to_dict(request.app.state.session)}


@router.get("/report")
async def get_report(request: Request) -> dict[str, Any]:
    cfg = request.app.state.cfg
    return export_report(request.app.state.session, evidence_limit=cfg.evidence_export_limit)


@router.post("/report")
async def load_report(request: Request, payload: dict[str, Any] = Body(...)) -> dict[str, object]:
    try:
        session = import_report(payload)
    except ReportImportError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": "invalid_report", "issues": [asdict(i) for i in e.issues]},
        )
    request.app.state.session = session
    return session_summary(session)
