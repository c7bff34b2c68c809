from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from chna_cra.domain.enums import (
    Disparity,
    OpportunityKind,
    Recommendation,
    RunStatus,
    SourceKind,
    Strength,
)
from chna_cra.domain.models import (
    Document,
    EvidenceRecord,
    ExtractionWarning,
    Finding,
    Opportunity,
    TransportSignals,
)
from chna_cra.features.findings.aggregator import FindingAggregator
from chna_cra.features.gaps.evaluator import summarize_gaps
from chna_cra.features.opportunities.gate import tier_unlocked
from chna_cra.features.pipeline.session import PipelineSession
from chna_cra.features.reference.errors import ReportImportError, ValidationIssue
from chna_cra.features.reference.validation import to_issues

logger = logging.getLogger(__name__)

DEFAULT_EVIDENCE_LIMIT = 100
MAX_IMPORT_PAGES = 5000


class DocumentPayload(BaseModel):
    name: str
    kind: SourceKind
    pages: int = Field(ge=0, le=MAX_IMPORT_PAGES)


class TransportPayload(BaseModel):
    overall: float | None = None
    age_65_74: float | None = None


class FindingPayload(BaseModel):
    key: Disparity
    disparity: str
    segment: str
    magnitude: float
    prominence: int = Field(ge=0)
    concentration: float = Field(ge=0)
    score: int = Field(ge=0, le=100)
    recommendation: Recommendation
    evidence_ref: str


class OpportunityPayload(BaseModel):
    name: str
    kind: OpportunityKind
    disparity: Disparity
    tests: str
    criterion: str
    strength: Strength
    score: int = Field(ge=0, le=100)
    scope: str
    checklist: str


class EvidencePayload(BaseModel):
    disparity: str
    snippet: str
    document: str
    page: int = Field(ge=1)


class WarningPayload(BaseModel):
    document: str
    code: str
    message: str


class ReportPayload(BaseModel):
    generated_at: str | None = None
    status: RunStatus = RunStatus.succeeded
    documents: list[DocumentPayload] = Field(default_factory=list)
    transport: TransportPayload = Field(default_factory=TransportPayload)
    findings: list[FindingPayload] = Field(default_factory=list)
    opportunities: list[OpportunityPayload] = Field(default_factory=list)
    selected_opportunity: OpportunityKind | None = None
    warnings: list[WarningPayload] = Field(default_factory=list)
    evidence: list[EvidencePayload] = Field(default_factory=list)


def finding_to_dict(f: Finding) -> dict[str, Any]:
    return {
        "id": f.id,
        "key": f.key.value,
        "disparity": f.disparity,
        "segment": f.segment,
        "magnitude": f.magnitude,
        "prominence": f.prominence,
        "concentration": f.concentration,
        "score": f.score,
        "recommendation": f.recommendation.value,
        "evidence_ref": f.evidence_ref,
    }


def opportunity_to_dict(o: Opportunity) -> dict[str, Any]:
    return {
        "name": o.name,
        "kind": o.kind.value,
        "disparity": o.disparity.value,
        "tests": o.tests,
        "criterion": o.criterion,
        "strength": o.strength.value,
        "score": o.score,
        "scope": o.scope,
        "checklist": o.checklist,
    }


def gaps_to_dict(session: PipelineSession) -> dict[str, Any] | None:
    summary = summarize_gaps(session.gap_evaluations)
    return asdict(summary) if summary else None


def export_report(session: PipelineSession, evidence_limit: int = DEFAULT_EVIDENCE_LIMIT) -> dict[str, Any]:
    selected = session.selected_opportunity
    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "status": session.status.value,
        "documents": [{"name": d.name, "kind": d.kind.value, "pages": d.page_count} for d in session.documents],
        "transport": {
            "overall": session.transport.overall,
            "age_65_74": session.transport.age_65_74,
            "amplification": session.transport.amplification,
        },
        "findings": [finding_to_dict(f) for f in session.findings],
        "opportunities": [opportunity_to_dict(o) for o in session.opportunities],
        "selected_opportunity": selected.kind.value if selected else None,
        "tier_unlocked": tier_unlocked(session.opportunities),
        "gaps": gaps_to_dict(session),
        "warnings": [asdict(w) for w in session.warnings],
        "evidence": [asdict(e) for e in session.recent_evidence(evidence_limit)],
    }


def import_report(content: dict[str, Any]) -> PipelineSession:
    """Rebuild a session from an exported report.

    Findings and opportunities come back field for field. Page text is not
    part of the report, so documents are restored as blank pages and no gap
    evaluation is carried over.
    """

    try:
        payload = ReportPayload.model_validate(content)
    except ValidationError as e:
        raise ReportImportError(to_issues(e))

    ids = [f"{f.key.value}__{f.segment}" for f in payload.findings]
    dupes = sorted({i for i in ids if ids.count(i) > 1})
    if dupes:
        raise ReportImportError(
            [ValidationIssue(code="duplicate_finding", path="findings", message=f"Duplicate finding '{i}'") for i in dupes]
        )
    kinds = {o.kind for o in payload.opportunities}
    if payload.selected_opportunity is not None and payload.selected_opportunity not in kinds:
        raise ReportImportError(
            [
                ValidationIssue(
                    code="unknown_opportunity",
                    path="selected_opportunity",
                    message=f"No opportunity of kind '{payload.selected_opportunity.value}'",
                )
            ]
        )

    findings = [
        Finding(
            key=f.key,
            disparity=f.disparity,
            segment=f.segment,
            magnitude=f.magnitude,
            prominence=f.prominence,
            evidence_ref=f.evidence_ref,
            concentration=f.concentration,
            score=f.score,
            recommendation=f.recommendation,
        )
        for f in payload.findings
    ]
    opportunities = [Opportunity(**o.model_dump()) for o in payload.opportunities]

    session = PipelineSession(
        documents=[Document(name=d.name, kind=d.kind, page_texts=("",) * d.pages) for d in payload.documents],
        evidence=[EvidenceRecord(**e.model_dump()) for e in payload.evidence],
        aggregator=FindingAggregator.from_findings(findings),
        findings=findings,
        opportunities=opportunities,
        selected_kind=payload.selected_opportunity,
        transport=TransportSignals(overall=payload.transport.overall, age_65_74=payload.transport.age_65_74),
        warnings=[ExtractionWarning(**w.model_dump()) for w in payload.warnings],
        status=payload.status,
    )
    logger.info("Imported report with %d findings, %d opportunities", len(findings), len(opportunities))
    return session
