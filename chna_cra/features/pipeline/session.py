from __future__ import annotations

from dataclasses import dataclass, field

from chna_cra.domain.enums import OpportunityKind, RunStatus
from chna_cra.domain.models import (
    Document,
    EvidenceRecord,
    ExtractionWarning,
    Finding,
    Opportunity,
    TransportSignals,
)
from chna_cra.features.findings.aggregator import FindingAggregator
from chna_cra.features.gaps.evaluator import ChecklistEvaluation


@dataclass
class PipelineSession:
    """All state of one analysis run.

    Reset means replacing the instance, never clearing fields in place.
    """

    documents: list[Document] = field(default_factory=list)
    evidence: list[EvidenceRecord] = field(default_factory=list)
    aggregator: FindingAggregator = field(default_factory=FindingAggregator)
    findings: list[Finding] = field(default_factory=list)
    opportunities: list[Opportunity] = field(default_factory=list)
    selected_kind: OpportunityKind | None = None
    transport: TransportSignals = field(default_factory=TransportSignals)
    gap_evaluations: list[ChecklistEvaluation] = field(default_factory=list)
    warnings: list[ExtractionWarning] = field(default_factory=list)
    status: RunStatus = RunStatus.empty

    @property
    def selected_opportunity(self) -> Opportunity | None:
        if not self.opportunities:
            return None
        if self.selected_kind is not None:
            for o in self.opportunities:
                if o.kind == self.selected_kind:
                    return o
        return self.opportunities[0]

    def select(self, kind: OpportunityKind) -> Opportunity:
        for o in self.opportunities:
            if o.kind == kind:
                self.selected_kind = kind
                return o
        raise KeyError(kind.value)

    def recent_evidence(self, limit: int) -> list[EvidenceRecord]:
        if limit <= 0:
            return []
        return self.evidence[-limit:]
