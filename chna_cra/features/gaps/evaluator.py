"""Documentation gap checks for CHNA / Implementation Strategy documents.

Keyword presence heuristics over three checklists: the assessment elements,
the implementation plan elements, and the 3-part written comment requirement.
They speed up a gap review; they do not prove compliance.
"""

from __future__ import annotations

from dataclasses import dataclass

from chna_cra.domain.enums import ChecklistKind
from chna_cra.domain.models import Document, round_half_up
from chna_cra.features.reference.catalog import ChecklistElement, ReferenceCatalog

SNIPPET_BEFORE = 90
SNIPPET_AFTER = 170
TOP_GAPS_PER_DOCUMENT = 3
ASSESSMENT_TARGET = 85
IMPLEMENTATION_PLAN_TARGET = 85

# Written comments: exact count -> score.
_COMMENT_SCORES = {0: 0, 1: 33, 2: 67, 3: 100}
_COMMENT_LABELS = {100: "Meets (3/3)", 67: "Partial (2/3)", 33: "Weak (1/3)", 0: "Missing (0/3)"}

REC_WRITTEN_COMMENTS = (
    "Written comments compliance (3-part) is incomplete: add a documented solicitation method "
    "(paper + web + in-person options), confirm ≥1 written comment received, and explicitly state "
    "how comments changed priorities or strategies."
)
REC_ASSESSMENT = (
    "CHNA documentation gaps detected: ensure the CHNA explicitly includes (a) community definition "
    "and how it was determined, (b) methods/data sources, (c) who provided input and which underserved "
    "populations they represent, (d) prioritized needs, (e) resources available, and (f) evaluation of "
    "impact since the prior CHNA."
)
REC_IMPLEMENTATION_PLAN = (
    "Implementation Strategy gaps detected: ensure the IS lists actions for each prioritized need, "
    "associated resources and anticipated impact, and planned collaborations/partners."
)
REC_PUBLIC = (
    "Public availability signal not detected in the uploaded excerpts: ensure the CHNA and IS are "
    "clearly posted online and the document states where/how the public can access them."
)
REC_ADDENDUM = (
    "Operationalizing fix: add a one-page ‘CHNA/IS Compliance Addendum’ template with these elements, "
    "then paste into the CHNA and IS PDFs for audit-ready completeness."
)


@dataclass(frozen=True)
class ElementHit:
    id: str
    label: str
    present: bool
    trigger: str
    snippet: str


@dataclass(frozen=True)
class ChecklistBlock:
    kind: ChecklistKind
    hits: list[ElementHit]
    present_count: int
    total: int
    score: int

    def missing(self) -> list[ElementHit]:
        return [h for h in self.hits if not h.present]


@dataclass(frozen=True)
class ChecklistEvaluation:
    document: str
    is_assessment: bool
    is_implementation_plan: bool
    assessment: ChecklistBlock
    implementation_plan: ChecklistBlock
    public_comment: ChecklistBlock
    public_score: int
    public_snippet: str

    def top_gaps(self, limit: int = TOP_GAPS_PER_DOCUMENT) -> list[str]:
        missing = self.assessment.missing() + self.implementation_plan.missing() + self.public_comment.missing()
        return [h.label for h in missing[:limit]]


@dataclass(frozen=True)
class DocumentGaps:
    document: str
    assessment_score: int | None
    implementation_plan_score: int | None
    comment_score: int
    public_score: int
    top_gaps: list[str]
    evidence: str


@dataclass(frozen=True)
class GapSummary:
    assessment_score: int
    implementation_plan_score: int
    comment_score: int
    comment_label: str
    public_label: str
    documents: list[DocumentGaps]
    recommendations: list[str]


def _snippet(text: str, lower: str, phrase: str) -> str:
    idx = lower.find(phrase.lower())
    if idx < 0:
        return ""
    start = max(0, idx - SNIPPET_BEFORE)
    end = min(len(text), idx + SNIPPET_AFTER)
    return " ".join(text[start:end].split())


def _first_phrase(lower: str, phrases: list[str]) -> str | None:
    for p in phrases:
        if p.lower() in lower:
            return p
    return None


def _score_block(kind: ChecklistKind, elements: list[ChecklistElement], text: str, lower: str) -> ChecklistBlock:
    hits: list[ElementHit] = []
    for el in elements:
        found = _first_phrase(lower, el.phrases)
        hits.append(
            ElementHit(
                id=el.id,
                label=el.label,
                present=found is not None,
                trigger=found or "",
                snippet=_snippet(text, lower, found) if found else "",
            )
        )
    present = sum(1 for h in hits if h.present)
    total = len(hits)
    if kind == ChecklistKind.public_comment:
        score = _COMMENT_SCORES[present]
    else:
        score = round_half_up(present / total * 100) if total else 0
    return ChecklistBlock(kind=kind, hits=hits, present_count=present, total=total, score=score)


def evaluate_document(document: Document, catalog: ReferenceCatalog) -> ChecklistEvaluation:
    text = " \n".join(document.page_texts)
    lower = text.lower()

    public_hit = _first_phrase(lower, catalog.public_availability_phrases)

    return ChecklistEvaluation(
        document=document.name,
        is_assessment=_first_phrase(lower, catalog.assessment_markers) is not None,
        is_implementation_plan=_first_phrase(lower, catalog.implementation_plan_markers) is not None,
        assessment=_score_block(
            ChecklistKind.assessment, catalog.checklists[ChecklistKind.assessment], text, lower
        ),
        implementation_plan=_score_block(
            ChecklistKind.implementation_plan, catalog.checklists[ChecklistKind.implementation_plan], text, lower
        ),
        public_comment=_score_block(
            ChecklistKind.public_comment, catalog.checklists[ChecklistKind.public_comment], text, lower
        ),
        public_score=100 if public_hit else 0,
        public_snippet=_snippet(text, lower, public_hit) if public_hit else "",
    )


def comment_label(score: int) -> str:
    return _COMMENT_LABELS.get(score, _COMMENT_LABELS[0])


def _document_evidence(ev: ChecklistEvaluation) -> str:
    if ev.public_snippet:
        return f"Public signal: {ev.public_snippet}"
    for block in (ev.public_comment, ev.assessment):
        for h in block.hits:
            if h.present and h.snippet:
                return h.snippet
    return ""


def summarize_gaps(evaluations: list[ChecklistEvaluation]) -> GapSummary | None:
    """Roll per-document evaluations up into one summary.

    Uploads are often partial excerpts, so each metric takes the best score
    across documents.
    """

    if not evaluations:
        return None

    assessment = max(e.assessment.score for e in evaluations)
    plan = max(e.implementation_plan.score for e in evaluations)
    comments = max(e.public_comment.score for e in evaluations)
    public = max(e.public_score for e in evaluations)

    docs = [
        DocumentGaps(
            document=e.document,
            assessment_score=e.assessment.score if e.is_assessment else None,
            implementation_plan_score=e.implementation_plan.score if e.is_implementation_plan else None,
            comment_score=e.public_comment.score,
            public_score=e.public_score,
            top_gaps=e.top_gaps(),
            evidence=_document_evidence(e),
        )
        for e in evaluations
    ]

    recs: list[str] = []
    if comments < 100:
        recs.append(REC_WRITTEN_COMMENTS)
    if assessment < ASSESSMENT_TARGET:
        recs.append(REC_ASSESSMENT)
    if plan < IMPLEMENTATION_PLAN_TARGET:
        recs.append(REC_IMPLEMENTATION_PLAN)
    if public < 100:
        recs.append(REC_PUBLIC)
    recs.append(REC_ADDENDUM)

    return GapSummary(
        assessment_score=assessment,
        implementation_plan_score=plan,
        comment_score=comments,
        comment_label=comment_label(comments),
        public_label="Detected" if public == 100 else "Not detected",
        documents=docs,
        recommendations=recs,
    )
