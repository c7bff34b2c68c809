from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from chna_cra.domain.enums import ChecklistKind, Disparity, OpportunityKind
from chna_cra.features.reference.validation import validate_catalog

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parents[2] / "data" / "reference_catalog.json"


@dataclass(frozen=True)
class DisparityProfile:
    key: Disparity
    label: str
    keywords: list[str]
    metric: str

    @property
    def primary_keyword(self) -> str:
        return self.keywords[0]


@dataclass(frozen=True)
class OpportunityTemplate:
    disparity: Disparity
    kind: OpportunityKind
    name: str
    tests: str
    criterion: str
    cite: str
    eligibility_clarity: float
    documentation_burden: float
    checklist: str

    @property
    def criterion_text(self) -> str:
        return f"{self.criterion} {self.cite}"


@dataclass(frozen=True)
class ChecklistElement:
    id: str
    label: str
    phrases: list[str]


@dataclass(frozen=True)
class ReferenceCatalog:
    disparities: dict[Disparity, DisparityProfile]
    opportunities: dict[Disparity, OpportunityTemplate]
    scope_guidance: str
    checklists: dict[ChecklistKind, list[ChecklistElement]]
    public_availability_phrases: list[str]
    assessment_markers: list[str]
    implementation_plan_markers: list[str]

    def profile(self, key: Disparity) -> DisparityProfile:
        return self.disparities[key]

    def template_for_kind(self, kind: OpportunityKind) -> OpportunityTemplate | None:
        for t in self.opportunities.values():
            if t.kind == kind:
                return t
        return None


def catalog_from_dict(content: dict[str, Any]) -> ReferenceCatalog:
    parsed = validate_catalog(content)

    # Iterate the enum, not the JSON, so profile order is fixed by Disparity.
    disparities = {
        d: DisparityProfile(
            key=d,
            label=parsed.disparities[d].label,
            keywords=list(parsed.disparities[d].keywords),
            metric=parsed.disparities[d].metric,
        )
        for d in Disparity
    }
    opportunities = {
        d: OpportunityTemplate(
            disparity=d,
            kind=t.kind,
            name=t.name,
            tests=t.tests,
            criterion=t.criterion,
            cite=t.cite,
            eligibility_clarity=t.eligibility_clarity,
            documentation_burden=t.documentation_burden,
            checklist=t.checklist,
        )
        for d, t in parsed.opportunities.items()
    }

    def elements(block) -> list[ChecklistElement]:
        return [ChecklistElement(id=e.id, label=e.label, phrases=list(e.phrases)) for e in block]

    return ReferenceCatalog(
        disparities=disparities,
        opportunities=opportunities,
        scope_guidance=parsed.scope_guidance,
        checklists={
            ChecklistKind.assessment: elements(parsed.checklists.assessment),
            ChecklistKind.implementation_plan: elements(parsed.checklists.implementation_plan),
            ChecklistKind.public_comment: elements(parsed.checklists.public_comment),
        },
        public_availability_phrases=list(parsed.public_availability_phrases),
        assessment_markers=list(parsed.assessment_markers),
        implementation_plan_markers=list(parsed.implementation_plan_markers),
    )


def load_reference_catalog(path: Path | None = None) -> ReferenceCatalog:
    src = path or DEFAULT_CATALOG_PATH
    content = json.loads(Path(src).read_text(encoding="utf-8"))
    catalog = catalog_from_dict(content)
    logger.info(
        "Loaded reference catalog from %s (%d disparities, %d opportunity templates)",
        src,
        len(catalog.disparities),
        len(catalog.opportunities),
    )
    return catalog
