from __future__ import annotations

from pydantic import BaseModel, Field

from chna_cra.domain.enums import Disparity, OpportunityKind


class DisparityProfileContent(BaseModel):
    label: str = Field(min_length=3, max_length=120)
    keywords: list[str] = Field(min_length=1, max_length=20)
    metric: str = Field(min_length=3, max_length=200)


class OpportunityTemplateContent(BaseModel):
    kind: OpportunityKind
    name: str = Field(min_length=3, max_length=300)
    tests: str = Field(min_length=3, max_length=300)
    criterion: str = Field(min_length=10, max_length=2000)
    cite: str = Field(min_length=10, max_length=2000)
    eligibility_clarity: float = Field(ge=0, le=100)
    documentation_burden: float = Field(ge=0, le=100)
    checklist: str = Field(min_length=3, max_length=2000)


class ChecklistElementContent(BaseModel):
    id: str = Field(min_length=1, max_length=80)
    label: str = Field(min_length=3, max_length=300)
    phrases: list[str] = Field(min_length=1, max_length=30)


class ChecklistsContent(BaseModel):
    assessment: list[ChecklistElementContent] = Field(min_length=1)
    implementation_plan: list[ChecklistElementContent] = Field(min_length=1)
    public_comment: list[ChecklistElementContent] = Field(min_length=3, max_length=3)


class ReferenceCatalogContent(BaseModel):
    disparities: dict[Disparity, DisparityProfileContent]
    opportunities: dict[Disparity, OpportunityTemplateContent]
    scope_guidance: str = Field(min_length=3, max_length=2000)
    checklists: ChecklistsContent
    public_availability_phrases: list[str] = Field(min_length=1)
    assessment_markers: list[str] = Field(min_length=1)
    implementation_plan_markers: list[str] = Field(min_length=1)
