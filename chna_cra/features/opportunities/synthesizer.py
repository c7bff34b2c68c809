from __future__ import annotations

from chna_cra.domain.enums import Disparity, Strength
from chna_cra.domain.models import Finding, Opportunity, clamp, round_half_up
from chna_cra.features.reference.catalog import OpportunityTemplate, ReferenceCatalog

# Assessment-area attribution is not parsed from documents yet; fixed prior.
ATTRIBUTION_STRENGTH = 70
# Used for transport when no transport finding exists, so it stays evaluable.
NEUTRAL_RESPONSIVENESS = 55

WEIGHT_ELIGIBILITY = 0.30
WEIGHT_RESPONSIVENESS = 0.30
WEIGHT_ATTRIBUTION = 0.25
WEIGHT_BURDEN = 0.15

STRONG_AT = 75
MODERATE_AT = 60


def opportunity_score(*, eligibility: float, responsiveness: float, attribution: float, burden: float) -> int:
    return round_half_up(
        WEIGHT_ELIGIBILITY * eligibility
        + WEIGHT_RESPONSIVENESS * responsiveness
        + WEIGHT_ATTRIBUTION * attribution
        + WEIGHT_BURDEN * (100 - burden)
    )


def strength_for(score: int) -> Strength:
    if score >= STRONG_AT:
        return Strength.strong
    if score >= MODERATE_AT:
        return Strength.moderate
    return Strength.weak


def _best_by_key(findings: list[Finding]) -> dict[Disparity, Finding]:
    # `findings` is sorted by score, so the first one per key is the best.
    best: dict[Disparity, Finding] = {}
    for f in findings:
        best.setdefault(f.key, f)
    return best


def _build(template: OpportunityTemplate, responsiveness: float, scope: str) -> Opportunity:
    score = opportunity_score(
        eligibility=template.eligibility_clarity,
        responsiveness=clamp(responsiveness, 0, 100),
        attribution=ATTRIBUTION_STRENGTH,
        burden=template.documentation_burden,
    )
    return Opportunity(
        name=template.name,
        kind=template.kind,
        disparity=template.disparity,
        tests=template.tests,
        criterion=template.criterion_text,
        strength=strength_for(score),
        score=score,
        scope=scope,
        checklist=template.checklist,
    )


def build_opportunities(findings: list[Finding], catalog: ReferenceCatalog) -> list[Opportunity]:
    """Map scored findings onto CRA opportunity templates, best first.

    Transportation is always produced. Other templates need a finding of
    their disparity; disparities without a template never yield one.
    """

    best = _best_by_key(findings)
    opps: list[Opportunity] = []
    for disparity, template in catalog.opportunities.items():
        f = best.get(disparity)
        if f is None:
            if disparity != Disparity.transport:
                continue
            responsiveness: float = NEUTRAL_RESPONSIVENESS
        else:
            responsiveness = f.score
        opps.append(_build(template, responsiveness, catalog.scope_guidance))

    return sorted(opps, key=lambda o: o.score, reverse=True)
