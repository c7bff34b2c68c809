from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from chna_cra.domain.enums import Disparity
from chna_cra.features.reference.errors import CatalogValidationError, ValidationIssue
from chna_cra.features.reference.schemas import ReferenceCatalogContent


def to_issues(e: ValidationError) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for err in e.errors():
        loc = err.get("loc") or []
        path = ".".join(str(p) for p in loc)
        issues.append(
            ValidationIssue(
                code=str(err.get("type") or "validation_error"),
                path=path,
                message=str(err.get("msg") or "invalid"),
            )
        )
    return issues


def validate_catalog(content: dict[str, Any]) -> ReferenceCatalogContent:
    """Validate raw catalog JSON and check that every disparity is covered."""

    try:
        parsed = ReferenceCatalogContent.model_validate(content)
    except ValidationError as e:
        raise CatalogValidationError(to_issues(e))

    issues: list[ValidationIssue] = []
    for d in Disparity:
        if d not in parsed.disparities:
            issues.append(
                ValidationIssue(
                    code="missing_disparity",
                    path=f"disparities.{d.value}",
                    message=f"No profile for disparity '{d.value}'",
                )
            )

    kinds = [t.kind for t in parsed.opportunities.values()]
    dup_kinds = sorted({k.value for k in kinds if kinds.count(k) > 1})
    for k in dup_kinds:
        issues.append(
            ValidationIssue(
                code="duplicate_opportunity_kind",
                path="opportunities",
                message=f"Opportunity kind '{k}' is mapped more than once",
            )
        )

    if Disparity.transport not in parsed.opportunities:
        issues.append(
            ValidationIssue(
                code="missing_transport_opportunity",
                path="opportunities.transport",
                message="The transportation opportunity is mandatory",
            )
        )

    if issues:
        raise CatalogValidationError(issues)
    return parsed
