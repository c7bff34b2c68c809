from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationIssue:
    code: str
    path: str
    message: str


class CatalogValidationError(Exception):
    def __init__(self, issues: list[ValidationIssue]):
        super().__init__("catalog_validation_error")
        self.issues = issues


class ReportImportError(Exception):
    def __init__(self, issues: list[ValidationIssue]):
        super().__init__("report_import_error")
        self.issues = issues
