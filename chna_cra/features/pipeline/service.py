from __future__ import annotations

import logging

from chna_cra.domain.enums import RunStatus, SourceKind
from chna_cra.domain.models import Document, ExtractionWarning
from chna_cra.features.extraction.extractor import scan_document
from chna_cra.features.findings.scoring import score_findings
from chna_cra.features.gaps.evaluator import evaluate_document
from chna_cra.features.opportunities.synthesizer import build_opportunities
from chna_cra.features.pipeline.session import PipelineSession
from chna_cra.features.reference.catalog import ReferenceCatalog

logger = logging.getLogger(__name__)

DEMO_DOCUMENT_NAME = "Demo_CHNA.pdf"
DEMO_TEXT = (
    "Why did you not get or delay getting the preventative care you thought you needed? "
    "Total: I had transportation problems 2.7%. "
    "Age 65-74: I had transportation problems 8.5%. "
    "Of patients surveyed, 7.5% reported food insecurity and 6% reported housing needs. "
    "Unweighted count 61. Martin County ZIP 56031."
)


def _status(documents: list[Document], warnings: list[ExtractionWarning], evidence_count: int) -> RunStatus:
    if not documents:
        return RunStatus.failed
    if evidence_count == 0:
        return RunStatus.no_signals
    if warnings:
        return RunStatus.partial
    return RunStatus.succeeded


def run_pipeline(
    documents: list[Document],
    catalog: ReferenceCatalog,
    warnings: list[ExtractionWarning] | None = None,
) -> PipelineSession:
    """Run every stage over a batch and return a fresh session.

    Documents are processed in order. Failures upstream arrive as `warnings`
    and never abort the batch.
    """

    session = PipelineSession(documents=list(documents), warnings=list(warnings or []))

    for doc in documents:
        created = scan_document(session, doc, catalog)
        session.gap_evaluations.append(evaluate_document(doc, catalog))
        logger.info("Scanned %s (%d pages, %d evidence records)", doc.name, doc.page_count, created)

    session.findings = score_findings(session.aggregator.findings(), session.transport)
    session.opportunities = build_opportunities(session.findings, catalog)
    session.status = _status(session.documents, session.warnings, len(session.evidence))

    if session.status == RunStatus.no_signals:
        session.warnings.append(
            ExtractionWarning(
                document="*",
                code="no_signals",
                message="No quantified disparities were found; text may be image-only or outside the keyword windows.",
            )
        )
        logger.warning("Run produced no evidence across %d document(s)", len(documents))
    elif session.status == RunStatus.failed:
        logger.warning("Run has no parsed documents (%d warning(s))", len(session.warnings))
    else:
        logger.info(
            "Run %s: %d findings, %d opportunities",
            session.status.value,
            len(session.findings),
            len(session.opportunities),
        )
    return session


def demo_document() -> Document:
    return Document(name=DEMO_DOCUMENT_NAME, kind=SourceKind.pdf, page_texts=(DEMO_TEXT,))


def run_demo(catalog: ReferenceCatalog) -> PipelineSession:
    return run_pipeline([demo_document()], catalog)
