from __future__ import annotations

import logging
from dataclasses import replace

from chna_cra.domain.enums import Disparity, SEGMENT_AGE_65_74, SEGMENT_OVERALL
from chna_cra.domain.models import Document, EvidenceRecord
from chna_cra.features.extraction.proximity import WindowMatch, find_age_band_percent, find_percent_near
from chna_cra.features.pipeline.session import PipelineSession
from chna_cra.features.reference.catalog import ReferenceCatalog

logger = logging.getLogger(__name__)


def _page_mentions(lower: str, keywords: list[str]) -> bool:
    return any(kw.lower() in lower for kw in keywords)


def scan_document(session: PipelineSession, document: Document, catalog: ReferenceCatalog) -> int:
    """Scan one document page by page; return the number of evidence records added.

    Prominence is a per-document running count of pages that mention any of a
    disparity's keywords, taken at the page where a match occurs. Transport
    scalars are overwritten by the latest match.
    """

    prominence = {d: 0 for d in catalog.disparities}
    transport = catalog.profile(Disparity.transport)
    created = 0

    def record(key: Disparity, segment: str, m: WindowMatch, page: int) -> None:
        nonlocal created
        label = catalog.profile(key).label
        session.evidence.append(EvidenceRecord(disparity=label, snippet=m.snippet, document=document.name, page=page))
        session.aggregator.add_finding(
            key=key,
            label=label,
            segment=segment,
            magnitude=m.value,
            prominence=prominence[key],
            evidence_ref=f"{document.name} p.{page}",
        )
        created += 1
        logger.debug("%s p.%d: %s %s = %.2f%%", document.name, page, key.value, segment, m.value)

    for i, text in enumerate(document.page_texts):
        page = i + 1
        text = text or ""
        lower = text.lower()

        for key, profile in catalog.disparities.items():
            if _page_mentions(lower, profile.keywords):
                prominence[key] += 1

        overall = find_percent_near(text, transport.primary_keyword)
        if overall:
            record(Disparity.transport, SEGMENT_OVERALL, overall, page)
            session.transport = replace(session.transport, overall=overall.value)

        age_band = find_age_band_percent(text)
        if age_band:
            record(Disparity.transport, SEGMENT_AGE_65_74, age_band, page)
            session.transport = replace(session.transport, age_65_74=age_band.value)

        for key, profile in catalog.disparities.items():
            if key == Disparity.transport:
                continue
            m = find_percent_near(text, profile.primary_keyword)
            if m:
                record(key, SEGMENT_OVERALL, m, page)

    return created

