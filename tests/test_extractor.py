import pytest

from chna_cra.domain.enums import Disparity, SEGMENT_AGE_65_74, SEGMENT_OVERALL, SourceKind
from chna_cra.domain.models import Document
from chna_cra.features.extraction.extractor import scan_document
from chna_cra.features.pipeline.session import PipelineSession


def _doc(*pages: str, name: str = "chna.pdf") -> Document:
    return Document(name=name, kind=SourceKind.pdf, page_texts=tuple(pages))


def test_two_spans_yield_two_evidence_records_and_two_findings(catalog, two_span_text: str) -> None:
    session = PipelineSession()
    created = scan_document(session, _doc(two_span_text), catalog)

    assert created == 2
    assert len(session.evidence) == 2
    ids = [f.id for f in session.aggregator.findings()]
    assert ids == [f"transport__{SEGMENT_OVERALL}", f"transport__{SEGMENT_AGE_65_74}"]
    assert session.transport.overall == pytest.approx(2.7)
    assert session.transport.age_65_74 == pytest.approx(8.5)


def test_evidence_records_point_at_page(catalog) -> None:
    session = PipelineSession()
    scan_document(session, _doc("intro only", "transportation problems 4%"), catalog)

    assert len(session.evidence) == 1
    ev = session.evidence[0]
    assert ev.page == 2
    assert ev.document == "chna.pdf"
    assert ev.disparity == catalog.profile(Disparity.transport).label
    assert session.aggregator.findings()[0].evidence_ref == "chna.pdf p.2"


def test_prominence_counts_pages_with_keyword_up_to_match(catalog) -> None:
    session = PipelineSession()
    doc = _doc("transit options are limited", "more about transit", "transportation problems 5%")
    scan_document(session, doc, catalog)

    (finding,) = session.aggregator.findings()
    assert finding.prominence == 3


def test_other_disparities_use_primary_keyword(catalog) -> None:
    session = PipelineSession()
    text = "Of patients surveyed, 7.5% reported food insecurity and 6% reported housing needs."
    scan_document(session, _doc(text), catalog)

    findings = {f.key: f for f in session.aggregator.findings()}
    assert set(findings) == {Disparity.food}
    assert findings[Disparity.food].magnitude == 6


def test_transport_scalars_follow_latest_match(catalog) -> None:
    session = PipelineSession()
    scan_document(session, _doc("transportation problems 3%", name="a.pdf"), catalog)
    scan_document(session, _doc("transportation problems 2%", name="b.pdf"), catalog)

    assert session.transport.overall == 2
    # The finding keeps the larger magnitude.
    (finding,) = session.aggregator.findings()
    assert finding.magnitude == 3
    assert finding.evidence_ref == "a.pdf p.1"


def test_text_without_percentages_produces_nothing(catalog) -> None:
    session = PipelineSession()
    assert scan_document(session, _doc("Transportation was discussed at length."), catalog) == 0
    assert session.evidence == []
