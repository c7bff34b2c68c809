from chna_cra.domain.enums import SourceKind
from chna_cra.domain.models import Document
from chna_cra.features.gaps.evaluator import (
    REC_ADDENDUM,
    REC_WRITTEN_COMMENTS,
    evaluate_document,
    summarize_gaps,
)


def _doc(text: str, name: str = "doc.pdf") -> Document:
    return Document(name=name, kind=SourceKind.pdf, page_texts=(text,))


def test_no_comment_elements_scores_zero(catalog) -> None:
    ev = evaluate_document(_doc("Nothing relevant here."), catalog)
    assert ev.public_comment.present_count == 0
    assert ev.public_comment.score == 0
    assert ev.public_score == 0


def test_two_comment_elements_score_67(catalog) -> None:
    ev = evaluate_document(
        _doc("We held a public comment period. Feedback was taken into account."), catalog
    )
    assert ev.public_comment.present_count == 2
    assert ev.public_comment.score == 67
    assert ev.public_score == 100
    assert ev.public_snippet.startswith("We held a public comment period")


def test_first_phrase_wins_and_snippet_is_windowed(catalog) -> None:
    text = ("a" * 200) + " The service area was mapped. " + ("b" * 300)
    ev = evaluate_document(_doc(text), catalog)

    hit = next(h for h in ev.assessment.hits if h.id == "community_def")
    assert hit.present
    assert hit.trigger == "service area"
    assert "service area" in hit.snippet
    assert len(hit.snippet) <= 90 + 170


def test_block_score_is_percent_of_elements(catalog) -> None:
    text = "Community Health Needs Assessment. Our methodology used data sources. Significant health needs were prioritized."
    ev = evaluate_document(_doc(text), catalog)

    assert ev.is_assessment
    assert not ev.is_implementation_plan
    # methods + priorities out of 7
    assert ev.assessment.present_count == 2
    assert ev.assessment.score == 29


def test_pages_are_joined_before_matching(catalog) -> None:
    doc = Document(name="two.pdf", kind=SourceKind.pdf, page_texts=("Our implementation", "strategy follows."))
    assert not evaluate_document(doc, catalog).is_implementation_plan

    doc = Document(name="two.pdf", kind=SourceKind.pdf, page_texts=("Implementation Strategy", "in partnership with"))
    ev = evaluate_document(doc, catalog)
    assert ev.is_implementation_plan


def test_summary_takes_best_score_across_documents(catalog) -> None:
    weak = evaluate_document(_doc("Nothing relevant here.", name="a.pdf"), catalog)
    strong = evaluate_document(
        _doc(
            "We solicit input via paper survey. Comments were received from residents. "
            "They were taken into account. The report is available on our website.",
            name="b.pdf",
        ),
        catalog,
    )
    summary = summarize_gaps([weak, strong])

    assert summary is not None
    assert summary.comment_score == 100
    assert summary.comment_label == "Meets (3/3)"
    assert summary.public_label == "Detected"
    assert REC_WRITTEN_COMMENTS not in summary.recommendations
    assert summary.recommendations[-1] == REC_ADDENDUM
    assert [d.document for d in summary.documents] == ["a.pdf", "b.pdf"]
    assert len(summary.documents[0].top_gaps) == 3


def test_summary_of_nothing_is_none() -> None:
    assert summarize_gaps([]) is None


def test_missing_everything_recommends_every_fix(catalog) -> None:
    summary = summarize_gaps([evaluate_document(_doc("Nothing relevant here."), catalog)])
    assert summary is not None
    assert summary.comment_label == "Missing (0/3)"
    assert summary.public_label == "Not detected"
    assert len(summary.recommendations) == 5
    assert summary.documents[0].assessment_score is None
