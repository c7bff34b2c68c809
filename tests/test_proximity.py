import pytest

from chna_cra.features.extraction.proximity import (
    SNIPPET_MAX_CHARS,
    TRAILING_WINDOW,
    find_age_band_percent,
    find_percent_near,
)


def test_percent_near_keyword_is_case_insensitive() -> None:
    m = find_percent_near("Total: I had TRANSPORTATION problems 2.7%.", "transportation")
    assert m is not None
    assert m.value == pytest.approx(2.7)
    assert m.snippet == "TRANSPORTATION problems 2.7%"


def test_percent_near_takes_first_match_in_reading_order() -> None:
    m = find_percent_near("food insecurity 6% and later food insecurity 9%", "food insecurity")
    assert m is not None
    assert m.value == 6


def test_percent_outside_trailing_window_is_ignored() -> None:
    text = "transportation" + ("x" * (TRAILING_WINDOW + 5)) + " 12%"
    assert find_percent_near(text, "transportation") is None


def test_keyword_is_matched_literally() -> None:
    assert find_percent_near("comment(s) received 10%", "comment(s)") is not None
    assert find_percent_near("comments received 10%", "comment(s)") is None


def test_percent_before_keyword_does_not_count() -> None:
    assert find_percent_near("7.5% reported food insecurity.", "food insecurity") is None


@pytest.mark.parametrize("sep", ["-", "–", " - "])
def test_age_band_accepts_hyphen_variants(sep: str) -> None:
    m = find_age_band_percent(f"Age 65{sep}74: I had transportation problems 8.5%.")
    assert m is not None
    assert m.value == pytest.approx(8.5)


def test_age_band_requires_transportation_mention() -> None:
    assert find_age_band_percent("Age 65-74: I had housing problems 8.5%.") is None


def test_snippet_is_bounded_and_whitespace_normalized() -> None:
    text = "transportation\n\n   problems" + (" word" * 20) + " 4%"
    m = find_percent_near(text, "transportation")
    assert m is not None
    assert "\n" not in m.snippet
    assert "  " not in m.snippet
    assert len(m.snippet) <= SNIPPET_MAX_CHARS


def test_empty_text_has_no_match() -> None:
    assert find_percent_near("", "transportation") is None
    assert find_age_band_percent("") is None
