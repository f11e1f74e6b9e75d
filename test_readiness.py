# test_readiness.py - Readiness scoring and issue derivation tests

import pytest

from analyzers.analyzer import derive_page_issues
from analyzers.readiness import (
    DEFAULT_SCORING,
    answer_position_score,
    calculate_readiness_score,
    content_quality_score,
    get_score_category,
    score_page,
)
from models.page_data import CrawledPage, Heading


def make_page(url="https://example.com/", word_count=500, answer_position=1, structured=True, headings=None):
    return CrawledPage(
        url=url,
        word_count=word_count,
        answer_position=answer_position,
        has_structured_data=structured,
        structured_data_types={"FAQPage"} if structured else set(),
        headings=headings or [],
    )


QUESTION_HEADINGS = [
    Heading(level="h2", text="What is answer engine optimization?"),
    Heading(level="h2", text="How do AI assistants pick sources"),
]


# --- PER-PAGE SCORE ---

def test_well_optimized_page_scores_85():
    score = score_page(make_page(headings=QUESTION_HEADINGS))

    assert (score.answer_position, score.schema_score, score.qa_structure, score.content_quality) == (100, 100, 40, 100)
    assert score.total == pytest.approx(85)


@pytest.mark.parametrize("words, expected", [
    (199, 30),
    (200, 70),
    (299, 70),
    (300, 100),
    (1200, 100),
    (1201, 60),
    (1999, 60),
    (2000, 30),
    (0, 30),
])
def test_content_quality_boundaries(words, expected):
    assert content_quality_score(words) == expected


@pytest.mark.parametrize("position, expected", [(1, 100), (2, 70), (3, 40), (4, 20), (None, 20)])
def test_answer_position_scores(position, expected):
    assert answer_position_score(position) == expected


def test_question_headings_cap_at_100():
    headings = [Heading(level="h3", text=f"Why choice {i}?") for i in range(7)]
    assert score_page(make_page(headings=headings)).qa_structure == 100


def test_question_detection_is_case_insensitive_and_accepts_question_marks():
    headings = [
        Heading(level="h2", text="WHERE to start"),
        Heading(level="h2", text="Pricing?"),
        Heading(level="h2", text="Our services"),
    ]
    assert score_page(make_page(headings=headings)).qa_structure == 40


def test_weights_sum_to_one():
    total = (
        DEFAULT_SCORING.answer_position_weight +
        DEFAULT_SCORING.schema_weight +
        DEFAULT_SCORING.qa_structure_weight +
        DEFAULT_SCORING.content_quality_weight
    )
    assert total == pytest.approx(1.0)


# --- AGGREGATE ---

def test_empty_page_list_scores_zero():
    breakdown = calculate_readiness_score([])

    assert breakdown.score == 0
    assert breakdown.answer_position_score == 0
    assert breakdown.quick_wins.needs_optimization == 0
    assert breakdown.quick_wins.already_good == 0
    assert breakdown.quick_wins.needs_schema == 0


def test_aggregate_means_and_quick_wins():
    good = make_page(url="https://example.com/good", headings=QUESTION_HEADINGS)  # 85
    poor = make_page(url="https://example.com/poor", word_count=50, answer_position=None, structured=False)  # 12
    middle = make_page(url="https://example.com/mid", word_count=250, answer_position=2, structured=False)  # 35

    breakdown = calculate_readiness_score([good, poor, middle])

    # (85 + 12 + 35) / 3 = 44
    assert breakdown.score == 44
    assert breakdown.answer_position_score == 63  # (100 + 20 + 70) / 3 = 63.33
    assert breakdown.schema_score == 33
    assert breakdown.qa_structure_score == 13
    assert breakdown.content_quality_score == 67  # (100 + 30 + 70) / 3 = 66.67
    assert breakdown.quick_wins.already_good == 1
    assert breakdown.quick_wins.needs_optimization == 2
    assert breakdown.quick_wins.needs_schema == 2


def test_score_between_thresholds_is_not_a_quick_win():
    # 100*0.3 + 0 + 0 + 100*0.2 = 50
    page = make_page(structured=False)
    breakdown = calculate_readiness_score([page])

    assert breakdown.score == 50
    assert breakdown.quick_wins.already_good == 0
    assert breakdown.quick_wins.needs_optimization == 0


def test_breakdown_serializes_with_camel_case_keys():
    data = calculate_readiness_score([make_page()]).model_dump(by_alias=True)

    assert set(data) == {
        "score", "answerPositionScore", "schemaScore", "qaStructureScore", "contentQualityScore", "quickWins",
    }
    assert set(data["quickWins"]) == {"needsOptimization", "alreadyGood", "needsSchema"}


@pytest.mark.parametrize("score, label", [(100, "Excellent"), (80, "Excellent"), (79, "Good"), (60, "Good"), (59, "Needs Work"), (40, "Needs Work"), (39, "Poor"), (0, "Poor")])
def test_score_category(score, label):
    assert get_score_category(score).label == label


# --- ISSUES ---

def test_issues_are_emitted_in_fixed_order():
    page = make_page(url="https://example.com/buried", answer_position=3, structured=False)
    issues = derive_page_issues([page])

    assert [i.issue_type for i in issues] == ["buried_answer", "no_schema", "poor_structure"]
    assert [i.priority for i in issues] == ["high", "high", "medium"]
    assert issues[0].description == "Answer appears in paragraph 3"
    assert issues[0].recommendation == "Move your direct answer to the first paragraph"
    assert issues[1].recommendation == "Add FAQPage or HowTo schema markup"
    assert all(i.page_ref == "https://example.com/buried" for i in issues)


def test_second_paragraph_answer_is_not_buried():
    page = make_page(answer_position=2, headings=QUESTION_HEADINGS)
    assert derive_page_issues([page]) == []


def test_issues_preserve_page_order():
    first = make_page(url="https://example.com/1", structured=False, headings=QUESTION_HEADINGS)
    second = make_page(url="https://example.com/2", answer_position=None, headings=QUESTION_HEADINGS, structured=False)

    issues = derive_page_issues([first, second])

    assert [(i.page_ref, i.issue_type) for i in issues] == [
        ("https://example.com/1", "no_schema"),
        ("https://example.com/2", "no_schema"),
    ]
