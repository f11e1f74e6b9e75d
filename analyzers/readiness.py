# backend/analyzers/readiness.py
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from models.page_data import CrawledPage, Heading
from models.readiness import PageScore, QuickWins, ReadinessBreakdown, ScoreCategory


@dataclass(frozen=True)
class ScoringConfig:
    """
    Weights and thresholds of the readiness score.
    """
    answer_position_weight: float = 0.30
    schema_weight: float = 0.25
    qa_structure_weight: float = 0.25
    content_quality_weight: float = 0.20

    # answerPosition -> score; anything else (including None) scores the default
    answer_position_scores: Dict[int, int] = field(default_factory=lambda: {1: 100, 2: 70, 3: 40})
    answer_position_default: int = 20

    qa_points_per_heading: int = 20
    question_prefixes: Sequence[str] = ("how", "what", "why", "when", "where")

    # Word-count buckets, inclusive bounds
    ideal_word_range: tuple = (300, 1200)
    short_word_range: tuple = (200, 299)
    long_word_range: tuple = (1201, 1999)
    ideal_content_score: int = 100
    short_content_score: int = 70
    long_content_score: int = 60
    default_content_score: int = 30

    already_good_threshold: float = 70
    needs_optimization_threshold: float = 50


DEFAULT_SCORING = ScoringConfig()


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def is_question_heading(heading: Heading, scoring: ScoringConfig = DEFAULT_SCORING) -> bool:
    text = heading.text
    return "?" in text or text.lower().startswith(tuple(scoring.question_prefixes))


def count_question_headings(headings: List[Heading], scoring: ScoringConfig = DEFAULT_SCORING) -> int:
    return sum(1 for heading in headings if is_question_heading(heading, scoring))


def answer_position_score(position: Optional[int], scoring: ScoringConfig = DEFAULT_SCORING) -> int:
    return scoring.answer_position_scores.get(position, scoring.answer_position_default)


def content_quality_score(word_count: int, scoring: ScoringConfig = DEFAULT_SCORING) -> int:
    buckets = (
        (scoring.ideal_word_range, scoring.ideal_content_score),
        (scoring.short_word_range, scoring.short_content_score),
        (scoring.long_word_range, scoring.long_content_score),
    )
    for (low, high), score in buckets:
        if low <= word_count <= high:
            return score
    return scoring.default_content_score


def score_page(page: CrawledPage, scoring: ScoringConfig = DEFAULT_SCORING) -> PageScore:
    """
    Scores a single page on the four readiness factors.
    """
    answer = answer_position_score(page.answer_position, scoring)
    schema = 100 if page.has_structured_data else 0
    qa = min(100, count_question_headings(page.headings, scoring) * scoring.qa_points_per_heading)
    content = content_quality_score(page.word_count, scoring)

    total = (
        answer * scoring.answer_position_weight +
        schema * scoring.schema_weight +
        qa * scoring.qa_structure_weight +
        content * scoring.content_quality_weight
    )
    # weights carry two decimals, so the exact total does too
    total = round(total, 2)

    return PageScore(
        total=total,
        answer_position=answer,
        schema_score=schema,
        qa_structure=qa,
        content_quality=content,
    )


def calculate_readiness_score(pages: List[CrawledPage], scoring: ScoringConfig = DEFAULT_SCORING) -> ReadinessBreakdown:
    """
    Averages the per-page scores across a crawl and tallies quick wins.
    An empty page list yields an all-zero breakdown.
    """
    if not pages:
        return ReadinessBreakdown()

    page_scores = [score_page(page, scoring) for page in pages]
    count = len(page_scores)

    quick_wins = QuickWins()
    for page, page_score in zip(pages, page_scores):
        if page_score.total >= scoring.already_good_threshold:
            quick_wins.already_good += 1
        elif page_score.total < scoring.needs_optimization_threshold:
            quick_wins.needs_optimization += 1

        if not page.has_structured_data:
            quick_wins.needs_schema += 1

    def mean(values) -> int:
        return round_half_up(sum(values) / count)

    return ReadinessBreakdown(
        score=mean(s.total for s in page_scores),
        answer_position_score=mean(s.answer_position for s in page_scores),
        schema_score=mean(s.schema_score for s in page_scores),
        qa_structure_score=mean(s.qa_structure for s in page_scores),
        content_quality_score=mean(s.content_quality for s in page_scores),
        quick_wins=quick_wins,
    )


def get_score_category(score: int) -> ScoreCategory:
    if score >= 80:
        return ScoreCategory(
            label="Excellent",
            color="#10b981",
            description="Your content is well-optimized for AI answer engines",
        )
    elif score >= 60:
        return ScoreCategory(
            label="Good",
            color="#3b82f6",
            description="Some optimization needed, but you're on the right track",
        )
    elif score >= 40:
        return ScoreCategory(
            label="Needs Work",
            color="#f59e0b",
            description="Significant improvements needed to appear in AI answers",
        )
    return ScoreCategory(
        label="Poor",
        color="#ef4444",
        description="Major optimization required - AI systems likely won't cite you",
    )
