# backend/analyzers/analyzer.py
from typing import List
from models.page_data import CrawledPage
from models.readiness import IssuePriority, IssueType, PageIssue
from .readiness import DEFAULT_SCORING, ScoringConfig, count_question_headings

# An answer past this paragraph counts as buried
BURIED_ANSWER_THRESHOLD = 2


class AEOIssueAnalyzer:
    def __init__(self, pages: List[CrawledPage], scoring: ScoringConfig = DEFAULT_SCORING):
        self.pages = pages
        self.scoring = scoring

    def analyze_page(self, page: CrawledPage) -> List[PageIssue]:
        """
        Derives the answer-engine issues of a single page, in a fixed order:
        buried answer, missing schema, missing question headings.
        """
        issues = []

        if page.answer_position is not None and page.answer_position > BURIED_ANSWER_THRESHOLD:
            issues.append(PageIssue(
                page_ref=page.url,
                issue_type=IssueType.BURIED_ANSWER,
                priority=IssuePriority.HIGH,
                description=f"Answer appears in paragraph {page.answer_position}",
                recommendation="Move your direct answer to the first paragraph",
            ))

        if not page.has_structured_data:
            issues.append(PageIssue(
                page_ref=page.url,
                issue_type=IssueType.NO_SCHEMA,
                priority=IssuePriority.HIGH,
                description="No structured data found",
                recommendation="Add FAQPage or HowTo schema markup",
            ))

        if count_question_headings(page.headings, self.scoring) == 0:
            issues.append(PageIssue(
                page_ref=page.url,
                issue_type=IssueType.POOR_STRUCTURE,
                priority=IssuePriority.MEDIUM,
                description="No question-format headings found",
                recommendation='Convert section headings to questions (e.g., "How does X work?")',
            ))

        return issues

    def run_analysis(self) -> List[PageIssue]:
        """
        Runs the analysis for all pages, preserving page order.
        """
        issues: List[PageIssue] = []
        for page in self.pages:
            issues.extend(self.analyze_page(page))
        return issues


def derive_page_issues(pages: List[CrawledPage]) -> List[PageIssue]:
    return AEOIssueAnalyzer(pages).run_analysis()
