# backend/analyzers/summarizer.py
from typing import List, Optional
from models.crawl_result import CrawlSummary, ScoreBreakdown
from models.page_data import CrawledPage
from models.readiness import PageIssue, ReadinessBreakdown


class SummarizerService:
    def generate_summary(
        self,
        domain: str,
        pages: List[CrawledPage],
        breakdown: ReadinessBreakdown,
        issues: List[PageIssue],
        project_id: Optional[str] = None,
    ) -> CrawlSummary:
        """
        Generates the crawl report returned to the caller after scoring.
        """
        return CrawlSummary(
            project_id=project_id,
            domain=domain,
            pages_found=len(pages),
            readiness_score=breakdown.score,
            score_breakdown=ScoreBreakdown(
                answer_position=breakdown.answer_position_score,
                schema_score=breakdown.schema_score,
                qa_structure=breakdown.qa_structure_score,
                content_quality=breakdown.content_quality_score,
            ),
            quick_wins=breakdown.quick_wins,
            issues=issues,
        )

# Instantiate the service
summarizer_service = SummarizerService()
