# backend/models/crawl_result.py

from pydantic import BaseModel, Field
from typing import List, Optional
from .readiness import PageIssue, QuickWins


class ScoreBreakdown(BaseModel):
    answer_position: int = Field(0, alias="answerPosition")
    schema_score: int = Field(0, alias="schema")
    qa_structure: int = Field(0, alias="qaStructure")
    content_quality: int = Field(0, alias="contentQuality")

    class Config:
        populate_by_name = True


class CrawlSummary(BaseModel):
    project_id: Optional[str] = Field(None, alias="projectId")
    domain: str
    pages_found: int = Field(..., alias="pagesFound")
    readiness_score: int = Field(..., alias="readinessScore")
    score_breakdown: ScoreBreakdown = Field(..., alias="scoreBreakdown")
    quick_wins: QuickWins = Field(..., alias="quickWins")
    issues: List[PageIssue] = Field(default_factory=list)

    class Config:
        populate_by_name = True
