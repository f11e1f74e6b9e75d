# backend/models/readiness.py
from enum import Enum
from pydantic import BaseModel, Field


class IssueType(str, Enum):
    BURIED_ANSWER = "buried_answer"
    NO_SCHEMA = "no_schema"
    POOR_STRUCTURE = "poor_structure"


class IssuePriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"


class PageScore(BaseModel):
    """
    Per-page sub-scores (0-100) and their weighted total.
    """
    total: float
    answer_position: int = Field(..., alias="answerPosition")
    schema_score: int = Field(..., alias="schema")
    qa_structure: int = Field(..., alias="qaStructure")
    content_quality: int = Field(..., alias="contentQuality")

    class Config:
        populate_by_name = True


class QuickWins(BaseModel):
    needs_optimization: int = Field(0, alias="needsOptimization")
    already_good: int = Field(0, alias="alreadyGood")
    needs_schema: int = Field(0, alias="needsSchema")

    class Config:
        populate_by_name = True


class ReadinessBreakdown(BaseModel):
    """
    Aggregate AI readiness score for a set of crawled pages.
    """
    score: int = Field(0, ge=0, le=100)
    answer_position_score: int = Field(0, alias="answerPositionScore")
    schema_score: int = Field(0, alias="schemaScore")
    qa_structure_score: int = Field(0, alias="qaStructureScore")
    content_quality_score: int = Field(0, alias="contentQualityScore")
    quick_wins: QuickWins = Field(default_factory=QuickWins, alias="quickWins")

    class Config:
        populate_by_name = True


class ScoreCategory(BaseModel):
    label: str
    color: str
    description: str


class PageIssue(BaseModel):
    page_ref: str = Field(..., alias="pageRef", description="URL of the page the issue was found on")
    issue_type: IssueType = Field(..., alias="issueType")
    priority: IssuePriority
    description: str
    recommendation: str

    class Config:
        populate_by_name = True
        use_enum_values = True
