# backend/models/trend.py
from enum import Enum
from typing import List
from pydantic import BaseModel, Field


class Timeframe(str, Enum):
    ONE_MONTH = "1m"
    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"
    FIVE_YEARS = "5y"
    TEN_YEARS = "10y"


class TrendStatus(str, Enum):
    RISING = "Rising"
    BREAKOUT = "Breakout"
    STABLE = "Stable"


class TrendPoint(BaseModel):
    date: str = Field(..., description="ISO date (YYYY-MM-DD)")
    value: int = Field(..., ge=0)


class RelatedTopic(BaseModel):
    topic: str
    value: int
    type: str = "AI Search Intent"
    status: TrendStatus = TrendStatus.RISING

    class Config:
        use_enum_values = True


class RelatedQuery(BaseModel):
    query: str
    value: int
    status: TrendStatus = TrendStatus.RISING

    class Config:
        use_enum_values = True


class KeywordTrend(BaseModel):
    """
    Interest time series and related signals for one keyword.
    `keyword` holds the resolved canonical topic when the fetch succeeded,
    and the raw keyword on error records.
    """
    keyword: str
    timeline: List[TrendPoint] = Field(default_factory=list)
    related_topics: List[RelatedTopic] = Field(default_factory=list, alias="relatedTopics")
    related_queries: List[RelatedQuery] = Field(default_factory=list, alias="relatedQueries")
    average_interest: float = Field(0.0, alias="averageInterest")
    performance_index: float = Field(0.0, alias="performanceIndex")
    error: bool = False
    loaded: bool = True

    class Config:
        populate_by_name = True

    @classmethod
    def not_found(cls, keyword: str) -> "KeywordTrend":
        """Zero-valued, error-flagged record for a keyword with no usable data."""
        return cls(keyword=keyword, error=True, loaded=True)
