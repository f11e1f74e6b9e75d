"""
Opportunity Ranker

Fetches trends for several keywords concurrently and ranks them by a
performance index combining interest volume (60%) and recent velocity (40%).
"""

import asyncio
import logging
import math
from typing import List, Optional

from config import config
from models.trend import KeywordTrend, TrendPoint
from services.trends_service import TrendsService, trends_service

logger = logging.getLogger(__name__)

VOLUME_WEIGHT = 0.6
VELOCITY_WEIGHT = 0.4
# Last 20% of the window is compared against the first 80%
RECENT_WINDOW_PIVOT = 0.8


def _mean(points: List[TrendPoint]) -> float:
    return sum(p.value for p in points) / (len(points) or 1)


def calculate_velocity(timeline: List[TrendPoint]) -> float:
    pivot = math.floor(len(timeline) * RECENT_WINDOW_PIVOT)
    baseline = _mean(timeline[:pivot])
    recent = _mean(timeline[pivot:])
    return (recent - baseline) / (baseline or 1)


def velocity_score(velocity: float) -> float:
    return min(100.0, max(0.0, 50 + velocity * 50))


def performance_index(trend: KeywordTrend) -> float:
    return trend.average_interest * VOLUME_WEIGHT + velocity_score(calculate_velocity(trend.timeline)) * VELOCITY_WEIGHT


def rank_trends(trends: List[KeywordTrend]) -> List[KeywordTrend]:
    """
    Sorts by performance index (highest first, ties keep input order) and
    keeps only the first record per keyword.
    """
    ranked = sorted(trends, key=lambda t: t.performance_index, reverse=True)
    unique: List[KeywordTrend] = []
    seen = set()
    for trend in ranked:
        if trend.keyword in seen:
            continue
        seen.add(trend.keyword)
        unique.append(trend)
    return unique


class OpportunityRanker:
    def __init__(self, service: Optional[TrendsService] = None, keyword_timeout: float = None):
        self.service = service or trends_service
        self.keyword_timeout = keyword_timeout or config.KEYWORD_FETCH_TIMEOUT

    async def _fetch_scored(self, keyword: str, timeframe: Optional[str]) -> KeywordTrend:
        """
        One keyword's trend with its performance index attached. Timeouts and
        failures become an error record so they never leave this task.
        """
        try:
            trend = await asyncio.wait_for(
                self.service.fetch_industry_trends(keyword, timeframe),
                timeout=self.keyword_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"[ranker] Trend fetch timed out for {keyword}")
            return KeywordTrend.not_found(keyword)
        except Exception as e:
            logger.warning(f"[ranker] Trend fetch failed for {keyword}: {e}")
            return KeywordTrend.not_found(keyword)

        if not trend or not trend.timeline:
            return KeywordTrend.not_found(keyword)

        return trend.model_copy(update={"performance_index": performance_index(trend)})

    async def rank_keywords(self, keywords: List[str], timeframe: Optional[str] = None) -> List[KeywordTrend]:
        """
        Batch trend operation: fetches every keyword concurrently, then ranks and deduplicates.
        """
        results = await asyncio.gather(*(self._fetch_scored(keyword, timeframe) for keyword in keywords))
        return rank_trends(list(results))


opportunity_ranker = OpportunityRanker()
