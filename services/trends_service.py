"""
Trends Service

Open-data market intelligence for a keyword:
- interest over time from Wikimedia daily pageviews of the resolved topic,
- related queries from DuckDuckGo autocomplete,
- AI search intent phrases from the text-generation service.
"""

import asyncio
import calendar
import logging
from datetime import date
from typing import List, Optional, Tuple
from urllib.parse import quote

import httpx

from ai.ai import AIService, ai_service
from config import config
from models.trend import KeywordTrend, RelatedQuery, RelatedTopic, Timeframe, TrendPoint, TrendStatus
from services.topic_resolver import TopicResolver, topic_resolver

logger = logging.getLogger(__name__)

PAGEVIEWS_URL = (
    "https://wikimedia.org/api/rest_v1/metrics/pageviews/per-article/"
    "en.wikipedia/all-access/user/{article}/daily/{start}/{end}"
)
AUTOCOMPLETE_URL = "https://duckduckgo.com/ac/"

TIMEFRAME_MONTHS = {
    Timeframe.ONE_MONTH: 1,
    Timeframe.THREE_MONTHS: 3,
    Timeframe.SIX_MONTHS: 6,
    Timeframe.ONE_YEAR: 12,
    Timeframe.FIVE_YEARS: 60,
    Timeframe.TEN_YEARS: 120,
}
DEFAULT_TIMEFRAME = Timeframe.SIX_MONTHS

MAX_RELATED_QUERIES = 8
MAX_RELATED_TOPICS = 5
# Rank-based related query values: first suggestion 100, then 2 points less per rank
RELATED_QUERY_TOP_VALUE = 100
RELATED_QUERY_STEP = 2
RELATED_TOPIC_TOP_VALUE = 90
RELATED_TOPIC_STEP = 5
AI_SEARCH_INTENT = "AI Search Intent"

RawPoint = Tuple[str, int]


def parse_timeframe(timeframe: Optional[str]) -> Timeframe:
    try:
        return Timeframe(timeframe)
    except ValueError:
        return DEFAULT_TIMEFRAME


def shift_months(day: date, months: int) -> date:
    """`day` moved back by `months` calendar months, clamped to the month's last day."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def timeframe_window(timeframe: Optional[str], today: Optional[date] = None) -> Tuple[date, date]:
    end = today or date.today()
    start = shift_months(end, TIMEFRAME_MONTHS[parse_timeframe(timeframe)])
    return start, end


def fallback_phrases(topic: str) -> List[str]:
    return [
        f"How to optimize {topic}?",
        f"Best tools for {topic}",
        f"Future of {topic} trends",
        f"Scaling {topic} performance",
        f"{topic} strategy guide",
    ]


def normalize_timeline(points: List[RawPoint]) -> List[TrendPoint]:
    """
    Rescales raw counts against the window maximum so the peak reads 100.
    An all-zero window stays at zero.
    """
    if not points:
        return []
    peak = max(value for _, value in points) or 1
    return [TrendPoint(date=day, value=round(value / peak * 100)) for day, value in points]


def average_interest(timeline: List[TrendPoint]) -> float:
    if not timeline:
        return 0.0
    return sum(point.value for point in timeline) / len(timeline)


def _format_timestamp(timestamp: str) -> str:
    return f"{timestamp[0:4]}-{timestamp[4:6]}-{timestamp[6:8]}"


class TrendsService:
    def __init__(
        self,
        resolver: Optional[TopicResolver] = None,
        ai: Optional[AIService] = None,
        timeout: float = None,
        phrase_timeout: float = None,
    ):
        self.resolver = resolver or topic_resolver
        self.ai = ai or ai_service
        self.timeout = timeout or config.REQUEST_TIMEOUT
        self.phrase_timeout = phrase_timeout or config.AI_PHRASE_TIMEOUT
        self.headers = {"User-Agent": config.TRENDS_USER_AGENT}

    async def fetch_pageviews(self, article: str, timeframe: Optional[str] = None) -> List[RawPoint]:
        """
        Daily pageview counts for a Wikipedia article over the timeframe window.
        Missing articles, HTTP errors and malformed bodies all yield an empty series.
        """
        start, end = timeframe_window(timeframe)
        url = PAGEVIEWS_URL.format(
            article=quote(article.replace(" ", "_"), safe=""),
            start=start.strftime("%Y%m%d"),
            end=end.strftime("%Y%m%d"),
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers=self.headers) as client:
                response = await client.get(url)
            if response.status_code != 200:
                logger.info(f"[trends] No pageviews for {article}: HTTP {response.status_code}")
                return []
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[trends] Pageviews request failed for {article}: {e}")
            return []

        if not isinstance(data, dict):
            logger.warning(f"[trends] Unexpected pageviews payload for {article}")
            return []
        items = data.get("items")
        if not isinstance(items, list):
            return []

        points: List[RawPoint] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            timestamp = str(item.get("timestamp", ""))
            if len(timestamp) < 8:
                continue
            points.append((_format_timestamp(timestamp), int(item.get("views") or 0)))
        return points

    async def fetch_related_queries(self, keyword: str) -> List[RelatedQuery]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers=self.headers) as client:
                response = await client.get(AUTOCOMPLETE_URL, params={"q": keyword, "type": "list"})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"[trends] Autocomplete failed for {keyword}: {e}")
            return []

        if not isinstance(data, list) or len(data) < 2 or not isinstance(data[1], list):
            return []

        suggestions = [s for s in data[1] if isinstance(s, str) and s.strip()][:MAX_RELATED_QUERIES]
        return [
            RelatedQuery(
                query=suggestion,
                value=RELATED_QUERY_TOP_VALUE - rank * RELATED_QUERY_STEP,
                status=TrendStatus.RISING,
            )
            for rank, suggestion in enumerate(suggestions)
        ]

    async def fetch_related_topics(self, topic: str) -> List[RelatedTopic]:
        """
        AI search intent phrases for `topic`, bounded by the phrase timeout.
        Timeouts, failures and empty answers all fall back to template phrases.
        """
        try:
            phrases = await asyncio.wait_for(self.ai.generate_ai_phrases(topic), timeout=self.phrase_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"[trends] AI phrasing timed out for {topic}, using fallback.")
            phrases = []
        except Exception as e:
            logger.error(f"[trends] AI phrasing failed for {topic}: {e}")
            phrases = []

        if not phrases:
            phrases = fallback_phrases(topic)

        return [
            RelatedTopic(
                topic=phrase,
                value=RELATED_TOPIC_TOP_VALUE - i * RELATED_TOPIC_STEP,
                type=AI_SEARCH_INTENT,
                status=TrendStatus.RISING,
            )
            for i, phrase in enumerate(phrases[:MAX_RELATED_TOPICS])
        ]

    async def fetch_industry_trends(self, keyword: str, timeframe: Optional[str] = None) -> Optional[KeywordTrend]:
        """
        Resolves `keyword` to a topic and gathers its trend signals.
        Returns None when no topic matches or the topic has no pageview data.
        """
        topic = await self.resolver.resolve(keyword)
        if not topic:
            return None

        raw_points = await self.fetch_pageviews(topic, timeframe)
        if not raw_points:
            return None

        timeline = normalize_timeline(raw_points)
        related_queries, related_topics = await asyncio.gather(
            self.fetch_related_queries(keyword),
            self.fetch_related_topics(topic),
        )

        return KeywordTrend(
            keyword=topic,
            timeline=timeline,
            related_topics=related_topics,
            related_queries=related_queries,
            average_interest=average_interest(timeline),
            error=False,
            loaded=True,
        )

    async def get_keyword_trend(self, keyword: str, timeframe: Optional[str] = None) -> KeywordTrend:
        """
        Single-keyword trend operation: the trend, or an error-flagged record
        carrying the raw keyword when no market data exists.
        """
        try:
            trend = await self.fetch_industry_trends(keyword, timeframe)
        except Exception as e:
            logger.error(f"[trends] Trend engine failed for {keyword}: {e}")
            trend = None
        return trend or KeywordTrend.not_found(keyword)


trends_service = TrendsService()
