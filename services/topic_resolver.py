"""
Topic Resolver

Maps a free-text keyword onto a canonical Wikipedia article title by trying
progressively shorter prefixes of the keyword against the OpenSearch API.
"""

import logging
from typing import List, Optional

import httpx

from config import config
from services.fallback import first_success_async

logger = logging.getLogger(__name__)

OPENSEARCH_URL = "https://en.wikipedia.org/w/api.php"


def build_candidates(keyword: str) -> List[str]:
    """
    Full phrase, then the first three terms, the first two terms and the first term.
    Candidates that repeat an earlier one are dropped.
    """
    terms = keyword.split()
    if not terms:
        return []

    candidates = [keyword.strip()]
    if len(terms) > 2:
        candidates.append(" ".join(terms[:3]))
    if len(terms) > 1:
        candidates.append(" ".join(terms[:2]))
    candidates.append(terms[0])

    unique: List[str] = []
    for candidate in candidates:
        if candidate not in unique:
            unique.append(candidate)
    return unique


class TopicResolver:
    def __init__(self, timeout: float = None):
        self.timeout = timeout or config.REQUEST_TIMEOUT
        self.headers = {"User-Agent": config.TRENDS_USER_AGENT}

    async def _lookup_suggestion(self, client: httpx.AsyncClient, term: str) -> Optional[str]:
        """Top OpenSearch suggestion for `term`, or None."""
        response = await client.get(
            OPENSEARCH_URL,
            params={
                "action": "opensearch",
                "search": term,
                "limit": 1,
                "namespace": 0,
                "format": "json",
            },
        )
        response.raise_for_status()
        data = response.json()
        if isinstance(data, list) and len(data) > 1 and data[1]:
            suggestion = data[1][0]
            return suggestion.strip() if isinstance(suggestion, str) and suggestion.strip() else None
        return None

    async def resolve(self, keyword: str) -> Optional[str]:
        """
        Returns the canonical topic for `keyword`, or None when no candidate matches.
        A failing lookup is treated as a miss and the cascade continues.
        """
        candidates = build_candidates(keyword)
        if not candidates:
            return None

        async with httpx.AsyncClient(timeout=self.timeout, headers=self.headers) as client:
            topic = await first_success_async(
                candidates,
                lambda term: self._lookup_suggestion(client, term),
            )

        if topic:
            logger.info(f"[topics] Resolved '{keyword}' to '{topic}'")
        else:
            logger.info(f"[topics] No topic found for '{keyword}'")
        return topic


topic_resolver = TopicResolver()
