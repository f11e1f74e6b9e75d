"""
Audit Service

Request-scoped orchestration of the crawl/score pipeline, the dashboard
insights view, content optimization and market intelligence.
Persistence goes through the storage service; its blocking Firestore calls
run in worker threads so they never stall the event loop.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from ai.ai import ai_service
from analyzers.analyzer import derive_page_issues
from analyzers.readiness import calculate_readiness_score
from analyzers.summarizer import summarizer_service
from config import config
from crawlers.crawler import SiteUnreachableError, crawl_domain
from crawlers.utils import normalize_domain
from models.analysis import OptimizationResult
from models.crawl_result import CrawlSummary
from models.project import AEOProject
from services.opportunity_ranker import opportunity_ranker
from services.storage import storage_service
from services.trends_service import trends_service

logger = logging.getLogger(__name__)

MAX_CONTEXT_PAGES = 5
MAX_OPTIMIZATION_PAGES = 3


class ProjectNotFoundError(Exception):
    pass


async def _load_project(project_id: str) -> AEOProject:
    project = await asyncio.to_thread(storage_service.get_project, project_id)
    if not project:
        raise ProjectNotFoundError(f"Project not found: {project_id}")
    return project


async def run_site_audit(
    domain: str,
    user_id: Optional[str] = None,
    project_name: Optional[str] = None,
    page_cap: Optional[int] = None,
) -> CrawlSummary:
    """
    Crawls `domain`, scores the pages and stores pages, score and issues.
    Raises SiteUnreachableError when no page could be extracted.
    """
    project_id = await asyncio.to_thread(storage_service.get_or_create_project, domain, user_id, project_name)

    # Blocking, sequential crawl; keep it off the event loop
    pages = await asyncio.wait_for(
        asyncio.to_thread(crawl_domain, domain, page_cap),
        timeout=config.CRAWL_TIMEOUT,
    )
    if not pages:
        raise SiteUnreachableError(domain)

    breakdown = calculate_readiness_score(pages)
    issues = derive_page_issues(pages)

    page_ids = await asyncio.to_thread(storage_service.replace_pages, project_id, pages)
    await asyncio.to_thread(storage_service.update_project_score, project_id, breakdown.score, homepage=pages[0])
    await asyncio.to_thread(
        storage_service.save_issues, project_id, issues, dict(zip((p.url for p in pages), page_ids))
    )

    logger.info(f"[audit] {domain}: {len(pages)} pages, readiness {breakdown.score}, {len(issues)} issues")
    return summarizer_service.generate_summary(normalize_domain(domain), pages, breakdown, issues, project_id)


async def build_project_insights(project_id: str, timeframe: Optional[str] = None) -> Dict[str, Any]:
    """
    Dashboard view: audit the project's business from its stored content,
    then rank its target keywords by market performance.
    """
    project = await _load_project(project_id)

    pages = await asyncio.to_thread(storage_service.get_project_pages, project_id, limit=MAX_CONTEXT_PAGES)
    primary_context = (
        f"OFFICIAL META DESCRIPTION: {project.meta_description or 'N/A'}\n\n"
        f"MAIN PAGE CONTENT: {project.content_text or 'N/A'}"
    )
    page_contents: List[str] = [primary_context] + [
        f"PAGE TITLE: {p.get('title', '')}\n\nCONTENT: {p.get('contentText', '')}" for p in pages
    ]

    analysis = await ai_service.analyze_business(project.domain, page_contents)
    trends = await opportunity_ranker.rank_keywords(analysis.target_keywords, timeframe)

    return {
        "industry": analysis.industry,
        "niche": analysis.niche,
        "trends": [t.model_dump(by_alias=True) for t in trends],
        "opportunities": analysis.opportunity_keywords,
        "aiReadinessScore": analysis.ai_readiness_score,
        "readinessPillars": analysis.readiness_pillars.model_dump(by_alias=True),
        "citationMonitoring": analysis.citation_monitoring.model_dump(by_alias=True),
        "crawlStats": analysis.crawl_stats.model_dump(by_alias=True),
        "competitorIntelligence": analysis.competitor_intelligence.model_dump(by_alias=True),
    }


async def build_project_optimizations(project_id: str) -> OptimizationResult:
    """
    Content optimizer: rewrites the project's homepage and first stored pages
    into answer capsules, schema markup and AI assets.
    """
    project = await _load_project(project_id)

    pages = await asyncio.to_thread(storage_service.get_project_pages, project_id, limit=MAX_OPTIMIZATION_PAGES)
    context = [
        f"META: {project.meta_description or ''}",
        f"MAIN: {project.content_text or ''}",
    ] + [f"PAGE {p.get('title', '')}: {p.get('contentText', '')}" for p in pages]

    return await ai_service.generate_optimizations(project.domain, context)


async def build_market_intelligence(query: str, timeframe: Optional[str] = None) -> Dict[str, Any]:
    """
    Market radar: AI intelligence for `query` and its interest trend, fetched in parallel.
    """
    intel, trend = await asyncio.gather(
        ai_service.analyze_market_intelligence(query),
        trends_service.get_keyword_trend(query, timeframe),
    )
    return {
        "intel": intel.model_dump(by_alias=True),
        "trends": trend.model_dump(by_alias=True),
    }
