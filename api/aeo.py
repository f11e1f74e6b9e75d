# backend/api/aeo.py

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Body, HTTPException, Query
from pydantic import BaseModel, Field

from analyzers.analyzer import derive_page_issues
from analyzers.readiness import calculate_readiness_score, get_score_category
from crawlers.crawler import SiteUnreachableError
from models.analysis import OptimizationResult
from models.crawl_result import CrawlSummary
from models.page_data import CrawledPage
from services.audit_service import (
    ProjectNotFoundError,
    build_market_intelligence,
    build_project_insights,
    build_project_optimizations,
    run_site_audit,
)
from services.opportunity_ranker import opportunity_ranker
from services.storage import storage_service
from services.trends_service import trends_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/aeo", tags=["AEO"])


class CrawlRequest(BaseModel):
    domain: str = ""
    user_id: Optional[str] = Field(None, alias="userId")
    project_name: Optional[str] = Field(None, alias="projectName")
    page_cap: int = Field(20, alias="pageCap", ge=1, le=200)

    class Config:
        populate_by_name = True


class ReadinessRequest(BaseModel):
    pages: List[CrawledPage]


class InsightsRequest(BaseModel):
    keyword: Optional[str] = None
    keywords: Optional[List[str]] = None
    project_id: Optional[str] = Field(None, alias="projectId")
    timeframe: str = "6m"

    class Config:
        populate_by_name = True


class OptimizeRequest(BaseModel):
    project_id: Optional[str] = Field(None, alias="projectId")

    class Config:
        populate_by_name = True


class MarketIntelligenceRequest(BaseModel):
    query: str = ""
    timeframe: str = "6m"


@router.post("/crawl", response_model=CrawlSummary, response_model_by_alias=True)
async def crawl_site(request: CrawlRequest = Body(...)):
    """
    Crawls a domain, scores its AI readiness and stores pages, score and issues.
    """
    if not request.domain.strip():
        raise HTTPException(status_code=400, detail="Domain is required")

    try:
        return await run_site_audit(
            request.domain.strip(),
            user_id=request.user_id,
            project_name=request.project_name,
            page_cap=request.page_cap,
        )
    except SiteUnreachableError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except asyncio.TimeoutError:
        raise HTTPException(status_code=504, detail="Crawl timed out.")
    except Exception as e:
        logger.exception(f"Crawl error for {request.domain}")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to crawl domain")


@router.get("/projects")
async def list_projects(user_id: str = Query(..., alias="userId")):
    projects = storage_service.get_projects_by_user(user_id)
    return {"projects": [p.model_dump(by_alias=True) for p in projects]}


@router.post("/readiness")
async def score_pages(request: ReadinessRequest):
    """
    Scores an already crawled page set without touching the network.
    """
    breakdown = calculate_readiness_score(request.pages)
    return {
        "breakdown": breakdown.model_dump(by_alias=True),
        "category": get_score_category(breakdown.score).model_dump(),
        "issues": [issue.model_dump(by_alias=True) for issue in derive_page_issues(request.pages)],
    }


@router.get("/trends")
async def keyword_trend(keyword: str = Query(..., min_length=1), timeframe: str = "6m"):
    trend = await trends_service.get_keyword_trend(keyword, timeframe)
    return {"trend": trend.model_dump(by_alias=True)}


@router.post("/insights")
async def insights(request: InsightsRequest):
    """
    Single keyword mode (`keyword`), batch mode (`keywords`) or the full
    dashboard load for a stored project (`projectId`).
    """
    if request.keyword:
        trend = await trends_service.get_keyword_trend(request.keyword, request.timeframe)
        return {"trend": trend.model_dump(by_alias=True)}

    if request.keywords:
        trends = await opportunity_ranker.rank_keywords(request.keywords, request.timeframe)
        return {"trends": [t.model_dump(by_alias=True) for t in trends]}

    if not request.project_id:
        raise HTTPException(status_code=400, detail="Project ID required")

    try:
        return await build_project_insights(request.project_id, request.timeframe)
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception("Insights API error")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/optimize", response_model=OptimizationResult, response_model_by_alias=True)
async def optimize_content(request: OptimizeRequest):
    """
    AI-ready rewrites, schema markup and AI assets for a stored project.
    """
    if not request.project_id:
        raise HTTPException(status_code=400, detail="Project ID required")

    try:
        return await build_project_optimizations(request.project_id)
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception("Optimization API error")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/market-intelligence")
async def market_intelligence(request: MarketIntelligenceRequest):
    if not request.query.strip():
        raise HTTPException(status_code=400, detail="Query required")

    try:
        return await build_market_intelligence(request.query.strip(), request.timeframe)
    except Exception as e:
        logger.exception("Market intelligence API error")
        raise HTTPException(status_code=500, detail=str(e))
