# backend/models/analysis.py
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

PENDING_FEEDBACK = "Analysis pending."


# --- Business analysis ---

class PillarScore(BaseModel):
    score: int = Field(50, ge=0, le=100)
    feedback: str = PENDING_FEEDBACK


class ReadinessPillars(BaseModel):
    """
    AI-estimated readiness on five pillars, each 0-100 with a short note.
    """
    snippability: PillarScore = Field(default_factory=PillarScore)
    structured_data: PillarScore = Field(default_factory=PillarScore, alias="structuredData")
    discoverability: PillarScore = Field(default_factory=PillarScore)
    authority: PillarScore = Field(default_factory=PillarScore)
    freshness: PillarScore = Field(default_factory=PillarScore)

    class Config:
        populate_by_name = True


class CompetitorShare(BaseModel):
    name: str
    share: float = 0


class CitationMonitoring(BaseModel):
    brand: float = 10
    competitors: List[CompetitorShare] = Field(
        default_factory=lambda: [CompetitorShare(name="Industry Leader", share=45)]
    )


class MultiBotAccessibility(BaseModel):
    googlebot: bool = True
    brave: bool = True
    perplexity: bool = True
    bing: bool = True


class AITechnicalDirectives(BaseModel):
    robots_optimization: str = Field("Standard rules applied.", alias="robotsOptimization")
    llms_txt: bool = Field(False, alias="llmsTxt")
    ai_press_kit: bool = Field(False, alias="aiPressKit")

    class Config:
        populate_by_name = True


class DiscoveryReadiness(BaseModel):
    ai_sitemap: bool = Field(False, alias="aiSitemap")
    index_status: str = Field("Omnipresent on primary indexes.", alias="indexStatus")

    class Config:
        populate_by_name = True


class StructuralReadability(BaseModel):
    schema_presence: bool = Field(True, alias="schemaPresence")
    entity_establishment: bool = Field(True, alias="entityEstablishment")

    class Config:
        populate_by_name = True


class FreshnessHealth(BaseModel):
    timestamp_prominence: bool = Field(False, alias="timestampProminence")
    errors: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class CrawlStats(BaseModel):
    """
    Crawlability audit across the major search and AI indexes.
    """
    multi_bot_accessibility: MultiBotAccessibility = Field(default_factory=MultiBotAccessibility, alias="multiBotAccessibility")
    ai_technical_directives: AITechnicalDirectives = Field(default_factory=AITechnicalDirectives, alias="aiTechnicalDirectives")
    discovery_readiness: DiscoveryReadiness = Field(default_factory=DiscoveryReadiness, alias="discoveryReadiness")
    structural_readability: StructuralReadability = Field(default_factory=StructuralReadability, alias="structuralReadability")
    freshness_health: FreshnessHealth = Field(default_factory=FreshnessHealth, alias="freshnessHealth")

    class Config:
        populate_by_name = True


class CompetitorProfile(BaseModel):
    name: str
    gap: str = ""
    authority: int = 0
    format: str = ""


class CompetitorIntelligence(BaseModel):
    competitors: List[CompetitorProfile] = Field(default_factory=list)


class BusinessAnalysis(BaseModel):
    """
    Business classification and AI visibility audit returned by the
    text-generation collaborator. Sections the model leaves out keep their
    pending defaults.
    """
    industry: str = "Technology solutions"
    niche: str = "B2B Services"
    target_keywords: List[str] = Field(default_factory=list, alias="targetKeywords")
    opportunity_keywords: List[str] = Field(default_factory=list, alias="opportunityKeywords")
    ai_readiness_score: int = Field(65, ge=0, le=100, alias="aiReadinessScore")
    readiness_pillars: ReadinessPillars = Field(default_factory=ReadinessPillars, alias="readinessPillars")
    citation_monitoring: CitationMonitoring = Field(default_factory=CitationMonitoring, alias="citationMonitoring")
    crawl_stats: CrawlStats = Field(default_factory=CrawlStats, alias="crawlStats")
    competitor_intelligence: CompetitorIntelligence = Field(default_factory=CompetitorIntelligence, alias="competitorIntelligence")

    class Config:
        populate_by_name = True


# --- Content optimization ---

class ChunkType(str, Enum):
    SNIPPET = "snippet"
    CONVERSATIONAL = "conversational"
    STRUCTURAL = "structural"


class ContentChunk(BaseModel):
    """
    One rewritten block of page content, ready to paste back into the site.
    """
    original_heading: str = Field("", alias="originalHeading")
    optimized_heading: str = Field(..., alias="optimizedHeading")
    original_content: str = Field("", alias="originalContent")
    optimized_content: str = Field(..., alias="optimizedContent")
    type: ChunkType = ChunkType.SNIPPET
    implementation_notes: str = Field("", alias="implementationNotes")

    class Config:
        populate_by_name = True
        use_enum_values = True


class SchemaMarkup(BaseModel):
    faq: Dict[str, Any] = Field(default_factory=dict)
    organization: Dict[str, Any] = Field(default_factory=dict)
    how_to: Optional[Dict[str, Any]] = Field(None, alias="howTo")

    class Config:
        populate_by_name = True


class AIAssets(BaseModel):
    vendor_info: Dict[str, Any] = Field(default_factory=dict, alias="vendorInfo")
    ai_summary: str = Field("", alias="aiSummary")

    class Config:
        populate_by_name = True


class OptimizationResult(BaseModel):
    page_title: str = Field(..., alias="pageTitle")
    chunks: List[ContentChunk] = Field(default_factory=list)
    schema_markup: SchemaMarkup = Field(default_factory=SchemaMarkup, alias="schema")
    ai_assets: AIAssets = Field(default_factory=AIAssets, alias="aiAssets")

    class Config:
        populate_by_name = True


# --- Market intelligence ---

class IntentAnalysis(BaseModel):
    informational: List[str] = Field(default_factory=list)
    transactional: List[str] = Field(default_factory=list)
    comparison: List[str] = Field(default_factory=list)


class PlatformMomentum(BaseModel):
    platform: str
    momentum: int = Field(0, ge=0, le=100)
    winners: List[str] = Field(default_factory=list)


class NicheGap(BaseModel):
    query: str
    gap: str = ""
    opportunity: str = ""


class StrategicPlaybook(BaseModel):
    perplexity_advantage: str = Field("", alias="perplexityAdvantage")
    chat_gpt_advantage: str = Field("", alias="chatGPTAdvantage")
    content_pillars: List[str] = Field(default_factory=list, alias="contentPillars")
    entity_strategy: List[str] = Field(default_factory=list, alias="entityStrategy")

    class Config:
        populate_by_name = True


class MarketIntelligence(BaseModel):
    """
    How AI assistants answer a niche: intents, platform momentum, unanswered
    questions and a content playbook.
    """
    niche: str
    intent_analysis: IntentAnalysis = Field(default_factory=IntentAnalysis, alias="intentAnalysis")
    ai_share_of_voice: List[PlatformMomentum] = Field(default_factory=list, alias="aiShareOfVoice")
    niche_gaps: List[NicheGap] = Field(default_factory=list, alias="nicheGaps")
    strategic_playbook: StrategicPlaybook = Field(default_factory=StrategicPlaybook, alias="strategicPlaybook")

    class Config:
        populate_by_name = True
