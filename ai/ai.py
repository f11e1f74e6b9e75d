# backend/ai/ai.py

import asyncio
import json
import logging
import re
from typing import Any, List, Optional

import google.generativeai as genai
from pydantic import ValidationError

from config import config
from models.analysis import (
    AIAssets,
    BusinessAnalysis,
    ContentChunk,
    IntentAnalysis,
    MarketIntelligence,
    OptimizationResult,
    SchemaMarkup,
    StrategicPlaybook,
)

logger = logging.getLogger(__name__)

MAX_CONTEXT_CHARS = 8000
MAX_TARGET_KEYWORDS = 5
MAX_AI_PHRASES = 5

FALLBACK_ANALYSIS = BusinessAnalysis(
    industry="Technology solutions",
    niche="B2B Services",
    target_keywords=["B2B lead generation", "sales outreach automation", "AI-driven business growth"],
    opportunity_keywords=["future of sales tech", "AI automation for startups"],
)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


def extract_json(text: str, pattern: re.Pattern = _JSON_OBJECT) -> Optional[Any]:
    """
    Pulls the outermost JSON object/array out of free-form model output.
    Returns None when nothing parseable is found.
    """
    if not text:
        return None
    cleaned = text.strip().replace("```json", "").replace("```", "")
    match = pattern.search(cleaned)
    if not match:
        return None
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError:
        return None


def fallback_optimization(domain: str) -> OptimizationResult:
    """Placeholder optimization so the optimizer view always has something to render."""
    return OptimizationResult(
        page_title="Optimization in Progress",
        chunks=[
            ContentChunk(
                original_heading="General Content",
                optimized_heading=f"How does {domain} provide value?",
                original_content="Original content is being processed for deep optimization.",
                optimized_content=(
                    f"{domain} is an industry-leading platform designed to provide high-authority solutions "
                    "for its users. By leveraging structured information and expert insights, it ensures that "
                    "key questions are answered concisely and accurately for both users and AI agents."
                ),
                type="snippet",
                implementation_notes="Deep analysis pending. This is an initial AEO structural suggestion.",
            )
        ],
        schema_markup=SchemaMarkup(
            faq={"@context": "https://schema.org", "@type": "FAQPage", "mainEntity": []},
            organization={
                "@context": "https://schema.org",
                "@type": "Organization",
                "name": domain,
                "url": f"https://{domain}",
            },
        ),
        ai_assets=AIAssets(
            vendor_info={
                "name": domain,
                "description": "High-authority business entity.",
                "capabilities": ["B2B Solutions", "Market Intelligence"],
            },
            ai_summary=(
                f"<h1>{domain} Brand Summary</h1><p>A leading authority in its niche, "
                "focused on delivering verified information and solutions.</p>"
            ),
        ),
    )


def fallback_market_intelligence(query: str) -> MarketIntelligence:
    return MarketIntelligence(
        niche=query,
        intent_analysis=IntentAnalysis(
            informational=[f"What is {query}?", f"How does {query} work?"],
            transactional=[f"Best {query} tools", f"{query} pricing"],
            comparison=[f"{query} alternatives"],
        ),
        strategic_playbook=StrategicPlaybook(
            content_pillars=[f"{query} fundamentals", f"{query} best practices"],
            entity_strategy=["Publish Organization schema", "Keep author bylines consistent"],
        ),
    )


class AIService:
    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.api_key = api_key or config.GEMINI_API_KEY
        self.model_name = model_name or config.GEMINI_MODEL
        if not self.api_key:
            logger.warning("GEMINI_API_KEY not found. AI features will use fallbacks.")
            self.model = None
        else:
            genai.configure(api_key=self.api_key)
            self.model = genai.GenerativeModel(self.model_name)

    async def _generate_text(self, prompt: str) -> str:
        response = await self.model.generate_content_async(prompt)
        return response.text

    async def _generate_json(self, prompt: str, timeout: float, label: str) -> Optional[dict]:
        """
        Runs `prompt` under `timeout` and returns the JSON object found in the reply.
        Timeouts, API errors and replies without an object all yield None.
        """
        try:
            text = await asyncio.wait_for(self._generate_text(prompt), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"[AI] {label} timed out after {timeout}s")
            return None
        except Exception as e:
            logger.error(f"[AI ERROR] {label} failed: {e}")
            return None

        data = extract_json(text)
        if not isinstance(data, dict):
            logger.warning(f"[AI] Unparseable {label} output")
            return None
        return data

    async def generate_ai_phrases(self, topic: str) -> List[str]:
        """
        Natural-language questions a user might ask an AI assistant about `topic`.
        Returns an empty list when the model is unavailable or its output is unusable.
        """
        if not self.model:
            return []

        prompt = f"""Generate 5 natural language questions or search prompts that a user would ask an AI model (like ChatGPT or Gemini) if they were looking for information or solutions related to "{topic}".

Constraints:
- Phrases must be high-intent questions or detailed prompts.
- Examples: "How can I automate my B2B lead generation?", "Best strategies for scaling sales outreach with AI".
- Return ONLY a JSON array of strings. No formatting."""

        try:
            text = await self._generate_text(prompt)
        except Exception as e:
            logger.error(f"[AI ERROR] Phrase generation failed for {topic}: {e}")
            return []

        phrases = extract_json(text, _JSON_ARRAY)
        if not isinstance(phrases, list):
            logger.warning(f"[AI] Unparseable phrase output for {topic}")
            return []
        return [p.strip() for p in phrases if isinstance(p, str) and p.strip()][:MAX_AI_PHRASES]

    async def analyze_business(self, domain: str, page_contents: List[str]) -> BusinessAnalysis:
        """
        Classifies the business behind `domain`, picks keywords worth tracking and
        audits its AI visibility (readiness pillars, citations, crawlability, competitors).
        Falls back to a fixed analysis on timeout, API errors or malformed output.
        """
        if not self.model:
            return FALLBACK_ANALYSIS.model_copy(deep=True)

        combined = "\n\n---\n\n".join(page_contents)[:MAX_CONTEXT_CHARS]
        prompt = f"""You are a Senior SEO and Market Intelligence Strategist. Analyze "{domain}" and provide a deep AEO (Answer Engine Optimization) Audit.

CONTEXT:
{combined}

TASK:
1. Identify the industry and the niche of the business.
2. Identify 5 'Market Categorization' keywords suitable for Wikipedia topic tracking.
3. Recommend 5-8 high-traffic opportunity keywords.
4. AI Readiness Score (0-100) over five pillars: snippability, structured data, multi-index discoverability, entity authority, freshness.
5. Crawlability: bot access (Googlebot, Brave, PerplexityBot, Bingbot), robots.txt and llms.txt directives, AI sitemaps, schema and entity presence, timestamp health.
6. Citation mapping: the brand's share of voice in AI answers against 3 key competitors.
7. Competitor intelligence: content gaps and authority of 3 competitors.

Return valid JSON:
{{
  "industry": "Industry",
  "niche": "Niche",
  "targetKeywords": ["keyword1", "keyword2"],
  "opportunityKeywords": ["keyword1", "keyword2"],
  "aiReadinessScore": 85,
  "readinessPillars": {{
    "snippability": {{"score": 80, "feedback": "..."}},
    "structuredData": {{"score": 90, "feedback": "..."}},
    "discoverability": {{"score": 75, "feedback": "..."}},
    "authority": {{"score": 60, "feedback": "..."}},
    "freshness": {{"score": 85, "feedback": "..."}}
  }},
  "citationMonitoring": {{"brand": 15, "competitors": [{{"name": "A", "share": 30}}]}},
  "crawlStats": {{
    "multiBotAccessibility": {{"googlebot": true, "brave": true, "perplexity": false, "bing": true}},
    "aiTechnicalDirectives": {{"robotsOptimization": "...", "llmsTxt": false, "aiPressKit": true}},
    "discoveryReadiness": {{"aiSitemap": false, "indexStatus": "..."}},
    "structuralReadability": {{"schemaPresence": true, "entityEstablishment": true}},
    "freshnessHealth": {{"timestampProminence": true, "errors": []}}
  }},
  "competitorIntelligence": {{"competitors": [{{"name": "A", "gap": "...", "authority": 70, "format": "..."}}]}}
}}"""

        data = await self._generate_json(prompt, config.AI_ANALYSIS_TIMEOUT, f"business analysis for {domain}")
        if data is None:
            return FALLBACK_ANALYSIS.model_copy(deep=True)

        data["targetKeywords"] = [
            k.strip() for k in data.get("targetKeywords") or []
            if isinstance(k, str) and len(k.strip()) > 3
        ][:MAX_TARGET_KEYWORDS]
        data["opportunityKeywords"] = [k for k in data.get("opportunityKeywords") or [] if isinstance(k, str)]
        data["industry"] = str(data.get("industry") or FALLBACK_ANALYSIS.industry)
        data["niche"] = str(data.get("niche") or FALLBACK_ANALYSIS.niche)
        # Sections the model returned as null keep their defaults
        data = {key: value for key, value in data.items() if value is not None}

        try:
            return BusinessAnalysis.model_validate(data)
        except ValidationError as e:
            logger.warning(f"[AI] Business analysis for {domain} did not match the expected shape: {e}")
            return FALLBACK_ANALYSIS.model_copy(deep=True)

    async def generate_optimizations(self, domain: str, page_contents: List[str]) -> OptimizationResult:
        """
        Rewrites scanned content into answer capsules, question headings,
        FAQPage/Organization JSON-LD and an AI press kit.
        Falls back to a placeholder optimization on any failure.
        """
        if not self.model:
            return fallback_optimization(domain)

        content = "\n\n".join(page_contents)[:MAX_CONTEXT_CHARS]
        prompt = f"""You are an AI Optimization Architect specializing in Answer Engine Optimization (AEO).
Transform the provided website content into "AI-ready" modular blocks that agents like ChatGPT, Claude and Perplexity can easily extract and cite.

CONTEXT:
Domain: {domain}
Content Scanned: {content}

TASK:
1. CONTENT SNIPPIFICATION: Identify 3-4 "buried" answers. Rewrite them into 40-60 word "Answer Capsules".
2. HEADING TRANSFORMATION: Convert vague headings into natural language, question-format H2s.
3. CONVERSATIONAL TUNING: Adjust tone to be active, second-person and direct.
4. STRUCTURAL FORMATTING: Convert procedural data into lists or tables where appropriate.
5. SCHEMA GENERATION: Create FAQPage (JSON-LD) and Organization (JSON-LD) based on the brand.
6. AI ASSETS: Generate a 'vendor-info.json' (AI Press Kit) and an 'ai-summary.html' (semantic summary).

RETURN VALID JSON ONLY:
{{
  "pageTitle": "Optimized Page Title",
  "chunks": [
    {{
      "originalHeading": "Vague Heading",
      "optimizedHeading": "How do I [Action] with [Brand]?",
      "originalContent": "Long wall of text...",
      "optimizedContent": "The concise 40-60 word answer capsule front-loaded with facts.",
      "type": "snippet",
      "implementationNotes": "Suggest moving to the top of the section."
    }}
  ],
  "schema": {{
    "faq": {{"@context": "https://schema.org", "@type": "FAQPage", "mainEntity": []}},
    "organization": {{"@context": "https://schema.org", "@type": "Organization"}}
  }},
  "aiAssets": {{
    "vendorInfo": {{"name": "Brand", "description": "...", "capabilities": []}},
    "aiSummary": "<h1>Semantic Summary</h1><p>...</p>"
  }}
}}"""

        data = await self._generate_json(prompt, config.AI_OPTIMIZATION_TIMEOUT, f"optimization for {domain}")
        if data is None:
            return fallback_optimization(domain)

        try:
            return OptimizationResult.model_validate(data)
        except ValidationError as e:
            logger.warning(f"[AI] Optimization for {domain} did not match the expected shape: {e}")
            return fallback_optimization(domain)

    async def analyze_market_intelligence(self, query: str) -> MarketIntelligence:
        """
        Intent analysis, AI platform momentum, niche gaps and a playbook for `query`.
        Falls back to template intelligence on any failure.
        """
        if not self.model:
            return fallback_market_intelligence(query)

        prompt = f"""TASK: Perform deep Market Intelligence for the niche/keyword: "{query}".
Focus on Answer Engine Optimization (AEO) and AI research patterns.

1. Intent Analysis: Identify 3 questions/queries for Informational, Transactional and Comparison intent specifically for AI search.
2. AI Share of Voice: For platforms (ChatGPT, Perplexity, Claude, Gemini, Copilot), estimate their "momentum" (0-100) and identify current winners.
3. Niche Gaps: Identify 3 "unanswered questions" where AI currently gives vague or poor answers.
4. Strategic Playbook: Provide tailored advice for Perplexity vs ChatGPT, 3 content pillars and an entity strategy.

Return valid JSON:
{{
  "niche": "...",
  "intentAnalysis": {{"informational": ["..."], "transactional": ["..."], "comparison": ["..."]}},
  "aiShareOfVoice": [{{"platform": "Perplexity", "momentum": 85, "winners": ["Brand A", "Wikipedia"]}}],
  "nicheGaps": [{{"query": "...", "gap": "...", "opportunity": "..."}}],
  "strategicPlaybook": {{
    "perplexityAdvantage": "...",
    "chatGPTAdvantage": "...",
    "contentPillars": ["..."],
    "entityStrategy": ["..."]
  }}
}}"""

        data = await self._generate_json(prompt, config.AI_MARKET_TIMEOUT, f"market intelligence for {query}")
        if data is None:
            return fallback_market_intelligence(query)

        data.setdefault("niche", query)
        try:
            return MarketIntelligence.model_validate(data)
        except ValidationError as e:
            logger.warning(f"[AI] Market intelligence for {query} did not match the expected shape: {e}")
            return fallback_market_intelligence(query)


ai_service = AIService()
