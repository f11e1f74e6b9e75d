"""
Configuration settings for the AEO readiness service
"""

import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Environment driven settings"""
    # Text generation (Gemini)
    GEMINI_API_KEY = os.environ.get('GEMINI_API_KEY') or os.environ.get('GOOGLE_API_KEY')
    GEMINI_MODEL = os.environ.get('GEMINI_MODEL', 'gemini-2.5-flash')

    # Outbound HTTP
    CRAWLER_USER_AGENT = os.environ.get('CRAWLER_USER_AGENT', 'AEOReadinessBot/1.0 (Answer Engine Optimizer)')
    TRENDS_USER_AGENT = os.environ.get('TRENDS_USER_AGENT', 'AEOReadiness-Intel/2.0 (research@aeoreadiness.dev)')
    REQUEST_TIMEOUT = float(os.environ.get('REQUEST_TIMEOUT', '10'))

    # Crawl
    DEFAULT_PAGE_CAP = int(os.environ.get('DEFAULT_PAGE_CAP', '20'))
    CRAWL_TIMEOUT = float(os.environ.get('CRAWL_TIMEOUT', '900'))

    # Trends (seconds)
    KEYWORD_FETCH_TIMEOUT = float(os.environ.get('KEYWORD_FETCH_TIMEOUT', '25'))
    AI_PHRASE_TIMEOUT = float(os.environ.get('AI_PHRASE_TIMEOUT', '15'))
    AI_ANALYSIS_TIMEOUT = float(os.environ.get('AI_ANALYSIS_TIMEOUT', '30'))
    AI_OPTIMIZATION_TIMEOUT = float(os.environ.get('AI_OPTIMIZATION_TIMEOUT', '60'))
    AI_MARKET_TIMEOUT = float(os.environ.get('AI_MARKET_TIMEOUT', '45'))

    # Firestore
    FIRESTORE_DATABASE = os.environ.get('GOOGLE_FIRESTORE_DATABASE', '(default)')
    PROJECTS_COLLECTION = os.environ.get('AEO_PROJECTS_COLLECTION', 'aeo_projects')
    PAGES_COLLECTION = os.environ.get('AEO_PAGES_COLLECTION', 'crawled_pages')
    ISSUES_COLLECTION = os.environ.get('AEO_ISSUES_COLLECTION', 'page_issues')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()


config = Config()
