import logging
from typing import List, Optional, Set

from config import config
from models.page_data import CrawledPage
from .extractor import PageExtractor, page_extractor
from .utils import parse_sitemap, resolve_origin

logger = logging.getLogger(__name__)


class SiteUnreachableError(Exception):
    """Raised when a crawl produced no pages at all."""

    def __init__(self, domain: str):
        self.domain = domain
        super().__init__(
            f"No pages could be discovered for {domain}. "
            "Please check if the site is reachable and supports search crawlers."
        )


class SiteCrawler:
    """
    Sequential, single-origin crawler: sitemap first, homepage as fallback.
    Pages are fetched one at a time; a failing page is dropped without
    aborting the crawl.
    """

    def __init__(self, domain: str, page_cap: int = None, extractor: Optional[PageExtractor] = None):
        self.domain = domain
        self.page_cap = config.DEFAULT_PAGE_CAP if page_cap is None else page_cap
        self.extractor = extractor or page_extractor
        self.origin: Optional[str] = None
        self.discovered_urls: List[str] = []
        self.crawled_urls: Set[str] = set()
        self.results: List[CrawledPage] = []

    def discover_urls(self, origin: str) -> List[str]:
        urls = parse_sitemap(f"{origin}/sitemap.xml", self.page_cap)
        if urls:
            logger.info(f"[crawler] Found {len(urls)} URLs in sitemap for {origin}.")
            return urls

        logger.info(f"[crawler] No usable sitemap for {origin}, crawling homepage only.")
        return [origin]

    def crawl_site(self) -> List[CrawledPage]:
        self.origin = resolve_origin(self.domain)
        self.discovered_urls = self.discover_urls(self.origin)

        for url in self.discovered_urls:
            if len(self.crawled_urls) >= self.page_cap:
                break
            if url in self.crawled_urls:
                continue
            self.crawled_urls.add(url)

            try:
                page = self.extractor.fetch(url)
            except Exception as e:
                logger.error(f"[crawler] Failed to crawl {url}: {e}")
                continue

            if page:
                self.results.append(page)

        logger.info(f"[crawler] Crawled {len(self.results)} of {len(self.crawled_urls)} attempted pages for {self.domain}.")
        return self.results


def crawl_domain(domain: str, page_cap: int = None) -> List[CrawledPage]:
    """
    Crawls a bare domain and returns its extracted pages (possibly empty).
    """
    return SiteCrawler(domain, page_cap).crawl_site()
