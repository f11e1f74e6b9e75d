import logging
import re
from typing import List, Optional

import requests
from lxml import etree

from config import config
from services.fallback import first_success

logger = logging.getLogger(__name__)

HEADERS = {
    'User-Agent': config.CRAWLER_USER_AGENT
}

# Probe order for a bare domain: HTTPS before HTTP, www before apex.
ORIGIN_PREFIXES = ("https://www.", "https://", "http://www.", "http://")

_SCHEME_AND_WWW = re.compile(r"^(https?://)?(www\.)?", re.IGNORECASE)


def normalize_domain(domain: str) -> str:
    """
    Strips any scheme and leading `www.`, then a trailing slash.
    """
    cleaned = _SCHEME_AND_WWW.sub("", domain.strip(), count=1)
    if cleaned.endswith("/"):
        cleaned = cleaned[:-1]
    return cleaned


def origin_candidates(domain: str) -> List[str]:
    host = normalize_domain(domain)
    return [f"{prefix}{host}" for prefix in ORIGIN_PREFIXES]


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def probe_origin(url: str) -> Optional[str]:
    response = requests.get(url, headers=HEADERS, timeout=config.REQUEST_TIMEOUT, allow_redirects=True)
    if is_success(response.status_code):
        return url
    logger.debug(f"[origin] {url} answered {response.status_code}")
    return None


def resolve_origin(domain: str) -> str:
    """
    Returns the first scheme/host combination that answers with a 2xx status.
    Falls back to an unverified https:// origin when nothing answers.
    """
    origin = first_success(origin_candidates(domain), probe_origin)
    if origin:
        logger.info(f"[origin] Resolved {domain} to {origin}")
        return origin

    host = normalize_domain(domain)
    fallback = host if "://" in host else f"https://{host}"
    logger.warning(f"[origin] No reachable origin for {domain}, falling back to {fallback}")
    return fallback


def parse_sitemap(sitemap_url: str, max_urls: int) -> List[str]:
    """
    Collects `<url><loc>` values from a sitemap, in document order, capped at `max_urls`.
    Any fetch or parse failure yields an empty list.
    """
    urls: List[str] = []
    if not sitemap_url or max_urls <= 0:
        return urls

    try:
        response = requests.get(sitemap_url, headers=HEADERS, timeout=config.REQUEST_TIMEOUT)
        if not is_success(response.status_code):
            logger.info(f"[sitemap] No sitemap at {sitemap_url} ({response.status_code}).")
            return urls

        parser = etree.XMLParser(resolve_entities=False, no_network=True, recover=False)
        root = etree.fromstring(response.content, parser=parser)
        # local-name() keeps this independent of the sitemap namespace declaration
        locs = root.xpath("//*[local-name()='url']/*[local-name()='loc']")
        for loc in locs:
            if len(urls) >= max_urls:
                break
            if loc.text and loc.text.strip():
                urls.append(loc.text.strip())

    except requests.RequestException as e:
        logger.warning(f"[sitemap] Could not fetch {sitemap_url}: {e}")
    except (etree.XMLSyntaxError, ValueError) as e:
        logger.warning(f"[sitemap] XML parse error at {sitemap_url}: {e}")

    return urls
