import json
import logging
import re
from typing import List, Optional, Set, Tuple

import requests
from bs4 import BeautifulSoup, Tag

from config import config
from models.page_data import CrawledPage, Heading
from .utils import HEADERS, is_success

logger = logging.getLogger(__name__)

MAX_CONTENT_CHARS = 5000
ANSWER_SCAN_LIMIT = 5
HEADING_TAGS = ["h1", "h2", "h3", "h4"]
NON_CONTENT_TAGS = ["script", "style", "nav", "header", "footer"]

_WHITESPACE = re.compile(r"\s+")
_SENTENCE_END = re.compile(r"[.!?]+")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def extract_structured_data(soup: BeautifulSoup) -> Tuple[bool, Set[str]]:
    """
    Reads every JSON-LD block. Presence of any block counts as structured data,
    even when its JSON is malformed; malformed blocks contribute no type.
    """
    scripts = soup.find_all("script", attrs={"type": "application/ld+json"})
    types: Set[str] = set()

    for script in scripts:
        try:
            data = json.loads(script.string or script.get_text() or "")
        except json.JSONDecodeError:
            continue  # Skip malformed JSON

        if isinstance(data, list):
            data = next((item for item in data if isinstance(item, dict) and "@type" in item), None)
        if not isinstance(data, dict):
            continue

        type_val = data.get("@type")
        if isinstance(type_val, list):
            type_val = type_val[0] if type_val else None
        if isinstance(type_val, str) and type_val:
            types.add(type_val)

    return len(scripts) > 0, types


def detect_answer_position(paragraph_texts: List[str]) -> Optional[int]:
    """
    Heuristic guess at which paragraph holds the direct answer.

    Looks at the first five paragraphs and returns the 1-indexed position of the
    first one with 2-4 sentences and more than 30 words. If none qualifies the
    first paragraph is assumed; pages without paragraphs get None.
    """
    for index, text in enumerate(paragraph_texts[:ANSWER_SCAN_LIMIT]):
        sentences = [s for s in _SENTENCE_END.split(text) if s.strip()]
        word_count = len(text.split())
        if 2 <= len(sentences) <= 4 and word_count > 30:
            return index + 1

    return 1 if paragraph_texts else None


class PageExtractor:
    def __init__(self, timeout: float = None):
        self.timeout = timeout or config.REQUEST_TIMEOUT

    def fetch(self, url: str) -> Optional[CrawledPage]:
        """
        Downloads and extracts a single page. Returns None on network errors and non-2xx answers.
        """
        try:
            response = requests.get(url, headers=HEADERS, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as e:
            logger.warning(f"[extractor] Could not load page {url}: {e}")
            return None

        if not is_success(response.status_code):
            logger.info(f"[extractor] Skipping {url}: HTTP {response.status_code}")
            return None

        return self.extract(response.text, url)

    def extract(self, html: str, url: str) -> CrawledPage:
        soup = BeautifulSoup(html, "lxml")

        # JSON-LD lives in <script> tags, so it has to be read before boilerplate is stripped.
        has_structured_data, structured_data_types = extract_structured_data(soup)

        for element in soup.find_all(NON_CONTENT_TAGS):
            element.extract()

        title_tag = soup.find("title")
        title = title_tag.get_text().strip() if title_tag else ""

        meta_description = ""
        meta_tag = soup.find("meta", attrs={"name": "description"})
        if isinstance(meta_tag, Tag) and meta_tag.get("content"):
            meta_description = meta_tag.get("content").strip()

        headings = []
        for element in soup.find_all(HEADING_TAGS):
            text = collapse_whitespace(element.get_text(separator=" "))
            if text:
                headings.append(Heading(level=element.name.lower(), text=text))

        body = soup.body or soup
        content_text = collapse_whitespace(body.get_text(separator=" "))

        paragraphs = [p.get_text().strip() for p in soup.find_all("p")]

        return CrawledPage(
            url=url,
            title=title,
            meta_description=meta_description,
            content_text=content_text[:MAX_CONTENT_CHARS],
            headings=headings,
            has_structured_data=has_structured_data,
            structured_data_types=structured_data_types,
            word_count=len(content_text.split()),
            answer_position=detect_answer_position(paragraphs),
        )


page_extractor = PageExtractor()
