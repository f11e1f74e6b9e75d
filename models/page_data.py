# backend/models/page_data.py
from pydantic import BaseModel, Field
from typing import List, Optional, Set


class Heading(BaseModel):
    """
    A single h1-h4 heading, in document order.
    """
    level: str = Field(..., description="Heading tag name (h1..h4)")
    text: str

    class Config:
        frozen = True


class CrawledPage(BaseModel):
    """
    Defines the data structure for a single crawled page.
    Built once by the page extractor and never mutated afterwards.
    """
    url: str
    title: str = ""
    meta_description: str = Field("", alias="metaDescription")
    content_text: str = Field("", alias="contentText", description="Body text truncated to 5000 characters")
    headings: List[Heading] = Field(default_factory=list)
    has_structured_data: bool = Field(False, alias="hasStructuredData")
    structured_data_types: Set[str] = Field(default_factory=set, alias="structuredDataTypes")
    word_count: int = Field(0, alias="wordCount", description="Word count of the untruncated body text")
    answer_position: Optional[int] = Field(None, alias="answerPosition", ge=1)

    class Config:
        frozen = True
        populate_by_name = True
