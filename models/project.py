# backend/models/project.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AEOProject(BaseModel):
    """
    A tracked domain owned by a founder, as stored in the datastore.
    """
    id: str
    domain: str
    name: str
    founder_id: Optional[str] = Field(None, alias="founderId")
    readiness_score: int = Field(0, alias="readinessScore")
    meta_description: Optional[str] = Field(None, alias="metaDescription")
    content_text: Optional[str] = Field(None, alias="contentText")
    created_at: datetime = Field(default_factory=datetime.utcnow, alias="createdAt")
    last_crawled_at: Optional[datetime] = Field(None, alias="lastCrawledAt")

    class Config:
        populate_by_name = True
