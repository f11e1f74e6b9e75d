# backend/services/storage.py
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from config import config
from db.firestore import get_or_create_firestore_client
from models.page_data import CrawledPage
from models.project import AEOProject
from models.readiness import PageIssue

logger = logging.getLogger(__name__)


class AEOStorageService:
    """
    Persists projects, crawled pages and page issues in Firestore.
    When Firestore cannot be reached every operation degrades to a logged no-op.
    """

    def __init__(self, client=None):
        self.db = client
        self.firestore_available = True

    def _get_db(self):
        if self.db is None and self.firestore_available:
            try:
                self.db = get_or_create_firestore_client()
                logger.info("AEOStorageService connected to Firestore")
            except Exception as e:
                logger.warning(f"Firestore initialization failed, persistence disabled: {e}")
                self.firestore_available = False
        return self.db

    def _collection(self, name: str):
        db = self._get_db()
        return db.collection(name) if db is not None else None

    def get_or_create_project(self, domain: str, user_id: Optional[str], name: Optional[str] = None) -> Optional[str]:
        """
        Returns the id of the user's project for `domain`, creating it when missing.
        """
        projects = self._collection(config.PROJECTS_COLLECTION)
        if projects is None:
            return None

        try:
            query = projects.where('domain', '==', domain).where('founderId', '==', user_id).limit(1)
            existing = list(query.stream())
            if existing:
                return existing[0].id

            project = AEOProject(
                id=str(uuid.uuid4()),
                domain=domain,
                name=name or domain,
                founder_id=user_id,
            )
            projects.document(project.id).set(project.model_dump(by_alias=True))
            logger.info(f"Created project {project.id} for {domain}")
            return project.id
        except Exception as e:
            logger.error(f"Error creating project for {domain}: {e}")
            return None

    def replace_pages(self, project_id: str, pages: List[CrawledPage]) -> List[str]:
        """
        Deletes the project's previously crawled pages and stores the new set.
        Returns the stored page ids in page order.
        """
        collection = self._collection(config.PAGES_COLLECTION)
        if collection is None or not project_id:
            return []

        try:
            for doc in collection.where('projectId', '==', project_id).stream():
                doc.reference.delete()

            page_ids = []
            for page in pages:
                page_id = str(uuid.uuid4())
                data = page.model_dump(by_alias=True, mode="json")
                data['projectId'] = project_id
                collection.document(page_id).set(data)
                page_ids.append(page_id)
            logger.info(f"Stored {len(page_ids)} pages for project {project_id}")
            return page_ids
        except Exception as e:
            logger.error(f"Error saving pages for project {project_id}: {e}")
            return []

    def update_project_score(self, project_id: str, score: int, homepage: Optional[CrawledPage] = None) -> None:
        projects = self._collection(config.PROJECTS_COLLECTION)
        if projects is None or not project_id:
            return

        update: Dict[str, Any] = {
            'readinessScore': score,
            'lastCrawledAt': datetime.utcnow(),
        }
        if homepage is not None:
            update['metaDescription'] = homepage.meta_description
            update['contentText'] = homepage.content_text
        try:
            projects.document(project_id).update(update)
        except Exception as e:
            logger.error(f"Error updating readiness score for project {project_id}: {e}")

    def save_issues(self, project_id: str, issues: List[PageIssue], page_ids: Dict[str, str]) -> int:
        """
        Replaces the project's stored issues; `page_ids` maps page URLs to stored page ids.
        Issues of the previous crawl are always removed, even when the new list is empty.
        """
        collection = self._collection(config.ISSUES_COLLECTION)
        if collection is None or not project_id:
            return 0

        try:
            for doc in collection.where('projectId', '==', project_id).stream():
                doc.reference.delete()

            if not issues:
                return 0

            for issue in issues:
                data = issue.model_dump(by_alias=True, mode="json")
                data['projectId'] = project_id
                data['pageId'] = page_ids.get(issue.page_ref)
                collection.document(str(uuid.uuid4())).set(data)
            return len(issues)
        except Exception as e:
            logger.error(f"Error saving issues for project {project_id}: {e}")
            return 0

    def get_project(self, project_id: str) -> Optional[AEOProject]:
        projects = self._collection(config.PROJECTS_COLLECTION)
        if projects is None:
            return None

        try:
            doc = projects.document(project_id).get()
            if not doc.exists:
                return None
            data = doc.to_dict()
            data['id'] = doc.id
            return AEOProject(**data)
        except ValidationError as e:
            logger.warning(f"Malformed project document {project_id}: {e}")
            return None
        except Exception as e:
            logger.error(f"Error retrieving project {project_id}: {e}")
            return None

    def get_projects_by_user(self, user_id: str) -> List[AEOProject]:
        projects = self._collection(config.PROJECTS_COLLECTION)
        if projects is None:
            return []

        results = []
        try:
            query = projects.where('founderId', '==', user_id).order_by('createdAt', direction='DESCENDING')
            for doc in query.stream():
                data = doc.to_dict()
                data['id'] = doc.id
                try:
                    results.append(AEOProject(**data))
                except ValidationError as e:
                    logger.warning(f"Skipping malformed project document {doc.id}: {e}")
                    continue
        except Exception as e:
            logger.error(f"Error retrieving projects for user {user_id}: {e}")
            return []
        return results

    def get_project_pages(self, project_id: str, limit: int = 5) -> List[Dict[str, Any]]:
        collection = self._collection(config.PAGES_COLLECTION)
        if collection is None:
            return []

        try:
            query = collection.where('projectId', '==', project_id).limit(limit)
            return [doc.to_dict() for doc in query.stream()]
        except Exception as e:
            logger.error(f"Error retrieving pages for project {project_id}: {e}")
            return []


# Instantiate the service for easy import
storage_service = AEOStorageService()
