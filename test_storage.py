# test_storage.py - Firestore persistence tests against a mocked client

from unittest.mock import MagicMock, patch

from models.page_data import CrawledPage
from models.readiness import IssuePriority, IssueType, PageIssue
from services.storage import AEOStorageService


def make_doc(doc_id, data):
    doc = MagicMock()
    doc.id = doc_id
    doc.exists = True
    doc.to_dict.return_value = dict(data)
    return doc


def test_existing_project_is_reused():
    db = MagicMock()
    query = db.collection.return_value.where.return_value.where.return_value.limit.return_value
    query.stream.return_value = [make_doc("proj-1", {})]

    project_id = AEOStorageService(client=db).get_or_create_project("example.com", "u1")

    assert project_id == "proj-1"
    db.collection.return_value.document.assert_not_called()


def test_missing_project_is_created():
    db = MagicMock()
    query = db.collection.return_value.where.return_value.where.return_value.limit.return_value
    query.stream.return_value = []

    project_id = AEOStorageService(client=db).get_or_create_project("example.com", "u1", "My site")

    assert project_id
    db.collection.assert_called_with("aeo_projects")
    db.collection.return_value.document.assert_called_once_with(project_id)
    stored = db.collection.return_value.document.return_value.set.call_args.args[0]
    assert stored["domain"] == "example.com"
    assert stored["name"] == "My site"
    assert stored["founderId"] == "u1"


def test_replace_pages_deletes_old_pages_first():
    db = MagicMock()
    old_doc = make_doc("old", {})
    db.collection.return_value.where.return_value.stream.return_value = [old_doc]
    pages = [CrawledPage(url="https://example.com/", structured_data_types={"FAQPage"}), CrawledPage(url="https://example.com/b")]

    page_ids = AEOStorageService(client=db).replace_pages("proj-1", pages)

    old_doc.reference.delete.assert_called_once()
    assert len(page_ids) == 2
    stored = db.collection.return_value.document.return_value.set.call_args_list[0].args[0]
    assert stored["projectId"] == "proj-1"
    assert stored["url"] == "https://example.com/"
    assert stored["structuredDataTypes"] == ["FAQPage"]


def test_save_issues_links_issue_to_page_id():
    db = MagicMock()
    db.collection.return_value.where.return_value.stream.return_value = []
    issue = PageIssue(
        page_ref="https://example.com/",
        issue_type=IssueType.NO_SCHEMA,
        priority=IssuePriority.HIGH,
        description="No structured data found",
        recommendation="Add FAQPage or HowTo schema markup",
    )

    saved = AEOStorageService(client=db).save_issues("proj-1", [issue], {"https://example.com/": "page-1"})

    assert saved == 1
    stored = db.collection.return_value.document.return_value.set.call_args.args[0]
    assert stored["pageId"] == "page-1"
    assert stored["issueType"] == "no_schema"
    assert stored["priority"] == "high"


def test_save_issues_clears_previous_issues_when_none_remain():
    db = MagicMock()
    old_doc = make_doc("old-issue", {"projectId": "proj-1"})
    db.collection.return_value.where.return_value.stream.return_value = [old_doc]

    saved = AEOStorageService(client=db).save_issues("proj-1", [], {})

    assert saved == 0
    db.collection.assert_called_with("page_issues")
    db.collection.return_value.where.assert_called_once_with("projectId", "==", "proj-1")
    old_doc.reference.delete.assert_called_once()
    db.collection.return_value.document.assert_not_called()


def test_update_project_score_copies_homepage_context():
    db = MagicMock()
    homepage = CrawledPage(url="https://example.com/", meta_description="About us", content_text="Hello")

    AEOStorageService(client=db).update_project_score("proj-1", 64, homepage=homepage)

    update = db.collection.return_value.document.return_value.update.call_args.args[0]
    assert update["readinessScore"] == 64
    assert update["metaDescription"] == "About us"
    assert update["contentText"] == "Hello"


def test_get_project_returns_none_for_missing_document():
    db = MagicMock()
    db.collection.return_value.document.return_value.get.return_value.exists = False

    assert AEOStorageService(client=db).get_project("missing") is None


def test_projects_by_user_skips_malformed_documents():
    db = MagicMock()
    query = db.collection.return_value.where.return_value.order_by.return_value
    query.stream.return_value = [
        make_doc("p1", {"domain": "example.com", "name": "Example", "founderId": "u1"}),
        make_doc("p2", {"name": "No domain"}),
    ]

    projects = AEOStorageService(client=db).get_projects_by_user("u1")

    assert [p.id for p in projects] == ["p1"]


@patch("services.storage.get_or_create_firestore_client", side_effect=RuntimeError("no credentials"))
def test_unavailable_firestore_degrades_to_no_ops(mock_client):
    storage = AEOStorageService()

    assert storage.get_or_create_project("example.com", "u1") is None
    assert storage.replace_pages("proj-1", [CrawledPage(url="https://example.com/")]) == []
    assert storage.get_projects_by_user("u1") == []
    assert storage.get_project_pages("proj-1") == []
    assert storage.firestore_available is False
    # initialization is only attempted once
    assert mock_client.call_count == 1
