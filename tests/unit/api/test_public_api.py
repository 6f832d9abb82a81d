"""Tests for the public summary endpoints."""

from ai_summary.storage.summary_storage import FaqItem, SummaryRecord
from tests.fakes import make_document


def _store_summary(context, document_id=1, **overrides):
    fields = dict(
        document_id=document_id,
        summary_text="Stored summary.",
        key_points=["Key one"],
        faq_items=[FaqItem("Q?", "A.")],
        provider="openrouter",
        done=True,
    )
    fields.update(overrides)
    context.store.set(document_id, SummaryRecord(**fields))


def test_health(test_client):
    response = test_client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert test_client.get("/healthz").status_code == 404


def test_summary_by_slug(test_client, context):
    _store_summary(context)
    response = test_client.get("/ai/v1/summary/post-1")

    assert response.status_code == 200
    body = response.json()
    assert body["@type"] == "Article"
    assert body["name"] == "Post 1"
    assert body["description"] == "Stored summary."
    assert body["keyPoints"] == ["Key one"]


def test_summary_by_id(test_client, context):
    _store_summary(context, 2)
    response = test_client.get("/ai/v1/summary/id/2")
    assert response.status_code == 200
    assert response.json()["url"] == "https://example.com/post-2/"


def test_unknown_slug_is_404(test_client):
    response = test_client.get("/ai/v1/summary/missing-post")
    assert response.status_code == 404
    assert response.json() == {
        "error": "Post not found",
        "message": "No post found with the specified slug.",
    }


def test_unknown_id_is_404(test_client):
    response = test_client.get("/ai/v1/summary/id/999")
    assert response.status_code == 404
    assert response.json()["message"] == "No post found with the specified ID."


def test_unpublished_is_404(test_client, context, documents):
    documents.add(make_document(5, status="draft"))
    _store_summary(context, 5)

    response = test_client.get("/ai/v1/summary/id/5")
    assert response.status_code == 404
    assert response.json() == {
        "error": "Post not available",
        "message": "The requested post is not published.",
    }


def test_no_summary_is_404(test_client):
    response = test_client.get("/ai/v1/summary/post-1")
    assert response.status_code == 404
    assert response.json() == {
        "error": "No summary available",
        "message": "No AI summary has been generated for this post.",
    }


def test_invalid_structured_data_is_500(test_client, context, documents):
    documents.add(make_document(6, title=""))
    _store_summary(context, 6)

    response = test_client.get("/ai/v1/summary/id/6")
    assert response.status_code == 500
    assert set(response.json()) == {"error", "message"}


def test_internal_failure_is_500(test_client, context):
    class BrokenSource:
        def get(self, document_id):
            raise RuntimeError("boom")

    context.documents = BrokenSource()
    response = test_client.get("/ai/v1/summary/id/1")
    assert response.status_code == 500
    assert response.json() == {
        "error": "Server error",
        "message": "An error occurred while retrieving the summary.",
    }


def test_summary_page_serves_ld_json(test_client, context):
    _store_summary(context)
    response = test_client.get("/post-1/ai-summary/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/ld+json")
    assert response.headers["cache-control"] == "public, max-age=3600"
    assert response.headers["x-robots-tag"] == "noindex, follow"
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.json() == test_client.get("/ai/v1/summary/post-1").json()


def test_summary_page_404_without_summary(test_client):
    response = test_client.get("/post-1/ai-summary/")
    assert response.status_code == 404


def test_fragment(test_client, context):
    _store_summary(context)
    response = test_client.get("/ai/v1/fragment/1", params={"show_faq": "no"})

    assert response.status_code == 200
    assert "<h3>Summary</h3>" in response.text
    assert "<h3>Key Points</h3>" in response.text
    assert "<h3>FAQ</h3>" not in response.text


def test_fragment_without_summary_is_empty(test_client):
    response = test_client.get("/ai/v1/fragment/1")
    assert response.status_code == 200
    assert response.text == ""


def test_robots_txt(test_client):
    response = test_client.get("/robots.txt")
    assert response.status_code == 200
    assert "User-agent: GPTBot" in response.text
