"""Unit tests for JSON-LD building and validation."""

from datetime import datetime, timezone

import pytest

from ai_summary import __version__
from ai_summary.config import SiteSettings
from ai_summary.documents import DocumentImage
from ai_summary.publication.jsonld import build_json_ld, is_valid_json_ld, validate_json_ld
from ai_summary.storage.summary_storage import FaqItem, SummaryRecord
from tests.fakes import make_document

SITE = SiteSettings(name="Example Site", url="https://example.com")


@pytest.fixture
def record():
    return SummaryRecord(
        document_id=1,
        summary_text="A concise summary.",
        key_points=["Point one", "Point two"],
        faq_items=[FaqItem("What is it?", "A thing.")],
        provider="openrouter",
        generated_at=datetime(2024, 5, 3, 9, 0, tzinfo=timezone.utc),
        done=True,
    )


def test_article_fields(record):
    document = make_document(
        1,
        categories=["News", "Tech"],
        tags=["ai", "python"],
        body="one two three four",
        image=DocumentImage("https://example.com/a.png", 800, 600),
    )
    data = build_json_ld(document, record, SITE)

    assert data["@context"] == "https://schema.org"
    assert data["@type"] == "Article"
    assert data["name"] == "Post 1"
    assert data["url"] == "https://example.com/post-1/"
    assert data["description"] == "A concise summary."
    assert data["datePublished"] == "2024-05-01T12:00:00+00:00"
    assert data["author"] == {"@type": "Person", "name": "Sam Writer", "url": "https://example.com/author/sam"}
    assert data["publisher"]["@type"] == "Organization"
    assert data["publisher"]["name"] == "Example Site"
    assert data["keyPoints"] == ["Point one", "Point two"]
    assert data["mainEntity"] == [
        {"@type": "Question", "name": "What is it?", "acceptedAnswer": {"@type": "Answer", "text": "A thing."}}
    ]
    assert data["image"] == {"@type": "ImageObject", "url": "https://example.com/a.png", "width": 800, "height": 600}
    assert data["articleSection"] == ["News", "Tech"]
    assert data["keywords"] == "ai, python"
    assert data["wordCount"] == 4
    assert "offers" not in data

    ai_summary = data["aiSummary"]
    assert ai_summary["@type"] == "DigitalDocument"
    assert ai_summary["dateCreated"] == "2024-05-03T09:00:00+00:00"
    assert ai_summary["creator"]["version"] == __version__

    assert validate_json_ld(data) == []


def test_product_fields(record):
    document = make_document(
        7,
        doc_type="product",
        permalink="https://example.com/shop/widget/",
        price=19.5,
        currency="EUR",
        in_stock=False,
        sku="W-7",
        brand="Acme",
        product_category="Gadgets",
    )
    data = build_json_ld(document, record, SITE)

    assert data["@type"] == "Product"
    assert data["url"] == "https://example.com/shop/widget/"
    assert data["offers"] == {
        "@type": "Offer",
        "price": 19.5,
        "priceCurrency": "EUR",
        "availability": "https://schema.org/OutOfStock",
        "url": "https://example.com/shop/widget/",
    }
    assert data["brand"] == {"@type": "Brand", "name": "Acme"}
    assert data["category"] == "Gadgets"
    assert data["sku"] == "W-7"
    assert "articleSection" not in data
    assert is_valid_json_ld(data)


def _minimal(**overrides):
    data = {"@context": "https://schema.org", "@type": "Article", "name": "N", "url": "https://example.com/n/"}
    data.update(overrides)
    return data


def test_accepts_article():
    assert validate_json_ld(_minimal()) == []


def test_rejects_unknown_type():
    assert validate_json_ld(_minimal(**{"@type": "Foo"})) == ["Invalid @type: Foo"]


@pytest.mark.parametrize("field", ["@context", "@type", "name", "url"])
def test_rejects_missing_required_field(field):
    data = _minimal()
    data[field] = ""
    assert f"Missing required field: {field}" in validate_json_ld(data)


def test_rejects_wrong_context():
    assert not is_valid_json_ld(_minimal(**{"@context": "http://schema.org"}))


def test_rejects_malformed_url():
    assert not is_valid_json_ld(_minimal(url="not a url"))


@pytest.mark.parametrize("value, ok", [
    ("2024-05-01", True),
    ("2024-05-01T12:00:00+00:00", True),
    ("2024-05-01T12:00:00Z", True),
    ("01/05/2024", False),
    ("yesterday", False),
])
def test_date_fields_must_be_iso8601(value, ok):
    assert is_valid_json_ld(_minimal(datePublished=value)) is ok
