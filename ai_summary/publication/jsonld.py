"""
Structured data (schema.org JSON-LD) for documents with a summary.
"""

from __future__ import annotations

from typing import Any, Dict, List

from ai_summary import __version__
from ai_summary.config import SiteSettings
from ai_summary.documents import Document
from ai_summary.storage.summary_storage import SummaryRecord
from ai_summary.utils import is_iso8601, is_valid_url, isoformat

SCHEMA_CONTEXT = "https://schema.org"
ALLOWED_TYPES = ("Article", "Product", "BlogPosting", "WebPage")
REQUIRED_FIELDS = ("@context", "@type", "name", "url")
DATE_FIELDS = ("datePublished", "dateModified")

IN_STOCK = "https://schema.org/InStock"
OUT_OF_STOCK = "https://schema.org/OutOfStock"


def document_url(document: Document, site: SiteSettings) -> str:
    """Canonical URL of a document."""
    if document.permalink:
        return document.permalink
    return f"{site.url.rstrip('/')}/{document.slug}/"


def build_json_ld(document: Document, record: SummaryRecord, site: SiteSettings) -> Dict[str, Any]:
    """Build the JSON-LD object for a document and its summary record."""
    url = document_url(document, site)
    data: Dict[str, Any] = {
        "@context": SCHEMA_CONTEXT,
        "@type": "Product" if document.is_product else "Article",
        "name": document.title,
        "url": url,
        "description": record.summary_text,
    }
    if document.published_at:
        data["datePublished"] = isoformat(document.published_at)
    if document.modified_at:
        data["dateModified"] = isoformat(document.modified_at)

    if document.author_name:
        author: Dict[str, Any] = {"@type": "Person", "name": document.author_name}
        if document.author_url:
            author["url"] = document.author_url
        data["author"] = author

    data["publisher"] = {
        "@type": "Organization",
        "name": site.name,
        "url": site.url,
    }

    if record.key_points:
        data["keyPoints"] = list(record.key_points)

    if record.faq_items:
        data["mainEntity"] = [
            {
                "@type": "Question",
                "name": item.question,
                "acceptedAnswer": {"@type": "Answer", "text": item.answer},
            }
            for item in record.faq_items
        ]

    if document.image is not None:
        image: Dict[str, Any] = {"@type": "ImageObject", "url": document.image.url}
        if document.image.width:
            image["width"] = document.image.width
        if document.image.height:
            image["height"] = document.image.height
        data["image"] = image

    if document.is_product:
        data.update(_product_fields(document, url))
    else:
        data.update(_article_fields(document, record))

    data["aiSummary"] = {
        "@type": "DigitalDocument",
        "name": "AI Generated Summary",
        "description": "Machine-generated summary of the content",
        "dateCreated": isoformat(record.generated_at),
        "creator": {
            "@type": "SoftwareApplication",
            "name": "AI Summary Plugin",
            "version": __version__,
        },
    }
    return data


def _product_fields(document: Document, url: str) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    if document.price is not None:
        fields["offers"] = {
            "@type": "Offer",
            "price": document.price,
            "priceCurrency": document.currency or "USD",
            "availability": IN_STOCK if document.in_stock else OUT_OF_STOCK,
            "url": url,
        }
    if document.brand:
        fields["brand"] = {"@type": "Brand", "name": document.brand}
    if document.product_category:
        fields["category"] = document.product_category
    if document.sku:
        fields["sku"] = document.sku
    return fields


def _article_fields(document: Document, record: SummaryRecord) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}
    if document.categories:
        fields["articleSection"] = list(document.categories)
    if document.tags:
        fields["keywords"] = ", ".join(document.tags)
    fields["wordCount"] = len(document.body.split()) if document.body else 0
    return fields


def validate_json_ld(data: Dict[str, Any]) -> List[str]:
    """Check a JSON-LD object before it is served.

    Returns:
        List of problems; empty when the object is valid
    """
    errors: List[str] = []
    for field_name in REQUIRED_FIELDS:
        if not data.get(field_name):
            errors.append(f"Missing required field: {field_name}")

    context = data.get("@context")
    if context and context != SCHEMA_CONTEXT:
        errors.append(f"Invalid @context: {context}")

    schema_type = data.get("@type")
    if schema_type and schema_type not in ALLOWED_TYPES:
        errors.append(f"Invalid @type: {schema_type}")

    url = data.get("url")
    if url and not is_valid_url(url):
        errors.append(f"Invalid url: {url}")

    for field_name in DATE_FIELDS:
        if field_name in data and not is_iso8601(data[field_name]):
            errors.append(f"Invalid date in {field_name}")

    return errors


def is_valid_json_ld(data: Dict[str, Any]) -> bool:
    return not validate_json_ld(data)
