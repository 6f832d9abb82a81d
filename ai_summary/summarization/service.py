"""GenerationPipeline - Orchestrator for summary generation."""
from __future__ import annotations

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Optional

from ai_summary.documents import DocumentSource
from ai_summary.errors import DocumentNotFound, SummaryError
from ai_summary.status import BulkGenerationResult, GenerationStatus
from ai_summary.storage.cache import CachedSummaryStore
from ai_summary.storage.summary_storage import FaqItem, SummaryRecord
from ai_summary.summarization.batch import BatchJob, FixedDelayPacer, Pacer
from ai_summary.summarization.content import ContentPreparer
from ai_summary.summarization.prompt_builder import PromptBuilder
from ai_summary.summarization.providers import ProviderFactory, SummaryProvider
from ai_summary.summarization.response_parser import ResponseValidator

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GenerationPipeline:
    """Orchestrator for summary generation.

    Resolves the document, short-circuits when a summary already exists,
    prepares content, calls the configured provider once, validates the
    output and persists it. Every failure below this boundary becomes a
    ``False`` result plus a log line.
    """

    def __init__(
        self,
        documents: DocumentSource,
        store: CachedSummaryStore,
        provider_factory: ProviderFactory,
        *,
        preparer: Optional[ContentPreparer] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        validator: Optional[ResponseValidator] = None,
        auto_generate: bool = False,
        bulk_delay: float = 1.0,
        batch_delay: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize generation pipeline.

        Args:
            documents: Host document lookup
            store: Summary store with its cache tier
            provider_factory: Builds the configured provider per call
            preparer: Content normalizer
            prompt_builder: Builds the provider instruction
            validator: Sanitizes provider output
            auto_generate: Generate when a published document is saved
            bulk_delay: Seconds between items in ``bulk_generate``
            batch_delay: Seconds between items in ``regenerate_batch``
            sleep: Sleep function used by the default pacers
            clock: Source of ``generated_at`` timestamps
        """
        self.documents = documents
        self.store = store
        self.provider_factory = provider_factory
        self.preparer = preparer or ContentPreparer()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.validator = validator or ResponseValidator()
        self.auto_generate = auto_generate
        self.bulk_delay = bulk_delay
        self.batch_delay = batch_delay
        self._sleep = sleep
        self._clock = clock

    def generate(self, document_id: int, force: bool = False) -> bool:
        """Generate and store a summary for one document.

        Returns:
            True if a summary was generated or already existed
        """
        return self.generate_status(document_id, force) is not GenerationStatus.FAILED

    def generate_status(self, document_id: int, force: bool = False) -> GenerationStatus:
        try:
            return self._generate(document_id, force)
        except SummaryError as e:
            logger.warning(
                f"Summary generation failed: {e.message}",
                extra={"document_id": document_id, "error": e.error_code},
            )
            return GenerationStatus.FAILED
        except Exception as e:
            logger.exception(
                "Unexpected error during summary generation",
                extra={"document_id": document_id, "error": str(e)},
            )
            return GenerationStatus.FAILED

    def _generate(self, document_id: int, force: bool) -> GenerationStatus:
        document = self.documents.get(document_id)
        if document is None:
            raise DocumentNotFound(f"Document {document_id} not found")

        existing = self.store.get(document_id)
        if not force and existing is not None and existing.summary_text.strip():
            logger.debug("Summary already exists; skipping", extra={"document_id": document_id})
            return GenerationStatus.SKIPPED

        text = self.preparer.prepare(document)
        provider = self.provider_factory.create_provider()
        raw = self._call_provider(provider, text, force)
        payload = self.validator.validate(raw, structured=provider.structured)

        if provider.structured:
            key_points = list(payload.key_points)
            faq_items = [FaqItem(question=f.question, answer=f.answer) for f in payload.faq]
        else:
            # Free-text providers only replace the summary
            key_points = list(existing.key_points) if existing else []
            faq_items = list(existing.faq_items) if existing else []

        record = SummaryRecord(
            document_id=document_id,
            summary_text=payload.summary,
            key_points=key_points,
            faq_items=faq_items,
            provider=provider.name,
            generated_at=self._clock(),
            done=True,
        )
        self.store.set(document_id, record)

        logger.info(
            "Summary generated",
            extra={"document_id": document_id, "provider": provider.name},
        )
        return GenerationStatus.SUCCESS

    def _call_provider(self, provider: SummaryProvider, text: str, force: bool) -> str:
        identifier = f"{provider.name}|{provider.model}|{self.prompt_builder.language}|{text}"
        cache = self.store.cache
        if not force:
            cached = cache.get_api_response(identifier)
            if cached is not None:
                logger.debug("Using cached provider response", extra={"provider": provider.name})
                return cached

        raw = provider.generate(self.prompt_builder.build(text))
        cache.set_api_response(identifier, raw)
        return raw

    def bulk_generate(
        self,
        document_ids: Iterable[int],
        force: bool = False,
        *,
        pacer: Optional[Pacer] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BulkGenerationResult:
        """Generate sequentially, pausing between documents.

        Returns:
            Success/failed/skipped counters and per-document errors
        """
        job = BatchJob(
            document_ids,
            lambda document_id: self.generate_status(document_id, force),
            pacer=pacer or FixedDelayPacer(self.bulk_delay, self._sleep),
            cancel_event=cancel_event,
        )
        result = job.run()
        logger.info(
            f"Bulk generation finished: {result.success} success, "
            f"{result.failed} failed, {result.skipped} skipped"
        )
        return result

    def regenerate_batch(
        self,
        batch_size: int = 10,
        offset: int = 0,
        force: bool = False,
        *,
        pacer: Optional[Pacer] = None,
    ) -> Dict[str, Any]:
        """Process one page of published documents for client-driven pagination.

        Returns:
            ``{processed, errors, completed, next_offset}``
        """
        documents = self.documents.list_published(limit=batch_size, offset=offset)
        if not documents:
            return {"processed": 0, "errors": 0, "completed": True, "next_offset": offset}

        result = self.bulk_generate(
            [document.id for document in documents],
            force,
            pacer=pacer or FixedDelayPacer(self.batch_delay, self._sleep),
        )
        return {
            "processed": result.success + result.skipped,
            "errors": result.failed,
            "completed": len(documents) < batch_size,
            "next_offset": offset + batch_size,
        }

    def maybe_generate_on_save(self, document_id: int) -> bool:
        """Auto-generate hook for document saves.

        Returns:
            True if generation ran and succeeded
        """
        if not self.auto_generate:
            return False

        document = self.documents.get(document_id)
        if document is None or not document.is_publishable_type or not document.is_published:
            return False

        existing = self.store.get(document_id)
        if existing is not None and existing.done:
            return False

        return self.generate(document_id)

    def save_manual_edit(
        self,
        document_id: int,
        summary: str,
        key_points: Iterable[str] = (),
        faq: Iterable[Any] = (),
    ) -> SummaryRecord:
        """Store hand-edited fields, sanitized the same way as provider output.

        Raises:
            DocumentNotFound: no such document
        """
        if self.documents.get(document_id) is None:
            raise DocumentNotFound(f"Document {document_id} not found")

        payload = self.validator.clean(summary, key_points, faq)
        existing = self.store.get(document_id)
        record = SummaryRecord(
            document_id=document_id,
            summary_text=payload.summary,
            key_points=list(payload.key_points),
            faq_items=[FaqItem(question=f.question, answer=f.answer) for f in payload.faq],
            provider=existing.provider if existing else None,
            generated_at=existing.generated_at if existing else None,
            done=existing.done if existing else False,
        )
        self.store.set(document_id, record)
        logger.info("Summary edited manually", extra={"document_id": document_id})
        return record

    def delete(self, document_id: int) -> bool:
        deleted = self.store.delete(document_id)
        if deleted:
            logger.info("Summary deleted", extra={"document_id": document_id})
        return deleted

    def stats(self) -> Dict[str, Any]:
        return self.store.stats()
