"""Unit tests for the generation pipeline."""

import json
import threading

from ai_summary.storage.summary_storage import FaqItem, SummaryRecord
from ai_summary.summarization.service import GenerationPipeline
from tests.fakes import FakeProvider, FakeProviderFactory, RecordingPacer, make_document


def test_generate_calls_provider_once_and_stores_record(pipeline, provider, context):
    assert pipeline.generate(1) is True

    assert len(provider.calls) == 1
    assert "in English" in provider.calls[0]
    assert "Body of post 1 with some content." in provider.calls[0]

    record = context.store.get(1)
    assert record.summary_text == "A short generated summary."
    assert record.provider == "openrouter"
    assert record.done is True
    assert record.generated_at is not None


def test_generate_is_idempotent_without_force(pipeline, provider):
    assert pipeline.generate(1)
    assert pipeline.generate(1)
    assert len(provider.calls) == 1


def test_force_regenerates(pipeline, provider, context):
    pipeline.generate(1)
    provider.response = "A newer summary."

    assert pipeline.generate(1, force=True)
    assert len(provider.calls) == 2
    assert context.store.get(1).summary_text == "A newer summary."


def test_missing_document_fails_without_provider_call(pipeline, provider):
    assert pipeline.generate(999) is False
    assert provider.calls == []


def test_empty_content_fails(pipeline, provider, documents, context):
    documents.add(make_document(4, body="<p>   </p>"))
    assert pipeline.generate(4) is False
    assert provider.calls == []
    assert context.store.get(4) is None


def test_provider_failure_returns_false_and_stores_nothing(pipeline, provider, context):
    provider.fail = True
    assert pipeline.generate(1) is False
    assert context.store.get(1) is None


def test_configuration_error_returns_false(context):
    pipeline = GenerationPipeline(context.documents, context.store, FakeProviderFactory(None))
    assert pipeline.generate(1) is False


def test_unexpected_error_returns_false(pipeline, documents):
    class BrokenSource:
        def get(self, document_id):
            raise RuntimeError("database went away")

    pipeline.documents = BrokenSource()
    assert pipeline.generate(1) is False


def test_text_regeneration_keeps_key_points_and_faq(pipeline, provider, context):
    context.store.set(1, SummaryRecord(
        document_id=1,
        summary_text="Old summary",
        key_points=["first", "second"],
        faq_items=[FaqItem("Q?", "A.")],
        done=True,
    ))

    assert pipeline.generate(1, force=True)
    record = context.store.get(1)
    assert record.summary_text == "A short generated summary."
    assert record.key_points == ["first", "second"]
    assert record.faq_items == [FaqItem("Q?", "A.")]


def test_structured_provider_replaces_all_fields(context):
    provider = FakeProvider(
        structured=True,
        response=json.dumps({
            "summary": "Structured summary",
            "key_points": ["a", "", "b"],
            "faq": [{"question": "Q?", "answer": "A."}, {"question": "Only question"}],
        }),
    )
    pipeline = GenerationPipeline(context.documents, context.store, FakeProviderFactory(provider))

    assert pipeline.generate(2)
    record = context.store.get(2)
    assert record.summary_text == "Structured summary"
    assert record.key_points == ["a", "b"]
    assert record.faq_items == [FaqItem("Q?", "A.")]


def test_malformed_structured_response_fails(context):
    provider = FakeProvider(structured=True, response='{"key_points": []}')
    pipeline = GenerationPipeline(context.documents, context.store, FakeProviderFactory(provider))
    assert pipeline.generate(2) is False
    assert context.store.get(2) is None


def test_raw_response_cache_is_reused_when_not_forced(pipeline, provider, context):
    pipeline.generate(1)
    context.store.storage.delete(1)
    context.store.cache.delete_summary(1)

    assert pipeline.generate(1)
    assert len(provider.calls) == 1


def test_force_bypasses_raw_response_cache(pipeline, provider):
    pipeline.generate(1)
    pipeline.generate(1, force=True)
    assert len(provider.calls) == 2


def test_bulk_generate_counts_outcomes(pipeline, provider, documents):
    documents.add(make_document(2, body=""))
    pacer = RecordingPacer()

    result = pipeline.bulk_generate([1, 2, 3], pacer=pacer)

    assert (result.success, result.failed, result.skipped) == (2, 1, 0)
    assert result.errors == ["Failed to generate summary for document 2"]
    assert pacer.pauses == 2
    assert len(provider.calls) == 2


def test_bulk_generate_skips_existing(pipeline, provider):
    pipeline.generate(1)
    result = pipeline.bulk_generate([1, 2], pacer=RecordingPacer())
    assert (result.success, result.failed, result.skipped) == (1, 0, 1)


def test_bulk_generate_default_pacer_uses_bulk_delay(context):
    sleeps = []
    pipeline = GenerationPipeline(
        context.documents,
        context.store,
        FakeProviderFactory(FakeProvider()),
        bulk_delay=1.0,
        sleep=sleeps.append,
    )
    pipeline.bulk_generate([1, 2, 3])
    assert sleeps == [1.0, 1.0]


def test_bulk_generate_cancellation(pipeline, provider):
    cancel = threading.Event()
    pacer = RecordingPacer(on_pause=lambda count: cancel.set())

    result = pipeline.bulk_generate([1, 2, 3], pacer=pacer, cancel_event=cancel)

    assert result.cancelled is True
    assert result.success == 1
    assert len(provider.calls) == 1


def test_regenerate_batch_paginates(pipeline, documents):
    for document_id in range(4, 8):
        documents.add(make_document(document_id))

    first = pipeline.regenerate_batch(batch_size=5, offset=0, pacer=RecordingPacer())
    assert first == {"processed": 5, "errors": 0, "completed": False, "next_offset": 5}

    second = pipeline.regenerate_batch(batch_size=5, offset=5, pacer=RecordingPacer())
    assert second == {"processed": 2, "errors": 0, "completed": True, "next_offset": 10}


def test_regenerate_batch_past_end(pipeline):
    assert pipeline.regenerate_batch(batch_size=10, offset=50) == {
        "processed": 0,
        "errors": 0,
        "completed": True,
        "next_offset": 50,
    }


def test_regenerate_batch_counts_errors(pipeline, documents):
    documents.add(make_document(2, body=""))
    progress = pipeline.regenerate_batch(batch_size=10, offset=0, pacer=RecordingPacer())
    assert progress["processed"] == 2
    assert progress["errors"] == 1
    assert progress["completed"] is True


def test_regenerate_batch_skips_unpublished(pipeline, provider, documents):
    documents.add(make_document(2, status="draft"))
    pipeline.regenerate_batch(batch_size=10, offset=0, pacer=RecordingPacer())
    assert len(provider.calls) == 2


class TestAutoGenerateOnSave:

    def test_disabled_does_nothing(self, pipeline, provider):
        pipeline.auto_generate = False
        assert pipeline.maybe_generate_on_save(1) is False
        assert provider.calls == []

    def test_generates_for_published_document(self, pipeline, provider):
        pipeline.auto_generate = True
        assert pipeline.maybe_generate_on_save(1) is True
        assert len(provider.calls) == 1

    def test_skips_drafts(self, pipeline, provider, documents):
        pipeline.auto_generate = True
        documents.add(make_document(5, status="draft"))
        assert pipeline.maybe_generate_on_save(5) is False
        assert provider.calls == []

    def test_skips_other_types(self, pipeline, provider, documents):
        pipeline.auto_generate = True
        documents.add(make_document(6, doc_type="attachment"))
        assert pipeline.maybe_generate_on_save(6) is False

    def test_skips_when_already_done(self, pipeline, provider):
        pipeline.auto_generate = True
        pipeline.generate(1)
        assert pipeline.maybe_generate_on_save(1) is False
        assert len(provider.calls) == 1


def test_save_manual_edit_sanitizes(pipeline, context):
    record = pipeline.save_manual_edit(
        1,
        "<strong>Edited</strong> summary",
        ["<b>one</b>", "", "two"],
        [{"question": "Q?", "answer": "A."}, {"question": "Q2?", "answer": ""}],
    )
    assert record.summary_text == "Edited summary"
    assert record.key_points == ["one", "two"]
    assert record.faq_items == [FaqItem("Q?", "A.")]
    assert context.store.get(1).key_points == ["one", "two"]


def test_delete_and_stats(pipeline, context):
    pipeline.generate(1)
    pipeline.generate(2)
    assert pipeline.stats() == {"total_summaries": 2, "by_provider": {"openrouter": 2}}

    assert pipeline.delete(1) is True
    assert pipeline.delete(1) is False
    assert context.store.get(1) is None
    assert pipeline.stats()["total_summaries"] == 1


def test_generate_with_control_characters_in_body(pipeline, provider, documents):
    documents.add(make_document(7, body="Page one text.\fPage two text."))

    assert pipeline.generate(7) is True
    assert "Page one text. Page two text." in provider.calls[0]
