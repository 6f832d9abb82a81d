"""Summary generation: content preparation, providers, validation and the pipeline."""

from ai_summary.summarization.batch import BatchJob, FixedDelayPacer, Pacer
from ai_summary.summarization.content import ContentPreparer, strip_markup, truncate_text
from ai_summary.summarization.prompt_builder import PromptBuilder
from ai_summary.summarization.providers import (
    GeminiProvider,
    OpenRouterProvider,
    ProviderFactory,
    SummaryProvider,
)
from ai_summary.summarization.response_parser import ResponseValidator, SummaryPayload
from ai_summary.summarization.service import GenerationPipeline

__all__ = [
    "BatchJob",
    "FixedDelayPacer",
    "Pacer",
    "ContentPreparer",
    "strip_markup",
    "truncate_text",
    "PromptBuilder",
    "GeminiProvider",
    "OpenRouterProvider",
    "ProviderFactory",
    "SummaryProvider",
    "ResponseValidator",
    "SummaryPayload",
    "GenerationPipeline",
]
