from __future__ import annotations

from typing import Generator

import pytest

from ai_summary.config import AppSettings
from ai_summary.context import AppContext, build_context
from ai_summary.db.session import get_engine, get_sessionmaker, init_db
from ai_summary.storage.cache import MemoryCacheBackend
from tests.fakes import FakeClock, FakeProvider, FakeProviderFactory, InMemoryDocumentSource, make_document

OPENROUTER_KEY = "sk-or-v1-abcdefghijklmnopqrstuvwxyz0123"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's .env and provider variables out of tests."""
    monkeypatch.chdir(tmp_path)
    for var in (
        "AI_SUMMARY_PROVIDER", "PROVIDER", "AI_SUMMARY_API_KEY", "API_KEY",
        "AI_SUMMARY_TEMPERATURE", "TEMPERATURE", "DATABASE_URL", "LOG_FORMAT",
        "AI_SUMMARY_AUTO_GENERATE", "AUTO_GENERATE",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        api_key=OPENROUTER_KEY,
        database_url_override="sqlite://",
        cache={"backend": "memory"},
        site={"name": "Example Site", "url": "https://example.com"},
        log_format="text",
        bulk_delay_seconds=0,
        batch_delay_seconds=0,
    )


@pytest.fixture
def engine(settings):
    engine = get_engine(settings.database_url)
    init_db(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(engine):
    return get_sessionmaker(engine)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def documents() -> InMemoryDocumentSource:
    return InMemoryDocumentSource([make_document(1), make_document(2), make_document(3)])


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_backend(clock) -> MemoryCacheBackend:
    return MemoryCacheBackend(clock=clock)


@pytest.fixture
def context(settings, engine, documents, cache_backend, provider) -> AppContext:
    return build_context(
        settings,
        engine=engine,
        documents=documents,
        cache_backend=cache_backend,
        provider_factory=FakeProviderFactory(provider),
    )


@pytest.fixture
def pipeline(context):
    return context.pipeline


@pytest.fixture
def test_client(context) -> Generator:
    from fastapi.testclient import TestClient

    from ai_summary.server import create_app

    client = TestClient(create_app(context=context))
    try:
        yield client
    finally:
        client.close()
