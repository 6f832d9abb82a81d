"""
Fake implementations for testing.

Fakes are simplified working implementations of the service's interfaces
("fakes over mocks"): they keep real data structures and avoid external
dependencies such as provider APIs and Redis.

Key fakes:
- FakeProvider / FakeProviderFactory: scripted provider responses, call log
- InMemoryDocumentSource: host documents held in a dict
- FailingCacheBackend: every operation raises like an unreachable Redis
- FakeClock: manually advanced monotonic clock for TTL tests
- RecordingPacer: counts pauses instead of sleeping
"""

from tests.fakes.cache import FailingCacheBackend, FakeClock
from tests.fakes.documents import InMemoryDocumentSource, make_document
from tests.fakes.providers import FakeProvider, FakeProviderFactory, RecordingPacer

__all__ = [
    "FailingCacheBackend",
    "FakeClock",
    "InMemoryDocumentSource",
    "make_document",
    "FakeProvider",
    "FakeProviderFactory",
    "RecordingPacer",
]
