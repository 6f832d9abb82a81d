"""Sequential batch execution with pluggable pacing and cancellation."""
from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Generic, Iterable, Optional, TypeVar

from ai_summary.status import BulkGenerationResult, GenerationStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Pacer(ABC):
    """Called between two consecutive batch items."""

    @abstractmethod
    def pause(self) -> None:
        pass


class FixedDelayPacer(Pacer):
    """Sleeps a fixed number of seconds between items."""

    def __init__(self, delay: float = 1.0, sleep: Callable[[float], None] = time.sleep):
        self.delay = delay
        self._sleep = sleep

    def pause(self) -> None:
        if self.delay > 0:
            self._sleep(self.delay)


class BatchJob(Generic[T]):
    """Runs ``execute`` over ``items`` one at a time.

    The pacer runs between items, never after the last one. The cancel event
    is checked before each item; once set, the remaining items are not
    attempted and the result is flagged as cancelled.
    """

    def __init__(
        self,
        items: Iterable[T],
        execute: Callable[[T], GenerationStatus],
        pacer: Optional[Pacer] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.items = list(items)
        self.execute = execute
        self.pacer = pacer
        self.cancel_event = cancel_event

    def run(self) -> BulkGenerationResult:
        result = BulkGenerationResult()
        for index, item in enumerate(self.items):
            if index > 0 and self.pacer is not None:
                self.pacer.pause()

            if self.cancel_event is not None and self.cancel_event.is_set():
                logger.info(f"Batch cancelled after {index} of {len(self.items)} items")
                result.cancelled = True
                break

            result.record(item, self.execute(item))
        return result
