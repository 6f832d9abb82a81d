"""Unit tests for the batch job abstraction."""

import threading

from ai_summary.status import GenerationStatus
from ai_summary.summarization.batch import BatchJob, FixedDelayPacer
from tests.fakes import RecordingPacer


def test_runs_items_in_order_and_paces_between_them():
    seen = []
    pacer = RecordingPacer()

    def execute(item):
        seen.append(item)
        return GenerationStatus.SUCCESS

    result = BatchJob([1, 2, 3], execute, pacer=pacer).run()

    assert seen == [1, 2, 3]
    assert pacer.pauses == 2
    assert result.success == 3
    assert result.cancelled is False


def test_records_each_outcome():
    outcomes = {1: GenerationStatus.SUCCESS, 2: GenerationStatus.FAILED, 3: GenerationStatus.SKIPPED}
    result = BatchJob([1, 2, 3], outcomes.__getitem__).run()

    assert (result.success, result.failed, result.skipped) == (1, 1, 1)
    assert result.errors == ["Failed to generate summary for document 2"]


def test_cancel_before_start_runs_nothing():
    cancel = threading.Event()
    cancel.set()
    seen = []

    result = BatchJob([1, 2], lambda item: seen.append(item) or GenerationStatus.SUCCESS, cancel_event=cancel).run()

    assert seen == []
    assert result.cancelled is True
    assert result.total == 0


def test_cancel_between_items_stops_remaining():
    cancel = threading.Event()
    seen = []

    def execute(item):
        seen.append(item)
        if item == 2:
            cancel.set()
        return GenerationStatus.SUCCESS

    result = BatchJob([1, 2, 3, 4], execute, pacer=RecordingPacer(), cancel_event=cancel).run()

    assert seen == [1, 2]
    assert result.success == 2
    assert result.cancelled is True


def test_fixed_delay_pacer_sleeps_configured_delay():
    sleeps = []
    FixedDelayPacer(1.0, sleep=sleeps.append).pause()
    assert sleeps == [1.0]


def test_fixed_delay_pacer_zero_delay_does_not_sleep():
    sleeps = []
    FixedDelayPacer(0, sleep=sleeps.append).pause()
    assert sleeps == []
