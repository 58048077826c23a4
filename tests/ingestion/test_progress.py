import pytest

from src.timeclock.timeclock.core.enums import ProgressPhase
from src.timeclock.timeclock.ingestion.progress import ProgressReporter


def test_reporter_forwards_events_in_order():
    events = []
    reporter = ProgressReporter(events.append)

    reporter.report(ProgressPhase.READING, 0, "Reading")
    reporter.report(ProgressPhase.PARSING, 10, "Parsed", total=4)
    reporter.report(ProgressPhase.INSERTING, 50, "Inserting", current=2, total=4)
    reporter.complete("Done", current=4, total=4)

    assert [e.phase for e in events] == [
        ProgressPhase.READING,
        ProgressPhase.PARSING,
        ProgressPhase.INSERTING,
        ProgressPhase.COMPLETE,
    ]
    assert events[-1].percent == 100
    assert reporter.finished


def test_percent_never_goes_down():
    events = []
    reporter = ProgressReporter(events.append)

    reporter.report(ProgressPhase.INSERTING, 60, "a")
    reporter.report(ProgressPhase.INSERTING, 40, "b")
    reporter.report(ProgressPhase.INSERTING, 150, "c")

    assert [e.percent for e in events] == [60, 60, 100]


def test_phase_cannot_be_revisited():
    reporter = ProgressReporter()
    reporter.report(ProgressPhase.INSERTING, 20, "Inserting")

    with pytest.raises(ValueError):
        reporter.report(ProgressPhase.PARSING, 30, "Parsing again")


def test_error_is_terminal_and_keeps_last_percent():
    events = []
    reporter = ProgressReporter(events.append)
    reporter.report(ProgressPhase.PARSING, 10, "Parsed")

    reporter.fail("disk full")
    reporter.fail("ignored")

    assert [(e.phase, e.percent) for e in events] == [
        (ProgressPhase.PARSING, 10),
        (ProgressPhase.ERROR, 10),
    ]
    with pytest.raises(RuntimeError):
        reporter.complete("too late")


def test_reporter_without_callback():
    reporter = ProgressReporter()
    reporter.complete("Done")

    assert reporter.percent == 100


def test_failing_callback_does_not_mask_the_error():
    def callback(event):
        raise RuntimeError("ui went away")

    reporter = ProgressReporter(callback)

    reporter.fail("Could not save x.csv")

    assert reporter.finished
