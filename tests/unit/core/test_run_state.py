"""Tests for run state objects."""

from pdfmerge.core.state import ConversionRun, ProgressUpdate, RunResult, RunStatus


class TestRunStatus:
    def test_terminal_states(self):
        assert RunStatus.COMPLETED.is_terminal
        assert RunStatus.FAILED.is_terminal
        assert RunStatus.TIMED_OUT.is_terminal
        assert not RunStatus.IDLE.is_terminal
        assert not RunStatus.RUNNING.is_terminal


class TestProgressUpdate:
    def test_percent(self):
        assert ProgressUpdate(processed=5, total=12).percent == 5 / 12 * 100

    def test_empty_total(self):
        assert ProgressUpdate(processed=0, total=0).fraction == 0.0


class TestConversionRun:
    """Tests for ConversionRun counters."""

    def test_page_counter_starts_at_one(self):
        run = ConversionRun(run_id="abc", total_files=3)
        assert run.next_page_number() == 1
        assert run.next_page_number() == 2
        assert run.page_counter == 2

    def test_advance_accumulates(self):
        run = ConversionRun(run_id="abc", total_files=12)

        assert run.advance(5) == ProgressUpdate(processed=5, total=12)
        assert run.advance(5) == ProgressUpdate(processed=10, total=12)
        assert run.advance(2) == ProgressUpdate(processed=12, total=12)

    def test_defaults(self):
        run = ConversionRun(run_id="abc", total_files=1)
        assert run.status is RunStatus.RUNNING
        assert run.skipped_files == []
        assert not run.cancelled

        run.cancel()
        assert run.cancelled


def test_run_result_success():
    assert RunResult(status=RunStatus.COMPLETED).success
    assert not RunResult(status=RunStatus.TIMED_OUT).success
