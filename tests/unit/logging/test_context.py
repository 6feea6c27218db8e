"""Unit tests for logging context module."""

import logging
import threading

from fetchkit.logging.context import (
    WorkerContextFilter,
    clear_worker_context,
    get_worker_context,
    set_worker_context,
    worker_context,
)


def _record(msg: str = "test message") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestSetAndGetWorkerContext:
    """Tests for set_worker_context and get_worker_context functions."""

    def test_set_and_get_full_context(self) -> None:
        set_worker_context("01", "*.part")

        assert get_worker_context() == ("01", "*.part")

        clear_worker_context()

    def test_set_worker_only(self) -> None:
        set_worker_context("02")

        assert get_worker_context() == ("02", None)

        clear_worker_context()

    def test_clear_context(self) -> None:
        set_worker_context("01", "*.log")
        clear_worker_context()

        assert get_worker_context() == (None, None)


class TestWorkerContextManager:
    """Tests for worker_context context manager."""

    def test_nested_context_managers(self) -> None:
        """Nested contexts restore the outer values on exit."""
        with worker_context("01", "*.log"):
            with worker_context("02", "*.tmp"):
                assert get_worker_context() == ("02", "*.tmp")

            assert get_worker_context() == ("01", "*.log")

    def test_context_restored_on_exception(self) -> None:
        clear_worker_context()
        try:
            with worker_context("01", "*.log"):
                raise ValueError("test error")
        except ValueError:
            pass

        assert get_worker_context() == (None, None)

    def test_context_is_thread_local(self) -> None:
        """A worker thread's context does not leak into the caller."""
        clear_worker_context()
        seen = []

        def work() -> None:
            with worker_context("03", "*.part"):
                seen.append(get_worker_context())

        thread = threading.Thread(target=work)
        thread.start()
        thread.join()

        assert seen == [("03", "*.part")]
        assert get_worker_context() == (None, None)


class TestWorkerContextFilter:
    """Tests for WorkerContextFilter logging filter."""

    def test_filter_injects_context(self) -> None:
        record = _record()

        with worker_context("05", "*.log"):
            result = WorkerContextFilter().filter(record)

        assert result is True
        assert record.worker_id == "05"
        assert record.pattern == "*.log"
        assert record.worker_tag == "[W05:*.log] "

    def test_filter_with_worker_only(self) -> None:
        record = _record()

        with worker_context("07"):
            WorkerContextFilter().filter(record)

        assert record.worker_tag == "[W07] "

    def test_filter_with_no_context(self) -> None:
        clear_worker_context()
        record = _record()

        assert WorkerContextFilter().filter(record) is True
        assert record.worker_id is None
        assert record.worker_tag == ""
