"""Tests for the progress display module."""

import io
import threading

import pytest

from aznic.log_sanitizer import LogSanitizer
from aznic.modules.progress import ProgressDisplay, ProgressStage


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def err():
    return io.StringIO()


class TestFormatting:
    def test_step_printed_as_is(self, out, err):
        display = ProgressDisplay(output_file=out, error_file=err)

        display.step("Create subnets")

        assert out.getvalue() == "Create subnets\n"

    def test_detail_is_tab_indented(self, out, err):
        display = ProgressDisplay(output_file=out, error_file=err)

        display.detail("Create subnet: 'Front-end'")

        assert out.getvalue() == "\tCreate subnet: 'Front-end'\n"

    def test_unicode_symbols(self, out, err):
        display = ProgressDisplay(use_unicode=True, output_file=out, error_file=err)

        display.complete("Sample completed")

        assert out.getvalue() == "✓ Sample completed\n"

    def test_ascii_symbols(self, out, err):
        display = ProgressDisplay(use_unicode=False, output_file=out, error_file=err)

        display.complete("Sample completed")

        assert out.getvalue() == "OK Sample completed\n"

    def test_failures_and_warnings_go_to_error_file(self, out, err):
        display = ProgressDisplay(use_unicode=False, output_file=out, error_file=err)

        display.fail("Create VM 'vm' failed")
        display.warn("Cleaning up")

        assert out.getvalue() == ""
        assert err.getvalue() == "FAIL Create VM 'vm' failed\nWARN Cleaning up\n"


class TestRecording:
    def test_updates_recorded_in_order(self, out, err):
        display = ProgressDisplay(output_file=out, error_file=err)

        display.step("one")
        display.detail("two")
        display.fail("three")

        updates = display.get_updates()
        assert [u.stage for u in updates] == [
            ProgressStage.STEP,
            ProgressStage.DETAIL,
            ProgressStage.FAILED,
        ]
        assert display.messages() == ["one", "two", "three"]

    def test_get_updates_returns_copy(self, out, err):
        display = ProgressDisplay(output_file=out, error_file=err)
        display.step("one")

        display.get_updates().clear()

        assert display.messages() == ["one"]

    def test_thread_name_recorded(self, out, err):
        display = ProgressDisplay(output_file=out, error_file=err)
        worker = threading.Thread(target=display.step, args=("from worker",), name="storage-worker")

        worker.start()
        worker.join()

        assert display.get_updates()[0].thread == "storage-worker"

    def test_messages_are_sanitized(self, out, err):
        LogSanitizer.register_secret("very-secret-value")
        display = ProgressDisplay(output_file=out, error_file=err)

        display.fail("request failed: very-secret-value")

        assert "very-secret-value" not in err.getvalue()
        assert display.messages() == ["request failed: [REDACTED]"]
