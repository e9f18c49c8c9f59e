"""Unit tests for progress display module."""

import io
from unittest.mock import patch

from azvm.modules.progress import ProgressDisplay, ProgressStage


def _display(**kwargs):
    out, err = io.StringIO(), io.StringIO()
    return ProgressDisplay(output_file=out, error_file=err, **kwargs), out, err


class TestProgressDisplay:
    def test_header_underlined(self):
        progress, out, _ = _display()

        progress.header("Title")

        assert out.getvalue() == "Title\n=====\n"

    def test_section_with_icon(self):
        progress, out, _ = _display()

        progress.section("Creating resource group...", "📦")

        assert out.getvalue() == "\n📦 Creating resource group...\n"

    def test_section_icon_dropped_in_ascii_mode(self):
        progress, out, _ = _display(use_unicode=False)

        progress.section("Creating resource group...", "📦")

        assert out.getvalue() == "\nCreating resource group...\n"

    def test_status_glyphs(self):
        progress, out, _ = _display()

        progress.success("done")
        progress.warning("careful")

        assert out.getvalue() == "✓ done\n⚠ careful\n"

    def test_update_with_explicit_stage(self):
        progress, out, err = _display()

        progress.update("quota nearly used", ProgressStage.WARNING)

        assert out.getvalue() == "⚠ quota nearly used\n"
        assert err.getvalue() == ""

    def test_ascii_glyphs(self):
        progress, out, _ = _display(use_unicode=False)

        progress.success("done")

        assert out.getvalue() == "OK done\n"

    def test_errors_go_to_stderr(self):
        progress, out, err = _display()

        progress.error("boom")

        assert out.getvalue() == ""
        assert err.getvalue() == "❌ boom\n"

    def test_operation_with_estimate(self):
        progress, out, _ = _display()

        progress.start_operation("Creating Windows VM", estimated="2-3 minutes")

        assert "Creating Windows VM (this may take 2-3 minutes)..." in out.getvalue()

    @patch("azvm.modules.progress.time.time", side_effect=[100.0, 112.5])
    def test_complete_reports_elapsed_time(self, mock_time):
        progress, out, _ = _display()

        progress.start_operation("Creating Linux VM")
        progress.complete(success=True, message="VM created successfully!")

        assert "✓ VM created successfully! (12.5s)" in out.getvalue()
        assert progress.current_operation is None

    def test_failed_completion_goes_to_stderr(self):
        progress, _, err = _display()

        progress.start_operation("Creating Linux VM")
        progress.complete(success=False)

        assert "Creating Linux VM failed" in err.getvalue()

    def test_format_duration(self):
        progress, _, _ = _display()

        assert progress._format_duration(5.0) == "5.0s"
        assert progress._format_duration(150) == "2m 30s"
        assert progress._format_duration(3660) == "1h 1m"
