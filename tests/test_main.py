"""Tests for the jdd main entry point.

This module tests the main controller including:
- Component initialization
- Signal handling
- Initial scan and watch loop
- Cleanup procedures
"""

import signal
import threading
from unittest.mock import MagicMock, patch

import pytest

from jdd.engine.session import RootError, WatchSession
from jdd.main import JDDMain, run_jdd
from jdd.reporting import OutcomeReporter


@pytest.fixture
def restore_signals():
    """Put the original handlers back after tests that install ours."""
    original_term = signal.getsignal(signal.SIGTERM)
    original_int = signal.getsignal(signal.SIGINT)
    yield
    signal.signal(signal.SIGTERM, original_term)
    signal.signal(signal.SIGINT, original_int)


class TestJDDMainInit:
    """Tests for JDDMain initialization."""

    def test_init(self, make_config, logger):
        """Test initializing main controller."""
        main = JDDMain(make_config(), logger)

        assert main.pid_file is None
        assert not main.shutdown_event.is_set()
        assert main.session is None
        assert main.reporter is None

    def test_initialize_components(self, make_config, logger):
        """Test components are created but the session is not started."""
        main = JDDMain(make_config(exclude=["*.tmp"], dry_run=True), logger)

        main.initialize_components()

        assert isinstance(main.reporter, OutcomeReporter)
        assert isinstance(main.session, WatchSession)
        assert main.session.report is main.reporter
        assert not main.session.ready.is_set()

    def test_initialize_components_bad_root(self, root_dir, make_config, logger):
        """Test an invalid root fails initialization."""
        main = JDDMain(make_config(root=str(root_dir / "missing")), logger)

        with pytest.raises(RootError):
            main.initialize_components()


class TestSignalHandlers:
    """Tests for signal handling."""

    def test_handler_sets_shutdown(self, make_config, logger, restore_signals):
        """Test SIGTERM requests shutdown and cancels the scan."""
        main = JDDMain(make_config(), logger)
        main.initialize_components()
        main.setup_signal_handlers()

        handler = signal.getsignal(signal.SIGTERM)
        handler(signal.SIGTERM, None)

        assert main.shutdown_event.is_set()
        assert main.session.stop_event.is_set()
        assert signal.getsignal(signal.SIGINT) is handler


class TestWatch:
    """Tests for the watch loop."""

    def test_scans_then_watches_until_shutdown(self, root_dir, make_config, logger):
        """Test the initial scan runs and the loop exits on shutdown."""
        (root_dir / "15.23 Notes.txt").write_text("x")
        main = JDDMain(make_config(), logger)
        main.initialize_components()

        timer = threading.Timer(0.3, main.shutdown_event.set)
        timer.start()
        try:
            assert main.watch() == 0
        finally:
            timer.cancel()
            main.cleanup()

        assert (root_dir / "10-19" / "15" / "15.23" / "15.23 Notes.txt").is_file()
        assert main.session.scan_report.touched == 1

    def test_dead_watcher_is_an_error(self, make_config, logger):
        """Test losing the subscription ends the loop with failure."""
        main = JDDMain(make_config(), logger)
        main.initialize_components()

        with patch.object(WatchSession, "is_running", return_value=False):
            try:
                assert main.watch() == 1
            finally:
                main.cleanup()


class TestCleanup:
    """Tests for cleanup."""

    def test_cleanup_removes_pid_file(self, tmp_path, make_config, logger):
        """Test the PID file is removed and the session stopped."""
        pid_file = tmp_path / "jdd.pid"
        pid_file.write_text("1\n")
        main = JDDMain(make_config(), logger, pid_file=str(pid_file))
        main.initialize_components()
        main.session = MagicMock()

        main.cleanup()

        main.session.stop.assert_called_once()
        assert not pid_file.exists()

    def test_cleanup_without_components(self, make_config, logger):
        """Test cleanup before initialization is harmless."""
        JDDMain(make_config(), logger).cleanup()


class TestRun:
    """Tests for run() exit codes."""

    def test_success(self, make_config, logger):
        main = JDDMain(make_config(), logger)

        with patch.object(main, "setup_signal_handlers"), patch.object(
            main, "watch", return_value=0
        ):
            assert main.run() == 0

    def test_startup_error(self, root_dir, make_config, logger):
        """Test JDD errors at startup give exit code 1."""
        main = JDDMain(make_config(root=str(root_dir / "missing")), logger)

        assert main.run() == 1

    def test_keyboard_interrupt(self, make_config, logger):
        main = JDDMain(make_config(), logger)

        with patch.object(main, "setup_signal_handlers"), patch.object(
            main, "watch", side_effect=KeyboardInterrupt
        ):
            assert main.run() == 130

    def test_unexpected_error(self, make_config, logger):
        """Test unexpected exceptions are logged and give exit code 1."""
        main = JDDMain(make_config(), logger)

        with patch.object(main, "setup_signal_handlers"), patch.object(
            main, "watch", side_effect=RuntimeError("boom")
        ), patch.object(main, "cleanup") as cleanup:
            assert main.run() == 1

        cleanup.assert_called_once()

    def test_run_jdd(self, make_config, logger):
        """Test the module-level helper delegates to JDDMain.run."""
        with patch("jdd.main.JDDMain") as main_cls:
            main_cls.return_value.run.return_value = 0

            assert run_jdd(make_config(), logger, pid_file="jdd.pid") == 0

        main_cls.assert_called_once()
        assert main_cls.call_args.kwargs["pid_file"] == "jdd.pid"
