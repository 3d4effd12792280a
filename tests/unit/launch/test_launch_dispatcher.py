"""Tests for the launch dispatcher's tier fallthrough."""

from __future__ import annotations

import io
import subprocess
import unittest
from pathlib import Path
from unittest import mock

from scriptdeck.launch import HostPlatform, LaunchDispatcher, LaunchError, ProcessRunner
from scriptdeck.launch.strategies import LaunchRequest, StepMode

SCRIPT = Path("/scripts/tools/setup.sh")


class FakeRunner:
    def __init__(self, fail_on: tuple[str, ...] = (), returncode: int = 0) -> None:
        self.calls: list[tuple[StepMode, tuple[str, ...]]] = []
        self.fail_on = fail_on
        self.returncode = returncode

    def _record(self, mode: StepMode, argv) -> None:
        self.calls.append((mode, tuple(argv)))
        if argv[0] in self.fail_on:
            raise FileNotFoundError(argv[0])

    def spawn(self, argv) -> None:
        self._record(StepMode.SPAWN, argv)

    def run(self, argv) -> None:
        self.calls.append((StepMode.RUN, tuple(argv)))
        if argv[0] in self.fail_on:
            raise subprocess.CalledProcessError(1, list(argv))

    def handoff(self, argv) -> None:
        self._record(StepMode.HANDOFF, argv)

    def foreground(self, argv, request) -> int:
        self._record(StepMode.FOREGROUND, argv)
        return self.returncode


def _which(available: tuple[str, ...]):
    looked_up: list[str] = []

    def which(name: str):
        looked_up.append(name)
        return f"/usr/bin/{name}" if name in available else None

    return which, looked_up


class LaunchDispatcherTests(unittest.TestCase):
    def test_headless_linux_without_tmux_runs_in_foreground(self) -> None:
        runner = FakeRunner()
        which, looked_up = _which(("xterm", "gnome-terminal"))
        dispatcher = LaunchDispatcher(HostPlatform.LINUX, environ={}, which=which, runner=runner)

        self.assertEqual(dispatcher.launch(SCRIPT, "setup.sh"), "foreground")
        self.assertEqual(runner.calls, [(StepMode.FOREGROUND, ("bash", str(SCRIPT)))])
        self.assertNotIn("xterm", looked_up)
        self.assertNotIn("gnome-terminal", looked_up)

    def test_desktop_linux_spawns_terminal(self) -> None:
        runner = FakeRunner()
        which, _ = _which(("xterm",))
        dispatcher = LaunchDispatcher(HostPlatform.LINUX, environ={"DISPLAY": ":0"}, which=which, runner=runner)

        self.assertEqual(dispatcher.launch(SCRIPT, "setup.sh"), "desktop-terminal")
        self.assertEqual(len(runner.calls), 1)
        self.assertEqual(runner.calls[0][0], StepMode.SPAWN)
        self.assertEqual(runner.calls[0][1][:2], ("xterm", "-e"))

    def test_failed_spawn_falls_through_to_next_tier(self) -> None:
        runner = FakeRunner(fail_on=("xterm",))
        which, _ = _which(("xterm", "tmux"))
        dispatcher = LaunchDispatcher(
            HostPlatform.LINUX,
            environ={"DISPLAY": ":0", "TMUX": "sock"},
            which=which,
            runner=runner,
        )

        self.assertEqual(dispatcher.launch(SCRIPT, "setup.sh"), "tmux-window")
        self.assertEqual([argv[0] for _, argv in runner.calls], ["xterm", "tmux"])

    def test_tmux_session_attaches_after_creating(self) -> None:
        runner = FakeRunner()
        which, _ = _which(("tmux",))
        dispatcher = LaunchDispatcher(HostPlatform.OTHER, environ={}, which=which, runner=runner)

        self.assertEqual(dispatcher.launch(SCRIPT, "setup.sh"), "tmux-session")
        self.assertEqual([mode for mode, _ in runner.calls], [StepMode.RUN, StepMode.HANDOFF])
        session = runner.calls[0][1][4]
        self.assertEqual(runner.calls[1][1], ("tmux", "attach-session", "-t", session))

    def test_refused_tmux_session_falls_through_to_foreground(self) -> None:
        runner = FakeRunner(fail_on=("tmux",))
        which, _ = _which(("tmux",))
        dispatcher = LaunchDispatcher(HostPlatform.LINUX, environ={}, which=which, runner=runner)

        self.assertEqual(dispatcher.launch(SCRIPT, "setup.sh"), "foreground")
        self.assertEqual(
            [mode for mode, _ in runner.calls],
            [StepMode.RUN, StepMode.FOREGROUND],
        )

    def test_repeat_launch_uses_a_fresh_tmux_session(self) -> None:
        runner = FakeRunner()
        which, _ = _which(("tmux",))
        dispatcher = LaunchDispatcher(HostPlatform.OTHER, environ={}, which=which, runner=runner)

        dispatcher.launch(SCRIPT, "setup.sh")
        dispatcher.launch(SCRIPT, "setup.sh")

        created = [argv[4] for mode, argv in runner.calls if mode is StepMode.RUN]
        self.assertEqual(len(created), 2)
        self.assertNotEqual(created[0], created[1])

    def test_windows_batch_file_falls_back_to_cmd(self) -> None:
        runner = FakeRunner()
        which, _ = _which(())
        dispatcher = LaunchDispatcher(HostPlatform.WINDOWS, environ={}, which=which, runner=runner)
        runner.spawn = mock.Mock(side_effect=OSError("start failed"))

        self.assertEqual(dispatcher.launch(Path("C:/s/run.bat"), "run.bat"), "foreground")
        self.assertEqual(runner.calls, [(StepMode.FOREGROUND, ("cmd", "/C", str(Path("C:/s/run.bat"))))])

    def test_last_tier_failure_raises(self) -> None:
        runner = FakeRunner(fail_on=("bash",))
        which, _ = _which(())
        dispatcher = LaunchDispatcher(HostPlatform.LINUX, environ={}, which=which, runner=runner)

        with self.assertRaises(LaunchError):
            dispatcher.launch(SCRIPT, "setup.sh")

    def test_windows_failure_falls_back_to_foreground(self) -> None:
        runner = FakeRunner(fail_on=("cmd",))
        which, _ = _which(())
        dispatcher = LaunchDispatcher(HostPlatform.WINDOWS, environ={}, which=which, runner=runner)

        self.assertEqual(dispatcher.launch(Path("C:/s/install.ps1"), "install.ps1"), "foreground")
        self.assertEqual(runner.calls[-1][1][:2], ("pwsh", "-File"))

    def test_nonzero_exit_is_not_a_launch_failure(self) -> None:
        runner = FakeRunner(returncode=3)
        which, _ = _which(())
        dispatcher = LaunchDispatcher(HostPlatform.MACOS, environ={}, which=which, runner=runner)
        runner.fail_on = ("osascript",)

        self.assertEqual(dispatcher.launch(SCRIPT, "setup.sh"), "foreground")

    def test_empty_table_raises(self) -> None:
        dispatcher = LaunchDispatcher(
            HostPlatform.LINUX,
            environ={},
            which=lambda _name: None,
            runner=FakeRunner(),
            table={HostPlatform.OTHER: ()},
        )
        with self.assertRaises(LaunchError):
            dispatcher.launch(SCRIPT, "setup.sh")


class ProcessRunnerTests(unittest.TestCase):
    def test_foreground_prints_banner_and_waits(self) -> None:
        out = io.StringIO()
        waited: list[bool] = []
        runner = ProcessRunner(stdout=out, wait_for_enter=lambda: waited.append(True))
        request = LaunchRequest(path=SCRIPT, display_name="setup.sh")
        completed = subprocess.CompletedProcess(["bash", str(SCRIPT)], 0)

        with mock.patch("scriptdeck.launch.dispatcher.subprocess.run", return_value=completed) as run:
            code = runner.foreground(("bash", str(SCRIPT)), request)

        self.assertEqual(code, 0)
        run.assert_called_once_with(["bash", str(SCRIPT)], check=False)
        text = out.getvalue()
        self.assertIn("=== Executing script directly (tmux not available) ===", text)
        self.assertIn("Script: setup.sh", text)
        self.assertIn("Script execution completed. Press Enter to continue...", text)
        self.assertEqual(waited, [True])

    def test_handoff_suspends_ui(self) -> None:
        events: list[str] = []

        class Suspend:
            def __enter__(self):
                events.append("suspend")

            def __exit__(self, *exc):
                events.append("resume")
                return False

        runner = ProcessRunner(suspend_ui=Suspend)
        with mock.patch(
            "scriptdeck.launch.dispatcher.subprocess.run",
            side_effect=lambda *a, **k: events.append("run"),
        ):
            runner.handoff(("tmux", "attach-session", "-t", "x"))

        self.assertEqual(events, ["suspend", "run", "resume"])

    def test_run_waits_and_raises_on_nonzero_exit(self) -> None:
        runner = ProcessRunner()
        error = subprocess.CalledProcessError(1, ["tmux", "new-session"], stderr=b"duplicate session")
        with mock.patch("scriptdeck.launch.dispatcher.subprocess.run", side_effect=error) as run:
            with self.assertRaises(subprocess.CalledProcessError):
                runner.run(("tmux", "new-session", "-d", "-s", "x"))

        args, kwargs = run.call_args
        self.assertEqual(args[0], ["tmux", "new-session", "-d", "-s", "x"])
        self.assertTrue(kwargs["check"])

    def test_spawn_detaches_process(self) -> None:
        runner = ProcessRunner()
        with mock.patch("scriptdeck.launch.dispatcher.subprocess.Popen") as popen:
            runner.spawn(("xterm", "-e", "bash"))

        args, kwargs = popen.call_args
        self.assertEqual(args[0], ["xterm", "-e", "bash"])
        self.assertIs(kwargs["stdin"], subprocess.DEVNULL)
        self.assertTrue(kwargs.get("start_new_session") or kwargs.get("creationflags") is not None)


if __name__ == "__main__":
    unittest.main()
