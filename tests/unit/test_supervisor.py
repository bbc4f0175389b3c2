#
# tests/unit/test_supervisor.py
#
"""
Tests for launching and supervising the runner process.
"""

import json
from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from interncli.config import ExternalsConfig, TestRunConfig
from interncli.output import console_sink, get_logger, set_logger
from interncli.runtime import ProcessSupervisor, RunFailed, RunSuccess, run_tests
from interncli.runtime.protocols import FAILED_RUN_MESSAGE, RunSupervisor
from interncli.runtime.supervisor import WATCH_ARGS
from interncli.state import RunState, RunStatus

MakeExecutable = Callable[[str, str], Path]


@pytest.fixture
def restore_sink() -> Iterator[None]:
    yield
    set_logger(console_sink)


def _recording_script(make_executable: MakeExecutable, name: str, record: Path, exit_code: int = 0) -> Path:
    return make_executable(name, f'printf "%s\\n" "$@" > "{record}"\nexit {exit_code}')


@pytest.mark.asyncio
class TestProcessSupervisor:
    async def test_exit_zero_succeeds(
        self, project_dir: Path, make_executable: MakeExecutable, messages: list[str]
    ) -> None:
        runner = make_executable("intern", "exit 0")
        supervisor = ProcessSupervisor(sink=messages.append, runner_path=runner, cwd=project_dir)

        outcome = await supervisor.run(TestRunConfig())

        assert outcome == RunSuccess()
        assert outcome.success is True
        assert outcome.exit_code == 0
        assert any('testing "my-app"' in message for message in messages)
        assert "completed successfully" in messages[-1]

    async def test_nonzero_exit_is_normalized(
        self, project_dir: Path, make_executable: MakeExecutable, messages: list[str]
    ) -> None:
        runner = make_executable("intern", "exit 7")
        supervisor = ProcessSupervisor(sink=messages.append, runner_path=runner, cwd=project_dir)

        outcome = await supervisor.run(TestRunConfig())

        assert isinstance(outcome, RunFailed)
        assert outcome.message == FAILED_RUN_MESSAGE
        assert outcome.exit_code == 1
        assert "failed" in messages[-1]

    async def test_missing_executable_fails_with_error_text(
        self, project_dir: Path, tmp_path: Path, messages: list[str]
    ) -> None:
        missing = tmp_path / "bin" / "does-not-exist"
        supervisor = ProcessSupervisor(sink=messages.append, runner_path=missing, cwd=project_dir)

        outcome = await supervisor.run(TestRunConfig())

        assert isinstance(outcome, RunFailed)
        assert outcome.exit_code == 1
        assert "No such file or directory" in outcome.message
        assert "failed" in messages[-1]

    async def test_unlaunchable_arguments_fail_the_run(
        self, project_dir: Path, make_executable: MakeExecutable, messages: list[str]
    ) -> None:
        runner = make_executable("intern", "exit 0")
        supervisor = ProcessSupervisor(sink=messages.append, runner_path=runner, cwd=project_dir)

        outcome = await supervisor.run(TestRunConfig(filter="a\x00b"))

        assert isinstance(outcome, RunFailed)
        assert outcome.exit_code == 1
        assert "null byte" in outcome.message
        assert "failed" in messages[-1]

    async def test_unwritable_reporter_output_fails_the_run(
        self, project_dir: Path, make_executable: MakeExecutable, tmp_path: Path, messages: list[str]
    ) -> None:
        record = tmp_path / "argv.txt"
        runner = _recording_script(make_executable, "intern", record)
        (project_dir / "output").write_text("not a directory")
        supervisor = ProcessSupervisor(sink=messages.append, runner_path=runner, cwd=project_dir)

        outcome = await supervisor.run(TestRunConfig(reporters="cobertura"))

        assert isinstance(outcome, RunFailed)
        assert outcome.exit_code == 1
        assert "output" in outcome.message
        assert "failed" in messages[-1]
        assert not record.exists()

    async def test_externals_given_as_mapping(
        self, project_dir: Path, make_executable: MakeExecutable, tmp_path: Path, messages: list[str]
    ) -> None:
        record = tmp_path / "argv.txt"
        runner = _recording_script(make_executable, "intern", record)
        supervisor = ProcessSupervisor(sink=messages.append, runner_path=runner, cwd=project_dir)

        outcome = await supervisor.run(
            TestRunConfig(child_config="dist", externals={"dependencies": ["a"]})
        )

        assert outcome.success
        loader = [line for line in record.read_text().splitlines() if line.startswith("loader=")]
        assert json.loads(loader[0].split("=", 1)[1])["options"] == {"dependencies": ["a"]}

    async def test_exit_code_is_recorded_on_state(
        self, project_dir: Path, make_executable: MakeExecutable, messages: list[str]
    ) -> None:
        runner = make_executable("intern", "exit 4")
        supervisor = ProcessSupervisor(sink=messages.append, runner_path=runner, cwd=project_dir)
        state = RunState(run_id="abc", status=RunStatus.LAUNCHING)

        returncode = await supervisor._spawn_and_wait([str(runner)], state)

        assert returncode == 4
        assert state.returncode == 4
        assert state.status == RunStatus.RUNNING

    async def test_arguments_are_forwarded(
        self, project_dir: Path, make_executable: MakeExecutable, tmp_path: Path, messages: list[str]
    ) -> None:
        record = tmp_path / "argv.txt"
        runner = _recording_script(make_executable, "intern", record)
        supervisor = ProcessSupervisor(sink=messages.append, runner_path=runner, cwd=project_dir)

        await supervisor.run(TestRunConfig(node_unit=True, filter="widget"))

        assert record.read_text().splitlines() == [
            "config=intern/intern.json",
            "environments=",
            "grep=widget",
            'capabilities={"name": "my-app", "project": "my-app"}',
        ]

    async def test_prebuilt_argv_is_used_verbatim(
        self, project_dir: Path, make_executable: MakeExecutable, tmp_path: Path, messages: list[str]
    ) -> None:
        record = tmp_path / "argv.txt"
        runner = _recording_script(make_executable, "intern", record)
        supervisor = ProcessSupervisor(sink=messages.append, runner_path=runner, cwd=project_dir)

        await supervisor.run(TestRunConfig(), argv=["config=custom.json", "suites="])

        assert record.read_text().splitlines() == ["config=custom.json", "suites="]

    async def test_watch_mode_wraps_runner(
        self, project_dir: Path, make_executable: MakeExecutable, tmp_path: Path, messages: list[str]
    ) -> None:
        record = tmp_path / "watcher-argv.txt"
        runner = make_executable("intern", "exit 0")
        watcher = _recording_script(make_executable, "nodemon", record)
        supervisor = ProcessSupervisor(
            sink=messages.append, runner_path=runner, watcher_path=watcher, cwd=project_dir
        )

        outcome = await supervisor.run(TestRunConfig(watch=True), argv=["config=intern/intern.json"])

        assert outcome.success
        assert record.read_text().splitlines() == [*WATCH_ARGS, str(runner), "config=intern/intern.json"]
        assert "using watch mode" in messages[0]

    async def test_watcher_exit_code_governs_outcome(
        self, project_dir: Path, make_executable: MakeExecutable, messages: list[str]
    ) -> None:
        runner = make_executable("intern", "exit 0")
        watcher = make_executable("nodemon", "exit 2")
        supervisor = ProcessSupervisor(
            sink=messages.append, runner_path=runner, watcher_path=watcher, cwd=project_dir
        )

        outcome = await supervisor.run(TestRunConfig(watch=True))

        assert outcome == RunFailed(FAILED_RUN_MESSAGE)

    async def test_invalid_config_never_launches(
        self, project_dir: Path, make_executable: MakeExecutable, tmp_path: Path, messages: list[str]
    ) -> None:
        record = tmp_path / "argv.txt"
        runner = _recording_script(make_executable, "intern", record)
        supervisor = ProcessSupervisor(sink=messages.append, runner_path=runner, cwd=project_dir)

        outcome = await supervisor.run(TestRunConfig(externals=ExternalsConfig()))

        assert isinstance(outcome, RunFailed)
        assert "externals" in outcome.message
        assert outcome.exit_code == 1
        assert not record.exists()

    async def test_verbose_shows_config_and_arguments(
        self, project_dir: Path, make_executable: MakeExecutable, messages: list[str]
    ) -> None:
        runner = make_executable(
            "intern",
            'if [ "$1" = "showConfig" ]; then echo "resolved-intern-config"; fi\nexit 0',
        )
        supervisor = ProcessSupervisor(sink=messages.append, runner_path=runner, cwd=project_dir)

        outcome = await supervisor.run(TestRunConfig(verbose=True), argv=["config=a.json", "suites="])

        assert outcome.success
        joined = "\n".join(messages)
        assert "Intern config:" in joined
        assert "resolved-intern-config" in joined
        assert "Parsed arguments for intern:" in joined
        assert "config=a.json\n    suites=" in joined

    async def test_verbose_diagnostics_failure_does_not_abort(
        self, project_dir: Path, make_executable: MakeExecutable, messages: list[str]
    ) -> None:
        runner = make_executable("intern", "exit 0")
        supervisor = ProcessSupervisor(sink=messages.append, runner_path=runner, cwd=project_dir)

        with patch.object(supervisor, "_show_config", side_effect=OSError("boom")):
            outcome = await supervisor.run(TestRunConfig(verbose=True))

        assert outcome.success
        assert any("boom" in message for message in messages)

    async def test_child_inherits_stdio(self, project_dir: Path, messages: list[str]) -> None:
        process = MagicMock(pid=4242)
        process.wait = AsyncMock(return_value=0)
        supervisor = ProcessSupervisor(sink=messages.append, runner_path="/opt/intern", cwd=project_dir)

        with patch(
            "interncli.runtime.supervisor.asyncio.create_subprocess_exec",
            AsyncMock(return_value=process),
        ) as mock_exec:
            outcome = await supervisor.run(TestRunConfig(), argv=["config=x"])

        assert outcome.success
        mock_exec.assert_awaited_once_with("/opt/intern", "config=x", cwd=project_dir)
        process.wait.assert_awaited_once()

    async def test_process_wide_sink_is_used_by_default(
        self, project_dir: Path, make_executable: MakeExecutable, messages: list[str], restore_sink: None
    ) -> None:
        runner = make_executable("intern", "exit 0")
        set_logger(messages.append)
        supervisor = ProcessSupervisor(runner_path=runner, cwd=project_dir)

        await supervisor.run(TestRunConfig())

        assert get_logger() == messages.append
        assert "completed successfully" in messages[-1]


class TestSupervisorSetup:
    def test_satisfies_protocol(self, project_dir: Path) -> None:
        assert isinstance(ProcessSupervisor(cwd=project_dir), RunSupervisor)

    def test_default_executables_live_in_node_modules(self, project_dir: Path) -> None:
        supervisor = ProcessSupervisor(cwd=project_dir)
        assert supervisor.runner_path == (project_dir / "node_modules/.bin/intern").resolve()
        assert supervisor.watcher_path == (project_dir / "node_modules/.bin/nodemon").resolve()

    def test_environment_overrides_executables(
        self, project_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("INTERNCLI_RUNNER", "/usr/local/bin/intern")
        monkeypatch.setenv("INTERNCLI_WATCHER", "/usr/local/bin/nodemon")
        supervisor = ProcessSupervisor(cwd=project_dir)
        assert supervisor.runner_path == Path("/usr/local/bin/intern")
        assert supervisor.watcher_path == Path("/usr/local/bin/nodemon")

    def test_build_command(self, project_dir: Path) -> None:
        supervisor = ProcessSupervisor(runner_path="/r/intern", watcher_path="/w/nodemon", cwd=project_dir)
        assert supervisor.build_command(TestRunConfig(), ["a=1"]) == ["/r/intern", "a=1"]
        assert supervisor.build_command(TestRunConfig(watch=True), ["a=1"]) == [
            "/w/nodemon",
            *WATCH_ARGS,
            "/r/intern",
            "a=1",
        ]

    def test_run_tests_sync_wrapper(
        self, project_dir: Path, make_executable: MakeExecutable, messages: list[str]
    ) -> None:
        runner = make_executable("intern", "exit 3")
        outcome = run_tests(TestRunConfig(), sink=messages.append, runner_path=runner, cwd=project_dir)
        assert outcome == RunFailed(FAILED_RUN_MESSAGE)
