"""Tests for lint/ops.py module (VerilatorLinter)."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from structlog.testing import capture_logs

from verilint.config.models import LintingConfig
from verilint.core.errors import LintError
from verilint.lint.models import (
    Diagnostic,
    DiagnosticSet,
    LintInvocation,
    LintRunResult,
    Severity,
    TextDocument,
)
from verilint.lint.ops import VerilatorLinter
from verilint.lint.runner import ProcessOutput, ProcessRunner
from verilint.lint.store import DiagnosticStore

DOC = TextDocument(path="/proj/rtl/top.sv", language_id="systemverilog")


def make_runner(stderr: str = "", returncode: int = 0) -> MagicMock:
    runner = MagicMock(spec=ProcessRunner)
    runner.run = AsyncMock(return_value=ProcessOutput(returncode=returncode, stdout="", stderr=stderr))
    return runner


def make_linter(
    runner: MagicMock,
    store: DiagnosticStore | None = None,
    **config: object,
) -> VerilatorLinter:
    return VerilatorLinter(
        store if store is not None else DiagnosticStore(),
        LintingConfig(**config),  # type: ignore[arg-type]
        workspace_root="/proj",
        platform="linux",
        runner=runner,
    )


def seeded_store() -> DiagnosticStore:
    store = DiagnosticStore()
    stale = DiagnosticSet()
    stale.add(Diagnostic(path="/proj/old.sv", line=0, message="stale", severity=Severity.ERROR))
    store.replace(stale)
    return store


class TestLint:
    @pytest.mark.asyncio
    async def test_dirty_run_publishes_diagnostics(self) -> None:
        runner = make_runner("%Warning-WIDTH: rtl/top.sv:5:3: bit width mismatch\n", returncode=1)
        store = DiagnosticStore()
        linter = make_linter(runner, store)

        result = await linter.lint(DOC)

        assert result.status == "dirty"
        assert result.returncode == 1
        assert result.total_diagnostics == 1
        d = store.get("/proj/rtl/top.sv")[0]
        assert (d.severity, d.code, d.line, d.column) == (Severity.WARNING, "WIDTH", 4, 2)

    @pytest.mark.asyncio
    async def test_runner_receives_built_invocation(self) -> None:
        runner = make_runner()
        linter = make_linter(runner, arguments="-Wall")

        result = await linter.lint(DOC)

        invocation = runner.run.call_args.args[0]
        assert isinstance(invocation, LintInvocation)
        assert invocation.argv == (
            "verilator",
            "-sv",
            "--lint-only",
            "-I/proj/rtl",
            "-Wall",
            "/proj/rtl/top.sv",
        )
        assert invocation.cwd == "/proj"
        assert result.invocation == invocation

    @pytest.mark.asyncio
    async def test_clean_run_clears_previous_diagnostics(self) -> None:
        store = seeded_store()
        linter = make_linter(make_runner(""), store)

        result = await linter.lint(DOC)

        assert result.status == "clean"
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_new_run_replaces_files_not_mentioned(self) -> None:
        store = seeded_store()
        linter = make_linter(make_runner("%Error: rtl/top.sv:2: bad\n", returncode=1), store)

        await linter.lint(DOC)

        assert store.files == ["/proj/rtl/top.sv"]

    @pytest.mark.asyncio
    async def test_run_at_file_location_keeps_reported_paths(self) -> None:
        store = DiagnosticStore()
        linter = make_linter(
            make_runner("%Error: top.sv:2: bad\n", returncode=1),
            store,
            run_at_file_location=True,
        )

        result = await linter.lint(DOC)

        assert store.files == ["top.sv"]
        assert result.invocation is not None
        assert result.invocation.cwd == "/proj/rtl"

    @pytest.mark.asyncio
    async def test_launch_failure_leaves_store_untouched(self) -> None:
        runner = make_runner()
        runner.run.side_effect = LintError.launch_failed("verilator", "No such file")
        store = seeded_store()
        linter = make_linter(runner, store)

        with capture_logs() as logs:
            result = await linter.lint(DOC)

        assert result.status == "error"
        assert "LINT_LAUNCH_FAILED" in (result.error_detail or "")
        assert len(result.diagnostics) == 0
        assert store.files == ["/proj/old.sv"]
        assert any(e["log_level"] == "error" for e in logs)

    @pytest.mark.asyncio
    async def test_translation_failure_skips_launch(self) -> None:
        def failing(path: str) -> str:
            raise LintError.path_translation_failed(path, "wsl missing")

        runner = make_runner()
        store = seeded_store()
        linter = VerilatorLinter(
            store,
            LintingConfig(use_wsl=True),
            workspace_root="C:\\proj",
            platform="win32",
            runner=runner,
            translator=failing,
        )

        result = await linter.lint(TextDocument(path="C:\\proj\\top.sv", language_id="verilog"))

        assert result.status == "error"
        assert result.invocation is None
        runner.run.assert_not_called()
        assert store.files == ["/proj/old.sv"]

    @pytest.mark.asyncio
    async def test_unbalanced_quote_in_arguments_reports_error(self) -> None:
        runner = make_runner()
        store = seeded_store()
        linter = make_linter(runner, store, arguments='-DMSG="hello')

        result = await linter.lint(DOC)

        assert result.status == "error"
        assert "LINT_INVALID_ARGUMENTS" in (result.error_detail or "")
        assert result.invocation is None
        runner.run.assert_not_called()
        assert store.files == ["/proj/old.sv"]

    @pytest.mark.asyncio
    async def test_real_missing_binary_reports_error(self, tmp_path: Path) -> None:
        store = seeded_store()
        linter = VerilatorLinter(
            store,
            LintingConfig(path="/nonexistent/verilator/bin"),
            workspace_root=str(tmp_path),
            platform="linux",
        )

        result = await linter.lint(TextDocument(path=f"{tmp_path}/top.v", language_id="verilog"))

        assert result.status == "error"
        assert result.invocation is not None
        assert store.files == ["/proj/old.sv"]

    @pytest.mark.asyncio
    async def test_count_logged(self) -> None:
        linter = make_linter(make_runner("%Error: a.sv:1: x\n%Error: b.sv:1: y\n", returncode=1))

        with capture_logs() as logs:
            await linter.lint(DOC)

        summary = [e for e in logs if e["event"] == "errors/warnings returned"]
        assert summary[0]["count"] == 2
        assert summary[0]["files"] == 2

    @pytest.mark.asyncio
    async def test_command_logged(self) -> None:
        linter = make_linter(make_runner())

        with capture_logs() as logs:
            await linter.lint(DOC)

        commands = [e for e in logs if e.get("category") == "command"]
        assert commands[0]["command"] == "verilator -sv --lint-only -I/proj/rtl /proj/rtl/top.sv"

    @pytest.mark.asyncio
    async def test_same_output_twice_gives_same_store(self) -> None:
        output = "%Warning-UNUSED: rtl/top.sv:3:1: unused\n%Error: inc/a.svh:9:2: bad\n"
        store = DiagnosticStore()
        linter = make_linter(make_runner(output, returncode=1), store)

        first = await linter.lint(DOC)
        snapshot = store.snapshot()
        second = await linter.lint(DOC)

        assert first.diagnostics == second.diagnostics
        assert store.snapshot() == snapshot


class TestStartLint:
    @pytest.mark.asyncio
    async def test_returns_immediately_and_calls_back(self) -> None:
        linter = make_linter(make_runner("%Error: rtl/top.sv:1: bad\n", returncode=1))
        results: list[LintRunResult] = []

        task = linter.start_lint(DOC, on_complete=results.append)
        assert not task.done()

        result = await task
        await asyncio.sleep(0)  # let done-callbacks run

        assert results == [result]
        assert result.status == "dirty"

    @pytest.mark.asyncio
    async def test_callback_receives_error_results(self) -> None:
        runner = make_runner()
        runner.run.side_effect = LintError.launch_failed("verilator", "denied")
        linter = make_linter(runner)
        results: list[LintRunResult] = []

        await linter.start_lint(DOC, on_complete=results.append)
        await asyncio.sleep(0)

        assert results[0].status == "error"

    @pytest.mark.asyncio
    async def test_callback_receives_invalid_arguments_result(self) -> None:
        linter = make_linter(make_runner(), arguments='-DMSG="hello')
        results: list[LintRunResult] = []

        await linter.start_lint(DOC, on_complete=results.append)
        await asyncio.sleep(0)

        assert len(results) == 1
        assert results[0].status == "error"

    @pytest.mark.asyncio
    async def test_callback_receives_error_when_run_crashes(self) -> None:
        runner = make_runner()
        runner.run.side_effect = RuntimeError("boom")
        linter = make_linter(runner)
        results: list[LintRunResult] = []

        task = linter.start_lint(DOC, on_complete=results.append)
        with pytest.raises(RuntimeError):
            await task
        await asyncio.sleep(0)

        assert len(results) == 1
        assert results[0].status == "error"
        assert results[0].error_detail == "boom"

    @pytest.mark.asyncio
    async def test_last_completion_wins(self) -> None:
        """Overlapping runs are not merged; the run finishing last owns the store."""
        slow_started = asyncio.Event()
        slow_done = asyncio.Event()

        async def slow_run(invocation: LintInvocation) -> ProcessOutput:
            slow_started.set()
            await slow_done.wait()
            return ProcessOutput(returncode=1, stdout="", stderr="%Error: slow.sv:1: slow\n")

        async def fast_run(invocation: LintInvocation) -> ProcessOutput:
            return ProcessOutput(returncode=1, stdout="", stderr="%Error: fast.sv:1: fast\n")

        pending = [slow_run, fast_run]

        async def run(invocation: LintInvocation) -> ProcessOutput:
            return await pending.pop(0)(invocation)

        runner = MagicMock(spec=ProcessRunner)
        runner.run = AsyncMock(side_effect=run)

        store = DiagnosticStore()
        linter = make_linter(runner, store)

        first = linter.start_lint(DOC)
        await slow_started.wait()
        second = linter.start_lint(DOC)
        await second
        assert store.files == ["/proj/fast.sv"]

        slow_done.set()
        await first
        assert store.files == ["/proj/slow.sv"]


class TestConfigAndClose:
    @pytest.mark.asyncio
    async def test_update_config_applies_to_next_run(self) -> None:
        runner = make_runner()
        linter = make_linter(runner)

        linter.update_config(LintingConfig(path="/opt/v/bin", arguments="-Wno-fatal"))
        await linter.lint(DOC)

        invocation = runner.run.call_args.args[0]
        assert invocation.argv[0] == "/opt/v/bin/verilator"
        assert "-Wno-fatal" in invocation.argv

    def test_remove_file_diagnostics(self) -> None:
        store = seeded_store()
        linter = make_linter(make_runner(), store)

        linter.remove_file_diagnostics(TextDocument(path="/proj/old.sv", language_id="verilog"))

        assert len(store) == 0

    def test_default_config(self) -> None:
        linter = VerilatorLinter(DiagnosticStore())
        assert linter.config == LintingConfig()


@pytest.mark.asyncio
async def test_timeout_config_reaches_default_runner() -> None:
    linter = VerilatorLinter(
        DiagnosticStore(), LintingConfig(timeout_sec=5), workspace_root="/proj", platform="linux"
    )
    with patch("verilint.lint.ops.ProcessRunner") as runner_cls:
        runner_cls.return_value.run = AsyncMock(
            return_value=ProcessOutput(returncode=0, stdout="", stderr="")
        )
        await linter.lint(DOC)

    runner_cls.assert_called_once_with(timeout_sec=5)
