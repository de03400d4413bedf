"""Lint operations - run verilator on a document and publish its diagnostics."""

from __future__ import annotations

import asyncio
import contextvars
import functools
import time
from collections.abc import Callable
from typing import Literal

import structlog

from verilint.config.models import LintingConfig
from verilint.core.errors import LintError
from verilint.core.logging import clear_run_id, set_run_id
from verilint.lint.command import CommandBuilder, PathTranslator
from verilint.lint.models import LintInvocation, LintRunResult, TextDocument
from verilint.lint.parsers import parse_verilator_output
from verilint.lint.runner import ProcessRunner
from verilint.lint.store import DiagnosticStore

log = structlog.get_logger(__name__)

LintCallback = Callable[[LintRunResult], None]


class VerilatorLinter:
    """Verilator lint for one workspace.

    Each lint request runs independently and, on success, replaces the whole
    store. Runs are not cancelled: if two overlap, whichever finishes last
    wins. A run that fails to launch leaves the store as it was.
    """

    def __init__(
        self,
        store: DiagnosticStore,
        config: LintingConfig | None = None,
        *,
        workspace_root: str | None = None,
        platform: str | None = None,
        runner: ProcessRunner | None = None,
        translator: PathTranslator | None = None,
    ) -> None:
        self._store = store
        self._workspace_root = workspace_root
        self._platform = platform
        self._translator = translator
        self._runner_override = runner
        self._config = config or LintingConfig()
        self._tasks: set[asyncio.Task[LintRunResult]] = set()

    @property
    def store(self) -> DiagnosticStore:
        return self._store

    @property
    def config(self) -> LintingConfig:
        return self._config

    def update_config(self, config: LintingConfig) -> None:
        """Use new settings from the next run on. Runs in flight keep theirs."""
        self._config = config
        log.info(
            "linting config updated",
            path=config.path,
            arguments=config.arguments,
            run_at_file_location=config.run_at_file_location,
            use_wsl=config.use_wsl,
        )

    async def lint(self, document: TextDocument) -> LintRunResult:
        """Lint a document and publish the diagnostics.

        Never raises for tool problems; they come back as status "error".
        """
        start_time = time.time()
        config = self._config
        set_run_id()
        try:
            log.info("verilator lint requested", path=document.path, language=document.language_id)
            builder = CommandBuilder(config, platform=self._platform, translator=self._translator)
            runner = self._runner_override or ProcessRunner(timeout_sec=config.timeout_sec)

            invocation: LintInvocation | None = None
            try:
                # Path translation for WSL blocks on a helper process
                loop = asyncio.get_running_loop()
                build = functools.partial(
                    builder.build, document, workspace_root=self._workspace_root
                )
                invocation = await loop.run_in_executor(
                    None, contextvars.copy_context().run, build
                )
                output = await runner.run(invocation)
            except LintError as e:
                log.error("lint run failed", error=e.error_name, message=e.message)
                return LintRunResult(
                    status="error",
                    invocation=invocation,
                    error_detail=str(e),
                    duration_seconds=time.time() - start_time,
                )

            diagnostics = parse_verilator_output(
                output.stderr,
                run_at_file_location=config.run_at_file_location,
                workspace_root=self._workspace_root,
                platform=builder.platform,
            )
            self._store.replace(diagnostics)
            log.info(
                "errors/warnings returned",
                count=len(diagnostics),
                files=len(diagnostics.files),
            )

            status: Literal["clean", "dirty", "error"] = "dirty" if diagnostics else "clean"
            return LintRunResult(
                status=status,
                diagnostics=diagnostics,
                invocation=invocation,
                returncode=output.returncode,
                duration_seconds=time.time() - start_time,
            )
        finally:
            clear_run_id()

    def start_lint(
        self,
        document: TextDocument,
        on_complete: LintCallback | None = None,
    ) -> asyncio.Task[LintRunResult]:
        """Schedule a lint on the running loop and return immediately.

        on_complete gets exactly one result per run, an error result if the run crashed.
        """
        task = asyncio.get_running_loop().create_task(self.lint(document))
        self._tasks.add(task)

        def _done(t: asyncio.Task[LintRunResult]) -> None:
            self._tasks.discard(t)
            if t.cancelled():
                return
            exc = t.exception()
            if exc is None:
                result = t.result()
            else:
                log.error("lint run crashed", path=document.path, error=repr(exc))
                result = LintRunResult(status="error", error_detail=str(exc))
            if on_complete is not None:
                on_complete(result)

        task.add_done_callback(_done)
        return task

    def remove_file_diagnostics(self, document: TextDocument) -> None:
        """Forget a closed document's diagnostics."""
        self._store.delete(document.path)
