"""Verilator command construction.

The command depends on where verilator actually runs:

- natively on a POSIX host, with paths as they are,
- natively on Windows, where verilator still wants forward slashes,
- inside WSL on a Windows host, where every path must be translated into
  the WSL namespace with ``wslpath`` before it can be passed on.

One path strategy is selected per run and owns those differences.
"""

from __future__ import annotations

import ntpath
import posixpath
import shlex
import subprocess
import sys
from collections.abc import Callable
from dataclasses import dataclass, field

import structlog

from verilint.config.constants import (
    INCLUDE_FLAG_PREFIX,
    LINT_ONLY_FLAG,
    SYSTEMVERILOG_FLAG,
    VERILATOR_BINARY,
    VERILATOR_WINDOWS_BINARY,
    WINDOWS_PLATFORM,
    WSL_EXECUTABLE,
    WSL_PATH_HELPER,
)
from verilint.config.models import LintingConfig
from verilint.core.errors import LintError
from verilint.lint.models import LintInvocation, TextDocument

log = structlog.get_logger(__name__)

PathTranslator = Callable[[str], str]


def translate_wsl_path(path: str) -> str:
    """Translate a Windows path into the WSL namespace.

    Blocks until ``wsl wslpath`` returns. Raises LintError if the helper
    cannot be run or exits non-zero.
    """
    try:
        proc = subprocess.run(
            [WSL_EXECUTABLE, WSL_PATH_HELPER, path],
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        reason = (e.stderr or "").strip() or f"exit code {e.returncode}"
        raise LintError.path_translation_failed(path, reason) from e
    except OSError as e:
        raise LintError.path_translation_failed(path, str(e)) from e
    return proc.stdout.replace("\r\n", "").replace("\n", "")


@dataclass(frozen=True)
class NativePaths:
    """POSIX host: bare binary name, paths untouched."""

    binary: str = VERILATOR_BINARY
    wrapper: tuple[str, ...] = ()

    def binary_path(self, binary_dir: str) -> str:
        return posixpath.join(binary_dir, self.binary) if binary_dir else self.binary

    def rewrite(self, path: str) -> str:
        return path


@dataclass(frozen=True)
class WindowsPaths:
    """Windows host running a native build: forward slashes everywhere."""

    binary: str = VERILATOR_WINDOWS_BINARY
    wrapper: tuple[str, ...] = ()

    def binary_path(self, binary_dir: str) -> str:
        return ntpath.join(binary_dir, self.binary) if binary_dir else self.binary

    def rewrite(self, path: str) -> str:
        rewritten = path.replace("\\", "/")
        log.info("path rewritten for verilator", original=path, rewritten=rewritten)
        return rewritten


@dataclass(frozen=True)
class WslPaths:
    """Windows host running verilator inside WSL."""

    translator: PathTranslator = field(default=translate_wsl_path)
    binary: str = VERILATOR_BINARY
    wrapper: tuple[str, ...] = (WSL_EXECUTABLE,)

    def binary_path(self, binary_dir: str) -> str:
        # The binary directory is a path inside WSL
        return posixpath.join(binary_dir, self.binary) if binary_dir else self.binary

    def rewrite(self, path: str) -> str:
        rewritten = self.translator(path)
        log.info("path rewritten for WSL", original=path, rewritten=rewritten)
        return rewritten


PathStrategy = NativePaths | WindowsPaths | WslPaths


def select_path_strategy(
    *,
    platform: str,
    use_wsl: bool,
    translator: PathTranslator | None = None,
) -> PathStrategy:
    """Pick the path strategy for this host. use_wsl only matters on Windows."""
    if platform != WINDOWS_PLATFORM:
        return NativePaths()
    if use_wsl:
        return WslPaths(translator=translator or translate_wsl_path)
    return WindowsPaths()


def containing_folder(path: str, platform: str) -> str:
    pathmod = ntpath if platform == WINDOWS_PLATFORM else posixpath
    return pathmod.dirname(path)


class CommandBuilder:
    """Builds one verilator invocation per lint request."""

    def __init__(
        self,
        config: LintingConfig,
        *,
        platform: str | None = None,
        translator: PathTranslator | None = None,
    ) -> None:
        self._config = config
        self._platform = platform or sys.platform
        self._translator = translator

    @property
    def platform(self) -> str:
        return self._platform

    def build(self, document: TextDocument, *, workspace_root: str | None) -> LintInvocation:
        """Build the invocation for a document.

        In WSL mode this shells out twice to translate paths and may raise
        LintError; nothing is launched in that case.
        """
        config = self._config
        folder = containing_folder(document.path, self._platform)
        cwd = folder if config.run_at_file_location else workspace_root

        strategy = select_path_strategy(
            platform=self._platform,
            use_wsl=config.use_wsl,
            translator=self._translator,
        )
        target_path = strategy.rewrite(document.path)
        include_dir = strategy.rewrite(folder)

        argv = [
            *strategy.wrapper,
            strategy.binary_path(config.path),
            SYSTEMVERILOG_FLAG if document.is_systemverilog else "",
            LINT_ONLY_FLAG,
            INCLUDE_FLAG_PREFIX + include_dir,
            *self._split_arguments(config.arguments),
            target_path,
        ]
        invocation = LintInvocation(
            argv=tuple(arg for arg in argv if arg),
            cwd=cwd,
            file_path=document.path,
            target_path=target_path,
            include_dir=include_dir,
        )
        log.info("verilator command", category="command", command=invocation.command, cwd=cwd)
        return invocation

    def _split_arguments(self, arguments: str) -> list[str]:
        if not arguments:
            return []
        lexer = shlex.shlex(arguments, posix=True)
        lexer.whitespace_split = True
        lexer.commenters = ""
        if self._platform == WINDOWS_PLATFORM:
            # Backslashes are path separators there, not escapes
            lexer.escape = ""
        try:
            return list(lexer)
        except ValueError as e:
            raise LintError.invalid_arguments(arguments, str(e)) from e
