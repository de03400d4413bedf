"""Lint models - documents, diagnostics, parsed lines and run results."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from verilint.config.constants import (
    END_OF_LINE,
    SYSTEMVERILOG_LANGUAGE_ID,
    VERILATOR_SOURCE,
)


class Severity(Enum):
    """Diagnostic severity level."""

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"


@dataclass(frozen=True)
class TextDocument:
    """The document being linted, as seen by the editor layer."""

    path: str  # absolute, platform-native
    language_id: str

    @property
    def is_systemverilog(self) -> bool:
        return self.language_id == SYSTEMVERILOG_LANGUAGE_ID


@dataclass(frozen=True)
class Diagnostic:
    """A single located issue reported by verilator.

    Lines and columns are zero-based. The range runs from (line, column) to
    the end of the same line.
    """

    path: str
    line: int
    message: str
    column: int = 0
    code: str = VERILATOR_SOURCE  # "WIDTH", "UNUSED", ...
    severity: Severity = Severity.INFORMATION
    source: str = VERILATOR_SOURCE

    @property
    def end_line(self) -> int:
        return self.line

    @property
    def end_column(self) -> int:
        return END_OF_LINE

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "severity": self.severity.value,
            "code": self.code,
            "source": self.source,
            "message": self.message,
            "range": {
                "start": {"line": self.line, "column": self.column},
                "end": {"line": self.end_line, "column": self.end_column},
            },
        }


@dataclass
class DiagnosticSet:
    """Diagnostics of one lint run, grouped by file in encounter order."""

    _by_file: dict[str, list[Diagnostic]] = field(default_factory=dict)

    def add(self, diagnostic: Diagnostic) -> None:
        self._by_file.setdefault(diagnostic.path, []).append(diagnostic)

    def get(self, path: str) -> list[Diagnostic]:
        return list(self._by_file.get(path, []))

    @property
    def files(self) -> list[str]:
        return list(self._by_file)

    def items(self) -> Iterator[tuple[str, list[Diagnostic]]]:
        for path, diagnostics in self._by_file.items():
            yield path, list(diagnostics)

    def copy(self) -> DiagnosticSet:
        return DiagnosticSet({path: list(diags) for path, diags in self._by_file.items()})

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self)

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {path: [d.to_dict() for d in diags] for path, diags in self._by_file.items()}

    def __iter__(self) -> Iterator[Diagnostic]:
        for diagnostics in self._by_file.values():
            yield from diagnostics

    def __len__(self) -> int:
        return sum(len(d) for d in self._by_file.values())

    def __bool__(self) -> bool:
        return any(self._by_file.values())

    def __contains__(self, path: object) -> bool:
        return path in self._by_file


# =============================================================================
# Parsed output lines
# =============================================================================


@dataclass(frozen=True)
class MatchedLine:
    """A stderr line that fits the verilator diagnostic grammar.

    Numeric fields are kept as captured; conversion happens when the
    diagnostic is built.
    """

    severity_keyword: str
    code: str | None
    path: str
    line_text: str
    column_text: str | None
    message: str


@dataclass(frozen=True)
class UnmatchedLine:
    """A stderr line that is not a diagnostic (banners, context lines, summaries)."""

    text: str


ParsedLine = MatchedLine | UnmatchedLine


# =============================================================================
# Invocation and results
# =============================================================================


@dataclass(frozen=True)
class LintInvocation:
    """Everything needed to launch verilator once. Discarded after the run."""

    argv: tuple[str, ...]
    cwd: str | None
    file_path: str  # as the editor knows it
    target_path: str  # as passed to the tool
    include_dir: str

    @property
    def command(self) -> str:
        return " ".join(arg for arg in self.argv if arg)


@dataclass
class LintRunResult:
    """Result from one lint run."""

    status: Literal["clean", "dirty", "error"]
    diagnostics: DiagnosticSet = field(default_factory=DiagnosticSet)
    invocation: LintInvocation | None = None
    returncode: int | None = None
    error_detail: str | None = None
    duration_seconds: float = 0.0

    @property
    def total_diagnostics(self) -> int:
        return len(self.diagnostics)

    @property
    def has_errors(self) -> bool:
        return self.diagnostics.has_errors
