"""Output parser for verilator's stderr diagnostics.

Verilator reports one diagnostic per line:

    %<Severity>[-<CODE>]: <path>:<line>:[<col>:] <message>

Versions before ~4.030 never emit the column. Everything else on stderr
(source excerpts, caret markers, summaries) is noise.
"""

from __future__ import annotations

import ntpath
import posixpath
import re
import sys

import structlog

from verilint.config.constants import VERILATOR_SOURCE, WINDOWS_PLATFORM
from verilint.lint.models import (
    Diagnostic,
    DiagnosticSet,
    MatchedLine,
    ParsedLine,
    Severity,
    UnmatchedLine,
)

log = structlog.get_logger(__name__)

# Fixed by the tool; the path must end in a dot-extension.
_DIAGNOSTIC_RE = re.compile(
    r"%(\w+)(-[A-Z0-9_]+)?:\s*(.*\.[a-zA-Z]+):(\d+):(?:\s*(\d+):)?\s*(\s*.+)",
    re.ASCII,
)
_LINE_BREAK_RE = re.compile(r"\r?\n")


def split_lines(text: str) -> list[str]:
    """Split on either line-ending convention."""
    return _LINE_BREAK_RE.split(text)


def parse_line(text: str) -> ParsedLine:
    """Match one output line against the diagnostic grammar."""
    m = _DIAGNOSTIC_RE.search(text)
    if m is None:
        return UnmatchedLine(text=text)
    keyword, code, path, line_text, column_text, message = m.groups()
    return MatchedLine(
        severity_keyword=keyword,
        code=code[1:] if code else None,
        path=path,
        line_text=line_text,
        column_text=column_text,
        message=message,
    )


def severity_from_keyword(keyword: str) -> Severity:
    """Map the word after '%' to a severity."""
    if keyword.startswith("Error"):
        return Severity.ERROR
    if keyword.startswith("Warning"):
        return Severity.WARNING
    return Severity.INFORMATION


def _to_zero_based(text: str | None) -> int | None:
    if text is None:
        return None
    try:
        return int(text) - 1
    except ValueError:
        return None


def _is_absolute(path: str, platform: str) -> bool:
    if platform == WINDOWS_PLATFORM:
        # Root-relative and WSL paths count as absolute on Windows hosts
        return ntpath.isabs(path) or path.startswith(("/", "\\"))
    return posixpath.isabs(path)


def resolve_diagnostic_path(
    path: str,
    *,
    run_at_file_location: bool,
    workspace_root: str | None,
    platform: str | None = None,
) -> str:
    """Resolve the path a diagnostic was reported against.

    When verilator runs at the file's location, relative paths are already
    meaningful there and are kept. Otherwise it ran from the workspace root,
    so relative paths (typically included files) are joined to it.
    """
    platform = platform or sys.platform
    if run_at_file_location or workspace_root is None:
        return path
    if _is_absolute(path, platform):
        return path
    pathmod = ntpath if platform == WINDOWS_PLATFORM else posixpath
    return pathmod.normpath(pathmod.join(workspace_root, path))


def build_diagnostic(
    parsed: MatchedLine,
    *,
    run_at_file_location: bool,
    workspace_root: str | None,
    platform: str | None = None,
) -> Diagnostic | None:
    """Convert a matched line into a diagnostic, or None if it cannot be located."""
    line = _to_zero_based(parsed.line_text)
    if line is None or line < 0:
        return None
    column = _to_zero_based(parsed.column_text)
    if column is None or column < 0:
        column = 0

    return Diagnostic(
        path=resolve_diagnostic_path(
            parsed.path,
            run_at_file_location=run_at_file_location,
            workspace_root=workspace_root,
            platform=platform,
        ),
        line=line,
        column=column,
        message=parsed.message,
        code=parsed.code or VERILATOR_SOURCE,
        severity=severity_from_keyword(parsed.severity_keyword),
    )


def parse_verilator_output(
    stderr: str,
    *,
    run_at_file_location: bool,
    workspace_root: str | None,
    platform: str | None = None,
) -> DiagnosticSet:
    """Parse verilator's stderr into diagnostics grouped by file."""
    diagnostics = DiagnosticSet()
    for text in split_lines(stderr):
        if not text.strip():
            continue

        parsed = parse_line(text)
        if isinstance(parsed, UnmatchedLine):
            log.warning("failed to parse error", line=parsed.text)
            continue

        diagnostic = build_diagnostic(
            parsed,
            run_at_file_location=run_at_file_location,
            workspace_root=workspace_root,
            platform=platform,
        )
        if diagnostic is None:
            continue
        log.debug(
            "diagnostic parsed",
            severity=diagnostic.severity.value,
            path=diagnostic.path,
            line=diagnostic.line,
            code=diagnostic.code,
        )
        diagnostics.add(diagnostic)
    return diagnostics
