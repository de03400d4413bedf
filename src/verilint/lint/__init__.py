"""Lint module - verilator invocation, output parsing and diagnostic publishing."""

from verilint.lint.command import CommandBuilder, select_path_strategy
from verilint.lint.models import (
    Diagnostic,
    DiagnosticSet,
    LintInvocation,
    LintRunResult,
    Severity,
    TextDocument,
)
from verilint.lint.ops import VerilatorLinter
from verilint.lint.parsers import parse_verilator_output
from verilint.lint.runner import ProcessRunner
from verilint.lint.store import DiagnosticStore

__all__ = [
    "CommandBuilder",
    "Diagnostic",
    "DiagnosticSet",
    "DiagnosticStore",
    "LintInvocation",
    "LintRunResult",
    "ProcessRunner",
    "Severity",
    "TextDocument",
    "VerilatorLinter",
    "parse_verilator_output",
    "select_path_strategy",
]
