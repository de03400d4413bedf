"""Verilint error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Lint (arguments, path translation, tool launch)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Lint (3xxx)
    LINT_LAUNCH_FAILED = 3001
    LINT_PATH_TRANSLATION_FAILED = 3002
    LINT_TIMEOUT = 3003
    LINT_INVALID_ARGUMENTS = 3004


@dataclass(frozen=True, slots=True)
class VerilintError(Exception):
    """Base error with structured context for log events and CLI output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'LINT_LAUNCH_FAILED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(VerilintError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class LintError(VerilintError):
    """Failures that stop a lint run before any output can be parsed."""

    @classmethod
    def launch_failed(cls, command: str, reason: str) -> "LintError":
        return cls(
            code=ErrorCode.LINT_LAUNCH_FAILED,
            message=f"Failed to launch linter: {reason}",
            details={"command": command, "reason": reason},
        )

    @classmethod
    def path_translation_failed(cls, path: str, reason: str) -> "LintError":
        return cls(
            code=ErrorCode.LINT_PATH_TRANSLATION_FAILED,
            message=f"Failed to translate '{path}' for WSL: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_arguments(cls, arguments: str, reason: str) -> "LintError":
        return cls(
            code=ErrorCode.LINT_INVALID_ARGUMENTS,
            message=f"Cannot split linter arguments: {reason}",
            details={"arguments": arguments, "reason": reason},
        )

    @classmethod
    def timeout(cls, command: str, timeout_sec: float) -> "LintError":
        return cls(
            code=ErrorCode.LINT_TIMEOUT,
            message=f"Linter did not finish within {timeout_sec}s",
            retryable=True,
            details={"command": command, "timeout_sec": timeout_sec},
        )

