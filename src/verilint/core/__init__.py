"""Core module exports."""

from verilint.core.errors import (
    ConfigError,
    ErrorCode,
    LintError,
    VerilintError,
)
from verilint.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "VerilintError",
    "ConfigError",
    "ErrorCode",
    "LintError",
    # Logging
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
    "clear_run_id",
]
