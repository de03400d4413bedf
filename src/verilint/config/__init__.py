"""Config module exports."""

from verilint.config.loader import load_config
from verilint.config.models import (
    LintingConfig,
    LoggingConfig,
    LogOutputConfig,
    VerilintConfig,
)

__all__ = [
    "load_config",
    "LintingConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "VerilintConfig",
]
