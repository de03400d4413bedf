"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (VERILINT__SECTION__KEY)
3. Workspace YAML (.verilint/config.yaml)
4. Global YAML (~/.config/verilint/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    VERILINT__<SECTION>__<KEY>=<VALUE>

Examples:
    VERILINT__LOGGING__LEVEL=DEBUG
    VERILINT__LINTING__PATH=/opt/verilator/bin
    VERILINT__LINTING__ARGUMENTS="-Wall -Wno-DECLFILENAME"
    VERILINT__LINTING__USE_WSL=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        VERILINT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG also logs every diagnostic parsed.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class LintingConfig(BaseModel):
    """Verilator invocation settings.

    Env vars:
        VERILINT__LINTING__PATH: Directory holding the verilator binary
        VERILINT__LINTING__ARGUMENTS: Extra arguments passed to verilator
        VERILINT__LINTING__RUN_AT_FILE_LOCATION: Run from the linted file's folder
        VERILINT__LINTING__USE_WSL: Run verilator inside WSL (Windows hosts only)
        VERILINT__LINTING__TIMEOUT_SEC: Kill the linter after this many seconds
    """

    path: str = Field(
        default="",
        description="Directory containing the verilator binary. Empty means resolve via PATH.",
    )
    arguments: str = Field(
        default="",
        description="Extra arguments appended before the target file, split shell-style.",
    )
    run_at_file_location: bool = Field(
        default=False,
        description="Run verilator from the linted file's folder instead of the workspace root. "
        "Relative paths in the tool's output are then kept as reported.",
    )
    use_wsl: bool = Field(
        default=False,
        description="On Windows, run verilator inside WSL and translate paths with wslpath. "
        "Ignored on other hosts.",
    )
    timeout_sec: float | None = Field(
        default=None,
        description="Kill the linter after this many seconds. None waits indefinitely.",
    )

    @field_validator("arguments")
    @classmethod
    def strip_arguments(cls, v: str) -> str:
        return v.strip()

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v


class VerilintConfig(BaseModel):
    """Root configuration for verilint.

    All settings can be configured via:
    1. Environment variables: VERILINT__SECTION__KEY
    2. YAML config files (workspace or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    linting: LintingConfig = Field(default_factory=LintingConfig)
