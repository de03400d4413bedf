"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
They are fixed by the wrapped tool, the host platform, or the diagnostic
range convention.

For configurable values, see models.py (LintingConfig, LoggingConfig).
"""

import sys

# =============================================================================
# Diagnostics
# =============================================================================

VERILATOR_SOURCE = "verilator"
"""Source tag on every diagnostic, and the code used when the tool omits one."""

END_OF_LINE = sys.maxsize
"""End column of every diagnostic. The tool reports no end position."""

# =============================================================================
# Verilator invocation
# =============================================================================

VERILATOR_BINARY = "verilator"
"""Binary name on POSIX hosts and inside WSL."""

VERILATOR_WINDOWS_BINARY = "verilator_bin.exe"
"""Binary name for native Windows builds."""

LINT_ONLY_FLAG = "--lint-only"
SYSTEMVERILOG_FLAG = "-sv"
INCLUDE_FLAG_PREFIX = "-I"

WSL_EXECUTABLE = "wsl"
WSL_PATH_HELPER = "wslpath"

# =============================================================================
# Languages
# =============================================================================

VERILOG_LANGUAGE_ID = "verilog"
SYSTEMVERILOG_LANGUAGE_ID = "systemverilog"

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".v": VERILOG_LANGUAGE_ID,
    ".vh": VERILOG_LANGUAGE_ID,
    ".vl": VERILOG_LANGUAGE_ID,
    ".sv": SYSTEMVERILOG_LANGUAGE_ID,
    ".svh": SYSTEMVERILOG_LANGUAGE_ID,
}
"""Language id inferred from a file extension when the caller gives none."""

WINDOWS_PLATFORM = "win32"
