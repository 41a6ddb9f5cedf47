"""
Constants and configuration for the lineshell interpreter
"""

# ============================================================================
# PROMPT / SESSION
# ============================================================================

PROMPT = "$ "

# Environment variables read at startup (see shell.configure_logging)
LOG_LEVEL_ENV = "LINESHELL_LOG_LEVEL"
LOG_FILE_ENV = "LINESHELL_LOG_FILE"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(name)s - %(levelname)s - %(message)s"


# ============================================================================
# BUILTINS
# ============================================================================
# Commands implemented inside the interpreter process, never spawned.
# Order matters only for display (completion lists are sorted anyway).

BUILTIN_NAMES = ("echo", "exit", "type", "pwd", "cd")


# ============================================================================
# REDIRECTION OPERATORS
# ============================================================================
# Exact-match tokens only. Format: 'token': (stream, append)
# stream is one of 'stdout', 'stderr', 'stdin' (mapped to RedirectKind).

REDIRECT_OPERATORS = {
    ">": ("stdout", False),
    "1>": ("stdout", False),
    ">>": ("stdout", True),
    "1>>": ("stdout", True),
    "2>": ("stderr", False),
    "2>>": ("stderr", True),
    "<": ("stdin", False),
}


# ============================================================================
# EXIT STATUSES
# ============================================================================

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2            # exit with a non-numeric argument
EXIT_CANNOT_EXECUTE = 126  # resolved but failed to spawn
EXIT_NOT_FOUND = 127       # not a builtin and not on PATH
