"""
Shell Exceptions

Error taxonomy of the interpreter. Every error carries the message that is
printed on the error stream; the executor decides whether it aborts the
stage or the whole line.

    ShellError
    ├── ParseSyntaxError   - redirect operator without a target (stage continues)
    ├── ResolutionError    - not a builtin and not on PATH (stage aborted)
    ├── RedirectionError   - redirect target cannot be opened/read (line aborted)
    └── ProcessSpawnError  - resolved program failed to start (stage aborted)

ShellExit is not an error: it is raised by the ``exit`` builtin and caught by
the read-eval loop.
"""

from typing import Optional


class ShellError(Exception):
    """
    Base exception for all interpreter diagnostics.

    Attributes:
        message: Human-readable diagnostic, printed as-is
        command: Command name the error belongs to (if any)
    """

    def __init__(self, message: str, command: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.command = command

    def __str__(self) -> str:
        return self.message


class ParseSyntaxError(ShellError):
    """Redirection operator with nothing after it."""

    def __init__(self, operator: str, command: Optional[str] = None) -> None:
        super().__init__(
            f"syntax error near unexpected token `newline' after `{operator}'",
            command=command,
        )
        self.operator = operator


class ResolutionError(ShellError):
    """Command name is neither a builtin nor an executable on PATH."""

    def __init__(self, command: str) -> None:
        super().__init__(f"{command}: command not found", command=command)


class RedirectionError(ShellError):
    """
    Redirect target could not be opened, created, read or written.

    Example:
        >>> raise RedirectionError("echo", "/root/x", "Permission denied")
    """

    def __init__(self, command: str, target: str, reason: str) -> None:
        super().__init__(f"{command}: {target}: {reason}", command=command)
        self.target = target
        self.reason = reason


class ProcessSpawnError(ShellError):
    """Resolved executable failed to start (permission changed, bad format...)."""

    def __init__(self, command: str, path: str, reason: str) -> None:
        super().__init__(f"{command}: {reason}", command=command)
        self.path = path
        self.reason = reason


class ShellExit(Exception):
    """Raised by the ``exit`` builtin to terminate the interpreter."""

    def __init__(self, code: int = 0) -> None:
        super().__init__(code)
        self.code = code
