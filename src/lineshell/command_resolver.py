"""
Command Resolver - argv[0] to builtin kind, executable path, or not-found

RESPONSIBILITIES:
1. Classify a command name into the closed CommandKind variant
2. Walk PATH (in order, on every call) for external executables
3. List every executable on PATH for the completion surface

NOT RESPONSIBLE FOR:
- Running anything (PipelineExecutor / ExecutionEngine)
- Reporting not-found (caller prints '<name>: command not found')

EXECUTABLE TEST:
A candidate <dir>/<name> matches when it exists, is a regular file, and has
the user-executable permission bit (S_IXUSR) set. PATH entries that are
relative are resolved against the shell working directory, not the host
process one.
"""
import logging
import os
import stat
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .shell_context import ShellContext


class CommandKind(Enum):
    """Closed set of things a command name can resolve to"""
    EXIT = "exit"
    ECHO = "echo"
    TYPE = "type"
    PWD = "pwd"
    CD = "cd"
    EXTERNAL = "external"
    NOT_FOUND = "not_found"

    @property
    def is_builtin(self) -> bool:
        return self not in (CommandKind.EXTERNAL, CommandKind.NOT_FOUND)


BUILTIN_KINDS = {kind.value: kind for kind in CommandKind if kind.is_builtin}


@dataclass
class ResolvedCommand:
    """Result of resolving one command name."""
    kind: CommandKind
    name: str
    path: Optional[str] = None

    @property
    def is_builtin(self) -> bool:
        return self.kind.is_builtin

    @property
    def found(self) -> bool:
        return self.kind is not CommandKind.NOT_FOUND


class CommandResolver:
    """
    Resolves command names against the builtin table and PATH.

    No cache: PATH is re-read from the context and re-walked on every call,
    so changes to PATH or to the working directory take effect immediately.
    """

    def __init__(self, context: ShellContext, logger: logging.Logger = None):
        self.context = context
        self.logger = logger or logging.getLogger('CommandResolver')

    def resolve(self, name: str) -> ResolvedCommand:
        """
        Classify name.

        Args:
            name: argv[0] of a stage

        Returns:
            ResolvedCommand with kind builtin, EXTERNAL (+ path) or NOT_FOUND
        """
        kind = BUILTIN_KINDS.get(name)
        if kind is not None:
            return ResolvedCommand(kind, name)

        path = self.find_executable(name)
        if path:
            return ResolvedCommand(CommandKind.EXTERNAL, name, path)

        self.logger.debug(f"Not found: {name}")
        return ResolvedCommand(CommandKind.NOT_FOUND, name)

    def find_executable(self, name: str) -> Optional[str]:
        """
        Locate an executable.

        A name containing '/' is checked directly (relative to cwd).
        Otherwise the first PATH directory holding an executable <name> wins.

        Returns:
            Path of the executable, or None
        """
        if not name:
            return None

        if '/' in name:
            candidate = self.context.resolve_path(name)
            return candidate if self._is_executable(candidate) else None

        for directory in self.context.search_path():
            candidate = os.path.join(self.context.resolve_path(directory), name)
            if self._is_executable(candidate):
                self.logger.debug(f"Resolved {name} -> {candidate}")
                return candidate

        return None

    def list_executables(self) -> List[str]:
        """
        Names of every executable file across PATH directories.

        Returns:
            Sorted, de-duplicated list of bare file names
        """
        names = set()
        for directory in self.context.search_path():
            directory = self.context.resolve_path(directory)
            try:
                entries = os.listdir(directory)
            except OSError as e:
                self.logger.debug(f"Skipping PATH entry {directory}: {e}")
                continue
            for entry in entries:
                if self._is_executable(os.path.join(directory, entry)):
                    names.add(entry)
        return sorted(names)

    @staticmethod
    def _is_executable(path: str) -> bool:
        try:
            mode = os.stat(path).st_mode
        except OSError:
            return False
        return stat.S_ISREG(mode) and bool(mode & stat.S_IXUSR)
