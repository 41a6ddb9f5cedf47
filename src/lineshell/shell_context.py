"""
Shell Context - Process-wide state threaded through every component

The interpreter has exactly one piece of shared mutable state: the working
directory. It lives here, next to the environment and the terminal streams,
so the resolver, the builtins and the executor never read ambient OS state
directly.

Architecture:
    - ShellContext: working directory + environment + terminal streams
    - Read by CommandResolver (PATH, relative lookups), pwd, redirections
    - Mutated only by the cd builtin (change_directory)

Example:
    >>> import io
    >>> context = ShellContext(cwd='/tmp', env={'PATH': '/bin', 'HOME': '/root'},
    ...                        stdout=io.StringIO(), stderr=io.StringIO())
    >>> context.resolve_path('out.txt')
    '/tmp/out.txt'
"""

import os
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional, TextIO


@dataclass
class ShellContext:
    """
    State shared by the components of one interpreter session.

    Attributes:
        cwd: Absolute working directory
        env: Environment mapping (PATH, HOME, passed to children)
        stdout: Terminal output stream
        stderr: Terminal error stream
        inherit_stdio: If True, children inherit the real terminal descriptors
            instead of having their output copied into stdout/stderr
        sync_process_cwd: If True, cd also calls os.chdir
    """
    cwd: str
    env: Dict[str, str] = field(default_factory=dict)
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)
    inherit_stdio: bool = False
    sync_process_cwd: bool = False

    @classmethod
    def from_environment(cls) -> 'ShellContext':
        """Build the live context of an interactive session."""
        return cls(
            cwd=os.getcwd(),
            env=dict(os.environ),
            stdout=sys.stdout,
            stderr=sys.stderr,
            inherit_stdio=True,
            sync_process_cwd=True,
        )

    @property
    def home(self) -> str:
        return self.env.get('HOME', '')

    def search_path(self) -> List[str]:
        """PATH entries in order, empty entries dropped."""
        return [d for d in self.env.get('PATH', '').split(':') if d]

    def resolve_path(self, path: str) -> str:
        """Absolute, normalised form of path relative to the working directory."""
        return os.path.normpath(os.path.join(self.cwd, path))

    def expand_home(self, path: str) -> str:
        """Replace a bare ~ or a leading ~/ with HOME; ~user is left alone."""
        if path == '~' or path.startswith('~/'):
            return self.home + path[1:]
        return path

    def change_directory(self, path: str) -> Optional[str]:
        """
        Move the working directory.

        Args:
            path: Target, already ~-expanded; relative to cwd if not absolute

        Returns:
            None on success, otherwise the reason it failed
            ('No such file or directory' or 'Not a directory')
        """
        target = self.resolve_path(path)
        if not os.path.exists(target):
            return 'No such file or directory'
        if not os.path.isdir(target):
            return 'Not a directory'

        if self.sync_process_cwd:
            try:
                os.chdir(target)
            except OSError as e:
                return e.strerror or str(e)

        self.cwd = target
        return None
