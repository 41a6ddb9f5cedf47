"""
Tab completion for command names.

Candidates are the builtin names plus every executable on PATH, matched by
prefix. Only the command position (first word of a line) is completed.
Wired into the standard readline module when it is available.
"""
import logging
from typing import List, Optional

from .command_resolver import CommandResolver
from .constants import BUILTIN_NAMES

try:
    import readline  # Linux/macOS
except ImportError:
    readline = None


class CommandCompleter:
    """readline completer over builtins + PATH executables"""

    def __init__(self, resolver: CommandResolver, logger: logging.Logger = None):
        self.resolver = resolver
        self.logger = logger or logging.getLogger('CommandCompleter')
        self._matches: List[str] = []

    def candidates(self, prefix: str) -> List[str]:
        """Sorted builtin and PATH executable names starting with prefix."""
        pool = set(BUILTIN_NAMES) | set(self.resolver.list_executables())
        return sorted(name for name in pool if name.startswith(prefix))

    def complete(self, text: str, state: int,
                 line: Optional[str] = None, begidx: Optional[int] = None) -> Optional[str]:
        """
        readline callback: return the state-th match for text.

        line/begidx default to readline's buffer. A unique match gets a
        trailing space so the first argument can be typed straight away.
        """
        if state == 0:
            if line is None:
                line = readline.get_line_buffer() if readline else text
            if begidx is None:
                begidx = readline.get_begidx() if readline else 0

            if line[:begidx].strip():
                # Past the command word
                self._matches = []
            else:
                matches = self.candidates(text)
                if len(matches) == 1:
                    matches = [matches[0] + ' ']
                self._matches = matches
            self.logger.debug(f"Completion {text!r}: {len(self._matches)} matches")

        return self._matches[state] if state < len(self._matches) else None


def install_completion(completer: CommandCompleter) -> bool:
    """
    Register completer with readline.

    Returns:
        False when readline is not available
    """
    if readline is None:
        return False

    readline.set_completer_delims(" \t\n><|")
    readline.set_completer(completer.complete)

    doc = readline.__doc__ or ""
    if "libedit" in doc:
        readline.parse_and_bind("bind ^I rl_complete")
    else:
        readline.parse_and_bind("tab: complete")

    return True
