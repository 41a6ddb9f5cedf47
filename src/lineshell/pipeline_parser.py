"""
Pipeline Parser - raw line to executable stages

OBJECTIVE: Turn one input line into an ordered list of stages, each with its
argv and its redirections.

============================================================================
USAGE
============================================================================

Tokenize a single segment:
    >>> tokenize("echo 'it''s' a\\\\ b")
    ['echo', "it's", 'a b']

Parse a full line:
    >>> pipeline = parse_pipeline("cat notes.txt | wc -l > count.txt")
    >>> [stage.argv for stage in pipeline.stages]
    [['cat', 'notes.txt'], ['wc', '-l']]
    >>> pipeline.stages[1].stdout_redirect
    Redirection(kind=<RedirectKind.STDOUT: 'stdout'>, target='count.txt', append=False)

============================================================================
ARCHITECTURE
============================================================================

    Input (raw line) →
        split_pipeline (unquoted | only) →
            per segment: ShellLexer (quotes / escapes → words) →
                extract_redirections (words → argv + redirections) →
                    Pipeline (ordered PipelineStage list)

The order is fixed: split into stages FIRST, then tokenize and extract
redirections per stage. Quote state never crosses a | boundary.

============================================================================
QUOTING RULES
============================================================================

    '...'   everything literal, backslash included
    "..."   backslash escapes only " and \\ ; any other \\x stays as \\x
    bare    backslash escapes the next character; whitespace splits words

An unterminated quote is not an error: the text up to end of input still
forms the last word. A trailing lone backslash is dropped.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .constants import REDIRECT_OPERATORS
from .errors import ParseSyntaxError

logger = logging.getLogger('PipelineParser')


# ============================================================================
# DATA MODEL
# ============================================================================

class RedirectKind(Enum):
    """Stream a redirection applies to"""
    STDOUT = "stdout"
    STDERR = "stderr"
    STDIN = "stdin"


@dataclass
class Redirection:
    """
    One redirection of one stage.

    Examples:
        > out.txt     Redirection(STDOUT, 'out.txt', append=False)
        2>> err.log   Redirection(STDERR, 'err.log', append=True)
        < in.txt      Redirection(STDIN, 'in.txt', append=False)
    """
    kind: RedirectKind
    target: str
    append: bool = False


@dataclass
class PipelineStage:
    """A single command of a pipeline, redirections already removed from argv."""
    argv: List[str]
    redirections: List[Redirection] = field(default_factory=list)
    diagnostics: List[ParseSyntaxError] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.argv[0] if self.argv else ''

    @property
    def args(self) -> List[str]:
        return self.argv[1:]

    def _last(self, kind: RedirectKind) -> Optional[Redirection]:
        # Repeated redirections of the same kind: last one wins
        found = None
        for redirection in self.redirections:
            if redirection.kind is kind:
                found = redirection
        return found

    @property
    def stdin_redirect(self) -> Optional[Redirection]:
        return self._last(RedirectKind.STDIN)

    @property
    def stdout_redirect(self) -> Optional[Redirection]:
        return self._last(RedirectKind.STDOUT)

    @property
    def stderr_redirect(self) -> Optional[Redirection]:
        return self._last(RedirectKind.STDERR)

    def __repr__(self):
        redir_str = ''.join(
            f" [{r.kind.value}{'>>' if r.append else ''} {r.target}]"
            for r in self.redirections
        )
        return f"Stage({' '.join(self.argv)}{redir_str})"


@dataclass
class Pipeline:
    """Stages connected by pipes, in execution order."""
    stages: List[PipelineStage] = field(default_factory=list)

    def __len__(self):
        return len(self.stages)

    def __repr__(self):
        return f"Pipeline({' | '.join(repr(s) for s in self.stages)})"


# ============================================================================
# LEXER - TOKENIZATION
# ============================================================================

class ShellLexer:
    """
    Quote/escape state machine for one pipeline segment.

    Handles:
    - Single quotes (fully literal)
    - Double quotes (\\" and \\\\ only)
    - Backslash escapes outside quotes
    - Whitespace separation, no empty words
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.length = len(text)

    def tokenize(self) -> List[str]:
        """Tokenize input into list of words"""
        words = []
        word = []
        # '' and "" on their own contribute nothing: no empty words
        in_single = False
        in_double = False

        while self.pos < self.length:
            char = self._current()

            if in_single:
                if char == "'":
                    in_single = False
                else:
                    word.append(char)
                self.pos += 1
                continue

            if in_double:
                if char == '"':
                    in_double = False
                    self.pos += 1
                elif char == '\\' and self._peek() in ('"', '\\'):
                    word.append(self._peek())
                    self.pos += 2
                else:
                    word.append(char)
                    self.pos += 1
                continue

            if char == "'":
                in_single = True
                self.pos += 1
                continue

            if char == '"':
                in_double = True
                self.pos += 1
                continue

            if char == '\\':
                # Trailing lone backslash: dropped
                if self.pos + 1 < self.length:
                    word.append(self._peek())
                self.pos += 2
                continue

            if char.isspace():
                if word:
                    words.append(''.join(word))
                    word = []
                self.pos += 1
                continue

            word.append(char)
            self.pos += 1

        if in_single or in_double:
            logger.debug(f"Unterminated quote in: {self.text!r}")

        if word:
            words.append(''.join(word))

        return words

    def _current(self) -> str:
        """Get current character"""
        if self.pos >= self.length:
            return ''
        return self.text[self.pos]

    def _peek(self, offset: int = 1) -> str:
        """Peek ahead"""
        pos = self.pos + offset
        if pos >= self.length:
            return ''
        return self.text[pos]


def tokenize(text: str) -> List[str]:
    """Tokenize one segment. Blank input gives []."""
    return ShellLexer(text).tokenize()


# ============================================================================
# PIPE SPLITTING
# ============================================================================

def split_pipeline(line: str) -> List[str]:
    """
    Split a raw line on unquoted, unescaped |.

    Quote state is tracked only to locate the split points; the segments are
    returned raw (quotes and escapes untouched) for ShellLexer.

    Example:
        >>> split_pipeline("echo 'a|b' | cat")
        ["echo 'a|b' ", ' cat']
    """
    segments = []
    current = []
    in_single = False
    in_double = False
    i = 0

    while i < len(line):
        char = line[i]

        if in_single:
            if char == "'":
                in_single = False
        elif in_double:
            if char == '"':
                in_double = False
            elif char == '\\' and i + 1 < len(line):
                current.append(char)
                i += 1
                char = line[i]
        elif char == '\\':
            if i + 1 < len(line):
                current.append(char)
                i += 1
                char = line[i]
        elif char == "'":
            in_single = True
        elif char == '"':
            in_double = True
        elif char == '|':
            segments.append(''.join(current))
            current = []
            i += 1
            continue

        current.append(char)
        i += 1

    segments.append(''.join(current))
    return segments


# ============================================================================
# REDIRECTION EXTRACTION
# ============================================================================

def extract_redirections(tokens: List[str]) -> Tuple[List[str], List[Redirection], List[ParseSyntaxError]]:
    """
    Separate argv from redirections, scanning left to right.

    An operator with no following token is reported as a ParseSyntaxError and
    skipped; everything collected so far is kept.

    Args:
        tokens: Words of one stage

    Returns:
        (argv, redirections, diagnostics)
    """
    argv = []
    redirections = []
    diagnostics = []

    i = 0
    while i < len(tokens):
        token = tokens[i]
        operator = REDIRECT_OPERATORS.get(token)

        if operator is None:
            argv.append(token)
            i += 1
            continue

        stream, append = operator
        if i + 1 >= len(tokens):
            diagnostics.append(ParseSyntaxError(token, command=argv[0] if argv else None))
            i += 1
            continue

        redirections.append(Redirection(RedirectKind(stream), tokens[i + 1], append))
        i += 2

    return argv, redirections, diagnostics


# ============================================================================
# PUBLIC API
# ============================================================================

def parse_stage(segment: str) -> PipelineStage:
    """Tokenize one segment and extract its redirections."""
    argv, redirections, diagnostics = extract_redirections(tokenize(segment))
    return PipelineStage(argv, redirections, diagnostics)


def parse_pipeline(line: str) -> Pipeline:
    """
    Parse a raw line into a Pipeline.

    A blank line gives an empty Pipeline. A line without | gives a
    single-stage Pipeline.
    """
    if not line.strip():
        return Pipeline()

    stages = [parse_stage(segment) for segment in split_pipeline(line)]
    pipeline = Pipeline(stages)
    logger.debug(f"Parsed: {pipeline}")
    return pipeline
