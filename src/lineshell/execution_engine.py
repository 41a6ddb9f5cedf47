"""
Execution Engine - Single point for all subprocess operations

ARCHITECTURE:
This is the SINGLE SUBPROCESS EXECUTION POINT of lineshell.
ALL subprocess calls go through this class (no direct subprocess.Popen() elsewhere).

Position in hierarchy:
    Shell
      ↓
    PipelineExecutor
      ↓
    ExecutionEngine ← THIS CLASS (SINGLE POINT)
      ↓
    subprocess.Popen() + communicate()

RESPONSIBILITIES:
1. Spawn one external program, wait for it, return its CompletedProcess
2. Feed stdin bytes: written in full, then closed, before the wait
   (a blocking request/response relay, not a live duplex pipe)
3. Interrupts: while a child runs, SIGINT is swallowed by the interpreter
   and delivered to the child only; the previous handler is restored after
4. Logging: trace every spawn for debugging
5. Statistics: count spawns and failures
6. Error handling: OSError from spawning becomes ProcessSpawnError

NOT RESPONSIBLE FOR:
- Resolving the program (CommandResolver)
- Opening redirect files (PipelineExecutor)
- Deciding where output goes (PipelineExecutor)

DATA FLOW:
    spawn('/usr/bin/wc', ['wc', '-l'], cwd, env, input=b'a\\nb\\n', stdout=PIPE) →
        1. Popen(['wc', '-l'], executable='/usr/bin/wc', stdin=PIPE, stdout=PIPE).communicate(...)
        2. CompletedProcess(returncode=0, stdout=b'2\\n')
"""
import logging
import signal
import subprocess
from typing import Dict, List, Optional

from .errors import ProcessSpawnError


_NOT_INSTALLED = object()


def _ignore_interrupt(signum, frame):
    pass


class ExecutionEngine:
    """
    Single point of subprocess execution.

    Keeps every spawn in one place for logging, statistics and error
    handling. The interpreter blocks until each child exits.
    """

    def __init__(self, logger: logging.Logger = None):
        """
        Initialize execution engine.

        Args:
            logger: Logger instance for execution tracking
        """
        self.logger = logger or logging.getLogger('ExecutionEngine')

        # Execution statistics
        self.stats = {
            'spawned': 0,
            'failed': 0,
            'total': 0
        }

    def spawn(self, path: str, argv: List[str], cwd: str, env: Dict[str, str],
              input: Optional[bytes] = None, stdin=None, stdout=None, stderr=None) -> subprocess.CompletedProcess:
        """
        Run an external program to completion.

        Args:
            path: Resolved executable
            argv: Full argv; argv[0] is kept as typed by the user
            cwd: Working directory of the child
            env: Environment of the child
            input: Bytes fed to stdin (overrides stdin)
            stdin: None (inherit), subprocess.DEVNULL or a file object
            stdout: None (inherit), subprocess.PIPE or a file object
            stderr: None (inherit), subprocess.PIPE or a file object

        Returns:
            CompletedProcess; stdout/stderr are bytes when PIPE was requested

        Raises:
            ProcessSpawnError: the program could not be started
        """
        self.stats['total'] += 1
        self.logger.debug(f"Spawning {path}: {argv}")

        try:
            process = subprocess.Popen(
                argv,
                executable=path,
                cwd=cwd,
                env=env,
                stdin=subprocess.PIPE if input is not None else stdin,
                stdout=stdout,
                stderr=stderr,
            )
        except OSError as e:
            self.stats['failed'] += 1
            self.logger.debug(f"Spawn of {path} failed: {e}")
            raise ProcessSpawnError(argv[0], path, e.strerror or str(e)) from e

        self.stats['spawned'] += 1

        # Ctrl-C belongs to the child while it runs
        previous = self._hold_interrupts()
        try:
            out, err = process.communicate(input)
        finally:
            self._release_interrupts(previous)

        self.logger.debug(f"{argv[0]} exited with {process.returncode}")
        return subprocess.CompletedProcess(argv, process.returncode, out, err)

    def get_stats(self) -> Dict[str, int]:
        """Get execution statistics"""
        return self.stats.copy()

    def reset_stats(self):
        """Reset execution statistics"""
        for key in self.stats:
            self.stats[key] = 0

    # ========================================================================
    # INTERRUPT HANDLING
    # ========================================================================

    def _hold_interrupts(self):
        """
        Swallow SIGINT in the interpreter until _release_interrupts.

        A Python-level handler is installed rather than SIG_IGN: an ignored
        disposition would be inherited by later children across exec, a
        handler is reset to the default.

        Returns:
            The previous handler, or _NOT_INSTALLED off the main thread
        """
        try:
            return signal.signal(signal.SIGINT, _ignore_interrupt)
        except ValueError:
            # signal.signal only works in the main thread
            return _NOT_INSTALLED

    def _release_interrupts(self, previous) -> None:
        if previous is _NOT_INSTALLED:
            return
        if previous is None:
            previous = signal.default_int_handler
        signal.signal(signal.SIGINT, previous)
