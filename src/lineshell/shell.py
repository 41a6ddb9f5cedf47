"""
Shell - read-eval loop (thin layer)

Position in hierarchy:
    USER (terminal)
       ↓
    Shell (this module) ← READ-EVAL LOOP
       ↓
    PipelineExecutor ← parse + execute one line
       ↓
    ├── CommandResolver
    ├── BuiltinDispatch
    └── ExecutionEngine

RESPONSIBILITIES:
1. Print the prompt, read one line, hand it to PipelineExecutor
2. Turn ShellExit into the process exit status
3. Keep the loop alive: no diagnostic or unexpected error ends the session;
   only exit or end-of-input does
4. Logging setup and the command-line entry point

USAGE PATTERN:
    $ lineshell
    $ echo hi | cat
    hi
    $ exit 0

    $ lineshell -c "type cd"
    cd is a shell builtin
"""
import argparse
import logging
import os
import sys
from typing import List, Optional, TextIO

from .completion import CommandCompleter, install_completion
from .constants import DEFAULT_LOG_LEVEL, EXIT_FAILURE, EXIT_SUCCESS, LOG_FILE_ENV, LOG_FORMAT, LOG_LEVEL_ENV, PROMPT
from .errors import ShellExit
from .pipeline_executor import PipelineExecutor
from .shell_context import ShellContext


class Shell:
    """
    Interactive interpreter session.

    One full line, including its whole pipeline, completes before the next
    line is read.
    """

    def __init__(self, context: Optional[ShellContext] = None,
                 executor: Optional[PipelineExecutor] = None,
                 input_stream: Optional[TextIO] = None,
                 logger: logging.Logger = None):
        """
        Initialize Shell

        Args:
            context: Shell state (live environment if None)
            executor: Line executor (created from context if None)
            input_stream: Where lines come from; None means input(), which
                goes through readline when it is loaded
            logger: Logger instance
        """
        self.context = context or ShellContext.from_environment()
        self.executor = executor or PipelineExecutor(self.context)
        self.input_stream = input_stream
        self.logger = logger or logging.getLogger('Shell')
        self.last_status = EXIT_SUCCESS

    def read_line(self) -> str:
        """
        Prompt and read one line, without its newline.

        Raises:
            EOFError: end of input
        """
        if self.input_stream is None:
            return input(PROMPT)

        self.context.stdout.write(PROMPT)
        self.context.stdout.flush()
        line = self.input_stream.readline()
        if not line:
            raise EOFError
        return line.rstrip('\n')

    def run_command(self, line: str) -> int:
        """
        Execute one line.

        Returns:
            Status of the line's last stage

        Raises:
            ShellExit: the exit builtin ran
        """
        self.last_status = self.executor.execute(line)
        self.context.stdout.flush()
        return self.last_status

    def run(self) -> int:
        """
        Read-eval loop.

        Returns:
            Exit status: the exit builtin's code, or 0 at end of input
        """
        self.logger.info("Session started")
        while True:
            try:
                line = self.read_line()
            except EOFError:
                self.context.stdout.write('\n')
                return EXIT_SUCCESS
            except KeyboardInterrupt:
                # Discard the pending line only
                self.context.stdout.write('\n')
                continue

            try:
                self.run_command(line)
            except ShellExit as e:
                self.logger.info(f"exit {e.code}")
                return e.code
            except KeyboardInterrupt:
                self.context.stdout.write('\n')
                self.last_status = EXIT_FAILURE
            except Exception as e:
                self.logger.error(f"Execution error: {e}", exc_info=True)
                self.context.stderr.write(f"lineshell: {e}\n")
                self.last_status = EXIT_FAILURE


# ============================================================================
# ENTRY POINT
# ============================================================================

def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Level: argument, else $LINESHELL_LOG_LEVEL, else WARNING.
    Output: $LINESHELL_LOG_FILE when set, else stderr.
    """
    level = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    log_file = os.environ.get(LOG_FILE_ENV)

    kwargs = {'filename': log_file} if log_file else {'stream': sys.stderr}
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format=LOG_FORMAT,
        **kwargs
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='lineshell', description='Interactive command interpreter')
    parser.add_argument('-c', dest='command', metavar='COMMAND',
                        help='execute COMMAND and exit with its status')
    parser.add_argument('--log-level', default=None,
                        help=f'DEBUG, INFO, WARNING (default), ERROR; or ${LOG_LEVEL_ENV}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    shell = Shell()

    if args.command is not None:
        try:
            return shell.run_command(args.command)
        except ShellExit as e:
            return e.code

    if sys.stdin.isatty():
        install_completion(CommandCompleter(shell.executor.resolver))

    return shell.run()
