"""
Shell Built-in Commands

echo, pwd, cd, type and exit, executed inside the interpreter process.

Every handler gets its arguments plus an output sink and an error sink (text
streams). The executor picks the sinks: the terminal for a final stage, an
in-memory buffer for a stage feeding a pipe, a redirect target file when one
is declared. Handlers never look at sys.stdout themselves.
"""

import logging
from typing import Callable, Dict, List, TextIO

from .command_resolver import CommandKind, CommandResolver
from .constants import EXIT_FAILURE, EXIT_SUCCESS, EXIT_USAGE
from .errors import ShellExit
from .shell_context import ShellContext


class BuiltinDispatch:
    """
    Built-in shell commands.

    cd and exit act on the shell state itself (working directory, process
    lifetime); they never produce captured output.
    """

    def __init__(self, context: ShellContext, resolver: CommandResolver,
                 logger: logging.Logger = None):
        self.context = context
        self.resolver = resolver
        self.logger = logger or logging.getLogger('BuiltinDispatch')
        self._commands: Dict[CommandKind, Callable[[List[str], TextIO, TextIO], int]] = {
            CommandKind.ECHO: self.cmd_echo,
            CommandKind.PWD: self.cmd_pwd,
            CommandKind.CD: self.cmd_cd,
            CommandKind.TYPE: self.cmd_type,
            CommandKind.EXIT: self.cmd_exit,
        }

    def execute(self, kind: CommandKind, args: List[str], out: TextIO, err: TextIO) -> int:
        """
        Execute a built-in command.

        Args:
            kind: Builtin kind (from CommandResolver)
            args: Arguments after the command name
            out: Output sink
            err: Error sink

        Returns:
            Exit code

        Raises:
            ShellExit: for exit
            KeyError: kind is not a builtin
        """
        handler = self._commands[kind]
        self.logger.debug(f"Builtin {kind.value} {args}")
        return handler(args, out, err)

    # Command implementations

    def cmd_echo(self, args: List[str], out: TextIO, err: TextIO) -> int:
        out.write(' '.join(args) + '\n')
        return EXIT_SUCCESS

    def cmd_pwd(self, args: List[str], out: TextIO, err: TextIO) -> int:
        out.write(self.context.cwd + '\n')
        return EXIT_SUCCESS

    def cmd_cd(self, args: List[str], out: TextIO, err: TextIO) -> int:
        """Change directory; no argument means HOME."""
        if len(args) > 1:
            err.write("cd: too many arguments\n")
            return EXIT_FAILURE

        path = self.context.expand_home(args[0]) if args else self.context.home
        if not path:
            err.write("cd: HOME not set\n")
            return EXIT_FAILURE

        reason = self.context.change_directory(path)
        if reason:
            err.write(f"cd: {path}: {reason}\n")
            return EXIT_FAILURE

        self.logger.debug(f"cwd -> {self.context.cwd}")
        return EXIT_SUCCESS

    def cmd_type(self, args: List[str], out: TextIO, err: TextIO) -> int:
        """Report how each name would be interpreted."""
        status = EXIT_SUCCESS
        for name in args:
            resolved = self.resolver.resolve(name)
            if resolved.is_builtin:
                out.write(f"{name} is a shell builtin\n")
            elif resolved.found:
                out.write(f"{name} is {resolved.path}\n")
            else:
                out.write(f"{name} not found\n")
                status = EXIT_FAILURE
        return status

    def cmd_exit(self, args: List[str], out: TextIO, err: TextIO) -> int:
        """
        Terminate the interpreter.

        `exit` and `exit 0` exit with 0; `exit N` with N modulo 256. A
        non-numeric argument still exits, with status 2.
        """
        if not args:
            raise ShellExit(EXIT_SUCCESS)

        try:
            code = int(args[0])
        except ValueError:
            err.write(f"exit: {args[0]}: numeric argument required\n")
            raise ShellExit(EXIT_USAGE)

        raise ShellExit(code & 0xFF)
