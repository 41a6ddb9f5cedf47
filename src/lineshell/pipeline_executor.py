"""
Pipeline Executor - Stage-by-stage orchestration of one input line

ARCHITECTURE:
    execute(line)
        ↓
    parse_pipeline(line) → Pipeline (stages, diagnostics)
        ↓
    for each stage, in order (Pending → Running → Completed):
        ├─ open redirect targets (parent dirs created, > truncates, >> appends)
        ├─ read < input eagerly
        ├─ resolve argv[0]
        ├─ builtin  → BuiltinDispatch with buffer / terminal / file sink
        ├─ external → ExecutionEngine.spawn with captured / inherited stdout
        └─ not found → '<name>: command not found', stage aborted
        ↓
    status of the last stage

STAGE WIRING (stage i of N):
    input:  stage 0 → terminal (or < file bytes)
            stage i>0 → captured output of stage i-1 (or < file bytes)
    output: stdout redirect → file
            last stage → terminal
            otherwise → in-memory buffer handed to stage i+1
    errors: 2> redirect → file, otherwise terminal error stream

Every stage's output is captured in full before the next stage starts.
Stages never run concurrently.

FAILURE SEMANTICS:
- Resolution / spawn failure: reported as '<name>: command not found', only
  that stage is aborted; the next stage runs with empty input.
- Redirect open/read failure: reported, the rest of the line is aborted.
- ShellExit from the exit builtin propagates to the caller.
"""
import io
import logging
import os
import subprocess
from contextlib import ExitStack
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, TextIO

from .builtins import BuiltinDispatch
from .command_resolver import CommandResolver, ResolvedCommand
from .constants import EXIT_CANNOT_EXECUTE, EXIT_FAILURE, EXIT_NOT_FOUND, EXIT_SUCCESS
from .errors import ProcessSpawnError, RedirectionError, ResolutionError, ShellError
from .execution_engine import ExecutionEngine
from .pipeline_parser import Pipeline, PipelineStage, Redirection, parse_pipeline
from .shell_context import ShellContext


class StageState(Enum):
    """Lifecycle of one stage"""
    PENDING = auto()
    RUNNING = auto()
    COMPLETED = auto()


@dataclass
class StageResult:
    """
    Uniform outcome of a builtin or an external process.

    output holds the captured bytes for the next stage; None when the stage
    wrote to the terminal or to a file.
    """
    name: str
    returncode: int
    output: Optional[bytes] = None


class PipelineExecutor:
    """
    Runs one line: parse, then execute its stages in order.

    This is the CORE orchestrator. Subprocess work is delegated to
    ExecutionEngine, builtins to BuiltinDispatch, lookup to CommandResolver.
    """

    def __init__(self, context: ShellContext,
                 resolver: Optional[CommandResolver] = None,
                 builtins: Optional[BuiltinDispatch] = None,
                 engine: Optional[ExecutionEngine] = None,
                 logger: logging.Logger = None):
        """
        Initialize PipelineExecutor.

        Args:
            context: Shell state (cwd, env, terminal streams)
            resolver: Command resolver (created from context if None)
            builtins: Builtin dispatch (created from context if None)
            engine: Subprocess execution point (created if None)
            logger: Logger instance
        """
        self.context = context
        self.logger = logger or logging.getLogger('PipelineExecutor')
        self.resolver = resolver or CommandResolver(context)
        self.builtins = builtins or BuiltinDispatch(context, self.resolver)
        self.engine = engine or ExecutionEngine()

        self.logger.debug("PipelineExecutor initialized")

    # ========================================================================
    # MAIN EXECUTION ENTRY POINT
    # ========================================================================

    def execute(self, line: str) -> int:
        """
        Execute one input line.

        Args:
            line: Raw line, without the trailing newline

        Returns:
            Exit status of the last stage (0 for a blank line)

        Raises:
            ShellExit: the exit builtin ran
        """
        pipeline = parse_pipeline(line)
        if not pipeline.stages:
            return EXIT_SUCCESS

        try:
            results = self.run_pipeline(pipeline)
        except RedirectionError as e:
            self.logger.debug(f"Line aborted: {e}")
            self._report(e, self.context.stderr)
            return EXIT_FAILURE

        return results[-1].returncode

    def run_pipeline(self, pipeline: Pipeline) -> List[StageResult]:
        """
        Execute the stages of pipeline in order, relaying captured output.

        Returns:
            One StageResult per stage
        """
        total = len(pipeline.stages)
        results = []
        previous: Optional[bytes] = None

        for i, stage in enumerate(pipeline.stages):
            is_last = i == total - 1
            self._trace(i, total, StageState.PENDING, stage)

            for diagnostic in stage.diagnostics:
                self._report(diagnostic, self.context.stderr)

            self._trace(i, total, StageState.RUNNING, stage)
            result = self._run_stage(stage, previous if i > 0 else None, is_last)
            self._trace(i, total, StageState.COMPLETED, stage)

            results.append(result)
            previous = result.output if result.output is not None else b''

        return results

    # ========================================================================
    # STAGE EXECUTION
    # ========================================================================

    def _run_stage(self, stage: PipelineStage, stdin_data: Optional[bytes], is_last: bool) -> StageResult:
        """
        Execute one stage.

        Args:
            stage: Parsed stage
            stdin_data: Captured output of the previous stage (None for stage 0)
            is_last: Whether output goes to the terminal

        Raises:
            RedirectionError: a redirect target could not be opened or read
        """
        with ExitStack() as stack:
            if stage.stdin_redirect:
                stdin_data = self._read_input(stage, stage.stdin_redirect)

            out_file = self._open_target(stage, stage.stdout_redirect, stack)
            err_file = self._open_target(stage, stage.stderr_redirect, stack)

            if not stage.argv:
                return StageResult('', EXIT_SUCCESS)

            resolved = self.resolver.resolve(stage.name)

            if resolved.is_builtin:
                return self._run_builtin(stage, resolved, out_file, err_file, is_last)

            if not resolved.found:
                self._report(ResolutionError(stage.name), err_file or self.context.stderr)
                return StageResult(stage.name, EXIT_NOT_FOUND)

            return self._run_external(stage, resolved, stdin_data, out_file, err_file, is_last)

    def _run_builtin(self, stage: PipelineStage, resolved: ResolvedCommand,
                     out_file: Optional[TextIO], err_file: Optional[TextIO],
                     is_last: bool) -> StageResult:
        buffer = None
        if out_file is not None:
            out = out_file
        elif is_last:
            out = self.context.stdout
        else:
            out = buffer = io.StringIO()

        err = err_file or self.context.stderr
        returncode = self.builtins.execute(resolved.kind, stage.args, out, err)

        output = buffer.getvalue().encode('utf-8') if buffer is not None else None
        return StageResult(stage.name, returncode, output)

    def _run_external(self, stage: PipelineStage, resolved: ResolvedCommand,
                      stdin_data: Optional[bytes], out_file: Optional[TextIO],
                      err_file: Optional[TextIO], is_last: bool) -> StageResult:
        inherit = self.context.inherit_stdio

        if out_file is not None:
            stdout = out_file
        elif is_last and inherit:
            stdout = None
        else:
            stdout = subprocess.PIPE

        if err_file is not None:
            stderr = err_file
        else:
            stderr = None if inherit else subprocess.PIPE

        stdin = None if inherit else subprocess.DEVNULL

        # Keep builtin output already written ahead of the child's
        self.context.stdout.flush()
        self.context.stderr.flush()

        try:
            completed = self.engine.spawn(
                resolved.path,
                stage.argv,
                cwd=self.context.cwd,
                env=self.context.env,
                input=stdin_data,
                stdin=stdin,
                stdout=stdout,
                stderr=stderr,
            )
        except ProcessSpawnError as e:
            self.logger.debug(f"Spawn failed: {e.path}: {e.reason}")
            self._report(ResolutionError(stage.name), err_file or self.context.stderr)
            return StageResult(stage.name, EXIT_CANNOT_EXECUTE)

        if stderr is subprocess.PIPE and completed.stderr:
            self.context.stderr.write(completed.stderr.decode('utf-8', errors='replace'))

        output = None
        if stdout is subprocess.PIPE:
            if is_last:
                self.context.stdout.write(completed.stdout.decode('utf-8', errors='replace'))
            else:
                output = completed.stdout

        return StageResult(stage.name, completed.returncode, output)

    # ========================================================================
    # REDIRECTIONS
    # ========================================================================

    def _open_target(self, stage: PipelineStage, redirection: Optional[Redirection],
                     stack: ExitStack) -> Optional[TextIO]:
        """
        Create (or append to) an output redirect target.

        Missing parent directories are created first. The file is closed when
        the stage finishes.
        """
        if redirection is None:
            return None

        path = self.context.resolve_path(redirection.target)
        mode = 'a' if redirection.append else 'w'
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            handle = open(path, mode, encoding='utf-8')
        except OSError as e:
            raise RedirectionError(stage.name or redirection.target, redirection.target,
                                   e.strerror or str(e)) from e

        self.logger.debug(f"{redirection.kind.value} -> {path} ({mode})")
        return stack.enter_context(handle)

    def _read_input(self, stage: PipelineStage, redirection: Redirection) -> bytes:
        """Read a < target in full before the stage starts."""
        path = self.context.resolve_path(redirection.target)
        try:
            with open(path, 'rb') as handle:
                return handle.read()
        except OSError as e:
            raise RedirectionError(stage.name or redirection.target, redirection.target,
                                   e.strerror or str(e)) from e

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _report(self, error: ShellError, sink: TextIO) -> None:
        sink.write(f"{error.message}\n")

    def _trace(self, index: int, total: int, state: StageState, stage: PipelineStage) -> None:
        self.logger.debug(f"Stage {index + 1}/{total} {state.name}: {stage}")
