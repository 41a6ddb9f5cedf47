"""
lineshell - interactive command interpreter

Main components:
- Shell: Read-eval loop
- PipelineExecutor: Stage-by-stage execution of one line
- BuiltinDispatch: echo, pwd, cd, type, exit
- CommandResolver: Builtin / PATH lookup
- ExecutionEngine: Subprocess management
- ShellContext: Working directory, environment, terminal streams
- parse_pipeline / tokenize: Quote-aware parsing
"""

from .shell import Shell
from .pipeline_executor import PipelineExecutor, StageResult
from .builtins import BuiltinDispatch
from .command_resolver import CommandKind, CommandResolver, ResolvedCommand
from .execution_engine import ExecutionEngine
from .shell_context import ShellContext
from .pipeline_parser import Pipeline, PipelineStage, Redirection, RedirectKind, parse_pipeline, tokenize
from .errors import ShellError, ParseSyntaxError, ResolutionError, RedirectionError, ProcessSpawnError, ShellExit

__all__ = [
    'Shell',
    'PipelineExecutor',
    'StageResult',
    'BuiltinDispatch',
    'CommandKind',
    'CommandResolver',
    'ResolvedCommand',
    'ExecutionEngine',
    'ShellContext',
    'Pipeline',
    'PipelineStage',
    'Redirection',
    'RedirectKind',
    'parse_pipeline',
    'tokenize',
    'ShellError',
    'ParseSyntaxError',
    'ResolutionError',
    'RedirectionError',
    'ProcessSpawnError',
    'ShellExit',
]
