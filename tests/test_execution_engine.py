"""
Test Suite for ExecutionEngine

Tests:
1. Input bytes relayed to the child, output captured
2. Spawn failures wrapped in ProcessSpawnError
3. Statistics
4. SIGINT handler swapped out during the wait and restored after
"""
import shutil
import signal
import subprocess

import pytest

from lineshell.errors import ProcessSpawnError
from lineshell.execution_engine import ExecutionEngine


@pytest.mark.skipif(not shutil.which('cat'), reason="needs cat on PATH")
def test_input_is_relayed_and_output_captured(tmp_path):
    engine = ExecutionEngine()
    result = engine.spawn(shutil.which('cat'), ['cat'], cwd=str(tmp_path), env={},
                          input=b'line one\nline two\n', stdout=subprocess.PIPE)

    assert result.returncode == 0
    assert result.stdout == b'line one\nline two\n'
    assert engine.get_stats() == {'spawned': 1, 'failed': 0, 'total': 1}


def test_spawn_failure(tmp_path):
    engine = ExecutionEngine()
    with pytest.raises(ProcessSpawnError) as excinfo:
        engine.spawn(str(tmp_path / 'missing'), ['missing'], cwd=str(tmp_path), env={})

    assert excinfo.value.command == 'missing'
    assert excinfo.value.message.startswith('missing: ')
    assert engine.get_stats()['failed'] == 1


def test_reset_stats(tmp_path):
    engine = ExecutionEngine()
    with pytest.raises(ProcessSpawnError):
        engine.spawn(str(tmp_path / 'missing'), ['missing'], cwd=str(tmp_path), env={})
    engine.reset_stats()
    assert engine.get_stats() == {'spawned': 0, 'failed': 0, 'total': 0}


@pytest.mark.skipif(not shutil.which('true'), reason="needs true on PATH")
def test_interrupt_handler_restored_after_spawn(tmp_path):
    engine = ExecutionEngine()
    before = signal.getsignal(signal.SIGINT)

    engine.spawn(shutil.which('true'), ['true'], cwd=str(tmp_path), env={})

    assert signal.getsignal(signal.SIGINT) is before
