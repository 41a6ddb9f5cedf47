"""Shared fixtures: an isolated ShellContext rooted in tmp_path."""
import io
import os

import pytest

from lineshell.pipeline_executor import PipelineExecutor
from lineshell.shell_context import ShellContext


@pytest.fixture
def home_dir(tmp_path):
    home = tmp_path / 'home'
    home.mkdir()
    return home


@pytest.fixture
def work_dir(tmp_path):
    work = tmp_path / 'work'
    work.mkdir()
    return work


@pytest.fixture
def context(home_dir, work_dir):
    return ShellContext(
        cwd=str(work_dir),
        env={'PATH': os.environ.get('PATH', '/usr/bin:/bin'), 'HOME': str(home_dir)},
        stdout=io.StringIO(),
        stderr=io.StringIO(),
    )


@pytest.fixture
def executor(context):
    return PipelineExecutor(context)


@pytest.fixture
def make_executable():
    """Factory: write a file and chmod it, returning its path as str."""
    def _make(directory, name, content='#!/bin/sh\necho ok\n', mode=0o755):
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text(content)
        path.chmod(mode)
        return str(path)
    return _make
