"""
Test Suite for CommandResolver

Tests:
1. Builtin classification
2. PATH walk: order, executable bit, regular files only
3. Names containing '/'
4. Executable listing for completion
"""
import pytest

from lineshell.command_resolver import CommandKind, CommandResolver
from lineshell.constants import BUILTIN_NAMES


@pytest.fixture
def bin_dirs(tmp_path, context):
    first = tmp_path / 'bin1'
    second = tmp_path / 'bin2'
    first.mkdir()
    second.mkdir()
    context.env['PATH'] = f"{first}:{second}"
    return first, second


@pytest.mark.parametrize("name", ["exit", "echo", "type", "pwd", "cd"])
def test_builtins_resolve_to_their_kind(context, name):
    resolved = CommandResolver(context).resolve(name)
    assert resolved.is_builtin
    assert resolved.kind.value == name
    assert resolved.path is None


def test_builtin_table_matches_constants():
    builtin_kinds = {kind.value for kind in CommandKind if kind.is_builtin}
    assert builtin_kinds == set(BUILTIN_NAMES)


def test_first_path_match_wins(context, bin_dirs, make_executable):
    first, second = bin_dirs
    expected = make_executable(first, 'tool')
    make_executable(second, 'tool')

    resolved = CommandResolver(context).resolve('tool')
    assert resolved.kind is CommandKind.EXTERNAL
    assert resolved.path == expected


def test_non_executable_file_is_skipped(context, bin_dirs, make_executable):
    first, second = bin_dirs
    make_executable(first, 'tool', mode=0o644)
    expected = make_executable(second, 'tool')

    assert CommandResolver(context).find_executable('tool') == expected


def test_directory_is_not_an_executable(context, bin_dirs):
    first, _ = bin_dirs
    (first / 'subdir').mkdir()
    assert CommandResolver(context).find_executable('subdir') is None


def test_not_found(context, bin_dirs):
    resolved = CommandResolver(context).resolve('nonexistent_cmd_xyz')
    assert resolved.kind is CommandKind.NOT_FOUND
    assert not resolved.found


def test_path_is_rewalked_on_every_call(context, bin_dirs, make_executable):
    first, _ = bin_dirs
    resolver = CommandResolver(context)
    assert resolver.find_executable('late') is None

    make_executable(first, 'late')
    assert resolver.find_executable('late') == str(first / 'late')


def test_empty_and_missing_path_entries(context, tmp_path, make_executable):
    real = tmp_path / 'real'
    path = make_executable(real, 'tool')
    context.env['PATH'] = f"::{tmp_path / 'missing'}:{real}"
    assert CommandResolver(context).find_executable('tool') == path


def test_name_with_slash_is_checked_directly(context, work_dir, make_executable):
    make_executable(work_dir / 'scripts', 'run.sh')
    resolver = CommandResolver(context)

    assert resolver.find_executable('./scripts/run.sh') == str(work_dir / 'scripts' / 'run.sh')
    assert resolver.find_executable('./scripts/missing.sh') is None


def test_list_executables(context, bin_dirs, make_executable):
    first, second = bin_dirs
    make_executable(first, 'beta')
    make_executable(second, 'alpha')
    make_executable(second, 'beta')
    make_executable(second, 'data.txt', mode=0o644)

    assert CommandResolver(context).list_executables() == ['alpha', 'beta']
