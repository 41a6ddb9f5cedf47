"""
Test Suite for the pipeline parser

Tests:
1. Tokenizer quoting / escaping rules
2. Pipe splitting on unquoted |
3. Redirection extraction
4. parse_pipeline end to end
"""
import pytest

from lineshell.pipeline_parser import (
    RedirectKind,
    extract_redirections,
    parse_pipeline,
    split_pipeline,
    tokenize,
)


# ============================================================================
# TOKENIZER
# ============================================================================

@pytest.mark.parametrize("line, expected", [
    ("echo hello world", ["echo", "hello", "world"]),
    ("  echo    spaced\t out  ", ["echo", "spaced", "out"]),
    ("'it''s'", ["its"]),
    ('"a\\"b"', ['a"b']),
    ("a\\ b", ["a b"]),
    ("echo 'hello   world'", ["echo", "hello   world"]),
    ("echo 'a\\nb'", ["echo", "a\\nb"]),
    ('echo "a\\nb"', ["echo", "a\\nb"]),
    ('echo "back\\\\slash"', ["echo", "back\\slash"]),
    ("echo 'say \"hi\"'", ["echo", 'say "hi"']),
    ('echo "it\'s"', ["echo", "it's"]),
    ("echo \\'quoted\\'", ["echo", "'quoted'"]),
    ("pre'mid'post", ["premidpost"]),
    ('"exe with space" arg', ["exe with space", "arg"]),
])
def test_tokenize_quoting(line, expected):
    assert tokenize(line) == expected


def test_blank_input_gives_no_tokens():
    assert tokenize("") == []
    assert tokenize("   \t  ") == []


def test_empty_quotes_produce_no_empty_token():
    assert tokenize("echo '' \"\"") == ["echo"]


def test_unterminated_quote_keeps_final_token():
    assert tokenize("echo 'abc def") == ["echo", "abc def"]
    assert tokenize('echo "abc') == ["echo", "abc"]


def test_trailing_backslash_is_dropped():
    assert tokenize("abc\\") == ["abc"]
    assert tokenize("\\") == []


def test_simple_tokens_are_idempotent():
    tokens = tokenize("ls   -la  /tmp   foo")
    assert tokenize(" ".join(tokens)) == tokens


# ============================================================================
# PIPE SPLITTING
# ============================================================================

def test_split_on_unquoted_pipe():
    assert split_pipeline("echo hi | cat") == ["echo hi ", " cat"]


def test_quoted_pipe_is_not_a_split_point():
    assert split_pipeline("echo 'a|b' \"c|d\"") == ["echo 'a|b' \"c|d\""]


def test_escaped_pipe_is_not_a_split_point():
    segments = split_pipeline("echo a\\|b")
    assert segments == ["echo a\\|b"]
    assert tokenize(segments[0]) == ["echo", "a|b"]


# ============================================================================
# REDIRECTIONS
# ============================================================================

@pytest.mark.parametrize("operator, kind, append", [
    (">", RedirectKind.STDOUT, False),
    ("1>", RedirectKind.STDOUT, False),
    (">>", RedirectKind.STDOUT, True),
    ("1>>", RedirectKind.STDOUT, True),
    ("2>", RedirectKind.STDERR, False),
    ("2>>", RedirectKind.STDERR, True),
    ("<", RedirectKind.STDIN, False),
])
def test_redirect_operators(operator, kind, append):
    argv, redirections, diagnostics = extract_redirections(["cmd", "arg", operator, "target"])
    assert argv == ["cmd", "arg"]
    assert len(redirections) == 1
    assert redirections[0].kind is kind
    assert redirections[0].target == "target"
    assert redirections[0].append is append
    assert diagnostics == []


def test_operator_glued_to_word_is_not_an_operator():
    argv, redirections, _ = extract_redirections(["echo", "a>b"])
    assert argv == ["echo", "a>b"]
    assert redirections == []


def test_missing_target_is_reported_and_skipped():
    argv, redirections, diagnostics = extract_redirections(["echo", "hi", "2>", "err", ">"])
    assert argv == ["echo", "hi"]
    assert [r.target for r in redirections] == ["err"]
    assert len(diagnostics) == 1
    assert diagnostics[0].operator == ">"
    assert "syntax error" in diagnostics[0].message


def test_last_redirection_of_a_kind_wins():
    stage = parse_pipeline("echo hi > first > second 2> e1").stages[0]
    assert stage.stdout_redirect.target == "second"
    assert stage.stderr_redirect.target == "e1"
    assert stage.stdin_redirect is None


def test_redirect_anywhere_in_argv():
    stage = parse_pipeline("echo > out.txt hello world").stages[0]
    assert stage.argv == ["echo", "hello", "world"]
    assert stage.stdout_redirect.target == "out.txt"


# ============================================================================
# parse_pipeline
# ============================================================================

def test_blank_line_gives_empty_pipeline():
    assert len(parse_pipeline("   ")) == 0


def test_stages_are_parsed_independently():
    pipeline = parse_pipeline("cat < in.txt | tr a-z A-Z | wc -l >> count.txt")
    assert [s.argv for s in pipeline.stages] == [["cat"], ["tr", "a-z", "A-Z"], ["wc", "-l"]]
    assert pipeline.stages[0].stdin_redirect.target == "in.txt"
    assert pipeline.stages[1].redirections == []
    assert pipeline.stages[2].stdout_redirect.append is True


def test_stage_name_and_args():
    stage = parse_pipeline("type cd echo").stages[0]
    assert stage.name == "type"
    assert stage.args == ["cd", "echo"]
