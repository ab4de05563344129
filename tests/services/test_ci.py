import io

from playpromote.services.ci import emit_error_annotation, escape_command_data, is_github_actions


def test_is_github_actions_reads_environment():
    assert is_github_actions({"GITHUB_ACTIONS": "true"}) is True
    assert is_github_actions({}) is False


def test_escape_command_data_encodes_newlines_and_percent():
    assert escape_command_data("50% done\nnext") == "50%25 done%0Anext"


def test_emit_error_annotation_only_inside_github_actions():
    stream = io.StringIO()

    assert emit_error_annotation("boom", stream=stream, environ={}) is False
    assert stream.getvalue() == ""

    assert emit_error_annotation("boom", stream=stream, environ={"GITHUB_ACTIONS": "true"}) is True
    assert stream.getvalue() == "::error::boom\n"
