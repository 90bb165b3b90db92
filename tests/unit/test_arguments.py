#
# tests/unit/test_arguments.py
#
"""
Tests for command line escaping and splitting.
"""

import pytest

from catchrun.execution.arguments import escape_arguments, split_arguments


class TestEscapeArguments:
    """Expected escaped forms for individual tokens."""

    def test_empty_list_is_empty_string(self) -> None:
        assert escape_arguments([]) == ""

    def test_plain_tokens_are_joined_unquoted(self) -> None:
        assert escape_arguments(["T1", "--reporter", "xml"]) == "T1 --reporter xml"

    def test_empty_token_is_kept_as_quoted_empty_argument(self) -> None:
        assert escape_arguments(["a", "", "b"]) == 'a "" b'

    def test_token_with_space_is_quoted(self) -> None:
        assert escape_arguments(["Vector can be sized"]) == '"Vector can be sized"'

    def test_embedded_quote_is_escaped(self) -> None:
        assert escape_arguments(['say "hi"']) == '"say \\"hi\\""'

    def test_backslashes_before_quote_are_doubled(self) -> None:
        # a\"b -> two backslashes for the literal one, one for the quote.
        assert escape_arguments(['a\\"b']) == '"a\\\\\\"b"'

    def test_trailing_backslash_in_quoted_token_is_doubled(self) -> None:
        assert escape_arguments(["C:\\Program Files\\"]) == '"C:\\Program Files\\\\"'

    def test_backslashes_without_quotes_stay_literal(self) -> None:
        assert escape_arguments(["C:\\temp\\out.xml"]) == "C:\\temp\\out.xml"


class TestSplitArguments:
    """Tests for the command line splitter."""

    def test_splits_on_runs_of_whitespace(self) -> None:
        assert split_arguments("  a \t b  ") == ["a", "b"]

    def test_doubled_quote_inside_quotes_is_literal(self) -> None:
        assert split_arguments('"a""b"') == ['a"b']

    def test_quotes_can_join_parts_of_a_token(self) -> None:
        assert split_arguments('--out="my file".xml') == ["--out=my file.xml"]


@pytest.mark.parametrize(
    "tokens",
    [
        [],
        [""],
        ["", ""],
        ["T1", "--reporter", "xml", "--break", "--out", "/tmp/catchrun-abc.xml"],
        ["Scenario: vectors can be sized and resized", "--reporter", "xml"],
        ['name with "quotes"', "plain"],
        ["ends with backslash\\", "next"],
        ["back\\\\slashes\\\\\"quoted", "\\"],
        ["tab\there", "new\nline", "  leading and trailing  "],
        ['"', '\\"', '""'],
    ],
)
def test_split_reverses_escape(tokens: list[str]) -> None:
    assert split_arguments(escape_arguments(tokens)) == tokens
