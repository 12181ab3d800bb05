# tests/test_lexer.py
"""
Tests for building token lists from argv and from token files.
"""

import logging

import pytest

from argsense.catalog import default_catalog
from argsense.config import InferenceConfig
from argsense.errors import CatalogError, ErrorCodes
from argsense.inference import classify
from argsense.lexer import (
    lex,
    load_token_list,
    parse_token_list,
    split_command_line,
    unparse_token_list,
)


@pytest.fixture
def catalog():
    return default_catalog()


class TestSplitCommandLine:

    def test_quotes(self):
        assert split_command_line('tar -x -f "my archive.tar"') == [
            "tar", "-x", "-f", "my archive.tar",
        ]

    def test_unbalanced_quote(self):
        with pytest.raises(ValueError):
            split_command_line('echo "oops')


class TestLex:

    def test_candidates_from_catalog(self, catalog):
        tokens = lex(["-n", "5", "file.txt"], catalog)
        assert tokens.values == ["-n", "5", "file.txt"]
        assert [t.candidate_names for t in tokens] == [
            ["flag", "valued-option"],
            ["operand", "option-value"],
            ["operand", "option-value"],
        ]
        assert [t.position for t in tokens] == [0, 1, 2]
        assert not any(t.is_semantic() for t in tokens)

    def test_unmatched_value_warns(self, catalog, caplog):
        with caplog.at_level(logging.WARNING, logger="argsense.lexer"):
            tokens = lex(["--"], catalog)
        assert tokens[0].candidates == []
        assert "matches no type in catalog default" in caplog.text

    def test_empty_argv(self, catalog):
        assert len(lex([], catalog)) == 0


TOKENS_TEXT = '''
(tokens
  (token "-n" valued-option)
  (token "5" operand option-value)
  (token file.txt operand option-value)
  (token "???"))
'''


class TestParseTokenList:

    def test_parse(self, catalog):
        tokens = parse_token_list(TOKENS_TEXT, catalog)
        assert tokens.values == ["-n", "5", "file.txt", "???"]
        assert tokens[0].candidate_names == ["valued-option"]
        assert tokens[1].candidate_names == ["operand", "option-value"]
        assert tokens[3].candidates == []

    def test_unknown_type(self, catalog):
        with pytest.raises(CatalogError, match="unknown semantic type 'number'") as info:
            parse_token_list('(tokens (token "5" number))', catalog)
        assert info.value.code == ErrorCodes.UNKNOWN_TYPE

    def test_types_are_symbols(self, catalog):
        with pytest.raises(CatalogError, match="expected symbol"):
            parse_token_list('(tokens (token "5" "operand"))', catalog)

    def test_wrong_head(self, catalog):
        with pytest.raises(CatalogError, match=r"expected \(tokens"):
            parse_token_list('(catalog x)', catalog)

    def test_token_needs_value(self, catalog):
        with pytest.raises(CatalogError, match="form too short"):
            parse_token_list('(tokens (token))', catalog)

    def test_load(self, catalog, tmp_path):
        path = tmp_path / "case.tok"
        path.write_text(TOKENS_TEXT, encoding="utf-8")
        assert len(load_token_list(path, catalog)) == 4


class TestUnparseTokenList:

    def test_resolved_and_open_tokens(self, catalog):
        tokens = parse_token_list(
            '(tokens (token "-o" valued-option) (token "out file" option-value)'
            ' (token "-v" flag valued-option))',
            catalog,
        )
        classify(tokens, InferenceConfig(raise_on_error=False))
        assert unparse_token_list(tokens) == (
            "(tokens\n"
            '  (token "-o" valued-option)\n'
            '  (token "out file" option-value)\n'
            '  (token "-v" flag valued-option))\n'
        )

    def test_reads_back(self, catalog):
        tokens = parse_token_list(TOKENS_TEXT, catalog)
        again = parse_token_list(unparse_token_list(tokens), catalog)
        assert [t.candidate_names for t in again] == [t.candidate_names for t in tokens]
