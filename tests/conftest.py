# tests/conftest.py
"""
Shared fixtures for the argsense test-suite.

Semantic types used throughout:

    flag            NONE,  option      e.g. ``-v``
    valued-option   RIGHT, option      e.g. ``-o FILE``
    list-option     RIGHT, option      second value-taking option
    option-value    LEFT,  non-option  the FILE of ``-o FILE``
    path            NONE,  non-option  an operand-like type that is not ``operand``
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from argsense.model import OPERAND, Binding, PositionalModel, SemanticType
from argsense.tokens import Token, TokenList


@pytest.fixture
def types():
    return SimpleNamespace(
        operand=OPERAND,
        flag=SemanticType("flag", PositionalModel(Binding.NONE, True)),
        valued=SemanticType("valued-option", PositionalModel(Binding.RIGHT, True)),
        listed=SemanticType("list-option", PositionalModel(Binding.RIGHT, True)),
        value=SemanticType("option-value", PositionalModel(Binding.LEFT, False)),
        path=SemanticType("path", PositionalModel(Binding.NONE, False)),
    )


@pytest.fixture
def make_tokens():
    """Build a :class:`TokenList` from ``(value, [types])`` pairs."""

    def _make(*entries):
        return TokenList(
            Token(position=i, value=value, candidates=list(candidates))
            for i, (value, candidates) in enumerate(entries)
        )

    return _make
