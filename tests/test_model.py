# tests/test_model.py
"""
Tests for semantic types, positional models and token kinds.
"""

import dataclasses

import pytest

from argsense.model import (
    CONTEXT_FREE,
    OPERAND,
    UNSET,
    Binding,
    ContextFree,
    PositionalModel,
    Semantic,
    SemanticType,
    bindings,
    type_names,
)


class TestBinding:

    def test_values(self):
        assert [b.value for b in Binding] == ["none", "left", "right"]

    def test_str(self):
        assert str(Binding.RIGHT) == "right"

    def test_bindings_set(self):
        s = bindings(Binding.NONE, Binding.LEFT)
        assert Binding.NONE in s
        assert Binding.RIGHT not in s
        assert isinstance(s, frozenset)


class TestPositionalModel:

    def test_defaults(self):
        m = PositionalModel()
        assert m.binding is Binding.NONE
        assert m.is_option is False

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            PositionalModel().binding = Binding.LEFT

    def test_str(self):
        assert str(PositionalModel(Binding.RIGHT, True)) == "option/right"
        assert str(PositionalModel(Binding.LEFT, False)) == "value/left"

    def test_unset_is_identity_sentinel(self):
        assert UNSET == PositionalModel()
        assert UNSET is not PositionalModel()


class TestSemanticType:

    def test_model_shortcuts(self, types):
        assert types.valued.binding is Binding.RIGHT
        assert types.valued.is_option is True
        assert types.value.binding is Binding.LEFT
        assert types.value.is_option is False

    def test_operand(self):
        assert OPERAND.name == "operand"
        assert OPERAND.binding is Binding.NONE
        assert not OPERAND.is_option

    def test_value_equality(self):
        a = SemanticType("flag", PositionalModel(Binding.NONE, True))
        b = SemanticType("flag", PositionalModel(Binding.NONE, True))
        assert a == b
        assert hash(a) == hash(b)

    def test_str_is_name(self, types):
        assert str(types.flag) == "flag"

    def test_type_names_preserves_order(self, types):
        assert type_names([types.value, OPERAND]) == ["option-value", "operand"]


class TestTokenKinds:

    def test_context_free(self):
        assert isinstance(CONTEXT_FREE, ContextFree)
        assert not CONTEXT_FREE.is_semantic()
        assert CONTEXT_FREE.positional_model is UNSET
        assert str(CONTEXT_FREE) == "context-free"

    def test_semantic(self, types):
        kind = Semantic(types.valued)
        assert kind.is_semantic()
        assert kind.positional_model is types.valued.positional_model
        assert str(kind) == "valued-option"
