"""argsense/model.py – Semantic types and their positional models.

A *semantic type* is the classification a command-line token finally
receives (operand, boolean switch, value-taking option, option value,
...).  The inference engine never looks at a type's name; it only
consults the type's :class:`PositionalModel`, i.e. how the type attaches
to its neighbours and whether it marks an option.

Style conventions (matching the rest of the package)
----------------------------------------------------
* ``@dataclass(frozen=True, slots=True)`` for value objects.
* ``Enum`` for finite kind sets.
* Token kinds form a small tagged union (``ContextFree | Semantic``);
  callers dispatch with ``isinstance``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import FrozenSet, Iterable, Union


@unique
class Binding(Enum):
    """Direction in which a semantic type attaches to a neighbour."""

    NONE = "none"      # standalone
    LEFT = "left"      # value belongs to the token on the left
    RIGHT = "right"    # value belongs to the token on the right

    def __str__(self) -> str:
        return self.value


#: Convenience alias for a set of acceptable bindings.
Bindings = FrozenSet[Binding]


def bindings(*members: Binding) -> Bindings:
    """Build an immutable binding set: ``bindings(Binding.NONE, Binding.LEFT)``."""
    return frozenset(members)


@dataclass(frozen=True, slots=True)
class PositionalModel:
    """How a semantic type behaves positionally on the command line."""

    binding: Binding = Binding.NONE
    is_option: bool = False

    def __str__(self) -> str:
        kind = "option" if self.is_option else "value"
        return f"{kind}/{self.binding}"


#: Reported by tokens that have not resolved yet.  Compare by identity:
#: ``model is UNSET``; its field values are meaningless.
UNSET = PositionalModel()


@dataclass(frozen=True, slots=True)
class SemanticType:
    """A named classification carrying a :class:`PositionalModel`.

    Instances are supplied by a catalogue and treated as opaque by the
    inference engine; equality is by value so that two catalogues
    declaring the same type agree.
    """

    name: str
    positional_model: PositionalModel
    description: str = ""

    @property
    def binding(self) -> Binding:
        return self.positional_model.binding

    @property
    def is_option(self) -> bool:
        return self.positional_model.is_option

    def __str__(self) -> str:
        return self.name


OPERAND = SemanticType(
    name="operand",
    positional_model=PositionalModel(binding=Binding.NONE, is_option=False),
    description="standalone positional value",
)


# ════════════════════════════════════════════════════════════════════════
# Token kinds
# ════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ContextFree:
    """Classification not determined yet; eligible for inference."""

    @property
    def positional_model(self) -> PositionalModel:
        return UNSET

    def is_semantic(self) -> bool:
        return False

    def __str__(self) -> str:
        return "context-free"


@dataclass(frozen=True, slots=True)
class Semantic:
    """Fully resolved classification; inference passes skip it."""

    semantic_type: SemanticType

    @property
    def positional_model(self) -> PositionalModel:
        return self.semantic_type.positional_model

    def is_semantic(self) -> bool:
        return True

    def __str__(self) -> str:
        return str(self.semantic_type)


TokenKind = Union[ContextFree, Semantic]

#: Shared instance; ``ContextFree`` carries no state.
CONTEXT_FREE = ContextFree()


def type_names(types: Iterable[SemanticType]) -> list[str]:
    """Names of *types*, order preserved."""
    return [t.name for t in types]
