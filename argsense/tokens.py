"""argsense/tokens.py – Command-line tokens and adjacency inference.

Every raw argument becomes a :class:`Token` holding the semantic types
still considered possible for it (its *candidates*).  Three inference
rules inspect the binding state of the immediate neighbours and remove
candidates that cannot be consistent with it:

``infer_left``
    Looks at the token on the left.  A neighbour that does not reach
    forward leaves nothing for this token to be a value of; a neighbour
    bound to the right claims this token as its value.
``infer_right``
    For options only: if the token on the right does not reach backward,
    this option cannot be taking it as a value.
``infer_positional``
    A trailing non-option token is an operand.

A token whose candidate set shrinks to a single type resolves: its kind
becomes :class:`~argsense.model.Semantic` and, for directionally bound
types, ``bound_to`` records the index of the neighbour it attaches to.

Ownership runs one way, list → tokens.  Tokens never keep a reference to
their :class:`TokenList`; every operation that needs a neighbour takes
the list as an argument.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
    overload,
)

from .errors import AmbiguityExhaustedError, OutOfRangeError
from .model import (
    CONTEXT_FREE,
    OPERAND,
    UNSET,
    Binding,
    Bindings,
    PositionalModel,
    Semantic,
    SemanticType,
    TokenKind,
    bindings,
    type_names,
)

_log = logging.getLogger(__name__)

Predicate = Callable[[SemanticType], bool]

_NONE_OR_LEFT: Bindings = bindings(Binding.NONE, Binding.LEFT)
_NONE_OR_RIGHT: Bindings = bindings(Binding.NONE, Binding.RIGHT)


@dataclass
class Token:
    """One command-line argument undergoing classification."""

    position: int
    value: str
    candidates: List[SemanticType] = field(default_factory=list)
    kind: TokenKind = CONTEXT_FREE
    bound_to: Optional[int] = None

    def __post_init__(self) -> None:
        # Duplicates would keep a proven type from ever being the sole candidate.
        self.candidates = list(dict.fromkeys(self.candidates))

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    def is_semantic(self) -> bool:
        return self.kind.is_semantic()

    @property
    def semantic_type(self) -> Optional[SemanticType]:
        """The resolved type, or ``None`` while still context-free."""
        if isinstance(self.kind, Semantic):
            return self.kind.semantic_type
        return None

    @property
    def positional_model(self) -> PositionalModel:
        return self.kind.positional_model

    @property
    def candidate_names(self) -> List[str]:
        return type_names(self.candidates)

    def bound_token(self, tokens: "TokenList") -> Optional["Token"]:
        """The neighbour this token is bound to, if any."""
        if self.bound_to is None:
            return None
        return tokens[self.bound_to]

    def _positional_models(self) -> List[PositionalModel]:
        model = self.kind.positional_model
        if model is UNSET:
            return [c.positional_model for c in self.candidates]
        return [model]

    # ------------------------------------------------------------------
    # Binding / option queries
    #
    # A property holds for an ambiguous token only when every remaining
    # candidate has it.  An empty candidate set has no property at all.
    # ------------------------------------------------------------------

    def is_bound_to(self, binding: Binding) -> bool:
        models = self._positional_models()
        return bool(models) and all(m.binding is binding for m in models)

    def is_bound_to_one_of(self, acceptable: Iterable[Binding]) -> bool:
        acceptable = frozenset(acceptable)
        models = self._positional_models()
        return bool(models) and all(m.binding in acceptable for m in models)

    def is_option(self) -> bool:
        models = self._positional_models()
        return bool(models) and all(m.is_option for m in models)

    # ------------------------------------------------------------------
    # Narrowing and resolution
    # ------------------------------------------------------------------

    def possibly_convert_to_semantic(self, tokens: "TokenList") -> bool:
        """Resolve the token if exactly one candidate is left.

        Returns ``True`` when the token was promoted by this call.

        Raises
        ------
        OutOfRangeError
            The single candidate binds to a neighbour that does not exist.
        """
        if self.is_semantic() or len(self.candidates) != 1:
            return False

        semantic_type = self.candidates[0]
        bound_to: Optional[int] = None
        if semantic_type.binding is Binding.RIGHT:
            bound_to = self.position + 1
        elif semantic_type.binding is Binding.LEFT:
            bound_to = self.position - 1

        if bound_to is not None and not tokens.has_position(bound_to):
            raise OutOfRangeError(self, semantic_type, bound_to)

        self.kind = Semantic(semantic_type)
        self.bound_to = bound_to
        _log.debug(
            "argv[%d] %r resolved to %s%s",
            self.position,
            self.value,
            semantic_type,
            f" (bound to argv[{bound_to}])" if bound_to is not None else "",
        )
        return True

    def reduce_candidates(self, predicate: Predicate, tokens: "TokenList") -> bool:
        """Keep only the candidates satisfying *predicate*, then resolve.

        Returns ``True`` if the candidate set or the kind changed.

        Raises
        ------
        AmbiguityExhaustedError
            No candidate satisfies *predicate*.
        """
        if self.is_semantic():
            return False

        before = self.candidates
        kept = [c for c in before if predicate(c)]
        if not kept:
            self.candidates = []
            _log.debug("argv[%d] %r: no candidate left", self.position, self.value)
            raise AmbiguityExhaustedError(self, type_names(before))

        changed = len(kept) != len(before)
        if changed:
            _log.debug(
                "argv[%d] %r narrowed %s -> %s",
                self.position,
                self.value,
                type_names(before),
                type_names(kept),
            )
        self.candidates = kept
        return self.possibly_convert_to_semantic(tokens) or changed

    def set_candidate(self, semantic_type: SemanticType, tokens: "TokenList") -> bool:
        """Narrow straight to *semantic_type*, then resolve.

        The proven type must be one of the current candidates; proving a
        type the token was never admitted as empties the set instead of
        growing it.
        """
        if self.is_semantic():
            return False

        if semantic_type not in self.candidates:
            eliminated = self.candidate_names
            self.candidates = []
            raise AmbiguityExhaustedError(
                self,
                eliminated,
                hint=f"'{semantic_type}' is required here but is not admissible",
            )

        changed = len(self.candidates) != 1
        self.candidates = [semantic_type]
        return self.possibly_convert_to_semantic(tokens) or changed

    # ------------------------------------------------------------------
    # Inference rules
    # ------------------------------------------------------------------

    def infer_left(self, tokens: "TokenList") -> bool:
        if self.is_semantic() or self.position == 0:
            return False

        left = tokens[self.position - 1]
        if left.is_bound_to_one_of(_NONE_OR_LEFT):
            # Nothing on the left takes this token as its value.
            if not self.is_option():
                return self.set_candidate(OPERAND, tokens)
            return self.reduce_candidates(
                lambda t: t.binding is not Binding.LEFT, tokens
            )
        if left.is_bound_to(Binding.RIGHT):
            # The left neighbour claims this token as its value.
            return self.reduce_candidates(
                lambda t: t.binding is Binding.LEFT, tokens
            )
        return False

    def infer_right(self, tokens: "TokenList") -> bool:
        if self.is_semantic() or not self.is_option():
            return False

        right = tokens.get(self.position + 1)
        if right is None:
            return False
        if right.is_bound_to_one_of(_NONE_OR_RIGHT):
            return self.reduce_candidates(
                lambda t: t.binding is not Binding.RIGHT, tokens
            )
        return False

    def infer_positional(self, tokens: "TokenList") -> bool:
        if self.is_semantic():
            return False
        if self.position != len(tokens) - 1 or self.is_option():
            return False
        return self.set_candidate(OPERAND, tokens)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        semantic_type = self.semantic_type
        return {
            "position": self.position,
            "value": self.value,
            "type": semantic_type.name if semantic_type is not None else None,
            "bound_to": self.bound_to,
            "candidates": self.candidate_names,
        }

    def __str__(self) -> str:
        return (
            f"{{pos:{self.position}, type:{self.kind}, value:{self.value!r}, "
            f"bound_to:{self.bound_to}, candidates:[{', '.join(self.candidate_names)}]}}"
        )


class TokenList(Sequence[Token]):
    """The ordered tokens of one command line."""

    def __init__(self, tokens: Iterable[Token] = ()) -> None:
        self._tokens: List[Token] = list(tokens)
        for index, token in enumerate(self._tokens):
            if token.position != index:
                raise ValueError(
                    f"token {token.value!r} has position {token.position}, "
                    f"expected {index}"
                )

    @classmethod
    def from_candidates(
        cls, entries: Iterable[Tuple[str, Iterable[SemanticType]]]
    ) -> "TokenList":
        """Build a list from ``(value, admissible_types)`` pairs."""
        return cls(
            Token(position=i, value=value, candidates=list(types))
            for i, (value, types) in enumerate(entries)
        )

    @overload
    def __getitem__(self, index: int) -> Token: ...

    @overload
    def __getitem__(self, index: slice) -> List[Token]: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[Token, List[Token]]:
        return self._tokens[index]

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def has_position(self, position: int) -> bool:
        return 0 <= position < len(self._tokens)

    def get(self, position: int) -> Optional[Token]:
        """Token at *position*, or ``None`` outside the list."""
        if self.has_position(position):
            return self._tokens[position]
        return None

    @property
    def values(self) -> List[str]:
        return [t.value for t in self._tokens]

    def resolved(self) -> List[Token]:
        return [t for t in self._tokens if t.is_semantic()]

    def unresolved(self) -> List[Token]:
        return [t for t in self._tokens if not t.is_semantic()]

    def is_resolved(self) -> bool:
        return all(t.is_semantic() for t in self._tokens)

    def candidate_count(self) -> int:
        """Total number of candidates still held by context-free tokens."""
        return sum(len(t.candidates) for t in self._tokens if not t.is_semantic())

    def snapshot(self) -> Tuple[Tuple[Optional[str], Optional[int], Tuple[str, ...]], ...]:
        """Hashable view of every token's classification state."""
        return tuple(
            (
                t.semantic_type.name if t.semantic_type is not None else None,
                t.bound_to,
                tuple(t.candidate_names),
            )
            for t in self._tokens
        )

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [t.to_dict() for t in self._tokens]

    def __str__(self) -> str:
        return "\n".join(str(t) for t in self._tokens)

    def __repr__(self) -> str:
        return f"TokenList({self.values!r})"
