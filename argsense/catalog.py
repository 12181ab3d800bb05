"""argsense/catalog.py – Semantic-type catalogues.

A catalogue names the semantic types a program's command line may use
and, for each, the positional model the inference engine consults.
Optional ``match`` patterns say which raw values a type is admissible
for; :func:`argsense.lexer.lex` uses them to build initial candidate
sets.

Catalogue files are S-expressions::

    (catalog posix
      (operand (match "^[^-]" "^-$"))
      (type flag (binding none) (option true)
            (match "^-[A-Za-z]$")
            (doc "switch that takes no value"))
      (type valued-option (binding right) (option true)
            (match "^-[A-Za-z]$")))

``operand`` is built in; its ``(operand ...)`` form only sets the match
patterns.  Every other type must be declared exactly once.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Pattern, Sequence, Tuple

from . import sexp as S
from .errors import CatalogError, ErrorCodes
from .model import OPERAND, Binding, PositionalModel, SemanticType

_log = logging.getLogger(__name__)

#: Values a plain operand is admissible for when a catalogue says nothing:
#: anything not starting with a dash, a lone dash, or a negative number.
DEFAULT_OPERAND_PATTERNS: Tuple[str, ...] = (r"^[^-]", r"^-$", r"^-\d", r"^$")


class Catalog:
    """Ordered registry of semantic types, always containing ``operand``."""

    def __init__(
        self,
        name: str = "anonymous",
        operand_patterns: Sequence[str] = DEFAULT_OPERAND_PATTERNS,
        source: str = "",
    ) -> None:
        self.name = name
        self.source = source
        self._types: Dict[str, SemanticType] = {OPERAND.name: OPERAND}
        self._patterns: Dict[str, Tuple[Pattern[str], ...]] = {}
        self.set_patterns(OPERAND.name, operand_patterns)

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def add(self, semantic_type: SemanticType, patterns: Sequence[str] = ()) -> SemanticType:
        if semantic_type.name in self._types:
            raise CatalogError(
                f"semantic type {semantic_type.name!r} is declared twice",
                code=ErrorCodes.DUPLICATE_TYPE,
                source=self.source,
            )
        self._types[semantic_type.name] = semantic_type
        self.set_patterns(semantic_type.name, patterns)
        return semantic_type

    def define(
        self,
        name: str,
        binding: Binding = Binding.NONE,
        is_option: bool = False,
        patterns: Sequence[str] = (),
        description: str = "",
    ) -> SemanticType:
        """Declare and register a type in one call."""
        return self.add(
            SemanticType(
                name=name,
                positional_model=PositionalModel(binding=binding, is_option=is_option),
                description=description,
            ),
            patterns,
        )

    def set_patterns(self, name: str, patterns: Sequence[str]) -> None:
        self.get(name)
        compiled = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(pattern))
            except re.error as exc:
                raise CatalogError(
                    f"invalid match pattern {pattern!r} for {name!r}: {exc}",
                    code=ErrorCodes.INVALID_PATTERN,
                    source=self.source,
                    cause=exc,
                ) from exc
        self._patterns[name] = tuple(compiled)

    def get(self, name: str) -> SemanticType:
        try:
            return self._types[name]
        except KeyError:
            raise CatalogError(
                f"unknown semantic type {name!r}",
                code=ErrorCodes.UNKNOWN_TYPE,
                source=self.source,
                hint=f"known types: {', '.join(self._types)}",
            ) from None

    def patterns(self, name: str) -> List[str]:
        self.get(name)
        return [p.pattern for p in self._patterns.get(name, ())]

    def names(self) -> List[str]:
        return list(self._types)

    def admissible(self, value: str) -> List[SemanticType]:
        """Types whose match patterns accept *value*, in catalogue order."""
        return [
            t
            for name, t in self._types.items()
            if any(p.search(value) for p in self._patterns.get(name, ()))
        ]

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[SemanticType]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"Catalog({self.name!r}, types={self.names()!r})"


# ═══════════════════════════════════════════════════════════════════════
#  Dispatch registry
# ═══════════════════════════════════════════════════════════════════════

# head symbol -> handler(form, catalog)
_CATALOG_ITEM_DISPATCH: Dict[str, Callable[[list, Catalog], None]] = {}
# head symbol -> handler(form, fields, source)
_TYPE_CLAUSE_DISPATCH: Dict[str, Callable[[list, dict, str], None]] = {}


def _register(table: dict, tag: str):
    """Decorator: register a parser function under *tag* in *table*."""
    def deco(fn):
        table[tag] = fn
        return fn
    return deco


@_register(_TYPE_CLAUSE_DISPATCH, "binding")
def _parse_binding(s: list, fields: dict, source: str) -> None:
    S.expect_list(s, min_len=2, source=source)
    name = S.as_str(s[1], source=source).lower()
    try:
        fields["binding"] = Binding(name)
    except ValueError:
        raise S.error(
            f"unknown binding {name!r}; expected one of: "
            f"{', '.join(b.value for b in Binding)}",
            source=source,
        ) from None


@_register(_TYPE_CLAUSE_DISPATCH, "option")
def _parse_option(s: list, fields: dict, source: str) -> None:
    S.expect_list(s, min_len=2, source=source)
    fields["is_option"] = S.as_bool(s[1], source=source)


@_register(_TYPE_CLAUSE_DISPATCH, "match")
def _parse_match(s: list, fields: dict, source: str) -> None:
    fields.setdefault("patterns", []).extend(S.as_str(p, source=source) for p in s[1:])


@_register(_TYPE_CLAUSE_DISPATCH, "doc")
def _parse_doc(s: list, fields: dict, source: str) -> None:
    S.expect_list(s, min_len=2, source=source)
    fields["description"] = S.as_str(s[1], source=source)


def _parse_clauses(clauses: Iterable[S.Sexp], allowed: Iterable[str], source: str) -> dict:
    allowed = set(allowed)
    fields: dict = {}
    for clause in clauses:
        form = S.expect_list(clause, min_len=1, source=source)
        tag = S.head(form, source=source)
        handler = _TYPE_CLAUSE_DISPATCH.get(tag)
        if handler is None or tag not in allowed:
            raise S.error(
                f"unknown clause ({tag} ...); expected one of: {', '.join(sorted(allowed))}",
                source=source,
            )
        handler(form, fields, source)
    return fields


@_register(_CATALOG_ITEM_DISPATCH, "type")
def _parse_type(s: list, catalog: Catalog) -> None:
    source = catalog.source
    S.expect_list(s, min_len=2, source=source)
    name = S.as_str(s[1], source=source)
    fields = _parse_clauses(s[2:], ("binding", "option", "match", "doc"), source)
    catalog.define(
        name,
        binding=fields.get("binding", Binding.NONE),
        is_option=fields.get("is_option", False),
        patterns=fields.get("patterns", ()),
        description=fields.get("description", ""),
    )


@_register(_CATALOG_ITEM_DISPATCH, "operand")
def _parse_operand(s: list, catalog: Catalog) -> None:
    fields = _parse_clauses(s[1:], ("match",), catalog.source)
    catalog.set_patterns(OPERAND.name, fields.get("patterns", ()))


# ═══════════════════════════════════════════════════════════════════════
#  Public API
# ═══════════════════════════════════════════════════════════════════════

def catalog_from_sexp(s: S.Sexp, *, filename: str = "<string>") -> Catalog:
    """Build a :class:`Catalog` from a parsed ``(catalog <name> <item>...)`` form."""
    lst = S.expect_list(s, min_len=2, tag="catalog", source=filename)
    catalog = Catalog(name=S.as_str(lst[1], source=filename), source=filename)

    for item in lst[2:]:
        form = S.expect_list(item, min_len=1, source=filename)
        tag = S.head(form, source=filename)
        parser = _CATALOG_ITEM_DISPATCH.get(tag)
        if parser is None:
            raise S.error(
                f"unknown catalog form ({tag} ...); expected one of: "
                f"{', '.join(sorted(_CATALOG_ITEM_DISPATCH))}",
                source=filename,
            )
        parser(form, catalog)

    _log.debug("loaded catalog %s with %d type(s)", catalog.name, len(catalog))
    return catalog


def parse_catalog(text: str, *, filename: str = "<string>") -> Catalog:
    """Parse catalogue source text.

    Raises
    ------
    CatalogError
        Malformed text, unknown forms, duplicate or unknown types, or an
        invalid match pattern.
    """
    return catalog_from_sexp(S.read_one(text, filename=filename), filename=filename)


def load_catalog(path: str | Path) -> Catalog:
    """Read and parse a catalogue file."""
    p = Path(path)
    return parse_catalog(p.read_text(encoding="utf-8"), filename=str(p))


DEFAULT_CATALOG_TEXT = r'''
; Generic POSIX-style command line.  A dash word may be a switch or an
; option taking the next argument; any other word may be an operand or
; the value of the option before it.
(catalog default
  (operand (match "^[^-]" "^-$" "^-\d" "^$"))
  (type flag (binding none) (option true)
        (match "^-[A-Za-z]$" "^--[A-Za-z][\w-]*$")
        (doc "switch that takes no value"))
  (type valued-option (binding right) (option true)
        (match "^-[A-Za-z]$" "^--[A-Za-z][\w-]*$")
        (doc "option that takes the next argument as its value"))
  (type option-value (binding left) (option false)
        (match "^[^-]" "^-$" "^-\d" "^$")
        (doc "argument consumed by the option before it")))
'''


def default_catalog() -> Catalog:
    """A fresh copy of the built-in generic catalogue."""
    return parse_catalog(DEFAULT_CATALOG_TEXT, filename="<default>")


def unparse_catalog(catalog: Catalog) -> str:
    """Render *catalog* back to S-expression source text."""
    lines = [f"(catalog {catalog.name}"]
    operand_patterns = catalog.patterns(OPERAND.name)
    lines.append(
        "  (operand (match " + " ".join(S.quote(p) for p in operand_patterns) + "))"
    )
    for t in catalog:
        if t is OPERAND:
            continue
        parts = [
            f"  (type {t.name}",
            f"(binding {t.binding.value})",
            f"(option {'true' if t.is_option else 'false'})",
        ]
        patterns = catalog.patterns(t.name)
        if patterns:
            parts.append("(match " + " ".join(S.quote(p) for p in patterns) + ")")
        if t.description:
            parts.append(f"(doc {S.quote(t.description)})")
        lines.append(" ".join(parts) + ")")
    return "\n".join(lines) + ")\n"
