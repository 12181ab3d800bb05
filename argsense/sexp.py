"""argsense/sexp.py – S-expression reader for catalogue and token files.

The concrete syntax is deliberately tiny::

    document ::= form*
    form     ::= "(" form* ")" | string | symbol
    string   ::= '"' ... '"'          ; \\" and \\\\ are the only escapes
    symbol   ::= any run of characters except whitespace, ( ) " ;
    comment  ::= ";" to end of line

Parsing is done with a Parsimonious PEG grammar; the parse tree is
folded by a :class:`NodeVisitor` into plain Python values (``list`` for
forms, ``str`` for string literals and :class:`Symbol` for bare words),
which the catalogue and token-file readers then dispatch on by head
symbol.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from parsimonious.exceptions import ParseError as PegParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import NodeVisitor

from .errors import CatalogError, ErrorCode, ErrorCodes


@dataclass(frozen=True, slots=True)
class Symbol:
    """A bare word in an S-expression."""

    name: str

    def __str__(self) -> str:
        return self.name


Sexp = Union[list, Symbol, str]


SEXP_GRAMMAR = Grammar(r'''
    document = _ (form _)*
    form     = group / string / symbol
    group    = "(" _ (form _)* ")"
    string   = ~r'"(?:[^"\\]|\\.)*"'
    symbol   = ~r'[^\s()";]+'
    _        = (blank / comment)*
    blank    = ~r'\s+'
    comment  = ~r';[^\n]*'
''')

_ESCAPE = re.compile(r'\\(["\\])')


class _SexpBuilder(NodeVisitor):
    """Folds the parse tree into lists, strings and symbols."""

    unwrapped_exceptions = (CatalogError,)

    def generic_visit(self, node, visited_children):
        return visited_children

    def visit_document(self, node, visited_children):
        _, forms = visited_children
        return [item[0] for item in forms]

    def visit_form(self, node, visited_children):
        return visited_children[0]

    def visit_group(self, node, visited_children):
        _, _, items, _ = visited_children
        return [item[0] for item in items]

    def visit_string(self, node, visited_children):
        return _ESCAPE.sub(r"\1", node.text[1:-1])

    def visit_symbol(self, node, visited_children):
        return Symbol(node.text)


def read(text: str, *, filename: str = "<string>") -> List[Sexp]:
    """Parse *text* into its list of top-level forms.

    Raises
    ------
    CatalogError
        The text is not a well-formed S-expression document.
    """
    try:
        tree = SEXP_GRAMMAR.parse(text)
    except PegParseError as exc:
        raise CatalogError(
            f"S-expression syntax error at line {exc.line()}, column {exc.column()}",
            source=filename,
            cause=exc,
        ) from exc
    return _SexpBuilder().visit(tree)


def read_one(text: str, *, filename: str = "<string>") -> Sexp:
    """Parse a document that must hold exactly one top-level form."""
    forms = read(text, filename=filename)
    if len(forms) != 1:
        raise CatalogError(
            f"expected exactly one top-level form, found {len(forms)}",
            source=filename,
        )
    return forms[0]


# ═══════════════════════════════════════════════════════════════════════
#  Shape helpers
# ═══════════════════════════════════════════════════════════════════════

def sym_name(s: Sexp, *, source: str = "") -> str:
    """Extract the name of a :class:`Symbol`, or raise."""
    if isinstance(s, Symbol):
        return s.name
    raise CatalogError(f"expected symbol, got {describe(s)}", source=source)


def head(s: list, *, source: str = "") -> str:
    """Return the head symbol name of a form ``(tag ...)``."""
    if not s:
        raise CatalogError("unexpected empty form ()", source=source)
    return sym_name(s[0], source=source)


def expect_list(
    s: Sexp,
    *,
    min_len: int = 0,
    tag: Optional[str] = None,
    source: str = "",
) -> list:
    """Assert that *s* is a form, optionally with a minimum length and head tag."""
    if not isinstance(s, list):
        raise CatalogError(
            f"expected form{f' ({tag} ...)' if tag else ''}, got {describe(s)}",
            source=source,
        )
    if tag is not None and (not s or not isinstance(s[0], Symbol) or s[0].name != tag):
        actual = describe(s[0]) if s else "()"
        raise CatalogError(f"expected ({tag} ...), got ({actual} ...)", source=source)
    if len(s) < min_len:
        raise CatalogError(
            f"form too short: expected at least {min_len} element(s), got {len(s)}",
            source=source,
        )
    return s


def as_str(s: Sexp, *, source: str = "") -> str:
    """Coerce *s* to ``str``; accepts a symbol or a string literal."""
    if isinstance(s, Symbol):
        return s.name
    if isinstance(s, str):
        return s
    raise CatalogError(f"expected string or symbol, got {describe(s)}", source=source)


def as_bool(s: Sexp, *, source: str = "") -> bool:
    if isinstance(s, Symbol):
        v = s.name.lower()
        if v in ("true", "#t", "t", "yes"):
            return True
        if v in ("false", "#f", "nil", "no"):
            return False
    raise CatalogError(f"expected boolean, got {describe(s)}", source=source)


def describe(s: Any) -> str:
    if isinstance(s, Symbol):
        return s.name
    if isinstance(s, str):
        return quote(s)
    if isinstance(s, list):
        return "(" + " ".join(describe(x) for x in s) + ")"
    return repr(s)


def quote(text: str) -> str:
    """Render *text* as a string literal readable by :func:`read`."""
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def error(message: str, code: ErrorCode = ErrorCodes.CATALOG_SYNTAX, *, source: str = "") -> CatalogError:
    return CatalogError(message, code=code, source=source)
