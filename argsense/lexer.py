"""argsense/lexer.py – Turning raw command lines into token lists.

Two ways in:

* :func:`lex` gives every argument the catalogue types whose ``match``
  patterns accept it.
* :func:`parse_token_list` reads candidate sets spelled out by hand::

      (tokens
        (token "-n" flag valued-option)
        (token "5" operand option-value)
        (token "file.txt" operand))

  A ``token`` form listing no types produces an empty candidate set,
  which classification reports as exhausted.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Iterable, List

from . import sexp as S
from .catalog import Catalog
from .tokens import Token, TokenList

_log = logging.getLogger(__name__)


def split_command_line(line: str) -> List[str]:
    """Split a shell-quoted command line into arguments.

    Raises ``ValueError`` on unbalanced quotes.
    """
    return shlex.split(line)


def lex(argv: Iterable[str], catalog: Catalog) -> TokenList:
    """Build a :class:`TokenList` whose candidates come from *catalog*."""
    tokens = TokenList(
        Token(position=i, value=value, candidates=catalog.admissible(value))
        for i, value in enumerate(argv)
    )
    for token in tokens:
        if not token.candidates:
            _log.warning(
                "argv[%d] %r matches no type in catalog %s",
                token.position, token.value, catalog.name,
            )
    return tokens


def parse_token_list(text: str, catalog: Catalog, *, filename: str = "<string>") -> TokenList:
    """Parse a ``(tokens (token VALUE TYPE...)...)`` document.

    Type names are resolved against *catalog*; an unknown name raises
    :class:`CatalogError`.
    """
    form = S.expect_list(S.read_one(text, filename=filename), tag="tokens", source=filename)
    tokens: List[Token] = []
    for item in form[1:]:
        entry = S.expect_list(item, min_len=2, tag="token", source=filename)
        value = S.as_str(entry[1], source=filename)
        candidates = [catalog.get(S.sym_name(t, source=filename)) for t in entry[2:]]
        tokens.append(Token(position=len(tokens), value=value, candidates=candidates))
    return TokenList(tokens)


def load_token_list(path: str | Path, catalog: Catalog) -> TokenList:
    p = Path(path)
    return parse_token_list(p.read_text(encoding="utf-8"), catalog, filename=str(p))


def unparse_token_list(tokens: TokenList) -> str:
    """Render the current candidate sets in :func:`parse_token_list` syntax.

    Resolved tokens are written with their single resolved type.
    """
    lines = ["(tokens"]
    for t in tokens:
        names = [t.semantic_type.name] if t.semantic_type is not None else t.candidate_names
        lines.append("  " + " ".join(["(token", S.quote(t.value), *names]) + ")")
    return "\n".join(lines) + ")\n"
