"""argsense – adjacency-driven classification of command-line arguments.

Each raw argument starts out with the set of semantic types it might be
(operand, switch, value-taking option, option value, ...).  Inference
rules look at the binding behaviour of the immediate neighbours and
remove candidates until every token is resolved or provably ambiguous.

Submodules
----------
model
    ``Binding``, ``PositionalModel``, ``SemanticType`` and the
    ``ContextFree | Semantic`` token kinds.
tokens
    ``Token`` with its narrowing primitives and the three inference
    rules; ``TokenList``.
inference
    ``classify()`` fixpoint driver and the ``Classification`` result.
config
    ``InferenceConfig`` tuning knobs.
errors
    Structured error codes (``ARGS-XXXX``), ``ErrorReporter`` and the
    exception hierarchy.
catalog, sexp
    S-expression catalogue files naming the semantic types of a program.
lexer
    Building token lists from argv or from hand-written candidate sets.
main
    CLI entry-point with subcommands ``classify``, ``lex``, ``catalog``.

Usage
-----
Command-line::

    argsense classify -- -n 5 file.txt
    python -m argsense catalog --list

Programmatic::

    from argsense import classify, default_catalog, lex

    result = classify(lex(["-n", "5", "file.txt"], default_catalog()))
"""

from __future__ import annotations

__version__ = "0.1.0"

from .catalog import Catalog, default_catalog, load_catalog, parse_catalog, unparse_catalog
from .config import InferenceConfig
from .errors import (
    AmbiguityExhaustedError,
    AmbiguityRemainingError,
    ArgsenseError,
    CatalogError,
    ClassificationError,
    ConfigError,
    ConvergenceError,
    ErrorReporter,
    OutOfRangeError,
)
from .inference import Classification, classify
from .lexer import lex, load_token_list, parse_token_list, split_command_line
from .model import (
    CONTEXT_FREE,
    OPERAND,
    Binding,
    ContextFree,
    PositionalModel,
    Semantic,
    SemanticType,
)
from .tokens import Token, TokenList

__all__ = [
    "__version__",
    # model
    "Binding",
    "PositionalModel",
    "SemanticType",
    "OPERAND",
    "ContextFree",
    "Semantic",
    "CONTEXT_FREE",
    # tokens / inference
    "Token",
    "TokenList",
    "InferenceConfig",
    "Classification",
    "classify",
    # catalogue / lexing
    "Catalog",
    "default_catalog",
    "load_catalog",
    "parse_catalog",
    "unparse_catalog",
    "lex",
    "load_token_list",
    "parse_token_list",
    "split_command_line",
    # errors
    "ArgsenseError",
    "ClassificationError",
    "OutOfRangeError",
    "AmbiguityExhaustedError",
    "AmbiguityRemainingError",
    "ConvergenceError",
    "CatalogError",
    "ConfigError",
    "ErrorReporter",
]
