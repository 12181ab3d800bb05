"""argsense/inference.py – Fixpoint driver for adjacency inference.

The rules in :mod:`argsense.tokens` each look one position left or
right.  The driver applies them in serialized sweeps: one pass over every
token, then the next pass, until a whole sweep changes nothing.

Algorithm
---------
1. **Seed.**  Run the resolution check on every token so that tokens
   admitted with a single type resolve before any rule looks at them.
   A token with no admissible type at all fails here.
2. **Sweep.**  For each pass in ``config.pass_order``:
   ``left`` and ``positional`` walk the list left-to-right (so a
   resolution can feed the next token in the same sweep), ``right``
   walks it right-to-left for the same reason.
3. **Converge.**  Stop after the first sweep without changes.  Every
   productive sweep removes at least one candidate, so the run is
   bounded by the number of candidates held after seeding.
4. **Report.**  Tokens still holding several candidates are reported
   as remaining ambiguity; nothing is guessed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .config import InferenceConfig
from .errors import (
    AmbiguityExhaustedError,
    AmbiguityRemainingError,
    ClassificationError,
    ConvergenceError,
    ErrorReporter,
)
from .tokens import Token, TokenList

_log = logging.getLogger(__name__)

Rule = Callable[[Token, TokenList], bool]

#: pass name -> (rule, walk right-to-left)
_PASSES: Dict[str, Tuple[Rule, bool]] = {
    "left": (Token.infer_left, False),
    "right": (Token.infer_right, True),
    "positional": (Token.infer_positional, False),
}


@dataclass
class Classification:
    """Outcome of :func:`classify` for one token list."""

    tokens: TokenList
    sweeps: int = 0
    reporter: ErrorReporter = field(default_factory=ErrorReporter)

    @property
    def ok(self) -> bool:
        return not self.reporter.has_errors()

    @property
    def resolved(self) -> List[Token]:
        return self.tokens.resolved()

    @property
    def ambiguous(self) -> List[Token]:
        """Unresolved tokens that still hold more than one candidate."""
        return [
            t for t in self.tokens if not t.is_semantic() and len(t.candidates) > 1
        ]

    def raise_for_errors(self) -> None:
        if self.reporter.has_errors():
            raise self.reporter.as_exception()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "sweeps": self.sweeps,
            "tokens": self.tokens.to_dicts(),
            "errors": self.reporter.to_json(),
        }


def seed(tokens: TokenList) -> int:
    """Resolve every token admitted with exactly one type.

    Returns the number of tokens resolved.

    Raises
    ------
    AmbiguityExhaustedError
        A token was created without any admissible type.
    OutOfRangeError
        A single admissible type binds past either end of the list.
    """
    resolved = 0
    for token in tokens:
        if token.is_semantic():
            continue
        if not token.candidates:
            raise AmbiguityExhaustedError(
                token, hint="no semantic type is admissible for this value"
            )
        if token.possibly_convert_to_semantic(tokens):
            resolved += 1
    return resolved


def run_pass(name: str, tokens: TokenList) -> int:
    """Apply pass *name* to every token once; return how many changed."""
    rule, backwards = _PASSES[name]
    order: Sequence[Token] = list(reversed(tokens)) if backwards else tokens
    changed = 0
    for token in order:
        if rule(token, tokens):
            changed += 1
    return changed


def sweep(tokens: TokenList, pass_order: Sequence[str]) -> int:
    """Run each pass of *pass_order* in turn; return the total change count."""
    total = 0
    for name in pass_order:
        changed = run_pass(name, tokens)
        if changed:
            _log.debug("pass %s changed %d token(s)", name, changed)
        total += changed
    return total


def classify(
    tokens: TokenList,
    config: Optional[InferenceConfig] = None,
) -> Classification:
    """Narrow every token of *tokens* to a fixpoint.

    Tokens are mutated in place; the returned :class:`Classification`
    wraps the same list together with any reported failures.

    Raises
    ------
    ClassificationError
        Only when ``config.raise_on_error`` is true (the default).
        Otherwise the failure is recorded on ``result.reporter`` and the
        partially classified list is returned.
    """
    config = (config or InferenceConfig()).check()
    result = Classification(tokens=tokens)

    try:
        seeded = seed(tokens)
        _log.debug("seeded %d of %d token(s)", seeded, len(tokens))

        limit = config.max_sweeps
        if limit is None:
            limit = tokens.candidate_count() + 1

        while True:
            if result.sweeps >= limit:
                raise ConvergenceError(
                    f"no fixpoint after {result.sweeps} sweep(s)",
                    hint="raise max_sweeps or leave it unset",
                )
            result.sweeps += 1
            if not sweep(tokens, config.pass_order):
                break

        ambiguous = result.ambiguous
        if ambiguous:
            raise AmbiguityRemainingError(ambiguous)
    except ClassificationError as exc:
        result.reporter.report(exc)
        _log.debug("classification failed: %s", exc.error_message.message)
        if config.raise_on_error:
            raise

    _log.info(
        "classified %d token(s) in %d sweep(s): %d resolved, %d ambiguous",
        len(tokens),
        result.sweeps,
        len(result.resolved),
        len(result.ambiguous),
    )
    return result
