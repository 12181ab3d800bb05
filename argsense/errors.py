# argsense/errors.py
"""
argsense Error Types and Reporting Module

Error handling infrastructure for token classification, catalogue
loading and configuration.

Error Hierarchy:
────────────────
┌──────────────────────────────────────────────────────────────────┐
│  ArgsenseError (base)                                            │
│  ├── ClassificationError      - inference could not finish      │
│  │   ├── OutOfRangeError      - bound token has no neighbour    │
│  │   ├── AmbiguityExhaustedError - candidate set became empty   │
│  │   ├── AmbiguityRemainingError - fixpoint left >1 candidate   │
│  │   └── ConvergenceError     - sweep ceiling reached           │
│  ├── CatalogError             - malformed catalogue / token file │
│  └── ConfigError              - invalid InferenceConfig          │
└──────────────────────────────────────────────────────────────────┘

Error Codes:
────────────
``ARGS-NNNN`` where NNNN falls in:
  - 0001-0999: classification errors
  - 1000-1999: catalogue / token-file errors
  - 2000-2999: configuration errors
  - 9000-9999: driver errors

Example Usage:
──────────────
    from argsense.errors import ErrorReporter, ErrorCodes

    reporter = ErrorReporter()
    reporter.error(ErrorCodes.AMBIGUITY_REMAINING, "2 candidates left",
                   position=1, value="-n")
    if reporter.has_errors():
        raise reporter.as_exception()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Sequence

if TYPE_CHECKING:
    from .model import SemanticType
    from .tokens import Token


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR SEVERITY AND CLASSIFICATION
# ═══════════════════════════════════════════════════════════════════════════════

@unique
class ErrorSeverity(Enum):
    """Severity levels for argsense diagnostics."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    def is_error(self) -> bool:
        return self is ErrorSeverity.ERROR


@unique
class ErrorPhase(Enum):
    """Stage of processing that produced the error."""

    CLASSIFY = "classify"
    CATALOG = "catalog"
    CONFIG = "config"
    DRIVER = "driver"


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CODES
# ═══════════════════════════════════════════════════════════════════════════════

class ErrorCode:
    """Structured error code, rendered ``ARGS-NNNN``."""

    __slots__ = ("prefix", "number", "phase", "title", "default_severity")

    def __init__(
        self,
        number: int,
        phase: ErrorPhase,
        title: str,
        default_severity: ErrorSeverity = ErrorSeverity.ERROR,
        prefix: str = "ARGS",
    ) -> None:
        self.prefix = prefix
        self.number = number
        self.phase = phase
        self.title = title
        self.default_severity = default_severity

    @property
    def code(self) -> str:
        return f"{self.prefix}-{self.number:04d}"

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"ErrorCode({self.code!r}, {self.title!r})"

    def __hash__(self) -> int:
        return hash((self.prefix, self.number))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ErrorCode):
            return self.prefix == other.prefix and self.number == other.number
        if isinstance(other, str):
            return self.code == other
        return False


class ErrorCodes:
    """Predefined error codes."""

    OUT_OF_RANGE = ErrorCode(1, ErrorPhase.CLASSIFY, "out-of-range")
    AMBIGUITY_EXHAUSTED = ErrorCode(2, ErrorPhase.CLASSIFY, "ambiguity-exhausted")
    AMBIGUITY_REMAINING = ErrorCode(3, ErrorPhase.CLASSIFY, "ambiguity-remaining")

    CATALOG_SYNTAX = ErrorCode(1001, ErrorPhase.CATALOG, "catalog-syntax")
    UNKNOWN_TYPE = ErrorCode(1002, ErrorPhase.CATALOG, "unknown-type")
    DUPLICATE_TYPE = ErrorCode(1003, ErrorPhase.CATALOG, "duplicate-type")
    INVALID_PATTERN = ErrorCode(1004, ErrorPhase.CATALOG, "invalid-pattern")

    INVALID_CONFIG = ErrorCode(2001, ErrorPhase.CONFIG, "invalid-config")

    NO_CONVERGENCE = ErrorCode(9001, ErrorPhase.DRIVER, "no-convergence")


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR MESSAGE FORMATTING
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class ErrorMessage:
    """A complete diagnostic before it is raised or printed.

    ``position``/``value`` locate the offending token on the command
    line; ``source`` names the catalogue or token file for load errors.
    """

    code: ErrorCode
    message: str
    position: Optional[int] = None
    value: Optional[str] = None
    source: str = ""
    severity: Optional[ErrorSeverity] = None
    hint: str = ""
    candidates: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.severity is None:
            self.severity = self.code.default_severity

    def with_hint(self, hint: str) -> "ErrorMessage":
        self.hint = hint
        return self

    @property
    def location(self) -> str:
        if self.position is not None:
            where = f"argv[{self.position}]"
            if self.value is not None:
                where += f" {self.value!r}"
            return where
        return self.source or "<command line>"

    def to_gcc_format(self) -> str:
        """Format as a GCC-style message: ``loc: severity: message [code]``."""
        severity = self.severity.value if self.severity else "error"
        lines = [f"{self.location}: {severity}: {self.message} [{self.code}]"]
        if self.candidates:
            lines.append(f"note: candidates: {', '.join(self.candidates)}")
        if self.hint:
            lines.append(f"hint: {self.hint}")
        return "\n".join(lines)

    def to_json(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "code": self.code.code,
            "title": self.code.title,
            "phase": self.code.phase.value,
            "severity": self.severity.value if self.severity else "error",
            "message": self.message,
            "position": self.position,
            "value": self.value,
            "source": self.source,
            "candidates": list(self.candidates),
            "hint": self.hint,
        }

    def __str__(self) -> str:
        return self.to_gcc_format()


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION CLASSES
# ═══════════════════════════════════════════════════════════════════════════════

class ArgsenseError(Exception):
    """
    Base exception for all argsense errors.

    Carries a structured :class:`ErrorMessage` that can be reported,
    rendered GCC-style, or serialised to JSON.
    """

    default_code: ErrorCode = ErrorCodes.CATALOG_SYNTAX

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        position: Optional[int] = None,
        value: Optional[str] = None,
        source: str = "",
        hint: str = "",
        candidates: Optional[Sequence[str]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.error_message = ErrorMessage(
            code=code or self.default_code,
            message=message,
            position=position,
            value=value,
            source=source,
            hint=hint,
            candidates=list(candidates or []),
        )
        self.cause = cause

    @property
    def code(self) -> ErrorCode:
        return self.error_message.code

    @property
    def position(self) -> Optional[int]:
        return self.error_message.position

    @property
    def severity(self) -> ErrorSeverity:
        return self.error_message.severity or ErrorSeverity.ERROR

    def to_gcc_format(self) -> str:
        return self.error_message.to_gcc_format()

    def __str__(self) -> str:
        return self.to_gcc_format()


# ───────────────────────────────────────────────────────────────────────────────
# CLASSIFICATION ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class ClassificationError(ArgsenseError):
    """Inference could not produce a consistent classification."""

    default_code = ErrorCodes.AMBIGUITY_EXHAUSTED


class OutOfRangeError(ClassificationError, IndexError):
    """A LEFT/RIGHT-bound token has no neighbour on its bound side."""

    default_code = ErrorCodes.OUT_OF_RANGE

    def __init__(
        self,
        token: "Token",
        semantic_type: "SemanticType",
        missing_position: int,
        **kwargs: Any,
    ) -> None:
        side = "right" if missing_position > token.position else "left"
        super().__init__(
            f"'{semantic_type}' binds to the {side} but there is no "
            f"token at position {missing_position}",
            position=token.position,
            value=token.value,
            hint=(
                "the admissible types for this token must not bind past "
                "the end of the command line"
            ),
            **kwargs,
        )
        self.token = token
        self.semantic_type = semantic_type
        self.missing_position = missing_position


class AmbiguityExhaustedError(ClassificationError):
    """Narrowing removed every candidate of a token."""

    default_code = ErrorCodes.AMBIGUITY_EXHAUSTED

    def __init__(
        self,
        token: "Token",
        eliminated: Sequence[str] = (),
        **kwargs: Any,
    ) -> None:
        super().__init__(
            "no admissible semantic type is consistent with the neighbouring tokens",
            position=token.position,
            value=token.value,
            candidates=eliminated,
            **kwargs,
        )
        self.token = token


class AmbiguityRemainingError(ClassificationError):
    """The fixpoint was reached with tokens still holding several candidates."""

    default_code = ErrorCodes.AMBIGUITY_REMAINING

    def __init__(self, tokens: Sequence["Token"], **kwargs: Any) -> None:
        self.tokens = list(tokens)
        first = self.tokens[0] if self.tokens else None
        where = ", ".join(str(t.position) for t in self.tokens)
        super().__init__(
            f"{len(self.tokens)} token(s) remain ambiguous (positions: {where})",
            position=first.position if first is not None else None,
            value=first.value if first is not None else None,
            candidates=first.candidate_names if first is not None else (),
            **kwargs,
        )


class ConvergenceError(ClassificationError):
    """The driver hit its sweep ceiling before reaching a fixpoint."""

    default_code = ErrorCodes.NO_CONVERGENCE


# ───────────────────────────────────────────────────────────────────────────────
# LOADING / CONFIGURATION ERRORS
# ───────────────────────────────────────────────────────────────────────────────

class CatalogError(ArgsenseError):
    """A catalogue or token-list file could not be mapped to types."""

    default_code = ErrorCodes.CATALOG_SYNTAX


class ConfigError(ArgsenseError, ValueError):
    """An :class:`~argsense.config.InferenceConfig` value is invalid."""

    default_code = ErrorCodes.INVALID_CONFIG


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR REPORTER
# ═══════════════════════════════════════════════════════════════════════════════

class ErrorReporter:
    """Collects diagnostics for one classification run."""

    def __init__(self) -> None:
        self._messages: List[ErrorMessage] = []
        self._exceptions: List[ArgsenseError] = []

    def report(self, exc: ArgsenseError) -> None:
        """Record a raised error without propagating it."""
        self._exceptions.append(exc)
        self._messages.append(exc.error_message)

    def error(
        self,
        code: ErrorCode,
        message: str,
        *,
        position: Optional[int] = None,
        value: Optional[str] = None,
        hint: str = "",
    ) -> ErrorMessage:
        msg = ErrorMessage(
            code=code, message=message, position=position, value=value, hint=hint
        )
        self._messages.append(msg)
        return msg

    def warning(
        self,
        code: ErrorCode,
        message: str,
        *,
        position: Optional[int] = None,
        value: Optional[str] = None,
    ) -> ErrorMessage:
        msg = ErrorMessage(
            code=code,
            message=message,
            position=position,
            value=value,
            severity=ErrorSeverity.WARNING,
        )
        self._messages.append(msg)
        return msg

    @property
    def messages(self) -> List[ErrorMessage]:
        return list(self._messages)

    @property
    def exceptions(self) -> List[ArgsenseError]:
        return list(self._exceptions)

    def has_errors(self) -> bool:
        return any(m.severity is ErrorSeverity.ERROR for m in self._messages)

    def error_count(self) -> int:
        return sum(1 for m in self._messages if m.severity is ErrorSeverity.ERROR)

    def as_exception(self) -> ArgsenseError:
        """Return the first recorded error as an exception."""
        if self._exceptions:
            return self._exceptions[0]
        for m in self._messages:
            if m.severity is ErrorSeverity.ERROR:
                return ClassificationError(
                    m.message, code=m.code, position=m.position, value=m.value
                )
        raise ValueError("ErrorReporter holds no errors")

    def to_json(self) -> List[Dict[str, Any]]:
        return [m.to_json() for m in self._messages]

    def __iter__(self) -> Iterator[ErrorMessage]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)
