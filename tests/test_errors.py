# tests/test_errors.py
"""
Tests for error codes, diagnostics formatting and the ErrorReporter.
"""

import json

import pytest

from argsense.errors import (
    AmbiguityExhaustedError,
    AmbiguityRemainingError,
    ArgsenseError,
    CatalogError,
    ClassificationError,
    ConvergenceError,
    ErrorCode,
    ErrorCodes,
    ErrorMessage,
    ErrorPhase,
    ErrorReporter,
    ErrorSeverity,
    OutOfRangeError,
)
from argsense.model import OPERAND
from argsense.tokens import Token


class TestErrorCode:

    def test_rendering(self):
        assert ErrorCodes.OUT_OF_RANGE.code == "ARGS-0001"
        assert ErrorCodes.NO_CONVERGENCE.code == "ARGS-9001"
        assert str(ErrorCodes.CATALOG_SYNTAX) == "ARGS-1001"

    def test_phases(self):
        assert ErrorCodes.AMBIGUITY_REMAINING.phase is ErrorPhase.CLASSIFY
        assert ErrorCodes.DUPLICATE_TYPE.phase is ErrorPhase.CATALOG
        assert ErrorCodes.INVALID_CONFIG.phase is ErrorPhase.CONFIG

    def test_equality_by_number_and_prefix(self):
        twin = ErrorCode(1, ErrorPhase.CLASSIFY, "other-title")
        assert twin == ErrorCodes.OUT_OF_RANGE
        assert hash(twin) == hash(ErrorCodes.OUT_OF_RANGE)
        assert ErrorCodes.OUT_OF_RANGE != ErrorCodes.AMBIGUITY_EXHAUSTED


class TestErrorMessage:

    def test_default_severity(self):
        msg = ErrorMessage(code=ErrorCodes.OUT_OF_RANGE, message="m")
        assert msg.severity is ErrorSeverity.ERROR

    def test_token_location(self):
        msg = ErrorMessage(code=ErrorCodes.OUT_OF_RANGE, message="m", position=2, value="-o")
        assert msg.location == "argv[2] '-o'"

    def test_source_location(self):
        msg = ErrorMessage(code=ErrorCodes.CATALOG_SYNTAX, message="m", source="x.cat")
        assert msg.location == "x.cat"
        assert ErrorMessage(code=ErrorCodes.CATALOG_SYNTAX, message="m").location == "<command line>"

    def test_gcc_format(self):
        msg = ErrorMessage(
            code=ErrorCodes.AMBIGUITY_EXHAUSTED,
            message="nothing left",
            position=1,
            value="x",
            hint="check the catalogue",
            candidates=["operand", "flag"],
        )
        assert msg.to_gcc_format().splitlines() == [
            "argv[1] 'x': error: nothing left [ARGS-0002]",
            "note: candidates: operand, flag",
            "hint: check the catalogue",
        ]

    def test_json_serialisable(self):
        msg = ErrorMessage(code=ErrorCodes.OUT_OF_RANGE, message="m", position=0, value="-o")
        data = json.loads(json.dumps(msg.to_json()))
        assert data["code"] == "ARGS-0001"
        assert data["title"] == "out-of-range"
        assert data["phase"] == ErrorPhase.CLASSIFY.value
        assert data["position"] == 0


class TestExceptions:

    def test_hierarchy(self):
        assert issubclass(OutOfRangeError, ClassificationError)
        assert issubclass(OutOfRangeError, IndexError)
        assert issubclass(ConvergenceError, ClassificationError)
        assert issubclass(CatalogError, ArgsenseError)
        assert not issubclass(CatalogError, ClassificationError)

    def test_default_codes(self):
        assert ConvergenceError("x").code == ErrorCodes.NO_CONVERGENCE
        assert CatalogError("x").code == ErrorCodes.CATALOG_SYNTAX
        assert CatalogError("x", code=ErrorCodes.UNKNOWN_TYPE).code == ErrorCodes.UNKNOWN_TYPE

    def test_str_is_gcc_format(self):
        exc = CatalogError("bad form", source="a.cat")
        assert str(exc) == "a.cat: error: bad form [ARGS-1001]"

    def test_cause_kept(self):
        cause = ValueError("inner")
        assert CatalogError("outer", cause=cause).cause is cause

    def test_out_of_range_message(self):
        token = Token(position=0, value="5")
        exc = OutOfRangeError(token, OPERAND, -1)
        assert "binds to the left" in exc.error_message.message
        assert exc.token is token

    def test_remaining_uses_first_token(self):
        tokens = [
            Token(position=2, value="-a", candidates=[OPERAND]),
            Token(position=4, value="-b"),
        ]
        exc = AmbiguityRemainingError(tokens)
        assert exc.position == 2
        assert "2 token(s) remain ambiguous (positions: 2, 4)" in str(exc)
        assert exc.error_message.candidates == ["operand"]


class TestErrorReporter:

    def test_empty(self):
        reporter = ErrorReporter()
        assert not reporter.has_errors()
        assert len(reporter) == 0
        with pytest.raises(ValueError):
            reporter.as_exception()

    def test_report_exception(self):
        reporter = ErrorReporter()
        exc = AmbiguityExhaustedError(Token(position=0, value="x"), ["operand"])
        reporter.report(exc)
        assert reporter.has_errors()
        assert reporter.exceptions == [exc]
        assert reporter.as_exception() is exc
        assert reporter.to_json()[0]["candidates"] == ["operand"]

    def test_warning_is_not_an_error(self):
        reporter = ErrorReporter()
        reporter.warning(ErrorCodes.AMBIGUITY_REMAINING, "still open", position=0)
        assert len(reporter) == 1
        assert reporter.error_count() == 0
        assert not reporter.has_errors()

    def test_plain_error_becomes_exception(self):
        reporter = ErrorReporter()
        reporter.error(ErrorCodes.OUT_OF_RANGE, "too far", position=3, value="-o")
        exc = reporter.as_exception()
        assert isinstance(exc, ClassificationError)
        assert exc.code == ErrorCodes.OUT_OF_RANGE
        assert exc.position == 3
        assert [m.message for m in reporter] == ["too far"]
