#!/usr/bin/env python3
"""argsense/main.py – CLI entry-point for argsense.

Usage examples
--------------
    # Classify a command line against the built-in catalogue
    argsense classify -- -n 5 file.txt

    # Same, from a single shell-quoted string
    argsense classify --line "tar -x -f archive.tar"

    # Use a program-specific catalogue and keep partial results
    argsense classify --catalog head.cat --keep-going -f json -- -n 5 a b

    # Classify hand-written candidate sets
    argsense classify --tokens cases.tok

    # Show the initial candidate sets without inference
    argsense lex -- -v -o out.txt

    # Inspect a catalogue
    argsense catalog --catalog head.cat --list
    argsense catalog --describe valued-option

Exit codes
----------
    0   Every token classified.
    1   Classification failed (out of range, exhausted, ambiguous,
        no convergence).
    2   Infrastructure failure (bad catalogue, bad flags, missing file).

The module doubles as ``python -m argsense`` via the companion
``argsense/__main__.py`` which simply calls :func:`main`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from . import __version__
from .catalog import Catalog, default_catalog, load_catalog, unparse_catalog
from .config import PASSES, InferenceConfig
from .errors import ArgsenseError, CatalogError, ClassificationError, ConfigError
from .inference import Classification, classify
from .lexer import lex, load_token_list, split_command_line, unparse_token_list
from .tokens import TokenList

_log = logging.getLogger("argsense")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``argsense`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("argsense")
    # Repeated main() calls in one process must not stack handlers.
    for old in [h for h in root.handlers if getattr(h, "_argsense_cli", False)]:
        root.removeHandler(old)
    handler._argsense_cli = True  # type: ignore[attr-defined]
    root.setLevel(level)
    root.addHandler(handler)


def _resolve_path(raw: str, label: str = "file") -> Path:
    """Resolve *raw* to an absolute ``Path``, raising on missing files."""
    p = Path(raw).expanduser().resolve()
    if not p.exists():
        _log.error("%s not found: %s", label, p)
        raise SystemExit(EXIT_INFRA)
    return p


def _open_output(dest: Optional[str]) -> TextIO:
    """Return a writable text stream.

    *dest* ``None`` or ``"-"`` → ``sys.stdout``; otherwise open the path
    for writing (creating parent directories as needed).
    """
    if dest is None or dest == "-":
        return sys.stdout
    p = Path(dest).expanduser().resolve()
    p.parent.mkdir(parents=True, exist_ok=True)
    return open(p, "w", encoding="utf-8")


def _emit_diagnostics(errors: Sequence[ArgsenseError], stream: TextIO) -> None:
    for exc in errors:
        stream.write(exc.to_gcc_format() + "\n")


def _load_catalog(args: argparse.Namespace) -> Catalog:
    if getattr(args, "catalog", None):
        return load_catalog(_resolve_path(args.catalog, "catalog"))
    return default_catalog()


def _collect_argv(args: argparse.Namespace) -> List[str]:
    argv = list(args.argv)
    if args.line is not None:
        argv = split_command_line(args.line) + argv
    return argv


def _build_tokens(args: argparse.Namespace, catalog: Catalog) -> TokenList:
    if getattr(args, "tokens", None):
        if args.argv or args.line is not None:
            _log.warning("--tokens given; ignoring command-line arguments")
        return load_token_list(_resolve_path(args.tokens, "token file"), catalog)
    return lex(_collect_argv(args), catalog)


def _format_token_line(token) -> str:
    where = f"argv[{token.position}] {token.value!r}"
    if token.semantic_type is not None:
        line = f"{where}: {token.semantic_type}"
        if token.bound_to is not None:
            line += f" -> argv[{token.bound_to}]"
        return line
    return f"{where}: ? {{{', '.join(token.candidate_names)}}}"


def _write_tokens(tokens: TokenList, fmt: str, out: TextIO) -> None:
    if fmt == "json":
        out.write(json.dumps(tokens.to_dicts(), indent=2) + "\n")
    elif fmt == "sexp":
        out.write(unparse_token_list(tokens))
    else:
        for token in tokens:
            out.write(_format_token_line(token) + "\n")


def _write_classification(result: Classification, fmt: str, out: TextIO) -> None:
    if fmt == "json":
        out.write(json.dumps(result.to_dict(), indent=2) + "\n")
        return
    _write_tokens(result.tokens, fmt, out)
    if fmt == "summary":
        out.write(
            f"\n--- {len(result.tokens)} token(s), {len(result.resolved)} resolved, "
            f"{result.sweeps} sweep(s), {result.reporter.error_count()} error(s) ---\n"
        )


# ===========================================================================
# Sub-command implementations
# ===========================================================================

# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------

def cmd_classify(args: argparse.Namespace) -> int:
    """Lex (or load) a token list, run inference and print the outcome."""
    try:
        config = InferenceConfig.from_mapping(
            {
                "max_sweeps": args.max_sweeps,
                "pass_order": args.pass_order,
                "raise_on_error": not args.keep_going,
            }
        )
        catalog = _load_catalog(args)
        tokens = _build_tokens(args, catalog)
    except (CatalogError, ConfigError) as exc:
        _emit_diagnostics([exc], sys.stderr)
        return EXIT_INFRA
    except ValueError as exc:
        _log.error("cannot read command line: %s", exc)
        return EXIT_INFRA

    try:
        result = classify(tokens, config)
    except ClassificationError as exc:
        _emit_diagnostics([exc], sys.stderr)
        return EXIT_ERROR

    out = _open_output(args.output)
    try:
        _write_classification(result, args.format, out)
    finally:
        if out is not sys.stdout:
            out.close()

    if not result.ok:
        _emit_diagnostics(result.reporter.exceptions, sys.stderr)
        return EXIT_ERROR
    return EXIT_OK


# ---------------------------------------------------------------------------
# lex
# ---------------------------------------------------------------------------

def cmd_lex(args: argparse.Namespace) -> int:
    """Print the initial candidate sets without running inference."""
    try:
        catalog = _load_catalog(args)
        tokens = lex(_collect_argv(args), catalog)
    except CatalogError as exc:
        _emit_diagnostics([exc], sys.stderr)
        return EXIT_INFRA
    except ValueError as exc:
        _log.error("cannot read command line: %s", exc)
        return EXIT_INFRA

    out = _open_output(args.output)
    try:
        _write_tokens(tokens, args.format, out)
    finally:
        if out is not sys.stdout:
            out.close()
    return EXIT_OK


# ---------------------------------------------------------------------------
# catalog (list / describe / dump)
# ---------------------------------------------------------------------------

def cmd_catalog(args: argparse.Namespace) -> int:
    """List, describe or dump a catalogue."""
    try:
        catalog = _load_catalog(args)
    except CatalogError as exc:
        _emit_diagnostics([exc], sys.stderr)
        return EXIT_INFRA

    out = _open_output(args.output)
    try:
        if args.describe:
            try:
                t = catalog.get(args.describe)
            except CatalogError as exc:
                _emit_diagnostics([exc], sys.stderr)
                return EXIT_ERROR
            doc = t.description or "(no description)"
            out.write(f"{t.name}: {t.positional_model}\n{textwrap.indent(doc, '  ')}\n")
            patterns = catalog.patterns(t.name)
            if patterns:
                out.write(f"  matches: {' '.join(patterns)}\n")
        elif args.list:
            for t in catalog:
                out.write(f"  {t.name:<20} {t.positional_model}\n")
            out.write(f"\n{len(catalog)} type(s) in catalog {catalog.name}.\n")
        else:
            out.write(unparse_catalog(catalog))
    finally:
        if out is not sys.stdout:
            out.close()
    return EXIT_OK


# ===========================================================================
# Argument parser construction
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Construct the full CLI argument parser with subcommands."""

    # --- Top-level parser --------------------------------------------------
    parser = argparse.ArgumentParser(
        prog="argsense",
        description=(
            "argsense: classify command-line arguments by adjacency.\n\n"
            "Narrows each argument's candidate semantic types using the\n"
            "binding behaviour of its neighbours."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              argsense classify -- -n 5 file.txt
              argsense classify --catalog head.cat -f json -- -n 5 a b
              argsense lex --line "tar -x -f archive.tar"
              argsense catalog --list
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    # Shared argument groups (reusable) ------------------------------------

    def _add_output_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "-o", "--output",
            default=None,
            metavar="FILE",
            help="Write output to FILE (default: stdout).",
        )
        p.add_argument(
            "-f", "--format",
            choices=["summary", "json", "sexp"],
            default="summary",
            help="Output format (default: summary).",
        )

    def _add_catalog_arg(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--catalog",
            metavar="FILE",
            default=None,
            help="Semantic-type catalogue (default: built-in generic catalogue).",
        )

    def _add_argv_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--line",
            metavar="TEXT",
            default=None,
            help="Shell-quoted command line, split before any ARG.",
        )
        p.add_argument(
            "argv",
            nargs="*",
            metavar="ARG",
            help="Arguments to classify (put them after --).",
        )

    # --- classify ----------------------------------------------------------
    p_classify = subparsers.add_parser(
        "classify",
        help="Classify command-line arguments.",
        description="Lex the arguments against a catalogue and narrow them to a fixpoint.",
    )
    _add_catalog_arg(p_classify)
    p_classify.add_argument(
        "--tokens",
        metavar="FILE",
        default=None,
        help="Read explicit candidate sets from an S-expression token file.",
    )
    g = p_classify.add_argument_group("inference tuning")
    g.add_argument(
        "--max-sweeps",
        type=int,
        default=None,
        metavar="N",
        help="Give up after N sweeps (default: bounded by the candidate count).",
    )
    g.add_argument(
        "--pass-order",
        default=None,
        metavar="LIST",
        help=f"Comma-separated pass order (default: {','.join(PASSES)}).",
    )
    g.add_argument(
        "--keep-going",
        action="store_true",
        default=False,
        help="Print the partial classification when inference fails.",
    )
    _add_output_args(p_classify)
    _add_argv_args(p_classify)
    p_classify.set_defaults(func=cmd_classify)

    # --- lex ---------------------------------------------------------------
    p_lex = subparsers.add_parser(
        "lex",
        help="Show initial candidate sets.",
        description="Print each argument with the catalogue types it may be.",
    )
    _add_catalog_arg(p_lex)
    _add_output_args(p_lex)
    _add_argv_args(p_lex)
    p_lex.set_defaults(func=cmd_lex)

    # --- catalog -----------------------------------------------------------
    p_catalog = subparsers.add_parser(
        "catalog",
        help="Inspect a semantic-type catalogue.",
        description="List, describe or re-print a catalogue.",
    )
    _add_catalog_arg(p_catalog)
    group = p_catalog.add_mutually_exclusive_group()
    group.add_argument(
        "--list",
        action="store_true",
        default=False,
        help="List type names with their positional models.",
    )
    group.add_argument(
        "--describe",
        metavar="NAME",
        default=None,
        help="Show one type in detail.",
    )
    p_catalog.add_argument(
        "-o", "--output",
        default=None,
        metavar="FILE",
        help="Write output to FILE (default: stdout).",
    )
    p_catalog.set_defaults(func=cmd_catalog)

    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the argsense CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    # No subcommand given → print help.
    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130  # Standard UNIX convention for SIGINT
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA
    except Exception as exc:
        _log.error("Unhandled exception: %s", exc, exc_info=True)
        return EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())
