#!/usr/bin/env python3
"""
stackviz - step-by-step expression notation algorithms.

Entry point for the command line.

Usage:
    stackviz "A * (B + C) - D/E"                 # Convert infix to postfix
    stackviz -m infix-to-prefix "A * (B + C)"    # Convert infix to prefix
    stackviz "- + * 5 3 8 / 4 2" -s              # Evaluate prefix, show steps
    stackviz --demo                              # Run every algorithm on its example
"""

import argparse
import logging
import sys
from typing import List, Optional


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="stackviz",
        description="Step-by-step infix/prefix/postfix conversion and evaluation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  stackviz "A * (B + C) - D/E"                Convert infix to postfix
  stackviz -m infix-to-prefix "A*(B+C)-D/E"   Convert infix to prefix
  stackviz "- + * 5 3 8 / 4 2"                Evaluate prefix (auto-detected)
  stackviz "5 3 * 8 + 4 2 / -" -s             Evaluate postfix and show steps
  stackviz -f json "A-B-C"                    Output the full trace as JSON
  stackviz --at 3 --rules "A+B*C"             Show the state after step 3
  stackviz --demo                             Run all four algorithms
        """,
    )

    # Positional: expression to process
    parser.add_argument(
        "expression",
        nargs="?",
        help="Expression to convert or evaluate",
    )

    # Algorithm
    parser.add_argument(
        "-m",
        "--mode",
        choices=[
            "auto",
            "infix-to-postfix",
            "infix-to-prefix",
            "prefix-evaluation",
            "postfix-evaluation",
        ],
        default="auto",
        help="Algorithm to run (default: detect from the expression)",
    )

    # Output format
    parser.add_argument(
        "-f",
        "--format",
        choices=["text", "json", "latex"],
        default="text",
        help="Output format (default: text)",
    )

    # Show steps
    parser.add_argument(
        "-s",
        "--steps",
        action="store_true",
        help="Show every step with its explanation",
    )

    # Show stack and output snapshots with the steps
    parser.add_argument(
        "--snapshots",
        action="store_true",
        help="Show stack and output contents with each step (implies --steps)",
    )

    # Playback position
    parser.add_argument(
        "--at",
        type=int,
        metavar="N",
        help="Show the state after step N (0 is the start)",
    )

    # Rule texts
    parser.add_argument(
        "--rules",
        action="store_true",
        help="Show which algorithm rules each step applies (with --at)",
    )

    # Demo
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run every algorithm on its default example",
    )

    # List algorithms
    parser.add_argument(
        "--list-algorithms",
        action="store_true",
        help="List the available algorithms",
    )

    # Version
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    # Verbose
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed output and debug logging",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def run_expression_cli(
    expression: str,
    mode: str,
    output_format: str,
    show_steps: bool,
    show_snapshots: bool,
    at: Optional[int],
    show_rules: bool,
    verbose: bool,
) -> int:
    """Run one expression and print the result."""
    from stackviz.engine import get_default_registry
    from stackviz.output.exporter import ExportOptions, TraceExporter, render_items
    from stackviz.output.playback import view_at
    from stackviz.utils.errors import LexError, NotationError

    registry = get_default_registry()

    # Pick the algorithm
    if mode == "auto":
        try:
            algorithm = registry.detect(expression)
        except LexError as e:
            return report_error(e, output_format)
        if algorithm is None:
            print("Error: Could not detect the notation of the expression", file=sys.stderr)
            return 1
    else:
        algorithm = registry.get(mode)

    if verbose:
        print(f"Algorithm: {algorithm.name}", file=sys.stderr)

    try:
        trace = algorithm.run(expression)
    except NotationError as e:
        return report_error(e, output_format)

    # Single playback position
    if at is not None:
        view = view_at(trace, at)
        print(f"Step {view.cursor} of {view.total - 1}")
        if view.step.token is not None:
            print(f"Token: {view.step.token}")
        print(f"Stack: {render_items(view.step.stack_snapshot)}")
        print(f"Output: {render_items(view.step.output_snapshot)}")
        print(f"Explanation: {view.step.explanation}")
        if show_rules:
            print("Rules:")
            for text in view.rule_texts:
                print(f"  - {text}")
        return 0

    options = ExportOptions(
        include_steps=show_steps or show_snapshots or output_format == "json",
        include_snapshots=show_snapshots,
    )
    exporter = TraceExporter(trace, options)

    if output_format == "json":
        print(exporter.to_json())
    elif output_format == "latex":
        print(exporter.to_latex())
    else:  # text
        print(exporter.to_text())

    return 0


def report_error(exc, output_format: str) -> int:
    """Print an engine error and return the exit code."""
    if output_format == "json":
        import json

        print(json.dumps(exc.to_dict(), indent=2))
    else:
        print(f"Error: {exc}", file=sys.stderr)
        if exc.suggestions:
            print(f"Suggestion: {exc.suggestions[0]}", file=sys.stderr)
    return 1


def list_algorithms() -> int:
    """List the available algorithms."""
    from stackviz.engine import get_default_registry
    from stackviz.utils.constants import DEFAULT_EXPRESSIONS

    for algorithm in get_default_registry().algorithms:
        key = algorithm.algorithm.value
        print(f"{key}: {algorithm.name}")
        print(f"    {algorithm.description}")
        print(f"    example: {DEFAULT_EXPRESSIONS[key]}")
    return 0


def run_demo(output_format: str, show_steps: bool) -> int:
    """Run each algorithm on its default expression."""
    from stackviz.utils.constants import DEFAULT_EXPRESSIONS

    status = 0
    for mode, expression in DEFAULT_EXPRESSIONS.items():
        result = run_expression_cli(
            expression=expression,
            mode=mode,
            output_format=output_format,
            show_steps=show_steps,
            show_snapshots=False,
            at=None,
            show_rules=False,
            verbose=False,
        )
        status = status or result
        print()
    return status


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    # List algorithms mode
    if args.list_algorithms:
        return list_algorithms()

    # Demo mode
    if args.demo:
        return run_demo(args.format, args.steps)

    if args.expression is None:
        parser.print_usage(sys.stderr)
        print("Error: No expression given", file=sys.stderr)
        return 2

    return run_expression_cli(
        expression=args.expression,
        mode=args.mode,
        output_format=args.format,
        show_steps=args.steps,
        show_snapshots=args.snapshots,
        at=args.at,
        show_rules=args.rules,
        verbose=args.verbose,
    )


if __name__ == "__main__":
    sys.exit(main() or 0)
