"""
CLI functionality for call graph extraction.
"""

import sys

from gatedcg.analysis.callgraph.formats import GENERATORS
from .common import EXIT_INPUT_ERROR, EXIT_OK, add_common_arguments, extract, setup_logging, write_output


def run_callgraph(args):
    """Extract the call graph of an export and print it in the chosen format."""
    setup_logging(args)

    graph, status = extract(args)
    if graph is None:
        return status

    output = GENERATORS[args.format](graph, args)
    try:
        write_output(output, args.output, args.verbose)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    return EXIT_OK


def add_callgraph_parser(subparsers):
    """Add call graph subcommand to the argument parser."""
    parser = subparsers.add_parser(
        "callgraph", help="Extract a call graph with constraint depths"
    )

    add_common_arguments(parser)

    parser.add_argument(
        "--format",
        "-f",
        choices=sorted(GENERATORS),
        default="text",
        help="Output format (default: text)",
    )

    parser.add_argument(
        "--output", "-o", help="Output file (default: stdout)"
    )

    parser.set_defaults(func=run_callgraph)
