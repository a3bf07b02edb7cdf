"""
CLI functionality for reachability queries.
"""

import logging
import sys

from gatedcg.analysis.callgraph import reachability
from .common import EXIT_INPUT_ERROR, EXIT_OK, add_common_arguments, extract, setup_logging, write_output

LOG = logging.getLogger(__name__)


def run_reach(args):
    """List callables reachable from ``--entry``, shallowest first."""
    setup_logging(args)

    if args.budget is not None and args.budget < 0:
        LOG.error("--budget must be >= 0")
        return EXIT_INPUT_ERROR

    graph, status = extract(args)
    if graph is None:
        return status

    expand = not args.no_expand_dynamic
    try:
        if args.budget is None:
            depths = reachability.min_depth_from(graph, args.entry, expand_dynamic=expand)
        else:
            depths = reachability.shallow_targets(graph, args.entry, args.budget, expand_dynamic=expand)
    except KeyError as e:
        LOG.error("%s", e.args[0])
        return EXIT_INPUT_ERROR

    lines = list(reachability.describe_depths(graph, depths))

    if args.cycles:
        cycles = reachability.detect_cycles(graph, expand_dynamic=expand)
        lines.append("")
        lines.append(f"Cycles ({len(cycles)}):")
        for i, cycle in enumerate(cycles):
            names = [graph.path_of(None if n == reachability.UNKNOWN_CALLER else n) for n in cycle]
            lines.append(f"  Cycle {i+1}: {' -> '.join(names + names[:1])}")

    try:
        write_output("\n".join(lines), args.output, args.verbose)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    return EXIT_OK


def add_reach_parser(subparsers):
    """Add reachability subcommand to the argument parser."""
    parser = subparsers.add_parser(
        "reach", help="Callables reachable from an entry point, by cumulative depth"
    )

    add_common_arguments(parser)

    parser.add_argument(
        "--entry", "-e", required=True, help="Printable path of the entry callable"
    )
    parser.add_argument(
        "--budget", "-b", type=int, help="Maximal cumulative constraint depth"
    )
    parser.add_argument(
        "--no-expand-dynamic",
        action="store_true",
        help="Do not follow dynamic calls into the implementations of their declaration",
    )
    parser.add_argument(
        "--cycles", action="store_true", help="Also list recursion cycles"
    )
    parser.add_argument(
        "--output", "-o", help="Output file (default: stdout)"
    )

    parser.set_defaults(func=run_reach)
