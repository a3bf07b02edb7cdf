"""Main CLI dispatcher for gatedcg.

Dispatches to the ``callgraph`` and ``reach`` subcommands. Exit codes:
0 on success, 1 on input, configuration or model errors, 2 when the
analysis was aborted.
"""

import argparse
import sys

from gatedcg import __version__
from . import callgraph
from . import reach


def build_parser():
    parser = argparse.ArgumentParser(
        description="gatedcg - call graphs with constraint depth", prog="gatedcg"
    )

    parser.add_argument("--version", action="version", version=f"gatedcg {__version__}")

    subparsers = parser.add_subparsers(
        dest="command", help="Available commands", required=True
    )

    callgraph.add_callgraph_parser(subparsers)
    reach.add_reach_parser(subparsers)
    return parser


def main(argv=None):
    """Main entry point for the gatedcg CLI.

    Returns:
        int: Exit code.
    """
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
