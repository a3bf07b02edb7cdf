"""
Options and setup shared by the subcommands.
"""

import logging
from pathlib import Path

from gatedcg.analysis.callgraph.depth import BranchDepthPolicy
from gatedcg.application.config import load_config
from gatedcg.application.context import AnalysisContext
from gatedcg.application.errors import ConfigError, ModelError
from gatedcg.application.pipeline import analyze_file

LOG = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_ABORTED = 2


def add_common_arguments(parser):
    """Add the input, configuration and logging options."""
    parser.add_argument("input", type=Path, help="JSON program model exported by the frontend")

    parser.add_argument("--config", "-c", type=Path, help="TOML configuration file")

    parser.add_argument(
        "--policy",
        choices=[p.value for p in BranchDepthPolicy],
        help="Depth seen by statements after a branch (default: scoped)",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--debug", "-d", action="store_true", help="Debug output"
    )


def setup_logging(args):
    level = logging.DEBUG if args.debug else logging.INFO if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def build_context(args):
    """Configuration file, then command-line overrides."""
    config = load_config(args.config).override(branch_policy=args.policy)
    return AnalysisContext(config, verbose=args.verbose)


def extract(args):
    """
    Run the pipeline for ``args.input``.

    Returns:
        ``(graph, exit_code)``; ``graph`` is None unless the code is EXIT_OK.
    """
    graph = None
    try:
        context = build_context(args)
        # Reports the run status; an AnalysisAbort leaves graph unset.
        with context.errors.statusManager():
            graph = analyze_file(args.input, context=context)
    except (OSError, ConfigError, ModelError) as e:
        LOG.error("%s", e)
        return None, EXIT_INPUT_ERROR

    if graph is None:
        return None, EXIT_ABORTED
    return graph, EXIT_OK


def write_output(text, output, verbose=False):
    if output:
        with open(output, "w") as f:
            f.write(text)
            f.write("\n")
        if verbose:
            print(f"Output written to {output}")
    else:
        print(text)
