"""
Shared state of one analysis run.
"""

from gatedcg.util.application.console import Console
from gatedcg.util.application.errorhandler import ErrorHandler
from .config import AnalysisConfig


class AnalysisContext(object):
    """
    Context handed through the pipeline phases.

    Attributes:
        config: ``AnalysisConfig`` of the run.
        console: Phase timing output.
        errors: Diagnostics of the run.
    """

    __slots__ = "config", "console", "errors"

    def __init__(self, config=None, console=None, errors=None, verbose=False):
        self.config = config if config is not None else AnalysisConfig()
        self.console = console if console is not None else Console(verbose=verbose)
        self.errors = errors if errors is not None else ErrorHandler()
