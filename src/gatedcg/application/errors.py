"""
Exceptions raised while loading a program model and extracting its call graph.
"""


class InternalError(Exception):
    """
    An invariant of the analysis was violated.

    Raised when the program model reaches a state the extractor has no
    recognized handling for, e.g. a method call the frontend can neither
    resolve nor attribute to any interface method. A wrong call graph is
    worse than none, so the run stops.
    """
    pass


class AnalysisAbort(Exception):
    """
    Raised to abort an analysis run after its diagnostics were reported.
    """
    pass


class ModelError(ValueError):
    """
    A program-model export is malformed.
    """
    pass


class ConfigError(ValueError):
    """
    An analysis configuration value is unknown or invalid.
    """
    pass
