"""
Analysis configuration.

Settings can come from a TOML file with an ``[analysis]`` table::

    [analysis]
    branch_policy = "scoped"            # or "persistent"
    debug_assert_macros = ["debug_assert", "debug_assert_eq", "debug_assert_ne"]
    desugared_match_sources = ["try", "await", "for_loop", "format_args"]
    skip_generated = true
    report_unresolved = true

Command-line options override file values.
"""

from __future__ import annotations

import dataclasses
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from gatedcg.analysis.callgraph.depth import BranchDepthPolicy
from gatedcg.analysis.callgraph.heuristics import (
    DEFAULT_DEBUG_ASSERT_MACROS,
    DEFAULT_DESUGARED_MATCH_SOURCES,
)
from gatedcg.language.model.nodes import MatchSource
from .errors import ConfigError


@dataclass(frozen=True)
class AnalysisConfig:
    branch_policy: BranchDepthPolicy = BranchDepthPolicy.SCOPED
    debug_assert_macros: tuple[str, ...] = DEFAULT_DEBUG_ASSERT_MACROS
    desugared_match_sources: frozenset[MatchSource] = field(default=DEFAULT_DESUGARED_MATCH_SOURCES)
    skip_generated: bool = True
    report_unresolved: bool = True

    def override(self, **values: Any) -> AnalysisConfig:
        """Copy with the given settings replaced; None values are ignored."""
        changes = {k: v for k, v in values.items() if v is not None}
        return from_mapping(changes, base=self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AnalysisConfig:
        return from_mapping(data)


def _policy(value: Any) -> BranchDepthPolicy:
    if isinstance(value, BranchDepthPolicy):
        return value
    try:
        return BranchDepthPolicy(value)
    except ValueError:
        choices = ", ".join(p.value for p in BranchDepthPolicy)
        raise ConfigError(f"branch_policy must be one of {choices} (got {value!r})") from None


def _macros(value: Any) -> tuple[str, ...]:
    if isinstance(value, str) or not all(isinstance(v, str) and v for v in value):
        raise ConfigError(f"debug_assert_macros must be a list of macro names (got {value!r})")
    return tuple(value)


def _matchSources(value: Any) -> frozenset[MatchSource]:
    if isinstance(value, str):
        raise ConfigError(f"desugared_match_sources must be a list (got {value!r})")
    sources = set()
    for v in value:
        try:
            sources.add(v if isinstance(v, MatchSource) else MatchSource(v))
        except ValueError:
            raise ConfigError(f"unknown match source {v!r}") from None
    if MatchSource.NORMAL in sources:
        raise ConfigError("user-written matches ('normal') cannot be treated as desugared")
    return frozenset(sources)


def _flag(name: str):
    def convert(value: Any) -> bool:
        if not isinstance(value, bool):
            raise ConfigError(f"{name} must be true or false (got {value!r})")
        return value

    return convert


_CONVERTERS = {
    "branch_policy": _policy,
    "debug_assert_macros": _macros,
    "desugared_match_sources": _matchSources,
    "skip_generated": _flag("skip_generated"),
    "report_unresolved": _flag("report_unresolved"),
}


def from_mapping(data: Mapping[str, Any], base: AnalysisConfig | None = None) -> AnalysisConfig:
    """
    Validate ``data`` and build a config from it.

    Raises:
        ConfigError: On unknown keys or invalid values
    """
    unknown = sorted(set(data) - set(_CONVERTERS))
    if unknown:
        raise ConfigError(f"unknown analysis settings: {', '.join(unknown)}")

    values = {key: _CONVERTERS[key](value) for key, value in data.items()}
    return dataclasses.replace(base or AnalysisConfig(), **values)


def load_config(config_path: Path | str | None = None) -> AnalysisConfig:
    """
    Load configuration from a TOML file.

    Args:
        config_path: Path to the file; None yields the defaults.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the file is not valid TOML or holds invalid settings
    """
    if config_path is None:
        return AnalysisConfig()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        with path.open("rb") as f:
            document = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    section = document.get("analysis", {})
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: [analysis] must be a table")
    return from_mapping(section)
