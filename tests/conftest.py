from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import pytest

from gatedcg.cli.main import main

SNIPPETS = Path(__file__).parent / "callgraph" / "snippets"


@dataclass(frozen=True)
class CliResult:
    status: int
    out: str
    err: str

    def lines(self) -> list[str]:
        return self.out.splitlines()


@pytest.fixture()
def fun_method() -> Path:
    """The exported two-impl trait example."""
    return SNIPPETS / "fun_method.json"


@pytest.fixture()
def write_export(tmp_path: Path):
    """Write an export document (or raw text) and return its path."""

    def _write(data: Any, *, name: str = "export.json") -> Path:
        path = tmp_path / name
        text = data if isinstance(data, str) else json.dumps(data)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def write_config(tmp_path: Path):
    def _write(settings: Mapping[str, Any], *, name: str = "gatedcg.toml") -> Path:
        lines = ["[analysis]"]
        for key, value in settings.items():
            lines.append(f"{key} = {json.dumps(value)}")
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def cli(capsys):
    """Run ``gatedcg`` in-process and capture its output."""

    def _run(*argv: Any, expect: Optional[int] = None) -> CliResult:
        status = main([str(a) for a in argv])
        captured = capsys.readouterr()
        result = CliResult(status, captured.out, captured.err)
        if expect is not None:
            assert status == expect, result
        return result

    return _run
