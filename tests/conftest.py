"""Pytest configuration, shared fixtures & custom summary hook.

Also ensures the project root is on sys.path so 'import tdmk.*' works
without installing the package.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from tdmk.models import InputParameters, Problem  # noqa: E402

EXAMPLE_TEXT = "2 3 1 0\n-1.5\n1\n01010\n0 1 2\n2 3 4\n"


@pytest.fixture
def example_problem() -> Problem:
    """m=2, k=3, o=1 problem over 5 variables."""
    return Problem(
        input_parameters=InputParameters(m=2, k=3, o=1, b=0),
        glob_optima_score=-1.5,
        glob_optima_strings=[[0, 1, 0, 1, 0]],
        cliques=[[0, 1, 2], [2, 3, 4]],
    )


def write_authored_codomain(path: Path, params: InputParameters, values: list[float]) -> Path:
    """Codomain file without the codomain function line (``generated=False``)."""
    lines = ["{} {} {} {}".format(*params.as_tuple())] + [str(v) for v in values]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def authored_codomain():
    return write_authored_codomain


def pytest_terminal_summary(
    terminalreporter: pytest.TerminalReporter,
    exitstatus: int,
    config: pytest.Config,
) -> None:  # noqa: D401
    """Append a compact custom summary at the end of test session."""
    stats = terminalreporter.stats
    collected = terminalreporter._numcollected  # type: ignore[attr-defined]
    passed = len(stats.get("passed", []))
    failed = len(stats.get("failed", []))
    errors = len(stats.get("error", []))
    skipped = len(stats.get("skipped", []))

    terminalreporter.section("Custom summary", sep="=")
    terminalreporter.write_line(
        f"Collected: {collected} | Passed: {passed} | Failed: {failed} | "
        f"Errors: {errors} | Skipped: {skipped}"
    )
    if failed:
        terminalreporter.write_line("Failed tests:")
        for rep in stats["failed"]:
            terminalreporter.write_line(f"  - {rep.nodeid}")
