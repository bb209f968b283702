"""Canonical plain-text problem format.

Layout (one item per line)::

    m k o b
    <global optimum score>
    <number of global optima>
    <global optimum bit-string>        (repeated)
    <k space separated variable indices> (m times)

The reader is strict: every section is mandatory and every token is checked.
Lines after the last clique are ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Union

from .errors import ProblemFormatError
from .models import CliqueTree, InputParameters, Problem

logger = logging.getLogger("tdmk.problem_io")

PathLike = Union[str, Path]
_DIGITS = "0123456789"


def format_problem(problem: Problem | CliqueTree) -> str:
    """Render a problem (or the problem part of a clique tree) as text.

    Raises ProblemFormatError when the problem breaks its shape invariants.
    """
    if not isinstance(problem, Problem):
        problem = Problem.from_clique_tree(problem)
    problem.check_shape()
    params = problem.input_parameters
    lines = [
        f"{params.m} {params.k} {params.o} {params.b}",
        f"{float(problem.glob_optima_score)}",
        f"{len(problem.glob_optima_strings)}",
    ]
    lines.extend("".join(str(bit) for bit in sol) for sol in problem.glob_optima_strings)
    lines.extend(" ".join(str(idx) for idx in clique) for clique in problem.cliques)
    return "\n".join(lines) + "\n"


def write_problem_to_file(problem: Problem | CliqueTree, output_problem_file_path: PathLike) -> None:
    """Write problem to file, truncating an existing one.

    The parent folder must exist.
    """
    text = format_problem(problem)
    with open(output_problem_file_path, "w", encoding="utf-8", newline="\n") as f:
        f.write(text)
    logger.debug("Wrote problem %s", output_problem_file_path)


def _iter_lines(text: str) -> Iterator[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith("\r") else line


def _next_line(lines: Iterator[str], missing: str) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise ProblemFormatError(f"missing line: {missing}") from None


def _parse_int(token: str, what: str) -> int:
    if not (token.isascii() and token.isdigit()):
        raise ProblemFormatError(f"could not parse {what} as an unsigned integer: {token!r}")
    return int(token)


def parse_problem(text: str) -> Problem:
    """Parse the canonical problem text. Raises ProblemFormatError."""
    lines = _iter_lines(text)

    # input parameters
    header = _next_line(lines, "empty problem file").split()
    if len(header) != 4:
        raise ProblemFormatError(
            f"expected 4 input parameters on first line of problem file, got {len(header)}"
        )
    m, k, o, b = (_parse_int(tok, name) for tok, name in zip(header, "mkob"))
    input_parameters = InputParameters(m, k, o, b)
    problem_size = input_parameters.problem_size

    # global optimum score and number of optima
    score_line = _next_line(lines, "no global optimum score in problem file").strip()
    try:
        glob_optima_score = float(score_line)
    except ValueError:
        raise ProblemFormatError(
            f"could not parse global optimum score: {score_line!r}"
        ) from None
    number_of_optima = _parse_int(
        _next_line(lines, "no number of global optima in problem file").strip(),
        "number of global optima",
    )

    glob_optima_strings = []
    for idx in range(number_of_optima):
        line = _next_line(lines, "not enough global optima strings in problem file")
        if len(line) != problem_size:
            raise ProblemFormatError(
                f"global optimum {idx} has {len(line)} bits, expected {problem_size}"
            )
        if any(ch not in _DIGITS for ch in line):
            raise ProblemFormatError(f"global optimum {idx} contains a non-digit character")
        glob_optima_strings.append([int(ch) for ch in line])

    cliques = []
    for idx in range(m):
        tokens = _next_line(lines, "not enough cliques in problem file").split()
        if len(tokens) != k:
            raise ProblemFormatError(
                f"clique {idx} has {len(tokens)} variable indices, expected {k}"
            )
        cliques.append([_parse_int(tok, "variable index") for tok in tokens])

    problem = Problem(
        input_parameters=input_parameters,
        glob_optima_score=glob_optima_score,
        glob_optima_strings=glob_optima_strings,
        cliques=cliques,
    )
    # variable indices must address the problem_size variables
    problem.check_shape()
    return problem


def read_problem_from_file(file_path: PathLike) -> Problem:
    """Read a problem written by write_problem_to_file."""
    with open(file_path, "r", encoding="utf-8", newline="") as f:
        text = f.read()
    try:
        return parse_problem(text)
    except ProblemFormatError as e:
        raise ProblemFormatError(f"{file_path}: {e}") from e
