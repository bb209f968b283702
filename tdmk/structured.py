"""Structured (YAML) problem serialization.

Alternate, human friendly storage of a Problem. Only the Problem fields are
written. The nesting depth is bounded by DEPTH_LIMIT; the Problem shape
(mapping -> list of lists -> scalar) never exceeds it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Union

import yaml

from .errors import StructuredCodecError
from .models import CliqueTree, InputParameters, Problem

logger = logging.getLogger("tdmk.structured")

PathLike = Union[str, Path]
DEPTH_LIMIT = 4
_PARAMETER_KEYS = ("m", "k", "o", "b")
_PROBLEM_KEYS = ("input_parameters", "glob_optima_score", "glob_optima_strings", "cliques")


def _depth(value: Any) -> int:
    if isinstance(value, dict):
        return 1 + max((_depth(v) for v in value.values()), default=0)
    if isinstance(value, (list, tuple)):
        return 1 + max((_depth(v) for v in value), default=0)
    return 0


def problem_to_dict(problem: Problem | CliqueTree) -> dict:
    if not isinstance(problem, Problem):
        problem = Problem.from_clique_tree(problem)
    problem.check_shape()
    params = problem.input_parameters
    return {
        "input_parameters": {key: getattr(params, key) for key in _PARAMETER_KEYS},
        "glob_optima_score": float(problem.glob_optima_score),
        "glob_optima_strings": [[int(bit) for bit in s] for s in problem.glob_optima_strings],
        "cliques": [[int(idx) for idx in c] for c in problem.cliques],
    }


def problem_from_dict(data: Any) -> Problem:
    if not isinstance(data, dict) or set(data) != set(_PROBLEM_KEYS):
        raise StructuredCodecError(f"expected a mapping with keys {', '.join(_PROBLEM_KEYS)}")
    params = data["input_parameters"]
    if not isinstance(params, dict) or set(params) != set(_PARAMETER_KEYS):
        raise StructuredCodecError("input_parameters must map exactly m, k, o and b")
    try:
        problem = Problem(
            input_parameters=InputParameters(*(int(params[key]) for key in _PARAMETER_KEYS)),
            glob_optima_score=float(data["glob_optima_score"]),
            glob_optima_strings=[[int(bit) for bit in s] for s in data["glob_optima_strings"]],
            cliques=[[int(idx) for idx in c] for c in data["cliques"]],
        )
        problem.check_shape()
    except (TypeError, ValueError) as e:
        raise StructuredCodecError(f"malformed problem document: {e}") from e
    return problem


def dumps_problem(problem: Problem | CliqueTree, depth_limit: int = DEPTH_LIMIT) -> str:
    """Serialize to YAML. A problem failing its shape check raises ProblemFormatError."""
    data = problem_to_dict(problem)
    if _depth(data) > depth_limit:
        raise StructuredCodecError("Serialization error!")
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=None, indent=4)


def loads_problem(text: str) -> Problem:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise StructuredCodecError(f"Deserialization error: {e}") from e
    return problem_from_dict(data)


def write_problem_to_file_ser(problem: Problem | CliqueTree, file_path: PathLike) -> None:
    """Write problem to file using YAML serialization."""
    text = dumps_problem(problem)
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(text)
    logger.debug("Wrote structured problem %s", file_path)


def read_problem_from_file_de(file_path: PathLike) -> Problem:
    """Read a problem written by write_problem_to_file_ser."""
    with open(file_path, "r", encoding="utf-8") as f:
        return loads_problem(f.read())
