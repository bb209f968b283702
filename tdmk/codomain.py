"""Codomain file generation and reading.

Generated codomain file::

    <codomain function>      (e.g. ``nkq 4``)
    m k o b
    <value>                  (m * 2**k lines, clique major)

Authored codomain files omit the first line, so readers skip two header
lines for generated files and one otherwise.
"""

from __future__ import annotations

import logging
import os
import random
from pathlib import Path
from typing import Union

from .codomain_functions import CodomainFunction
from .errors import CodomainFormatError
from .models import InputParameters

logger = logging.getLogger("tdmk.codomain")

PathLike = Union[str, Path]


def generate_codomain(
    input_parameters: InputParameters,
    codomain_function: CodomainFunction,
    rng: random.Random,
) -> list[list[float]]:
    """Generate ``m`` subfunctions of ``2**k`` values each."""
    input_parameters.validate()
    return [
        codomain_function.generate_values(input_parameters.k, rng)
        for _ in range(input_parameters.m)
    ]


def write_codomain(
    input_parameters: InputParameters,
    codomain_function: CodomainFunction,
    codomain: list[list[float]],
    output_path: PathLike,
) -> None:
    parent = os.path.dirname(os.fspath(output_path))
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(output_path, "w", encoding="utf-8", newline="\n") as f:
        f.write(codomain_function.to_header_string() + "\n")
        f.write("{} {} {} {}\n".format(*input_parameters.as_tuple()))
        for values in codomain:
            for value in values:
                f.write(f"{value}\n")
    logger.debug("Wrote codomain %s", output_path)


def generate_write_return(
    input_parameters: InputParameters,
    codomain_function: CodomainFunction,
    output_path: PathLike,
    rng: random.Random,
) -> list[list[float]]:
    """Generate a codomain, write it to output_path and return it."""
    codomain = generate_codomain(input_parameters, codomain_function, rng)
    write_codomain(input_parameters, codomain_function, codomain, output_path)
    return codomain


def _parse_parameters(line: str, path: PathLike) -> InputParameters:
    tokens = line.split()
    if len(tokens) != 4:
        raise CodomainFormatError(f"{path}: expected 'm k o b' header line, got {line!r}")
    try:
        params = InputParameters(*(int(tok) for tok in tokens))
    except ValueError as e:
        raise CodomainFormatError(f"{path}: could not parse input parameters {line!r}") from e
    params.validate()
    return params


def read_codomain_header(
    codomain_file_path: PathLike, generated: bool
) -> tuple[CodomainFunction, InputParameters]:
    """Return the codomain function and input parameters stored in the header.

    Authored (not generated) files carry no function; ``unknown`` is returned.
    """
    with open(codomain_file_path, "r", encoding="utf-8") as f:
        first = f.readline()
        second = f.readline() if generated else ""
    if not first:
        raise CodomainFormatError(f"{codomain_file_path}: empty codomain file")
    if generated:
        if not second:
            raise CodomainFormatError(f"{codomain_file_path}: missing input parameter line")
        return (
            CodomainFunction.from_header_string(first),
            _parse_parameters(second, codomain_file_path),
        )
    return CodomainFunction.unknown(), _parse_parameters(first, codomain_file_path)


def read_codomain(
    input_parameters: InputParameters,
    codomain_file_path: PathLike,
    skip_lines: int,
) -> list[list[float]]:
    """Read the codomain values, skipping ``skip_lines`` header lines."""
    input_parameters.validate()
    size = 1 << input_parameters.k
    expected = input_parameters.m * size
    values: list[float] = []
    with open(codomain_file_path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if line_number <= skip_lines:
                continue
            if len(values) == expected:
                break
            token = line.strip()
            if not token:
                continue
            try:
                values.append(float(token))
            except ValueError:
                raise CodomainFormatError(
                    f"{codomain_file_path}:{line_number}: could not parse codomain value {token!r}"
                ) from None
    if len(values) != expected:
        raise CodomainFormatError(
            f"{codomain_file_path}: expected {expected} codomain values, got {len(values)}"
        )
    return [values[i * size:(i + 1) * size] for i in range(input_parameters.m)]
