"""Collaborator seam used by the generation and reconstruction pipelines.

The orchestrators never call codomain generation, clique tree construction
or configuration parsing directly; they go through a LandscapeBackend. Tests
and alternative landscape models subclass it and override single methods.
"""
from __future__ import annotations

import random
from pathlib import Path
from typing import Iterator, Protocol, Union

from .clique_tree import construct_clique_tree
from .codomain import generate_write_return, read_codomain, read_codomain_header
from .codomain_functions import CodomainFunction
from .configuration import ConfigurationParameters
from .models import CliqueTree, InputParameters, Problem

PathLike = Union[str, Path]


class Configuration(Protocol):
    """What the generation pipeline needs from a parsed configuration file."""

    codomain_function: CodomainFunction

    def __iter__(self) -> Iterator[InputParameters]: ...


class LandscapeBackend:
    """Default TD Mk Landscape collaborators."""

    def load_configuration(self, path: PathLike) -> Configuration:
        return ConfigurationParameters.from_file(path)

    def generate_codomain(
        self,
        input_parameters: InputParameters,
        codomain_function: CodomainFunction,
        output_path: PathLike,
        rng: random.Random,
    ) -> list[list[float]]:
        """Write a codomain file to output_path and return its values."""
        return generate_write_return(input_parameters, codomain_function, output_path, rng)

    def build_clique_tree(
        self,
        input_parameters: InputParameters,
        codomain_function: CodomainFunction,
        codomain: list[list[float]],
        rng: random.Random,
    ) -> CliqueTree:
        return construct_clique_tree(input_parameters, codomain_function, codomain, rng)

    def read_codomain(
        self, input_parameters: InputParameters, path: PathLike, skip_lines: int
    ) -> list[list[float]]:
        return read_codomain(input_parameters, path, skip_lines)

    def read_codomain_function(self, path: PathLike) -> CodomainFunction:
        """Codomain function on the first line of a generated codomain file."""
        return read_codomain_header(path, True)[0]

    def clique_tree_from_codomain_file(
        self, path: PathLike, generated: bool, rng: random.Random
    ) -> CliqueTree:
        """Build a new clique tree on top of an existing codomain file."""
        codomain_function, input_parameters = read_codomain_header(path, generated)
        codomain = self.read_codomain(input_parameters, path, 2 if generated else 1)
        return self.build_clique_tree(input_parameters, codomain_function, codomain, rng)

    def rebuild_clique_tree(
        self,
        problem: Problem,
        codomain: list[list[float]],
        codomain_function: CodomainFunction | None = None,
    ) -> CliqueTree:
        return CliqueTree.construct_from_problem_codomain(problem, codomain, codomain_function)


DEFAULT_BACKEND = LandscapeBackend()
