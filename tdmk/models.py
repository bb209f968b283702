"""Core data structures for TD Mk Landscape problems.

This module defines:
    InputParameters -- shape of an instance (m, k, o, b).
    Problem         -- persistable part of a clique tree (no codomain).
    CliqueTree      -- full in-memory problem including codomain values.
"""

from __future__ import annotations

from dataclasses import dataclass

from .codomain_functions import CodomainFunction
from .errors import ProblemFormatError

Clique = list[int]  # variable indices of one subfunction
BitString = list[int]  # one digit per variable


@dataclass(frozen=True)
class InputParameters:
    """Topology parameters of a TD Mk Landscape.

    Attributes:
        m: Number of cliques (subfunctions).
        k: Clique size.
        o: Number of variables a clique shares with its parent clique.
        b: Branching factor of the clique tree (0 behaves as 1).
    """

    m: int
    k: int
    o: int
    b: int

    @property
    def problem_size(self) -> int:
        """Total number of binary variables: ``(m-1)*(k-o) + k``."""
        self.validate()
        return (self.m - 1) * (self.k - self.o) + self.k

    @property
    def branching(self) -> int:
        return max(self.b, 1)

    def validate(self) -> None:
        """Raise ProblemFormatError unless the parameters describe a valid tree."""
        for name in ("m", "k", "o", "b"):
            if getattr(self, name) < 0:
                raise ProblemFormatError(f"input parameter {name} must be non-negative")
        if self.m < 1:
            raise ProblemFormatError("input parameter m must be at least 1")
        if self.k < self.o:
            raise ProblemFormatError(
                f"overlap o={self.o} can not exceed clique size k={self.k}"
            )

    def as_tuple(self) -> tuple[int, int, int, int]:
        return self.m, self.k, self.o, self.b


@dataclass(frozen=True)
class Problem:
    """Generated problem as stored on disk.

    Differs from CliqueTree by excluding the codomain values and the codomain
    function; these live in a separate codomain file.

    Attributes:
        input_parameters: Topology of the instance.
        glob_optima_score: Best achievable fitness.
        glob_optima_strings: All bit-strings reaching the best fitness.
        cliques: ``m`` lists of ``k`` variable indices.
    """

    input_parameters: InputParameters
    glob_optima_score: float
    glob_optima_strings: list[BitString]
    cliques: list[Clique]

    @classmethod
    def from_clique_tree(cls, clique_tree: CliqueTree) -> Problem:
        return cls(
            input_parameters=clique_tree.input_parameters,
            glob_optima_score=clique_tree.glob_optima_score,
            glob_optima_strings=[list(s) for s in clique_tree.glob_optima_strings],
            cliques=[list(c) for c in clique_tree.cliques],
        )

    def check_shape(self) -> None:
        """Verify clique counts and sizes, variable index range and optimum strings.

        Optimum digits must lie in 0..9 so that each takes one character on disk.
        """
        params = self.input_parameters
        size = params.problem_size
        if len(self.cliques) != params.m:
            raise ProblemFormatError(
                f"expected {params.m} cliques, got {len(self.cliques)}"
            )
        for idx, clique in enumerate(self.cliques):
            if len(clique) != params.k:
                raise ProblemFormatError(
                    f"clique {idx} has {len(clique)} variable indices, expected {params.k}"
                )
            for variable in clique:
                if not 0 <= variable < size:
                    raise ProblemFormatError(
                        f"clique {idx} variable index {variable} outside 0..{size - 1}"
                    )
        for idx, bits in enumerate(self.glob_optima_strings):
            if len(bits) != size:
                raise ProblemFormatError(
                    f"global optimum {idx} has {len(bits)} bits, expected {size}"
                )
            if any(not 0 <= bit <= 9 for bit in bits):
                raise ProblemFormatError(f"global optimum {idx} holds a value outside 0..9")


@dataclass(frozen=True)
class CliqueTree:
    """Complete TD Mk Landscape: topology, codomain and global optima.

    ``codomain[i][a]`` is the value of clique ``i`` for the assignment whose
    binary encoding is ``a`` (first clique variable is the most significant bit).
    """

    input_parameters: InputParameters
    codomain_function: CodomainFunction
    codomain: list[list[float]]
    glob_optima_score: float
    glob_optima_strings: list[BitString]
    cliques: list[Clique]

    @classmethod
    def construct_from_problem_codomain(
        cls,
        problem: Problem,
        codomain: list[list[float]],
        codomain_function: CodomainFunction | None = None,
    ) -> CliqueTree:
        """Fuse a problem read from disk with its separately stored codomain."""
        return cls(
            input_parameters=problem.input_parameters,
            codomain_function=codomain_function or CodomainFunction.unknown(),
            codomain=codomain,
            glob_optima_score=problem.glob_optima_score,
            glob_optima_strings=problem.glob_optima_strings,
            cliques=problem.cliques,
        )

    def evaluate(self, bits: BitString) -> float:
        """Fitness of a full bit-string (sum over all subfunctions)."""
        size = self.input_parameters.problem_size
        if len(bits) != size:
            raise ValueError(f"bit-string has length {len(bits)}, expected {size}")
        total = 0.0
        for clique, values in zip(self.cliques, self.codomain):
            index = 0
            for variable in clique:
                index = (index << 1) | bits[variable]
            total += values[index]
        return total
