"""Clique tree construction and exact global optimum search.

Topology: clique ``i > 0`` hangs below clique ``(i-1) // b`` and shares ``o``
variables with it; the remaining ``k - o`` variables are new. Variable labels
are shuffled afterwards so that the tree structure is not visible from the
indices alone.

Optimum: dynamic programming from the leaves to the root. For every clique
and every assignment of the variables shared with its parent (separator) the
best subtree value is stored together with all clique assignments reaching
it. All optimal bit-strings are then expanded top-down.
"""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Tuple

from .codomain_functions import CodomainFunction
from .errors import CodomainFormatError
from .models import CliqueTree, InputParameters

logger = logging.getLogger("tdmk.clique_tree")

TIE_TOLERANCE = 1e-9

SeparatorTable = Dict[Tuple[int, ...], Tuple[float, List[int]]]


def _bits(assignment: int, k: int) -> list[int]:
    return [(assignment >> (k - 1 - j)) & 1 for j in range(k)]


def build_topology(
    input_parameters: InputParameters, rng: random.Random
) -> tuple[list[list[int]], list[int]]:
    """Return ``(cliques, parents)``; ``parents[0] == -1``.

    The first ``o`` entries of every non-root clique are the variables shared
    with its parent.
    """
    m, k, o = input_parameters.m, input_parameters.k, input_parameters.o
    size = input_parameters.problem_size
    branching = input_parameters.branching
    parents = [-1] + [(i - 1) // branching for i in range(1, m)]

    cliques = [list(range(k))]
    next_variable = k
    for i in range(1, m):
        shared = rng.sample(cliques[parents[i]], o)
        fresh = list(range(next_variable, next_variable + k - o))
        next_variable += k - o
        cliques.append(shared + fresh)

    labels = list(range(size))
    rng.shuffle(labels)
    return [[labels[v] for v in clique] for clique in cliques], parents


def _check_codomain(input_parameters: InputParameters, codomain: list[list[float]]) -> None:
    if len(codomain) != input_parameters.m:
        raise CodomainFormatError(
            f"codomain has {len(codomain)} subfunctions, expected {input_parameters.m}"
        )
    size = 1 << input_parameters.k
    for idx, values in enumerate(codomain):
        if len(values) != size:
            raise CodomainFormatError(
                f"subfunction {idx} has {len(values)} values, expected {size}"
            )


def _solve_tables(
    cliques: list[list[int]],
    parents: list[int],
    codomain: list[list[float]],
    k: int,
    o: int,
) -> list[SeparatorTable]:
    m = len(cliques)
    children: list[list[int]] = [[] for _ in range(m)]
    for i in range(1, m):
        children[parents[i]].append(i)

    tables: list[SeparatorTable] = [{} for _ in range(m)]
    for i in range(m - 1, -1, -1):
        clique = cliques[i]
        separator_length = o if i > 0 else 0
        # positions (inside clique i) of each child's separator variables
        child_positions = [
            (ch, [clique.index(v) for v in cliques[ch][:o]]) for ch in children[i]
        ]
        table: SeparatorTable = {}
        for assignment in range(1 << k):
            bits = _bits(assignment, k)
            value = codomain[i][assignment]
            for ch, positions in child_positions:
                value += tables[ch][tuple(bits[p] for p in positions)][0]
            key = tuple(bits[:separator_length])
            best = table.get(key)
            if best is None or value > best[0] + TIE_TOLERANCE:
                table[key] = (value, [assignment])
            elif abs(value - best[0]) <= TIE_TOLERANCE:
                best[1].append(assignment)
        tables[i] = table
    return tables


def find_global_optima(
    input_parameters: InputParameters,
    cliques: list[list[int]],
    parents: list[int],
    codomain: list[list[float]],
) -> tuple[float, list[list[int]]]:
    """Return the optimum score and all optimal bit-strings (sorted)."""
    k, o = input_parameters.k, input_parameters.o
    tables = _solve_tables(cliques, parents, codomain, k, o)
    score, _ = tables[0][()]

    partials = [[0] * input_parameters.problem_size]
    for i, clique in enumerate(cliques):
        separator = clique[:o] if i > 0 else []
        expanded = []
        for bits in partials:
            options = tables[i][tuple(bits[v] for v in separator)][1]
            for n, assignment in enumerate(options):
                target = bits if n == len(options) - 1 else bits.copy()
                for variable, bit in zip(clique, _bits(assignment, k)):
                    target[variable] = bit
                expanded.append(target)
        partials = expanded

    strings = sorted({tuple(bits) for bits in partials})
    return score, [list(s) for s in strings]


def construct_clique_tree(
    input_parameters: InputParameters,
    codomain_function: CodomainFunction,
    codomain: list[list[float]],
    rng: random.Random,
) -> CliqueTree:
    """Build a random clique tree for the codomain and solve it exactly."""
    input_parameters.validate()
    _check_codomain(input_parameters, codomain)
    cliques, parents = build_topology(input_parameters, rng)
    score, strings = find_global_optima(input_parameters, cliques, parents, codomain)
    logger.debug(
        "Clique tree m=%d k=%d o=%d b=%d: optimum %s reached by %d string(s)",
        *input_parameters.as_tuple(),
        score,
        len(strings),
    )
    return CliqueTree(
        input_parameters=input_parameters,
        codomain_function=codomain_function,
        codomain=codomain,
        glob_optima_score=score,
        glob_optima_strings=strings,
        cliques=cliques,
    )
