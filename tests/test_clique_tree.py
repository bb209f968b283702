"""Tests for clique tree construction and the exact optimum search.

The dynamic program is checked against brute force enumeration on instances
small enough to enumerate.
"""

from __future__ import annotations

import itertools
import random

import pytest

from tdmk.clique_tree import build_topology, construct_clique_tree
from tdmk.codomain import generate_codomain
from tdmk.codomain_functions import CodomainFunction
from tdmk.errors import CodomainFormatError
from tdmk.models import CliqueTree, InputParameters


def _build(params: InputParameters, function: CodomainFunction, seed: int) -> CliqueTree:
    rng = random.Random(seed)
    codomain = generate_codomain(params, function, rng)
    return construct_clique_tree(params, function, codomain, rng)


def _brute_force(tree: CliqueTree) -> tuple[float, list[list[int]]]:
    size = tree.input_parameters.problem_size
    scored = [
        (tree.evaluate(list(bits)), list(bits))
        for bits in itertools.product((0, 1), repeat=size)
    ]
    best = max(score for score, _ in scored)
    return best, sorted(bits for score, bits in scored if abs(score - best) <= 1e-9)


@pytest.mark.parametrize(
    "params",
    [
        InputParameters(1, 3, 0, 0),
        InputParameters(4, 3, 1, 1),
        InputParameters(5, 3, 2, 2),
        InputParameters(4, 4, 1, 3),
        InputParameters(3, 2, 0, 0),
        InputParameters(3, 2, 2, 1),
    ],
)
@pytest.mark.parametrize("function", [CodomainFunction("random"), CodomainFunction("nkq", 2)])
def test_optimum_matches_brute_force(params: InputParameters, function: CodomainFunction) -> None:
    tree = _build(params, function, seed=42)
    score, strings = _brute_force(tree)
    assert tree.glob_optima_score == pytest.approx(score)
    assert tree.glob_optima_strings == strings


@pytest.mark.parametrize(
    "params",
    [InputParameters(6, 4, 2, 1), InputParameters(7, 3, 1, 2), InputParameters(2, 2, 0, 0)],
)
def test_shape_invariants(params: InputParameters) -> None:
    tree = _build(params, CodomainFunction("random"), seed=3)
    size = params.problem_size
    assert len(tree.cliques) == params.m
    assert all(len(clique) == params.k for clique in tree.cliques)
    assert all(len(set(clique)) == params.k for clique in tree.cliques)
    assert {v for clique in tree.cliques for v in clique} == set(range(size))
    assert tree.glob_optima_strings
    assert all(len(bits) == size for bits in tree.glob_optima_strings)
    for bits in tree.glob_optima_strings:
        assert tree.evaluate(bits) == pytest.approx(tree.glob_optima_score)


def test_chain_overlap() -> None:
    params = InputParameters(6, 4, 2, 1)
    cliques, parents = build_topology(params, random.Random(0))
    assert parents == [-1, 0, 1, 2, 3, 4]
    for i in range(1, params.m):
        assert len(set(cliques[i]) & set(cliques[i - 1])) == params.o


def test_branching_parents() -> None:
    _, parents = build_topology(InputParameters(7, 3, 1, 2), random.Random(0))
    assert parents == [-1, 0, 0, 1, 1, 2, 2]


def test_trap_chain_optimum_is_all_ones() -> None:
    params = InputParameters(2, 3, 0, 1)
    tree = _build(params, CodomainFunction("trap"), seed=1)
    assert tree.glob_optima_score == 6.0
    assert tree.glob_optima_strings == [[1] * 6]


def test_same_seed_same_tree() -> None:
    params = InputParameters(5, 4, 1, 2)
    a = _build(params, CodomainFunction("random"), seed=11)
    b = _build(params, CodomainFunction("random"), seed=11)
    assert a == b


def test_codomain_shape_checked() -> None:
    params = InputParameters(2, 2, 0, 0)
    with pytest.raises(CodomainFormatError):
        construct_clique_tree(
            params, CodomainFunction("random"), [[0.0] * 4], random.Random(0)
        )
