from __future__ import annotations

import pytest

from tdmk.codomain_functions import CodomainFunction
from tdmk.errors import ProblemFormatError
from tdmk.models import CliqueTree, InputParameters, Problem


@pytest.mark.parametrize(
    "params, size",
    [
        (InputParameters(2, 3, 1, 0), 5),
        (InputParameters(1, 4, 0, 0), 4),
        (InputParameters(10, 5, 2, 3), 32),
        (InputParameters(3, 2, 2, 1), 2),
    ],
)
def test_problem_size(params: InputParameters, size: int) -> None:
    assert params.problem_size == size


@pytest.mark.parametrize(
    "params",
    [
        InputParameters(0, 3, 1, 0),  # no cliques
        InputParameters(2, 1, 2, 0),  # overlap > clique size
        InputParameters(2, 3, -1, 0),  # negative overlap
    ],
)
def test_invalid_parameters(params: InputParameters) -> None:
    with pytest.raises(ProblemFormatError):
        params.problem_size


def test_branching_zero_behaves_as_chain() -> None:
    assert InputParameters(3, 3, 1, 0).branching == 1
    assert InputParameters(3, 3, 1, 4).branching == 4


def _tree() -> CliqueTree:
    return CliqueTree(
        input_parameters=InputParameters(2, 2, 1, 1),
        codomain_function=CodomainFunction("random"),
        codomain=[[0.0, 1.0, 2.0, 3.0], [5.0, 0.0, 0.0, 1.0]],
        glob_optima_score=8.0,
        glob_optima_strings=[[1, 1, 0]],
        cliques=[[0, 1], [1, 2]],
    )


def test_problem_projection_drops_codomain() -> None:
    tree = _tree()
    problem = Problem.from_clique_tree(tree)
    assert problem.input_parameters == tree.input_parameters
    assert problem.cliques == tree.cliques
    assert problem.glob_optima_strings == tree.glob_optima_strings
    assert not hasattr(problem, "codomain")
    problem.check_shape()


def test_projection_does_not_alias_source() -> None:
    tree = _tree()
    problem = Problem.from_clique_tree(tree)
    problem.cliques[0].append(9)
    assert tree.cliques[0] == [0, 1]


def test_evaluate_sums_subfunctions() -> None:
    tree = _tree()
    # clique 0 bits (1,1) -> 3.0, clique 1 bits (1,0) -> 0.0
    assert tree.evaluate([1, 1, 0]) == 3.0
    # clique 0 bits (0,1) -> 1.0, clique 1 bits (1,1) -> 1.0
    assert tree.evaluate([0, 1, 1]) == 2.0
    with pytest.raises(ValueError):
        tree.evaluate([0, 1])


def test_check_shape_rejects_wrong_clique_count() -> None:
    problem = Problem(InputParameters(2, 2, 1, 1), 0.0, [], [[0, 1]])
    with pytest.raises(ProblemFormatError):
        problem.check_shape()


def test_construct_from_problem_codomain() -> None:
    tree = _tree()
    rebuilt = CliqueTree.construct_from_problem_codomain(
        Problem.from_clique_tree(tree), tree.codomain
    )
    assert rebuilt.codomain == tree.codomain
    assert rebuilt.codomain_function == CodomainFunction.unknown()
    assert rebuilt.cliques == tree.cliques
