import os
from pathlib import Path
from typing import Optional, Union

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.colors import ListedColormap  # noqa: E402
from matplotlib.patches import Patch  # noqa: E402

from .models import CliqueTree, Problem  # noqa: E402

_COLORS = ["#FFFFFF", "#9ECAE1", "#08519C"]  # absent, bit 0, bit 1


def clique_incidence(problem: Union[Problem, CliqueTree]) -> list[list[int]]:
    """Clique x variable matrix: 0 = not in clique, 1/2 = in clique with optimum bit 0/1.

    Without global optima every member cell is 1.
    """
    size = problem.input_parameters.problem_size
    optimum = problem.glob_optima_strings[0] if problem.glob_optima_strings else None
    matrix = []
    for clique in problem.cliques:
        row = [0] * size
        for variable in clique:
            row[variable] = 1 + (optimum[variable] if optimum is not None else 0)
        matrix.append(row)
    return matrix


def plot_clique_layout(
    problem: Union[Problem, CliqueTree],
    save_path: Optional[str] = None,
    title: Optional[str] = None,
) -> str:
    """Draw which variables every clique covers, coloured by the first global optimum.

    Returns the path the figure was saved to.
    """
    params = problem.input_parameters
    matrix = clique_incidence(problem)
    m, size = len(matrix), params.problem_size

    fig, ax = plt.subplots(
        figsize=(min(4 + size * 0.15, 18), min(2 + m * 0.3, 16)),
        constrained_layout=True,
    )
    ax.imshow(
        matrix,
        cmap=ListedColormap(_COLORS),
        vmin=0,
        vmax=2,
        aspect="auto",
        interpolation="nearest",
    )
    ax.set_xlabel("Variable", fontsize=12)
    ax.set_ylabel("Clique", fontsize=12)
    if title is None:
        title = (
            f"m={params.m} k={params.k} o={params.o} b={params.b}"
            f" - optimum = {problem.glob_optima_score:g}"
        )
    ax.set_title(title, fontsize=14, fontweight="bold")
    if m <= 40:
        ax.set_yticks(range(m))
        ax.set_yticklabels([f"C{i}" for i in range(m)])
    ax.legend(
        handles=[
            Patch(facecolor=_COLORS[1], edgecolor="black", label="optimum bit 0"),
            Patch(facecolor=_COLORS[2], edgecolor="black", label="optimum bit 1"),
        ],
        bbox_to_anchor=(1.02, 1),
        loc="upper left",
        borderaxespad=0.0,
        fontsize=8,
        frameon=False,
    )

    if save_path is None:
        save_path = os.path.join("results", "clique_layout.png")
    parent = os.path.dirname(save_path)
    if parent:
        Path(parent).mkdir(parents=True, exist_ok=True)
    fig.savefig(save_path, dpi=180)
    plt.close(fig)
    return save_path
