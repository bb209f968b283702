"""Rebuild full clique trees from problem files and codomain files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from .backend import DEFAULT_BACKEND, LandscapeBackend
from .errors import FolderPairingError
from .folders import sorted_entries
from .models import CliqueTree
from .problem_io import read_problem_from_file

logger = logging.getLogger("tdmk.reconstruction")

PathLike = Union[str, Path]


def read_clique_tree_from_files(
    problem_path: PathLike,
    codomain_path: PathLike,
    generated: bool,
    backend: Optional[LandscapeBackend] = None,
) -> CliqueTree:
    """Read the clique tree from a problem file and its codomain file.

    Generated codomain files carry the codomain function on their first line,
    so two header lines are skipped instead of one and the function is kept.
    """
    backend = backend or DEFAULT_BACKEND
    problem = read_problem_from_file(problem_path)
    skip_lines = 2 if generated else 1
    codomain = backend.read_codomain(problem.input_parameters, codomain_path, skip_lines)
    codomain_function = backend.read_codomain_function(codomain_path) if generated else None
    return backend.rebuild_clique_tree(problem, codomain, codomain_function)


def read_clique_trees_paths_from_folders(
    codomain_folder_path: PathLike,
    problem_folder_path: PathLike,
    generated: bool,
    backend: Optional[LandscapeBackend] = None,
) -> list[tuple[CliqueTree, Path]]:
    """Read all clique trees from a codomain folder and a problem folder.

    Files are paired by position after sorting both listings by name, NOT by
    matching names: the i-th codomain file goes with the i-th problem file.
    Both folders must therefore hold corresponding files in the same order.

    Returns:
        ``(clique_tree, codomain_file_path)`` tuples; the path is what callers
        use to derive output file names.

    Raises:
        FolderPairingError: The folders hold a different number of files.
    """
    codomain_file_entries = sorted_entries(codomain_folder_path)
    problem_file_entries = sorted_entries(problem_folder_path)
    if len(codomain_file_entries) != len(problem_file_entries):
        raise FolderPairingError(
            f"{codomain_folder_path} holds {len(codomain_file_entries)} files but "
            f"{problem_folder_path} holds {len(problem_file_entries)}"
        )

    result = []
    for codomain_file, problem_file in zip(codomain_file_entries, problem_file_entries):
        if codomain_file.name != problem_file.name:
            logger.warning(
                "Pairing codomain %s with differently named problem %s",
                codomain_file.name,
                problem_file.name,
            )
        result.append(
            (read_clique_tree_from_files(problem_file, codomain_file, generated, backend), codomain_file)
        )
    return result
