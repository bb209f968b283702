"""Directory helpers shared by the generation and reconstruction pipelines."""

from __future__ import annotations

import random
from pathlib import Path
from typing import Optional, Union

from .backend import DEFAULT_BACKEND, LandscapeBackend
from .models import CliqueTree

PathLike = Union[str, Path]


def sorted_entries(folder_path: PathLike) -> list[Path]:
    """Entries of folder_path sorted by name, hidden (dot) entries skipped.

    Raises FileNotFoundError / NotADirectoryError like ``Path.iterdir``.
    """
    return sorted(p for p in Path(folder_path).iterdir() if not p.name.startswith("."))


def get_clique_tree_from_codomain_file(
    codomain_file_path: PathLike,
    generated: bool,
    rng: random.Random,
    backend: Optional[LandscapeBackend] = None,
) -> CliqueTree:
    backend = backend or DEFAULT_BACKEND
    return backend.clique_tree_from_codomain_file(codomain_file_path, generated, rng)

