"""TD Mk Landscape problem generation.

Exports the data model and the plain-text problem codec.
"""

from tdmk.codomain_functions import CodomainFunction  # noqa: F401
from tdmk.models import CliqueTree, InputParameters, Problem  # noqa: F401
from tdmk.problem_io import read_problem_from_file, write_problem_to_file  # noqa: F401

__all__ = [
    "CliqueTree",
    "CodomainFunction",
    "InputParameters",
    "Problem",
    "read_problem_from_file",
    "write_problem_to_file",
]
