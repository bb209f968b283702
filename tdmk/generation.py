"""Problem generation pipelines.

Four ways of discovering what to generate, one per job type:

    CodomainFolderJob       -- <folder>/codomain_files/<sub>/* -> <folder>/problems/<sub>/*
    ConfigurationFolderJob  -- every file in <folder>/problem_generation
    CodomainFileJob         -- one codomain file -> one problem file
    ConfigurationFileJob    -- one configuration file -> codomain + problem files

All of them end in ``write_problem_to_file``. One ``random.Random`` is passed
through every call so that a run is reproducible from its seed; it must not be
shared between concurrently running jobs.
"""
from __future__ import annotations

import logging
import os
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .backend import DEFAULT_BACKEND, LandscapeBackend
from .configuration import get_output_folder_path_from_configuration_file
from .folders import get_clique_tree_from_codomain_file, sorted_entries
from .models import InputParameters
from .problem_io import write_problem_to_file

logger = logging.getLogger("tdmk.generation")

PathLike = Union[str, Path]

CODOMAIN_FOLDER = "codomain_files"
PROBLEMS_FOLDER = "problems"
PROBLEM_GENERATION_FOLDER = "problem_generation"


def problem_file_name(
    codomain_function_id: str, input_parameters: InputParameters, replicate: int
) -> str:
    """``<codomain_function_id>_<m>_<k>_<o>_<b>_<replicate>.txt``"""
    m, k, o, b = input_parameters.as_tuple()
    return f"{codomain_function_id}_{m}_{k}_{o}_{b}_{replicate}.txt"


def generate_problems_from_codomain_folder(
    parent_folder_path: PathLike,
    generated: bool,
    rng: random.Random,
    backend: Optional[LandscapeBackend] = None,
) -> list[Path]:
    """Generate problems for all codomain files below ``parent/codomain_files``.

    Every subfolder ``parent/codomain_files/<sub>`` gets a mirror folder
    ``parent/problems/<sub>`` holding one problem per codomain file, under the
    codomain file's name.

    Returns:
        Paths of the written problem files, in generation order.
    """
    parent_folder_path = Path(parent_folder_path)
    codomain_folder_path = parent_folder_path / CODOMAIN_FOLDER
    problems_folder_path = parent_folder_path / PROBLEMS_FOLDER

    written: list[Path] = []
    for folder in sorted_entries(codomain_folder_path):
        output_folder_path = problems_folder_path / folder.name
        os.makedirs(output_folder_path, exist_ok=True)
        for codomain_file in sorted_entries(folder):
            clique_tree = get_clique_tree_from_codomain_file(
                codomain_file, generated, rng, backend
            )
            output_path = output_folder_path / codomain_file.name
            write_problem_to_file(clique_tree, output_path)
            written.append(output_path)
        logger.info("Generated problems for codomain folder %s", folder)
    return written


def generate_codomain_and_problem_from_folder(
    input_folder_path: PathLike,
    number_of_problems_to_generate: int,
    rng: random.Random,
    backend: Optional[LandscapeBackend] = None,
) -> list[Path]:
    """Run every configuration file in ``input_folder/problem_generation``."""
    problem_generation_path = Path(input_folder_path) / PROBLEM_GENERATION_FOLDER
    written: list[Path] = []
    for configuration_file in sorted_entries(problem_generation_path):
        written.extend(
            generate_codomain_and_problem(
                configuration_file,
                None,
                None,
                number_of_problems_to_generate,
                rng=rng,
                backend=backend,
            )
        )
    return written


def generate_codomain_and_problem(
    input_configuration_file_path: PathLike,
    output_codomain_folder_path: Optional[PathLike],
    output_problem_folder_path: Optional[PathLike],
    number_of_problems_to_generate: int = 1,
    *,
    rng: random.Random,
    backend: Optional[LandscapeBackend] = None,
) -> list[Path]:
    """Generate codomain and problem files for one configuration file.

    Args:
        input_configuration_file_path: Configuration with the codomain
            function and ranges of input parameters.
        output_codomain_folder_path: Destination of codomain files; ``None``
            derives ``<root>/codomain_files/<config stem>``.
        output_problem_folder_path: Destination of problem files; ``None``
            derives ``<root>/problems/<config stem>``.
        number_of_problems_to_generate: Replicates per input parameter set.
        rng: Shared random generator; there is no implicit unseeded default.
        backend: Collaborators; defaults to the TD Mk Landscape backend.

    Returns:
        Paths of the written problem files, in generation order.
    """
    backend = backend or DEFAULT_BACKEND
    configuration_parameters = backend.load_configuration(input_configuration_file_path)
    codomain_function = configuration_parameters.codomain_function

    if output_problem_folder_path is not None:
        problem_folder = Path(output_problem_folder_path)
    else:
        problem_folder = get_output_folder_path_from_configuration_file(
            input_configuration_file_path, PROBLEMS_FOLDER
        )
    if output_codomain_folder_path is not None:
        codomain_folder = Path(output_codomain_folder_path)
    else:
        codomain_folder = get_output_folder_path_from_configuration_file(
            input_configuration_file_path, CODOMAIN_FOLDER
        )

    written: list[Path] = []
    for input_parameters in configuration_parameters:
        for num in range(number_of_problems_to_generate):
            file_name = problem_file_name(codomain_function.to_io_string(), input_parameters, num)
            codomain = backend.generate_codomain(
                input_parameters, codomain_function, codomain_folder / file_name, rng
            )
            clique_tree = backend.build_clique_tree(
                input_parameters, codomain_function, codomain, rng
            )
            output_path = problem_folder / file_name
            write_problem_to_file(clique_tree, output_path)
            written.append(output_path)
    logger.info(
        "Generated %d problem(s) from %s into %s",
        len(written),
        input_configuration_file_path,
        problem_folder,
    )
    return written


def generate_problem_from_codomain_file(
    codomain_file_path: PathLike,
    output_problem_file_path: PathLike,
    generated: bool,
    rng: random.Random,
    backend: Optional[LandscapeBackend] = None,
) -> Path:
    """Generate one problem for an existing codomain file."""
    clique_tree = get_clique_tree_from_codomain_file(codomain_file_path, generated, rng, backend)
    write_problem_to_file(clique_tree, output_problem_file_path)
    logger.info("Generated problem %s from %s", output_problem_file_path, codomain_file_path)
    return Path(output_problem_file_path)


@dataclass(frozen=True)
class CodomainFolderJob:
    folder_path: Path
    generated: bool = False


@dataclass(frozen=True)
class ConfigurationFolderJob:
    folder_path: Path
    number_of_problems_to_generate: int = 1


@dataclass(frozen=True)
class CodomainFileJob:
    input_codomain_file_path: Path
    output_problem_file_path: Path
    generated: bool = False


@dataclass(frozen=True)
class ConfigurationFileJob:
    input_configuration_file_path: Path
    output_codomain_folder_path: Optional[Path] = None
    output_problem_folder_path: Optional[Path] = None
    number_of_problems_to_generate: int = 1


GenerationJob = Union[CodomainFolderJob, ConfigurationFolderJob, CodomainFileJob, ConfigurationFileJob]


def run_job(
    job: GenerationJob,
    rng: random.Random,
    backend: Optional[LandscapeBackend] = None,
) -> list[Path]:
    """Execute one generation job and return the written problem paths."""
    if isinstance(job, CodomainFolderJob):
        return generate_problems_from_codomain_folder(job.folder_path, job.generated, rng, backend)
    if isinstance(job, ConfigurationFolderJob):
        return generate_codomain_and_problem_from_folder(
            job.folder_path, job.number_of_problems_to_generate, rng, backend
        )
    if isinstance(job, CodomainFileJob):
        return [
            generate_problem_from_codomain_file(
                job.input_codomain_file_path,
                job.output_problem_file_path,
                job.generated,
                rng,
                backend,
            )
        ]
    if isinstance(job, ConfigurationFileJob):
        return generate_codomain_and_problem(
            job.input_configuration_file_path,
            job.output_codomain_folder_path,
            job.output_problem_folder_path,
            job.number_of_problems_to_generate,
            rng=rng,
            backend=backend,
        )
    raise ValueError(f"Unknown generation job: {job!r}")  # pragma: no cover
