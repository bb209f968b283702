"""Command line front end: ``python -m tdmk.main <command> ...``."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from .configuration import get_rng
from .errors import TdmkError
from .generation import (
    CodomainFileJob,
    CodomainFolderJob,
    ConfigurationFileJob,
    ConfigurationFolderJob,
    GenerationJob,
    run_job,
)
from .problem_io import read_problem_from_file
from .reconstruction import read_clique_tree_from_files, read_clique_trees_paths_from_folders
from .structured import write_problem_to_file_ser
from .models import Problem
from .visualization import plot_clique_layout

logger = logging.getLogger("tdmk")


def non_negative_int(value: str) -> int:
    """argparse type for replicate counts; 0 is allowed and generates nothing."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tdmk",
        description="Generate TD Mk Landscape problems using codomain or configuration files",
    )
    parser.add_argument("-s", "--seed", type=int, default=None, help="seed of the shared RNG")
    parser.add_argument("--log-level", default="INFO", help="logging level (default INFO)")
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="continue with the next folder when one job fails",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser(
        "codomain_folder",
        help="generate problems for every file below <folder>/codomain_files",
    )
    p.add_argument("folder_paths", nargs="+", type=Path)
    p.add_argument(
        "-g",
        dest="generated",
        action="store_true",
        help="codomain files carry the codomain function on their first line",
    )

    p = sub.add_parser(
        "configuration_folder",
        help="generate codomains and problems for every file in <folder>/problem_generation",
    )
    p.add_argument("folder_paths", nargs="+", type=Path)
    p.add_argument("-n", dest="number_of_problems_to_generate", type=non_negative_int, default=1)

    p = sub.add_parser("codomain_file", help="generate one problem for one codomain file")
    p.add_argument("input_codomain_file_path", type=Path)
    p.add_argument("output_problem_file_path", type=Path)
    p.add_argument("-g", dest="generated", action="store_true")

    p = sub.add_parser(
        "configuration_file",
        help="generate codomains and problems for the ranges in one configuration file",
    )
    p.add_argument("input_configuration_file_path", type=Path)
    p.add_argument("output_codomain_folder_path", type=Path)
    p.add_argument("output_problem_folder_path", type=Path)
    p.add_argument("-n", dest="number_of_problems_to_generate", type=non_negative_int, default=1)

    p = sub.add_parser(
        "reconstruct",
        help="read problem + codomain (files or folders) and check the stored optimum",
    )
    p.add_argument("problem_path", type=Path)
    p.add_argument("codomain_path", type=Path)
    p.add_argument("-g", dest="generated", action="store_true")
    p.add_argument(
        "--structured",
        type=Path,
        default=None,
        help="also write the problem(s) as YAML (file, or folder for folder input)",
    )

    p = sub.add_parser("plot", help="draw the clique layout of a problem file")
    p.add_argument("problem_file_path", type=Path)
    p.add_argument("output_path", type=Path)
    return parser


def jobs_from_args(args: argparse.Namespace) -> list[GenerationJob]:
    if args.command == "codomain_folder":
        return [CodomainFolderJob(path, args.generated) for path in args.folder_paths]
    if args.command == "configuration_folder":
        return [
            ConfigurationFolderJob(path, args.number_of_problems_to_generate)
            for path in args.folder_paths
        ]
    if args.command == "codomain_file":
        return [
            CodomainFileJob(
                args.input_codomain_file_path, args.output_problem_file_path, args.generated
            )
        ]
    if args.command == "configuration_file":
        os.makedirs(args.output_problem_folder_path, exist_ok=True)
        return [
            ConfigurationFileJob(
                args.input_configuration_file_path,
                args.output_codomain_folder_path,
                args.output_problem_folder_path,
                args.number_of_problems_to_generate,
            )
        ]
    raise ValueError(f"Not a generation command: {args.command}")


def _check_optimum(name: str, clique_tree) -> bool:
    stored = clique_tree.glob_optima_score
    ok = all(
        abs(clique_tree.evaluate(bits) - stored) <= 1e-9 * max(1.0, abs(stored))
        for bits in clique_tree.glob_optima_strings
    )
    logger.info(
        "%s: m=%d k=%d o=%d b=%d optimum=%s strings=%d %s",
        name,
        *clique_tree.input_parameters.as_tuple(),
        stored,
        len(clique_tree.glob_optima_strings),
        "consistent" if ok else "INCONSISTENT with codomain",
    )
    return ok


def run_reconstruct(args: argparse.Namespace) -> int:
    if args.problem_path.is_dir():
        pairs = read_clique_trees_paths_from_folders(
            args.codomain_path, args.problem_path, args.generated
        )
    else:
        tree = read_clique_tree_from_files(args.problem_path, args.codomain_path, args.generated)
        pairs = [(tree, args.codomain_path)]

    all_ok = True
    for clique_tree, codomain_path in pairs:
        all_ok &= _check_optimum(codomain_path.name, clique_tree)
        if args.structured is not None:
            if args.problem_path.is_dir():
                os.makedirs(args.structured, exist_ok=True)
                target = args.structured / (codomain_path.stem + ".yaml")
            else:
                target = args.structured
            write_problem_to_file_ser(clique_tree, target)
    return 0 if all_ok else 1


def run_plot(args: argparse.Namespace) -> int:
    problem: Problem = read_problem_from_file(args.problem_file_path)
    out = plot_clique_layout(problem, save_path=str(args.output_path))
    logger.info("Saved clique layout to %s", out)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "reconstruct":
            return run_reconstruct(args)
        if args.command == "plot":
            return run_plot(args)
        jobs = jobs_from_args(args)
    except (OSError, TdmkError) as e:
        logger.error("Command %s failed: %s", args.command, e)
        return 1

    rng = get_rng(args.seed)
    status = 0
    for job in jobs:
        try:
            written = run_job(job, rng)
        except (OSError, TdmkError) as e:
            logger.error("Job %s failed: %s", job, e)
            if not args.keep_going:
                return 1
            status = 1
            continue
        logger.info("Job done: %d problem file(s) written", len(written))
    return status


if __name__ == "__main__":
    sys.exit(main())
