"""End-to-end tests of the command line front end."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import write_authored_codomain
from tdmk.main import main
from tdmk.models import InputParameters
from tdmk.structured import read_problem_from_file_de
from tdmk.problem_io import read_problem_from_file

CONFIG = """\
codomain_function: random
m: 3
k: 4
o: 2
b: [1, 2]
"""


def test_configuration_file_then_reconstruct(tmp_path: Path) -> None:
    config = tmp_path / "cfg.yaml"
    config.write_text(CONFIG, encoding="utf-8")
    codomains, problems = tmp_path / "codomains", tmp_path / "problems"

    args = ["--seed", "5", "configuration_file", str(config), str(codomains), str(problems), "-n", "2"]
    assert main(args) == 0
    names = sorted(p.name for p in problems.iterdir())
    assert names == [
        "random_3_4_2_1_0.txt",
        "random_3_4_2_1_1.txt",
        "random_3_4_2_2_0.txt",
        "random_3_4_2_2_1.txt",
    ]

    structured = tmp_path / "structured"
    assert main(["reconstruct", str(problems), str(codomains), "-g", "--structured", str(structured)]) == 0
    for name in names:
        stem = name[: -len(".txt")]
        assert read_problem_from_file_de(structured / f"{stem}.yaml") == read_problem_from_file(
            problems / name
        )


def test_configuration_folder_and_plot(tmp_path: Path) -> None:
    (tmp_path / "problem_generation").mkdir()
    (tmp_path / "problem_generation" / "cfg.yaml").write_text(CONFIG, encoding="utf-8")
    assert main(["-s", "1", "configuration_folder", str(tmp_path)]) == 0
    problem_file = tmp_path / "problems" / "cfg" / "random_3_4_2_1_0.txt"
    assert problem_file.exists()
    assert (tmp_path / "codomain_files" / "cfg" / "random_3_4_2_1_0.txt").exists()

    assert main(["codomain_folder", str(tmp_path), "-g"]) == 0

    png = tmp_path / "layout.png"
    assert main(["plot", str(problem_file), str(png)]) == 0
    assert png.exists()


def test_failing_job_returns_error(tmp_path: Path) -> None:
    good = tmp_path / "good"
    (good / "problem_generation").mkdir(parents=True)
    (good / "problem_generation" / "cfg.yaml").write_text(CONFIG, encoding="utf-8")
    missing = tmp_path / "missing"

    assert main(["configuration_folder", str(missing), str(good)]) == 1
    assert not (good / "problems").exists()

    assert main(["--keep-going", "configuration_folder", str(missing), str(good)]) == 1
    assert (good / "problems" / "cfg").is_dir()


@pytest.mark.parametrize("count", ["-1", "-3", "two"])
def test_replicate_count_must_be_non_negative_int(tmp_path: Path, count: str) -> None:
    config = tmp_path / "cfg.yaml"
    config.write_text(CONFIG, encoding="utf-8")
    with pytest.raises(SystemExit) as exc_info:
        main(["configuration_file", str(config), str(tmp_path / "c"), str(tmp_path / "p"), "-n", count])
    assert exc_info.value.code == 2
    with pytest.raises(SystemExit):
        main(["configuration_folder", str(tmp_path), "-n", count])


def test_zero_replicates_writes_nothing(tmp_path: Path) -> None:
    config = tmp_path / "cfg.yaml"
    config.write_text(CONFIG, encoding="utf-8")
    problems = tmp_path / "problems"
    assert main(["configuration_file", str(config), str(tmp_path / "codomains"), str(problems), "-n", "0"]) == 0
    assert list(problems.iterdir()) == []


def test_reconstruct_missing_problem_file_returns_error(tmp_path: Path) -> None:
    codomain = write_authored_codomain(tmp_path / "codomain.txt", InputParameters(1, 2, 0, 0), [0.0, 1.0, 2.0, 3.0])
    assert main(["reconstruct", str(tmp_path / "absent.txt"), str(codomain)]) == 1


def test_reconstruct_out_of_range_index_returns_error(tmp_path: Path) -> None:
    problem = tmp_path / "problem.txt"
    problem.write_text("1 2 0 0\n1.0\n1\n11\n0 7\n", encoding="utf-8")
    codomain = write_authored_codomain(tmp_path / "codomain.txt", InputParameters(1, 2, 0, 0), [0.0, 1.0, 2.0, 3.0])
    assert main(["reconstruct", str(problem), str(codomain)]) == 1


def test_plot_of_invalid_problem_returns_error(tmp_path: Path) -> None:
    problem = tmp_path / "problem.txt"
    problem.write_text("1 2 0 0\n1.0\n1\n11\n0 7\n", encoding="utf-8")
    png = tmp_path / "layout.png"
    assert main(["plot", str(problem), str(png)]) == 1
    assert not png.exists()
    assert main(["plot", str(tmp_path / "absent.txt"), str(png)]) == 1


def test_uncreatable_problem_folder_returns_error(tmp_path: Path) -> None:
    config = tmp_path / "cfg.yaml"
    config.write_text(CONFIG, encoding="utf-8")
    blocker = tmp_path / "blocker"
    blocker.write_text("not a folder\n", encoding="utf-8")
    args = ["configuration_file", str(config), str(tmp_path / "codomains"), str(blocker / "problems")]
    assert main(args) == 1
    assert not (tmp_path / "codomains").exists()
