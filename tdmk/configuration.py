"""Problem generation configuration files and RNG setup.

A configuration file is YAML::

    codomain_function: nkq 4        # or {name: nkq, parameter: 4}
    m: {start: 2, stop: 10, step: 2}
    k: [4, 5]
    o: 1
    b: 1

Every topology parameter is an int, a list of ints, or an inclusive range.
Iterating a ConfigurationParameters yields the cartesian product of the
ranges (``b`` varies fastest), skipping invalid combinations.
"""

from __future__ import annotations

import itertools
import logging
import os
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional, Union

import yaml

from .codomain_functions import CodomainFunction
from .errors import CodomainFormatError, ConfigurationError, ProblemFormatError
from .models import InputParameters

logger = logging.getLogger("tdmk.configuration")

PathLike = Union[str, Path]
PARAMETER_NAMES = ("m", "k", "o", "b")


def get_rng(seed: Optional[int] = None) -> random.Random:
    """Seeded generator shared by the whole generation run."""
    return random.Random(seed) if seed is not None else random.Random()


def load_config(config_file: PathLike) -> dict:
    """Load configuration from YAML file."""
    with open(config_file, "r", encoding="utf-8") as file:
        try:
            config = yaml.safe_load(file)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"{config_file}: invalid YAML: {e}") from e
    if not isinstance(config, dict):
        raise ConfigurationError(f"{config_file}: expected a mapping at top level")
    return config


def _parse_values(name: str, raw: Any) -> list[int]:
    if isinstance(raw, bool):
        raise ConfigurationError(f"parameter {name}: booleans are not allowed")
    if isinstance(raw, int):
        values = [raw]
    elif isinstance(raw, list):
        if not raw or not all(isinstance(v, int) and not isinstance(v, bool) for v in raw):
            raise ConfigurationError(f"parameter {name}: expected a non-empty list of ints")
        values = list(raw)
    elif isinstance(raw, dict):
        unknown = set(raw) - {"start", "stop", "step"}
        if unknown or "start" not in raw or "stop" not in raw:
            raise ConfigurationError(
                f"parameter {name}: range needs 'start' and 'stop' (optional 'step')"
            )
        start, stop, step = raw["start"], raw["stop"], raw.get("step", 1)
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (start, stop, step)):
            raise ConfigurationError(f"parameter {name}: range bounds must be ints")
        if step < 1:
            raise ConfigurationError(f"parameter {name}: step must be positive")
        values = list(range(start, stop + 1, step))
        if not values:
            raise ConfigurationError(f"parameter {name}: empty range {start}..{stop}")
    else:
        raise ConfigurationError(f"parameter {name}: expected int, list or range mapping")
    if any(v < 0 for v in values):
        raise ConfigurationError(f"parameter {name}: values must be non-negative")
    return values


def _parse_codomain_function(raw: Any) -> CodomainFunction:
    try:
        if isinstance(raw, str):
            return CodomainFunction.from_header_string(raw)
        if isinstance(raw, dict) and "name" in raw:
            line = str(raw["name"])
            if raw.get("parameter") is not None:
                line += f" {raw['parameter']}"
            return CodomainFunction.from_header_string(line)
    except CodomainFormatError as e:
        raise ConfigurationError(str(e)) from e
    raise ConfigurationError("codomain_function must be a string or a mapping with 'name'")


@dataclass(frozen=True)
class ConfigurationParameters:
    """Codomain function plus ranges of topology parameters."""

    codomain_function: CodomainFunction
    m: tuple[int, ...]
    k: tuple[int, ...]
    o: tuple[int, ...]
    b: tuple[int, ...]

    @classmethod
    def from_dict(cls, config: dict) -> ConfigurationParameters:
        if "codomain_function" not in config:
            raise ConfigurationError("missing key 'codomain_function'")
        missing = [name for name in PARAMETER_NAMES if name not in config]
        if missing:
            raise ConfigurationError(f"missing parameter(s): {', '.join(missing)}")
        return cls(
            codomain_function=_parse_codomain_function(config["codomain_function"]),
            **{name: tuple(_parse_values(name, config[name])) for name in PARAMETER_NAMES},
        )

    @classmethod
    def from_file(cls, path: PathLike) -> ConfigurationParameters:
        config = load_config(path)
        try:
            return cls.from_dict(config)
        except ConfigurationError as e:
            raise ConfigurationError(f"{path}: {e}") from e

    def __iter__(self) -> Iterator[InputParameters]:
        for m, k, o, b in itertools.product(self.m, self.k, self.o, self.b):
            params = InputParameters(m, k, o, b)
            try:
                params.validate()
            except ProblemFormatError as e:
                logger.debug("Skipping m=%d k=%d o=%d b=%d: %s", m, k, o, b, e)
                continue
            yield params


def get_output_folder_path_from_configuration_file(
    configuration_file_path: PathLike, folder_name: str
) -> Path:
    """``<root>/problem_generation/cfg.yaml`` -> ``<root>/<folder_name>/cfg`` (created)."""
    configuration_file_path = Path(configuration_file_path)
    root = configuration_file_path.resolve().parent.parent
    output_folder = root / folder_name / configuration_file_path.stem
    os.makedirs(output_folder, exist_ok=True)
    return output_folder
