"""Codomain function descriptors and subfunction value generators.

A codomain function decides which value each clique assignment receives.
Descriptors are written as the first line of generated codomain files
(``to_header_string``) and as the prefix of generated file names
(``to_io_string``).
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from .errors import CodomainFormatError

RANDOM = "random"
TRAP = "trap"
NKQ = "nkq"
NKP = "nkp"
UNKNOWN = "unknown"

_PARAMETRIZED = {NKQ, NKP}
KNOWN_FUNCTIONS = (RANDOM, TRAP, NKQ, NKP, UNKNOWN)


def _format_parameter(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


@dataclass(frozen=True)
class CodomainFunction:
    """Nameable descriptor of how subfunction values are generated.

    Attributes:
        name: One of ``random``, ``trap``, ``nkq``, ``nkp`` or ``unknown``.
        parameter: ``q`` for NKq (number of levels), ``p`` for NKp
            (probability of a zero value); ``None`` otherwise.
    """

    name: str
    parameter: float | None = None

    def __post_init__(self) -> None:
        if self.name in _PARAMETRIZED and self.parameter is None:
            raise CodomainFormatError(f"codomain function {self.name} needs a parameter")
        if self.name == NKQ and (self.parameter < 1 or not float(self.parameter).is_integer()):
            raise CodomainFormatError("nkq parameter q must be a positive integer")
        if self.name == NKP and not 0.0 <= self.parameter <= 1.0:
            raise CodomainFormatError("nkp parameter p must lie in [0, 1]")

    @classmethod
    def unknown(cls) -> CodomainFunction:
        return cls(UNKNOWN)

    @classmethod
    def from_header_string(cls, line: str) -> CodomainFunction:
        """Parse ``random``, ``trap``, ``nkq 4`` or ``nkp 0.5``."""
        tokens = line.split()
        if not tokens:
            raise CodomainFormatError("empty codomain function descriptor")
        name = tokens[0].lower()
        if name not in KNOWN_FUNCTIONS:
            raise CodomainFormatError(f"unknown codomain function: {tokens[0]}")
        if name in _PARAMETRIZED:
            if len(tokens) != 2:
                raise CodomainFormatError(f"codomain function {name} expects one parameter")
            try:
                parameter = float(tokens[1])
            except ValueError as e:
                raise CodomainFormatError(
                    f"could not parse parameter of codomain function {name}: {tokens[1]}"
                ) from e
            return cls(name, parameter)
        if len(tokens) != 1:
            raise CodomainFormatError(f"codomain function {name} takes no parameter")
        return cls(name)

    def to_header_string(self) -> str:
        if self.parameter is None:
            return self.name
        return f"{self.name} {_format_parameter(self.parameter)}"

    def to_io_string(self) -> str:
        """Short identifier used as the file name prefix."""
        if self.parameter is None:
            return self.name
        return f"{self.name}{_format_parameter(self.parameter)}"

    def generate_values(self, k: int, rng: random.Random) -> list[float]:
        """Return the ``2**k`` values of one subfunction."""
        size = 1 << k
        if self.name == RANDOM:
            return [rng.random() for _ in range(size)]
        if self.name == TRAP:
            return [float(trap_value(k, a.bit_count())) for a in range(size)]
        if self.name == NKQ:
            q = int(self.parameter)
            return [float(rng.randrange(q)) for _ in range(size)]
        if self.name == NKP:
            p = self.parameter
            return [0.0 if rng.random() < p else rng.random() for _ in range(size)]
        raise CodomainFormatError(f"can not generate values for codomain function {self.name}")


def trap_value(k: int, ones: int) -> int:
    """Fully deceptive trap: optimum at all ones, deceptive slope towards zeros."""
    if ones == k:
        return k
    return k - 1 - ones
