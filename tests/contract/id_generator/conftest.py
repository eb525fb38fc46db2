"""Fixtures for block id generator contract tests."""

from collections.abc import Iterable
import random

import pytest

from objfs.adapters.id_generators import (
    RandomBlockIdGenerator,
    SequentialBlockIdGenerator,
)
from objfs.interfaces.id_generator import BlockIdGenerator


@pytest.fixture(params=["random", "seeded", "sequential"])
def id_generator(
    request: pytest.FixtureRequest,
) -> Iterable[BlockIdGenerator]:
    """Return a fresh BlockIdGenerator instance for the requested backend.

    Supported params:
      - `"random"` → RandomBlockIdGenerator (SystemRandom)
      - `"seeded"` → RandomBlockIdGenerator over a seeded `random.Random`
      - `"sequential"` → SequentialBlockIdGenerator
    """

    match request.param:
        case "random":
            yield RandomBlockIdGenerator()
        case "seeded":
            yield RandomBlockIdGenerator(random.Random(1234))
        case "sequential":
            yield SequentialBlockIdGenerator()
        case _:
            raise ValueError(f"unknown id generator type: {request.param}")
