"""Shared fixtures for stress tests: seeded random relation streams."""

from __future__ import annotations

import random
from collections.abc import Callable

import pytest

from interchange.core.relation import Relation


@pytest.fixture
def random_relations() -> Callable[..., list[Relation]]:
    """Factory for reproducible relation streams over a fixed part pool."""

    def _generate(
        seed: int,
        count: int,
        parts: int = 60,
        weights: tuple[int, int, int] = (1, 6, 2),
    ) -> list[Relation]:
        rng = random.Random(seed)
        pool = [f"P{i:04d}" for i in range(parts)]
        relations = []
        for line in range(2, count + 2):
            code = rng.choices((0, 1, 2), weights=weights)[0]
            main_part, related_part = rng.choice(pool), rng.choice(pool)
            relations.append(Relation(main_part, related_part, code, line=line))
        return relations

    return _generate
