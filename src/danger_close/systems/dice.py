from __future__ import annotations

from dataclasses import dataclass
from random import Random


def roll_d3(rng: Random) -> int:
    return rng.randint(1, 3)


def roll_d6(rng: Random) -> int:
    return rng.randint(1, 6)


def roll_pool(rng: Random, count: int) -> tuple[int, ...]:
    return tuple(roll_d6(rng) for _ in range(max(0, count)))


@dataclass(frozen=True)
class DicePoolResult:
    values: tuple[int, ...]

    @property
    def highest(self) -> int | None:
        return max(self.values) if self.values else None

    @property
    def lowest(self) -> int | None:
        return min(self.values) if self.values else None

    def count_at_least(self, target: int) -> int:
        return sum(1 for value in self.values if value >= target)
