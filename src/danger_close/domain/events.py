"""Log feed + advisory alert events."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class LogSource(str, Enum):
    SYSTEM = "SYSTEM"
    USER = "USER"


@dataclass(frozen=True)
class LogEvent:
    kind: str  # "advance" | "movement" | "momentum" | "hard_target" | ...
    text: str
    source: LogSource = LogSource.SYSTEM
    data: dict[str, Any] | None = None


@dataclass(frozen=True)
class TerrainAlert:
    rule: str  # "cover" | "space"
    message: str
    combatant_ids: tuple[int, ...]
    limit: int
    count: int
