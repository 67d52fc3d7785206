"""Timed roll state machine shared by every randomized check.

Idle -> Rolling -> Resolved -> Idle. While rolling, a repeating tick samples
throwaway display values; a single deferred finalize cancels the tick, samples
the authoritative values and runs the resolver. Both callbacks carry the
cancellation token of the roll that scheduled them, so a torn-down roll can
never finalize.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from random import Random
from typing import Callable, Generic, TypeVar

from danger_close.sim.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

V = TypeVar("V")
T = TypeVar("T")


class RollPhase(str, Enum):
    IDLE = "idle"
    ROLLING = "rolling"
    RESOLVED = "resolved"


@dataclass()
class CancelToken:
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass(frozen=True)
class RollState(Generic[V, T]):
    phase: RollPhase = RollPhase.IDLE
    interim: V | None = None
    outcome: T | None = None


@dataclass()
class _ActiveRoll(Generic[V, T]):
    token: CancelToken
    rng: Random
    interim_rng: Random
    resolve: Callable[[V], T]
    on_resolved: Callable[[T], None] | None
    tick: TimerHandle | None = None
    timeout: TimerHandle | None = None


class RollAnimationController(Generic[V, T]):
    def __init__(
        self,
        scheduler: Scheduler,
        sample: Callable[[Random], V],
        *,
        tick_ms: int,
        duration_ms: int,
        name: str = "roll",
    ) -> None:
        self.scheduler = scheduler
        self.sample = sample
        self.tick_ms = tick_ms
        self.duration_ms = duration_ms
        self.name = name
        self._state: RollState[V, T] = RollState()
        self._active: _ActiveRoll[V, T] | None = None

    @property
    def state(self) -> RollState[V, T]:
        return self._state

    @property
    def phase(self) -> RollPhase:
        return self._state.phase

    @property
    def rolling(self) -> bool:
        return self._state.phase == RollPhase.ROLLING

    @property
    def outcome(self) -> T | None:
        return self._state.outcome

    def start(
        self,
        resolve: Callable[[V], T],
        *,
        rng: Random,
        interim_rng: Random | None = None,
        on_resolved: Callable[[T], None] | None = None,
    ) -> bool:
        """Begin a roll; returns False (and changes nothing) if one is in flight."""
        if self.rolling:
            logger.debug("%s already rolling; start ignored", self.name)
            return False

        token = CancelToken()
        active: _ActiveRoll[V, T] = _ActiveRoll(
            token=token,
            rng=rng,
            interim_rng=interim_rng or Random(rng.getrandbits(64)),
            resolve=resolve,
            on_resolved=on_resolved,
        )
        self._active = active
        self._state = RollState(phase=RollPhase.ROLLING, interim=self.sample(active.interim_rng))
        active.tick = self.scheduler.call_every(self.tick_ms, lambda: self._tick(token))
        active.timeout = self.scheduler.call_later(self.duration_ms, lambda: self._finalize(token))
        return True

    def _tick(self, token: CancelToken) -> None:
        active = self._active
        if token.cancelled or active is None or active.token is not token:
            return
        self._state = replace(self._state, interim=self.sample(active.interim_rng))

    def _finalize(self, token: CancelToken) -> None:
        active = self._active
        if token.cancelled or active is None or active.token is not token:
            return
        if active.tick is not None:
            active.tick.cancel()
            active.tick = None
        active.timeout = None
        token.cancel()

        values = self.sample(active.rng)
        outcome = active.resolve(values)
        self._active = None
        self._state = RollState(phase=RollPhase.RESOLVED, interim=values, outcome=outcome)
        if active.on_resolved is not None:
            active.on_resolved(outcome)

    def cancel(self) -> None:
        """Tear down: drop any pending timers and return to Idle."""
        active = self._active
        if active is not None:
            active.token.cancel()
            for handle in (active.tick, active.timeout):
                if handle is not None:
                    handle.cancel()
            self._active = None
            logger.debug("%s cancelled before resolving", self.name)
        self._state = RollState()
