from __future__ import annotations

from hypothesis import strategies as st

from danger_close.domain.types import (
    AMMO_MAX,
    AMMO_MIN,
    GRIT_MAX,
    GRIT_MIN,
    MOMENTUM_MAX,
    MOMENTUM_MIN,
    ArmorId,
    Combatant,
    Cover,
    DefensivePosition,
    GearId,
    Intent,
    IntentKind,
    OffensivePosition,
    Sector,
    SectorContent,
    Space,
    Status,
    Weather,
    WeaponId,
)


def intent_strategy() -> st.SearchStrategy[Intent | None]:
    return st.one_of(
        st.none(),
        st.builds(Intent, kind=st.sampled_from([k for k in IntentKind if k != IntentKind.COVERING_FIRE])),
    )


def combatant_strategy(combatant_id: int) -> st.SearchStrategy[Combatant]:
    return st.builds(
        Combatant,
        id=st.just(combatant_id),
        name=st.just(f"Trooper {combatant_id}"),
        status=st.sampled_from(list(Status)),
        grit=st.integers(min_value=GRIT_MIN, max_value=GRIT_MAX),
        ammo=st.integers(min_value=AMMO_MIN, max_value=AMMO_MAX),
        weapon=st.sampled_from(list(WeaponId)),
        armor=st.one_of(st.none(), st.sampled_from(list(ArmorId))),
        special_gear=st.lists(st.sampled_from(list(GearId)), max_size=2, unique=True).map(tuple),
        offensive_position=st.sampled_from(list(OffensivePosition)),
        defensive_position=st.sampled_from(list(DefensivePosition)),
        intent=intent_strategy(),
        at_risk=st.booleans(),
    )


@st.composite
def roster_strategy(draw, min_size: int = 0, max_size: int = 8) -> tuple[Combatant, ...]:
    size = draw(st.integers(min_value=min_size, max_value=max_size))
    return tuple(draw(combatant_strategy(i)) for i in range(1, size + 1))


def sector_strategy(engageable_only: bool = False) -> st.SearchStrategy[Sector]:
    contents = [c for c in SectorContent if c.threat_level is not None] if engageable_only else list(SectorContent)
    return st.builds(
        Sector,
        id=st.just("alpha"),
        name=st.text(max_size=12),
        cover=st.sampled_from(list(Cover)),
        space=st.sampled_from(list(Space)),
        content=st.sampled_from(contents),
        weather=st.sampled_from(list(Weather)),
        momentum=st.integers(min_value=MOMENTUM_MIN, max_value=MOMENTUM_MAX),
    )
