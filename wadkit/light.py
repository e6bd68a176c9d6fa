"""Sector lighting levels and animated light effects."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from .types import WadSector

if TYPE_CHECKING:
    from .level import Level

_EPSILON = 1.1920929e-07

FLASH_SPEED = 20.0
FLASH_DURATION = 0.06
FLICKER_SPEED = 8.0
FLICKER_DURATION = 0.5
SLOW_STROBE_SPEED = 1.0
SLOW_STROBE_DURATION = 0.85
FAST_STROBE_SPEED = 2.0
FAST_STROBE_DURATION = 0.7
GLOW_SPEED = 0.5

FLASH = 1
FAST_STROBE_1 = 2
SLOW_STROBE = 3
FAST_STROBE_2 = 4
GLOW = 8
SLOW_STROBE_SYNC = 12
FAST_STROBE_SYNC = 13
FLICKER = 17


class LightEffectKind(Enum):
    """How a light alternates between its two levels."""

    GLOW = "glow"
    RANDOM = "random"
    ALTERNATE = "alternate"


class Contrast(Enum):
    """Fake contrast applied to axis-aligned walls."""

    DARKEN = "darken"
    BRIGHTEN = "brighten"


@dataclass(frozen=True)
class LightEffect:
    """An animated light: the second level and its timing."""

    alt_level: float
    speed: float
    duration: float
    sync: float
    kind: LightEffectKind


@dataclass(frozen=True)
class LightInfo:
    """A light level in [0, 1] and an optional animation."""

    level: float
    effect: LightEffect | None = None


_EFFECTS: dict[int, tuple[LightEffectKind, float, float]] = {
    FLASH: (LightEffectKind.RANDOM, FLASH_SPEED, FLASH_DURATION),
    FLICKER: (LightEffectKind.RANDOM, FLICKER_SPEED, FLICKER_DURATION),
    SLOW_STROBE: (LightEffectKind.ALTERNATE, SLOW_STROBE_SPEED, SLOW_STROBE_DURATION),
    SLOW_STROBE_SYNC: (
        LightEffectKind.ALTERNATE,
        SLOW_STROBE_SPEED,
        SLOW_STROBE_DURATION,
    ),
    FAST_STROBE_1: (LightEffectKind.ALTERNATE, FAST_STROBE_SPEED, FAST_STROBE_DURATION),
    FAST_STROBE_2: (LightEffectKind.ALTERNATE, FAST_STROBE_SPEED, FAST_STROBE_DURATION),
    FAST_STROBE_SYNC: (
        LightEffectKind.ALTERNATE,
        FAST_STROBE_SPEED,
        FAST_STROBE_DURATION,
    ),
    GLOW: (LightEffectKind.GLOW, GLOW_SPEED, 0.0),
}

_SYNCED = frozenset({SLOW_STROBE_SYNC, FAST_STROBE_SYNC, GLOW})


def _id_to_sync(sector_id: int) -> float:
    return ((sector_id * 1_664_525 + 1_013_904_223) & 0xFFFF) / 15.0


def _light_to_float(level: int) -> float:
    return (level >> 3) / 31.0


def _clamp(level: float) -> float:
    return min(1.0, max(0.0, level))


def new_light(level: Level, sector: WadSector) -> LightInfo:
    """The light of a sector, animated if its type calls for it."""
    base_level = _light_to_float(sector.light)
    effect = _EFFECTS.get(sector.sector_type)
    if effect is None:
        return LightInfo(base_level)
    alt_level = _light_to_float(level.sector_min_light(sector))
    if abs(alt_level - base_level) < _EPSILON:
        return LightInfo(base_level)
    if sector.sector_type in _SYNCED:
        sync = 0.0
    else:
        sync = _id_to_sync(level.sector_id(sector))
    kind, speed, duration = effect
    return LightInfo(
        base_level,
        LightEffect(
            alt_level=alt_level, speed=speed, duration=duration, sync=sync, kind=kind
        ),
    )


def with_contrast(light_info: LightInfo, contrast: Contrast) -> LightInfo:
    """A copy of light_info with its level nudged darker or brighter."""
    delta = 2.0 / 31.0 if contrast is Contrast.BRIGHTEN else -2.0 / 31.0
    return replace(light_info, level=_clamp(light_info.level + delta))