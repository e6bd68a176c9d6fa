"""Game metadata loaded from a TOML description file."""

from __future__ import annotations

import logging
import re
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from os import PathLike
from typing import Any, Callable, TypeVar

from .errors import CorruptMetadataError, CorruptWadError, WadIOError
from .name import WadName

_log = logging.getLogger(__name__)

_T = TypeVar("_T")

_U16 = (0, 0xFFFF)
_U32 = (0, 0xFFFFFFFF)
_I16 = (-0x8000, 0x7FFF)


class _SchemaError(Exception):
    """A metadata value is missing or has the wrong shape."""


def _table(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise _SchemaError(f"{what}: expected a table")
    return value


def _get(table: dict, key: str, what: str) -> Any:
    try:
        return table[key]
    except KeyError:
        raise _SchemaError(f"{what}: missing field `{key}`") from None


def _int(value: Any, bounds: tuple[int, int], what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise _SchemaError(f"{what}: expected an integer")
    low, high = bounds
    if not low <= value <= high:
        raise _SchemaError(f"{what}: {value} out of range")
    return value


def _float(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _SchemaError(f"{what}: expected a number")
    return float(value)


def _bool(value: Any, what: str) -> bool:
    if not isinstance(value, bool):
        raise _SchemaError(f"{what}: expected a boolean")
    return value


def _str(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise _SchemaError(f"{what}: expected a string")
    return value


def _list(value: Any, what: str) -> list:
    if not isinstance(value, list):
        raise _SchemaError(f"{what}: expected an array")
    return value


def _name(value: Any, what: str) -> WadName:
    try:
        return WadName.from_str(_str(value, what))
    except CorruptWadError as error:
        raise _SchemaError(f"{what}: {error}") from error


def _regex(value: Any, what: str) -> re.Pattern[str]:
    try:
        return re.compile(_str(value, what))
    except re.error as error:
        raise _SchemaError(f"{what}: {error}") from error


def _enum(enum_type: type[_T], value: Any, what: str) -> _T:
    try:
        return enum_type(_str(value, what))
    except ValueError:
        raise _SchemaError(f"{what}: unknown variant `{value}`") from None


def _optional(
    table: dict, key: str, parse: Callable[[Any, str], _T], what: str
) -> _T | None:
    value = table.get(key)
    return None if value is None else parse(value, f"{what}.{key}")


def _records(value: Any, parse: Callable[[Any, str], _T], what: str) -> list[_T]:
    return [
        parse(item, f"{what}[{index}]")
        for index, item in enumerate(_list(value, what))
    ]


class TriggerType(Enum):
    """How a special linedef is activated."""

    ANY = "Any"
    PUSH = "Push"
    SWITCH = "Switch"
    WALK_OVER = "WalkOver"
    GUN = "Gun"


class HeightRef(Enum):
    """The reference a moving floor or ceiling height is measured from."""

    LOWEST_FLOOR = "LowestFloor"
    NEXT_FLOOR = "NextFloor"
    HIGHEST_FLOOR = "HighestFloor"
    LOWEST_CEILING = "LowestCeiling"
    HIGHEST_CEILING = "HighestCeiling"
    FLOOR = "Floor"
    CEILING = "Ceiling"


class ExitEffectDef(Enum):
    """Which exit a linedef leads to."""

    NORMAL = "Normal"
    SECRET = "Secret"


@dataclass(frozen=True)
class SkyMetadata:
    """The sky texture used by levels whose names match a pattern."""

    texture_name: WadName
    level_pattern: re.Pattern[str]
    tiled_band_size: float

    @classmethod
    def _parse(cls, value: Any, what: str) -> SkyMetadata:
        table = _table(value, what)
        return cls(
            texture_name=_name(_get(table, "texture_name", what), f"{what}.texture_name"),
            level_pattern=_regex(
                _get(table, "level_pattern", what), f"{what}.level_pattern"
            ),
            tiled_band_size=_float(
                _get(table, "tiled_band_size", what), f"{what}.tiled_band_size"
            ),
        )


@dataclass(frozen=True)
class AnimationMetadata:
    """Groups of frames forming animated flats and walls."""

    flats: list[list[WadName]]
    walls: list[list[WadName]]

    @classmethod
    def _parse(cls, value: Any, what: str) -> AnimationMetadata:
        table = _table(value, what)

        def frames(item: Any, where: str) -> list[WadName]:
            return _records(item, _name, where)

        return cls(
            flats=_records(_get(table, "flats", what), frames, f"{what}.flats"),
            walls=_records(_get(table, "walls", what), frames, f"{what}.walls"),
        )


@dataclass(frozen=True)
class ThingMetadata:
    """How a thing type is drawn."""

    thing_type: int
    sprite: WadName
    sequence: str
    hanging: bool
    radius: int

    @classmethod
    def _parse(cls, value: Any, what: str) -> ThingMetadata:
        table = _table(value, what)
        return cls(
            thing_type=_int(_get(table, "thing_type", what), _U16, f"{what}.thing_type"),
            sprite=_name(_get(table, "sprite", what), f"{what}.sprite"),
            sequence=_str(_get(table, "sequence", what), f"{what}.sequence"),
            hanging=_bool(_get(table, "hanging", what), f"{what}.hanging"),
            radius=_int(_get(table, "radius", what), _U32, f"{what}.radius"),
        )


_THING_CATEGORIES = (
    "decorations",
    "weapons",
    "powerups",
    "artifacts",
    "ammo",
    "keys",
    "monsters",
)


@dataclass(frozen=True)
class ThingDirectoryMetadata:
    """Thing metadata grouped by category."""

    decorations: list[ThingMetadata]
    weapons: list[ThingMetadata]
    powerups: list[ThingMetadata]
    artifacts: list[ThingMetadata]
    ammo: list[ThingMetadata]
    keys: list[ThingMetadata]
    monsters: list[ThingMetadata]

    @classmethod
    def _parse(cls, value: Any, what: str) -> ThingDirectoryMetadata:
        table = _table(value, what)
        return cls(
            **{
                category: _records(
                    _get(table, category, what),
                    ThingMetadata._parse,
                    f"{what}.{category}",
                )
                for category in _THING_CATEGORIES
            }
        )

    def categories(self) -> tuple[list[ThingMetadata], ...]:
        """Every category, in lookup order."""
        return tuple(getattr(self, category) for category in _THING_CATEGORIES)


@dataclass(frozen=True)
class HeightDef:
    """A target height: a reference plus an offset in WAD units."""

    to: HeightRef
    offset: int = 0

    @classmethod
    def _parse(cls, value: Any, what: str) -> HeightDef:
        table = _table(value, what)
        offset = table.get("off")
        return cls(
            to=_enum(HeightRef, _get(table, "to", what), f"{what}.to"),
            offset=0 if offset is None else _int(offset, _I16, f"{what}.off"),
        )


@dataclass(frozen=True)
class HeightEffectDef:
    """One or two heights a surface moves between."""

    first: HeightDef
    second: HeightDef | None = None

    @classmethod
    def _parse(cls, value: Any, what: str) -> HeightEffectDef:
        table = _table(value, what)
        return cls(
            first=HeightDef._parse(_get(table, "first", what), f"{what}.first"),
            second=_optional(table, "second", HeightDef._parse, what),
        )


@dataclass(frozen=True)
class MoveEffectDef:
    """How a triggered floor and/or ceiling moves."""

    floor: HeightEffectDef | None = None
    ceiling: HeightEffectDef | None = None
    repeat: bool = False
    wait: float = 0.0
    speed: float = 0.0

    @classmethod
    def _parse(cls, value: Any, what: str) -> MoveEffectDef:
        table = _table(value, what)
        repeat = table.get("repeat")
        wait = table.get("wait")
        speed = table.get("speed")
        return cls(
            floor=_optional(table, "floor", HeightEffectDef._parse, what),
            ceiling=_optional(table, "ceiling", HeightEffectDef._parse, what),
            repeat=False if repeat is None else _bool(repeat, f"{what}.repeat"),
            wait=0.0 if wait is None else _float(wait, f"{what}.wait"),
            speed=0.0 if speed is None else _float(speed, f"{what}.speed") / 8.0 * 0.7,
        )


@dataclass(frozen=True)
class LinedefMetadata:
    """What a special linedef type does when triggered."""

    special_type: int
    trigger: TriggerType
    monsters: bool = False
    only_once: bool = False
    move_effect: MoveEffectDef | None = None
    exit_effect: ExitEffectDef | None = None

    @classmethod
    def _parse(cls, value: Any, what: str) -> LinedefMetadata:
        table = _table(value, what)
        monsters = table.get("monsters")
        only_once = table.get("only_once")
        return cls(
            special_type=_int(
                _get(table, "special_type", what), _U16, f"{what}.special_type"
            ),
            trigger=_enum(TriggerType, _get(table, "trigger", what), f"{what}.trigger"),
            monsters=False if monsters is None else _bool(monsters, f"{what}.monsters"),
            only_once=False
            if only_once is None
            else _bool(only_once, f"{what}.only_once"),
            move_effect=_optional(table, "move", MoveEffectDef._parse, what),
            exit_effect=_optional(
                table,
                "exit",
                lambda item, where: _enum(ExitEffectDef, item, where),
                what,
            ),
        )


@dataclass
class WadMetadata:
    """Everything the metadata file describes about a game."""

    sky: list[SkyMetadata]
    animations: AnimationMetadata
    things: ThingDirectoryMetadata
    linedef: dict[int, LinedefMetadata] = field(default_factory=dict)

    @classmethod
    def from_file(cls, path: str | PathLike[str]) -> WadMetadata:
        """Load and parse a metadata file."""
        try:
            with open(path, encoding="utf-8") as file:
                contents = file.read()
        except (OSError, UnicodeDecodeError) as error:
            raise WadIOError("Failed to load metadata to memory.") from error
        return cls.from_text(contents)

    @classmethod
    def from_text(cls, text: str) -> WadMetadata:
        """Parse metadata from TOML text, raising CorruptMetadataError if invalid."""
        try:
            document = tomllib.loads(text)
            return cls._parse(document)
        except (tomllib.TOMLDecodeError, _SchemaError) as error:
            raise CorruptMetadataError("Failed to parse metadata file.") from error

    @classmethod
    def _parse(cls, document: dict) -> WadMetadata:
        what = "metadata"
        linedefs = document.get("linedef")
        by_type: dict[int, LinedefMetadata] = {}
        if linedefs is not None:
            for linedef in _records(linedefs, LinedefMetadata._parse, f"{what}.linedef"):
                by_type[linedef.special_type] = linedef
        return cls(
            sky=_records(_get(document, "sky", what), SkyMetadata._parse, f"{what}.sky"),
            animations=AnimationMetadata._parse(
                _get(document, "animations", what), f"{what}.animations"
            ),
            things=ThingDirectoryMetadata._parse(
                _get(document, "things", what), f"{what}.things"
            ),
            linedef=by_type,
        )

    def sky_for(self, name: WadName) -> SkyMetadata | None:
        """The sky for a level, falling back to the first sky listed."""
        level_name = name.raw().decode("ascii")
        for sky in self.sky:
            if sky.level_pattern.search(level_name):
                return sky
        if self.sky:
            fallback = self.sky[0]
            _log.warning(
                "No sky found for level %s, using %s.", name, fallback.texture_name
            )
            return fallback
        _log.error("No sky metadata provided.")
        return None

    def find_thing(self, thing_type: int) -> ThingMetadata | None:
        """The metadata of a thing type, searching every category in turn."""
        for category in self.things.categories():
            for thing in category:
                if thing.thing_type == thing_type:
                    return thing
        return None