"""Fixed-size little-endian records stored in WAD lumps."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

from .errors import CorruptWadError
from .name import WadName

PALETTE_SIZE = 256 * 3
COLORMAP_SIZE = 256

_INFO = struct.Struct("<4sii")
_LUMP = struct.Struct("<ii8s")
_THING = struct.Struct("<hhhHH")
_VERTEX = struct.Struct("<hh")
_LINEDEF = struct.Struct("<HHHHHhh")
_SIDEDEF = struct.Struct("<hh8s8s8sH")
_SECTOR = struct.Struct("<hh8s8shHH")
_SUBSECTOR = struct.Struct("<HH")
_SEG = struct.Struct("<HHHHHH")
_NODE = struct.Struct("<12h2H")
_TEXTURE_HEADER = struct.Struct("<8sIHHIH")
_PATCH_REF = struct.Struct("<hhHHH")


def _check_size(size: int, data: bytes, what: str) -> None:
    if len(data) < size:
        raise CorruptWadError(
            f"Truncated {what}: expected {size} bytes, got {len(data)}."
        )


def _fields(layout: struct.Struct, data: bytes, what: str) -> tuple:
    _check_size(layout.size, data, what)
    return layout.unpack_from(data)


@dataclass(frozen=True, slots=True)
class WadInfo:
    """The WAD file header."""

    SIZE: ClassVar[int] = _INFO.size

    identifier: bytes
    num_lumps: int
    info_table_offset: int

    @classmethod
    def unpack(cls, data: bytes) -> WadInfo:
        """Decode the record held at the start of data."""
        return cls(*_fields(_INFO, data, "WAD header"))


@dataclass(frozen=True, slots=True)
class WadLump:
    """One entry of the lump directory."""

    SIZE: ClassVar[int] = _LUMP.size

    file_pos: int
    size: int
    name: WadName

    @classmethod
    def unpack(cls, data: bytes) -> WadLump:
        """Decode the record held at the start of data."""
        file_pos, size, name = _fields(_LUMP, data, "lump info")
        return cls(file_pos, size, WadName.from_bytes(name))


@dataclass(frozen=True, slots=True)
class WadThing:
    """A placed object in a level."""

    SIZE: ClassVar[int] = _THING.size

    x: int
    y: int
    angle: int
    thing_type: int
    flags: int

    @classmethod
    def unpack(cls, data: bytes) -> WadThing:
        """Decode the record held at the start of data."""
        return cls(*_fields(_THING, data, "thing"))


@dataclass(frozen=True, slots=True)
class WadVertex:
    """A map vertex in WAD units."""

    SIZE: ClassVar[int] = _VERTEX.size

    x: int
    y: int

    @classmethod
    def unpack(cls, data: bytes) -> WadVertex:
        """Decode the record held at the start of data."""
        return cls(*_fields(_VERTEX, data, "vertex"))


@dataclass(frozen=True, slots=True)
class WadLinedef:
    """A line between two vertices with up to two sides."""

    SIZE: ClassVar[int] = _LINEDEF.size

    start_vertex: int
    end_vertex: int
    flags: int
    special_type: int
    sector_tag: int
    right_side: int
    left_side: int

    @classmethod
    def unpack(cls, data: bytes) -> WadLinedef:
        """Decode the record held at the start of data."""
        return cls(*_fields(_LINEDEF, data, "linedef"))

    def impassable(self) -> bool:
        return self.flags & 0x0001 != 0

    def blocks_monsters(self) -> bool:
        return self.flags & 0x0002 != 0

    def is_two_sided(self) -> bool:
        return self.flags & 0x0004 != 0

    def upper_unpegged(self) -> bool:
        return self.flags & 0x0008 != 0

    def lower_unpegged(self) -> bool:
        return self.flags & 0x0010 != 0

    def secret(self) -> bool:
        return self.flags & 0x0020 != 0

    def blocks_sound(self) -> bool:
        return self.flags & 0x0040 != 0

    def always_shown_on_map(self) -> bool:
        return self.flags & 0x0080 != 0

    def never_shown_on_map(self) -> bool:
        return self.flags & 0x0100 != 0


@dataclass(frozen=True, slots=True)
class WadSidedef:
    """The textured side of a linedef facing one sector."""

    SIZE: ClassVar[int] = _SIDEDEF.size

    x_offset: int
    y_offset: int
    upper_texture: WadName
    lower_texture: WadName
    middle_texture: WadName
    sector: int

    @classmethod
    def unpack(cls, data: bytes) -> WadSidedef:
        """Decode the record held at the start of data."""
        x_offset, y_offset, upper, lower, middle, sector = _fields(
            _SIDEDEF, data, "sidedef"
        )
        return cls(
            x_offset,
            y_offset,
            WadName.from_bytes(upper),
            WadName.from_bytes(lower),
            WadName.from_bytes(middle),
            sector,
        )


@dataclass(frozen=True, slots=True)
class WadSector:
    """A region with its floor, ceiling, light and special type."""

    SIZE: ClassVar[int] = _SECTOR.size

    floor_height: int
    ceiling_height: int
    floor_texture: WadName
    ceiling_texture: WadName
    light: int
    sector_type: int
    tag: int

    @classmethod
    def unpack(cls, data: bytes) -> WadSector:
        """Decode the record held at the start of data."""
        floor, ceiling, floor_tex, ceiling_tex, light, sector_type, tag = _fields(
            _SECTOR, data, "sector"
        )
        return cls(
            floor,
            ceiling,
            WadName.from_bytes(floor_tex),
            WadName.from_bytes(ceiling_tex),
            light,
            sector_type,
            tag,
        )


@dataclass(frozen=True, slots=True)
class WadSubsector:
    """A convex BSP leaf: a run of consecutive segs."""

    SIZE: ClassVar[int] = _SUBSECTOR.size

    num_segs: int
    first_seg: int

    @classmethod
    def unpack(cls, data: bytes) -> WadSubsector:
        """Decode the record held at the start of data."""
        return cls(*_fields(_SUBSECTOR, data, "subsector"))


@dataclass(frozen=True, slots=True)
class WadSeg:
    """A piece of a linedef bounding a subsector."""

    SIZE: ClassVar[int] = _SEG.size

    start_vertex: int
    end_vertex: int
    angle: int
    linedef: int
    direction: int
    offset: int

    @classmethod
    def unpack(cls, data: bytes) -> WadSeg:
        """Decode the record held at the start of data."""
        return cls(*_fields(_SEG, data, "seg"))


@dataclass(frozen=True, slots=True)
class WadNode:
    """A BSP node with its partition line and child bounding boxes."""

    SIZE: ClassVar[int] = _NODE.size

    line_x: int
    line_y: int
    step_x: int
    step_y: int
    right_y_max: int
    right_y_min: int
    right_x_max: int
    right_x_min: int
    left_y_max: int
    left_y_min: int
    left_x_max: int
    left_x_min: int
    right: int
    left: int

    @classmethod
    def unpack(cls, data: bytes) -> WadNode:
        """Decode the record held at the start of data."""
        return cls(*_fields(_NODE, data, "node"))


@dataclass(frozen=True, slots=True)
class WadTextureHeader:
    """The header of a composite wall texture."""

    SIZE: ClassVar[int] = _TEXTURE_HEADER.size

    name: WadName
    masked: int
    width: int
    height: int
    column_directory: int
    num_patches: int

    @classmethod
    def unpack(cls, data: bytes) -> WadTextureHeader:
        """Decode the record held at the start of data."""
        name, masked, width, height, column_directory, num_patches = _fields(
            _TEXTURE_HEADER, data, "texture header"
        )
        return cls(
            WadName.from_bytes(name),
            masked,
            width,
            height,
            column_directory,
            num_patches,
        )


@dataclass(frozen=True, slots=True)
class WadTexturePatchRef:
    """A patch placed inside a composite texture."""

    SIZE: ClassVar[int] = _PATCH_REF.size

    origin_x: int
    origin_y: int
    patch: int
    stepdir: int
    colormap: int

    @classmethod
    def unpack(cls, data: bytes) -> WadTexturePatchRef:
        """Decode the record held at the start of data."""
        return cls(*_fields(_PATCH_REF, data, "texture patch reference"))


@dataclass(frozen=True, slots=True)
class Palette:
    """256 RGB triples."""

    SIZE: ClassVar[int] = PALETTE_SIZE

    data: bytes

    @classmethod
    def unpack(cls, data: bytes) -> Palette:
        """Take the palette held at the start of data."""
        _check_size(cls.SIZE, data, "palette")
        return cls(bytes(data[: cls.SIZE]))


@dataclass(frozen=True, slots=True)
class Colormap:
    """A 256-entry mapping from palette index to palette index."""

    SIZE: ClassVar[int] = COLORMAP_SIZE

    data: bytes

    @classmethod
    def unpack(cls, data: bytes) -> Colormap:
        """Take the colormap held at the start of data."""
        _check_size(cls.SIZE, data, "colormap")
        return cls(bytes(data[: cls.SIZE]))