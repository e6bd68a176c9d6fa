"""The geometry of one level and queries over it."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

from .types import (
    WadLinedef,
    WadNode,
    WadSector,
    WadSeg,
    WadSidedef,
    WadSubsector,
    WadThing,
    WadVertex,
)
from .util import from_wad_coords

if TYPE_CHECKING:
    from .archive import Archive

_log = logging.getLogger(__name__)

_T = TypeVar("_T")

THINGS_OFFSET = 1
LINEDEFS_OFFSET = 2
SIDEDEFS_OFFSET = 3
VERTICES_OFFSET = 4
SEGS_OFFSET = 5
SSECTORS_OFFSET = 6
NODES_OFFSET = 7
SECTORS_OFFSET = 8


def _get(items: Sequence[_T], index: int) -> _T | None:
    return items[index] if 0 <= index < len(items) else None


@dataclass(frozen=True, slots=True)
class NeighbourHeights:
    """Floor and ceiling extremes over the sectors adjacent to a sector."""

    lowest_floor: int
    next_floor: int | None
    highest_floor: int
    lowest_ceiling: int
    highest_ceiling: int


@dataclass
class Level:
    """All the records that make up one level."""

    things: list[WadThing]
    linedefs: list[WadLinedef]
    sidedefs: list[WadSidedef]
    vertices: list[WadVertex]
    segs: list[WadSeg]
    subsectors: list[WadSubsector]
    nodes: list[WadNode]
    sectors: list[WadSector]
    _sector_ids: dict[int, int] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    @classmethod
    def from_archive(cls, wad: Archive, index: int) -> Level:
        """Read the level with the given index from an archive."""
        lump = wad.level_lump(index)
        _log.info("Reading level data for '%s'...", lump.name)
        start = lump.index

        def decode(offset: int, record_type: type) -> list:
            return wad.lump_by_index(start + offset).decode_vec(record_type)

        things = decode(THINGS_OFFSET, WadThing)
        linedefs = decode(LINEDEFS_OFFSET, WadLinedef)
        vertices = decode(VERTICES_OFFSET, WadVertex)
        segs = decode(SEGS_OFFSET, WadSeg)
        subsectors = decode(SSECTORS_OFFSET, WadSubsector)
        nodes = decode(NODES_OFFSET, WadNode)
        sidedefs = decode(SIDEDEFS_OFFSET, WadSidedef)
        sectors = decode(SECTORS_OFFSET, WadSector)

        _log.info("Loaded level '%s':", lump.name)
        for label, records in (
            ("things", things),
            ("linedefs", linedefs),
            ("sidedefs", sidedefs),
            ("vertices", vertices),
            ("segs", segs),
            ("subsectors", subsectors),
            ("nodes", nodes),
            ("sectors", sectors),
        ):
            _log.info("    %4d %s", len(records), label)

        return cls(
            things=things,
            linedefs=linedefs,
            sidedefs=sidedefs,
            vertices=vertices,
            segs=segs,
            subsectors=subsectors,
            nodes=nodes,
            sectors=sectors,
        )

    def vertex(self, vertex_id: int) -> tuple[float, float] | None:
        """A vertex in world coordinates, or None if out of range."""
        vertex = _get(self.vertices, vertex_id)
        return None if vertex is None else from_wad_coords(vertex.x, vertex.y)

    def seg_linedef(self, seg: WadSeg) -> WadLinedef | None:
        return _get(self.linedefs, seg.linedef)

    def seg_vertices(
        self, seg: WadSeg
    ) -> tuple[tuple[float, float], tuple[float, float]] | None:
        start = self.vertex(seg.start_vertex)
        end = self.vertex(seg.end_vertex)
        if start is None or end is None:
            return None
        return start, end

    def seg_sidedef(self, seg: WadSeg) -> WadSidedef | None:
        """The sidedef on the seg's own side."""
        line = self.seg_linedef(seg)
        if line is None:
            return None
        return self.right_sidedef(line) if seg.direction == 0 else self.left_sidedef(line)

    def seg_back_sidedef(self, seg: WadSeg) -> WadSidedef | None:
        """The sidedef on the far side of the seg."""
        line = self.seg_linedef(seg)
        if line is None:
            return None
        return self.right_sidedef(line) if seg.direction == 1 else self.left_sidedef(line)

    def seg_sector(self, seg: WadSeg) -> WadSector | None:
        side = self.seg_sidedef(seg)
        return None if side is None else self.sidedef_sector(side)

    def seg_back_sector(self, seg: WadSeg) -> WadSector | None:
        side = self.seg_back_sidedef(seg)
        return None if side is None else self.sidedef_sector(side)

    def left_sidedef(self, linedef: WadLinedef) -> WadSidedef | None:
        if linedef.left_side == -1:
            return None
        return _get(self.sidedefs, linedef.left_side)

    def right_sidedef(self, linedef: WadLinedef) -> WadSidedef | None:
        if linedef.right_side == -1:
            return None
        return _get(self.sidedefs, linedef.right_side)

    def sidedef_sector(self, sidedef: WadSidedef) -> WadSector | None:
        return _get(self.sectors, sidedef.sector)

    def ssector(self, index: int) -> WadSubsector | None:
        return _get(self.subsectors, index)

    def ssector_segs(self, ssector: WadSubsector) -> list[WadSeg] | None:
        """The segs of a subsector, or None if they run past the seg list."""
        start = ssector.first_seg
        end = start + ssector.num_segs
        if end <= len(self.segs):
            return self.segs[start:end]
        return None

    def sector_id(self, sector: WadSector) -> int:
        """The position of this very sector object in the level's sector list."""
        key = id(sector)
        index = self._sector_ids.get(key)
        if index is None or _get(self.sectors, index) is not sector:
            self._sector_ids = {}
            for position, candidate in enumerate(self.sectors):
                self._sector_ids.setdefault(id(candidate), position)
            index = self._sector_ids.get(key)
            if index is None:
                raise ValueError("sector does not belong to this level")
        return index

    def adjacent_sectors(self, sector: WadSector) -> Iterator[WadSector]:
        """The sectors across every two-sided linedef bordering the sector."""
        sector_id = self.sector_id(sector)
        for line in self.linedefs:
            left_side = self.left_sidedef(line)
            right_side = self.right_sidedef(line)
            if left_side is None or right_side is None:
                continue
            left, right = left_side.sector, right_side.sector
            if left == sector_id:
                adjacent = _get(self.sectors, right)
            elif right == sector_id:
                adjacent = _get(self.sectors, left)
            else:
                continue
            if adjacent is None:
                _log.error(
                    "Bad WAD: Cannot access all adjacent sectors to find minimum light."
                )
                continue
            yield adjacent

    def sector_min_light(self, sector: WadSector) -> int:
        """The lowest light level among the sector and its neighbours."""
        return min(
            (adjacent.light for adjacent in self.adjacent_sectors(sector)),
            default=sector.light,
        ) if False else min(
            [sector.light, *(adjacent.light for adjacent in self.adjacent_sectors(sector))]
        )

    def neighbour_heights(self, sector: WadSector) -> NeighbourHeights | None:
        """Height extremes of the neighbouring sectors, or None without neighbours."""
        neighbours = list(self.adjacent_sectors(sector))
        if not neighbours:
            return None
        floors = [adjacent.floor_height for adjacent in neighbours]
        ceilings = [adjacent.ceiling_height for adjacent in neighbours]
        higher_floors = [floor for floor in floors if floor > sector.floor_height]
        return NeighbourHeights(
            lowest_floor=min(floors),
            next_floor=min(higher_floors) if higher_floors else None,
            highest_floor=max(floors),
            lowest_ceiling=min(ceilings),
            highest_ceiling=max(ceilings),
        )