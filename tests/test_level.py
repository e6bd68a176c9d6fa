import dataclasses
import struct

import pytest

from wadkit.archive import Archive
from wadkit.errors import CorruptWadError
from wadkit.level import Level
from wadkit.name import WadName
from wadkit.types import (
    WadLinedef,
    WadSector,
    WadSeg,
    WadSidedef,
    WadSubsector,
    WadThing,
    WadVertex,
)
from wadkit.util import from_wad_coords

DASH = WadName("-")
FLOOR = WadName("FLOOR1")


def sector(floor, ceiling, light):
    return WadSector(floor, ceiling, FLOOR, FLOOR, light, 0, 0)


def side(sector_id):
    return WadSidedef(0, 0, DASH, DASH, DASH, sector_id)


@pytest.fixture
def level():
    sectors = [
        sector(0, 128, 160),
        sector(16, 120, 96),
        sector(-8, 200, 200),
        sector(0, 128, 50),
    ]
    sidedefs = [side(0), side(1), side(0), side(2), side(3)]
    linedefs = [
        WadLinedef(0, 1, 0, 0, 0, 0, 1),
        WadLinedef(1, 2, 0, 0, 0, 3, 2),
        WadLinedef(2, 0, 0, 0, 0, 4, -1),
    ]
    segs = [
        WadSeg(0, 1, 0, 0, 0, 0),
        WadSeg(1, 0, 0, 0, 1, 0),
        WadSeg(2, 0, 0, 2, 0, 0),
        WadSeg(0, 9, 0, 0, 0, 0),
    ]
    return Level(
        things=[],
        linedefs=linedefs,
        sidedefs=sidedefs,
        vertices=[WadVertex(0, 0), WadVertex(64, 0), WadVertex(64, 64)],
        segs=segs,
        subsectors=[WadSubsector(2, 0), WadSubsector(5, 1)],
        nodes=[],
        sectors=sectors,
    )


def test_vertex(level):
    assert level.vertex(1) == from_wad_coords(64, 0)
    assert level.vertex(99) is None
    assert level.vertex(-1) is None


def test_seg_sidedefs_follow_direction(level):
    front, back = level.segs[0], level.segs[1]
    assert level.seg_sidedef(front) is level.sidedefs[0]
    assert level.seg_back_sidedef(front) is level.sidedefs[1]
    assert level.seg_sidedef(back) is level.sidedefs[1]
    assert level.seg_back_sidedef(back) is level.sidedefs[0]


def test_seg_sectors(level):
    assert level.seg_sector(level.segs[0]) is level.sectors[0]
    assert level.seg_back_sector(level.segs[0]) is level.sectors[1]
    assert level.seg_sector(level.segs[2]) is level.sectors[3]
    assert level.seg_back_sector(level.segs[2]) is None


def test_seg_vertices(level):
    assert level.seg_vertices(level.segs[0]) == (level.vertex(0), level.vertex(1))
    assert level.seg_vertices(level.segs[3]) is None


def test_sidedef_lookup_out_of_range(level):
    line = WadLinedef(0, 1, 0, 0, 0, 40, -1)
    assert level.right_sidedef(line) is None
    assert level.left_sidedef(line) is None
    assert level.left_sidedef(level.linedefs[0]) is level.sidedefs[1]


def test_subsector_segs(level):
    assert level.ssector_segs(level.ssector(0)) == level.segs[0:2]
    assert level.ssector_segs(level.ssector(1)) is None
    assert level.ssector(5) is None


def test_sector_id_uses_identity(level):
    assert level.sector_id(level.sectors[2]) == 2
    with pytest.raises(ValueError):
        level.sector_id(dataclasses.replace(level.sectors[0]))


def test_sector_id_with_equal_sectors():
    first = sector(0, 64, 100)
    twin = dataclasses.replace(first)
    level = Level([], [], [], [], [], [], [], [first, twin])
    assert level.sector_id(twin) == 1
    assert level.sector_id(first) == 0


def test_adjacent_sectors(level):
    adjacent = list(level.adjacent_sectors(level.sectors[0]))
    assert len(adjacent) == 2
    assert adjacent[0] is level.sectors[1]
    assert adjacent[1] is level.sectors[2]
    assert list(level.adjacent_sectors(level.sectors[3])) == []


def test_sector_min_light(level):
    assert level.sector_min_light(level.sectors[0]) == 96
    assert level.sector_min_light(level.sectors[3]) == 50
    assert level.sector_min_light(level.sectors[2]) == 160


def test_neighbour_heights(level):
    heights = level.neighbour_heights(level.sectors[0])
    assert heights.lowest_floor == -8
    assert heights.highest_floor == 16
    assert heights.next_floor == 16
    assert heights.lowest_ceiling == 120
    assert heights.highest_ceiling == 200


def test_neighbour_heights_without_higher_floor(level):
    heights = level.neighbour_heights(level.sectors[1])
    assert heights.next_floor is None
    assert heights.lowest_floor == 0
    assert level.neighbour_heights(level.sectors[3]) is None


META = """
sky = []
[animations]
flats = []
walls = []
[things]
decorations = []
weapons = []
powerups = []
artifacts = []
ammo = []
keys = []
monsters = []
"""


def build_wad(lumps):
    body = bytearray()
    directory = bytearray()
    for name, data in lumps:
        directory += struct.pack("<ii8s", 12 + len(body), len(data), name.ljust(8, b"\0"))
        body += data
    header = struct.pack("<4sii", b"IWAD", len(lumps), 12 + len(body))
    return header + bytes(body) + bytes(directory)


LEVEL_LUMPS = [
    (b"MAP01", b""),
    (b"THINGS", struct.pack("<hhhHH", 10, 20, 90, 1, 7)),
    (b"LINEDEFS", struct.pack("<HHHHHhh", 0, 1, 1, 0, 0, 0, -1)),
    (b"SIDEDEFS", struct.pack("<hh8s8s8sH", 0, 0, b"-", b"-", b"STARTAN3", 0)),
    (b"VERTEXES", struct.pack("<hhhh", 0, 0, 64, 0)),
    (b"SEGS", struct.pack("<HHHHHH", 0, 1, 0, 0, 0, 0)),
    (b"SSECTORS", struct.pack("<HH", 1, 0)),
    (b"NODES", struct.pack("<12h2H", *([0] * 12), 0x8000, 0x8000)),
    (b"SECTORS", struct.pack("<hh8s8shHH", 0, 128, b"FLOOR1", b"F_SKY1", 160, 0, 0)),
]


def test_from_archive(tmp_path):
    wad_path = tmp_path / "level.wad"
    wad_path.write_bytes(build_wad(LEVEL_LUMPS))
    meta_path = tmp_path / "meta.toml"
    meta_path.write_text(META)
    with Archive.open(wad_path, meta_path) as archive:
        level = Level.from_archive(archive, 0)
    assert level.things == [WadThing(10, 20, 90, 1, 7)]
    assert level.vertices == [WadVertex(0, 0), WadVertex(64, 0)]
    assert level.sidedefs[0].middle_texture == WadName("STARTAN3")
    assert level.sectors[0].ceiling_texture == WadName("F_SKY1")
    assert level.subsectors == [WadSubsector(1, 0)]
    assert level.nodes[0].left == 0x8000
    assert level.seg_sector(level.segs[0]) is level.sectors[0]


def test_from_archive_missing_lumps(tmp_path):
    wad_path = tmp_path / "short.wad"
    wad_path.write_bytes(build_wad(LEVEL_LUMPS[:5]))
    meta_path = tmp_path / "meta.toml"
    meta_path.write_text(META)
    with Archive.open(wad_path, meta_path) as archive:
        with pytest.raises(CorruptWadError):
            Level.from_archive(archive, 0)