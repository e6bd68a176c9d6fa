import pytest

from wadkit.errors import CorruptMetadataError, WadIOError
from wadkit.meta import (
    ExitEffectDef,
    HeightRef,
    TriggerType,
    WadMetadata,
)
from wadkit.name import WadName

SOURCE_METADATA = r"""
[[sky]]
    level_pattern = "MAP(0[1-9]|10|11)"
    texture_name = "SKY1"
    tiled_band_size = 0.15
[[sky]]
    level_pattern = "MAP(1[2-9]|20)"
    texture_name = "SKY2"
    tiled_band_size = 0.15
[[sky]]
    level_pattern = "MAP(2[1-9]|32)"
    texture_name = "SKY3"
    tiled_band_size = 0.15
[animations]
    flats = [
        ["NUKAGE1", "NUKAGE2", "NUKAGE3"],
        [],
    ]
    walls = [
        [],
        ["DBRAIN1", "DBRAIN2", "DBRAIN3",  "DBRAIN4"],
    ]
[things]
    [[things.decorations]]
        thing_type = 10
        radius = 16
        sprite = "PLAY"
        sequence = "W"
        obstacle = false
        hanging = false

    [[things.decorations]]
        thing_type = 12
        radius = 8
        sprite = "PLAY"
        sequence = "W"
        obstacle = false
        hanging = false

    [[things.weapons]]
        # BFG 9000
        thing_type = 2006
        radius = 20
        sprite = "BFUG"
        sequence = "A"
        hanging = false

    [[things.artifacts]]
        # Computer map
        thing_type = 2026
        radius = 20
        sprite = "PMAP"
        sequence = "ABCDCB"
        hanging = false

    [[things.ammo]]
        # Box of ammo
        thing_type = 2048
        radius = 20
        sprite = "AMMO"
        sequence = "A"
        hanging = false

    [[things.powerups]]
        # Backpack
        thing_type = 8
        radius = 20
        sprite = "BPAK"
        sequence = "A"
        hanging = false

    [[things.keys]]
        # Red keycard
        thing_type = 13
        radius = 20
        sprite = "RKEY"
        sequence = "AB"
        hanging = false

    [[things.monsters]]
        # Baron of Hell
        thing_type = 3003
        radius = 24
        sprite = "BOSS"
        sequence = "A"
        hanging = false
"""

MINIMAL = """
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


@pytest.fixture
def meta():
    return WadMetadata.from_text(SOURCE_METADATA)


def test_wad_metadata_parses(meta):
    assert [str(sky.texture_name) for sky in meta.sky] == ["SKY1", "SKY2", "SKY3"]
    assert meta.sky[0].tiled_band_size == pytest.approx(0.15)
    assert meta.animations.flats == [
        [WadName("NUKAGE1"), WadName("NUKAGE2"), WadName("NUKAGE3")],
        [],
    ]
    assert meta.animations.walls[0] == []
    assert [str(n) for n in meta.animations.walls[1]] == [
        "DBRAIN1",
        "DBRAIN2",
        "DBRAIN3",
        "DBRAIN4",
    ]
    assert meta.linedef == {}


def test_sky_for_matches_pattern(meta):
    assert meta.sky_for(WadName("MAP05")).texture_name == WadName("SKY1")
    assert meta.sky_for(WadName("MAP15")).texture_name == WadName("SKY2")
    assert meta.sky_for(WadName("MAP32")).texture_name == WadName("SKY3")


def test_sky_for_falls_back_to_first(meta):
    assert meta.sky_for(WadName("E1M1")).texture_name == WadName("SKY1")


def test_sky_for_without_skies():
    assert WadMetadata.from_text(MINIMAL).sky_for(WadName("MAP01")) is None


def test_find_thing_in_each_category(meta):
    assert meta.find_thing(10).radius == 16
    assert meta.find_thing(12).radius == 8
    assert meta.find_thing(2006).sprite == WadName("BFUG")
    assert meta.find_thing(2026).sequence == "ABCDCB"
    assert meta.find_thing(2048).sprite == WadName("AMMO")
    assert meta.find_thing(8).sprite == WadName("BPAK")
    assert meta.find_thing(13).sequence == "AB"
    assert meta.find_thing(3003).sprite == WadName("BOSS")
    assert meta.find_thing(9999) is None


def test_linedefs_parse_with_defaults_and_effects():
    text = MINIMAL + """
[[linedef]]
special_type = 1
trigger = "Push"
monsters = true
move = { ceiling = { first = { to = "LowestCeiling", off = -4 } }, wait = 4.0, speed = 16, repeat = true }

[[linedef]]
special_type = 11
trigger = "Switch"
only_once = true
exit = "Normal"
"""
    meta = WadMetadata.from_text(text)
    assert list(meta.linedef) == [1, 11]

    door = meta.linedef[1]
    assert door.trigger is TriggerType.PUSH
    assert door.monsters is True
    assert door.only_once is False
    assert door.exit_effect is None
    move = door.move_effect
    assert move.floor is None
    assert move.ceiling.first.to is HeightRef.LOWEST_CEILING
    assert move.ceiling.first.offset == -4
    assert move.ceiling.second is None
    assert move.repeat is True
    assert move.wait == pytest.approx(4.0)
    assert move.speed == pytest.approx(16 / 8.0 * 0.7)

    exit_line = meta.linedef[11]
    assert exit_line.trigger is TriggerType.SWITCH
    assert exit_line.only_once is True
    assert exit_line.monsters is False
    assert exit_line.exit_effect is ExitEffectDef.NORMAL
    assert exit_line.move_effect is None


def test_move_defaults():
    text = MINIMAL + """
[[linedef]]
special_type = 2
trigger = "WalkOver"
move = { floor = { first = { to = "NextFloor" }, second = { to = "Floor" } } }
"""
    move = WadMetadata.from_text(text).linedef[2].move_effect
    assert move.floor.first.offset == 0
    assert move.floor.second.to is HeightRef.FLOOR
    assert (move.repeat, move.wait, move.speed) == (False, 0.0, 0.0)


def test_duplicate_linedef_keeps_last_definition():
    text = MINIMAL + """
[[linedef]]
special_type = 5
trigger = "Gun"
only_once = true
[[linedef]]
special_type = 5
trigger = "Any"
"""
    meta = WadMetadata.from_text(text)
    assert list(meta.linedef) == [5]
    assert meta.linedef[5].trigger == TriggerType.ANY
    assert meta.linedef[5].only_once is False
    assert meta.linedef[5].special_type == 5


@pytest.mark.parametrize(
    "text",
    [
        "this is [not toml",
        MINIMAL.replace("sky = []", ""),
        MINIMAL.replace("monsters = []", ""),
        MINIMAL.replace("sky = []", 'sky = [{ level_pattern = "(", texture_name = "SKY1", tiled_band_size = 1.0 }]'),
        MINIMAL.replace("sky = []", 'sky = [{ level_pattern = "MAP", texture_name = "$$BAD", tiled_band_size = 1.0 }]'),
        MINIMAL.replace("walls = []", 'walls = [["TOOLONGNAME"]]'),
        MINIMAL + '[[linedef]]\nspecial_type = 1\ntrigger = "Sometimes"\n',
        MINIMAL + '[[linedef]]\nspecial_type = 70000\ntrigger = "Any"\n',
        MINIMAL + '[[linedef]]\nspecial_type = 1\ntrigger = "Any"\nmonsters = 1\n',
    ],
)
def test_invalid_metadata(text):
    with pytest.raises(CorruptMetadataError, match="Failed to parse metadata file"):
        WadMetadata.from_text(text)


def test_from_file(tmp_path):
    path = tmp_path / "meta.toml"
    path.write_text(SOURCE_METADATA, encoding="utf-8")
    meta = WadMetadata.from_file(path)
    assert meta.find_thing(3003).radius == 24


def test_from_file_missing(tmp_path):
    with pytest.raises(WadIOError, match="Failed to load metadata"):
        WadMetadata.from_file(tmp_path / "absent.toml")