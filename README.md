# wadkit

`wadkit` reads the data in a classic IWAD archive, along with a TOML
metadata file that describes skies, animations, things and linedef
specials. It uses only the Python standard library and needs Python 3.11
or newer.

## Modules

- `wadkit.archive`: `Archive.open(wad_path, meta_path)` opens a WAD file,
  reads its lump directory and loads the metadata into `Archive.metadata`.
  An `Archive` is a context manager. You can also call `close()` yourself.
  It finds lumps with `named_lump` (which returns `None` when the lump is
  absent), `required_named_lump` (which raises when the lump is absent) and
  `lump_by_index`. It counts levels with `num_levels` and returns a level's
  marker lump with `level_lump`. Any lump directly before a `THINGS` lump
  counts as a level marker.
- `LumpReader` is the handle these methods return. It has `index`, `name`,
  `offset` and `size`, plus `is_virtual()` for empty marker lumps. Its
  decoding methods are:
  - `decode_vec(record_type)` decodes the lump as a packed array of records.
  - `decode_one(record_type)` decodes the lump as exactly one record.
  - `read_blobs(blob_type)` splits the lump into fixed-size blobs such as
    `Palette` or `Colormap`.
  - `read_bytes()` returns the raw contents.
- `wadkit.name`: `WadName` is the 8-byte, upper-cased, NUL-padded lump name.
  - Build one with `WadName.from_bytes`, `WadName.from_str` or `to_wad_name`.
  - `pushed(byte)` returns a copy with one more character.
  - `raw()` returns the eight raw bytes.
  - A name compares equal to its raw bytes.
  - Invalid characters and names longer than eight bytes raise
    `CorruptWadError`.
- `wadkit.types`: the on-disk records, each with an `unpack(data)` class
  method and a `SIZE`. The records are `WadInfo`, `WadLump`, `WadThing`,
  `WadVertex`, `WadLinedef`, `WadSidedef`, `WadSector`, `WadSubsector`,
  `WadSeg`, `WadNode`, `WadTextureHeader`, `WadTexturePatchRef`, `Palette`
  and `Colormap`. `WadLinedef` also has flag helpers such as `impassable()`,
  `is_two_sided()` and `lower_unpegged()`.
- `wadkit.util`: unit conversions (`from_wad_height`, `to_wad_height`,
  `from_wad_coords`), `parse_child_id` for BSP child ids, and
  `is_untextured` / `is_sky_flat` for special names.
- `wadkit.level`: `Level.from_archive(wad, index)` loads one map's
  geometry. `Level` answers questions about it:
  - the linedef, vertices, sidedefs and sectors of a seg;
  - the segs of a subsector;
  - `sector_id`;
  - `adjacent_sectors`;
  - `sector_min_light`;
  - `neighbour_heights`, which returns a `NeighbourHeights`.
- `wadkit.light`: `new_light(level, sector)` works out a sector's light
  level in `[0, 1]`. For flashing, flickering, strobing and glowing sector
  types it also returns a `LightEffect`. `with_contrast(info, Contrast.DARKEN)`
  or `Contrast.BRIGHTEN` nudges the level and clamps it to `[0, 1]`.
- `wadkit.image`: `Image(width, height)` makes a blank image and
  `Image.from_header(header)` makes one sized from a `WadTextureHeader`.
  `Image.from_buffer(data)` decodes a column-based patch or sprite picture.
  `blit(source, offset, ignore_transparency)` copies one image onto another
  and clips it to the destination's bounds. Images are at most 4096 pixels
  in each direction.
- `wadkit.meta`: `WadMetadata.from_file(path)` or `WadMetadata.from_text(text)`
  loads the TOML metadata. `sky_for(name)` picks a level's sky and falls
  back to the first sky listed. `find_thing(thing_type)` finds a thing's
  metadata in any category.
- `wadkit.errors`: every failure is a `WadError`, raised as one of
  `CorruptWadError`, `CorruptMetadataError` or `WadIOError`.

## Example

```python
from wadkit.archive import Archive
from wadkit.image import Image
from wadkit.level import Level
from wadkit.light import new_light
from wadkit.name import WadName
from wadkit.types import Palette

with Archive.open("doom2.wad", "doom2.toml") as wad:
    print(wad.num_levels(), "levels")

    level = Level.from_archive(wad, 0)
    for sector in level.sectors:
        light = new_light(level, sector)
        print(level.sector_id(sector), light.level, light.effect)

    palettes = wad.required_named_lump("PLAYPAL").read_blobs(Palette)
    patch = Image.from_buffer(wad.required_named_lump("WALL00_1").read_bytes())
    print(len(palettes), patch.size())

    sky = wad.metadata.sky_for(WadName.from_str("MAP01"))
```

## Metadata file

The metadata is TOML with these parts:

- an array of `[[sky]]` tables, each with `level_pattern`, `texture_name`
  and `tiled_band_size`;
- an `[animations]` table with `flats` and `walls` lists of frame names;
- a `[things]` table with `decorations`, `weapons`, `powerups`, `artifacts`,
  `ammo`, `keys` and `monsters` lists;
- an optional `[[linedef]]` array describing each linedef special: its
  trigger, `move` effect and `exit`.

## What it does not do

`wadkit` decodes single patch and sprite images. It does not assemble the
composite wall textures described by the `TEXTURE1`/`TEXTURE2` and `PNAMES`
lumps, collect sprites or flats into a directory, or pack images into texture
atlases. It reads levels but does not walk their BSP tree or produce
renderable geometry.

## Errors

The following all raise a subclass of `wadkit.errors.WadError`, so one
`except WadError` covers them:

- broken headers;
- bad lump sizes;
- invalid names;
- missing required lumps;
- malformed images;
- unreadable or invalid metadata.