"""Helpers for converting WAD units and recognising special names."""

from __future__ import annotations

from .name import WadName

_SKY_FLAT = b"F_SKY1\0\0"


def is_untextured(name: WadName) -> bool:
    """True for the "-" placeholder meaning no texture."""
    raw = name.raw()
    return raw[0] == ord("-") and raw[1] == 0


def is_sky_flat(name: WadName) -> bool:
    """True for the flat that marks open sky."""
    return name == _SKY_FLAT


def from_wad_height(x: int) -> float:
    """Convert a WAD coordinate to world units."""
    return x / 100.0


def to_wad_height(x: float) -> float:
    """Convert world units back to WAD coordinates."""
    return x * 100.0


def from_wad_coords(x: int, y: int) -> tuple[float, float]:
    """Convert a WAD map position to a world-space 2D point."""
    return (-from_wad_height(y), -from_wad_height(x))


def parse_child_id(child_id: int) -> tuple[int, bool]:
    """Split a BSP child id into its index and whether it names a subsector."""
    return child_id & 0x7FFF, child_id & 0x8000 != 0