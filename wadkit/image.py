"""Paletted images decoded from WAD patch and sprite lumps."""

from __future__ import annotations

import logging
import struct

from .errors import CorruptWadError
from .types import WadTextureHeader

MAX_IMAGE_SIZE = 4096

_log = logging.getLogger(__name__)

_SIZE = struct.Struct("<HH")
_OFFSETS = struct.Struct("<hh")
_COLUMN_OFFSET = struct.Struct("<I")
_HEADER_SIZE = _SIZE.size + _OFFSETS.size

# Pixels with the high bit set are transparent.
_NEW_PIXEL = 0xFF00
_EMPTY_PIXEL = 0xFFFF
_END_OF_COLUMN = 255


def _ensure_fits(width: int, height: int) -> None:
    if width > MAX_IMAGE_SIZE or height > MAX_IMAGE_SIZE:
        raise CorruptWadError(f"Image too large {width}x{height}.")


def _unfinished_column(
    i_column: int, i_run: int | None, width: int, height: int
) -> CorruptWadError:
    run = "None" if i_run is None else f"Some({i_run})"
    return CorruptWadError(
        f"Unfinished column {i_column} in run {run}, "
        f"in image of size {width}x{height}"
    )


class Image:
    """A width x height grid of 16-bit pixels: a palette index or transparent."""

    def __init__(self, width: int, height: int) -> None:
        _ensure_fits(width, height)
        self.width = width
        self.height = height
        self.x_offset = 0
        self.y_offset = 0
        self.pixels: list[int] = [_NEW_PIXEL] * (width * height)

    @classmethod
    def from_header(cls, header: WadTextureHeader) -> Image:
        """Create a blank image sized by a composite texture header."""
        return cls(header.width, header.height)

    @classmethod
    def from_buffer(cls, buffer: bytes) -> Image:
        """Decode a column-based patch image, raising CorruptWadError if malformed."""
        buffer = bytes(buffer)
        size = len(buffer)
        if size < 2:
            raise CorruptWadError("Image missing width.")
        if size < 4:
            raise CorruptWadError("Image missing height.")
        width, height = _SIZE.unpack_from(buffer)
        _ensure_fits(width, height)
        if size < 6:
            raise CorruptWadError("Image missing x offset")
        if size < 8:
            raise CorruptWadError("Image missing y offset")
        x_offset, y_offset = _OFFSETS.unpack_from(buffer, _SIZE.size)

        image = cls(width, height)
        image.x_offset = x_offset
        image.y_offset = y_offset
        pixels = [_EMPTY_PIXEL] * (width * height)

        for i_column in range(width):
            position = _HEADER_SIZE + i_column * _COLUMN_OFFSET.size
            if position + _COLUMN_OFFSET.size > size:
                raise _unfinished_column(i_column, None, width, height)
            (offset,) = _COLUMN_OFFSET.unpack_from(buffer, position)
            if offset >= size:
                raise CorruptWadError(
                    f"Invalid image column offset in {i_column}, "
                    f"offset={offset}, size={size}."
                )
            cursor = offset
            i_run = 0
            while True:
                if cursor >= size:
                    raise _unfinished_column(i_column, i_run, width, height)
                row_start = buffer[cursor]
                cursor += 1
                if row_start == _END_OF_COLUMN:
                    break

                if cursor >= size:
                    raise CorruptWadError(
                        f"Missing image run length: column {i_column}, run {i_run}"
                    )
                run_length = buffer[cursor]
                cursor += 1

                if row_start + run_length > height:
                    raise CorruptWadError(
                        f"Image run too big: column {i_column}, run {i_run} "
                        f"({row_start} +{run_length}), size {width}x{height}"
                    )

                if cursor >= size:
                    raise CorruptWadError(
                        f"Image missing padding byte 1: column {i_column}, run {i_run}"
                    )
                cursor += 1

                bytes_left = size - cursor
                if bytes_left < run_length:
                    raise CorruptWadError(
                        f"Image source underrun: column {i_column}, run {i_run} "
                        f"({row_start}, +{run_length}), bytes left {bytes_left}"
                    )
                start = row_start * width + i_column
                pixels[start : start + run_length * width : width] = list(
                    buffer[cursor : cursor + run_length]
                )
                cursor += run_length

                if cursor >= size:
                    raise CorruptWadError(
                        f"Image missing padding byte 2: column {i_column}, run {i_run}"
                    )
                cursor += 1
                i_run += 1

        image.pixels = pixels
        return image

    def blit(
        self, source: Image, offset: tuple[int, int], ignore_transparency: bool
    ) -> None:
        """Copy source into this image at offset, clipping to the bounds.

        Unless ignore_transparency is set, transparent source pixels leave the
        destination untouched.
        """
        off_x, off_y = offset
        if off_x >= self.width or off_y >= self.height:
            _log.warning(
                "Fully out of bounds blit %r in %dx%d", offset, self.width, self.height
            )
            return

        y_start = -off_y if off_y < 0 else 0
        x_start = -off_x if off_x < 0 else 0
        y_end = (
            source.height
            if self.height > source.height + off_y
            else self.height - off_y
        )
        x_end = (
            source.width if self.width > source.width + off_x else self.width - off_x
        )
        _log.debug(
            "Blit %dx%d <- %dx%d +%dx%d (%dx%d - %dx%d)",
            self.width,
            self.height,
            source.width,
            source.height,
            off_x,
            off_y,
            x_start,
            x_end,
            y_start,
            y_end,
        )

        copy_width = x_end - x_start
        if copy_width <= 0 or y_end <= y_start:
            _log.warning(
                "Fully out of bounds blit %r in %dx%d", offset, self.width, self.height
            )
            return

        for src_y in range(y_start, y_end):
            src_begin = src_y * source.width + x_start
            dest_begin = (src_y + off_y) * self.width + x_start + off_x
            src_row = source.pixels[src_begin : src_begin + copy_width]
            dest_slice = slice(dest_begin, dest_begin + copy_width)
            if ignore_transparency:
                self.pixels[dest_slice] = src_row
            else:
                self.pixels[dest_slice] = [
                    dest if src >> 15 else src
                    for src, dest in zip(src_row, self.pixels[dest_slice])
                ]

    def size(self) -> tuple[int, int]:
        """The (width, height) of the image."""
        return (self.width, self.height)

    def num_pixels(self) -> int:
        """The total number of pixels."""
        return len(self.pixels)