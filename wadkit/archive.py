"""Random access to the lumps stored in an IWAD file."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from os import PathLike
from typing import Any, BinaryIO

from .errors import CorruptWadError, WadIOError
from .meta import WadMetadata
from .name import WadName, to_wad_name
from .types import WadInfo, WadLump

IWAD_HEADER = b"IWAD"

# A level's marker lump is directly followed by its THINGS lump.
_LEVEL_MARKER = b"THINGS\0\0"

_log = logging.getLogger(__name__)


def _lossy(value: bytes) -> str:
    return bytes(value).decode("utf-8", errors="replace")


@dataclass(frozen=True, slots=True)
class _LumpInfo:
    name: WadName
    offset: int
    size: int


def _read_directory(
    file: BinaryIO,
) -> tuple[list[_LumpInfo], dict[WadName, int], list[int]]:
    try:
        header = WadInfo.unpack(file.read(WadInfo.SIZE))
    except (CorruptWadError, OSError) as error:
        raise CorruptWadError("Could not read WAD header.") from error
    if header.identifier != IWAD_HEADER:
        raise CorruptWadError(
            f"Invalid header identifier: {_lossy(header.identifier)}"
        )

    try:
        if header.info_table_offset < 0:
            raise ValueError("negative offset")
        file.seek(header.info_table_offset)
    except (OSError, ValueError) as error:
        raise WadIOError(
            f"Seeking to `info_table_offset` at {header.info_table_offset} failed"
        ) from error

    lumps: list[_LumpInfo] = []
    index_map: dict[WadName, int] = {}
    levels: list[int] = []
    for i_lump in range(header.num_lumps):
        try:
            entry = WadLump.unpack(file.read(WadLump.SIZE))
        except (CorruptWadError, OSError) as error:
            raise CorruptWadError(f"Invalid lump info for lump {i_lump}") from error
        if entry.file_pos < 0 or entry.size < 0:
            raise CorruptWadError(f"Invalid lump info for lump {i_lump}")

        index_map[entry.name] = len(lumps)
        lumps.append(_LumpInfo(entry.name, entry.file_pos, entry.size))

        if entry.name == _LEVEL_MARKER:
            if i_lump == 0:
                raise CorruptWadError(
                    "Level data lump THINGS has no preceding level marker."
                )
            levels.append(i_lump - 1)
    return lumps, index_map, levels


class Archive:
    """An open WAD file together with the game metadata describing it."""

    def __init__(
        self,
        file: BinaryIO,
        lumps: list[_LumpInfo],
        index_map: dict[WadName, int],
        levels: list[int],
        metadata: WadMetadata,
    ) -> None:
        self._file = file
        self._lumps = lumps
        self._index_map = index_map
        self._levels = levels
        self.metadata = metadata

    @classmethod
    def open(
        cls, wad_path: str | PathLike[str], meta_path: str | PathLike[str]
    ) -> Archive:
        """Open a WAD file and load its metadata file."""
        _log.info("Loading wad file %r...", wad_path)
        try:
            file = open(wad_path, "rb")
        except OSError as error:
            raise WadIOError("Failed to open file.") from error
        try:
            lumps, index_map, levels = _read_directory(file)
            _log.info("Loading metadata file %r...", meta_path)
            metadata = WadMetadata.from_file(meta_path)
        except BaseException:
            file.close()
            raise
        return cls(file, lumps, index_map, levels, metadata)

    def close(self) -> None:
        """Close the underlying file."""
        self._file.close()

    def __enter__(self) -> Archive:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def num_levels(self) -> int:
        """The number of levels found in the WAD."""
        return len(self._levels)

    def level_lump(self, level_index: int) -> LumpReader:
        """The marker lump of the level with the given index."""
        return self.lump_by_index(self._levels[level_index])

    def required_named_lump(self, name: WadName | bytes | str) -> LumpReader:
        """The lump with the given name, raising CorruptWadError if absent."""
        wad_name = to_wad_name(name)
        lump = self.named_lump(wad_name)
        if lump is None:
            raise CorruptWadError(f"Missing required lump {wad_name!r}")
        return lump

    def named_lump(self, name: WadName | bytes | str) -> LumpReader | None:
        """The last lump with the given name, or None."""
        if isinstance(name, str):
            name = to_wad_name(name)
        index = self._index_map.get(name)
        return None if index is None else self.lump_by_index(index)

    def lump_by_index(self, index: int) -> LumpReader:
        """The lump at a position in the directory."""
        if not 0 <= index < len(self._lumps):
            raise CorruptWadError(f"Missing required lump {index}")
        info = self._lumps[index]
        return LumpReader(self, index, info.name, info.offset, info.size)

    def _read_at(self, index: int, name: WadName, offset: int, size: int) -> bytes:
        try:
            self._file.seek(offset)
        except (OSError, ValueError) as error:
            raise WadIOError(f"Seeking to lump {index}, `{name}` failed") from error
        try:
            return self._file.read(size)
        except (OSError, ValueError) as error:
            raise WadIOError(f"Reading lump {index}, `{name}` failed") from error


@dataclass(frozen=True)
class LumpReader:
    """A handle to one lump of an archive, decoding its contents on demand."""

    archive: Archive
    index: int
    name: WadName
    offset: int
    size: int

    def is_virtual(self) -> bool:
        """True for marker lumps that hold no data."""
        return self.size == 0

    def decode_vec(self, record_type: Any) -> list[Any]:
        """Decode the lump as a packed array of fixed-size records."""
        element_size = record_type.SIZE
        if self.size <= 0 or self.size % element_size:
            raise self._bad_size(element_size)
        data = self._read()
        records = []
        for i_element, start in enumerate(range(0, self.size, element_size)):
            try:
                records.append(record_type.unpack(data[start : start + element_size]))
            except CorruptWadError as error:
                raise self._bad_element(i_element) from error
        return records

    def decode_one(self, record_type: Any) -> Any:
        """Decode the lump as exactly one fixed-size record."""
        element_size = record_type.SIZE
        if element_size <= 0 or self.size != element_size:
            raise self._bad_size(element_size)
        try:
            return record_type.unpack(self._read())
        except CorruptWadError as error:
            raise self._bad_element(0) from error

    def read_blobs(self, blob_type: Any) -> list[Any]:
        """Split the lump into fixed-size blobs such as palettes or colormaps."""
        blob_size = blob_type.SIZE
        if self.size <= 0 or self.size % blob_size:
            raise self._bad_size(blob_size)
        data = self._read()
        if len(data) < self.size:
            raise self._reading_failed()
        return [
            blob_type.unpack(data[start : start + blob_size])
            for start in range(0, self.size, blob_size)
        ]

    def read_bytes(self) -> bytes:
        """The raw contents of the lump."""
        data = self._read()
        if len(data) < self.size:
            raise self._reading_failed()
        return data

    def _read(self) -> bytes:
        return self.archive._read_at(self.index, self.name, self.offset, self.size)

    def _reading_failed(self) -> WadIOError:
        return WadIOError(f"Reading lump {self.index}, `{self.name}` failed")

    def _bad_element(self, i_element: int) -> CorruptWadError:
        return CorruptWadError(
            f"Invalid element {i_element} in lump `{self.name}` (index={self.index})"
        )

    def _bad_size(self, element_size: int) -> CorruptWadError:
        return CorruptWadError(
            f"Invalid lump size in `{self.name}` (index={self.index}): "
            f"total={self.size}, element={element_size}, "
            f"div={self.size // element_size}, mod={self.size % element_size}"
        )