"""Exception hierarchy for WAD and metadata loading."""

from __future__ import annotations


class WadError(Exception):
    """Base class of every error raised while reading WAD data or metadata."""

    prefix = "WAD error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.prefix}: {self.detail}"


class CorruptMetadataError(WadError):
    """The metadata file could not be parsed or holds invalid values."""

    prefix = "Corrupt metadata file"


class CorruptWadError(WadError):
    """The WAD file holds malformed or inconsistent data."""

    prefix = "Corrupt WAD file"


class WadIOError(WadError):
    """Reading from or seeking in a WAD or metadata file failed."""

    prefix = "I/O WAD error"