"""Read IWAD archives: lumps, names, records, levels, lighting, patch images and metadata."""

__version__ = "0.1.0"

__all__ = [
    "archive",
    "errors",
    "image",
    "level",
    "light",
    "meta",
    "name",
    "types",
    "util",
]