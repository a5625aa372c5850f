"""Binary file detection by extension, magic bytes and content sniffing."""

from __future__ import annotations

import os
from pathlib import PurePath
from typing import Union

PathInput = Union[str, "os.PathLike[str]"]

_SNIFF_SIZE = 8192

# Magic bytes of common binary formats.
BINARY_SIGNATURES: tuple[bytes, ...] = (
    # Images
    b"\x89PNG",
    b"\xff\xd8\xff",
    b"GIF8",
    b"BM",
    b"\x00\x00\x01\x00",
    b"RIFF",
    # Archives
    b"PK\x03\x04",
    b"\x1f\x8b",
    b"BZh",
    b"\xfd7zX",
    b"Rar!",
    b"7z\xbc\xaf",
    # Executables
    b"\x7fELF",
    b"MZ",
    b"\xcf\xfa\xed\xfe",
    b"\xce\xfa\xed\xfe",
    b"\xca\xfe\xba\xbe",
    # Documents
    b"%PDF",
    b"\xd0\xcf\x11\xe0",
    # Media
    b"ID3",
    b"\xff\xfb",
    b"OggS",
    # Fonts
    b"\x00\x01\x00\x00",
    b"OTTO",
    # Database
    b"SQLi",
)

# Extensions that are always treated as binary.
BINARY_EXTENSIONS: frozenset[str] = frozenset(
    {
        # Images
        "png", "jpg", "jpeg", "gif", "bmp", "ico", "webp", "tiff", "tif", "psd", "svg",
        # Archives
        "zip", "tar", "gz", "bz2", "xz", "7z", "rar", "jar", "war", "ear",
        # Executables
        "exe", "dll", "so", "dylib", "bin", "o", "a", "lib", "pyc", "pyo", "class",
        # Documents
        "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "odt", "ods", "odp",
        # Media
        "mp3", "mp4", "avi", "mkv", "mov", "wmv", "flv", "wav", "flac", "ogg", "m4a",
        # Fonts
        "ttf", "otf", "woff", "woff2", "eot",
        # Other
        "db", "sqlite", "sqlite3", "pickle", "npy", "npz",
    }
)


def _is_non_printable(byte: int) -> bool:
    # Anything below space except tab, newline, vertical tab, form feed and CR, plus DEL.
    return byte < 0x09 or 0x0D < byte < 0x20 or byte == 0x7F


def is_binary(path: PathInput) -> bool:
    """Return True if the file looks binary, checking the extension first."""
    suffix = PurePath(os.fsdecode(path)).suffix
    if suffix and suffix[1:].lower() in BINARY_EXTENSIONS:
        return True
    return is_binary_content(path)


def is_binary_content(path: PathInput) -> bool:
    """Return True if the first bytes of the file look like binary data.

    Files that cannot be opened or read are reported as not binary, so that
    later stages can report the error.
    """
    try:
        with open(path, "rb") as handle:
            content = handle.read(_SNIFF_SIZE)
    except OSError:
        return False

    if not content:
        return False

    if content.startswith(BINARY_SIGNATURES):
        return True

    if b"\x00" in content:
        return True

    non_printable = sum(1 for byte in content if _is_non_printable(byte))
    return non_printable * 10 > len(content)