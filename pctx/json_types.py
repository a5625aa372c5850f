"""Structured JSON response types."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pctx.formatter import FileEntry
from pctx.stats import Stats

PathInput = Union[str, "os.PathLike[str]"]


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    FILE_NOT_FOUND = "file_not_found"
    PERMISSION_DENIED = "permission_denied"
    BINARY_FILE = "binary_file"
    FILE_TOO_LARGE = "file_too_large"
    ENCODING_ERROR = "encoding_error"
    INVALID_PATTERN = "invalid_pattern"
    NO_FILES_MATCHED = "no_files_matched"
    OUTPUT_EXISTS = "output_exists"
    GIT_ERROR = "git_error"
    CONFIG_ERROR = "config_error"
    CLIPBOARD_ERROR = "clipboard_error"
    IO_ERROR = "io_error"
    JSON_ERROR = "json_error"
    WALK_ERROR = "walk_error"
    IGNORE_ERROR = "ignore_error"

    def __str__(self) -> str:
        return self.value


@dataclass
class FileInfo:
    """Flat information about one file."""

    path: str
    extension: str
    size_bytes: int
    line_count: int = 0
    truncated: bool = False
    truncated_lines: Optional[int] = None

    @classmethod
    def from_entry(cls, entry: FileEntry, absolute: bool = False) -> "FileInfo":
        """Build from a processed entry, using its absolute or relative path."""
        return cls(
            path=str(entry.absolute_path) if absolute else entry.relative_path,
            extension=entry.extension,
            size_bytes=entry.original_bytes,
            line_count=entry.original_lines,
            truncated=entry.truncated,
            truncated_lines=entry.truncated_lines if entry.truncated else None,
        )

    @classmethod
    def from_path(cls, path: PathInput) -> "FileInfo":
        """Build from a path on disk without reading its content.

        Raises OSError if the file cannot be inspected.
        """
        size = os.stat(path).st_size
        original = Path(os.fsdecode(path))
        try:
            canonical = Path(os.path.realpath(original, strict=True))
        except OSError:
            canonical = original
        try:
            shown = canonical.relative_to(Path.cwd())
        except (ValueError, OSError):
            shown = canonical
        return cls(
            path=str(shown),
            extension=original.suffix[1:],
            size_bytes=size,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "path": self.path,
            "extension": self.extension,
            "size_bytes": self.size_bytes,
        }
        if self.line_count != 0:
            result["line_count"] = self.line_count
        result["truncated"] = self.truncated
        if self.truncated_lines is not None:
            result["truncated_lines"] = self.truncated_lines
        return result


@dataclass
class StatsJson:
    """Statistics as reported in JSON responses."""

    file_count: int
    total_lines: int = 0
    total_bytes: int = 0
    truncated_count: int = 0
    skipped_count: int = 0
    token_estimate: Optional[int] = None
    duration_ms: int = 0

    @classmethod
    def from_stats(cls, stats: Stats) -> "StatsJson":
        return cls(
            file_count=stats.file_count,
            total_lines=stats.total_lines,
            total_bytes=stats.total_bytes,
            truncated_count=stats.truncated_count,
            skipped_count=stats.skipped_count,
            token_estimate=stats.token_estimate,
            duration_ms=stats.duration_ms,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "file_count": self.file_count,
            "total_lines": self.total_lines,
            "total_bytes": self.total_bytes,
            "truncated_count": self.truncated_count,
            "skipped_count": self.skipped_count,
        }
        if self.token_estimate is not None:
            result["token_estimate"] = self.token_estimate
        result["duration_ms"] = self.duration_ms
        return result


@dataclass
class ContextOutput:
    """Generated context together with the files it contains."""

    content: str
    format: str
    files: List[FileInfo] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "format": str(self.format),
            "files": [info.to_dict() for info in self.files],
        }


@dataclass
class TreeOutput:
    """A rendered file tree."""

    tree: str

    def to_dict(self) -> Dict[str, Any]:
        return {"tree": self.tree}


@dataclass
class FileError:
    """An error that affected a single file."""

    path: str
    code: Union[ErrorCode, str]
    message: str
    transient: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "code": str(self.code),
            "message": self.message,
            "transient": self.transient,
        }


ResponseData = Union[ContextOutput, TreeOutput, List[FileInfo]]


def _data_to_dict(data: ResponseData) -> Any:
    if isinstance(data, (ContextOutput, TreeOutput)):
        return data.to_dict()
    return [info.to_dict() for info in data]


@dataclass
class SuccessResponse:
    """A fully successful operation."""

    data: ResponseData
    stats: StatsJson

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "success",
            "data": _data_to_dict(self.data),
            "stats": self.stats.to_dict(),
        }


@dataclass
class ErrorResponse:
    """A failed operation."""

    code: Union[ErrorCode, str]
    message: str
    exit_code: int
    input: Optional[Any] = None
    suggestion: Optional[str] = None
    transient: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "status": "error",
            "code": str(self.code),
            "message": self.message,
        }
        if self.input is not None:
            result["input"] = self.input
        if self.suggestion is not None:
            result["suggestion"] = self.suggestion
        result["transient"] = self.transient
        result["exit_code"] = self.exit_code
        return result


@dataclass
class PartialResponse:
    """An operation in which some files failed."""

    data: ResponseData
    stats: StatsJson
    errors: List[FileError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "partial",
            "data": _data_to_dict(self.data),
            "stats": self.stats.to_dict(),
            "errors": [error.to_dict() for error in self.errors],
        }


JsonResponse = Union[SuccessResponse, ErrorResponse, PartialResponse]


def to_json(response: JsonResponse) -> str:
    """Serialize a response as pretty-printed JSON."""
    return json.dumps(response.to_dict(), indent=2, ensure_ascii=False)