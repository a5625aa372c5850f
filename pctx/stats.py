"""Statistics about the files gathered into a context."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from pctx.formatter import FileEntry

_RULE = "─" * 40

_KB = 1024
_MB = _KB * 1024
_GB = _MB * 1024


def format_number(n: int) -> str:
    """Format an integer with comma thousand separators."""
    return f"{n:,}"


def format_bytes(n: int) -> str:
    """Format a byte count as a human-readable size."""
    for unit, size in (("GB", _GB), ("MB", _MB), ("KB", _KB)):
        if n >= size:
            return f"{n / size:.2f} {unit}"
    return f"{n} bytes"


@dataclass
class Stats:
    """Counters collected while processing files."""

    file_count: int = 0
    total_lines: int = 0
    total_bytes: int = 0
    truncated_count: int = 0
    skipped_count: int = 0
    token_estimate: Optional[int] = None
    duration_ms: int = 0

    def add_file(self, entry: FileEntry) -> None:
        """Add one processed file to the counters."""
        self.file_count += 1
        self.total_lines += entry.original_lines
        self.total_bytes += entry.original_bytes
        if entry.truncated:
            self.truncated_count += 1

    def estimate_tokens(self, content: str, model: str = "gpt-4") -> None:
        """Estimate the token count of content at about four bytes per token.

        The model name is accepted for every model; the estimate is the same.
        """
        self.token_estimate = len(content.encode("utf-8")) // 4

    def summary(self) -> str:
        """Return the statistics block as text."""
        lines: List[str] = [
            "",
            _RULE,
            "Statistics",
            _RULE,
            f"  Files:      {self.file_count}",
            f"  Lines:      {format_number(self.total_lines)}",
            f"  Size:       {format_bytes(self.total_bytes)}",
        ]
        if self.truncated_count > 0:
            lines.append(f"  Truncated:  {self.truncated_count}")
        if self.token_estimate is not None:
            lines.append(f"  Tokens:     ~{format_number(self.token_estimate)}")
        if self.duration_ms > 0:
            lines.append(f"  Duration:   {self.duration_ms}ms")
        lines.append(_RULE)
        return "\n".join(lines) + "\n"

    def print_summary(self, stream: Optional[TextIO] = None) -> None:
        """Write the statistics block to stream, standard error by default."""
        target = sys.stderr if stream is None else stream
        target.write(self.summary())
        target.flush()