"""Discovery of the files to include in a context."""

from __future__ import annotations

import errno
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from pctx.gitscan import GitError, is_inside_git_repo, scan_git_repo
from pctx.patterns import PatternMatcher
from pctx.walker import ScanOptions, scan_directory

PathInput = Union[str, "os.PathLike[str]"]


@dataclass
class ScanResult:
    """Files found by a scan, sorted and unique, and per-path errors."""

    files: List[Path] = field(default_factory=list)
    errors: List[Tuple[Path, Exception]] = field(default_factory=list)


def _canonicalize(path: Path) -> Optional[Path]:
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return None


def _not_found(path: Path) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, "File not found", str(path))


class Scanner:
    """Finds files under the configured paths and applies user filters."""

    def __init__(self, options: ScanOptions) -> None:
        self.options = options
        self._matcher = PatternMatcher(options.exclude_patterns, options.include_patterns)
        self._base_paths = [
            canonical for canonical in map(_canonicalize, options.paths) if canonical is not None
        ]

    def scan(self) -> ScanResult:
        """Scan the configured paths."""
        return self._collect(self.options.paths, from_list=False)

    def scan_paths(self, paths: Iterable[PathInput]) -> ScanResult:
        """Scan an explicit list of paths, such as one read from standard input."""
        return self._collect((Path(path) for path in paths), from_list=True)

    def _collect(self, paths: Iterable[Path], from_list: bool) -> ScanResult:
        found: List[Path] = []
        errors: List[Tuple[Path, Exception]] = []

        for path in paths:
            if not path.exists():
                error = _not_found(path)
                if self.options.verbose:
                    if from_list:
                        print(f"Warning: file not found, skipping: {path}", file=sys.stderr)
                    else:
                        print(f"Warning: {error}", file=sys.stderr)
                errors.append((path, error))
                continue

            canonical = _canonicalize(path) or path
            if canonical.is_file():
                if self._should_include(canonical):
                    found.append(canonical)
            elif canonical.is_dir():
                found.extend(file for file in self._discover(canonical) if self._should_include(file))

        return ScanResult(files=sorted(set(found)), errors=errors)

    def _discover(self, directory: Path) -> List[Path]:
        if self.options.use_gitignore and is_inside_git_repo(directory):
            try:
                return scan_git_repo(directory, self.options)
            except GitError as error:
                if self.options.verbose:
                    print(
                        f"Warning: git scan failed ({error}), falling back to directory walk",
                        file=sys.stderr,
                    )
        return scan_directory(directory, self.options)

    def _relative(self, path: Path) -> Path:
        for base in self._base_paths:
            try:
                return path.relative_to(base)
            except ValueError:
                continue
        try:
            return path.relative_to(Path.cwd())
        except (ValueError, OSError):
            return path

    def _should_include(self, path: Path) -> bool:
        relative = self._relative(path)
        if self._matcher.is_excluded(relative):
            return False
        if not self._matcher.is_included(relative):
            return False
        try:
            size = os.stat(path).st_size
        except OSError:
            return True
        return size <= self.options.max_file_size