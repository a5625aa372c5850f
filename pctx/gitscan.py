"""Git-aware file discovery."""

from __future__ import annotations

import os
import stat
import subprocess
from pathlib import Path
from typing import Iterator, List, Union

from pctx.binary import is_binary
from pctx.walker import ScanOptions

PathInput = Union[str, "os.PathLike[str]"]

_LS_FILES = ("git", "ls-files", "-z", "--cached", "--others", "--exclude-standard")


class GitError(RuntimeError):
    """Git could not be run or reported a failure."""

    code = "git_error"


def is_inside_git_repo(path: PathInput) -> bool:
    """Return True if path or one of its ancestors holds a ``.git`` entry."""
    current = Path(path)
    if current.is_file():
        current = current.parent
    while True:
        if (current / ".git").exists():
            return True
        parent = current.parent
        if parent == current:
            return False
        current = parent


def _is_regular_file(path: Path) -> bool:
    try:
        return stat.S_ISREG(os.lstat(path).st_mode)
    except OSError:
        return False


def _listed_files(root: Path, listing: bytes, options: ScanOptions) -> Iterator[Path]:
    for item in listing.split(b"\x00"):
        if not item:
            continue
        path = root / item.decode("utf-8", errors="replace")
        if not options.include_hidden and any(part.startswith(".") for part in path.parts):
            continue
        if options.max_depth is not None:
            if len(path.relative_to(root).parts) > options.max_depth:
                continue
        if _is_regular_file(path) and not is_binary(path):
            yield path


def scan_git_repo(directory: PathInput, options: ScanOptions) -> List[Path]:
    """List tracked and untracked, not ignored, text files of a repository.

    Raises GitError if git cannot be started or fails.
    """
    root = Path(directory)
    try:
        completed = subprocess.run(list(_LS_FILES), cwd=root, capture_output=True, check=False)
    except OSError as error:
        raise GitError(f"Failed to run git: {error}") from error
    if completed.returncode != 0:
        stderr = completed.stderr.decode("utf-8", errors="replace")
        raise GitError(f"git ls-files failed: {stderr}")
    return list(_listed_files(root, completed.stdout, options))