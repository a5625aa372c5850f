"""Writing generated output to files and standard output."""

from __future__ import annotations

import os
import sys
from typing import Union

PathInput = Union[str, "os.PathLike[str]"]


class OutputExistsError(FileExistsError):
    """The output file exists and overwriting was not requested."""

    code = "output_exists"

    def __init__(self, path: PathInput) -> None:
        self.output_path = os.fsdecode(path)
        super().__init__(f"Output file already exists: {self.output_path}")


class OutputPermissionError(PermissionError):
    """The output file could not be written for lack of permission."""

    code = "permission_denied"

    def __init__(self, path: PathInput) -> None:
        self.output_path = os.fsdecode(path)
        super().__init__(f"Permission denied: {self.output_path}")


def write_file(path: PathInput, content: str, force: bool = False) -> None:
    """Write content to path as UTF-8.

    Without force the file is created atomically and an existing file raises
    OutputExistsError; with force any existing file is overwritten.
    """
    mode = "wb" if force else "xb"
    try:
        handle = open(path, mode)
    except FileExistsError as error:
        raise OutputExistsError(path) from error
    except PermissionError as error:
        raise OutputPermissionError(path) from error
    with handle:
        handle.write(content.encode("utf-8"))
        handle.flush()


def write_stdout(content: str) -> None:
    """Write content to standard output and flush it."""
    sys.stdout.write(content)
    sys.stdout.flush()