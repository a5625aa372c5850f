"""Gitignore-style include/exclude pattern matching.

Patterns follow gitignore conventions with some limits:

- negation patterns (starting with ``!``) are not supported and are ignored;
- ``*`` and ``?`` also match the path separator, as plain globs do;
- a pattern ending in ``/`` only matches directories, never the file itself.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache
from pathlib import PurePath
from typing import Iterable, Optional, Tuple, Union

PathInput = Union[str, "os.PathLike[str]"]


class _PatternError(ValueError):
    """Raised when a glob pattern cannot be parsed."""


class _Kind(Enum):
    CHAR = auto()
    ANY_CHAR = auto()
    ANY_SEQUENCE = auto()
    ANY_RECURSIVE = auto()
    ANY_WITHIN = auto()
    ANY_EXCEPT = auto()


class _Outcome(Enum):
    MATCH = auto()
    SUB_PATTERN_MISMATCH = auto()
    ENTIRE_PATTERN_MISMATCH = auto()


_Specifiers = Tuple[Tuple[str, str], ...]


def _parse_specifiers(body: str) -> _Specifiers:
    specs = []
    i = 0
    while i < len(body):
        if i + 3 <= len(body) and body[i + 1] == "-":
            specs.append((body[i], body[i + 2]))
            i += 3
        else:
            specs.append((body[i], body[i]))
            i += 1
    return tuple(specs)


def _in_specifiers(specs: _Specifiers, char: str) -> bool:
    return any(low <= char <= high for low, high in specs)


class _Glob:
    """A compiled shell glob with ``*``, ``?``, ``**`` and ``[...]`` classes."""

    def __init__(self, pattern: str) -> None:
        self.source = pattern
        self._tokens = tuple(self._tokenize(pattern))

    @staticmethod
    def _tokenize(chars: str):
        tokens = []
        n = len(chars)
        i = 0
        while i < n:
            c = chars[i]
            if c == "?":
                tokens.append((_Kind.ANY_CHAR, None))
                i += 1
            elif c == "*":
                start = i
                while i < n and chars[i] == "*":
                    i += 1
                count = i - start
                if count > 2:
                    raise _PatternError("wildcards are either regular `*` or recursive `**`")
                if count == 1:
                    tokens.append((_Kind.ANY_SEQUENCE, None))
                    continue
                if start != 0 and chars[start - 1] != "/":
                    raise _PatternError("recursive wildcards must form a single path component")
                if i < n and chars[i] == "/":
                    i += 1
                elif i != n:
                    raise _PatternError("recursive wildcards must form a single path component")
                if not (tokens and tokens[-1][0] is _Kind.ANY_RECURSIVE):
                    tokens.append((_Kind.ANY_RECURSIVE, None))
            elif c == "[":
                if i + 4 <= n and chars[i + 1] == "!":
                    end = chars.find("]", i + 3)
                    if end != -1:
                        tokens.append((_Kind.ANY_EXCEPT, _parse_specifiers(chars[i + 2 : end])))
                        i = end + 1
                        continue
                elif i + 3 <= n and chars[i + 1] != "!":
                    end = chars.find("]", i + 2)
                    if end != -1:
                        tokens.append((_Kind.ANY_WITHIN, _parse_specifiers(chars[i + 1 : end])))
                        i = end + 1
                        continue
                raise _PatternError("invalid range pattern")
            else:
                tokens.append((_Kind.CHAR, c))
                i += 1
        return tokens

    def matches(self, text: str) -> bool:
        tokens = self._tokens
        length = len(text)

        @lru_cache(maxsize=None)
        def step(ti: int, pos: int) -> _Outcome:
            while ti < len(tokens):
                kind, value = tokens[ti]
                if kind in (_Kind.ANY_SEQUENCE, _Kind.ANY_RECURSIVE):
                    outcome = step(ti + 1, pos)
                    if outcome is not _Outcome.SUB_PATTERN_MISMATCH:
                        return outcome
                    while pos < length:
                        after_separator = text[pos] == "/"
                        pos += 1
                        if kind is _Kind.ANY_RECURSIVE and not after_separator:
                            continue
                        outcome = step(ti + 1, pos)
                        if outcome is not _Outcome.SUB_PATTERN_MISMATCH:
                            return outcome
                    ti += 1
                    continue

                if pos >= length:
                    return _Outcome.ENTIRE_PATTERN_MISMATCH
                char = text[pos]
                pos += 1
                if kind is _Kind.ANY_CHAR:
                    ok = True
                elif kind is _Kind.ANY_WITHIN:
                    ok = _in_specifiers(value, char)
                elif kind is _Kind.ANY_EXCEPT:
                    ok = not _in_specifiers(value, char)
                else:
                    ok = char == value
                if not ok:
                    return _Outcome.SUB_PATTERN_MISMATCH
                ti += 1
            return _Outcome.MATCH if pos >= length else _Outcome.SUB_PATTERN_MISMATCH

        return step(0, 0) is _Outcome.MATCH

    def __repr__(self) -> str:
        return f"_Glob({self.source!r})"


def _normalize_separators(text: str) -> str:
    return text.replace("\\", "/")


def _matches_any_prefix(normalized: str, glob: _Glob) -> bool:
    """Test every proper prefix of a path (``a``, ``a/b`` for ``a/b/c``)."""
    parts = normalized.split("/")
    return any(glob.matches("/".join(parts[:end])) for end in range(1, len(parts)))


def _file_name(path: PurePath) -> Optional[str]:
    name = path.name
    if not name or name == "..":
        return None
    return name


@dataclass(frozen=True)
class CompiledPattern:
    """One compiled gitignore-style pattern."""

    glob: _Glob
    anchored: bool
    is_dir_pattern: bool

    def matches_path(self, path: PathInput) -> bool:
        """Return True if the pattern matches the given relative file path."""
        raw = os.fsdecode(path)
        path_str = _normalize_separators(raw)

        if self.anchored:
            if not self.is_dir_pattern and self.glob.matches(path_str):
                return True
            return _matches_any_prefix(path_str, self.glob)

        if not self.is_dir_pattern:
            if self.glob.matches(path_str):
                return True
            name = _file_name(PurePath(raw))
            if name is not None and self.glob.matches(_normalize_separators(name)):
                return True

        parts = PurePath(raw).parts
        # A directory pattern never matches the file itself (the last component).
        candidates = parts[:-1] if self.is_dir_pattern else parts
        if any(self.glob.matches(part) for part in candidates):
            return True

        return _matches_any_prefix(path_str, self.glob)


def compile_pattern(pattern: str) -> Optional[CompiledPattern]:
    """Compile a gitignore-style pattern, or return None if it is unusable."""
    trimmed = pattern.strip()
    if not trimmed or trimmed.startswith("#"):
        return None

    if trimmed.startswith("!"):
        print(
            f"Warning: negation patterns are not supported, ignoring: {trimmed}",
            file=sys.stderr,
        )
        return None

    normalized = _normalize_separators(trimmed)

    if normalized.startswith("./"):
        cleaned = normalized[2:]
        print(
            f"Warning: '{trimmed}' looks like a file path, not a pattern. "
            f'Stripping leading "./". Consider using a positional argument instead: '
            f"pctx {cleaned}",
            file=sys.stderr,
        )
    else:
        cleaned = normalized

    is_dir_pattern = cleaned.endswith("/")
    clean = cleaned.rstrip("/")

    anchored = clean.startswith("/")
    body = clean[1:] if anchored else clean
    if not body:
        return None

    if anchored:
        glob_source = body
    elif "/" in body and not body.startswith("**"):
        glob_source = f"**/{body}"
    else:
        glob_source = body

    try:
        glob = _Glob(glob_source)
    except _PatternError:
        return None
    return CompiledPattern(glob=glob, anchored=anchored, is_dir_pattern=is_dir_pattern)


class PatternMatcher:
    """Decides whether paths are excluded or included by user patterns."""

    def __init__(
        self,
        exclude_patterns: Iterable[str] = (),
        include_patterns: Iterable[str] = (),
    ) -> None:
        self._excludes = tuple(
            compiled for compiled in map(compile_pattern, exclude_patterns) if compiled
        )
        self._includes = tuple(
            compiled for compiled in map(compile_pattern, include_patterns) if compiled
        )

    def is_excluded(self, path: PathInput) -> bool:
        """Return True if any exclude pattern matches the path."""
        return any(pattern.matches_path(path) for pattern in self._excludes)

    def is_included(self, path: PathInput) -> bool:
        """Return True if there are no include patterns or one of them matches."""
        if not self._includes:
            return True
        return any(pattern.matches_path(path) for pattern in self._includes)