"""Directory walking for file discovery."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from pctx.binary import is_binary

PathInput = Union[str, "os.PathLike[str]"]

DEFAULT_MAX_FILE_SIZE = 1024 * 1024


@dataclass
class ScanOptions:
    """Settings that control which files a scan discovers."""

    paths: List[Path] = field(default_factory=lambda: [Path(".")])
    exclude_patterns: List[str] = field(default_factory=list)
    include_patterns: List[str] = field(default_factory=list)
    include_hidden: bool = False
    use_gitignore: bool = True
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_depth: Optional[int] = None
    verbose: bool = False

    def __post_init__(self) -> None:
        self.paths = [Path(path) for path in self.paths]
        self.exclude_patterns = list(self.exclude_patterns)
        self.include_patterns = list(self.include_patterns)


@dataclass(frozen=True)
class _IgnoreRule:
    """One line of a gitignore file."""

    regex: "re.Pattern[str]"
    negated: bool
    dir_only: bool
    anchored: bool

    def matches(self, relative: str, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        target = relative if self.anchored else relative.rsplit("/", 1)[-1]
        return self.regex.fullmatch(target) is not None


_RuleSet = Tuple[Path, Tuple[_IgnoreRule, ...]]


def _translate_segment(segment: str) -> str:
    out: List[str] = []
    i = 0
    n = len(segment)
    while i < n:
        char = segment[i]
        if char == "*":
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "\\" and i + 1 < n:
            i += 1
            out.append(re.escape(segment[i]))
        elif char == "[":
            end = segment.find("]", i + 2)
            if end == -1:
                out.append(re.escape(char))
            else:
                body = segment[i + 1 : end]
                negate = body[:1] in ("!", "^")
                if negate:
                    body = body[1:]
                body = body.replace("\\", "\\\\")
                out.append(f"[{'^' if negate else ''}{body}]")
                i = end
        else:
            out.append(re.escape(char))
        i += 1
    return "".join(out)


def _translate(body: str) -> "re.Pattern[str]":
    segments = body.split("/")
    out: List[str] = []
    for position, segment in enumerate(segments, start=1):
        last = position == len(segments)
        if segment == "**":
            out.append(".*" if last else "(?:.*/)?")
        else:
            out.append(_translate_segment(segment) + ("" if last else "/"))
    return re.compile("".join(out), re.DOTALL)


def _parse_rule(line: str) -> Optional[_IgnoreRule]:
    text = line.rstrip("\r\n")
    while text.endswith(" ") and not text.endswith("\\ "):
        text = text[:-1]
    if not text or text.startswith("#"):
        return None
    negated = text.startswith("!")
    if negated:
        text = text[1:]
    dir_only = text.endswith("/")
    text = text.rstrip("/")
    anchored = "/" in text
    if text.startswith("/"):
        text = text[1:]
    if not text:
        return None
    try:
        regex = _translate(text)
    except re.error:
        return None
    return _IgnoreRule(regex=regex, negated=negated, dir_only=dir_only, anchored=anchored)


def _load_rules(path: Path) -> Tuple[_IgnoreRule, ...]:
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ()
    return tuple(rule for rule in map(_parse_rule, text.splitlines()) if rule is not None)


def _find_repo_root(directory: Path) -> Optional[Path]:
    current = directory
    while True:
        if (current / ".git").exists():
            return current
        if current.parent == current:
            return None
        current = current.parent


def _global_ignore_file() -> Optional[Path]:
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "git" / "ignore"
    try:
        return Path.home() / ".config" / "git" / "ignore"
    except (RuntimeError, KeyError):
        return None


def _initial_rulesets(abs_root: Path) -> Optional[List[_RuleSet]]:
    """Rules that apply above the walk root, or None outside a git repository."""
    repo = _find_repo_root(abs_root)
    if repo is None:
        return None
    rulesets: List[_RuleSet] = []
    global_file = _global_ignore_file()
    if global_file is not None:
        rulesets.append((repo, _load_rules(global_file)))
    rulesets.append((repo, _load_rules(repo / ".git" / "info" / "exclude")))

    ancestors: List[Path] = []
    current = abs_root
    while current != repo:
        current = current.parent
        ancestors.append(current)
    rulesets.extend((ancestor, _load_rules(ancestor / ".gitignore")) for ancestor in reversed(ancestors))
    return [ruleset for ruleset in rulesets if ruleset[1]]


def _is_ignored(abs_path: Path, is_dir: bool, rulesets: Sequence[_RuleSet]) -> bool:
    ignored = False
    for base, rules in rulesets:
        try:
            relative = abs_path.relative_to(base).as_posix()
        except ValueError:
            continue
        for rule in rules:
            if rule.matches(relative, is_dir):
                ignored = not rule.negated
    return ignored


def _walk(
    directory: Path,
    abs_dir: Path,
    depth: int,
    rulesets: Optional[List[_RuleSet]],
    options: ScanOptions,
) -> Iterator[Path]:
    child_depth = depth + 1
    if options.max_depth is not None and child_depth > options.max_depth:
        return
    if rulesets is not None:
        local = _load_rules(abs_dir / ".gitignore")
        if local:
            rulesets = [*rulesets, (abs_dir, local)]
    try:
        with os.scandir(directory) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError:
        return

    for entry in entries:
        if not options.include_hidden and entry.name.startswith("."):
            continue
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = entry.is_file(follow_symlinks=False)
        except OSError:
            continue
        abs_path = abs_dir / entry.name
        if rulesets is not None and _is_ignored(abs_path, is_dir, rulesets):
            continue
        path = Path(entry.path)
        if is_dir:
            yield from _walk(path, abs_path, child_depth, rulesets, options)
        elif is_file and not is_binary(path):
            yield path


def scan_directory(directory: PathInput, options: ScanOptions) -> List[Path]:
    """Return the text files below directory that the options allow.

    Hidden entries, ignored entries (inside a git repository, when gitignore
    handling is on), symbolic links and binary files are left out.
    """
    root = Path(directory)
    if not root.is_dir():
        if root.is_file() and not is_binary(root):
            return [root]
        return []
    abs_root = Path(os.path.abspath(root))
    rulesets = _initial_rulesets(abs_root) if options.use_gitignore else None
    return list(_walk(root, abs_root, 0, rulesets, options))