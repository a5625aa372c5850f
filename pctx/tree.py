"""File tree construction and text rendering."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Dict, Iterable, Iterator, Union

PathInput = Union[str, "os.PathLike[str]"]

_BRANCH = "├── "
_LAST_BRANCH = "└── "
_PIPE = "│   "
_SPACE = "    "


@dataclass
class TreeNode:
    """A node in a file tree; children are rendered in sorted name order."""

    children: Dict[str, "TreeNode"] = field(default_factory=dict)
    is_file: bool = False


def build_tree(paths: Iterable[PathInput]) -> TreeNode:
    """Build a tree from a sequence of paths, one node per path component."""
    root = TreeNode()
    for path in paths:
        parts = PurePath(os.fsdecode(path)).parts
        current = root
        for part in parts:
            current = current.children.setdefault(part, TreeNode())
        if parts:
            current.is_file = True
    return root


def _render(node: TreeNode, prefix: str, is_root: bool) -> Iterator[str]:
    names = sorted(node.children)
    for position, name in enumerate(names, start=1):
        child = node.children[name]
        is_last = position == len(names)
        if is_root:
            if name:
                yield f"{name}\n"
            child_prefix = ""
        else:
            connector = _LAST_BRANCH if is_last else _BRANCH
            yield f"{prefix}{connector}{name}\n"
            child_prefix = prefix + (_SPACE if is_last else _PIPE)
        if child.children:
            yield from _render(child, child_prefix, is_root=False)


def tree_to_string(node: TreeNode) -> str:
    """Render the tree as text, top-level entries unindented."""
    return "".join(_render(node, "", is_root=True))


def print_tree(node: TreeNode) -> None:
    """Write the rendered tree to standard output."""
    sys.stdout.write(tree_to_string(node))