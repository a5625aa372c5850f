"""Formatting of collected file contents as Markdown, XML or plain text."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Union

from pctx.tree import build_tree, tree_to_string


class ContentFormat(str, Enum):
    """Output format for generated context."""

    MARKDOWN = "markdown"
    XML = "xml"
    PLAIN = "plain"

    def __str__(self) -> str:
        return self.value


@dataclass
class FileEntry:
    """A processed file ready for output."""

    absolute_path: Path
    relative_path: str
    extension: str
    content: str
    original_bytes: int = 0
    original_lines: int = 0
    line_count: int = 0
    truncated: bool = False
    truncated_lines: int = 0

    def display_path(self, absolute: bool) -> str:
        """Return the absolute or the relative path, as requested."""
        return str(self.absolute_path) if absolute else self.relative_path


def _language_table() -> Dict[str, str]:
    groups = {
        "rust": ("rs",),
        "go": ("go",),
        "python": ("py", "pyi"),
        "javascript": ("js", "mjs", "cjs"),
        "typescript": ("ts", "mts", "cts"),
        "jsx": ("jsx",),
        "tsx": ("tsx",),
        "java": ("java",),
        "kotlin": ("kt", "kts"),
        "scala": ("scala",),
        "groovy": ("groovy", "gradle"),
        "c": ("c", "h"),
        "cpp": ("cpp", "cc", "cxx", "hpp", "hxx", "hh"),
        "csharp": ("cs",),
        "fsharp": ("fs", "fsx"),
        "ruby": ("rb", "rake", "gemspec"),
        "php": ("php", "phtml"),
        "bash": ("sh", "bash"),
        "zsh": ("zsh",),
        "fish": ("fish",),
        "powershell": ("ps1", "psm1"),
        "batch": ("bat", "cmd"),
        "html": ("html", "htm"),
        "css": ("css",),
        "scss": ("scss",),
        "sass": ("sass",),
        "less": ("less",),
        "json": ("json", "jsonc"),
        "yaml": ("yaml", "yml"),
        "toml": ("toml",),
        "xml": ("xml", "xsl", "xslt"),
        "csv": ("csv",),
        "markdown": ("md", "markdown"),
        "rst": ("rst",),
        "latex": ("tex",),
        "sql": ("sql",),
        "graphql": ("graphql", "gql"),
        "dockerfile": ("dockerfile",),
        "makefile": ("makefile", "mk"),
        "hcl": ("tf", "tfvars"),
        "vue": ("vue",),
        "svelte": ("svelte",),
        "haskell": ("hs", "lhs"),
        "elm": ("elm",),
        "ocaml": ("ml", "mli"),
        "clojure": ("clj", "cljs", "cljc"),
        "elixir": ("ex", "exs"),
        "erlang": ("erl", "hrl"),
        "swift": ("swift",),
        "objective-c": ("m", "mm"),
        "r": ("r",),
        "julia": ("jl",),
        "lua": ("lua",),
        "vim": ("vim",),
        "lisp": ("el", "lisp"),
        "dart": ("dart",),
        "zig": ("zig",),
        "nim": ("nim",),
        "protobuf": ("proto",),
        "thrift": ("thrift",),
        "text": ("txt",),
    }
    return {ext: language for language, exts in groups.items() for ext in exts}


_LANGUAGES = _language_table()


def extension_to_language(ext: str) -> str:
    """Map a file extension to a syntax-highlighting name, or '' if unknown."""
    return _LANGUAGES.get(ext.lower(), "")


def fence_for_content(content: str) -> str:
    """Return the shortest backtick fence (at least three) absent from content."""
    fence = "```"
    while fence in content:
        fence += "`"
    return fence


def escape_xml_attr(s: str) -> str:
    """Escape a string for use inside a double-quoted XML attribute."""
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def escape_cdata_content(content: str) -> str:
    """Split any ``]]>`` so the text cannot close its CDATA section early."""
    return content.replace("]]>", "]]]]><![CDATA[>")


def _with_newline(content: str) -> str:
    return content if content.endswith("\n") else content + "\n"


def _tree_text(entries: Sequence[FileEntry]) -> str:
    return tree_to_string(build_tree(entry.relative_path for entry in entries))


def _format_markdown(entries: Sequence[FileEntry], show_tree: bool, absolute: bool) -> str:
    parts: List[str] = []
    if show_tree:
        parts.append(f"## File Tree\n\n```\n{_tree_text(entries)}```\n\n")
    for entry in entries:
        fence = fence_for_content(entry.content)
        language = extension_to_language(entry.extension)
        parts.append(f"`{entry.display_path(absolute)}`:\n")
        parts.append(f"{fence}{language}\n{_with_newline(entry.content)}{fence}\n\n")
    return "".join(parts)


def _format_xml(entries: Sequence[FileEntry], show_tree: bool, absolute: bool) -> str:
    parts: List[str] = ['<?xml version="1.0" encoding="UTF-8"?>\n<context>\n']
    if show_tree:
        parts.append("  <tree><![CDATA[\n")
        parts.append(escape_cdata_content(_tree_text(entries)))
        parts.append("]]></tree>\n")
    for entry in entries:
        path = escape_xml_attr(entry.display_path(absolute))
        language = extension_to_language(entry.extension)
        parts.append(f'  <file path="{path}" language="{language}">\n')
        parts.append("<![CDATA[\n")
        parts.append(escape_cdata_content(entry.content))
        if not entry.content.endswith("\n"):
            parts.append("\n")
        parts.append("]]>\n  </file>\n")
    parts.append("</context>\n")
    return "".join(parts)


def _format_plain(entries: Sequence[FileEntry], show_tree: bool, absolute: bool) -> str:
    parts: List[str] = []
    if show_tree:
        parts.append(f"=== File Tree ===\n{_tree_text(entries)}\n")
    for entry in entries:
        parts.append(f"=== {entry.display_path(absolute)} ===\n")
        parts.append(f"{_with_newline(entry.content)}\n")
    return "".join(parts)


_FORMATTERS = {
    ContentFormat.MARKDOWN: _format_markdown,
    ContentFormat.XML: _format_xml,
    ContentFormat.PLAIN: _format_plain,
}


def format_output(
    entries: Iterable[FileEntry],
    output_format: Union[ContentFormat, str] = ContentFormat.MARKDOWN,
    show_tree: bool = False,
    absolute_paths: bool = False,
) -> str:
    """Render file entries in the requested format."""
    formatter = _FORMATTERS[ContentFormat(output_format)]
    return formatter(list(entries), show_tree, absolute_paths)