# pctx

A library for collecting the text files of a project and rendering them as
one document for use as context in a language-model prompt.

It finds files by walking a directory tree or by asking `git ls-files`,
skips binary files, hidden paths, oversized files and anything matching
gitignore-style exclude patterns, and renders entries as Markdown, XML or
plain text, optionally with a file tree at the top. It also keeps simple
statistics and builds structured JSON responses.

## Modules

| Module | Contents |
| --- | --- |
| `pctx.patterns` | `PatternMatcher` (`is_excluded`, `is_included`), `CompiledPattern`, `compile_pattern` |
| `pctx.binary` | `is_binary`, `is_binary_content` |
| `pctx.walker` | `ScanOptions`, `scan_directory` |
| `pctx.gitscan` | `is_inside_git_repo`, `scan_git_repo`, `GitError` |
| `pctx.scanner` | `Scanner` (`scan`, `scan_paths`), `ScanResult` |
| `pctx.tree` | `TreeNode`, `build_tree`, `tree_to_string`, `print_tree` |
| `pctx.formatter` | `ContentFormat`, `FileEntry`, `format_output`, `fence_for_content`, `escape_xml_attr`, `escape_cdata_content`, `extension_to_language` |
| `pctx.stats` | `Stats` (`add_file`, `estimate_tokens`, `summary`, `print_summary`), `format_number`, `format_bytes` |
| `pctx.json_types` | `ErrorCode`, `FileInfo`, `StatsJson`, `ContextOutput`, `TreeOutput`, `FileError`, `SuccessResponse`, `ErrorResponse`, `PartialResponse`, `to_json` |
| `pctx.writers` | `write_file`, `write_stdout`, `OutputExistsError`, `OutputPermissionError` |

## Examples

Find files under a directory:

```python
from pctx.scanner import Scanner
from pctx.walker import ScanOptions

options = ScanOptions(paths=["."], exclude_patterns=["*.log", "build/"])
result = Scanner(options).scan()
for path in result.files:      # sorted, unique, resolved paths
    print(path)
for path, error in result.errors:
    print("missing:", path)
```

Inside a git repository (and with `use_gitignore=True`, the default) the
scanner lists files through `git ls-files`; if git fails it walks the
directory instead, honouring `.gitignore` files.

Check whether a file is binary:

```python
from pctx.binary import is_binary

is_binary("logo.png")      # True: known binary extension
is_binary("src/main.py")   # False for ordinary text
```

Draw a file tree:

```python
from pctx.tree import build_tree, tree_to_string

tree = build_tree(["src/main.rs", "src/lib.rs", "README.md"])
print(tree_to_string(tree), end="")
```

```
README.md
src
├── lib.rs
└── main.rs
```

Render entries:

```python
from pathlib import Path
from pctx.formatter import ContentFormat, FileEntry, format_output

entry = FileEntry(
    absolute_path=Path("/project/src/lib.rs"),
    relative_path="src/lib.rs",
    extension="rs",
    content="pub fn a() {}\n",
)
print(format_output([entry], ContentFormat.XML, show_tree=True))
```

Numbers for reports:

```python
from pctx.stats import format_bytes, format_number

format_number(1234567)  # "1,234,567"
format_bytes(1536)      # "1.50 KB"
```

Write output without overwriting an existing file:

```python
from pctx.writers import OutputExistsError, write_file

try:
    write_file("context.md", "...", force=False)
except OutputExistsError:
    ...  # pass force=True to overwrite
```

## Pattern rules

Include and exclude patterns follow gitignore conventions, with some
differences:

- `*.log` matches the file name anywhere in the tree.
- `node_modules` matches any path component, so everything below it matches.
- `src/config` matches that directory at any depth, and everything inside it.
- A leading `/` anchors the pattern to the scan root.
- A trailing `/` matches directories only, never a file of the same name.
- Backslashes are treated as forward slashes, and a leading `./` is stripped.
- Blank lines and `#` comments are ignored; negation with `!` is not supported.

## Token estimates

`Stats.estimate_tokens` sets `token_estimate` to the UTF-8 byte length of
the content divided by four, whatever model name is given.

## What the package does not do

- It has no command-line program; it is used from Python code.
- It does not read files into `FileEntry` objects or truncate long files;
  callers build the entries themselves.
- It does not load configuration files and cannot copy to the clipboard.