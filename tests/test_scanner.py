import subprocess
from pathlib import Path
from unittest import mock

import pytest

from pctx.scanner import Scanner, ScanResult
from pctx.walker import ScanOptions


def _write(path, text="content\n"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


@pytest.fixture
def root(tmp_path):
    base = tmp_path.resolve()
    _write(base / "a.txt")
    _write(base / "main.py", "print('hi')\n")
    _write(base / "sub" / "b.txt")
    _write(base / "sub" / "c.py", "x = 1\n")
    return base


def _options(root, **kwargs):
    kwargs.setdefault("use_gitignore", False)
    return ScanOptions(paths=kwargs.pop("paths", [root]), **kwargs)


def test_scan_returns_sorted_files(root):
    result = Scanner(_options(root)).scan()
    assert result.files == [
        root / "a.txt",
        root / "main.py",
        root / "sub" / "b.txt",
        root / "sub" / "c.py",
    ]
    assert result.errors == []


def test_missing_path_reported_and_others_scanned(root):
    missing = root / "missing"
    result = Scanner(_options(root, paths=[missing, root / "a.txt"])).scan()
    assert result.files == [root / "a.txt"]
    assert len(result.errors) == 1
    path, error = result.errors[0]
    assert path == missing
    assert isinstance(error, FileNotFoundError)
    assert error.filename == str(missing)


def test_duplicates_removed(root):
    result = Scanner(_options(root, paths=[root, root / "a.txt", root / "a.txt"])).scan()
    assert result.files.count(root / "a.txt") == 1
    assert result.files == sorted(set(result.files))


def test_exclude_patterns_relative_to_base(root):
    result = Scanner(_options(root, exclude_patterns=["sub"])).scan()
    assert result.files == [root / "a.txt", root / "main.py"]


def test_anchored_exclude(root):
    result = Scanner(_options(root, exclude_patterns=["/sub/b.txt"])).scan()
    assert root / "sub" / "b.txt" not in result.files
    assert root / "a.txt" in result.files


def test_include_patterns(root):
    result = Scanner(_options(root, include_patterns=["*.py"])).scan()
    assert result.files == [root / "main.py", root / "sub" / "c.py"]


def test_max_file_size(root):
    _write(root / "big.txt", "x" * 100)
    result = Scanner(_options(root, max_file_size=50)).scan()
    assert root / "big.txt" not in result.files
    assert root / "a.txt" in result.files


def test_explicit_file_not_checked_for_binary(root):
    image = _write(root / "img.png", "pretend image")
    walked = Scanner(_options(root)).scan()
    explicit = Scanner(_options(root, paths=[image])).scan()
    assert image not in walked.files
    assert explicit.files == [image]


def test_scan_paths_accepts_strings(root):
    missing = root / "gone.txt"
    scanner = Scanner(_options(root))
    result = scanner.scan_paths([str(root / "a.txt"), str(missing), str(root / "sub")])
    assert result.files == [root / "a.txt", root / "sub" / "b.txt", root / "sub" / "c.py"]
    assert [path for path, _ in result.errors] == [missing]
    assert isinstance(result.errors[0][1], FileNotFoundError)


def test_git_listing_used_inside_repository(root):
    (root / ".git").mkdir()
    listing = subprocess.CompletedProcess(args=["git"], returncode=0, stdout=b"a.txt\x00", stderr=b"")
    with mock.patch.object(subprocess, "run", return_value=listing):
        result = Scanner(_options(root, use_gitignore=True)).scan()
    assert result.files == [root / "a.txt"]


def test_git_failure_falls_back_to_walk(root):
    (root / ".git").mkdir()
    with mock.patch.object(subprocess, "run", side_effect=FileNotFoundError("git")):
        result = Scanner(_options(root, use_gitignore=True)).scan()
    assert result.files == [
        root / "a.txt",
        root / "main.py",
        root / "sub" / "b.txt",
        root / "sub" / "c.py",
    ]


def test_empty_result_defaults():
    result = ScanResult()
    assert result.files == []
    assert result.errors == []


def test_relative_paths_resolved(root, monkeypatch):
    monkeypatch.chdir(root)
    result = Scanner(ScanOptions(paths=[Path("sub")], use_gitignore=False)).scan()
    assert result.files == [root / "sub" / "b.txt", root / "sub" / "c.py"]