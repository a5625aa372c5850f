import pytest

from pctx.writers import (
    OutputExistsError,
    write_file,
    write_stdout,
)


def test_write_file_creates_new_file(tmp_path):
    target = tmp_path / "out.md"
    write_file(target, "hello\n", force=False)
    assert target.read_text(encoding="utf-8") == "hello\n"


def test_write_file_refuses_existing_without_force(tmp_path):
    target = tmp_path / "out.md"
    target.write_text("original", encoding="utf-8")
    with pytest.raises(OutputExistsError) as info:
        write_file(target, "new", force=False)
    assert info.value.output_path == str(target)
    assert info.value.code == "output_exists"
    assert target.read_text(encoding="utf-8") == "original"


def test_write_file_overwrites_with_force(tmp_path):
    target = tmp_path / "out.md"
    target.write_text("a much longer original body", encoding="utf-8")
    write_file(target, "new", force=True)
    assert target.read_text(encoding="utf-8") == "new"


def test_write_file_force_creates_missing_file(tmp_path):
    target = tmp_path / "fresh.txt"
    write_file(target, "x", force=True)
    assert target.read_text(encoding="utf-8") == "x"


def test_write_file_encodes_utf8_without_newline_translation(tmp_path):
    target = tmp_path / "u.txt"
    content = "ünï\r\ncode\n"
    write_file(target, content, force=False)
    assert target.read_bytes() == content.encode("utf-8")


def test_write_file_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        write_file(tmp_path / "no" / "such" / "file.txt", "x", force=False)


def test_write_stdout(capsys):
    write_stdout("some output\n")
    captured = capsys.readouterr()
    assert captured.out == "some output\n"
    assert captured.err == ""