import json
from pathlib import Path

import pytest

from pctx.formatter import FileEntry
from pctx.json_types import (
    ContextOutput,
    ErrorCode,
    ErrorResponse,
    FileError,
    FileInfo,
    PartialResponse,
    StatsJson,
    SuccessResponse,
    TreeOutput,
    to_json,
)
from pctx.stats import Stats


def make_entry(truncated=False):
    return FileEntry(
        absolute_path=Path("/abs/src/lib.rs"),
        relative_path="src/lib.rs",
        extension="rs",
        content="fn a() {}\n",
        original_bytes=10,
        original_lines=1,
        line_count=1,
        truncated=truncated,
        truncated_lines=5 if truncated else 0,
    )


def test_from_entry_relative():
    entry = make_entry()
    info = FileInfo.from_entry(entry, False)
    assert info.path == entry.relative_path
    assert info.extension == entry.extension
    assert info.size_bytes == entry.original_bytes
    assert info.line_count == entry.original_lines
    assert info.truncated_lines is None


def test_from_entry_absolute():
    entry = make_entry()
    info = FileInfo.from_entry(entry, True)
    assert info.path == str(entry.absolute_path)


def test_from_entry_truncated_keeps_line_count():
    entry = make_entry(truncated=True)
    data = FileInfo.from_entry(entry, False).to_dict()
    assert data["truncated"] is True
    assert data["truncated_lines"] == entry.truncated_lines


def test_to_dict_omits_zero_line_count_and_missing_truncation():
    info = FileInfo(path="a.txt", extension="txt", size_bytes=3)
    data = info.to_dict()
    assert "line_count" not in data
    assert "truncated_lines" not in data
    assert data["truncated"] is False


def test_from_path_relative_to_cwd(tmp_path, monkeypatch):
    content = b"print('hi')\n"
    (tmp_path / "a.py").write_bytes(content)
    monkeypatch.chdir(tmp_path)
    info = FileInfo.from_path("a.py")
    assert info.path == "a.py"
    assert info.extension == "py"
    assert info.size_bytes == len(content)
    assert info.line_count == 0
    assert info.truncated is False


def test_from_path_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileInfo.from_path(tmp_path / "missing.txt")


def test_stats_json_minimal_omits_token_estimate():
    data = StatsJson(file_count=4).to_dict()
    assert data["file_count"] == 4
    assert data["total_lines"] == 0
    assert "token_estimate" not in data


def test_stats_json_from_stats_copies_fields():
    stats = Stats(file_count=2, total_lines=30, total_bytes=400, token_estimate=100)
    converted = StatsJson.from_stats(stats)
    assert converted.file_count == stats.file_count
    assert converted.total_lines == stats.total_lines
    assert converted.total_bytes == stats.total_bytes
    assert converted.to_dict()["token_estimate"] == stats.token_estimate


def test_success_response_with_context():
    files = [FileInfo.from_entry(make_entry(), False)]
    response = SuccessResponse(
        data=ContextOutput(content="body", format="markdown", files=files),
        stats=StatsJson(file_count=1),
    )
    data = response.to_dict()
    assert list(data)[0] == "status"
    assert data["status"] == "success"
    assert data["data"]["format"] == "markdown"
    assert data["data"]["files"][0]["path"] == "src/lib.rs"


def test_success_response_with_file_list_is_a_list():
    files = [FileInfo(path="a", extension="", size_bytes=1)]
    data = SuccessResponse(data=files, stats=StatsJson(file_count=1)).to_dict()
    assert data["data"] == [files[0].to_dict()]


def test_tree_output_response():
    data = SuccessResponse(data=TreeOutput(tree="x\n"), stats=StatsJson(file_count=1)).to_dict()
    assert data["data"] == {"tree": "x\n"}


def test_error_response_skips_missing_fields():
    response = ErrorResponse(code=ErrorCode.NO_FILES_MATCHED, message="none", exit_code=2)
    data = response.to_dict()
    assert data["status"] == "error"
    assert data["code"] == "no_files_matched"
    assert "input" not in data
    assert "suggestion" not in data
    assert data["exit_code"] == 2


def test_error_response_includes_input_and_suggestion():
    response = ErrorResponse(
        code=ErrorCode.FILE_NOT_FOUND,
        message="missing",
        exit_code=1,
        input={"paths": ["x"]},
        suggestion="check",
    )
    data = response.to_dict()
    assert data["input"] == {"paths": ["x"]}
    assert data["suggestion"] == "check"


def test_partial_response_lists_errors():
    error = FileError(path="bad.bin", code=ErrorCode.BINARY_FILE, message="binary", transient=False)
    response = PartialResponse(data=[], stats=StatsJson(file_count=0), errors=[error])
    data = response.to_dict()
    assert data["status"] == "partial"
    assert data["errors"][0]["code"] == "binary_file"
    assert data["errors"][0]["path"] == "bad.bin"


def test_to_json_round_trip():
    response = PartialResponse(
        data=ContextOutput(content="ünïcode", format="xml"),
        stats=StatsJson(file_count=1, token_estimate=3),
        errors=[FileError(path="p", code="io_error", message="m", transient=True)],
    )
    text = to_json(response)
    assert json.loads(text) == response.to_dict()
    assert "ünïcode" in text


def test_to_json_pretty_printed_with_status_first():
    text = to_json(SuccessResponse(data=[], stats=StatsJson(file_count=0)))
    assert text.startswith('{\n  "status": "success"')