import io
import os
import sys
import time
from datetime import timedelta

import pytest

from atlasopt import utils
from atlasopt.errors import (
    CommandFailedError,
    FileMissingError,
    IoError,
    OperationCancelledError,
    ProjectValidationError,
)


def test_format_bytes():
    assert utils.format_bytes(512) == "512 B"
    assert utils.format_bytes(1024) == "1.0 KB"
    assert utils.format_bytes(1536) == "1.5 KB"
    assert utils.format_bytes(1048576) == "1.0 MB"


def test_format_duration():
    assert utils.format_duration(0.5) == "500ms"
    assert utils.format_duration(1) == "1.0s"
    assert utils.format_duration(65) == "1m 5s"


def test_format_duration_accepts_timedelta():
    assert utils.format_duration(timedelta(seconds=65)) == "1m 5s"
    assert utils.format_duration(timedelta(milliseconds=500)) == "500ms"


def test_print_helpers(capsys):
    utils.print_status("hello")
    utils.print_success("done")
    utils.print_warning("careful")
    utils.print_error("broken")
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["[INFO] hello", "[SUCCESS] done", "[WARNING] careful"]
    assert captured.err.strip() == "[ERROR] broken"


def test_is_rust_project(tmp_path):
    assert utils.is_rust_project(tmp_path) is False
    (tmp_path / "Cargo.toml").write_text("[package]\n")
    assert utils.is_rust_project(tmp_path) is True


def test_find_rust_project_root_walks_up(tmp_path):
    (tmp_path / "Cargo.toml").write_text("[package]\n")
    nested = tmp_path / "src" / "inner"
    nested.mkdir(parents=True)
    assert utils.find_rust_project_root(nested) == tmp_path.resolve()


def test_find_rust_project_root_missing(tmp_path):
    nested = tmp_path / "nothing"
    nested.mkdir()
    with pytest.raises(ProjectValidationError):
        utils.find_rust_project_root(nested)


def test_execute_command_captures_output(tmp_path):
    result = utils.execute_command(
        sys.executable, ["-c", "import os; print(os.getcwd())"], tmp_path
    )
    assert result.returncode == 0
    assert os.path.samefile(result.stdout.decode().strip(), tmp_path)


def test_execute_command_missing_binary():
    with pytest.raises(CommandFailedError):
        utils.execute_command("definitely-not-a-real-binary-xyz", [])


def test_execute_command_success():
    assert utils.execute_command_success(sys.executable, ["-c", "pass"]) is True
    assert utils.execute_command_success(sys.executable, ["-c", "raise SystemExit(3)"]) is False


def test_execute_command_with_output_failure():
    with pytest.raises(CommandFailedError) as info:
        utils.execute_command_with_output(sys.executable, ["-c", "raise SystemExit(3)"])
    assert "3" in str(info.value)


def test_execute_command_with_output_ok():
    assert utils.execute_command_with_output(sys.executable, ["-c", "pass"]) is None


def test_backup_file_copies_content(tmp_path):
    original = tmp_path / "config.toml"
    original.write_text("key = 1\n")
    backup = utils.backup_file(original)
    assert backup == tmp_path / "config.toml.backup"
    assert backup.read_text() == original.read_text()


def test_backup_file_missing(tmp_path):
    with pytest.raises(FileMissingError):
        utils.backup_file(tmp_path / "absent.toml")


def test_get_directory_size(tmp_path):
    (tmp_path / "a.bin").write_bytes(b"x" * 100)
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "b.bin").write_bytes(b"y" * 50)
    assert utils.get_directory_size(tmp_path) == 150
    assert utils.get_directory_size(sub / "b.bin") == 50


def test_get_directory_size_missing(tmp_path):
    with pytest.raises(IoError):
        utils.get_directory_size(tmp_path / "missing")


def test_clean_old_files(tmp_path):
    old = tmp_path / "old.rlib"
    old.write_bytes(b"o" * 40)
    old_other = tmp_path / "old.txt"
    old_other.write_bytes(b"t" * 10)
    fresh = tmp_path / "fresh.rlib"
    fresh.write_bytes(b"f" * 20)
    past = time.time() - 10 * 24 * 60 * 60
    os.utime(old, (past, past))
    os.utime(old_other, (past, past))

    cleaned = utils.clean_old_files(tmp_path, 7, "rlib")
    assert cleaned == 40
    assert not old.exists()
    assert old_other.exists()
    assert fresh.exists()


def test_clean_old_files_without_pattern(tmp_path):
    a = tmp_path / "a"
    a.write_bytes(b"1" * 5)
    past = time.time() - 3 * 24 * 60 * 60
    os.utime(a, (past, past))
    assert utils.clean_old_files(tmp_path, 1) == 5
    assert not a.exists()


def test_measure_time():
    result, elapsed = utils.measure_time(lambda: 42)
    assert result == 42
    assert elapsed >= 0


def test_is_tool_available():
    assert utils.is_tool_available(sys.executable) is True
    assert utils.is_tool_available("definitely-not-a-real-binary-xyz") is False


def test_get_tool_version():
    version = utils.get_tool_version(sys.executable)
    assert version.startswith("Python")
    assert utils.get_tool_version("definitely-not-a-real-binary-xyz") is None


def test_progress_bar_position():
    with utils.create_progress_bar(5, "work") as bar:
        bar.inc(2)
        bar.inc()
        assert bar.position == 3
        assert bar.message == "work"


def test_spinner_message():
    spinner = utils.create_spinner("waiting")
    spinner.set_message("still waiting")
    assert spinner.message == "still waiting"
    spinner.finish_and_clear()


@pytest.mark.parametrize("answer, expected", [("y\n", True), ("n\n", False), ("\n", False)])
def test_confirm(monkeypatch, answer, expected):
    monkeypatch.setattr(sys, "stdin", io.StringIO(answer))
    assert utils.confirm("Proceed?") is expected


def test_confirm_cancelled_on_eof(monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    with pytest.raises(OperationCancelledError):
        utils.confirm("Proceed?")


def test_select_from_list(monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO("2\n"))
    assert utils.select_from_list("Pick", ["a", "b", "c"]) == 1


def test_select_from_list_default(monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO("\n"))
    assert utils.select_from_list("Pick", ["a", "b"]) == 0


def test_select_from_list_cancelled(monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    with pytest.raises(OperationCancelledError):
        utils.select_from_list("Pick", ["a"])