import pytest

from atlasopt.commands.build import (
    BuildCommand,
    CheckCommand,
    CleanCommand,
    TestCommand,
    run,
    run_build,
    run_check,
    run_clean,
    run_test,
    show_build_stats,
)
from atlasopt.errors import CommandFailedError, ProjectValidationError
from atlasopt.utils import format_bytes


@pytest.fixture
def project(tmp_path):
    (tmp_path / "Cargo.toml").write_text('[package]\nname = "demo"\n', encoding="utf-8")
    return tmp_path


@pytest.fixture
def no_path(tmp_path, monkeypatch):
    empty = tmp_path / "empty-bin"
    empty.mkdir()
    monkeypatch.setenv("PATH", str(empty))
    return empty


def _make_deps(root):
    deps = root / "target" / "debug" / "deps"
    deps.mkdir(parents=True)
    (deps / "libdemo.rlib").write_bytes(b"rlib")
    (deps / "demo.d").write_text("deps", encoding="utf-8")
    return deps


def test_run_rejects_non_rust_dir(tmp_path):
    with pytest.raises(ProjectValidationError):
        run(CheckCommand(), tmp_path)


def test_selective_clean_removes_only_rlibs(project):
    deps = _make_deps(project)
    run_clean(project, False)
    assert not (deps / "libdemo.rlib").exists()
    assert (deps / "demo.d").exists()


def test_run_dispatches_clean(project, capsys):
    deps = _make_deps(project)
    run(CleanCommand(), project)
    assert sorted(p.name for p in deps.iterdir()) == ["demo.d"]
    assert "Selective clean finished" in capsys.readouterr().out


def test_selective_clean_without_target(project):
    run_clean(project)
    assert not (project / "target").exists()


def test_full_clean_fails_without_cargo(project, no_path):
    analyzer = project / "target" / "rust-analyzer"
    analyzer.mkdir(parents=True)
    with pytest.raises(CommandFailedError):
        run_clean(project, True)
    assert analyzer.exists()


@pytest.mark.parametrize(
    "command, label",
    [
        (CheckCommand(), "Check failed"),
        (BuildCommand(release=True), "Build failed"),
        (TestCommand(), "Tests failed"),
    ],
)
def test_commands_report_missing_cargo(project, no_path, capsys, command, label):
    with pytest.raises(CommandFailedError) as info:
        run(command, project)
    assert "Failed to execute cargo" in str(info.value)
    assert label in capsys.readouterr().err


def test_direct_runners_raise_without_cargo(project, no_path):
    with pytest.raises(CommandFailedError):
        run_check(project, True)
    with pytest.raises(CommandFailedError):
        run_build(project, False, True)
    with pytest.raises(CommandFailedError):
        run_test(project, True, False)


def test_show_build_stats_prints_summary(project, no_path, capsys):
    target = project / "target"
    target.mkdir()
    (target / "artifact.bin").write_bytes(b"x" * 2048)
    show_build_stats(project, "debug", 65)
    out = capsys.readouterr().out
    assert "Duration: 1m 5s" in out
    assert "Build type: debug" in out
    assert f"Target directory size: {format_bytes(2048)}" in out
    assert "Workspace dependencies" not in out


def test_show_build_stats_without_target(project, no_path, capsys):
    show_build_stats(project, "release", 0.5)
    out = capsys.readouterr().out
    assert "Duration: 500ms" in out
    assert "Target directory size" not in out