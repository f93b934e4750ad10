import pytest

from atlasopt.commands.development import CleanBuild, Profile, QuickCheck, Watch, run
from atlasopt.errors import CommandFailedError, ProjectValidationError


@pytest.fixture
def empty_path(monkeypatch, tmp_path):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", str(bin_dir))
    return bin_dir


def test_watch_without_cargo_watch_warns(empty_path, tmp_path, capsys):
    run(Watch(), tmp_path)
    out = capsys.readouterr().out
    assert "cargo-watch not installed. Install with: cargo install cargo-watch" in out


@pytest.mark.parametrize(
    "command", [QuickCheck(), Profile(), CleanBuild(), CleanBuild(release=True)]
)
def test_commands_fail_without_cargo(empty_path, tmp_path, command):
    with pytest.raises(CommandFailedError):
        run(command, tmp_path)


def test_quick_check_announces_itself(empty_path, tmp_path, capsys):
    with pytest.raises(CommandFailedError):
        run(QuickCheck(), tmp_path)
    assert "Running ultra-fast syntax check..." in capsys.readouterr().out


def test_requires_project_when_no_dir_given(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ProjectValidationError):
        run(QuickCheck())


def test_unknown_command_rejected(tmp_path):
    with pytest.raises(TypeError):
        run(object(), tmp_path)