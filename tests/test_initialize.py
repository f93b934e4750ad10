import tomllib

import pytest

from atlasopt.commands.initialize import (
    backup_existing_files,
    create_scripts_directory,
    install_cargo_config,
    install_cargo_profiles,
    print_next_steps,
    run,
)
from atlasopt.config import (
    BuildConfig,
    OptimizerConfig,
    generate_cargo_config,
    generate_cargo_profiles,
)
from atlasopt.errors import FileMissingError, ProjectValidationError
from atlasopt.system import Architecture, OperatingSystem, SystemInfo


@pytest.fixture
def linux_info():
    return SystemInfo(os=OperatingSystem.LINUX, arch=Architecture.X86_64, cpu_cores=4)


@pytest.fixture
def config():
    return OptimizerConfig(build=BuildConfig(parallel_jobs=4))


def test_install_cargo_config_writes_generated_content(tmp_path, config, linux_info):
    path = install_cargo_config(tmp_path, config, linux_info, True)
    assert path == tmp_path / ".cargo" / "config.toml"
    assert path.read_text(encoding="utf-8") == generate_cargo_config(config, linux_info)
    assert "[target.x86_64-unknown-linux-gnu]" in path.read_text(encoding="utf-8")


def test_install_cargo_config_force_overwrites(tmp_path, config, linux_info):
    cargo_dir = tmp_path / ".cargo"
    cargo_dir.mkdir()
    (cargo_dir / "config.toml").write_text("old = true\n", encoding="utf-8")
    install_cargo_config(tmp_path, config, linux_info, True)
    content = (cargo_dir / "config.toml").read_text(encoding="utf-8")
    assert "old = true" not in content
    assert content.startswith("# Cargo Configuration for Optimized Builds")


def test_install_cargo_profiles_appends(tmp_path):
    original = '[package]\nname = "demo"'
    cargo_toml = tmp_path / "Cargo.toml"
    cargo_toml.write_text(original, encoding="utf-8")

    assert install_cargo_profiles(tmp_path, True) is True
    content = cargo_toml.read_text(encoding="utf-8")
    assert content == (
        original
        + "\n\n# Optimized build profiles added by Atlas\n"
        + generate_cargo_profiles()
    )
    parsed = tomllib.loads(content)
    assert parsed["package"]["name"] == "demo"
    assert parsed["profile"]["release"]["opt-level"] == 3


def test_install_cargo_profiles_forced_with_existing_profile(tmp_path):
    cargo_toml = tmp_path / "Cargo.toml"
    cargo_toml.write_text("[profile.dev]\nopt-level = 0\n", encoding="utf-8")
    assert install_cargo_profiles(tmp_path, True) is True
    assert cargo_toml.read_text(encoding="utf-8").count("[profile.dev]") == 2


def test_install_cargo_profiles_missing_manifest(tmp_path):
    with pytest.raises(FileMissingError):
        install_cargo_profiles(tmp_path, True)


def test_create_scripts_directory_writes_script(tmp_path):
    script = create_scripts_directory(tmp_path)
    assert script == tmp_path / "scripts" / "fast-build.sh"
    content = script.read_text(encoding="utf-8")
    assert content.startswith("#!/bin/bash")
    assert "cargo nextest run --workspace" in content


def test_create_scripts_directory_keeps_existing_script(tmp_path):
    scripts = tmp_path / "scripts"
    scripts.mkdir()
    (scripts / "fast-build.sh").write_text("custom\n", encoding="utf-8")
    script = create_scripts_directory(tmp_path)
    assert script.read_text(encoding="utf-8") == "custom\n"


def test_backup_existing_files_copies_both(tmp_path):
    (tmp_path / "Cargo.toml").write_text("[package]\n", encoding="utf-8")
    (tmp_path / ".cargo").mkdir()
    (tmp_path / ".cargo" / "config.toml").write_text("[build]\n", encoding="utf-8")

    backups = backup_existing_files(tmp_path)
    assert sorted(backups) == sorted(
        [tmp_path / "Cargo.toml.backup", tmp_path / ".cargo" / "config.toml.backup"]
    )
    assert (tmp_path / "Cargo.toml.backup").read_text(encoding="utf-8") == "[package]\n"


def test_backup_existing_files_only_present_ones(tmp_path):
    (tmp_path / "Cargo.toml").write_text("[package]\n", encoding="utf-8")
    backups = backup_existing_files(tmp_path)
    assert backups == [tmp_path / "Cargo.toml.backup"]
    assert not (tmp_path / ".cargo" / "config.toml.backup").exists()


def test_run_rejects_non_rust_project(tmp_path):
    with pytest.raises(ProjectValidationError):
        run(tmp_path, no_backup=True, no_tools=True, force=True)


def test_print_next_steps_lists_commands(capsys):
    print_next_steps()
    out = capsys.readouterr().out
    assert "atlas build check" in out
    assert "atlas dev quick-check - Fast syntax check" in out
    assert "atlas --help" in out