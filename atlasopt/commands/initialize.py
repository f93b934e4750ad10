"""Set up a Rust project for optimized builds."""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from rich.console import Console
from rich.text import Text

from atlasopt.commands.tools import install_tools
from atlasopt.config import OptimizerConfig, generate_cargo_config, generate_cargo_profiles
from atlasopt.errors import FileMissingError, IoError, ProjectValidationError
from atlasopt.system import SystemInfo
from atlasopt.utils import (
    backup_file,
    confirm,
    find_rust_project_root,
    is_rust_project,
    print_status,
    print_success,
    print_warning,
)

_console = Console(highlight=False)

PROFILES_HEADER = "# Optimized build profiles added by Atlas\n"

FAST_BUILD_SCRIPT = """\
#!/bin/bash
# Fast build script generated by Atlas
# Use Atlas for more advanced features

set -e

case "${1:-check}" in
    "check")
        echo "Running fast cargo check..."
        cargo check --workspace --all-targets
        ;;
    "build")
        echo "Running optimized cargo build..."
        cargo build --workspace
        ;;
    "test")
        echo "Running fast tests..."
        if command -v cargo-nextest >/dev/null 2>&1; then
            cargo nextest run --workspace
        else
            cargo test --workspace
        fi
        ;;
    "release")
        echo "Running optimized release build..."
        cargo build --workspace --release
        ;;
    *)
        echo "Usage: $0 [check|build|test|release]"
        exit 1
        ;;
esac
"""


@contextmanager
def _io_errors() -> Iterator[None]:
    try:
        yield
    except OSError as exc:
        raise IoError(str(exc)) from exc


def run(
    project_dir: str | os.PathLike[str] | None = None,
    no_backup: bool = False,
    no_tools: bool = False,
    force: bool = False,
) -> None:
    """Install optimized configuration, profiles, tools and scripts into a project."""
    project_root = Path(project_dir) if project_dir is not None else find_rust_project_root(".")
    print_status(f"Initializing optimization for project: {project_root}")

    if not is_rust_project(project_root):
        raise ProjectValidationError(
            "No Cargo.toml found. Please run this command from a Rust project directory."
        )

    system_info = SystemInfo.detect()
    print_status(
        f"Detected system: {system_info.os} {system_info.arch} "
        f"with {system_info.cpu_cores} CPU cores"
    )

    config = OptimizerConfig.load_or_default()
    config.validate()

    if not no_backup:
        backup_existing_files(project_root)

    install_cargo_config(project_root, config, system_info, force)
    install_cargo_profiles(project_root, force)

    if not no_tools:
        print_status("Installing required optimization tools...")
        install_tools(config.tools.preferred_tools)

    create_scripts_directory(project_root)
    OptimizerConfig.save_default()

    print_success("🎉 Rust build optimization initialized successfully!")
    print_next_steps()


def backup_existing_files(project_root: str | os.PathLike[str]) -> list[Path]:
    """Back up the Cargo config and Cargo.toml; return the backup paths."""
    root = Path(project_root)
    print_status("Backing up existing files...")
    backups = []
    for candidate in (root / ".cargo" / "config.toml", root / "Cargo.toml"):
        if candidate.exists():
            backups.append(backup_file(candidate))
    return backups


def install_cargo_config(
    project_root: str | os.PathLike[str],
    config: OptimizerConfig,
    system_info: SystemInfo,
    force: bool = False,
) -> Path | None:
    """Write ``.cargo/config.toml``; return its path, or None if the user declined."""
    cargo_dir = Path(project_root) / ".cargo"
    config_path = cargo_dir / "config.toml"
    with _io_errors():
        cargo_dir.mkdir(parents=True, exist_ok=True)

    if config_path.exists() and not force:
        if not confirm("Cargo config already exists. Overwrite?"):
            print_warning("Skipping Cargo config installation")
            return None

    with _io_errors():
        config_path.write_text(generate_cargo_config(config, system_info), encoding="utf-8")
    print_success(f"Installed optimized Cargo config: {config_path}")
    return config_path


def install_cargo_profiles(project_root: str | os.PathLike[str], force: bool = False) -> bool:
    """Append optimized profiles to Cargo.toml; return whether it was changed."""
    cargo_toml = Path(project_root) / "Cargo.toml"
    if not cargo_toml.exists():
        raise FileMissingError("Cargo.toml")

    with _io_errors():
        existing = cargo_toml.read_text(encoding="utf-8")

    if "[profile.dev]" in existing and not force:
        if not confirm("Cargo.toml already contains profiles. Add optimized profiles anyway?"):
            print_warning("Skipping Cargo.toml profile optimization")
            return False

    if not existing.endswith("\n"):
        existing += "\n"
    updated = existing + "\n" + PROFILES_HEADER + generate_cargo_profiles()

    with _io_errors():
        cargo_toml.write_text(updated, encoding="utf-8")
    print_success("Added optimized build profiles to Cargo.toml")
    return True


def create_scripts_directory(project_root: str | os.PathLike[str]) -> Path:
    """Create ``scripts/fast-build.sh`` unless it exists; return its path."""
    scripts_dir = Path(project_root) / "scripts"
    with _io_errors():
        if not scripts_dir.exists():
            scripts_dir.mkdir(parents=True)
            print_status(f"Created scripts directory: {scripts_dir}")

        script_path = scripts_dir / "fast-build.sh"
        if not script_path.exists():
            script_path.write_text(FAST_BUILD_SCRIPT, encoding="utf-8")
            if os.name == "posix":
                script_path.chmod(0o755)
            print_success(f"Created build script: {script_path}")
    return script_path


def print_next_steps() -> None:
    out = _console
    out.print()
    print_success("🎉 Rust Build Optimization initialized successfully!")
    out.print()
    out.print("📋 Next steps:")
    steps = [
        ("Test the optimizations", "atlas build check"),
        ("Run development workflow", "atlas dev watch"),
        ("Check optimization status", "atlas status"),
        ("View configuration", "atlas config show"),
    ]
    for number, (label, command) in enumerate(steps, start=1):
        out.print(
            Text.assemble(f"   {number}. {label}: ", (command, "bright_green")), soft_wrap=True
        )
    out.print()
    out.print("🚀 Quick commands:")
    quick = [
        ("atlas dev quick-check", "Fast syntax check"),
        ("atlas build build", "Optimized build"),
        ("atlas build test", "Fast testing"),
        ("atlas dev watch", "Continuous development"),
    ]
    for command, label in quick:
        out.print(Text.assemble("   ", (command, "bright_cyan"), f" - {label}"), soft_wrap=True)
    out.print()
    out.print(Text.assemble("📚 For help: ", ("atlas --help", "bright_yellow")), soft_wrap=True)