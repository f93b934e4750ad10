"""Development workflow commands."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from atlasopt.utils import (
    execute_command_with_output,
    find_rust_project_root,
    is_tool_available,
    print_status,
    print_success,
    print_warning,
)


@dataclass(frozen=True)
class QuickCheck:
    pass


@dataclass(frozen=True)
class Watch:
    paths: tuple[Path, ...] | None = None


@dataclass(frozen=True)
class Profile:
    detailed: bool = False


@dataclass(frozen=True)
class CleanBuild:
    release: bool = False


DevAction = QuickCheck | Watch | Profile | CleanBuild


def run(command: DevAction, project_dir: str | os.PathLike[str] | None = None) -> None:
    """Run one development workflow command."""
    if project_dir is None:
        find_rust_project_root(".")

    match command:
        case QuickCheck():
            print_status("Running ultra-fast syntax check...")
            execute_command_with_output(
                "cargo",
                ["check", "--lib", "--bins", "--workspace", "--message-format=short"],
                None,
            )
            print_success("✅ Quick check completed")
        case Watch():
            print_status("Starting watch mode...")
            if is_tool_available("cargo-watch"):
                execute_command_with_output(
                    "cargo", ["watch", "-x", "check --workspace --message-format=short"], None
                )
            else:
                print_warning("cargo-watch not installed. Install with: cargo install cargo-watch")
        case Profile():
            print_status("Profiling build performance...")
            execute_command_with_output("cargo", ["build", "--timings"], None)
            print_success("✅ Build profile generated (see cargo-timing.html)")
        case CleanBuild(release=release):
            print_status("Running clean build...")
            execute_command_with_output("cargo", ["clean"], None)
            execute_command_with_output(
                "cargo", ["build", "--release"] if release else ["build"], None
            )
            print_success("✅ Clean build completed")
        case _:
            raise TypeError(f"unknown development command: {command!r}")