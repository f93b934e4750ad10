"""Optimized check, build, test and clean commands."""

from __future__ import annotations

import os
import shutil
import time
from dataclasses import dataclass
from pathlib import Path

from atlasopt.errors import CommandFailedError, IoError, OptimizerError, ProjectValidationError
from atlasopt.utils import (
    execute_command,
    execute_command_with_output,
    find_rust_project_root,
    format_bytes,
    format_duration,
    get_directory_size,
    is_rust_project,
    is_tool_available,
    print_error,
    print_status,
    print_success,
)


@dataclass(frozen=True)
class CheckCommand:
    stats: bool = False


@dataclass(frozen=True)
class BuildCommand:
    release: bool = False
    stats: bool = False


@dataclass(frozen=True)
class TestCommand:
    __test__ = False

    changed: bool = False
    stats: bool = False


@dataclass(frozen=True)
class CleanCommand:
    clean_all: bool = False


BuildAction = CheckCommand | BuildCommand | TestCommand | CleanCommand


def run(command: BuildAction, project_dir: str | os.PathLike[str] | None = None) -> None:
    """Run one build command in the project."""
    project_root = Path(project_dir) if project_dir is not None else find_rust_project_root(".")
    if not is_rust_project(project_root):
        raise ProjectValidationError(
            "No Cargo.toml found. Please run this command from a Rust project directory."
        )
    match command:
        case CheckCommand(stats=stats):
            run_check(project_root, stats)
        case BuildCommand(release=release, stats=stats):
            run_build(project_root, release, stats)
        case TestCommand(changed=changed, stats=stats):
            run_test(project_root, changed, stats)
        case CleanCommand(clean_all=clean_all):
            run_clean(project_root, clean_all)
        case _:
            raise TypeError(f"unknown build command: {command!r}")


def _run_timed(
    project_root: Path,
    args: list[str],
    label: str,
    stats_label: str,
    show_stats: bool,
) -> None:
    start = time.perf_counter()
    try:
        execute_command_with_output("cargo", args, project_root)
    except OptimizerError as exc:
        print_error(f"❌ {label} failed: {exc}")
        raise
    duration = time.perf_counter() - start
    print_success(f"✅ {label} completed in {format_duration(duration)}")
    if show_stats:
        show_build_stats(project_root, stats_label, duration)


def run_check(project_root: str | os.PathLike[str], show_stats: bool = False) -> None:
    print_status("Running optimized cargo check...")
    _run_timed(
        Path(project_root), ["check", "--workspace", "--all-targets"], "Check", "check", show_stats
    )


def run_build(
    project_root: str | os.PathLike[str], release: bool = False, show_stats: bool = False
) -> None:
    build_type = "release" if release else "debug"
    print_status(f"Running optimized cargo build ({build_type})...")
    args = ["build", "--workspace"]
    if release:
        args.append("--release")
    _run_timed(Path(project_root), args, "Build", build_type, show_stats)


def run_test(
    project_root: str | os.PathLike[str], changed: bool = False, show_stats: bool = False
) -> None:
    """Run the test suite, with cargo-nextest when it is installed."""
    print_status("Running optimized tests...")
    if is_tool_available("cargo-nextest"):
        print_status("Using cargo-nextest for faster testing...")
        args = ["nextest", "run", "--workspace"]
    else:
        args = ["test", "--workspace"]
    _run_timed(Path(project_root), args, "Tests", "test", show_stats)


def run_clean(project_root: str | os.PathLike[str], clean_all: bool = False) -> None:
    """Clean everything, or only dependency rlibs to keep incremental data."""
    root = Path(project_root)
    print_status("Cleaning build artifacts...")
    target_dir = root / "target"
    try:
        if clean_all:
            execute_command_with_output("cargo", ["clean"], root)
            analyzer_dir = target_dir / "rust-analyzer"
            if analyzer_dir.exists():
                shutil.rmtree(analyzer_dir)
                print_status("Cleaned rust-analyzer cache")
            print_success("✅ Complete clean finished")
            return
        deps_dir = target_dir / "debug" / "deps"
        if deps_dir.is_dir():
            for entry in deps_dir.iterdir():
                if entry.suffix == ".rlib":
                    entry.unlink()
    except OSError as exc:
        raise IoError(str(exc)) from exc
    print_success("✅ Selective clean finished (preserved incremental compilation data)")


def show_build_stats(
    project_root: str | os.PathLike[str], build_type: str, duration: float
) -> None:
    root = Path(project_root)
    print()
    print_status("📊 Build Statistics:")
    print(f"  ⏱️  Duration: {format_duration(duration)}")
    print(f"  🔧 Build type: {build_type}")

    target_dir = root / "target"
    if target_dir.exists():
        try:
            size = format_bytes(get_directory_size(target_dir))
        except OptimizerError:
            size = "Unable to calculate"
        print(f"  📁 Target directory size: {size}")

    if is_tool_available("sccache"):
        print_status("sccache statistics:")
        try:
            execute_command_with_output("sccache", ["--show-stats"], None)
        except OptimizerError:
            pass

    try:
        completed = execute_command("cargo", ["tree", "--workspace", "--depth", "0"], root)
    except CommandFailedError:
        completed = None
    if completed is not None and completed.returncode == 0:
        try:
            stdout = completed.stdout.decode("utf-8")
        except UnicodeDecodeError:
            stdout = None
        if stdout is not None:
            print(f"  📦 Workspace dependencies: {len(stdout.splitlines())}")

    print()