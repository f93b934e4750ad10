"""Report on the host system and the optimization tools found on it."""

from __future__ import annotations

import json
import os
from dataclasses import asdict
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.text import Text

from atlasopt.system import SystemInfo
from atlasopt.utils import find_rust_project_root

_console = Console(highlight=False)


def run(
    detailed: bool = False,
    as_json: bool = False,
    project_dir: str | os.PathLike[str] | None = None,
) -> None:
    """Print the optimization status, as text or as JSON."""
    if project_dir is None:
        find_rust_project_root(".")
    else:
        Path(project_dir)

    system_info = SystemInfo.detect()
    if as_json:
        print(json.dumps(status_document(system_info), indent=2, sort_keys=True, ensure_ascii=False))
    else:
        print_status_overview(system_info, detailed)


def status_document(system_info: SystemInfo) -> dict[str, Any]:
    """The status as plain data, ready for JSON."""
    return {
        "system": {
            "os": str(system_info.os),
            "arch": str(system_info.arch),
            "cpu_cores": system_info.cpu_cores,
            "rust_version": system_info.rust_version,
            "cargo_version": system_info.cargo_version,
        },
        "tools": [asdict(tool) for tool in system_info.available_tools],
    }


def print_status_overview(system_info: SystemInfo, detailed: bool = False) -> None:
    out = _console
    out.print(Text("🚀 Rust Build Optimizer Status", style="bold bright_blue"))
    out.print()

    out.print(Text("💻 System Information", style="bold bright_green"))
    out.print(f"  OS: {system_info.os} {system_info.arch}", markup=False, soft_wrap=True)
    out.print(f"  CPU Cores: {system_info.cpu_cores}", markup=False)
    if system_info.rust_version is not None:
        out.print(f"  Rust: {system_info.rust_version}", markup=False, soft_wrap=True)
    if system_info.cargo_version is not None:
        out.print(f"  Cargo: {system_info.cargo_version}", markup=False, soft_wrap=True)
    out.print()

    out.print(Text("🛠️  Tool Status", style="bold bright_green"))
    for tool in system_info.available_tools:
        status = (
            ("✅ Installed", "bright_green")
            if tool.is_installed
            else ("❌ Not installed", "bright_red")
        )
        line = Text.assemble("  ", (tool.name, "bright_cyan"), " - ", status)
        if detailed and tool.is_installed and tool.version is not None:
            line.append(f" ({tool.version})")
        out.print(line, soft_wrap=True)
    out.print()

    missing = [tool for tool in system_info.available_tools if not tool.is_installed]
    if missing:
        out.print(Text("💡 Recommendations", style="bold bright_yellow"))
        out.print(
            Text.assemble(
                "  Install missing tools with: ",
                ("rust-build-optimizer install-tools", "bright_cyan"),
            ),
            soft_wrap=True,
        )
        for tool in missing:
            out.print(Text(f"    • {tool.name}"), soft_wrap=True)
        out.print()

    out.print("🎉 Status check completed!")