"""Installation and listing of the helper tools that speed up builds."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from rich.console import Console
from rich.text import Text

from atlasopt.errors import (
    CommandFailedError,
    OptimizerError,
    ToolNotFoundError,
    UnsupportedPlatformError,
)
from atlasopt.system import Architecture, OperatingSystem, SystemInfo
from atlasopt.utils import (
    create_spinner,
    execute_command_success,
    execute_command_with_output,
    print_status,
    print_success,
    print_warning,
)

_console = Console(highlight=False)

_BASE_TOOLS = ("sccache", "cargo-nextest", "cargo-udeps", "cargo-hakari", "cargo-watch")

_CARGO_TOOLS = frozenset(
    {"cargo-nextest", "cargo-udeps", "cargo-hakari", "cargo-watch", "cargo-expand", "cargo-bloat"}
)


@dataclass(frozen=True)
class Tool:
    """A tool the optimizer knows how to install."""

    name: str
    description: str


def run(list_only: bool = False, only: list[str] | None = None) -> None:
    """List the known tools, or install the chosen or recommended ones."""
    system_info = SystemInfo.detect()
    if list_only:
        list_available_tools(system_info)
        return
    tools = list(only) if only is not None else get_recommended_tools(system_info)
    install_tools(tools)


def install_tools(tools: Iterable[str]) -> dict[str, OptimizerError | None]:
    """Install each tool; return each tool's error, or None where it succeeded."""
    print_status("Installing optimization tools...")
    system_info = SystemInfo.detect()
    results: dict[str, OptimizerError | None] = {}

    for tool in tools:
        print_status(f"Installing {tool}...")
        try:
            install_single_tool(tool, system_info)
        except OptimizerError as exc:
            results[tool] = exc
            print_warning(f"⚠️  Failed to install {tool}: {exc}")
        else:
            results[tool] = None
            print_success(f"✅ {tool} installed successfully")

    print_installation_summary(results)
    return results


def install_single_tool(tool: str, system_info: SystemInfo) -> None:
    """Install one tool unless it is already present."""
    if system_info.is_tool_installed(tool):
        return

    spinner = create_spinner(f"Installing {tool}")
    try:
        if tool == "sccache":
            install_sccache(system_info)
        elif tool in _CARGO_TOOLS:
            install_cargo_tool(tool)
        elif tool == "mold":
            install_mold(system_info)
        elif tool == "zld":
            install_zld(system_info)
        elif tool == "lld":
            install_lld(system_info)
        else:
            raise ToolNotFoundError(f"Unknown tool: {tool}")
    finally:
        spinner.finish_and_clear()


def _package_install_args(manager: str, package: str) -> list[str] | None:
    return {
        "apt": ["apt-get", "install", "-y", package],
        "yum": ["yum", "install", "-y", package],
        "pacman": ["pacman", "-S", "--noconfirm", package],
    }.get(manager)


def _install_with_package_manager(system_info: SystemInfo, package: str) -> None:
    manager = system_info.package_manager()
    if manager is None:
        raise UnsupportedPlatformError(f"No package manager found for {package} installation")
    args = _package_install_args(manager, package)
    if args is None:
        raise UnsupportedPlatformError(
            f"Package manager not supported for {package} installation"
        )
    execute_command_with_output("sudo", args, None)


def install_sccache(system_info: SystemInfo) -> None:
    """Install sccache with the platform's package manager, falling back to cargo."""
    if system_info.os == OperatingSystem.MACOS:
        execute_command_with_output("brew", ["install", "sccache"], None)
    elif system_info.os == OperatingSystem.LINUX:
        manager = system_info.package_manager()
        if manager == "apt":
            if execute_command_success("sudo", ["apt-get", "update"], None):
                execute_command_with_output(
                    "sudo", ["apt-get", "install", "-y", "sccache"], None
                )
            else:
                install_cargo_tool("sccache")
        elif manager in ("yum", "pacman"):
            try:
                execute_command_with_output(
                    "sudo", _package_install_args(manager, "sccache") or [], None
                )
            except CommandFailedError:
                install_cargo_tool("sccache")
        else:
            install_cargo_tool("sccache")
    elif system_info.os == OperatingSystem.WINDOWS:
        try:
            execute_command_with_output("winget", ["install", "Mozilla.sccache"], None)
        except CommandFailedError:
            install_cargo_tool("sccache")
    else:
        install_cargo_tool("sccache")


def install_cargo_tool(tool: str) -> None:
    execute_command_with_output("cargo", ["install", tool, "--locked"], None)


def install_mold(system_info: SystemInfo) -> None:
    if system_info.os != OperatingSystem.LINUX:
        raise UnsupportedPlatformError("mold is only available on Linux")
    _install_with_package_manager(system_info, "mold")


def install_zld(system_info: SystemInfo) -> None:
    if system_info.os != OperatingSystem.MACOS:
        raise UnsupportedPlatformError("zld is only available on macOS")
    execute_command_with_output("brew", ["install", "zld"], None)


def install_lld(system_info: SystemInfo) -> None:
    if system_info.os == OperatingSystem.MACOS:
        execute_command_with_output("brew", ["install", "llvm"], None)
    elif system_info.os == OperatingSystem.LINUX:
        _install_with_package_manager(system_info, "lld")
    elif system_info.os == OperatingSystem.WINDOWS:
        execute_command_with_output("winget", ["install", "LLVM.LLVM"], None)
    else:
        raise UnsupportedPlatformError("lld installation not supported on this platform")


def _flag(ok: bool, yes: str, no: str) -> tuple[str, str]:
    return (yes, "bright_green") if ok else (no, "bright_red")


def list_available_tools(system_info: SystemInfo) -> None:
    """Print every known tool with its install state and platform support."""
    _console.print(Text("📦 Available Optimization Tools", style="bold bright_blue"))
    _console.print()
    for category, tools in get_all_tools():
        _console.print(Text(category, style="bold bright_green"))
        for tool in tools:
            line = Text.assemble(
                "  ",
                (tool.name, "bright_cyan"),
                f" - {tool.description} | ",
                _flag(system_info.is_tool_installed(tool.name), "✅ Installed", "❌ Not installed"),
                " | ",
                _flag(
                    is_tool_supported(tool.name, system_info),
                    "✅ Supported",
                    "❌ Not supported",
                ),
            )
            _console.print(line, soft_wrap=True)
        _console.print()


def get_recommended_tools(system_info: SystemInfo) -> list[str]:
    """The base tool set plus the fast linker suited to the platform."""
    tools = list(_BASE_TOOLS)
    if system_info.os == OperatingSystem.MACOS:
        if system_info.arch == Architecture.X86_64:
            tools.append("zld")
    elif system_info.os == OperatingSystem.LINUX:
        tools.append("mold")
    elif system_info.os == OperatingSystem.WINDOWS:
        tools.append("lld")
    return tools


def get_all_tools() -> list[tuple[str, list[Tool]]]:
    """Known tools, grouped by category."""
    return [
        (
            "🚀 Build Acceleration",
            [
                Tool("sccache", "Compilation cache for faster builds"),
                Tool("cargo-nextest", "Fast test runner"),
            ],
        ),
        (
            "🔗 Fast Linkers",
            [
                Tool("mold", "Fastest linker for Linux"),
                Tool("zld", "Fast linker for macOS"),
                Tool("lld", "LLVM linker (cross-platform)"),
            ],
        ),
        (
            "🔍 Analysis Tools",
            [
                Tool("cargo-udeps", "Find unused dependencies"),
                Tool("cargo-hakari", "Workspace optimization"),
                Tool("cargo-expand", "Macro expansion"),
                Tool("cargo-bloat", "Binary size analysis"),
            ],
        ),
        (
            "⚡ Development Tools",
            [Tool("cargo-watch", "Auto-rebuild on file changes")],
        ),
    ]


def is_tool_supported(tool: str, system_info: SystemInfo) -> bool:
    if tool == "mold":
        return system_info.os == OperatingSystem.LINUX
    if tool == "zld":
        return system_info.os == OperatingSystem.MACOS
    return True


def print_installation_summary(results: Mapping[str, OptimizerError | None]) -> None:
    """Print which tools were installed and which failed."""
    _console.print()
    _console.print(Text("📊 Installation Summary", style="bold bright_blue"))
    _console.print()

    successful = [tool for tool, error in results.items() if error is None]
    failed = [(tool, error) for tool, error in results.items() if error is not None]

    if successful:
        _console.print(Text.assemble(("✅", "bright_green"), " Successfully installed:"))
        for tool in successful:
            _console.print(Text.assemble("  • ", (tool, "bright_green")), soft_wrap=True)
        _console.print()

    if failed:
        _console.print(Text.assemble(("❌", "bright_red"), " Failed to install:"))
        for tool, error in failed:
            _console.print(
                Text.assemble("  • ", (tool, "bright_red"), f": {error}"), soft_wrap=True
            )
        _console.print()
        _console.print(
            Text.assemble(
                ("💡", "bright_yellow"),
                " You can install these tools manually or try again later.",
            )
        )

    _console.print("🎉 Tool installation completed!")