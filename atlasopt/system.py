"""Detection of the host platform, toolchain and installed helper tools."""

from __future__ import annotations

import os
import platform
import shutil
import subprocess
import sys
from dataclasses import dataclass, field
from typing import ClassVar

TOOL_NAMES: tuple[str, ...] = (
    "sccache",
    "cargo-nextest",
    "cargo-udeps",
    "cargo-hakari",
    "cargo-watch",
    "cargo-expand",
    "cargo-bloat",
    "lld",
    "mold",
    "zld",
    "clang",
    "gcc",
)


@dataclass(frozen=True)
class OperatingSystem:
    """An operating system, identified by its lower-case name."""

    identifier: str

    MACOS: ClassVar[OperatingSystem]
    LINUX: ClassVar[OperatingSystem]
    WINDOWS: ClassVar[OperatingSystem]

    def __str__(self) -> str:
        return _OS_DISPLAY.get(self.identifier, f"Unknown ({self.identifier})")


_OS_DISPLAY = {"macos": "macOS", "linux": "Linux", "windows": "Windows"}
OperatingSystem.MACOS = OperatingSystem("macos")
OperatingSystem.LINUX = OperatingSystem("linux")
OperatingSystem.WINDOWS = OperatingSystem("windows")


@dataclass(frozen=True)
class Architecture:
    """A CPU architecture, identified by its lower-case name."""

    identifier: str

    X86_64: ClassVar[Architecture]
    AARCH64: ClassVar[Architecture]

    def __str__(self) -> str:
        if self.identifier in _KNOWN_ARCHES:
            return self.identifier
        return f"Unknown ({self.identifier})"


_KNOWN_ARCHES = {"x86_64", "aarch64"}
Architecture.X86_64 = Architecture("x86_64")
Architecture.AARCH64 = Architecture("aarch64")


@dataclass
class AvailableTool:
    name: str
    version: str | None = None
    path: str = ""
    is_installed: bool = False


@dataclass
class SystemInfo:
    os: OperatingSystem
    arch: Architecture
    cpu_cores: int
    rust_version: str | None = None
    cargo_version: str | None = None
    available_tools: list[AvailableTool] = field(default_factory=list)

    @classmethod
    def detect(cls) -> SystemInfo:
        """Inspect the running machine."""
        return cls(
            os=detect_os(),
            arch=detect_architecture(),
            cpu_cores=detect_cpu_cores(),
            rust_version=detect_rust_version(),
            cargo_version=detect_cargo_version(),
            available_tools=detect_available_tools(),
        )

    def recommended_linker(self) -> str | None:
        if self.os == OperatingSystem.MACOS:
            return "system" if self.arch == Architecture.AARCH64 else "zld"
        if self.os == OperatingSystem.LINUX:
            return "mold"
        if self.os == OperatingSystem.WINDOWS:
            return "lld"
        return None

    def package_manager(self) -> str | None:
        if self.os == OperatingSystem.MACOS:
            return "brew"
        if self.os == OperatingSystem.LINUX:
            for executable, manager in (("apt-get", "apt"), ("yum", "yum"), ("pacman", "pacman")):
                if shutil.which(executable) is not None:
                    return manager
            return None
        if self.os == OperatingSystem.WINDOWS:
            return "winget"
        return None

    def supports_fast_linker(self) -> bool:
        return self.recommended_linker() is not None

    def get_tool(self, name: str) -> AvailableTool | None:
        return next((tool for tool in self.available_tools if tool.name == name), None)

    def is_tool_installed(self, name: str) -> bool:
        tool = self.get_tool(name)
        return tool is not None and tool.is_installed


def detect_os() -> OperatingSystem:
    plat = sys.platform
    if plat == "darwin":
        return OperatingSystem.MACOS
    if plat.startswith("linux"):
        return OperatingSystem.LINUX
    if plat in ("win32", "cygwin"):
        return OperatingSystem.WINDOWS
    return OperatingSystem(plat)


def detect_architecture() -> Architecture:
    machine = platform.machine().lower()
    if machine in ("x86_64", "amd64"):
        return Architecture.X86_64
    if machine in ("aarch64", "arm64"):
        return Architecture.AARCH64
    return Architecture(machine or "unknown")


def detect_cpu_cores() -> int:
    return os.cpu_count() or 1


def _version_output(command: str) -> str | None:
    try:
        completed = subprocess.run([command, "--version"], capture_output=True, check=False)
    except OSError:
        return None
    if completed.returncode != 0:
        return None
    try:
        return completed.stdout.decode("utf-8")
    except UnicodeDecodeError:
        return None


def detect_rust_version() -> str | None:
    output = _version_output("rustc")
    return output.strip() if output is not None else None


def detect_cargo_version() -> str | None:
    output = _version_output("cargo")
    return output.strip() if output is not None else None


def detect_available_tools() -> list[AvailableTool]:
    tools = []
    for name in TOOL_NAMES:
        path = shutil.which(name)
        if path is None:
            tools.append(AvailableTool(name=name))
        else:
            tools.append(
                AvailableTool(
                    name=name, version=get_tool_version(name), path=path, is_installed=True
                )
            )
    return tools


def get_tool_version(tool: str) -> str | None:
    """First line of ``tool --version`` for a known tool, or None."""
    if tool not in TOOL_NAMES:
        return None
    output = _version_output(tool)
    if output is None:
        return None
    lines = output.splitlines()
    return lines[0].strip() if lines else None