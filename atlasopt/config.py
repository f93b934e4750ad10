"""Optimizer settings and generation of optimized Cargo configuration."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import platformdirs
import tomli_w

from atlasopt.errors import (
    ConfigError,
    FileMissingError,
    IoError,
    TomlParsingError,
    TomlSerializationError,
)
from atlasopt.system import Architecture, OperatingSystem, SystemInfo

logger = logging.getLogger(__name__)

APP_NAME = "atlas"
CONFIG_FILE_NAME = "config.toml"
MAX_PARALLEL_JOBS = 64
MAX_RETENTION_DAYS = 365
MIN_INSTALL_TIMEOUT_SECONDS = 30


def _default_preferred_tools() -> list[str]:
    return ["sccache", "cargo-nextest", "cargo-udeps", "cargo-hakari", "cargo-watch"]


def _default_watch_paths() -> list[Path]:
    return [Path("src"), Path("Cargo.toml")]


@dataclass
class BuildConfig:
    parallel_jobs: int | None = None
    incremental: bool = True
    target_cpu: str = "native"
    use_fast_linker: bool = True
    separate_rust_analyzer_target: bool = True
    enable_sccache: bool = True


@dataclass
class ToolsConfig:
    auto_install: bool = True
    preferred_tools: list[str] = field(default_factory=_default_preferred_tools)
    install_timeout_seconds: int = 300


@dataclass
class OptimizationConfig:
    clean_old_artifacts: bool = True
    artifact_retention_days: int = 7
    check_unused_deps: bool = True
    optimize_profiles: bool = True


@dataclass
class DevelopmentConfig:
    watch_mode_enabled: bool = True
    watch_paths: list[Path] = field(default_factory=_default_watch_paths)
    auto_test_on_change: bool = False
    quick_check_on_save: bool = True


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    if name not in data:
        raise TomlParsingError(f"missing field `{name}`")
    value = data[name]
    if not isinstance(value, dict):
        raise TomlParsingError(f"invalid type for `{name}`: expected a table")
    return value


def _field(section: dict[str, Any], key: str, kind: type) -> Any:
    if key not in section:
        raise TomlParsingError(f"missing field `{key}`")
    value = section[key]
    if kind is int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise TomlParsingError(f"invalid value for `{key}`: expected a non-negative integer")
    elif not isinstance(value, kind):
        raise TomlParsingError(f"invalid type for `{key}`: expected {kind.__name__}")
    return value


def _string_list(section: dict[str, Any], key: str) -> list[str]:
    values = _field(section, key, list)
    if not all(isinstance(item, str) for item in values):
        raise TomlParsingError(f"invalid type for `{key}`: expected a list of strings")
    return list(values)


@dataclass
class OptimizerConfig:
    build: BuildConfig = field(default_factory=BuildConfig)
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    optimization: OptimizationConfig = field(default_factory=OptimizationConfig)
    development: DevelopmentConfig = field(default_factory=DevelopmentConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OptimizerConfig:
        """Build a configuration from parsed TOML data; every field is required."""
        build = _section(data, "build")
        tools = _section(data, "tools")
        optimization = _section(data, "optimization")
        development = _section(data, "development")

        parallel_jobs = build.get("parallel_jobs")
        if parallel_jobs is not None:
            parallel_jobs = _field(build, "parallel_jobs", int)

        return cls(
            build=BuildConfig(
                parallel_jobs=parallel_jobs,
                incremental=_field(build, "incremental", bool),
                target_cpu=_field(build, "target_cpu", str),
                use_fast_linker=_field(build, "use_fast_linker", bool),
                separate_rust_analyzer_target=_field(
                    build, "separate_rust_analyzer_target", bool
                ),
                enable_sccache=_field(build, "enable_sccache", bool),
            ),
            tools=ToolsConfig(
                auto_install=_field(tools, "auto_install", bool),
                preferred_tools=_string_list(tools, "preferred_tools"),
                install_timeout_seconds=_field(tools, "install_timeout_seconds", int),
            ),
            optimization=OptimizationConfig(
                clean_old_artifacts=_field(optimization, "clean_old_artifacts", bool),
                artifact_retention_days=_field(optimization, "artifact_retention_days", int),
                check_unused_deps=_field(optimization, "check_unused_deps", bool),
                optimize_profiles=_field(optimization, "optimize_profiles", bool),
            ),
            development=DevelopmentConfig(
                watch_mode_enabled=_field(development, "watch_mode_enabled", bool),
                watch_paths=[Path(p) for p in _string_list(development, "watch_paths")],
                auto_test_on_change=_field(development, "auto_test_on_change", bool),
                quick_check_on_save=_field(development, "quick_check_on_save", bool),
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain data for serialization; an unset job count is left out."""
        build: dict[str, Any] = {}
        if self.build.parallel_jobs is not None:
            build["parallel_jobs"] = self.build.parallel_jobs
        build.update(
            incremental=self.build.incremental,
            target_cpu=self.build.target_cpu,
            use_fast_linker=self.build.use_fast_linker,
            separate_rust_analyzer_target=self.build.separate_rust_analyzer_target,
            enable_sccache=self.build.enable_sccache,
        )
        return {
            "build": build,
            "tools": {
                "auto_install": self.tools.auto_install,
                "preferred_tools": list(self.tools.preferred_tools),
                "install_timeout_seconds": self.tools.install_timeout_seconds,
            },
            "optimization": {
                "clean_old_artifacts": self.optimization.clean_old_artifacts,
                "artifact_retention_days": self.optimization.artifact_retention_days,
                "check_unused_deps": self.optimization.check_unused_deps,
                "optimize_profiles": self.optimization.optimize_profiles,
            },
            "development": {
                "watch_mode_enabled": self.development.watch_mode_enabled,
                "watch_paths": [str(p) for p in self.development.watch_paths],
                "auto_test_on_change": self.development.auto_test_on_change,
                "quick_check_on_save": self.development.quick_check_on_save,
            },
        }

    def to_toml(self) -> str:
        try:
            return tomli_w.dumps(self.to_dict())
        except (TypeError, ValueError) as exc:
            raise TomlSerializationError(str(exc)) from exc

    @classmethod
    def load_from_file(cls, path: str | os.PathLike[str]) -> OptimizerConfig:
        try:
            content = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FileMissingError(str(path)) from exc
        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as exc:
            raise TomlParsingError(str(exc)) from exc
        return cls.from_dict(data)

    def save_to_file(self, path: str | os.PathLike[str]) -> None:
        content = self.to_toml()
        try:
            Path(path).write_text(content, encoding="utf-8")
        except OSError as exc:
            raise IoError(str(exc)) from exc

    @classmethod
    def get_config_path(cls) -> Path:
        try:
            config_dir = platformdirs.user_config_path()
        except Exception as exc:  # platform lookup can fail in odd environments
            raise ConfigError("Could not determine config directory") from exc
        return Path(config_dir) / APP_NAME / CONFIG_FILE_NAME

    @classmethod
    def load_or_default(cls) -> OptimizerConfig:
        config_path = cls.get_config_path()
        if config_path.exists():
            return cls.load_from_file(config_path)
        return cls()

    @classmethod
    def save_default(cls) -> None:
        config_path = cls.get_config_path()
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise IoError(str(exc)) from exc
        cls().save_to_file(config_path)

    def validate(self) -> None:
        """Raise ConfigError if a setting is out of range."""
        jobs = self.build.parallel_jobs
        if jobs is not None:
            if jobs == 0:
                raise ConfigError("Parallel jobs cannot be zero")
            if jobs > MAX_PARALLEL_JOBS:
                raise ConfigError("Parallel jobs cannot exceed 64")
        if self.optimization.artifact_retention_days > MAX_RETENTION_DAYS:
            raise ConfigError("Artifact retention cannot exceed 365 days")
        if self.tools.install_timeout_seconds < MIN_INSTALL_TIMEOUT_SECONDS:
            raise ConfigError("Tool install timeout must be at least 30 seconds")
        for path in self.development.watch_paths:
            if not Path(path).exists():
                logger.warning("Watch path does not exist: %s", path)

    def effective_parallel_jobs(self) -> int:
        if self.build.parallel_jobs is not None:
            return self.build.parallel_jobs
        return os.cpu_count() or 1


def _target_section(config: OptimizerConfig, system_info: SystemInfo) -> list[str]:
    cpu_flag = f'    "-C", "target-cpu={config.build.target_cpu}",'
    if system_info.os == OperatingSystem.MACOS:
        if system_info.arch == Architecture.AARCH64:
            return [
                "[target.aarch64-apple-darwin]",
                "rustflags = [",
                cpu_flag,
                '    "-C", "codegen-units=16",',
                '    "-C", "link-arg=-Wl,-dead_strip",',
                '    "-C", "link-arg=-Wl,-no_compact_unwind",',
                "]",
                "",
            ]
        return [
            "[target.x86_64-apple-darwin]",
            'linker = "clang"',
            "rustflags = [",
            '    "-C", "link-arg=-fuse-ld=/usr/local/bin/zld",',
            cpu_flag,
            '    "-C", "codegen-units=1",',
            "]",
            "",
        ]
    if system_info.os == OperatingSystem.LINUX:
        return [
            "[target.x86_64-unknown-linux-gnu]",
            'linker = "clang"',
            "rustflags = [",
            '    "-C", "link-arg=-fuse-ld=mold",',
            cpu_flag,
            '    "-C", "codegen-units=1",',
            "]",
            "",
        ]
    return []


def generate_cargo_config(config: OptimizerConfig, system_info: SystemInfo) -> str:
    """Contents of an optimized ``.cargo/config.toml``."""
    lines = [
        "# Cargo Configuration for Optimized Builds",
        "# Generated by Atlas",
        "",
        "[build]",
        f"jobs = {config.effective_parallel_jobs()}",
        'target-dir = "target"',
        "pipelining = true",
        "",
        "[env]",
    ]
    if config.build.separate_rust_analyzer_target:
        lines.append(
            'CARGO_TARGET_DIR = { value = "target/rust-analyzer", '
            'condition = "cfg(rust_analyzer)" }'
        )
    lines += [
        f'CARGO_INCREMENTAL = "{"1" if config.build.incremental else "0"}"',
        'CARGO_PROFILE_DEV_INCREMENTAL = "true"',
        'CARGO_BUILD_CACHE = "1"',
        'CARGO_NET_RETRY = "3"',
        'CARGO_NET_GIT_FETCH_WITH_CLI = "true"',
        "",
    ]
    if config.build.use_fast_linker and system_info.recommended_linker() is not None:
        lines += _target_section(config, system_info)
    lines += [
        "[registries.crates-io]",
        'protocol = "sparse"',
        "",
        "[net]",
        "retry = 3",
        "git-fetch-with-cli = true",
    ]
    return "\n".join(lines) + "\n"


_CARGO_PROFILES = """\
# Optimized build profiles for better performance and faster compilation
[profile.dev]
# Enable incremental compilation for faster rebuilds
incremental = true
# Optimize for compilation speed in development
opt-level = 0
# Enable debug info for better debugging experience
debug = true
# Reduce binary size in development
strip = false
# Use more codegen units for faster parallel compilation
codegen-units = 512
# Enable overflow checks in development
overflow-checks = true
# Enable debug assertions
debug-assertions = true
# Faster compilation with less optimization
lto = false
# Enable panic unwinding for better error messages
panic = "unwind"

[profile.dev.package."*"]
# Optimize dependencies even in dev mode for better performance
opt-level = 3
# Disable debug info for dependencies to speed up compilation
debug = false

[profile.release]
# Maximum optimization for production builds
opt-level = 3
# Disable debug info in release builds
debug = false
# Strip symbols to reduce binary size
strip = "symbols"
# Use single codegen unit for better optimization
codegen-units = 1
# Enable Link Time Optimization for better performance
lto = "thin"
# Enable overflow checks even in release (security)
overflow-checks = true
# Disable debug assertions in release
debug-assertions = false
# Abort on panic for smaller binary size
panic = "abort"

[profile.release-with-debug]
# Release profile with debug info for profiling
inherits = "release"
debug = true
strip = false

[profile.bench]
# Optimized profile for benchmarking
inherits = "release"
debug = true
lto = true

[profile.test]
# Optimized profile for testing
inherits = "dev"
opt-level = 1
# Faster test compilation
codegen-units = 512
"""


def generate_cargo_profiles() -> str:
    """Optimized ``[profile.*]`` sections to append to a Cargo.toml."""
    return _CARGO_PROFILES