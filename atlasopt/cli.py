"""Command-line entry point."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.text import Text

from atlasopt.commands import build as build_cmd
from atlasopt.commands import config_cmd, development, initialize, optimize, status, tools, update
from atlasopt.errors import OptimizerError
from atlasopt.utils import print_error

_VERSION = "0.1.0"
_console = Console(highlight=False)


def _comma_list(value: str) -> list[str]:
    return value.split(",")


def _comma_paths(value: str) -> list[Path]:
    return [Path(part) for part in value.split(",")]


def _add_global_options(parser: argparse.ArgumentParser, suppress: bool) -> None:
    extra = {"default": argparse.SUPPRESS} if suppress else {}
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output", **extra
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress all output except errors", **extra
    )
    parser.add_argument(
        "-p",
        "--project-dir",
        type=Path,
        help="Project directory (defaults to current directory)",
        **extra,
    )


def _run_initialize(args: argparse.Namespace) -> None:
    initialize.run(args.project_dir, args.no_backup, args.no_tools, args.force)


def _run_install_tools(args: argparse.Namespace) -> None:
    tools.run(args.list, args.only)


def _run_build(args: argparse.Namespace) -> None:
    build_cmd.run(args.make(args), args.project_dir)


def _run_development(args: argparse.Namespace) -> None:
    development.run(args.make(args), args.project_dir)


def _run_optimize(args: argparse.Namespace) -> None:
    optimize.run(args.all, args.clean, args.deps, args.benchmark, args.project_dir)


def _run_status(args: argparse.Namespace) -> None:
    status.run(args.detailed, args.json, args.project_dir)


def _run_config(args: argparse.Namespace) -> None:
    config_cmd.run(args.make(args), args.project_dir)


def _run_update(args: argparse.Namespace) -> None:
    update.run(args.check)


def build_parser() -> argparse.ArgumentParser:
    """The argument parser for every command."""
    common = argparse.ArgumentParser(add_help=False)
    _add_global_options(common, suppress=True)

    parser = argparse.ArgumentParser(
        prog="atlas",
        description="🚀 A comprehensive Rust build optimization tool",
    )
    parser.add_argument("-V", "--version", action="version", version=f"atlas {_VERSION}")
    _add_global_options(parser, suppress=False)
    commands = parser.add_subparsers(dest="command", required=True)

    def sub(container, name, help_text, aliases=()):
        return container.add_parser(name, aliases=list(aliases), help=help_text, parents=[common])

    p = sub(commands, "initialize", "Initialize optimization for a Rust project", ["init"])
    p.add_argument("--no-backup", action="store_true", help="Skip backup of existing files")
    p.add_argument("--no-tools", action="store_true", help="Skip installing tools")
    p.add_argument("--force", action="store_true", help="Force overwrite existing configurations")
    p.set_defaults(handler=_run_initialize)

    p = sub(commands, "install-tools", "Install required optimization tools", ["tools"])
    p.add_argument("--list", action="store_true", help="List available tools without installing")
    p.add_argument("--only", action="extend", type=_comma_list, help="Install specific tools only")
    p.set_defaults(handler=_run_install_tools)

    p = sub(commands, "build", "Run optimized build commands")
    p.set_defaults(handler=_run_build)
    build_subs = p.add_subparsers(dest="build_type", required=True)
    q = sub(build_subs, "check", "Fast cargo check")
    q.add_argument("--stats", action="store_true")
    q.set_defaults(make=lambda a: build_cmd.CheckCommand(stats=a.stats))
    q = sub(build_subs, "build", "Optimized cargo build")
    q.add_argument("--release", action="store_true")
    q.add_argument("--stats", action="store_true")
    q.set_defaults(make=lambda a: build_cmd.BuildCommand(release=a.release, stats=a.stats))
    q = sub(build_subs, "test", "Fast testing with cargo-nextest")
    q.add_argument("--changed", action="store_true")
    q.add_argument("--stats", action="store_true")
    q.set_defaults(make=lambda a: build_cmd.TestCommand(changed=a.changed, stats=a.stats))
    q = sub(build_subs, "clean", "Clean build artifacts")
    q.add_argument("--all", action="store_true")
    q.set_defaults(make=lambda a: build_cmd.CleanCommand(clean_all=a.all))

    p = sub(commands, "development", "Development workflow commands", ["dev"])
    p.set_defaults(handler=_run_development)
    dev_subs = p.add_subparsers(dest="dev_command", required=True)
    q = sub(dev_subs, "quick-check", "Ultra-fast syntax check")
    q.set_defaults(make=lambda a: development.QuickCheck())
    q = sub(dev_subs, "watch", "Continuous development with auto-rebuild")
    q.add_argument("--paths", action="extend", type=_comma_paths)
    q.set_defaults(
        make=lambda a: development.Watch(paths=tuple(a.paths) if a.paths is not None else None)
    )
    q = sub(dev_subs, "profile", "Profile build performance")
    q.add_argument("--detailed", action="store_true")
    q.set_defaults(make=lambda a: development.Profile(detailed=a.detailed))
    q = sub(dev_subs, "clean-build", "Clean build with maximum optimization")
    q.add_argument("--release", action="store_true")
    q.set_defaults(make=lambda a: development.CleanBuild(release=a.release))

    p = sub(commands, "optimize", "Analyze and optimize workspace")
    p.add_argument("--all", action="store_true", help="Run all optimizations")
    p.add_argument("--clean", action="store_true", help="Clean target directory")
    p.add_argument("--deps", action="store_true", help="Check for unused dependencies")
    p.add_argument("--benchmark", action="store_true", help="Benchmark performance")
    p.set_defaults(handler=_run_optimize)

    p = sub(commands, "status", "Show optimization status and statistics")
    p.add_argument("--detailed", action="store_true", help="Show detailed information")
    p.add_argument("--json", action="store_true", help="Export status to JSON")
    p.set_defaults(handler=_run_status)

    p = sub(commands, "config", "Configuration management")
    p.set_defaults(handler=_run_config)
    config_subs = p.add_subparsers(dest="config_command", required=True)
    q = sub(config_subs, "show", "Show current configuration")
    q.set_defaults(make=lambda a: config_cmd.ShowConfig())
    q = sub(config_subs, "edit", "Edit configuration file")
    q.set_defaults(make=lambda a: config_cmd.EditConfig())
    q = sub(config_subs, "reset", "Reset configuration to defaults")
    q.add_argument("--force", action="store_true")
    q.set_defaults(make=lambda a: config_cmd.ResetConfig(force=a.force))
    q = sub(config_subs, "validate", "Validate current configuration")
    q.set_defaults(make=lambda a: config_cmd.ValidateConfig())
    q = sub(config_subs, "export", "Export configuration template")
    q.add_argument("-o", "--output", type=Path)
    q.set_defaults(make=lambda a: config_cmd.ExportConfig(output=a.output))

    p = sub(commands, "update", "Update Atlas to the latest version")
    p.add_argument("--check", action="store_true", help="Check for updates without installing")
    p.set_defaults(handler=_run_update)

    return parser


def print_banner() -> None:
    _console.print(Text("🚀 Atlas", style="bold bright_blue"))
    _console.print(
        Text(
            "Dramatically improve your Rust build times and development workflow",
            style="bright_black",
        ),
        soft_wrap=True,
    )
    _console.print()


def main(argv: Sequence[str] | None = None) -> int:
    """Parse the command line, run the command and return the exit status."""
    args = build_parser().parse_args(argv)

    if not args.quiet:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.INFO,
            format="[%(levelname)s %(name)s] %(message)s",
        )
        print_banner()

    try:
        args.handler(args)
    except OptimizerError as exc:
        print_error(str(exc))
        return 1
    return 0