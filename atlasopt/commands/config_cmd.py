"""Commands that show, edit, reset, validate and export the configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from atlasopt.config import OptimizerConfig
from atlasopt.errors import IoError
from atlasopt.utils import (
    confirm,
    execute_command_with_output,
    print_status,
    print_success,
    print_warning,
)


@dataclass(frozen=True)
class ShowConfig:
    pass


@dataclass(frozen=True)
class EditConfig:
    pass


@dataclass(frozen=True)
class ResetConfig:
    force: bool = False


@dataclass(frozen=True)
class ValidateConfig:
    pass


@dataclass(frozen=True)
class ExportConfig:
    output: Path | None = None


ConfigAction = ShowConfig | EditConfig | ResetConfig | ValidateConfig | ExportConfig


def run(command: ConfigAction, project_dir: str | os.PathLike[str] | None = None) -> None:
    """Run one configuration command."""
    match command:
        case ShowConfig():
            print(OptimizerConfig.load_or_default().to_toml())
        case EditConfig():
            _edit()
        case ResetConfig(force=force):
            if force or confirm("Reset configuration to defaults?"):
                OptimizerConfig.save_default()
                print_success("✅ Configuration reset to defaults")
        case ValidateConfig():
            OptimizerConfig.load_or_default().validate()
            print_success("✅ Configuration is valid")
        case ExportConfig(output=output):
            _export(output)
        case _:
            raise TypeError(f"unknown config command: {command!r}")


def _edit() -> None:
    config_path = OptimizerConfig.get_config_path()
    print_status(f"Edit configuration file: {config_path}")
    editor = os.environ.get("EDITOR")
    if editor is not None:
        execute_command_with_output(editor, [str(config_path)], None)
    else:
        print_warning("No EDITOR environment variable set. Please edit manually:")
        print(config_path)


def _export(output: str | os.PathLike[str] | None) -> None:
    content = OptimizerConfig.load_or_default().to_toml()
    if output is None:
        print(content)
        return
    output_path = Path(output)
    try:
        output_path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise IoError(str(exc)) from exc
    print_success(f"✅ Configuration exported to {output_path}")