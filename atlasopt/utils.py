"""Console output, process execution and filesystem helpers."""

from __future__ import annotations

import logging
import os
import shutil
import stat
import subprocess
import time
from collections.abc import Callable, Iterator, Sequence
from datetime import timedelta
from pathlib import Path
from typing import Any, TypeVar

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.prompt import Confirm, Prompt
from rich.text import Text

from atlasopt.errors import (
    CommandFailedError,
    FileMissingError,
    IoError,
    OperationCancelledError,
    ProjectValidationError,
)

logger = logging.getLogger(__name__)

_stdout = Console(highlight=False)
_stderr = Console(stderr=True, highlight=False)

T = TypeVar("T")


def _tagged(tag: str, style: str, message: str) -> Text:
    return Text.assemble((tag, style), " ", message)


def print_status(message: str) -> None:
    _stdout.print(_tagged("[INFO]", "bold bright_blue", message), soft_wrap=True)


def print_success(message: str) -> None:
    _stdout.print(_tagged("[SUCCESS]", "bold bright_green", message), soft_wrap=True)


def print_warning(message: str) -> None:
    _stdout.print(_tagged("[WARNING]", "bold bright_yellow", message), soft_wrap=True)


def print_error(message: str) -> None:
    _stderr.print(_tagged("[ERROR]", "bold bright_red", message), soft_wrap=True)


def is_rust_project(path: str | os.PathLike[str]) -> bool:
    """Whether ``path`` holds a Cargo.toml."""
    return (Path(path) / "Cargo.toml").exists()


def find_rust_project_root(start_path: str | os.PathLike[str]) -> Path:
    """Walk up from ``start_path`` to the first directory holding a Cargo.toml."""
    current = Path(start_path).resolve()
    for candidate in (current, *current.parents):
        if (candidate / "Cargo.toml").exists():
            return candidate
    raise ProjectValidationError(
        "No Cargo.toml found in current directory or any parent directory"
    )


def execute_command(
    command: str,
    args: Sequence[str],
    working_dir: str | os.PathLike[str] | None = None,
) -> subprocess.CompletedProcess[bytes]:
    """Run a command, capturing its output."""
    try:
        return subprocess.run(
            [command, *args], cwd=working_dir, capture_output=True, check=False
        )
    except OSError as exc:
        raise CommandFailedError(f"Failed to execute {command}: {exc}") from exc


def execute_command_success(
    command: str,
    args: Sequence[str],
    working_dir: str | os.PathLike[str] | None = None,
) -> bool:
    return execute_command(command, args, working_dir).returncode == 0


def execute_command_with_output(
    command: str,
    args: Sequence[str],
    working_dir: str | os.PathLike[str] | None = None,
) -> None:
    """Run a command with its output going to the terminal; raise if it fails."""
    try:
        completed = subprocess.run([command, *args], cwd=working_dir, check=False)
    except OSError as exc:
        raise CommandFailedError(f"Failed to execute {command}: {exc}") from exc
    if completed.returncode != 0:
        raise CommandFailedError(
            f"Command {command} failed with exit code: {completed.returncode}"
        )


class _ProgressHandle:
    """A single running progress display."""

    def __init__(self, progress: Progress, task_id: TaskID) -> None:
        self._progress = progress
        self._task_id = task_id

    def _task(self) -> Any:
        return next(task for task in self._progress.tasks if task.id == self._task_id)

    @property
    def position(self) -> int:
        return int(self._task().completed)

    @property
    def message(self) -> str:
        return self._task().description

    def inc(self, delta: int = 1) -> None:
        self._progress.advance(self._task_id, delta)

    def set_message(self, message: str) -> None:
        self._progress.update(self._task_id, description=message)

    def finish(self) -> None:
        self._progress.stop()

    def finish_and_clear(self) -> None:
        self._progress.update(self._task_id, visible=False)
        self._progress.stop()

    def __enter__(self) -> _ProgressHandle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.finish()


def create_progress_bar(length: int, message: str) -> _ProgressHandle:
    progress = Progress(
        SpinnerColumn(style="green"),
        TimeElapsedColumn(),
        BarColumn(bar_width=40, style="blue", complete_style="cyan"),
        MofNCompleteColumn(),
        TextColumn("{task.description}", markup=False),
        console=_stderr,
    )
    task_id = progress.add_task(message, total=length)
    progress.start()
    return _ProgressHandle(progress, task_id)


def create_spinner(message: str) -> _ProgressHandle:
    progress = Progress(
        SpinnerColumn(style="green"),
        TextColumn("{task.description}", markup=False),
        console=_stderr,
        refresh_per_second=10,
    )
    task_id = progress.add_task(message, total=None)
    progress.start()
    return _ProgressHandle(progress, task_id)


def backup_file(path: str | os.PathLike[str]) -> Path:
    """Copy ``path`` alongside itself with a ``.backup`` suffix."""
    original = Path(path)
    if not original.exists():
        raise FileMissingError(str(original))
    backup_path = original.with_name(original.name + ".backup")
    try:
        shutil.copy(original, backup_path)
    except OSError as exc:
        raise IoError(str(exc)) from exc
    print_status(f"Backed up {original} to {backup_path}")
    return backup_path


def _raise_io(exc: OSError) -> None:
    raise IoError(str(exc))


def _regular_files(root: str | os.PathLike[str]) -> Iterator[tuple[Path, os.stat_result]]:
    base = Path(root)
    try:
        base_stat = base.lstat()
    except OSError as exc:
        raise IoError(str(exc)) from exc
    if stat.S_ISREG(base_stat.st_mode):
        yield base, base_stat
        return
    if not stat.S_ISDIR(base_stat.st_mode):
        return
    for dirpath, _dirnames, filenames in os.walk(base, onerror=_raise_io):
        for name in filenames:
            file_path = Path(dirpath) / name
            try:
                file_stat = file_path.lstat()
            except OSError as exc:
                raise IoError(str(exc)) from exc
            if stat.S_ISREG(file_stat.st_mode):
                yield file_path, file_stat


def get_directory_size(path: str | os.PathLike[str]) -> int:
    """Total size in bytes of the regular files under ``path``."""
    return sum(file_stat.st_size for _, file_stat in _regular_files(path))


_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_bytes(num_bytes: int) -> str:
    size = float(num_bytes)
    unit_index = 0
    while size >= 1024.0 and unit_index < len(_UNITS) - 1:
        size /= 1024.0
        unit_index += 1
    if unit_index == 0:
        return f"{num_bytes} {_UNITS[0]}"
    return f"{size:.1f} {_UNITS[unit_index]}"


def format_duration(seconds: float | timedelta) -> str:
    if isinstance(seconds, timedelta):
        seconds = seconds.total_seconds()
    nanos = round(seconds * 1_000_000_000)
    total_seconds, remainder = divmod(nanos, 1_000_000_000)
    millis = remainder // 1_000_000
    minutes, secs = divmod(total_seconds, 60)
    if minutes > 0:
        return f"{minutes}m {secs}s"
    if secs > 0:
        return f"{secs}.{millis // 100}s"
    return f"{millis}ms"


def measure_time(func: Callable[[], T]) -> tuple[T, float]:
    """Call ``func`` and return its result with the elapsed seconds."""
    start = time.perf_counter()
    result = func()
    return result, time.perf_counter() - start


def is_tool_available(tool: str) -> bool:
    return shutil.which(tool) is not None


def get_tool_version(tool: str) -> str | None:
    """First line of ``tool --version``, or None if it cannot be run."""
    try:
        completed = subprocess.run([tool, "--version"], capture_output=True, check=False)
    except OSError:
        return None
    if completed.returncode != 0:
        return None
    try:
        lines = completed.stdout.decode("utf-8").splitlines()
    except UnicodeDecodeError:
        return None
    return lines[0].strip() if lines else None


def clean_old_files(
    directory: str | os.PathLike[str],
    max_age_days: int,
    pattern: str | None = None,
) -> int:
    """Delete files older than ``max_age_days``; return the bytes freed."""
    max_age = max_age_days * 24 * 60 * 60
    now = time.time()
    cleaned = 0
    for file_path, file_stat in _regular_files(directory):
        if pattern is not None and pattern not in file_path.name:
            continue
        age = now - file_stat.st_mtime
        if age > max_age:
            try:
                file_path.unlink()
            except OSError:
                continue
            cleaned += file_stat.st_size
            logger.debug("Cleaned old file: %s", file_path)
    return cleaned


def confirm(message: str) -> bool:
    """Ask a yes/no question, defaulting to no."""
    try:
        return Confirm.ask(message, default=False, console=_stdout)
    except (EOFError, KeyboardInterrupt) as exc:
        raise OperationCancelledError() from exc


def select_from_list(message: str, items: Sequence[object]) -> int:
    """Let the user pick one of ``items``; return its index."""
    labels = [str(item) for item in items]
    if not labels:
        raise OperationCancelledError()
    for number, label in enumerate(labels, start=1):
        _stdout.print(Text(f"  {number}) {label}"), soft_wrap=True)
    try:
        answer = Prompt.ask(
            message,
            choices=[str(number) for number in range(1, len(labels) + 1)],
            default="1",
            show_choices=False,
            console=_stdout,
        )
    except (EOFError, KeyboardInterrupt) as exc:
        raise OperationCancelledError() from exc
    return int(answer) - 1