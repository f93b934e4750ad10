"""Exception hierarchy used throughout the optimizer."""

from __future__ import annotations

from collections.abc import Iterable


class OptimizerError(Exception):
    """Base class for every error the optimizer raises."""

    label = "Optimizer error"
    recoverable = True

    def __init__(self, detail: object = "") -> None:
        self.detail = str(detail)
        super().__init__(self.detail)

    def __str__(self) -> str:
        return f"{self.label}: {self.detail}"

    def is_recoverable(self) -> bool:
        """Whether the operation may reasonably be retried or worked around."""
        return self.recoverable

    def user_message(self) -> str:
        """A message for the user, with a suggestion where one helps."""
        return str(self)


class IoError(OptimizerError):
    label = "IO error"
    recoverable = False


class ConfigError(OptimizerError):
    label = "Configuration error"


class ToolNotFoundError(OptimizerError):
    label = "Tool not found"

    def user_message(self) -> str:
        return (
            f"Tool '{self.detail}' is not installed. "
            "Run 'rust-build-optimizer install-tools' to install it."
        )


class CommandFailedError(OptimizerError):
    label = "Command execution failed"

    def user_message(self) -> str:
        return (
            f"Command failed: {self.detail}. "
            "Check your project configuration and try again."
        )


class ProjectValidationError(OptimizerError):
    label = "Project validation failed"

    def user_message(self) -> str:
        return (
            f"Project validation failed: {self.detail}. "
            "Make sure you're in a Rust project directory."
        )


class SerializationError(OptimizerError):
    label = "Serialization error"
    recoverable = False


class TomlParsingError(OptimizerError):
    label = "TOML parsing error"


class TomlSerializationError(OptimizerError):
    label = "TOML serialization error"
    recoverable = False


class NetworkError(OptimizerError):
    label = "Network error"


class PermissionDeniedError(OptimizerError):
    label = "Permission denied"
    recoverable = False

    def user_message(self) -> str:
        return (
            f"Permission denied: {self.detail}. "
            "You may need to run with elevated privileges."
        )


class FileMissingError(OptimizerError):
    label = "File not found"


class InvalidInputError(OptimizerError):
    label = "Invalid input"


class OperationCancelledError(OptimizerError):
    def __init__(self) -> None:
        super().__init__("")

    def __str__(self) -> str:
        return "Operation cancelled by user"


class UnsupportedPlatformError(OptimizerError):
    label = "Unsupported platform"
    recoverable = False

    def user_message(self) -> str:
        return (
            f"Platform '{self.detail}' is not supported. "
            "Please check the documentation for supported platforms."
        )


class ToolInstallationError(OptimizerError):
    label = "Tool installation failed"

    def __init__(self, tool: str, reason: str) -> None:
        self.tool = tool
        self.reason = reason
        super().__init__(f"{tool} - {reason}")

    def user_message(self) -> str:
        return (
            f"Failed to install '{self.tool}': {self.reason}. "
            "Please install it manually or check your internet connection."
        )


class BuildFailedError(OptimizerError):
    label = "Build failed"


class TestFailedError(OptimizerError):
    __test__ = False
    label = "Test failed"


class OptimizationFailedError(OptimizerError):
    label = "Optimization failed"


class MultipleErrors(OptimizerError):
    """Several errors gathered from one operation."""

    def __init__(self, errors: Iterable[OptimizerError]) -> None:
        self.errors = list(errors)
        super().__init__(repr(self.errors))

    def __str__(self) -> str:
        return f"Multiple errors occurred: {self.errors!r}"

    def is_recoverable(self) -> bool:
        return any(error.is_recoverable() for error in self.errors)