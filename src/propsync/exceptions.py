"""Exception classes for propsync."""

from typing import Optional

__all__ = [
    "PropsyncError",
    "ConfigError",
    "ManifestError",
    "OrchestrationError",
    "DirectoryReadError",
    "DependencyCycleError",
    "UnitError",
    "UnitExecutionError",
    "UnitTimeoutError",
]


class PropsyncError(Exception):
    """Base exception for propsync."""


class ConfigError(PropsyncError):
    """Error in configuration."""


class ManifestError(PropsyncError):
    """Error loading or validating a sync manifest."""


class OrchestrationError(PropsyncError):
    """Error that aborts a whole sync run."""


class DirectoryReadError(OrchestrationError):
    """The discovery directory could not be listed."""

    def __init__(self, directory: str, message: str):
        self.directory = directory
        super().__init__(message)


class DependencyCycleError(OrchestrationError):
    """Declared prerequisites form a cycle among discovered units."""

    def __init__(self, units: list[str]):
        self.units = units
        super().__init__(f"Dependency cycle between units: {', '.join(units)}")


class UnitError(PropsyncError):
    """Base error for a single migration unit. Never aborts a run."""

    def __init__(self, unit: str, message: str):
        self.unit = unit
        super().__init__(message)


class UnitExecutionError(UnitError):
    """Unit exited non-zero or could not be spawned."""

    def __init__(self, unit: str, message: str, returncode: Optional[int] = None):
        self.returncode = returncode
        super().__init__(unit, message)


class UnitTimeoutError(UnitError):
    """Unit exceeded its timeout and was killed."""

    def __init__(self, unit: str, timeout: float):
        self.timeout = timeout
        super().__init__(unit, f"{unit} timed out after {timeout:g}s")
