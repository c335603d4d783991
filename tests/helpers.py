"""Shared test helpers for propsync tests."""

import sys
from pathlib import Path
from typing import Mapping, Optional

from propsync.orchestrator.report import UnitResult
from propsync.types import FailureKind

PYTHON = sys.executable


def write_unit(
    directory: Path,
    name: str,
    body: str = "",
    exit_code: int = 0,
    journal: Optional[Path] = None,
) -> Path:
    """Write a small Python unit script.

    If ``journal`` is given the script appends its own name to it, so tests
    can assert on execution order across child processes.
    """
    lines = ["import sys"]
    if journal is not None:
        lines.append(f"with open({str(journal)!r}, 'a') as f:")
        lines.append(f"    f.write({name!r} + '\\n')")
    if body:
        lines.append(body)
    lines.append(f"sys.exit({exit_code})")

    path = directory / name
    path.write_text("\n".join(lines) + "\n")
    return path


def read_journal(journal: Path) -> list[str]:
    if not journal.exists():
        return []
    return journal.read_text().splitlines()


class RecordingUnitRunner:
    """Fake unit runner that records calls and fails the names it's told to."""

    def __init__(self, failing: tuple[str, ...] = (), on_run=None):
        self.failing = set(failing)
        self.on_run = on_run
        self.calls: list[dict] = []

    def __call__(
        self,
        name: str,
        directory: Path,
        timeout: Optional[float],
        interpreter: str,
        env: Optional[Mapping[str, str]],
        location: str,
    ) -> UnitResult:
        self.calls.append(
            {
                "name": name,
                "directory": directory,
                "timeout": timeout,
                "interpreter": interpreter,
                "env": env,
                "location": location,
            }
        )
        if self.on_run is not None:
            self.on_run(name)
        if name in self.failing:
            return UnitResult.failure(
                name,
                FailureKind.EXIT_CODE,
                f"{name} exited with code 1",
                location=location,
                returncode=1,
            )
        return UnitResult.success(name, location=location)

    @property
    def names(self) -> list[str]:
        return [c["name"] for c in self.calls]
