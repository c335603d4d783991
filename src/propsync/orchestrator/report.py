"""Per-unit results and the aggregated run report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from propsync.types import FailureKind, UnitStatus

__all__ = ["UnitResult", "RunReport"]


@dataclass(frozen=True)
class UnitResult:
    """Outcome of one unit: success, or failure with a reason."""

    name: str
    status: UnitStatus
    location: str = "scripts"
    failure_kind: Optional[FailureKind] = None
    reason: Optional[str] = None
    returncode: Optional[int] = None
    duration: float = 0.0

    @classmethod
    def success(
        cls, name: str, location: str = "scripts", duration: float = 0.0
    ) -> "UnitResult":
        return cls(
            name=name,
            status=UnitStatus.SUCCESS,
            location=location,
            returncode=0,
            duration=duration,
        )

    @classmethod
    def failure(
        cls,
        name: str,
        kind: FailureKind,
        reason: str,
        location: str = "scripts",
        returncode: Optional[int] = None,
        duration: float = 0.0,
    ) -> "UnitResult":
        return cls(
            name=name,
            status=UnitStatus.FAILURE,
            location=location,
            failure_kind=kind,
            reason=reason,
            returncode=returncode,
            duration=duration,
        )

    @property
    def succeeded(self) -> bool:
        return self.status is UnitStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status is UnitStatus.FAILURE

    @property
    def label(self) -> str:
        return f"{self.location}/{self.name}"


@dataclass
class RunReport:
    plan: list[str] = field(default_factory=list)
    results: list[UnitResult] = field(default_factory=list)
    root_results: list[UnitResult] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    cancelled: bool = False

    @property
    def all_results(self) -> list[UnitResult]:
        return self.results + self.root_results

    @property
    def succeeded(self) -> list[UnitResult]:
        return [r for r in self.all_results if r.succeeded]

    @property
    def failed(self) -> list[UnitResult]:
        return [r for r in self.all_results if r.failed]

    def summary_lines(self) -> list[str]:
        """Human-readable summary for the end-of-run banner."""
        lines = [
            f"Total: {len(self.all_results)} script(s) run "
            f"({len(self.succeeded)} succeeded, {len(self.failed)} failed)"
        ]
        for result in self.failed:
            lines.append(f"  ✗ {result.label}: {result.reason}")
        if self.cancelled:
            lines.append(f"Cancelled before {len(self.skipped)} script(s):")
            lines.extend(f"  ○ {name}" for name in self.skipped)
        return lines
