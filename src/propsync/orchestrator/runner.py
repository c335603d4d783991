"""Orchestrator: discover, plan, and run migration units best-effort."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

from propsync.orchestrator.discovery import MigrationUnit, discover_units
from propsync.orchestrator.executor import (
    DEFAULT_UNIT_TIMEOUT,
    build_unit_environment,
    run_unit,
)
from propsync.orchestrator.manifest import SyncManifest
from propsync.orchestrator.planner import build_execution_plan, resolve_execution_order
from propsync.orchestrator.report import RunReport, UnitResult

__all__ = ["UnitRunner", "Orchestrator"]

logger = logging.getLogger(__name__)

BANNER = "-" * 43

# (name, directory, timeout, interpreter, env, location) -> UnitResult
UnitRunner = Callable[
    [str, Path, Optional[float], str, Optional[Mapping[str, str]], str], UnitResult
]


def _default_unit_runner(
    name: str,
    directory: Path,
    timeout: Optional[float],
    interpreter: str,
    env: Optional[Mapping[str, str]],
    location: str,
) -> UnitResult:
    return run_unit(
        name,
        directory,
        timeout=timeout,
        interpreter=interpreter,
        env=env,
        location=location,
    )


class Orchestrator:
    """
    Runs every unit in a scripts directory one at a time, then a few root scripts.

    A failing unit is logged and skipped; the next unit still runs. Only an
    unreadable scripts directory or a prerequisite cycle aborts the run.
    """

    def __init__(
        self,
        scripts_dir: Path,
        root_dir: Path,
        manifest: Optional[SyncManifest] = None,
        timeout: Optional[float] = DEFAULT_UNIT_TIMEOUT,
        interpreter: str = "node",
        extensions: Sequence[str] = (".js",),
        self_name: Optional[str] = None,
        tls_insecure: bool = True,
        unit_runner: Optional[UnitRunner] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self._scripts_dir = Path(scripts_dir)
        self._root_dir = Path(root_dir)
        self._manifest = manifest or SyncManifest.default()
        self._timeout = timeout
        self._interpreter = interpreter
        self._extensions = tuple(extensions)
        self._self_name = self_name
        self._env = build_unit_environment(tls_insecure=tls_insecure)
        self._unit_runner = unit_runner or _default_unit_runner
        self._cancel_event = cancel_event

    @property
    def manifest(self) -> SyncManifest:
        return self._manifest

    def _cancelled(self) -> bool:
        return self._cancel_event is not None and self._cancel_event.is_set()

    def plan_units(self) -> list[MigrationUnit]:
        """Discover units and return them in execution order.

        Units are tagged as priority only when the priority list drives the
        order; with declared prerequisites no unit carries the tag.

        Raises:
            DirectoryReadError: If the scripts directory cannot be read.
            DependencyCycleError: If declared prerequisites form a cycle.
        """
        uses_dependencies = self._manifest.uses_dependencies
        units = discover_units(
            self._scripts_dir,
            exclude_names=self._manifest.exclude,
            extensions=self._extensions,
            self_name=self._self_name,
            priority_list=() if uses_dependencies else self._manifest.priority,
        )
        names = [unit.name for unit in units]
        logger.info(f"Found {len(names)} script(s) in {self._scripts_dir}")

        if uses_dependencies:
            order = resolve_execution_order(names, self._manifest.depends_on)
        else:
            order = build_execution_plan(names, self._manifest.priority)
        by_name = {unit.name: unit for unit in units}
        return [by_name[name] for name in order]

    def plan(self) -> list[str]:
        """Names of the discovered units in execution order."""
        return [unit.name for unit in self.plan_units()]

    def run_plan(
        self, plan: Sequence[str], report: Optional[RunReport] = None
    ) -> list[UnitResult]:
        """Run each planned unit in order, continuing past failures."""
        results: list[UnitResult] = []

        for index, name in enumerate(plan):
            if self._cancelled():
                remaining = list(plan[index:])
                logger.warning(
                    f"Sync cancelled, {len(remaining)} script(s) not started"
                )
                if report is not None:
                    report.cancelled = True
                    report.skipped.extend(remaining)
                break

            logger.info(f"Running scripts/{name}...")
            results.append(
                self._unit_runner(
                    name,
                    self._scripts_dir,
                    self._timeout,
                    self._interpreter,
                    self._env,
                    "scripts",
                )
            )

        return results

    def run_root_scripts(
        self, names: Sequence[str], report: Optional[RunReport] = None
    ) -> list[UnitResult]:
        """Run root-level scripts that exist, without a timeout."""
        results: list[UnitResult] = []

        for name in names:
            if self._cancelled():
                if report is not None:
                    report.cancelled = True
                    report.skipped.append(name)
                continue
            if not (self._root_dir / name).is_file():
                logger.debug(f"Root script {name} not found, skipping")
                continue

            logger.info(f"Running root/{name}...")
            results.append(
                self._unit_runner(
                    name,
                    self._root_dir,
                    None,
                    self._interpreter,
                    self._env,
                    "root",
                )
            )

        return results

    def run(self, dry_run: bool = False) -> RunReport:
        """
        Run the full sync.

        Args:
            dry_run: If True, log the plan but don't start any unit.

        Returns:
            RunReport with a result per unit that was started.
        """
        logger.info("Starting database script sync...")
        logger.info(BANNER)

        report = RunReport(plan=self.plan())

        if dry_run:
            for name in report.plan:
                logger.info(f"[DRY RUN] Would run scripts/{name}")
            for name in self._manifest.root_scripts:
                if (self._root_dir / name).is_file():
                    logger.info(f"[DRY RUN] Would run root/{name}")
            return report

        report.results = self.run_plan(report.plan, report)
        report.root_results = self.run_root_scripts(
            self._manifest.root_scripts, report
        )

        logger.info(BANNER)
        for line in report.summary_lines():
            logger.info(line)
        logger.info("All scripts have been processed.")
        return report
