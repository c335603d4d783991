"""Discovery, planning, and best-effort execution of migration units."""

from propsync.orchestrator.discovery import MigrationUnit, discover_units
from propsync.orchestrator.executor import build_unit_environment, run_unit
from propsync.orchestrator.manifest import SyncManifest, load_manifest
from propsync.orchestrator.planner import (
    build_execution_plan,
    prerequisites_from_priority,
    resolve_execution_order,
)
from propsync.orchestrator.report import RunReport, UnitResult
from propsync.orchestrator.runner import Orchestrator

__all__ = [
    "MigrationUnit",
    "discover_units",
    "build_unit_environment",
    "run_unit",
    "SyncManifest",
    "load_manifest",
    "build_execution_plan",
    "prerequisites_from_priority",
    "resolve_execution_order",
    "RunReport",
    "UnitResult",
    "Orchestrator",
]
