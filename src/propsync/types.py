"""Core type definitions for propsync."""

from enum import Enum
from typing import TypeAlias

UnitName: TypeAlias = str
PlanId: TypeAlias = str

__all__ = [
    "UnitName",
    "PlanId",
    "UnitStatus",
    "FailureKind",
]


class UnitStatus(Enum):
    """Outcome of running a single migration unit."""

    SUCCESS = "success"
    FAILURE = "failure"


class FailureKind(Enum):
    """Why a migration unit failed."""

    EXIT_CODE = "exit_code"
    TIMEOUT = "timeout"
    SPAWN = "spawn"
