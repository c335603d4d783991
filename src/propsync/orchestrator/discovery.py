"""Discover migration units in a scripts directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

from propsync.exceptions import DirectoryReadError
from propsync.types import UnitName

__all__ = ["MigrationUnit", "discover_units"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrationUnit:
    name: UnitName
    is_priority: bool = False
    priority_rank: Optional[int] = None

    def __post_init__(self):
        if self.is_priority != (self.priority_rank is not None):
            raise ValueError(
                f"priority_rank must be set exactly when is_priority is True ({self.name})"
            )


def discover_units(
    directory: Path,
    exclude_names: Iterable[str] = (),
    extensions: Sequence[str] = (".js",),
    self_name: Optional[str] = None,
    priority_list: Sequence[str] = (),
) -> list[MigrationUnit]:
    """List migration units in a directory.

    Args:
        directory: Directory holding the unit scripts
        exclude_names: File names never run in bulk (e.g. table-specific helpers)
        extensions: Recognized migration-file suffixes
        self_name: File name of the sync entry point itself, if it lives there
        priority_list: Ordered priority names, used only to tag units

    Returns:
        Units in filesystem order. Callers must not rely on this order.

    Raises:
        DirectoryReadError: If the directory cannot be listed
    """
    excluded = set(exclude_names)
    if self_name:
        excluded.add(self_name)

    ranks: dict[str, int] = {}
    for rank, name in enumerate(priority_list):
        ranks.setdefault(name, rank)

    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        raise DirectoryReadError(
            str(directory), f"Failed to read scripts directory '{directory}': {exc}"
        ) from exc

    units: list[MigrationUnit] = []
    for entry in entries:
        if entry.suffix not in extensions:
            continue
        if entry.name in excluded:
            logger.debug(f"Excluding {entry.name}")
            continue
        try:
            is_file = entry.is_file()
        except OSError as exc:
            raise DirectoryReadError(
                str(directory), f"Failed to read scripts directory '{directory}': {exc}"
            ) from exc
        if not is_file:
            continue

        rank = ranks.get(entry.name)
        units.append(
            MigrationUnit(
                name=entry.name,
                is_priority=rank is not None,
                priority_rank=rank,
            )
        )

    return units
