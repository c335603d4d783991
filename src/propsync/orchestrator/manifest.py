"""Load sync manifests (priority order, prerequisites, exclusions) from YAML."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from propsync.exceptions import ManifestError

__all__ = [
    "DEFAULT_PRIORITY_ORDER",
    "DEFAULT_EXCLUDE",
    "DEFAULT_ROOT_SCRIPTS",
    "SyncManifest",
    "load_manifest",
]

# Core tables first, then scripts that alter or reference them.
DEFAULT_PRIORITY_ORDER = (
    "migrate.js",
    "fix-users-table.js",
    "create-otp-tables.js",
    "run-migration.js",
    "create_short_stay_tables.js",
    "create-reservations-table.js",
    "create_short_stay_drafts_table.js",
)

DEFAULT_EXCLUDE = ("create-calendar-table.js",)

DEFAULT_ROOT_SCRIPTS = ("create-wishlist-tables.js",)

VALID_MANIFEST_FIELDS = {
    "priority",
    "depends_on",
    "exclude",
    "root_scripts",
}


@dataclass(frozen=True)
class SyncManifest:
    priority: tuple[str, ...] = DEFAULT_PRIORITY_ORDER
    depends_on: Optional[dict[str, tuple[str, ...]]] = None
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE
    root_scripts: tuple[str, ...] = field(default=DEFAULT_ROOT_SCRIPTS)

    @classmethod
    def default(cls) -> "SyncManifest":
        return cls()

    @property
    def uses_dependencies(self) -> bool:
        """True when declared prerequisites, not the priority list, drive the order."""
        return self.depends_on is not None


def _string_list(data: dict, key: str, path: Path) -> Optional[tuple[str, ...]]:
    if key not in data:
        return None
    value = data[key]
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ManifestError(f"'{key}' in {path} must be a list of file names")
    return tuple(value)


def _parse_depends_on(value: Any, path: Path) -> dict[str, tuple[str, ...]]:
    if not isinstance(value, dict):
        raise ManifestError(f"'depends_on' in {path} must be a mapping")

    depends_on: dict[str, tuple[str, ...]] = {}
    for name, required in value.items():
        if not isinstance(name, str):
            raise ManifestError(f"Unit name in 'depends_on' must be a string: {name!r}")
        if required is None:
            required = []
        if isinstance(required, str):
            required = [required]
        if not isinstance(required, list) or not all(
            isinstance(r, str) for r in required
        ):
            raise ManifestError(
                f"Prerequisites of '{name}' in {path} must be a list of file names"
            )
        depends_on[name] = tuple(required)
    return depends_on


def load_manifest(path: Path) -> SyncManifest:
    """Load a sync manifest from a YAML file.

    Fields left out fall back to the built-in defaults.

    Raises:
        ManifestError: If the file is missing, empty, malformed, or has unknown fields
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ManifestError(f"Failed to read manifest '{path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ManifestError(f"Invalid YAML in manifest '{path}': {exc}") from exc

    if data is None:
        raise ManifestError(f"Empty YAML file: {path}")
    if not isinstance(data, dict):
        raise ManifestError(f"Manifest '{path}' must be a mapping")

    unknown_fields = set(data.keys()) - VALID_MANIFEST_FIELDS
    if unknown_fields:
        raise ManifestError(
            f"Unknown field(s) in manifest: {', '.join(sorted(map(str, unknown_fields)))}"
        )

    priority = _string_list(data, "priority", path)
    exclude = _string_list(data, "exclude", path)
    root_scripts = _string_list(data, "root_scripts", path)
    depends_on = (
        _parse_depends_on(data["depends_on"], path) if "depends_on" in data else None
    )

    return SyncManifest(
        priority=priority if priority is not None else DEFAULT_PRIORITY_ORDER,
        depends_on=depends_on,
        exclude=exclude if exclude is not None else DEFAULT_EXCLUDE,
        root_scripts=root_scripts if root_scripts is not None else DEFAULT_ROOT_SCRIPTS,
    )
