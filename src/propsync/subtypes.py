"""Sub-property types that make up a mixed-use project, and a stateless selector."""

from dataclasses import dataclass
from typing import Callable, Sequence

__all__ = [
    "SubPropertyType",
    "SubTypeCard",
    "SUB_PROPERTY_TYPES",
    "toggle_sub_type",
    "is_known_sub_type",
    "SubTypeSelector",
]


@dataclass(frozen=True)
class SubPropertyType:
    id: str
    label: str
    icon: str


@dataclass(frozen=True)
class SubTypeCard:
    id: str
    label: str
    icon: str
    is_active: bool


SUB_PROPERTY_TYPES: tuple[SubPropertyType, ...] = (
    SubPropertyType(id="Apartment", label="Flat / Apartments", icon="building-2"),
    SubPropertyType(id="Bungalow", label="Bungalow", icon="home"),
    SubPropertyType(id="Twin Villa", label="Twin Villa", icon="box"),
    SubPropertyType(id="Plot", label="Land / Plot", icon="map"),
    SubPropertyType(id="Commercial", label="Commercial", icon="store"),
)

_KNOWN_IDS = {t.id for t in SUB_PROPERTY_TYPES}


def toggle_sub_type(selected: Sequence[str], type_id: str) -> list[str]:
    """Return a new selection with ``type_id`` removed if present, else appended."""
    if type_id in selected:
        return [s for s in selected if s != type_id]
    return [*selected, type_id]


class SubTypeSelector:
    """
    View model for the "Select Project Components" cards.

    Holds no selection state: the caller passes the current selection in and
    receives toggle requests through ``on_toggle``.
    """

    def __init__(
        self,
        selected_types: Sequence[str],
        on_toggle: Callable[[str], None],
        catalog: Sequence[SubPropertyType] = SUB_PROPERTY_TYPES,
    ) -> None:
        self._selected_types = selected_types
        self._on_toggle = on_toggle
        self._catalog = catalog

    def cards(self) -> list[SubTypeCard]:
        return [
            SubTypeCard(
                id=t.id,
                label=t.label,
                icon=t.icon,
                is_active=t.id in self._selected_types,
            )
            for t in self._catalog
        ]

    def select(self, type_id: str) -> None:
        if type_id not in {t.id for t in self._catalog}:
            raise ValueError(f"Unknown sub-property type: {type_id!r}")
        self._on_toggle(type_id)


def is_known_sub_type(type_id: str) -> bool:
    return type_id in _KNOWN_IDS
