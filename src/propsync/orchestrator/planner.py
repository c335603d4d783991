"""Execution planning: order discovered units before running them."""

from __future__ import annotations

import heapq
import logging
from typing import Iterable, Mapping, Sequence

from propsync.exceptions import DependencyCycleError

__all__ = [
    "build_execution_plan",
    "prerequisites_from_priority",
    "resolve_execution_order",
]

logger = logging.getLogger(__name__)

Prerequisites = Mapping[str, Sequence[str]]


def build_execution_plan(
    discovered: Iterable[str], priority_list: Sequence[str]
) -> list[str]:
    """
    Pure function: priority-first execution order.

    Args:
        discovered: Names of discovered units, in any order.
        priority_list: Hand-maintained order for units that others build on.

    Returns:
        Priority entries present in ``discovered`` in list order, followed by
        the remaining discovered names sorted lexicographically.
    """
    available = set(discovered)

    plan: list[str] = []
    seen: set[str] = set()
    for name in priority_list:
        if name in available and name not in seen:
            plan.append(name)
            seen.add(name)

    plan.extend(sorted(available - seen))
    return plan


def prerequisites_from_priority(priority_list: Sequence[str]) -> dict[str, tuple[str, ...]]:
    """Express a priority list as a chain: each entry depends on the one before."""
    prerequisites: dict[str, tuple[str, ...]] = {}
    previous = None
    for name in priority_list:
        if name in prerequisites:
            continue
        prerequisites[name] = (previous,) if previous else ()
        previous = name
    return prerequisites


def _declaration_ranks(prerequisites: Prerequisites) -> dict[str, int]:
    ranks: dict[str, int] = {}
    for name, required in prerequisites.items():
        ranks.setdefault(name, len(ranks))
        for dep in required:
            ranks.setdefault(dep, len(ranks))
    return ranks


def resolve_execution_order(
    discovered: Iterable[str], prerequisites: Prerequisites
) -> list[str]:
    """
    Topologically order discovered units by their declared prerequisites.

    Ties are broken by declaration order for units named in ``prerequisites``,
    then lexicographically for everything else. Fed the chain from
    ``prerequisites_from_priority``, this reproduces ``build_execution_plan``.

    Raises:
        DependencyCycleError: If prerequisites among discovered units form a cycle.
    """
    available = set(discovered)
    ranks = _declaration_ranks(prerequisites)
    unranked = len(ranks)

    def sort_key(name: str) -> tuple[int, str]:
        return (ranks.get(name, unranked), name)

    blocked_by: dict[str, set[str]] = {name: set() for name in available}
    unlocks: dict[str, set[str]] = {name: set() for name in available}

    for name, required in prerequisites.items():
        if name not in available:
            continue
        for dep in required:
            if dep == name:
                raise DependencyCycleError([name])
            if dep not in available:
                logger.debug(f"Ignoring prerequisite {dep} of {name}: not discovered")
                continue
            blocked_by[name].add(dep)
            unlocks[dep].add(name)

    ready = [sort_key(name) for name, deps in blocked_by.items() if not deps]
    heapq.heapify(ready)

    order: list[str] = []
    while ready:
        _, name = heapq.heappop(ready)
        order.append(name)
        for dependent in unlocks[name]:
            blocked_by[dependent].discard(name)
            if not blocked_by[dependent]:
                heapq.heappush(ready, sort_key(dependent))

    if len(order) != len(available):
        stuck = sorted(name for name, deps in blocked_by.items() if deps)
        raise DependencyCycleError(stuck)

    return order
