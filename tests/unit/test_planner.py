"""Tests for execution planning."""

import itertools

import pytest

from propsync.exceptions import DependencyCycleError
from propsync.orchestrator.manifest import DEFAULT_PRIORITY_ORDER
from propsync.orchestrator.planner import (
    build_execution_plan,
    prerequisites_from_priority,
    resolve_execution_order,
)


class TestBuildExecutionPlan:
    def test_priority_entries_first_then_lexicographic(self) -> None:
        discovered = {"migrate.js", "zzz.js", "create-otp-tables.js"}
        priority = ["migrate.js", "create-otp-tables.js", "run-migration.js"]

        plan = build_execution_plan(discovered, priority)

        assert plan == ["migrate.js", "create-otp-tables.js", "zzz.js"]

    def test_plan_is_permutation_of_discovered(self) -> None:
        discovered = ["b.js", "a.js", "migrate.js", "c.js", "fix-users-table.js"]

        plan = build_execution_plan(discovered, DEFAULT_PRIORITY_ORDER)

        assert sorted(plan) == sorted(discovered)
        assert len(plan) == len(set(plan))

    def test_priority_order_preserved_regardless_of_discovery_order(self) -> None:
        priority = ["migrate.js", "fix-users-table.js", "create-otp-tables.js"]
        names = ["create-otp-tables.js", "fix-users-table.js", "migrate.js", "a.js"]

        for perm in itertools.permutations(names):
            plan = build_execution_plan(perm, priority)
            assert plan == [
                "migrate.js",
                "fix-users-table.js",
                "create-otp-tables.js",
                "a.js",
            ]

    def test_non_priority_entries_sorted(self) -> None:
        plan = build_execution_plan(
            ["zeta.js", "alpha.js", "Beta.js", "migrate.js"], ["migrate.js"]
        )

        assert plan == ["migrate.js", "Beta.js", "alpha.js", "zeta.js"]

    def test_missing_priority_names_are_skipped(self) -> None:
        plan = build_execution_plan(["x.js"], ["migrate.js", "run-migration.js"])

        assert plan == ["x.js"]

    def test_empty_discovery_gives_empty_plan(self) -> None:
        assert build_execution_plan([], DEFAULT_PRIORITY_ORDER) == []

    def test_duplicate_priority_entries_emitted_once(self) -> None:
        plan = build_execution_plan(
            ["a.js", "b.js"], ["b.js", "a.js", "b.js"]
        )

        assert plan == ["b.js", "a.js"]


class TestPrerequisitesFromPriority:
    def test_chain(self) -> None:
        prereqs = prerequisites_from_priority(["a.js", "b.js", "c.js"])

        assert prereqs == {"a.js": (), "b.js": ("a.js",), "c.js": ("b.js",)}

    def test_empty(self) -> None:
        assert prerequisites_from_priority([]) == {}


class TestResolveExecutionOrder:
    def test_prerequisites_run_first(self) -> None:
        order = resolve_execution_order(
            ["alter.js", "core.js"],
            {"alter.js": ["core.js"]},
        )

        assert order == ["core.js", "alter.js"]

    def test_undeclared_units_sorted_after_declared(self) -> None:
        order = resolve_execution_order(
            ["zzz.js", "aaa.js", "core.js", "alter.js"],
            {"core.js": [], "alter.js": ["core.js"]},
        )

        assert order == ["core.js", "alter.js", "aaa.js", "zzz.js"]

    def test_matches_priority_plan_for_chain(self) -> None:
        discovered = {
            "migrate.js",
            "zzz.js",
            "create-otp-tables.js",
            "create_short_stay_tables.js",
            "add-unit-image-column.js",
        }
        priority = list(DEFAULT_PRIORITY_ORDER)

        assert resolve_execution_order(
            discovered, prerequisites_from_priority(priority)
        ) == build_execution_plan(discovered, priority)

    def test_missing_prerequisite_ignored(self) -> None:
        order = resolve_execution_order(
            ["alter.js"], {"alter.js": ["core.js"]}
        )

        assert order == ["alter.js"]

    def test_diamond(self) -> None:
        order = resolve_execution_order(
            ["d.js", "c.js", "b.js", "a.js"],
            {
                "a.js": [],
                "b.js": ["a.js"],
                "c.js": ["a.js"],
                "d.js": ["b.js", "c.js"],
            },
        )

        assert order == ["a.js", "b.js", "c.js", "d.js"]

    def test_cycle_raises(self) -> None:
        with pytest.raises(DependencyCycleError) as exc_info:
            resolve_execution_order(
                ["a.js", "b.js", "c.js"],
                {"a.js": ["b.js"], "b.js": ["a.js"]},
            )

        assert exc_info.value.units == ["a.js", "b.js"]

    def test_self_dependency_raises(self) -> None:
        with pytest.raises(DependencyCycleError):
            resolve_execution_order(["a.js"], {"a.js": ["a.js"]})

    def test_cycle_through_undiscovered_unit_is_ignored(self) -> None:
        order = resolve_execution_order(
            ["a.js"], {"a.js": ["b.js"], "b.js": ["a.js"]}
        )

        assert order == ["a.js"]
