"""Tests for the mixed-use sub-property type selector."""

import pytest

from propsync.subtypes import (
    SUB_PROPERTY_TYPES,
    SubTypeSelector,
    is_known_sub_type,
    toggle_sub_type,
)


class TestCatalog:
    def test_catalog_ids_and_labels(self):
        assert [(t.id, t.label) for t in SUB_PROPERTY_TYPES] == [
            ("Apartment", "Flat / Apartments"),
            ("Bungalow", "Bungalow"),
            ("Twin Villa", "Twin Villa"),
            ("Plot", "Land / Plot"),
            ("Commercial", "Commercial"),
        ]

    def test_known_sub_type(self):
        assert is_known_sub_type("Twin Villa")
        assert not is_known_sub_type("Penthouse")


class TestToggleSubType:
    def test_toggle_adds_absent(self):
        selected = ["Apartment"]

        result = toggle_sub_type(selected, "Plot")

        assert result == ["Apartment", "Plot"]
        assert len(result) == len(selected) + 1

    def test_toggle_removes_present(self):
        selected = ["Apartment", "Plot"]

        result = toggle_sub_type(selected, "Apartment")

        assert result == ["Plot"]
        assert len(result) == len(selected) - 1

    def test_toggle_does_not_mutate_input(self):
        selected = ["Apartment"]

        toggle_sub_type(selected, "Plot")
        toggle_sub_type(selected, "Apartment")

        assert selected == ["Apartment"]

    def test_toggle_twice_restores(self):
        assert toggle_sub_type(toggle_sub_type([], "Bungalow"), "Bungalow") == []


class TestSubTypeSelector:
    def test_cards_reflect_caller_selection(self):
        selector = SubTypeSelector(["Plot", "Commercial"], on_toggle=lambda _: None)

        active = [c.id for c in selector.cards() if c.is_active]

        assert active == ["Plot", "Commercial"]
        assert len(selector.cards()) == len(SUB_PROPERTY_TYPES)

    def test_select_forwards_to_caller(self):
        selection: list[str] = []

        def on_toggle(type_id: str) -> None:
            selection[:] = toggle_sub_type(selection, type_id)

        SubTypeSelector(selection, on_toggle).select("Bungalow")
        assert selection == ["Bungalow"]

        SubTypeSelector(selection, on_toggle).select("Bungalow")
        assert selection == []

    def test_select_unknown_raises(self):
        calls: list[str] = []
        selector = SubTypeSelector([], on_toggle=calls.append)

        with pytest.raises(ValueError, match="Unknown sub-property type"):
            selector.select("Penthouse")

        assert calls == []
