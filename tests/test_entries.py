"""Tests for rotation entries and list operations."""

import pytest

from grazeplan.plan.entries import (
    DEFAULT_PASTURES,
    Entry,
    PreviousSeason,
    add_entry,
    clear_entries,
    default_entries,
    delete_entry,
    duplicate_entry,
    find_entry,
    move_entry,
    new_entry,
    seed_previous_season,
    snapshot_planned,
    update_entry,
)


class TestDefaults:
    """Tests for the built-in pasture list."""

    def test_default_list(self):
        entries = default_entries(herd_size=110)
        assert len(entries) == 15
        assert [(e.pasture, e.acreage) for e in entries] == [(n, float(a)) for n, a in DEFAULT_PASTURES]
        assert entries[0].pasture == "UA-E"
        assert entries[0].acreage == 156
        assert all(e.herd_size == 110 and e.grazing_days == 0 for e in entries)

    def test_ids_are_unique(self):
        entries = default_entries()
        assert len({e.id for e in entries}) == len(entries)

    def test_clear_leaves_one_blank_entry(self):
        entries = clear_entries()
        assert len(entries) == 1
        assert entries[0].pasture == ""
        assert entries[0].prev_planned_ada is None


class TestEntryFromDict:
    """Tests for loading stored entries."""

    def test_camel_case_keys(self):
        entry = Entry.from_dict(
            {"id": "abc", "pasture": "UA-E", "herdSize": "50", "grazingDays": 3, "estNativeADA": ""}
        )
        assert entry.id == "abc"
        assert entry.herd_size == 50
        assert entry.grazing_days == 3
        assert entry.est_native_ada is None

    def test_unknown_keys_ignored(self):
        entry = Entry.from_dict({"pasture": "A", "color": "red"})
        assert entry.pasture == "A"

    def test_round_trip_keeps_metrics(self):
        entry = new_entry(pasture="A", prev_actual_ada=4.25)
        assert Entry.from_dict(entry.to_dict()) == entry

    def test_non_finite_metrics_dropped(self):
        entry = Entry.from_dict({"pasture": "A", "est_native_ada": float("nan"), "prev_actual_ada": "Infinity"})
        assert entry.est_native_ada is None
        assert entry.prev_actual_ada is None


class TestUpdateEntry:
    """Tests for editing a single entry."""

    def test_coerces_values(self, sample_entries):
        target = sample_entries[0]
        result = update_entry(sample_entries, target.id, grazing_days="12", acreage="80.5")
        assert result[0].grazing_days == 12
        assert result[0].acreage == 80.5
        assert sample_entries[0].grazing_days == 10

    def test_rejects_derived_fields(self, sample_entries):
        with pytest.raises(ValueError, match="derived"):
            update_entry(sample_entries, sample_entries[0].id, start_date="2025-01-01")

    def test_rejects_id(self, sample_entries):
        with pytest.raises(ValueError):
            update_entry(sample_entries, sample_entries[0].id, id="other")

    def test_rejects_unknown_fields(self, sample_entries):
        with pytest.raises(TypeError):
            update_entry(sample_entries, sample_entries[0].id, colour="red")

    def test_unknown_id_is_noop(self, sample_entries):
        assert update_entry(sample_entries, "missing", notes="x") == sample_entries


class TestListOperations:
    """Tests for add/delete/duplicate/move."""

    def test_add_appends(self, sample_entries):
        result = add_entry(sample_entries, "West", acreage=20)
        assert len(result) == 4
        assert result[-1].pasture == "West"
        assert result[-1].acreage == 20
        assert len(sample_entries) == 3

    def test_delete(self, sample_entries):
        result = delete_entry(sample_entries, sample_entries[1].id)
        assert [e.pasture for e in result] == ["North", "South"]

    def test_duplicate_inserts_after_with_new_id(self, sample_entries):
        original = sample_entries[0]
        result = duplicate_entry(sample_entries, original.id)
        assert [e.pasture for e in result] == ["North", "North", "Creek", "South"]
        assert result[1].id != original.id
        assert result[1].grazing_days == original.grazing_days

    def test_move(self, sample_entries):
        result = move_entry(sample_entries, 2, 0)
        assert [e.pasture for e in result] == ["South", "North", "Creek"]

    def test_move_clamps_indexes(self, sample_entries):
        result = move_entry(sample_entries, 0, 99)
        assert [e.pasture for e in result] == ["Creek", "South", "North"]

    def test_move_empty(self):
        assert move_entry([], 0, 1) == []


class TestFindEntry:
    """Tests for resolving user-supplied keys."""

    def test_by_id(self, sample_entries):
        assert find_entry(sample_entries, sample_entries[2].id) is sample_entries[2]

    def test_by_position(self, sample_entries):
        assert find_entry(sample_entries, "#2") is sample_entries[1]
        assert find_entry(sample_entries, "#9") is None

    def test_by_id_prefix(self, sample_entries):
        assert find_entry(sample_entries, sample_entries[1].id[:12]) is sample_entries[1]

    def test_by_name_ignores_case_and_whitespace(self, sample_entries):
        assert find_entry(sample_entries, "  sOUTH ") is sample_entries[2]

    def test_not_found(self, sample_entries):
        assert find_entry(sample_entries, "Nowhere") is None


class TestPreviousSeason:
    """Tests for the previous-season lookup tables."""

    def test_merged_normalizes_names(self):
        tables = PreviousSeason().merged(planned={" UA-E ": 6.5}, actual={"ua-e": 5.0})
        assert dict(tables.planned) == {"ua-e": 6.5}
        assert dict(tables.actual) == {"ua-e": 5.0}

    def test_merged_leaves_original_untouched(self):
        tables = PreviousSeason(planned={"a": 1.0})
        tables.merged(planned={"b": 2.0})
        assert dict(tables.planned) == {"a": 1.0}

    def test_tables_are_read_only(self):
        tables = PreviousSeason(planned={"a": 1.0})
        with pytest.raises(TypeError):
            tables.planned["a"] = 2.0

    def test_from_dict_drops_non_numeric(self):
        tables = PreviousSeason.from_dict({"planned": {"A": "4.5", "B": "n/a"}, "actual": None})
        assert dict(tables.planned) == {"a": 4.5}
        assert dict(tables.actual) == {}

    def test_seed_copies_matching_values(self, sample_entries):
        tables = PreviousSeason(planned={"north": 7.0}, actual={"south": 3.0})
        result = seed_previous_season(sample_entries, tables)
        assert result[0].prev_planned_ada == 7.0
        assert result[0].prev_actual_ada is None
        assert result[2].prev_actual_ada == 3.0
        assert result[1].prev_planned_ada is None

    def test_snapshot_planned(self, sample_entries):
        from grazeplan.plan.schedule import derive_schedule

        entries = derive_schedule(sample_entries, "2025-03-01")
        tables = snapshot_planned(entries, PreviousSeason(actual={"north": 1.0}))
        assert tables.planned["north"] == 5.0
        assert tables.planned["creek"] == 0
        assert tables.actual["north"] == 1.0
