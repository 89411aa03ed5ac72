"""Tests for CSV column resolution, import and export."""

import csv
from datetime import date

from grazeplan.plan.columns import (
    ESTIMATE_RULES,
    PREVIOUS_SEASON_RULES,
    normalize_header,
    resolve_columns,
)
from grazeplan.plan.entries import PreviousSeason
from grazeplan.plan.schedule import derive_schedule
from grazeplan.plan.tabular import (
    EXPORT_COLUMNS,
    apply_estimates,
    apply_previous_season,
    coerce_cell,
    default_export_name,
    read_csv,
    write_csv,
)


class TestResolveColumns:
    """Tests for header matching."""

    def test_normalize_header(self):
        assert normalize_header("  Est. Native ADA ") == "est. native ada"
        assert normalize_header(None) == ""

    def test_estimate_headers(self):
        columns = resolve_columns(["Paddock Name", "Est. Native ADA", "Est Perennial ADA"], ESTIMATE_RULES)
        assert columns == {
            "pasture": "Paddock Name",
            "est_native_ada": "Est. Native ADA",
            "est_perennial_ada": "Est Perennial ADA",
        }

    def test_earlier_pattern_wins_over_file_order(self):
        """'pasture' outranks 'unit' even when the unit column comes first."""
        columns = resolve_columns(["Unit", "Pasture"], ESTIMATE_RULES)
        assert columns["pasture"] == "Pasture"

    def test_defaults_when_nothing_matches(self):
        columns = resolve_columns(["Foo", "Bar"], PREVIOUS_SEASON_RULES)
        assert columns == {
            "pasture": "Pasture",
            "prev_planned_ada": "PrevPlannedADA",
            "prev_actual_ada": "PrevActualADA",
        }

    def test_previous_season_headers(self):
        columns = resolve_columns(["Pasture", "Planned ADA", "Actual ADA"], PREVIOUS_SEASON_RULES)
        assert columns["prev_planned_ada"] == "Planned ADA"
        assert columns["prev_actual_ada"] == "Actual ADA"


class TestReadCsv:
    """Tests for reading typed CSV rows."""

    def test_coerce_cell(self):
        assert coerce_cell(" 12 ") == 12
        assert coerce_cell("3.5") == 3.5
        assert coerce_cell("") is None
        assert coerce_cell(None) is None
        assert coerce_cell("UA-E") == "UA-E"
        assert coerce_cell("nan") == "nan"

    def test_reads_typed_rows(self, tmp_path):
        path = tmp_path / "estimates.csv"
        path.write_text("\ufeffPasture,EstNativeADA,EstPerennialADA\nUA-E,4.5,\n,,\n\n8,3,7.25\n", encoding="utf-8")
        rows = read_csv(path)
        assert rows == [
            {"Pasture": "UA-E", "EstNativeADA": 4.5, "EstPerennialADA": None},
            {"Pasture": 8, "EstNativeADA": 3, "EstPerennialADA": 7.25},
        ]


class TestApplyEstimates:
    """Tests for merging current-season estimates."""

    def test_merges_by_name(self, sample_entries):
        rows = [{"Pasture": " north ", "Est Native ADA": 4.5, "Est Perennial ADA": "n/a"}]
        result = apply_estimates(sample_entries, rows)
        assert result[0].est_native_ada == 4.5
        assert result[0].est_perennial_ada is None
        assert result[1:] == sample_entries[1:]

    def test_unmatched_rows_leave_entries_unchanged(self, sample_entries):
        rows = [{"Pasture": "Elsewhere", "EstNativeADA": 9, "EstPerennialADA": 9}, {"Pasture": None}]
        assert apply_estimates(sample_entries, rows) == sample_entries

    def test_numeric_pasture_names(self):
        from grazeplan.plan.entries import new_entry

        entries = [new_entry(pasture="8")]
        result = apply_estimates(entries, [{"Pasture": 8, "EstNativeADA": 3, "EstPerennialADA": 7.25}])
        assert result[0].est_perennial_ada == 7.25

    def test_no_rows(self, sample_entries):
        assert apply_estimates(sample_entries, []) == sample_entries


class TestApplyPreviousSeason:
    """Tests for merging previous-season values."""

    def test_updates_tables_and_entries(self, sample_entries):
        rows = [
            {"Paddock": "North", "Prev Planned ADA": 6, "Prev Actual ADA": 5.5},
            {"Paddock": "Retired", "Prev Planned ADA": 2, "Prev Actual ADA": "?"},
        ]
        entries, tables = apply_previous_season(sample_entries, PreviousSeason(), rows)
        assert entries[0].prev_planned_ada == 6.0
        assert entries[0].prev_actual_ada == 5.5
        assert entries[1].prev_planned_ada is None
        assert dict(tables.planned) == {"north": 6.0, "retired": 2.0}
        assert dict(tables.actual) == {"north": 5.5}

    def test_keeps_existing_tables(self, sample_entries):
        tables = PreviousSeason(planned={"south": 1.5})
        rows = [{"Pasture": "North", "PrevPlannedADA": 6}]
        entries, new_tables = apply_previous_season(sample_entries, tables, rows)
        assert new_tables.planned["south"] == 1.5
        assert entries[2].prev_planned_ada == 1.5


class TestWriteCsv:
    """Tests for plan export."""

    def test_default_name(self):
        assert default_export_name(date(2025, 3, 1)) == "grazing_plan_2025-03-01.csv"

    def test_columns_and_blank_metrics(self, sample_entries, tmp_path):
        entries = derive_schedule(sample_entries, "2025-03-01")
        path = write_csv(entries, tmp_path / "plan.csv")

        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))

        assert rows[0] == [header for header, _ in EXPORT_COLUMNS]
        assert rows[0] == [
            "Pasture",
            "Acreage",
            "HerdSize",
            "PrevPlannedADA",
            "PrevActualADA",
            "EstNativeADA",
            "EstPerennialADA",
            "GrazingDays",
            "ProposedADA",
            "ProjectedStart",
            "ProjectedEnd",
            "Notes",
        ]
        assert len(rows) == 4
        north = dict(zip(rows[0], rows[1]))
        assert north["Pasture"] == "North"
        assert north["PrevPlannedADA"] == ""
        assert north["GrazingDays"] == "10"
        assert north["ProjectedEnd"] == "2025-03-10"

    def test_export_reads_back_as_estimates(self, sample_entries, tmp_path):
        """Exported files can be re-imported as estimates."""
        entries = apply_estimates(sample_entries, [{"Pasture": "South", "EstNativeADA": 2, "EstPerennialADA": 3}])
        path = write_csv(entries, tmp_path / "plan.csv")
        result = apply_estimates(sample_entries, read_csv(path))
        assert result[2].est_native_ada == 2.0
        assert result[2].est_perennial_ada == 3.0
        assert result[0].est_native_ada is None
