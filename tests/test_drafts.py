"""Tests for plan drafts."""

from datetime import UTC, datetime

import pytest

from grazeplan.data.drafts import (
    Draft,
    DraftNotFoundError,
    delete_draft,
    display_names,
    draft_year,
    drafts_from_dict,
    drafts_to_dict,
    find_draft,
    load_draft,
    save_draft,
    sorted_years,
)

NOW = datetime(2026, 5, 4, 12, 0, tzinfo=UTC)


class TestDraftYear:
    """Tests for the year a draft is filed under."""

    def test_season_start_year(self):
        assert draft_year("2025-03-01", NOW) == "2025"

    def test_falls_back_to_current_year(self):
        assert draft_year("", NOW) == "2026"


class TestSaveDraft:
    """Tests for saving drafts."""

    def test_save_appends_to_year(self, sample_entries):
        drafts, first = save_draft({}, sample_entries, "2025-03-01", now=NOW)
        drafts, second = save_draft(drafts, sample_entries[:1], "2025-04-01", now=NOW)
        assert list(drafts) == ["2025"]
        assert drafts["2025"] == [first, second]
        assert first.id != second.id
        assert first.ts == int(NOW.timestamp() * 1000)
        assert first.created_at == NOW

    def test_save_does_not_mutate_input(self, sample_entries):
        original = {}
        save_draft(original, sample_entries, "2025-03-01", now=NOW)
        assert original == {}

    def test_no_season_start(self, sample_entries):
        drafts, draft = save_draft({}, sample_entries, "", now=NOW)
        assert drafts["2026"] == [draft]
        assert draft.season_start == ""

    def test_display_names_in_save_order(self, sample_entries):
        drafts, _ = save_draft({}, sample_entries, "2025-03-01", now=NOW)
        drafts, _ = save_draft(drafts, sample_entries, "2025-03-01", now=NOW, name="wet spring")
        names = display_names(drafts, "2025")
        assert [label for label, _ in names] == ["Draft 1", "Draft 2"]
        assert names[1][1].name == "wet spring"


class TestLoadDraft:
    """Tests for loading and deleting drafts."""

    def test_load_assigns_fresh_ids(self, sample_entries):
        drafts, draft = save_draft({}, sample_entries, "2025-03-01", now=NOW)
        entries, season_start = load_draft(drafts, "2025", draft.id)
        assert season_start == "2025-03-01"
        assert [e.pasture for e in entries] == ["North", "Creek", "South"]
        assert not {e.id for e in entries} & {e.id for e in sample_entries}

    def test_load_by_number(self, sample_entries):
        drafts, _ = save_draft({}, sample_entries, "2025-03-01", now=NOW)
        drafts, _ = save_draft(drafts, sample_entries[:1], "2025-03-02", now=NOW)
        entries, season_start = load_draft(drafts, "2025", "2")
        assert len(entries) == 1
        assert season_start == "2025-03-02"

    def test_unknown_draft(self, sample_entries):
        drafts, _ = save_draft({}, sample_entries, "2025-03-01", now=NOW)
        with pytest.raises(DraftNotFoundError):
            find_draft(drafts, "2025", "9")
        with pytest.raises(DraftNotFoundError):
            load_draft(drafts, "1999", "1")

    def test_delete(self, sample_entries):
        drafts, first = save_draft({}, sample_entries, "2025-03-01", now=NOW)
        drafts, second = save_draft(drafts, sample_entries, "2025-03-01", now=NOW)
        remaining = delete_draft(drafts, "2025", first.id)
        assert remaining["2025"] == [second]
        assert len(drafts["2025"]) == 2

    def test_delete_last_draft_drops_year(self, sample_entries):
        drafts, draft = save_draft({}, sample_entries, "2025-03-01", now=NOW)
        assert delete_draft(drafts, "2025", draft.id) == {}


class TestSerialization:
    """Tests for draft storage format."""

    def test_sorted_years_newest_first(self, sample_entries):
        drafts = {}
        for start in ("2024-03-01", "2026-03-01", "2025-03-01"):
            drafts, _ = save_draft(drafts, sample_entries, start, now=NOW)
        assert sorted_years(drafts) == ["2026", "2025", "2024"]

    def test_round_trip(self, sample_entries):
        drafts, draft = save_draft({}, sample_entries, "2025-03-01", now=NOW)
        restored = drafts_from_dict(drafts_to_dict(drafts))
        assert restored["2025"][0] == draft

    def test_accepts_camel_case_keys(self):
        draft = Draft.from_dict(
            {
                "id": "d1",
                "ts": 1700000000000,
                "startDate": "2025-03-01",
                "rows": [{"pasture": "UA-E", "grazingDays": 4}],
            }
        )
        assert draft.season_start == "2025-03-01"
        assert draft.entries[0].grazing_days == 4

    def test_skips_malformed(self):
        assert drafts_from_dict({"2025": "nope", "2024": [1, {"id": "x"}]}) == {"2024": [Draft.from_dict({"id": "x"})]}
