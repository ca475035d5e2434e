"""Tests for the numeric-field locator."""

import pytest

from pulse_ledger.locator import (
    FIELD_PATTERNS,
    NONE,
    TOTALS,
    UNPULSED,
    Candidate,
    collect_candidates,
    key_matches,
    locate,
    path_score,
    pick_best,
    section_of,
)


class TestKeyMatching:
    def test_exact_key(self):
        assert key_matches("keys", FIELD_PATTERNS["keys"])

    def test_key_contains_pattern(self):
        assert key_matches("KeysToday", FIELD_PATTERNS["keys"])

    def test_pattern_contains_key(self):
        assert key_matches("scroll", FIELD_PATTERNS["scrolls"])

    def test_whitespace_and_case_ignored(self):
        assert key_matches("Mouse Clicks", FIELD_PATTERNS["clicks"])

    def test_unrelated_key(self):
        assert not key_matches("download", FIELD_PATTERNS["keys"])

    def test_empty_key_is_contained_in_every_pattern(self):
        assert key_matches("", FIELD_PATTERNS["keys"])
        assert key_matches("  ", FIELD_PATTERNS["clicks"])


class TestSectionOf:
    def test_unpulsed(self):
        assert section_of("/stats/unpulsed/keys") == UNPULSED

    def test_pending(self):
        assert section_of("/pending/keys") == UNPULSED

    def test_pending_wins_over_total(self):
        assert section_of("/pendingtotals/keys") == UNPULSED

    def test_totals(self):
        assert section_of("/account/totals/keys") == TOTALS

    def test_untagged(self):
        assert section_of("/stats/keys") == NONE


class TestCollectCandidates:
    def test_paths_and_values(self, totals_only_stats):
        found = collect_candidates(totals_only_stats, FIELD_PATTERNS["keys"])
        assert [(c.path, c.value, c.section) for c in found] == [("stats/totals/keys", 500, TOTALS)]

    def test_document_order(self):
        doc = {"b": {"keys": 2}, "a": {"keys": 1}}
        found = collect_candidates(doc, FIELD_PATTERNS["keys"])
        assert [c.value for c in found] == [2, 1]

    def test_arrays_visited_by_index(self):
        doc = {"computers": [{"totals": {"keys": 7}}, {"totals": {"keys": 8}}]}
        found = collect_candidates(doc, FIELD_PATTERNS["keys"])
        assert [c.path for c in found] == ["computers/0/totals/keys", "computers/1/totals/keys"]
        assert found[0].path_lower == "/computers/totals/keys"

    def test_non_finite_and_bool_skipped(self):
        doc = {"keys": float("nan"), "keycount": float("inf"), "keystrokes": True}
        assert collect_candidates(doc, FIELD_PATTERNS["keys"]) == []

    def test_numeric_strings_skipped(self):
        assert collect_candidates({"keys": "500"}, FIELD_PATTERNS["keys"]) == []

    def test_floats_are_candidates(self):
        found = collect_candidates({"uptime": 12.5}, FIELD_PATTERNS["uptimeSeconds"])
        assert [c.value for c in found] == [12.5]

    def test_integers_beyond_float_range(self):
        big = int("9" * 400)
        found = collect_candidates({"totals": {"keys": big}}, FIELD_PATTERNS["keys"])
        assert [c.value for c in found] == [big]

    @pytest.mark.parametrize("key", ["", " "])
    def test_empty_object_key_is_a_candidate(self, key):
        found = collect_candidates({key: 5}, FIELD_PATTERNS["keys"])
        assert [(c.path, c.value) for c in found] == [(key, 5)]

    @pytest.mark.parametrize("doc", [42, "keys", None, True, [1, 2, 3]])
    def test_degenerate_documents(self, doc):
        assert collect_candidates(doc, FIELD_PATTERNS["keys"]) == []


class TestPickBest:
    def test_highest_hint_score_wins(self):
        doc = {"stats": {"total": {"keys": 1}}, "accountTotals": {"keys": 2}}
        best = locate(doc, "keys", TOTALS)
        assert best.value == 2
        assert best.path == "accountTotals/keys"

    def test_ties_go_to_first_encountered(self):
        doc = {"totals": {"keys": 1}, "totals2": {"keys": 2}}
        assert locate(doc, "keys", TOTALS).value == 1

    def test_section_filter(self, full_stats):
        assert locate(full_stats, "clicks", TOTALS).value == 300
        assert locate(full_stats, "clicks", UNPULSED).value == 3

    def test_fallback_to_untagged(self):
        doc = {"keys": 10, "clicks": 5}
        assert locate(doc, "keys", TOTALS).value == 10
        assert locate(doc, "keys", UNPULSED).value == 10

    def test_fallback_ignores_other_section(self, totals_only_stats):
        assert locate(totals_only_stats, "keys", UNPULSED) is None

    def test_fallback_first_untagged_wins(self):
        candidates = [
            Candidate(1, "a/keys", "/a/keys", NONE),
            Candidate(2, "b/keys", "/b/keys", NONE),
        ]
        assert pick_best(candidates, TOTALS).value == 1

    def test_empty(self):
        assert pick_best([], TOTALS) is None

    def test_unknown_section(self):
        with pytest.raises(ValueError):
            pick_best([], "weekly")

    def test_unknown_field(self):
        with pytest.raises(ValueError):
            locate({}, "downloads", TOTALS)


def test_path_score_counts_hints():
    assert path_score("/accounttotals/keys", ("totals", "total", "accounttotals")) == 3
    assert path_score("/stats/keys", ("totals", "total")) == 0


def test_fallback_is_reported_when_verbose(capsys):
    locate({"keys": 1}, "keys", TOTALS, verbose=True)
    assert "fell back to untagged 'keys'" in capsys.readouterr().err
    locate({"keys": 1}, "keys", TOTALS)
    assert capsys.readouterr().err == ""
