"""Tests for src.scoring_engine.standings_calculator."""

import logging

import pytest

from src.scoring_engine.category_ranker import rank
from src.scoring_engine.config import CATEGORY_CONFIG, get_category
from src.scoring_engine.models import CategoryDefinition, StandingsRow, TeamStatLine
from src.scoring_engine.standings_calculator import (
    apply_rank_deltas,
    build_team_name_map,
    compute_category_standings,
    compute_standings,
)

R_AND_ERA = [get_category("R"), get_category("ERA")]


def _make_line(team_id, name=None, **stats):
    return TeamStatLine(team_id=team_id, team_name=name or f"Team {team_id}", stats=stats)


def _full_line(team_id, name, **overrides):
    stats = {c.key: 0 for c in CATEGORY_CONFIG}
    stats.update(overrides)
    return TeamStatLine(team_id=team_id, team_name=name, stats=stats)


# ── compute_standings ────────────────────────────────────────────────


class TestComputeStandings:
    def test_empty_input(self):
        assert compute_standings([]) == []

    def test_three_way_tie_keeps_input_order(self, three_teams):
        standings = compute_standings(three_teams, R_AND_ERA)

        assert [s.team_name for s in standings] == ["Team A", "Team B", "Team C"]
        assert [s.points for s in standings] == [4, 4, 4]
        assert [s.rank for s in standings] == [1, 2, 3]

    def test_sorted_by_total_points(self):
        rows = [
            _make_line(1, "Low", R=1, HR=1),
            _make_line(2, "High", R=9, HR=9),
            _make_line(3, "Mid", R=5, HR=5),
        ]
        standings = compute_standings(rows, [get_category("R"), get_category("HR")])

        assert [s.team_name for s in standings] == ["High", "Mid", "Low"]
        assert [s.points for s in standings] == [6, 4, 2]

    def test_all_ten_categories(self):
        rows = [
            _full_line(1, "A", R=100, HR=30, ERA=3.10, WHIP=1.10),
            _full_line(2, "B", R=90, HR=40, ERA=3.90, WHIP=1.30),
        ]
        standings = compute_standings(rows)
        # A wins R, ERA, WHIP and every all-zero tie (input order); B wins HR.
        totals = {s.team_name: s.points for s in standings}
        assert totals == {"A": 19, "B": 11}
        assert sum(totals.values()) == len(CATEGORY_CONFIG) * 3

    def test_breakdown_included_on_request(self, three_teams):
        standings = compute_standings(three_teams, R_AND_ERA, include_breakdown=True)
        by_name = {s.team_name: s for s in standings}

        assert by_name["Team A"].categories == {"R": 2, "ERA": 2}
        assert by_name["Team B"].categories == {"R": 3, "ERA": 1}
        assert by_name["Team C"].categories == {"R": 1, "ERA": 3}

    def test_breakdown_omitted_by_default(self, three_teams):
        standings = compute_standings(three_teams, R_AND_ERA)
        assert all(s.categories is None for s in standings)

    def test_single_category_matches_ranker(self):
        rows = [_make_line(i, HR=v) for i, v in enumerate([12, 40, 7, 40, 25], start=1)]
        category = get_category("HR")

        ranked = {r.team_id: r.points for r in rank(rows, "HR", category.lower_is_better)}
        standings = {s.team_id: s.points for s in compute_standings(rows, [category])}

        assert standings == ranked

    def test_idempotent(self, three_teams):
        first = [s.to_dict() for s in compute_standings(three_teams, R_AND_ERA, include_breakdown=True)]
        second = [s.to_dict() for s in compute_standings(three_teams, R_AND_ERA, include_breakdown=True)]
        assert first == second

    def test_average_tie_policy(self):
        rows = [_make_line(1, "A", R=5), _make_line(2, "B", R=5)]
        standings = compute_standings(rows, [get_category("R")], tie_policy="average")
        assert [s.points for s in standings] == [1.5, 1.5]

    def test_custom_category_config(self):
        fewest_errors = CategoryDefinition("E", "Errors", lower_is_better=True)
        rows = [_make_line(1, "A", E=12), _make_line(2, "B", E=4)]
        standings = compute_standings(rows, [fewest_errors])
        assert standings[0].team_name == "B"


# ── Error handling ───────────────────────────────────────────────────


class TestComputeStandingsErrorHandling:
    def test_missing_team_identity_skipped_with_warning(self, three_teams, caplog):
        rows = three_teams + [_make_line(None, "Ghost", R=99, ERA=0.5)]

        with caplog.at_level(logging.WARNING):
            standings = compute_standings(rows, R_AND_ERA)

        assert [s.team_name for s in standings] == ["Team A", "Team B", "Team C"]
        assert "missing team identity" in caplog.text

    def test_blank_string_team_id_skipped(self):
        rows = [_make_line("  ", "Blank", R=1), _make_line("DDG", "Dawgs", R=1)]
        standings = compute_standings(rows, [get_category("R")])
        assert [s.team_id for s in standings] == ["DDG"]

    def test_duplicate_team_keeps_first_row(self, caplog):
        rows = [_make_line(1, "A", R=1), _make_line(2, "B", R=5), _make_line(1, "A again", R=99)]
        with caplog.at_level(logging.WARNING):
            standings = compute_standings(rows, [get_category("R")])

        assert len(standings) == 2
        assert standings[0].team_name == "B"
        assert "Duplicate stat row" in caplog.text

    def test_malformed_values_never_raise(self):
        rows = [
            _make_line(1, "A", R="ten", ERA=None),
            _make_line(2, "B", R=float("inf"), ERA="2.50"),
        ]
        standings = compute_standings(rows, R_AND_ERA)
        # R: both read as 0, input order wins. ERA: A reads 0 and ranks first.
        assert [s.team_name for s in standings] == ["A", "B"]
        assert [s.points for s in standings] == [4, 2]

    def test_only_rows_without_identity(self):
        assert compute_standings([_make_line(None, "Ghost", R=1)]) == []


# ── Serialization ────────────────────────────────────────────────────


class TestStandingsRowToDict:
    def test_without_breakdown(self, three_teams):
        row = compute_standings(three_teams, R_AND_ERA)[0]
        assert row.to_dict() == {"teamId": 1, "teamName": "Team A", "points": 4, "rank": 1, "delta": 0}

    def test_with_breakdown(self, three_teams):
        row = compute_standings(three_teams, R_AND_ERA, include_breakdown=True)[1]
        assert row.to_dict()["categories"] == {"R": 3, "ERA": 1}


# ── compute_category_standings ───────────────────────────────────────


class TestComputeCategoryStandings:
    def test_one_block_per_category_in_order(self, three_teams):
        blocks = compute_category_standings(three_teams)
        assert [b["key"] for b in blocks] == [c.key for c in CATEGORY_CONFIG]
        assert blocks[0]["label"] == "Runs"

    def test_rows_ranked_per_category(self, three_teams):
        blocks = {b["key"]: b for b in compute_category_standings(three_teams, R_AND_ERA)}
        assert [r.team_name for r in blocks["ERA"]["rows"]] == ["Team C", "Team A", "Team B"]
        assert [r.team_name for r in blocks["R"]["rows"]] == ["Team B", "Team A", "Team C"]

    def test_empty_input(self):
        blocks = compute_category_standings([], R_AND_ERA)
        assert [b["rows"] for b in blocks] == [[], []]


# ── build_team_name_map ──────────────────────────────────────────────


class TestBuildTeamNameMap:
    def test_from_rows_dict(self):
        standings = {"rows": [
            {"teamCode": "DDG", "teamName": "Dodger Dawgs"},
            {"teamCode": "DEV", "teamName": "Devil Dawgs"},
        ]}
        assert build_team_name_map(standings, []) == {"DDG": "Dodger Dawgs", "DEV": "Devil Dawgs"}

    def test_array_form_and_normalized_codes(self):
        standings = [{"code": "ddg", "name": "Dodger Dawgs"}]
        assert build_team_name_map(standings, []) == {"DDG": "Dodger Dawgs"}

    def test_falls_back_to_team_field(self):
        assert build_team_name_map([{"team": "DDG"}], []) == {"DDG": "DDG"}

    def test_adds_codes_from_stats(self):
        stats = [{"ogba_team_code": "lumber"}, {"ogba_team_code": "SKD"}]
        assert build_team_name_map([], stats) == {"LUMBER": "LUMBER", "SKD": "SKD"}

    def test_stats_do_not_overwrite_names(self):
        standings = [{"teamCode": "DDG", "teamName": "Dodger Dawgs"}]
        stats = [{"ogba_team_code": "DDG"}]
        assert build_team_name_map(standings, stats)["DDG"] == "Dodger Dawgs"

    def test_none_standings(self):
        assert build_team_name_map(None, []) == {}


# ── apply_rank_deltas ────────────────────────────────────────────────


def _row(team_id, position):
    return StandingsRow(team_id=team_id, team_name=f"Team {team_id}", points=0, rank=position)


class TestApplyRankDeltas:
    def test_movement_against_previous(self):
        previous = [_row("DDG", 1), _row("DEV", 2), _row("DKG", 3)]
        current = [_row("DKG", 1), _row("DDG", 2), _row("DEV", 3)]
        apply_rank_deltas(current, previous)
        assert {r.team_id: r.delta for r in current} == {"DKG": 2, "DDG": -1, "DEV": -1}

    def test_new_team_and_no_previous(self):
        current = [_row("DDG", 1), _row("SKD", 2)]
        apply_rank_deltas(current, [_row("DDG", 2)])
        assert [r.delta for r in current] == [1, 0]

        apply_rank_deltas(current, None)
        assert [r.delta for r in current] == [0, 0]

    def test_serialized(self, three_teams):
        previous = compute_standings(three_teams, R_AND_ERA)
        previous.reverse()
        for position, row in enumerate(previous, start=1):
            row.rank = position
        current = apply_rank_deltas(compute_standings(three_teams, R_AND_ERA), previous)
        assert [r.to_dict()["delta"] for r in current] == [2, 0, -2]


@pytest.mark.parametrize("key", ["ERA", "WHIP"])
def test_rate_categories_lower_is_better(key):
    assert get_category(key).lower_is_better
