"""Tests for point-in-time snapshots and member timelines."""

from datetime import date, timedelta

import pytest

from src.promotion_engine.cascade_engine import CascadeEngine
from src.promotion_engine.event_scheduler import EventScheduler
from src.promotion_engine.models import Member, RankLadder
from src.promotion_engine.simulation import build_full_simulation
from src.promotion_engine.snapshot import (
    effective_rank,
    format_timeline,
    get_member_timeline,
    has_retired,
    project_snapshot,
    rank_strength,
)


def _ids(snapshot):
    return {rank: tuple(m.member_id for m in members) for rank, members in snapshot.items()}


def _probe_dates(result):
    """Jan 1 of every year plus each retirement date and the day before."""
    dates = {date(year, 1, 1) for year in range(2018, 2056)}
    for retires_on in result.retirement_dates.values():
        dates.add(retires_on)
        dates.add(retires_on - timedelta(days=1))
    return sorted(dates)


def _bounded_engine_occupancy(roster, ladder, as_of):
    """Occupancy from an engine that only saw retirements up to *as_of*."""
    events = [e for e in EventScheduler().build_events(roster) if e.date <= as_of]
    engine = CascadeEngine(ladder, roster)
    engine.run(events)
    return engine.occupancy_ids()


# ── Scenario snapshots ───────────────────────────────────────────────

class TestProjectSnapshot:
    @pytest.fixture
    def result(self, scenario_ladder, scenario_roster):
        return build_full_simulation(scenario_roster, scenario_ladder)

    def test_before_any_retirement(self, result):
        assert _ids(project_snapshot(result, "01-01-2020")) == {
            "A": ("m1",), "B": ("m2",), "C": ("m3", "m4"),
        }

    def test_after_first_retirement(self, result):
        assert _ids(project_snapshot(result, date(2030, 1, 1))) == {
            "A": ("m2",), "B": ("m3",), "C": ("m4",),
        }

    def test_retirement_date_is_inclusive(self, result):
        assert _ids(project_snapshot(result, "31-03-2025"))["A"] == ("m2",)
        assert _ids(project_snapshot(result, "30-03-2025"))["A"] == ("m1",)

    def test_second_wave(self, result):
        assert _ids(project_snapshot(result, "01-01-2051")) == {
            "A": ("m3",), "B": ("m4",), "C": (),
        }
        assert _ids(project_snapshot(result, "31-01-2051")) == {
            "A": ("m4",), "B": (), "C": (),
        }

    def test_far_future_matches_final_occupancy(self, result):
        assert _ids(project_snapshot(result, "01-01-2100")) == result.occupancy

    def test_members_carry_projected_rank(self, result, scenario_roster):
        snapshot = project_snapshot(result, "01-01-2030")
        promoted = snapshot["A"][0]
        assert promoted.member_id == "m2"
        assert promoted.rank == "A"
        assert scenario_roster[1].rank == "B"

    def test_ladder_order_preserved(self, result):
        assert list(project_snapshot(result, "01-01-2030")) == ["A", "B", "C"]

    def test_iso_query_date_accepted(self, result):
        assert _ids(project_snapshot(result, "2030-01-01"))["A"] == ("m2",)

    def test_result_cannot_be_altered_to_revive_retirees(self, result):
        with pytest.raises(TypeError):
            del result.retirement_dates["m1"]
        assert "m1" not in _ids(project_snapshot(result, "01-01-2100"))["A"]


class TestSnapshotEdgeCases:
    def test_frozen_member_outlives_retirement_date(self):
        ladder = RankLadder.from_pairs([("A", 1), ("B", 2)])
        roster = [
            Member("f", "Frozen", "01-01-1950", "A", 1, frozen=True),
            Member("b", "B Member", "01-01-1990", "B", 2),
        ]
        result = build_full_simulation(roster, ladder)
        snapshot = project_snapshot(result, "01-01-2040")
        assert _ids(snapshot) == {"A": ("f",), "B": ("b",)}
        assert not has_retired(result, result.get_member("f"), "01-01-2040")

    def test_unparsable_dob_stays_at_original_rank(self, scenario_ladder):
        roster = [Member("bad", "Bad", "??", "C", 1)]
        result = build_full_simulation(roster, scenario_ladder)
        for when in ("01-01-2000", "01-01-2100"):
            assert _ids(project_snapshot(result, when))["C"] == ("bad",)
            assert effective_rank(result, "bad", when) == "C"

    def test_frozen_listed_after_active(self):
        ladder = RankLadder.from_pairs([("A", 3)])
        roster = [
            Member("f", "Frozen", "01-01-1990", "A", 1, frozen=True),
            Member("a", "Active", "01-01-1990", "A", 2),
        ]
        result = build_full_simulation(roster, ladder)
        assert _ids(project_snapshot(result, "01-01-2000"))["A"] == ("a", "f")


# ── Consistency between query modes ──────────────────────────────────

class TestConsistency:
    def test_snapshot_agrees_with_timeline(self, tiered_ladder, tiered_roster):
        result = build_full_simulation(tiered_roster, tiered_ladder)
        for as_of in _probe_dates(result):
            snapshot = project_snapshot(result, as_of)
            seated = set()
            for rank, members in snapshot.items():
                for member in members:
                    seated.add(member.member_id)
                    assert effective_rank(result, member.member_id, as_of) == rank
            for member in tiered_roster:
                if member.member_id not in seated:
                    assert effective_rank(result, member.member_id, as_of) is None

    def test_snapshot_matches_bounded_engine_run(self, tiered_ladder, tiered_roster):
        result = build_full_simulation(tiered_roster, tiered_ladder)
        for as_of in _probe_dates(result):
            expected = _bounded_engine_occupancy(tiered_roster, tiered_ladder, as_of)
            assert _ids(project_snapshot(result, as_of)) == expected, as_of

    def test_capacity_respected_at_every_date(self, tiered_ladder, tiered_roster):
        result = build_full_simulation(tiered_roster, tiered_ladder)
        for as_of in _probe_dates(result):
            for rank, (filled, capacity) in rank_strength(
                project_snapshot(result, as_of), tiered_ladder
            ).items():
                assert filled <= capacity, (rank, as_of)

    def test_ranks_listed_by_seniority(self, tiered_ladder, tiered_roster):
        result = build_full_simulation(tiered_roster, tiered_ladder)
        for as_of in _probe_dates(result):
            for members in project_snapshot(result, as_of).values():
                keys = [m.order_index for m in members]
                assert keys == sorted(keys)


# ── Effective rank ───────────────────────────────────────────────────

class TestEffectiveRank:
    @pytest.fixture
    def result(self, scenario_ladder, scenario_roster):
        return build_full_simulation(scenario_roster, scenario_ladder)

    def test_original_rank_before_promotions(self, result):
        assert effective_rank(result, "m3", "01-01-2020") == "C"

    def test_latest_promotion_wins(self, result):
        assert effective_rank(result, "m3", "01-01-2030") == "B"
        assert effective_rank(result, "m3", "01-01-2051") == "A"

    def test_none_once_retired(self, result):
        assert effective_rank(result, "m1", "31-03-2025") is None

    def test_unknown_member(self, result):
        with pytest.raises(KeyError):
            effective_rank(result, "ghost", "01-01-2030")


# ── Timelines ────────────────────────────────────────────────────────

class TestTimeline:
    @pytest.fixture
    def result(self, scenario_ladder, scenario_roster):
        return build_full_simulation(scenario_roster, scenario_ladder)

    def test_timeline_entries(self, result):
        timeline = get_member_timeline(result, "m3")
        assert timeline == [
            {"new_rank": "B", "date": date(2025, 3, 31), "cause_id": "m1", "cause_name": "Arjun Mehta"},
            {"new_rank": "A", "date": date(2050, 6, 30), "cause_id": "m2", "cause_name": "Bina Rao"},
        ]

    def test_never_promoted(self, result):
        assert get_member_timeline(result, "m1") == []

    def test_unknown_member(self, result):
        with pytest.raises(KeyError):
            get_member_timeline(result, "ghost")

    def test_format_timeline(self, result):
        text = format_timeline(get_member_timeline(result, "m3"))
        assert text.splitlines() == [
            "Promoted to B on 31-03-2025 (triggered by retirement of Arjun Mehta [m1])",
            "Promoted to A on 30-06-2050 (triggered by retirement of Bina Rao [m2])",
        ]

    def test_format_empty_timeline(self):
        assert format_timeline([]) == "No promotions recorded."

    def test_format_missing_cause_name(self):
        entry = {"new_rank": "A", "date": date(2030, 1, 31), "cause_id": "x", "cause_name": ""}
        assert "retirement of Unknown [x]" in format_timeline([entry])


class TestRankStrength:
    def test_filled_and_capacity(self, scenario_ladder, scenario_roster):
        result = build_full_simulation(scenario_roster, scenario_ladder)
        strength = rank_strength(project_snapshot(result, "01-01-2030"), scenario_ladder)
        assert strength == {"A": (1, 1), "B": (1, 1), "C": (1, 2)}
