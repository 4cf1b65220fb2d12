"""Shared fixtures for the promotion projector test suite."""

import textwrap

import pytest

from src.promotion_engine.models import Member, RankLadder
from src.roster_pipeline.cleaning import RosterCleaner


# ------------------------------------------------------------------
# Lightweight factories - cheap to construct, no I/O
# ------------------------------------------------------------------

@pytest.fixture
def scenario_ladder():
    """A: 1 seat, B: 1 seat, C: 2 seats."""
    return RankLadder.from_pairs([("A", 1), ("B", 1), ("C", 2)])


@pytest.fixture
def scenario_roster():
    """m1 (A) retires 31-03-2025; everyone else retires from 2050 on.

    Retirement dates at age 60:
        m1 -> 31-03-2025
        m2 -> 30-06-2050
        m3 -> 31-01-2051
        m4 -> 30-09-2052
    """
    return [
        Member("m1", "Arjun Mehta", "15-03-1965", "A", 1),
        Member("m2", "Bina Rao", "10-06-1990", "B", 2),
        Member("m3", "Chetan Das", "20-01-1991", "C", 3),
        Member("m4", "Divya Nair", "05-09-1992", "C", 4),
    ]


@pytest.fixture
def tiered_ladder():
    return RankLadder.from_pairs([("Top", 2), ("Mid", 4), ("Low", 8)])


@pytest.fixture
def tiered_roster():
    """Fourteen members spread over three ranks with staggered retirements."""
    specs = [
        # id, rank, order_index, dob
        ("t01", "Top", 1, "12-02-1962"),
        ("t02", "Top", 2, "30-11-1966"),
        ("t03", "Mid", 3, "04-07-1964"),
        ("t04", "Mid", 4, "19-01-1970"),
        ("t05", "Mid", 5, "02-05-1968"),
        ("t06", "Mid", 6, "23-09-1975"),
        ("t07", "Low", 7, "14-03-1966"),
        ("t08", "Low", 8, "08-08-1972"),
        ("t09", "Low", 9, "27-12-1969"),
        ("t10", "Low", 10, "01-06-1980"),
        ("t11", "Low", 11, "16-10-1977"),
        ("t12", "Low", 12, "09-04-1985"),
        ("t13", "Low", 13, "29-02-1972"),
        ("t14", "Low", 14, "11-11-1990"),
    ]
    return [
        Member(member_id, f"Member {member_id}", dob, rank, order_index)
        for member_id, rank, order_index, dob in specs
    ]


# ------------------------------------------------------------------
# Pipeline fixtures
# ------------------------------------------------------------------

@pytest.fixture
def cleaner():
    return RosterCleaner()


@pytest.fixture
def write_csv(tmp_path):
    """Write dedented CSV text under tmp_path and return its path."""
    def _write(name, text):
        path = tmp_path / name
        path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
        return path
    return _write
