"""Tests for roster cleaning.

The ``cleaner`` fixture is provided by conftest.py.
"""

import pandas as pd
import pytest

from src.roster_pipeline.cleaning import _safe_int
from src.promotion_engine.models import Member


def _raw_roster(**overrides):
    data = {
        "IRLA": ["IRLA001", "IRLA002"],
        "Name": ["Arjun Mehta", "Bina Rao"],
        "DOB": ["15-03-1965", "10-06-1990"],
        "Rank": ["IG", "DIG"],
    }
    data.update(overrides)
    return pd.DataFrame(data)


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

class TestSafeInt:
    @pytest.mark.parametrize("value, expected", [
        ("12", 12),
        (" 7 ", 7),
        ("1,200", 1200),
        ("3.0", 3),
        (4, 4),
    ])
    def test_integers(self, value, expected):
        assert _safe_int(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "2.5", None, float("nan")])
    def test_unusable(self, value):
        assert _safe_int(value) is None


class TestNormalizeName:
    def test_collapses_whitespace(self, cleaner):
        assert cleaner.normalize_name("  Arjun   Mehta ") == "Arjun Mehta"

    def test_curly_apostrophe(self, cleaner):
        assert cleaner.normalize_name("D’Souza") == "D'Souza"

    def test_en_dash(self, cleaner):
        assert cleaner.normalize_name("Rao–Iyer") == "Rao-Iyer"

    def test_none(self, cleaner):
        assert cleaner.normalize_name(None) == ""


class TestParseFrozenFlag:
    @pytest.mark.parametrize("value", ["Yes", "y", "1", "TRUE", "x", "Frozen", True])
    def test_truthy(self, cleaner, value):
        assert cleaner.parse_frozen_flag(value) is True

    @pytest.mark.parametrize("value", ["", "no", "0", "false", None, False])
    def test_falsy(self, cleaner, value):
        assert cleaner.parse_frozen_flag(value) is False


# ---------------------------------------------------------------------------
# Roster cleaning
# ---------------------------------------------------------------------------

class TestCleanRoster:
    def test_output_columns(self, cleaner):
        df = cleaner.clean_roster(_raw_roster())
        assert list(df.columns) == ["IRLA", "Name", "DOB", "Rank", "order_index", "Frozen"]

    def test_order_index_from_file_order(self, cleaner):
        df = cleaner.clean_roster(_raw_roster())
        assert list(df["order_index"]) == [0, 1]

    def test_order_index_from_column(self, cleaner):
        df = cleaner.clean_roster(_raw_roster(order_index=["20", "10"]))
        assert list(df["order_index"]) == [20, 10]

    def test_bad_order_index_dropped(self, cleaner):
        df = cleaner.clean_roster(_raw_roster(order_index=["1", "n/a"]))
        assert list(df["IRLA"]) == ["IRLA001"]

    def test_frozen_defaults_false(self, cleaner):
        df = cleaner.clean_roster(_raw_roster())
        assert list(df["Frozen"]) == [False, False]

    def test_frozen_parsed(self, cleaner):
        df = cleaner.clean_roster(_raw_roster(Frozen=["", "Yes"]))
        assert list(df["Frozen"]) == [False, True]

    def test_bad_dob_kept(self, cleaner):
        df = cleaner.clean_roster(_raw_roster(DOB=["15-03-1965", "unknown"]))
        assert list(df["DOB"]) == ["15-03-1965", "unknown"]

    def test_input_not_modified(self, cleaner):
        raw = _raw_roster()
        cleaner.clean_roster(raw)
        assert "order_index" not in raw.columns


class TestToMembers:
    def test_converts_rows(self, cleaner):
        df = cleaner.clean_roster(_raw_roster(Frozen=["", "y"]))
        assert cleaner.to_members(df) == [
            Member("IRLA001", "Arjun Mehta", "15-03-1965", "IG", 0, False),
            Member("IRLA002", "Bina Rao", "10-06-1990", "DIG", 1, True),
        ]


class TestToLadder:
    def test_converts_rows(self, cleaner):
        ladder = cleaner.to_ladder(pd.DataFrame({"Rank": ["IG", "DIG"], "Slots": ["27", "202"]}))
        assert ladder.ranks == ["IG", "DIG"]
        assert ladder.capacity("DIG") == 202

    def test_bad_capacity_passed_through(self, cleaner):
        ladder = cleaner.to_ladder(pd.DataFrame({"Rank": ["IG"], "Slots": ["lots"]}))
        assert ladder.capacity("IG") is None
