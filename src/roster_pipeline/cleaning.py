"""Cleaning and typing of roster and ladder data.

- Normalizes member names and ids
- Parses the Frozen flag from its various spellings
- Coerces the seniority key (order_index) to int, deriving it from file
  order when the column is absent
- Converts rows into engine models (Member, RankLadder)

Dates of birth are left as text: an unparsable DOB is a per-member issue
reported by the simulation, not a reason to drop the row.
"""

import logging
import math
from typing import List, Optional

import pandas as pd

from src.promotion_engine.models import Member, RankLadder
from src.roster_pipeline.config import FROZEN_TRUE_VALUES, ROSTER_COLUMNS

logger = logging.getLogger(__name__)


def _safe_int(val) -> Optional[int]:
    """Convert *val* to int, returning None for blanks and non-numeric text."""
    if val is None or val is pd.NA:
        return None
    if isinstance(val, float) and math.isnan(val):
        return None
    try:
        as_float = float(str(val).replace(",", "").strip())
    except (ValueError, TypeError):
        return None
    if math.isnan(as_float) or not as_float.is_integer():
        return None
    return int(as_float)


class RosterCleaner:
    """Cleans roster and ladder DataFrames produced by the ingester."""

    # ------------------------------------------------------------------
    # Field helpers
    # ------------------------------------------------------------------
    @staticmethod
    def normalize_name(name) -> str:
        """Normalize a member name for display and search.

        - Strips quotes and extra whitespace
        - Standardizes apostrophes and hyphens
        """
        if name is None or pd.isna(name):
            return ""

        name = str(name).strip().strip('"')

        name = name.replace("\u2019", "'")   # right single curly quote
        name = name.replace("\u2018", "'")   # left single curly quote
        name = name.replace("\u02BC", "'")   # modifier letter apostrophe
        name = name.replace("\u2013", "-")   # en dash
        name = name.replace("\u2014", "-")   # em dash

        return " ".join(name.split())

    @staticmethod
    def parse_frozen_flag(value) -> bool:
        """Interpret the Frozen column ("Yes", "1", "true", "x" ...)."""
        if value is None or value is pd.NA:
            return False
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in FROZEN_TRUE_VALUES

    # ------------------------------------------------------------------
    # DataFrame-level cleaning
    # ------------------------------------------------------------------
    def clean_roster(self, df: pd.DataFrame) -> pd.DataFrame:
        """Return a cleaned copy of the roster with columns::

            IRLA, Name, DOB, Rank, order_index (int), Frozen (bool)

        Rows whose order_index is present but not an integer are dropped.
        """
        out = df.copy()

        if "order_index" not in out.columns:
            logger.info("No order_index column; using file order as seniority")
            out["order_index"] = list(range(len(out)))
        if "Frozen" not in out.columns:
            out["Frozen"] = False

        out["IRLA"] = out["IRLA"].astype(str).str.strip()
        out["Name"] = out["Name"].apply(self.normalize_name)
        out["DOB"] = out["DOB"].astype(str).str.strip()
        out["Rank"] = out["Rank"].astype(str).str.strip()
        out["Frozen"] = out["Frozen"].apply(self.parse_frozen_flag)
        out["order_index"] = out["order_index"].apply(_safe_int)

        bad_key = out["order_index"].isna()
        if bad_key.any():
            logger.warning(
                "Dropping %d members with no usable order_index: %s",
                int(bad_key.sum()),
                out.loc[bad_key, "IRLA"].tolist(),
            )
            out = out[~bad_key]

        out = out.reset_index(drop=True)
        out["order_index"] = out["order_index"].astype(int)

        logger.info("Cleaned roster: %d members", len(out))
        return out[ROSTER_COLUMNS]

    def to_members(self, df: pd.DataFrame) -> List[Member]:
        """Convert a cleaned roster DataFrame into Member records."""
        return [
            Member(
                member_id=row["IRLA"],
                name=row["Name"],
                date_of_birth=row["DOB"],
                rank=row["Rank"],
                order_index=int(row["order_index"]),
                frozen=bool(row["Frozen"]),
            )
            for _, row in df.iterrows()
        ]

    def to_ladder(self, df: pd.DataFrame) -> RankLadder:
        """Convert a ladder DataFrame (``Rank, Slots``) into a RankLadder.

        Non-numeric capacities are passed through as None so that the
        configuration check reports them.
        """
        return RankLadder.from_pairs(
            (str(row["Rank"]).strip(), _safe_int(row["Slots"]))
            for _, row in df.iterrows()
        )
