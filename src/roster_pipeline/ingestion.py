"""CSV ingestion for roster and rank ladder files.

Both files are read entirely as text so that dates of birth and ids keep
their original spelling; typing happens in the cleaning step.
"""

import logging
from pathlib import Path

import pandas as pd

from src.roster_pipeline.config import LADDER_COLUMNS, REQUIRED_ROSTER_COLUMNS

logger = logging.getLogger(__name__)


class IngestionError(Exception):
    """Raised when a roster or ladder CSV cannot be read."""


def _read_text_csv(filepath: Path) -> pd.DataFrame:
    """Read a CSV with every column as stripped text."""
    if not filepath.exists():
        raise FileNotFoundError(f"Expected file not found: {filepath}")

    try:
        df = pd.read_csv(filepath, dtype=str, keep_default_na=False, quotechar='"')
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise IngestionError(f"Failed to read {filepath.name}: {e}") from e

    df.columns = [str(col).strip() for col in df.columns]
    for col in df.columns:
        df[col] = df[col].str.strip().str.strip('"').str.strip()
    return df


class RosterIngester:
    """Reads the roster CSV (one row per member)."""

    def __init__(self, roster_path: Path):
        self.roster_path = Path(roster_path)

    def read_roster(self) -> pd.DataFrame:
        """Read the roster.

        Returns DataFrame with at least the columns:
            IRLA, Name, DOB, Rank
        and, when present in the file, order_index and Frozen.

        Raises:
            FileNotFoundError: if the file does not exist.
            IngestionError: if the file is unreadable or lacks columns.
        """
        logger.info("Reading roster: %s", self.roster_path.name)
        df = _read_text_csv(self.roster_path)

        missing = REQUIRED_ROSTER_COLUMNS - set(df.columns)
        if missing:
            raise IngestionError(
                f"Roster {self.roster_path.name} is missing columns: {sorted(missing)}"
            )

        # Drop blank rows (no id)
        blank = df["IRLA"] == ""
        if blank.any():
            logger.warning("Dropping %d roster rows with no IRLA", int(blank.sum()))
            df = df[~blank].reset_index(drop=True)

        logger.info("Loaded %d roster rows", len(df))
        return df


def read_ladder(ladder_path: Path) -> pd.DataFrame:
    """Read a rank ladder CSV with columns ``Rank, Slots`` (highest first).

    Raises:
        FileNotFoundError: if the file does not exist.
        IngestionError: if the file is unreadable or lacks columns.
    """
    ladder_path = Path(ladder_path)
    logger.info("Reading rank ladder: %s", ladder_path.name)
    df = _read_text_csv(ladder_path)

    missing = set(LADDER_COLUMNS) - set(df.columns)
    if missing:
        raise IngestionError(
            f"Ladder {ladder_path.name} is missing columns: {sorted(missing)}"
        )

    df = df[df["Rank"] != ""].reset_index(drop=True)
    logger.info("Loaded %d ranks", len(df))
    return df[LADDER_COLUMNS]
