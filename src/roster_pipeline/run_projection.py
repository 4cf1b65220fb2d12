"""Project rank occupancy and promotion timelines from a roster CSV.

Usage:
    python -m src.roster_pipeline.run_projection [roster_csv] [as_of] [irla] [ladder_csv]

Examples:
    python -m src.roster_pipeline.run_projection data/roster/roster.csv
    python -m src.roster_pipeline.run_projection roster.csv 31-12-2030
    python -m src.roster_pipeline.run_projection roster.csv 31-12-2030 IRLA0042
"""

import logging
import sys
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from src.logging_config import setup_logging
from src.promotion_engine.config import DEFAULT_RETIREMENT_AGE
from src.promotion_engine.dates import DateLike, coerce_date, format_date
from src.promotion_engine.member_lookup import MemberProfile, describe_member
from src.promotion_engine.models import Member, RankLadder, SimulationResult
from src.promotion_engine.simulation import build_full_simulation
from src.promotion_engine.snapshot import format_timeline, project_snapshot, rank_strength
from src.roster_pipeline.cleaning import RosterCleaner
from src.roster_pipeline.config import DEFAULT_ROSTER_FILE, ROSTER_DIR
from src.roster_pipeline.ingestion import RosterIngester, read_ladder

logger = logging.getLogger(__name__)


@dataclass
class ProjectionReport:
    """Everything produced by one projection run."""

    result: SimulationResult
    as_of: date
    snapshot: Dict[str, List[Member]]
    strength: pd.DataFrame
    profile: Optional[MemberProfile] = None


def load_roster(roster_path: Path) -> List[Member]:
    """Read and clean a roster CSV into Member records."""
    cleaner = RosterCleaner()
    raw = RosterIngester(roster_path).read_roster()
    return cleaner.to_members(cleaner.clean_roster(raw))


def load_ladder(ladder_path: Optional[Path] = None) -> RankLadder:
    """Read a ladder CSV, or fall back to the default ladder."""
    if ladder_path is None:
        return RankLadder.default()
    return RosterCleaner().to_ladder(read_ladder(ladder_path))


def snapshot_to_frame(
    snapshot: Dict[str, List[Member]], ladder: RankLadder
) -> pd.DataFrame:
    """Tabulate rank strength as ``Rank, Slots, Filled, Vacant``."""
    rows = [
        {"Rank": rank, "Slots": capacity, "Filled": filled, "Vacant": capacity - filled}
        for rank, (filled, capacity) in rank_strength(snapshot, ladder).items()
    ]
    return pd.DataFrame(rows, columns=["Rank", "Slots", "Filled", "Vacant"])


def run_projection(
    roster_path: Path,
    as_of: Optional[DateLike] = None,
    member_id: Optional[str] = None,
    ladder_path: Optional[Path] = None,
    retirement_age: int = DEFAULT_RETIREMENT_AGE,
) -> ProjectionReport:
    """Load a roster, simulate every retirement and project to *as_of*.

    Args:
        roster_path: Roster CSV (IRLA, Name, DOB, Rank[, order_index, Frozen]).
        as_of: Snapshot date. Defaults to today.
        member_id: Optional member to profile.
        ladder_path: Optional ladder CSV (Rank, Slots). Defaults to the
            built-in ladder.
        retirement_age: Age at which members retire.

    Raises:
        FileNotFoundError: If an input file doesn't exist.
        IngestionError: If an input file can't be read.
        ConfigurationError: If the roster doesn't fit the ladder.
        KeyError: If *member_id* is not on the roster.
    """
    as_of_date = coerce_date(as_of) if as_of is not None else date.today()

    logger.info("Step 1/3: Loading roster and ladder...")
    roster = load_roster(Path(roster_path))
    ladder = load_ladder(Path(ladder_path) if ladder_path else None)

    logger.info("Step 2/3: Simulating %d members...", len(roster))
    result = build_full_simulation(roster, ladder, retirement_age)
    for issue in result.issues:
        logger.warning("Member %s: %s", issue.member_id, issue.message)

    logger.info("Step 3/3: Projecting occupancy as of %s...", format_date(as_of_date))
    snapshot = project_snapshot(result, as_of_date)

    profile = None
    if member_id is not None:
        profile = describe_member(result, member_id, as_of_date)

    return ProjectionReport(
        result=result,
        as_of=as_of_date,
        snapshot=snapshot,
        strength=snapshot_to_frame(snapshot, ladder),
        profile=profile,
    )


def render_report(report: ProjectionReport) -> str:
    """Plain-text rendering of a projection report."""
    lines = [
        f"Rank strength as of {format_date(report.as_of)}",
        report.strength.to_string(index=False),
    ]

    if report.result.issues:
        lines.append("")
        lines.append(f"Members with unusable records ({len(report.result.issues)}):")
        for issue in report.result.issues:
            lines.append(f"  {issue.member_id}: {issue.message}")

    profile = report.profile
    if profile is not None:
        lines.extend([
            "",
            f"IRLA:         {profile.member_id}",
            f"Name:         {profile.name}",
            f"Current Rank: {profile.current_rank or 'Retired'}",
            f"DOB:          {profile.date_of_birth}",
            f"Retirement:   {profile.retirement_date or 'Unknown'}",
            "",
            "Promotion Timeline",
            format_timeline(profile.timeline),
        ])

    return "\n".join(lines)


if __name__ == "__main__":
    setup_logging()

    roster_path = Path(sys.argv[1]) if len(sys.argv) > 1 else ROSTER_DIR / DEFAULT_ROSTER_FILE
    as_of = sys.argv[2] if len(sys.argv) > 2 else None
    member_id = sys.argv[3] if len(sys.argv) > 3 else None
    ladder_path = Path(sys.argv[4]) if len(sys.argv) > 4 else None

    try:
        report = run_projection(roster_path, as_of, member_id, ladder_path)
        print(render_report(report))
    except Exception:
        logger.exception("Projection failed")
        sys.exit(1)
