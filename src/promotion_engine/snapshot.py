"""Point-in-time and full-career views derived from a simulation ledger.

A snapshot is never re-simulated. It replays the ledger entries dated on
or before the query date onto the starting ranks and drops members who
have retired by then, so "who holds what as of X" always agrees with each
member's own promotion timeline.
"""

import dataclasses
import logging
from typing import Dict, List, Optional, Tuple

from src.promotion_engine.config import NO_PROMOTIONS_MESSAGE, UNKNOWN_CAUSE_NAME
from src.promotion_engine.dates import DateLike, coerce_date, format_date
from src.promotion_engine.models import Member, RankLadder, SimulationResult

logger = logging.getLogger(__name__)


def has_retired(result: SimulationResult, member: Member, as_of: DateLike) -> bool:
    """Whether *member* is off the ladder by *as_of*.

    Frozen members never vacate their seat, and members whose date of
    birth could not be parsed have no retirement date.
    """
    if member.frozen:
        return False
    retires_on = result.retirement_dates.get(member.member_id)
    return retires_on is not None and retires_on <= coerce_date(as_of)


def project_snapshot(
    result: SimulationResult, query_date: DateLike
) -> Dict[str, List[Member]]:
    """Rank occupancy as of *query_date*.

    Returns:
        Dict mapping each rank (ladder order) to the members holding it,
        most senior first with frozen members last. Each member is a copy
        whose ``rank`` is the rank held on that date.
    """
    as_of = coerce_date(query_date)

    held: Dict[str, str] = {m.member_id: m.rank for m in result.members}
    replayed = 0
    for member_id, record in result.ledger.journal():
        if record.date <= as_of:
            held[member_id] = record.new_rank
            replayed += 1

    snapshot: Dict[str, List[Member]] = {rank: [] for rank in result.ladder.ranks}
    for member in result.members:
        if has_retired(result, member, as_of):
            continue
        rank = held[member.member_id]
        snapshot[rank].append(dataclasses.replace(member, rank=rank))

    for members in snapshot.values():
        members.sort(key=lambda m: (m.frozen, m.order_index))

    logger.debug(
        "Snapshot as of %s: replayed %d of %d promotions",
        format_date(as_of), replayed, len(result.ledger),
    )
    return snapshot


def effective_rank(
    result: SimulationResult, member_id: str, query_date: DateLike
) -> Optional[str]:
    """Rank held by *member_id* on *query_date*, or None once retired.

    Raises:
        KeyError: if the member is not part of the simulation.
    """
    member = result.get_member(member_id)
    as_of = coerce_date(query_date)
    if has_retired(result, member, as_of):
        return None

    rank = member.rank
    for record in result.ledger.entries(member_id):
        if record.date <= as_of:
            rank = record.new_rank
    return rank


def get_member_timeline(result: SimulationResult, member_id: str) -> List[Dict]:
    """Full-career promotion history for a member.

    Returns:
        List of dicts with ``new_rank``, ``date``, ``cause_id`` and
        ``cause_name``, oldest first. Empty if never promoted.

    Raises:
        KeyError: if the member is not part of the simulation.
    """
    result.get_member(member_id)
    return [record.as_dict() for record in result.ledger.entries(member_id)]


def format_timeline(timeline: List[Dict]) -> str:
    """Render a timeline as one line per promotion."""
    if not timeline:
        return NO_PROMOTIONS_MESSAGE

    lines = []
    for entry in timeline:
        cause_name = entry.get("cause_name") or UNKNOWN_CAUSE_NAME
        lines.append(
            f"Promoted to {entry['new_rank']} on {format_date(entry['date'])} "
            f"(triggered by retirement of {cause_name} [{entry['cause_id']}])"
        )
    return "\n".join(lines)


def rank_strength(
    snapshot: Dict[str, List[Member]], ladder: RankLadder
) -> Dict[str, Tuple[int, int]]:
    """Map each rank to ``(filled, capacity)``."""
    return {
        tier.name: (len(snapshot.get(tier.name, [])), tier.capacity)
        for tier in ladder.tiers
    }
