"""Member search and profile lookup."""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from src.promotion_engine.config import MIN_SEARCH_LENGTH
from src.promotion_engine.dates import DateLike, format_date
from src.promotion_engine.models import Member, SimulationResult
from src.promotion_engine.snapshot import effective_rank, get_member_timeline


@dataclass(frozen=True)
class MemberProfile:
    """What is known about one member as of a given date."""

    member_id: str
    name: str
    date_of_birth: str
    original_rank: str
    current_rank: Optional[str]  # None once retired
    retirement_date: Optional[str]  # None when the DOB could not be parsed
    frozen: bool
    timeline: List[Dict]


def find_member(roster: Sequence[Member], member_id: str) -> Optional[Member]:
    """Find a member by exact id, or None."""
    for member in roster:
        if member.member_id == member_id:
            return member
    return None


def search_members(roster: Sequence[Member], text: str) -> List[Member]:
    """Case-insensitive substring search over name, id and rank.

    Queries shorter than ``MIN_SEARCH_LENGTH`` non-blank characters
    return no results. Matches come back most senior first.
    """
    query = (text or "").strip().lower()
    if len(query) < MIN_SEARCH_LENGTH:
        return []

    matches = [
        m for m in roster
        if query in m.name.lower()
        or query in m.member_id.lower()
        or query in m.rank.lower()
    ]
    return sorted(matches, key=lambda m: m.order_index)


def describe_member(
    result: SimulationResult, member_id: str, as_of: DateLike
) -> MemberProfile:
    """Profile of *member_id* as of *as_of*, with the full timeline.

    Raises:
        KeyError: if the member is not part of the simulation.
    """
    member = result.get_member(member_id)
    retires_on = result.retirement_dates.get(member_id)
    return MemberProfile(
        member_id=member.member_id,
        name=member.name,
        date_of_birth=member.date_of_birth,
        original_rank=member.rank,
        current_rank=effective_rank(result, member_id, as_of),
        retirement_date=format_date(retires_on) if retires_on else None,
        frozen=member.frozen,
        timeline=get_member_timeline(result, member_id),
    )
