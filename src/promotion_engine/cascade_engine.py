"""Vacancy cascade engine.

Consumes retirement events in order and keeps every rank filled up to its
capacity by promoting the most senior eligible member of the rank directly
below. Each promotion opens a vacancy one rank lower, which is filled
before the rank above is topped up again, so a single retirement can ripple
all the way down the ladder. All promotions in one ripple share the date
and cause of the retirement that started it.
"""

import logging
from bisect import insort
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from src.promotion_engine.config import UNKNOWN_CAUSE_NAME
from src.promotion_engine.ledger import PromotionLedger, PromotionRecord
from src.promotion_engine.models import Member, RankLadder, RetirementEvent

logger = logging.getLogger(__name__)


@dataclass
class SeatHolder:
    """Private, mutable working copy of a member for one run."""

    member_id: str
    name: str
    rank: str
    order_index: int
    frozen: bool = False
    promotable: bool = True  # False when the member's record failed validation
    retired: bool = False

    @classmethod
    def from_member(cls, member: Member, promotable: bool = True) -> "SeatHolder":
        return cls(
            member_id=member.member_id,
            name=member.name,
            rank=member.rank,
            order_index=member.order_index,
            frozen=member.frozen,
            promotable=promotable,
        )

    @property
    def eligible(self) -> bool:
        """Whether this holder may be promoted."""
        return self.promotable and not self.frozen and not self.retired


def _seat_order(holder: SeatHolder) -> Tuple[bool, int]:
    # Frozen holders sit after everyone else in their rank.
    return (holder.frozen, holder.order_index)


class CascadeEngine:
    """State machine over rank occupancy for a single simulation run.

    The engine owns its occupancy table and seat holders; nothing it holds
    is shared with the caller's roster or with any other run.
    """

    def __init__(
        self,
        ladder: RankLadder,
        roster: Sequence[Member],
        unpromotable_ids: Iterable[str] = (),
        ledger: Optional[PromotionLedger] = None,
    ):
        self.ladder = ladder
        self.ledger = ledger if ledger is not None else PromotionLedger()

        blocked = set(unpromotable_ids)
        self._holders: Dict[str, SeatHolder] = {
            m.member_id: SeatHolder.from_member(m, promotable=m.member_id not in blocked)
            for m in roster
        }

        self.occupancy: Dict[str, List[SeatHolder]] = {rank: [] for rank in ladder.ranks}
        for holder in self._holders.values():
            self.occupancy[holder.rank].append(holder)
        for seats in self.occupancy.values():
            seats.sort(key=_seat_order)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, events: Iterable[RetirementEvent]) -> int:
        """Process *events* in the order given.

        Returns:
            Number of events that retired a member.
        """
        processed = 0
        for event in events:
            if self.process_event(event.date, event.member.member_id):
                processed += 1
        return processed

    def process_event(self, event_date: date, member_id: str) -> bool:
        """Retire *member_id* on *event_date* and backfill the vacancy.

        Returns:
            False if the member had already left the ladder (no-op).
        """
        holder = self._holders.get(member_id)
        if holder is None or holder.retired:
            logger.debug("Retirement of %s ignored: already off the ladder", member_id)
            return False

        seats = self.occupancy[holder.rank]
        if holder not in seats:
            logger.debug("Retirement of %s ignored: not seated in %s", member_id, holder.rank)
            return False

        seats.remove(holder)
        holder.retired = True
        logger.debug(
            "%s (%s) retires from %s on %s", holder.member_id, holder.name,
            holder.rank, event_date,
        )

        self._cascade_fill(holder.rank, event_date, holder)
        return True

    def holder(self, member_id: str) -> SeatHolder:
        return self._holders[member_id]

    def occupancy_ids(self) -> Dict[str, Tuple[str, ...]]:
        """Current occupancy as rank -> member ids, in ladder order."""
        return {
            rank: tuple(h.member_id for h in self.occupancy[rank])
            for rank in self.ladder.ranks
        }

    def vacancies(self) -> Dict[str, int]:
        return {
            rank: self.ladder.capacity(rank) - len(self.occupancy[rank])
            for rank in self.ladder.ranks
        }

    # ------------------------------------------------------------------
    # Cascade
    # ------------------------------------------------------------------

    def _cascade_fill(self, rank: str, event_date: date, cause: SeatHolder) -> None:
        """Fill *rank* up to capacity from the rank below, recursively.

        Stops when *rank* is full, when it is the lowest rank, or when the
        rank below has no eligible candidate. An under-strength rank is a
        normal outcome, not an error.
        """
        seats = self.occupancy[rank]
        capacity = self.ladder.capacity(rank)

        while len(seats) < capacity:
            lower = self.ladder.lower_rank(rank)
            if lower is None:
                break

            candidate = self._most_senior_eligible(lower)
            if candidate is None:
                break

            self.occupancy[lower].remove(candidate)
            candidate.rank = rank
            insort(seats, candidate, key=_seat_order)

            self.ledger.record(
                candidate.member_id,
                PromotionRecord(
                    new_rank=rank,
                    date=event_date,
                    cause_id=cause.member_id,
                    cause_name=cause.name or UNKNOWN_CAUSE_NAME,
                ),
            )
            logger.debug(
                "Promoted %s %s -> %s on %s (cause %s)",
                candidate.member_id, lower, rank, event_date, cause.member_id,
            )

            # Backfill the vacancy just opened below before topping up this rank.
            self._cascade_fill(lower, event_date, cause)

    def _most_senior_eligible(self, rank: str) -> Optional[SeatHolder]:
        # Seats are kept in seniority order, so the first eligible is the most senior.
        for holder in self.occupancy[rank]:
            if holder.eligible:
                return holder
        return None
