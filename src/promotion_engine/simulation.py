"""Full-career promotion simulation - orchestrates scheduler and engine."""

import dataclasses
import logging
from typing import Iterable, Optional, Sequence, Tuple

from src.promotion_engine.cascade_engine import CascadeEngine
from src.promotion_engine.config import DEFAULT_RETIREMENT_AGE
from src.promotion_engine.event_scheduler import EventScheduler
from src.promotion_engine.ledger import PromotionLedger
from src.promotion_engine.models import Member, RankLadder, SimulationResult
from src.promotion_engine.roster_rules import RosterRules

logger = logging.getLogger(__name__)


def _working_roster(
    roster: Sequence[Member], frozen_ids: Optional[Iterable[str]]
) -> Tuple[Member, ...]:
    """Value copy of *roster* with any extra freezes applied."""
    extra = set(frozen_ids or ())
    return tuple(
        dataclasses.replace(m, frozen=m.frozen or m.member_id in extra)
        for m in roster
    )


def build_full_simulation(
    roster: Sequence[Member],
    ladder: RankLadder,
    retirement_age: int = DEFAULT_RETIREMENT_AGE,
    frozen_ids: Optional[Iterable[str]] = None,
) -> SimulationResult:
    """Run every retirement in the roster through the rank ladder.

    Args:
        roster: Members as supplied by the roster source. Never modified.
        ladder: Ranks from highest to lowest with their capacities.
        retirement_age: Age at which members retire (month-end).
        frozen_ids: Extra member ids to treat as frozen for this run only.

    Returns:
        :class:`SimulationResult` with the final occupancy, the sealed
        promotion ledger and any per-record issues.

    Raises:
        ConfigurationError: if the ladder or roster cannot be simulated.
            Raised before any event is processed.
    """
    members = _working_roster(roster, frozen_ids)
    RosterRules(ladder).validate(members)

    scheduler = EventScheduler(retirement_age)
    events = scheduler.build_events(members)
    unpromotable = {issue.member_id for issue in scheduler.issues}

    ledger = PromotionLedger()
    engine = CascadeEngine(ladder, members, unpromotable_ids=unpromotable, ledger=ledger)
    processed = engine.run(events)
    ledger.seal()

    result = SimulationResult(
        ladder=ladder,
        members=members,
        occupancy=engine.occupancy_ids(),
        ledger=ledger,
        retirement_dates=dict(scheduler.retirement_dates),
        issues=tuple(scheduler.issues),
        retirement_age=retirement_age,
        events_processed=processed,
    )

    logger.info(
        "Simulation complete: %d members, %d retirements, %d promotions, %d issues",
        len(members), processed, len(ledger), len(result.issues),
    )
    return result
