"""Retirement event scheduling."""

import logging
from datetime import date
from typing import Dict, List, Sequence

from src.promotion_engine.config import DEFAULT_RETIREMENT_AGE
from src.promotion_engine.dates import retirement_date
from src.promotion_engine.models import Member, RetirementEvent, RosterIssue

logger = logging.getLogger(__name__)


class EventScheduler:
    """Builds the chronological list of retirement events for a roster.

    One event per non-frozen member with a usable date of birth, ordered by
    retirement date and then by seniority key so that same-day retirements
    are always processed most senior first. Members whose date of birth
    cannot be parsed are skipped and reported in :attr:`issues`.
    """

    def __init__(self, retirement_age: int = DEFAULT_RETIREMENT_AGE):
        if retirement_age < 0:
            raise ValueError(f"retirement_age must be non-negative, got {retirement_age}")
        self.retirement_age = retirement_age
        self.issues: List[RosterIssue] = []
        self.retirement_dates: Dict[str, date] = {}

    def build_events(self, roster: Sequence[Member]) -> List[RetirementEvent]:
        """Return retirement events for *roster*, earliest first.

        Each call starts from scratch, so the same scheduler can be reused.
        """
        self.issues = []
        self.retirement_dates = {}
        events: List[RetirementEvent] = []

        for member in roster:
            try:
                retires_on = retirement_date(member.date_of_birth, self.retirement_age)
            except ValueError as e:
                logger.warning(
                    "Skipping retirement for %s (%s): %s",
                    member.member_id, member.name, e,
                )
                self.issues.append(
                    RosterIssue(member.member_id, "date_of_birth", str(e))
                )
                continue

            self.retirement_dates[member.member_id] = retires_on
            if member.frozen:
                continue
            events.append(RetirementEvent(date=retires_on, member=member))

        events.sort(key=lambda event: (event.date, event.member.order_index))

        logger.info(
            "Scheduled %d retirement events for %d members (%d skipped)",
            len(events), len(roster), len(self.issues),
        )
        return events
