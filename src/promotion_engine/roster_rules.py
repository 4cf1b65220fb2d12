"""Configuration checks run before any retirement is processed."""

from collections import Counter
from typing import Dict, List, Sequence

from src.promotion_engine.models import Member, RankLadder


class ConfigurationError(Exception):
    """Raised when the roster or rank ladder cannot be simulated."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class RosterRules:
    """Validates a rank ladder and a roster against it.

    Each ``check_*`` method returns a list of error messages (empty when
    valid); :meth:`validate` raises a single :class:`ConfigurationError`
    carrying all of them.
    """

    def __init__(self, ladder: RankLadder):
        self.ladder = ladder

    def check_ladder(self) -> List[str]:
        if not self.ladder.tiers:
            return ["Rank ladder has no ranks (no lowest tier)"]

        errors = []
        for rank, count in Counter(self.ladder.ranks).items():
            if count > 1:
                errors.append(f"Rank {rank!r} appears {count} times in the ladder")

        for tier in self.ladder.tiers:
            if not isinstance(tier.capacity, int) or isinstance(tier.capacity, bool):
                errors.append(
                    f"Capacity for rank {tier.name!r} must be an integer, "
                    f"got {tier.capacity!r}"
                )
            elif tier.capacity < 1:
                errors.append(
                    f"Capacity for rank {tier.name!r} must be positive, "
                    f"got {tier.capacity}"
                )
        return errors

    def check_roster(self, roster: Sequence[Member]) -> List[str]:
        errors = []

        for member_id, count in Counter(m.member_id for m in roster).items():
            if count > 1:
                errors.append(f"Duplicate member id {member_id!r} ({count} records)")

        # Seniority must be a total order or promotions depend on file order.
        holders: Dict[int, List[str]] = {}
        for member in roster:
            holders.setdefault(member.order_index, []).append(member.member_id)
        for order_index, member_ids in holders.items():
            if len(member_ids) > 1:
                errors.append(
                    f"Seniority key order_index={order_index} is shared by "
                    f"{', '.join(repr(i) for i in member_ids)}"
                )

        known_ranks = set(self.ladder.ranks)
        for member in roster:
            if member.rank not in known_ranks:
                errors.append(
                    f"Member {member.member_id!r} holds rank {member.rank!r}, "
                    "which is not on the rank ladder"
                )

        # Over-strength ranks would break the capacity invariant from the start.
        strength = Counter(m.rank for m in roster if m.rank in known_ranks)
        for tier in self.ladder.tiers:
            held = strength.get(tier.name, 0)
            if isinstance(tier.capacity, int) and held > tier.capacity:
                errors.append(
                    f"Rank {tier.name!r} starts with {held} members "
                    f"but its capacity is {tier.capacity}"
                )
        return errors

    def validate(self, roster: Sequence[Member]) -> None:
        """Raise :class:`ConfigurationError` if the ladder or roster is invalid."""
        errors = self.check_ladder()
        if not errors:
            errors = self.check_roster(roster)
        if errors:
            raise ConfigurationError(errors)
