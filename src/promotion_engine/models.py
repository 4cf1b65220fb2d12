"""Data models for the promotion engine."""

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from src.promotion_engine.config import (
    DEFAULT_RANK_ORDER,
    DEFAULT_RANK_SLOTS,
    DEFAULT_RETIREMENT_AGE,
)
from src.promotion_engine.ledger import PromotionLedger


@dataclass(frozen=True)
class Member:
    """A member of the organization as supplied by the roster source."""

    member_id: str  # IRLA
    name: str
    date_of_birth: str  # DD-MM-YYYY
    rank: str
    order_index: int  # Seniority key, lower = more senior
    frozen: bool = False


@dataclass(frozen=True)
class RankTier:
    """A single rank and its sanctioned strength."""

    name: str
    capacity: int


@dataclass(frozen=True)
class RankLadder:
    """Ordered ranks, highest first, each with a fixed capacity."""

    tiers: Tuple[RankTier, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, int]]) -> "RankLadder":
        """Build a ladder from ordered ``(rank, capacity)`` pairs."""
        return cls(tiers=tuple(RankTier(name, capacity) for name, capacity in pairs))

    @classmethod
    def default(cls) -> "RankLadder":
        return cls.from_pairs(
            (rank, DEFAULT_RANK_SLOTS[rank]) for rank in DEFAULT_RANK_ORDER
        )

    @property
    def ranks(self) -> List[str]:
        return [tier.name for tier in self.tiers]

    @property
    def highest(self) -> str:
        if not self.tiers:
            raise ValueError("Rank ladder is empty")
        return self.tiers[0].name

    @property
    def lowest(self) -> str:
        if not self.tiers:
            raise ValueError("Rank ladder is empty")
        return self.tiers[-1].name

    def index(self, rank: str) -> int:
        for i, tier in enumerate(self.tiers):
            if tier.name == rank:
                return i
        raise KeyError(f"Rank {rank!r} is not on the ladder")

    def capacity(self, rank: str) -> int:
        return self.tiers[self.index(rank)].capacity

    def lower_rank(self, rank: str) -> Optional[str]:
        """The rank directly below *rank*, or None for the lowest rank."""
        idx = self.index(rank)
        if idx == len(self.tiers) - 1:
            return None
        return self.tiers[idx + 1].name

    def is_lowest(self, rank: str) -> bool:
        return self.lower_rank(rank) is None

    def total_capacity(self) -> int:
        return sum(tier.capacity for tier in self.tiers)

    def __contains__(self, rank: str) -> bool:
        return any(tier.name == rank for tier in self.tiers)

    def __len__(self) -> int:
        return len(self.tiers)


@dataclass(frozen=True)
class RetirementEvent:
    """A scheduled retirement: the date a member leaves the ladder."""

    date: date
    member: Member


@dataclass(frozen=True)
class RosterIssue:
    """A recoverable per-record problem found while preparing a run."""

    member_id: str
    field_name: str
    message: str


@dataclass(frozen=True)
class SimulationResult:
    """Outcome of one full-career run over a roster and ladder.

    ``members`` is the roster as the run saw it (including any freeze
    overrides), ``occupancy`` the final rank -> member ids after every
    retirement has been processed, and ``retirement_dates`` the derived
    retirement date of each member whose date of birth could be parsed.
    """

    ladder: RankLadder
    members: Tuple[Member, ...]
    occupancy: Mapping[str, Tuple[str, ...]]
    ledger: PromotionLedger
    retirement_dates: Mapping[str, date]
    issues: Tuple[RosterIssue, ...] = ()
    retirement_age: int = DEFAULT_RETIREMENT_AGE
    events_processed: int = 0
    _index: Dict[str, Member] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Read-only views over private copies; a result never changes once built.
        object.__setattr__(self, "members", tuple(self.members))
        object.__setattr__(
            self, "occupancy",
            MappingProxyType({rank: tuple(ids) for rank, ids in self.occupancy.items()}),
        )
        object.__setattr__(
            self, "retirement_dates", MappingProxyType(dict(self.retirement_dates))
        )
        object.__setattr__(self, "issues", tuple(self.issues))
        object.__setattr__(self, "_index", {m.member_id: m for m in self.members})

    def get_member(self, member_id: str) -> Member:
        """Look up a member of this run.

        Raises:
            KeyError: if *member_id* was not part of the roster.
        """
        try:
            return self._index[member_id]
        except KeyError:
            raise KeyError(f"Member {member_id!r} is not in this simulation") from None

    def has_member(self, member_id: str) -> bool:
        return member_id in self._index

    @property
    def total_promotions(self) -> int:
        return len(self.ledger)
