"""Promotion ledger - append-only record of every promotion in a run."""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterator, List, Tuple


@dataclass(frozen=True)
class PromotionRecord:
    """One promotion caused by one retirement."""

    new_rank: str
    date: date
    cause_id: str
    cause_name: str

    def as_dict(self) -> Dict:
        return {
            "new_rank": self.new_rank,
            "date": self.date,
            "cause_id": self.cause_id,
            "cause_name": self.cause_name,
        }


class PromotionLedger:
    """Per-member promotion history plus a run-wide journal.

    Entries for a member are kept in append order, which is also date
    order because retirement events are processed date-ascending and every
    promotion in one cascade carries the date of the retirement that
    started it. The journal keeps all records across members in the order
    they were appended, so a point-in-time replay can walk it front to back.
    """

    def __init__(self):
        self._entries: Dict[str, List[PromotionRecord]] = {}
        self._journal: List[Tuple[str, PromotionRecord]] = []
        self._sealed = False

    def record(self, member_id: str, record: PromotionRecord) -> None:
        """Append *record* to *member_id*'s history.

        Raises:
            RuntimeError: if the ledger has been sealed.
            ValueError: if *record* is dated before the member's last entry.
        """
        if self._sealed:
            raise RuntimeError("Ledger is sealed; no further promotions can be recorded")

        history = self._entries.setdefault(member_id, [])
        if history and record.date < history[-1].date:
            raise ValueError(
                f"Out-of-order promotion for {member_id}: {record.date} "
                f"precedes {history[-1].date}"
            )
        history.append(record)
        self._journal.append((member_id, record))

    def seal(self) -> None:
        """Freeze the ledger once the run that owns it is finished."""
        self._sealed = True

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def entries(self, member_id: str) -> Tuple[PromotionRecord, ...]:
        """Promotion history for a member (empty if never promoted)."""
        return tuple(self._entries.get(member_id, ()))

    def journal(self) -> Iterator[Tuple[str, PromotionRecord]]:
        """All ``(member_id, record)`` pairs in append (chronological) order."""
        return iter(self._journal)

    def promoted_member_ids(self) -> List[str]:
        return list(self._entries)

    def to_dict(self) -> Dict[str, List[PromotionRecord]]:
        return {member_id: list(records) for member_id, records in self._entries.items()}

    def __len__(self) -> int:
        return len(self._journal)

    def __contains__(self, member_id: str) -> bool:
        return member_id in self._entries

    def __eq__(self, other) -> bool:
        if not isinstance(other, PromotionLedger):
            return NotImplemented
        return self._journal == other._journal

    def __repr__(self) -> str:
        return (
            f"PromotionLedger(members={len(self._entries)}, "
            f"promotions={len(self._journal)}, sealed={self._sealed})"
        )
