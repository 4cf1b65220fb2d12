from src.promotion_engine.cascade_engine import CascadeEngine
from src.promotion_engine.event_scheduler import EventScheduler
from src.promotion_engine.ledger import PromotionLedger, PromotionRecord
from src.promotion_engine.models import (
    Member,
    RankLadder,
    RankTier,
    RetirementEvent,
    RosterIssue,
    SimulationResult,
)
from src.promotion_engine.roster_rules import ConfigurationError, RosterRules
from src.promotion_engine.simulation import build_full_simulation
from src.promotion_engine.snapshot import (
    effective_rank,
    format_timeline,
    get_member_timeline,
    project_snapshot,
)

__all__ = [
    "CascadeEngine",
    "ConfigurationError",
    "EventScheduler",
    "Member",
    "PromotionLedger",
    "PromotionRecord",
    "RankLadder",
    "RankTier",
    "RetirementEvent",
    "RosterIssue",
    "RosterRules",
    "SimulationResult",
    "build_full_simulation",
    "effective_rank",
    "format_timeline",
    "get_member_timeline",
    "project_snapshot",
]
