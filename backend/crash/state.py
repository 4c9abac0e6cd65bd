from __future__ import annotations

import time
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple


class Phase(str, Enum):
    BETTING = "BETTING"            # accepting input, curve not started
    IN_PROGRESS = "IN_PROGRESS"    # curve advancing
    ENDED = "ENDED"                # crashed, waiting for the next round

    @classmethod
    def from_alias(cls, name: str) -> "Phase":
        """Map the command-flow names onto the engine phases."""
        return PHASE_ALIASES[name.upper()]


PHASE_ALIASES = {
    "AWAITING_COMMAND": Phase.BETTING,
    "PRE_DIVE": Phase.BETTING,
    "DIVING": Phase.IN_PROGRESS,
    "POST_DIVE": Phase.ENDED,
    "BETTING": Phase.BETTING,
    "IN_PROGRESS": Phase.IN_PROGRESS,
    "ENDED": Phase.ENDED,
}


@dataclass
class Bet:
    amount: Decimal
    auto_eject_multiplier: Optional[Decimal] = None

    ejected: bool = False
    eject_multiplier: Optional[Decimal] = None
    payout: Decimal = Decimal("0.00")
    bonus: Decimal = Decimal("0.00")

    name = "You"
    is_player = True

    @property
    def stake(self) -> Decimal:
        return self.amount

    def to_dict(self) -> dict:
        return {
            "amount": str(self.amount),
            "auto_eject_multiplier": str(self.auto_eject_multiplier) if self.auto_eject_multiplier else None,
            "ejected": self.ejected,
            "eject_multiplier": str(self.eject_multiplier) if self.eject_multiplier else None,
            "payout": str(self.payout),
            "bonus": str(self.bonus),
        }


@dataclass
class NPC:
    name: str
    bet_amount: Decimal
    auto_eject_multiplier: Optional[Decimal] = None

    ejected: bool = False
    eject_multiplier: Optional[Decimal] = None
    payout: Decimal = Decimal("0.00")
    bonus: Decimal = Decimal("0.00")

    is_player = False

    @property
    def stake(self) -> Decimal:
        return self.bet_amount

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "bet_amount": str(self.bet_amount),
            "auto_eject_multiplier": str(self.auto_eject_multiplier) if self.auto_eject_multiplier else None,
            "ejected": self.ejected,
            "eject_multiplier": str(self.eject_multiplier) if self.eject_multiplier else None,
        }


@dataclass(frozen=True)
class HistoryEntry:
    id: int
    crash_point: Decimal

    def to_dict(self) -> dict:
        return {"id": self.id, "crash_point": str(self.crash_point)}


@dataclass
class Round:
    id: int
    crash_point: Decimal
    treasure_markers: List[Decimal]
    npcs: List[NPC] = field(default_factory=list)
    bet: Optional[Bet] = None

    phase: Phase = Phase.IN_PROGRESS
    passed_markers: List[Decimal] = field(default_factory=list)
    plot_points: List[Tuple[float, Decimal]] = field(default_factory=list)
    elapsed: float = 0.0
    progress: float = 0.0
    current_multiplier: Decimal = Decimal("1.00")
    started_at: float = field(default_factory=time.time)
    ended_at: Optional[float] = None
    finalized: bool = False

    def __post_init__(self):
        # crash_point is fixed at creation
        object.__setattr__(self, "_crash_point", self.crash_point)

    def __setattr__(self, name, value):
        if name == "crash_point" and "_crash_point" in self.__dict__:
            raise AttributeError("crash_point is immutable once the round exists")
        super().__setattr__(name, value)

    @property
    def participants(self) -> list:
        """Settlement order: the player first, then NPCs as registered."""
        people = [self.bet] if self.bet is not None else []
        return people + list(self.npcs)

    def highest_passed_marker(self) -> Optional[Decimal]:
        return max(self.passed_markers) if self.passed_markers else None

    def __str__(self):
        return f"Round {self.id} ({self.phase.value})"
