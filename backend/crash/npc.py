import math
from decimal import Decimal

from .generators import q2
from .state import NPC

NPC_NAMES = ("Walrus", "Orca", "Narwhal", "Beluga", "Dolphin", "Seal", "Marlin")
DEFAULT_NPC_BASE_BET = Decimal("50")
AUTO_EJECT_CHANCE = 0.6
AUTO_EJECT_RANGE = (1.5, 6.5)   # 150m .. 650m


class NPCSimulator:
    """
    Ambient bots for a round. The roster is drawn from the rng passed in,
    so it only shares state with the engine through that source.
    """

    def __init__(self, names=NPC_NAMES, min_bots: int = 2, max_bots: int = 4,
                 auto_eject_chance: float = AUTO_EJECT_CHANCE, auto_eject_range=AUTO_EJECT_RANGE):
        if not 1 <= min_bots <= max_bots <= len(names):
            raise ValueError("Bot count range does not fit the name list")
        self.names = tuple(names)
        self.min_bots = min_bots
        self.max_bots = max_bots
        self.auto_eject_chance = auto_eject_chance
        self.auto_eject_range = auto_eject_range

    def generate(self, rng, player_bet=None) -> list:
        base = Decimal(str(player_bet)) if player_bet else DEFAULT_NPC_BASE_BET
        count = rng.randint(self.min_bots, self.max_bots)

        roster = []
        for name in rng.sample(self.names, count):
            bet_amount = Decimal(math.floor(rng.random() * float(base * 4) + float(base / 2)))
            bet_amount = max(bet_amount, Decimal("1"))

            auto_eject = None
            if rng.random() < self.auto_eject_chance:
                low, high = self.auto_eject_range
                auto_eject = q2(math.floor(rng.uniform(low, high) * 100) / 100)

            roster.append(NPC(name=name, bet_amount=bet_amount, auto_eject_multiplier=auto_eject))
        return roster
