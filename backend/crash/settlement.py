import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN

from .errors import EngineStateError
from .state import Phase

logger = logging.getLogger(__name__)

TREASURE_BONUS = Decimal("0.25")  # +25%


def money(x: Decimal) -> Decimal:
    return x.quantize(Decimal("0.01"), rounding=ROUND_DOWN)


@dataclass(frozen=True)
class EjectResult:
    participant: object
    multiplier: Decimal
    payout: Decimal
    bonus: Decimal
    auto: bool = False

    @property
    def is_player(self) -> bool:
        return self.participant.is_player


class SettlementEngine:
    def __init__(self, wallet, ledger, bonus_rate=TREASURE_BONUS):
        self.wallet = wallet
        self.ledger = ledger
        self.bonus_rate = Decimal(str(bonus_rate))

    def eject(self, round_obj, participant, auto: bool = False):
        """
        Settle one participant at the round's current multiplier.
        Returns None (and changes nothing) when the participant already
        ejected or the round is not running, so duplicate triggers in a
        tick are harmless.
        """
        if round_obj.phase != Phase.IN_PROGRESS or participant.ejected:
            return None

        multiplier = round_obj.current_multiplier
        if multiplier >= round_obj.crash_point:
            raise EngineStateError(
                f"Eject at {multiplier}x on round {round_obj.id} at or past crash point"
            )

        payout = money(participant.stake * multiplier)
        bonus = Decimal("0.00")

        highest = round_obj.highest_passed_marker()
        if highest is not None and multiplier >= highest:
            bonus = money(payout * self.bonus_rate)
            payout += bonus

        participant.ejected = True
        participant.eject_multiplier = multiplier
        participant.payout = payout
        participant.bonus = bonus

        if participant.is_player:
            self.wallet.credit(payout)

        logger.debug(
            "Round %s: %s ejected at %sx for %s (bonus %s)",
            round_obj.id, participant.name, multiplier, payout, bonus,
        )
        return EjectResult(participant, multiplier, payout, bonus, auto)

    def sweep_auto_ejects(self, round_obj) -> list:
        """Player first, then NPCs in registration order."""
        results = []
        for participant in round_obj.participants:
            threshold = participant.auto_eject_multiplier
            if participant.ejected or threshold is None:
                continue
            if round_obj.current_multiplier >= threshold:
                result = self.eject(round_obj, participant, auto=True)
                if result is not None:
                    results.append(result)
        return results

    def finalize_crash(self, round_obj) -> list:
        """
        Close the round at its crash point. Stakes of everyone still
        aboard are already debited and simply forfeit.
        """
        if round_obj.finalized:
            raise EngineStateError(f"Round {round_obj.id} finalized twice")

        round_obj.finalized = True
        lost = [p for p in round_obj.participants if not p.ejected]
        self.ledger.record(round_obj.crash_point)

        logger.debug("Round %s settled at %sx, %d forfeited", round_obj.id, round_obj.crash_point, len(lost))
        return lost
