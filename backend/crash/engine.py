import itertools
import logging
from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP

from .conf import EngineConfig
from .curve import MultiplierCurve, calibrated_growth, exponential_shape
from .errors import (
    AlreadyEjected,
    BetAlreadyPlaced,
    BettingClosed,
    EngineStateError,
    InsufficientBalance,
    InvalidAutoEjectThreshold,
    InvalidBetAmount,
    NoActiveBet,
    RoundNotInProgress,
)
from .events import Category, Event, EventBus
from .generators import CrashPointGenerator, TreasureMarkerGenerator
from .ledger import HistoryLedger
from .npc import NPCSimulator
from .rng import PythonRandomSource
from .settlement import SettlementEngine
from .state import Bet, Phase, Round
from .wallet import Wallet

logger = logging.getLogger(__name__)


def depth_of(multiplier) -> int:
    return int(Decimal(multiplier) * 100)


def to_decimal(value, error_cls):
    try:
        d = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise error_cls()
    if not d.is_finite():
        raise error_cls()
    return d


def to_cents(value: Decimal, error_cls, rounding=ROUND_HALF_UP) -> Decimal:
    # values with more digits than the decimal context cannot be quantized
    try:
        return value.quantize(Decimal("0.01"), rounding=rounding)
    except InvalidOperation:
        raise error_cls()


class DiveEngine:
    """
    One player's dive table: the round state machine.

    BETTING -> IN_PROGRESS -> ENDED -> (post_round_delay) -> BETTING

    All state changes happen in the transition methods below, driven by
    the scheduler's timers. Every timer is kept so it can be cancelled
    when its state is left or the engine is torn down.
    """

    def __init__(self, scheduler, rng=None, config: EngineConfig = None,
                 crash_generator=None, marker_generator=None, npc_simulator=None, curve_shape=None):
        self.config = config or EngineConfig()
        self.scheduler = scheduler
        self.rng = rng or PythonRandomSource()

        self.crash_generator = crash_generator or CrashPointGenerator(
            house_edge=self.config.house_edge,
            floor=self.config.crash_floor,
            cap=self.config.crash_cap,
            bias=self.config.sqrt_bias,
        )
        self.marker_generator = marker_generator or TreasureMarkerGenerator(self.config.treasure_markers)
        self.npc_simulator = npc_simulator or NPCSimulator()

        if curve_shape is None:
            median = CrashPointGenerator(
                house_edge=self.config.house_edge,
                floor=self.config.crash_floor,
                cap=self.config.crash_cap,
                bias=self.config.sqrt_bias,
            ).median()
            curve_shape = exponential_shape(calibrated_growth(median, self.config.curve_target_seconds))
        self.curve = MultiplierCurve(curve_shape, rate=self.config.curve_rate)

        self.wallet = Wallet(self.config.initial_balance)
        self.ledger = HistoryLedger(self.config.history_limit)
        self.settlement = SettlementEngine(self.wallet, self.ledger, self.config.treasure_bonus)

        self.phase = Phase.BETTING
        self.round = None
        self.bet = None

        self._round_ids = itertools.count(1)
        self._launch_timer = None
        self._tick_timer = None
        self._reset_timer = None
        self._ticks = EventBus()
        self._events = EventBus()
        self.started = False
        self.closed = False

    # ===============================
    # FEED
    # ===============================

    @property
    def balance(self) -> Decimal:
        return self.wallet.balance

    def subscribe(self, on_tick):
        """on_tick(view) after every state change. Returns an unsubscribe callable."""
        return self._ticks.subscribe(on_tick)

    def subscribe_events(self, listener):
        return self._events.subscribe(listener)

    def attach(self, presenter):
        detach_ticks = self.subscribe(presenter.on_tick)
        detach_events = self.subscribe_events(presenter.describe)

        def detach():
            detach_ticks()
            detach_events()

        return detach

    def emit(self, category: Category, text: str, **data) -> Event:
        event = Event(category=category, text=text, data=data)
        logger.debug("[%s] %s", category.value, text)
        self._events.publish(event)
        return event

    def view(self) -> dict:
        r = self.round
        multiplier = r.current_multiplier if r else self.curve.multiplier
        return {
            "round_id": r.id if r else None,
            "phase": self.phase.value,
            "current_multiplier": str(multiplier),
            "depth": depth_of(multiplier),
            "elapsed": r.elapsed if r else 0.0,
            "treasure_markers": [str(m) for m in r.treasure_markers] if r else [],
            "passed_markers": [str(m) for m in r.passed_markers] if r else [],
            "history": self.ledger.to_list(),
            "balance": str(self.wallet.balance),
            "bet": self.bet.to_dict() if self.bet else None,
            "npcs": [npc.to_dict() for npc in r.npcs] if r else [],
            "plot_points": [[p, str(m)] for p, m in r.plot_points] if r else [],
            # hidden until the breach
            "crash_point": str(r.crash_point) if r and self.phase == Phase.ENDED else None,
        }

    def _publish_view(self):
        if len(self._ticks):
            self._ticks.publish(self.view())

    # ===============================
    # LIFECYCLE
    # ===============================

    def start(self):
        if self.started or self.closed:
            return
        self.started = True
        logger.info("Dive engine started (start_on_bet=%s)", self.config.start_on_bet)
        self.emit(
            Category.SYSTEM,
            f"Welcome to Dive Control. Your starting balance is {self.wallet.balance:.0f} credits. "
            "Type 'help' for commands.",
        )
        self._open_betting()

    def teardown(self):
        for timer in (self._launch_timer, self._tick_timer, self._reset_timer):
            if timer is not None:
                timer.cancel()
        self._launch_timer = self._tick_timer = self._reset_timer = None
        self._ticks.clear()
        self._events.clear()
        self.closed = True
        logger.info("Dive engine torn down at %s", self.phase.value)

    def _open_betting(self):
        self.phase = Phase.BETTING
        if self.config.start_on_bet:
            self.emit(Category.SYSTEM, "Place your bet for the next dive.")
        else:
            self.emit(
                Category.INFO,
                f"The bay doors are open for the next dive! ({self.config.betting_window:g} seconds)",
            )
            self._schedule_launch(self.config.betting_window)
        self._publish_view()

    def _schedule_launch(self, delay: float):
        if self._launch_timer is not None:
            self._launch_timer.cancel()
        self._launch_timer = self.scheduler.call_later(delay, self._launch, label="launch")

    def _launch(self):
        self._launch_timer = None
        if self.closed:
            logger.warning("Launch fired after teardown; ignored")
            return
        if self.phase != Phase.BETTING:
            logger.error("Launch fired in phase %s; ignored", self.phase.value)
            return

        crash_point = self.crash_generator.generate(self.rng.random())
        markers = self.marker_generator.generate(self.rng)
        npcs = self.npc_simulator.generate(self.rng, self.bet.amount if self.bet else None)

        self.curve.reset()
        self.round = Round(
            id=next(self._round_ids),
            crash_point=crash_point,
            treasure_markers=markers,
            npcs=npcs,
            bet=self.bet,
            started_at=self.scheduler.now(),
        )
        self.round.plot_points.append((0.0, self.curve.multiplier))
        self.phase = Phase.IN_PROGRESS

        logger.info("Round %s launched with %d bots", self.round.id, len(npcs))
        self.emit(Category.WARNING, "Dive! Dive! Dive! Sealing the bay doors.", round_id=self.round.id)
        self.emit(Category.INFO, "The dive's structural failure point has been pre-calculated and logged for fairness.")
        self.emit(
            Category.INFO,
            "Treasure Markers located at: " + ", ".join(f"{depth_of(m)}m" for m in markers) + ".",
            markers=[str(m) for m in markers],
        )
        if self.bet is None:
            self.emit(Category.WARNING, "You have not placed a bet for this dive. Observing only.")
        for npc in npcs:
            if npc.auto_eject_multiplier:
                text = f"{npc.name} readies {npc.bet_amount} credits for {depth_of(npc.auto_eject_multiplier)}m."
            else:
                text = f"{npc.name} readies {npc.bet_amount} credits."
            self.emit(Category.SYSTEM, text)

        round_id = self.round.id
        self._tick_timer = self.scheduler.call_every(
            self.config.tick_interval,
            lambda elapsed: self._scheduled_tick(round_id, elapsed),
            label=f"tick:{round_id}",
        )
        self._publish_view()

    def _scheduled_tick(self, round_id, elapsed):
        if self.closed or self.round is None or self.round.id != round_id:
            logger.warning("Stale tick for round %s ignored", round_id)
            return
        self.tick(elapsed)

    def tick(self, delta_time: float):
        """Advance the curve, then crash or settle due auto-ejects."""
        round_obj = self.round
        if round_obj is None or self.phase != Phase.IN_PROGRESS:
            logger.error("Tick with no active round (phase=%s); skipped", self.phase.value)
            return

        try:
            self._advance(round_obj, delta_time)
        except EngineStateError:
            logger.exception("Tick skipped on round %s", round_obj.id)

    def _advance(self, round_obj, delta_time):
        value = self.curve.advance(delta_time)
        round_obj.elapsed = self.curve.elapsed
        round_obj.progress = self.curve.progress

        if value >= round_obj.crash_point:
            self._crash(round_obj)
            return

        round_obj.current_multiplier = value
        last_progress = round_obj.plot_points[-1][0] if round_obj.plot_points else None
        if last_progress is None or round_obj.progress - last_progress >= self.config.plot_resolution:
            round_obj.plot_points.append((round_obj.progress, value))

        for marker in round_obj.treasure_markers:
            if marker not in round_obj.passed_markers and value >= marker:
                round_obj.passed_markers.append(marker)
                self.emit(
                    Category.SUCCESS,
                    f"** TREASURE MARKER PASSED: {depth_of(marker)}m! "
                    "All future ejects from this dive will receive a bonus! **",
                    marker=str(marker),
                )

        for result in self.settlement.sweep_auto_ejects(round_obj):
            self._announce_eject(result)

        self._publish_view()

    def _crash(self, round_obj):
        if self._tick_timer is not None:
            self._tick_timer.cancel()
            self._tick_timer = None

        self.phase = Phase.ENDED
        round_obj.phase = Phase.ENDED
        round_obj.current_multiplier = round_obj.crash_point
        round_obj.ended_at = self.scheduler.now()

        lost = self.settlement.finalize_crash(round_obj)
        logger.info("Round %s breached at %sx", round_obj.id, round_obj.crash_point)

        self.emit(Category.ERROR, "WARNING! HULL INTEGRITY FAILING! PRESSURE ALARM!")
        self.emit(
            Category.ERROR,
            f"HULL BREACH AT {depth_of(round_obj.crash_point)}m ({round_obj.crash_point:.2f}x)!",
            round_id=round_obj.id,
            crash_point=str(round_obj.crash_point),
        )
        self.emit(Category.INFO, "--- Post-Dive Report ---")

        bet = round_obj.bet
        if bet is None:
            self.emit(Category.INFO, "You were observing this dive. No bet was lost.")
        elif bet in lost:
            self.emit(Category.ERROR, f"Your pod failed to launch. Your {bet.amount} credit bet is lost.")
        for npc in round_obj.npcs:
            if npc.ejected:
                self.emit(Category.SUCCESS, f"{npc.name} ejected safely at {npc.eject_multiplier:.2f}x.")
            else:
                self.emit(Category.WARNING, f"{npc.name} was lost in the breach.")

        round_id = round_obj.id
        self._reset_timer = self.scheduler.call_later(
            self.config.post_round_delay,
            lambda: self._reset(round_id),
            label=f"reset:{round_id}",
        )
        self._publish_view()

    def _reset(self, round_id):
        self._reset_timer = None
        if self.closed or self.round is None or self.round.id != round_id or self.phase != Phase.ENDED:
            logger.warning("Stale reset for round %s ignored", round_id)
            return

        self.round = None
        self.bet = None
        self.curve.reset()
        self.emit(Category.SYSTEM, "--- Preparing for next dive... You may place your bet. ---")
        self._open_betting()

    def _announce_eject(self, result):
        participant = result.participant
        depth = depth_of(result.multiplier)
        if result.is_player:
            text = f"Ejection successful at {depth}m! You secured {result.payout:.2f} credits!"
            if result.bonus > 0:
                text += f" (includes {result.bonus:.2f} credit treasure bonus)"
        else:
            text = f"{participant.name} has ejected at {depth}m!"
        self.emit(
            Category.SUCCESS,
            text,
            name=participant.name,
            multiplier=str(result.multiplier),
            payout=str(result.payout),
            auto=result.auto,
        )

    # ===============================
    # PLAYER ACTIONS
    # ===============================

    def _ensure_open(self):
        if self.closed:
            raise EngineStateError("Engine has been torn down")

    def place_bet(self, amount, auto_eject=None) -> Bet:
        self._ensure_open()
        if self.phase != Phase.BETTING:
            raise BettingClosed()
        if self.bet is not None:
            raise BetAlreadyPlaced()

        amount = to_decimal(amount, InvalidBetAmount)
        if amount > self.wallet.balance:
            raise InsufficientBalance()
        amount = to_cents(amount, InvalidBetAmount, rounding=ROUND_DOWN)
        if amount <= 0:
            raise InvalidBetAmount()

        if auto_eject is not None:
            auto_eject = to_cents(to_decimal(auto_eject, InvalidAutoEjectThreshold), InvalidAutoEjectThreshold)
            if auto_eject <= self.config.min_auto_eject:
                raise InvalidAutoEjectThreshold()

        self.wallet.debit(amount)
        self.bet = Bet(amount=amount, auto_eject_multiplier=auto_eject)
        logger.info("Bet placed: %s (auto-eject %s)", amount, auto_eject)

        if auto_eject is not None:
            self.emit(
                Category.SUCCESS,
                f"Bet placed: {amount} credits with auto-eject at {depth_of(auto_eject)}m.",
                amount=str(amount),
                auto_eject=str(auto_eject),
            )
        else:
            self.emit(Category.SUCCESS, f"Bet placed: {amount} credits.", amount=str(amount))

        if self.config.start_on_bet:
            self.emit(
                Category.INFO,
                f"Commencing pre-dive checks. Launch in {self.config.launch_delay:g} seconds.",
            )
            self._schedule_launch(self.config.launch_delay)
        self._publish_view()
        return self.bet

    def eject(self):
        self._ensure_open()
        if self.phase != Phase.IN_PROGRESS or self.round is None:
            raise RoundNotInProgress()
        if self.bet is None:
            raise NoActiveBet()
        if self.bet.ejected:
            raise AlreadyEjected()

        result = self.settlement.eject(self.round, self.bet)
        if result is not None:
            self._announce_eject(result)
            self._publish_view()
        return result

    def skip(self):
        """Clear any pending bet (refunding it) and launch the next dive now."""
        self._ensure_open()
        if self.phase != Phase.BETTING:
            raise BettingClosed("Cannot skip. A dive sequence is already in progress.")

        if self._launch_timer is not None:
            self._launch_timer.cancel()
            self._launch_timer = None

        if self.bet is not None:
            self.wallet.credit(self.bet.amount)
            self.bet = None
            self.emit(Category.INFO, "Skipping this dive. Your bet has been cleared and refunded.")
        else:
            self.emit(Category.INFO, "Skipping ahead to the next dive.")
        self._launch()
