import statistics
import time
from decimal import Decimal

from django.core.management.base import BaseCommand, CommandError

from crash.conf import EngineConfig
from crash.engine import DiveEngine
from crash.rng import PythonRandomSource
from crash.scheduler import ManualScheduler
from crash.state import Phase


class Command(BaseCommand):
    help = "Run dive rounds headless on a virtual clock and report the measured return to player"

    def add_arguments(self, parser):
        parser.add_argument("--rounds", type=int, default=1000, help="Rounds to play (default: 1000)")
        parser.add_argument("--seed", type=int, default=42, help="RNG seed (default: 42)")
        parser.add_argument("--stake", type=str, default="10", help="Stake per round (default: 10)")
        parser.add_argument(
            "--target",
            type=str,
            default="2.0",
            help="Auto-eject multiplier for every bet (default: 2.0)",
        )
        parser.add_argument(
            "--tick",
            type=float,
            default=None,
            help="Tick interval in seconds (default: engine setting)",
        )

    def handle(self, *args, **options):
        rounds = options["rounds"]
        stake = Decimal(options["stake"])
        target = Decimal(options["target"])
        if rounds < 1:
            raise CommandError("--rounds must be at least 1")
        if stake <= 0:
            raise CommandError("--stake must be positive")
        if target <= 1:
            raise CommandError("--target must exceed 1.0")

        overrides = {
            "initial_balance": stake * rounds,
            "start_on_bet": True,
            "launch_delay": 0.0,
        }
        if options["tick"]:
            overrides["tick_interval"] = options["tick"]
        config = EngineConfig.from_settings(**overrides)

        scheduler = ManualScheduler()
        engine = DiveEngine(scheduler, rng=PythonRandomSource(options["seed"]), config=config)
        engine.start()

        self.stdout.write(
            f"[SIM] {rounds} rounds, stake {stake}, auto-eject {target}x, seed {options['seed']}"
        )
        started = time.time()

        wagered = Decimal("0")
        returned = Decimal("0")
        bonuses = Decimal("0")
        wins = 0
        crash_points = []

        for _ in range(rounds):
            engine.place_bet(stake, target)
            scheduler.advance(0)
            if not scheduler.run_until(lambda: engine.phase == Phase.ENDED, step=config.tick_interval):
                raise CommandError("Round did not finish within the virtual time limit")

            bet = engine.round.bet
            wagered += bet.amount
            returned += bet.payout
            bonuses += bet.bonus
            if bet.ejected:
                wins += 1
            crash_points.append(engine.round.crash_point)

            scheduler.advance(config.post_round_delay)

        engine.teardown()

        rtp = returned / wagered if wagered else Decimal("0")
        self.stdout.write(f"  wagered:        {wagered:.2f}")
        self.stdout.write(f"  returned:       {returned:.2f} (bonus {bonuses:.2f})")
        self.stdout.write(f"  hit rate:       {wins / rounds:.4f}")
        self.stdout.write(f"  median crash:   {statistics.median(crash_points):.2f}x")
        self.stdout.write(f"  max crash:      {max(crash_points):.2f}x")
        self.stdout.write(self.style.SUCCESS(f"  measured RTP:   {rtp:.4f}"))
        self.stdout.write(f"[SIM] Completed in {time.time() - started:.2f} seconds")
