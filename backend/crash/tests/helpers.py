from decimal import Decimal

from crash.conf import EngineConfig
from crash.engine import DiveEngine
from crash.rng import RandomSource
from crash.scheduler import ManualScheduler


class ScriptedRandom(RandomSource):
    """Returns the given samples in order, then repeats the last one."""

    def __init__(self, *values):
        self.values = list(values) or [0.5]
        self.calls = 0

    def random(self):
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value


class FixedCrashPoints:
    def __init__(self, *points):
        self.points = [Decimal(p) for p in points]
        self.calls = 0

    def generate(self, sample):
        point = self.points[min(self.calls, len(self.points) - 1)]
        self.calls += 1
        return point


class FixedMarkers:
    def __init__(self, *markers):
        self.markers = [Decimal(m) for m in markers]

    def generate(self, rng):
        return list(self.markers)


class FixedBots:
    def __init__(self, factory=None):
        self.factory = factory or (lambda: [])

    def generate(self, rng, player_bet=None):
        return self.factory()


def linear(progress):
    return 1.0 + progress


def make_engine(crash_points=("3.41",), markers=(), bots=None, shape=linear, **overrides):
    """
    Engine on a virtual clock with exact binary tick steps:
    launch 0.5s after a bet, one tick per 0.25s, +0.25x per tick.
    """
    settings = {
        "tick_interval": 0.25,
        "launch_delay": 0.5,
        "post_round_delay": 4.0,
    }
    settings.update(overrides)
    config = EngineConfig().with_overrides(**settings)
    scheduler = ManualScheduler()
    engine = DiveEngine(
        scheduler,
        rng=ScriptedRandom(0.5),
        config=config,
        crash_generator=FixedCrashPoints(*crash_points),
        marker_generator=FixedMarkers(*markers),
        npc_simulator=bots or FixedBots(),
        curve_shape=shape,
    )
    return engine, scheduler


class Recorder:
    """Collects engine events and views."""

    def __init__(self, engine):
        self.events = []
        self.views = []
        engine.subscribe_events(self.events.append)
        engine.subscribe(self.views.append)

    def texts(self, category=None):
        return [e.text for e in self.events if category is None or e.category == category]
