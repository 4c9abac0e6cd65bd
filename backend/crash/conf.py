from dataclasses import dataclass, fields, replace
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .generators import CRASH_CAP, CRASH_FLOOR, HOUSE_EDGE, TREASURE_MARKER_DEFINITIONS
from .ledger import HISTORY_LIMIT
from .settlement import TREASURE_BONUS
from .wallet import INITIAL_BALANCE


@dataclass(frozen=True)
class EngineConfig:
    initial_balance: Decimal = INITIAL_BALANCE

    # crash point
    house_edge: Decimal = HOUSE_EDGE
    crash_floor: Decimal = CRASH_FLOOR
    crash_cap: Decimal = CRASH_CAP
    sqrt_bias: bool = True

    # curve
    curve_rate: float = 1.0
    curve_target_seconds: float = 8.0   # median round breaches after this long
    plot_resolution: float = 0.05

    # bonus
    treasure_bonus: Decimal = TREASURE_BONUS
    treasure_markers: tuple = TREASURE_MARKER_DEFINITIONS

    # timing (seconds)
    tick_interval: float = 0.05         # 20 FPS
    start_on_bet: bool = True
    launch_delay: float = 5.0           # pre-dive window after a bet
    betting_window: float = 7.0         # used when start_on_bet is False
    post_round_delay: float = 4.0

    history_limit: int = HISTORY_LIMIT
    min_auto_eject: Decimal = Decimal("1.00")

    def with_overrides(self, **overrides) -> "EngineConfig":
        known = {f.name: f for f in fields(self)}
        unknown = set(overrides) - set(known)
        if unknown:
            raise ImproperlyConfigured(f"Unknown DIVE_ENGINE keys: {', '.join(sorted(unknown))}")

        coerced = {}
        for key, value in overrides.items():
            default = getattr(self, key)
            if value is None:
                coerced[key] = None
            elif isinstance(default, bool):
                coerced[key] = value if isinstance(value, bool) else str(value).lower() in ("1", "true", "yes")
            elif isinstance(default, Decimal):
                coerced[key] = Decimal(str(value))
            elif isinstance(default, float):
                coerced[key] = float(value)
            elif isinstance(default, int):
                coerced[key] = int(value)
            else:
                coerced[key] = value
        return replace(self, **coerced)

    @classmethod
    def from_settings(cls, **overrides) -> "EngineConfig":
        configured = dict(getattr(settings, "DIVE_ENGINE", {}) or {})
        configured.update(overrides)
        return cls().with_overrides(**configured)

