import math
from decimal import Decimal, ROUND_DOWN

ONE = Decimal("1.00")


def calibrated_growth(median_crash, target_seconds: float) -> float:
    """
    Growth constant k for f(p) = e^(k * p) such that the median round
    (crash point == median_crash) breaches after target_seconds.
    """
    if target_seconds <= 0:
        raise ValueError("target_seconds must be positive")
    median = float(median_crash)
    if median <= 1.0:
        raise ValueError("median crash point must exceed 1.00")
    return math.log(median) / target_seconds


def exponential_shape(growth: float):
    def shape(progress: float) -> float:
        return math.exp(growth * progress)
    return shape


class MultiplierCurve:
    """
    Per-round curve state. The multiplier is recomputed from the total
    progress on every tick, never compounded from the previous value.
    """

    def __init__(self, shape, rate: float = 1.0):
        if rate <= 0:
            raise ValueError("rate must be positive")
        if abs(shape(0.0) - 1.0) > 1e-9:
            raise ValueError("curve shape must satisfy f(0) == 1")
        self.shape = shape
        self.rate = rate
        self.progress = 0.0
        self.elapsed = 0.0
        self.multiplier = ONE

    def reset(self):
        self.progress = 0.0
        self.elapsed = 0.0
        self.multiplier = ONE

    def value_at(self, progress: float) -> Decimal:
        raw = self.shape(progress)
        return Decimal(repr(raw)).quantize(Decimal("0.01"), rounding=ROUND_DOWN)

    def advance(self, delta_time: float) -> Decimal:
        if delta_time < 0:
            raise ValueError("delta_time must not be negative")
        self.elapsed += delta_time
        self.progress += delta_time * self.rate

        value = self.value_at(self.progress)
        if value > self.multiplier:
            self.multiplier = value
        return self.multiplier
