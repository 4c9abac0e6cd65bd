from decimal import Decimal, ROUND_HALF_UP
import math

TWO_PLACES = Decimal("0.01")

HOUSE_EDGE = Decimal("1.03")      # divisor, > 1 keeps long-run EV negative
CRASH_FLOOR = Decimal("1.01")
CRASH_CAP = Decimal("10000.00")

TREASURE_MARKER_DEFINITIONS = (
    (3, 0.5),   # ~3.00x
    (5, 1),     # ~5.00x
    (10, 2),    # ~10.00x
)


def q2(x) -> Decimal:
    return Decimal(str(x)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class CrashPointGenerator:
    """
    Turns one uniform sample into the round's hidden crash point.

    The square root bias makes low samples (early crashes) less likely,
    which pushes the median round higher while the house edge divisor
    still keeps the player's expected value below fair odds.
    """

    def __init__(self, house_edge=HOUSE_EDGE, floor=CRASH_FLOOR, cap=CRASH_CAP, bias: bool = True):
        self.house_edge = Decimal(str(house_edge))
        self.floor = Decimal(str(floor))
        self.cap = Decimal(str(cap)) if cap is not None else None
        self.bias = bias

        if self.house_edge <= 1:
            raise ValueError("house_edge must be greater than 1")
        if self.floor < 1:
            raise ValueError("floor must be at least 1.00")

    def generate(self, sample: float) -> Decimal:
        if not 0.0 <= sample < 1.0:
            raise ValueError(f"Sample out of range [0, 1): {sample}")

        r = math.sqrt(sample) if self.bias else sample
        if r >= 1.0:
            # sqrt rounded up to 1.0; the sample itself is still below 1
            r = sample

        raw = Decimal(1) / Decimal(1 - r) / self.house_edge
        crash = raw.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)

        if self.cap is not None and crash > self.cap:
            crash = self.cap
        return max(self.floor, crash)

    def median(self) -> Decimal:
        # generate() is monotone in its sample
        return self.generate(0.5)


class TreasureMarkerGenerator:
    def __init__(self, definitions=TREASURE_MARKER_DEFINITIONS):
        self.definitions = tuple(definitions)

    def generate(self, rng) -> list:
        markers = [
            q2(base + rng.uniform(-jitter / 2, jitter / 2))
            for base, jitter in self.definitions
        ]
        return sorted(markers)
