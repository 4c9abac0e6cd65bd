import hmac
import hashlib
import random
import secrets


def sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def hmac_sha256(server_seed: str, message: str) -> str:
    return hmac.new(
        key=server_seed.encode("utf-8"),
        msg=message.encode("utf-8"),
        digestmod=hashlib.sha256,
    ).hexdigest()


def sample_from_hash(hash_hex: str) -> float:
    # First 52 bits -> uniform float in [0, 1)
    h = int(hash_hex[:13], 16)
    return h / float(2 ** 52)


class RandomSource:
    """
    Uniform samples in [0, 1). Subclasses only implement random();
    every helper below is derived from it so a scripted source drives
    all of them.
    """

    def random(self) -> float:
        raise NotImplementedError

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.random()

    def randint(self, a: int, b: int) -> int:
        # inclusive a..b
        span = b - a + 1
        return a + min(int(self.random() * span), span - 1)

    def sample(self, population, k: int) -> list:
        """Pick k distinct items, partial Fisher-Yates."""
        pool = list(population)
        if k > len(pool):
            raise ValueError("Sample larger than population")
        for i in range(k):
            j = self.randint(i, len(pool) - 1)
            pool[i], pool[j] = pool[j], pool[i]
        return pool[:k]


class PythonRandomSource(RandomSource):
    def __init__(self, seed=None):
        self.seed = seed
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()


class HmacRandomSource(RandomSource):
    """
    Seed-chained samples: sample n = HMAC_SHA256(server_seed, f"{client_seed}:{n}").
    server_seed_hash can be shown before a round as a commitment.
    """

    def __init__(self, server_seed: str = None, client_seed: str = "dive-client", nonce: int = 0):
        self.server_seed = server_seed or secrets.token_hex(32)
        self.server_seed_hash = sha256_hex(self.server_seed)
        self.client_seed = client_seed
        self.nonce = nonce

    def random(self) -> float:
        self.nonce += 1
        return sample_from_hash(hmac_sha256(self.server_seed, f"{self.client_seed}:{self.nonce}"))
