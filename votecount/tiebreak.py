"""Fair random tie-breaking shared by all voting systems."""

import random
import secrets
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


class TieBreaker:
    """Uniform random selection among tied options.

    By default draws come from the operating system's CSPRNG, so every tied
    option has the same chance of being picked and draws are independent
    within and across runs. Pass a seeded `random.Random` to make draws
    reproducible; be careful with that in a real election.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng if rng is not None else secrets.SystemRandom()

    def choose(self, options: Sequence[T]) -> T:
        """Pick one of `options` uniformly at random."""
        if not options:
            raise ValueError("Cannot break a tie among zero options")
        return self.rng.choice(list(options))
