"""Per-game random streams for self-play.

Each (game number, role) pair gets its own seed, a keyed BLAKE2b digest of
the pair under the run's base seed. A game's seeds depend on nothing else,
so any single game of a run can be replayed on its own.
"""

import hashlib
import random

ROLES = ("ai", "player")


class SeedManager:
    """Hands out an independent ``random.Random`` per game and role."""

    def __init__(self, base_seed: int):
        self.base_seed = base_seed
        self._key = str(base_seed).encode("ascii")

    def seed_for(self, game_number: int, role: str) -> int:
        if role not in ROLES:
            raise ValueError(f"Unknown seed role {role!r}. Use one of {list(ROLES)}")
        digest = hashlib.blake2b(
            f"game-{game_number}/{role}".encode("ascii"),
            key=self._key,
            digest_size=8,
        ).digest()
        return int.from_bytes(digest, byteorder="big")

    def rng_for(self, game_number: int, role: str) -> random.Random:
        return random.Random(self.seed_for(game_number, role))
