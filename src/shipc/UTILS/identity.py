"""
Generation of short random container names.
"""
import base64
import random
from typing import Optional


class IdentityGenerator:
    """
    Produces lower-case unpadded base-32 names from random bytes.
    """
    NUM_BYTES = 8

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Args:
            rng (Optional[random.Random]): Random source. Pass a seeded
                ``random.Random`` for reproducible names.
        """
        self.rng = rng or random.SystemRandom()

    def generate(self) -> str:
        """
        Generates a new container identity.

        Returns:
            str: 13 characters from ``a-z2-7``.
        """
        raw = self.rng.getrandbits(self.NUM_BYTES * 8).to_bytes(self.NUM_BYTES, "big")
        return base64.b32encode(raw).decode("ascii").rstrip("=").lower()


def generate_identity() -> str:
    return IdentityGenerator().generate()
