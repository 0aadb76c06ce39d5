"""Seeding helpers for reproducible training runs.

Exploration and log sampling draw from an injected numpy Generator. Passing a
seed makes a whole trajectory reproducible; omitting it draws a fresh seed
that can still be logged and replayed.

Usage:
    seed = ensure_seed(user_seed)
    rng = get_rng(seed)
"""

import secrets

import numpy as np

# Maximum seed value (2^32 - 1, compatible with numpy)
MAX_SEED = 2**32


def generate_seed() -> int:
    """Generate a cryptographically random seed.

    Returns
    -------
        A random integer in [0, 2^32)
    """
    return secrets.randbelow(MAX_SEED)


def ensure_seed(seed: int | None = None) -> int:
    """Return ``seed`` unchanged, or a newly generated one when it is None.

    Args:
        seed: User-provided seed, or None to auto-generate

    Returns
    -------
        The provided seed or a newly generated one
    """
    if seed is not None:
        return seed
    return generate_seed()


def get_rng(seed: int | None = None) -> np.random.Generator:
    """Create an independent seeded numpy Generator.

    Args:
        seed: Seed for the RNG, or None to use a random seed

    Returns
    -------
        A numpy Generator instance seeded with the given seed
    """
    return np.random.default_rng(ensure_seed(seed))
