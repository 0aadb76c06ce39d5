"""Utilities module for AgentX."""

from agentx.utils.seeding import (
    ensure_seed,
    generate_seed,
    get_rng,
)

__all__ = [
    "ensure_seed",
    "generate_seed",
    "get_rng",
]
