"""Core type definitions for AgentX.

Type aliases shared by the environment, the step engine and the reporting code.
"""

# =============================================================================
# Position Types
# =============================================================================

# Grid position (discrete x, y coordinates; y grows downward)
GridPosition = tuple[int, int]

# Set of blocked cells
ObstacleSet = frozenset[GridPosition]

# =============================================================================
# History Types
# =============================================================================

# Completed-episode rewards in completion order
RewardHistory = list[float]
