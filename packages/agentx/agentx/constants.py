"""Constants."""

# Environment defaults
DEFAULT_GRID_SIZE = 10
DEFAULT_START = (0, 0)
DEFAULT_TARGET = (8, 8)
DEFAULT_OBSTACLES = ((4, 4), (4, 5), (5, 4))

# Driver defaults
DEFAULT_TICK_INTERVAL_MS = 200
DEFAULT_LOG_CAPACITY = 50
DEFAULT_LOG_PROBABILITY = 0.2

# Early stopping
PLATEAU_WINDOW = 5
PLATEAU_THRESHOLD = 0.2
DEGRADATION_THRESHOLD = 5.0

# Insight generation needs a few finished episodes to say anything useful
MIN_EPISODES_FOR_INSIGHT = 5

# Validation
MIN_GRID_SIZE = 2
