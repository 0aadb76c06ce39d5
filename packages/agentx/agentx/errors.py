"""Define error messages for the AgentX package."""

ERROR_TARGET_ON_OBSTACLE = "The target cell {target} must not be an obstacle."
ERROR_CELL_OUT_OF_GRID = "Cell {cell} lies outside the {size}x{size} grid."
ERROR_START_ON_OBSTACLE = "The start cell {start} must not be an obstacle."

# Fallback texts surfaced to the user instead of an exception
INSIGHT_EMPTY_RESPONSE = "Unable to generate insights at this time."
INSIGHT_UNAVAILABLE = "AI Analysis engine unavailable. Please check your API configuration."
