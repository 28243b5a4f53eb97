"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DAYS_PER_WEEK = 7

# Weekly grid geometry (pixels)
ROW_HEIGHT = 36
ROW_MARGIN = 4
HEADER_HEIGHT = 40
BAR_TOP_OFFSET = 10
BAR_GUTTER_PX = 4
MIN_GRID_HEIGHT = 500
GRID_BOTTOM_PADDING = 50

VACATION_ID_PREFIX = "vacation_"
VACATION_NAME = "Vacation"
VACATION_LEVEL = "VACATION"

MOVE_HISTORY_FIELD = "dates"
