"""
Homeplan Configuration Module
=============================

Centralized constants for the plan editor: grid and zoom settings, the room
colour palette, feature defaults and project paths. Paths and the grid unit
can be overridden through environment variables.
"""

# fmt: off
# autopep8: off

import os
from pathlib import Path

# Root directory of the project
PROJECT_ROOT        = Path(__file__).parent.parent

# Output directories
OUTPUTS_DIR         = Path(os.getenv("HOMEPLAN_OUTPUTS_DIR", str(PROJECT_ROOT / "outputs")))
PLAN_PATH           = OUTPUTS_DIR / "home-plan.json"
SCHEDULE_PATH       = OUTPUTS_DIR / "room-schedule.csv"

# ============================================================================
# GRID AND VIEW SETTINGS
# ============================================================================
# Snapping granularity for every position/size edit, in world units
GRID_SIZE           = int(os.getenv("HOMEPLAN_GRID_SIZE", "10"))

# Zoom per wheel tick and the allowed scale range
ZOOM_FACTOR         = 1.1
MIN_SCALE           = 0.2
MAX_SCALE           = 5.0

# Resize handle edge length in viewport pixels (hit-testing and drawing)
HANDLE_SIZE_PX      = 8

# ============================================================================
# ROOM AND FEATURE DEFAULTS
# ============================================================================
ROOM_COLORS = [
    # Cool tones
    '#DBEAFE', '#BFDBFE', '#93C5FD',    # Blue
    '#A7F3D0', '#6EE7B7', '#34D399',    # Green
    '#C7D2FE', '#A5B4FC', '#818CF8',    # Indigo
    '#DDD6FE', '#C4B5FD', '#A78BFA',    # Violet
    '#E9D5FF', '#D8B4FE', '#C084FC',    # Purple
    # Warm tones
    '#FDE68A', '#FCD34D', '#FBBF24',    # Amber
    '#FED7AA', '#FDBA74', '#FB923C',    # Orange
    '#FECACA', '#FCA5A5', '#F87171',    # Red
    '#FBCFE8', '#F9A8D4', '#F472B6',    # Pink
    # Neutral
    '#E5E7EB', '#D1D5DB', '#9CA3AF',    # Gray
]

FEATURE_WIDTHS = {
    "door"          : 40,
    "window"        : 60,
}
FEATURE_COLORS = {
    "door"          : '#A36B4F',
    "window"        : '#A7D8F3',
}
DEFAULT_FEATURE_WALL        = "top"
DEFAULT_FEATURE_POSITION    = 0.5

# Starting plan shown when the editor opens without a saved file
DEFAULT_ROOMS = [
    {"id": "living-room-1", "name": "Living Room", "x": 50,  "y": 50, "width": 300, "height": 200,
     "color": ROOM_COLORS[0], "zIndex": 0, "features": [], "locked": False},
    {"id": "kitchen-1",     "name": "Kitchen",     "x": 350, "y": 50, "width": 150, "height": 150,
     "color": ROOM_COLORS[1], "zIndex": 1, "features": [], "locked": False},
]
