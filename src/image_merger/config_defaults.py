"""Shared default values for user-facing configuration settings."""
from image_merger.constants import CANVAS_MAX_AREA, CANVAS_MAX_SIDE
from image_merger.type_defs import (
    AlignDimension,
    BackendName,
    GridOverflow,
    LayoutName,
)

# Layout
DEFAULT_LAYOUT: LayoutName = "horizontal"
DEFAULT_GRID_ROWS = 2
DEFAULT_GRID_COLS = 2
DEFAULT_GRID_OVERFLOW: GridOverflow = "reject"

# Resize and alignment (0 disables an explicit dimension)
DEFAULT_RESIZE_WIDTH = 0
DEFAULT_RESIZE_HEIGHT = 0
DEFAULT_ALIGN: AlignDimension = "none"

# Canvas
DEFAULT_MAX_CANVAS_AREA = CANVAS_MAX_AREA
DEFAULT_MAX_CANVAS_SIDE = CANVAS_MAX_SIDE
DEFAULT_COMPRESS_LEVEL = 0

# Execution
DEFAULT_BACKEND: BackendName = "auto"
DEFAULT_FALLBACK = True
DEFAULT_CONCURRENCY = 1
DEFAULT_CANVAS_WORKERS = 4
DEFAULT_REMOVE_PIXEL_LIMIT = True

# Output
DEFAULT_OUTPUT_PATH = "merged-image.png"
DEFAULT_LOG_LEVEL = "INFO"
