"""
Constants used internally by the image merger.

These are implementation-level values that should not be overridden via
config files or CLI arguments.
"""

# Fully transparent RGBA background for every merge canvas
COLOR_TRANSPARENT = (0, 0, 0, 0)
COLOR_MODE_RGBA = "RGBA"

# Output encoding
PNG_FORMAT = "PNG"
PNG_COMPRESS_LEVEL_MIN = 0
PNG_COMPRESS_LEVEL_MAX = 9

# Canvas backend ceilings, matching common 2D canvas implementations
# (16384 x 16384 total area, 32767 px on any side).
CANVAS_MAX_AREA = 268_435_456
CANVAS_MAX_SIDE = 32_767

# Form field names accepted by MergeRequest.from_form
FORM_LAYOUT_FIELD = "alignmentMode"
FORM_ROWS_FIELD = "gridRows"
FORM_COLS_FIELD = "gridCols"
FORM_RESIZE_WIDTH_FIELD = "resizeWidth"
FORM_RESIZE_HEIGHT_FIELD = "resizeHeight"
FORM_ALIGN_FIELD = "alignDimension"
FORM_IMAGE_PREFIX = "image-"
