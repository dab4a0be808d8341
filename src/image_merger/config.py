"""
Configuration schema and loader for the image merger.

Defines Pydantic models representing structured configuration sections
and a TOML-based config loader with validation support.
"""

from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, Field

from image_merger.config_defaults import (
    DEFAULT_ALIGN,
    DEFAULT_BACKEND,
    DEFAULT_CANVAS_WORKERS,
    DEFAULT_COMPRESS_LEVEL,
    DEFAULT_CONCURRENCY,
    DEFAULT_FALLBACK,
    DEFAULT_GRID_COLS,
    DEFAULT_GRID_OVERFLOW,
    DEFAULT_GRID_ROWS,
    DEFAULT_LAYOUT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_CANVAS_AREA,
    DEFAULT_MAX_CANVAS_SIDE,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_REMOVE_PIXEL_LIMIT,
    DEFAULT_RESIZE_HEIGHT,
    DEFAULT_RESIZE_WIDTH,
)
from image_merger.constants import (
    PNG_COMPRESS_LEVEL_MAX,
    PNG_COMPRESS_LEVEL_MIN,
)
from image_merger.geometry import LayoutMode, ResizeSpec
from image_merger.type_defs import (
    AlignDimension,
    BackendName,
    GridOverflow,
    LayoutName,
)


class LayoutConfig(BaseModel):
    """Select the layout strategy and grid shape."""

    mode: LayoutName = Field(DEFAULT_LAYOUT)
    rows: int = Field(DEFAULT_GRID_ROWS, ge=1)
    cols: int = Field(DEFAULT_GRID_COLS, ge=1)
    grid_overflow: GridOverflow = Field(DEFAULT_GRID_OVERFLOW)

    def to_layout_mode(self) -> LayoutMode:
        """Build the geometry layout mode."""
        if self.mode == "grid":
            return LayoutMode.grid(self.rows, self.cols)
        return LayoutMode(self.mode)


class ResizeConfig(BaseModel):
    """Control explicit resizing and dimension alignment."""

    width: int = Field(DEFAULT_RESIZE_WIDTH, ge=0)
    height: int = Field(DEFAULT_RESIZE_HEIGHT, ge=0)
    align: AlignDimension = Field(DEFAULT_ALIGN)

    def to_resize_spec(self) -> ResizeSpec | None:
        """Return the explicit resize box, treating 0 as unset."""
        if not self.width and not self.height:
            return None
        return ResizeSpec(self.width or None, self.height or None)


class CanvasConfig(BaseModel):
    """Canvas ceilings for the fast backend and PNG settings."""

    max_area: int = Field(DEFAULT_MAX_CANVAS_AREA, ge=1)
    max_side: int = Field(DEFAULT_MAX_CANVAS_SIDE, ge=1)
    compress_level: int = Field(
        DEFAULT_COMPRESS_LEVEL,
        ge=PNG_COMPRESS_LEVEL_MIN,
        le=PNG_COMPRESS_LEVEL_MAX,
    )


class ExecutionConfig(BaseModel):
    """Backend selection, fallback, and concurrency."""

    backend: BackendName = Field(DEFAULT_BACKEND)
    fallback: bool = DEFAULT_FALLBACK
    concurrency: int = Field(DEFAULT_CONCURRENCY, ge=1)
    canvas_workers: int = Field(DEFAULT_CANVAS_WORKERS, ge=1)
    remove_pixel_limit: bool = DEFAULT_REMOVE_PIXEL_LIMIT


class OutputConfig(BaseModel):
    """Configure the output file and log verbosity."""

    output: str = Field(DEFAULT_OUTPUT_PATH)
    log_level: str = Field(DEFAULT_LOG_LEVEL)


class MergerConfig(BaseModel):
    """
    Root configuration object combining all supported sections.

    Mirrors the structure of config.toml, grouping related parameters
    under logical categories.
    """

    layout: LayoutConfig = Field(
        default_factory=lambda: LayoutConfig.model_validate({}),
    )
    resize: ResizeConfig = Field(
        default_factory=lambda: ResizeConfig.model_validate({}),
    )
    canvas: CanvasConfig = Field(
        default_factory=lambda: CanvasConfig.model_validate({}),
    )
    execution: ExecutionConfig = Field(
        default_factory=lambda: ExecutionConfig.model_validate({}),
    )
    output: OutputConfig = Field(
        default_factory=lambda: OutputConfig.model_validate({}),
    )


class ConfigLoader:
    """
    Loads and parses a TOML configuration file into a typed config object.

    Falls back to defaults for any missing subsections or fields.
    """

    @staticmethod
    def load(path: str) -> MergerConfig:
        """Load and validate a merger configuration from a TOML file."""
        config_path = Path(path)
        if not config_path.is_file():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)

        with config_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)

        return MergerConfig.model_validate(doc.unwrap())


# CLI argument name -> (config section, field)
_CLI_FIELD_MAP: dict[str, tuple[str, str]] = {
    "layout": ("layout", "mode"),
    "rows": ("layout", "rows"),
    "cols": ("layout", "cols"),
    "grid_overflow": ("layout", "grid_overflow"),
    "resize_width": ("resize", "width"),
    "resize_height": ("resize", "height"),
    "align": ("resize", "align"),
    "compress_level": ("canvas", "compress_level"),
    "backend": ("execution", "backend"),
    "concurrency": ("execution", "concurrency"),
    "output": ("output", "output"),
    "log_level": ("output", "log_level"),
}


def build_config_from_cli(
    args: dict[str, Any],
    base_config: MergerConfig | None = None,
) -> MergerConfig:
    """
    Overlay CLI values onto ``base_config`` (or defaults).

    Only keys present in ``args`` and not ``None`` override the base, so
    argparse.SUPPRESS defaults leave config file values untouched.
    """
    data = (base_config or MergerConfig.model_validate({})).model_dump()
    for arg_name, (section, field_name) in _CLI_FIELD_MAP.items():
        value = args.get(arg_name)
        if value is not None:
            data[section][field_name] = value
    if args.get("no_fallback"):
        data["execution"]["fallback"] = False
    return MergerConfig.model_validate(data)
