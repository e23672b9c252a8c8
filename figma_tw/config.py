"""
Options for token CSS generation and markup compilation.

Built-in defaults can be overridden by a JSON file:

    {
      "generate": {"default_classes": true, "scalable_font_size": true},
      "compile": {"generate_css": true, "theme_colors": {"#0f62fe": "brand"}}
    }

The file is named by ``FIGMA_TW_CONFIG_PATH``. A missing or unreadable file
means the built-in defaults.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

CONFIG_DEFAULT_PATH = os.path.expanduser("~/.config/figma-tailwind-mcp/config.json")
DEFAULT_LOG_LEVEL = "WARNING"


class GenerateOptions(BaseModel):
    """Which token categories to emit and how to name them."""
    model_config = ConfigDict(validate_assignment=True, extra='ignore')

    colors: bool = Field(default=True, description="Emit color tokens")
    font_families: bool = Field(default=True, description="Emit font family tokens")
    font_sizes: bool = Field(default=True, description="Emit font size tokens")
    line_heights: bool = Field(default=True, description="Emit line height tokens")
    font_weights: bool = Field(default=True, description="Emit font weight tokens")
    spacing: bool = Field(default=True, description="Emit spacing tokens")
    border_radius: bool = Field(default=True, description="Emit border radius tokens")
    shadows: bool = Field(default=True, description="Emit shadow tokens")
    gradients: bool = Field(default=True, description="Emit gradient tokens")
    animations: bool = Field(default=True, description="Emit duration and easing tokens")
    scalable_font_size: bool = Field(
        default=False,
        description="Use fluid clamp() values for font sizes"
    )
    default_classes: bool = Field(
        default=False,
        description="Name tokens after Tailwind's default scale (text-lg, rounded-md, ...)"
    )


class CompileOptions(BaseModel):
    """Settings for one markup compile run."""
    model_config = ConfigDict(validate_assignment=True, extra='ignore')

    generate_css: bool = Field(
        default=False,
        description="Register tokens while compiling and return an @theme block"
    )
    image_scale: float = Field(default=2, description="Raster export scale", gt=0, le=4)
    max_depth: int = Field(default=10, description="Deepest nesting level rendered", ge=0, le=50)
    theme_colors: Dict[str, str] = Field(
        default_factory=dict,
        description="Project color names keyed by hex (e.g. {'#0f62fe': 'brand'})"
    )
    component_map: Dict[str, str] = Field(
        default_factory=dict,
        description="Component name or node id -> tag emitted instead of the subtree"
    )

    @field_validator('theme_colors')
    @classmethod
    def normalize_theme_colors(cls, v: Dict[str, str]) -> Dict[str, str]:
        normalized = {}
        for hex_color, name in v.items():
            key = hex_color.strip().lower()
            if not key.startswith('#'):
                key = '#' + key
            normalized[key] = name
        return normalized


# ============================================================================
# Config file
# ============================================================================

def get_config_path() -> str:
    """Get the path to the options file."""
    return os.environ.get("FIGMA_TW_CONFIG_PATH", CONFIG_DEFAULT_PATH)


def get_log_level() -> str:
    return os.environ.get("FIGMA_TW_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()


def load_config_data(path: Optional[str] = None) -> Dict[str, Any]:
    """Load raw option overrides from the config file."""
    path = path or get_config_path()
    if os.path.exists(path):
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning("Ignoring unreadable config %s: %s", path, e)
            return {}
        return data if isinstance(data, dict) else {}
    return {}


def load_generate_options(overrides: Optional[Dict[str, Any]] = None) -> GenerateOptions:
    """Config file defaults, then per-call overrides."""
    data = dict(load_config_data().get('generate') or {})
    data.update(overrides or {})
    return GenerateOptions(**data)


def load_compile_options(overrides: Optional[Dict[str, Any]] = None) -> CompileOptions:
    data = dict(load_config_data().get('compile') or {})
    data.update(overrides or {})
    return CompileOptions(**data)
