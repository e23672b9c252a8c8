"""
Typography helpers shared by the token scanner and class generation.
"""

import re
from typing import Literal, Optional

from .nodes import MIXED, LetterSpacing, LineHeight

FontKind = Literal['sans', 'serif', 'mono']

_MONO = re.compile(r'mono|consolas|courier|fira\s*code|jetbrains|source\s*code|menlo', re.IGNORECASE)
_SERIF = re.compile(r'serif|garamond|georgia|times|palatino|baskerville|merriweather|playfair|lora', re.IGNORECASE)
_SANS_SERIF = re.compile(r'sans[-\s]?serif', re.IGNORECASE)

# Fluid type range: 320px to 1440px viewports
CLAMP_MIN_VW = 20
CLAMP_MAX_VW = 90
CLAMP_MIN_RATIO = 0.75


def font_style_to_weight(style: Optional[str]) -> int:
    """Numeric weight from a style name such as "Semi Bold Italic"."""
    s = re.sub(r'\s+', '', (style or '').lower())
    if 'thin' in s or 'hairline' in s:
        return 100
    if 'extralight' in s or 'ultralight' in s:
        return 200
    if 'light' in s:
        return 300
    if 'medium' in s:
        return 500
    if 'semibold' in s or 'demibold' in s:
        return 600
    if 'extrabold' in s or 'ultrabold' in s:
        return 800
    if 'black' in s or 'heavy' in s:
        return 900
    if 'bold' in s:
        return 700
    return 400


def is_italic(style: Optional[str]) -> bool:
    return bool(style) and ('italic' in style.lower() or 'oblique' in style.lower())


def classify_font_family(family: str) -> FontKind:
    if _MONO.search(family):
        return 'mono'
    if _SERIF.search(family):
        if _SANS_SERIF.search(family):
            return 'sans'
        return 'serif'
    return 'sans'


def quote_family(family: str) -> str:
    return f'"{family}"' if ' ' in family else family


def family_slug(family: str) -> str:
    slug = re.sub(r'\s+', '-', family.lower())
    return re.sub(r'[^a-z0-9-]', '', slug)


def line_height_ratio(line_height, font_size: Optional[float]) -> Optional[float]:
    """Line height as a multiple of the font size, two decimals; None for auto."""
    if not isinstance(line_height, LineHeight) or line_height == MIXED:
        return None
    if line_height.unit == 'PIXELS' and font_size:
        return round(line_height.value / font_size, 2)
    if line_height.unit == 'PERCENT':
        return round(line_height.value / 100, 2)
    return None


def letter_spacing_px(letter_spacing, font_size: Optional[float]) -> Optional[float]:
    if not isinstance(letter_spacing, LetterSpacing):
        return None
    if letter_spacing.unit == 'PERCENT':
        return letter_spacing.value / 100 * (font_size or 0)
    return letter_spacing.value


def generate_clamp_font_size(rem: float) -> str:
    """Fluid ``clamp()`` that shrinks to 75% on small viewports."""
    min_rem = rem * CLAMP_MIN_RATIO
    max_rem = rem
    slope = (max_rem - min_rem) / (CLAMP_MAX_VW - CLAMP_MIN_VW)
    intercept = min_rem - slope * CLAMP_MIN_VW
    return f"clamp({min_rem:.3f}rem, {intercept:.3f}rem + {slope * 100:.2f}vw, {max_rem:.3f}rem)"
