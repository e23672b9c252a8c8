"""
Per-run token naming.

``TokenRegistry`` memoizes raw value -> token name for one compile run and
renders the collected tokens as an ``@theme`` block. ``ScaleResolver`` is the
stateless counterpart used when no theme CSS is requested: it names the same
values with Tailwind's built-in scale or an arbitrary ``[...]`` literal.

Both expose the same class-suffix methods (``color``, ``font_size``,
``spacing``, ``radius``, ``gradient``) so class generation in ``styles``
does not care which one it is given. ``shadow`` returns a whole class.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple

from .base import GradientDef, fmt_num, px_to_rem
from .colors import color_family
from .scales import PILL_RADIUS_THRESHOLD, REM_BASE_PX, TW_COLORS, TW_RADIUS_SCALE, TW_TEXT_SCALE
from .snapper import nearest_step, px_to_tailwind_spacing, shadow_size_name

logger = logging.getLogger(__name__)

_RADIUS_STEPS = tuple(step for step in TW_RADIUS_SCALE if step.name != 'full')


def _arbitrary(value: str) -> str:
    """Wrap a CSS value as a Tailwind arbitrary value (spaces become underscores)."""
    return f"[{value.replace(' ', '_')}]"


def _first_unused(candidates: List[str], used: Set[str]) -> str:
    for candidate in candidates:
        if candidate not in used:
            return candidate
    base = candidates[-1]
    counter = 2
    while f"{base}-{counter}" in used:
        counter += 1
    return f"{base}-{counter}"


# ============================================================================
# Token registry (theme CSS mode)
# ============================================================================

class TokenRegistry:
    """Raw value -> token name maps for one compile run.

    A raw value seen twice yields the same name; a name is never given to two
    different raw values of the same category.
    """

    def __init__(self, theme_colors: Optional[Dict[str, str]] = None):
        self.theme_colors = {k.lower(): v for k, v in (theme_colors or {}).items()}
        self.colors: Dict[str, str] = {}
        self.font_sizes: Dict[float, str] = {}
        self.spacing_tokens: Dict[float, str] = {}
        self.radii: Dict[float, str] = {}
        self.gradients: Dict[str, Tuple[str, GradientDef]] = {}
        self.shadows: Dict[str, Tuple[str, str]] = {}

    def __len__(self) -> int:
        return (len(self.colors) + len(self.font_sizes) + len(self.spacing_tokens)
                + len(self.radii) + len(self.gradients) + len(self.shadows))

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_color(self, hex_color: str) -> str:
        key = hex_color.lower()
        if key in self.colors:
            return self.colors[key]

        used = set(self.colors.values())
        name = self.theme_colors.get(key) or TW_COLORS.get(key)
        if not name or name in used:
            family = color_family(key)
            existing = sum(1 for n in used if n.startswith(family + '-'))
            step = 500 if existing == 0 else (existing + 1) * 100
            name = f"{family}-{step}"
            while name in used:
                step += 100
                name = f"{family}-{step}"

        self.colors[key] = name
        return name

    def register_font_size(self, px: float) -> str:
        if px in self.font_sizes:
            return self.font_sizes[px]
        step = nearest_step(px / REM_BASE_PX, TW_TEXT_SCALE)
        used = set(self.font_sizes.values())
        name = _first_unused([step.name, f"{step.name}-{fmt_num(px)}"], used)
        self.font_sizes[px] = name
        return name

    def register_spacing(self, px: float) -> str:
        if px in self.spacing_tokens:
            return self.spacing_tokens[px]
        used = set(self.spacing_tokens.values())
        literal = fmt_num(px)
        tw_name = px_to_tailwind_spacing(px)
        candidates = [literal, f"{literal}px"]
        if not tw_name.startswith('['):
            candidates.insert(0, tw_name)
        name = _first_unused(candidates, used)
        self.spacing_tokens[px] = name
        return name

    def register_radius(self, px: float) -> str:
        if px in self.radii:
            return self.radii[px]
        used = set(self.radii.values())
        if px >= PILL_RADIUS_THRESHOLD:
            base = 'full'
        else:
            base = nearest_step(px, _RADIUS_STEPS).name
        name = _first_unused([base, f"{base}-{fmt_num(px)}"], used)
        self.radii[px] = name
        return name

    def register_gradient(self, gradient: GradientDef) -> str:
        key = gradient.key
        if key not in self.gradients:
            self.gradients[key] = (f"gradient-{len(self.gradients) + 1}", gradient)
        return self.gradients[key][0]

    def register_shadow(self, css_value: str, blur: float) -> str:
        if css_value in self.shadows:
            return self.shadows[css_value][0]
        bucket = shadow_size_name(blur)
        base = bucket[len('shadow-'):] if bucket.startswith('shadow-') else 'base'
        used = {name for name, _ in self.shadows.values()}
        name = _first_unused([base], used)
        self.shadows[css_value] = (name, css_value)
        return name

    # ------------------------------------------------------------------
    # Class suffixes
    # ------------------------------------------------------------------

    def color(self, hex_color: str) -> str:
        return self.register_color(hex_color)

    def font_size(self, px: float) -> str:
        return self.register_font_size(px)

    def spacing(self, px: float) -> str:
        return self.register_spacing(px)

    def radius(self, px: float) -> str:
        return self.register_radius(px)

    def gradient(self, gradient: GradientDef) -> str:
        return f"[image:var(--{self.register_gradient(gradient)})]"

    def shadow(self, css_value: str, blur: float) -> str:
        return f"shadow-{self.register_shadow(css_value, blur)}"

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def build_theme_css(self) -> str:
        sections: List[Tuple[str, List[str]]] = [
            ('Colors', [f"--color-{name}: {hex_color};" for hex_color, name in self.colors.items()]),
            ('Font Sizes', [f"--text-{name}: {px_to_rem(px)};" for px, name in self.font_sizes.items()]),
            ('Spacing', [f"--spacing-{name}: {px_to_rem(px)};" for px, name in self.spacing_tokens.items()]),
            ('Border Radius', [
                f"--radius-{name}: {'9999px' if name == 'full' else fmt_num(px) + 'px'};"
                for px, name in self.radii.items()
            ]),
            ('Shadows', [f"--shadow-{name}: {value};" for name, value in self.shadows.values()]),
            ('Gradients', [f"--{name}: {gradient.to_css()};" for name, gradient in self.gradients.values()]),
        ]

        lines = ['@theme {']
        first = True
        for label, entries in sections:
            if not entries:
                continue
            if not first:
                lines.append('')
            first = False
            lines.append(f"  /* {label} */")
            lines.extend(f"  {entry}" for entry in entries)
        lines.append('}')
        logger.debug("Theme CSS built with %d tokens", len(self))
        return '\n'.join(lines) + '\n'


# ============================================================================
# Scale resolver (utility class mode)
# ============================================================================

class ScaleResolver:
    """Names values with Tailwind defaults, falling back to arbitrary values."""

    def __init__(self, theme_colors: Optional[Dict[str, str]] = None):
        self.theme_colors = {k.lower(): v for k, v in (theme_colors or {}).items()}

    def color(self, hex_color: str) -> str:
        key = hex_color.lower()
        if key in self.theme_colors:
            return self.theme_colors[key]
        if key in TW_COLORS:
            return TW_COLORS[key]
        return f"[{key}]"

    def font_size(self, px: float) -> str:
        step = nearest_step(px / REM_BASE_PX, TW_TEXT_SCALE)
        if abs(step.value - px / REM_BASE_PX) < 0.05:
            return step.name
        return f"[{fmt_num(px)}px]"

    def spacing(self, px: float) -> str:
        return px_to_tailwind_spacing(px)

    def radius(self, px: float) -> str:
        if px >= PILL_RADIUS_THRESHOLD:
            return 'full'
        step = nearest_step(px, _RADIUS_STEPS)
        if abs(step.value - px) <= 1:
            return step.name
        return f"[{fmt_num(px)}px]"

    def gradient(self, gradient: GradientDef) -> str:
        return _arbitrary(gradient.to_css())

    def shadow(self, css_value: str, blur: float) -> str:
        if ',' in css_value or css_value.startswith('inset'):
            return f"shadow-{_arbitrary(css_value)}"
        return shadow_size_name(blur)

    def build_theme_css(self) -> Optional[str]:
        return None
