"""
Scale snapping.

Maps raw design values onto the named points of the reference scales in
``scales``. Exclusive snapping never hands out a name twice in one run
(tracked through the caller's ``used_names`` set) until the scale runs out.
"""

import math
from typing import Iterable, List, Optional, Sequence, Set

from .base import fmt_num
from .scales import (
    PILL_RADIUS_THRESHOLD,
    ScaleStep,
    TW_BLUR_SCALE,
    TW_DURATION_SCALE,
    TW_LEADING_SCALE,
    TW_RADIUS_SCALE,
    TW_SHADOW_BUCKETS,
    TW_SHADOW_MAX_CLASS,
    TW_SPACING_MAP,
    TW_TEXT_SCALE,
)


def snap_to_scale(value: float, scale: Sequence[ScaleStep], used_names: Optional[Set[str]] = None,
                  exclusive: bool = True) -> Optional[str]:
    """Return the name of the nearest scale step.

    With ``exclusive`` set, names already in ``used_names`` are skipped and the
    chosen name is added to it. Equal distances go to the earlier step. When
    every name is taken, or the value is not a finite number, the first step
    wins. An empty scale yields None.
    """
    if not scale:
        return None
    if used_names is None:
        used_names = set()

    best = scale[0]
    if value is not None and math.isfinite(value):
        best_dist = math.inf
        for step in scale:
            if exclusive and step.name in used_names:
                continue
            dist = abs(step.value - value)
            if dist < best_dist:
                best_dist = dist
                best = step

    if exclusive:
        used_names.add(best.name)
    return best.name


def nearest_step(value: float, scale: Sequence[ScaleStep]) -> Optional[ScaleStep]:
    """Nearest step without any exclusion bookkeeping."""
    name = snap_to_scale(value, scale, exclusive=False)
    for step in scale:
        if step.name == name:
            return step
    return None


# ============================================================================
# Typed snappers
# ============================================================================

def snap_font_size_to_tailwind(rem: float, used_names: Set[str]) -> str:
    return snap_to_scale(rem, TW_TEXT_SCALE, used_names)


def snap_line_height_to_tailwind(ratio: float) -> str:
    # Leading names may repeat across text styles
    return snap_to_scale(ratio, TW_LEADING_SCALE, exclusive=False)


_RADIUS_STEPS = tuple(step for step in TW_RADIUS_SCALE if step.name != 'full')


def snap_radius_to_tailwind(px: float, used_names: Set[str]) -> str:
    if px is not None and math.isfinite(px) and px >= PILL_RADIUS_THRESHOLD:
        used_names.add('full')
        return 'full'
    return snap_to_scale(px, _RADIUS_STEPS, used_names)


def snap_duration(ms: float, used_names: Set[str]) -> str:
    return snap_to_scale(ms, TW_DURATION_SCALE, used_names)


def snap_blur(px: float) -> str:
    return snap_to_scale(px, TW_BLUR_SCALE, exclusive=False)


def shadow_size_name(blur: float) -> str:
    """Utility shadow class for a drop shadow blur radius."""
    for limit, name in TW_SHADOW_BUCKETS:
        if blur <= limit:
            return name
    return TW_SHADOW_MAX_CLASS


# ============================================================================
# Spacing
# ============================================================================

def px_to_tailwind_spacing(px: float) -> str:
    """Tailwind spacing value for px: exact match, then within 1px, else ``[Npx]``."""
    if px == 0:
        return '0'
    if px in TW_SPACING_MAP:
        return TW_SPACING_MAP[px]
    for key, value in TW_SPACING_MAP.items():
        if abs(key - px) <= 1:
            return value
    return f"[{fmt_num(px)}px]"


def _gcd(a: float, b: float) -> int:
    a = int(round(a))
    b = int(round(b))
    while b:
        a, b = b, a % b
    return abs(a)


def find_gcd(values: Iterable[float]) -> int:
    """Greatest common divisor of rounded values; 0 for an empty input."""
    numbers: List[float] = list(values)
    if not numbers:
        return 0
    result = int(round(numbers[0]))
    for number in numbers[1:]:
        result = _gcd(result, number)
        if result == 1:
            return 1
    return abs(result)
