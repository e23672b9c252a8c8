"""
Color role classification.

Semantic roles are handed out by a fixed list of rules, evaluated in order,
each claiming at most one color that no earlier rule claimed. Whatever is
left is grouped into hue families and labeled with shade steps.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Set, Tuple

from .base import hex_hue, hex_luminance, hex_saturation
from .scales import SHADE_RAMP


@dataclass
class ScannedColor:
    hex: str
    count: int = 1
    used_as: Set[str] = field(default_factory=set)  # 'fill' | 'stroke' | 'text'


class ClassifiedColor(NamedTuple):
    name: str
    hex: str


# ============================================================================
# Hue families
# ============================================================================

def hue_to_color_name(hue: float, saturation: float, luminance: float) -> str:
    if saturation < 0.08:
        if luminance > 0.9:
            return 'white'
        if luminance < 0.1:
            return 'black'
        return 'gray'
    if hue < 15:
        return 'red'
    if hue < 45:
        return 'orange'
    if hue < 70:
        return 'yellow'
    if hue < 160:
        return 'green'
    if hue < 200:
        return 'teal'
    if hue < 260:
        return 'blue'
    if hue < 290:
        return 'purple'
    if hue < 340:
        return 'pink'
    return 'red'


def color_family(hex_color: str) -> str:
    return hue_to_color_name(hex_hue(hex_color), hex_saturation(hex_color), hex_luminance(hex_color))


def shade_steps(count: int) -> List[int]:
    """Shade labels for a family of ``count`` members, lightest first."""
    if count <= 0:
        return []
    if count == 1:
        return [500]
    ramp = len(SHADE_RAMP)
    if count <= ramp:
        return [SHADE_RAMP[i * ramp // count] for i in range(count)]
    # Past the ramp, keep going in steps of 50 then 100 so no color is dropped
    steps = list(SHADE_RAMP)
    extra = 950
    while len(steps) < count:
        steps.append(extra)
        extra = extra + 50 if extra < 1000 else extra + 100
    return steps


def group_into_palette(hexes: Sequence[str]) -> List[ClassifiedColor]:
    """Group colors by hue family (first-seen order), lightest first in each."""
    families: Dict[str, List[str]] = {}
    for hex_color in hexes:
        families.setdefault(color_family(hex_color), []).append(hex_color)

    palette: List[ClassifiedColor] = []
    for family, members in families.items():
        ordered = sorted(members, key=hex_luminance, reverse=True)
        for step, hex_color in zip(shade_steps(len(ordered)), ordered):
            palette.append(ClassifiedColor(f"{family}-{step}", hex_color))
    return palette


# ============================================================================
# Semantic roles
# ============================================================================

def _is_red(hex_color: str) -> bool:
    hue = hex_hue(hex_color)
    return (hue < 20 or hue > 340) and hex_saturation(hex_color) > 0.3


def _by_usage(color: ScannedColor) -> int:
    return -color.count


def classify_colors_for_tailwind(
    colors: Sequence[ScannedColor],
) -> Tuple[List[ClassifiedColor], List[ClassifiedColor]]:
    """Split a color population into (semantic roles, leftover palette).

    Every input hex lands in exactly one of the two lists.
    """
    if not colors:
        return [], []

    # Duplicate hexes would break the partition; the first entry wins
    unique: Dict[str, ScannedColor] = {}
    for color in colors:
        unique.setdefault(color.hex, color)
    population = list(unique.values())

    assigned: Set[str] = set()
    semantic: List[ClassifiedColor] = []

    fills = [c for c in population if 'fill' in c.used_as]
    texts = [c for c in population if 'text' in c.used_as]
    strokes = [c for c in population if 'stroke' in c.used_as]

    def claim(role: str, candidates: List[ScannedColor],
              sort_key: Optional[Callable[[ScannedColor], float]] = None) -> None:
        available = [c for c in candidates if c.hex not in assigned]
        if sort_key is not None:
            available.sort(key=sort_key)
        if available:
            chosen = available[0]
            semantic.append(ClassifiedColor(role, chosen.hex))
            assigned.add(chosen.hex)

    claim('background', fills, lambda c: -hex_luminance(c.hex))
    claim('foreground', texts, lambda c: hex_luminance(c.hex))
    claim('primary', [c for c in population if hex_saturation(c.hex) > 0.3], _by_usage)
    claim('border', strokes, _by_usage)
    claim('muted', [c for c in fills if hex_luminance(c.hex) > 0.85 and hex_saturation(c.hex) < 0.15])
    claim('muted-foreground', [c for c in texts if hex_luminance(c.hex) > 0.4], _by_usage)
    claim('secondary', [c for c in population if hex_saturation(c.hex) > 0.25], _by_usage)
    claim('destructive', [c for c in population if _is_red(c.hex)], _by_usage)
    claim('accent', [c for c in population if hex_saturation(c.hex) > 0.2], _by_usage)

    leftovers = [c.hex for c in population if c.hex not in assigned]
    return semantic, group_into_palette(leftovers)
