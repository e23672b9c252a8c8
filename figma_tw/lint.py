"""
Design lint: flags scanned tokens that sit off Tailwind's reference scales.
"""

from dataclasses import asdict, dataclass
from typing import Dict, List, Literal

from .base import fmt_num
from .scanner import ScannedTokens
from .scales import REM_BASE_PX, TW_LEADING_SCALE, TW_RADIUS_SCALE, TW_TEXT_SCALE
from .snapper import nearest_step
from .typography import font_style_to_weight

FONT_SIZE_TOLERANCE_PX = 1
RADIUS_TOLERANCE_PX = 1
LEADING_TOLERANCE = 0.1
SPACING_GRID_PX = 4


@dataclass(frozen=True)
class LintWarning:
    category: str
    message: str
    severity: Literal['warning', 'info']
    suggestion: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def _unique(values) -> list:
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def lint_tokens(tokens: ScannedTokens) -> List[LintWarning]:
    warnings: List[LintWarning] = []
    sizes = _unique(t.font_size for t in tokens.typography)

    for px in sizes:
        closest = nearest_step(px / REM_BASE_PX, TW_TEXT_SCALE)
        closest_px = closest.value * REM_BASE_PX
        if abs(closest_px - px) > FONT_SIZE_TOLERANCE_PX:
            warnings.append(LintWarning(
                category='Typography',
                message=f"Font size {fmt_num(px)}px doesn't match any Tailwind text scale",
                severity='warning',
                suggestion=f"Closest: text-{closest.name} ({fmt_num(closest_px)}px)",
            ))

    for px in tokens.spacing:
        if px % SPACING_GRID_PX != 0:
            nearest = int(round(px / SPACING_GRID_PX)) * SPACING_GRID_PX
            warnings.append(LintWarning(
                category='Spacing',
                message=f"Spacing {fmt_num(px)}px is not on the {SPACING_GRID_PX}px grid",
                severity='warning',
                suggestion=f"Nearest: {nearest}px",
            ))

    radius_steps = [step for step in TW_RADIUS_SCALE if step.name != 'full']
    for px in tokens.radii:
        closest = nearest_step(px, radius_steps)
        if abs(closest.value - px) > RADIUS_TOLERANCE_PX:
            warnings.append(LintWarning(
                category='Border Radius',
                message=f"Border radius {fmt_num(px)}px doesn't match any Tailwind radius",
                severity='warning',
                suggestion=f"Closest: rounded-{closest.name} ({fmt_num(closest.value)}px)",
            ))

    for weight in _unique(font_style_to_weight(t.font_style) for t in tokens.typography):
        if weight % 100 != 0 or weight < 100 or weight > 900:
            warnings.append(LintWarning(
                category='Typography',
                message=f"Font weight {weight} is non-standard",
                severity='info',
                suggestion="Standard weights: 100-900 in increments of 100",
            ))

    for ratio in _unique(t.line_height for t in tokens.typography if t.line_height is not None):
        closest = nearest_step(ratio, TW_LEADING_SCALE)
        if abs(closest.value - ratio) > LEADING_TOLERANCE:
            warnings.append(LintWarning(
                category='Typography',
                message=f"Line height {fmt_num(ratio, 2)} doesn't match any Tailwind leading scale",
                severity='info',
                suggestion=f"Closest: leading-{closest.name} ({fmt_num(closest.value)})",
            ))

    return warnings
