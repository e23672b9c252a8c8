"""
Design token scan and token CSS.

``scan_nodes_for_tokens`` collects raw values from every visible node of a
tree (colors, typography, spacing, radii, shadows, gradients, transition
timing). ``generate_scanned_css`` turns them into a Tailwind v4 ``@theme``
block, either named after Tailwind's default scale (``default_classes``) or
with plain size labels and typographic roles.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .base import GradientDef, fmt_num, px_to_rem
from .colors import ScannedColor, classify_colors_for_tailwind, group_into_palette
from .config import GenerateOptions
from .nodes import (
    HasAutoLayout,
    HasCorners,
    SceneNode,
    TextNode,
    font_name_of,
    font_size_of,
    is_auto_layout,
    uniform_radius,
    visible_effects,
    visible_fills,
    visible_strokes,
    walk,
)
from .scales import (
    EASING_CSS,
    FONT_FAMILY_FALLBACKS,
    REM_BASE_PX,
    SIZE_LABELS_LONG,
    SIZE_LABELS_MEDIUM,
    SIZE_LABELS_SHORT,
    TW_SHADOW_NAMES,
    TW_WEIGHT_MAP,
    TYPO_ROLES,
)
from .snapper import (
    find_gcd,
    snap_duration,
    snap_font_size_to_tailwind,
    snap_line_height_to_tailwind,
    snap_radius_to_tailwind,
)
from .typography import (
    classify_font_family,
    family_slug,
    font_style_to_weight,
    generate_clamp_font_size,
    line_height_ratio,
    quote_family,
)

logger = logging.getLogger(__name__)

DEFAULT_EASING = 'EASE_IN_AND_OUT'


# ============================================================================
# Scanned token types
# ============================================================================

@dataclass(frozen=True)
class ScannedTypography:
    font_size: float
    font_family: Optional[str] = None
    font_style: Optional[str] = None
    line_height: Optional[float] = None


@dataclass(frozen=True)
class ScannedShadow:
    type: str  # 'inset' or ''
    offset_x: float
    offset_y: float
    blur: float
    spread: float
    color: str

    def to_css(self) -> str:
        inset = f"{self.type} " if self.type else ''
        return (f"{inset}{fmt_num(self.offset_x)}px {fmt_num(self.offset_y)}px "
                f"{fmt_num(self.blur)}px {fmt_num(self.spread)}px {self.color}")


@dataclass(frozen=True)
class ScannedAnimation:
    duration: int  # ms
    easing: str


@dataclass
class ScannedTokens:
    colors: List[ScannedColor] = field(default_factory=list)
    typography: List[ScannedTypography] = field(default_factory=list)
    spacing: List[float] = field(default_factory=list)
    radii: List[float] = field(default_factory=list)
    shadows: List[ScannedShadow] = field(default_factory=list)
    gradients: List[GradientDef] = field(default_factory=list)
    animations: List[ScannedAnimation] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            'colors': [
                {'hex': c.hex, 'count': c.count, 'usedAs': sorted(c.used_as)} for c in self.colors
            ],
            'typography': [asdict(t) for t in self.typography],
            'spacing': list(self.spacing),
            'radii': list(self.radii),
            'shadows': [asdict(s) for s in self.shadows],
            'gradients': [{'type': g.type, 'css': g.to_css()} for g in self.gradients],
            'animations': [asdict(a) for a in self.animations],
        }


@dataclass(frozen=True)
class CSSSection:
    label: str
    css: str


@dataclass(frozen=True)
class CSSOutput:
    full: str
    sections: Tuple[CSSSection, ...] = ()


# ============================================================================
# Scan
# ============================================================================

def _transition(reaction: Dict) -> Optional[Dict]:
    action = reaction.get('action') or {}
    transition = action.get('transition') if isinstance(action, dict) else None
    return transition if isinstance(transition, dict) else None


def scan_nodes_for_tokens(root: SceneNode) -> ScannedTokens:
    """Collect raw design tokens from every visible node under ``root``."""
    colors: Dict[str, ScannedColor] = {}
    typography: Dict[str, ScannedTypography] = {}
    spacing: Set[float] = set()
    radii: Set[float] = set()
    shadows: Dict[str, ScannedShadow] = {}
    gradients: Dict[str, GradientDef] = {}
    animations: Dict[str, ScannedAnimation] = {}

    def add_color(hex_color: str, role: str) -> None:
        entry = colors.get(hex_color)
        if entry is None:
            entry = colors[hex_color] = ScannedColor(hex=hex_color, count=0)
        entry.count += 1
        entry.used_as.add(role)

    for node in walk(root):
        # Colors from fills and strokes
        for paint in visible_fills(node):
            if paint.type == 'SOLID':
                add_color(paint.solid_hex(), 'text' if isinstance(node, TextNode) else 'fill')
            elif paint.type in ('GRADIENT_LINEAR', 'GRADIENT_RADIAL'):
                gradient = paint.to_gradient()
                if gradient is not None and gradient.key not in gradients:
                    gradients[gradient.key] = gradient
        for paint in visible_strokes(node):
            if paint.type == 'SOLID':
                add_color(paint.solid_hex(), 'stroke')

        # Typography
        if isinstance(node, TextNode):
            font_size = font_size_of(node)
            if font_size:
                font_name = font_name_of(node)
                family = font_name.family if font_name else None
                style = font_name.style if font_name else None
                key = f"{fmt_num(font_size)}-{family or ''}-{style or ''}"
                if key not in typography:
                    typography[key] = ScannedTypography(
                        font_size=font_size,
                        font_family=family or None,
                        font_style=style,
                        line_height=line_height_ratio(node.line_height, font_size),
                    )

        # Spacing from auto-layout
        if isinstance(node, HasAutoLayout) and is_auto_layout(node):
            for value in (node.item_spacing, node.padding_top, node.padding_right,
                          node.padding_bottom, node.padding_left):
                if value and value > 0:
                    spacing.add(value)

        if isinstance(node, HasCorners):
            radius = uniform_radius(node)
            if radius and radius > 0:
                radii.add(radius)

        # Shadows
        for effect in visible_effects(node):
            if not effect.is_shadow:
                continue
            shadow = ScannedShadow(
                type='inset' if effect.type == 'INNER_SHADOW' else '',
                offset_x=effect.offset.x,
                offset_y=effect.offset.y,
                blur=effect.radius,
                spread=effect.spread or 0,
                color=effect.color_hex(),
            )
            key = (f"{effect.type}-{fmt_num(shadow.offset_x)}-{fmt_num(shadow.offset_y)}-"
                   f"{fmt_num(shadow.blur)}-{fmt_num(shadow.spread)}-{shadow.color}")
            shadows.setdefault(key, shadow)

        # Transition timing from prototype reactions
        for reaction in node.reactions or []:
            transition = _transition(reaction) if isinstance(reaction, dict) else None
            if not transition:
                continue
            duration = transition.get('duration')
            ms = int(round(duration * 1000)) if isinstance(duration, (int, float)) else 0
            easing = (transition.get('easing') or {}).get('type') or DEFAULT_EASING
            if ms > 0:
                animations.setdefault(f"{ms}-{easing}", ScannedAnimation(duration=ms, easing=easing))

    tokens = ScannedTokens(
        colors=list(colors.values()),
        typography=sorted(typography.values(), key=lambda t: -t.font_size),
        spacing=sorted(spacing),
        radii=sorted(radii),
        shadows=sorted(shadows.values(), key=lambda s: s.blur),
        gradients=list(gradients.values()),
        animations=sorted(animations.values(), key=lambda a: a.duration),
    )
    logger.debug(
        "Scanned %s: %d colors, %d text styles, %d spacing, %d radii",
        root.name, len(tokens.colors), len(tokens.typography), len(tokens.spacing), len(tokens.radii),
    )
    return tokens


# ============================================================================
# Labels
# ============================================================================

def get_size_labels(count: int) -> List[str]:
    """``sm md lg`` for up to three values, ``xs..xl`` up to five, then ``2xl``, ``3xl``, ..."""
    if count <= len(SIZE_LABELS_SHORT):
        return list(SIZE_LABELS_SHORT[:count])
    if count <= len(SIZE_LABELS_MEDIUM):
        return list(SIZE_LABELS_MEDIUM[:count])
    labels = []
    for i in range(count):
        if i < len(SIZE_LABELS_LONG):
            labels.append(SIZE_LABELS_LONG[i])
        else:
            labels.append(f"{i - len(SIZE_LABELS_LONG) + 6}xl")
    return labels


def get_typo_roles(count: int) -> List[str]:
    if count <= len(TYPO_ROLES):
        return list(TYPO_ROLES[:count])
    return list(TYPO_ROLES) + [f"style-{i + 1}" for i in range(len(TYPO_ROLES), count)]


def easing_to_css(easing: str) -> str:
    return EASING_CSS.get(easing, 'ease-in-out')


# ============================================================================
# CSS sections
# ============================================================================

def _section(label: str, lines: List[str]) -> str:
    body = ''.join(f"  {line}\n" for line in lines)
    return f"\n  /* {label} */\n{body}"


def _color_sections(tokens: ScannedTokens, use_tw: bool) -> str:
    if use_tw:
        semantic, palette = classify_colors_for_tailwind(tokens.colors)
        css = ''
        if semantic:
            css += _section('Colors', [f"--color-{c.name}: {c.hex};" for c in semantic])
        if palette:
            css += _section('Color Palette', [f"--color-{c.name}: {c.hex};" for c in palette])
        return css
    by_usage = sorted(tokens.colors, key=lambda c: -c.count)
    palette = group_into_palette([c.hex for c in by_usage])
    return _section('Colors', [f"--color-{c.name}: {c.hex};" for c in palette])


def _font_family_lines(tokens: ScannedTokens, use_tw: bool) -> List[str]:
    families: List[str] = []
    for typo in tokens.typography:
        if typo.font_family and typo.font_family not in families:
            families.append(typo.font_family)

    lines = []
    if use_tw:
        seen_kinds: Set[str] = set()
        for family in families:
            kind = classify_font_family(family)
            if kind in seen_kinds:
                continue
            seen_kinds.add(kind)
            lines.append(f"--font-{kind}: {quote_family(family)}, {FONT_FAMILY_FALLBACKS[kind]};")
    else:
        for family in families:
            lines.append(f"--font-family-{family_slug(family)}: {quote_family(family)};")
    return lines


def _font_size_lines(tokens: ScannedTokens, opts: GenerateOptions) -> List[str]:
    sizes = sorted({t.font_size for t in tokens.typography})

    def value(px: float) -> str:
        rem = px / REM_BASE_PX
        return generate_clamp_font_size(rem) if opts.scalable_font_size else px_to_rem(px, REM_BASE_PX)

    if opts.default_classes:
        used: Set[str] = set()
        return [f"--text-{snap_font_size_to_tailwind(px / REM_BASE_PX, used)}: {value(px)};" for px in sizes]
    roles = list(reversed(get_typo_roles(len(sizes))))
    return [f"--text-{roles[i]}: {value(px)};" for i, px in enumerate(sizes)]


def _line_height_lines(tokens: ScannedTokens, use_tw: bool) -> List[str]:
    ratios: List[float] = []
    for typo in tokens.typography:
        if typo.line_height is not None and typo.line_height not in ratios:
            ratios.append(typo.line_height)

    lines = []
    if use_tw:
        used: Set[str] = set()
        for ratio in ratios:
            name = snap_line_height_to_tailwind(ratio)
            if name in used:
                continue
            used.add(name)
            lines.append(f"--leading-{name}: {fmt_num(ratio, 2)};")
    else:
        labels = get_size_labels(len(ratios))
        lines = [f"--leading-{labels[i]}: {fmt_num(ratio, 2)};" for i, ratio in enumerate(ratios)]
    return lines


def _font_weight_lines(tokens: ScannedTokens, use_tw: bool) -> List[str]:
    weights = sorted({font_style_to_weight(t.font_style) for t in tokens.typography})
    lines = []
    for weight in weights:
        name = TW_WEIGHT_MAP.get(weight, str(weight)) if use_tw else str(weight)
        lines.append(f"--font-weight-{name}: {weight};")
    return lines


def _spacing_lines(tokens: ScannedTokens, use_tw: bool) -> List[str]:
    if use_tw:
        base = find_gcd(tokens.spacing)
        return [f"--spacing: {px_to_rem(base, REM_BASE_PX)};"]
    labels = get_size_labels(len(tokens.spacing))
    return [f"--space-{labels[i]}: {px_to_rem(px, REM_BASE_PX)};" for i, px in enumerate(tokens.spacing)]


def _radius_lines(tokens: ScannedTokens, use_tw: bool) -> List[str]:
    if use_tw:
        used: Set[str] = set()
        lines = []
        for px in sorted(tokens.radii):
            name = snap_radius_to_tailwind(px, used)
            value = '9999px' if name == 'full' else px_to_rem(px, REM_BASE_PX)
            lines.append(f"--radius-{name}: {value};")
        return lines
    labels = get_size_labels(len(tokens.radii))
    return [f"--radius-{labels[i]}: {fmt_num(px)}px;" for i, px in enumerate(tokens.radii)]


def _shadow_lines(tokens: ScannedTokens, use_tw: bool) -> List[str]:
    shadows = sorted(tokens.shadows, key=lambda s: s.blur)
    labels = get_size_labels(len(shadows))
    lines = []
    for i, shadow in enumerate(shadows):
        if use_tw:
            name = TW_SHADOW_NAMES[i] if i < len(TW_SHADOW_NAMES) else str(i + 1)
        else:
            name = labels[i]
        lines.append(f"--shadow-{name}: {shadow.to_css()};")
    return lines


def _animation_lines(tokens: ScannedTokens) -> List[str]:
    used: Set[str] = set()
    names: Dict[int, str] = {}
    seen_durations: Set[str] = set()
    seen_easings: Set[str] = set()
    lines = []
    for anim in tokens.animations:
        if anim.duration not in names:
            names[anim.duration] = snap_duration(anim.duration, used)
        name = names[anim.duration]
        if name not in seen_durations:
            seen_durations.add(name)
            lines.append(f"--duration-{name}: {name}ms;")
        easing = easing_to_css(anim.easing)
        if easing not in seen_easings:
            seen_easings.add(easing)
            lines.append(f"--ease-{easing}: {easing};")
    return lines


def generate_scanned_css(tokens: ScannedTokens, opts: Optional[GenerateOptions] = None) -> CSSOutput:
    """Render scanned tokens as an ``@theme`` block, one section per category."""
    opts = opts or GenerateOptions()
    use_tw = opts.default_classes
    sections: List[CSSSection] = []

    def add(label: str, lines: List[str]) -> None:
        if lines:
            sections.append(CSSSection(label=label, css=_section(label, lines)))

    if opts.colors and tokens.colors:
        css = _color_sections(tokens, use_tw)
        if css:
            sections.append(CSSSection(label='Colors', css=css))
    if opts.font_families:
        add('Font Families', _font_family_lines(tokens, use_tw))
    if opts.font_sizes and tokens.typography:
        add('Font Sizes', _font_size_lines(tokens, opts))
    if opts.line_heights:
        add('Line Heights', _line_height_lines(tokens, use_tw))
    if opts.font_weights:
        add('Font Weights', _font_weight_lines(tokens, use_tw))
    if opts.spacing and tokens.spacing:
        add('Spacing', _spacing_lines(tokens, use_tw))
    if opts.border_radius:
        add('Border Radius', _radius_lines(tokens, use_tw))
    if opts.shadows:
        add('Shadows', _shadow_lines(tokens, use_tw))
    if opts.gradients:
        add('Gradients', [f"--gradient-{i + 1}: {g.to_css()};" for i, g in enumerate(tokens.gradients)])
    if opts.animations:
        add('Animations', _animation_lines(tokens))

    full = '@theme {\n' + ''.join(section.css for section in sections) + '}\n'
    return CSSOutput(full=full, sections=tuple(sections))
