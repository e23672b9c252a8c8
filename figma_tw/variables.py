"""
Theme CSS from Figma variables and local styles.

Variable collections are rendered one block per mode; local paint, text and
effect styles follow as their own sections. Names are derived from the
Figma names with ``to_css_variable_name`` unless ``default_classes`` asks for
Tailwind's default scale names instead.
"""

import logging
import re
from typing import Any, Dict, List, Literal, Optional, Set

from pydantic import AliasChoices, Field

from .base import fmt_num, px_to_rem
from .colors import ScannedColor, classify_colors_for_tailwind
from .config import GenerateOptions
from .nodes import RGBA, Effect, FigmaModel, FontName, LetterSpacing, LineHeight, Paint
from .scales import FONT_FAMILY_FALLBACKS, REM_BASE_PX, TW_SHADOW_NAMES, TW_WEIGHT_MAP
from .scanner import CSSOutput, CSSSection
from .snapper import snap_font_size_to_tailwind, snap_line_height_to_tailwind
from .styles import shadow_css
from .typography import (
    classify_font_family,
    family_slug,
    font_style_to_weight,
    generate_clamp_font_size,
    line_height_ratio,
    quote_family,
)

logger = logging.getLogger(__name__)

VariableType = Literal['COLOR', 'FLOAT', 'STRING', 'BOOLEAN']

# Words that repeat what the category prefix already says
CATEGORY_NOISE: Dict[str, Set[str]] = {
    'color': {'color', 'colors', 'colour', 'colours'},
    'text': {'font', 'size', 'text', 'typography', 'type'},
    'leading': {'font', 'size', 'text', 'typography', 'type', 'line', 'height', 'leading'},
    'font-weight': {'font', 'size', 'text', 'typography', 'type', 'weight'},
    'space': {'spacing', 'space'},
    'radius': {'radius', 'radii', 'border', 'corner'},
    'shadow': {'shadow', 'shadows', 'effect', 'effects'},
}

# Grouping-only names at the front of a variable path
GROUP_NOISE = {
    'primitives', 'primitive', 'semantic', 'tokens', 'token',
    'base', 'core', 'palette', 'foundation', 'foundations',
    'neutrals', 'neutral',
}

_WEIGHT_SUFFIX = re.compile(r'^[1-9]00$')
MAX_ALIAS_DEPTH = 16


# ============================================================================
# Models
# ============================================================================

class VariableMode(FigmaModel):
    mode_id: str
    name: str


class Variable(FigmaModel):
    id: str = ''
    name: str
    resolved_type: VariableType = Field(
        validation_alias=AliasChoices('resolvedType', 'resolvedDataType', 'resolved_type')
    )
    values_by_mode: Dict[str, Any] = Field(default_factory=dict)


class VariableCollection(FigmaModel):
    id: str = ''
    name: str
    modes: List[VariableMode] = Field(default_factory=list)
    variables: List[Variable] = Field(default_factory=list)


class PaintStyle(FigmaModel):
    name: str
    paints: List[Paint] = Field(default_factory=list)


class TextStyle(FigmaModel):
    name: str
    font_size: Optional[float] = None
    font_name: Optional[FontName] = None
    line_height: Optional[LineHeight] = None
    letter_spacing: Optional[LetterSpacing] = None


class EffectStyle(FigmaModel):
    name: str
    effects: List[Effect] = Field(default_factory=list)


class LocalStyles(FigmaModel):
    colors: List[PaintStyle] = Field(default_factory=list)
    text_styles: List[TextStyle] = Field(default_factory=list)
    effects: List[EffectStyle] = Field(default_factory=list)


# ============================================================================
# Naming and values
# ============================================================================

def to_css_variable_name(name: str, category: Optional[str] = None) -> str:
    """``"Primitives/Colors/Blue/500"`` -> ``--color-blue-500``."""
    cleaned = re.sub(r'[/\s]+', '-', name.lower())
    cleaned = re.sub(r'[^a-z0-9-]', '', cleaned)
    cleaned = re.sub(r'-+', '-', cleaned).strip('-')
    segments = [s for s in cleaned.split('-') if s]

    noise = CATEGORY_NOISE.get(category or '')
    if noise:
        segments = [s for s in segments if s not in noise]

    while len(segments) > 1 and segments[0] in GROUP_NOISE:
        segments.pop(0)

    segments = [s for i, s in enumerate(segments) if i == 0 or s != segments[i - 1]]

    # "h4-500" -> "h4"
    if category == 'leading' and len(segments) > 1 and _WEIGHT_SUFFIX.match(segments[-1]):
        segments.pop()

    if not segments:
        segments = ['default']
    prefix = f"{category}-" if category else ''
    return f"--{prefix}{'-'.join(segments)}"


def format_value_for_css(value: Any, resolved_type: VariableType) -> str:
    if resolved_type == 'COLOR':
        if isinstance(value, dict) and 'r' in value:
            return RGBA.model_validate(value).to_value().hex
        return str(value)
    if resolved_type == 'FLOAT':
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if 1 <= value <= 1000:
                return px_to_rem(value, REM_BASE_PX)
            return fmt_num(value)
        return str(value)
    if resolved_type == 'STRING':
        if isinstance(value, str) and ' ' in value:
            return f"'{value}'"
        return str(value)
    if resolved_type == 'BOOLEAN':
        return 'true' if value else 'false'
    return str(value)


def _is_alias(value: Any) -> bool:
    return isinstance(value, dict) and value.get('type') == 'VARIABLE_ALIAS'


def resolve_variable_value(variable: Variable, mode_id: str, by_id: Dict[str, Variable]) -> Any:
    """Follow alias chains; an alias into another collection uses that variable's first mode."""
    value = variable.values_by_mode.get(mode_id)
    seen = {variable.id}
    depth = 0
    while _is_alias(value) and depth < MAX_ALIAS_DEPTH:
        target = by_id.get(value.get('id'))
        if target is None or target.id in seen:
            return None
        seen.add(target.id)
        if mode_id in target.values_by_mode:
            value = target.values_by_mode[mode_id]
        else:
            value = next(iter(target.values_by_mode.values()), None)
        depth += 1
    return None if _is_alias(value) else value


# ============================================================================
# CSS
# ============================================================================

def _collection_section(collection: VariableCollection, by_id: Dict[str, Variable],
                        opts: GenerateOptions) -> str:
    css = ''
    multi_mode = len(collection.modes) > 1
    for mode in collection.modes:
        lines = []
        seen: Set[str] = set()
        for variable in collection.variables:
            if variable.name in seen:
                continue
            seen.add(variable.name)
            kind = variable.resolved_type
            if (kind == 'COLOR' and not opts.colors) or (kind == 'FLOAT' and not opts.spacing) \
                    or (kind == 'STRING' and not opts.font_families):
                continue
            value = resolve_variable_value(variable, mode.mode_id, by_id)
            if value is None:
                continue
            category = {'COLOR': 'color', 'FLOAT': 'space'}.get(kind)
            lines.append(f"  {to_css_variable_name(variable.name, category)}: "
                         f"{format_value_for_css(value, kind)};\n")
        if lines:
            label = f"{collection.name} - {mode.name}" if multi_mode else collection.name
            css += f"\n  /* {label} */\n" + ''.join(lines)
    return css


def _color_style_section(styles: LocalStyles, opts: GenerateOptions) -> str:
    solid = [(style, style.paints[0]) for style in styles.colors
             if style.paints and style.paints[0].type == 'SOLID' and style.paints[0].color]
    lines = []
    if opts.default_classes:
        semantic, palette = classify_colors_for_tailwind(
            [ScannedColor(hex=paint.solid_hex(), used_as={'fill'}) for _, paint in solid]
        )
        lines = [f"  --color-{c.name}: {c.hex};\n" for c in list(semantic) + list(palette)]
    else:
        lines = [f"  {to_css_variable_name(style.name, 'color')}: {paint.solid_hex()};\n"
                 for style, paint in solid]
    return '\n  /* Color Styles */\n' + ''.join(lines)


def _text_style_lines(styles: LocalStyles, opts: GenerateOptions) -> List[str]:
    text_styles = styles.text_styles
    tw = opts.default_classes
    lines: List[str] = []

    if opts.font_families:
        families: List[str] = []
        for style in text_styles:
            if style.font_name and style.font_name.family and style.font_name.family not in families:
                families.append(style.font_name.family)
        seen_kinds: Set[str] = set()
        for family in families:
            if tw:
                kind = classify_font_family(family)
                if kind in seen_kinds:
                    continue
                seen_kinds.add(kind)
                lines.append(f"--font-{kind}: {quote_family(family)}, {FONT_FAMILY_FALLBACKS[kind]};")
            else:
                lines.append(f"--font-family-{family_slug(family)}: {quote_family(family)};")

    def size_value(px: float) -> str:
        rem = px / REM_BASE_PX
        return generate_clamp_font_size(rem) if opts.scalable_font_size else px_to_rem(px, REM_BASE_PX)

    if opts.font_sizes:
        if tw:
            used: Set[str] = set()
            for px in sorted({s.font_size for s in text_styles if s.font_size}):
                lines.append(f"--text-{snap_font_size_to_tailwind(px / REM_BASE_PX, used)}: {size_value(px)};")
        else:
            for style in text_styles:
                if style.font_size:
                    lines.append(f"{to_css_variable_name(style.name, 'text')}: {size_value(style.font_size)};")

    if opts.font_weights:
        named = [s for s in text_styles if s.font_name and s.font_name.style]
        if tw:
            for weight in sorted({font_style_to_weight(s.font_name.style) for s in named}):
                lines.append(f"--font-weight-{TW_WEIGHT_MAP.get(weight, str(weight))}: {weight};")
        else:
            for style in named:
                lines.append(f"{to_css_variable_name(style.name, 'font-weight')}: "
                             f"{font_style_to_weight(style.font_name.style)};")

    if opts.line_heights:
        if tw:
            ratios: List[float] = []
            for style in text_styles:
                ratio = line_height_ratio(style.line_height, style.font_size)
                if ratio is not None and ratio not in ratios:
                    ratios.append(ratio)
            used_leading: Set[str] = set()
            for ratio in ratios:
                name = snap_line_height_to_tailwind(ratio)
                if name in used_leading:
                    continue
                used_leading.add(name)
                lines.append(f"--leading-{name}: {fmt_num(ratio, 2)};")
        else:
            for style in text_styles:
                ratio = line_height_ratio(style.line_height, style.font_size)
                if ratio is not None:
                    lines.append(f"{to_css_variable_name(style.name, 'leading')}: {fmt_num(ratio, 2)};")
    return lines


def _effect_style_section(styles: LocalStyles, opts: GenerateOptions) -> str:
    shadows = [(style, style.effects[0]) for style in styles.effects
               if style.effects and style.effects[0].is_shadow]
    lines = []
    if opts.default_classes:
        ordered = sorted(shadows, key=lambda pair: pair[1].radius)
        for i, (_, effect) in enumerate(ordered):
            name = TW_SHADOW_NAMES[i] if i < len(TW_SHADOW_NAMES) else str(i + 1)
            lines.append(f"  --shadow-{name}: {shadow_css(effect)};\n")
    else:
        for style, effect in shadows:
            lines.append(f"  {to_css_variable_name(style.name, 'shadow')}: {shadow_css(effect)};\n")
    return '\n  /* Effect Styles */\n' + ''.join(lines)


def generate_variables_css(collections: List[VariableCollection], styles: Optional[LocalStyles] = None,
                           opts: Optional[GenerateOptions] = None) -> CSSOutput:
    """Render variable collections and local styles as an ``@theme`` block."""
    opts = opts or GenerateOptions()
    styles = styles or LocalStyles()
    by_id = {v.id: v for c in collections for v in c.variables if v.id}
    sections: List[CSSSection] = []

    for collection in collections:
        css = _collection_section(collection, by_id, opts)
        if css:
            sections.append(CSSSection(label=collection.name, css=css))

    if opts.colors and styles.colors:
        sections.append(CSSSection(label='Color Styles', css=_color_style_section(styles, opts)))

    if styles.text_styles:
        lines = _text_style_lines(styles, opts)
        if lines:
            css = '\n  /* Text Styles */\n' + ''.join(f"  {line}\n" for line in lines)
            sections.append(CSSSection(label='Text Styles', css=css))

    if opts.shadows and styles.effects:
        sections.append(CSSSection(label='Effect Styles', css=_effect_style_section(styles, opts)))

    logger.debug("Variables CSS: %d collections, %d sections", len(collections), len(sections))
    full = '@theme {\n' + ''.join(section.css for section in sections) + '}\n'
    return CSSOutput(full=full, sections=tuple(sections))
