"""
Per-node utility classes.

``node_to_classes`` turns one node's visual properties into Tailwind classes.
Every token-bearing value goes through a namer (``TokenRegistry`` when theme
CSS is generated, ``ScaleResolver`` otherwise), so the same code serves both
output modes.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .base import fmt_num, round_half_up
from .layout import infer_layout_from_children, wrap_column_width_class
from .nodes import (
    MIXED,
    FrameNode,
    HasAutoLayout,
    HasCorners,
    HasPaints,
    SceneNode,
    TextNode,
    corner_radii,
    font_name_of,
    font_size_of,
    is_auto_layout,
    uniform_radius,
    visible_children,
    visible_effects,
    visible_fills,
    visible_strokes,
)
from .scales import BLEND_MODE_CSS, TW_LEADING_SCALE, TW_WEIGHT_MAP
from .snapper import nearest_step, snap_blur
from .typography import classify_font_family, font_style_to_weight, is_italic, letter_spacing_px, line_height_ratio

# Border widths Tailwind ships as named utilities
TW_BORDER_WIDTHS = (0, 2, 4, 8)
TW_ROTATIONS = (0, 1, 2, 3, 6, 12, 45, 90, 180)
LEADING_TOLERANCE = 0.1

JUSTIFY_CLASSES = {
    'CENTER': 'justify-center',
    'MAX': 'justify-end',
    'SPACE_BETWEEN': 'justify-between',
}
ITEMS_CLASSES = {
    'CENTER': 'items-center',
    'MAX': 'items-end',
    'BASELINE': 'items-baseline',
}
TEXT_ALIGN_CLASSES = {
    'CENTER': 'text-center',
    'RIGHT': 'text-right',
    'JUSTIFIED': 'text-justify',
}
DECORATION_CLASSES = {
    'UNDERLINE': 'underline',
    'STRIKETHROUGH': 'line-through',
}
CASE_CLASSES = {
    'UPPER': 'uppercase',
    'LOWER': 'lowercase',
    'TITLE': 'capitalize',
}


@dataclass(frozen=True)
class ParentContext:
    """What a child needs to know about the container it is rendered in."""
    is_auto_layout: bool = False
    layout_mode: str = 'NONE'
    wrap_columns: Optional[int] = None
    wrap_gap: float = 0
    overlapping: bool = False
    origin: Tuple[float, float] = (0, 0)
    node: Optional[SceneNode] = None


ROOT_CONTEXT = ParentContext()


def _dedupe(classes: List[str]) -> List[str]:
    seen = set()
    result = []
    for cls in classes:
        if cls and cls not in seen:
            seen.add(cls)
            result.append(cls)
    return result


# ============================================================================
# Layout and box model
# ============================================================================

def layout_classes(node: SceneNode, namer) -> List[str]:
    if not isinstance(node, FrameNode):
        return []
    classes: List[str] = []

    if is_auto_layout(node):
        if node.layout_mode == 'GRID':
            classes.append('grid')
            if node.grid_column_count:
                classes.append(f"grid-cols-{node.grid_column_count}")
        else:
            classes.append('flex')
            if node.layout_mode == 'VERTICAL':
                classes.append('flex-col')
            if node.layout_wrap == 'WRAP':
                classes.append('flex-wrap')
        classes.append(JUSTIFY_CLASSES.get(node.primary_axis_align_items, ''))
        classes.append(ITEMS_CLASSES.get(node.counter_axis_align_items, ''))

        counter_gap = node.counter_axis_spacing
        wraps = node.layout_wrap == 'WRAP' or node.layout_mode == 'GRID'
        if wraps and counter_gap is not None and counter_gap != node.item_spacing:
            if node.item_spacing > 0:
                classes.append(f"gap-x-{namer.spacing(node.item_spacing)}")
            if counter_gap > 0:
                classes.append(f"gap-y-{namer.spacing(counter_gap)}")
        elif node.item_spacing > 0:
            classes.append(f"gap-{namer.spacing(node.item_spacing)}")
    elif visible_children(node):
        layout = infer_layout_from_children(node.children)
        if layout == 'row':
            classes.append('flex')
        elif layout == 'column':
            classes.extend(['flex', 'flex-col'])
        else:
            classes.append('relative')

    classes.extend(padding_classes(node, namer))
    if node.clips_content:
        classes.append('overflow-hidden')
    return classes


def padding_classes(node: HasAutoLayout, namer) -> List[str]:
    pt, pr, pb, pl = node.padding_top, node.padding_right, node.padding_bottom, node.padding_left
    if pt == pr == pb == pl and pt > 0:
        return [f"p-{namer.spacing(pt)}"]
    if pt == pb and pt > 0 and pl == pr and pl > 0:
        return [f"px-{namer.spacing(pl)}", f"py-{namer.spacing(pt)}"]
    classes = []
    for prefix, value in (('pt', pt), ('pr', pr), ('pb', pb), ('pl', pl)):
        if value > 0:
            classes.append(f"{prefix}-{namer.spacing(value)}")
    return classes


def size_classes(node: SceneNode, parent: ParentContext, namer) -> List[str]:
    classes: List[str] = []
    width = round_half_up(node.width)
    height = round_half_up(node.height)

    if not parent.is_auto_layout or parent.overlapping or node.layout_positioning == 'ABSOLUTE':
        if width > 0:
            classes.append(f"w-{namer.spacing(width)}")
        if height > 0:
            classes.append(f"h-{namer.spacing(height)}")
    else:
        row = parent.layout_mode == 'HORIZONTAL'
        if parent.wrap_columns is not None and node.layout_grow != 1:
            classes.append(wrap_column_width_class(parent.wrap_columns, parent.wrap_gap))
        elif node.layout_sizing_horizontal == 'FIXED' and width > 0:
            classes.append(f"w-{namer.spacing(width)}")
        elif node.layout_sizing_horizontal == 'FILL':
            classes.append('flex-1' if row else 'w-full')

        if node.layout_sizing_vertical == 'FIXED' and height > 0:
            classes.append(f"h-{namer.spacing(height)}")
        elif node.layout_sizing_vertical == 'FILL':
            classes.append('self-stretch' if row else 'flex-1')

        if node.layout_grow == 1:
            classes.append('flex-1')
        if node.layout_align == 'STRETCH':
            classes.append('self-stretch')

    for prefix, value in (('min-w', node.min_width), ('max-w', node.max_width),
                          ('min-h', node.min_height), ('max-h', node.max_height)):
        if value is not None and value > 0:
            classes.append(f"{prefix}-{namer.spacing(round_half_up(value))}")
    return classes


# ============================================================================
# Paint
# ============================================================================

def fill_classes(node: SceneNode, namer) -> List[str]:
    is_text = isinstance(node, TextNode)
    for paint in visible_fills(node):
        if paint.type == 'SOLID':
            prefix = 'text' if is_text else 'bg'
            return [f"{prefix}-{namer.color(paint.solid_hex())}"]
        if paint.is_gradient:
            gradient = paint.to_gradient()
            if gradient is None:
                continue
            classes = [f"bg-{namer.gradient(gradient)}"]
            if is_text:
                classes.extend(['bg-clip-text', 'text-transparent'])
            return classes
    return []


def border_width_class(weight: float, side: str = '') -> str:
    prefix = f"border-{side}" if side else 'border'
    if weight == 1:
        return prefix
    if weight in TW_BORDER_WIDTHS:
        return f"{prefix}-{int(weight)}"
    return f"{prefix}-[{fmt_num(weight)}px]"


def stroke_classes(node: SceneNode, namer) -> List[str]:
    if not isinstance(node, HasPaints):
        return []
    stroke = next((paint for paint in visible_strokes(node) if paint.type == 'SOLID'), None)
    if stroke is None:
        return []

    classes: List[str] = []
    sides = (node.stroke_top_weight, node.stroke_right_weight,
             node.stroke_bottom_weight, node.stroke_left_weight)
    per_side = all(side is not None for side in sides) and len(set(sides)) > 1
    if per_side or node.stroke_weight == MIXED:
        for side, weight in zip(('t', 'r', 'b', 'l'), sides):
            if weight:
                classes.append(border_width_class(weight, side))
    else:
        weight = node.stroke_weight
        if weight == 0:
            return []
        classes.append(border_width_class(weight))

    if node.dash_pattern:
        classes.append('border-dashed')
    classes.append(f"border-{namer.color(stroke.solid_hex())}")
    return classes


def radius_classes(node: SceneNode, namer) -> List[str]:
    if not isinstance(node, HasCorners):
        return []
    radius = uniform_radius(node)
    if radius is not None:
        return [f"rounded-{namer.radius(radius)}"] if radius > 0 else []
    corners = corner_radii(node)
    if corners is None:
        return []
    return [f"rounded-{corner}-{namer.radius(value)}"
            for corner, value in zip(('tl', 'tr', 'br', 'bl'), corners) if value > 0]


# ============================================================================
# Typography
# ============================================================================

def text_classes(node: SceneNode, namer) -> List[str]:
    if not isinstance(node, TextNode):
        return []
    classes: List[str] = []
    size = font_size_of(node)
    if size:
        classes.append(f"text-{namer.font_size(size)}")

    font_name = font_name_of(node)
    if isinstance(node.font_weight, (int, float)):
        weight = int(node.font_weight)
    else:
        weight = font_style_to_weight(font_name.style if font_name else None)
    if weight != 400:
        classes.append(f"font-{TW_WEIGHT_MAP.get(weight, f'[{weight}]')}")
    if font_name is not None:
        kind = classify_font_family(font_name.family)
        if kind != 'sans':
            classes.append(f"font-{kind}")
        if is_italic(font_name.style):
            classes.append('italic')

    ratio = line_height_ratio(node.line_height, size)
    if ratio is not None:
        step = nearest_step(ratio, TW_LEADING_SCALE)
        if abs(step.value - ratio) < LEADING_TOLERANCE:
            classes.append(f"leading-{step.name}")

    tracking = letter_spacing_px(node.letter_spacing, size)
    if tracking is not None and abs(tracking) > 0.1:
        if tracking < -0.3:
            classes.append('tracking-tighter')
        elif tracking < 0:
            classes.append('tracking-tight')
        elif tracking > 0.5:
            classes.append('tracking-wider')
        elif tracking > 0.2:
            classes.append('tracking-wide')

    classes.append(TEXT_ALIGN_CLASSES.get(node.text_align_horizontal, ''))
    classes.append(DECORATION_CLASSES.get(node.text_decoration, ''))
    classes.append(CASE_CLASSES.get(node.text_case, ''))
    return classes


# ============================================================================
# Effects and transforms
# ============================================================================

def shadow_css(effect) -> str:
    inset = 'inset ' if effect.type == 'INNER_SHADOW' else ''
    return (f"{inset}{fmt_num(effect.offset.x)}px {fmt_num(effect.offset.y)}px "
            f"{fmt_num(effect.radius)}px {fmt_num(effect.spread)}px {effect.color_hex()}")


def effect_classes(node: SceneNode, namer) -> List[str]:
    classes: List[str] = []
    effects = visible_effects(node)

    shadows = [effect for effect in effects if effect.is_shadow]
    if shadows:
        value = ', '.join(shadow_css(effect) for effect in shadows)
        blur = max(effect.radius for effect in shadows)
        classes.append(namer.shadow(value, blur))

    for effect in effects:
        if effect.type == 'LAYER_BLUR' and effect.radius > 0:
            classes.append(f"blur-{snap_blur(effect.radius)}")
        elif effect.type == 'BACKGROUND_BLUR' and effect.radius > 0:
            classes.append(f"backdrop-blur-{snap_blur(effect.radius)}")
    return classes


def rotation_class(rotation: float) -> str:
    # Figma rotates counter-clockwise; CSS rotates clockwise
    degrees = round_half_up(-rotation) % 360
    if degrees > 180:
        degrees -= 360
    if degrees == 0:
        return ''
    magnitude = abs(degrees)
    sign = '-' if degrees < 0 else ''
    if magnitude in TW_ROTATIONS:
        return f"{sign}rotate-{magnitude}"
    return f"rotate-[{degrees}deg]"


def appearance_classes(node: SceneNode) -> List[str]:
    classes: List[str] = []
    if node.opacity < 1:
        classes.append(f"opacity-{round_half_up(node.opacity * 100)}")
    if node.rotation:
        classes.append(rotation_class(node.rotation))
    blend = BLEND_MODE_CSS.get(node.blend_mode)
    if blend:
        classes.append(f"mix-blend-{blend}")
    return classes


def node_to_classes(node: SceneNode, parent: ParentContext, namer,
                    include_layout: bool = True) -> List[str]:
    """Ordered, de-duplicated utility classes for one visible node.

    ``include_layout=False`` drops flex/grid and padding classes, for nodes
    that are exported as a single image.
    """
    if not node.visible:
        return []
    classes: List[str] = []
    if include_layout:
        classes.extend(layout_classes(node, namer))
    classes.extend(size_classes(node, parent, namer))
    classes.extend(fill_classes(node, namer))
    classes.extend(stroke_classes(node, namer))
    classes.extend(radius_classes(node, namer))
    classes.extend(text_classes(node, namer))
    classes.extend(appearance_classes(node))
    classes.extend(effect_classes(node, namer))
    return _dedupe(classes)
