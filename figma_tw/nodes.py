"""
Read-only design node models.

Node trees arrive as JSON shaped like the Figma plugin API (camelCase keys,
x/y relative to the parent). They are validated into a discriminated union
keyed on ``type``. Capabilities (paints, effects, corner radius, auto-layout,
typography) are mixins, so callers check them with ``isinstance`` instead of
probing for attributes.

REST API trees (``absoluteBoundingBox`` geometry, text ``style`` objects) are
converted to the plugin shape by ``parse_node`` before validation.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from .base import (
    ColorValue,
    GradientDef,
    GradientStop,
    resolve_linear_geometry,
    resolve_radial_geometry,
    rgba_to_hex,
)

MIXED = 'mixed'
Mixed = Literal['mixed']

CONTAINER_TYPES = ('FRAME', 'COMPONENT', 'COMPONENT_SET', 'INSTANCE', 'SECTION')
VECTOR_TYPES = ('VECTOR', 'BOOLEAN_OPERATION', 'ELLIPSE', 'LINE', 'STAR', 'POLYGON', 'REGULAR_POLYGON')


class FigmaModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
        frozen=True,
    )


# ============================================================================
# Paints and Effects
# ============================================================================

class RGBA(FigmaModel):
    r: float = 0
    g: float = 0
    b: float = 0
    a: float = 1

    def to_value(self, alpha: Optional[float] = None) -> ColorValue:
        return ColorValue(r=self.r, g=self.g, b=self.b, a=self.a if alpha is None else alpha)


class Vector2(FigmaModel):
    x: float = 0
    y: float = 0


class ColorStop(FigmaModel):
    position: float = 0
    color: RGBA = Field(default_factory=RGBA)


class Paint(FigmaModel):
    type: Literal['SOLID', 'GRADIENT_LINEAR', 'GRADIENT_RADIAL', 'GRADIENT_ANGULAR',
                  'GRADIENT_DIAMOND', 'IMAGE', 'VIDEO', 'PATTERN']
    visible: bool = True
    opacity: float = 1
    blend_mode: str = 'NORMAL'
    color: Optional[RGBA] = None
    gradient_stops: List[ColorStop] = Field(default_factory=list)
    gradient_handle_positions: Optional[List[Vector2]] = None
    gradient_transform: Optional[List[List[float]]] = None
    scale_mode: Optional[str] = None
    image_hash: Optional[str] = Field(default=None, validation_alias=AliasChoices('imageHash', 'imageRef', 'image_hash'))

    @property
    def is_gradient(self) -> bool:
        return self.type.startswith('GRADIENT_')

    def solid_hex(self) -> str:
        """Hex of a solid paint; the paint opacity becomes the alpha channel."""
        color = self.color or RGBA()
        return rgba_to_hex(color.r, color.g, color.b, self.opacity)

    def to_gradient(self) -> Optional[GradientDef]:
        if not self.is_gradient or not self.gradient_stops:
            return None
        stops = tuple(
            GradientStop(color=stop.color.to_value(), position=stop.position)
            for stop in self.gradient_stops
        )
        handles = None
        if self.gradient_handle_positions:
            handles = [(h.x, h.y) for h in self.gradient_handle_positions]
        if self.type == 'GRADIENT_LINEAR':
            geometry = resolve_linear_geometry(handles, self.gradient_transform)
            kind = 'linear'
        elif self.type == 'GRADIENT_ANGULAR':
            geometry = resolve_linear_geometry(handles, self.gradient_transform)
            kind = 'conic'
        else:
            # Diamond gradients are approximated as radial
            geometry = resolve_radial_geometry(handles, self.gradient_transform)
            kind = 'radial'
        return GradientDef(type=kind, stops=stops, geometry=geometry, opacity=self.opacity)


class Effect(FigmaModel):
    type: Literal['DROP_SHADOW', 'INNER_SHADOW', 'LAYER_BLUR', 'BACKGROUND_BLUR', 'NOISE', 'TEXTURE']
    visible: bool = True
    radius: float = 0
    spread: float = 0
    color: Optional[RGBA] = None
    offset: Vector2 = Field(default_factory=Vector2)
    blend_mode: str = 'NORMAL'

    @property
    def is_shadow(self) -> bool:
        return self.type in ('DROP_SHADOW', 'INNER_SHADOW')

    def color_hex(self) -> str:
        color = self.color or RGBA(a=0.25)
        return rgba_to_hex(color.r, color.g, color.b, color.a)


# ============================================================================
# Typography values
# ============================================================================

class FontName(FigmaModel):
    family: str = ''
    style: str = 'Regular'


class LineHeight(FigmaModel):
    unit: Literal['PIXELS', 'PERCENT', 'AUTO'] = 'AUTO'
    value: float = 0


class LetterSpacing(FigmaModel):
    unit: Literal['PIXELS', 'PERCENT'] = 'PIXELS'
    value: float = 0


# ============================================================================
# Capabilities
# ============================================================================

class SceneNode(FigmaModel):
    id: str = ''
    name: str = ''
    visible: bool = True
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0
    rotation: float = 0
    opacity: float = 1
    blend_mode: str = 'PASS_THROUGH'
    min_width: Optional[float] = None
    max_width: Optional[float] = None
    min_height: Optional[float] = None
    max_height: Optional[float] = None
    layout_grow: float = 0
    layout_align: Optional[str] = None
    layout_sizing_horizontal: Optional[str] = None
    layout_sizing_vertical: Optional[str] = None
    layout_positioning: Optional[str] = None
    reactions: List[Dict[str, Any]] = Field(default_factory=list)


class HasPaints(FigmaModel):
    fills: Union[List[Paint], Mixed] = Field(default_factory=list)
    strokes: List[Paint] = Field(default_factory=list)
    stroke_weight: Union[float, Mixed] = 1
    stroke_top_weight: Optional[float] = None
    stroke_right_weight: Optional[float] = None
    stroke_bottom_weight: Optional[float] = None
    stroke_left_weight: Optional[float] = None
    stroke_align: str = 'INSIDE'
    dash_pattern: List[float] = Field(
        default_factory=list,
        validation_alias=AliasChoices('dashPattern', 'strokeDashes', 'dash_pattern'),
    )


class HasEffects(FigmaModel):
    effects: List[Effect] = Field(default_factory=list)


class HasCorners(FigmaModel):
    corner_radius: Union[float, Mixed] = 0
    top_left_radius: float = 0
    top_right_radius: float = 0
    bottom_right_radius: float = 0
    bottom_left_radius: float = 0


class HasAutoLayout(FigmaModel):
    layout_mode: Literal['NONE', 'HORIZONTAL', 'VERTICAL', 'GRID'] = 'NONE'
    layout_wrap: Literal['NO_WRAP', 'WRAP'] = 'NO_WRAP'
    item_spacing: float = 0
    counter_axis_spacing: Optional[float] = None
    padding_top: float = 0
    padding_right: float = 0
    padding_bottom: float = 0
    padding_left: float = 0
    primary_axis_align_items: str = 'MIN'
    counter_axis_align_items: str = 'MIN'
    grid_column_count: Optional[int] = None
    clips_content: bool = False


class HasTypography(FigmaModel):
    characters: str = ''
    font_size: Union[float, Mixed, None] = None
    font_name: Union[FontName, Mixed, None] = None
    font_weight: Union[float, Mixed, None] = None
    line_height: Union[LineHeight, Mixed, None] = None
    letter_spacing: Union[LetterSpacing, Mixed, None] = None
    text_decoration: str = 'NONE'
    text_case: str = 'ORIGINAL'
    text_align_horizontal: str = 'LEFT'


# ============================================================================
# Node kinds
# ============================================================================

class FrameNode(SceneNode, HasPaints, HasEffects, HasCorners, HasAutoLayout):
    type: Literal['FRAME', 'COMPONENT', 'COMPONENT_SET', 'INSTANCE', 'SECTION']
    children: List['DesignNode'] = Field(default_factory=list)


class GroupNode(SceneNode, HasEffects):
    type: Literal['GROUP']
    children: List['DesignNode'] = Field(default_factory=list)


class TextNode(SceneNode, HasPaints, HasEffects, HasTypography):
    type: Literal['TEXT']


class RectangleNode(SceneNode, HasPaints, HasEffects, HasCorners):
    type: Literal['RECTANGLE']


class VectorNode(SceneNode, HasPaints, HasEffects, HasCorners):
    type: Literal['VECTOR', 'BOOLEAN_OPERATION', 'ELLIPSE', 'LINE', 'STAR', 'POLYGON', 'REGULAR_POLYGON']


DesignNode = Annotated[
    Union[FrameNode, GroupNode, TextNode, RectangleNode, VectorNode],
    Field(discriminator='type'),
]

FrameNode.model_rebuild()
GroupNode.model_rebuild()

ParentNode = (FrameNode, GroupNode)

_NODE_ADAPTER = TypeAdapter(DesignNode)


# ============================================================================
# REST API trees
# ============================================================================

_STYLE_NAMES = {
    100: 'Thin', 200: 'Extra Light', 300: 'Light', 400: 'Regular', 500: 'Medium',
    600: 'Semi Bold', 700: 'Bold', 800: 'Extra Bold', 900: 'Black',
}

_REST_LINE_HEIGHT_UNITS = {
    'PIXELS': ('PIXELS', 'lineHeightPx'),
    'FONT_SIZE_%': ('PERCENT', 'lineHeightPercentFontSize'),
}


def _rest_text_fields(style: Dict[str, Any]) -> Dict[str, Any]:
    """Plugin-style typography fields from a REST ``style`` object."""
    fields: Dict[str, Any] = {}
    if 'fontSize' in style:
        fields['fontSize'] = style['fontSize']
    weight = style.get('fontWeight')
    if isinstance(weight, (int, float)):
        fields['fontWeight'] = weight
    if style.get('fontFamily'):
        name = _STYLE_NAMES.get(int(round((weight or 400) / 100.0)) * 100, 'Regular')
        if style.get('italic'):
            name = 'Italic' if name == 'Regular' else f"{name} Italic"
        fields['fontName'] = {'family': style['fontFamily'], 'style': name}
    unit = _REST_LINE_HEIGHT_UNITS.get(style.get('lineHeightUnit', ''))
    if unit and isinstance(style.get(unit[1]), (int, float)):
        fields['lineHeight'] = {'unit': unit[0], 'value': style[unit[1]]}
    if isinstance(style.get('letterSpacing'), (int, float)):
        fields['letterSpacing'] = {'unit': 'PIXELS', 'value': style['letterSpacing']}
    for key in ('textAlignHorizontal', 'textCase', 'textDecoration'):
        if key in style:
            fields[key] = style[key]
    return fields


def from_rest_tree(data: Dict[str, Any], origin: Optional[Tuple[float, float]] = None) -> Dict[str, Any]:
    """Convert a REST API node dict (absoluteBoundingBox, text ``style``) to plugin shape.

    Positions become relative to the nearest non-group ancestor, matching the
    plugin API. Nodes already in plugin shape pass through unchanged.
    """
    box = data.get('absoluteBoundingBox')
    if not isinstance(box, dict):
        return data
    box_x, box_y = box.get('x', 0), box.get('y', 0)
    if origin is None:
        origin = (box_x, box_y)

    node = dict(data)
    node.setdefault('x', box_x - origin[0])
    node.setdefault('y', box_y - origin[1])
    node.setdefault('width', box.get('width', 0))
    node.setdefault('height', box.get('height', 0))

    corners = data.get('rectangleCornerRadii')
    if isinstance(corners, list) and len(corners) == 4 and 'cornerRadius' not in data:
        if len(set(corners)) == 1:
            node['cornerRadius'] = corners[0]
        else:
            node['cornerRadius'] = MIXED
            for key, value in zip(('topLeftRadius', 'topRightRadius', 'bottomRightRadius', 'bottomLeftRadius'),
                                  corners):
                node[key] = value

    weights = data.get('individualStrokeWeights')
    if isinstance(weights, dict):
        for side in ('top', 'right', 'bottom', 'left'):
            if side in weights:
                node.setdefault(f"stroke{side.capitalize()}Weight", weights[side])

    if data.get('type') == 'TEXT' and isinstance(data.get('style'), dict):
        for key, value in _rest_text_fields(data['style']).items():
            node.setdefault(key, value)

    if isinstance(data.get('children'), list):
        child_origin = origin if data.get('type') == 'GROUP' else (box_x, box_y)
        node['children'] = [
            from_rest_tree(child, child_origin) if isinstance(child, dict) else child
            for child in data['children']
        ]
    return node


def parse_node(data: Dict[str, Any]) -> SceneNode:
    """Validate a JSON node tree. Raises pydantic.ValidationError on bad input."""
    if isinstance(data, dict):
        data = from_rest_tree(data)
    return _NODE_ADAPTER.validate_python(data)


# ============================================================================
# Safe accessors
# ============================================================================

def children_of(node: SceneNode) -> List[SceneNode]:
    if isinstance(node, ParentNode):
        return list(node.children)
    return []


def visible_children(node: SceneNode) -> List[SceneNode]:
    return [child for child in children_of(node) if child.visible]


def is_auto_layout(node: SceneNode) -> bool:
    return isinstance(node, HasAutoLayout) and node.layout_mode != 'NONE'


def is_wrap_layout(node: SceneNode) -> bool:
    return is_auto_layout(node) and node.layout_wrap == 'WRAP'


def is_vector_like(node: SceneNode) -> bool:
    return isinstance(node, VectorNode)


def is_component(node: SceneNode) -> bool:
    return isinstance(node, FrameNode) and node.type in ('COMPONENT', 'INSTANCE')


def visible_fills(node: SceneNode) -> List[Paint]:
    if not isinstance(node, HasPaints) or node.fills == MIXED:
        return []
    return [paint for paint in node.fills if paint.visible]


def visible_strokes(node: SceneNode) -> List[Paint]:
    if not isinstance(node, HasPaints):
        return []
    return [paint for paint in node.strokes if paint.visible]


def visible_effects(node: SceneNode) -> List[Effect]:
    if not isinstance(node, HasEffects):
        return []
    return [effect for effect in node.effects if effect.visible]


def first_solid_fill(node: SceneNode) -> Optional[Paint]:
    for paint in visible_fills(node):
        if paint.type == 'SOLID':
            return paint
    return None


def image_fill(node: SceneNode) -> Optional[Paint]:
    for paint in visible_fills(node):
        if paint.type == 'IMAGE':
            return paint
    return None


def has_image_fill(node: SceneNode) -> bool:
    return image_fill(node) is not None


def font_size_of(node: SceneNode) -> Optional[float]:
    """Numeric font size, or None when absent or mixed."""
    if isinstance(node, HasTypography) and isinstance(node.font_size, (int, float)):
        return float(node.font_size)
    return None


def font_name_of(node: SceneNode) -> Optional[FontName]:
    if isinstance(node, HasTypography) and isinstance(node.font_name, FontName):
        return node.font_name
    return None


def uniform_radius(node: SceneNode) -> Optional[float]:
    if isinstance(node, HasCorners) and isinstance(node.corner_radius, (int, float)):
        return float(node.corner_radius)
    return None


def corner_radii(node: SceneNode) -> Optional[Tuple[float, float, float, float]]:
    """Per-corner radii (tl, tr, br, bl) when the radius is mixed."""
    if isinstance(node, HasCorners) and node.corner_radius == MIXED:
        return (node.top_left_radius, node.top_right_radius,
                node.bottom_right_radius, node.bottom_left_radius)
    return None


def first_text(node: SceneNode) -> Optional[TextNode]:
    """Depth-first first visible text descendant (or the node itself)."""
    stack = [node]
    while stack:
        current = stack.pop()
        if not current.visible:
            continue
        if isinstance(current, TextNode):
            return current
        stack.extend(reversed(children_of(current)))
    return None


def walk(node: SceneNode, include_hidden: bool = False):
    """Pre-order traversal, iterative."""
    stack = [node]
    while stack:
        current = stack.pop()
        if not include_hidden and not current.visible:
            continue
        yield current
        stack.extend(reversed(children_of(current)))
