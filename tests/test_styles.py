"""Tests for per-node Tailwind class generation."""
from conftest import solid, text
from figma_tw.nodes import parse_node
from figma_tw.registry import ScaleResolver, TokenRegistry
from figma_tw.styles import ROOT_CONTEXT, ParentContext, node_to_classes, rotation_class, shadow_css


def classes_for(data, parent=ROOT_CONTEXT, namer=None):
    return node_to_classes(parse_node(data), parent, namer or ScaleResolver())


ROW_PARENT = ParentContext(is_auto_layout=True, layout_mode='HORIZONTAL')


class TestDashedBorder:
    """Verify dashed borders are rendered correctly."""

    def test_dashed_border(self, node_with_dashed_stroke):
        classes = classes_for(node_with_dashed_stroke)
        assert 'border-dashed' in classes, "Dashed stroke should add border-dashed"
        assert 'border-2' in classes
        assert 'border-black' in classes

    def test_solid_border_no_dashes(self):
        node = {
            'type': 'RECTANGLE',
            'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 200, 'height': 100},
            'fills': [],
            'strokes': [solid(0, 0, 0)],
            'strokeWeight': 1,
            'strokeAlign': 'INSIDE',
        }
        classes = classes_for(node)
        assert 'border' in classes
        assert 'border-dashed' not in classes

    def test_zero_weight_has_no_border(self):
        node = {'type': 'RECTANGLE', 'width': 10, 'height': 10, 'strokes': [solid(0, 0, 0)], 'strokeWeight': 0}
        assert not any(cls.startswith('border') for cls in classes_for(node))

    def test_arbitrary_border_width(self):
        node = {'type': 'RECTANGLE', 'width': 10, 'height': 10, 'strokes': [solid(0, 0, 0)], 'strokeWeight': 3}
        assert 'border-[3px]' in classes_for(node)


class TestIndividualBorderWidths:
    """Verify individual border widths are used when present."""

    def test_individual_borders(self, node_with_individual_borders):
        classes = classes_for(node_with_individual_borders)
        assert 'border-t-2' in classes, "Should render individual top border"
        assert 'border-b-4' in classes, "Should render individual bottom border"
        assert not any(cls.startswith(('border-r', 'border-l')) for cls in classes), \
            "Zero-width sides should be omitted"

    def test_rest_individual_stroke_weights(self):
        node = {
            'type': 'RECTANGLE',
            'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 200, 'height': 100},
            'strokes': [solid(0, 0, 0)],
            'strokeWeight': 1,
            'individualStrokeWeights': {'top': 0, 'right': 0, 'bottom': 1, 'left': 0},
        }
        classes = classes_for(node)
        assert 'border-b' in classes
        assert 'border' not in classes


class TestBlurEffects:
    """Verify background blur and layer blur map to different utilities."""

    def test_backdrop_blur(self, node_with_background_blur):
        classes = classes_for(node_with_background_blur)
        assert 'backdrop-blur-sm' in classes, "BACKGROUND_BLUR should map to backdrop-blur"
        assert not any(cls.startswith('blur-') for cls in classes), "Should not use layer blur"

    def test_translucent_fill(self, node_with_background_blur):
        assert 'bg-[#ffffff80]' in classes_for(node_with_background_blur)

    def test_layer_blur(self):
        node = {'type': 'RECTANGLE', 'width': 10, 'height': 10,
                'effects': [{'type': 'LAYER_BLUR', 'visible': True, 'radius': 4}]}
        assert 'blur-xs' in classes_for(node)


class TestShadows:
    """Verify inset, drop and layered shadows."""

    def test_inner_shadow(self, node_with_inner_shadow):
        classes = classes_for(node_with_inner_shadow)
        assert 'shadow-[inset_0px_2px_4px_0px_#00000040]' in classes, "INNER_SHADOW should use inset"

    def test_drop_shadow_uses_named_class(self):
        node = {'type': 'RECTANGLE', 'width': 10, 'height': 10, 'effects': [{
            'type': 'DROP_SHADOW', 'radius': 6, 'offset': {'x': 0, 'y': 4},
            'color': {'r': 0, 'g': 0, 'b': 0, 'a': 0.1},
        }]}
        assert 'shadow' in classes_for(node)

    def test_mixed_shadows(self, node_with_inner_shadow):
        node_with_inner_shadow['effects'].insert(0, {
            'type': 'DROP_SHADOW', 'visible': True, 'radius': 6, 'spread': 0,
            'color': {'r': 0, 'g': 0, 'b': 0, 'a': 0.1}, 'offset': {'x': 0, 'y': 4},
        })
        shadows = [cls for cls in classes_for(node_with_inner_shadow) if cls.startswith('shadow')]
        assert shadows == ['shadow-[0px_4px_6px_0px_#0000001a,_inset_0px_2px_4px_0px_#00000040]']

    def test_hidden_effect_ignored(self, node_with_inner_shadow):
        node_with_inner_shadow['effects'][0]['visible'] = False
        assert not any(cls.startswith('shadow') for cls in classes_for(node_with_inner_shadow))

    def test_shadow_css(self, node_with_inner_shadow):
        effect = parse_node(node_with_inner_shadow).effects[0]
        assert shadow_css(effect) == 'inset 0px 2px 4px 0px #00000040'

    def test_token_mode_registers_shadow(self, node_with_inner_shadow):
        registry = TokenRegistry()
        classes = classes_for(node_with_inner_shadow, namer=registry)
        assert 'shadow-base' in classes
        assert '--shadow-base: inset 0px 2px 4px 0px #00000040;' in registry.build_theme_css()


class TestGradientFills:
    """Verify gradient fills in both output modes."""

    def test_radial_gradient(self, node_with_radial_gradient):
        classes = classes_for(node_with_radial_gradient)
        assert 'bg-[radial-gradient(ellipse_50%_50%_at_50%_50%,_#ff0000_0%,_#0000ff_100%)]' in classes

    def test_linear_gradient_token(self, node_with_linear_gradient):
        registry = TokenRegistry()
        classes = classes_for(node_with_linear_gradient, namer=registry)
        assert 'bg-[image:var(--gradient-1)]' in classes

    def test_gradient_text_is_clipped(self, node_with_linear_gradient):
        node = text('Headline', 'Hi', fills=node_with_linear_gradient['fills'])
        classes = classes_for(node)
        assert 'bg-clip-text' in classes
        assert 'text-transparent' in classes


class TestLayoutClasses:
    """Verify flex, gap, padding and sizing classes."""

    def test_auto_layout_row(self, button_frame):
        classes = classes_for(button_frame)
        assert classes[:5] == ['flex', 'justify-center', 'items-center', 'gap-2', 'px-4']
        assert 'py-2' in classes

    def test_wrap_with_different_counter_gap(self):
        node = {'type': 'FRAME', 'width': 300, 'height': 200, 'layoutMode': 'HORIZONTAL',
                'layoutWrap': 'WRAP', 'itemSpacing': 16, 'counterAxisSpacing': 24}
        classes = classes_for(node)
        assert 'flex-wrap' in classes
        assert 'gap-x-4' in classes
        assert 'gap-y-6' in classes

    def test_grid(self):
        node = {'type': 'FRAME', 'width': 300, 'height': 200, 'layoutMode': 'GRID', 'gridColumnCount': 3}
        classes = classes_for(node)
        assert classes[:2] == ['grid', 'grid-cols-3']

    def test_freeform_root_has_fixed_size(self):
        node = {'type': 'RECTANGLE', 'width': 64, 'height': 32}
        assert classes_for(node) == ['w-16', 'h-8']

    def test_fill_in_row_parent(self):
        node = {'type': 'RECTANGLE', 'width': 64, 'height': 32,
                'layoutSizingHorizontal': 'FILL', 'layoutSizingVertical': 'FIXED'}
        assert classes_for(node, ROW_PARENT) == ['flex-1', 'h-8']

    def test_wrap_column_width(self):
        parent = ParentContext(is_auto_layout=True, layout_mode='HORIZONTAL', wrap_columns=2, wrap_gap=16)
        node = {'type': 'RECTANGLE', 'width': 100, 'height': 20}
        assert 'w-[calc(50%_-_8px)]' in classes_for(node, parent)

    def test_clips_content(self):
        node = {'type': 'FRAME', 'width': 10, 'height': 10, 'clipsContent': True}
        assert 'overflow-hidden' in classes_for(node)

    def test_mixed_corners(self):
        node = {'type': 'RECTANGLE', 'width': 10, 'height': 10, 'cornerRadius': 'mixed',
                'topLeftRadius': 8, 'topRightRadius': 8}
        classes = classes_for(node)
        assert 'rounded-tl-lg' in classes
        assert 'rounded-tr-lg' in classes
        assert not any(cls.startswith(('rounded-br', 'rounded-bl')) for cls in classes)

    def test_rest_corner_radii(self):
        node = {'type': 'RECTANGLE', 'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 10, 'height': 10},
                'rectangleCornerRadii': [4, 4, 0, 0]}
        classes = classes_for(node)
        assert 'rounded-tl-sm' in classes
        assert 'rounded-tr-sm' in classes


class TestTextClasses:
    """Verify typography classes."""

    def test_heading(self):
        node = text('Title', 'Hello', size=36, style='Bold Italic', family='Playfair Display',
                    lineHeight={'unit': 'PERCENT', 'value': 125}, textCase='UPPER',
                    textAlignHorizontal='CENTER')
        classes = classes_for(node, ROW_PARENT)
        for expected in ('text-4xl', 'font-bold', 'font-serif', 'italic', 'leading-tight',
                         'text-center', 'uppercase'):
            assert expected in classes, f"Missing {expected} in {classes}"

    def test_numeric_weight_wins_over_style(self):
        node = text('Body', 'Hi', style='Regular', fontWeight=500)
        assert 'font-medium' in classes_for(node, ROW_PARENT)

    def test_regular_weight_omitted(self):
        node = text('Body', 'Hi')
        assert not any(cls.startswith('font-') for cls in classes_for(node, ROW_PARENT))

    def test_tracking(self):
        node = text('Caps', 'HI', letterSpacing={'unit': 'PERCENT', 'value': 5})
        assert 'tracking-wider' in classes_for(node, ROW_PARENT)

    def test_decoration(self):
        node = text('Link', 'Docs', textDecoration='UNDERLINE')
        assert 'underline' in classes_for(node, ROW_PARENT)


class TestAppearance:
    """Verify opacity, rotation and blend modes."""

    def test_opacity(self):
        node = {'type': 'RECTANGLE', 'width': 4, 'height': 4, 'opacity': 0.5}
        assert 'opacity-50' in classes_for(node)

    def test_rotation_direction(self):
        assert rotation_class(90) == '-rotate-90'
        assert rotation_class(-45) == 'rotate-45'
        assert rotation_class(-10) == 'rotate-[10deg]'
        assert rotation_class(360) == ''

    def test_blend_mode(self):
        node = {'type': 'RECTANGLE', 'width': 4, 'height': 4, 'blendMode': 'MULTIPLY'}
        assert 'mix-blend-multiply' in classes_for(node)

    def test_hidden_node_has_no_classes(self):
        node = {'type': 'RECTANGLE', 'width': 4, 'height': 4, 'visible': False, 'opacity': 0.5}
        assert classes_for(node) == []
