"""Tests for per-run token naming."""
from figma_tw.base import ColorValue, GradientDef, GradientGeometry, GradientStop
from figma_tw.registry import ScaleResolver, TokenRegistry


def red_to_blue():
    return GradientDef(
        type='linear',
        stops=(GradientStop(ColorValue(1, 0, 0), 0), GradientStop(ColorValue(0, 0, 1), 1)),
        geometry=GradientGeometry(angle=90),
    )


class TestTokenRegistryColors:
    """Verify color names are stable within a run."""

    def test_register_color_is_idempotent(self):
        registry = TokenRegistry()
        for hex_color in ('#3b82f6', '#123456', '#ffffff'):
            assert registry.register_color(hex_color) == registry.register_color(hex_color)

    def test_case_insensitive(self):
        registry = TokenRegistry()
        assert registry.register_color('#3B82F6') == registry.register_color('#3b82f6')

    def test_tailwind_name_used_when_known(self):
        assert TokenRegistry().register_color('#3b82f6') == 'blue-500'

    def test_unknown_color_gets_family_name(self):
        registry = TokenRegistry()
        assert registry.register_color('#3b82f6') == 'blue-500'
        assert registry.register_color('#2f6fe0') == 'blue-200'

    def test_theme_colors_override(self):
        registry = TokenRegistry({'#0F62FE': 'brand'})
        assert registry.register_color('#0f62fe') == 'brand'

    def test_names_never_shared(self):
        registry = TokenRegistry({'#0f62fe': 'brand', '#0043ce': 'brand'})
        first = registry.register_color('#0f62fe')
        second = registry.register_color('#0043ce')
        assert first == 'brand'
        assert second != first


class TestTokenRegistryScales:
    """Verify font size, spacing, radius, gradient and shadow names."""

    def test_font_size_collision_gets_suffix(self):
        registry = TokenRegistry()
        assert registry.register_font_size(16) == 'base'
        assert registry.register_font_size(17) == 'base-17'
        assert registry.register_font_size(16) == 'base'

    def test_spacing(self):
        registry = TokenRegistry()
        assert registry.register_spacing(16) == '4'
        assert registry.register_spacing(50) == '50'

    def test_radius_full(self):
        assert TokenRegistry().register_radius(9999) == 'full'

    def test_radius_collision(self):
        registry = TokenRegistry()
        assert registry.register_radius(8) == 'lg'
        assert registry.register_radius(9) == 'lg-9'

    def test_gradient_numbering(self):
        registry = TokenRegistry()
        assert registry.gradient(red_to_blue()) == '[image:var(--gradient-1)]'
        assert registry.register_gradient(red_to_blue()) == 'gradient-1'
        assert len(registry.gradients) == 1

    def test_shadow_names_by_blur(self):
        registry = TokenRegistry()
        assert registry.shadow('0px 4px 6px 0px #0000001a', 6) == 'shadow-base'
        assert registry.shadow('0px 1px 2px 0px #0000000d', 6) == 'shadow-base-2'
        assert registry.shadow('0px 8px 12px 0px #0000001a', 12) == 'shadow-md'


class TestThemeCSS:
    """Verify the @theme block built from registered tokens."""

    def test_sections_in_order(self):
        registry = TokenRegistry()
        registry.register_radius(9999)
        registry.register_color('#ffffff')
        registry.register_spacing(24)
        css = registry.build_theme_css()
        assert css == (
            '@theme {\n'
            '  /* Colors */\n'
            '  --color-white: #ffffff;\n'
            '\n'
            '  /* Spacing */\n'
            '  --spacing-6: 1.500rem;\n'
            '\n'
            '  /* Border Radius */\n'
            '  --radius-full: 9999px;\n'
            '}\n'
        )

    def test_gradient_token(self):
        registry = TokenRegistry()
        registry.register_gradient(red_to_blue())
        assert '--gradient-1: linear-gradient(90deg, #ff0000 0%, #0000ff 100%);' in registry.build_theme_css()

    def test_empty_registry(self):
        assert TokenRegistry().build_theme_css() == '@theme {\n}\n'


class TestScaleResolver:
    """Verify utility class naming without theme CSS."""

    def test_colors(self):
        resolver = ScaleResolver({'#0f62fe': 'brand'})
        assert resolver.color('#3B82F6') == 'blue-500'
        assert resolver.color('#0f62fe') == 'brand'
        assert resolver.color('#123456') == '[#123456]'

    def test_font_size(self):
        resolver = ScaleResolver()
        assert resolver.font_size(16) == 'base'
        assert resolver.font_size(15) == '[15px]'

    def test_radius(self):
        resolver = ScaleResolver()
        assert resolver.radius(8) == 'lg'
        assert resolver.radius(9999) == 'full'
        assert resolver.radius(10) == '[10px]'

    def test_gradient_is_arbitrary(self):
        assert ScaleResolver().gradient(red_to_blue()) == \
            '[linear-gradient(90deg,_#ff0000_0%,_#0000ff_100%)]'

    def test_shadow(self):
        resolver = ScaleResolver()
        assert resolver.shadow('0px 4px 6px 0px #0000001a', 6) == 'shadow'
        assert resolver.shadow('inset 0px 2px 4px 0px #00000040', 4) == \
            'shadow-[inset_0px_2px_4px_0px_#00000040]'

    def test_no_theme_css(self):
        assert ScaleResolver().build_theme_css() is None
