"""Tests for the token scan and token CSS generation."""
from conftest import solid, text
from figma_tw.base import ColorValue, GradientDef, GradientGeometry, GradientStop
from figma_tw.colors import ScannedColor
from figma_tw.config import GenerateOptions
from figma_tw.nodes import parse_node
from figma_tw.scanner import (
    ScannedAnimation,
    ScannedShadow,
    ScannedTokens,
    ScannedTypography,
    generate_scanned_css,
    get_size_labels,
    get_typo_roles,
    scan_nodes_for_tokens,
)

TW = GenerateOptions(default_classes=True)


def css_lines(tokens, opts=None):
    return [line.strip() for line in generate_scanned_css(tokens, opts).full.splitlines()]


class TestScan:
    """Verify raw token collection from a node tree."""

    def test_colors_with_roles_and_counts(self, page_tree):
        tokens = scan_nodes_for_tokens(parse_node(page_tree))
        colors = {c.hex: c for c in tokens.colors}
        assert colors['#ffffff'].used_as == {'fill', 'text'}
        assert colors['#111827'].count == 5
        assert colors['#111827'].used_as == {'text'}
        assert colors['#3b82f6'].used_as == {'fill'}

    def test_typography_sorted_largest_first(self, page_tree):
        tokens = scan_nodes_for_tokens(parse_node(page_tree))
        assert [t.font_size for t in tokens.typography] == [36, 16, 16]
        title = tokens.typography[0]
        assert (title.font_family, title.font_style, title.line_height) == ('Inter', 'Bold', 1.11)

    def test_spacing_from_auto_layout_only(self, page_tree):
        tokens = scan_nodes_for_tokens(parse_node(page_tree))
        assert tokens.spacing == [4, 8, 16, 24]

    def test_radii(self, page_tree):
        assert scan_nodes_for_tokens(parse_node(page_tree)).radii == [8]

    def test_hidden_nodes_ignored(self, page_tree):
        page_tree['children'][3]['visible'] = False
        tokens = scan_nodes_for_tokens(parse_node(page_tree))
        assert '#3b82f6' not in {c.hex for c in tokens.colors}
        assert tokens.radii == []

    def test_shadows_deduplicated(self, node_with_inner_shadow):
        node_with_inner_shadow['effects'].append(dict(node_with_inner_shadow['effects'][0]))
        tokens = scan_nodes_for_tokens(parse_node(node_with_inner_shadow))
        assert tokens.shadows == [ScannedShadow('inset', 0, 2, 4, 0, '#00000040')]

    def test_gradients(self, node_with_linear_gradient, node_with_radial_gradient):
        root = parse_node({'type': 'FRAME', 'width': 10, 'height': 10,
                           'children': [node_with_linear_gradient, node_with_radial_gradient,
                                        node_with_linear_gradient]})
        gradients = scan_nodes_for_tokens(root).gradients
        assert [g.type for g in gradients] == ['linear', 'radial']

    def test_transitions(self):
        node = {'type': 'FRAME', 'width': 10, 'height': 10, 'reactions': [
            {'action': {'type': 'NODE', 'transition': {'type': 'DISSOLVE', 'duration': 0.3,
                                                         'easing': {'type': 'EASE_OUT'}}}},
            {'action': {'type': 'NODE', 'transition': {'type': 'DISSOLVE', 'duration': 0.2}}},
            {'action': {'type': 'BACK'}},
        ]}
        tokens = scan_nodes_for_tokens(parse_node(node))
        assert tokens.animations == [ScannedAnimation(200, 'EASE_IN_AND_OUT'), ScannedAnimation(300, 'EASE_OUT')]

    def test_to_dict(self, page_tree):
        data = scan_nodes_for_tokens(parse_node(page_tree)).to_dict()
        assert set(data) == {'colors', 'typography', 'spacing', 'radii', 'shadows', 'gradients', 'animations'}
        assert data['typography'][0]['font_size'] == 36


class TestLabels:
    """Verify size labels and typographic roles."""

    def test_size_labels(self):
        assert get_size_labels(2) == ['sm', 'md']
        assert get_size_labels(4) == ['xs', 'sm', 'md', 'lg']
        assert get_size_labels(11)[-2:] == ['6xl', '7xl']

    def test_typo_roles(self):
        assert get_typo_roles(3) == ['h1', 'h2', 'h3']
        assert get_typo_roles(8)[-1] == 'style-8'


class TestScannedCSS:
    """Verify the @theme block built from scanned tokens."""

    def test_block_markers(self):
        full = generate_scanned_css(ScannedTokens()).full
        assert full == '@theme {\n}\n'

    def test_spacing_labels_ascending(self):
        lines = css_lines(ScannedTokens(spacing=[4, 8, 12, 16]))
        spacing = [line for line in lines if line.startswith('--space-')]
        assert spacing == [
            '--space-xs: 0.250rem;',
            '--space-sm: 0.500rem;',
            '--space-md: 0.750rem;',
            '--space-lg: 1.000rem;',
        ]

    def test_spacing_base_unit_in_tailwind_mode(self):
        assert '--spacing: 0.250rem;' in css_lines(ScannedTokens(spacing=[4, 8, 12, 16]), TW)

    def test_missing_weight_defaults_to_400(self):
        lines = css_lines(ScannedTokens(typography=[ScannedTypography(font_size=16)]))
        assert '--font-weight-400: 400;' in lines
        assert not any(line.startswith('--leading-') for line in lines)

    def test_font_sizes_by_role(self):
        tokens = ScannedTokens(typography=[ScannedTypography(32), ScannedTypography(24), ScannedTypography(16)])
        lines = css_lines(tokens)
        assert '--text-h1: 2.000rem;' in lines
        assert '--text-h3: 1.000rem;' in lines

    def test_font_sizes_snap_without_reuse(self):
        tokens = ScannedTokens(typography=[ScannedTypography(16), ScannedTypography(17)])
        lines = css_lines(tokens, TW)
        assert '--text-base: 1.000rem;' in lines
        assert '--text-lg: 1.063rem;' in lines

    def test_scalable_font_size(self):
        opts = GenerateOptions(scalable_font_size=True)
        lines = css_lines(ScannedTokens(typography=[ScannedTypography(16)]), opts)
        assert any(line.startswith('--text-h1: clamp(0.750rem,') for line in lines)

    def test_radius_full(self):
        lines = css_lines(ScannedTokens(radii=[4, 9999]), TW)
        assert '--radius-sm: 0.250rem;' in lines
        assert '--radius-full: 9999px;' in lines

    def test_radius_labels(self):
        assert '--radius-md: 8px;' in css_lines(ScannedTokens(radii=[4, 8]))

    def test_gradient(self):
        gradient = GradientDef(
            type='linear',
            stops=(GradientStop(ColorValue(1, 0, 0), 0), GradientStop(ColorValue(0, 0, 1), 1)),
            geometry=GradientGeometry(angle=90),
        )
        lines = css_lines(ScannedTokens(gradients=[gradient]))
        assert '--gradient-1: linear-gradient(90deg, #ff0000 0%, #0000ff 100%);' in lines

    def test_shadows_by_blur(self):
        tokens = ScannedTokens(shadows=[
            ScannedShadow('', 0, 1, 2, 0, '#0000000d'),
            ScannedShadow('', 0, 10, 15, -3, '#0000001a'),
        ])
        lines = css_lines(tokens, TW)
        assert '--shadow-xs: 0px 1px 2px 0px #0000000d;' in lines
        assert '--shadow-sm: 0px 10px 15px -3px #0000001a;' in lines

    def test_animations(self):
        tokens = ScannedTokens(animations=[ScannedAnimation(150, 'EASE_OUT'), ScannedAnimation(160, 'EASE_OUT')])
        lines = css_lines(tokens)
        assert '--duration-150: 150ms;' in lines
        assert '--duration-200: 200ms;' in lines
        assert lines.count('--ease-ease-out: ease-out;') == 1

    def test_colors_plain_palette(self):
        tokens = ScannedTokens(colors=[ScannedColor('#3b82f6', 3, {'fill'}), ScannedColor('#ef4444', 1, {'fill'})])
        lines = css_lines(tokens)
        assert '--color-blue-500: #3b82f6;' in lines
        assert '--color-red-500: #ef4444;' in lines

    def test_colors_semantic_roles(self, page_tree):
        tokens = scan_nodes_for_tokens(parse_node(page_tree))
        full = generate_scanned_css(tokens, TW).full
        assert '  /* Colors */\n  --color-background: #ffffff;\n' in full
        assert '--color-foreground: #111827;' in full

    def test_font_families(self):
        tokens = ScannedTokens(typography=[
            ScannedTypography(16, 'Inter'), ScannedTypography(14, 'Roboto'), ScannedTypography(12, 'Fira Code'),
        ])
        tw_lines = css_lines(tokens, TW)
        assert '--font-sans: Inter, ui-sans-serif, system-ui, sans-serif;' in tw_lines
        assert not any('Roboto' in line for line in tw_lines), "One family per kind"
        assert '--font-mono: "Fira Code", ui-monospace, SFMono-Regular, monospace;' in tw_lines
        assert '--font-family-fira-code: "Fira Code";' in css_lines(tokens)

    def test_excluded_categories(self, page_tree):
        tokens = scan_nodes_for_tokens(parse_node(page_tree))
        output = generate_scanned_css(tokens, GenerateOptions(colors=False, spacing=False))
        labels = [section.label for section in output.sections]
        assert 'Colors' not in labels
        assert 'Spacing' not in labels
        assert 'Font Sizes' in labels

    def test_sections_concatenate_to_full(self, page_tree):
        output = generate_scanned_css(scan_nodes_for_tokens(parse_node(page_tree)))
        assert output.full == '@theme {\n' + ''.join(s.css for s in output.sections) + '}\n'

    def test_deterministic(self, page_tree):
        first = generate_scanned_css(scan_nodes_for_tokens(parse_node(page_tree)), TW).full
        second = generate_scanned_css(scan_nodes_for_tokens(parse_node(page_tree)), TW).full
        assert first == second


class TestSolidHelpers:
    """Fixture helpers stay in sync with the plugin shape."""

    def test_text_helper(self):
        node = parse_node(text('T', 'x', fills=[solid(1, 0, 0)]))
        assert node.fills[0].solid_hex() == '#ff0000'
