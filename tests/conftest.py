"""Shared test fixtures: Figma node trees as JSON dicts."""
import base64

import pytest


def solid(r, g, b, a=1, opacity=1):
    return {'type': 'SOLID', 'visible': True, 'color': {'r': r, 'g': g, 'b': b, 'a': a}, 'opacity': opacity}


def text(name, characters, x=0, y=0, width=100, height=20, size=16, style='Regular', family='Inter', **extra):
    node = {
        'type': 'TEXT', 'id': extra.pop('id', name), 'name': name, 'characters': characters,
        'x': x, 'y': y, 'width': width, 'height': height,
        'fontSize': size, 'fontName': {'family': family, 'style': style},
        'fills': [solid(0.067, 0.094, 0.153)],
    }
    node.update(extra)
    return node


SVG_BYTES = b'<svg xmlns="http://www.w3.org/2000/svg"></svg>'
PNG_BYTES = b'\x89PNG\r\n\x1a\nfake'


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the options file at an empty location so a user config never leaks in."""
    monkeypatch.setenv('FIGMA_TW_CONFIG_PATH', str(tmp_path / 'missing-config.json'))


@pytest.fixture
def node_with_dashed_stroke():
    """Figma node with dashed border stroke."""
    return {
        'type': 'RECTANGLE',
        'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 200, 'height': 100},
        'fills': [solid(1, 1, 1)],
        'strokes': [solid(0, 0, 0)],
        'strokeWeight': 2,
        'strokeAlign': 'INSIDE',
        'strokeDashes': [5, 3],
        'effects': [],
    }


@pytest.fixture
def node_with_individual_borders():
    """Figma node with different border widths per side."""
    return {
        'type': 'RECTANGLE',
        'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 200, 'height': 100},
        'fills': [solid(1, 1, 1)],
        'strokes': [solid(0, 0, 0)],
        'strokeWeight': 1,
        'strokeTopWeight': 2,
        'strokeRightWeight': 0,
        'strokeBottomWeight': 4,
        'strokeLeftWeight': 0,
        'strokeAlign': 'INSIDE',
        'effects': [],
    }


@pytest.fixture
def node_with_background_blur():
    """Figma node with BACKGROUND_BLUR effect."""
    return {
        'type': 'RECTANGLE',
        'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 200, 'height': 100},
        'fills': [solid(1, 1, 1, a=0.5, opacity=0.5)],
        'strokes': [],
        'effects': [{'type': 'BACKGROUND_BLUR', 'visible': True, 'radius': 10}],
    }


@pytest.fixture
def node_with_inner_shadow():
    """Figma node with INNER_SHADOW effect."""
    return {
        'type': 'RECTANGLE',
        'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 200, 'height': 100},
        'fills': [solid(1, 1, 1)],
        'strokes': [],
        'effects': [{
            'type': 'INNER_SHADOW', 'visible': True, 'radius': 4, 'spread': 0,
            'color': {'r': 0, 'g': 0, 'b': 0, 'a': 0.25},
            'offset': {'x': 0, 'y': 2}
        }],
    }


@pytest.fixture
def node_with_radial_gradient():
    """Figma node with RADIAL gradient fill (300x150 dimensions)."""
    return {
        'type': 'RECTANGLE',
        'absoluteBoundingBox': {'x': 0, 'y': 0, 'width': 300, 'height': 150},
        'fills': [{
            'type': 'GRADIENT_RADIAL', 'visible': True, 'opacity': 1,
            'gradientStops': [
                {'color': {'r': 1, 'g': 0, 'b': 0, 'a': 1}, 'position': 0},
                {'color': {'r': 0, 'g': 0, 'b': 1, 'a': 1}, 'position': 1},
            ],
            'gradientHandlePositions': [
                {'x': 0.5, 'y': 0.5},
                {'x': 1.0, 'y': 0.5},
                {'x': 0.5, 'y': 1.0},
            ]
        }],
        'strokes': [],
        'effects': [],
    }


@pytest.fixture
def node_with_linear_gradient():
    """Left-to-right red to blue gradient."""
    return {
        'type': 'RECTANGLE', 'name': 'Gradient', 'width': 100, 'height': 100,
        'fills': [{
            'type': 'GRADIENT_LINEAR', 'visible': True, 'opacity': 1,
            'gradientStops': [
                {'color': {'r': 1, 'g': 0, 'b': 0, 'a': 1}, 'position': 0},
                {'color': {'r': 0, 'g': 0, 'b': 1, 'a': 1}, 'position': 1},
            ],
            'gradientHandlePositions': [{'x': 0, 'y': 0.5}, {'x': 1, 'y': 0.5}, {'x': 0, 'y': 1}],
        }],
    }


@pytest.fixture
def button_frame():
    """Small auto-layout frame with a fill and a single label."""
    return {
        'type': 'FRAME', 'id': '2:1', 'name': 'Primary', 'x': 0, 'y': 0, 'width': 120, 'height': 40,
        'layoutMode': 'HORIZONTAL', 'itemSpacing': 8,
        'paddingTop': 8, 'paddingBottom': 8, 'paddingLeft': 16, 'paddingRight': 16,
        'primaryAxisAlignItems': 'CENTER', 'counterAxisAlignItems': 'CENTER',
        'cornerRadius': 8,
        'fills': [solid(0.231, 0.510, 0.965)],
        'children': [text('Label', 'Get started', width=88, height=24, style='Semi Bold', id='2:2',
                          fills=[solid(1, 1, 1)])],
    }


@pytest.fixture
def icon_frame():
    """Frame named like an icon holding two vector paths."""
    return {
        'type': 'FRAME', 'id': '3:1', 'name': 'Icon/Search', 'x': 0, 'y': 0, 'width': 24, 'height': 24,
        'children': [
            {'type': 'VECTOR', 'id': '3:2', 'name': 'Circle', 'x': 2, 'y': 2, 'width': 16, 'height': 16},
            {'type': 'VECTOR', 'id': '3:3', 'name': 'Handle', 'x': 15, 'y': 15, 'width': 7, 'height': 7},
        ],
    }


@pytest.fixture
def page_tree(button_frame, icon_frame):
    """A landing section: heading, body copy, a three-item list, a button, an icon and a photo."""
    list_items = [
        text(f'Item {i}', f'Feature {i}', y=i * 28, width=200, height=24, id=f'4:{i}')
        for i in range(1, 4)
    ]
    return {
        'type': 'FRAME', 'id': '1:1', 'name': 'Landing', 'x': 0, 'y': 0, 'width': 640, 'height': 800,
        'layoutMode': 'VERTICAL', 'itemSpacing': 16,
        'paddingTop': 24, 'paddingBottom': 24, 'paddingLeft': 24, 'paddingRight': 24,
        'fills': [solid(1, 1, 1)],
        'children': [
            text('Title', 'Ship faster & better', width=592, height=40, size=36, style='Bold', id='1:2',
                 lineHeight={'unit': 'PIXELS', 'value': 40}),
            text('Body', 'Design tokens <straight> from Figma', width=592, height=24, id='1:3',
                 lineHeight={'unit': 'PERCENT', 'value': 150}),
            {
                'type': 'FRAME', 'id': '4:0', 'name': 'Features', 'width': 592, 'height': 84,
                'layoutMode': 'VERTICAL', 'itemSpacing': 4,
                'children': list_items,
            },
            button_frame,
            icon_frame,
            {
                'type': 'RECTANGLE', 'id': '5:1', 'name': 'Photo', 'width': 160, 'height': 120,
                'fills': [{'type': 'IMAGE', 'visible': True, 'scaleMode': 'FILL', 'imageHash': 'abc'}],
            },
        ],
    }


@pytest.fixture
def page_payloads():
    """Pre-rendered exports for the icon and the photo in ``page_tree``."""
    return {
        '3:1:SVG': base64.b64encode(SVG_BYTES).decode('ascii'),
        '5:1:PNG': base64.b64encode(PNG_BYTES).decode('ascii'),
    }
