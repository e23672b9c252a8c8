"""
Composite-image detection.

Decides when a subtree is really one picture (an icon built from several
paths, a logo) and should be exported as a single SVG instead of compiled to
markup, and whether an image fill is content (``<img>``) or decoration (a
background).
"""

import re
from typing import Literal, Optional

from .nodes import ParentNode, SceneNode, image_fill, is_auto_layout, is_vector_like, visible_children

ImageUsage = Literal['content', 'background']

ICON_NAME = re.compile(r'icon|logo|glyph|symbol|emblem|illustration|(?<![a-z])ico(?![a-z])', re.IGNORECASE)

# Auto-layout rows of icons this large are layout, not a compound icon
LARGE_GROUP_WIDTH = 100
LARGE_GROUP_CHILDREN = 2

CONTENT_IMAGE_NAME = re.compile(r'photo|image|img|avatar|picture|thumb|product|portrait|logo', re.IGNORECASE)
BACKGROUND_IMAGE_NAME = re.compile(r'(?<![a-z])bg(?![a-z])|background|backdrop|hero|cover|banner|pattern|texture|overlay',
                                   re.IGNORECASE)
SMALL_IMAGE_PX = 200
LARGE_IMAGE_PX = 600
PARENT_COVERAGE = 0.8


def is_vector_only_container(node: SceneNode) -> bool:
    if not isinstance(node, ParentNode):
        return False
    children = visible_children(node)
    return bool(children) and all(is_vector_like(child) for child in children)


def should_flatten_to_image(node: SceneNode) -> bool:
    if not isinstance(node, ParentNode):
        return False
    children = visible_children(node)
    if not children:
        return False

    if all(is_vector_like(child) for child in children):
        large = node.width > LARGE_GROUP_WIDTH and len(children) > LARGE_GROUP_CHILDREN
        return not (large and is_auto_layout(node))

    vectorish = all(is_vector_like(child) or is_vector_only_container(child) for child in children)
    if not vectorish:
        return False
    if ICON_NAME.search(node.name or ''):
        return True
    if not is_auto_layout(node):
        has_vector = any(is_vector_like(child) for child in children)
        has_container = any(is_vector_only_container(child) for child in children)
        return has_vector and has_container
    return False


def image_usage(node: SceneNode, parent: Optional[SceneNode] = None) -> ImageUsage:
    """Score whether an image fill is page content or decoration."""
    content = 0
    background = 0
    name = node.name or ''

    if CONTENT_IMAGE_NAME.search(name):
        content += 2
    if BACKGROUND_IMAGE_NAME.search(name):
        background += 2

    paint = image_fill(node)
    if paint is not None:
        if paint.scale_mode == 'TILE':
            background += 2
        elif paint.scale_mode in ('FIT', 'CROP'):
            content += 1

    if node.width < SMALL_IMAGE_PX and node.height < SMALL_IMAGE_PX:
        content += 1
    elif node.width >= LARGE_IMAGE_PX:
        background += 1

    if parent is not None and parent.width > 0 and parent.height > 0:
        coverage = (node.width * node.height) / (parent.width * parent.height)
        if coverage >= PARENT_COVERAGE:
            background += 2

    return 'background' if background > content else 'content'
