"""
Semantic element detection.

Picks the output tag for a node. Precedence: mapped components, then text
sizes, then layer-name rules, then structural heuristics, then a generic
container.
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Pattern, Tuple

from .nodes import (
    FrameNode,
    RectangleNode,
    SceneNode,
    TextNode,
    first_solid_fill,
    first_text,
    font_size_of,
    is_auto_layout,
    is_component,
    visible_children,
    VectorNode,
)

DEFAULT_TEXT_SIZE = 16

# (min px, tag), largest first
HEADING_THRESHOLDS = ((32, 'h1'), (24, 'h2'), (20, 'h3'), (18, 'h4'))

# Calibrated structural thresholds
BUTTON_MAX_WIDTH = 300
BUTTON_MAX_HEIGHT = 60
LIST_MIN_ITEMS = 3
LIST_HEIGHT_TOLERANCE = 0.3
SEPARATOR_MAX_THICKNESS = 3
SEPARATOR_MIN_LENGTH = 30


@dataclass(frozen=True)
class SemanticClassification:
    tag: str
    extra_classes: Tuple[str, ...] = ()
    self_closing: bool = False
    attrs: Tuple[Tuple[str, str], ...] = ()
    wrap_children: Optional[str] = None
    substitute: Optional[str] = None


@dataclass(frozen=True)
class NameRule:
    pattern: Pattern
    tag: str
    self_closing: bool = False
    attrs: Tuple[Tuple[str, str], ...] = ()
    placeholder: bool = False


def _rule(pattern: str, tag: str, **kwargs) -> NameRule:
    return NameRule(pattern=re.compile(pattern, re.IGNORECASE), tag=tag, **kwargs)


NAME_RULES: Tuple[NameRule, ...] = (
    _rule(r'button|btn|(?<![a-z])cta(?![a-z])', 'button', attrs=(('type', 'button'),)),
    _rule(r'(?<![a-z])link(?![a-z])|anchor', 'a', attrs=(('href', '#'),)),
    _rule(r'(?<![a-z])nav(bar|igation)?(?![a-z])', 'nav'),
    _rule(r'header', 'header'),
    _rule(r'footer', 'footer'),
    _rule(r'sidebar|aside', 'aside'),
    _rule(r'input|textfield|text field', 'input', self_closing=True,
          attrs=(('type', 'text'),), placeholder=True),
    _rule(r'divider|separator', 'hr', self_closing=True),
    _rule(r'badge|chip|(?<![a-z])tag(?![a-z])', 'span'),
    _rule(r'radio', 'input', self_closing=True, attrs=(('type', 'radio'),)),
    _rule(r'checkbox|check box', 'input', self_closing=True, attrs=(('type', 'checkbox'),)),
)


def text_tag(node: SceneNode) -> str:
    """Heading level from font size; mixed sizes count as body text."""
    size = font_size_of(node)
    if size is None:
        size = DEFAULT_TEXT_SIZE
    for threshold, tag in HEADING_THRESHOLDS:
        if size >= threshold:
            return tag
    return 'p'


def component_substitute(node: SceneNode, component_map: Optional[Dict[str, str]]) -> Optional[str]:
    """Mapped component name for an instance/component, keyed by node id or layer name."""
    if not component_map or not is_component(node):
        return None
    return component_map.get(node.id) or component_map.get(node.name)


def match_name_rule(node: SceneNode) -> Optional[SemanticClassification]:
    name = node.name or ''
    for rule in NAME_RULES:
        if not rule.pattern.search(name):
            continue
        attrs = rule.attrs
        if rule.placeholder:
            text = first_text(node)
            if text is not None and text.characters:
                attrs = attrs + (('placeholder', text.characters),)
        extra = ('border-0',) if rule.tag == 'hr' else ()
        return SemanticClassification(
            tag=rule.tag,
            extra_classes=extra,
            self_closing=rule.self_closing,
            attrs=attrs,
        )
    return None


# ============================================================================
# Structural heuristics
# ============================================================================

def looks_like_button(node: SceneNode) -> bool:
    if not isinstance(node, FrameNode):
        return False
    if not (node.width < BUTTON_MAX_WIDTH and node.height <= BUTTON_MAX_HEIGHT):
        return False
    children = visible_children(node)
    if not 1 <= len(children) <= 2:
        return False
    if not any(isinstance(child, TextNode) for child in children):
        return False
    if not all(isinstance(child, (TextNode, VectorNode)) for child in children):
        return False
    return first_solid_fill(node) is not None


def looks_like_list(node: SceneNode) -> bool:
    if not is_auto_layout(node):
        return False
    children = visible_children(node)
    if len(children) < LIST_MIN_ITEMS:
        return False
    if len({child.type for child in children}) != 1:
        return False
    mean_height = sum(child.height for child in children) / len(children)
    if mean_height <= 0:
        return False
    return all(abs(child.height - mean_height) <= mean_height * LIST_HEIGHT_TOLERANCE
               for child in children)


def looks_like_separator(node: SceneNode) -> bool:
    if not isinstance(node, RectangleNode):
        return False
    thin = min(node.width, node.height)
    long = max(node.width, node.height)
    return thin < SEPARATOR_MAX_THICKNESS and long > SEPARATOR_MIN_LENGTH


def classify_node(node: SceneNode, is_root: bool = False,
                  component_map: Optional[Dict[str, str]] = None) -> SemanticClassification:
    substitute = component_substitute(node, component_map)
    if substitute:
        return SemanticClassification(tag=substitute, self_closing=True, substitute=substitute)

    if isinstance(node, TextNode):
        return SemanticClassification(tag=text_tag(node))

    by_name = match_name_rule(node)
    if by_name is not None:
        return by_name

    if looks_like_button(node):
        return SemanticClassification(tag='button', attrs=(('type', 'button'),))
    if looks_like_list(node):
        return SemanticClassification(tag='ul', extra_classes=('list-none',), wrap_children='li')
    if looks_like_separator(node):
        return SemanticClassification(tag='hr', extra_classes=('border-0',), self_closing=True)

    return SemanticClassification(tag='section' if is_root else 'div')
