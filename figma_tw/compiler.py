"""
Markup compiler.

Walks a design node tree depth-first and emits indented HTML annotated with
Tailwind classes, exporting raster and vector assets along the way. The walk
uses an explicit work stack; closing tags are pushed onto the same stack as
plain strings so they come out after the children.

All per-run state lives in ``RunContext``. Nothing is shared between calls,
so compiling the same tree twice gives byte-identical output.
"""

import html
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple, Union

from .assets import (
    MIME_TYPES,
    Asset,
    ExportConstraint,
    ExportFailure,
    ExportFormat,
    Exporter,
    MarkupSink,
    asset_placeholder,
    export_node,
    to_asset_file_name,
)
from .base import round_half_up
from .composite import image_usage, should_flatten_to_image
from .config import CompileOptions
from .layout import estimate_wrap_columns, infer_layout_from_children
from .nodes import (
    FrameNode,
    GroupNode,
    SceneNode,
    TextNode,
    VectorNode,
    has_image_fill,
    is_auto_layout,
    is_component,
    is_wrap_layout,
    visible_children,
)
from .registry import ScaleResolver, TokenRegistry
from .semantics import SemanticClassification, classify_node
from .styles import ROOT_CONTEXT, ParentContext, node_to_classes

logger = logging.getLogger(__name__)

INDENT = '  '
PLACEHOLDER_SRC = '/placeholder.svg'


@dataclass
class CompileResult:
    markup: str
    css: Optional[str]
    assets: Dict[str, Asset] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'markup': self.markup,
            'css': self.css,
            'assets': {asset_id: asset.to_dict() for asset_id, asset in self.assets.items()},
        }


class RunContext:
    """State for one compile run: token namer, asset ids and file names."""

    def __init__(self, exporter: Exporter, options: CompileOptions):
        self.exporter = exporter
        self.options = options
        if options.generate_css:
            self.namer: Union[TokenRegistry, ScaleResolver] = TokenRegistry(options.theme_colors)
        else:
            self.namer = ScaleResolver(options.theme_colors)
        self.assets: Dict[str, Asset] = {}
        self.used_file_names: Set[str] = set()
        self.asset_counter = 0

    def next_asset_id(self) -> str:
        self.asset_counter += 1
        return f"asset-{self.asset_counter}"

    async def export(self, node: SceneNode, format: ExportFormat, fallback_name: str) -> Optional[str]:
        """Export one node and record it; returns the asset id, or None on failure."""
        constraint = ExportConstraint('SCALE', self.options.image_scale) if format == 'PNG' else None
        result = await export_node(self.exporter, node, format, constraint)
        if isinstance(result, ExportFailure):
            return None
        asset_id = self.next_asset_id()
        ext = format.lower()
        self.assets[asset_id] = Asset(
            id=asset_id,
            data=result.data,
            mime_type=MIME_TYPES[format],
            file_name=to_asset_file_name(node.name or fallback_name, ext, self.used_file_names),
        )
        logger.debug("Exported %s as %s", node.name, asset_id)
        return asset_id

    def css(self) -> Optional[str]:
        if isinstance(self.namer, TokenRegistry):
            return self.namer.build_theme_css()
        return None


@dataclass(frozen=True)
class _Visit:
    node: SceneNode
    depth: int
    parent: ParentContext
    is_root: bool = False
    wrapper: Optional[str] = None


WorkItem = Union[_Visit, str]

# Sizing that belongs on the flex item; moved to the wrapper when there is one
ITEM_CLASSES = ('flex-1', 'self-stretch', 'w-full')


# ============================================================================
# Rendering helpers
# ============================================================================

def escape_text(text: str) -> str:
    escaped = html.escape(text or '', quote=False)
    return escaped.replace('\u2028', '\n').replace('\n', '<br />')


def _attr(value) -> str:
    # Values are always double-quoted; single quotes (CSS url()) stay readable
    return html.escape(str(value), quote=False).replace('"', '&quot;')


def render_open(tag: str, classes: Sequence[str], attrs: Sequence[Tuple[str, str]] = (),
                self_closing: bool = False) -> str:
    parts = [tag]
    if classes:
        parts.append(f'class="{" ".join(classes)}"')
    parts.extend(f'{key}="{_attr(value)}"' for key, value in attrs)
    body = ' '.join(parts)
    return f"<{body} />" if self_closing else f"<{body}>"


def position_classes(node: SceneNode, parent: ParentContext, namer) -> List[str]:
    """``absolute`` plus top/left offsets for layered or absolutely positioned children."""
    if not (parent.overlapping or node.layout_positioning == 'ABSOLUTE'):
        return []
    classes = ['absolute']
    top = round_half_up(node.y - parent.origin[1])
    left = round_half_up(node.x - parent.origin[0])
    if top > 0:
        classes.append(f"top-{namer.spacing(top)}")
    if left > 0:
        classes.append(f"left-{namer.spacing(left)}")
    return classes


def child_context(node: SceneNode) -> ParentContext:
    if isinstance(node, GroupNode):
        return ParentContext(overlapping=True, origin=(node.x, node.y), node=node)

    auto = is_auto_layout(node)
    wrap_columns = None
    wrap_gap = 0.0
    if is_wrap_layout(node):
        children = visible_children(node)
        if children:
            inner = node.width - node.padding_left - node.padding_right
            wrap_gap = node.item_spacing
            wrap_columns = estimate_wrap_columns(inner, wrap_gap, children[0].width)
    overlapping = not auto and infer_layout_from_children(node.children) == 'overlapping'
    return ParentContext(
        is_auto_layout=auto,
        layout_mode=node.layout_mode if auto else 'NONE',
        wrap_columns=wrap_columns,
        wrap_gap=wrap_gap,
        overlapping=overlapping,
        node=node,
    )


def is_item_class(cls: str) -> bool:
    return cls in ITEM_CLASSES or cls.startswith('w-[calc(')


def split_item_classes(classes: List[str]) -> Tuple[List[str], List[str]]:
    """Split flex-item sizing from a node's own classes.

    Returns (wrapper classes, node classes). A node whose width moved to the
    wrapper fills it with ``w-full``.
    """
    item = [cls for cls in classes if is_item_class(cls)]
    if not item:
        return [], classes
    own = [cls for cls in classes if not is_item_class(cls)]
    if any(cls.startswith('w-') for cls in item):
        own.insert(0, 'w-full')
    return item, own


# ============================================================================
# Compiler
# ============================================================================

class MarkupCompiler:
    def __init__(self, context: RunContext):
        self.ctx = context
        self.lines: List[str] = []

    def emit(self, depth: int, text: str) -> None:
        self.lines.append(f"{INDENT * depth}{text}\n")

    async def run(self, root: SceneNode) -> str:
        stack: List[WorkItem] = [_Visit(root, 0, ROOT_CONTEXT, is_root=True)]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                self.lines.append(item)
                continue
            await self.visit(item, stack)
        return ''.join(self.lines)

    async def visit(self, item: _Visit, stack: List[WorkItem]) -> None:
        node, depth, parent = item.node, item.depth, item.parent
        if depth > self.ctx.options.max_depth or not node.visible:
            return

        namer = self.ctx.namer
        semantic = classify_node(node, item.is_root, self.ctx.options.component_map)
        if semantic.substitute:
            self.open_wrapper(item, [], stack)
            self.emit(depth, f"<{semantic.substitute} />")
            return

        flatten = should_flatten_to_image(node)
        # An image fill is exported with everything drawn on top of it
        as_image = flatten or has_image_fill(node)
        classes = node_to_classes(node, parent, namer, include_layout=not as_image)
        classes.extend(position_classes(node, parent, namer))
        if not as_image:
            classes.extend(cls for cls in semantic.extra_classes if cls not in classes)

        wrapper_classes: List[str] = []
        if item.wrapper:
            wrapper_classes, classes = split_item_classes(classes)
        self.open_wrapper(item, wrapper_classes, stack)

        if is_component(node):
            self.emit(depth, f"<!-- {node.name} -->")

        if flatten:
            await self.emit_vector(node, depth, classes)
            return
        if as_image:
            await self.emit_image(node, depth, classes, parent)
            return
        if isinstance(node, TextNode):
            self.emit(depth, f"{render_open(semantic.tag, classes, semantic.attrs)}"
                             f"{escape_text(node.characters)}</{semantic.tag}>")
            return
        if isinstance(node, VectorNode):
            await self.emit_vector(node, depth, classes)
            return
        if isinstance(node, GroupNode):
            classes = ['relative'] + [cls for cls in classes if cls != 'relative']
            # Self-closing tags cannot hold the group's layers
            if semantic.self_closing:
                classes = [cls for cls in classes if cls not in semantic.extra_classes]
                self.open_container(node, depth, 'div', classes, (), stack, None)
            else:
                self.open_container(node, depth, semantic.tag, classes, semantic.attrs, stack,
                                    semantic.wrap_children)
            return
        if isinstance(node, FrameNode) and not semantic.self_closing:
            if any(child.layout_positioning == 'ABSOLUTE' for child in visible_children(node)):
                classes.append('relative')
            self.open_container(node, depth, semantic.tag, classes, semantic.attrs, stack,
                                semantic.wrap_children)
            return

        # Rectangles and self-closing elements
        self.emit_leaf(depth, semantic, classes)

    def open_wrapper(self, item: _Visit, classes: List[str], stack: List[WorkItem]) -> None:
        """Open the list wrapper around a visited child; its closing tag follows the child."""
        if not item.wrapper:
            return
        depth = item.depth - 1
        self.emit(depth, render_open(item.wrapper, classes))
        stack.append(f"{INDENT * depth}</{item.wrapper}>\n")

    def emit_leaf(self, depth: int, semantic: SemanticClassification, classes: List[str]) -> None:
        if semantic.self_closing:
            self.emit(depth, render_open(semantic.tag, classes, semantic.attrs, self_closing=True))
        else:
            self.emit(depth, f"{render_open(semantic.tag, classes, semantic.attrs)}</{semantic.tag}>")

    def open_container(self, node: SceneNode, depth: int, tag: str, classes: List[str],
                       attrs, stack: List[WorkItem], wrap_children: Optional[str]) -> None:
        self.emit(depth, render_open(tag, classes, attrs))
        stack.append(f"{INDENT * depth}</{tag}>\n")

        context = child_context(node)
        children = visible_children(node)
        step = 2 if wrap_children else 1
        for child in reversed(children):
            stack.append(_Visit(child, depth + step, context, wrapper=wrap_children))

    async def emit_vector(self, node: SceneNode, depth: int, classes: List[str]) -> None:
        asset_id = await self.ctx.export(node, 'SVG', 'icon')
        name = node.name or 'icon'
        if asset_id is None:
            self.emit(depth, f"<!-- {name} -->")
            return
        attrs = (('src', asset_placeholder(asset_id)), ('alt', name),
                 ('width', round_half_up(node.width)), ('height', round_half_up(node.height)))
        self.emit(depth, render_open('img', classes, attrs, self_closing=True))

    async def emit_image(self, node: SceneNode, depth: int, classes: List[str],
                         parent: ParentContext) -> None:
        asset_id = await self.ctx.export(node, 'PNG', 'image')
        name = node.name or 'image'
        if asset_id is None:
            attrs = (('src', PLACEHOLDER_SRC), ('alt', name))
            self.emit(depth, render_open('img', classes, attrs, self_closing=True))
            return
        if image_usage(node, parent.node) == 'background':
            classes = classes + ['bg-cover', 'bg-center']
            style = f"background-image: url('{asset_placeholder(asset_id)}')"
            self.emit(depth, f"{render_open('div', classes, (('style', style),))}</div>")
            return
        attrs = (('src', asset_placeholder(asset_id)), ('alt', name))
        self.emit(depth, render_open('img', classes, attrs, self_closing=True))


async def compile_layer(root: SceneNode, exporter: Exporter, options: Optional[CompileOptions] = None,
                        sink: Optional[MarkupSink] = None) -> CompileResult:
    """Compile one layer tree to markup, theme CSS (optional) and assets."""
    options = options or CompileOptions()
    context = RunContext(exporter, options)
    markup = await MarkupCompiler(context).run(root)
    result = CompileResult(markup=markup, css=context.css(), assets=dict(context.assets))
    logger.info("Compiled %r: %d lines, %d assets", root.name, markup.count('\n'), len(result.assets))
    if sink is not None:
        sink.emit(result.markup, result.css, result.assets)
    return result
