"""
Layout inference for freeform frames and column sizing for wrap containers.
"""

from typing import Literal, Sequence

from .base import Box, boxes_overlap, fmt_num, round_half_up
from .nodes import SceneNode

LayoutKind = Literal['row', 'column', 'overlapping']

# Overlapping pairs above this share of the child count means layered content
OVERLAP_RATIO = 0.3
# Row when the spread of top edges stays under this share of the mean height
ROW_Y_SPREAD_RATIO = 0.5


def node_box(node: SceneNode) -> Box:
    return Box(node.x, node.y, node.width, node.height)


def infer_layout_from_children(children: Sequence[SceneNode]) -> LayoutKind:
    """Classify freeform siblings as a row, a column or overlapping layers."""
    visible = [child for child in children if child.visible]
    if len(visible) <= 1:
        return 'column'

    boxes = [node_box(child) for child in visible]
    overlaps = 0
    for i in range(len(boxes)):
        for j in range(i + 1, len(boxes)):
            if boxes_overlap(boxes[i], boxes[j]):
                overlaps += 1
    if overlaps > len(boxes) * OVERLAP_RATIO:
        return 'overlapping'

    tops = [box.y for box in boxes]
    y_range = max(tops) - min(tops)
    mean_height = sum(box.height for box in boxes) / len(boxes)
    if y_range < mean_height * ROW_Y_SPREAD_RATIO:
        return 'row'
    return 'column'


# ============================================================================
# Wrap columns
# ============================================================================

def estimate_wrap_columns(inner_width: float, gap: float, child_width: float) -> int:
    """Column count for a wrapping row, from one child's width.

    Approximates flex-wrap by assuming every child is as wide as the sampled
    one; irregular child widths can wrap differently in a browser.
    """
    denominator = child_width + gap
    if denominator <= 0:
        return 1
    return max(1, round_half_up((inner_width + gap) / denominator))


def wrap_column_width_class(columns: int, gap: float) -> str:
    if columns <= 1:
        return 'w-full'
    if columns == 2:
        return f"w-[calc(50%_-_{fmt_num(gap / 2)}px)]"
    if columns == 3:
        return f"w-[calc(33.333%_-_{fmt_num(gap * 2 / 3)}px)]"
    if columns == 4:
        return f"w-[calc(25%_-_{fmt_num(gap * 3 / 4)}px)]"
    return f"w-[calc((100%_-_{fmt_num(gap * (columns - 1))}px)/{columns})]"
