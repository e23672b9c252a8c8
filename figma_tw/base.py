"""
Shared geometry and color helpers.

Pure functions only: color space conversion (RGB <-> hex, hue, saturation,
luminance), number formatting for CSS output, affine-transform inversion
for gradient geometry, and bounding-box overlap tests.
"""

import math
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Sequence, Tuple


# ============================================================================
# Numbers
# ============================================================================

def round_half_up(value: float) -> int:
    """Round like JavaScript's Math.round (halves go up)."""
    return int(math.floor(value + 0.5))


def fmt_num(value: float, digits: int = 3) -> str:
    """Format a number for CSS: no trailing zeros, no trailing dot."""
    if value is None or not math.isfinite(value):
        return '0'
    if float(value).is_integer():
        return str(int(value))
    text = f"{value:.{digits}f}".rstrip('0').rstrip('.')
    return text if text not in ('', '-0') else '0'


def px_to_rem(px: float, base: float = 16) -> str:
    """Render px as a rem string with three decimals (``1.000rem``).

    Halves round up, so 17px is ``1.063rem``.
    """
    return f"{round_half_up(px / base * 1000) / 1000:.3f}rem"


# ============================================================================
# Colors
# ============================================================================

def _channel_to_hex(n: float) -> str:
    value = max(0, min(255, round_half_up(n * 255)))
    return f"{value:02x}"


def rgba_to_hex(r: float, g: float, b: float, a: float = 1) -> str:
    """Convert 0..1 RGBA channels to ``#rrggbb`` (or ``#rrggbbaa`` when a < 1)."""
    hex_color = f"#{_channel_to_hex(r)}{_channel_to_hex(g)}{_channel_to_hex(b)}"
    if a < 1:
        return f"{hex_color}{_channel_to_hex(a)}"
    return hex_color


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert ``#rrggbb`` / ``#rrggbbaa`` to an (r, g, b) tuple of 0..255 ints."""
    raw = hex_color.lstrip('#')
    if len(raw) == 3:
        raw = ''.join(ch * 2 for ch in raw)
    raw = raw[:6].ljust(6, '0')
    return int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16)


def hex_alpha(hex_color: str) -> float:
    raw = hex_color.lstrip('#')
    if len(raw) == 8:
        return int(raw[6:8], 16) / 255
    return 1.0


def _unit_rgb(hex_color: str) -> Tuple[float, float, float]:
    r, g, b = hex_to_rgb(hex_color)
    return r / 255, g / 255, b / 255


def hex_luminance(hex_color: str) -> float:
    """Relative luminance (Rec. 709 weights, no gamma) of the opaque part."""
    r, g, b = _unit_rgb(hex_color)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def hex_hue(hex_color: str) -> int:
    """Hue in whole degrees, 0..359."""
    r, g, b = _unit_rgb(hex_color)
    high = max(r, g, b)
    low = min(r, g, b)
    d = high - low
    if d == 0:
        return 0
    if high == r:
        h = math.fmod((g - b) / d, 6)
    elif high == g:
        h = (b - r) / d + 2
    else:
        h = (r - g) / d + 4
    h = round_half_up(h * 60)
    if h < 0:
        h += 360
    return h % 360


def hex_saturation(hex_color: str) -> float:
    """HSV saturation, 0..1."""
    r, g, b = _unit_rgb(hex_color)
    high = max(r, g, b)
    if high == 0:
        return 0.0
    return (high - min(r, g, b)) / high


@dataclass(frozen=True)
class ColorValue:
    """An RGBA color with 0..1 channels."""
    r: float
    g: float
    b: float
    a: float = 1.0

    @property
    def hex(self) -> str:
        return rgba_to_hex(self.r, self.g, self.b, self.a)

    @property
    def rgba(self) -> str:
        return (f"rgba({round_half_up(self.r * 255)}, {round_half_up(self.g * 255)}, "
                f"{round_half_up(self.b * 255)}, {self.a:.2f})")

    @classmethod
    def from_hex(cls, hex_color: str) -> 'ColorValue':
        r, g, b = hex_to_rgb(hex_color)
        return cls(r=r / 255, g=g / 255, b=b / 255, a=hex_alpha(hex_color))


# ============================================================================
# Affine transforms
# ============================================================================

Matrix = List[List[float]]


def invert_affine(matrix: Sequence[Sequence[float]]) -> Optional[Matrix]:
    """Invert a 2x3 affine matrix ``[[a, c, tx], [b, d, ty]]``.

    Returns None when the matrix is malformed or singular.
    """
    if not matrix or len(matrix) < 2 or len(matrix[0]) < 3 or len(matrix[1]) < 3:
        return None
    a, c, tx = matrix[0][0], matrix[0][1], matrix[0][2]
    b, d, ty = matrix[1][0], matrix[1][1], matrix[1][2]
    det = a * d - b * c
    if abs(det) < 1e-12:
        return None
    ia = d / det
    ic = -c / det
    ib = -b / det
    id_ = a / det
    return [
        [ia, ic, -(ia * tx + ic * ty)],
        [ib, id_, -(ib * tx + id_ * ty)],
    ]


def apply_affine(matrix: Sequence[Sequence[float]], x: float, y: float) -> Tuple[float, float]:
    return (
        matrix[0][0] * x + matrix[0][1] * y + matrix[0][2],
        matrix[1][0] * x + matrix[1][1] * y + matrix[1][2],
    )


# ============================================================================
# Bounding boxes
# ============================================================================

class Box(NamedTuple):
    x: float
    y: float
    width: float
    height: float


def boxes_overlap(a: Box, b: Box) -> bool:
    """Open-interval intersection on both axes; touching edges do not overlap."""
    return (a.x < b.x + b.width and a.x + a.width > b.x
            and a.y < b.y + b.height and a.y + a.height > b.y)


# ============================================================================
# Gradients
# ============================================================================

DEFAULT_LINEAR_ANGLE = 180
DEFAULT_RADIAL_CENTER = 50.0
DEFAULT_RADIAL_RADIUS = 100.0


@dataclass(frozen=True)
class GradientStop:
    color: ColorValue
    position: float  # 0..1

    @property
    def percent(self) -> int:
        return round_half_up(self.position * 100)


@dataclass(frozen=True)
class GradientGeometry:
    """Resolved gradient geometry: an angle for linear, an ellipse for radial."""
    angle: Optional[int] = None
    center_x: Optional[float] = None
    center_y: Optional[float] = None
    radius_x: Optional[float] = None
    radius_y: Optional[float] = None


@dataclass(frozen=True)
class GradientDef:
    type: str  # 'linear' | 'radial' | 'conic'
    stops: Tuple[GradientStop, ...] = ()
    geometry: GradientGeometry = field(default_factory=GradientGeometry)
    opacity: float = 1.0

    @property
    def angle(self) -> int:
        if self.geometry.angle is None:
            return DEFAULT_LINEAR_ANGLE if self.type == 'linear' else 0
        return self.geometry.angle

    @property
    def key(self) -> str:
        """Structural identity: type, geometry and ordered stops."""
        stops = '|'.join(f"{s.color.hex}-{s.percent}" for s in self.stops)
        g = self.geometry
        if self.type == 'radial':
            shape = f"{fmt_num(g.center_x)},{fmt_num(g.center_y)},{fmt_num(g.radius_x)},{fmt_num(g.radius_y)}"
        else:
            shape = str(self.angle)
        return f"{self.type}|{shape}|{stops}"

    def stops_css(self) -> str:
        return ', '.join(f"{s.color.hex} {s.percent}%" for s in self.stops)

    def to_css(self) -> str:
        stops = self.stops_css()
        if self.type == 'linear':
            return f"linear-gradient({self.angle}deg, {stops})"
        if self.type == 'radial':
            g = self.geometry
            return (f"radial-gradient(ellipse {fmt_num(g.radius_x, 2)}% {fmt_num(g.radius_y, 2)}% "
                    f"at {fmt_num(g.center_x, 2)}% {fmt_num(g.center_y, 2)}%, {stops})")
        return f"conic-gradient(from {self.angle}deg, {stops})"


Point = Tuple[float, float]


def _vector_angle(start: Point, end: Point) -> Optional[int]:
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    if abs(dx) < 1e-9 and abs(dy) < 1e-9:
        return None
    # Figma y grows downwards; CSS 0deg points up and turns clockwise
    angle = math.degrees(math.atan2(dy, dx)) + 90
    return round_half_up(angle % 360) % 360


def _handles_from_transform(transform: Optional[Sequence[Sequence[float]]], radial: bool) -> Optional[List[Point]]:
    inverse = invert_affine(transform) if transform else None
    if inverse is None:
        return None
    if radial:
        return [apply_affine(inverse, 0.5, 0.5), apply_affine(inverse, 1, 0.5), apply_affine(inverse, 0.5, 1)]
    return [apply_affine(inverse, 0, 0.5), apply_affine(inverse, 1, 0.5)]


def resolve_linear_geometry(handles: Optional[Sequence[Point]],
                            transform: Optional[Sequence[Sequence[float]]] = None) -> GradientGeometry:
    """Angle from handle positions, else from the inverted transform, else 180deg."""
    if handles and len(handles) >= 2:
        angle = _vector_angle(handles[0], handles[1])
        if angle is not None:
            return GradientGeometry(angle=angle)
    derived = _handles_from_transform(transform, radial=False)
    if derived:
        angle = _vector_angle(derived[0], derived[1])
        if angle is not None:
            return GradientGeometry(angle=angle)
    return GradientGeometry(angle=DEFAULT_LINEAR_ANGLE)


def _ellipse_from_points(points: Sequence[Point]) -> Optional[GradientGeometry]:
    center = points[0]
    rx = math.hypot(points[1][0] - center[0], points[1][1] - center[1]) * 100
    if len(points) >= 3:
        ry = math.hypot(points[2][0] - center[0], points[2][1] - center[1]) * 100
    else:
        ry = rx
    if rx < 1e-6 or ry < 1e-6:
        return None
    return GradientGeometry(
        center_x=round(center[0] * 100, 2),
        center_y=round(center[1] * 100, 2),
        radius_x=round(rx, 2),
        radius_y=round(ry, 2),
    )


def resolve_radial_geometry(handles: Optional[Sequence[Point]],
                            transform: Optional[Sequence[Sequence[float]]] = None) -> GradientGeometry:
    """Center and radii (percent) from handles, else the inverted transform, else defaults."""
    if handles and len(handles) >= 2:
        geometry = _ellipse_from_points(handles)
        if geometry:
            return geometry
    derived = _handles_from_transform(transform, radial=True)
    if derived:
        geometry = _ellipse_from_points(derived)
        if geometry:
            return geometry
    return GradientGeometry(
        center_x=DEFAULT_RADIAL_CENTER,
        center_y=DEFAULT_RADIAL_CENTER,
        radius_x=DEFAULT_RADIAL_RADIUS,
        radius_y=DEFAULT_RADIAL_RADIUS,
    )
