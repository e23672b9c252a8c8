"""
Canonical reference scales for Tailwind v4 theme tokens.

Every table here is read-only. Snapping code in ``snapper`` and naming code
in ``registry`` treat the order of each scale as significant: ties between
equally distant steps go to the step that appears first.
"""

from typing import Dict, NamedTuple, Tuple


class ScaleStep(NamedTuple):
    """A named point on a reference scale."""
    name: str
    value: float


# ============================================================================
# Typography
# ============================================================================

# Font sizes in rem
TW_TEXT_SCALE: Tuple[ScaleStep, ...] = (
    ScaleStep('xs', 0.75),
    ScaleStep('sm', 0.875),
    ScaleStep('base', 1),
    ScaleStep('lg', 1.125),
    ScaleStep('xl', 1.25),
    ScaleStep('2xl', 1.5),
    ScaleStep('3xl', 1.875),
    ScaleStep('4xl', 2.25),
    ScaleStep('5xl', 3),
    ScaleStep('6xl', 3.75),
    ScaleStep('7xl', 4.5),
    ScaleStep('8xl', 6),
    ScaleStep('9xl', 8),
)

# Line heights as a ratio of the font size
TW_LEADING_SCALE: Tuple[ScaleStep, ...] = (
    ScaleStep('none', 1),
    ScaleStep('tight', 1.25),
    ScaleStep('snug', 1.375),
    ScaleStep('normal', 1.5),
    ScaleStep('relaxed', 1.625),
    ScaleStep('loose', 2),
)

TW_WEIGHT_MAP: Dict[int, str] = {
    100: 'thin',
    200: 'extralight',
    300: 'light',
    400: 'normal',
    500: 'medium',
    600: 'semibold',
    700: 'bold',
    800: 'extrabold',
    900: 'black',
}

FONT_FAMILY_FALLBACKS: Dict[str, str] = {
    'sans': 'ui-sans-serif, system-ui, sans-serif',
    'serif': 'ui-serif, Georgia, serif',
    'mono': 'ui-monospace, SFMono-Regular, monospace',
}

# Root font size used for px -> rem conversion
REM_BASE_PX = 16


# ============================================================================
# Radius, Shadow, Blur
# ============================================================================

# Radii in px
TW_RADIUS_SCALE: Tuple[ScaleStep, ...] = (
    ScaleStep('xs', 2),
    ScaleStep('sm', 4),
    ScaleStep('md', 6),
    ScaleStep('lg', 8),
    ScaleStep('xl', 12),
    ScaleStep('2xl', 16),
    ScaleStep('3xl', 24),
    ScaleStep('full', 9999),
)

# Radii at or above this are pills and always snap to 'full'
PILL_RADIUS_THRESHOLD = 500

# Elevation names, assigned to shadows in ascending blur order
TW_SHADOW_NAMES: Tuple[str, ...] = ('xs', 'sm', 'md', 'lg', 'xl', '2xl')

# Upper blur bound (px, inclusive) for each utility shadow class
TW_SHADOW_BUCKETS: Tuple[Tuple[float, str], ...] = (
    (3, 'shadow-sm'),
    (8, 'shadow'),
    (16, 'shadow-md'),
    (25, 'shadow-lg'),
)
TW_SHADOW_MAX_CLASS = 'shadow-xl'

# Blur radii in px
TW_BLUR_SCALE: Tuple[ScaleStep, ...] = (
    ScaleStep('xs', 4),
    ScaleStep('sm', 8),
    ScaleStep('md', 12),
    ScaleStep('lg', 16),
    ScaleStep('xl', 24),
    ScaleStep('2xl', 40),
    ScaleStep('3xl', 64),
)


# ============================================================================
# Spacing, Duration
# ============================================================================

# px -> Tailwind spacing class value
TW_SPACING_MAP: Dict[int, str] = {
    0: '0', 1: 'px', 2: '0.5', 4: '1', 6: '1.5', 8: '2', 10: '2.5', 12: '3',
    14: '3.5', 16: '4', 20: '5', 24: '6', 28: '7', 32: '8', 36: '9', 40: '10',
    44: '11', 48: '12', 56: '14', 64: '16', 80: '20', 96: '24', 112: '28',
    128: '32', 144: '36', 160: '40', 176: '44', 192: '48', 208: '52', 224: '56',
    240: '60', 256: '64', 288: '72', 320: '80', 384: '96',
}

# Transition durations in ms
TW_DURATION_SCALE: Tuple[ScaleStep, ...] = tuple(
    ScaleStep(str(ms), ms) for ms in (75, 100, 150, 200, 300, 500, 700, 1000)
)

EASING_CSS: Dict[str, str] = {
    'EASE_IN': 'ease-in',
    'EASE_OUT': 'ease-out',
    'EASE_IN_AND_OUT': 'ease-in-out',
    'LINEAR': 'linear',
}


# ============================================================================
# Labels
# ============================================================================

SIZE_LABELS_SHORT = ('sm', 'md', 'lg')
SIZE_LABELS_MEDIUM = ('xs', 'sm', 'md', 'lg', 'xl')
SIZE_LABELS_LONG = ('xs', 'sm', 'md', 'lg', 'xl', '2xl', '3xl', '4xl', '5xl')

TYPO_ROLES = ('h1', 'h2', 'h3', 'h4', 'body', 'caption', 'small')

SHADE_RAMP: Tuple[int, ...] = (50, 100, 200, 300, 400, 500, 600, 700, 800, 900)


# ============================================================================
# Colors
# ============================================================================

# Tailwind default palette subset, keyed by lower-case hex
TW_COLORS: Dict[str, str] = {
    '#000000': 'black', '#ffffff': 'white',
    '#f8fafc': 'slate-50', '#f1f5f9': 'slate-100', '#e2e8f0': 'slate-200', '#cbd5e1': 'slate-300',
    '#94a3b8': 'slate-400', '#64748b': 'slate-500', '#475569': 'slate-600', '#334155': 'slate-700',
    '#1e293b': 'slate-800', '#0f172a': 'slate-900', '#020617': 'slate-950',
    '#fef2f2': 'red-50', '#fee2e2': 'red-100', '#fecaca': 'red-200', '#fca5a5': 'red-300',
    '#f87171': 'red-400', '#ef4444': 'red-500', '#dc2626': 'red-600', '#b91c1c': 'red-700',
    '#991b1b': 'red-800', '#7f1d1d': 'red-900',
    '#eff6ff': 'blue-50', '#dbeafe': 'blue-100', '#bfdbfe': 'blue-200', '#93c5fd': 'blue-300',
    '#60a5fa': 'blue-400', '#3b82f6': 'blue-500', '#2563eb': 'blue-600', '#1d4ed8': 'blue-700',
    '#1e40af': 'blue-800', '#1e3a8a': 'blue-900',
    '#f0fdf4': 'green-50', '#dcfce7': 'green-100', '#bbf7d0': 'green-200', '#86efac': 'green-300',
    '#4ade80': 'green-400', '#22c55e': 'green-500', '#16a34a': 'green-600', '#15803d': 'green-700',
    '#166534': 'green-800', '#14532d': 'green-900',
    '#fefce8': 'yellow-50', '#fef9c3': 'yellow-100', '#fef08a': 'yellow-200', '#fde047': 'yellow-300',
    '#facc15': 'yellow-400', '#eab308': 'yellow-500', '#ca8a04': 'yellow-600', '#a16207': 'yellow-700',
    '#854d0e': 'yellow-800', '#713f12': 'yellow-900',
    '#f5f3ff': 'violet-50', '#ede9fe': 'violet-100', '#ddd6fe': 'violet-200', '#c4b5fd': 'violet-300',
    '#a78bfa': 'violet-400', '#8b5cf6': 'violet-500', '#7c3aed': 'violet-600', '#6d28d9': 'violet-700',
    '#5b21b6': 'violet-800', '#4c1d95': 'violet-900',
}


# ============================================================================
# Blend modes
# ============================================================================

BLEND_MODE_CSS: Dict[str, str] = {
    'DARKEN': 'darken',
    'MULTIPLY': 'multiply',
    'LINEAR_BURN': 'color-burn',
    'COLOR_BURN': 'color-burn',
    'LIGHTEN': 'lighten',
    'SCREEN': 'screen',
    'LINEAR_DODGE': 'color-dodge',
    'COLOR_DODGE': 'color-dodge',
    'OVERLAY': 'overlay',
    'SOFT_LIGHT': 'soft-light',
    'HARD_LIGHT': 'hard-light',
    'DIFFERENCE': 'difference',
    'EXCLUSION': 'exclusion',
    'HUE': 'hue',
    'SATURATION': 'saturation',
    'COLOR': 'color',
    'LUMINOSITY': 'luminosity',
}
