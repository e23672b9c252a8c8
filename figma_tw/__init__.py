"""Figma node trees to Tailwind v4 theme tokens and semantic markup."""

from .assets import Asset, ExportError, PrerenderedExporter, resolve_asset_placeholders
from .compiler import CompileResult, compile_layer
from .config import CompileOptions, GenerateOptions
from .lint import LintWarning, lint_tokens
from .nodes import parse_node
from .scanner import CSSOutput, ScannedTokens, generate_scanned_css, scan_nodes_for_tokens
from .variables import generate_variables_css, to_css_variable_name

__all__ = [
    'Asset',
    'CSSOutput',
    'CompileOptions',
    'CompileResult',
    'ExportError',
    'GenerateOptions',
    'LintWarning',
    'PrerenderedExporter',
    'ScannedTokens',
    'compile_layer',
    'generate_scanned_css',
    'generate_variables_css',
    'lint_tokens',
    'parse_node',
    'resolve_asset_placeholders',
    'scan_nodes_for_tokens',
    'to_css_variable_name',
]
