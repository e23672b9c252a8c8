#!/usr/bin/env python3
"""
Figma Tailwind MCP Server - Model Context Protocol server that turns Figma
node trees into Tailwind CSS v4.

This server provides tools to:
- Extract design tokens from a node tree as an @theme block
- Compile a layer to semantic HTML with Tailwind classes and exported assets
- Lint design tokens against Tailwind's reference scales
- Generate theme CSS from Figma variables and local styles

Node trees are passed in as JSON (plugin API or REST API shape). The server
never calls the network.
"""

import json
import logging
import sys
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from mcp.server.fastmcp import FastMCP

from figma_tw.assets import PrerenderedExporter, resolve_asset_placeholders
from figma_tw.compiler import compile_layer
from figma_tw.config import GenerateOptions, get_log_level, load_compile_options, load_generate_options
from figma_tw.lint import lint_tokens
from figma_tw.nodes import parse_node
from figma_tw.scanner import generate_scanned_css, scan_nodes_for_tokens
from figma_tw.variables import LocalStyles, VariableCollection, generate_variables_css

logger = logging.getLogger(__name__)

# ============================================================================
# Constants
# ============================================================================

CHARACTER_LIMIT = 25000
MAX_VALIDATION_ERRORS = 5

# ============================================================================
# Initialize MCP Server
# ============================================================================

mcp = FastMCP("figma_tailwind_mcp")

# ============================================================================
# Enums and Types
# ============================================================================

class ResponseFormat(str, Enum):
    """Output format for tool responses."""
    MARKDOWN = "markdown"
    JSON = "json"


# ============================================================================
# Pydantic Input Models
# ============================================================================

def _check_node_tree(v: Dict[str, Any]) -> Dict[str, Any]:
    if 'type' not in v:
        raise ValueError("Node tree must have a 'type' field (e.g. FRAME, TEXT)")
    return v


class TokenOptionsInput(BaseModel):
    """Shared fields for token CSS output."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    default_classes: Optional[bool] = Field(
        default=None,
        description="Name tokens after Tailwind's default scale instead of size labels"
    )
    scalable_font_size: Optional[bool] = Field(
        default=None,
        description="Emit fluid clamp() font sizes"
    )
    exclude: List[str] = Field(
        default_factory=list,
        description="Token categories to leave out (colors, font_families, font_sizes, line_heights, "
                    "font_weights, spacing, border_radius, shadows, gradients, animations)"
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' or 'json'"
    )

    @field_validator('exclude')
    @classmethod
    def validate_exclude(cls, v: List[str]) -> List[str]:
        categories = [name for name in GenerateOptions.model_fields
                      if name not in ('scalable_font_size', 'default_classes')]
        unknown = [category for category in v if category not in categories]
        if unknown:
            raise ValueError(f"Unknown token categories: {', '.join(unknown)}. Use: {', '.join(categories)}")
        return v

    def generate_overrides(self) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {category: False for category in self.exclude}
        if self.default_classes is not None:
            overrides['default_classes'] = self.default_classes
        if self.scalable_font_size is not None:
            overrides['scalable_font_size'] = self.scalable_font_size
        return overrides


class ExtractTokensInput(TokenOptionsInput):
    """Input model for token extraction."""

    node: Dict[str, Any] = Field(
        ...,
        description="Figma node tree as JSON (plugin API or REST API shape)"
    )
    include_lint: bool = Field(
        default=True,
        description="Include lint warnings for values off the Tailwind scales"
    )

    @field_validator('node')
    @classmethod
    def validate_node(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        return _check_node_tree(v)


class LintTokensInput(BaseModel):
    """Input model for token linting."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    node: Dict[str, Any] = Field(
        ...,
        description="Figma node tree as JSON (plugin API or REST API shape)"
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' or 'json'"
    )

    @field_validator('node')
    @classmethod
    def validate_node(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        return _check_node_tree(v)


class CompileLayerInput(BaseModel):
    """Input model for layer compilation."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    node: Dict[str, Any] = Field(
        ...,
        description="Figma node tree of the layer to compile"
    )
    assets: Dict[str, str] = Field(
        default_factory=dict,
        description="Pre-rendered exports as base64, keyed by node id or 'id:PNG' / 'id:SVG'"
    )
    generate_css: Optional[bool] = Field(
        default=None,
        description="Register tokens while compiling and return an @theme block"
    )
    theme_colors: Optional[Dict[str, str]] = Field(
        default=None,
        description="Project color names keyed by hex, e.g. {'#0f62fe': 'brand'}"
    )
    component_map: Optional[Dict[str, str]] = Field(
        default=None,
        description="Component name or node id -> tag to emit instead of the subtree (e.g. 'Button')"
    )
    placeholders: Literal['keep', 'preview', 'export'] = Field(
        default='keep',
        description="'keep' leaves {{asset:id}} tokens, 'preview' inlines data URIs, 'export' uses ./assets/ paths"
    )
    include_asset_data: bool = Field(
        default=False,
        description="Include base64 asset payloads in the response"
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' or 'json'"
    )

    @field_validator('node')
    @classmethod
    def validate_node(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        return _check_node_tree(v)

    def compile_overrides(self) -> Dict[str, Any]:
        overrides: Dict[str, Any] = {}
        for key in ('generate_css', 'theme_colors', 'component_map'):
            value = getattr(self, key)
            if value is not None:
                overrides[key] = value
        return overrides


class VariablesCSSInput(TokenOptionsInput):
    """Input model for variables/styles CSS generation."""

    collections: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Variable collections: {name, modes: [{modeId, name}], variables: "
                    "[{id, name, resolvedType, valuesByMode}]}"
    )
    styles: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Local styles: {colors: [{name, paints}], textStyles: [...], effects: [{name, effects}]}"
    )


# ============================================================================
# Helper Functions
# ============================================================================

def _configure_logging() -> None:
    """Log to stderr; stdout carries the MCP stdio transport."""
    logging.basicConfig(
        level=get_log_level(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _handle_tool_error(e: Exception) -> str:
    """Format errors for user-friendly messages."""
    if isinstance(e, ValidationError):
        problems = []
        for error in e.errors()[:MAX_VALIDATION_ERRORS]:
            location = '.'.join(str(part) for part in error.get('loc', ())) or 'input'
            problems.append(f"{location}: {error.get('msg', 'invalid value')}")
        more = e.error_count() - len(problems)
        suffix = f" (and {more} more)" if more > 0 else ""
        return f"Error: Invalid input - {'; '.join(problems)}{suffix}"
    elif isinstance(e, ValueError):
        return f"Error: {str(e)}"
    return f"Error: {type(e).__name__}: {str(e)}"


def _truncate(result: str) -> str:
    if len(result) > CHARACTER_LIMIT:
        return result[:CHARACTER_LIMIT] + "\n\n... (truncated)"
    return result


def _format_lint_markdown(warnings) -> List[str]:
    lines = ["## Lint", ""]
    if not warnings:
        lines.append("No issues found.")
        return lines
    for warning in warnings:
        icon = "⚠️" if warning.severity == 'warning' else "ℹ️"
        lines.append(f"- {icon} **{warning.category}:** {warning.message} - {warning.suggestion}")
    return lines


def _css_block(css: str) -> List[str]:
    return ["```css", css.rstrip('\n'), "```"]


# ============================================================================
# Tools
# ============================================================================

@mcp.tool(
    name="figma_extract_tokens",
    annotations={
        "title": "Extract Tailwind Theme Tokens",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def figma_extract_tokens(params: ExtractTokensInput) -> str:
    """
    Extract design tokens from a Figma node tree as a Tailwind v4 @theme block.

    Scans every visible node for colors, typography, spacing, radii, shadows,
    gradients and transition timing, then names them either with size labels
    or after Tailwind's default scale.

    Args:
        params: ExtractTokensInput containing:
            - node (dict): Figma node tree
            - default_classes, scalable_font_size, exclude: Naming and category toggles
            - include_lint (bool): Append lint warnings
            - response_format: 'markdown' or 'json'

    Returns:
        str: Theme CSS and token summary in the requested format
    """
    try:
        root = parse_node(params.node)
        options = load_generate_options(params.generate_overrides())
        tokens = scan_nodes_for_tokens(root)
        output = generate_scanned_css(tokens, options)
        warnings = lint_tokens(tokens) if params.include_lint else []

        if params.response_format == ResponseFormat.JSON:
            result = json.dumps({
                'css': output.full,
                'sections': [{'label': s.label, 'css': s.css} for s in output.sections],
                'tokens': tokens.to_dict(),
                'lintWarnings': [w.to_dict() for w in warnings],
            }, indent=2)
            return _truncate(result)

        lines = [f"# Theme Tokens: {root.name or root.type}", ""]
        lines.append(
            f"**Found:** {len(tokens.colors)} colors, {len(tokens.typography)} text styles, "
            f"{len(tokens.spacing)} spacing values, {len(tokens.radii)} radii, "
            f"{len(tokens.shadows)} shadows, {len(tokens.gradients)} gradients, "
            f"{len(tokens.animations)} transitions"
        )
        lines.append("")
        lines.extend(_css_block(output.full))
        if params.include_lint:
            lines.append("")
            lines.extend(_format_lint_markdown(warnings))
        return _truncate("\n".join(lines))

    except Exception as e:
        return _handle_tool_error(e)


@mcp.tool(
    name="figma_compile_layer",
    annotations={
        "title": "Compile Layer to Tailwind HTML",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def figma_compile_layer(params: CompileLayerInput) -> str:
    """
    Compile a Figma layer to semantic HTML with Tailwind v4 classes.

    Picks tags from names and structure (button, nav, ul/li, hr, input, ...),
    infers flex/absolute layout, collapses icon subtrees into SVG assets and
    references exported images through {{asset:id}} placeholders. Exports are
    served from the base64 payloads passed in `assets`; a node without a
    payload degrades to a placeholder image or an HTML comment.

    Args:
        params: CompileLayerInput containing:
            - node (dict): Figma node tree of the layer
            - assets (dict): Pre-rendered PNG/SVG payloads by node id
            - generate_css (bool): Also return an @theme block of the tokens used
            - theme_colors, component_map: Project naming overrides
            - placeholders: 'keep', 'preview' or 'export'
            - response_format: 'markdown' or 'json'

    Returns:
        str: Markup, optional theme CSS and asset list in the requested format
    """
    try:
        root = parse_node(params.node)
        options = load_compile_options(params.compile_overrides())
        result = await compile_layer(root, PrerenderedExporter(params.assets), options)

        markup = result.markup
        if params.placeholders != 'keep':
            markup = resolve_asset_placeholders(markup, result.assets, params.placeholders)

        if params.response_format == ResponseFormat.JSON:
            assets = {}
            for asset_id, asset in result.assets.items():
                entry = {'mimeType': asset.mime_type, 'fileName': asset.file_name}
                if params.include_asset_data:
                    entry['base64'] = asset.base64
                assets[asset_id] = entry
            return _truncate(json.dumps({'html': markup, 'css': result.css, 'assets': assets}, indent=2))

        lines = [f"# Layer: {root.name or root.type}", "", "```html", markup.rstrip('\n'), "```"]
        if result.css:
            lines.extend(["", "## Theme CSS", ""])
            lines.extend(_css_block(result.css))
        if result.assets:
            lines.extend(["", "## Assets", ""])
            for asset_id, asset in result.assets.items():
                lines.append(f"- `{asset_id}` → `{asset.file_name}` ({asset.mime_type}, {len(asset.data)} bytes)")
        return _truncate("\n".join(lines))

    except Exception as e:
        return _handle_tool_error(e)


@mcp.tool(
    name="figma_lint_tokens",
    annotations={
        "title": "Lint Design Tokens",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def figma_lint_tokens(params: LintTokensInput) -> str:
    """
    Check a node tree's design tokens against Tailwind's reference scales.

    Flags font sizes and radii more than 1px off the scale, spacing off the
    4px grid, non-standard weights and unusual line heights.

    Args:
        params: LintTokensInput containing:
            - node (dict): Figma node tree
            - response_format: 'markdown' or 'json'

    Returns:
        str: Lint warnings in the requested format
    """
    try:
        warnings = lint_tokens(scan_nodes_for_tokens(parse_node(params.node)))
        if params.response_format == ResponseFormat.JSON:
            return _truncate(json.dumps({'warnings': [w.to_dict() for w in warnings]}, indent=2))
        return _truncate("\n".join(_format_lint_markdown(warnings)))

    except Exception as e:
        return _handle_tool_error(e)


@mcp.tool(
    name="figma_generate_variables_css",
    annotations={
        "title": "Generate Theme CSS from Variables",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def figma_generate_variables_css(params: VariablesCSSInput) -> str:
    """
    Generate a Tailwind v4 @theme block from Figma variables and local styles.

    Variable names are cleaned into CSS custom properties ("Primitives/Colors/
    Blue/500" -> --color-blue-500); multi-mode collections get one block per
    mode. Aliases are resolved.

    Args:
        params: VariablesCSSInput containing:
            - collections (list): Variable collections
            - styles (dict): Local paint, text and effect styles
            - default_classes, scalable_font_size, exclude: Naming and category toggles
            - response_format: 'markdown' or 'json'

    Returns:
        str: Theme CSS in the requested format
    """
    try:
        if not params.collections and not params.styles:
            return "Error: Provide at least one variable collection or a styles object."
        collections = [VariableCollection.model_validate(c) for c in params.collections]
        styles = LocalStyles.model_validate(params.styles) if params.styles else None
        options = load_generate_options(params.generate_overrides())
        output = generate_variables_css(collections, styles, options)

        if params.response_format == ResponseFormat.JSON:
            return _truncate(json.dumps({
                'css': output.full,
                'sections': [{'label': s.label, 'css': s.css} for s in output.sections],
            }, indent=2))

        lines = ["# Theme CSS from Variables", ""]
        lines.extend(_css_block(output.full))
        return _truncate("\n".join(lines))

    except Exception as e:
        return _handle_tool_error(e)


# ============================================================================
# Entry Point
# ============================================================================

def main() -> None:
    _configure_logging()
    logger.info("Starting figma_tailwind_mcp")
    mcp.run()


if __name__ == "__main__":
    main()
