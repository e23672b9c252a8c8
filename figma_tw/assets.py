"""
Exported assets and the export capability.

The compiler never calls an exporter directly; it goes through
``export_node`` which turns every failure into an ``ExportFailure`` so the
caller can pick a placeholder without its own try/except.
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from typing import Dict, Literal, Mapping, NamedTuple, Optional, Protocol, Set, Union

from .nodes import SceneNode

logger = logging.getLogger(__name__)

ExportFormat = Literal['PNG', 'SVG']

MIME_TYPES: Dict[str, str] = {
    'PNG': 'image/png',
    'SVG': 'image/svg+xml',
}

ASSET_PLACEHOLDER = re.compile(r'\{\{asset:([\w-]+)\}\}')
MAX_FILE_STEM = 60


class ExportError(Exception):
    """Raised by exporters when a node cannot be rendered."""


class ExportConstraint(NamedTuple):
    type: str = 'SCALE'
    value: float = 1


@dataclass(frozen=True)
class Asset:
    id: str
    data: bytes
    mime_type: str
    file_name: str

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode('ascii')

    def to_dict(self) -> Dict[str, str]:
        return {'base64': self.base64, 'mimeType': self.mime_type, 'fileName': self.file_name}


@dataclass(frozen=True)
class ExportSuccess:
    data: bytes


@dataclass(frozen=True)
class ExportFailure:
    reason: str


ExportResult = Union[ExportSuccess, ExportFailure]


# ============================================================================
# Collaborators
# ============================================================================

class Exporter(Protocol):
    async def export_bytes(self, node: SceneNode, format: ExportFormat,
                           constraint: Optional[ExportConstraint] = None) -> bytes:
        ...


class MarkupSink(Protocol):
    def emit(self, markup: str, css: Optional[str], assets: Mapping[str, Asset]) -> None:
        ...


class PrerenderedExporter:
    """Serves base64 payloads the caller rendered ahead of time.

    Keys are node ids, optionally suffixed with the format (``"12:3:SVG"``)
    when one node is rendered more than one way.
    """

    def __init__(self, payloads: Optional[Mapping[str, str]] = None):
        self.payloads = dict(payloads or {})

    async def export_bytes(self, node: SceneNode, format: ExportFormat,
                           constraint: Optional[ExportConstraint] = None) -> bytes:
        payload = self.payloads.get(f"{node.id}:{format}") or self.payloads.get(node.id)
        if payload is None:
            raise ExportError(f"No {format} payload for node {node.id or node.name!r}")
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ExportError(f"Invalid base64 payload for node {node.id!r}: {e}") from e


async def export_node(exporter: Exporter, node: SceneNode, format: ExportFormat,
                      constraint: Optional[ExportConstraint] = None) -> ExportResult:
    try:
        data = await exporter.export_bytes(node, format, constraint)
    except Exception as e:
        logger.warning("Export of %s %r failed: %s", format, node.name, e)
        return ExportFailure(reason=str(e) or type(e).__name__)
    return ExportSuccess(data=data)


# ============================================================================
# File names and placeholders
# ============================================================================

def to_asset_file_name(name: str, ext: str, used_names: Set[str]) -> str:
    """Slugified, run-unique file name (``logo.svg``, ``logo-2.svg``, ...)."""
    stem = re.sub(r'[^a-z0-9]+', '-', (name or '').lower()).strip('-')[:MAX_FILE_STEM]
    if not stem:
        stem = 'asset'
    file_name = f"{stem}.{ext}"
    if file_name in used_names:
        counter = 2
        while f"{stem}-{counter}.{ext}" in used_names:
            counter += 1
        file_name = f"{stem}-{counter}.{ext}"
    used_names.add(file_name)
    return file_name


def asset_placeholder(asset_id: str) -> str:
    return f"{{{{asset:{asset_id}}}}}"


def resolve_asset_placeholders(markup: str, assets: Mapping[str, Asset],
                               mode: Literal['preview', 'export'] = 'preview') -> str:
    """Replace ``{{asset:<id>}}`` with data URIs (preview) or relative paths (export).

    Unknown ids are left untouched.
    """
    def replace(match):
        asset = assets.get(match.group(1))
        if asset is None:
            return match.group(0)
        if mode == 'preview':
            return f"data:{asset.mime_type};base64,{asset.base64}"
        return f"./assets/{asset.file_name}"

    return ASSET_PLACEHOLDER.sub(replace, markup)
