"""Tests for asset export helpers and placeholder resolution."""
import asyncio
import base64

import pytest

from figma_tw.assets import (
    Asset,
    ExportError,
    ExportFailure,
    ExportSuccess,
    PrerenderedExporter,
    asset_placeholder,
    export_node,
    resolve_asset_placeholders,
    to_asset_file_name,
)
from figma_tw.nodes import parse_node


ICON = parse_node({'type': 'VECTOR', 'id': '3:1', 'name': 'Icon'})


class TestFileNames:
    """Verify run-unique, slugified asset file names."""

    def test_slug(self):
        assert to_asset_file_name('Icon/Search 24', 'svg', set()) == 'icon-search-24.svg'

    def test_empty_name(self):
        assert to_asset_file_name('', 'png', set()) == 'asset.png'
        assert to_asset_file_name('***', 'png', set()) == 'asset.png'

    def test_collisions_get_counters(self):
        used = set()
        names = [to_asset_file_name('Logo', 'svg', used) for _ in range(3)]
        assert names == ['logo.svg', 'logo-2.svg', 'logo-3.svg']

    def test_same_stem_different_extension(self):
        used = set()
        assert to_asset_file_name('Logo', 'svg', used) == 'logo.svg'
        assert to_asset_file_name('Logo', 'png', used) == 'logo.png'


class TestPrerenderedExporter:
    """Verify payload lookup and decoding."""

    def test_lookup_by_id(self):
        exporter = PrerenderedExporter({'3:1': base64.b64encode(b'<svg/>').decode()})
        assert asyncio.run(exporter.export_bytes(ICON, 'SVG')) == b'<svg/>'

    def test_format_specific_key_wins(self):
        exporter = PrerenderedExporter({
            '3:1': base64.b64encode(b'generic').decode(),
            '3:1:PNG': base64.b64encode(b'png').decode(),
        })
        assert asyncio.run(exporter.export_bytes(ICON, 'PNG')) == b'png'
        assert asyncio.run(exporter.export_bytes(ICON, 'SVG')) == b'generic'

    def test_missing_payload(self):
        with pytest.raises(ExportError):
            asyncio.run(PrerenderedExporter().export_bytes(ICON, 'SVG'))

    def test_invalid_base64(self):
        with pytest.raises(ExportError):
            asyncio.run(PrerenderedExporter({'3:1': 'not base64!'}).export_bytes(ICON, 'SVG'))

    def test_export_node_wraps_failures(self):
        result = asyncio.run(export_node(PrerenderedExporter(), ICON, 'SVG'))
        assert isinstance(result, ExportFailure)
        assert '3:1' in result.reason

    def test_export_node_success(self):
        exporter = PrerenderedExporter({'3:1': base64.b64encode(b'ok').decode()})
        assert asyncio.run(export_node(exporter, ICON, 'SVG')) == ExportSuccess(data=b'ok')


class TestPlaceholders:
    """Verify {{asset:id}} substitution for preview and export."""

    assets = {'asset-1': Asset(id='asset-1', data=b'<svg/>', mime_type='image/svg+xml', file_name='icon.svg')}

    def test_placeholder_syntax(self):
        assert asset_placeholder('asset-7') == '{{asset:asset-7}}'

    def test_preview_data_uri(self):
        markup = '<img src="{{asset:asset-1}}" />'
        expected = '<img src="data:image/svg+xml;base64,PHN2Zy8+" />'
        assert resolve_asset_placeholders(markup, self.assets, 'preview') == expected

    def test_export_relative_path(self):
        markup = '<img src="{{asset:asset-1}}" />'
        assert resolve_asset_placeholders(markup, self.assets, 'export') == '<img src="./assets/icon.svg" />'

    def test_unknown_ids_untouched(self):
        markup = '<img src="{{asset:asset-9}}" />'
        assert resolve_asset_placeholders(markup, self.assets, 'export') == markup

    def test_asset_dict(self):
        assert self.assets['asset-1'].to_dict() == {
            'base64': 'PHN2Zy8+', 'mimeType': 'image/svg+xml', 'fileName': 'icon.svg',
        }
