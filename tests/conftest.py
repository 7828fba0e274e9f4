"""Pytest configuration and fixtures for navprovider tests."""

import sys
from io import BytesIO
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from PIL import Image  # noqa: E402

from domain.models import ServiceSettings  # noqa: E402


def png_bytes(color=(255, 0, 0, 255), size=(256, 256)) -> bytes:
    """Solid-colour PNG as bytes."""
    buf = BytesIO()
    Image.new('RGBA', size, color).save(buf, 'PNG')
    return buf.getvalue()


@pytest.fixture
def settings(tmp_path):
    """Settings with the tile cache under tmp_path and local endpoints."""
    return ServiceSettings(
        provider_url='http://geocoder.test/geocoder',
        tile_base_url='http://tiles.test/maptile/newest',
        api_token='testtoken',
        cache_dir=str(tmp_path / 'tiles'),
        http_timeout_s=5.0,
    )


@pytest.fixture
def red_png():
    return png_bytes()


@pytest.fixture
def make_png():
    return png_bytes
