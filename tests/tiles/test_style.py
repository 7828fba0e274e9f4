"""Tests for map option bit normalization."""

import pytest

from shared.constants import MapStyle
from tiles.style import TileStyle, normalize_style


class TestNormalizeStyle:
    @pytest.mark.parametrize(
        ('bits', 'style'),
        [
            (0x04, MapStyle.NORMAL),
            (0x08, MapStyle.SATELLITE),
            (0x0C, MapStyle.SATELLITE),
            (0x10, MapStyle.TERRAIN),
            (0x00, MapStyle.NORMAL),
            (0x14, MapStyle.NORMAL),
            (0x1C, MapStyle.NORMAL),
        ],
    )
    def test_style_bits(self, bits, style):
        """Unknown combinations fall back to normal."""
        assert normalize_style(bits).style == style

    @pytest.mark.parametrize(('bits', 'night'), [(0, False), (1, False), (2, True), (3, False)])
    def test_day_night(self, bits, night):
        assert normalize_style(0x04 | bits).night is night

    def test_equivalent_requests_share_bits(self):
        """Differently encoded satellite-day requests get one canonical value."""
        a = normalize_style(0x08 | 0x01)
        b = normalize_style(0x0C | 0x03 | 0x100)
        assert a == b
        assert a.bits == b.bits == 0x09

    def test_url_segment(self):
        assert TileStyle(MapStyle.TERRAIN, night=True).url_segment == 'terrain.night'
        assert normalize_style(0x04).url_segment == 'normal.day'
