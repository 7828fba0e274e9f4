"""Map option bits -> canonical tile style.

Callers may encode the same visual style in several ways; every request is
reduced to one canonical bit pattern, used both for the tile URL and for the
cache key, so equivalent requests share cache entries.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared.constants import (
    DAYNIGHT_DAY,
    DAYNIGHT_MASK,
    DAYNIGHT_NIGHT,
    STYLE_BITS,
    STYLE_MASK,
    STYLE_NORMAL,
    STYLE_SATELLITE,
    STYLE_SATELLITE_ALT,
    STYLE_TERRAIN,
    MapStyle,
)

_STYLE_BY_BITS = {
    STYLE_NORMAL: MapStyle.NORMAL,
    STYLE_SATELLITE: MapStyle.SATELLITE,
    STYLE_SATELLITE_ALT: MapStyle.SATELLITE,
    STYLE_TERRAIN: MapStyle.TERRAIN,
}


@dataclass(frozen=True)
class TileStyle:
    style: MapStyle
    night: bool

    @property
    def bits(self) -> int:
        """Canonical map option bits."""
        return STYLE_BITS[self.style] | (DAYNIGHT_NIGHT if self.night else DAYNIGHT_DAY)

    @property
    def url_segment(self) -> str:
        return f'{self.style.value}.{"night" if self.night else "day"}'


def normalize_style(bits: int) -> TileStyle:
    """
    Canonicalize caller-supplied map option bits.

    Unknown style combinations fall back to the normal style; only the exact
    night pattern in the day/night bits selects night, anything else is day.
    """
    style = _STYLE_BY_BITS.get(bits & STYLE_MASK, MapStyle.NORMAL)
    night = (bits & DAYNIGHT_MASK) == DAYNIGHT_NIGHT
    return TileStyle(style=style, night=night)
