from __future__ import annotations

from pyproj import Geod

from shared.constants import EARTH_RADIUS_M

# Spherical earth: inverse geodesic on a sphere is the great-circle distance
_SPHERE = Geod(a=EARTH_RADIUS_M, b=EARTH_RADIUS_M)


def great_circle_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in metres between two WGS84 points."""
    _, _, dist = _SPHERE.inv(lng1, lat1, lng2, lat2)
    return float(dist)
