"""
Geocoder XML response parsing.

Two response schemas are known; the "geocoder" one is tried first and the
"search" one second. Field values are looked up anywhere in the document
under the namespace of the schema that matched.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from domain.errors import ParseFailure
from domain.models import Address, Coordinate
from shared.constants import GC_NS_GEOCODER, GC_NS_SEARCH

logger = logging.getLogger(__name__)

# (namespace, root element) per schema, in the order they are tried
_SCHEMAS = (
    (GC_NS_GEOCODER, 'places'),
    (GC_NS_SEARCH, 'response'),
)

# Address attribute -> path below the document root
_ADDRESS_FIELDS = (
    ('country', './/gc:country'),
    ('country_code', './/gc:countryCode'),
    ('suburb', './/gc:district'),
    ('town', './/gc:city'),
    ('postal_code', './/gc:postCode'),
    ('street', './/gc:thoroughfare/gc:name'),
    ('house_num', './/gc:thoroughfare/gc:number'),
)


def _parse_document(data: bytes) -> ET.Element:
    try:
        return ET.fromstring(data)
    except ET.ParseError as e:
        msg = f'Malformed XML response: {e}'
        raise ParseFailure(msg) from None


def _match_schema(root: ET.Element, leaf: str) -> dict[str, str]:
    """
    Namespace map of the first schema whose /root/place/<leaf> path exists.

    Raises ParseFailure when neither schema matches.
    """
    for uri, root_name in _SCHEMAS:
        ns = {'gc': uri}
        if root.tag != f'{{{uri}}}{root_name}':
            continue
        if root.find(f'gc:place/gc:{leaf}', ns) is not None:
            return ns
    msg = f'Could not parse response: no place/{leaf} element'
    raise ParseFailure(msg)


def _text(root: ET.Element, path: str, ns: dict[str, str]) -> str | None:
    el = root.find(path, ns)
    if el is None:
        return None
    return ''.join(el.itertext()).strip()


def parse_forward_response(data: bytes) -> list[Coordinate]:
    """Coordinates of the place in a forward-geocode response."""
    root = _parse_document(data)
    ns = _match_schema(root, 'location')
    lat = _text(root, './/gc:position/gc:latitude', ns)
    lon = _text(root, './/gc:position/gc:longitude', ns)
    try:
        coordinate = Coordinate(float(lat), float(lon))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        msg = f'Invalid position in response: latitude={lat!r} longitude={lon!r}'
        raise ParseFailure(msg) from None
    return [coordinate]


def parse_reverse_response(data: bytes, *, taiwan_country_fix: bool = False) -> Address:
    """Address of the place in a reverse-geocode response."""
    root = _parse_document(data)
    ns = _match_schema(root, 'address')
    fields = {name: _text(root, path, ns) for name, path in _ADDRESS_FIELDS}
    address = Address.model_validate(fields)
    if taiwan_country_fix and address.country[:6] == 'TAIWAN':
        address.country = 'TAIWAN'
    return address
