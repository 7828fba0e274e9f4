from enum import Enum

# Default geocoder endpoint (forward: /gc/1.0, reverse: /rgc/1.0)
PROVIDER_URL_DEFAULT = 'http://loc.desktop.maps.svc.ovi.com/geocoder'

# Default map tile endpoint
TILE_BASE_URL_DEFAULT = 'http://maptile.maps.svc.ovi.com/maptiler/maptile/newest'

# Fixed API token sent with every remote request
API_TOKEN_DEFAULT = '9b87b24dffafdfcb6dfc66eeba834caa'

# Image format segment of the tile URL
TILE_FORMAT_DEFAULT = 'png8'

# Tile cache directory (relative to the user's home)
TILE_CACHE_DIR = 'MyDocs/.map_tile_cache'

# Configuration file location (relative to XDG_CONFIG_HOME)
SETTINGS_DIR_NAME = 'navprovider'
SETTINGS_FILE_NAME = 'settings.toml'

# Web Mercator tile side (px)
TILE_SIZE = 256

# Highest zoom level served by the tile endpoint
MAX_ZOOM = 18

# Mean Earth radius (metres)
EARTH_RADIUS_M = 6371008.8

SECONDS_PER_DAY = 24 * 60 * 60

# Cached tiles older than this are refetched
TILE_TTL_DAYS = 30

# Geocode cache eviction: runs above LIMIT entries, drops entries older than
# TTL, then keeps the KEEP best ranked survivors
GEOCODE_CACHE_LIMIT = 120
GEOCODE_CACHE_KEEP = 80
GEOCODE_TTL_DAYS = 30

# Pending jobs accepted before the dispatcher reports ServiceBusy
JOB_QUEUE_SIZE = 256

HTTP_OK = 200
HTTP_TIMEOUT_DEFAULT = 20.0

# Forward geocode: positions of the caller's term array and the query
# parameter each one maps to
FORWARD_TERM_PARAMS = (
    (0, 'num'),
    (2, 'str'),
    (4, 'city'),
    (7, 'zip'),
    (8, 'ctr'),
)

# Geocoder response schemas, tried in order
GC_NS_GEOCODER = 'nokia:geocoder:gc:1.0'
GC_NS_SEARCH = 'nokia:search:gc:1.0'

# Map option bits: visual style
STYLE_MASK = 0x1C
STYLE_NORMAL = 0x04
STYLE_SATELLITE = 0x08
STYLE_SATELLITE_ALT = 0x0C
STYLE_TERRAIN = 0x10

# Map option bits: day/night
DAYNIGHT_MASK = 0x03
DAYNIGHT_DAY = 0x01
DAYNIGHT_NIGHT = 0x02

# Returned for GetCategories; no real category source exists
PLACEHOLDER_CATEGORIES = ('category1', 'category2', 'category3')


class MapStyle(str, Enum):
    NORMAL = 'normal'
    SATELLITE = 'satellite'
    TERRAIN = 'terrain'


STYLE_BITS = {
    MapStyle.NORMAL: STYLE_NORMAL,
    MapStyle.SATELLITE: STYLE_SATELLITE,
    MapStyle.TERRAIN: STYLE_TERRAIN,
}
