from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, field_validator, model_validator

from shared.constants import (
    API_TOKEN_DEFAULT,
    GEOCODE_CACHE_KEEP,
    GEOCODE_CACHE_LIMIT,
    GEOCODE_TTL_DAYS,
    HTTP_TIMEOUT_DEFAULT,
    JOB_QUEUE_SIZE,
    PROVIDER_URL_DEFAULT,
    TILE_BASE_URL_DEFAULT,
    TILE_CACHE_DIR,
    TILE_FORMAT_DEFAULT,
    TILE_TTL_DAYS,
)


@dataclass(frozen=True)
class Coordinate:
    """WGS84 point in degrees."""

    latitude: float
    longitude: float


class Address(BaseModel):
    """Postal address; every field is a string, missing parts are empty."""

    house_num: str = ''
    house_name: str = ''
    street: str = ''
    suburb: str = ''
    town: str = ''
    municipality: str = ''
    province: str = ''
    postal_code: str = ''
    country: str = ''
    country_code: str = ''
    time_zone: str = ''

    @field_validator('*', mode='before')
    @classmethod
    def none_to_empty(cls, v: object) -> object:
        return '' if v is None else v

    def as_list(self) -> list[str]:
        """Fields in wire order."""
        return [
            self.house_num,
            self.house_name,
            self.street,
            self.suburb,
            self.town,
            self.municipality,
            self.province,
            self.postal_code,
            self.country,
            self.country_code,
            self.time_zone,
        ]


@dataclass
class MapTile:
    """Composed map image with the geographic corners of its pixel rectangle."""

    png: bytes
    width: int
    height: int
    north_west: Coordinate
    south_east: Coordinate


class ServiceSettings(BaseModel):
    """Runtime configuration of the location service."""

    model_config = {
        'extra': 'ignore',
    }

    provider_url: str = PROVIDER_URL_DEFAULT
    tile_base_url: str = TILE_BASE_URL_DEFAULT
    api_token: str = API_TOKEN_DEFAULT
    tile_format: str = TILE_FORMAT_DEFAULT
    # Tile cache directory; relative paths are resolved against $HOME
    cache_dir: str = TILE_CACHE_DIR
    # Collapse "TAIWAN, ..." country names to "TAIWAN"
    taiwan_country_fix: bool = False
    queue_size: int = JOB_QUEUE_SIZE
    http_timeout_s: float = HTTP_TIMEOUT_DEFAULT
    tile_ttl_days: int = TILE_TTL_DAYS
    geocode_ttl_days: int = GEOCODE_TTL_DAYS
    geocode_cache_limit: int = GEOCODE_CACHE_LIMIT
    geocode_cache_keep: int = GEOCODE_CACHE_KEEP
    # URL probed by HttpProbeMonitor; empty means provider_url
    probe_url: str = ''
    # Device offline (flight) mode: forward geocoding and map tiles are refused
    offline: bool = False

    @field_validator('provider_url', 'tile_base_url', 'probe_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip('/')

    @field_validator('queue_size', 'geocode_cache_limit', 'geocode_cache_keep')
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        v = int(v)
        if v <= 0:
            msg = 'Value must be positive'
            raise ValueError(msg)
        return v

    @field_validator('http_timeout_s')
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        v = float(v)
        if v <= 0:
            msg = 'http_timeout_s must be positive'
            raise ValueError(msg)
        return v

    @model_validator(mode='after')
    def validate_cache_bounds(self) -> ServiceSettings:
        if self.geocode_cache_keep > self.geocode_cache_limit:
            msg = 'geocode_cache_keep must not exceed geocode_cache_limit'
            raise ValueError(msg)
        return self

    @property
    def cache_path(self) -> Path:
        p = Path(self.cache_dir).expanduser()
        return p if p.is_absolute() else Path.home() / p

    @property
    def effective_probe_url(self) -> str:
        return self.probe_url or self.provider_url
