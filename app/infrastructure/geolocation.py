"""IP geolocation client (ipwho.is).

Lookups are best effort: any failure (timeout, HTTP error, unsuccessful
answer, unroutable address) yields the default "unknown" record.
"""

import copy
import ipaddress
import logging
from typing import Optional

import httpx

from app.config import get_settings
from app.core.constants import UNKNOWN
from app.infrastructure.cache import TimedCache

settings = get_settings()
logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 24 * 60 * 60
CACHE_MAX_ENTRIES = 1000
USER_AGENT = "PetRegistryAPI/1.0"

DEFAULT_IP_INFO = {
    "country": UNKNOWN,
    "city": UNKNOWN,
    "region": UNKNOWN,
    "coordinates": {"latitude": None, "longitude": None},
    "timezone": UNKNOWN,
    "isp": UNKNOWN,
}


def default_ip_info() -> dict:
    return copy.deepcopy(DEFAULT_IP_INFO)


def is_public_ip(ip: Optional[str]) -> bool:
    try:
        address = ipaddress.ip_address((ip or "").strip())
    except ValueError:
        return False
    return address.is_global


class GeoLocationService:
    """Resolves an IP address to country/city/region/coordinates/timezone/ISP."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.GEOLOCATION_API_URL).rstrip("/")
        self.timeout = settings.GEOLOCATION_TIMEOUT_SECONDS if timeout is None else timeout
        self.transport = transport
        self.cache = TimedCache(CACHE_TTL_SECONDS, CACHE_MAX_ENTRIES)

    def get_ip_info(self, ip: Optional[str]) -> dict:
        if not is_public_ip(ip):
            return default_ip_info()

        cached = self.cache.get(ip)
        if cached:
            return copy.deepcopy(cached)

        try:
            with httpx.Client(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
                transport=self.transport,
            ) as client:
                response = client.get(f"{self.base_url}/{ip}")
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Geolocation lookup failed for {ip}: {e}")
            return default_ip_info()

        if not data.get("success"):
            logger.info(f"Geolocation service has no data for {ip}: {data.get('message')}")
            return default_ip_info()

        ip_info = {
            "country": data.get("country") or UNKNOWN,
            "city": data.get("city") or UNKNOWN,
            "region": data.get("region") or UNKNOWN,
            "coordinates": {
                "latitude": data.get("latitude"),
                "longitude": data.get("longitude"),
            },
            "timezone": (data.get("timezone") or {}).get("id") or UNKNOWN,
            "isp": (data.get("connection") or {}).get("isp") or UNKNOWN,
        }
        self.cache.set(ip, ip_info)
        return copy.deepcopy(ip_info)

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_cache_stats(self) -> dict:
        return self.cache.stats()


geolocation_service = GeoLocationService()
