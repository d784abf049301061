import logging
import time
from typing import Callable, Dict, Optional, Tuple

import requests

from ..domain.protocols import WeatherClient
from .catalogue import WEATHER_REGIONS
from ...common.exceptions import DataSourceError

logger = logging.getLogger(__name__)


class OpenMeteoWeatherClient(WeatherClient):
    """
    Current weather code per region from Open-Meteo (no API key required).
    Results are cached per region for `cache_ttl` seconds.
    """

    def __init__(self, base_url: str = "https://api.open-meteo.com/v1/forecast",
                 regions: Optional[Dict[str, Tuple[float, float]]] = None,
                 timeout: float = 5.0, cache_ttl: float = 600.0,
                 session: Optional[requests.Session] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.base_url = base_url
        self.regions = dict(WEATHER_REGIONS if regions is None else regions)
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self.session = session or requests.Session()
        self.clock = clock
        self._cache: Dict[str, Tuple[int, float]] = {}

    def current_code(self, region: str) -> int:
        coords = self.regions.get(region)
        if coords is None:
            raise DataSourceError(f"Unknown weather region: {region}")

        cached = self._cache.get(region)
        if cached and cached[1] > self.clock():
            return cached[0]

        lat, lng = coords
        try:
            resp = self.session.get(
                self.base_url,
                params={
                    "latitude": lat,
                    "longitude": lng,
                    "current": "weather_code",
                    "timezone": "Asia/Kolkata",
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()
            code = int(resp.json()["current"]["weather_code"])
        except requests.RequestException as e:
            raise DataSourceError(f"Weather request failed for {region}: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise DataSourceError(f"Malformed weather response for {region}: {e}") from e

        self._cache[region] = (code, self.clock() + self.cache_ttl)
        logger.debug(f"Weather code for {region}: {code}")
        return code
