"""
Airport Directory
=================

Read-through cache of airport records keyed by IATA code.

The record source is injected; by default it is the airportsdata package
(~7,800 airports), the same database the analysis backend resolves
rosters against. Misses are cached too, so an unknown code hits the
source once. Codes that are not three letters or digits are rejected
before the source or the cache is touched.
"""

import logging
import re
from typing import Callable, Dict, Iterable, List, Optional

from models.data_models import Airport

logger = logging.getLogger(__name__)

AirportLoader = Callable[[str], Optional[Airport]]

IATA_CODE = re.compile(r'^[A-Z0-9]{3}$')

_IATA_DB = None


def airportsdata_loader(code: str) -> Optional[Airport]:
    """Look an IATA code up in airportsdata (database loaded on first use)"""
    global _IATA_DB
    if _IATA_DB is None:
        import airportsdata
        _IATA_DB = airportsdata.load('IATA')
        logger.info(f"Loaded {len(_IATA_DB)} airports from airportsdata")

    entry = _IATA_DB.get(code)
    if not entry:
        return None
    return Airport(
        code=entry['iata'],
        timezone=entry['tz'],
        latitude=entry['lat'],
        longitude=entry['lon'],
        name=entry.get('name', ''),
        city=entry.get('city', ''),
        country=entry.get('country', ''),
    )


class AirportDirectory:
    """IATA code -> Airport, with negative-result caching"""

    def __init__(self, loader: AirportLoader = None):
        self.loader = loader or airportsdata_loader
        self._cache: Dict[str, Optional[Airport]] = {}
        # Runtime overrides (e.g. for military/private airfields not in airportsdata)
        self._custom_airports: Dict[str, Airport] = {}

    def get(self, iata_code: str) -> Optional[Airport]:
        code = (iata_code or '').strip().upper()
        if not code:
            return None

        if code in self._custom_airports:
            return self._custom_airports[code]

        if not IATA_CODE.match(code):
            logger.debug(f"Ignoring malformed airport code '{code}'")
            return None

        if code in self._cache:
            return self._cache[code]

        try:
            airport = self.loader(code)
        except Exception as e:
            logger.warning(f"Airport lookup failed for {code}: {e}")
            airport = None

        self._cache[code] = airport
        if airport is None:
            logger.warning(f"Airport '{code}' not found, caching miss")
        return airport

    def get_many(self, codes: Iterable[str]) -> Dict[str, Airport]:
        results = {}
        for code in codes:
            airport = self.get(code)
            if airport is not None:
                results[code.strip().upper()] = airport
        return results

    def is_known(self, iata_code: str) -> bool:
        return self.get(iata_code) is not None

    def cached(self) -> List[Airport]:
        """All airports resolved so far, overrides included"""
        found = [a for a in self._cache.values() if a is not None]
        return list(self._custom_airports.values()) + found

    def add_custom(self, iata: str, timezone: str, lat: float = 0.0, lon: float = 0.0,
                   name: str = '') -> Airport:
        """Add/override airport at runtime (for codes not in airportsdata)."""
        code = iata.upper()
        airport = Airport(code=code, timezone=timezone, latitude=lat, longitude=lon, name=name)
        self._custom_airports[code] = airport
        logger.info(f"Added custom airport {code} ({name or timezone})")
        return airport

    def clear(self):
        self._cache.clear()
