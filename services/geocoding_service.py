import logging
from typing import Optional

import requests

from core.exceptions import UpstreamFailure

log = logging.getLogger(__name__)

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class GoogleGeocodingClient:
    """Reverse geocoding through the Google Maps Geocoding API. Single attempt, no retry."""

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def reverse_geocode(self, latitude: float, longitude: float) -> str:
        """Return the formatted address of the first result for the coordinates."""
        params = {"latlng": f"{latitude},{longitude}", "key": self.api_key}

        try:
            res = self.session.get(GEOCODE_URL, params=params, timeout=self.timeout)
            res.raise_for_status()
            payload = res.json()
        except (requests.RequestException, ValueError) as exc:
            log.error("Reverse geocoding request failed: %s", exc, exc_info=True)
            raise UpstreamFailure("Could not resolve the location name.") from exc

        api_status = payload.get("status")
        results = payload.get("results") or []
        if api_status != "OK" or not results:
            log.error(
                "Reverse geocoding returned status %s (%s)",
                api_status,
                payload.get("error_message", "no results"),
            )
            raise UpstreamFailure("Could not resolve the location name.")

        return results[0]["formatted_address"]
