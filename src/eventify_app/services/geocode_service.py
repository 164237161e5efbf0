"""Reverse geocoding providers."""
import logging
import requests


class GeocodeError(Exception):
    """Raised when a reverse geocoding lookup fails."""
    pass


class GeocodeProvider:
    """Turns a coordinate pair into a human-readable place name."""

    def reverse(self, coordinates):
        """Return the display name for ``coordinates``, or None if the service has none."""
        raise NotImplementedError


class NominatimGeocodeProvider(GeocodeProvider):
    """Reverse geocoding against an OpenStreetMap Nominatim server.

    Nominatim's usage policy requires an identifying User-Agent, so one is
    always sent.
    """

    def __init__(self, base_url='https://nominatim.openstreetmap.org', timeout=10.0, user_agent='eventify-desktop/1.0', zoom=10):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.user_agent = user_agent
        self.zoom = zoom
        self.logger = logging.getLogger(self.__class__.__name__)

    def reverse(self, coordinates):
        params = {
            'format': 'json',
            'lat': coordinates.lat,
            'lon': coordinates.lng,
            'zoom': self.zoom,
        }
        try:
            response = requests.get(
                f"{self.base_url}/reverse",
                params=params,
                headers={'User-Agent': self.user_agent},
                timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise GeocodeError(f"Reverse geocoding request failed: {e}") from e
        except ValueError as e:
            raise GeocodeError(f"Reverse geocoding returned invalid JSON: {e}") from e

        display_name = data.get('display_name') if isinstance(data, dict) else None
        self.logger.debug(f"Reverse geocoded {coordinates.display()} -> {display_name!r}")
        return display_name or None
