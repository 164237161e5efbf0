"""Places autocomplete providers."""
import logging
import requests
from shared.schemas import Coordinates, PlacePrediction, PlaceResult


class PlacesError(Exception):
    """Raised when a places lookup fails."""
    pass


class PlacesAutocompleteProvider:
    """Suggests places for free text and resolves a suggestion to an address and coordinates."""

    def autocomplete(self, text):
        raise NotImplementedError

    def place_details(self, place_id):
        raise NotImplementedError


class GooglePlacesAutocompleteProvider(PlacesAutocompleteProvider):
    """Google Places web service client.

    Suggestions cover establishments and geocodable addresses, restricted to
    the configured country allow-list. Without an API key the provider is
    disabled and returns no suggestions.
    """

    OK_STATUSES = ('OK', 'ZERO_RESULTS')

    def __init__(self, api_key, base_url='https://maps.googleapis.com/maps/api/place',
                 countries=('us', 'in', 'gb', 'ca', 'au'), timeout=10.0):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.countries = list(countries)
        self.timeout = timeout
        self.logger = logging.getLogger(self.__class__.__name__)
        if not self.api_key:
            self.logger.warning("No Google Maps API key configured, places autocomplete disabled")

    @property
    def enabled(self):
        return bool(self.api_key)

    def _get(self, endpoint, params):
        params = dict(params, key=self.api_key)
        try:
            response = requests.get(f"{self.base_url}/{endpoint}/json", params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise PlacesError(f"Places {endpoint} request failed: {e}") from e
        except ValueError as e:
            raise PlacesError(f"Places {endpoint} returned invalid JSON: {e}") from e

        status = data.get('status')
        if status not in self.OK_STATUSES:
            message = data.get('error_message', '')
            raise PlacesError(f"Places {endpoint} returned {status}: {message}".rstrip(': '))
        return data

    def autocomplete(self, text):
        if not self.enabled or not text or not text.strip():
            return []

        data = self._get('autocomplete', {
            'input': text,
            'types': 'establishment|geocode',
            'components': '|'.join(f"country:{code}" for code in self.countries),
        })
        predictions = [
            PlacePrediction(description=p['description'], place_id=p['place_id'])
            for p in data.get('predictions', [])
            if p.get('description') and p.get('place_id')
        ]
        self.logger.debug(f"Autocomplete for {text!r} returned {len(predictions)} predictions")
        return predictions

    def place_details(self, place_id):
        if not self.enabled:
            return None

        data = self._get('details', {
            'place_id': place_id,
            'fields': 'formatted_address,geometry',
        })
        result = data.get('result') or {}
        location = (result.get('geometry') or {}).get('location')
        coordinates = Coordinates(lat=location['lat'], lng=location['lng']) if location else None
        return PlaceResult(formatted_address=result.get('formatted_address', ''), coordinates=coordinates)
