"""Tests for the external provider and image services."""
import asyncio
import pytest
import requests
from unittest.mock import Mock, AsyncMock, patch
from shared.schemas import Coordinates, PlacePrediction
from src.eventify_app.services.geocode_service import NominatimGeocodeProvider, GeocodeError
from src.eventify_app.services.places_service import GooglePlacesAutocompleteProvider, PlacesError
from src.eventify_app.services.image_service import ImageService, IncomingFile
from src.eventify_app.services.location_sensor import (
    TogaLocationSensor, LocationUnsupportedError, LocationUnavailableError
)

NYC = Coordinates(lat=40.7128, lng=-74.006)


class TestNominatimGeocodeProvider:

    @patch('src.eventify_app.services.geocode_service.requests.get')
    def test_reverse(self, mock_get):
        mock_get.return_value.json.return_value = {'display_name': 'New York, New York County, NY, USA'}
        provider = NominatimGeocodeProvider(timeout=3.0, user_agent='eventify-tests')

        assert provider.reverse(NYC) == 'New York, New York County, NY, USA'

        mock_get.assert_called_once_with(
            'https://nominatim.openstreetmap.org/reverse',
            params={'format': 'json', 'lat': 40.7128, 'lon': -74.006, 'zoom': 10},
            headers={'User-Agent': 'eventify-tests'},
            timeout=3.0
        )

    @patch('src.eventify_app.services.geocode_service.requests.get')
    def test_reverse_without_display_name(self, mock_get):
        mock_get.return_value.json.return_value = {'error': 'Unable to geocode'}
        assert NominatimGeocodeProvider().reverse(NYC) is None

    @patch('src.eventify_app.services.geocode_service.requests.get')
    def test_reverse_network_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError('offline')
        with pytest.raises(GeocodeError, match='Reverse geocoding request failed'):
            NominatimGeocodeProvider().reverse(NYC)

    @patch('src.eventify_app.services.geocode_service.requests.get')
    def test_reverse_invalid_json(self, mock_get):
        mock_get.return_value.json.side_effect = ValueError('no json')
        with pytest.raises(GeocodeError, match='invalid JSON'):
            NominatimGeocodeProvider().reverse(NYC)


class TestGooglePlacesAutocompleteProvider:

    def test_disabled_without_key(self):
        provider = GooglePlacesAutocompleteProvider(api_key='')
        with patch('src.eventify_app.services.places_service.requests.get') as mock_get:
            assert provider.enabled is False
            assert provider.autocomplete('central park') == []
            assert provider.place_details('abc') is None
            mock_get.assert_not_called()

    @patch('src.eventify_app.services.places_service.requests.get')
    def test_autocomplete(self, mock_get):
        mock_get.return_value.json.return_value = {
            'status': 'OK',
            'predictions': [
                {'description': 'Central Park, New York, NY, USA', 'place_id': 'abc'},
                {'description': 'incomplete'},
            ],
        }
        provider = GooglePlacesAutocompleteProvider(api_key='key', timeout=4.0)

        predictions = provider.autocomplete('central park')

        assert predictions == [PlacePrediction(description='Central Park, New York, NY, USA', place_id='abc')]
        url = mock_get.call_args.args[0]
        params = mock_get.call_args.kwargs['params']
        assert url == 'https://maps.googleapis.com/maps/api/place/autocomplete/json'
        assert params['types'] == 'establishment|geocode'
        assert params['components'] == 'country:us|country:in|country:gb|country:ca|country:au'
        assert params['key'] == 'key'
        assert mock_get.call_args.kwargs['timeout'] == 4.0

    @patch('src.eventify_app.services.places_service.requests.get')
    def test_zero_results(self, mock_get):
        mock_get.return_value.json.return_value = {'status': 'ZERO_RESULTS', 'predictions': []}
        assert GooglePlacesAutocompleteProvider(api_key='key').autocomplete('zzzz') == []

    @patch('src.eventify_app.services.places_service.requests.get')
    def test_error_status(self, mock_get):
        mock_get.return_value.json.return_value = {'status': 'REQUEST_DENIED', 'error_message': 'bad key'}
        with pytest.raises(PlacesError, match='REQUEST_DENIED'):
            GooglePlacesAutocompleteProvider(api_key='key').autocomplete('central')

    @patch('src.eventify_app.services.places_service.requests.get')
    def test_place_details(self, mock_get):
        mock_get.return_value.json.return_value = {
            'status': 'OK',
            'result': {
                'formatted_address': 'Central Park, New York, NY, USA',
                'geometry': {'location': {'lat': 40.78, 'lng': -73.96}},
            },
        }
        place = GooglePlacesAutocompleteProvider(api_key='key').place_details('abc')

        assert place.formatted_address == 'Central Park, New York, NY, USA'
        assert place.coordinates == Coordinates(lat=40.78, lng=-73.96)
        assert mock_get.call_args.kwargs['params']['fields'] == 'formatted_address,geometry'

    @patch('src.eventify_app.services.places_service.requests.get')
    def test_place_details_without_geometry(self, mock_get):
        mock_get.return_value.json.return_value = {'status': 'OK', 'result': {'formatted_address': 'Somewhere'}}
        place = GooglePlacesAutocompleteProvider(api_key='key').place_details('abc')
        assert place.coordinates is None


class TestImageService:

    def test_declared_type_wins(self, png_bytes):
        incoming = IncomingFile(name='a.png', size=len(png_bytes), mime_type='image/png', data=png_bytes)
        assert ImageService().resolve_mime_type(incoming) == 'image/png'

    def test_sniffs_undeclared_type(self, make_image_bytes):
        incoming = IncomingFile.from_bytes('upload', make_image_bytes('GIF'))
        assert incoming.mime_type is None
        assert ImageService().resolve_mime_type(incoming) == 'image/gif'

    def test_unidentifiable_content(self):
        incoming = IncomingFile.from_bytes('upload', b'garbage')
        assert ImageService().resolve_mime_type(incoming) is None

    def test_data_url_round_trip(self, png_bytes, tmp_path):
        path = tmp_path / 'photo.png'
        path.write_bytes(png_bytes)
        incoming = IncomingFile.from_path(path)

        assert incoming.name == 'photo.png'
        assert incoming.size == len(png_bytes)
        assert incoming.mime_type == 'image/png'
        url = ImageService().to_data_url(incoming, 'image/png')
        assert ImageService.decode_data_url(url) == png_bytes


class TestTogaLocationSensor:

    def test_unsupported_without_location_service(self):
        app = Mock(spec=[])
        sensor = TogaLocationSensor(app)
        assert sensor.supported is False
        with pytest.raises(LocationUnsupportedError):
            sensor.request_position(Mock(), Mock())

    def test_request_position_schedules_lookup(self):
        app = Mock()
        sensor = TogaLocationSensor(app)
        with patch.object(sensor, '_locate', new=Mock(return_value='coro')):
            sensor.request_position(Mock(), Mock())
        app.loop.create_task.assert_called_once_with('coro')

    def test_locate_success(self):
        service = Mock(has_permission=True)
        service.current_location = AsyncMock(return_value=Mock(lat=40.7128, lng=-74.006))
        on_success, on_error = Mock(), Mock()

        asyncio.run(TogaLocationSensor(Mock())._locate(service, on_success, on_error))

        on_success.assert_called_once_with(NYC)
        on_error.assert_not_called()

    def test_locate_permission_denied(self):
        service = Mock(has_permission=False)
        service.request_permission = AsyncMock(return_value=False)
        on_success, on_error = Mock(), Mock()

        asyncio.run(TogaLocationSensor(Mock())._locate(service, on_success, on_error))

        on_success.assert_not_called()
        assert isinstance(on_error.call_args.args[0], LocationUnavailableError)

    def test_locate_failure(self):
        service = Mock(has_permission=True)
        service.current_location = AsyncMock(side_effect=RuntimeError('no fix'))
        on_success, on_error = Mock(), Mock()

        asyncio.run(TogaLocationSensor(Mock())._locate(service, on_success, on_error))

        on_success.assert_not_called()
        assert str(on_error.call_args.args[0]) == 'no fix'

    def test_locate_success_callback_error_is_not_reported_as_location_error(self):
        service = Mock(has_permission=True)
        service.current_location = AsyncMock(return_value=Mock(lat=40.7128, lng=-74.006))
        on_success = Mock(side_effect=RuntimeError('boom'))
        on_error = Mock()

        with pytest.raises(RuntimeError, match='boom'):
            asyncio.run(TogaLocationSensor(Mock())._locate(service, on_success, on_error))

        on_success.assert_called_once_with(NYC)
        on_error.assert_not_called()

    def test_locate_requests_permission_then_reports_fix(self):
        service = Mock(has_permission=False)
        service.request_permission = AsyncMock(return_value=True)
        service.current_location = AsyncMock(return_value=Mock(lat=40.7128, lng=-74.006))
        on_success, on_error = Mock(), Mock()

        asyncio.run(TogaLocationSensor(Mock())._locate(service, on_success, on_error))

        service.request_permission.assert_awaited_once()
        on_success.assert_called_once_with(NYC)
        on_error.assert_not_called()
