"""Device location sensors."""
import logging
from shared.schemas import Coordinates


class LocationUnsupportedError(Exception):
    """Raised when the platform offers no location service."""
    pass


class LocationUnavailableError(Exception):
    """Reported when a location fix cannot be obtained."""
    pass


class LocationSensor:
    """Acquires the device position and reports it through callbacks.

    ``request_position`` returns immediately; exactly one of ``on_success``
    (with ``Coordinates``) or ``on_error`` (with an exception) is called later.
    It raises ``LocationUnsupportedError`` when there is no location service.
    """

    @property
    def supported(self):
        return True

    def request_position(self, on_success, on_error):
        raise NotImplementedError


class TogaLocationSensor(LocationSensor):
    """Location sensor backed by the Toga app's location service."""

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger(self.__class__.__name__)

    def _location_service(self):
        try:
            return getattr(self.app, 'location', None)
        except NotImplementedError:
            return None

    @property
    def supported(self):
        return self._location_service() is not None

    def request_position(self, on_success, on_error):
        service = self._location_service()
        if service is None:
            raise LocationUnsupportedError("Geolocation is not supported on this device.")
        self.app.loop.create_task(self._locate(service, on_success, on_error))

    async def _locate(self, service, on_success, on_error):
        # Callbacks run outside the try so a failing callback is not reported as a location error
        try:
            granted = service.has_permission or await service.request_permission()
            if granted:
                latlng = await service.current_location()
                coordinates = Coordinates(lat=latlng.lat, lng=latlng.lng)
        except Exception as e:
            self.logger.error(f"Error getting location: {e}")
            on_error(e)
            return
        if not granted:
            on_error(LocationUnavailableError("Location permission denied"))
            return
        on_success(coordinates)
