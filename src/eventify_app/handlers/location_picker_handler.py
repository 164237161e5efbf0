"""Location picker widget: places search, device location and map selection."""
import toga
from toga.style import Pack
from toga.style.pack import COLUMN, ROW
from shared.enums import MarkerKind
from shared.schemas import Coordinates
from shared.utils import truncate_location_name
from ..config_manager import ConfigManager
from ..services.geocode_service import NominatimGeocodeProvider, GeocodeError
from ..services.places_service import GooglePlacesAutocompleteProvider, PlacesError
from ..services.location_sensor import TogaLocationSensor, LocationUnsupportedError
from ..state import LocationPickerState
from .widget_handler import WidgetHandler

DEFAULT_MAP_CENTER = Coordinates(lat=40.7128, lng=-74.0060)
DEFAULT_MAP_ZOOM = 10
UNSUPPORTED_MESSAGE = "Geolocation is not supported on this device."
UNAVAILABLE_MESSAGE = "Unable to detect your location. Please enter manually."


class LocationPickerHandler(WidgetHandler):
    """Handles choosing an event location by name and coordinates.

    A location can come from a places suggestion, from the device position
    or from a point on the map. Every choice is reported through
    ``on_location_change`` (name) and ``on_coordinates_change``
    (``Coordinates``). Lookups run to completion; there is no cancellation
    and the last lookup to finish wins.
    """

    def __init__(self, app, location='', coordinates=None, on_location_change=None,
                 on_coordinates_change=None, placeholder='Enter event location or click on map',
                 geocoder=None, places=None, sensor=None, config=None):
        super().__init__(app)
        self.state = LocationPickerState(search_term=location or '', selected_coords=coordinates)
        self.on_location_change = on_location_change or (lambda name: None)
        self.on_coordinates_change = on_coordinates_change or (lambda coords: None)
        self.placeholder = placeholder

        if geocoder is None or places is None:
            config = config or ConfigManager()
        self.geocoder = geocoder or NominatimGeocodeProvider(
            base_url=config.geocode_base_url,
            timeout=config.api_timeout,
            user_agent=config.user_agent
        )
        self.places = places or GooglePlacesAutocompleteProvider(
            api_key=config.google_maps_api_key,
            base_url=config.places_base_url,
            countries=config.places_countries,
            timeout=config.api_timeout
        )
        self.sensor = sensor or TogaLocationSensor(app)

        self.search_input = None
        self.suggestions_box = None
        self.status_box = None
        self.map_box = None
        self.map_view = None
        self.coords_label = None

    def _select(self, name=None, coordinates=None):
        if name is not None:
            self.state.search_term = name
            self.on_location_change(name)
        if coordinates is not None:
            self.state.selected_coords = coordinates
            self.on_coordinates_change(coordinates)

    def set_search_term(self, text):
        """Keep typed text in state so a refresh does not overwrite it."""
        self.state.search_term = text or ''

    def search(self, text):
        """Update the search text and fetch autocomplete suggestions for it."""
        self.state.search_term = text or ''
        if not self.state.search_term.strip():
            self.state.suggestions = []
            self.refresh()
            return []

        self.state.is_loading = True
        self.refresh()
        try:
            self.state.suggestions = self.places.autocomplete(self.state.search_term)
        except PlacesError as e:
            self.logger.error(f"Error loading place suggestions: {e}")
            self.state.suggestions = []
        finally:
            self.state.is_loading = False
            self.refresh()
        return list(self.state.suggestions)

    def choose_suggestion(self, prediction):
        """Resolve a suggestion and select it. Places without geometry are ignored."""
        try:
            place = self.places.place_details(prediction.place_id)
        except PlacesError as e:
            self.logger.error(f"Error loading place details: {e}")
            return False
        if place is None or place.coordinates is None:
            self.logger.info(f"Place {prediction.place_id} has no geometry, ignoring")
            return False

        self._select(place.formatted_address or prediction.description, place.coordinates)
        self.state.suggestions = []
        self.state.is_map_open = False
        self.refresh()
        return True

    def detect_user_location(self):
        """Ask the device for its position, then reverse geocode it."""
        self.state.is_detecting_location = True
        self.refresh()
        try:
            self.sensor.request_position(self._on_position, self._on_position_error)
        except LocationUnsupportedError:
            self.state.is_detecting_location = False
            self.refresh()
            self.alert('Location Unavailable', UNSUPPORTED_MESSAGE)

    def _on_position(self, coordinates):
        self.state.user_location = coordinates
        self.state.is_detecting_location = False
        self.refresh()
        self.reverse_geocode(coordinates)

    def _on_position_error(self, error):
        self.logger.error(f"Error getting location: {error}")
        self.state.is_detecting_location = False
        self.refresh()
        self.alert('Location Unavailable', UNAVAILABLE_MESSAGE)

    def reverse_geocode(self, coordinates):
        """Name ``coordinates`` and select them.

        Returns:
            str: The shortened location name, or None when the lookup failed
        """
        try:
            display_name = self.geocoder.reverse(coordinates)
        except GeocodeError as e:
            self.logger.error(f"Error reverse geocoding: {e}")
            return None
        if not display_name:
            return None

        name = truncate_location_name(display_name)
        self._select(name, coordinates)
        self.refresh()
        return name

    def handle_map_click(self, coordinates):
        """Select a point picked on the map."""
        self._select(coordinates=coordinates)
        self.reverse_geocode(coordinates)
        self.state.is_map_open = False
        self.refresh()

    def toggle_map(self):
        self.state.is_map_open = not self.state.is_map_open
        self.refresh()

    def clear_user_location(self):
        self.state.user_location = None
        self.refresh()

    def markers(self):
        """Map markers as ``(MarkerKind, Coordinates)`` pairs."""
        result = []
        if self.state.selected_coords is not None:
            result.append((MarkerKind.SELECTED, self.state.selected_coords))
        if self.state.user_location is not None:
            result.append((MarkerKind.USER, self.state.user_location))
        return result

    def map_center(self):
        return self.state.selected_coords or self.state.user_location or DEFAULT_MAP_CENTER

    def display_text(self):
        return truncate_location_name(self.state.search_term) or ''

    @property
    def coordinates_text(self):
        if self.state.selected_coords is None:
            return ''
        return f"Location set: {self.state.selected_coords.display()}"

    def _use_map_center(self, widget):
        location = self.map_view.location
        self.handle_map_click(Coordinates(lat=location.lat, lng=location.lng))

    def build_ui(self):
        self.search_input = toga.TextInput(
            value=self.state.search_term,
            placeholder=self.placeholder,
            on_change=lambda w: self.set_search_term(w.value),
            on_confirm=lambda w: self.search(w.value),
            style=Pack(flex=1)
        )
        detect_button = toga.Button('Detect my location', on_press=lambda w: self.detect_user_location())
        map_button = toga.Button('Map', on_press=lambda w: self.toggle_map())
        input_row = toga.Box(children=[self.search_input, detect_button, map_button], style=Pack(direction=ROW))

        self.suggestions_box = toga.Box(style=Pack(direction=COLUMN))
        self.status_box = toga.Box(style=Pack(direction=COLUMN))
        self.map_box = toga.Box(style=Pack(direction=COLUMN))
        self.coords_label = toga.Label('', style=Pack(font_size=9, padding_top=5))
        self.container = toga.Box(
            children=[input_row, self.suggestions_box, self.status_box, self.map_box, self.coords_label],
            style=Pack(direction=COLUMN)
        )
        self.refresh()
        return self.container

    def _build_map(self):
        pins = [
            toga.MapPin(coords.as_tuple(), title='Event location' if kind == MarkerKind.SELECTED else 'You are here')
            for kind, coords in self.markers()
        ]
        self.map_view = toga.MapView(
            location=self.map_center().as_tuple(),
            zoom=DEFAULT_MAP_ZOOM,
            pins=pins,
            style=Pack(height=256)
        )
        return toga.Box(
            children=[
                toga.Label('Select Location on Map', style=Pack(font_weight='bold')),
                toga.Label('Move the map to the event location and press "Use map center"'),
                self.map_view,
                toga.Button('Use map center', on_press=self._use_map_center),
            ],
            style=Pack(direction=COLUMN, padding_top=5)
        )

    def refresh(self):
        if not self.is_built:
            return

        if self.search_input.value != self.state.search_term:
            self.search_input.value = self.state.search_term

        self.suggestions_box.clear()
        for prediction in self.state.suggestions:
            self.suggestions_box.add(
                toga.Button(prediction.description, on_press=lambda w, p=prediction: self.choose_suggestion(p))
            )

        self.status_box.clear()
        if self.state.is_detecting_location:
            self.status_box.add(toga.Label('Detecting your location...'))
        if self.state.user_location is not None:
            self.status_box.add(toga.Box(
                children=[
                    toga.Label('Location detected successfully', style=Pack(flex=1)),
                    toga.Button('Clear', on_press=lambda w: self.clear_user_location()),
                ],
                style=Pack(direction=ROW)
            ))
        if self.state.is_loading:
            self.status_box.add(toga.Label('Searching locations...'))

        self.map_box.clear()
        self.map_view = None
        if self.state.is_map_open:
            self.map_box.add(self._build_map())

        self.coords_label.text = self.coordinates_text
