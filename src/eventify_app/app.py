"""Eventify desktop app - event creation form."""
import json
import logging
import toga
from toga.style import Pack
from toga.style.pack import COLUMN, ROW

from shared.schemas import EventDraft
from shared.validation import Validator, ValidationError
from .config_manager import ConfigManager
from .handlers.tag_input_handler import TagInputHandler
from .handlers.photo_upload_handler import PhotoUploadHandler
from .handlers.location_picker_handler import LocationPickerHandler
from .handlers.admin_access_guide_handler import AdminAccessGuideHandler
from .logging_config import setup_logging


class EventifyApp(toga.App):
    """Main EventifyApp class.

    The app owns the event draft. Widgets report changes through callbacks,
    the draft is updated, and the new values are pushed back into the widgets.
    """

    def __init__(self, config=None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.config = config
        self.draft = EventDraft()
        super().__init__(formal_name='Eventify', app_id='com.eventify.desktop')

    def startup(self):
        """Initialize the app"""
        setup_logging()
        self.logger.info("Starting EventifyApp initialization")

        self.config = self.config or ConfigManager()
        self.logger.info(f"Configuration loaded: places enabled={bool(self.config.google_maps_api_key)}")

        self.create_handlers()

        self.main_window = toga.MainWindow(title=self.formal_name)
        self.main_window.content = toga.ScrollContainer(content=self.build_form(), horizontal=False)
        self.main_window.show()
        self.logger.info("EventifyApp initialization completed")

    def create_handlers(self):
        self.tag_handler = TagInputHandler(
            self,
            tags=self.draft.tags,
            on_tags_change=self.on_tags_change,
            max_tags=self.config.max_tags
        )
        self.photo_handler = PhotoUploadHandler(
            self,
            photos=self.draft.photos,
            on_photos_change=self.on_photos_change,
            max_photos=self.config.max_photos,
            max_photo_size=self.config.max_photo_size
        )
        self.location_handler = LocationPickerHandler(
            self,
            location=self.draft.location,
            coordinates=self.draft.coordinates,
            on_location_change=self.on_location_change,
            on_coordinates_change=self.on_coordinates_change,
            config=self.config
        )
        self.admin_guide_handler = AdminAccessGuideHandler(
            self,
            admin_email=self.config.admin_email,
            on_navigate=self.on_navigate
        )
        self.logger.debug("Widget handlers initialized")

    def build_form(self):
        self.title_input = toga.TextInput(placeholder='Event title', on_change=self.on_title_change)
        submit_button = toga.Button('Create Event', on_press=self.submit, style=Pack(padding_top=10))

        def section(label, content):
            return toga.Box(
                children=[toga.Label(label, style=Pack(font_weight='bold', padding_bottom=5)), content],
                style=Pack(direction=COLUMN, padding_bottom=15)
            )

        return toga.Box(
            children=[
                section('Title', self.title_input),
                section('Location', self.location_handler.build_ui()),
                section('Tags', self.tag_handler.build_ui()),
                section('Photos', self.photo_handler.build_ui()),
                toga.Box(children=[submit_button], style=Pack(direction=ROW)),
                self.admin_guide_handler.build_ui(),
            ],
            style=Pack(direction=COLUMN, padding=20)
        )

    def on_title_change(self, widget):
        self.draft = self.draft.model_copy(update={'title': widget.value})

    def on_tags_change(self, tags):
        self.draft = self.draft.model_copy(update={'tags': list(tags)})
        self.tag_handler.set_tags(self.draft.tags)

    def on_photos_change(self, photos):
        self.draft = self.draft.model_copy(update={'photos': list(photos)})
        self.photo_handler.set_photos(self.draft.photos)

    def on_location_change(self, name):
        self.draft = self.draft.model_copy(update={'location': name})

    def on_coordinates_change(self, coordinates):
        self.draft = self.draft.model_copy(update={'coordinates': coordinates})

    def on_navigate(self, path):
        self.logger.info(f"Navigation to {path} requested")

    def submit(self, widget=None):
        """Validate the draft and log the payload that would be posted."""
        try:
            Validator.validate_required(self.draft.title, 'title')
            Validator.validate_required(self.draft.location, 'location')
        except ValidationError as e:
            self.main_window.dialog(toga.ErrorDialog('Invalid Event', str(e)))
            return None

        payload = self.draft.to_payload()
        self.logger.info(f"Event payload ready: {json.dumps({k: v for k, v in payload.items() if k != 'photos'})}")
        return payload


def main():
    return EventifyApp()
