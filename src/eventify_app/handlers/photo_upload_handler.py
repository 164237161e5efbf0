"""Photo upload widget: ingestion, validation, removal and cover selection."""
import toga
from toga.style import Pack
from toga.style.pack import COLUMN, ROW
from shared.schemas import PhotoEntry
from shared.utils import generate_photo_id
from shared.validation import Validator, ValidationError, MAX_PHOTO_SIZE_BYTES
from ..services.image_service import ImageService, IncomingFile
from ..state import PhotoUploadState
from .widget_handler import WidgetHandler

DEFAULT_MAX_PHOTOS = 5
IMAGE_FILE_TYPES = ['png', 'jpg', 'jpeg', 'gif', 'webp']
PHOTOS_PER_ROW = 3


class PhotoUploadHandler(WidgetHandler):
    """Handles an ordered list of inline-encoded photos with one cover photo.

    The list is owned by the parent: every change goes out through
    ``on_photos_change`` and comes back through ``set_photos``. Nothing is
    uploaded anywhere; photos live in memory as data URLs.
    """

    def __init__(self, app, photos=None, on_photos_change=None, max_photos=DEFAULT_MAX_PHOTOS,
                 max_photo_size=MAX_PHOTO_SIZE_BYTES, image_service=None):
        super().__init__(app)
        self.state = PhotoUploadState(photos=list(photos or []))
        self.on_photos_change = on_photos_change or (lambda photos: None)
        self.max_photos = max_photos
        self.max_photo_size = max_photo_size
        self.image_service = image_service or ImageService()

        self.status_label = None
        self.photos_box = None
        self.count_label = None

    @property
    def photos(self):
        return list(self.state.photos)

    def set_photos(self, photos):
        """Receive the current photo list from the parent."""
        self.state.photos = list(photos)
        self.refresh()

    def handle_files(self, files):
        """Ingest a batch of ``IncomingFile`` objects.

        A batch that would exceed ``max_photos`` is rejected as a whole.
        Otherwise each file is checked on its own: a rejected file is
        reported and skipped, and the rest of the batch still goes through.

        Returns:
            list: The ``PhotoEntry`` objects added by this batch
        """
        files = list(files)
        if len(self.state.photos) + len(files) > self.max_photos:
            self.alert('Too Many Photos', f"Maximum {self.max_photos} photos allowed")
            return []

        self.state.uploading = True
        self.refresh()
        new_photos = []
        try:
            for index, incoming in enumerate(files):
                try:
                    mime_type = self.image_service.resolve_mime_type(incoming)
                    Validator.validate_image_file(incoming.name, mime_type, incoming.size, self.max_photo_size)
                    url = self.image_service.to_data_url(incoming, mime_type)
                except ValidationError as e:
                    self.alert('Invalid Photo', str(e))
                    continue
                except OSError as e:
                    self.logger.error(f"Error processing file {incoming.name}: {e}", exc_info=True)
                    self.alert('Upload Error', f"Error processing {incoming.name}")
                    continue

                used_ids = [p.id for p in self.state.photos] + [p.id for p in new_photos]
                new_photos.append(PhotoEntry(
                    id=generate_photo_id(used_ids, index),
                    url=url,
                    name=incoming.name,
                    size=incoming.size,
                ))

            self.logger.info(f"Added {len(new_photos)} of {len(files)} photos")
            self.on_photos_change(self.state.photos + new_photos)
        finally:
            self.state.uploading = False
            self.refresh()
        return new_photos

    def handle_paths(self, paths):
        return self.handle_files([IncomingFile.from_path(path) for path in paths])

    def drag_enter(self):
        self.state.drag_active = True
        self.refresh()

    drag_over = drag_enter

    def drag_leave(self):
        self.state.drag_active = False
        self.refresh()

    def drop(self, files):
        self.state.drag_active = False
        files = list(files or [])
        if files:
            return self.handle_files(files)
        self.refresh()
        return []

    async def open_file_dialog(self, widget=None):
        """Let the user pick image files and ingest them."""
        paths = await self.app.main_window.dialog(toga.OpenFileDialog(
            'Select photos',
            file_types=IMAGE_FILE_TYPES,
            multiple_select=True
        ))
        if not paths:
            return []
        return self.handle_paths(paths)

    def remove_photo(self, photo_id):
        self.on_photos_change([p for p in self.state.photos if p.id != photo_id])

    def set_cover_photo(self, photo_id):
        """Mark exactly ``photo_id`` as the cover photo."""
        self.on_photos_change([
            p.model_copy(update={'is_cover': p.id == photo_id}) for p in self.state.photos
        ])

    @property
    def status_text(self):
        if self.state.uploading:
            return 'Uploading...'
        if self.state.drag_active:
            return 'Drop photos to add them'
        return ''

    def build_ui(self):
        upload_button = toga.Button('Click to upload', on_press=self.open_file_dialog)
        help_label = toga.Label(
            f"PNG, JPG, GIF up to {self.max_photo_size // (1024 * 1024)}MB each. Maximum {self.max_photos} photos.",
            style=Pack(font_size=9, padding_top=5)
        )
        self.status_label = toga.Label(self.status_text)
        upload_area = toga.Box(
            children=[upload_button, help_label, self.status_label],
            style=Pack(direction=COLUMN, padding=10)
        )
        self.count_label = toga.Label('', style=Pack(font_weight='bold', padding_top=10))
        self.photos_box = toga.Box(style=Pack(direction=COLUMN))
        self.container = toga.Box(
            children=[upload_area, self.count_label, self.photos_box],
            style=Pack(direction=COLUMN)
        )
        self.refresh()
        return self.container

    def _photo_card(self, photo):
        children = [
            toga.ImageView(toga.Image(src=ImageService.decode_data_url(photo.url)), style=Pack(width=120, height=90)),
            toga.Label(photo.name),
            toga.Label(f"{photo.size / 1024 / 1024:.2f} MB", style=Pack(font_size=9)),
        ]
        if photo.is_cover:
            children.append(toga.Label('Cover', style=Pack(font_weight='bold')))
        else:
            children.append(toga.Button('Set as cover', on_press=lambda w, pid=photo.id: self.set_cover_photo(pid)))
        children.append(toga.Button('Remove', on_press=lambda w, pid=photo.id: self.remove_photo(pid)))
        return toga.Box(children=children, style=Pack(direction=COLUMN, padding=5))

    def refresh(self):
        if not self.is_built:
            return

        self.status_label.text = self.status_text
        self.photos_box.clear()
        if not self.state.photos:
            self.count_label.text = ''
            return

        self.count_label.text = f"Event Photos ({len(self.state.photos)}/{self.max_photos})"
        for start in range(0, len(self.state.photos), PHOTOS_PER_ROW):
            row = toga.Box(style=Pack(direction=ROW))
            for photo in self.state.photos[start:start + PHOTOS_PER_ROW]:
                row.add(self._photo_card(photo))
            self.photos_box.add(row)
