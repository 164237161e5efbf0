"""Tag input widget with autocomplete suggestions."""
import toga
from toga.style import Pack
from toga.style.pack import COLUMN, ROW
from ..state import TagInputState
from .widget_handler import WidgetHandler

COMMON_TAGS = (
    'technology', 'business', 'networking', 'workshop', 'conference', 'meetup',
    'social', 'party', 'music', 'art', 'culture', 'education', 'training',
    'startup', 'entrepreneurship', 'innovation', 'design', 'marketing',
    'finance', 'health', 'fitness', 'food', 'drinks', 'entertainment',
    'sports', 'outdoor', 'indoor', 'virtual', 'hybrid', 'free', 'paid',
)

MAX_TAGS = 10
# Delay before suggestions close on blur, so a click on a suggestion still lands
SUGGESTION_CLOSE_DELAY = 0.2
COMMIT_KEYS = ('Enter', ',')


class TagInputHandler(WidgetHandler):
    """Handles an ordered, de-duplicated list of lowercase tags.

    The tag list is owned by the parent: changes are reported through
    ``on_tags_change`` and the parent passes the new list back with
    ``set_tags``.
    """

    def __init__(self, app, tags=None, on_tags_change=None, placeholder='Add tags...',
                 max_tags=MAX_TAGS, vocabulary=COMMON_TAGS):
        super().__init__(app)
        self.state = TagInputState(tags=list(tags or []))
        self.on_tags_change = on_tags_change or (lambda tags: None)
        self.placeholder = placeholder
        self.max_tags = max_tags
        self.vocabulary = tuple(vocabulary)

        self.tags_box = None
        self.text_input = None
        self.counter_label = None
        self.suggestions_box = None

    @property
    def tags(self):
        return list(self.state.tags)

    @property
    def is_full(self):
        return len(self.state.tags) >= self.max_tags

    @property
    def counter_text(self):
        return f"{len(self.state.tags)}/{self.max_tags}"

    @property
    def current_placeholder(self):
        if self.is_full:
            return f"Maximum {self.max_tags} tags reached"
        return self.placeholder

    @property
    def visible_suggestions(self):
        return list(self.state.suggestions) if self.state.show_suggestions else []

    @staticmethod
    def normalize(text):
        """Trim and lowercase a tag. Tags are plain text and kept verbatim otherwise."""
        return (text or '').strip().lower()

    def compute_suggestions(self, text):
        """Vocabulary terms containing ``text`` (case-insensitive) that are not already selected."""
        if not text:
            return []
        needle = text.lower()
        return [term for term in self.vocabulary
                if needle in term.lower() and term not in self.state.tags]

    def _update_suggestions(self):
        self.state.suggestions = self.compute_suggestions(self.state.input_value)
        self.state.show_suggestions = bool(self.state.suggestions)

    def set_tags(self, tags):
        """Receive the current tag list from the parent."""
        self.state.tags = list(tags)
        self._update_suggestions()
        self.refresh()

    def set_input(self, text):
        """Update the typed text. A typed comma commits the text before it."""
        text = text or ''
        while ',' in text:
            head, _, rest = text.partition(',')
            self.state.input_value = head
            self.handle_key(',')
            text = self.state.input_value + rest
        self.state.input_value = text
        self._update_suggestions()
        self.refresh()

    def add_tag(self, text):
        """Add a normalized tag; empty, duplicate and over-limit input is ignored."""
        clean = self.normalize(text)
        if not clean or clean in self.state.tags or self.is_full:
            return False
        self.logger.debug(f"Adding tag {clean!r}")
        self.on_tags_change(self.state.tags + [clean])
        self.state.clear_input()
        self.state.suggestions = []
        self.refresh()
        return True

    def remove_tag(self, tag):
        self.on_tags_change([t for t in self.state.tags if t != tag])

    def handle_key(self, key):
        """Apply the keyboard contract. Returns True when the key was consumed."""
        if key in COMMIT_KEYS:
            if self.state.input_value.strip():
                self.add_tag(self.state.input_value)
            return True
        if key == 'Backspace' and self.state.input_value == '' and self.state.tags:
            self.remove_tag(self.state.tags[-1])
            return True
        return False

    def choose_suggestion(self, suggestion):
        return self.add_tag(suggestion)

    def on_focus(self):
        self.state.show_suggestions = bool(self.state.suggestions)
        self.refresh()

    def on_blur(self):
        return self.schedule(SUGGESTION_CLOSE_DELAY, self.hide_suggestions)

    def hide_suggestions(self):
        self.state.show_suggestions = False
        self.refresh()

    def build_ui(self):
        """Build the tag chips, text input, counter and suggestion list."""
        self.tags_box = toga.Box(style=Pack(direction=ROW, padding_bottom=5))
        self.text_input = toga.TextInput(
            placeholder=self.current_placeholder,
            on_change=lambda w: self.set_input(w.value),
            on_confirm=lambda w: self.handle_key('Enter'),
            on_gain_focus=lambda w: self.on_focus(),
            on_lose_focus=lambda w: self.on_blur(),
            style=Pack(flex=1)
        )
        self.counter_label = toga.Label(self.counter_text, style=Pack(padding_left=5))
        input_row = toga.Box(children=[self.text_input, self.counter_label], style=Pack(direction=ROW))
        self.suggestions_box = toga.Box(style=Pack(direction=COLUMN))
        help_label = toga.Label(
            f"Press Enter or comma to add tags. Maximum {self.max_tags} tags allowed.",
            style=Pack(font_size=9, padding_top=5)
        )
        self.container = toga.Box(
            children=[self.tags_box, input_row, self.suggestions_box, help_label],
            style=Pack(direction=COLUMN)
        )
        self.refresh()
        return self.container

    def refresh(self):
        if not self.is_built:
            return

        self.tags_box.clear()
        for tag in self.state.tags:
            chip = toga.Box(
                children=[
                    toga.Label(tag, style=Pack(padding_right=3)),
                    toga.Button('x', on_press=lambda w, t=tag: self.remove_tag(t)),
                ],
                style=Pack(direction=ROW, padding_right=5)
            )
            self.tags_box.add(chip)

        # Only write back on change, setting the value fires on_change again
        if self.text_input.value != self.state.input_value:
            self.text_input.value = self.state.input_value
        self.text_input.placeholder = self.current_placeholder
        self.text_input.enabled = not self.is_full
        self.counter_label.text = self.counter_text

        self.suggestions_box.clear()
        for suggestion in self.visible_suggestions:
            self.suggestions_box.add(
                toga.Button(suggestion, on_press=lambda w, s=suggestion: self.choose_suggestion(s))
            )
