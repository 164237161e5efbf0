"""Common plumbing for the event form widget handlers."""
import logging
import toga


class WidgetHandler:
    """Base class for widget handlers.

    Holds the app reference, a per-class logger and the root container built
    by ``build_ui``. Subclasses keep their logic free of widget access except
    in ``build_ui`` and ``refresh`` so it runs without a GUI backend.
    """

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger(self.__class__.__name__)
        self.container = None

    @property
    def is_built(self):
        return self.container is not None

    def alert(self, title, message):
        """Show a blocking error dialog on the main window."""
        self.logger.warning(f"{title}: {message}")
        main_window = getattr(self.app, 'main_window', None)
        if main_window is None:
            return
        main_window.dialog(toga.ErrorDialog(title, message))

    def schedule(self, delay, callback):
        """Run ``callback`` after ``delay`` seconds on the app event loop."""
        loop = getattr(self.app, 'loop', None)
        if loop is None:
            callback()
            return None
        return loop.call_later(delay, callback)

    def build_ui(self):
        raise NotImplementedError

    def refresh(self):
        """Rebuild widget contents from state; no-op until ``build_ui`` has run."""
        pass
