"""Admin access guide overlay."""
import toga
from toga.style import Pack
from toga.style.pack import COLUMN, ROW
from ..state import AdminGuideState
from .widget_handler import WidgetHandler

DASHBOARD_FEATURES = (
    'View all users and manage accounts',
    'Monitor all events and analytics',
    'Manage teams and invitations',
    'System-wide statistics',
    'User activation/deactivation',
)

NAVIGATION_LINKS = (
    ('Register as Admin', '/register'),
    ('Login', '/login'),
)


class AdminAccessGuideHandler(WidgetHandler):
    """Toggleable panel explaining how to reach the master dashboard."""

    def __init__(self, app, admin_email='admin@huddle.com', on_navigate=None):
        super().__init__(app)
        self.state = AdminGuideState()
        self.admin_email = admin_email
        self.on_navigate = on_navigate or (lambda path: None)
        self.panel_box = None

    @property
    def is_open(self):
        return self.state.is_open

    def toggle(self):
        self.state.is_open = not self.state.is_open
        self.refresh()

    def open(self):
        self.state.is_open = True
        self.refresh()

    def close(self):
        self.state.is_open = False
        self.refresh()

    def steps(self):
        return [
            f"Register with email: {self.admin_email}",
            "Login with the same email",
            'You\'ll see "Admin Panel" in the navigation',
        ]

    def features(self):
        return list(DASHBOARD_FEATURES)

    def links(self):
        return list(NAVIGATION_LINKS)

    def navigate(self, path):
        self.logger.info(f"Navigating to {path}")
        self.close()
        self.on_navigate(path)

    def build_ui(self):
        toggle_button = toga.Button('Admin Access Guide', on_press=lambda w: self.toggle())
        self.panel_box = toga.Box(style=Pack(direction=COLUMN))
        self.container = toga.Box(children=[toggle_button, self.panel_box], style=Pack(direction=COLUMN))
        self.refresh()
        return self.container

    def refresh(self):
        if not self.is_built:
            return

        self.panel_box.clear()
        if not self.state.is_open:
            return

        header = toga.Box(
            children=[
                toga.Label('Admin Access Guide', style=Pack(font_weight='bold', flex=1)),
                toga.Button('Close', on_press=lambda w: self.close()),
            ],
            style=Pack(direction=ROW)
        )
        self.panel_box.add(header)
        self.panel_box.add(toga.Label('Admin Access Required'))
        self.panel_box.add(toga.Label('How to Access Master Dashboard:', style=Pack(font_weight='bold', padding_top=5)))
        for number, step in enumerate(self.steps(), start=1):
            self.panel_box.add(toga.Label(f"{number}. {step}"))
        self.panel_box.add(toga.Label('Master Dashboard Features:', style=Pack(font_weight='bold', padding_top=5)))
        for feature in self.features():
            self.panel_box.add(toga.Label(f"- {feature}", style=Pack(font_size=9)))

        links_row = toga.Box(style=Pack(direction=ROW, padding_top=5))
        for label, path in self.links():
            links_row.add(toga.Button(label, on_press=lambda w, p=path: self.navigate(p), style=Pack(flex=1)))
        self.panel_box.add(links_row)
