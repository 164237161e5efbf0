"""Pytest configuration and fixtures for Eventify tests."""
import pytest
import tempfile
import os
import io
from unittest.mock import Mock, patch
from PIL import Image
from backend.app import create_app
from backend.services.user_store import SqlUserStore


@pytest.fixture
def db_path():
    """Path of a temporary SQLite database file."""
    db_fd, db_path = tempfile.mkstemp(suffix='.db')
    yield db_path
    os.close(db_fd)
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def app(db_path, tmp_path, monkeypatch):
    """Create and configure a test app instance."""
    monkeypatch.setenv('LOG_DIR', str(tmp_path / 'logs'))
    test_config = {
        'TESTING': True,
        'DATABASE_URI': f'sqlite:///{db_path}',
    }
    return create_app(test_config)


@pytest.fixture
def runner(app):
    """A test runner for the app's Click commands."""
    return app.test_cli_runner()


@pytest.fixture
def sql_store(db_path):
    """A connected SQLite user store with the users table created."""
    store = SqlUserStore(f'sqlite:///{db_path}')
    store.connect()
    store.create_tables()
    yield store
    store.close()


@pytest.fixture
def seed_users(sql_store):
    """Insert user documents into the SQLite store and return their ids."""
    def _seed(*documents):
        return [sql_store.insert_user(document) for document in documents]
    return _seed


class MockApp:
    """Mock app class for testing widget handlers."""
    def __init__(self):
        self.main_window = Mock()
        self.loop = None


@pytest.fixture
def mock_app():
    """Create a mock app for testing."""
    return MockApp()


@pytest.fixture
def mock_dialogs():
    """Patch toga in the handler base class so alerts need no GUI backend."""
    with patch('src.eventify_app.handlers.widget_handler.toga') as mock_toga:
        yield mock_toga


@pytest.fixture
def make_image_bytes():
    """Encode a tiny solid-colour image in the given format."""
    def _make(image_format='PNG', size=(4, 4)):
        buffer = io.BytesIO()
        Image.new('RGB', size, color='red').save(buffer, format=image_format)
        return buffer.getvalue()
    return _make


@pytest.fixture
def png_bytes(make_image_bytes):
    return make_image_bytes('PNG')
