"""
Shared pytest fixtures for the file generator tests.
"""

import pytest
from unittest.mock import MagicMock, patch

from filegen import config_loader
from filegen.field_model import SchemaField, FieldType
from filegen.schema_store import SchemaStore


class MockSessionState(dict):
    """Mock session state that supports both dict and attribute access."""

    def __setattr__(self, key, value):
        self[key] = value

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{key}'")


@pytest.fixture(autouse=True)
def default_config():
    """Use the built-in defaults instead of whatever config.yaml is on disk."""
    config_loader._config_cache = config_loader.get_default_config()
    yield config_loader._config_cache
    config_loader._config_cache = None


@pytest.fixture
def mock_streamlit():
    """Mock Streamlit session state and output calls."""
    mock_state = MockSessionState()
    with patch('streamlit.session_state', mock_state), \
         patch('streamlit.error') as mock_error, \
         patch('streamlit.caption') as mock_caption, \
         patch('streamlit.toast') as mock_toast:
        yield {
            'session_state': mock_state,
            'error': mock_error,
            'caption': mock_caption,
            'toast': mock_toast,
        }


@pytest.fixture
def store():
    return SchemaStore()


@pytest.fixture
def abc_store():
    """Store holding fields a, b, c in that order."""
    s = SchemaStore()
    for name in ("a", "b", "c"):
        s.add_field(SchemaField(name=name, type=FieldType.STRING))
    return s


def make_response(content=b'[{"id": 1}]', status_code=200, content_type="application/json"):
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    response.headers = {"Content-Type": content_type} if content_type else {}
    return response


@pytest.fixture
def http_session():
    """requests.Session stand-in returning a successful JSON file."""
    session = MagicMock()
    session.post.return_value = make_response()
    return session
