"""
Pytest fixtures for sheetthumbs tests.
"""

import io

import pytest


CONFIG_ENV_VARS = [
    'SHEET_ID', 'SHEET_TAB', 'OUT_DIR', 'WIDTH', 'HEIGHT', 'FORCE_REBUILD',
    'CROP_POSITION', 'SOURCE_COLUMN', 'VERIFY_DIMENSIONS', 'USER_AGENT',
    'HTTP_TIMEOUT',
]


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, content=b'', text=None):
        self.status_code = status_code
        self.content = content
        self.text = text if text is not None else content.decode('utf-8', 'replace')

    @property
    def ok(self):
        return self.status_code < 400


def _image_bytes(size, color, mode='RGB', fmt='JPEG'):
    from PIL import Image

    img = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def clean_env(monkeypatch):
    """Fixture removing build configuration variables from the environment."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def build_config(tmp_path):
    """Fixture providing a small build configuration writing into tmp_path."""
    from sheetthumbs.build_config import BuildConfig

    return BuildConfig(
        sheet_id='test-sheet-id',
        sheet_tab='VRBO',
        out_dir=str(tmp_path / 'out'),
        width=60,
        height=40,
        source_column='Main Image URL',
        crop_position='centre',
    )


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG image bytes."""
    return _image_bytes((100, 100), 'red')


@pytest.fixture
def wide_image_bytes():
    """Fixture providing a wide JPEG image."""
    return _image_bytes((300, 100), 'blue')


@pytest.fixture
def sample_png_bytes():
    """Fixture providing sample PNG image bytes with transparency."""
    return _image_bytes((100, 100), (255, 0, 0, 0), mode='RGBA', fmt='PNG')


@pytest.fixture
def make_session():
    """
    Fixture providing a factory for fake requests sessions.

    Routes map URL -> FakeResponse (or an exception to raise). Unknown
    URLs answer 404.
    """
    from unittest.mock import MagicMock

    def factory(routes):
        session = MagicMock()

        def get(url, **kwargs):
            route = routes.get(url, FakeResponse(404, b'not found'))
            if isinstance(route, Exception):
                raise route
            return route

        session.get.side_effect = get
        return session

    return factory


@pytest.fixture
def fake_response():
    """Fixture exposing the FakeResponse class."""
    return FakeResponse


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')
