"""
tests/conftest.py – pytest configuration for the test suite.

Integration tests (marked with @pytest.mark.integration) talk to a real SMTP
server.  They are automatically skipped when SMTP_HOST, SMTP_USER or
SMTP_PASS are absent, so the full suite runs in CI without any secrets.

To opt in locally, export the SMTP_* variables plus TO_EMAIL and run:

    pytest -m integration
"""
import io
import os

import pytest


def _has_smtp_creds() -> bool:
    """Return True when the minimum SMTP settings are present."""
    return all(os.environ.get(name) for name in ("SMTP_HOST", "SMTP_USER", "SMTP_PASS", "TO_EMAIL"))


def pytest_collection_modifyitems(config, items):
    """Skip @pytest.mark.integration tests when SMTP settings are absent."""
    if _has_smtp_creds():
        return

    skip_marker = pytest.mark.skip(
        reason=(
            "Integration test skipped: SMTP_HOST, SMTP_USER, SMTP_PASS and "
            "TO_EMAIL are not set. Export them and run 'pytest -m integration'."
        )
    )
    for item in items:
        if item.get_closest_marker("integration"):
            item.add_marker(skip_marker)


def make_photo(width: int, height: int, fmt: str = "JPEG", orientation=None) -> bytes:
    """Build an in-memory photo, optionally tagged with an EXIF orientation."""
    from PIL import Image

    img = Image.new("RGB", (width, height), (200, 40, 40))
    kwargs = {}
    if orientation is not None:
        exif = Image.Exif()
        exif[0x0112] = orientation
        kwargs["exif"] = exif
    buf = io.BytesIO()
    img.save(buf, fmt, **kwargs)
    return buf.getvalue()


@pytest.fixture
def photo_factory():
    return make_photo
