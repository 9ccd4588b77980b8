"""
conftest.py - pytest fixtures for realm_sync_config tests.
"""

import tempfile
import pytest

from realm_sync_config import AuthOrigin, BuilderDefaults, StaticIdentityOwner


@pytest.fixture
def temp_dir():
    """Create a temporary root directory for local files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def origin():
    """Secure authentication origin."""
    return AuthOrigin.from_url("https://auth.example.com/auth")


@pytest.fixture
def owner():
    """Authenticated owner with identity 'user42'."""
    return StaticIdentityOwner("user42")


@pytest.fixture
def defaults(temp_dir):
    """Builder defaults rooted in the temp directory."""
    return BuilderDefaults(root_directory=temp_dir)


class RecordingDirectoryCreator:
    """Directory collaborator that records calls instead of touching disk."""

    def __init__(self):
        self.calls = []

    def __call__(self, path):
        self.calls.append(path)


@pytest.fixture
def recorder():
    return RecordingDirectoryCreator()
