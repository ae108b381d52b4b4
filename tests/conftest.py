"""
Shared fixtures for mpvmarkers tests.
"""

import pytest

from mpvmarkers import MarkerManager, MarkerOptions, MarkerStore


class FakeHost:
    """Stands in for mpv: a settable position and a record of messages and seeks."""

    def __init__(self, path=None, time_pos=None):
        self.path = path
        self.time_pos = time_pos
        self.messages = []
        self.seeks = []

    def get_time_pos(self):
        return self.time_pos

    def get_path(self):
        return self.path

    def seek(self, seconds):
        self.seeks.append(seconds)
        self.time_pos = seconds

    def show_message(self, text, duration):
        self.messages.append((text, duration))


@pytest.fixture
def options():
    return MarkerOptions()


@pytest.fixture
def media_file(tmp_path):
    path = tmp_path / "movie.mkv"
    path.write_bytes(b"")
    return path


@pytest.fixture
def host(media_file):
    return FakeHost(path=str(media_file), time_pos=0.0)


@pytest.fixture
def manager(host, options):
    manager = MarkerManager(host, options)
    manager.on_file_loaded()
    return manager


@pytest.fixture
def three_markers():
    """Store with markers at 10, 30 and 50 seconds, added out of time order."""
    store = MarkerStore()
    store.add(30.0)
    store.add(10.0)
    store.add(50.0)
    return store
