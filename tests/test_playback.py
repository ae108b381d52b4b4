"""
Tests for the mpv IPC client against a fake IPC server.
"""

import json
import socket
import threading

import pytest

from mpvmarkers.playback import MpvIpcClient


class FakeMpvServer:
    """Answers each connection's commands from a property table, sending an event first."""

    def __init__(self, path, properties):
        self.path = str(path)
        self.properties = properties
        self.commands = []
        self._server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._server.bind(self.path)
        self._server.listen(5)
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self):
        while True:
            try:
                conn, _ = self._server.accept()
            except OSError:
                return
            with conn:
                line = conn.makefile("rb").readline()
                request = json.loads(line)
                self.commands.append(request["command"])
                reply = {"request_id": request["request_id"], "error": "success"}
                if request["command"][0] == "get_property":
                    name = request["command"][1]
                    if name in self.properties:
                        reply["data"] = self.properties[name]
                    else:
                        reply["error"] = "property unavailable"
                conn.sendall(b'{"event": "playback-restart"}\n' + json.dumps(reply).encode() + b"\n")

    def close(self):
        self._server.close()


@pytest.fixture
def server(tmp_path):
    fake = FakeMpvServer(tmp_path / "mpv.sock", {"time-pos": 12.5, "path": "/media/movie.mkv"})
    yield fake
    fake.close()


class TestMpvIpcClient:
    """Test host queries over IPC."""

    def test_get_properties(self, server):
        client = MpvIpcClient(server.path)
        assert client.get_time_pos() == 12.5
        assert client.get_path() == "/media/movie.mkv"

    def test_missing_property(self, server):
        server.properties.pop("time-pos")
        assert MpvIpcClient(server.path).get_time_pos() is None

    def test_seek_and_message(self, server):
        client = MpvIpcClient(server.path)
        client.seek(30.0)
        client.show_message("hello", 1.5)
        assert server.commands == [["seek", 30.0, "absolute"], ["show-text", "hello", 1500]]

    def test_no_socket(self, tmp_path):
        client = MpvIpcClient(str(tmp_path / "absent.sock"))
        assert client.send_command({"command": ["get_property", "path"]}) is None
        assert client.get_time_pos() is None
