import json
import logging
import os
import random
import socket
import subprocess
import time
from typing import Any, Callable, Dict, List, Optional, Protocol

from .constants import (
    KEY_BINDINGS,
    MAX_RETRIES,
    MAX_WAIT_FOR_SOCKET,
    RETRY_DELAY,
    SCRIPT_MESSAGE_TARGET,
    SOCKET_POLL_INTERVAL,
    SOCKET_TIMEOUT,
)

logger = logging.getLogger(__name__)


class PlaybackHost(Protocol):
    """What the marker manager needs from the media player."""

    def get_time_pos(self) -> Optional[float]:
        ...

    def get_path(self) -> Optional[str]:
        ...

    def seek(self, seconds: float) -> None:
        ...

    def show_message(self, text: str, duration: float) -> None:
        ...


class MpvIpcClient:
    """
    Talks to mpv over its JSON IPC socket.

    Each command opens a short-lived connection; run_event_loop keeps a
    separate connection open to receive events.
    """

    def __init__(self, ipc_socket_path: Optional[str] = None):
        self.ipc_socket_path: Optional[str] = ipc_socket_path
        self.process: Optional[subprocess.Popen] = None
        self._request_id = 0
        self._running = False

    def start_playback(self, media_path: str, extra_args: Optional[List[str]] = None) -> bool:
        """
        Start mpv on ``media_path`` with an IPC server.

        Returns:
            True once the IPC socket exists, False otherwise
        """
        logger.info("Starting mpv playback with IPC")

        if not self.ipc_socket_path:
            self.ipc_socket_path = f"/tmp/mpv_markers_ipc_{random.randint(10000, 99999)}"
        logger.info(f"IPC socket path: {self.ipc_socket_path}")

        cmd = [
            "mpv",
            f"--input-ipc-server={self.ipc_socket_path}",
            "--idle=yes",  # Keep mpv running when playback ends
            "--force-window=yes",
        ]
        cmd.extend(extra_args or [])
        cmd.append(media_path)
        logger.info(f"Running command: {' '.join(cmd)}")

        try:
            self.process = subprocess.Popen(cmd, start_new_session=True)
            logger.info(f"Started mpv process with PID: {self.process.pid}")
        except OSError as e:
            logger.error(f"Error starting mpv process: {e}")
            return False

        waited = 0.0
        logger.info("Waiting for IPC socket to be created...")
        while waited < MAX_WAIT_FOR_SOCKET and not os.path.exists(self.ipc_socket_path):
            if self.process.poll() is not None:
                logger.error(f"mpv exited with code {self.process.returncode} before creating the socket")
                return False
            time.sleep(SOCKET_POLL_INTERVAL)
            waited += SOCKET_POLL_INTERVAL

        if os.path.exists(self.ipc_socket_path):
            logger.info(f"IPC socket created at {self.ipc_socket_path} after {waited:.1f} seconds")
            return True

        logger.error(f"IPC socket was not created within {MAX_WAIT_FOR_SOCKET} seconds")
        return False

    def _connect(self) -> socket.socket:
        client_socket = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        client_socket.settimeout(SOCKET_TIMEOUT)
        client_socket.connect(self.ipc_socket_path)
        return client_socket

    def send_command(self, command: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Send a command to mpv via the IPC socket and return its reply."""
        if not self.ipc_socket_path or not os.path.exists(self.ipc_socket_path):
            logger.debug(f"Cannot send command, IPC socket not available: {self.ipc_socket_path}")
            return None

        self._request_id += 1
        request_id = self._request_id
        payload = dict(command, request_id=request_id)

        try:
            logger.debug(f"Sending command: {payload}")
            with self._connect() as client_socket:
                client_socket.sendall((json.dumps(payload) + "\n").encode("utf-8"))

                # Events may arrive before the reply; skip them
                buffer = b""
                while True:
                    chunk = client_socket.recv(4096)
                    if not chunk:
                        logger.debug("Connection closed before a reply was received")
                        return {"error": "empty_response"}
                    buffer += chunk
                    while b"\n" in buffer:
                        line, buffer = buffer.split(b"\n", 1)
                        if not line.strip():
                            continue
                        message = json.loads(line.decode("utf-8"))
                        if message.get("request_id") == request_id:
                            logger.debug(f"Command response: {message}")
                            return message
        except socket.timeout:
            logger.error("IPC command timed out")
            return {"error": "socket_timeout"}
        except (OSError, ValueError) as e:
            logger.error(f"Error sending command: {e}")
            return {"error": str(e)}

    def send_command_with_retry(
        self, command: Dict[str, Any], max_retries: int = MAX_RETRIES
    ) -> Optional[Dict[str, Any]]:
        """Send a command to mpv with retry logic."""
        response = None
        for attempt in range(max_retries):
            response = self.send_command(command)

            if response and response.get("error") not in (None, "success"):
                if response["error"] == "property unavailable" or "error running command" in str(response["error"]):
                    logger.warning(f"Command failed on attempt {attempt + 1}, retrying... Error: {response['error']}")
                    time.sleep(RETRY_DELAY)
                    continue
                # Some other error, don't retry
                return response
            return response

        logger.error(f"Command failed after {max_retries} attempts: {command}")
        return {"error": f"failed after {max_retries} attempts"}

    def get_property(self, name: str) -> Any:
        """Return a property value, or None when mpv does not have it."""
        response = self.send_command({"command": ["get_property", name]})
        if not response or response.get("error") != "success":
            return None
        return response.get("data")

    # PlaybackHost

    def get_time_pos(self) -> Optional[float]:
        value = self.get_property("time-pos")
        return float(value) if value is not None else None

    def get_path(self) -> Optional[str]:
        return self.get_property("path")

    def seek(self, seconds: float) -> None:
        response = self.send_command_with_retry({"command": ["seek", seconds, "absolute"]})
        logger.info(f"Seek to {seconds:.3f}s response: {response}")

    def show_message(self, text: str, duration: float) -> None:
        self.send_command({"command": ["show-text", text, int(duration * 1000)]})

    # Key bindings and events

    def bind_keys(self, bindings=KEY_BINDINGS) -> None:
        """Bind keys so each press sends 'script-message auto-markers <action>'."""
        for key, action in bindings:
            response = self.send_command(
                {"command": ["keybind", key, f"script-message {SCRIPT_MESSAGE_TARGET} {action}"]}
            )
            if not response or response.get("error") != "success":
                logger.warning(f"Could not bind {key} to {action}: {response}")

    def run_event_loop(self, on_event: Callable[[Dict[str, Any]], None]) -> None:
        """
        Forward mpv events to ``on_event`` until mpv shuts down or stop() is called.

        ``client-message`` events not addressed to this script are dropped.
        """
        self._running = True
        with self._connect() as event_socket:
            event_socket.settimeout(None)
            reader = event_socket.makefile("rb")
            for raw in reader:
                if not self._running:
                    break
                try:
                    event = json.loads(raw.decode("utf-8"))
                except ValueError:
                    logger.warning(f"Ignoring undecodable IPC line: {raw!r}")
                    continue
                name = event.get("event")
                if not name:
                    continue
                if name == "client-message":
                    args = event.get("args") or []
                    if not args or args[0] != SCRIPT_MESSAGE_TARGET:
                        continue
                logger.debug(f"Event: {event}")
                on_event(event)
                if name == "shutdown":
                    break
        self._running = False
        logger.info("Event loop finished")

    def stop(self) -> None:
        self._running = False

    def terminate(self) -> None:
        """Stop the mpv process started by start_playback, if any."""
        if self.process and self.process.poll() is None:
            self.process.terminate()
            try:
                self.process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self.process.kill()
        self.process = None
