"""
RC Input Socket
===============

RCSource served over a Unix stream socket, for feeding operator input
(joystick bridge, scripted test) into a running simulation.

Protocol (client -> board), one frame per line:
    $RC,<ch0>,<ch1>,...,<ch7>*XX\r\n

XX is the XOR checksum of the payload between $ and *, as two hex digits.
Frames with a bad checksum or wrong channel count are dropped.
"""

import os
import socket
import threading
import time
import logging
from typing import Optional

from ..control.actuators import NUM_RC_CHANNELS, RCFrame, RCSource

logger = logging.getLogger(__name__)


def compute_checksum(payload: str) -> str:
    """
    Compute XOR checksum for NMEA-style message.

    Args:
        payload: Message content between $ and *

    Returns:
        Two-character hex checksum
    """
    checksum = 0
    for c in payload:
        checksum ^= ord(c)
    return f"{checksum:02X}"


def verify_checksum(message: str) -> bool:
    """Verify checksum of a full $...*XX message."""
    if not message.startswith('$') or '*' not in message:
        return False
    payload, expected = message[1:].rsplit('*', 1)
    return compute_checksum(payload) == expected.strip().upper()


def encode_rc_frame(values) -> bytes:
    """Build an $RC line for the given channel values."""
    payload = "RC," + ",".join(str(int(v)) for v in values)
    return f"${payload}*{compute_checksum(payload)}\r\n".encode('ascii')


def parse_rc_frame(line: str) -> Optional[RCFrame]:
    """Parse one $RC line; None if it is malformed."""
    line = line.strip()
    if not verify_checksum(line):
        return None
    parts = line[1:line.rindex('*')].split(',')
    if parts[0] != 'RC' or len(parts) != NUM_RC_CHANNELS + 1:
        return None
    try:
        values = tuple(int(p) for p in parts[1:])
    except ValueError:
        return None
    return RCFrame(values=values, timestamp=time.time())


class SocketRCSource(RCSource):
    """
    RC source listening on a Unix socket.

    One client at a time; a new connection replaces the old one. The
    source reports connected() only while a client is attached.
    """

    def __init__(self, socket_path: str = "/tmp/silboard_rc.sock"):
        super().__init__()
        self.socket_path = socket_path
        self.running = False

        self._server_socket: Optional[socket.socket] = None
        self._client_socket: Optional[socket.socket] = None
        self._accept_thread: Optional[threading.Thread] = None
        self._read_thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

        # Statistics
        self._frames_received = 0
        self._parse_errors = 0

    def start(self) -> bool:
        """
        Create Unix socket server and start accepting clients.

        Returns:
            True if started successfully
        """
        try:
            if os.path.exists(self.socket_path):
                os.unlink(self.socket_path)

            self._server_socket = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            self._server_socket.bind(self.socket_path)
            self._server_socket.listen(1)
            self._server_socket.settimeout(0.5)  # Allow periodic check for shutdown

            self.running = True
            self._accept_thread = threading.Thread(
                target=self._accept_loop,
                daemon=True,
                name="SocketRCSource-accept"
            )
            self._accept_thread.start()

            logger.info(f"RC socket listening on {self.socket_path}")
            return True

        except OSError as e:
            logger.error(f"Failed to start RC socket: {e}")
            return False

    def stop(self):
        """Close connections and remove the socket file."""
        self.running = False

        with self._lock:
            if self._client_socket:
                try:
                    self._client_socket.close()
                except OSError:
                    pass
                self._client_socket = None

        if self._server_socket:
            try:
                self._server_socket.close()
            except OSError:
                pass
            self._server_socket = None

        for thread in (self._accept_thread, self._read_thread):
            if thread and thread.is_alive():
                thread.join(timeout=2.0)

        if os.path.exists(self.socket_path):
            try:
                os.unlink(self.socket_path)
            except OSError:
                pass

        logger.info("RC socket stopped")

    def connected(self) -> bool:
        with self._lock:
            return self._client_socket is not None

    def _accept_loop(self):
        server = self._server_socket
        while self.running:
            try:
                conn, _ = server.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self.running:
                    logger.error(f"Accept error: {e}")
                break

            logger.info("RC client connected")
            with self._lock:
                if self._client_socket:
                    try:
                        self._client_socket.close()
                    except OSError:
                        pass
                self._client_socket = conn

            if self._read_thread and self._read_thread.is_alive():
                self._read_thread.join(timeout=1.0)

            self._read_thread = threading.Thread(
                target=self._read_loop,
                args=(conn,),
                daemon=True,
                name="SocketRCSource-read"
            )
            self._read_thread.start()

    def _read_loop(self, conn: socket.socket):
        buffer = ""
        conn.settimeout(0.5)

        while self.running:
            try:
                data = conn.recv(1024)
            except socket.timeout:
                continue
            except OSError:
                break
            if not data:
                break

            buffer += data.decode('ascii', errors='ignore')
            while '\n' in buffer:
                line, buffer = buffer.split('\n', 1)
                if line.strip():
                    self._handle_line(line)

        with self._lock:
            if self._client_socket is conn:
                self._client_socket = None
        logger.info("RC client disconnected")

    def _handle_line(self, line: str):
        frame = parse_rc_frame(line)
        if frame is None:
            self._parse_errors += 1
            logger.debug(f"Dropping malformed RC frame: {line.strip()!r}")
            return
        self._frames_received += 1
        self._deliver(frame)

    @property
    def stats(self) -> dict:
        return {
            "frames_received": self._frames_received,
            "parse_errors": self._parse_errors,
        }
