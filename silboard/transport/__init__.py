"""External input transports."""

from .rc_socket import SocketRCSource
