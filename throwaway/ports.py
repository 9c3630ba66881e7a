from __future__ import annotations

import socket

from throwaway.errors import PortAllocationError


def allocate_free_port(host: str = "localhost") -> int:
    """Ask the OS for an ephemeral TCP port on the loopback interface.

    The socket is released before returning, so the port is only known to be
    free at the instant of the call. Another process can still claim it before
    the container engine binds it.
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind((socket.gethostbyname(host), 0))
            sock.listen(1)
            return sock.getsockname()[1]
    except OSError as exc:
        raise PortAllocationError(f"could not allocate a free port on {host}: {exc}") from exc
