"""
Port discovery and local address lookup.
"""

import socket
from typing import List, Optional

from spaserve.config import ConfigError

DEFAULT_PORT = 8080


def is_port_free(port: int, host: str = "0.0.0.0") -> bool:
    """Check whether a TCP port can be bound on host."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


def find_free_port(host: str = "0.0.0.0") -> int:
    """Let the OS pick an unused port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((host, 0))
        return sock.getsockname()[1]


def resolve_port(requested: Optional[int], host: str = "0.0.0.0") -> int:
    """
    Pick the port to listen on.

    An explicitly requested port must be free. Without one, the default
    port is tried first and any free port is used after that.
    """
    candidate = requested or DEFAULT_PORT
    if is_port_free(candidate, host):
        return candidate
    if requested:
        raise ConfigError("The port you have specified is already in use!")
    return find_free_port(host)


def network_ips() -> List[str]:
    """Local IPv4 addresses, loopback excluded."""
    ips: List[str] = []
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except socket.gaierror:
        infos = []

    for info in infos:
        ip = info[4][0]
        if not ip.startswith("127.") and ip not in ips:
            ips.append(ip)

    if not ips:
        # No resolvable hostname: ask the routing table which interface is used
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            try:
                sock.connect(("10.255.255.255", 1))
                ip = sock.getsockname()[0]
            except OSError:
                ip = None
        if ip and not ip.startswith("127."):
            ips.append(ip)

    return ips
