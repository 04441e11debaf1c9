"""Collaborators used by the responders and the server lifecycle."""

from spaserve.support.geo import RequestLocator, PLACEHOLDER_LOCATION
from spaserve.support.listing import render_listing
from spaserve.support.mime import mime_type
from spaserve.support.network import (
    find_free_port,
    is_port_free,
    network_ips,
    resolve_port,
)

__all__ = [
    "RequestLocator",
    "PLACEHOLDER_LOCATION",
    "render_listing",
    "mime_type",
    "find_free_port",
    "is_port_free",
    "network_ips",
    "resolve_port",
]
