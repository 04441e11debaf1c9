"""Live reload module."""

from spaserve.reload.hub import (
    LiveReloadHub,
    ReloadRegistry,
    ReloadSubscriber,
    SubscriberState,
    format_event,
)
from spaserve.reload.watcher import watch_for_changes

__all__ = [
    "LiveReloadHub",
    "ReloadRegistry",
    "ReloadSubscriber",
    "SubscriberState",
    "format_event",
    "watch_for_changes",
]
