"""
Recursive file watching for live reload.
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

from watchfiles import awatch

logger = logging.getLogger(__name__)

DEBOUNCE_MS = 100


async def watch_for_changes(
    root: Path,
    on_change: Callable[[], object],
    stop_event: Optional[asyncio.Event] = None,
) -> None:
    """Call on_change once per debounced batch of changes under root."""
    logger.info(f"Watching {root} for changes")

    async for changes in awatch(root, stop_event=stop_event, debounce=DEBOUNCE_MS):
        for _, path in sorted(changes, key=lambda change: change[1]):
            logger.info(f"File changed: {path}")
        on_change()
