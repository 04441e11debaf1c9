"""
Development Server - Main Application Entry Point

Serves a static directory tree with:
- Single-page-application fallback routing (or per-directory fallbacks)
- Directory listings when no fallback document exists
- Live reload of connected browsers over Server-Sent-Events
"""

import asyncio
import contextlib
import logging
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import structlog
import uvicorn
from fastapi import FastAPI

from spaserve.config import ConfigError, ServerConfig, get_settings, prepare_config
from spaserve.api import DevServerMiddleware, router
from spaserve.reload import LiveReloadHub, watch_for_changes
from spaserve.support import RequestLocator, network_ips


def setup_logging(settings: ServerConfig):
    """Configure structured logging."""
    # Set log level
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt=settings.log_time_format),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure root logger
    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        stream=sys.stdout
    )

    # Reduce noise from libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("watchfiles").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


@dataclass
class ServerInfo:
    """What a started server exposes to an outer presentation layer."""
    url: str
    root: Path
    protocol: str
    port: int
    ips: List[str] = field(default_factory=list)


def describe(config: ServerConfig) -> ServerInfo:
    """Descriptor for a server running with config."""
    return ServerInfo(
        url=f"{config.protocol}://localhost:{config.port}",
        root=config.root,
        protocol=config.protocol,
        port=config.port,
        ips=network_ips(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    config: ServerConfig = app.state.config
    hub: LiveReloadHub = app.state.hub
    locator: RequestLocator = app.state.locator
    logger = structlog.get_logger()

    # Startup
    logger.info("Starting dev server...", root=str(config.root))

    if config.geolocate:
        await locator.open()

    stop_event = asyncio.Event()
    watcher: Optional[asyncio.Task] = None
    if config.reload:
        watcher = asyncio.create_task(watch_for_changes(config.root, hub.on_file_change, stop_event))

    yield

    # Shutdown
    logger.info("Shutting down dev server...")
    hub.shutdown()

    stop_event.set()
    if watcher is not None:
        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher

    await locator.close()
    logger.info("Dev server stopped")


def create_app(config: ServerConfig, hub: Optional[LiveReloadHub] = None) -> FastAPI:
    """Build the application for a prepared config."""
    locator = RequestLocator(config.geolocate_url, config.geolocate_timeout)

    app = FastAPI(
        title="spaserve",
        description="Static development server with SPA fallback and live reload",
        version="1.0.0",
        lifespan=lifespan,
        # Every path belongs to the served tree
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.config = config
    app.state.hub = hub or LiveReloadHub(heartbeat_interval=config.heartbeat_interval)
    app.state.locator = locator

    app.add_middleware(DevServerMiddleware, locator=locator)
    app.include_router(router)
    return app


class DevServer(uvicorn.Server):
    """
    uvicorn server that closes live-reload streams on SIGINT/SIGTERM.

    Open event streams would otherwise keep graceful shutdown waiting
    for their connections forever.
    """

    def __init__(self, config: uvicorn.Config, hub: LiveReloadHub):
        super().__init__(config)
        self._hub = hub
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    async def serve(self, sockets=None) -> None:
        self._loop = asyncio.get_running_loop()
        await super().serve(sockets=sockets)

    def handle_exit(self, sig, frame) -> None:
        if self._loop is not None and not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._hub.shutdown)
        super().handle_exit(sig, frame)


def serve(config: ServerConfig) -> None:
    """Run the server until interrupted."""
    logger = structlog.get_logger()
    app = create_app(config)
    credentials = config.credentials

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        ssl_certfile=credentials.certfile if credentials else None,
        ssl_keyfile=credentials.keyfile if credentials else None,
        ssl_keyfile_password=credentials.password if credentials else None,
        log_level=config.log_level.lower(),
        access_log=False,
    )
    server = DevServer(uvicorn_config, hub=app.state.hub)

    info = describe(config)
    logger.info(
        "Serving",
        url=info.url,
        root=str(info.root),
        protocol=info.protocol,
        port=info.port,
        ips=info.ips,
    )
    # uvicorn re-raises the captured SIGINT once shutdown has finished
    with contextlib.suppress(KeyboardInterrupt):
        server.run()


def main() -> None:
    settings = get_settings()
    setup_logging(settings)
    logger = structlog.get_logger()

    logger.info(
        "config",
        root=str(settings.root),
        module=settings.module,
        fallback=settings.fallback_name,
        reload=settings.reload,
        static=settings.static,
        inject=settings.inject,
        secure=settings.credentials is not None,
        port=settings.port,
    )

    try:
        config = prepare_config(settings)
    except ConfigError as e:
        print(f"[ERR] {e}", file=sys.stderr)
        sys.exit(1)

    serve(config)


if __name__ == "__main__":
    main()
