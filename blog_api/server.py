"""
Blog API — Server Lifecycle
============================

What:  Start and stop the HTTP listener programmatically.
How:   run_server() builds an app for the given database URL, starts uvicorn
       on the running event loop and returns a ServerHandle once the socket
       is bound. close_server(handle) stops that exact server.

Nothing here is module-level state: two handles can coexist (e.g. two test
servers on different ports), and stopping one leaves the other running.

Example:
    handle = await run_server("postgresql+asyncpg://...", port=8080)
    ...
    await close_server(handle)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import uvicorn
from fastapi import FastAPI

from blog_api.config import settings
from blog_api.main import create_app

logger = logging.getLogger(__name__)


class ServerStartupError(RuntimeError):
    """The listener could not be started (port in use, bad config, ...)."""


@dataclass
class ServerHandle:
    """Everything close_server() needs to stop one running server."""
    app: FastAPI
    server: uvicorn.Server
    task: "asyncio.Task[None]"

    @property
    def port(self) -> int:
        """The bound port; differs from the configured one when that was 0."""
        for listener in self.server.servers:
            for sock in listener.sockets:
                return sock.getsockname()[1]
        return self.server.config.port


async def run_server(
    database_url: Optional[str] = None,
    port: Optional[int] = None,
    host: Optional[str] = None,
) -> ServerHandle:
    """
    Start serving and return once the listener is accepting connections.

    Args:
        database_url: Defaults to settings.database_url
        port: Defaults to settings.backend_port
        host: Defaults to settings.backend_host

    Raises:
        ServerStartupError: uvicorn exited before it finished starting
    """
    app = create_app(database_url)
    config = uvicorn.Config(
        app,
        host=host or settings.backend_host,
        port=port if port is not None else settings.backend_port,
        log_config=None,  # logging is configured by the app's lifespan
        lifespan="on",
    )
    server = uvicorn.Server(config)
    task = asyncio.create_task(server.serve())

    while not server.started:
        if task.done():
            # uvicorn calls sys.exit() when it cannot bind, which surfaces as SystemExit
            try:
                task.result()
            except (Exception, SystemExit) as e:
                raise ServerStartupError(f"Server failed to start: {e!r}") from e
            raise ServerStartupError("Server exited during startup")
        await asyncio.sleep(0.05)

    handle = ServerHandle(app=app, server=server, task=task)
    logger.info("Your app is listening on port %d", handle.port)
    return handle


async def close_server(handle: ServerHandle) -> None:
    """
    Stop the server behind `handle` and wait for it to finish.

    uvicorn runs the app's lifespan shutdown on exit, which disposes the
    database engine.
    """
    logger.info("Closing server")
    handle.server.should_exit = True
    await handle.task
