"""Run the API until interrupted: ``python -m blog_api``."""

import asyncio
import logging

from blog_api.config import settings
from blog_api.server import ServerStartupError, close_server, run_server

logger = logging.getLogger("blog_api")


async def _serve_forever() -> None:
    handle = await run_server(settings.database_url, settings.backend_port)
    try:
        await handle.task
    finally:
        if not handle.task.done():
            await close_server(handle)


def main() -> None:
    try:
        asyncio.run(_serve_forever())
    except ServerStartupError as e:
        logger.error("%s", e)
        raise SystemExit(1)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
