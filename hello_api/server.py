import logging
import sys

import uvicorn

from .config import load_settings
from .main import create_app

logger = logging.getLogger(__name__)


def run() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        stream=sys.stdout,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    # The startup line is printed whatever LOG_LEVEL says.
    logger.setLevel(logging.INFO)

    config = uvicorn.Config(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )
    server = uvicorn.Server(config)
    # Exits the process if the address cannot be bound.
    sock = config.bind_socket()
    logger.info("Server is running on port %s", sock.getsockname()[1])
    server.run(sockets=[sock])


if __name__ == "__main__":
    run()
