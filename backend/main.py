"""Desktop launcher: serves the API and reports the bound port on stdout."""
import logging
import socket

import uvicorn

from studyassist import app
from studyassist.config import settings


def find_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("", 0))
        return s.getsockname()[1]


def resolve_port(configured: int) -> int:
    return configured or find_free_port()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    configure_logging(settings.log_level)
    port = resolve_port(settings.port)
    # the shell reads this line to find the API
    print(f"PORT={port}", flush=True)
    uvicorn.run(app, host=settings.host, port=port, log_level=settings.log_level)


if __name__ == "__main__":
    main()
