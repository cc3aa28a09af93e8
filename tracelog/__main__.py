"""Run the HTTP server: ``python -m tracelog``."""

import uvicorn

from tracelog.api.app import create_app
from tracelog.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.api.host,
        port=settings.api.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
