"""Process entrypoint for the Rampart API."""

from __future__ import annotations

import uvicorn

from packages.rampart_shared.config import load_settings
from packages.rampart_shared.logging import configure_from_settings, get_logger

from .app import create_api_app

_LOGGER = get_logger(__name__)


def main() -> None:
    """Configure logging from settings and serve the API through uvicorn."""
    settings = load_settings()
    configure_from_settings(settings.logging)
    app = create_api_app(settings=settings)
    _LOGGER.info(
        "rampart API listening on %s:%s", settings.api.host, settings.api.port
    )
    # uvicorn would otherwise replace the root handler installed above.
    uvicorn.run(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_level=settings.logging.level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
