"""Entry point for running the engine's HTTP driver via ``python -m tictactoe_engine``."""

from __future__ import annotations

import uvicorn

from .config import get_settings, setup_logging


def main() -> None:
    """Start the FastAPI driver with settings from the environment."""

    settings = get_settings()
    setup_logging(settings)
    uvicorn.run(
        "tictactoe_engine.ui:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
