# -*- coding: utf-8 -*-

import argparse
from typing import List, Optional

from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from app.api.endpoints.evaluation import router as evaluation_router
from app.config import Settings
from app.runner import ModelRunner
from app.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

APP_TITLE = "Quantitative Model Server"
APP_VERSION = "1.0.0"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application around an explicit settings object."""

    settings = settings or Settings.from_env()

    app = FastAPI(title=APP_TITLE, version=APP_VERSION)
    app.state.settings = settings
    app.state.runner = ModelRunner.from_settings(settings)
    app.include_router(evaluation_router)

    @app.get("/")
    async def root():
        index_path = settings.index_path
        try:
            return HTMLResponse(index_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.debug("Front-end page not found: %s", index_path)
        except OSError:
            logger.warning("Front-end page could not be read: %s", index_path, exc_info=True)
        return {"message": APP_TITLE, "version": APP_VERSION}

    @app.get("/health")
    async def health():
        return {"status": "ok", "model_command": list(settings.model_command)}

    logger.info(
        "Model command: %s (timeout %.1fs, archive %s)",
        " ".join(settings.model_command),
        settings.model_timeout,
        settings.archive_dir or "disabled",
    )
    return app


def main(argv: Optional[List[str]] = None) -> None:
    import uvicorn

    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description=APP_TITLE)
    parser.add_argument("port", nargs="?", type=int, default=settings.port, help="TCP port to listen on")
    parser.add_argument("--host", default=settings.host, help="interface to bind")
    args = parser.parse_args(argv)

    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=args.host, port=args.port)


if __name__ == "__main__":
    main()
