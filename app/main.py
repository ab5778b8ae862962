from __future__ import annotations

import argparse
import logging
import os
import uuid

import uvicorn

from app.api.http_app import build_app
from app.logging_setup import configure_logging
from app.services.bootstrap import build_runtime_container
from app.settings import runtime_settings_from_env

ROLE = "api"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scoreboard API entrypoint")
    parser.add_argument("--host", default=None, help="Bind host (defaults to APP_HOST)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (defaults to APP_PORT)")
    parser.add_argument(
        "--dry-run-startup",
        action="store_true",
        help="Validate startup and exit",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable code reload (dev mode)",
    )
    return parser.parse_args(argv)


def create_runtime_app() -> object:
    settings = runtime_settings_from_env()
    run_id = str(uuid.uuid4())
    configure_logging(settings.log_level)
    container = build_runtime_container(settings)
    return build_app(
        role=ROLE,
        run_id=run_id,
        api_deps=container.api_deps,
        on_startup=container.on_startup,
        on_shutdown=container.on_shutdown,
    )


def run(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = runtime_settings_from_env()

    configure_logging(settings.log_level)
    run_id = str(uuid.uuid4())
    logger = logging.getLogger("runtime")

    container = build_runtime_container(settings)
    logger.info(
        "runtime initialized",
        extra={"role": ROLE, "service": ROLE, "run_id": run_id, "store": type(container.store).__name__},
    )

    if args.dry_run_startup:
        logger.info(
            "dry-run startup complete",
            extra={"role": ROLE, "service": ROLE, "run_id": run_id},
        )
        return 0

    host = args.host if args.host is not None else settings.host
    port = args.port if args.port is not None else settings.port
    if args.reload:
        os.environ.setdefault("APP_HOST", host)
        uvicorn.run(
            "app.main:create_runtime_app",
            host=host,
            port=port,
            log_level="warning",
            reload=True,
            factory=True,
        )
    else:
        app = build_app(
            role=ROLE,
            run_id=run_id,
            api_deps=container.api_deps,
            on_startup=container.on_startup,
            on_shutdown=container.on_shutdown,
        )
        uvicorn.run(app, host=host, port=port, log_level="warning")
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
