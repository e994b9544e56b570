"""Run the Habit Tracker server with uvicorn."""

import argparse
import logging

import uvicorn

from .config import load_settings

logger = logging.getLogger(__name__)


def run(host: str = None, port: int = None) -> None:
    settings = load_settings()
    host = host or settings.host
    port = port or settings.port

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Starting Habit Tracker on http://%s:%s", host, port)

    uvicorn.run(
        "habit_tracker.main:app",
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Habit Tracker server")
    parser.add_argument("--host", default=None, help="Interface to bind (default: $HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: $PORT or 4000)")
    args = parser.parse_args()
    run(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
