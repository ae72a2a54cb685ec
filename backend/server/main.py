"""
Process entry point for the recorder service.

Usage:
    recorder-server [--host HOST] [--port PORT]

All other settings come from the environment (see config.AppConfig);
LOG_LEVEL sets the server's log level.
"""

from __future__ import annotations

import argparse

import uvicorn
from dotenv import load_dotenv

from config import AppConfig


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="chat-driven session recorder")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args(argv)

    load_dotenv()
    config = AppConfig.load_from_env()

    uvicorn.run(
        "server.asgi:app",
        host=args.host,
        port=args.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
