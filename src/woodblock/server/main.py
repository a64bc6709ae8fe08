from __future__ import annotations

import argparse
import logging

import uvicorn

from .app import create_app
from .config import ServerConfig


def build_parser() -> argparse.ArgumentParser:
    defaults = ServerConfig.from_env()
    p = argparse.ArgumentParser(description="Run the Wood Block leaderboard service")
    p.add_argument("--host", type=str, default=defaults.host)
    p.add_argument("--port", type=int, default=defaults.port)
    p.add_argument("--db", type=str, default=defaults.db_path, help="SQLite database file")
    p.add_argument("--log-level", type=str, default="info")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = ServerConfig.from_env()
    config.host = args.host
    config.port = args.port
    config.db_path = args.db
    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port, log_level=args.log_level)


if __name__ == "__main__":  # pragma: no cover
    main()
