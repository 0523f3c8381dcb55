"""
Launch the site generator API under uvicorn.

Defaults come from the same environment/.env settings the app uses, so
`gpt-site-gen` with no arguments honours HOST, PORT and LOG_LEVEL.
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

from gpt_site_gen.config import settings


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the GPT Site Generator API via uvicorn.")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["critical", "error", "warning", "info", "debug", "trace"],
    )
    parser.add_argument("--reload", dest="reload", action="store_true", help="Enable uvicorn auto-reload.")
    parser.set_defaults(reload=False)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper() if args.log_level != "trace" else "DEBUG",
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    uvicorn.run(
        "gpt_site_gen.api.app:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
