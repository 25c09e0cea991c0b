"""Command line entry point: `docrest --root /srv/docs --port 8787`."""

import argparse
from typing import List, Optional

import uvicorn

from docrest.app import DocRest
from docrest.core.config import DocRestConfig
from docrest.core.errors import ConfigError
from docrest.core.logging import log


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docrest",
        description="Serve document store collections as generic REST resources.",
    )
    parser.add_argument("--root", help="Root directory of the databases (env DOCREST_ROOT).")
    parser.add_argument("--host", help="Interface to bind (env DOCREST_HOST).")
    parser.add_argument("--port", type=int, help="Port to listen on (env DOCREST_PORT).")
    parser.add_argument("--debug", action="store_true", default=None, help="Enable debug logging.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = DocRestConfig.from_env(
            root=args.root, host=args.host, port=args.port, debug_mode=args.debug
        )
    except ConfigError as e:
        log.error(str(e))
        return 2

    # The console logger is process-wide, so only the entry point toggles it
    log.debug_enabled = config.debug_mode

    docrest = DocRest(config)
    app = docrest.generate_all()
    docrest.print_welcome()

    uvicorn.run(app, host=config.host, port=config.port, log_level="debug" if config.debug_mode else "info")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
