"""Command line tool for generating the assets of a cluster installation."""

import argparse
import asyncio
import logging
import sys
import traceback

from installer_assets.exceptions import AssetException
from . import create, graph

_LOGGER = logging.getLogger(__name__)


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Command line utility for generating cluster installation assets.",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )

    subparsers = parser.add_subparsers(dest="command", help="Command", required=True)

    create.CreateAction.register(subparsers)
    graph.GraphAction.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Installer-assets command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        logging.basicConfig(level=args.log_level)

    action = args.cls()
    try:
        asyncio.run(action.run(**vars(args)))
    except AssetException as err:
        if args.log_level == "DEBUG":
            traceback.print_exc(file=sys.stderr)
        print("installer-assets error: ", err, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
