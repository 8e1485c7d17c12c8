"""Command line interface."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from . import __version__
from .commands import TrackCommand, UpdateCommand, list_sdks, select_sdk_dir
from .config import GlobalOptions
from .errors import Result
from .utils import AsyncHTTPClient, detect_platform, setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dnvm", description="Install and update dotnet SDKs.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print debugging messages.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    track = subparsers.add_parser("track", help="Start tracking a channel and install its latest SDK.")
    track.add_argument("channel", help="lts, current, preview, or a channel version such as 8.0.")
    track.add_argument("--feed-url", help="Feed to download SDKs from.")
    track.add_argument("--sdk-dir", help="Directory under the dnvm home to install into.")
    track.add_argument("-f", "--force", action="store_true", help="Install even if already installed.")

    update = subparsers.add_parser("update", help="Install newer SDKs for all tracked channels.")
    update.add_argument("--feed-url", help="Feed to download SDKs from.")
    update.add_argument("--self", dest="self_update", action="store_true", help="Update dnvm itself.")
    update.add_argument("-y", "--yes", action="store_true", help="Install updates without prompting.")

    select = subparsers.add_parser("select", help="Point the dotnet launcher at another SDK directory.")
    select.add_argument("sdk_dir", help="SDK directory name.")

    subparsers.add_parser("list", help="List tracked channels and installed SDKs.")
    return parser


async def main(argv: Optional[List[str]] = None) -> Result:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    options = GlobalOptions.from_env().with_feed_url(getattr(args, "feed_url", None))
    plat = detect_platform()
    logger.debug(f"dnvm {__version__}, home {options.home}, rid {plat.rid}")

    if args.command == "select":
        return await select_sdk_dir(options, plat, args.sdk_dir)
    if args.command == "list":
        return await list_sdks(options, plat)

    async with AsyncHTTPClient(headers={"User-Agent": f"dnvm/{__version__}"}) as http:
        if args.command == "track":
            command = TrackCommand(options, http, plat, args.channel, args.sdk_dir, args.force)
        else:
            command = UpdateCommand(options, http, plat, yes=args.yes, self_update=args.self_update)
        return await command.run()


def run() -> None:
    try:
        result = asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(130)
    sys.exit(result.exit_code)
