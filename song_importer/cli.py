from __future__ import annotations

import argparse
import asyncio
import sys
from typing import List, Optional, Sequence

from rich.console import Console

from .auth import Credentials, MissingCredentialsError, load_credentials
from .catalog import DEFAULT_LOCALE, DEFAULT_STOREFRONT, CatalogClient
from .library import BridgeError, MusicAppBridge
from .log_utils import print_summary, setup_logging, write_results_json
from .parsing import read_song_file
from .runner import DELAY_SECONDS, run_catalog_import, run_library_import
from .types import RunSummary, SongQuery
from .utils import env_flag, env_int, env_str

console = Console()

DEFAULT_PLAYLIST = "Imported Songs"
DEFAULT_LIMIT = 10


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="song-importer",
        description="Add songs listed as 'Title - Artist' lines to Apple Music",
    )
    sub = p.add_subparsers(dest="command", required=True)

    lib = sub.add_parser("library", help="Add matching tracks from the local library to a playlist")
    lib.add_argument("songs_file", nargs="?", default="songs.txt")
    lib.add_argument("--playlist", default=DEFAULT_PLAYLIST, help=f"Playlist name (default: {DEFAULT_PLAYLIST})")
    lib.add_argument("--no-dialog", action="store_true", help="Do not show the completion dialog")
    lib.add_argument("--verbose", action="store_true")

    cat = sub.add_parser("catalog", help="Search the Apple Music catalog and add matches to your library")
    cat.add_argument("songs_file", nargs="?", default="songs.txt")
    cat.add_argument("--output", default="results.json", help="JSON report path (overwritten)")
    cat.add_argument("--limit", type=int, default=None, help=f"Songs to process; 0 = all (env LIMIT, default {DEFAULT_LIMIT})")
    cat.add_argument("--delay", type=float, default=DELAY_SECONDS, help="Seconds to wait between songs")
    cat.add_argument("--storefront", default=None, help=f"Catalog storefront (env STOREFRONT, default {DEFAULT_STOREFRONT})")
    cat.add_argument("--locale", default=DEFAULT_LOCALE)
    cat.add_argument("--verbose", action="store_true", help="Show every candidate returned (env VERBOSE=1)")
    return p.parse_args(argv)


def resolve_limit(cli_limit: Optional[int]) -> int:
    limit = cli_limit if cli_limit is not None else env_int("LIMIT", DEFAULT_LIMIT)
    return max(limit, 0)


def select_queries(queries: List[SongQuery], limit: int) -> List[SongQuery]:
    return queries if limit == 0 else queries[:limit]


def _read_queries(path: str) -> List[SongQuery]:
    console.print(f"Reading songs from {path}...")
    try:
        queries = read_song_file(path)
    except FileNotFoundError:
        console.print(f"[red]Songs file not found: {path}[/red]")
        sys.exit(1)
    console.print(f"Found {len(queries)} songs to process")
    return queries


def run_library(args: argparse.Namespace) -> RunSummary:
    logger, log_path = setup_logging(args.verbose)
    queries = _read_queries(args.songs_file)

    try:
        bridge = MusicAppBridge()
        bridge.activate()
    except BridgeError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    try:
        summary = run_library_import(queries, bridge, args.playlist)
    except BridgeError as e:
        console.print(f'[red]Could not prepare playlist "{args.playlist}": {e}[/red]')
        sys.exit(1)

    print_summary(summary, console)
    console.print(f"Log: {log_path}")
    if not args.no_dialog:
        message = (
            f'Added {len(summary.added)} songs to playlist "{args.playlist}".\n\n'
            f"{len(summary.not_found)} songs were not found in your library and may need to be "
            f"added from Apple Music catalog first."
        )
        try:
            bridge.show_notice(message, "Import Complete")
        except BridgeError as e:
            logger.warning(f"Could not show dialog: {e}")
    return summary


async def _run_catalog_async(
    args: argparse.Namespace, queries: List[SongQuery], credentials: Credentials, verbose: bool
) -> RunSummary:
    storefront = args.storefront or env_str("STOREFRONT", DEFAULT_STOREFRONT)
    async with CatalogClient(credentials, storefront=storefront, locale=args.locale) as client:
        return await run_catalog_import(queries, client, delay=args.delay, verbose=verbose)


def run_catalog(args: argparse.Namespace) -> RunSummary:
    console.print("Apple Music Catalog Search")
    console.print("==========================\n")
    try:
        credentials = load_credentials()
    except MissingCredentialsError as e:
        console.print(str(e), style="red", markup=False)
        sys.exit(1)

    verbose = args.verbose or env_flag("VERBOSE")
    logger, log_path = setup_logging(verbose)
    queries = _read_queries(args.songs_file)
    to_process = select_queries(queries, resolve_limit(args.limit))
    console.print(f"Processing first {len(to_process)} songs (set LIMIT env var or --limit to change)\n")

    summary = asyncio.run(_run_catalog_async(args, to_process, credentials, verbose))

    out = write_results_json(summary, args.output)
    print_summary(summary, console, list_not_found=False)
    console.print(f"Results saved to {out}")
    console.print(f"Log: {log_path}")
    return summary


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    if args.command == "library":
        run_library(args)
    else:
        run_catalog(args)


if __name__ == "__main__":
    main()
