from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

import httpx
from tqdm import tqdm

from .catalog import CatalogClient, CatalogError, UnauthorizedError, candidates_from_search
from .library import BridgeError, LibraryBridge
from .matcher import describe_candidates, find_best_match, find_by_artist
from .types import ALREADY_PRESENT, RunSummary, SongQuery

logger = logging.getLogger("song_importer.runner")

DELAY_SECONDS = 0.15
PROGRESS_EVERY = 25


def run_library_import(
    queries: Sequence[SongQuery],
    bridge: LibraryBridge,
    playlist_name: str,
    progress_every: int = PROGRESS_EVERY,
    show_progress_bar: bool = True,
) -> RunSummary:
    """Add each query's best library track to playlist_name.

    Tracks are searched by title only, then disambiguated by artist. A track
    that is already in the playlist counts as added.
    """
    summary = RunSummary()
    playlist = bridge.ensure_playlist(playlist_name)
    logger.info(f"Using playlist: {playlist_name}")

    total = len(queries)
    for i, query in enumerate(tqdm(queries, desc="Import", disable=not show_progress_bar)):
        if progress_every > 0 and i % progress_every == 0:
            logger.info(f"Processing {i + 1}/{total}...")
        try:
            tracks = bridge.find_tracks(query.title)
            for line in describe_candidates(tracks):
                logger.debug(f"    - {line}")
            track = find_by_artist(tracks, query.artist)
            if track is None:
                summary.record_not_found(query)
                continue
            outcome = bridge.add_track_to_playlist(track, playlist)
            if outcome == ALREADY_PRESENT:
                logger.debug(f"Already in playlist: {query.original}")
            summary.record_added(query, track)
        except BridgeError as e:
            logger.warning(f"{query.original}: {e}")
            summary.record_error(query, str(e))
        except Exception as e:
            logger.exception(f"{query.original}: unexpected error")
            summary.record_error(query, str(e) or e.__class__.__name__)
    return summary


async def run_catalog_import(
    queries: Sequence[SongQuery],
    client: CatalogClient,
    delay: float = DELAY_SECONDS,
    verbose: bool = False,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> RunSummary:
    """Search the catalog for each query and add the best match to the library.

    One request at a time, with ``delay`` seconds between records. A 401 stops
    the run; the summary then covers the records handled so far.
    """
    summary = RunSummary()
    total = len(queries)
    for i, query in enumerate(queries):
        if i > 0:
            await sleep(delay)
        progress = f"[{i + 1}/{total}]"
        logger.info(f"{progress} Searching: {query.original}")
        try:
            payload = await client.search(query.title, query.artist)
            cands = candidates_from_search(payload)
            if verbose:
                logger.info(f"  API returned {len(cands)} results:")
                for line in describe_candidates(cands):
                    logger.info(f"    - {line}")
            match = find_best_match(cands, query.title, query.artist)
            if match is None:
                logger.info(f"{progress} Not found")
                summary.record_not_found(query)
                continue
            await client.add_to_library(match.id)
            logger.info(f"{progress} Added: {match.name} by {match.artist}")
            summary.record_added(query, match)
        except UnauthorizedError as e:
            logger.error(f"{progress} Error: {e}")
            summary.record_error(query, str(e))
            summary.aborted = True
            logger.error("Token expired! Please update the token and try again.")
            break
        except (CatalogError, httpx.HTTPError) as e:
            message = str(e) or e.__class__.__name__
            logger.warning(f"{progress} Error: {message}")
            summary.record_error(query, message)
        except Exception as e:
            message = str(e) or e.__class__.__name__
            logger.exception(f"{progress} Unexpected error: {message}")
            summary.record_error(query, message)
    return summary
