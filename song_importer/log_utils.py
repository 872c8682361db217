from __future__ import annotations

import json
import logging
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .types import RunSummary
from .utils import ensure_dir, now_timestamp_str


def setup_logging(verbose: bool = False) -> tuple[logging.Logger, Path]:
    """Initialize logging to console (INFO, DEBUG when verbose) and file per run.

    Returns (logger, log_file_path)
    """
    ts = now_timestamp_str()
    logs_dir = Path("logs")
    ensure_dir(logs_dir)
    log_path = logs_dir / f"song-import-{ts}.log"

    logger = logging.getLogger("song_importer")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    # Console handler
    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch.setFormatter(logging.Formatter("%(levelname)s | %(message)s"))
    logger.addHandler(ch)

    # File handler
    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(fh)

    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger.debug("Logging initialized")
    return logger, log_path


def write_results_json(summary: RunSummary, path: Path | str) -> Path:
    """Write the run summary as pretty-printed JSON, replacing any previous file."""
    p = Path(path)
    if p.parent != Path("."):
        ensure_dir(p.parent)
    p.write_text(json.dumps(summary.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    return p


def print_summary(summary: RunSummary, console: Console, list_not_found: bool = True) -> None:
    table = Table(title="Summary", show_header=False)
    table.add_column("Outcome")
    table.add_column("Count", justify="right")
    table.add_row("Added", str(len(summary.added)))
    table.add_row("Not found", str(len(summary.not_found)))
    table.add_row("Errors", str(len(summary.errors)))
    console.print(table)
    if summary.aborted:
        console.print("[bold red]Run aborted: credentials rejected (HTTP 401).[/bold red]")
    if list_not_found and summary.not_found:
        console.print("\nSongs not found:")
        for s in summary.not_found:
            console.print(f"  - {s}", markup=False)
