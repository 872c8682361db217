from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from typing import List, Protocol

from .types import ADDED, ALREADY_PRESENT, Candidate

logger = logging.getLogger("song_importer.library")

LIBRARY_PLAYLIST = "library playlist 1"


class BridgeError(RuntimeError):
    pass


class LibraryBridge(Protocol):
    """What the library import needs from the music application."""

    def find_tracks(self, term: str) -> List[Candidate]: ...

    def ensure_playlist(self, name: str) -> str: ...

    def add_track_to_playlist(self, track: Candidate, playlist: str) -> str: ...

    def show_notice(self, message: str, title: str) -> None: ...


def applescript_quote(value: str) -> str:
    """Return value as an AppleScript string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def run_osascript(script: str) -> str:
    """Run an AppleScript through osascript and return its trimmed stdout."""
    try:
        proc = subprocess.run(
            ["osascript", "-"],
            input=script,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except OSError as e:
        raise BridgeError(f"osascript failed to start: {e}") from e
    if proc.returncode != 0:
        raise BridgeError((proc.stderr or "").strip() or f"osascript exited with {proc.returncode}")
    return (proc.stdout or "").rstrip("\n")


def _parse_track_rows(output: str) -> List[Candidate]:
    tracks: List[Candidate] = []
    for row in output.splitlines():
        if not row.strip():
            continue
        fields = row.split("\t")
        fields += [""] * (4 - len(fields))
        pid, name, artist, album = fields[:4]
        tracks.append(Candidate(id=pid, name=name, artist=artist, album=album))
    return tracks


class MusicAppBridge:
    """LibraryBridge backed by the macOS Music app via AppleScript."""

    def __init__(self, app_name: str = "Music"):
        if sys.platform != "darwin" or shutil.which("osascript") is None:
            raise BridgeError("The local library import needs macOS with osascript available")
        self.app = applescript_quote(app_name)

    def activate(self) -> None:
        run_osascript(f"tell application {self.app} to activate")

    def find_tracks(self, term: str) -> List[Candidate]:
        script = f"""
tell application {self.app}
    set results to search {LIBRARY_PLAYLIST} for {applescript_quote(term)}
    set out to ""
    repeat with t in results
        set out to out & (persistent ID of t) & tab & (name of t) & tab & (artist of t) & tab & (album of t) & linefeed
    end repeat
    return out
end tell
"""
        tracks = _parse_track_rows(run_osascript(script))
        logger.debug(f"search {term!r}: {len(tracks)} tracks")
        return tracks

    def ensure_playlist(self, name: str) -> str:
        """Return the persistent id of the user playlist called name, creating it if absent."""
        quoted = applescript_quote(name)
        script = f"""
tell application {self.app}
    if exists user playlist {quoted} then
        return persistent ID of user playlist {quoted}
    end if
    set p to make new user playlist with properties {{name:{quoted}}}
    return persistent ID of p
end tell
"""
        return run_osascript(script).strip()

    def add_track_to_playlist(self, track: Candidate, playlist: str) -> str:
        tid = applescript_quote(track.id)
        script = f"""
tell application {self.app}
    set p to first user playlist whose persistent ID is {applescript_quote(playlist)}
    if (count of (tracks of p whose persistent ID is {tid})) > 0 then
        return "{ALREADY_PRESENT}"
    end if
    duplicate (first track of {LIBRARY_PLAYLIST} whose persistent ID is {tid}) to p
    return "{ADDED}"
end tell
"""
        out = run_osascript(script).strip()
        return ALREADY_PRESENT if out == ALREADY_PRESENT else ADDED

    def show_notice(self, message: str, title: str) -> None:
        script = (
            f"display dialog {applescript_quote(message)} "
            f'buttons {{"OK"}} default button "OK" with title {applescript_quote(title)}'
        )
        run_osascript(script)
