from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, List

from .types import SongQuery

SEPARATOR = " - "

_line_break_re = re.compile(r"[\r\n]+")


def parse_song_line(line: str) -> SongQuery:
    """Split a 'Title - Artist' line on the first separator.

    Everything after the first ' - ' is the artist, so 'Love - Me - Kesha'
    gives title 'Love' and artist 'Me - Kesha'. Lines without a separator
    become a title-only query.
    """
    original = line.strip()
    parts = line.split(SEPARATOR)
    if len(parts) >= 2:
        title = parts[0].strip()
        artist = SEPARATOR.join(parts[1:]).strip()
        return SongQuery(title=title, artist=artist, original=original)
    return SongQuery(title=original, artist="", original=original)


def iter_song_lines(text: str) -> Iterator[str]:
    for line in _line_break_re.split(text):
        if line.strip():
            yield line


def read_song_file(path: Path | str) -> List[SongQuery]:
    content = Path(path).read_text(encoding="utf-8")
    return [parse_song_line(line) for line in iter_song_lines(content)]
