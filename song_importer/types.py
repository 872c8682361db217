from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class SongQuery:
    """One parsed line of the songs file."""
    title: str
    artist: str
    original: str


@dataclass
class Candidate:
    id: str
    name: str
    artist: str
    album: str = ""
    url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


MatchDecision = Optional[Candidate]


@dataclass
class RunSummary:
    added: List[Dict[str, Any]] = field(default_factory=list)
    not_found: List[str] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)
    aborted: bool = False

    def record_added(self, query: SongQuery, match: Candidate) -> None:
        self.added.append({"query": query.original, "match": match.to_dict()})

    def record_not_found(self, query: SongQuery) -> None:
        self.not_found.append(query.original)

    def record_error(self, query: SongQuery, error: str) -> None:
        self.errors.append({"query": query.original, "error": error})

    @property
    def processed(self) -> int:
        return len(self.added) + len(self.not_found) + len(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {"added": self.added, "notFound": self.not_found, "errors": self.errors}


# Record outcome constants
ADDED = "ADDED"
ALREADY_PRESENT = "ALREADY_PRESENT"  # duplicate add, counted as added
