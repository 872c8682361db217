"""Apple Music web API client: catalog search and add-to-library."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from .auth import Credentials
from .types import Candidate

logger = logging.getLogger("song_importer.catalog")

API_SEARCH = "https://amp-api-edge.music.apple.com/v1/catalog/{storefront}/search"
API_LIBRARY = "https://amp-api.music.apple.com/v1/me/library"

DEFAULT_STOREFRONT = "in"
DEFAULT_LOCALE = "en-GB"
SEARCH_LIMIT = 5

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/18.6 Safari/605.1.15"
)


class CatalogError(Exception):
    """Non-2xx answer or unusable response body from the catalog API."""

    def __init__(self, status: Optional[int], message: str):
        self.status = status
        super().__init__(message)


class UnauthorizedError(CatalogError):
    """HTTP 401: the tokens are missing or expired."""


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    if response.status_code == 401:
        raise UnauthorizedError(401, "Unauthorized - token may be expired")
    raise CatalogError(response.status_code, f"HTTP {response.status_code}: {response.reason_phrase}")


def candidates_from_search(payload: Dict[str, Any] | None) -> List[Candidate]:
    """Turn a map-format search payload into candidates, keeping the API order.

    Raises CatalogError when the payload does not have the map layout.
    """
    if payload is None:
        return []
    if not isinstance(payload, dict):
        raise CatalogError(None, "Unexpected search response: not a JSON object")
    resources = payload.get("resources") or {}
    songs = (resources.get("songs") if isinstance(resources, dict) else None) or {}
    if not isinstance(songs, dict):
        raise CatalogError(None, "Unexpected search response: 'songs' is not a map")
    cands: List[Candidate] = []
    for song_id, song in songs.items():
        if not isinstance(song, dict):
            raise CatalogError(None, f"Unexpected search response for song {song_id}")
        attrs = song.get("attributes") or {}
        cands.append(
            Candidate(
                id=str(song_id),
                name=attrs.get("name") or "",
                artist=attrs.get("artistName") or "",
                album=attrs.get("albumName") or "",
                url=attrs.get("url") or "",
            )
        )
    return cands


class CatalogClient:
    """Async client for the two calls the importer needs.

    Use as an async context manager. When an ``httpx.AsyncClient`` is passed
    in, it is used as-is and left open on exit.
    """

    def __init__(
        self,
        credentials: Credentials,
        storefront: str = DEFAULT_STOREFRONT,
        locale: str = DEFAULT_LOCALE,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.credentials = credentials
        self.storefront = storefront
        self.locale = locale
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "CatalogClient":
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "*/*",
            "Authorization": f"Bearer {self.credentials.bearer_token}",
            "media-user-token": self.credentials.media_user_token,
            "Origin": "https://music.apple.com",
            "Referer": "https://music.apple.com/",
            "User-Agent": USER_AGENT,
        }

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("CatalogClient must be used inside 'async with'")
        return self._client

    async def search(self, title: str, artist: str) -> Dict[str, Any]:
        term = f"{title} {artist}".strip()
        params = {
            "format[resources]": "map",
            "l": self.locale,
            "limit": str(SEARCH_LIMIT),
            "platform": "web",
            "term": term,
            "types": "songs",
        }
        url = API_SEARCH.format(storefront=self.storefront)
        logger.debug(f"GET {url} term={term!r}")
        response = await self.client.get(url, params=params, headers=self._headers())
        _raise_for_status(response)
        try:
            return response.json()
        except ValueError as e:
            raise CatalogError(response.status_code, f"Invalid JSON in search response (HTTP {response.status_code})") from e

    async def add_to_library(self, song_id: str) -> bool:
        params = {"ids[songs]": song_id, "representation": "ids"}
        # httpx sends Content-Length: 0 for the empty body
        logger.debug(f"POST {API_LIBRARY} id={song_id}")
        response = await self.client.post(API_LIBRARY, params=params, headers=self._headers())
        _raise_for_status(response)
        return True
