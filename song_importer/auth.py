from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv

BEARER_TOKEN_ENV = "APPLE_BEARER_TOKEN"
MEDIA_USER_TOKEN_ENV = "APPLE_MEDIA_USER_TOKEN"


class MissingCredentialsError(RuntimeError):
    def __init__(self, missing: List[str]):
        self.missing = missing
        lines = [
            "Missing required environment variables: " + ", ".join(missing),
            "",
            "Set these from Safari DevTools (music.apple.com > Network tab > any request):",
            f"  {BEARER_TOKEN_ENV}     - from Authorization header (without \"Bearer \" prefix)",
            f"  {MEDIA_USER_TOKEN_ENV} - from media-user-token header",
            "",
            "Example:",
            f'  {BEARER_TOKEN_ENV}="eyJ..." {MEDIA_USER_TOKEN_ENV}="An6..." song-importer catalog songs.txt',
        ]
        super().__init__("\n".join(lines))


@dataclass(frozen=True)
class Credentials:
    bearer_token: str
    media_user_token: str


def _load_env() -> None:
    # Load .env if present
    load_dotenv(override=False)


def load_credentials() -> Credentials:
    """Return the catalog credentials taken from the environment (or .env).

    Expected environment variables:
    - APPLE_BEARER_TOKEN
    - APPLE_MEDIA_USER_TOKEN
    """
    _load_env()

    bearer = os.getenv(BEARER_TOKEN_ENV)
    media_user = os.getenv(MEDIA_USER_TOKEN_ENV)
    missing = [name for name, value in ((BEARER_TOKEN_ENV, bearer), (MEDIA_USER_TOKEN_ENV, media_user)) if not value]
    if missing:
        raise MissingCredentialsError(missing)
    return Credentials(bearer_token=bearer, media_user_token=media_user)
