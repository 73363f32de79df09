"""
Lyrics retrieval.

A lyrics source turns a song id into raw lyric text, or None when there is
nothing to show. Failures never escape: a network error, a non-200 status or
a missing file all come back as None, which parses to an empty song.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Protocol, Union
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0  # seconds
LYRICS_SUFFIX = '.txt'


class LyricsSource(Protocol):
    async def fetch(self, song_id: str) -> Optional[str]:
        ...


class HttpLyricsSource:
    """Fetch ``{base_url}/lyrics/{id}`` over HTTP."""

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._client = client

    def url_for(self, song_id: str) -> str:
        return f"{self.base_url}/lyrics/{quote(song_id, safe='')}"

    async def fetch(self, song_id: str) -> Optional[str]:
        url = self.url_for(song_id)
        try:
            if self._client is not None:
                resp = await self._client.get(url, timeout=self.timeout, follow_redirects=True)
            else:
                async with httpx.AsyncClient() as client:
                    resp = await client.get(url, timeout=self.timeout, follow_redirects=True)
        except httpx.HTTPError as e:
            logger.warning("Lyrics fetch failed for %s: %s", url, e)
            return None

        if not resp.is_success:
            logger.warning("Lyrics fetch for %s returned %s", url, resp.status_code)
            return None
        return resp.text


class DirectoryLyricsSource:
    """Read ``{root}/{id}.txt`` from a local lyrics directory."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def path_for(self, song_id: str) -> Optional[Path]:
        """File for a song id, or None if the id would leave the directory."""
        if not song_id or song_id.startswith('.'):
            return None
        if any(c in song_id for c in ('/', '\\', '\x00')):
            return None
        return self.root / f"{song_id}{LYRICS_SUFFIX}"

    def read(self, song_id: str) -> Optional[str]:
        path = self.path_for(song_id)
        if path is None:
            logger.warning("Rejected lyrics id %r", song_id)
            return None
        try:
            return path.read_text(encoding='utf-8')
        except FileNotFoundError:
            logger.info("No lyrics file for %s", song_id)
            return None
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.warning("Could not read %s: %s", path, e)
            return None

    async def fetch(self, song_id: str) -> Optional[str]:
        return await asyncio.to_thread(self.read, song_id)
