"""
Song catalog and fragment navigation.

The catalog is a static, ordered list of songs kept in a YAML file:

    songs:
      - id: hanayuki
        title: 花雪

The song id doubles as the lyrics file name and as the URL fragment that
selects the song (``#hanayuki``), so back/forward and direct links work.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union
from urllib.parse import quote, unquote

import yaml


@dataclass(frozen=True)
class Song:
    """A catalog entry."""
    id: str  # Stable identifier, also the lyrics file stem
    title: str

    @property
    def label(self) -> str:
        """Button text used in the song list."""
        return f"{self.id} ({self.title})"

    def to_dict(self) -> dict:
        return {'id': self.id, 'title': self.title}


class Catalog:
    """Ordered, id-indexed collection of songs."""

    def __init__(self, songs: list[Song]):
        self._songs = list(songs)
        self._by_id: dict[str, Song] = {}
        for song in self._songs:
            if song.id in self._by_id:
                raise ValueError(f"Duplicate song id in catalog: {song.id!r}")
            self._by_id[song.id] = song

    def __iter__(self) -> Iterator[Song]:
        return iter(self._songs)

    def __len__(self) -> int:
        return len(self._songs)

    def __contains__(self, song_id: str) -> bool:
        return song_id in self._by_id

    def get(self, song_id: Optional[str]) -> Optional[Song]:
        if song_id is None:
            return None
        return self._by_id.get(song_id)

    def default(self) -> Optional[Song]:
        """First catalog entry, used when nothing valid is selected."""
        return self._songs[0] if self._songs else None

    @classmethod
    def from_yaml(cls, yaml_content: str) -> 'Catalog':
        """Build a catalog from YAML text with a top-level ``songs`` list."""
        data = yaml.safe_load(yaml_content) or {}
        if not isinstance(data, dict):
            raise ValueError("Catalog YAML must be a mapping with a 'songs' list")

        songs = []
        for entry in data.get('songs') or []:
            if not isinstance(entry, dict) or not entry.get('id'):
                raise ValueError(f"Catalog entry needs an 'id': {entry!r}")
            song_id = str(entry['id'])
            songs.append(Song(id=song_id, title=str(entry.get('title') or song_id)))

        return cls(songs)

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'Catalog':
        with open(path, encoding='utf-8') as f:
            return cls.from_yaml(f.read())


def fragment_for(song: Song) -> str:
    """Address fragment selecting a song, e.g. ``#hanayuki``."""
    return '#' + quote(song.id, safe='')


def song_from_fragment(fragment: Optional[str], catalog: Catalog) -> Optional[Song]:
    """Song named by a ``#id`` fragment, or None if empty or unknown."""
    raw = (fragment or '').removeprefix('#')
    if not raw:
        return None
    return catalog.get(unquote(raw))


def resolve_fragment(fragment: Optional[str], catalog: Catalog) -> Optional[Song]:
    """Like song_from_fragment, but fall back to the first catalog entry."""
    return song_from_fragment(fragment, catalog) or catalog.default()
