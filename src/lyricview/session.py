"""
Viewer session - the state behind one lyrics page.

Holds the selected song, the enabled languages and a per-song cache of parsed
lyrics. Every change produces a fresh ViewState for whatever renders it.

Lyrics are fetched at most once per song: a second request for the same id,
whether the first is still in flight or long finished, reuses the same parse.
When the user moves on while a fetch is outstanding, the late result is kept
in the cache but is not allowed to replace the newer song on screen.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Union

from tagged_lyrics import (
    DISPLAY_ORDER,
    LANG_KEYS,
    DisplayLine,
    DisplayState,
    Row,
    availability,
    parse_tagged_lyrics,
    render_state,
)

from .catalog import Catalog, Song, fragment_for, resolve_fragment
from .retrieval import LyricsSource

logger = logging.getLogger(__name__)

DEFAULT_ENABLED = frozenset({'ja', 'romaji', 'zh'})


@dataclass(frozen=True)
class ParsedSong:
    """Parsed rows for one song, with availability computed once at parse time."""
    song_id: str
    rows: tuple[Row, ...]
    available: dict[str, bool] = field(default_factory=dict)

    @classmethod
    def from_text(cls, song_id: str, text: Optional[str]) -> 'ParsedSong':
        rows = parse_tagged_lyrics(text)
        return cls(song_id=song_id, rows=rows, available=availability(rows, DISPLAY_ORDER))


class LyricsCache:
    """Session-lifetime memo of parsed songs, one fetch per song id.

    Entries are never evicted.
    """

    def __init__(self, source: LyricsSource):
        self.source = source
        self._songs: dict[str, ParsedSong] = {}
        self._pending: dict[str, asyncio.Future] = {}

    def __contains__(self, song_id: str) -> bool:
        return song_id in self._songs

    def __len__(self) -> int:
        return len(self._songs)

    def peek(self, song_id: str) -> Optional[ParsedSong]:
        return self._songs.get(song_id)

    async def get(self, song_id: str) -> ParsedSong:
        """Parsed song for an id, fetching it only on the first request."""
        parsed = self._songs.get(song_id)
        if parsed is not None:
            return parsed

        task = self._pending.get(song_id)
        if task is None:
            task = asyncio.ensure_future(self._load(song_id))
            self._pending[song_id] = task
        return await asyncio.shield(task)

    async def _load(self, song_id: str) -> ParsedSong:
        try:
            try:
                text = await self.source.fetch(song_id)
            except Exception:
                logger.exception("Lyrics source failed for %s", song_id)
                text = None
            parsed = ParsedSong.from_text(song_id, text)
            self._songs[song_id] = parsed
            logger.debug("Parsed %s: %d rows", song_id, len(parsed.rows))
            return parsed
        finally:
            self._pending.pop(song_id, None)


@dataclass(frozen=True)
class ViewState:
    """Everything the page needs to draw itself."""
    song: Optional[Song]
    state: DisplayState
    lines: list[DisplayLine]
    available: dict[str, bool]
    enabled: frozenset[str]
    fragment: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'song': self.song.to_dict() if self.song else None,
            'state': self.state.value,
            'lines': [[list(pair) for pair in line] for line in self.lines],
            'available': dict(self.available),
            'enabled': [tag for tag in DISPLAY_ORDER if tag in self.enabled],
            'fragment': self.fragment,
        }


Listener = Callable[[ViewState], None]


class ViewerSession:
    """Song selection, language toggles and the resulting view."""

    def __init__(self, catalog: Catalog, source: LyricsSource,
                 enabled: Iterable[str] = DEFAULT_ENABLED,
                 cache: Optional[LyricsCache] = None):
        self.catalog = catalog
        self.cache = cache if cache is not None else LyricsCache(source)
        self.enabled: set[str] = set()
        for tag in enabled:
            self._check_lang(tag)
            self.enabled.add(tag)

        self.current_song: Optional[Song] = None
        self.fragment: Optional[str] = None
        # Toggles stay usable until a song says otherwise
        self.available: dict[str, bool] = {tag: True for tag in DISPLAY_ORDER}
        self._loading = False
        self._generation = 0
        self._listeners: list[Listener] = []

    @staticmethod
    def _check_lang(tag: str):
        if tag not in LANG_KEYS:
            raise ValueError(f"Unknown language {tag!r}; expected one of {', '.join(LANG_KEYS)}")

    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def _notify(self):
        view = self.view()
        for listener in self._listeners:
            listener(view)

    def view(self) -> ViewState:
        parsed = self.cache.peek(self.current_song.id) if self.current_song else None
        rows = parsed.rows if parsed is not None else None
        state, lines = render_state(rows, self.enabled, loading=self._loading)
        return ViewState(
            song=self.current_song,
            state=state,
            lines=lines,
            available=dict(self.available),
            enabled=frozenset(self.enabled),
            fragment=self.fragment,
        )

    async def select_song(self, song: Union[Song, str]) -> bool:
        """
        Show a song, fetching its lyrics on first use

        Returns: True if the view now shows this song's lyrics. False when the
        song was already selected, is unknown, or was superseded by another
        selection before its lyrics arrived.
        """
        if isinstance(song, str):
            found = self.catalog.get(song)
            if found is None:
                logger.warning("Unknown song id %r", song)
                return False
            song = found

        if self.current_song is not None and self.current_song.id == song.id:
            return False

        self._generation += 1
        generation = self._generation
        self.current_song = song
        self.fragment = fragment_for(song)
        self._loading = song.id not in self.cache

        if self._loading:
            self._notify()
            try:
                parsed = await self.cache.get(song.id)
            finally:
                if generation == self._generation:
                    self._loading = False
            if generation != self._generation:
                logger.debug("Dropping stale lyrics for %s", song.id)
                return False
        else:
            parsed = self.cache.peek(song.id)

        self.available = dict(parsed.available)
        self._notify()
        return True

    async def navigate(self, fragment: Optional[str]) -> bool:
        """Select the song named by an address fragment, or the default song."""
        song = resolve_fragment(fragment, self.catalog)
        if song is None:
            return False
        return await self.select_song(song)

    def toggle(self, tag: str, on: Optional[bool] = None) -> ViewState:
        """Switch a language on or off (flip when on is None) and re-render."""
        self._check_lang(tag)
        if on is None:
            on = tag not in self.enabled
        if on:
            self.enabled.add(tag)
        else:
            self.enabled.discard(tag)
        self._notify()
        return self.view()
