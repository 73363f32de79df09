"""
Lyricview - Multilingual lyrics viewer

Modules:
- catalog: Static song list and #fragment navigation
- retrieval: Fetch raw lyric text over HTTP or from a directory
- session: Selection state, lyrics cache and view computation
- batch: Validate and preview a directory of lyric files
"""

from .catalog import (
    Song,
    Catalog,
    fragment_for,
    song_from_fragment,
    resolve_fragment,
)

from .retrieval import (
    LyricsSource,
    HttpLyricsSource,
    DirectoryLyricsSource,
)

from .session import (
    DEFAULT_ENABLED,
    ParsedSong,
    LyricsCache,
    ViewState,
    ViewerSession,
)

__version__ = "0.1.0"

__all__ = [
    # Catalog
    'Song',
    'Catalog',
    'fragment_for',
    'song_from_fragment',
    'resolve_fragment',
    # Retrieval
    'LyricsSource',
    'HttpLyricsSource',
    'DirectoryLyricsSource',
    # Session
    'DEFAULT_ENABLED',
    'ParsedSong',
    'LyricsCache',
    'ViewState',
    'ViewerSession',
]
