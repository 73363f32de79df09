"""
Tagged Lyrics - Parse and select multilingual lyric rows

This package reads plain-text lyric files where each line variant is marked
with a language tag ([ja], [romaji], [zh], [zh-jp], [all]) and decides which
variants to show for a chosen set of languages.
"""

from .parser import (
    LANG_KEYS,
    ALL_TAG,
    TAG_KEYS,
    TAG_ALIASES,
    Row,
    ParseState,
    resolve_tag,
    parse_tagged_lyrics,
)

from .selector import (
    Language,
    LANGUAGES,
    DISPLAY_ORDER,
    DisplayLine,
    DisplayState,
    select_line,
    select_display,
    is_available,
    availability,
    render_state,
)

from .validator import (
    ValidationIssue,
    ValidationResult,
    LyricsValidator,
    BatchValidator,
)

__version__ = "0.1.0"

__all__ = [
    # Tags
    'LANG_KEYS',
    'ALL_TAG',
    'TAG_KEYS',
    'TAG_ALIASES',
    'resolve_tag',
    # Parsing
    'Row',
    'ParseState',
    'parse_tagged_lyrics',
    # Selection
    'Language',
    'LANGUAGES',
    'DISPLAY_ORDER',
    'DisplayLine',
    'DisplayState',
    'select_line',
    'select_display',
    'is_available',
    'availability',
    'render_state',
    # Validation
    'ValidationIssue',
    'ValidationResult',
    'LyricsValidator',
    'BatchValidator',
]
