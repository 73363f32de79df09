#!/usr/bin/env python3
"""
Line selector - decides which language variants of each row to show

Given parsed rows and the set of languages the user has switched on, each row
becomes a display line holding its enabled variants in the fixed display
order. A row with none of them falls back to its [all] text, and a row with
nothing to show is dropped rather than rendered blank.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Collection, Dict, Iterable, List, Optional, Sequence, Tuple

from .parser import ALL_TAG, LANG_KEYS, Row


@dataclass(frozen=True)
class Language:
    """A selectable language and how it is presented"""
    key: str
    label: str
    html_lang: Optional[str] = None


LANGUAGES: Tuple[Language, ...] = (
    Language('ja', '日语', 'ja'),
    Language('romaji', '罗马音'),
    Language('zh', '中文', 'zh'),
    Language('zh-jp', '中文（日语语序）', 'zh'),
)

DISPLAY_ORDER: Tuple[str, ...] = LANG_KEYS

# One rendered row: (tag, trimmed text) pairs, left to right
DisplayLine = Tuple[Tuple[str, str], ...]


class DisplayState(Enum):
    """What the lyrics area should show"""
    NOT_LOADED = 'not_loaded'
    LOADING = 'loading'
    EMPTY = 'empty'
    READY = 'ready'


def entry_text(row: Row, tag: str) -> str:
    """Trimmed text for a tag in a row, '' when absent or blank"""
    return (row.get(tag) or '').strip()


def select_line(row: Row, enabled: Collection[str],
                order: Sequence[str] = DISPLAY_ORDER) -> DisplayLine:
    """Pick the pairs to display for a single row"""
    pairs = []
    for tag in order:
        if tag in enabled:
            text = entry_text(row, tag)
            if text:
                pairs.append((tag, text))

    if not pairs and enabled:
        fallback = entry_text(row, ALL_TAG)
        if fallback:
            pairs.append((ALL_TAG, fallback))

    return tuple(pairs)


def select_display(rows: Iterable[Row], enabled: Collection[str],
                   order: Sequence[str] = DISPLAY_ORDER) -> List[DisplayLine]:
    """
    Compute the display lines for a song

    Args:
        rows: Parsed rows, in song order
        enabled: Currently enabled canonical tags (any iteration order)
        order: Canonical tag order used for left-to-right placement

    Returns: One display line per row that has something to show
    """
    lines = []
    for row in rows:
        line = select_line(row, enabled, order)
        if line:
            lines.append(line)
    return lines


def is_available(rows: Iterable[Row], tag: str) -> bool:
    """True if any row has non-blank text for the tag"""
    return any(entry_text(row, tag) for row in rows)


def availability(rows: Sequence[Row], order: Sequence[str] = DISPLAY_ORDER) -> Dict[str, bool]:
    """Availability of every tag in order, independent of the selection"""
    return {tag: is_available(rows, tag) for tag in order}


def render_state(rows: Optional[Sequence[Row]], enabled: Collection[str],
                 loading: bool = False,
                 order: Sequence[str] = DISPLAY_ORDER) -> Tuple[DisplayState, List[DisplayLine]]:
    """
    Map a song's load status and rows to a display state

    rows is None while nothing has been loaded. A loaded song whose every row
    is dropped reports EMPTY, which the UI shows differently from loading.
    """
    if loading:
        return DisplayState.LOADING, []
    if rows is None:
        return DisplayState.NOT_LOADED, []

    lines = select_display(rows, enabled, order)
    if not lines:
        return DisplayState.EMPTY, []
    return DisplayState.READY, lines
