#!/usr/bin/env python3
"""
Tagged Lyrics Parser - Converts hand-authored multilingual lyric files into rows

A lyric file groups the language variants of one line into a block:

    [ja]こんにちは
    [romaji]Konnichiwa
    [zh]你好

    [ja]さようなら
    [all]Goodbye

Blank lines separate rows, a bracketed label opens a language, and any other
line continues the most recently opened language. The parser is forgiving:
unknown labels and orphan lines are dropped, never raised.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple


# Canonical language keys, in on-screen display order
LANG_KEYS: Tuple[str, ...] = ('ja', 'romaji', 'zh', 'zh-jp')

# Catch-all tag used as a fallback when no selected language matches a row
ALL_TAG = 'all'

TAG_KEYS: Tuple[str, ...] = LANG_KEYS + (ALL_TAG,)

TAG_ALIASES: Dict[str, str] = {
    'ja': 'ja',
    'jp': 'ja',
    'jpn': 'ja',
    'romaji': 'romaji',
    'roma': 'romaji',
    'rom': 'romaji',
    'zh': 'zh',
    'cn': 'zh',
    'chs': 'zh',
    'cht': 'zh',
    'zhs': 'zh',
    'zh-jp': 'zh-jp',
    'zhjp': 'zh-jp',
    'zhjpn': 'zh-jp',
    'all': ALL_TAG,
    'any': ALL_TAG,
    '*': ALL_TAG,
}

TAG_LINE_PATTERN = re.compile(r'^\[([^\]]+)\]\s*(.*)$')

BOM = '\ufeff'

# A parsed row: canonical tag -> accumulated text
Row = Mapping[str, str]


def resolve_tag(label: str) -> Optional[str]:
    """Resolve a bracket label like ' JP ' to its canonical tag, or None"""
    return TAG_ALIASES.get(label.strip().lower())


def normalize_text(text: Optional[str]) -> str:
    """Drop a leading BOM and convert CRLF / CR line endings to LF"""
    if not text:
        return ''
    if text.startswith(BOM):
        text = text[1:]
    return text.replace('\r\n', '\n').replace('\r', '\n')


def split_lines(text: Optional[str]) -> List[str]:
    """Normalize and split raw lyric text into lines"""
    return normalize_text(text).split('\n')


@dataclass
class ParseState:
    """Fold state threaded through the lines of one file"""
    rows: List[Row] = field(default_factory=list)
    row: Dict[str, str] = field(default_factory=dict)
    current_tag: Optional[str] = None

    def end_row(self):
        """Close the current row if it holds anything; always forget the open tag"""
        if self.row:
            self.rows.append(MappingProxyType(self.row))
            self.row = {}
        self.current_tag = None

    def open_tag(self, tag: str, content: str):
        existing = self.row.get(tag)
        self.row[tag] = content if existing is None else existing + '\n' + content
        self.current_tag = tag

    def continue_tag(self, line: str):
        if self.current_tag is None:
            return
        existing = self.row.get(self.current_tag, '')
        self.row[self.current_tag] = existing + '\n' + line if existing else line


def classify_line(line: str) -> Tuple[str, Optional[str], str]:
    """
    Classify an already right-trimmed line

    Returns: (kind, label, content) where kind is 'blank', 'tag' or 'text'.
    label is the raw bracket text for tag lines, None otherwise.
    """
    if not line.strip():
        return 'blank', None, ''

    match = TAG_LINE_PATTERN.match(line)
    if match:
        return 'tag', match.group(1), match.group(2)

    return 'text', None, line


def feed_line(state: ParseState, raw_line: str) -> ParseState:
    """Apply one raw line to the fold state"""
    kind, label, content = classify_line(raw_line.rstrip())

    if kind == 'blank':
        state.end_row()
    elif kind == 'tag':
        tag = resolve_tag(label)
        if tag is None:
            # Unknown label: drop it and everything hanging off it
            state.current_tag = None
        else:
            state.open_tag(tag, content)
    else:
        state.continue_tag(content)

    return state


def parse_tagged_lyrics(text: Optional[str]) -> Tuple[Row, ...]:
    """
    Parse tagged lyric text into an ordered tuple of rows

    None is treated as empty text, so a failed fetch parses to no rows.
    Rows are read-only mappings from canonical tag to text.
    """
    state = ParseState()
    for line in split_lines(text):
        feed_line(state, line)
    state.end_row()
    return tuple(state.rows)
