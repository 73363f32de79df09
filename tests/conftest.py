"""
Pytest configuration and shared fixtures
"""

import sys
from pathlib import Path

import pytest

# Add source directories to Python path for imports
REPO_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(REPO_ROOT / "src"))
sys.path.insert(0, str(REPO_ROOT / "viewer"))


@pytest.fixture
def repo_root():
    """Repository root, for the bundled catalog and lyrics"""
    return REPO_ROOT


@pytest.fixture
def greeting_lyrics():
    """Two-row song: one full row, one with only ja plus an [all] fallback"""
    return (
        "[ja]こんにちは\n"
        "[romaji]Konnichiwa\n"
        "[zh]你好\n"
        "\n"
        "[ja]さようなら\n"
        "[all]Goodbye (fallback)\n"
    )


@pytest.fixture
def catalog_yaml():
    return (
        "songs:\n"
        "  - id: greetings\n"
        "    title: 挨拶\n"
        "  - id: sakura\n"
        "    title: さくら\n"
        "  - id: missing\n"
        "    title: No Lyrics\n"
    )


@pytest.fixture
def lyrics_dir(tmp_path, greeting_lyrics):
    """Lyrics directory holding greetings.txt and sakura.txt (no missing.txt)"""
    root = tmp_path / "lyrics"
    root.mkdir()
    (root / "greetings.txt").write_text(greeting_lyrics, encoding="utf-8")
    (root / "sakura.txt").write_text(
        "[ja]さくら さくら\n[romaji]Sakura sakura\n",
        encoding="utf-8",
    )
    return root
