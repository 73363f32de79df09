"""Tests for session.py: selection, caching, stale responses and toggles."""

import asyncio

import pytest

from tagged_lyrics import DisplayState
from lyricview import Catalog, DirectoryLyricsSource, LyricsCache, ViewerSession


class FakeSource:
    """In-memory lyrics source that counts fetches and can hold them open."""

    def __init__(self, lyrics):
        self.lyrics = lyrics
        self.calls = []
        self.gates = {}

    def hold(self, song_id):
        self.gates[song_id] = asyncio.Event()
        return self.gates[song_id]

    async def fetch(self, song_id):
        self.calls.append(song_id)
        gate = self.gates.get(song_id)
        if gate is not None:
            await gate.wait()
        return self.lyrics.get(song_id)


class BrokenSource:
    async def fetch(self, song_id):
        raise RuntimeError('disk on fire')


@pytest.fixture
def catalog(catalog_yaml):
    return Catalog.from_yaml(catalog_yaml)


@pytest.fixture
def source(greeting_lyrics):
    return FakeSource({
        'greetings': greeting_lyrics,
        'sakura': '[ja]さくら\n[romaji]Sakura',
    })


class TestLyricsCache:

    def test_fetches_once(self, source):
        async def scenario():
            cache = LyricsCache(source)
            first = await cache.get('greetings')
            second = await cache.get('greetings')
            return first, second

        first, second = asyncio.run(scenario())
        assert first is second
        assert source.calls == ['greetings']

    def test_concurrent_requests_share_fetch(self, source):
        async def scenario():
            cache = LyricsCache(source)
            gate = source.hold('greetings')
            a = asyncio.ensure_future(cache.get('greetings'))
            b = asyncio.ensure_future(cache.get('greetings'))
            await asyncio.sleep(0)
            gate.set()
            return await a, await b

        a, b = asyncio.run(scenario())
        assert a is b
        assert source.calls == ['greetings']

    def test_availability_computed_at_parse(self, source):
        parsed = asyncio.run(LyricsCache(source).get('sakura'))
        assert parsed.available == {'ja': True, 'romaji': True, 'zh': False, 'zh-jp': False}

    def test_absent_lyrics_parse_empty(self, source):
        parsed = asyncio.run(LyricsCache(source).get('missing'))
        assert parsed.rows == ()

    def test_source_exception_degrades_to_empty(self):
        parsed = asyncio.run(LyricsCache(BrokenSource()).get('x'))
        assert parsed.rows == ()


class TestViewerSession:

    def test_initial_view_not_loaded(self, catalog, source):
        view = ViewerSession(catalog, source).view()
        assert view.state is DisplayState.NOT_LOADED
        assert view.song is None
        assert view.enabled == frozenset({'ja', 'romaji', 'zh'})

    def test_select_song_ready(self, catalog, source):
        session = ViewerSession(catalog, source, enabled={'ja', 'zh'})
        assert asyncio.run(session.select_song('greetings'))
        view = session.view()
        assert view.state is DisplayState.READY
        assert view.fragment == '#greetings'
        assert view.lines == [
            (('ja', 'こんにちは'), ('zh', '你好')),
            (('ja', 'さようなら'),),
        ]
        assert view.available['zh-jp'] is False

    def test_loading_state_is_announced(self, catalog, source):
        session = ViewerSession(catalog, source)
        states = []
        session.subscribe(lambda view: states.append(view.state))
        asyncio.run(session.select_song('greetings'))
        assert states == [DisplayState.LOADING, DisplayState.READY]

    def test_reselect_is_noop(self, catalog, source):
        async def scenario():
            session = ViewerSession(catalog, source)
            await session.select_song('greetings')
            return session, await session.select_song('greetings')

        session, again = asyncio.run(scenario())
        assert again is False
        assert source.calls == ['greetings']

    def test_returning_to_song_uses_cache(self, catalog, source):
        async def scenario():
            session = ViewerSession(catalog, source)
            await session.select_song('greetings')
            await session.select_song('sakura')
            await session.select_song('greetings')
            return session

        session = asyncio.run(scenario())
        assert source.calls == ['greetings', 'sakura']
        assert session.view().song.id == 'greetings'

    def test_stale_response_does_not_overwrite(self, catalog, source):
        async def scenario():
            session = ViewerSession(catalog, source)
            gate = source.hold('greetings')
            slow = asyncio.ensure_future(session.select_song('greetings'))
            await asyncio.sleep(0)
            assert session.view().state is DisplayState.LOADING
            await session.select_song('sakura')
            gate.set()
            return session, await slow

        session, applied = asyncio.run(scenario())
        assert applied is False
        view = session.view()
        assert view.song.id == 'sakura'
        assert view.lines == [(('ja', 'さくら'), ('romaji', 'Sakura'))]
        assert view.available['zh'] is False
        # The late result is still cached for later
        assert 'greetings' in session.cache

    def test_cancelled_selection_clears_loading(self, catalog, source):
        async def scenario():
            session = ViewerSession(catalog, source)
            source.hold('greetings')
            pending = asyncio.ensure_future(session.select_song('greetings'))
            await asyncio.sleep(0)
            assert session.view().state is DisplayState.LOADING
            pending.cancel()
            with pytest.raises(asyncio.CancelledError):
                await pending
            return session.view()

        view = asyncio.run(scenario())
        assert view.state is DisplayState.NOT_LOADED
        assert view.song.id == 'greetings'

    def test_missing_lyrics_is_empty_state(self, catalog, source):
        session = ViewerSession(catalog, source)
        asyncio.run(session.select_song('missing'))
        assert session.view().state is DisplayState.EMPTY
        assert not any(session.view().available.values())

    def test_unknown_song_id(self, catalog, source):
        session = ViewerSession(catalog, source)
        assert asyncio.run(session.select_song('nope')) is False
        assert session.view().state is DisplayState.NOT_LOADED

    def test_navigate_falls_back_to_default(self, catalog, source):
        session = ViewerSession(catalog, source)
        asyncio.run(session.navigate('#does-not-exist'))
        assert session.view().song.id == 'greetings'

    def test_navigate_decodes_fragment(self, catalog, source):
        session = ViewerSession(catalog, source)
        asyncio.run(session.navigate('#sakura'))
        assert session.view().song.id == 'sakura'

    def test_toggle_recomputes(self, catalog, source):
        session = ViewerSession(catalog, source, enabled={'ja', 'zh'})
        asyncio.run(session.select_song('greetings'))
        renders = []
        session.subscribe(renders.append)

        view = session.toggle('ja', False)
        assert view.lines == [(('zh', '你好'),), (('all', 'Goodbye (fallback)'),)]
        view = session.toggle('zh')
        assert view.state is DisplayState.EMPTY
        view = session.toggle('romaji', True)
        assert view.lines == [(('romaji', 'Konnichiwa'),), (('all', 'Goodbye (fallback)'),)]
        assert len(renders) == 3

    def test_toggle_rejects_unknown(self, catalog, source):
        session = ViewerSession(catalog, source)
        with pytest.raises(ValueError):
            session.toggle('all')
        with pytest.raises(ValueError):
            ViewerSession(catalog, source, enabled={'ko'})

    def test_selection_survives_song_change(self, catalog, source):
        async def scenario():
            session = ViewerSession(catalog, source, enabled={'ja'})
            await session.select_song('greetings')
            session.toggle('romaji', True)
            await session.select_song('sakura')
            return session

        session = asyncio.run(scenario())
        assert session.view().enabled == frozenset({'ja', 'romaji'})

    def test_view_to_dict(self, catalog, source):
        session = ViewerSession(catalog, source, enabled={'zh', 'ja'})
        asyncio.run(session.select_song('greetings'))
        data = session.view().to_dict()
        assert data['state'] == 'ready'
        assert data['enabled'] == ['ja', 'zh']
        assert data['lines'][0] == [['ja', 'こんにちは'], ['zh', '你好']]

    def test_directory_source(self, catalog, lyrics_dir):
        session = ViewerSession(catalog, DirectoryLyricsSource(lyrics_dir), enabled={'romaji'})
        asyncio.run(session.select_song('sakura'))
        assert session.view().lines == [(('romaji', 'Sakura sakura'),)]
