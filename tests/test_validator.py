"""
Tests for lyric file validation
"""

from tagged_lyrics import BatchValidator, LyricsValidator


def messages(result, severity):
    return [i for i in result.issues if i.severity == severity]


class TestLyricsValidator:
    """Tests for LyricsValidator.validate()"""

    def test_clean_file(self, greeting_lyrics):
        result = LyricsValidator.validate(greeting_lyrics)
        assert result.valid
        assert result.issues == []
        assert result.metrics['row_count'] == 2
        assert result.metrics['tag_counts']['ja'] == 2
        assert result.metrics['tag_counts']['romaji'] == 1
        assert result.metrics['available'] == ['ja', 'romaji', 'zh', 'all']

    def test_unknown_tag_warning(self):
        result = LyricsValidator.validate('[ja]a\n[kr]b')
        warnings = messages(result, 'warning')
        assert len(warnings) == 1
        assert '[kr]' in warnings[0].message
        assert warnings[0].location == 'line 2'
        assert result.valid

    def test_orphan_line_warning(self):
        result = LyricsValidator.validate('stray\n\n[ja]a')
        warnings = messages(result, 'warning')
        assert [w.location for w in warnings] == ['line 1']

    def test_lines_after_unknown_tag_are_orphans(self):
        result = LyricsValidator.validate('[xx]a\nb')
        assert len(messages(result, 'warning')) == 2

    def test_continuation_is_not_flagged(self):
        result = LyricsValidator.validate('[ja]a\nb\nc')
        assert result.issues == []

    def test_text_without_tags_is_error(self):
        result = LyricsValidator.validate('just some words\nno tags')
        assert not result.valid
        assert len(result.errors) == 1

    def test_empty_file_is_valid(self):
        result = LyricsValidator.validate('')
        assert result.valid
        assert result.metrics['row_count'] == 0

    def test_blank_row_info(self):
        result = LyricsValidator.validate('[ja]\n[zh]\n\n[ja]a')
        infos = messages(result, 'info')
        assert len(infos) == 1
        assert infos[0].message.startswith('Row 0')
        assert infos[0].location == 'line 3'

    def test_blank_row_at_end_of_file(self):
        result = LyricsValidator.validate('[ja]a\n\n[zh]')
        infos = messages(result, 'info')
        assert [i.location for i in infos] == ['end of file']

    def test_repeated_tag_info(self):
        result = LyricsValidator.validate('[ja]a\n[jp]b')
        infos = messages(result, 'info')
        assert len(infos) == 1
        assert '[ja]' in infos[0].message


class TestBatchValidator:
    """Tests for BatchValidator.validate_corpus()"""

    def test_corpus_stats(self, greeting_lyrics):
        results = [
            ('good.txt', LyricsValidator.validate(greeting_lyrics)),
            ('warn.txt', LyricsValidator.validate('[ja]a\n[xx]b')),
            ('bad.txt', LyricsValidator.validate('no tags')),
        ]
        stats = BatchValidator.validate_corpus(results)
        assert stats['total'] == 3
        assert stats['valid'] == 2
        assert stats['invalid'] == 1
        assert stats['files_with_errors'] == ['bad.txt']
        assert stats['files_with_warnings'] == ['warn.txt']
        assert stats['rows'] == 3
