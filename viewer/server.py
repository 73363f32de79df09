#!/usr/bin/env python3
"""
Simple web server for the multilingual lyrics viewer
"""

import json
import sys
from pathlib import Path
from http.server import HTTPServer, SimpleHTTPRequestHandler
from urllib.parse import urlparse, parse_qs, unquote

# Get the project root directory (parent of viewer directory)
PROJECT_ROOT = Path(__file__).parent.parent
VIEWER_DIR = Path(__file__).parent

# Allow running from a checkout without installing
sys.path.insert(0, str(PROJECT_ROOT / 'src'))

from tagged_lyrics import LANG_KEYS, LANGUAGES, render_state
from lyricview import Catalog, DirectoryLyricsSource, ParsedSong, DEFAULT_ENABLED

DEFAULT_CATALOG = PROJECT_ROOT / 'songs' / 'catalog.yaml'
DEFAULT_LYRICS_DIR = PROJECT_ROOT / 'lyrics'


class LyricsViewerHandler(SimpleHTTPRequestHandler):
    """HTTP handler for the lyrics viewer UI and API"""

    catalog = Catalog([])
    source = DirectoryLyricsSource(DEFAULT_LYRICS_DIR)
    parsed_songs = {}  # song id -> ParsedSong, kept for the server's lifetime

    def do_GET(self):
        parsed_path = urlparse(self.path)
        path = parsed_path.path

        # Serve static files
        if path == '/' or path == '/index.html':
            self.serve_file(VIEWER_DIR / 'index.html', 'text/html; charset=utf-8')

        # API: Song list and languages
        elif path == '/api/songs':
            self.send_json_response({
                'songs': [song.to_dict() for song in self.catalog],
                'languages': [
                    {'key': lang.key, 'label': lang.label, 'lang': lang.html_lang}
                    for lang in LANGUAGES
                ],
                'default_enabled': [k for k in LANG_KEYS if k in DEFAULT_ENABLED],
            })

        # Raw lyric text
        elif path.startswith('/lyrics/'):
            song_id = unquote(path[len('/lyrics/'):])
            self.serve_lyrics(song_id)

        # API: Display lines for a song
        elif path.startswith('/api/display/'):
            song_id = unquote(path[len('/api/display/'):])
            self.serve_display(song_id, parse_qs(parsed_path.query, keep_blank_values=True))

        else:
            self.send_error(404)

    def serve_file(self, filepath, content_type):
        """Serve a file"""
        try:
            with open(filepath, 'rb') as f:
                content = f.read()

            self.send_response(200)
            self.send_header('Content-Type', content_type)
            self.send_header('Access-Control-Allow-Origin', '*')
            self.end_headers()
            self.wfile.write(content)
        except FileNotFoundError:
            self.send_error(404)

    def serve_lyrics(self, song_id):
        """Serve the raw lyric file for a catalog song"""
        if song_id not in self.catalog:
            self.send_error(404)
            return

        text = self.source.read(song_id)
        if text is None:
            self.send_error(404)
            return

        self.send_response(200)
        self.send_header('Content-Type', 'text/plain; charset=utf-8')
        self.send_header('Access-Control-Allow-Origin', '*')
        self.end_headers()
        self.wfile.write(text.encode('utf-8'))

    def get_parsed(self, song_id) -> ParsedSong:
        """Parse a song once and reuse it"""
        parsed = self.parsed_songs.get(song_id)
        if parsed is None:
            parsed = ParsedSong.from_text(song_id, self.source.read(song_id))
            self.parsed_songs[song_id] = parsed
        return parsed

    def serve_display(self, song_id, query):
        """Return the display lines for the requested languages"""
        song = self.catalog.get(song_id)
        if song is None:
            self.send_json_response({'success': False, 'error': 'Unknown song'}, status=404)
            return

        if 'lang' in query:
            enabled = {tag for tag in query['lang'] if tag in LANG_KEYS}
        else:
            enabled = set(DEFAULT_ENABLED)

        parsed = self.get_parsed(song.id)
        state, lines = render_state(parsed.rows, enabled)

        self.send_json_response({
            'success': True,
            'song': song.to_dict(),
            'state': state.value,
            'lines': [[list(pair) for pair in line] for line in lines],
            'available': parsed.available,
            'enabled': [tag for tag in LANG_KEYS if tag in enabled],
        })

    def send_json_response(self, data, status=200):
        """Send JSON response"""
        self.send_response(status)
        self.send_header('Content-Type', 'application/json; charset=utf-8')
        self.send_header('Access-Control-Allow-Origin', '*')
        self.end_headers()
        self.wfile.write(json.dumps(data, ensure_ascii=False).encode('utf-8'))


def make_server(port=8000, catalog_path=DEFAULT_CATALOG, lyrics_dir=DEFAULT_LYRICS_DIR,
                host=''):
    """Build a server bound to the given catalog and lyrics directory"""
    handler = type('BoundLyricsViewerHandler', (LyricsViewerHandler,), {
        'catalog': Catalog.load(catalog_path),
        'source': DirectoryLyricsSource(lyrics_dir),
        'parsed_songs': {},
    })
    return HTTPServer((host, port), handler)


def run_server(port=8000, catalog_path=DEFAULT_CATALOG, lyrics_dir=DEFAULT_LYRICS_DIR):
    """Run the viewer server"""
    httpd = make_server(port, catalog_path, lyrics_dir)

    print(f"""
╔═══════════════════════════════════════════════════════════╗
║     Anisong Lyrics Viewer                                 ║
╠═══════════════════════════════════════════════════════════╣
║                                                           ║
║  Viewer:     http://localhost:{port}/                     ║
║  Songs API:  http://localhost:{port}/api/songs            ║
║                                                           ║
║  Catalog:    {catalog_path}
║  Lyrics:     {lyrics_dir}
║                                                           ║
║  Press Ctrl+C to stop                                     ║
╚═══════════════════════════════════════════════════════════╝
    """)

    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        print("\n\nServer stopped.")
        httpd.server_close()


if __name__ == '__main__':
    import argparse
    parser = argparse.ArgumentParser(description='Multilingual Lyrics Viewer Server')
    parser.add_argument('--port', type=int, default=8000, help='Port to run server on (default: 8000)')
    parser.add_argument('--catalog', default=str(DEFAULT_CATALOG), help='Song catalog YAML file')
    parser.add_argument('--lyrics-dir', default=str(DEFAULT_LYRICS_DIR), help='Directory of <id>.txt lyric files')
    args = parser.parse_args()
    run_server(args.port, args.catalog, args.lyrics_dir)
