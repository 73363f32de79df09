#!/usr/bin/env python3
"""
Batch checker for a directory of tagged lyric files

Parses and validates every .txt file in a directory, prints a preview of the
selected languages if asked, and produces a JSON report.

Usage:
    uv run python -m lyricview.batch lyrics/
    uv run python -m lyricview.batch lyrics/ --lang ja --lang zh --limit 3
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from tagged_lyrics import (
    LANG_KEYS,
    BatchValidator,
    LyricsValidator,
    ValidationResult,
    parse_tagged_lyrics,
    select_display,
)

from .retrieval import LYRICS_SUFFIX


class BatchProcessor:
    """Validates lyric files in batch"""

    def __init__(self, input_dir: str, langs: Optional[Sequence[str]] = None):
        self.input_dir = Path(input_dir)
        self.langs = list(langs) if langs else []

        # Track statistics
        self.stats = {
            'total_files': 0,
            'failed_files': [],
            'validation_results': [],
        }
        self.results: List[tuple] = []

    def find_lyric_files(self) -> List[Path]:
        """Find all lyric files in input directory, sorted for stable output"""
        return sorted(self.input_dir.glob(f'*{LYRICS_SUFFIX}'))

    def process_file(self, file_path: Path) -> Optional[ValidationResult]:
        """Validate a single file; None if it could not be read"""
        try:
            text = file_path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            self.stats['failed_files'].append({
                'file': file_path.name,
                'error': f"Failed to read file: {e}"
            })
            return None

        result = LyricsValidator.validate(text)
        self.results.append((file_path.name, result))
        self.stats['validation_results'].append({
            'file': file_path.name,
            'valid': result.valid,
            'rows': result.metrics['row_count'],
            'available': result.metrics['available'],
            'issues': [
                {'severity': i.severity, 'message': i.message, 'location': i.location}
                for i in result.issues
            ],
        })

        if self.langs:
            self.print_preview(file_path.stem, text)

        return result

    def print_preview(self, song_id: str, text: str):
        """Print the display lines for the selected languages"""
        lines = select_display(parse_tagged_lyrics(text), set(self.langs))
        print(f"== {song_id}")
        if not lines:
            print("  (no content for the selected languages)")
        for line in lines:
            for tag, content in line:
                for part in content.split('\n'):
                    print(f"  [{tag}] {part}")
            print()

    def process_batch(self, limit: Optional[int] = None) -> dict:
        """
        Process all lyric files in batch

        Args:
            limit: Optional limit on number of files to process

        Returns: Statistics dictionary
        """
        files = self.find_lyric_files()
        if limit:
            files = files[:limit]

        for file_path in files:
            self.stats['total_files'] += 1
            self.process_file(file_path)

        self.stats['batch_validation'] = BatchValidator.validate_corpus(self.results)
        return self.stats

    def print_report(self):
        """Print summary statistics"""
        bv = self.stats.get('batch_validation', {})
        print(f"Files: {self.stats['total_files']}")
        print(f"  Valid: {bv.get('valid', 0)}")
        print(f"  Invalid: {bv.get('invalid', 0)}")
        print(f"  Rows: {bv.get('rows', 0)}")
        print(f"  Errors: {bv.get('error_count', 0)}")
        print(f"  Warnings: {bv.get('warning_count', 0)}")

        if self.stats['failed_files']:
            print(f"\nUnreadable Files:")
            for failure in self.stats['failed_files']:
                print(f"  {failure['file']}: {failure['error']}")

        for filename, result in self.results:
            if not result.issues:
                continue
            print(f"\n{filename}:")
            for issue in result.issues:
                location = f" [{issue.location}]" if issue.location else ""
                print(f"  [{issue.severity.upper()}]{location} {issue.message}")

    def save_report(self, report_file: str):
        """Save detailed statistics to JSON file"""
        with open(report_file, 'w', encoding='utf-8') as f:
            json.dump(self.stats, f, indent=2, ensure_ascii=False)
        print(f"\nDetailed report saved to: {report_file}")

    @property
    def ok(self) -> bool:
        bv = self.stats.get('batch_validation', {})
        return not self.stats['failed_files'] and not bv.get('invalid', 0)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Validate and preview tagged lyric files'
    )
    parser.add_argument(
        'input_dir',
        help='Directory containing .txt lyric files'
    )
    parser.add_argument(
        '--lang',
        action='append',
        choices=LANG_KEYS,
        help='Print a preview with this language enabled (repeatable)'
    )
    parser.add_argument(
        '-r', '--report',
        help='JSON file for detailed statistics'
    )
    parser.add_argument(
        '-l', '--limit',
        type=int,
        help='Limit number of files to process'
    )

    args = parser.parse_args(argv)

    if not os.path.isdir(args.input_dir):
        print(f"Error: Input directory not found: {args.input_dir}")
        return 1

    processor = BatchProcessor(args.input_dir, langs=args.lang)
    processor.process_batch(limit=args.limit)
    processor.print_report()
    if args.report:
        processor.save_report(args.report)

    return 0 if processor.ok else 1


if __name__ == "__main__":
    sys.exit(main())
