#!/usr/bin/env python3
"""
Validation for hand-authored lyric files

The parser silently drops anything it cannot place. This module walks the
same line classification and reports what was dropped, so authors can fix
typos without the viewer ever failing on them:
1. Structural checks - unknown tags, orphan lines, empty rows
2. Corpus statistics - counts across a directory of files
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .parser import ParseState, TAG_KEYS, classify_line, feed_line, resolve_tag, split_lines
from .selector import entry_text


@dataclass
class ValidationIssue:
    """Represents a validation problem"""
    severity: str  # 'error', 'warning', 'info'
    message: str
    location: Optional[str] = None  # e.g., "line 12"


@dataclass
class ValidationResult:
    """Result of validation checks"""
    valid: bool
    issues: List[ValidationIssue]
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == 'error']

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == 'warning']


class LyricsValidator:
    """Validates the structure of a tagged lyric file"""

    @staticmethod
    def validate(text: Optional[str]) -> ValidationResult:
        """Run all structural checks over raw lyric text"""
        issues = []
        metrics = {}

        state = ParseState()
        has_text = False

        for line_no, raw_line in enumerate(split_lines(text), start=1):
            location = f'line {line_no}'
            kind, label, content = classify_line(raw_line.rstrip())

            if kind != 'blank':
                has_text = True

            if kind == 'tag':
                tag = resolve_tag(label)
                if tag is None:
                    issues.append(ValidationIssue(
                        'warning',
                        f'Unknown tag [{label}] - line and its continuation are ignored',
                        location
                    ))
                elif tag in state.row:
                    issues.append(ValidationIssue(
                        'info',
                        f'Tag [{tag}] repeated in the same row - text is joined',
                        location
                    ))
            elif kind == 'text' and state.current_tag is None:
                issues.append(ValidationIssue(
                    'warning',
                    'Line has no open tag and is ignored',
                    location
                ))

            if kind == 'blank':
                issues.extend(LyricsValidator._check_row(state, len(state.rows), location))

            feed_line(state, raw_line)

        issues.extend(LyricsValidator._check_row(state, len(state.rows), 'end of file'))
        state.end_row()

        rows = state.rows
        metrics['row_count'] = len(rows)
        metrics['tag_counts'] = {
            tag: sum(1 for row in rows if entry_text(row, tag))
            for tag in TAG_KEYS
        }
        metrics['available'] = [tag for tag, count in metrics['tag_counts'].items() if count]

        if has_text and not rows:
            issues.append(ValidationIssue('error', 'Text found but no recognized tags'))

        valid = not any(issue.severity == 'error' for issue in issues)

        return ValidationResult(valid=valid, issues=issues, metrics=metrics)

    @staticmethod
    def _check_row(state: ParseState, row_index: int, location: str) -> List[ValidationIssue]:
        """Flag a pending row whose entries are all blank"""
        if state.row and not any(text.strip() for text in state.row.values()):
            return [ValidationIssue(
                'info',
                f'Row {row_index} has tags but no text',
                location
            )]
        return []


class BatchValidator:
    """Aggregate validation results across many files"""

    @staticmethod
    def validate_corpus(results: List[Tuple[str, ValidationResult]]) -> Dict[str, Any]:
        """Summarize (filename, result) pairs"""
        stats = {
            'total': len(results),
            'valid': 0,
            'invalid': 0,
            'error_count': 0,
            'warning_count': 0,
            'files_with_errors': [],
            'files_with_warnings': [],
            'rows': 0,
        }

        for filename, result in results:
            if result.valid:
                stats['valid'] += 1
            else:
                stats['invalid'] += 1
                stats['files_with_errors'].append(filename)

            stats['error_count'] += len(result.errors)
            stats['warning_count'] += len(result.warnings)
            stats['rows'] += result.metrics.get('row_count', 0)

            if result.warnings and filename not in stats['files_with_errors']:
                stats['files_with_warnings'].append(filename)

        return stats
