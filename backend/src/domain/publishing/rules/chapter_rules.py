"""Chapter validation rules.

Rule groups take (acc, chapter_data, ctx) and add findings to the pass
accumulator. The chapter validator decides which groups run for which
lifecycle intent.
"""

import re
from typing import Any, Mapping

from domain.validation.accumulator import ResultAccumulator
from domain.validation.engine import HALT_PASS
from domain.validation.identifiers import check_publication_id
from domain.validation.models import ValidationContext
from domain.validation.primitives import is_integer
from domain.validation.transitions import CHAPTER_TRANSITIONS, check_status_transition

from .common import check_keywords, check_required_fields, check_title


CHAPTER_STATUSES = tuple(CHAPTER_TRANSITIONS.keys())

REQUIRED_FIELDS = ('title', 'publication_id')
STRICT_REQUIRED_FIELDS = REQUIRED_FIELDS + ('content', 'order_index')

TITLE_MAX_LENGTH = 200
CONTENT_SHORT_CHARS = 100
CONTENT_MAX_CHARS = 500_000
EXCERPT_MIN_CHARS = 50
EXCERPT_MAX_CHARS = 500
ORDER_INDEX_HIGH = 9999
WORD_COUNT_HIGH = 50_000
READING_TIME_HIGH_MINUTES = 300
KEYWORDS_MAX = 15
KEYWORD_MAX_LENGTH = 30

# Tags that must never appear in chapter HTML
DANGEROUS_TAGS = ('script', 'iframe', 'object', 'embed', 'link')

NUMBERED_TITLE_PATTERN = re.compile(r'^(chapter|ch\.?)\s*\d+', re.IGNORECASE)
OPENING_TAG_PATTERN = re.compile(r'<[^/][^>]*>')
CLOSING_TAG_PATTERN = re.compile(r'</[^>]*>')
SENTENCE_SPLIT_PATTERN = re.compile(r'[.!?]+')
PARAGRAPH_SPLIT_PATTERN = re.compile(r'\n\s*\n')

# Content quality thresholds (words)
QUALITY_MIN_WORDS = 100
QUALITY_MAX_WORDS = 20_000
SINGLE_PARAGRAPH_MAX_CHARS = 2000


# ========== Rule groups ==========

def check_chapter_required(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    """Required fields, then the identity fields that are present.

    Strict mode (publishing readiness) also requires content and order_index.
    """
    required = STRICT_REQUIRED_FIELDS if ctx.strict else REQUIRED_FIELDS
    check_required_fields(acc, data, required)

    if data.get('title') is not None:
        validate_title(acc, data['title'])

    if data.get('publication_id'):
        check_publication_id(acc, data['publication_id'])

    if 'order_index' in data and not (ctx.strict and data['order_index'] is None):
        validate_order_index(acc, data['order_index'])


def check_chapter_content(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    """Content presence, size and formatting.

    Missing or blank content is only a warning for drafts; for publishing
    readiness blank content is an error.
    """
    content = data.get('content')

    if content is None or content == '':
        if ctx.strict:
            if content == '':
                acc.add_error('empty_content', 'Chapter content cannot be empty', 'content')
            return
        acc.add_warning('missing_content', 'Chapter content is recommended', 'content')
        return

    if not isinstance(content, str):
        acc.add_error('invalid_content_type', 'Content must be a string', 'content')
        return

    content = content.strip()

    if len(content) == 0:
        if ctx.strict:
            acc.add_error('empty_content', 'Chapter content cannot be empty', 'content')
        else:
            acc.add_warning('empty_content', 'Chapter content is empty', 'content')
        return

    if len(content) < CONTENT_SHORT_CHARS:
        acc.add_warning(
            'short_content',
            f'Chapter content is very short (less than {CONTENT_SHORT_CHARS} characters)',
            'content',
        )

    if len(content) > CONTENT_MAX_CHARS:
        acc.add_error(
            'content_too_long',
            f'Chapter content exceeds maximum length ({CONTENT_MAX_CHARS:,} characters)',
            'content',
        )

    check_content_formatting(acc, content)


def check_chapter_metadata(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    """Optional descriptive fields, each validated only when present"""
    if 'excerpt' in data:
        validate_excerpt(acc, data['excerpt'])

    if 'word_count' in data:
        validate_word_count(acc, data['word_count'])

    if 'reading_time' in data:
        validate_reading_time(acc, data['reading_time'])

    if 'keywords' in data:
        check_keywords(acc, data['keywords'], KEYWORDS_MAX, KEYWORD_MAX_LENGTH, detect_duplicates=True)

    if data.get('status') is not None:
        check_status_transition(acc, CHAPTER_TRANSITIONS, ctx.record_id, data['status'], ctx.current_status)


def check_chapter_update(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    """Validate only the fields present in a partial update"""
    if 'title' in data:
        validate_title(acc, data['title'])

    if 'content' in data:
        check_chapter_content(acc, {'content': data['content']}, ctx)

    if 'order_index' in data:
        validate_order_index(acc, data['order_index'])

    if 'publication_id' in data:
        check_publication_id(acc, data['publication_id'])

    if 'excerpt' in data:
        validate_excerpt(acc, data['excerpt'])

    if 'word_count' in data:
        validate_word_count(acc, data['word_count'])

    if 'reading_time' in data:
        validate_reading_time(acc, data['reading_time'])

    if 'keywords' in data:
        check_keywords(acc, data['keywords'], KEYWORDS_MAX, KEYWORD_MAX_LENGTH, detect_duplicates=True)

    if 'status' in data:
        check_status_transition(acc, CHAPTER_TRANSITIONS, ctx.record_id, data['status'], ctx.current_status)


def check_quality_content_present(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> Any:
    """Quality analysis needs text to analyse"""
    content = data.get('content')
    if not isinstance(content, str) or not content.strip():
        acc.add_error('empty_content', 'Chapter content cannot be empty', 'content')
        return HALT_PASS
    return None


def check_quality_length(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    word_count = len(data['content'].split())

    if word_count < QUALITY_MIN_WORDS:
        acc.add_warning(
            'very_short_chapter',
            f'Chapter is very short (less than {QUALITY_MIN_WORDS} words)',
            'content',
        )

    if word_count > QUALITY_MAX_WORDS:
        acc.add_warning(
            'very_long_chapter',
            f'Chapter is very long (over {QUALITY_MAX_WORDS:,} words) - consider splitting',
            'content',
        )


def check_quality_structure(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    """Dialogue quotes and paragraph structure"""
    content = data['content']

    if content.count('"') % 2 != 0:
        acc.add_warning('unmatched_quotes', 'Unmatched quotation marks detected', 'content')

    paragraphs = [p for p in PARAGRAPH_SPLIT_PATTERN.split(content) if p.strip()]
    if len(paragraphs) == 1 and len(content) > SINGLE_PARAGRAPH_MAX_CHARS:
        acc.add_warning(
            'single_paragraph',
            'Long content should be broken into multiple paragraphs',
            'content',
        )


# ========== Field validators ==========

def validate_title(acc: ResultAccumulator, title: Any) -> None:
    trimmed = check_title(acc, title, TITLE_MAX_LENGTH)

    if trimmed and NUMBERED_TITLE_PATTERN.match(trimmed):
        acc.add_warning(
            'numbered_chapter_title',
            'Consider using descriptive titles instead of just chapter numbers',
            'title',
        )


def validate_order_index(acc: ResultAccumulator, order_index: Any) -> None:
    if order_index is None:
        acc.add_warning('missing_order_index', 'Order index helps organize chapters', 'order_index')
        return

    if not isinstance(order_index, int) or isinstance(order_index, bool) or order_index < 0:
        acc.add_error('invalid_order_index', 'Order index must be a non-negative integer', 'order_index')
        return

    if order_index > ORDER_INDEX_HIGH:
        acc.add_warning(
            'high_order_index',
            'Very high order index might indicate organization issues',
            'order_index',
        )


def validate_excerpt(acc: ResultAccumulator, excerpt: Any) -> None:
    if not excerpt:
        return  # Excerpt is optional

    if not isinstance(excerpt, str):
        acc.add_error('invalid_excerpt_type', 'Excerpt must be a string', 'excerpt')
        return

    trimmed = excerpt.strip()

    if len(trimmed) > EXCERPT_MAX_CHARS:
        acc.add_error('excerpt_too_long', f'Excerpt cannot exceed {EXCERPT_MAX_CHARS} characters', 'excerpt')

    if 0 < len(trimmed) < EXCERPT_MIN_CHARS:
        acc.add_warning(
            'excerpt_too_short',
            f'Excerpt should be at least {EXCERPT_MIN_CHARS} characters for effectiveness',
            'excerpt',
        )


def validate_word_count(acc: ResultAccumulator, word_count: Any) -> None:
    if word_count is None:
        return

    if not is_integer(word_count) or word_count < 0:
        acc.add_error('invalid_word_count', 'Word count must be a non-negative integer', 'word_count')
        return

    if word_count == 0:
        acc.add_warning('zero_word_count', 'Word count is zero', 'word_count')

    if word_count > WORD_COUNT_HIGH:
        acc.add_warning(
            'very_long_chapter',
            f'Chapter is very long (over {WORD_COUNT_HIGH:,} words)',
            'word_count',
        )


def validate_reading_time(acc: ResultAccumulator, reading_time: Any) -> None:
    if reading_time is None:
        return

    if not is_integer(reading_time) or reading_time < 0:
        acc.add_error(
            'invalid_reading_time',
            'Reading time must be a non-negative integer (minutes)',
            'reading_time',
        )
        return

    if reading_time > READING_TIME_HIGH_MINUTES:
        acc.add_warning(
            'very_long_reading_time',
            'Reading time over 5 hours might be too long for a single chapter',
            'reading_time',
        )


def check_content_formatting(acc: ResultAccumulator, content: str) -> None:
    if '  ' in content:
        acc.add_warning('excessive_whitespace', 'Content contains multiple consecutive spaces', 'content')

    sentences = [s for s in SENTENCE_SPLIT_PATTERN.split(content) if s.strip()]
    if len(sentences) > 10 and '\n\n' not in content:
        acc.add_warning(
            'missing_paragraph_breaks',
            'Long content without paragraph breaks may be hard to read',
            'content',
        )

    if '<' in content and '>' in content:
        check_basic_html(acc, content)


def check_basic_html(acc: ResultAccumulator, content: str) -> None:
    """Opening/closing tag balance and the dangerous tag denylist"""
    opening_tags = len(OPENING_TAG_PATTERN.findall(content))
    closing_tags = len(CLOSING_TAG_PATTERN.findall(content))

    if opening_tags != closing_tags:
        acc.add_error('unmatched_html_tags', 'HTML tags are not properly closed', 'content')

    for tag in DANGEROUS_TAGS:
        if re.search(rf'<{tag}[^>]*>', content, re.IGNORECASE):
            acc.add_error(
                'dangerous_html_tag',
                f'Content contains potentially dangerous HTML tag: {tag}',
                'content',
            )
