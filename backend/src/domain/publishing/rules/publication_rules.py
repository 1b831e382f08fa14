"""Publication validation rules"""

import re
from typing import Any, Mapping

from domain.validation.accumulator import ResultAccumulator
from domain.validation.identifiers import (
    PRICING_CURRENCIES,
    check_isbn10,
    check_isbn13,
    check_language,
    is_supported_currency,
)
from domain.validation.models import ValidationContext
from domain.validation.primitives import is_finite_number
from domain.validation.transitions import PUBLICATION_TRANSITIONS, check_status_transition

from .common import check_keywords, check_required_fields, check_title


PUBLICATION_TYPES = ('ebook', 'paperback', 'hardcover', 'audiobook', 'bundle')
BOOK_TYPES = ('ebook', 'paperback', 'hardcover')
TARGET_AUDIENCES = ('children', 'young_adult', 'adult', 'all_ages')
PUBLICATION_STATUSES = tuple(PUBLICATION_TRANSITIONS.keys())

GENRES = (
    'fiction', 'non-fiction', 'mystery', 'thriller', 'romance', 'science-fiction',
    'fantasy', 'historical-fiction', 'contemporary-fiction', 'literary-fiction',
    'young-adult', 'children', 'memoir', 'biography', 'self-help', 'business',
    'health', 'cooking', 'travel', 'religion', 'philosophy', 'politics',
    'science', 'technology', 'education', 'reference', 'poetry', 'drama',
)

LANGUAGES = (
    'en', 'es', 'fr', 'de', 'it', 'pt', 'pl', 'ru', 'zh', 'ja', 'ko',
    'nl', 'sv', 'no', 'da', 'fi', 'cs', 'sk', 'hu', 'ro', 'bg', 'hr',
)

REQUIRED_FIELDS = ('title', 'publication_type', 'language')
STRICT_REQUIRED_FIELDS = REQUIRED_FIELDS + ('description', 'genre', 'target_audience')

TITLE_MAX_LENGTH = 300
DESCRIPTION_MIN_CHARS = 50
DESCRIPTION_MAX_CHARS = 4000
KEYWORDS_MAX = 20
KEYWORD_MAX_LENGTH = 50
BISAC_MAX = 3
USD_PRICE_FLOOR = 0.99
EBOOK_MIN_WORDS = 1000

SUSPICIOUS_TITLE_WORDS = ('test', 'temp')
HTML_TAG_PATTERN = re.compile(r'<[^>]*>')
TERRITORY_PATTERN = re.compile(r'^[A-Z]{2}$')
BISAC_PATTERN = re.compile(r'^[A-Z]{3}\d{6}$')


def _has_value(data: Mapping[str, Any], field: str) -> bool:
    """Present, not None and not a blank string"""
    value = data.get(field)
    if value is None:
        return False
    return not (isinstance(value, str) and value.strip() == '')


# ========== Rule groups ==========

def check_publication_required(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    """Required fields (blank strings count as missing), then the core fields"""
    required = STRICT_REQUIRED_FIELDS if ctx.strict else REQUIRED_FIELDS
    check_required_fields(acc, data, required, blank_is_missing=True)

    if _has_value(data, 'title'):
        validate_title(acc, data['title'])

    if _has_value(data, 'publication_type'):
        validate_publication_type(acc, data['publication_type'])

    if _has_value(data, 'language'):
        validate_language(acc, data['language'])


def check_publication_metadata(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    """Optional descriptive and identifier fields that carry a value"""
    if _has_value(data, 'description'):
        validate_description(acc, data['description'])

    if _has_value(data, 'genre'):
        validate_genre(acc, data['genre'])

    if _has_value(data, 'target_audience'):
        validate_target_audience(acc, data['target_audience'])

    check_isbn13(acc, data.get('isbn_13'))
    check_isbn10(acc, data.get('isbn_10'))

    if 'keywords' in data:
        check_keywords(acc, data['keywords'], KEYWORDS_MAX, KEYWORD_MAX_LENGTH, detect_duplicates=False)

    if 'bisac_categories' in data:
        validate_bisac_categories(acc, data['bisac_categories'])

    if data.get('status') is not None:
        check_status_transition(acc, PUBLICATION_TRANSITIONS, ctx.record_id, data['status'], ctx.current_status)


def check_publication_pricing(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    validate_pricing(acc, data.get('pricing'))


def check_publication_territories(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    validate_territories(acc, data.get('territories'))


def check_publication_update(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    """Validate only the fields present in a partial update"""
    if 'title' in data:
        validate_title(acc, data['title'])

    if 'description' in data:
        validate_description(acc, data['description'])

    if 'publication_type' in data:
        validate_publication_type(acc, data['publication_type'])

    if 'genre' in data:
        validate_genre(acc, data['genre'])

    if 'language' in data:
        validate_language(acc, data['language'])

    if 'target_audience' in data:
        validate_target_audience(acc, data['target_audience'])

    if 'isbn_13' in data:
        check_isbn13(acc, data['isbn_13'])

    if 'isbn_10' in data:
        check_isbn10(acc, data['isbn_10'])

    if 'pricing' in data:
        validate_pricing(acc, data['pricing'])

    if 'territories' in data:
        validate_territories(acc, data['territories'])

    if 'keywords' in data:
        check_keywords(acc, data['keywords'], KEYWORDS_MAX, KEYWORD_MAX_LENGTH, detect_duplicates=False)

    if 'bisac_categories' in data:
        validate_bisac_categories(acc, data['bisac_categories'])

    if 'status' in data:
        check_status_transition(acc, PUBLICATION_TRANSITIONS, ctx.record_id, data['status'], ctx.current_status)


def check_content_completeness(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    """Book-like publications need chapters; short ebooks get a warning"""
    publication_type = data.get('publication_type')

    if publication_type in BOOK_TYPES and not data.get('chapters'):
        acc.add_error('missing_chapters', 'Publication must have at least one chapter', 'chapters')

    word_count = data.get('word_count')
    if publication_type == 'ebook' and is_finite_number(word_count) and word_count < EBOOK_MIN_WORDS:
        acc.add_warning(
            'low_word_count',
            f'Word count below {EBOOK_MIN_WORDS} may not meet store requirements',
            'word_count',
        )


# ========== Field validators ==========

def validate_title(acc: ResultAccumulator, title: Any) -> None:
    trimmed = check_title(acc, title, TITLE_MAX_LENGTH)

    if trimmed and any(word in trimmed.lower() for word in SUSPICIOUS_TITLE_WORDS):
        acc.add_warning('suspicious_title', 'Title appears to be a test or temporary title', 'title')


def validate_description(acc: ResultAccumulator, description: Any) -> None:
    if not description or not isinstance(description, str):
        acc.add_error('invalid_description', 'Description must be a string', 'description')
        return

    trimmed = description.strip()

    if len(trimmed) < DESCRIPTION_MIN_CHARS:
        acc.add_warning(
            'description_too_short',
            f'Description should be at least {DESCRIPTION_MIN_CHARS} characters for better discoverability',
            'description',
        )

    if len(trimmed) > DESCRIPTION_MAX_CHARS:
        acc.add_error(
            'description_too_long',
            f'Description cannot exceed {DESCRIPTION_MAX_CHARS} characters',
            'description',
        )

    if HTML_TAG_PATTERN.search(trimmed):
        acc.add_warning(
            'description_contains_html',
            'Description contains HTML tags which may not display correctly',
            'description',
        )


def validate_publication_type(acc: ResultAccumulator, publication_type: Any) -> None:
    if not publication_type:
        acc.add_error('missing_publication_type', 'Publication type is required', 'publication_type')
        return

    if publication_type not in PUBLICATION_TYPES:
        acc.add_error(
            'invalid_publication_type',
            f"Publication type must be one of: {', '.join(PUBLICATION_TYPES)}",
            'publication_type',
        )


def validate_genre(acc: ResultAccumulator, genre: Any) -> None:
    if not genre:
        acc.add_warning('missing_genre', 'Genre helps with discoverability', 'genre')
        return

    if not isinstance(genre, str) or genre.lower() not in GENRES:
        acc.add_warning('unrecognized_genre', f'Genre "{genre}" is not in the standard list', 'genre')


def validate_language(acc: ResultAccumulator, language: Any) -> None:
    if not language:
        acc.add_error('missing_language', 'Language is required', 'language')
        return

    check_language(acc, language, LANGUAGES)


def validate_target_audience(acc: ResultAccumulator, target_audience: Any) -> None:
    if not target_audience:
        acc.add_warning(
            'missing_target_audience',
            'Target audience helps with appropriate content filtering',
            'target_audience',
        )
        return

    if target_audience not in TARGET_AUDIENCES:
        acc.add_error(
            'invalid_target_audience',
            f"Target audience must be one of: {', '.join(TARGET_AUDIENCES)}",
            'target_audience',
        )


def validate_pricing(acc: ResultAccumulator, pricing: Any) -> None:
    """Pricing maps currency codes to {retail_price, wholesale_price}"""
    if not pricing:
        acc.add_warning('missing_pricing', 'Pricing information is recommended for distribution', 'pricing')
        return

    if not isinstance(pricing, Mapping):
        acc.add_error('invalid_pricing_format', 'Pricing must be an object keyed by currency', 'pricing')
        return

    for currency, price_data in pricing.items():
        if not is_supported_currency(currency, PRICING_CURRENCIES):
            acc.add_error('invalid_currency', f'Invalid currency code: {currency}', 'pricing')
            continue

        if not isinstance(price_data, Mapping):
            acc.add_error('invalid_price_data', f'Price data for {currency} must be an object', 'pricing')
            continue

        retail = price_data.get('retail_price')
        wholesale = price_data.get('wholesale_price')
        retail_ok = is_finite_number(retail) and retail >= 0
        wholesale_ok = is_finite_number(wholesale) and wholesale >= 0

        if 'retail_price' in price_data:
            if not retail_ok:
                acc.add_error(
                    'invalid_retail_price',
                    f'Retail price for {currency} must be a non-negative number',
                    'pricing',
                )
            elif retail < USD_PRICE_FLOOR and currency.upper() == 'USD':
                acc.add_warning(
                    'low_price_warning',
                    'Prices below $0.99 may not be supported by all stores',
                    'pricing',
                )

        if 'wholesale_price' in price_data:
            if not wholesale_ok:
                acc.add_error(
                    'invalid_wholesale_price',
                    f'Wholesale price for {currency} must be a non-negative number',
                    'pricing',
                )
            elif retail_ok and retail > 0 and wholesale >= retail:
                acc.add_warning(
                    'wholesale_retail_mismatch',
                    f'Wholesale price should be lower than retail price for {currency}',
                    'pricing',
                )


def validate_territories(acc: ResultAccumulator, territories: Any) -> None:
    if not territories:
        acc.add_warning(
            'missing_territories',
            'Territory specification helps with distribution planning',
            'territories',
        )
        return

    if not isinstance(territories, (list, tuple)):
        acc.add_error('invalid_territories_format', 'Territories must be an array', 'territories')
        return

    for index, territory in enumerate(territories):
        if not isinstance(territory, str):
            acc.add_error(
                'invalid_territory_format',
                f'Territory at index {index} must be a string',
                'territories',
            )
            continue

        if not TERRITORY_PATTERN.match(territory):
            acc.add_error(
                'invalid_territory_code',
                f'Territory "{territory}" must be a 2-letter ISO country code',
                'territories',
            )

    hashable = [t for t in territories if isinstance(t, str)]
    if len(set(hashable)) != len(hashable):
        acc.add_warning('duplicate_territories', 'Duplicate territories detected', 'territories')


def validate_bisac_categories(acc: ResultAccumulator, categories: Any) -> None:
    if not categories:
        return

    if not isinstance(categories, (list, tuple)):
        acc.add_error('invalid_bisac_format', 'BISAC categories must be an array', 'bisac_categories')
        return

    if len(categories) > BISAC_MAX:
        acc.add_warning(
            'too_many_bisac_categories',
            f'Most stores accept a maximum of {BISAC_MAX} BISAC categories',
            'bisac_categories',
        )

    for index, category in enumerate(categories):
        if not isinstance(category, str):
            acc.add_error(
                'invalid_bisac_format',
                f'BISAC category at index {index} must be a string',
                'bisac_categories',
            )
            continue

        if not BISAC_PATTERN.match(category):
            acc.add_error(
                'invalid_bisac_code',
                f'BISAC category "{category}" must be in format AAA000000',
                'bisac_categories',
            )
