"""Checksum and code-list validators shared by the publishing rule sets.

ISBN-13/ISBN-10 structure and check digits, ISO currency codes, territory
codes (ISO 3166-1 alpha-2 or WORLD) and language tags (ISO 639-1 with an
optional region).
"""

import re
from typing import Any, Iterable, Optional

from .accumulator import ResultAccumulator
from .primitives import UUID_PATTERN


PRICING_CURRENCIES = ('USD', 'EUR', 'GBP', 'CAD', 'AUD', 'JPY', 'PLN', 'SEK', 'NOK', 'DKK')

SALES_CURRENCIES = PRICING_CURRENCIES + ('CHF', 'SGD', 'HKD')

WORLD_TERRITORY = 'WORLD'

_ISBN_SEPARATORS = re.compile(r'[-\s]')
_TERRITORY_PATTERN = re.compile(r'^[A-Z]{2}$')
_LANGUAGE_PATTERN = re.compile(r'^[a-z]{2}(-[A-Z]{2})?$')


def clean_isbn(value: str) -> str:
    """Strip hyphens and whitespace"""
    return _ISBN_SEPARATORS.sub('', value)


def isbn13_check_digit_ok(isbn: str) -> bool:
    """Weights alternate 1 and 3 over the first 12 digits.

    Example:
        >>> isbn13_check_digit_ok('9780306406157')
        True
    """
    total = sum(int(digit) * (1 if i % 2 == 0 else 3) for i, digit in enumerate(isbn[:12]))
    check_digit = (10 - (total % 10)) % 10
    return check_digit == int(isbn[12])


def isbn10_check_digit_ok(isbn: str) -> bool:
    """Weights 10 down to 2 over the first 9 digits; a check value of 10 is 'X'.

    Example:
        >>> isbn10_check_digit_ok('0306406152')
        True
    """
    total = sum(int(digit) * (10 - i) for i, digit in enumerate(isbn[:9]))
    check_digit = (11 - (total % 11)) % 11
    last_char = isbn[9]
    if check_digit == 10:
        return last_char == 'X'
    return last_char.isdigit() and check_digit == int(last_char)


def check_isbn13(acc: ResultAccumulator, value: Any, field: str = 'isbn_13') -> bool:
    """Length and digit failures stop further checks; checksum and prefix
    failures are reported independently."""
    if value is None or value == '':
        return True

    if not isinstance(value, str):
        acc.add_error('invalid_isbn13_format', 'ISBN-13 must be a string of digits', field)
        return False

    isbn = clean_isbn(value)

    if len(isbn) != 13:
        acc.add_error('invalid_isbn13_length', 'ISBN-13 must be exactly 13 digits', field)
        return False

    if not re.fullmatch(r'\d{13}', isbn):
        acc.add_error('invalid_isbn13_format', 'ISBN-13 must contain only digits', field)
        return False

    valid = True

    if not isbn13_check_digit_ok(isbn):
        acc.add_error('invalid_isbn13_checksum', 'ISBN-13 check digit is invalid', field)
        valid = False

    if not isbn.startswith(('978', '979')):
        acc.add_error('invalid_isbn13_prefix', 'ISBN-13 must start with 978 or 979', field)
        valid = False

    return valid


def check_isbn10(acc: ResultAccumulator, value: Any, field: str = 'isbn_10') -> bool:
    if value is None or value == '':
        return True

    if not isinstance(value, str):
        acc.add_error('invalid_isbn10_format', 'ISBN-10 must be a string', field)
        return False

    isbn = clean_isbn(value)

    if len(isbn) != 10:
        acc.add_error('invalid_isbn10_length', 'ISBN-10 must be exactly 10 characters', field)
        return False

    if not re.fullmatch(r'\d{9}[\dX]', isbn):
        acc.add_error(
            'invalid_isbn10_format',
            'ISBN-10 must be 9 digits followed by a digit or X',
            field,
        )
        return False

    if not isbn10_check_digit_ok(isbn):
        acc.add_error('invalid_isbn10_checksum', 'ISBN-10 check digit is invalid', field)
        return False

    return True


def is_supported_currency(code: Any, supported: Iterable[str] = PRICING_CURRENCIES) -> bool:
    """Case-insensitive membership test"""
    return isinstance(code, str) and code.upper() in supported


def check_currency(
    acc: ResultAccumulator,
    value: Any,
    field: str = 'currency',
    supported: Iterable[str] = PRICING_CURRENCIES,
) -> bool:
    if value is None or value == '':
        return True

    supported = tuple(supported)

    if not isinstance(value, str):
        acc.add_error('invalid_currency_format', 'Currency must be a string', field)
        return False

    if not is_supported_currency(value, supported):
        acc.add_error('invalid_currency', f"Currency must be one of: {', '.join(supported)}", field)
        return False

    return True


def check_territory(
    acc: ResultAccumulator,
    value: Any,
    field: str = 'territory',
    supported: Optional[Iterable[str]] = None,
    allow_world: bool = True,
) -> bool:
    """Two uppercase letters, optionally restricted to a supported list.

    WORLD is accepted as the sentinel for global rights when allow_world.
    """
    if value is None or value == '':
        return True

    if not isinstance(value, str):
        acc.add_error('invalid_territory_format', 'Territory must be a string', field)
        return False

    if allow_world and value == WORLD_TERRITORY:
        return True

    if not _TERRITORY_PATTERN.match(value):
        expected = '2-letter ISO country code or "WORLD"' if allow_world else '2-letter ISO country code'
        acc.add_error('invalid_territory_code', f'Territory "{value}" must be a {expected}', field)
        return False

    if supported is not None and value not in supported:
        acc.add_error(
            'unsupported_territory',
            f'Territory "{value}" is not in the supported list',
            field,
        )
        return False

    return True


def check_language(
    acc: ResultAccumulator,
    value: Any,
    supported: Iterable[str],
    field: str = 'language',
) -> bool:
    """ISO 639-1 code with an optional region ("en", "en-US").

    Only the base code is checked against the supported list.
    """
    if value is None or value == '':
        return True

    if not isinstance(value, str):
        acc.add_error('invalid_language_format', 'Language must be a string', field)
        return False

    if not _LANGUAGE_PATTERN.match(value):
        acc.add_error(
            'invalid_language_code',
            'Language must be a valid ISO 639-1 code (e.g., "en", "en-US")',
            field,
        )
        return False

    base_language = value.split('-')[0]
    if base_language not in supported:
        acc.add_error('unsupported_language', f'Language "{base_language}" is not supported', field)
        return False

    return True


def check_publication_id(acc: ResultAccumulator, value: Any, field: str = 'publication_id') -> bool:
    if value is None or value == '':
        return True

    if not isinstance(value, str) or not UUID_PATTERN.match(value):
        acc.add_error('invalid_publication_id_format', 'Publication ID must be a valid UUID', field)
        return False

    return True
