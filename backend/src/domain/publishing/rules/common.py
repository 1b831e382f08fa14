"""Rule helpers shared by the publishing rule sets"""

import re
from typing import Any, Iterable, Mapping, Optional

from domain.validation.accumulator import ResultAccumulator
from domain.validation.engine import HALT_PASS
from domain.validation.models import ValidationContext


TITLE_INVALID_CHARS = re.compile(r'[<>{}\[\]\\]')


def require_mapping(acc: ResultAccumulator, data: Any, ctx: ValidationContext) -> Any:
    """Stop the pass when the record is not an object at all"""
    if not isinstance(data, Mapping):
        acc.add_error('invalid_record_format', 'Record must be an object', 'general')
        return HALT_PASS
    return None


def check_required_fields(
    acc: ResultAccumulator,
    data: Mapping[str, Any],
    required_fields: Iterable[str],
    blank_is_missing: bool = False,
) -> list[str]:
    """Add required_field errors and return the names of the missing fields"""
    missing = []
    for field_name in required_fields:
        value = data.get(field_name)
        if value is None or (blank_is_missing and isinstance(value, str) and value.strip() == ''):
            acc.add_error('required_field', f"{field_name} is required", field_name)
            missing.append(field_name)
    return missing


def check_title(
    acc: ResultAccumulator,
    title: Any,
    max_length: int,
    field: str = 'title',
) -> Optional[str]:
    """Shared title checks; returns the trimmed title when it is a string"""
    if not isinstance(title, str):
        acc.add_error('invalid_title', 'Title must be a non-empty string', field)
        return None

    trimmed = title.strip()

    if len(trimmed) < 1:
        acc.add_error('title_too_short', 'Title cannot be empty', field)

    if len(trimmed) > max_length:
        acc.add_error('title_too_long', f'Title cannot exceed {max_length} characters', field)

    if TITLE_INVALID_CHARS.search(trimmed):
        acc.add_error('title_invalid_chars', 'Title contains invalid characters: < > { } [ ] \\', field)

    return trimmed


def check_keywords(
    acc: ResultAccumulator,
    keywords: Any,
    max_count: int,
    max_length: int,
    detect_duplicates: bool,
    field: str = 'keywords',
) -> None:
    if not keywords:
        return

    if not isinstance(keywords, (list, tuple)):
        acc.add_error('invalid_keywords_format', 'Keywords must be an array', field)
        return

    if len(keywords) > max_count:
        acc.add_warning(
            'too_many_keywords',
            f'More than {max_count} keywords may reduce effectiveness',
            field,
        )

    for index, keyword in enumerate(keywords):
        if not isinstance(keyword, str):
            acc.add_error('invalid_keyword_format', f'Keyword at index {index} must be a string', field)
            continue

        if len(keyword) < 2:
            acc.add_error('keyword_too_short', f'Keyword "{keyword}" is too short', field)

        if len(keyword) > max_length:
            acc.add_error('keyword_too_long', f'Keyword "{keyword}" is too long', field)

    if detect_duplicates:
        lowered = [k.lower() for k in keywords if isinstance(k, str)]
        if len(set(lowered)) != len(lowered):
            acc.add_warning('duplicate_keywords', 'Duplicate keywords detected', field)
