"""Reusable field-level checks.

Every check takes the pass accumulator, the value and the field name, adds
at most one finding and returns whether the value is acceptable. None is
always acceptable here: required fields are enforced by each rule set's
required-field pass, never by a primitive check. A value of the wrong type
gets a single error and no further constraint checks.
"""

import json
import math
import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple
from urllib.parse import urlparse

from .accumulator import ResultAccumulator
from .dates import parse_instant, utc_now


EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
UUID_PATTERN = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$',
    re.IGNORECASE,
)

# Per-item validator for check_array: (item, item_path) -> (is_valid, error_message)
ItemValidator = Callable[[Any, str], Tuple[bool, Optional[str]]]


def is_number(value: Any) -> bool:
    """True for int, float and Decimal values; booleans are not numbers"""
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def is_finite_number(value: Any) -> bool:
    """is_number, excluding NaN and infinities"""
    if not is_number(value):
        return False
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    return True


def is_integer(value: Any) -> bool:
    """True for whole numbers (ints, or floats/Decimals with no fraction)"""
    if not is_number(value):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float) and not math.isfinite(value):
        return False
    if isinstance(value, Decimal) and not value.is_finite():
        return False
    return value == int(value)


def is_empty(value: Any) -> bool:
    """None, blank string, or empty list/dict"""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ''
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def sanitize_string(value: Any) -> Any:
    """Trim and collapse internal whitespace; non-strings pass through"""
    if not isinstance(value, str):
        return value
    return re.sub(r'\s+', ' ', value.strip())


def check_string_length(
    acc: ResultAccumulator,
    value: Any,
    min_length: Optional[int],
    max_length: Optional[int],
    field: str,
) -> bool:
    if value is None:
        return True

    if not isinstance(value, str):
        acc.add_error('invalid_type', f"{field} must be a string", field)
        return False

    length = len(value.strip())

    if min_length is not None and length < min_length:
        acc.add_error('too_short', f"{field} must be at least {min_length} characters", field)
        return False

    if max_length is not None and length > max_length:
        acc.add_error('too_long', f"{field} cannot exceed {max_length} characters", field)
        return False

    return True


def check_numeric_range(
    acc: ResultAccumulator,
    value: Any,
    minimum: Optional[float],
    maximum: Optional[float],
    field: str,
) -> bool:
    """Inclusive range check"""
    if value is None:
        return True

    if not is_number(value):
        acc.add_error('invalid_type', f"{field} must be a number", field)
        return False

    if (isinstance(value, float) and math.isnan(value)) or (isinstance(value, Decimal) and value.is_nan()):
        acc.add_error('invalid_number', f"{field} must be a valid number", field)
        return False

    if minimum is not None and value < minimum:
        acc.add_error('below_minimum', f"{field} must be at least {minimum}", field)
        return False

    if maximum is not None and value > maximum:
        acc.add_error('above_maximum', f"{field} cannot exceed {maximum}", field)
        return False

    return True


def check_date(
    acc: ResultAccumulator,
    value: Any,
    field: str,
    allow_future: bool = True,
    allow_past: bool = True,
    now: Optional[datetime] = None,
) -> bool:
    if value is None or value == '':
        return True

    moment = parse_instant(value)
    if moment is None:
        acc.add_error('invalid_date', f"{field} must be a valid date", field)
        return False

    now = now or utc_now()

    if not allow_future and moment > now:
        acc.add_error('future_date_not_allowed', f"{field} cannot be in the future", field)
        return False

    if not allow_past and moment < now:
        acc.add_error('past_date_not_allowed', f"{field} cannot be in the past", field)
        return False

    return True


def check_email(acc: ResultAccumulator, value: Any, field: str) -> bool:
    if value is None or value == '':
        return True

    if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
        acc.add_error('invalid_email', f"{field} must be a valid email address", field)
        return False

    return True


def check_url(
    acc: ResultAccumulator,
    value: Any,
    field: str,
    allowed_protocols: Iterable[str] = ('http', 'https'),
) -> bool:
    if value is None or value == '':
        return True

    allowed = list(allowed_protocols)

    try:
        parsed = urlparse(value) if isinstance(value, str) else None
    except ValueError:
        parsed = None

    if parsed is None or not parsed.scheme or not (parsed.netloc or parsed.path):
        acc.add_error('invalid_url', f"{field} must be a valid URL", field)
        return False

    if parsed.scheme.lower() not in allowed:
        acc.add_error(
            'invalid_protocol',
            f"{field} must use one of these protocols: {', '.join(allowed)}",
            field,
        )
        return False

    return True


def check_array(
    acc: ResultAccumulator,
    value: Any,
    field: str,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
    item_validator: Optional[ItemValidator] = None,
) -> bool:
    """Check list shape, then delegate each item to item_validator.

    Every failing item adds its own invalid_array_item error. The return
    value reflects the shape only.
    """
    if value is None:
        return True

    if not isinstance(value, (list, tuple)):
        acc.add_error('invalid_type', f"{field} must be an array", field)
        return False

    if min_length is not None and len(value) < min_length:
        acc.add_error('array_too_short', f"{field} must have at least {min_length} items", field)
        return False

    if max_length is not None and len(value) > max_length:
        acc.add_error('array_too_long', f"{field} cannot have more than {max_length} items", field)
        return False

    if item_validator is not None:
        for index, item in enumerate(value):
            item_path = f"{field}[{index}]"
            item_ok, error_message = item_validator(item, item_path)
            if not item_ok:
                acc.add_error('invalid_array_item', f"{item_path}: {error_message}", field)

    return True


def check_enum(
    acc: ResultAccumulator,
    value: Any,
    valid_values: Iterable[str],
    field: str,
    case_sensitive: bool = True,
) -> bool:
    if value is None or value == '':
        return True

    valid = list(valid_values)

    if case_sensitive or not isinstance(value, str):
        matched = value in valid
    else:
        matched = value.lower() in {v.lower() for v in valid}

    if not matched:
        acc.add_error('invalid_enum_value', f"{field} must be one of: {', '.join(valid)}", field)
        return False

    return True


def check_uuid(acc: ResultAccumulator, value: Any, field: str) -> bool:
    if value is None or value == '':
        return True

    if not isinstance(value, str) or not UUID_PATTERN.match(value):
        acc.add_error('invalid_uuid', f"{field} must be a valid UUID", field)
        return False

    return True


def check_json(
    acc: ResultAccumulator,
    value: Any,
    field: str,
    schema: Optional[Mapping[str, Any]] = None,
) -> bool:
    """Accept a JSON string or an already decoded object, then apply schema"""
    if value is None or value == '':
        return True

    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            acc.add_error('invalid_json', f"{field} must be valid JSON", field)
            return False
    else:
        parsed = value

    if schema:
        return check_object_schema(acc, parsed, schema, field)

    return True


_SCHEMA_TYPES = {
    'string': lambda v: isinstance(v, str),
    'number': is_number,
    'boolean': lambda v: isinstance(v, bool),
    'object': lambda v: isinstance(v, Mapping),
    'array': lambda v: isinstance(v, (list, tuple)),
}


def check_object_schema(
    acc: ResultAccumulator,
    obj: Any,
    schema: Mapping[str, Any],
    field: str,
) -> bool:
    """Check an object against a minimal {required, properties} schema.

    Returns True only if the pass has no errors so far, including errors
    added by earlier rules.
    """
    if not isinstance(obj, Mapping):
        acc.add_error('invalid_object', f"{field} must be an object", field)
        return False

    for required_field in schema.get('required') or []:
        if required_field not in obj:
            acc.add_error('missing_required_field', f"{field}.{required_field} is required", field)

    for prop_name, prop_schema in (schema.get('properties') or {}).items():
        if prop_name not in obj:
            continue

        prop_value = obj[prop_name]
        prop_field = f"{field}.{prop_name}"

        expected_type = prop_schema.get('type')
        if expected_type:
            type_check = _SCHEMA_TYPES.get(expected_type)
            if type_check is None or not type_check(prop_value):
                acc.add_error(
                    'invalid_property_type',
                    f"{prop_field} must be of type {expected_type}",
                    field,
                )

        if prop_schema.get('enum'):
            check_enum(acc, prop_value, prop_schema['enum'], prop_field)

    return acc.error_count == 0
