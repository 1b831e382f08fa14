"""Rights grant validation rules.

Besides the per-grant rules this module holds the portfolio rules used by
territorial coverage checks, which look at all grants of one publication
together.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional, Sequence

from domain.validation.accumulator import ResultAccumulator
from domain.validation.dates import parse_instant, start_of_day
from domain.validation.engine import HALT_PASS
from domain.validation.identifiers import (
    PRICING_CURRENCIES,
    WORLD_TERRITORY,
    check_currency,
    check_language,
    check_publication_id,
    check_territory,
)
from domain.validation.models import ValidationContext
from domain.validation.port import ConflictCheckerPort
from domain.validation.primitives import is_finite_number
from domain.validation.transitions import RIGHTS_TRANSITIONS, check_status_transition

from .common import check_required_fields


logger = logging.getLogger(__name__)


RIGHT_TYPES = (
    'print', 'ebook', 'audiobook', 'translation', 'adaptation',
    'film', 'television', 'stage', 'merchandising', 'digital',
)

LICENSE_TYPES = (
    'exclusive', 'non-exclusive', 'sole', 'first-refusal', 'option',
    'co-exclusive', 'limited-exclusive', 'territorial-exclusive',
)

# License types that grant exclusivity in some form
EXCLUSIVE_LICENSE_TYPES = (
    'exclusive', 'sole', 'co-exclusive', 'limited-exclusive', 'territorial-exclusive',
)

# ISO 3166-1 alpha-2
TERRITORIES = (
    'US', 'CA', 'GB', 'DE', 'FR', 'IT', 'ES', 'NL', 'SE', 'NO',
    'DK', 'FI', 'PL', 'CZ', 'SK', 'HU', 'RO', 'BG', 'HR', 'SI',
    'AU', 'NZ', 'JP', 'KR', 'CN', 'IN', 'BR', 'MX', 'AR', 'CL',
)

# ISO 639-1
LANGUAGES = (
    'en', 'es', 'fr', 'de', 'it', 'pt', 'pl', 'ru', 'zh', 'ja',
    'ko', 'nl', 'sv', 'no', 'da', 'fi', 'cs', 'sk', 'hu', 'ro',
    'bg', 'hr', 'sl', 'ar', 'hi', 'th', 'vi', 'id', 'ms', 'tl',
)

RIGHTS_STATUSES = tuple(RIGHTS_TRANSITIONS.keys())

REQUIRED_FIELDS = ('publication_id', 'right_type', 'territory', 'language', 'license_type', 'start_date')

MAX_TERM = timedelta(days=99 * 365)
HIGH_ROYALTY_RATE = 0.5
HIGH_ADVANCE_AMOUNT = 10_000_000

# Fields whose change can create a conflict with existing grants
CONFLICT_FIELDS = ('territory', 'language', 'right_type')


# ========== Rule groups ==========

def check_rights_required(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    check_required_fields(acc, data, REQUIRED_FIELDS)

    if data.get('publication_id'):
        check_publication_id(acc, data['publication_id'])


def check_rights_scope(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    """Right type, territory and language of a grant that carry a value"""
    if data.get('right_type') is not None:
        validate_right_type(acc, data['right_type'])

    check_territory(acc, data.get('territory'), supported=TERRITORIES)
    check_language(acc, data.get('language'), LANGUAGES)


def check_rights_license(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    if data.get('license_type'):
        validate_license_type(acc, data['license_type'])

    if 'exclusive' in data:
        validate_exclusivity(acc, data['exclusive'])

    if 'sublicensing_allowed' in data:
        validate_sublicensing(acc, data['sublicensing_allowed'])

    if data.get('status') is not None:
        check_status_transition(acc, RIGHTS_TRANSITIONS, ctx.record_id, data['status'], ctx.current_status)


def check_rights_dates(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    validate_dates(acc, data.get('start_date'), data.get('end_date'), ctx.now)


def check_rights_financial_terms(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    if 'royalty_rate' in data:
        validate_royalty_rate(acc, data['royalty_rate'])

    if 'advance_amount' in data:
        validate_advance_amount(acc, data['advance_amount'])

    if 'minimum_guarantee' in data:
        validate_minimum_guarantee(acc, data['minimum_guarantee'])

    if 'currency' in data:
        check_currency(acc, data['currency'], supported=PRICING_CURRENCIES)


def check_rights_update(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    """Validate only the fields present in a partial update"""
    if 'right_type' in data:
        validate_right_type(acc, data['right_type'])

    if 'territory' in data:
        if data['territory'] is None:
            acc.add_error('missing_territory', 'Territory is required', 'territory')
        else:
            check_territory(acc, data['territory'], supported=TERRITORIES)

    if 'language' in data:
        if data['language'] is None:
            acc.add_error('missing_language', 'Language is required', 'language')
        else:
            check_language(acc, data['language'], LANGUAGES)

    if 'license_type' in data:
        validate_license_type(acc, data['license_type'])

    if 'start_date' in data or 'end_date' in data:
        validate_dates(acc, data.get('start_date'), data.get('end_date'), ctx.now)

    if 'exclusive' in data:
        validate_exclusivity(acc, data['exclusive'])

    if 'sublicensing_allowed' in data:
        validate_sublicensing(acc, data['sublicensing_allowed'])

    check_rights_financial_terms(acc, data, ctx)

    if 'status' in data:
        check_status_transition(acc, RIGHTS_TRANSITIONS, ctx.record_id, data['status'], ctx.current_status)


def check_rights_conflicts(
    acc: ResultAccumulator,
    data: Mapping[str, Any],
    ctx: ValidationContext,
    checker: ConflictCheckerPort,
    log: Optional[Any] = None,
) -> None:
    """World-exclusive heuristic, then the injected conflict lookup.

    Bound to a checker with functools.partial by the rights validator. On
    update the lookup only runs when a conflict-relevant field changes.
    """
    log = log or logger

    if data.get('exclusive') is True and data.get('territory') == WORLD_TERRITORY:
        acc.add_warning(
            'world_exclusive_rights',
            'World exclusive rights may conflict with existing territorial rights',
            'territory',
        )

    if ctx.record_id is not None and not any(data.get(f) for f in CONFLICT_FIELDS):
        return

    criteria = {
        'publication_id': data.get('publication_id'),
        'right_type': data.get('right_type'),
        'territory': data.get('territory'),
        'language': data.get('language'),
        'exclusive': data.get('exclusive'),
        'id': ctx.record_id,
    }

    try:
        conflicts = checker.find_conflicts(criteria)
    except Exception as e:
        log.error(f"Rights conflict lookup failed: {e}", exc_info=True, extra={"record_id": ctx.record_id})
        acc.add_warning(
            'conflict_check_failed',
            'Could not check for conflicts with existing rights',
            'general',
        )
        return

    for conflict in conflicts or []:
        acc.add(conflict.severity, conflict.code, conflict.message, conflict.field)


def check_exclusivity_consistency(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    """The exclusive flag should agree with the license type"""
    exclusive = data.get('exclusive')
    license_type = data.get('license_type')

    if not isinstance(exclusive, bool) or license_type not in LICENSE_TYPES:
        return

    if exclusive != (license_type in EXCLUSIVE_LICENSE_TYPES):
        state = 'exclusive' if exclusive else 'non-exclusive'
        acc.add_warning(
            'exclusivity_mismatch',
            f'Grant is marked {state} but license type is "{license_type}"',
            'exclusive',
        )


# ========== Portfolio rules (territorial coverage) ==========

def require_grant_list(acc: ResultAccumulator, grants: Any, ctx: ValidationContext) -> Any:
    if not isinstance(grants, (list, tuple)):
        acc.add_error('invalid_rights_format', 'Rights data must be an array of grants', 'general')
        return HALT_PASS
    return None


def check_coverage_publication(acc: ResultAccumulator, grants: Sequence[Any], ctx: ValidationContext) -> None:
    publication_id = ctx.options.get('publication_id')
    if publication_id is None:
        acc.add_error('required_field', 'publication_id is required', 'publication_id')
        return
    check_publication_id(acc, publication_id)


def check_coverage_grants(acc: ResultAccumulator, grants: Sequence[Any], ctx: ValidationContext) -> None:
    """Territory and language of every grant in the portfolio"""
    for index, grant in enumerate(grants):
        if not isinstance(grant, Mapping):
            acc.add_error('invalid_grant_format', f'Grant at index {index} must be an object', f'rights[{index}]')
            continue

        check_territory(acc, grant.get('territory'), f'rights[{index}].territory', supported=TERRITORIES)
        check_language(acc, grant.get('language'), LANGUAGES, f'rights[{index}].language')


def check_territorial_overlaps(acc: ResultAccumulator, grants: Sequence[Any], ctx: ValidationContext) -> None:
    """Exclusive grants of the same kind must not overlap in place and time"""
    exclusive = [
        (index, grant) for index, grant in enumerate(grants)
        if isinstance(grant, Mapping) and grant.get('exclusive') is True
    ]

    for position, (i, first) in enumerate(exclusive):
        for j, second in exclusive[position + 1:]:
            if first.get('right_type') != second.get('right_type'):
                continue
            if first.get('language') != second.get('language'):
                continue
            if not _territories_intersect(first.get('territory'), second.get('territory')):
                continue
            if not _terms_overlap(first, second):
                continue

            acc.add_warning(
                'territorial_overlap',
                f"Exclusive {first.get('right_type')} rights at index {i} and {j} overlap "
                f"in {first.get('territory')}/{second.get('territory')} ({first.get('language')})",
                'territory',
            )


def check_world_coverage(acc: ResultAccumulator, grants: Sequence[Any], ctx: ValidationContext) -> None:
    if not any(isinstance(g, Mapping) and g.get('territory') == WORLD_TERRITORY for g in grants):
        acc.add_info(
            'partial_territorial_coverage',
            'No grant covers WORLD; some territories may have no rights holder',
            'territory',
        )


def _territories_intersect(first: Any, second: Any) -> bool:
    if first is None or second is None:
        return False
    return first == second or WORLD_TERRITORY in (first, second)


def _terms_overlap(first: Mapping[str, Any], second: Mapping[str, Any]) -> bool:
    """Half-open [start, end) ranges; a missing bound is open-ended"""
    first_start, first_end = parse_instant(first.get('start_date')), parse_instant(first.get('end_date'))
    second_start, second_end = parse_instant(second.get('start_date')), parse_instant(second.get('end_date'))

    if first_end is not None and second_start is not None and first_end <= second_start:
        return False
    if second_end is not None and first_start is not None and second_end <= first_start:
        return False
    return True


# ========== Field validators ==========

def validate_right_type(acc: ResultAccumulator, right_type: Any) -> None:
    if not right_type:
        acc.add_error('missing_right_type', 'Right type is required', 'right_type')
        return

    if right_type not in RIGHT_TYPES:
        acc.add_error(
            'invalid_right_type',
            f"Right type must be one of: {', '.join(RIGHT_TYPES)}",
            'right_type',
        )

    if right_type in ('translation', 'adaptation'):
        acc.add_info(
            'translation_adaptation_note',
            'Translation and adaptation rights require additional documentation',
            'right_type',
        )


def validate_license_type(acc: ResultAccumulator, license_type: Any) -> None:
    if not license_type:
        acc.add_error('missing_license_type', 'License type is required', 'license_type')
        return

    if license_type not in LICENSE_TYPES:
        acc.add_error(
            'invalid_license_type',
            f"License type must be one of: {', '.join(LICENSE_TYPES)}",
            'license_type',
        )


def validate_exclusivity(acc: ResultAccumulator, exclusive: Any) -> None:
    if not isinstance(exclusive, bool):
        acc.add_error('invalid_exclusivity_type', 'Exclusivity must be a boolean value', 'exclusive')


def validate_sublicensing(acc: ResultAccumulator, sublicensing_allowed: Any) -> None:
    if not isinstance(sublicensing_allowed, bool):
        acc.add_error(
            'invalid_sublicensing_type',
            'Sublicensing allowed must be a boolean value',
            'sublicensing_allowed',
        )


def validate_dates(acc: ResultAccumulator, start_date: Any, end_date: Any, now: datetime) -> None:
    """Start/end parseability, past start warning, range and term length"""
    start = parse_instant(start_date) if start_date else None
    end = parse_instant(end_date) if end_date else None

    if start_date:
        if start is None:
            acc.add_error('invalid_start_date', 'Start date must be a valid date', 'start_date')
        elif start < start_of_day(now):
            acc.add_warning('past_start_date', 'Start date is in the past', 'start_date')

    if end_date and end is None:
        acc.add_error('invalid_end_date', 'End date must be a valid date', 'end_date')

    if start is None or end is None:
        return

    if end <= start:
        acc.add_error('invalid_date_range', 'End date must be after start date', 'end_date')

    if end - start > MAX_TERM:
        acc.add_warning('very_long_term', 'License term is extremely long (over 99 years)', 'end_date')


def validate_royalty_rate(acc: ResultAccumulator, royalty_rate: Any) -> None:
    if royalty_rate is None:
        return  # No royalty

    if not is_finite_number(royalty_rate):
        acc.add_error('invalid_royalty_rate_type', 'Royalty rate must be a number', 'royalty_rate')
        return

    if royalty_rate < 0:
        acc.add_error('negative_royalty_rate', 'Royalty rate cannot be negative', 'royalty_rate')

    if royalty_rate > 1:
        acc.add_error(
            'invalid_royalty_rate_range',
            'Royalty rate must be between 0 and 1 (0% to 100%)',
            'royalty_rate',
        )

    if royalty_rate > HIGH_ROYALTY_RATE:
        acc.add_warning('high_royalty_rate', 'Royalty rate above 50% is unusually high', 'royalty_rate')


def validate_advance_amount(acc: ResultAccumulator, advance_amount: Any) -> None:
    if advance_amount is None:
        return  # No advance

    if not is_finite_number(advance_amount):
        acc.add_error('invalid_advance_amount_type', 'Advance amount must be a number', 'advance_amount')
        return

    if advance_amount < 0:
        acc.add_error('negative_advance_amount', 'Advance amount cannot be negative', 'advance_amount')

    if advance_amount > HIGH_ADVANCE_AMOUNT:
        acc.add_warning(
            'very_high_advance',
            'Advance amount is very high (over $10M equivalent)',
            'advance_amount',
        )


def validate_minimum_guarantee(acc: ResultAccumulator, minimum_guarantee: Any) -> None:
    if minimum_guarantee is None:
        return

    if not is_finite_number(minimum_guarantee):
        acc.add_error(
            'invalid_minimum_guarantee_type',
            'Minimum guarantee must be a number',
            'minimum_guarantee',
        )
        return

    if minimum_guarantee < 0:
        acc.add_error('negative_minimum_guarantee', 'Minimum guarantee cannot be negative', 'minimum_guarantee')
