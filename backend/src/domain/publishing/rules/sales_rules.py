"""Sales transaction validation rules.

Covers single sales records, sales report parameters and the batch import
checks that look across records.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Mapping, Sequence

from domain.validation.accumulator import ResultAccumulator
from domain.validation.dates import parse_instant
from domain.validation.engine import HALT_PASS
from domain.validation.identifiers import SALES_CURRENCIES, check_currency, check_publication_id
from domain.validation.models import ValidationContext, ValidationResult
from domain.validation.primitives import is_finite_number, is_integer
from domain.validation.transitions import SALES_TRANSITIONS, check_status_transition

from .common import check_required_fields


STORES = (
    'amazon', 'apple', 'google', 'kobo', 'barnes-noble',
    'smashwords', 'draft2digital', 'kindle-unlimited',
    'audible', 'spotify', 'libro-fm', 'chirp-books',
)

SALE_TYPES = ('sale', 'return', 'adjustment', 'refund')
UNITS = ('units', 'pages_read', 'minutes_listened')
SALES_STATUSES = tuple(SALES_TRANSITIONS.keys())
GROUP_BY_FIELDS = ('store', 'date', 'publication', 'currency')

REQUIRED_FIELDS = ('publication_id', 'store', 'sale_date', 'quantity', 'unit_price', 'currency')

EARLIEST_SALE_DATE = datetime(2000, 1, 1, tzinfo=timezone.utc)
HIGH_UNIT_PRICE = 10_000
LOW_UNIT_PRICE = 0.01
HIGH_QUANTITY = 1_000_000
MIN_SALE_AMOUNT = 0.01
MAX_REPORT_RANGE = timedelta(days=365 * 2)

# Revenue fields that must be non-negative numbers when present
REVENUE_FIELDS = ('gross_revenue', 'net_revenue', 'royalty_amount')

RecordCheck = Callable[[Any], ValidationResult]


# ========== Record rule groups ==========

def check_sales_required(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    check_required_fields(acc, data, REQUIRED_FIELDS)

    if data.get('publication_id'):
        check_publication_id(acc, data['publication_id'])


def check_sales_store(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    if data.get('store') is not None:
        validate_store(acc, data['store'])


def check_sales_financials(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    """Unit price and revenue fields, then the revenue waterfall"""
    if data.get('unit_price') is not None:
        validate_unit_price(acc, data['unit_price'])

    for field in REVENUE_FIELDS:
        if field in data:
            validate_revenue_field(acc, data[field], field)

    check_revenue_consistency(acc, data)


def check_sales_quantity(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    if data.get('quantity') is not None:
        validate_quantity(acc, data['quantity'])

    if 'unit' in data:
        validate_unit(acc, data['unit'])

    if 'sale_type' in data:
        validate_sale_type(acc, data['sale_type'])


def check_sales_date(
    acc: ResultAccumulator,
    data: Mapping[str, Any],
    ctx: ValidationContext,
    stale_after_days: int = 30,
) -> None:
    if data.get('sale_date') is not None:
        validate_sale_date(acc, data['sale_date'], ctx.now, stale_after_days)


def check_sales_currency(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    if data.get('currency') is not None:
        validate_currency(acc, data['currency'])


def check_sales_business_rules(acc: ResultAccumulator, data: Mapping[str, Any], ctx: ValidationContext) -> None:
    unit_price = data.get('unit_price')
    quantity = data.get('quantity')

    if is_finite_number(unit_price) and is_finite_number(quantity) and unit_price > 0 and quantity > 0:
        if unit_price * quantity < MIN_SALE_AMOUNT:
            acc.add_warning('very_small_sale', 'Sale amount is very small (less than $0.01)', 'amount')

    if data.get('status') is not None:
        check_status_transition(acc, SALES_TRANSITIONS, ctx.record_id, data['status'], ctx.current_status)


def check_sales_update(
    acc: ResultAccumulator,
    data: Mapping[str, Any],
    ctx: ValidationContext,
    stale_after_days: int = 30,
) -> None:
    """Validate only the fields present in a partial update"""
    if 'store' in data:
        validate_store(acc, data['store'])

    if 'sale_date' in data:
        validate_sale_date(acc, data['sale_date'], ctx.now, stale_after_days)

    if 'quantity' in data:
        validate_quantity(acc, data['quantity'])

    if 'unit_price' in data:
        validate_unit_price(acc, data['unit_price'])

    for field in REVENUE_FIELDS:
        if field in data:
            validate_revenue_field(acc, data[field], field)

    if 'currency' in data:
        validate_currency(acc, data['currency'])

    if 'unit' in data:
        validate_unit(acc, data['unit'])

    if 'sale_type' in data:
        validate_sale_type(acc, data['sale_type'])

    if 'status' in data:
        check_status_transition(acc, SALES_TRANSITIONS, ctx.record_id, data['status'], ctx.current_status)

    if 'gross_revenue' in data or 'net_revenue' in data or 'royalty_amount' in data:
        check_revenue_consistency(acc, data)


# ========== Report parameters ==========

def check_report_dates(acc: ResultAccumulator, params: Mapping[str, Any], ctx: ValidationContext) -> None:
    start_date = params.get('start_date')
    end_date = params.get('end_date')
    start = parse_instant(start_date) if start_date else None
    end = parse_instant(end_date) if end_date else None

    if start_date and start is None:
        acc.add_error('invalid_start_date', 'Start date must be a valid date', 'start_date')

    if end_date and end is None:
        acc.add_error('invalid_end_date', 'End date must be a valid date', 'end_date')

    if start is None or end is None:
        return

    if end <= start:
        acc.add_error('invalid_date_range', 'End date must be after start date', 'end_date')

    if end - start > MAX_REPORT_RANGE:
        acc.add_warning('large_date_range', 'Date range spans more than 2 years', 'date_range')


def check_report_stores(acc: ResultAccumulator, params: Mapping[str, Any], ctx: ValidationContext) -> None:
    stores = params.get('stores')
    if not stores:
        return

    if not isinstance(stores, (list, tuple)):
        acc.add_error('invalid_stores_format', 'Stores must be an array', 'stores')
        return

    for store in stores:
        validate_store(acc, store, field='stores')

    names = [s.lower() for s in stores if isinstance(s, str)]
    if len(set(names)) != len(names):
        acc.add_warning('duplicate_stores', 'Duplicate stores detected', 'stores')


def check_report_currency(acc: ResultAccumulator, params: Mapping[str, Any], ctx: ValidationContext) -> None:
    if params.get('currency'):
        validate_currency(acc, params['currency'])


def check_report_grouping(acc: ResultAccumulator, params: Mapping[str, Any], ctx: ValidationContext) -> None:
    group_by = params.get('group_by')
    if group_by is None:
        return

    if not isinstance(group_by, (list, tuple)):
        acc.add_error('invalid_group_by', 'Group by must be an array of field names', 'group_by')
        return

    for field in group_by:
        if field not in GROUP_BY_FIELDS:
            acc.add_error('invalid_group_by', f'Group by field "{field}" is not valid', 'group_by')


# ========== Batch import ==========

def check_batch_shape(
    acc: ResultAccumulator,
    records: Any,
    ctx: ValidationContext,
    max_records: int = 10_000,
) -> Any:
    """Reject malformed batches before any per-record work"""
    if not isinstance(records, (list, tuple)):
        acc.add_error('invalid_batch_format', 'Batch sales data must be an array', 'batch')
        return HALT_PASS

    if len(records) == 0:
        acc.add_error('empty_batch', 'Batch sales data cannot be empty', 'batch')
        return HALT_PASS

    if len(records) > max_records:
        acc.add_error('batch_too_large', f'Batch size cannot exceed {max_records:,} records', 'batch')
        return HALT_PASS

    return None


def check_batch_records(
    acc: ResultAccumulator,
    records: Sequence[Any],
    ctx: ValidationContext,
    validate_record: RecordCheck,
    record_results: Dict[int, ValidationResult],
) -> None:
    """Run every record through the creation path on its own accumulator.

    Each invalid record is summarised as one batch_record_invalid error;
    the full per-record result is kept in record_results.
    """
    for index, record in enumerate(records):
        result = validate_record(record)

        if result.errors or result.warnings or result.info:
            record_results[index] = result

        if not result.is_valid:
            messages = ', '.join(e.message for e in result.errors)
            acc.add_error('batch_record_invalid', f'Record at index {index} is invalid: {messages}', 'batch')


def check_batch_consistency(acc: ResultAccumulator, records: Sequence[Any], ctx: ValidationContext) -> None:
    """Duplicate sales and mixed currencies across the batch"""
    seen = set()
    duplicates = []
    currencies = []

    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            continue

        key = (str(record.get('publication_id')), str(record.get('store')), str(record.get('sale_date')))
        if key in seen:
            duplicates.append(index)
        else:
            seen.add(key)

        currency = record.get('currency')
        if currency is not None and currency not in currencies:
            currencies.append(currency)

    if duplicates:
        acc.add_warning(
            'duplicate_sales_in_batch',
            f"Potential duplicate sales at indices: {', '.join(str(i) for i in duplicates)}",
            'batch',
        )

    if len(currencies) > 1:
        acc.add_info(
            'multiple_currencies_in_batch',
            f"Batch contains multiple currencies: {', '.join(str(c) for c in currencies)}",
            'batch',
        )


# ========== Field validators ==========

def validate_store(acc: ResultAccumulator, store: Any, field: str = 'store') -> None:
    if store is None or store == '':
        acc.add_error('missing_store', 'Store is required', field)
        return

    if not isinstance(store, str):
        acc.add_error('invalid_store_format', 'Store must be a string', field)
        return

    if store.lower() not in STORES:
        acc.add_error('invalid_store', f"Store must be one of: {', '.join(STORES)}", field)


def validate_sale_date(
    acc: ResultAccumulator,
    sale_date: Any,
    now: datetime,
    stale_after_days: int = 30,
) -> None:
    if not sale_date:
        acc.add_error('missing_sale_date', 'Sale date is required', 'sale_date')
        return

    moment = parse_instant(sale_date)
    if moment is None:
        acc.add_error('invalid_sale_date', 'Sale date must be a valid date', 'sale_date')
        return

    if moment > now:
        acc.add_error('future_sale_date', 'Sale date cannot be in the future', 'sale_date')

    if moment < EARLIEST_SALE_DATE:
        acc.add_error('very_old_sale_date', 'Sale date seems unreasonably old', 'sale_date')

    if moment < now - timedelta(days=stale_after_days):
        acc.add_warning('old_sale_date', f'Sale date is more than {stale_after_days} days old', 'sale_date')


def validate_unit_price(acc: ResultAccumulator, unit_price: Any) -> None:
    if unit_price is None:
        acc.add_error('missing_unit_price', 'Unit price is required', 'unit_price')
        return

    if not is_finite_number(unit_price):
        acc.add_error('invalid_unit_price_type', 'Unit price must be a number', 'unit_price')
        return

    if unit_price < 0:
        acc.add_error('negative_unit_price', 'Unit price cannot be negative', 'unit_price')

    if unit_price > HIGH_UNIT_PRICE:
        acc.add_warning('very_high_unit_price', 'Unit price is unusually high (over $10,000)', 'unit_price')

    if 0 < unit_price < LOW_UNIT_PRICE:
        acc.add_warning('very_low_unit_price', 'Unit price is very low (less than $0.01)', 'unit_price')


def validate_revenue_field(acc: ResultAccumulator, value: Any, field: str) -> None:
    """gross_revenue, net_revenue and royalty_amount share one rule"""
    if value is None:
        return

    label = field.replace('_', ' ').capitalize()

    if not is_finite_number(value):
        acc.add_error(f'invalid_{field}_type', f'{label} must be a number', field)
        return

    if value < 0:
        acc.add_error(f'negative_{field}', f'{label} cannot be negative', field)


def check_revenue_consistency(acc: ResultAccumulator, data: Mapping[str, Any]) -> None:
    """gross >= net >= royalty; equality is allowed"""
    gross = data.get('gross_revenue')
    net = data.get('net_revenue')
    royalty = data.get('royalty_amount')

    if is_finite_number(gross) and is_finite_number(net) and net > gross:
        acc.add_error(
            'net_greater_than_gross',
            'Net revenue cannot be greater than gross revenue',
            'net_revenue',
        )

    if is_finite_number(net) and is_finite_number(royalty) and royalty > net:
        acc.add_error(
            'royalty_greater_than_net',
            'Royalty amount cannot be greater than net revenue',
            'royalty_amount',
        )


def validate_quantity(acc: ResultAccumulator, quantity: Any) -> None:
    if quantity is None:
        acc.add_error('missing_quantity', 'Quantity is required', 'quantity')
        return

    if not is_finite_number(quantity):
        acc.add_error('invalid_quantity_type', 'Quantity must be a number', 'quantity')
        return

    if quantity < 0:
        acc.add_error('negative_quantity', 'Quantity cannot be negative', 'quantity')

    if quantity > 0 and not is_integer(quantity):
        acc.add_warning(
            'fractional_quantity',
            'Fractional quantities may indicate special pricing models',
            'quantity',
        )

    if quantity > HIGH_QUANTITY:
        acc.add_warning('very_high_quantity', 'Quantity is unusually high (over 1 million)', 'quantity')


def validate_unit(acc: ResultAccumulator, unit: Any) -> None:
    if not unit:
        return  # Unit is optional

    if unit not in UNITS:
        acc.add_error('invalid_unit', f"Unit must be one of: {', '.join(UNITS)}", 'unit')


def validate_sale_type(acc: ResultAccumulator, sale_type: Any) -> None:
    if not sale_type:
        return  # Defaults to 'sale'

    if sale_type not in SALE_TYPES:
        acc.add_error(
            'invalid_sale_type',
            f"Sale type must be one of: {', '.join(SALE_TYPES)}",
            'sale_type',
        )


def validate_currency(acc: ResultAccumulator, currency: Any) -> None:
    if not currency:
        acc.add_error('missing_currency', 'Currency is required', 'currency')
        return

    check_currency(acc, currency, supported=SALES_CURRENCIES)
