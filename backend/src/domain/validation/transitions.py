"""Status vocabularies and transition rules for publishing records.

Membership in the status vocabulary is always enforced. The transition
table is only consulted when the caller knows the record's current status
and passes it as options["current_status"].
"""

import logging
from typing import Any, Dict, List, Optional

from .accumulator import ResultAccumulator

logger = logging.getLogger(__name__)


CHAPTER_TRANSITIONS: Dict[str, List[str]] = {
    'draft': ['review', 'archived'],
    'review': ['draft', 'approved', 'archived'],
    'approved': ['review', 'published', 'archived'],
    'published': ['archived'],
    'archived': ['draft'],
}

PUBLICATION_TRANSITIONS: Dict[str, List[str]] = {
    'draft': ['review', 'archived'],
    'review': ['draft', 'approved', 'archived'],
    'approved': ['review', 'published', 'archived'],
    'published': ['suspended', 'archived'],
    'suspended': ['published', 'archived'],
    'archived': ['draft'],
}

RIGHTS_TRANSITIONS: Dict[str, List[str]] = {
    'pending': ['active', 'revoked'],
    'active': ['expired', 'revoked', 'suspended'],
    'suspended': ['active', 'revoked', 'expired'],
    'expired': [],     # Terminal
    'revoked': [],     # Terminal
}

SALES_TRANSITIONS: Dict[str, List[str]] = {
    'pending': ['confirmed', 'disputed', 'cancelled'],
    'confirmed': ['disputed', 'cancelled'],
    'disputed': ['confirmed', 'cancelled'],
    'cancelled': [],   # Terminal
}


def can_transition(transitions: Dict[str, List[str]], from_status: Optional[str], to_status: str) -> bool:
    """Check if a status transition is allowed

    Example:
        >>> can_transition(CHAPTER_TRANSITIONS, 'draft', 'review')
        True
        >>> can_transition(CHAPTER_TRANSITIONS, 'published', 'draft')
        False
    """
    if from_status is None:
        return True
    if from_status == to_status:
        return True
    return to_status in transitions.get(from_status, [])


def check_status_transition(
    acc: ResultAccumulator,
    transitions: Dict[str, List[str]],
    record_id: Any,
    new_status: Any,
    current_status: Optional[str] = None,
    field: str = 'status',
) -> bool:
    """Validate a requested status and, when known, the move to it"""
    valid_statuses = list(transitions.keys())

    if new_status not in valid_statuses:
        acc.add_error('invalid_status', f"Status must be one of: {', '.join(valid_statuses)}", field)
        return False

    if current_status is None:
        logger.debug(f"No current status for {record_id}, transition check skipped")
        return True

    if current_status not in valid_statuses:
        acc.add_warning(
            'unknown_current_status',
            f"Current status '{current_status}' is not recognised, transition not checked",
            field,
        )
        return True

    if not can_transition(transitions, current_status, new_status):
        allowed = transitions.get(current_status, [])
        acc.add_error(
            'invalid_status_transition',
            f"Cannot change status from '{current_status}' to '{new_status}' "
            f"(allowed: {', '.join(allowed) or 'none'})",
            field,
        )
        return False

    return True
