"""Validation run id management for log correlation.

Every top-level validation pass gets a run id stored in a context variable,
so all log records emitted while it runs (including nested per-record
passes of a batch) can be correlated.
"""

import uuid
from contextvars import ContextVar, Token
from typing import Optional

# Context variable for the current validation run (async-safe)
validation_run_id_var: ContextVar[Optional[str]] = ContextVar("validation_run_id", default=None)


def new_run_id() -> str:
    """Generate a new unique run id (UUID v4)"""
    return str(uuid.uuid4())


def get_run_id() -> Optional[str]:
    """Current run id, or None outside a validation pass"""
    return validation_run_id_var.get()


def set_run_id(run_id: str) -> Token:
    """Set the run id for the current context.

    Returns:
        Token to pass to reset_run_id() when the pass ends
    """
    return validation_run_id_var.set(run_id)


def reset_run_id(token: Token) -> None:
    validation_run_id_var.reset(token)
