#!/usr/bin/env python3
"""
decorators.py
--------------------
Decorators shared by the record managers and stores.

log_database_operation() logs which records an operation touched: the
app_id / user_id / record_id it was called with, and the record id or
number of records it returned. handle_db_errors() turns SQLAlchemy
failures into StoreError, telling a locked database apart from other
failures.
"""
import inspect
import time
from functools import wraps
from typing import Any, Callable, Dict

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from mindnote.core.exceptions import StoreError
from mindnote.core.logging_manager import safe_logger

SCOPE_ARGUMENTS = ("app_id", "user_id", "record_id")


def is_lock_error(error: OperationalError) -> bool:
    """True for SQLite 'database is locked' / 'busy' failures."""
    message = str(error).lower()
    return "locked" in message or "busy" in message


def _record_scope(signature: inspect.Signature, instance: Any, args, kwargs) -> Dict[str, Any]:
    """app_id, user_id and record_id of a call, from its arguments or its rows."""
    try:
        arguments = signature.bind_partial(instance, *args, **kwargs).arguments
    except TypeError:
        return {}

    scope = {name: arguments[name] for name in SCOPE_ARGUMENTS if name in arguments}
    # Stores carry their app namespace; managers receive it per call
    for owner in (instance, arguments.get("store")):
        if "app_id" not in scope and isinstance(getattr(owner, "app_id", None), str):
            scope["app_id"] = owner.app_id
    row = arguments.get("row")
    if row is not None:
        scope.setdefault("app_id", row.app_id)
        scope.setdefault("user_id", row.user_id)
        scope.setdefault("record_id", row.id)
    return scope


def _outcome(result: Any) -> Dict[str, Any]:
    if isinstance(result, list):
        return {"records": len(result)}
    # Backup results
    for counter in ("records_exported", "imported"):
        if isinstance(getattr(result, counter, None), int):
            return {"records": getattr(result, counter)}
    record_id = getattr(result, "id", None)
    return {"record_id": record_id} if record_id is not None else {}


def log_database_operation(operation_name: str):
    """
    Decorator logging a record operation with its scope and duration.

    The decorated method's instance must expose a ``logger`` attribute
    (a MindNoteLogger or None).

    Args:
        operation_name: Name of the operation, e.g. 'store_create'

    Returns:
        Decorator function
    """

    def decorator(function: Callable) -> Callable:
        signature = inspect.signature(function)

        @wraps(function)
        def wrapper(self, *args, **kwargs):
            logger = safe_logger(getattr(self, "logger", None))
            scope = _record_scope(signature, self, args, kwargs)
            started = time.perf_counter()
            logger.log_debug(f"{operation_name} started", scope)

            try:
                result = function(self, *args, **kwargs)
            except Exception as e:
                logger.log_error(
                    e,
                    {
                        "operation": operation_name,
                        **scope,
                        "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                    },
                )
                raise

            logger.log_operation(
                operation_name,
                {
                    **scope,
                    **_outcome(result),
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            return result

        return wrapper

    return decorator


def handle_db_errors(function: Callable) -> Callable:
    """
    Decorator converting SQLAlchemy errors into StoreError.

    Errors raised by the domain (validation, not-found) pass through
    unchanged.

    Args:
        function: Function to wrap

    Returns:
        Wrapped function with error handling
    """

    @wraps(function)
    def wrapper(*args, **kwargs):
        try:
            return function(*args, **kwargs)
        except IntegrityError as e:
            raise StoreError(f"Record rejected by the database: {e.orig}") from e
        except OperationalError as e:
            if is_lock_error(e):
                raise StoreError(f"Record store is locked: {e.orig}") from e
            raise StoreError(f"Record store unavailable: {e.orig}") from e
        except SQLAlchemyError as e:
            raise StoreError(f"Record store operation failed: {e}") from e

    return wrapper
