"""Purchase guard decorators.
"""

from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

from lcpconsole.common.exceptions import ValidationError
from lcpconsole.common.models import Purchase


def _find_purchase(args: tuple, kwargs: dict) -> Purchase | None:
    for value in (*args, *kwargs.values()):
        if isinstance(value, Purchase):
            return value
    return None


def requires_issued_license(
    error_message: str = "No license has been issued for this purchase",
) -> Callable:
    """Decorator that ensures the purchase passed to a function carries a license.

    Args:
        error_message: Message to show when the purchase has no license id

    Returns:
        Decorated function that only executes for purchases with a license
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            purchase = _find_purchase(args, kwargs)
            if purchase is None:
                msg = f"{func.__name__} needs a purchase argument"
                raise TypeError(msg)

            if not purchase.has_license:
                raise ValidationError(error_message)
            return func(*args, **kwargs)

        return wrapper

    return decorator


def requires_loan(
    error_message: str = "License cannot be renewed (it was bought)",
) -> Callable:
    """Decorator that rejects purchases which are not loans."""

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            purchase = _find_purchase(args, kwargs)
            if purchase is not None and not purchase.is_loan:
                raise ValidationError(error_message)
            return func(*args, **kwargs)

        return wrapper

    return decorator
