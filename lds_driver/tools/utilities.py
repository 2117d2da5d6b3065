#!/usr/bin/env python3



from typing import Callable
import inspect
import functools
import logging


def log_exceptions(func: Callable) -> Callable:
    """
    Decorator that logs exceptions with full traceback and re-raises them.

    Works on plain functions and on coroutine functions.

    Example:
    >>> from lds_driver.tools import log_exceptions
    >>>
    >>> class Driver:
    ...
    ...     @log_exceptions
    ...     def read(self):
    ...         ...
    """
    # Get logger - uses the module where the function is defined
    logger = logging.getLogger(func.__module__)

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Exception in {func.__name__}: {e}", exc_info=True)
                raise
        return async_wrapper

    @functools.wraps(func)  # Preserves function metadata
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.error(
                f"Exception in {func.__name__}: {e}",
                exc_info=True  # This adds the full traceback
            )
            raise  # Re-raise the exception

    return wrapper


def hexdump(data: bytes, limit: int = 8) -> str:
    """Short hex rendering of the first `limit` bytes, for debug logs."""
    head = " ".join(f"{b:02X}" for b in data[:limit])
    return head + (" ..." if len(data) > limit else "")
