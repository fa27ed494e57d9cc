"""Utility decorators for provider calls."""
import asyncio
import functools
import time
from typing import Callable

from loanfx.utils.logging import get_logger

logger = get_logger(__name__)


def log_execution(log_args: bool = True, log_result: bool = False):
    """
    Decorator to log function execution with timing.

    Works for both coroutines and plain functions.

    Args:
        log_args: Whether to log function arguments
        log_result: Whether to log function result
    """
    def decorator(func: Callable):
        def _started(args, kwargs):
            extra = {"function": func.__name__}
            if log_args:
                extra["function_args"] = str(args)[:100]
                extra["function_kwargs"] = str(kwargs)[:100]
            logger.debug(f"Starting {func.__name__}", extra=extra)
            return time.perf_counter()

        def _completed(start, result):
            elapsed = round((time.perf_counter() - start) * 1000, 2)
            extra = {"function": func.__name__, "execution_time_ms": elapsed}
            if log_result:
                extra["result"] = str(result)[:100]
            logger.debug(f"Completed {func.__name__}", extra=extra)

        def _failed(start, exc):
            elapsed = round((time.perf_counter() - start) * 1000, 2)
            logger.error(
                f"Failed {func.__name__}",
                extra={"function": func.__name__, "execution_time_ms": elapsed, "error": str(exc)}
            )

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start = _started(args, kwargs)
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _failed(start, e)
                raise
            _completed(start, result)
            return result

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            start = _started(args, kwargs)
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _failed(start, e)
                raise
            _completed(start, result)
            return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
