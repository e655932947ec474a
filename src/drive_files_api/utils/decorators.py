"""Timing decorators and logging setup shared by the API and the CLI."""
import functools
import inspect
import logging
import time
from typing import Any, Callable, Optional, TypeVar, cast

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def _report_duration(operation: str, started: float, error: Optional[BaseException] = None) -> None:
    elapsed = time.monotonic() - started
    if error is None:
        logger.info(f"{operation} completed in {elapsed:.2f}s")
    else:
        logger.error(f"{operation} failed after {elapsed:.2f}s: {error!r}")


def log_execution_time(func: F) -> F:
    """Log how long a provider call takes, and whether it raised."""
    operation = func.__qualname__

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        started = time.monotonic()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _report_duration(operation, started, e)
            raise
        _report_duration(operation, started)
        return result

    return cast(F, wrapper)


def async_log_execution_time(func: F) -> F:
    """Coroutine counterpart of `log_execution_time`, used around upload submissions."""
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"{func.__qualname__} is not a coroutine function")
    operation = func.__qualname__

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        started = time.monotonic()
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            _report_duration(operation, started, e)
            raise
        _report_duration(operation, started)
        return result

    return cast(F, wrapper)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    root.setLevel(level)
