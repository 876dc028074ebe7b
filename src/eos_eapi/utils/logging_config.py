"""Logging configuration for the eAPI client.

The library only creates loggers; applications decide where records go by
calling :func:`setup_logging` once at startup.

Provides:
- Console output plus a rotating log file
- A separate performance log fed by the timing helpers
- Per-operation timing statistics (``global_stats``)

Environment Variables:
    EAPI_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    EAPI_LOG_FILE: Path to log file (default: ~/.eos-eapi/eapi.log)
    EAPI_LOG_MAX_SIZE: Max log file size in MB (default: 10)
    EAPI_LOG_BACKUPS: Number of backup files to keep (default: 5)

Usage:
    from eos_eapi.utils.logging_config import setup_logging, timed

    setup_logging()

    @timed("execute")
    async def execute(self, commands):
        ...

    async with timed_section("handle_call", host="leaf1", commands=3):
        ...
"""
import functools
import logging
import os
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Callable, Any

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("eos_eapi.perf")
main_logger = logging.getLogger("eos_eapi")


def get_log_level() -> int:
    """Get log level from environment."""
    level_str = os.environ.get("EAPI_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def get_log_file() -> Path:
    """Get log file path from environment."""
    default_path = Path.home() / ".eos-eapi" / "eapi.log"
    path_str = os.environ.get("EAPI_LOG_FILE", str(default_path))
    return Path(path_str)


def setup_logging() -> None:
    """Configure logging for an application using the client.

    Sets up:
    - Console handler (respects EAPI_LOG_LEVEL)
    - File handler with rotation (DEBUG level)
    - Performance log next to the main log file

    Calling it again is a no-op.
    """
    if getattr(main_logger, "_eapi_configured", False):
        return

    log_level = get_log_level()
    log_file = get_log_file()
    max_size_mb = int(os.environ.get("EAPI_LOG_MAX_SIZE", "10"))
    backup_count = int(os.environ.get("EAPI_LOG_BACKUPS", "5"))

    log_file.parent.mkdir(parents=True, exist_ok=True)

    main_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(name)-25s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    perf_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | PERF | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(main_format)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(main_format)

    perf_log_file = log_file.parent / "eapi-perf.log"
    perf_handler = RotatingFileHandler(
        perf_log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8"
    )
    perf_handler.setLevel(logging.DEBUG)
    perf_handler.setFormatter(perf_format)

    main_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    main_logger.addHandler(console_handler)
    main_logger.addHandler(file_handler)

    # perf records stay out of the main log file
    perf_logger.setLevel(logging.DEBUG)
    perf_logger.propagate = False
    perf_logger.addHandler(perf_handler)
    perf_logger.addHandler(console_handler)

    main_logger._eapi_configured = True  # type: ignore[attr-defined]
    main_logger.info(f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file}")
    perf_logger.info(f"Performance logging to: {perf_log_file}")


def _log_timing(operation: str, host: Optional[str], elapsed: float,
                error: Optional[BaseException] = None, extra_str: str = "") -> None:
    global_stats.record(operation, elapsed)
    if error is None:
        msg = f"{operation:20s} | {host or 'N/A':15s} | {elapsed:8.2f}ms | OK"
    else:
        msg = f"{operation:20s} | {host or 'N/A':15s} | {elapsed:8.2f}ms | FAIL: {error}"
    if extra_str:
        msg += f" | {extra_str}"
    if error is None:
        perf_logger.debug(msg)
    else:
        perf_logger.warning(msg)


def timed(operation: str, host: Optional[str] = None):
    """Decorator to log execution time of a coroutine.

    Args:
        operation: Name of the operation (e.g., "execute", "handle_call")
        host: Optional target host (inferred from ``self.host`` if omitted)
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            target = host
            if target is None and args and hasattr(args[0], "host"):
                target = args[0].host

            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _log_timing(operation, target, (time.perf_counter() - start) * 1000, e)
                raise
            _log_timing(operation, target, (time.perf_counter() - start) * 1000)
            return result

        return wrapper

    return decorator


@asynccontextmanager
async def timed_section(operation: str, host: Optional[str] = None, **extra):
    """Async context manager for timing code sections.

    Args:
        operation: Name of the operation
        host: Target host
        **extra: Additional context to log

    Usage:
        async with timed_section("handle_call", host="leaf1", commands=2):
            await handle.call()
    """
    start = time.perf_counter()
    extra_str = " | ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""

    try:
        yield
    except Exception as e:
        _log_timing(operation, host, (time.perf_counter() - start) * 1000, e, extra_str)
        raise
    _log_timing(operation, host, (time.perf_counter() - start) * 1000, None, extra_str)


@dataclass
class OperationTiming:
    count: int = 0
    total: float = 0.0
    min: float = float("inf")
    max: float = 0.0

    @property
    def avg(self) -> float:
        return self.total / self.count if self.count else 0.0

    def add(self, duration_ms: float) -> None:
        self.count += 1
        self.total += duration_ms
        self.min = min(self.min, duration_ms)
        self.max = max(self.max, duration_ms)


class PerfStats:
    """Per-operation timing aggregates.

    Only count, total, min and max are kept, so memory does not grow with
    the number of recorded calls.

    Usage:
        stats = PerfStats()
        stats.record("execute", 150.5)
        stats.record("execute", 145.2)
        print(stats.summary())
    """

    def __init__(self):
        self._data: dict[str, OperationTiming] = {}

    def record(self, operation: str, duration_ms: float) -> None:
        """Record a timing measurement."""
        timing = self._data.get(operation)
        if timing is None:
            timing = self._data[operation] = OperationTiming()
        timing.add(duration_ms)

    def get(self, operation: str) -> Optional[OperationTiming]:
        return self._data.get(operation)

    def count(self, operation: str) -> int:
        timing = self._data.get(operation)
        return timing.count if timing else 0

    def summary(self) -> str:
        """Generate summary statistics."""
        lines = ["Performance Summary", "=" * 60]

        for op, timing in sorted(self._data.items()):
            lines.append(
                f"{op:20s} | count={timing.count:4d} | "
                f"avg={timing.avg:8.2f}ms | min={timing.min:8.2f}ms | max={timing.max:8.2f}ms"
            )

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all recorded data."""
        self._data.clear()


# Global stats instance for convenience
global_stats = PerfStats()
