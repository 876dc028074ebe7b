"""Helpers for callers driving one or many nodes: retry and fan-out.

The client core never retries; wrap calls with :func:`with_retry` where a
retry is wanted. :func:`run_on_nodes` runs one coroutine per node concurrently
and collects a :class:`NodeResult` for each.
"""
import asyncio
import logging
from functools import wraps
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from ..errors import EapiConnectionError

logger = logging.getLogger(__name__)

T = TypeVar("T")


# CommandError, ConfigError and friends are never worth retrying
RETRYABLE_EXCEPTIONS = (
    EapiConnectionError,
    ConnectionResetError,
    TimeoutError,
)


def with_retry(
    max_attempts: int = 3,
    min_wait: float = 1,
    max_wait: float = 10,
    exceptions: tuple = RETRYABLE_EXCEPTIONS,
) -> Callable:
    """Decorator factory for coroutine retry with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts
        min_wait: Minimum wait time between retries (seconds)
        max_wait: Maximum wait time between retries (seconds)
        exceptions: Tuple of exception types to retry on

    Usage:
        @with_retry(max_attempts=5)
        async def version(node):
            return await node.enable(["show version"])
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @retry(
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
            retry=retry_if_exception_type(exceptions),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await func(*args, **kwargs)

        return wrapper

    return decorator


class NodeResult:
    """Outcome of running a coroutine against one node."""

    def __init__(
        self,
        name: str,
        success: bool,
        value: Any = None,
        error: Optional[BaseException] = None,
    ):
        self.name = name
        self.success = success
        self.value = value
        self.error = error

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "success": self.success,
            "value": self.value,
            "error": str(self.error) if self.error else "",
        }

    def __repr__(self) -> str:
        status = "OK" if self.success else "FAILED"
        return f"NodeResult({status}, node={self.name})"


async def run_on_nodes(
    nodes: Iterable[Any],
    func: Callable[[Any], Awaitable[Any]],
) -> list[NodeResult]:
    """Run ``func(node)`` for every node in parallel.

    Failures are captured per node so one unreachable switch does not abort
    the others. Results come back in the order of ``nodes``.
    """
    nodes = list(nodes)

    async def run_on_node(node: Any) -> NodeResult:
        name = getattr(node, "name", None) or getattr(node.connection, "host", "?")
        try:
            value = await func(node)
            return NodeResult(name, True, value=value)
        except Exception as e:
            logger.warning(f"{name}: {type(e).__name__}: {e}")
            return NodeResult(name, False, error=e)

    return list(await asyncio.gather(*(run_on_node(node) for node in nodes)))
