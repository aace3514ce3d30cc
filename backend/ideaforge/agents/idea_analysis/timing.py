"""
Timing Utilities for Latency Instrumentation

Logs execution times of the snapshot graph and its fetch nodes.
"""

import functools
import time
from contextlib import asynccontextmanager
from typing import Any, Callable, Optional


def log_timing(node_name: str, action: str, duration_ms: Optional[float] = None):
    """Log a timing event in standard format."""
    if duration_ms is not None:
        print(f"[TIMING] {node_name}: {action} (duration={duration_ms:.0f}ms)")
    else:
        print(f"[TIMING] {node_name}: {action}")


@asynccontextmanager
async def async_timer(node_name: str, action: str = "OPERATION"):
    """Async context manager for timing operations."""
    log_timing(node_name, f"{action} START")
    start = time.perf_counter()
    try:
        yield
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        log_timing(node_name, f"{action} END", duration_ms)


def timed_async(node_name: str):
    """Decorator for timing async graph nodes."""
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            async with async_timer(node_name, "NODE"):
                return await func(*args, **kwargs)
        return wrapper
    return decorator
