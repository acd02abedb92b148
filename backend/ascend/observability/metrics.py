"""Lightweight metrics helpers."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Dict, Iterator, Optional

from ascend.observability.tracing import trace

logger = logging.getLogger(__name__)


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record a metric as a short-lived Opik trace; no-op when Opik is disabled."""
    payload: Dict[str, Any] = {"value": value}
    if metadata:
        payload.update(metadata)
    logger.debug("metric %s=%s", name, value)
    with trace(f"metric:{name}", metadata=payload):
        pass


@contextmanager
def timed(name: str, metadata: Optional[Dict[str, Any]] = None) -> Iterator[Dict[str, Any]]:
    """
    Measure the wrapped block and emit `<name>.latency_ms`.

    The yielded dict can be filled with extra metadata before the block exits.
    """
    extra: Dict[str, Any] = dict(metadata or {})
    start = perf_counter()
    try:
        yield extra
    finally:
        latency_ms = (perf_counter() - start) * 1000
        log_metric(f"{name}.latency_ms", round(latency_ms, 2), metadata=extra)
