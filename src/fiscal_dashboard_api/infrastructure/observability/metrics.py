# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""Prometheus metrics utilities (registry-aware, hot-reload safe).

Accessor functions return collectors bound to the **current**
``prometheus_client.REGISTRY``:

    * Safe under hot reload and tests that swap the default registry.
    * No duplicate-registration errors.
    * Cache automatically resets when the active registry changes.

Collectors:
    * ``dashboard_cache_operations_total{operation,hit}``
    * ``dashboard_compute_duration_seconds``
    * ``http_server_request_duration_seconds{method,handler,status}``

Example:
    get_dashboard_cache_operations_total().labels(operation="get", hit="true").inc()
"""

from __future__ import annotations

import logging
import threading
from contextlib import suppress
from typing import Final

import prometheus_client as prom
from prometheus_client import Counter, Histogram

_log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Common histogram buckets (seconds)
_BUCKETS: Final[tuple[float, ...]] = (
    0.005,
    0.010,
    0.025,
    0.050,
    0.100,
    0.250,
    0.500,
    1.000,
    2.500,
    5.000,
    10.000,
)

# Cache keyed by metric name within the currently-active registry.
_registry_id: int | None = None
_collectors: dict[str, Counter | Histogram] = {}
_lock = threading.RLock()


def _ensure_registry() -> None:
    """Reset the collector cache if the active registry changed."""
    global _registry_id
    with _lock:
        rid = id(prom.REGISTRY)
        if _registry_id != rid:
            _collectors.clear()
            _registry_id = rid


def _lookup_existing[C: (Counter, Histogram)](name: str, kind: type[C]) -> C | None:
    """Return a collector already registered under ``name``, if of type ``kind``."""
    with _lock, suppress(Exception):
        mapping = getattr(prom.REGISTRY, "_names_to_collectors", None)
        if isinstance(mapping, dict):
            col = mapping.get(name)
            if isinstance(col, kind):
                return col
    return None


def _get_or_create_hist(
    name: str,
    help_text: str,
    *,
    buckets: tuple[float, ...] = _BUCKETS,
    labelnames: tuple[str, ...] = (),
) -> Histogram:
    """Get or create a registry-bound ``Histogram`` with stable identity.

    Args:
        name: Metric name (snake_case).
        help_text: Human-readable description.
        buckets: Histogram buckets in seconds.
        labelnames: Optional label names tuple.

    Returns:
        Histogram: Bound to ``prom.REGISTRY``.
    """
    _ensure_registry()
    with _lock:
        cached = _collectors.get(name)
        if isinstance(cached, Histogram):
            return cached
        existing = _lookup_existing(name, Histogram)
        if existing is not None:
            _collectors[name] = existing
            return existing
        try:
            hist = Histogram(name, help_text, labelnames, buckets=buckets, registry=prom.REGISTRY)
        except ValueError:
            again = _lookup_existing(name, Histogram)
            if again is None:
                _log.exception("Failed to register Prometheus histogram %s", name)
                raise
            hist = again
        _collectors[name] = hist
        return hist


def _get_or_create_counter(
    name: str,
    help_text: str,
    *,
    labelnames: tuple[str, ...] = (),
) -> Counter:
    """Get or create a registry-bound ``Counter`` with stable identity.

    Args:
        name: Metric name (snake_case, without the ``_total`` suffix).
        help_text: Human-readable description.
        labelnames: Optional label names tuple.

    Returns:
        Counter: Bound to ``prom.REGISTRY``.
    """
    _ensure_registry()
    with _lock:
        cached = _collectors.get(name)
        if isinstance(cached, Counter):
            return cached
        existing = _lookup_existing(name, Counter)
        if existing is not None:
            _collectors[name] = existing
            return existing
        try:
            counter = Counter(name, help_text, labelnames, registry=prom.REGISTRY)
        except ValueError:
            again = _lookup_existing(name, Counter)
            if again is None:
                _log.exception("Failed to register Prometheus counter %s", name)
                raise
            counter = again
        _collectors[name] = counter
        return counter


def get_dashboard_cache_operations_total() -> Counter:
    """Counter of result-cache lookups and invalidations.

    Labels:
        operation: ``get_or_compute`` or ``clear_user``.
        hit: ``true``, ``false`` or ``n/a``.
    """
    return _get_or_create_counter(
        "dashboard_cache_operations",
        "Dashboard result cache operations",
        labelnames=("operation", "hit"),
    )


def get_dashboard_compute_duration_seconds() -> Histogram:
    """Histogram of dashboard summary computations (fetch + aggregate)."""
    return _get_or_create_hist(
        "dashboard_compute_duration_seconds",
        "Latency (seconds) of dashboard summary computations",
    )


def get_http_server_request_duration_seconds() -> Histogram:
    """Canonical server request-duration histogram.

    Labels:
        method: Uppercased HTTP method.
        handler: Templated route or raw path.
        status: Response code as string.
    """
    return _get_or_create_hist(
        "http_server_request_duration_seconds",
        "Request duration (seconds), server-side",
        labelnames=("method", "handler", "status"),
    )
