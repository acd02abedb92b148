"""Tests for metrics helpers."""
from __future__ import annotations

from typing import Any, Dict

from ascend.observability import client as client_module
from ascend.observability import metrics


class _DummyTrace:
    def __init__(self, name: str, metadata: Dict[str, Any]):
        self.name = name
        self.metadata = metadata
        self.ended = False

    def update(self, metadata: Dict[str, Any] | None = None, **kwargs) -> None:
        self.metadata.update(metadata or {})

    def end(self) -> None:
        self.ended = True


class _DummyClient:
    def __init__(self):
        self.traces: list[_DummyTrace] = []

    def trace(self, name: str, metadata: Dict[str, Any] | None = None):
        trace = _DummyTrace(name, metadata or {})
        self.traces.append(trace)
        return trace


def test_log_metric_closes_trace(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(client_module, "get_opik_client", lambda: dummy_client)

    metrics.log_metric("demo_metric", 42, metadata={"foo": "bar"})

    assert dummy_client.traces, "Metric call should record a trace"
    assert dummy_client.traces[0].name == "metric:demo_metric"
    assert dummy_client.traces[0].metadata["value"] == 42
    assert dummy_client.traces[0].metadata["foo"] == "bar"
    assert dummy_client.traces[0].ended is True


def test_timed_emits_latency_metric(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(client_module, "get_opik_client", lambda: dummy_client)

    with metrics.timed("protocol.build", metadata={"archetype": "speed"}) as extra:
        extra["periods"] = 4

    trace = dummy_client.traces[-1]
    assert trace.name == "metric:protocol.build.latency_ms"
    assert trace.metadata["value"] >= 0
    assert trace.metadata["archetype"] == "speed"
    assert trace.metadata["periods"] == 4


def test_log_metric_is_noop_without_client(monkeypatch) -> None:
    monkeypatch.setattr(client_module, "get_opik_client", lambda: None)

    metrics.log_metric("demo_metric", 1)
