"""Tests ensuring observability wiring is safe by default."""
from __future__ import annotations

import importlib

import pytest

from ascend.observability import client as client_module
from ascend.observability import tracing


class _RecordingTrace:
    def __init__(self, metadata):
        self.metadata = dict(metadata or {})
        self.errors = []
        self.ended = False

    def update(self, metadata=None, error_info=None, **kwargs):
        if metadata:
            self.metadata.update(metadata)
        if error_info:
            self.errors.append(error_info)

    def end(self):
        self.ended = True


class _RecordingClient:
    def __init__(self):
        self.traces = []

    def trace(self, name, metadata=None):
        trace = _RecordingTrace(metadata)
        self.traces.append(trace)
        return trace


def test_app_import_succeeds_when_opik_is_disabled(monkeypatch) -> None:
    monkeypatch.setenv("OPIK_ENABLED", "false")
    monkeypatch.delenv("OPIK_API_KEY", raising=False)

    import ascend.main as main_module

    reloaded_app = importlib.reload(main_module)

    assert hasattr(reloaded_app, "app")


def test_init_opik_skips_without_api_key(monkeypatch) -> None:
    from ascend.core.config import settings

    monkeypatch.setattr(settings, "opik_enabled", True)
    monkeypatch.setattr(settings, "opik_api_key", None)
    client_module.reset_opik_client()
    try:
        assert client_module.init_opik() is None
    finally:
        client_module.reset_opik_client()


def test_trace_records_error_and_reraises(monkeypatch) -> None:
    recorder = _RecordingClient()
    monkeypatch.setattr(client_module, "get_opik_client", lambda: recorder)

    with pytest.raises(ValueError):
        with tracing.trace("protocol.generate", metadata={"archetype": "fat_loss"}, request_id="req-1"):
            raise ValueError("boom")

    trace = recorder.traces[0]
    assert trace.metadata["request_id"] == "req-1"
    assert trace.errors[0]["exception_type"] == "ValueError"
    assert trace.ended is True


def test_annotate_clips_long_text(monkeypatch) -> None:
    recorder = _RecordingClient()
    monkeypatch.setattr(client_module, "get_opik_client", lambda: recorder)

    with tracing.trace("duration.suggest") as span:
        tracing.annotate(span, llm_output_text="x" * 2000, skipped=None)

    metadata = recorder.traces[0].metadata
    assert len(metadata["llm_output_text"]) == tracing.MAX_TEXT_METADATA
    assert "skipped" not in metadata
