"""Single in-flight background protocol generation with a persisted status snapshot."""
from __future__ import annotations

import contextvars
import logging
import secrets
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, Dict, List, Optional, Set
from uuid import UUID

from sqlalchemy.orm import Session, sessionmaker

from ascend.core.errors import ApiError
from ascend.db.deps import get_session_factory
from ascend.observability.metrics import log_metric
from ascend.services import protocol_generator, protocol_storage
from ascend.services.client_storage import (
    GENERATION_TASK_KEY,
    PLANNER_QA_KEY,
    PLANNER_SESSION_KEY,
    ClientStorage,
)
from ascend.services.planning_request import PlanningContext

logger = logging.getLogger(__name__)

Listener = Callable[[Dict[str, Any]], None]

DEFAULT_ERROR_MESSAGE = "Failed to generate protocol"
MAX_CONCURRENT_TASKS = 4


def default_snapshot() -> Dict[str, Any]:
    return {
        "taskId": None,
        "status": "idle",
        "query": "",
        "locale": "ar",
        "startedAt": None,
        "finishedAt": None,
        "entryId": None,
        "error": None,
        "code": None,
    }


def load_snapshot(storage: ClientStorage) -> Dict[str, Any]:
    raw = storage.get_item(GENERATION_TASK_KEY)
    if not isinstance(raw, dict):
        return default_snapshot()
    return {**default_snapshot(), **{key: raw[key] for key in default_snapshot() if key in raw}}


@dataclass
class GenerationTaskInput:
    context: PlanningContext
    qa_summary: List[str] = field(default_factory=list)


class GenerationTaskTracker:
    """
    Runs at most one generation per user at a time.

    Futures, snapshots and subscribers are keyed by user id, so one user's
    task is never visible to another. Every state change is written to the
    user's storage under ``generation-task.v1`` and then pushed to that
    user's subscribers, in that order.
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        *,
        executor: Optional[Executor] = None,
    ):
        self._session_factory = session_factory
        self._executor = executor or ThreadPoolExecutor(
            max_workers=MAX_CONCURRENT_TASKS, thread_name_prefix="generation"
        )
        self._lock = Lock()
        self._futures: Dict[UUID, Future] = {}
        self._snapshots: Dict[UUID, Dict[str, Any]] = {}
        self._listeners: Dict[UUID, Set[Listener]] = {}

    def snapshot(self, user_id: UUID) -> Dict[str, Any]:
        return dict(self._snapshots.get(user_id) or default_snapshot())

    def is_running(self, user_id: UUID) -> bool:
        with self._lock:
            return self._running_future(user_id) is not None

    def subscribe(self, user_id: UUID, listener: Listener) -> Callable[[], None]:
        """Register a listener for one user; it is called once immediately with that user's snapshot."""
        listeners = self._listeners.setdefault(user_id, set())
        listeners.add(listener)
        listener(self.snapshot(user_id))
        return lambda: listeners.discard(listener)

    def start(self, storage: ClientStorage, task_input: GenerationTaskInput) -> "Future[Dict[str, Any]]":
        """Start a generation for the storage's user, or return that user's running one."""
        user_id = storage.user_id
        with self._lock:
            running_future = self._running_future(user_id)
            if running_future is not None:
                logger.info("Generation already running; reusing task %s", self.snapshot(user_id).get("taskId"))
                return running_future

            task_id = f"gen-{int(datetime.now(timezone.utc).timestamp() * 1000)}-{secrets.token_hex(3)[:5]}"
            running = {
                **default_snapshot(),
                "taskId": task_id,
                "status": "running",
                "query": task_input.context.query,
                "locale": task_input.context.locale,
                "startedAt": protocol_storage.now_iso(),
            }
            self._persist(storage, running)
            # Run inside a copy of the caller's context so log lines keep the request and client ids.
            future = self._executor.submit(
                contextvars.copy_context().run, self._run, user_id, task_id, running["startedAt"], task_input
            )
            self._futures[user_id] = future
            return future

    def reset(self, storage: ClientStorage) -> Dict[str, Any]:
        """Forget the user's current task. A task still running keeps going but is no longer tracked."""
        with self._lock:
            self._futures.pop(storage.user_id, None)
        return self._persist(storage, default_snapshot())

    def wait(self, user_id: UUID, timeout: Optional[float] = None) -> Dict[str, Any]:
        """Block until the user's tracked task (if any) finishes and return the latest snapshot."""
        with self._lock:
            future = self._futures.get(user_id)
        if future is not None:
            future.result(timeout=timeout)
        return self.snapshot(user_id)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    def _running_future(self, user_id: UUID) -> Optional[Future]:
        future = self._futures.get(user_id)
        if future is not None and not future.done():
            return future
        return None

    def _persist(self, storage: ClientStorage, snapshot: Dict[str, Any]) -> Dict[str, Any]:
        storage.set_item(GENERATION_TASK_KEY, snapshot)
        self._snapshots[storage.user_id] = snapshot
        for listener in list(self._listeners.get(storage.user_id, ())):
            try:
                listener(dict(snapshot))
            except Exception:
                logger.exception("Generation task listener failed")
        return snapshot

    def _open_session(self) -> Session:
        factory = self._session_factory or get_session_factory()
        return factory()

    def _finish(self, storage: ClientStorage, base: Dict[str, Any], status: str, **fields: Any) -> Dict[str, Any]:
        snapshot = {**base, "status": status, "finishedAt": protocol_storage.now_iso()}
        snapshot.update({"entryId": None, "error": None, "code": None, **fields})
        return self._persist(storage, snapshot)

    def _run(
        self, user_id: UUID, task_id: str, started_at: str, task_input: GenerationTaskInput
    ) -> Dict[str, Any]:
        context = task_input.context
        base = {"taskId": task_id, "query": context.query, "locale": context.locale, "startedAt": started_at}
        db = self._open_session()
        try:
            storage = ClientStorage.for_user(db, user_id)
            try:
                result = protocol_generator.generate_protocol(context)
                entry = protocol_storage.create_entry(
                    result.protocol,
                    profile_snapshot=context.profile,
                    qa_summary=task_input.qa_summary,
                    qa_history=context.qa_history,
                )
                protocol_storage.upsert_protocol(storage, entry)
                protocol_storage.open_protocol(storage, entry)
                storage.remove_item(PLANNER_QA_KEY)
                storage.remove_item(PLANNER_SESSION_KEY)
            except ApiError as exc:
                db.rollback()
                log_metric("generation_task.error", 1, {"code": exc.code})
                return self._finish(storage, base, "error", error=str(exc.detail), code=exc.code)
            except Exception as exc:
                db.rollback()
                logger.exception("Generation task %s failed", task_id)
                log_metric("generation_task.error", 1, {"code": "UNEXPECTED"})
                return self._finish(storage, base, "error", error=str(exc) or DEFAULT_ERROR_MESSAGE)

            log_metric("generation_task.success", 1, {"source": result.source, "attempts": result.attempts})
            return self._finish(storage, base, "success", entryId=entry["id"])
        finally:
            db.close()


_tracker: Optional[GenerationTaskTracker] = None
_tracker_lock = Lock()


def get_generation_tracker() -> GenerationTaskTracker:
    """FastAPI dependency returning the process-wide tracker."""
    global _tracker
    with _tracker_lock:
        if _tracker is None:
            _tracker = GenerationTaskTracker()
        return _tracker
