# src/productivity_tracker/tasks/task_api.py

from __future__ import annotations

"""
Transport-neutral request handlers for tasks and reports.

Each handler takes the acting owner id explicitly and returns an ApiResponse
(HTTP-like status + JSON-ready body). Errors are mapped here:

- ValidationError -> 400 {"error": <message>}
- NotFoundError   -> 404 {"error": "Task not found"}
- StoreError      -> 500 {"error": "Database error"} (logged, details hidden)
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Any, Mapping

from ..core.errors import NotFoundError, StoreError, ValidationError
from ..core.state import AppState
from ..reports.aggregator import CompletionAggregator
from ..reports.assembler import ReportAssembler, ReportPeriod
from ..reports.formatter import csv_filename, render_csv

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ApiResponse:
    status: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def _error(status: int, message: str) -> ApiResponse:
    return ApiResponse(status=status, body={"error": message})


def _handle(op: str, fn: Callable[[], ApiResponse]) -> ApiResponse:
    try:
        return fn()
    except ValidationError as e:
        return _error(400, str(e))
    except NotFoundError as e:
        return _error(404, str(e) or "Not found")
    except StoreError:
        logger.exception("%s failed", op)
        return _error(500, "Database error")


def _today() -> date:
    return datetime.now(UTC).date()


def _completion_flag(raw: Any) -> bool | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw.strip().lower() in {"1", "true", "yes", "on"}
    return bool(raw)


def build_assembler(state: AppState) -> ReportAssembler:
    return ReportAssembler(CompletionAggregator(state.task_store))


# ---- tasks ----


def list_tasks(state: AppState, owner_id: int) -> ApiResponse:
    def run() -> ApiResponse:
        return ApiResponse(200, [t.to_dict() for t in state.task_store.list_tasks(owner_id)])

    return _handle("list_tasks", run)


def create_task(state: AppState, owner_id: int, payload: Mapping[str, Any]) -> ApiResponse:
    def run() -> ApiResponse:
        task = state.task_store.create_task(
            owner_id,
            title=payload.get("title", ""),
            due_date=payload.get("due_date"),
            description=payload.get("description") or "",
            priority=payload.get("priority"),
        )
        logger.info("Task created id=%s owner=%s", task.id, owner_id)
        return ApiResponse(201, task.to_dict())

    return _handle("create_task", run)


def get_task(state: AppState, owner_id: int, task_id: Any) -> ApiResponse:
    def run() -> ApiResponse:
        return ApiResponse(200, state.task_store.get_task(owner_id, task_id).to_dict())

    return _handle("get_task", run)


def update_task(state: AppState, owner_id: int, task_id: Any, payload: Mapping[str, Any]) -> ApiResponse:
    def run() -> ApiResponse:
        task = state.task_store.update_task(
            owner_id,
            task_id,
            title=payload.get("title", ""),
            due_date=payload.get("due_date"),
            description=payload.get("description") or "",
            priority=payload.get("priority"),
            is_completed=_completion_flag(payload.get("is_completed")),
        )
        return ApiResponse(200, task.to_dict())

    return _handle("update_task", run)


def toggle_task(state: AppState, owner_id: int, task_id: Any) -> ApiResponse:
    def run() -> ApiResponse:
        task = state.task_store.toggle_completion(owner_id, task_id)
        return ApiResponse(
            200,
            {
                "id": task.id,
                "is_completed": task.is_completed,
                "message": "Task marked as completed" if task.is_completed else "Task marked as incomplete",
            },
        )

    return _handle("toggle_task", run)


def delete_task(state: AppState, owner_id: int, task_id: Any) -> ApiResponse:
    def run() -> ApiResponse:
        deleted_id = state.task_store.delete_task(owner_id, task_id)
        return ApiResponse(200, {"message": "Task deleted successfully", "deletedId": deleted_id})

    return _handle("delete_task", run)


def tasks_in_range(state: AppState, owner_id: int, start_date: Any, end_date: Any) -> ApiResponse:
    if not start_date or not end_date:
        return _error(400, "Start date and end date are required")

    def run() -> ApiResponse:
        tasks = state.task_store.list_tasks_in_range(owner_id, start_date, end_date)
        return ApiResponse(200, [t.to_dict() for t in tasks])

    return _handle("tasks_in_range", run)


def overdue_tasks(state: AppState, owner_id: int, as_of: date | None = None) -> ApiResponse:
    def run() -> ApiResponse:
        tasks = state.task_store.list_overdue_tasks(owner_id, as_of or _today())
        return ApiResponse(200, [t.to_dict() for t in tasks])

    return _handle("overdue_tasks", run)


def today_tasks(state: AppState, owner_id: int, as_of: date | None = None) -> ApiResponse:
    def run() -> ApiResponse:
        tasks = state.task_store.list_tasks_due_on(owner_id, as_of or _today())
        return ApiResponse(200, [t.to_dict() for t in tasks])

    return _handle("today_tasks", run)


# ---- reports ----


def report_data(state: AppState, owner_id: int, period: str | None, today: date | None = None) -> ApiResponse:
    def run() -> ApiResponse:
        report = build_assembler(state).build(owner_id, period, today=today or _today())
        return ApiResponse(200, report.to_dict())

    return _handle("report_data", run)


def report_csv(state: AppState, owner_id: int, period: str | None, today: date | None = None) -> ApiResponse:
    """200 body: {"filename": ..., "content_type": "text/csv", "content": ...}."""

    def run() -> ApiResponse:
        day = today or _today()
        p = ReportPeriod.parse(period)
        report = build_assembler(state).build(owner_id, p, today=day)
        return ApiResponse(
            200,
            {
                "filename": csv_filename(p, day),
                "content_type": "text/csv",
                "content": render_csv(report, generated_on=day),
            },
        )

    return _handle("report_csv", run)
