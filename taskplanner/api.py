"""HTTP handlers of the scheduler's JSON API."""

from __future__ import annotations

import datetime as _dt
import json
import sqlite3
from dataclasses import replace
from http import HTTPStatus
from typing import Any, Callable

from flask import Flask, Response, request

from .nextdate import after_now, format_date, next_date, parse_date
from .storage import Task, TaskStore

__all__ = ["ValidationError", "normalize_task", "register_api"]

TASKS_LIMIT = 10
_ANY_METHOD = ["GET", "POST", "PUT", "DELETE", "PATCH"]
_FAILURES = (ValueError, LookupError, sqlite3.Error)


class ValidationError(ValueError):
    """Raised when a task sent by a client is not acceptable."""


def normalize_task(task: Task, now: _dt.date) -> Task:
    """Check ``task`` and return it with the date it should be stored under.

    An empty date means today. A date in the past moves to today, or to the
    next occurrence when the task repeats. The repeat rule is always checked.
    """
    if not task.title.replace(" ", ""):
        raise ValidationError("tittle is empty")
    today = format_date(now)
    date_text = task.date or today
    start = parse_date(date_text)
    following = next_date(now, date_text, task.repeat)
    if after_now(now, start):
        date_text = following if task.repeat else today
    return replace(task, date=date_text)


def _json_response(data: Any, status: int = HTTPStatus.OK) -> Response:
    body = json.dumps(data, ensure_ascii=False) + "\n"
    return Response(body, status=status, content_type="application/json; charset=utf-8")


def _error(exc: Exception) -> Response:
    message = str(exc) or type(exc).__name__
    return _json_response({"error": message}, HTTPStatus.BAD_REQUEST)


def _today() -> _dt.date:
    return _dt.date.today()


def _decode_task() -> Task:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("request body is not a JSON object")
    return Task.from_dict(data)


def register_api(app: Flask, store: TaskStore) -> None:
    """Attach the /api routes to ``app``, backed by ``store``."""

    def next_date_view() -> Response:
        args = request.args
        try:
            now = parse_date(args.get("now", ""))
            date = next_date(now, args.get("date", ""), args.get("repeat", ""))
            if not date:
                raise ValidationError("no next date for an empty rule")
        except _FAILURES as exc:
            return _error(exc)
        return _json_response(int(date))

    def get_task() -> Response:
        task_id = request.args.get("id", "")
        if not task_id:
            return _error(ValidationError("id is empty"))
        try:
            task = store.get_task(task_id)
        except _FAILURES as exc:
            return _error(exc)
        return _json_response(task.to_dict())

    def add_task() -> Response:
        try:
            task = normalize_task(_decode_task(), _today())
            new_id = store.add_task(task)
        except _FAILURES as exc:
            return _error(exc)
        return _json_response({"id": str(new_id)})

    def update_task() -> Response:
        try:
            task = normalize_task(_decode_task(), _today())
            store.update_task(task)
        except _FAILURES as exc:
            return _error(exc)
        return _json_response({})

    def delete_task() -> Response:
        try:
            store.delete_task(request.args.get("id", ""))
        except _FAILURES as exc:
            return _error(exc)
        return _json_response({})

    handlers: dict[str, Callable[[], Response]] = {
        "GET": get_task,
        "POST": add_task,
        "PUT": update_task,
        "DELETE": delete_task,
    }

    def task_view() -> Response:
        handler = handlers.get(request.method)
        if handler is None:
            return Response(
                "Method not allowed\n",
                status=HTTPStatus.METHOD_NOT_ALLOWED,
                content_type="text/plain; charset=utf-8",
            )
        return handler()

    def tasks_view() -> Response:
        try:
            tasks = store.get_tasks(TASKS_LIMIT)
        except sqlite3.Error as exc:
            return Response(
                f"{exc}\n",
                status=HTTPStatus.INTERNAL_SERVER_ERROR,
                content_type="text/plain; charset=utf-8",
            )
        return _json_response({"tasks": [task.to_dict() for task in tasks]})

    def done_view() -> Response:
        task_id = request.args.get("id", "")
        if not task_id:
            return _error(ValidationError("id is empty"))
        try:
            task = store.get_task(task_id)
            if not task.repeat:
                store.delete_task(task_id)
            else:
                following = next_date(_today(), task.date, task.repeat)
                store.update_task(replace(task, date=following))
        except _FAILURES as exc:
            return _error(exc)
        return _json_response({})

    app.add_url_rule("/api/nextdate", "api_nextdate", next_date_view, methods=_ANY_METHOD)
    app.add_url_rule("/api/task", "api_task", task_view, methods=_ANY_METHOD)
    app.add_url_rule("/api/tasks", "api_tasks", tasks_view, methods=_ANY_METHOD)
    app.add_url_rule("/api/task/done", "api_task_done", done_view, methods=_ANY_METHOD)