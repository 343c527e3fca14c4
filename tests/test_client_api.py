import asyncio
import json
from datetime import datetime, timezone

import httpx
import pytest

from todo_mvp.client import ApiError, TasksApi
from todo_mvp.schemas import CreateTaskRequest, UpdateTaskRequest

from .client_helpers import envelope, run_with_app, run_with_handler, task_json


class TestAgainstApplication:
    def test_create_list_update_delete(self, app):
        async def body(api: TasksApi):
            due = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
            created = await api.create_task(CreateTaskRequest(title="From client", description="Desc", due_date=due))
            listed = await api.get_tasks()
            updated = await api.update_task(
                created.id, UpdateTaskRequest(title="Renamed", is_completed=True, due_date=due)
            )
            after_update = await api.get_tasks()
            deleted = await api.delete_task(created.id)
            deleted_again = await api.delete_task(created.id)
            return created, listed, updated, after_update, deleted, deleted_again

        created, listed, updated, after_update, deleted, deleted_again = run_with_app(app, body)

        assert created.id > 0
        assert created.is_completed is False
        assert created.due_date == datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert [t.title for t in listed] == ["From client"]
        assert updated is None
        assert after_update[0].title == "Renamed"
        assert after_update[0].is_completed is True
        assert deleted is True
        assert deleted_again is False

    def test_update_missing_task_raises(self, app):
        async def body(api: TasksApi):
            with pytest.raises(ApiError) as info:
                await api.update_task(999, UpdateTaskRequest(title="Nope"))
            return info.value

        err = run_with_app(app, body)
        assert err.status_code == 404
        assert str(err) == "HTTP 404 while calling PUT /api/tasks/999. Task with id '999' was not found."


class TestFailures:
    def test_missing_base_url(self):
        async def body():
            async with TasksApi("") as api:
                await api.get_tasks()

        with pytest.raises(ApiError, match="API base URL is not configured."):
            asyncio.run(body())

    def test_non_2xx_uses_status_in_message(self):
        def handler(request):
            return httpx.Response(500, json=envelope("ServerError", "An unexpected error occurred.", ["TraceId: x"]))

        async def body(api: TasksApi):
            with pytest.raises(ApiError) as info:
                await api.get_tasks()
            return info.value

        err = run_with_handler(handler, body)
        assert err.status_code == 500
        assert str(err) == "HTTP 500 while calling GET /api/tasks. An unexpected error occurred."

    def test_validation_details_are_surfaced(self):
        def handler(request):
            return httpx.Response(400, json=envelope("ValidationFailed", "Request validation failed.", ["Title is required."]))

        async def body(api: TasksApi):
            with pytest.raises(ApiError) as info:
                await api.create_task(CreateTaskRequest(title="x"))
            return str(info.value)

        assert run_with_handler(handler, body) == "HTTP 400 while calling POST /api/tasks. Title is required."

    def test_non_list_body_is_rejected(self):
        def handler(request):
            return httpx.Response(200, json={"items": []})

        async def body(api: TasksApi):
            with pytest.raises(ApiError, match="expected an array of tasks"):
                await api.get_tasks()

        run_with_handler(handler, body)

    def test_malformed_task_is_rejected(self):
        def handler(request):
            return httpx.Response(200, json=[{"id": "one"}])

        async def body(api: TasksApi):
            with pytest.raises(ApiError, match="malformed task"):
                await api.get_tasks()

        run_with_handler(handler, body)

    def test_network_error_becomes_api_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async def body(api: TasksApi):
            with pytest.raises(ApiError, match="Network error while calling GET /api/tasks"):
                await api.get_tasks()

        run_with_handler(handler, body)

    def test_invalid_base_url_becomes_api_error(self):
        async def scenario():
            async with TasksApi("http://localhost:99999x") as api:
                with pytest.raises(ApiError, match="Invalid API URL for GET /api/tasks"):
                    await api.get_tasks()

        asyncio.run(scenario())

    def test_create_with_non_json_body_is_rejected(self):
        def handler(request):
            return httpx.Response(201, text="<html>created</html>", headers={"Content-Type": "text/html"})

        async def body(api: TasksApi):
            with pytest.raises(ApiError, match="body is not JSON"):
                await api.create_task(CreateTaskRequest(title="x"))

        run_with_handler(handler, body)

    def test_update_with_broken_json_body_is_rejected(self):
        def handler(request):
            return httpx.Response(200, content=b"{not json", headers={"Content-Type": "application/json"})

        async def body(api: TasksApi):
            with pytest.raises(ApiError, match="body is not JSON"):
                await api.update_task(1, UpdateTaskRequest(title="x"))

        run_with_handler(handler, body)

    def test_update_with_body_returns_task(self):
        def handler(request):
            return httpx.Response(200, json=task_json(3, "Echoed", True))

        async def body(api: TasksApi):
            return await api.update_task(3, UpdateTaskRequest(title="Echoed", is_completed=True))

        task = run_with_handler(handler, body)
        assert task.id == 3
        assert task.is_completed is True

    def test_requests_use_camel_case_payloads(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path, request.content))
            if request.method == "POST":
                return httpx.Response(201, json=task_json(1, "T"))
            return httpx.Response(204)

        async def body(api: TasksApi):
            await api.create_task(CreateTaskRequest(title="T", due_date="2030-01-01"))
            await api.update_task(1, UpdateTaskRequest(title="T", is_completed=True))

        run_with_handler(handler, body)
        assert seen[0][:2] == ("POST", "/api/tasks")
        assert json.loads(seen[0][2]) == {"title": "T", "description": None, "dueDate": "2030-01-01T00:00:00"}
        assert seen[1][:2] == ("PUT", "/api/tasks/1")
        assert json.loads(seen[1][2])["isCompleted"] is True
