import asyncio

import httpx

from todo_mvp.client import QueryStatus, TasksApi, TasksQuery

from .client_helpers import BASE_URL, run_with_handler, task_json


class TestTasksQuery:
    def test_starts_idle_and_mount_loads(self):
        def handler(request):
            return httpx.Response(200, json=[task_json(1, "A"), task_json(2, "B", True)])

        async def body(api):
            query = TasksQuery(api)
            initial = query.status
            await query.mount()
            return initial, query

        initial, query = run_with_handler(handler, body)
        assert initial is QueryStatus.IDLE
        assert query.status is QueryStatus.SUCCESS
        assert query.error is None
        assert [t.title for t in query.tasks] == ["A", "B"]

    def test_loading_state_is_visible_while_request_runs(self):
        observed = []

        async def body(api):
            query = TasksQuery(api)

            original = api.get_tasks

            async def probing_get():
                observed.append(query.status)
                return await original()

            api.get_tasks = probing_get
            await query.reload()
            return query

        query = run_with_handler(lambda request: httpx.Response(200, json=[]), body)
        assert observed == [QueryStatus.LOADING]
        assert query.status is QueryStatus.SUCCESS
        assert query.tasks == []

    def test_failure_sets_error_and_keeps_previous_tasks(self):
        responses = [
            httpx.Response(200, json=[task_json(1, "Kept")]),
            httpx.Response(503, json={"error": "ServerError", "message": "Try later."}),
        ]

        def handler(request):
            return responses.pop(0)

        async def body(api):
            query = TasksQuery(api)
            await query.mount()
            await query.reload()
            return query

        query = run_with_handler(handler, body)
        assert query.status is QueryStatus.ERROR
        assert query.error == "HTTP 503 while calling GET /api/tasks. Try later."
        assert [t.title for t in query.tasks] == ["Kept"]

    def test_malformed_body_is_an_error(self):
        query = run_with_handler(
            lambda request: httpx.Response(200, json={"oops": True}),
            lambda api: _loaded(TasksQuery(api)),
        )
        assert query.status is QueryStatus.ERROR
        assert "expected an array of tasks" in query.error

    def test_reload_cancels_inflight_load(self):
        async def scenario():
            first_started = asyncio.Event()
            release_first = asyncio.Event()
            calls = []

            async def handler(request):
                calls.append(request.url.path)
                if len(calls) == 1:
                    first_started.set()
                    await release_first.wait()
                    return httpx.Response(200, json=[task_json(1, "stale")])
                return httpx.Response(200, json=[task_json(2, "fresh")])

            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
                query = TasksQuery(TasksApi(BASE_URL, client=http))
                first = asyncio.ensure_future(query.reload())
                await first_started.wait()

                await query.reload()
                release_first.set()
                await first
                return query, calls

        query, calls = asyncio.run(scenario())
        assert len(calls) == 2
        assert query.status is QueryStatus.SUCCESS
        assert query.error is None
        assert [t.title for t in query.tasks] == ["fresh"]

    def test_cancelling_the_caller_propagates(self):
        async def scenario():
            started = asyncio.Event()

            async def handler(request):
                started.set()
                await asyncio.Event().wait()

            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
                query = TasksQuery(TasksApi(BASE_URL, client=http))
                pending = asyncio.ensure_future(query.reload())
                await started.wait()
                pending.cancel()
                try:
                    await pending
                except asyncio.CancelledError:
                    return True, query
                return False, query

        cancelled, query = asyncio.run(scenario())
        assert cancelled is True
        assert query.error is None
        assert query.status is QueryStatus.IDLE
        assert query.is_loading is False
        assert query._inflight is None

    def test_cancelled_reload_keeps_previous_success(self):
        async def scenario():
            started = asyncio.Event()
            calls = []

            async def handler(request):
                calls.append(request)
                if len(calls) == 1:
                    return httpx.Response(200, json=[task_json(1, "kept")])
                started.set()
                await asyncio.Event().wait()

            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
                query = TasksQuery(TasksApi(BASE_URL, client=http))
                await query.mount()
                pending = asyncio.ensure_future(query.reload())
                await started.wait()
                pending.cancel()
                try:
                    await pending
                except asyncio.CancelledError:
                    pass
                return query

        query = asyncio.run(scenario())
        assert query.status is QueryStatus.SUCCESS
        assert [t.title for t in query.tasks] == ["kept"]
        assert query._inflight is None

    def test_invalid_base_url_becomes_error_state(self):
        async def scenario():
            async with TasksApi("http://localhost:99999x") as api:
                query = TasksQuery(api)
                await query.mount()
                return query

        query = asyncio.run(scenario())
        assert query.status is QueryStatus.ERROR
        assert query.error.startswith("Invalid API URL")


async def _loaded(query):
    await query.reload()
    return query
