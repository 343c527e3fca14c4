"""
Todo MVP: a task management API (FastAPI) and its async client.

The ASGI application is built by todo_mvp.main.create_app (run it with
`python -m todo_mvp` or `uvicorn --factory todo_mvp.main:create_app`);
the client side lives in todo_mvp.client.
"""

__version__ = "0.1.0"
