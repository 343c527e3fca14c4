"""
Utility script to generate and write the OpenAPI schema for the API.

The schema is written to interfaces/openapi.json under the current working
directory, so API clients and documentation tools can consume a stable schema
without running the server.

Usage:
    python -m todo_mvp.generate_openapi [output_path]
"""
from __future__ import annotations

import json
import os
import sys
from typing import Any, Dict, List, Optional

from .main import create_app, openapi_tags
from .repositories import InMemoryTaskRepository


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Ensure the OpenAPI schema carries the tag metadata declared in main,
    without overriding tags that are already present.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


# PUBLIC_INTERFACE
def generate_openapi(out_path: Optional[str] = None) -> str:
    """Generate the OpenAPI schema file and return the written file path."""
    # The schema does not depend on storage, so never touch a real database here.
    app = create_app(repository=InMemoryTaskRepository())
    schema = app.openapi()
    _ensure_tags(schema)

    out_path = out_path or os.path.join(os.getcwd(), "interfaces", "openapi.json")
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    return out_path


def main() -> None:
    path = generate_openapi(sys.argv[1] if len(sys.argv) > 1 else None)
    print(f"Wrote OpenAPI schema to: {path}")


if __name__ == "__main__":
    main()
