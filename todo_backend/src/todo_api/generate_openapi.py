"""
Utility script to generate and write the OpenAPI schema for the service.

The schema is built from an application wired to the in-memory store, so no
MongoDB server is needed. By default it is written to interfaces/openapi.json
under the todo_backend directory so that API clients and documentation tools
can consume a stable spec without running the server.

Usage:
    python -m todo_api.generate_openapi [output-path]
"""
from __future__ import annotations

import json
import os
import sys
from typing import Any, Dict, List, Optional

from .context import AppContext
from .main import create_app, openapi_tags
from .repositories import InMemoryTodoStore


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Ensure the OpenAPI schema contains the tags metadata declared by the app,
    without overriding tag definitions that are already present.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


def _default_path() -> str:
    # <todo_backend>/interfaces/openapi.json
    src_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(os.path.dirname(src_dir), "interfaces", "openapi.json")


# PUBLIC_INTERFACE
def generate_openapi(out_path: Optional[str] = None) -> str:
    """Generate the OpenAPI schema file and return the written file path."""
    app = create_app(AppContext(store=InMemoryTodoStore()))
    schema = app.openapi()
    _ensure_tags(schema)

    path = out_path or _default_path()
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    return path


def main() -> None:
    path = generate_openapi(sys.argv[1] if len(sys.argv) > 1 else None)
    print(f"Wrote OpenAPI schema to: {path}")


if __name__ == "__main__":
    main()
