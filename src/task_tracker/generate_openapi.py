"""
Utility script to generate and write the OpenAPI schema for the FastAPI app.

The schema is serialized to ``interfaces/openapi.json`` (relative to the
current working directory unless another path is given) so that API clients
and documentation tools can consume it without running the server.

Usage:
    python -m task_tracker.generate_openapi [OUT_PATH]
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .main import create_app, openapi_tags

DEFAULT_OUT_PATH = Path("interfaces") / "openapi.json"


def _ensure_tags(schema: Dict[str, Any]) -> None:
    """
    Ensure the OpenAPI schema carries the tag metadata (with descriptions)
    for every tag the app declares, without overriding existing entries.
    """
    existing_tags: List[Dict[str, Any]] = schema.get("tags", []) or []
    existing_names = {t.get("name") for t in existing_tags if isinstance(t, dict)}
    for tag in openapi_tags:
        if tag.get("name") not in existing_names:
            existing_tags.append(tag)
    if existing_tags:
        schema["tags"] = existing_tags


# PUBLIC_INTERFACE
def generate_openapi(out_path: Optional[Union[str, Path]] = None) -> Path:
    """Write the OpenAPI schema file and return the written path."""
    # Building the schema never opens a database connection.
    schema = create_app().openapi()
    _ensure_tags(schema)

    path = Path(out_path) if out_path else DEFAULT_OUT_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    return path


def main(argv: Optional[List[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    path = generate_openapi(args[0] if args else None)
    print(f"Wrote OpenAPI schema to: {path}")


if __name__ == "__main__":
    main()
