"""In-memory stand-in for the Realtime Database REST protocol

Serves GET/PUT/POST/PATCH/DELETE on ``/{path}.json`` over a JSON tree.
Seed data is read from ``$STORE_SEED_FILE`` (or store_stub/seed.json).
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pathlib import Path
from typing import Any, Dict, List
import json
import os
import secrets

DEFAULT_SEED_FILE = Path(__file__).resolve().parents[2] / "store_stub" / "seed.json"


def _segments(path: str) -> List[str]:
    if not path.endswith(".json"):
        raise HTTPException(status_code=404, detail="Paths must end with .json")
    return [part for part in path[: -len(".json")].split("/") if part]


def _read(tree: Dict[str, Any], segments: List[str]) -> Any:
    node: Any = tree
    for part in segments:
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def _parent(tree: Dict[str, Any], segments: List[str]) -> Dict[str, Any]:
    node = tree
    for part in segments[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = node[part] = {}
        node = child
    return node


def _write(tree: Dict[str, Any], segments: List[str], value: Any) -> None:
    if not segments:
        tree.clear()
        tree.update(value or {})
        return
    parent = _parent(tree, segments)
    if value is None:
        parent.pop(segments[-1], None)
    else:
        parent[segments[-1]] = value


def push_key() -> str:
    """20-character key in the store's push-id alphabet"""
    return "-" + secrets.token_urlsafe(15)[:19]


def create_app(seed: Dict[str, Any] | None = None, auth_token: str | None = None) -> FastAPI:
    app = FastAPI(title="Mock Realtime Store", version="1.0.0")
    app.state.tree = json.loads(json.dumps(seed or {}))

    def check_auth(request: Request) -> None:
        if auth_token and request.query_params.get("auth") != auth_token:
            raise HTTPException(status_code=401, detail="Permission denied")

    @app.get("/health")
    def health(): return {"status": "ok"}

    @app.get("/{path:path}")
    def read(path: str, request: Request):
        check_auth(request)
        return JSONResponse(content=_read(app.state.tree, _segments(path)))

    @app.put("/{path:path}")
    async def put(path: str, request: Request):
        check_auth(request)
        value = await request.json()
        _write(app.state.tree, _segments(path), value)
        return JSONResponse(content=value)

    @app.post("/{path:path}")
    async def push(path: str, request: Request):
        check_auth(request)
        value = await request.json()
        key = push_key()
        _write(app.state.tree, _segments(path) + [key], value)
        return JSONResponse(content={"name": key})

    @app.patch("/{path:path}")
    async def update(path: str, request: Request):
        check_auth(request)
        values = await request.json()
        if not isinstance(values, dict):
            raise HTTPException(status_code=400, detail="Invalid data; couldn't parse JSON object")
        segments = _segments(path)
        node = _read(app.state.tree, segments)
        merged = dict(node) if isinstance(node, dict) else {}
        merged.update(values)
        _write(app.state.tree, segments, merged)
        return JSONResponse(content=values)

    @app.delete("/{path:path}")
    def delete(path: str, request: Request):
        check_auth(request)
        _write(app.state.tree, _segments(path), None)
        return JSONResponse(content=None)

    return app


def _load_seed() -> Dict[str, Any]:
    seed_file = Path(os.environ.get("STORE_SEED_FILE", DEFAULT_SEED_FILE))
    if not seed_file.exists():
        return {}
    return json.loads(seed_file.read_text())


app = create_app(_load_seed(), os.environ.get("STORE_AUTH_TOKEN"))
