"""FastAPI routes for linking a source directory."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from code_link.errors import LinkError, UndefinedModules
from code_link.graph import Module
from code_link.models import LinkConfig
from code_link.pipeline import build_collection, run_scan
from code_link.web.state import LinkSession, state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# --- Request / Response models ---

class LinkRequest(BaseModel):
    path: str
    include_extensions: list[str] = [".js"]
    strict: bool = False


# --- Path safety ---

def _validate_path(p: str) -> Path:
    """Ensure path exists and is under the allowed root."""
    resolved = Path(p).expanduser().resolve()
    root = state.allowed_root.resolve()
    if resolved != root and root not in resolved.parents:
        raise HTTPException(403, f"Path must be under {root}")
    if not resolved.exists():
        raise HTTPException(404, f"Path not found: {resolved}")
    if not resolved.is_dir():
        raise HTTPException(400, f"Not a directory: {resolved}")
    return resolved


def _module_dict(module: Module) -> dict:
    return {
        "name": module.name,
        "source": module.source,
        "exports": list(module.exports),
        "requires": list(module.requires),
    }


def _get_session(link_id: str) -> LinkSession:
    session = state.get_link(link_id)
    if not session:
        raise HTTPException(404, "Link not found")
    return session


# --- Endpoints ---

@router.post("/link")
async def link(req: LinkRequest):
    """Scan a directory, build its collection and compute the build order."""
    source_dir = _validate_path(req.path)
    config = LinkConfig(source_dir=source_dir, include_extensions=tuple(req.include_extensions))

    try:
        collection = build_collection(run_scan(config))
        stats = collection.analyse()
        if req.strict and stats.orphan_modules:
            raise UndefinedModules([m.name for m in stats.orphan_modules])
        order = collection.serialize()
    except LinkError as e:
        logger.info("Link of %s failed: %s", source_dir, e)
        raise HTTPException(422, str(e))

    session = LinkSession(
        collection=collection,
        order=order,
        stats=stats,
        source_dir=str(source_dir),
    )
    state.add_link(session)

    return {
        "link_id": session.id,
        "modules": collection.number_of_modules,
        "dependencies": collection.number_of_dependencies,
        "buckets": [[_module_dict(m) for m in bucket] for bucket in order],
        "stats": stats.to_dict(),
    }


@router.get("/link/{link_id}/stats")
async def link_stats(link_id: str):
    session = _get_session(link_id)
    return {"link_id": session.id, "stats": session.stats.to_dict()}


@router.get("/link/{link_id}/graph", response_class=PlainTextResponse)
async def link_graph(link_id: str):
    """Graphviz rendering of the collection."""
    return _get_session(link_id).collection.to_dot()


@router.delete("/link/{link_id}")
async def delete_link(link_id: str):
    if not state.delete_link(link_id):
        raise HTTPException(404, "Link not found")
    return {"deleted": link_id}
