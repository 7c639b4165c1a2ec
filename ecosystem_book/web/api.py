"""FastAPI routes for querying indexes and closures."""

from __future__ import annotations

import asyncio
from pathlib import Path

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from ecosystem_book.analysis import (
    compute_closure,
    direct_dependencies,
    in_closure_dependents,
    out_of_closure_dependents,
    rank_by_in_closure_reverse_deps,
    sorted_versions,
)
from ecosystem_book.errors import DecodeError
from ecosystem_book.models import BookConfig
from ecosystem_book.pipeline import run_book, run_index
from ecosystem_book.web.state import ClosureSession, IndexSession, state

router = APIRouter(prefix="/api")


# --- Request models ---

class IndexRequest(BaseModel):
    path: str

class ClosureRequest(BaseModel):
    index_id: str
    seeds: list[str]
    respider_upward: bool = False

class BookRequest(BaseModel):
    closure_id: str
    output_dir: str
    title: str | None = None
    ecosystem_label: str | None = None


# --- Path safety ---

def _allowed_root() -> Path:
    return Path.home().resolve()


def _validate_path(p: str, must_exist: bool = True) -> Path:
    """Ensure path is under the home directory (and exists, when reading)."""
    resolved = Path(p).expanduser().resolve()
    if not resolved.is_relative_to(_allowed_root()):
        raise HTTPException(403, "Path must be under your home directory")
    if must_exist and not resolved.exists():
        raise HTTPException(404, f"Path not found: {resolved}")
    return resolved


def _get_index_session(index_id: str) -> IndexSession:
    session = state.get_index(index_id)
    if not session:
        raise HTTPException(404, "Index not found")
    return session


def _get_closure_session(closure_id: str) -> ClosureSession:
    session = state.get_closure(closure_id)
    if not session:
        raise HTTPException(404, "Closure not found")
    return session


# --- Endpoints ---

@router.post("/index")
async def build_index(req: IndexRequest):
    index_dir = _validate_path(req.path)
    if not index_dir.is_dir():
        raise HTTPException(400, f"Not a directory: {index_dir}")

    try:
        index = await asyncio.to_thread(run_index, BookConfig(index_dir=index_dir))
    except DecodeError as e:
        raise HTTPException(422, str(e))

    session = IndexSession(index=index, index_dir=str(index_dir))
    state.add_index(session)
    return {
        "index_id": session.id,
        "packages": len(index.packages),
        "versions": index.version_count,
        "reverse_deps": len(index.reverse_deps),
        "unpublished": sorted(index.dangling_names()),
    }


@router.delete("/index/{index_id}")
async def delete_index(index_id: str):
    if not state.delete_index(index_id):
        raise HTTPException(404, "Index not found")
    return {"deleted": index_id}


@router.post("/closure")
async def build_closure(req: ClosureRequest):
    session = _get_index_session(req.index_id)
    if not req.seeds:
        raise HTTPException(400, "At least one seed package is required")

    result = await asyncio.to_thread(
        compute_closure, session.index, req.seeds, req.respider_upward,
    )
    closure_session = ClosureSession(index_id=session.id, result=result)
    state.add_closure(closure_session)
    return {
        "closure_id": closure_session.id,
        "index_id": session.id,
        "size": len(result.members),
        "members": sorted(result.members),
        "missing_seeds": sorted(result.missing_seeds),
        "unpublished_members": sorted(result.skipped),
        "maybe_respider": sorted(result.maybe_respider),
    }


@router.get("/closure/{closure_id}/ranking")
async def closure_ranking(closure_id: str, limit: int | None = Query(None, ge=1)):
    closure_session = _get_closure_session(closure_id)
    index = _get_index_session(closure_session.index_id).index

    ranking = rank_by_in_closure_reverse_deps(closure_session.result.members, index)
    if limit is not None:
        ranking = ranking[:limit]
    return {
        "closure_id": closure_id,
        "ranking": [{"name": name, "reverse_deps": count} for count, name in ranking],
    }


@router.get("/package/{index_id}/{name}")
async def package_info(index_id: str, name: str, closure_id: str | None = None):
    index = _get_index_session(index_id).index
    if not index.has_package(name) and name not in index.reverse_deps:
        raise HTTPException(404, f"Unknown package: {name}")

    data = {
        "name": name,
        "published": index.has_package(name),
        "versions": [
            {"version": r.version, "yanked": r.yanked} for r in sorted_versions(name, index)
        ],
        "dependencies": sorted(direct_dependencies(name, index)),
        "reverse_deps": sorted(index.dependents_of(name)),
    }

    if closure_id:
        closure_session = _get_closure_session(closure_id)
        if closure_session.index_id != index_id:
            raise HTTPException(400, "Closure was computed from a different index")
        members = closure_session.result.members
        data["in_closure"] = name in members
        data["in_closure_reverse_deps"] = in_closure_dependents(name, members, index)
        data["out_of_closure_reverse_deps"] = out_of_closure_dependents(name, members, index)

    return data


@router.post("/book")
async def write_book(req: BookRequest):
    closure_session = _get_closure_session(req.closure_id)
    index_session = _get_index_session(closure_session.index_id)

    config = BookConfig(
        index_dir=Path(index_session.index_dir),
        output_dir=_validate_path(req.output_dir, must_exist=False),
        seeds=sorted(closure_session.result.seed),
    )
    if req.title:
        config.title = req.title
    if req.ecosystem_label:
        config.ecosystem_label = req.ecosystem_label

    result = await asyncio.to_thread(
        run_book, index_session.index, closure_session.result, config,
    )
    return {
        "output_dir": str(result.output_dir),
        "closure_size": result.closure_size,
        "files_created": len(result.files_created),
        "summary_path": str(result.summary_path),
        "manifest_path": str(result.manifest_path),
    }
