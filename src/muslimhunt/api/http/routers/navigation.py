"""Path and view lookups for the single-page client."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from src.muslimhunt.core.navigation import View, next_path, resolve_path

router = APIRouter(prefix="/navigation", tags=["navigation"])


class ResolvedPath(BaseModel):
    view: View
    slug: str | None = None


class PathTarget(BaseModel):
    path: str
    push: bool


@router.get("/resolve", response_model=ResolvedPath)
def resolve(path: str = "/") -> ResolvedPath:
    view, slug = resolve_path(path)
    return ResolvedPath(view=view, slug=slug)


@router.get("/path", response_model=PathTarget)
def path(view: str, slug: str | None = None, current: str | None = None) -> PathTarget:
    """Canonical path for ``view``; ``push`` is false when it equals ``current``."""
    try:
        target_view = View(view)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown view: {view}")

    target = next_path(current or "", target_view, slug)
    if target is None:
        return PathTarget(path=current, push=False)
    return PathTarget(path=target, push=True)
