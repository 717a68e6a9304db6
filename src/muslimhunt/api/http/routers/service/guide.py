"""Launch guide pages and the glossary."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from src.muslimhunt.api.http.deps import get_db_session
from src.muslimhunt.entities.service.guide import (
    LAUNCH_SECTIONS,
    Definition,
    DefinitionRepository,
    LaunchContent,
    LaunchContentRepository,
)

router = APIRouter(tags=["guide"])


@router.get("/launch-guide/{section}", response_model=list[LaunchContent])
def get_launch_section(section: str, session: Session = Depends(get_db_session)) -> list[LaunchContent]:
    if section not in LAUNCH_SECTIONS:
        raise HTTPException(status_code=404, detail="Section not found")
    return LaunchContentRepository(session).list_section(section)


@router.get("/definitions", response_model=list[Definition])
def list_definitions(
    q: str | None = Query(default=None, max_length=100),
    session: Session = Depends(get_db_session),
) -> list[Definition]:
    return DefinitionRepository(session).list_active(search=q)
