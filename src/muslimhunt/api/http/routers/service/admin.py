"""Moderation queue for admins."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from src.muslimhunt.api.http.deps import (
    get_change_hub,
    get_db_session,
    protected_write,
    require_admin,
)
from src.muslimhunt.core.services.moderation_service import ModerationService
from src.muslimhunt.core.services.realtime import ChangeHub
from src.muslimhunt.entities.core.profile import Profile
from src.muslimhunt.entities.service.forum import ForumCategory, Thread
from src.muslimhunt.entities.service.product import Product

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


class PendingThreadItem(BaseModel):
    thread: Thread
    author: Profile | None = None
    category: ForumCategory | None = None


class PendingResponse(BaseModel):
    products: list[Product]
    threads: list[PendingThreadItem]


class Rejection(BaseModel):
    reason: str | None = None


@router.get("/pending", response_model=PendingResponse)
def pending(q: str | None = None, session: Session = Depends(get_db_session)) -> PendingResponse:
    queue = ModerationService(session).pending(q)
    return PendingResponse(
        products=queue.products,
        threads=[
            PendingThreadItem(thread=t.thread, author=t.author, category=t.category)
            for t in queue.threads
        ],
    )


@router.post("/products/{product_id}/approve", response_model=Product, dependencies=protected_write)
def approve_product(
    product_id: str,
    session: Session = Depends(get_db_session),
    hub: ChangeHub = Depends(get_change_hub),
) -> Product:
    try:
        product = ModerationService(session, hub).approve_product(product_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    session.commit()
    return product


@router.post("/products/{product_id}/reject", dependencies=protected_write)
def reject_product(
    product_id: str,
    rejection: Rejection | None = None,
    session: Session = Depends(get_db_session),
    hub: ChangeHub = Depends(get_change_hub),
) -> dict[str, str]:
    try:
        ModerationService(session, hub).reject_product(
            product_id, rejection.reason if rejection else None
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    session.commit()
    return {"message": "Product rejected"}


@router.post("/threads/{thread_id}/approve", response_model=Thread, dependencies=protected_write)
def approve_thread(
    thread_id: str,
    session: Session = Depends(get_db_session),
    hub: ChangeHub = Depends(get_change_hub),
) -> Thread:
    try:
        thread = ModerationService(session, hub).approve_thread(thread_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    session.commit()
    return thread


@router.post("/threads/{thread_id}/reject", dependencies=protected_write)
def reject_thread(
    thread_id: str,
    rejection: Rejection | None = None,
    session: Session = Depends(get_db_session),
    hub: ChangeHub = Depends(get_change_hub),
) -> dict[str, str]:
    """Delete the thread and tell its author why."""
    try:
        ModerationService(session, hub).reject_thread(
            thread_id, rejection.reason if rejection else None
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    session.commit()
    return {"message": "Thread rejected"}
