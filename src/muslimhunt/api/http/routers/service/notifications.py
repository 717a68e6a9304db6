"""The signed-in member's notifications."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from src.muslimhunt.api.http.deps import (
    get_change_hub,
    get_current_user,
    get_db_session,
    protected_write,
)
from src.muslimhunt.core.services.notification_service import NotificationService
from src.muslimhunt.core.services.realtime import ChangeHub
from src.muslimhunt.core.timeago import format_time_ago
from src.muslimhunt.entities.core.profile import Profile
from src.muslimhunt.entities.service.notification import Notification

router = APIRouter(prefix="/notifications", tags=["notifications"])


class NotificationItem(Notification):
    time_ago: str = ""


class UnreadCount(BaseModel):
    unread_count: int


@router.get("", response_model=list[NotificationItem])
def list_notifications(
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
) -> list[NotificationItem]:
    """Newest first."""
    return [
        NotificationItem(**n.model_dump(), time_ago=format_time_ago(n.created_at))
        for n in NotificationService(session).list_for_user(user.id)
    ]


@router.get("/unread-count", response_model=UnreadCount)
def unread_count(
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
) -> UnreadCount:
    return UnreadCount(unread_count=NotificationService(session).unread_count(user.id))


@router.post("/read-all", response_model=UnreadCount, dependencies=protected_write)
def mark_all_read(
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
    hub: ChangeHub = Depends(get_change_hub),
) -> UnreadCount:
    service = NotificationService(session, hub)
    service.mark_all_read(user.id)
    session.commit()
    return UnreadCount(unread_count=0)


@router.post("/{notification_id}/read", response_model=Notification, dependencies=protected_write)
def mark_read(
    notification_id: str,
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
    hub: ChangeHub = Depends(get_change_hub),
) -> Notification:
    try:
        notification = NotificationService(session, hub).mark_read(user.id, notification_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    session.commit()
    return notification
