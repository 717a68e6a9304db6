"""Websocket change subscriptions.

Every socket drains one ``ChangeHub`` subscription. Clients may send
``{"type": "ping"}`` and get a pong back; any other message is ignored.
"""

import asyncio
from collections.abc import Callable
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from loguru import logger

from src.muslimhunt.api.http.app_data import ApplicationDependencies
from src.muslimhunt.api.http.deps import SESSION_COOKIE
from src.muslimhunt.core.services.profile_service import auth_user_from_profile
from src.muslimhunt.core.services.realtime import (
    AUTH_CHANNEL,
    ChangeEvent,
    RowFilter,
    Subscription,
    apply_notification_change,
)
from src.muslimhunt.entities.core.profile import Profile, ProfileRepository
from src.muslimhunt.entities.service.notification import NotificationRepository

router = APIRouter(prefix="/realtime", tags=["realtime"])

WATCHABLE_TABLES = {
    "products",
    "comments",
    "threads",
    "thread_comments",
    "notifications",
    "stories",
    "story_comments",
    "profiles",
    "follows",
}


def _app_deps(websocket: WebSocket) -> ApplicationDependencies:
    return websocket.app.state.app_dependencies


async def _socket_user(websocket: WebSocket) -> Profile | None:
    session_id = websocket.cookies.get(SESSION_COOKIE)
    if not session_id:
        return None
    deps = _app_deps(websocket)
    user_session = await deps.user_session_service.get_user_session(session_id)
    if not user_session:
        return None
    db = deps.database_service.get_session()
    try:
        return ProfileRepository(db).get(user_session.user_id)
    finally:
        db.close()


async def _read_client(websocket: WebSocket) -> None:
    """Answer pings until the client goes away."""
    while True:
        message = await websocket.receive_json()
        if isinstance(message, dict) and message.get("type") == "ping":
            await websocket.send_json({"type": "pong"})


async def _pump(
    websocket: WebSocket,
    subscription: Subscription,
    render: Callable[[ChangeEvent], dict[str, Any] | None],
) -> None:
    async def forward() -> None:
        while True:
            event = await subscription.get()
            message = render(event)
            if message is not None:
                await websocket.send_json(message)

    tasks = [asyncio.create_task(forward()), asyncio.create_task(_read_client(websocket))]
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                logger.warning("Realtime socket closed with error: {}", exc)
    finally:
        for task in tasks:
            task.cancel()
        _app_deps(websocket).change_hub.unsubscribe(subscription)


@router.websocket("/auth")
async def auth_events(websocket: WebSocket):
    """INITIAL_SESSION first, then sign-in state changes for the session user."""
    await websocket.accept()
    user = await _socket_user(websocket)

    if user is None:
        await websocket.send_json({"event": "INITIAL_SESSION", "session": None})
        try:
            await _read_client(websocket)
        except WebSocketDisconnect:
            pass
        return

    subscription = _app_deps(websocket).change_hub.subscribe(
        AUTH_CHANNEL, RowFilter(column="user_id", value=user.id)
    )
    await websocket.send_json(
        {"event": "INITIAL_SESSION", "session": {"user": asdict(auth_user_from_profile(user))}}
    )

    def render(event: ChangeEvent) -> dict[str, Any] | None:
        row = event.new or {}
        name = row.get("event")
        if name == "SIGNED_OUT":
            return {"event": name, "session": None}
        return {"event": name, "session": {"user": row.get("user")}}

    await _pump(websocket, subscription, render)


@router.websocket("/notifications")
async def notification_count(websocket: WebSocket):
    """Unread count now and after every change to the member's notifications."""
    await websocket.accept()
    user = await _socket_user(websocket)
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Session required")
        return

    deps = _app_deps(websocket)
    subscription = deps.change_hub.subscribe(
        "notifications", RowFilter(column="user_id", value=user.id)
    )
    db = deps.database_service.get_session()
    try:
        count = NotificationRepository(db).unread_count(user.id)
    finally:
        db.close()
    await websocket.send_json({"unread_count": count})

    def render(event: ChangeEvent) -> dict[str, Any] | None:
        nonlocal count
        updated = apply_notification_change(count, event)
        if updated == count:
            return None
        count = updated
        return {"unread_count": count}

    await _pump(websocket, subscription, render)


@router.websocket("/{table}")
async def table_changes(websocket: WebSocket, table: str, filter: str | None = None):
    """Stream ``{table, eventType, new, old}`` for one table, optionally filtered."""
    await websocket.accept()
    if table not in WATCHABLE_TABLES:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Unknown table")
        return
    try:
        row_filter = RowFilter.parse(filter)
    except ValueError as e:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=str(e))
        return

    subscription = _app_deps(websocket).change_hub.subscribe(table, row_filter)
    await websocket.send_json({"type": "subscribed", "table": table, "filter": filter})
    await _pump(websocket, subscription, lambda event: event.to_message())
