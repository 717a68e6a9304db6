"""Comment votes and the site-wide recent comments feed."""

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from src.muslimhunt.api.http.deps import (
    get_change_hub,
    get_current_user,
    get_db_session,
    protected_write,
)
from src.muslimhunt.api.http.routers.service.products import VoteResponse
from src.muslimhunt.core.comment_tree import merge_by_id
from src.muslimhunt.core.services.realtime import ChangeHub
from src.muslimhunt.core.services.voting_service import VotingService
from src.muslimhunt.core.timeago import format_time_ago
from src.muslimhunt.entities.core.profile import Profile, ProfileRepository
from src.muslimhunt.entities.service.comment import CommentRepository
from src.muslimhunt.entities.service.forum import ThreadCommentRepository, ThreadRepository
from src.muslimhunt.entities.service.product import ProductRepository
from src.muslimhunt.entities.service.story import StoryCommentRepository

router = APIRouter(prefix="/comments", tags=["comments"])


class RecentComment(BaseModel):
    id: str
    source: Literal["product", "thread", "story"]
    target_id: str
    user_id: str | None
    username: str
    avatar_url: str | None = None
    text: str
    created_at: datetime
    time_ago: str = ""


@router.get("/recent", response_model=list[RecentComment])
def recent_comments(
    limit: int = 50,
    session: Session = Depends(get_db_session),
) -> list[RecentComment]:
    """Newest comments across products, forum threads and stories."""
    limit = max(1, min(limit, 100))
    # comments on content still in moderation stay out of the public feed
    live_products = {p.id for p in ProductRepository(session).list_approved()}
    product_comments = [
        RecentComment(
            id=c.id,
            source="product",
            target_id=c.product_id,
            user_id=c.user_id,
            username=c.username,
            avatar_url=c.avatar_url,
            text=c.text,
            created_at=c.created_at,
        )
        for c in CommentRepository(session).list_recent(limit)
        if c.product_id in live_products
    ]

    threads = ThreadRepository(session)
    recent_replies = ThreadCommentRepository(session).list_recent(limit)
    live_threads = {
        thread_id
        for thread_id in {c.thread_id for c in recent_replies}
        if (thread := threads.get(thread_id)) is not None and thread.is_approved
    }
    thread_comments = [c for c in recent_replies if c.thread_id in live_threads]
    authors = ProfileRepository(session).get_many({c.author_id for c in thread_comments})
    forum_comments = []
    for c in thread_comments:
        author = authors.get(c.author_id)
        forum_comments.append(
            RecentComment(
                id=c.id,
                source="thread",
                target_id=c.thread_id,
                user_id=c.author_id,
                username=author.username if author else "Community Member",
                avatar_url=author.avatar_url if author else None,
                text=c.body,
                created_at=c.created_at,
            )
        )

    story_comments = [
        RecentComment(
            id=c.id,
            source="story",
            target_id=c.story_id,
            user_id=c.user_id,
            username=c.username,
            avatar_url=c.avatar_url,
            text=c.text,
            created_at=c.created_at,
        )
        for c in StoryCommentRepository(session).list_recent(limit)
    ]

    merged = merge_by_id(product_comments, [*forum_comments, *story_comments])[:limit]
    return [c.model_copy(update={"time_ago": format_time_ago(c.created_at)}) for c in merged]


@router.post("/{comment_id}/vote", response_model=VoteResponse, dependencies=protected_write)
def vote_comment(
    comment_id: str,
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
    hub: ChangeHub = Depends(get_change_hub),
) -> VoteResponse:
    try:
        outcome = VotingService(session, hub).toggle_comment(user, comment_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    session.commit()
    return VoteResponse(voted=outcome.voted, upvotes_count=outcome.upvotes_count, key=outcome.key)
