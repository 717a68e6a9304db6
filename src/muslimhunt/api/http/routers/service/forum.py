"""Forum: categories, threads, replies and thread votes."""

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.muslimhunt.api.http.deps import (
    get_change_hub,
    get_current_user,
    get_db_session,
    get_optional_user,
    protected_write,
)
from src.muslimhunt.api.http.routers.service.products import VoteResponse
from src.muslimhunt.core.comment_tree import CommentNode, build_comment_tree
from src.muslimhunt.core.search import slugify, unique_slug
from src.muslimhunt.core.services.realtime import ChangeHub
from src.muslimhunt.core.services.voting_service import VotingService
from src.muslimhunt.core.timeago import format_time_ago
from src.muslimhunt.core.visibility import visible_to
from src.muslimhunt.entities.core.profile import Profile, ProfileRepository, default_avatar_url
from src.muslimhunt.entities.service.forum import (
    ForumCategory,
    ForumCategoryRepository,
    Thread,
    ThreadComment,
    ThreadCommentRepository,
    ThreadRepository,
)
from src.muslimhunt.entities.service.vote import VoteTarget

router = APIRouter(prefix="/forum", tags=["forum"])


class Author(BaseModel):
    id: str
    username: str
    avatar_url: str


class ThreadSummary(Thread):
    author: Author
    time_ago: str = ""


class CategoryThreads(BaseModel):
    category: ForumCategory
    threads: list[ThreadSummary]


class ThreadReply(ThreadComment):
    author: Author


class ThreadDetail(BaseModel):
    thread: ThreadSummary
    category: ForumCategory | None = None
    comments: list[CommentNode]
    has_upvoted: bool = False


class NewThread(BaseModel):
    title: str = Field(min_length=3, max_length=200)
    body: str = Field(min_length=1)
    category_id: str


class NewReply(BaseModel):
    body: str = Field(min_length=1, max_length=5000)
    parent_id: str | None = None


def _author(profiles: dict[str, Profile], author_id: str) -> Author:
    profile = profiles.get(author_id)
    if profile is None:
        return Author(id=author_id, username="Community Member", avatar_url=default_avatar_url(author_id))
    return Author(
        id=profile.id,
        username=profile.username,
        avatar_url=profile.avatar_url or default_avatar_url(profile.id),
    )


def _summaries(session: Session, threads: list[Thread]) -> list[ThreadSummary]:
    profiles = ProfileRepository(session).get_many({t.author_id for t in threads})
    return [
        ThreadSummary(
            **t.model_dump(),
            author=_author(profiles, t.author_id),
            time_ago=format_time_ago(t.created_at),
        )
        for t in threads
    ]


def _visible_thread(thread: Thread | None, user: Profile | None) -> Thread:
    """Unapproved threads are only shown to their author and to admins."""
    if thread is None or not visible_to(thread.is_approved, thread.author_id, user):
        raise HTTPException(status_code=404, detail="Thread not found")
    return thread


@router.get("/categories", response_model=list[ForumCategory])
def list_categories(session: Session = Depends(get_db_session)) -> list[ForumCategory]:
    return ForumCategoryRepository(session).list_all()


@router.get("/categories/{slug}", response_model=CategoryThreads)
def get_category(slug: str, session: Session = Depends(get_db_session)) -> CategoryThreads:
    category = ForumCategoryRepository(session).get_by_slug(slug)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    threads = ThreadRepository(session).list_for_category(category.id)
    return CategoryThreads(category=category, threads=_summaries(session, threads))


@router.get("/search", response_model=list[ThreadSummary])
def search_threads(
    q: str | None = None,
    session: Session = Depends(get_db_session),
) -> list[ThreadSummary]:
    """Approved threads whose title or body contains ``q``, newest first."""
    if not q or not q.strip():
        return []
    return _summaries(session, ThreadRepository(session).search(q.strip()))


@router.get("/threads/{slug}", response_model=ThreadDetail)
def get_thread(
    slug: str,
    session: Session = Depends(get_db_session),
    user: Profile | None = Depends(get_optional_user),
) -> ThreadDetail:
    thread = _visible_thread(ThreadRepository(session).get_by_slug(slug), user)

    replies = ThreadCommentRepository(session).list_for_thread(thread.id)
    profiles = ProfileRepository(session).get_many({r.author_id for r in replies})
    views = [ThreadReply(**r.model_dump(), author=_author(profiles, r.author_id)) for r in replies]
    voted = VotingService(session).voted_ids(user.id if user else None, VoteTarget.THREAD)

    return ThreadDetail(
        thread=_summaries(session, [thread])[0],
        category=ForumCategoryRepository(session).get(thread.category_id),
        comments=build_comment_tree(views),
        has_upvoted=thread.id in voted,
    )


@router.post("/threads", response_model=Thread, status_code=201, dependencies=protected_write)
def create_thread(
    submission: NewThread,
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
    hub: ChangeHub = Depends(get_change_hub),
) -> Thread:
    """Start a thread; it stays hidden until a moderator approves it."""
    if ForumCategoryRepository(session).get(submission.category_id) is None:
        raise HTTPException(status_code=400, detail="Unknown forum category")

    threads = ThreadRepository(session)
    slug = unique_slug(slugify(submission.title), threads.slug_exists)
    thread = threads.create(
        Thread(
            title=submission.title,
            slug=slug,
            body=submission.body,
            category_id=submission.category_id,
            author_id=user.id,
        )
    )
    session.commit()
    logger.info("Thread {} created by {}", thread.id, user.id)
    hub.publish_change("threads", "INSERT", new=thread)
    return thread


@router.post(
    "/threads/{thread_id}/comments",
    response_model=ThreadComment,
    status_code=201,
    dependencies=protected_write,
)
def reply_to_thread(
    thread_id: str,
    submission: NewReply,
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
    hub: ChangeHub = Depends(get_change_hub),
) -> ThreadComment:
    threads = ThreadRepository(session)
    thread = _visible_thread(threads.get(thread_id), user)

    replies = ThreadCommentRepository(session)
    if submission.parent_id:
        parent = replies.get(submission.parent_id)
        if parent is None or parent.thread_id != thread.id:
            raise HTTPException(status_code=400, detail="Reply target is not in this thread")

    reply = replies.create(
        ThreadComment(
            thread_id=thread.id,
            author_id=user.id,
            body=submission.body,
            parent_id=submission.parent_id,
        )
    )
    updated = threads.adjust_counters(thread.id, comments=1)
    session.commit()
    hub.publish_change("thread_comments", "INSERT", new=reply)
    hub.publish_change("threads", "UPDATE", new={"id": thread.id, "comments_count": updated.comments_count})
    return reply


@router.post("/threads/{thread_id}/vote", response_model=VoteResponse, dependencies=protected_write)
def vote_thread(
    thread_id: str,
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
    hub: ChangeHub = Depends(get_change_hub),
) -> VoteResponse:
    try:
        outcome = VotingService(session, hub).toggle_thread(user, thread_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    session.commit()
    return VoteResponse(voted=outcome.voted, upvotes_count=outcome.upvotes_count, key=outcome.key)
