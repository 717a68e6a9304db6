"""Editorial stories and their comments."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.muslimhunt.api.http.deps import (
    get_change_hub,
    get_current_user,
    get_db_session,
    protected_write,
)
from src.muslimhunt.core.comment_tree import CommentNode, build_comment_tree
from src.muslimhunt.core.services.realtime import ChangeHub
from src.muslimhunt.core.timeago import format_story_date
from src.muslimhunt.entities.core.profile import Profile, default_avatar_url
from src.muslimhunt.entities.service.story import (
    Story,
    StoryCategory,
    StoryCategoryRepository,
    StoryComment,
    StoryCommentRepository,
    StoryRepository,
)

router = APIRouter(prefix="/stories", tags=["stories"])


class StoryItem(Story):
    date_label: str = ""
    category: StoryCategory | None = None


class StoryCommentSubmission(BaseModel):
    text: str = Field(min_length=1, max_length=5000)
    parent_id: str | None = None


def _with_labels(session: Session, stories: list[Story]) -> list[StoryItem]:
    categories = StoryCategoryRepository(session)
    cache: dict[str, StoryCategory | None] = {}
    items = []
    for story in stories:
        if story.category_id not in cache:
            cache[story.category_id] = categories.get(story.category_id)
        items.append(
            StoryItem(
                **story.model_dump(),
                date_label=format_story_date(story.published_at),
                category=cache[story.category_id],
            )
        )
    return items


def _published(session: Session, slug: str) -> Story:
    story = StoryRepository(session).get_published_by_slug(slug)
    if story is None:
        raise HTTPException(status_code=404, detail="Story not found")
    return story


@router.get("/categories", response_model=list[StoryCategory])
def list_categories(session: Session = Depends(get_db_session)) -> list[StoryCategory]:
    return StoryCategoryRepository(session).list_active()


@router.get("", response_model=list[StoryItem])
def list_stories(
    category: str | None = None,
    session: Session = Depends(get_db_session),
) -> list[StoryItem]:
    """Published stories, newest first, optionally limited to one category slug."""
    category_id = None
    if category:
        found = StoryCategoryRepository(session).get_by_slug(category)
        if found is None:
            return []
        category_id = found.id
    return _with_labels(session, StoryRepository(session).list_published(category_id))


@router.get("/{slug}", response_model=StoryItem)
def get_story(slug: str, session: Session = Depends(get_db_session)) -> StoryItem:
    """Counts a view each time the story is opened."""
    story = _published(session, slug)
    story = StoryRepository(session).increment(story.id, views=1)
    session.commit()
    return _with_labels(session, [story])[0]


@router.get("/{slug}/comments", response_model=list[CommentNode])
def list_story_comments(slug: str, session: Session = Depends(get_db_session)) -> list[CommentNode]:
    story = _published(session, slug)
    return build_comment_tree(StoryCommentRepository(session).list_for_story(story.id))


@router.post(
    "/{slug}/comments",
    response_model=StoryComment,
    status_code=201,
    dependencies=protected_write,
)
def add_story_comment(
    slug: str,
    submission: StoryCommentSubmission,
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
    hub: ChangeHub = Depends(get_change_hub),
) -> StoryComment:
    story = _published(session, slug)
    comments = StoryCommentRepository(session)
    if submission.parent_id:
        parent = comments.get(submission.parent_id)
        if parent is None or parent.story_id != story.id:
            raise HTTPException(status_code=400, detail="Reply target is not on this story")

    comment = comments.create(
        StoryComment(
            story_id=story.id,
            user_id=user.id,
            username=user.username,
            avatar_url=user.avatar_url or default_avatar_url(user.id),
            text=submission.text,
            parent_id=submission.parent_id,
        )
    )
    StoryRepository(session).increment(story.id, comments=1)
    session.commit()
    hub.publish_change("story_comments", "INSERT", new=comment)
    return comment
