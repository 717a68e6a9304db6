"""Product directory: launch feed, search, detail, submissions and votes."""

from datetime import UTC, date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query
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
from src.muslimhunt.core.comment_tree import CommentNode, build_comment_tree
from src.muslimhunt.core.feed import (
    ArchiveMode,
    archive_window,
    archive_years,
    group_by_bucket,
    in_window,
)
from src.muslimhunt.core.search import find_by_slug, highlight, search_products
from src.muslimhunt.core.services.notification_service import NotificationService
from src.muslimhunt.core.services.realtime import ChangeHub
from src.muslimhunt.core.services.voting_service import VotingService
from src.muslimhunt.core.visibility import visible_to
from src.muslimhunt.entities.core.profile import Profile
from src.muslimhunt.entities.service.comment import Comment, CommentRepository
from src.muslimhunt.entities.service.notification import NotificationType
from src.muslimhunt.entities.service.product import (
    HalalStatus,
    Product,
    ProductRepository,
)
from src.muslimhunt.entities.service.vote import VoteTarget

router = APIRouter(prefix="/products", tags=["products"])


class ProductItem(Product):
    has_upvoted: bool = False
    comments_count: int = 0


class SearchItem(ProductItem):
    highlighted_name: str


class ProductFeed(BaseModel):
    today: list[ProductItem]
    yesterday: list[ProductItem]
    last_week: list[ProductItem]
    last_month: list[ProductItem]


class ProductDetail(BaseModel):
    product: ProductItem
    comments: list[CommentNode]
    upvoted_comment_ids: list[str] = Field(default_factory=list)


class ProductSubmission(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    tagline: str = Field(min_length=1, max_length=260)
    description: str = ""
    url: str | None = None
    website_url: str | None = None
    logo_url: str | None = None
    category: str = Field(min_length=1)
    halal_status: HalalStatus = HalalStatus.SELF_CERTIFIED
    sadaqah_info: str | None = None
    launch_date: datetime | None = None


class CommentSubmission(BaseModel):
    text: str = Field(min_length=1, max_length=5000)
    parent_id: str | None = None


class VoteResponse(BaseModel):
    voted: bool
    upvotes_count: int
    key: str


class ArchivePage(BaseModel):
    mode: ArchiveMode
    start: datetime
    end: datetime
    products: list[ProductItem]


def product_items(db: Session, products: list[Product], user: Profile | None) -> list[ProductItem]:
    voted = VotingService(db).voted_ids(user.id if user else None, VoteTarget.PRODUCT)
    counts = CommentRepository(db).count_by_product([p.id for p in products])
    return [
        ProductItem(
            **p.model_dump(exclude={"slug"}),
            has_upvoted=p.id in voted,
            comments_count=counts.get(p.id, 0),
        )
        for p in products
    ]


def _visible_product(db: Session, product_id: str, user: Profile | None) -> Product:
    """The product, or 404 when it is missing or still pending for this caller."""
    product = ProductRepository(db).get(product_id)
    if product is None or not visible_to(product.is_approved, product.user_id, user):
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _detail(db: Session, product: Product, user: Profile | None) -> ProductDetail:
    comments = CommentRepository(db).list_for_product(product.id)
    voted = VotingService(db).voted_ids(user.id if user else None, VoteTarget.COMMENT)
    return ProductDetail(
        product=product_items(db, [product], user)[0],
        comments=build_comment_tree(comments),
        upvoted_comment_ids=sorted(voted & {c.id for c in comments}),
    )


@router.get("/feed", response_model=ProductFeed)
def get_feed(
    session: Session = Depends(get_db_session),
    user: Profile | None = Depends(get_optional_user),
) -> ProductFeed:
    """Approved launches grouped into today, yesterday, last week and last month."""
    products = ProductRepository(session).list_approved()
    groups = group_by_bucket(product_items(session, products, user))
    return ProductFeed(**{bucket.value: items for bucket, items in groups.items()})


@router.get("", response_model=list[SearchItem])
def list_products(
    q: str | None = None,
    session: Session = Depends(get_db_session),
    user: Profile | None = Depends(get_optional_user),
) -> list[SearchItem]:
    products = search_products(ProductRepository(session).list_approved(), q)
    return [
        SearchItem(**item.model_dump(exclude={"slug"}), highlighted_name=highlight(item.name, q))
        for item in product_items(session, products, user)
    ]


@router.get("/archive", response_model=ArchivePage)
def get_archive(
    day: date | None = Query(default=None, alias="date"),
    mode: ArchiveMode = ArchiveMode.DAILY,
    session: Session = Depends(get_db_session),
    user: Profile | None = Depends(get_optional_user),
) -> ArchivePage:
    """Launches inside one day, week, month or year, most upvoted first."""
    start, end = archive_window(day or datetime.now(UTC).date(), mode)
    launched = in_window(ProductRepository(session).list_launched_between(start, end), start, end)
    return ArchivePage(mode=mode, start=start, end=end, products=product_items(session, launched, user))


@router.get("/archive/years")
def get_archive_years() -> list[int]:
    return archive_years()


@router.get("/mine", response_model=list[ProductItem])
def my_products(
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
) -> list[ProductItem]:
    """The caller's submissions, approved or not."""
    return product_items(session, ProductRepository(session).list_by_user(user.id), user)


@router.get("/slug/{slug}", response_model=ProductDetail)
def get_product_by_slug(
    slug: str,
    session: Session = Depends(get_db_session),
    user: Profile | None = Depends(get_optional_user),
) -> ProductDetail:
    product = find_by_slug(ProductRepository(session).list_approved(), slug)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return _detail(session, product, user)


@router.get("/{product_id}", response_model=ProductDetail)
def get_product(
    product_id: str,
    session: Session = Depends(get_db_session),
    user: Profile | None = Depends(get_optional_user),
) -> ProductDetail:
    return _detail(session, _visible_product(session, product_id, user), user)


@router.post("", response_model=Product, status_code=201, dependencies=protected_write)
def submit_product(
    submission: ProductSubmission,
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
    hub: ChangeHub = Depends(get_change_hub),
) -> Product:
    """Queue a product for moderation; ``launch_date`` becomes its launch time."""
    data = submission.model_dump(exclude={"launch_date"})
    launched_at = submission.launch_date or datetime.now(UTC)
    product = Product(**data, user_id=user.id, is_approved=False, created_at=launched_at)

    created = ProductRepository(session).create(product)
    session.commit()
    logger.info("Product {} submitted by {}", created.id, user.id)
    hub.publish_change("products", "INSERT", new=created)
    return created


@router.post("/{product_id}/vote", response_model=VoteResponse, dependencies=protected_write)
def vote_product(
    product_id: str,
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
    hub: ChangeHub = Depends(get_change_hub),
) -> VoteResponse:
    try:
        outcome = VotingService(session, hub).toggle_product(user, product_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    session.commit()
    return VoteResponse(voted=outcome.voted, upvotes_count=outcome.upvotes_count, key=outcome.key)


@router.get("/{product_id}/comments", response_model=list[CommentNode])
def list_comments(
    product_id: str,
    session: Session = Depends(get_db_session),
    user: Profile | None = Depends(get_optional_user),
) -> list[CommentNode]:
    _visible_product(session, product_id, user)
    return build_comment_tree(CommentRepository(session).list_for_product(product_id))


@router.post(
    "/{product_id}/comments",
    response_model=Comment,
    status_code=201,
    dependencies=protected_write,
)
def add_comment(
    product_id: str,
    submission: CommentSubmission,
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
    hub: ChangeHub = Depends(get_change_hub),
) -> Comment:
    """Comment on a product or reply to one of its comments."""
    product = _visible_product(session, product_id, user)

    comments = CommentRepository(session)
    if submission.parent_id:
        parent = comments.get(submission.parent_id)
        if parent is None or parent.product_id != product_id:
            raise HTTPException(status_code=400, detail="Reply target is not on this product")

    comment = comments.create(
        Comment(
            product_id=product_id,
            user_id=user.id,
            username=user.username,
            avatar_url=user.avatar_url,
            text=submission.text,
            is_maker=product.user_id == user.id,
            parent_id=submission.parent_id,
        )
    )
    if product.user_id and product.user_id != user.id:
        NotificationService(session, hub).notify(
            product.user_id,
            NotificationType.COMMENT,
            f"{user.username} commented on {product.name}",
            avatar_url=user.avatar_url,
        )
    session.commit()
    hub.publish_change("comments", "INSERT", new=comment)
    return comment
