"""Approval queue for submitted products and forum threads."""

from dataclasses import dataclass, field

from loguru import logger
from sqlmodel import Session

from src.muslimhunt.core.services.notification_service import NotificationService
from src.muslimhunt.core.services.realtime import ChangeHub
from src.muslimhunt.entities.core.profile import Profile, ProfileRepository
from src.muslimhunt.entities.service.comment import CommentRepository
from src.muslimhunt.entities.service.forum import (
    ForumCategory,
    ForumCategoryRepository,
    Thread,
    ThreadRepository,
)
from src.muslimhunt.entities.service.notification import NotificationType
from src.muslimhunt.entities.service.product import Product, ProductRepository
from src.muslimhunt.entities.service.vote import VoteRepository, VoteTarget

DEFAULT_THREAD_REJECTION = "Thread did not meet community guidelines."
DEFAULT_PRODUCT_REJECTION = "Product did not meet the listing guidelines."


@dataclass
class PendingThread:
    thread: Thread
    author: Profile | None = None
    category: ForumCategory | None = None


@dataclass
class PendingQueue:
    products: list[Product] = field(default_factory=list)
    threads: list[PendingThread] = field(default_factory=list)


def _thread_matches(item: PendingThread, needle: str) -> bool:
    haystack = [
        item.thread.title,
        item.author.username if item.author else None,
        item.category.name if item.category else None,
    ]
    return any(value and needle in value.lower() for value in haystack)


class ModerationService:
    def __init__(self, db_session: Session, hub: ChangeHub | None = None):
        self._products = ProductRepository(db_session)
        self._comments = CommentRepository(db_session)
        self._votes = VoteRepository(db_session)
        self._threads = ThreadRepository(db_session)
        self._categories = ForumCategoryRepository(db_session)
        self._profiles = ProfileRepository(db_session)
        self._notifications = NotificationService(db_session, hub)
        self._hub = hub

    def pending(self, query: str | None = None) -> PendingQueue:
        """Unapproved products and threads, oldest first.

        ``query`` narrows threads by title, author username or category name.
        """
        threads = self._threads.list_pending()
        authors = self._profiles.get_many({t.author_id for t in threads})
        categories = self._categories.get_many({t.category_id for t in threads})
        items = [
            PendingThread(
                thread=t, author=authors.get(t.author_id), category=categories.get(t.category_id)
            )
            for t in threads
        ]
        if query and query.strip():
            needle = query.strip().lower()
            items = [item for item in items if _thread_matches(item, needle)]
        return PendingQueue(products=self._products.list_pending(), threads=items)

    def approve_product(self, product_id: str) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise ValueError(f"Product {product_id} not found")

        approved = self._products.update(product.model_copy(update={"is_approved": True}))
        self._notifications.notify(
            approved.user_id,
            NotificationType.APPROVAL,
            f'Your product "{approved.name}" has been approved and is now live!',
        )
        self._publish("products", "UPDATE", new=approved, old=product)
        logger.info("Approved product {}", product_id)
        return approved

    def reject_product(self, product_id: str, reason: str | None = None) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise ValueError(f"Product {product_id} not found")

        self._comments.delete_for_product(product_id)
        self._votes.delete_for_target(VoteTarget.PRODUCT, product_id)
        self._products.delete(product_id)
        self._notifications.notify(
            product.user_id,
            NotificationType.REJECTION,
            f'Your product "{product.name}" was removed. '
            f"Reason: {(reason or '').strip() or DEFAULT_PRODUCT_REJECTION}",
        )
        self._publish("products", "DELETE", old=product)
        logger.info("Rejected product {}", product_id)
        return product

    def approve_thread(self, thread_id: str) -> Thread:
        thread = self._threads.get(thread_id)
        if thread is None:
            raise ValueError(f"Thread {thread_id} not found")

        approved = self._threads.set_approved(thread_id, True)
        self._notifications.notify(
            approved.author_id,
            NotificationType.THREAD_APPROVED,
            f'Your thread "{approved.title}" has been approved and is now live!',
        )
        self._publish("threads", "UPDATE", new=approved, old=thread)
        logger.info("Approved thread {}", thread_id)
        return approved

    def reject_thread(self, thread_id: str, reason: str | None = None) -> Thread:
        thread = self._threads.get(thread_id)
        if thread is None:
            raise ValueError(f"Thread {thread_id} not found")

        self._votes.delete_for_target(VoteTarget.THREAD, thread_id)
        self._threads.delete(thread_id)
        self._notifications.notify(
            thread.author_id,
            NotificationType.THREAD_REJECTED,
            f'Your thread "{thread.title}" was removed. '
            f"Reason: {(reason or '').strip() or DEFAULT_THREAD_REJECTION}",
        )
        self._publish("threads", "DELETE", old=thread)
        logger.info("Rejected thread {}", thread_id)
        return thread

    def _publish(self, table, change_type, new=None, old=None) -> None:
        if self._hub is None:
            return
        try:
            self._hub.publish_change(table, change_type, new=new, old=old)
        except Exception as e:
            logger.warning("Realtime publish failed for {}: {}", table, e)
