"""Vote toggling for products, product comments and forum threads."""

from dataclasses import dataclass

from loguru import logger
from sqlmodel import Session

from src.muslimhunt.core.services.notification_service import NotificationService
from src.muslimhunt.core.services.realtime import ChangeHub
from src.muslimhunt.core.visibility import visible_to
from src.muslimhunt.core.voting import apply_toggle, vote_key
from src.muslimhunt.entities.core.profile import Profile
from src.muslimhunt.entities.service.comment import CommentRepository
from src.muslimhunt.entities.service.forum import ThreadRepository
from src.muslimhunt.entities.service.notification import NotificationType
from src.muslimhunt.entities.service.product import ProductRepository
from src.muslimhunt.entities.service.vote import VoteRepository, VoteTarget


@dataclass(frozen=True)
class VoteOutcome:
    voted: bool
    upvotes_count: int
    key: str


class VotingService:
    def __init__(self, db_session: Session, hub: ChangeHub | None = None):
        self._votes = VoteRepository(db_session)
        self._products = ProductRepository(db_session)
        self._comments = CommentRepository(db_session)
        self._threads = ThreadRepository(db_session)
        self._notifications = NotificationService(db_session, hub)
        self._hub = hub

    def _toggle(self, voter_id: str, target: VoteTarget, target_id: str, count: int) -> tuple[bool, int]:
        had_voted = self._votes.exists(voter_id, target, target_id)
        result = apply_toggle(count, had_voted)
        if result.voted:
            self._votes.add(voter_id, target, target_id)
        else:
            self._votes.remove(voter_id, target, target_id)
        return result.voted, result.count - count

    def toggle_product(self, voter: Profile, product_id: str) -> VoteOutcome:
        """Raises ValueError when the product does not exist or is hidden from ``voter``."""
        product = self._products.get(product_id)
        if product is None or not visible_to(product.is_approved, product.user_id, voter):
            raise ValueError(f"Product {product_id} not found")

        voted, delta = self._toggle(voter.id, VoteTarget.PRODUCT, product_id, product.upvotes_count)
        count = self._products.adjust_upvotes(product_id, delta)

        if voted and product.user_id and product.user_id != voter.id:
            self._notifications.notify(
                product.user_id,
                NotificationType.UPVOTE,
                f"{voter.username} upvoted {product.name}",
                avatar_url=voter.avatar_url,
            )
        self._publish("products", {"id": product_id, "upvotes_count": count})
        return VoteOutcome(voted=voted, upvotes_count=count, key=vote_key(voter.id, product_id))

    def toggle_comment(self, voter: Profile, comment_id: str) -> VoteOutcome:
        comment = self._comments.get(comment_id)
        product = self._products.get(comment.product_id) if comment else None
        if product is None or not visible_to(product.is_approved, product.user_id, voter):
            raise ValueError(f"Comment {comment_id} not found")

        voted, delta = self._toggle(voter.id, VoteTarget.COMMENT, comment_id, comment.upvotes_count)
        count = self._comments.adjust_upvotes(comment_id, delta)
        self._publish(
            "comments",
            {"id": comment_id, "product_id": comment.product_id, "upvotes_count": count},
        )
        return VoteOutcome(voted=voted, upvotes_count=count, key=vote_key(voter.id, comment_id))

    def toggle_thread(self, voter: Profile, thread_id: str) -> VoteOutcome:
        thread = self._threads.get(thread_id)
        if thread is None or not visible_to(thread.is_approved, thread.author_id, voter):
            raise ValueError(f"Thread {thread_id} not found")

        voted, delta = self._toggle(voter.id, VoteTarget.THREAD, thread_id, thread.upvotes)
        updated = self._threads.adjust_counters(thread_id, upvotes=delta)
        self._publish("threads", {"id": thread_id, "upvotes": updated.upvotes})
        return VoteOutcome(voted=voted, upvotes_count=updated.upvotes, key=vote_key(voter.id, thread_id))

    def voted_ids(self, voter_id: str | None, target: VoteTarget) -> set[str]:
        if not voter_id:
            return set()
        return self._votes.voted_target_ids(voter_id, target)

    def _publish(self, table: str, row: dict) -> None:
        if self._hub is None:
            return
        try:
            self._hub.publish_change(table, "UPDATE", new=row)
        except Exception as e:
            logger.warning("Realtime publish failed for {}: {}", table, e)
