from fastapi import APIRouter, Depends
from loguru import logger
from pydantic import BaseModel, EmailStr
from sqlmodel import Session

from src.muslimhunt.api.http.deps import get_db_session
from src.muslimhunt.api.http.middleware.limiter import rate_limit
from src.muslimhunt.entities.service.newsletter import NewsletterRepository

router = APIRouter(prefix="/newsletter", tags=["newsletter"])


class Subscription(BaseModel):
    email: EmailStr


class SubscriptionResult(BaseModel):
    email: str
    subscribed: bool
    already_subscribed: bool
    message: str


@router.post("/subscribe", response_model=SubscriptionResult, dependencies=[Depends(rate_limit())])
def subscribe(body: Subscription, session: Session = Depends(get_db_session)) -> SubscriptionResult:
    """Subscribe an address; repeating it is a no-op that still succeeds."""
    subscriber, is_new = NewsletterRepository(session).subscribe(str(body.email))
    session.commit()
    if is_new:
        logger.info("Newsletter subscriber added")
    return SubscriptionResult(
        email=subscriber.email,
        subscribed=True,
        already_subscribed=not is_new,
        message="Thanks for subscribing!" if is_new else "You're already subscribed.",
    )
