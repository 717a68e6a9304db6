"""Entity: NewsletterSubscriber."""

from pydantic import EmailStr

from src.muslimhunt.entities._base import Entity


class NewsletterSubscriber(Entity):
    email: EmailStr
