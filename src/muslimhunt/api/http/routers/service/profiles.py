"""Member profiles, avatars and follows."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from loguru import logger
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.muslimhunt.api.http.deps import (
    get_change_hub,
    get_current_user,
    get_db_session,
    get_file_storage_service,
    get_optional_user,
    protected_write,
)
from src.muslimhunt.api.http.routers.service.products import ProductItem, product_items
from src.muslimhunt.core.services import FileStorageService
from src.muslimhunt.core.services.file_storage import (
    StorageError,
    UploadTooLarge,
    avatar_object_path,
)
from src.muslimhunt.core.services.follow_service import FollowService
from src.muslimhunt.core.services.profile_service import ProfileService, auth_user_from_profile
from src.muslimhunt.core.services.realtime import ChangeHub, publish_auth_event
from src.muslimhunt.entities.core.profile import Profile, ProfileRepository, ProfileView
from src.muslimhunt.entities.service.product import ProductRepository

router = APIRouter(prefix="/profiles", tags=["profiles"])

AVATAR_BUCKET = "avatars"


class ProfileUpdate(BaseModel):
    username: str | None = Field(default=None, min_length=1, max_length=80)
    headline: str | None = Field(default=None, max_length=160)
    bio: str | None = Field(default=None, max_length=1000)
    website_url: str | None = None
    twitter_url: str | None = None
    avatar_url: str | None = None


class AvatarUpload(BaseModel):
    url: str
    profile: Profile


class FollowState(BaseModel):
    following: bool
    followers_count: int


def _save_profile(
    session: Session, hub: ChangeHub, user: Profile, changes: dict
) -> Profile:
    updated = ProfileService(session).update(user.id, changes)
    session.commit()
    hub.publish_change("profiles", "UPDATE", new=updated.public_row(), old=user.public_row())
    publish_auth_event(hub, "USER_UPDATED", updated.id, asdict(auth_user_from_profile(updated)))
    return updated


@router.put("/me", response_model=Profile, dependencies=protected_write)
def update_my_profile(
    update: ProfileUpdate,
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
    hub: ChangeHub = Depends(get_change_hub),
) -> Profile:
    """Save the fields that were sent; omitted fields keep their value."""
    return _save_profile(session, hub, user, update.model_dump(exclude_unset=True))


@router.post("/me/avatar", response_model=AvatarUpload, dependencies=protected_write)
def upload_avatar(
    file: UploadFile = File(...),
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
    storage: FileStorageService = Depends(get_file_storage_service),
    hub: ChangeHub = Depends(get_change_hub),
) -> AvatarUpload:
    if not (file.content_type or "").startswith("image/") or not storage.extension_allowed(file.filename):
        raise HTTPException(status_code=400, detail="Avatar must be an image file")

    path = avatar_object_path(user.id, file.filename)
    try:
        storage.upload(AVATAR_BUCKET, path, file.file)
    except UploadTooLarge as e:
        raise HTTPException(status_code=413, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))

    url = storage.public_url(AVATAR_BUCKET, path)
    logger.info("Avatar uploaded for {}", user.id)
    return AvatarUpload(url=url, profile=_save_profile(session, hub, user, {"avatar_url": url}))


@router.get("/{profile_id}", response_model=ProfileView)
def get_profile(
    profile_id: str,
    session: Session = Depends(get_db_session),
    viewer: Profile | None = Depends(get_optional_user),
) -> ProfileView:
    """Stored profile with display defaults, or a placeholder for unknown members."""
    return ProfileService(session).view(profile_id, viewer.id if viewer else None)


@router.get("/{profile_id}/products", response_model=list[ProductItem])
def get_profile_products(
    profile_id: str,
    session: Session = Depends(get_db_session),
    viewer: Profile | None = Depends(get_optional_user),
) -> list[ProductItem]:
    products = ProductRepository(session).list_by_user(profile_id)
    if viewer is None or viewer.id != profile_id:
        products = [p for p in products if p.is_approved]
    return product_items(session, products, viewer)


@router.post("/{profile_id}/follow", response_model=FollowState, dependencies=protected_write)
def toggle_follow(
    profile_id: str,
    session: Session = Depends(get_db_session),
    user: Profile = Depends(get_current_user),
    hub: ChangeHub = Depends(get_change_hub),
) -> FollowState:
    if ProfileRepository(session).get(profile_id) is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    try:
        outcome = FollowService(session).toggle(user.id, profile_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    session.commit()
    hub.publish_change(
        "follows",
        "INSERT" if outcome.following else "DELETE",
        new={"follower_id": user.id, "following_id": profile_id} if outcome.following else None,
        old=None if outcome.following else {"follower_id": user.id, "following_id": profile_id},
    )
    return FollowState(following=outcome.following, followers_count=outcome.followers_count)
