"""Profiles API router.

Endpoints:
- POST /api/profiles - Create a profile for an authenticated account
- GET /api/profiles/{username} - Profile with view/favorite stats
- PATCH /api/profiles/me - Update the calling profile
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import get_profile
from ..models import Profile, Recipe, SavedRecipe
from ..schemas import ProfileCreate, ProfileUpdate, ProfileOut, ProfileDetailOut, ProfileStats
from ..services.unit_options import is_valid_unit_option
from ..settings import settings

router = APIRouter()
logger = logging.getLogger("almanac.profiles")


@router.post("/profiles", response_model=ProfileOut, status_code=201)
def create_profile(payload: ProfileCreate, db: Session = Depends(get_db)):
    username = payload.username.strip()
    if not username:
        raise HTTPException(status_code=400, detail="Username is required")

    default_unit = payload.default_unit or settings.default_unit
    if not is_valid_unit_option(default_unit):
        raise HTTPException(status_code=400, detail=f"Unknown unit option: {default_unit}")

    existing = db.execute(
        select(Profile).where(Profile.username == username)
    ).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=409, detail="Username is already taken")

    profile = Profile(
        username=username,
        profile_description=payload.profile_description,
        avatar_url=payload.avatar_url,
        default_unit=default_unit,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info(f"Created profile {profile.username} ({profile.id})")
    return profile


def profile_stats(db: Session, profile: Profile) -> ProfileStats:
    """Views across the profile's public recipes and how many it has favorited."""
    total_views = db.execute(
        select(func.coalesce(func.sum(Recipe.view_count), 0)).where(
            Recipe.user_id == profile.id,
            Recipe.is_public.is_(True),
        )
    ).scalar_one()
    recipe_count = db.execute(
        select(func.count(Recipe.id)).where(Recipe.user_id == profile.id)
    ).scalar_one()
    favorited = db.execute(
        select(func.count(SavedRecipe.id)).where(SavedRecipe.user_id == profile.id)
    ).scalar_one()

    return ProfileStats(
        total_views=int(total_views),
        favorited_recipes_count=int(favorited),
        recipe_count=int(recipe_count),
    )


@router.get("/profiles/{username}", response_model=ProfileDetailOut)
def get_profile_detail(username: str, db: Session = Depends(get_db)):
    profile = db.execute(
        select(Profile).where(Profile.username == username)
    ).scalar_one_or_none()
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    return ProfileDetailOut(
        profile=ProfileOut.model_validate(profile),
        stats=profile_stats(db, profile),
    )


@router.patch("/profiles/me", response_model=ProfileOut)
def update_my_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_profile),
):
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    logger.info(f"Updated profile {profile.username}")
    return profile
