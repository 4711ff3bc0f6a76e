"""Almanac router: a profile's own recipes plus the recipes it has favorited.

Endpoints:
- GET /api/almanac/{username}?filter=all|owned|saved&tag=
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_, select
from sqlalchemy.orm import Session, joinedload

from ..db import get_db
from ..deps import get_profile_optional
from ..models import Profile, Recipe, SavedRecipe
from ..schemas import AlmanacResponse, AlmanacStats
from .recipes import favorite_counts, recipe_to_list_out

router = APIRouter()


@router.get("/almanac/{username}", response_model=AlmanacResponse)
def get_almanac(
    username: str,
    db: Session = Depends(get_db),
    viewer: Optional[Profile] = Depends(get_profile_optional),
    filter: Literal["all", "owned", "saved"] = Query("all"),
    tag: Optional[str] = Query(None),
):
    profile = db.execute(
        select(Profile).where(Profile.username == username)
    ).scalar_one_or_none()
    if not profile:
        raise HTTPException(status_code=404, detail="User not found")

    is_self = viewer is not None and viewer.id == profile.id

    owned_stmt = select(Recipe).options(joinedload(Recipe.owner)).where(Recipe.user_id == profile.id)
    if not is_self:
        owned_stmt = owned_stmt.where(Recipe.is_public.is_(True))
    owned = list(db.execute(owned_stmt.order_by(Recipe.created_at.desc())).scalars().all())

    # Favorites of other people's recipes; private ones are only listed for their owner
    visible = Recipe.is_public.is_(True)
    if viewer is not None:
        visible = or_(visible, Recipe.user_id == viewer.id)
    saved_stmt = (
        select(Recipe)
        .join(SavedRecipe, SavedRecipe.recipe_id == Recipe.id)
        .options(joinedload(Recipe.owner))
        .where(SavedRecipe.user_id == profile.id, Recipe.user_id != profile.id, visible)
        .order_by(SavedRecipe.saved_at.desc())
    )
    saved = list(db.execute(saved_stmt).scalars().all())

    stats = AlmanacStats(total=len(owned) + len(saved), owned=len(owned), saved=len(saved))

    if filter == "owned":
        recipes = owned
    elif filter == "saved":
        recipes = saved
    else:
        recipes = owned + saved

    if tag:
        wanted = tag.strip().lower()
        recipes = [r for r in recipes if wanted in (t.lower() for t in (r.tags or []))]

    counts = favorite_counts(db, [r.id for r in recipes])
    return AlmanacResponse(
        username=profile.username,
        recipes=[recipe_to_list_out(r, counts.get(r.id, 0)) for r in recipes],
        stats=stats,
    )
