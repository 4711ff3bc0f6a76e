"""Recipes CRUD API router.

Endpoints:
- GET /api/recipes - List public recipes (plus the caller's own)
- POST /api/recipes - Create recipe with ingredients
- GET /api/recipes/{ref} - Get recipe by id or slug, ingredients rendered for the view
- PUT /api/recipes/{ref} - Replace recipe (owner only)
- DELETE /api/recipes/{ref} - Delete recipe (owner only)
- POST /api/recipes/{ref}/view - Count a view
- POST /api/recipes/{ref}/fork - Copy a recipe into the caller's almanac
- POST/DELETE /api/recipes/{ref}/favorite - Favorite / unfavorite
"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from ..core.text import clean_md, clean_list, recipe_slug, split_tags
from ..db import get_db
from ..deps import get_profile, get_profile_optional
from ..models import Ingredient, Profile, Recipe, RecipeFork, SavedRecipe
from ..schemas import (
    FavoriteResponse, IngredientIn, IngredientOut, RecipeCreate, RecipeListOut, RecipeOut,
)
from ..services.ingredient_display import prepare_ingredient, render_ingredient

router = APIRouter()
logger = logging.getLogger("almanac.recipes")

SORT_COLUMNS = {
    "views": Recipe.view_count,
    "created": Recipe.created_at,
    "title": Recipe.title,
}


# --- Helpers ---

def load_recipe(db: Session, ref: str, viewer: Optional[Profile] = None) -> Recipe:
    """
    Find a recipe by id, then by slug. 404 if neither matches.

    Slugs are only unique per owner ("Jane Doe" and "jane doe" share a
    username slug), so the viewer's own recipe wins, then a public one.
    """
    recipe = db.get(Recipe, ref)
    if recipe is None:
        matches = db.execute(
            select(Recipe).where(Recipe.slug == ref).order_by(Recipe.created_at)
        ).scalars().all()
        if matches:
            recipe = next(
                (r for r in matches if viewer is not None and r.user_id == viewer.id),
                next((r for r in matches if r.is_public), matches[0]),
            )
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe


def load_visible_recipe(db: Session, ref: str, viewer: Optional[Profile]) -> Recipe:
    recipe = load_recipe(db, ref, viewer)
    if not recipe.is_public and (viewer is None or viewer.id != recipe.user_id):
        raise HTTPException(status_code=403, detail="This recipe is private")
    return recipe


def load_owned_recipe(db: Session, ref: str, profile: Profile) -> Recipe:
    recipe = load_recipe(db, ref, profile)
    if recipe.user_id != profile.id:
        raise HTTPException(status_code=403, detail="You can only modify your own recipes")
    return recipe


def favorite_counts(db: Session, recipe_ids: list[str]) -> dict[str, int]:
    if not recipe_ids:
        return {}
    rows = db.execute(
        select(SavedRecipe.recipe_id, func.count(SavedRecipe.id))
        .where(SavedRecipe.recipe_id.in_(recipe_ids))
        .group_by(SavedRecipe.recipe_id)
    ).all()
    return {rid: count for rid, count in rows}


def _ensure_slug_free(db: Session, user_id: str, slug: str, exclude_id: Optional[str] = None):
    stmt = select(Recipe.id).where(Recipe.user_id == user_id, Recipe.slug == slug)
    if exclude_id:
        stmt = stmt.where(Recipe.id != exclude_id)
    if db.execute(stmt).first():
        raise HTTPException(
            status_code=409,
            detail="You already have a recipe with this name. Please choose a different name.",
        )


def _build_ingredients(items: list[IngredientIn]) -> list[Ingredient]:
    """Keep named ingredients with a positive amount, converted to canonical grams."""
    kept = [i for i in items if i.name.strip() and i.amount > 0]
    return [
        Ingredient(**prepare_ingredient(i.name.strip(), i.amount, i.unit, index))
        for index, i in enumerate(kept)
    ]


def _apply_payload(recipe: Recipe, payload: RecipeCreate, owner: Profile):
    title = clean_md(payload.title)
    # Keep the slug (and any -fork suffix) unless the title changes
    if recipe.slug is None or title != recipe.title:
        recipe.slug = recipe_slug(owner.username, title)
    recipe.title = title
    recipe.description = payload.description or None
    recipe.image_url = payload.image_url
    recipe.tags = split_tags(payload.tags)
    recipe.method_steps = clean_list(payload.method_steps)
    recipe.notes = clean_list(payload.notes)
    recipe.is_public = payload.is_public


def recipe_to_list_out(recipe: Recipe, favorite_count: int = 0) -> RecipeListOut:
    return RecipeListOut(
        id=recipe.id,
        user_id=recipe.user_id,
        username=recipe.owner.username,
        title=recipe.title,
        slug=recipe.slug,
        description=recipe.description,
        image_url=recipe.image_url,
        tags=recipe.tags or [],
        view_count=recipe.view_count or 0,
        favorite_count=favorite_count,
        is_public=recipe.is_public,
        created_at=recipe.created_at,
    )


def _recipe_to_out(
    db: Session,
    recipe: Recipe,
    viewer: Optional[Profile] = None,
    unit_system: str = "original",
    unit: Optional[str] = None,
    scale: float = 1.0,
) -> RecipeOut:
    ingredients = []
    for ing in recipe.ingredients:
        shown = render_ingredient(
            ing.name,
            ing.amount_grams,
            ing.display_amount,
            ing.unit,
            unit_system=unit_system,
            target_unit=unit,
            multiplier=scale,
        )
        ingredients.append(IngredientOut(
            id=ing.id,
            name=ing.name,
            amount_grams=ing.amount_grams,
            unit=ing.unit,
            display_amount=ing.display_amount,
            order_index=ing.order_index,
            amount=shown.amount,
            shown_unit=shown.unit,
            text=shown.text,
            is_approx=shown.is_approx,
        ))

    is_favorited = False
    if viewer is not None:
        is_favorited = db.execute(
            select(SavedRecipe.id).where(
                SavedRecipe.user_id == viewer.id, SavedRecipe.recipe_id == recipe.id
            )
        ).first() is not None

    forked_from_id = db.execute(
        select(RecipeFork.original_recipe_id).where(RecipeFork.forked_recipe_id == recipe.id)
    ).scalar_one_or_none()

    base = recipe_to_list_out(recipe, favorite_counts(db, [recipe.id]).get(recipe.id, 0))
    return RecipeOut(
        **base.model_dump(),
        method_steps=recipe.method_steps or [],
        notes=recipe.notes or [],
        updated_at=recipe.updated_at,
        ingredients=ingredients,
        unit_system=unit_system,
        scale=scale,
        is_favorited=is_favorited,
        forked_from_id=forked_from_id,
    )


# --- Endpoints ---

@router.get("/recipes", response_model=list[RecipeListOut])
def list_recipes(
    db: Session = Depends(get_db),
    viewer: Optional[Profile] = Depends(get_profile_optional),
    search: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    sort: Literal["views", "created", "title"] = Query("views"),
    order: Literal["asc", "desc"] = Query("desc"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    """List public recipes, plus the viewer's private ones."""
    visible = Recipe.is_public.is_(True)
    if viewer is not None:
        visible = or_(visible, Recipe.user_id == viewer.id)

    stmt = select(Recipe).options(joinedload(Recipe.owner)).where(visible)

    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(Recipe.title.ilike(pattern), Recipe.description.ilike(pattern)))

    column = SORT_COLUMNS[sort]
    stmt = stmt.order_by(column.asc() if order == "asc" else column.desc(), Recipe.id)

    if tag:
        # Tags are a JSON list; filter here to stay portable across databases
        wanted = tag.strip().lower()
        recipes = db.execute(stmt).scalars().unique().all()
        tagged = [r for r in recipes if wanted in (t.lower() for t in (r.tags or []))]
        page = tagged[offset:offset + limit]
    else:
        page = db.execute(stmt.offset(offset).limit(limit)).scalars().unique().all()

    counts = favorite_counts(db, [r.id for r in page])
    return [recipe_to_list_out(r, counts.get(r.id, 0)) for r in page]


@router.post("/recipes", response_model=RecipeOut, status_code=201)
def create_recipe(
    payload: RecipeCreate,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_profile),
):
    """Create a recipe; ingredient amounts are stored as canonical grams."""
    recipe = Recipe(user_id=profile.id, owner=profile, view_count=0)
    _apply_payload(recipe, payload, profile)
    if not recipe.title:
        raise HTTPException(status_code=400, detail="Recipe title is required")
    _ensure_slug_free(db, profile.id, recipe.slug)

    recipe.ingredients = _build_ingredients(payload.ingredients)
    db.add(recipe)
    db.commit()
    db.refresh(recipe)
    logger.info(f"Created recipe {recipe.slug} with {len(recipe.ingredients)} ingredients")

    return _recipe_to_out(db, recipe, viewer=profile)


@router.get("/recipes/{ref}", response_model=RecipeOut)
def get_recipe(
    ref: str,
    db: Session = Depends(get_db),
    viewer: Optional[Profile] = Depends(get_profile_optional),
    unit_system: Literal["original", "weight"] = Query("original"),
    unit: Optional[str] = Query(None, description="Show every ingredient in this unit"),
    scale: float = Query(
        1.0, gt=0, allow_inf_nan=False, description="Serving multiplier (0.5, 2, or custom)"
    ),
):
    """Get a recipe with ingredients rendered for the requested unit system and scale."""
    recipe = load_visible_recipe(db, ref, viewer)
    return _recipe_to_out(db, recipe, viewer, unit_system=unit_system, unit=unit, scale=scale)


@router.put("/recipes/{ref}", response_model=RecipeOut)
def update_recipe(
    ref: str,
    payload: RecipeCreate,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_profile),
):
    """Replace a recipe and all of its ingredients."""
    recipe = load_owned_recipe(db, ref, profile)
    _apply_payload(recipe, payload, profile)
    if not recipe.title:
        raise HTTPException(status_code=400, detail="Recipe title is required")
    _ensure_slug_free(db, profile.id, recipe.slug, exclude_id=recipe.id)

    recipe.ingredients = _build_ingredients(payload.ingredients)
    db.commit()
    db.refresh(recipe)
    logger.info(f"Updated recipe {recipe.slug}")

    return _recipe_to_out(db, recipe, viewer=profile)


@router.delete("/recipes/{ref}", status_code=204)
def delete_recipe(
    ref: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_profile),
):
    recipe = load_owned_recipe(db, ref, profile)
    # Fork lineage rows reference the recipe from either side
    db.query(RecipeFork).filter(
        or_(RecipeFork.original_recipe_id == recipe.id, RecipeFork.forked_recipe_id == recipe.id)
    ).delete(synchronize_session=False)
    db.delete(recipe)
    db.commit()
    logger.info(f"Deleted recipe {ref}")
    return Response(status_code=204)


@router.post("/recipes/{ref}/view")
def record_view(
    ref: str,
    db: Session = Depends(get_db),
    viewer: Optional[Profile] = Depends(get_profile_optional),
):
    recipe = load_visible_recipe(db, ref, viewer)
    recipe.view_count = (recipe.view_count or 0) + 1
    db.commit()
    return {"ok": True, "view_count": recipe.view_count}


@router.post("/recipes/{ref}/fork", response_model=RecipeOut, status_code=201)
def fork_recipe(
    ref: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_profile),
):
    """Copy a visible recipe (with its ingredients) into the caller's recipes."""
    original = load_visible_recipe(db, ref, profile)

    base_slug = f"{recipe_slug(profile.username, original.title)}-fork"
    slug = base_slug
    n = 1
    while db.execute(
        select(Recipe.id).where(Recipe.user_id == profile.id, Recipe.slug == slug)
    ).first():
        n += 1
        slug = f"{base_slug}-{n}"

    fork = Recipe(
        user_id=profile.id,
        owner=profile,
        title=original.title,
        slug=slug,
        description=original.description,
        image_url=original.image_url,
        tags=list(original.tags or []),
        method_steps=list(original.method_steps or []),
        notes=list(original.notes or []),
        is_public=original.is_public,
        view_count=0,
        ingredients=[
            Ingredient(
                name=ing.name,
                amount_grams=ing.amount_grams,
                unit=ing.unit,
                display_amount=ing.display_amount,
                order_index=ing.order_index,
            )
            for ing in original.ingredients
        ],
    )
    db.add(fork)
    db.flush()
    db.add(RecipeFork(
        original_recipe_id=original.id,
        forked_recipe_id=fork.id,
        forked_by_user_id=profile.id,
    ))
    db.commit()
    db.refresh(fork)
    logger.info(f"{profile.username} forked {original.slug} -> {fork.slug}")

    return _recipe_to_out(db, fork, viewer=profile)


@router.post("/recipes/{ref}/favorite", response_model=FavoriteResponse)
def favorite_recipe(
    ref: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_profile),
):
    """Add to the caller's favorites. Favoriting twice is a no-op."""
    recipe = load_visible_recipe(db, ref, profile)
    existing = db.execute(
        select(SavedRecipe).where(
            SavedRecipe.user_id == profile.id, SavedRecipe.recipe_id == recipe.id
        )
    ).scalar_one_or_none()
    if existing is None:
        db.add(SavedRecipe(user_id=profile.id, recipe_id=recipe.id))
        db.commit()

    return FavoriteResponse(
        recipe_id=recipe.id,
        favorited=True,
        favorite_count=favorite_counts(db, [recipe.id]).get(recipe.id, 0),
    )


@router.delete("/recipes/{ref}/favorite", response_model=FavoriteResponse)
def unfavorite_recipe(
    ref: str,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_profile),
):
    recipe = load_recipe(db, ref, profile)
    db.query(SavedRecipe).filter(
        SavedRecipe.user_id == profile.id, SavedRecipe.recipe_id == recipe.id
    ).delete(synchronize_session=False)
    db.commit()

    return FavoriteResponse(
        recipe_id=recipe.id,
        favorited=False,
        favorite_count=favorite_counts(db, [recipe.id]).get(recipe.id, 0),
    )
