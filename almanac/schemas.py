"""Pydantic schemas for Recipe Almanac API.

Request/response models for:
- Unit conversion utilities
- Profiles and unit preferences
- Recipes (with ordered ingredients)
- Favorites / almanac
"""

from datetime import datetime
from typing import Optional, Literal

from pydantic import BaseModel, Field


# --- Units ---

class UnitConvertRequest(BaseModel):
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    from_unit: str = Field(..., min_length=1)
    to_unit: str = Field(..., min_length=1)
    ingredient_name: str = ""


class UnitConvertResponse(BaseModel):
    amount: float
    unit: str
    is_approx: bool
    text: str


class FormatResponse(BaseModel):
    text: str


class UnitOptionOut(BaseModel):
    value: str
    label: str
    group: Literal["weight-metric", "weight-imperial", "volume", "other"]


class UnitOptionsResponse(BaseModel):
    default_unit: str
    options: list[UnitOptionOut]
    groups: dict[str, str]


class DensityOut(BaseModel):
    ingredient: str
    density_g_per_ml: float


class DensityListResponse(BaseModel):
    items: list[DensityOut]


# --- Profiles / Prefs ---

class ProfileCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=80)
    profile_description: Optional[str] = None
    avatar_url: Optional[str] = None
    default_unit: Optional[str] = None


class ProfileUpdate(BaseModel):
    profile_description: Optional[str] = None
    avatar_url: Optional[str] = None


class ProfileOut(BaseModel):
    id: str
    username: str
    profile_description: Optional[str]
    avatar_url: Optional[str]
    default_unit: str
    created_at: datetime

    class Config:
        from_attributes = True


class ProfileStats(BaseModel):
    total_views: int
    favorited_recipes_count: int
    recipe_count: int


class ProfileDetailOut(BaseModel):
    profile: ProfileOut
    stats: ProfileStats


class UnitPrefs(BaseModel):
    default_unit: str


class UnitPrefsUpdate(BaseModel):
    default_unit: str = Field(..., min_length=1)


# --- Ingredients ---

class IngredientIn(BaseModel):
    name: str = ""
    amount: float = Field(0, ge=0, allow_inf_nan=False)
    unit: str = "cups"


class IngredientOut(BaseModel):
    id: str
    name: str
    amount_grams: float
    unit: str
    display_amount: float
    order_index: int

    # Derived for the requested view
    amount: float
    shown_unit: str
    text: str
    is_approx: bool


# --- Recipes ---

class RecipeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    image_url: Optional[str] = None
    tags: Optional[list[str] | str] = None
    method_steps: list[str] = []
    notes: list[str] = []
    is_public: bool = True
    ingredients: list[IngredientIn] = []


class RecipeListOut(BaseModel):
    id: str
    user_id: str
    username: str
    title: str
    slug: str
    description: Optional[str]
    image_url: Optional[str]
    tags: list[str]
    view_count: int
    favorite_count: int = 0
    is_public: bool
    created_at: datetime


class RecipeOut(RecipeListOut):
    method_steps: list[str]
    notes: list[str]
    updated_at: Optional[datetime]
    ingredients: list[IngredientOut] = []
    unit_system: str = "original"
    scale: float = 1.0
    is_favorited: bool = False
    forked_from_id: Optional[str] = None


class FavoriteResponse(BaseModel):
    recipe_id: str
    favorited: bool
    favorite_count: int


# --- Almanac ---

class AlmanacStats(BaseModel):
    total: int
    owned: int
    saved: int


class AlmanacResponse(BaseModel):
    username: str
    recipes: list[RecipeListOut]
    stats: AlmanacStats
