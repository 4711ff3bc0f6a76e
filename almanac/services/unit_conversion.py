"""
Unit Conversion Service for Recipe Almanac.

Converts ingredient quantities between volume units and weight units using
per-ingredient densities, and formats quantities for display.

Unknown units and unknown ingredients never raise: units fall back to a
factor of 1 and ingredients to the "default" (water-like) density.
"""

import math
from types import MappingProxyType
from typing import Literal, NamedTuple

# --- Types ---

UnitCategory = Literal["volume", "weight", "unknown"]


class Measurement(NamedTuple):
    amount: float
    unit: str


# --- Data Tables ---

# Density Table: g/ml
DENSITY_DB = MappingProxyType({
    # Flours
    "flour": 0.5,
    "all-purpose flour": 0.5,
    "bread flour": 0.53,
    "cake flour": 0.45,
    "whole wheat flour": 0.54,
    # Sugars
    "sugar": 0.85,
    "granulated sugar": 0.85,
    "brown sugar": 0.9,
    "powdered sugar": 0.56,
    # Liquids
    "water": 1.0,
    "milk": 1.03,
    "oil": 0.92,
    "honey": 1.42,
    "butter": 0.96,
    # Common ingredients
    "salt": 1.22,
    "baking powder": 0.96,
    "baking soda": 2.2,
    "cocoa powder": 0.48,
    "rice": 0.85,
    "oats": 0.41,
    # Unknown ingredients are treated like water
    "default": 1.0,
})

# Unit alias -> ml per unit
VOLUME_UNITS = MappingProxyType({
    "ml": 1,
    "milliliter": 1,
    "milliliters": 1,
    "tsp": 5,
    "teaspoon": 5,
    "teaspoons": 5,
    "tbsp": 15,
    "tablespoon": 15,
    "tablespoons": 15,
    "cup": 250,
    "cups": 250,
    "us cup": 250,
    "us cups": 250,
    "fl oz": 30,
    "fluid ounce": 30,
    "fluid ounces": 30,
    "pt": 500,
    "pint": 500,
    "pints": 500,
    "qt": 1000,
    "quart": 1000,
    "quarts": 1000,
    "l": 1000,
    "liter": 1000,
    "liters": 1000,
})

# Unit alias -> grams per unit
WEIGHT_UNITS = MappingProxyType({
    "g": 1.0,
    "gram": 1.0,
    "grams": 1.0,
    "kg": 1000.0,
    "kilogram": 1000.0,
    "kilograms": 1000.0,
    "oz": 28.35,
    "ounce": 28.35,
    "ounces": 28.35,
    "lb": 453.592,
    "pound": 453.592,
    "pounds": 453.592,
})


# --- Lookups ---

def _key(text: str) -> str:
    return (text or "").strip().lower()


def classify_unit(unit: str) -> UnitCategory:
    """Classify a unit alias by table membership."""
    u = _key(unit)
    if u in VOLUME_UNITS:
        return "volume"
    if u in WEIGHT_UNITS:
        return "weight"
    return "unknown"


def ml_per_unit(unit: str) -> float:
    """Milliliters in one `unit`; 1 for anything not in the volume table."""
    return VOLUME_UNITS.get(_key(unit), 1)


def grams_per_unit(unit: str) -> float:
    """Grams in one `unit`; 1 for anything not in the weight table."""
    return WEIGHT_UNITS.get(_key(unit), 1.0)


def get_density(ingredient_name: str) -> float:
    """Density in g/ml, falling back to the "default" entry."""
    return DENSITY_DB.get(_key(ingredient_name), DENSITY_DB["default"])


def is_cross_category(from_unit: str, to_unit: str) -> bool:
    """True for a volume <-> weight conversion, which is always approximate."""
    return {classify_unit(from_unit), classify_unit(to_unit)} == {"volume", "weight"}


# --- Core Functions ---

def volume_to_weight(amount: float, volume_unit: str, ingredient_name: str) -> float:
    """Convert a volume of an ingredient to grams."""
    total_ml = amount * ml_per_unit(volume_unit)
    # grams = ml * g/ml
    return total_ml * get_density(ingredient_name)


def weight_to_volume(grams: float, target_unit: str, ingredient_name: str) -> float:
    """Convert grams of an ingredient to an amount of `target_unit`."""
    ml = grams / get_density(ingredient_name)
    return ml / ml_per_unit(target_unit)


def convert_unit(amount: float, from_unit: str, to_unit: str, ingredient_name: str = "") -> float:
    """
    Convert `amount` between any two known units.

    Volume <-> volume and weight <-> weight use the table ratios; volume <-> weight
    goes through grams using the ingredient density. If either unit is unknown
    the amount is returned unchanged.
    """
    if _key(from_unit) == _key(to_unit):
        return amount

    type_from = classify_unit(from_unit)
    type_to = classify_unit(to_unit)

    if type_from == "unknown" or type_to == "unknown":
        return amount

    # Case 1: Same type
    if type_from == type_to == "volume":
        return amount * ml_per_unit(from_unit) / ml_per_unit(to_unit)
    if type_from == type_to == "weight":
        return amount * grams_per_unit(from_unit) / grams_per_unit(to_unit)

    # Case 2: Cross type
    if type_from == "volume":
        grams = volume_to_weight(amount, from_unit, ingredient_name)
        return grams / grams_per_unit(to_unit)

    grams = amount * grams_per_unit(from_unit)
    return weight_to_volume(grams, to_unit, ingredient_name)


def to_grams(amount: float, unit: str, ingredient_name: str) -> float:
    """
    Canonical gram amount for a quantity entered by the cook.

    Units outside both tables (including the "other" option) are assumed to
    already be grams.
    """
    category = classify_unit(unit)
    if category == "volume":
        return volume_to_weight(amount, unit, ingredient_name)
    if category == "weight":
        return amount * grams_per_unit(unit)
    return amount


def scale_amount(amount: float, multiplier: float) -> float:
    return amount * multiplier


# --- Formatting ---

def round_display(amount: float) -> float:
    """Round to 2 decimals, halves going up (1.005 -> 1.0 as stored in binary)."""
    scaled = amount * 100 + 0.5
    # Non-finite after scaling: pass through unchanged, like Math.round
    if not math.isfinite(scaled):
        return amount
    return math.floor(scaled) / 100


def _number_text(value: float) -> str:
    # Integral values print plainly up to where JS switches to exponent form
    if math.isfinite(value) and value == int(value) and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def format_measurement(amount: float, unit: str) -> str:
    """Format e.g. "2 cups", "1 cup", "150 g"."""
    rounded = round_display(amount)

    if rounded == 1 and unit.endswith("s"):
        unit = unit[:-1]

    return f"{_number_text(rounded)} {unit}"
