"""
Ingredient quantities as stored and as shown.

Recipes persist each ingredient as a canonical gram amount plus the amount and
unit the cook originally typed. The view derives whatever the reader asked
for (original unit, grams, or another unit) and applies the serving multiplier.
"""

from typing import Literal, NamedTuple, Optional

from .unit_conversion import (
    classify_unit,
    convert_unit,
    format_measurement,
    scale_amount,
    to_grams,
)

UnitSystem = Literal["original", "weight"]

SCALE_PRESETS = (0.5, 1.0, 2.0)


class RenderedIngredient(NamedTuple):
    name: str
    amount: float
    unit: str
    text: str
    is_approx: bool


def prepare_ingredient(name: str, amount: float, unit: str, order_index: int) -> dict:
    """Column values for an ingredient row, with the canonical gram amount."""
    return {
        "name": name,
        "amount_grams": to_grams(amount, unit, name),
        "unit": unit,
        "display_amount": amount,
        "order_index": order_index,
    }


def render_ingredient(
    name: str,
    amount_grams: float,
    display_amount: float,
    unit: str,
    *,
    unit_system: UnitSystem = "original",
    target_unit: Optional[str] = None,
    multiplier: float = 1.0,
) -> RenderedIngredient:
    """Resolve the shown amount/unit for one ingredient and format it."""
    if target_unit:
        amount = convert_unit(amount_grams, "g", target_unit, name)
        shown_unit = target_unit
    elif unit_system == "weight":
        amount = amount_grams
        shown_unit = "g"
    else:
        amount = display_amount
        shown_unit = unit

    amount = scale_amount(amount, multiplier)

    # Density-based amounts are estimates; so is anything shown in a
    # different category than the cook entered.
    entered = classify_unit(unit)
    shown = classify_unit(shown_unit)
    is_approx = "unknown" not in (entered, shown) and entered != shown

    return RenderedIngredient(
        name=name,
        amount=amount,
        unit=shown_unit,
        text=f"{format_measurement(amount, shown_unit)} {name}",
        is_approx=is_approx,
    )
