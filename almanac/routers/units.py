"""
Router for unit conversion utilities.
"""

import logging
import math
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..schemas import (
    UnitConvertRequest, UnitConvertResponse, FormatResponse,
    UnitOptionsResponse, UnitOptionOut, DensityListResponse, DensityOut,
)
from ..services.unit_conversion import (
    DENSITY_DB, classify_unit, convert_unit, format_measurement, is_cross_category,
)
from ..services.unit_options import UNIT_OPTIONS, UNIT_GROUPS
from ..settings import settings

router = APIRouter()
logger = logging.getLogger("almanac.units")


@router.post("/convert", response_model=UnitConvertResponse)
def convert_units(req: UnitConvertRequest):
    """
    Convert an amount from one unit to another.

    Unknown units and ingredients are not errors: the amount comes back
    unchanged (unknown unit) or converted with water density (unknown ingredient).
    """
    for unit in (req.from_unit, req.to_unit):
        if classify_unit(unit) == "unknown":
            logger.debug(f"Unknown unit '{unit}', returning amount unchanged")

    amount = convert_unit(req.amount, req.from_unit, req.to_unit, req.ingredient_name)
    if not math.isfinite(amount):
        raise HTTPException(status_code=400, detail="Converted amount is out of range")

    is_approx = is_cross_category(req.from_unit, req.to_unit)
    if is_approx:
        logger.debug(
            f"Approximate conversion {req.from_unit} -> {req.to_unit} for '{req.ingredient_name}'"
        )

    return UnitConvertResponse(
        amount=amount,
        unit=req.to_unit,
        is_approx=is_approx,
        text=format_measurement(amount, req.to_unit),
    )


@router.get("/format", response_model=FormatResponse)
def format_units(amount: float = Query(..., allow_inf_nan=False), unit: str = Query(...)):
    return FormatResponse(text=format_measurement(amount, unit))


@router.get("/options", response_model=UnitOptionsResponse)
def list_unit_options():
    """Units offered in the ingredient editor, in display order."""
    return UnitOptionsResponse(
        default_unit=settings.default_unit,
        options=[UnitOptionOut(**opt._asdict()) for opt in UNIT_OPTIONS],
        groups=dict(UNIT_GROUPS),
    )


@router.get("/densities", response_model=DensityListResponse)
def list_densities(query: Optional[str] = None):
    """Tabulated densities (g/ml), optionally filtered by substring."""
    items = sorted(DENSITY_DB.items())
    if query:
        q = query.strip().lower()
        items = [(k, v) for k, v in items if q in k]

    return DensityListResponse(
        items=[DensityOut(ingredient=k, density_g_per_ml=v) for k, v in items]
    )
