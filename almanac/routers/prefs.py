"""
Router for profile unit preferences.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..models import Profile
from ..schemas import UnitPrefs, UnitPrefsUpdate
from ..deps import get_db, get_profile
from ..services.unit_options import is_valid_unit_option

router = APIRouter()
logger = logging.getLogger("almanac.prefs")


@router.get("/prefs/unit", response_model=UnitPrefs)
def get_unit_prefs(profile: Profile = Depends(get_profile)):
    """Unit preselected when the calling profile adds ingredients."""
    return UnitPrefs(default_unit=profile.default_unit)


@router.patch("/prefs/unit", response_model=UnitPrefs)
def update_unit_prefs(
    update: UnitPrefsUpdate,
    db: Session = Depends(get_db),
    profile: Profile = Depends(get_profile),
):
    if not is_valid_unit_option(update.default_unit):
        raise HTTPException(status_code=400, detail=f"Unknown unit option: {update.default_unit}")

    profile.default_unit = update.default_unit
    db.commit()
    db.refresh(profile)
    logger.info(f"Profile {profile.username} default unit -> {profile.default_unit}")

    return UnitPrefs(default_unit=profile.default_unit)
