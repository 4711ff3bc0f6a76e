"""FastAPI dependencies for Recipe Almanac API.

Provides:
- Database session dependency
- Calling profile resolution (X-Profile-Id header, set by the auth layer)
"""

import uuid
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from .db import get_db
from .models import Profile


def get_profile(
    db: Session = Depends(get_db),
    x_profile_id: Optional[str] = Header(None, alias="X-Profile-Id"),
) -> Profile:
    """Resolve the calling profile from the X-Profile-Id header.

    The header may carry the profile id (UUID) or its username.

    Raises:
        HTTPException 401 if the header is missing
        HTTPException 404 if no profile matches
    """
    if not x_profile_id:
        raise HTTPException(status_code=401, detail="X-Profile-Id header required")

    profile: Optional[Profile] = None
    try:
        uuid_obj = uuid.UUID(x_profile_id)
        profile = db.get(Profile, str(uuid_obj))
    except ValueError:
        # Not a UUID, try as username
        profile = db.query(Profile).filter(Profile.username == x_profile_id).first()

    if profile:
        return profile

    raise HTTPException(
        status_code=404,
        detail=f"Profile '{x_profile_id}' not found"
    )


def get_profile_optional(
    db: Session = Depends(get_db),
    x_profile_id: Optional[str] = Header(None, alias="X-Profile-Id"),
) -> Optional[Profile]:
    """Like get_profile but returns None (anonymous viewer) instead of raising."""
    try:
        return get_profile(db=db, x_profile_id=x_profile_id)
    except HTTPException:
        return None
