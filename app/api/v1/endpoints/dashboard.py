# app/api/v1/endpoints/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.crud import crud_event, crud_registration
from app.db.session import get_db
from app.models.profile import Profile
from app.schemas.stats import PortalStats
from app.services.registration import compute_portal_statistics
from app.utils.timezone import utcnow

router = APIRouter(tags=["Admin Dashboard"])


@router.get("/admin/stats", response_model=PortalStats)
def get_portal_stats(
    db: Session = Depends(get_db),
    admin: Profile = Depends(deps.require_admin),
):
    """
    Portal-wide registration statistics. Recomputed from the current rows on
    every call.
    """
    events = crud_event.event.get_multi_newest_first(db, limit=None)
    registrations = crud_registration.registration.get_all_active(db)
    stats = compute_portal_statistics(events, registrations, now=utcnow())
    return PortalStats.model_validate(stats, from_attributes=True)
