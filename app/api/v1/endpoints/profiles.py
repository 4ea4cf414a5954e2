from fastapi import APIRouter, Depends

from app.api import deps
from app.models.profile import Profile
from app.schemas.profile import Profile as ProfileSchema

router = APIRouter(tags=["Profiles"])


@router.get("/me", response_model=ProfileSchema)
def read_my_profile(profile: Profile = Depends(deps.get_current_profile)):
    """The caller's profile, including the role that drives the portal views."""
    return profile
