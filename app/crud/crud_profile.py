from sqlalchemy.orm import Session

from .base import CRUDBase
from app.models.profile import Profile
from app.schemas.profile import ProfileCreate, ProfileSummary


class CRUDProfile(CRUDBase[Profile, ProfileCreate, ProfileSummary]):
    def create(self, db: Session, *, obj_in: ProfileCreate) -> Profile:
        data = obj_in.model_dump()
        data["role"] = obj_in.role.value
        db_obj = self.model(**data)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


profile = CRUDProfile(Profile)
