from pydantic import BaseModel
from typing import Optional
from enum import Enum


class ProfileRole(str, Enum):
    student = "student"
    admin = "admin"


class ProfileSummary(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    student_id: Optional[str] = None
    department: Optional[str] = None

    model_config = {"from_attributes": True}


class Profile(ProfileSummary):
    id: str
    role: ProfileRole


class ProfileCreate(ProfileSummary):
    id: str
    role: ProfileRole = ProfileRole.student
