# app/models/__init__.py
# Import all models to ensure SQLAlchemy can resolve relationships
# Order matters for dependencies - import base models first

from app.db.base_class import Base
from app.models.profile import Profile
from app.models.event import Event
from app.models.registration import Registration

__all__ = ["Base", "Profile", "Event", "Registration"]
