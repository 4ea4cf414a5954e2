# app/crud/__init__.py

from .crud_event import event
from .crud_profile import profile
from .crud_registration import registration
