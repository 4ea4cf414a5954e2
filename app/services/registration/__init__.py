# app/services/registration/__init__.py
from .eligibility import EligibilityResult, evaluate_eligibility
from .registration_service import RegistrationOutcome, RegistrationService, registration_service
from .statistics import PortalStatistics, compute_portal_statistics

__all__ = [
    "EligibilityResult",
    "evaluate_eligibility",
    "RegistrationOutcome",
    "RegistrationService",
    "registration_service",
    "PortalStatistics",
    "compute_portal_statistics",
]
