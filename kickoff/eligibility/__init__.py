"""Eligibility blueprint."""

from flask import Blueprint

bp = Blueprint("eligibility", __name__, url_prefix="/api/eligibility")

from . import routes  # noqa: E402, F401
from .models import EligibilityResult, RuleCheck  # noqa: E402
from .repository import EligibilityDataSource, FirestoreEligibilityRepository  # noqa: E402
from .rule_admin import RuleAdminService  # noqa: E402
from .services import EligibilityService  # noqa: E402

__all__ = [
    "EligibilityDataSource",
    "EligibilityResult",
    "EligibilityService",
    "FirestoreEligibilityRepository",
    "RuleAdminService",
    "RuleCheck",
    "routes",
]
