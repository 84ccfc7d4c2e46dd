"""Participation blueprint."""

from flask import Blueprint

bp = Blueprint("participation", __name__, url_prefix="/api/eligibility")

from . import routes  # noqa: E402, F401
from .models import TeamEligibilityResult  # noqa: E402
from .services import ParticipationService, recommended_participation_model  # noqa: E402

__all__ = [
    "ParticipationService",
    "TeamEligibilityResult",
    "recommended_participation_model",
    "routes",
]
